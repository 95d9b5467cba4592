# =============================================================================
# FORTUNE-KLINE v1.0.0 -- CALENDAR LABEL LOOKUP
# File:   fortune_kline/core/calendar.py
# =============================================================================
#
# SCOPE
# -----
# Interface to the calendar collaborator plus one default implementation.
# The engine uses it only to fill labels that the fact or candidate layer did
# not supply:
#
#   CalendarLookup.locate(age, birth_year) -> (calendar_year, cycle_label)
#   CalendarContext.labels_for(age, ...)   -> ResolvedLabels
#
# Pillar computation, solar-term handling and period-boundary derivation
# stay with the collaborator; boundaries arrive precomputed.
#
# CONVENTIONS
# -----------
#   calendar_year = birth_year + age - 1        (age 1 is the birth year)
#   period label  = label of the last boundary with start_age <= age,
#                   DEFAULT_PERIOD_LABEL before the first boundary.
#   cycle label   = sexagenary stem-branch of the year, romanised ASCII,
#                   index (year - 4) mod 60, e.g. 1984 -> "Jia-Zi".
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Tuple

from .domain import _check_positive_int
from .exceptions import KLineValidationError

DEFAULT_PERIOD_LABEL: str = "Childhood"

HEAVENLY_STEMS: Tuple[str, ...] = (
    "Jia", "Yi", "Bing", "Ding", "Wu", "Ji", "Geng", "Xin", "Ren", "Gui",
)
EARTHLY_BRANCHES: Tuple[str, ...] = (
    "Zi", "Chou", "Yin", "Mao", "Chen", "Si", "Wu", "Wei", "Shen", "You", "Xu", "Hai",
)


# =============================================================================
# SECTION 1 -- COLLABORATOR INTERFACE
# =============================================================================

class CalendarLookup(Protocol):
    def locate(self, age: int, birth_year: int) -> Tuple[int, str]:
        """Return (calendar_year, cycle_label) for a 1-based age."""
        ...


class SexagenaryCalendar:
    """Default lookup: Gregorian year arithmetic and the 60-year stem-branch cycle."""

    @staticmethod
    def cycle_label(year: int) -> str:
        index = (year - 4) % 60
        return HEAVENLY_STEMS[index % 10] + "-" + EARTHLY_BRANCHES[index % 12]

    def locate(self, age: int, birth_year: int) -> Tuple[int, str]:
        year = birth_year + age - 1
        return year, self.cycle_label(year)

    def __repr__(self) -> str:
        return "SexagenaryCalendar()"


# =============================================================================
# SECTION 2 -- PERIOD BOUNDARIES
# =============================================================================

@dataclass(frozen=True)
class PeriodBoundary:
    """First age at which a long-duration life period is active."""

    start_age: int
    label:     str

    def __post_init__(self) -> None:
        _check_positive_int("start_age", self.start_age)
        if not isinstance(self.label, str) or not self.label:
            raise KLineValidationError(
                field_name="label", value=self.label, constraint="must be a non-empty string",
            )


@dataclass(frozen=True)
class ResolvedLabels:
    calendar_year: int
    cycle_label:   str
    period_label:  str


# =============================================================================
# SECTION 3 -- CONTEXT
# =============================================================================

@dataclass(frozen=True)
class CalendarContext:
    """
    Everything the walk needs to label an age.

    birth_year is range-checked by the request gate (GOV-03), not here, so
    that a bad year surfaces as a policy violation rather than a type error.
    Boundaries are stored sorted by start_age; on equal start ages the later
    entry in the input wins.
    """

    birth_year: int
    boundaries: Tuple[PeriodBoundary, ...] = ()
    lookup:     CalendarLookup = SexagenaryCalendar()

    def __post_init__(self) -> None:
        boundaries = tuple(self.boundaries)
        for boundary in boundaries:
            if not isinstance(boundary, PeriodBoundary):
                raise KLineValidationError(
                    field_name="boundaries", value=boundary,
                    constraint="every entry must be a PeriodBoundary",
                )
        object.__setattr__(
            self, "boundaries", tuple(sorted(boundaries, key=lambda b: b.start_age))
        )

    def period_label_for(self, age: int) -> str:
        label = DEFAULT_PERIOD_LABEL
        for boundary in self.boundaries:
            if age >= boundary.start_age:
                label = boundary.label
        return label

    def labels_for(
        self,
        age:          int,
        cycle_label:  Optional[str] = None,
        period_label: Optional[str] = None,
    ) -> ResolvedLabels:
        """Supplied non-empty labels win; the lookup fills the rest."""
        calendar_year, looked_up_cycle = self.lookup.locate(age, self.birth_year)
        return ResolvedLabels(
            calendar_year=calendar_year,
            cycle_label=cycle_label if _usable(cycle_label) else looked_up_cycle,
            period_label=period_label if _usable(period_label) else self.period_label_for(age),
        )


def _usable(label: object) -> bool:
    return isinstance(label, str) and bool(label.strip())


def boundaries_from_pairs(pairs: Iterable[Tuple[int, str]]) -> Tuple[PeriodBoundary, ...]:
    """Convenience: ((start_age, label), ...) -> PeriodBoundary tuple."""
    return tuple(PeriodBoundary(start_age=a, label=l) for a, l in pairs)


__all__ = [
    "DEFAULT_PERIOD_LABEL",
    "HEAVENLY_STEMS",
    "EARTHLY_BRANCHES",
    "CalendarLookup",
    "SexagenaryCalendar",
    "PeriodBoundary",
    "ResolvedLabels",
    "CalendarContext",
    "boundaries_from_pairs",
]
