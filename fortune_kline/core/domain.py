# =============================================================================
# FORTUNE-KLINE v1.0.0 -- SEQUENCE ENGINE
# File:   fortune_kline/core/domain.py
# =============================================================================
#
# SCOPE
# -----
# Canonical enumerations and frozen domain dataclasses:
#
#   YearlyFact     -- one qualitative per-age fact (rule-driven input).
#   CandidateItem  -- one untrusted per-age candidate (repair input).
#   KLinePoint     -- one produced candlestick point (output).
#
# All categorical types used anywhere in the package are defined here.
# No other module may define relation, effect, direction or trend enums.
#
# VALIDATION PHILOSOPHY
# ---------------------
# Input types validate only what makes them addressable (age) and typed
# (enum membership). Untrusted numeric content on CandidateItem is NOT
# validated here; the delta calculator clamps it defensively.
#
# KLinePoint is the opposite: it is the sole externally visible artifact, so
# its __post_init__ re-checks every per-point invariant and raises
# KLineInvariantError on violation:
#
#   INV-PT-01  0 <= open <= 100 and 0 <= close <= 100.
#   INV-PT-02  close != open (no zero-length bodies).
#   INV-PT-03  trend == BULLISH  <=>  close > open.
#   INV-PT-04  score == |close - open|.
#
# Cross-point invariants (continuity, volatility cap) are enforced by the walk
# and audited by fortune_kline.verification.invariants.
#
# DETERMINISM CONSTRAINTS
# -----------------------
# DET-01  No stochastic operations.
# DET-02  All dataclasses are frozen; no mutation path exists.
# DET-03  No I/O, no clock access.
# =============================================================================

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Dict, Optional, Tuple

from .exceptions import (
    KLineInvariantError,
    KLineNumericalError,
    KLineValidationError,
)


# =============================================================================
# SECTION 1 -- ENUMERATIONS
# =============================================================================

@unique
class LifePeriodEffect(str, Enum):
    """Influence of the active long-duration life period on a given year."""
    SUPPORTIVE = "Supportive"
    ADVERSE    = "Adverse"
    NEUTRAL    = "Neutral"


@unique
class RelationClass(str, Enum):
    """
    Normalised interaction between a year and the person's fixed chart.

    The MUTUAL_* members are the compound descriptive forms; they are more
    specific than the single forms and win when both are present.
    """
    MUTUAL_CLASH      = "mutual-clash"
    MUTUAL_HARM       = "mutual-harm"
    MUTUAL_GENERATION = "mutual-generation"
    CLASH             = "clash"
    HARM              = "harm"
    DOMINATION        = "domination"
    HALF_COMBINE      = "half-combine"
    COMBINE           = "combine"
    GENERATION        = "generation"
    NO_RELATION       = "no-relation"


@unique
class EchoClass(str, Enum):
    """Self-reinforcing / self-reversing configurations. Amplified but capped."""
    SELF_REINFORCEMENT = "self-reinforcement"
    SELF_REVERSAL      = "self-reversal"


@unique
class Judgement(str, Enum):
    """Qualitative verdict attached to a fact by the fact collaborator."""
    FAVORABLE   = "Favorable"
    UNFAVORABLE = "Unfavorable"
    BALANCED    = "Balanced"


@unique
class Direction(str, Enum):
    """
    Rule-table direction.

    OSCILLATE is never realised directly: the delta calculator resolves it
    to UP or DOWN by regressing toward the baseline.
    """
    UP        = "Up"
    DOWN      = "Down"
    OSCILLATE = "Oscillate"

    @property
    def sign(self) -> int:
        """+1 for UP, -1 for DOWN, 0 for OSCILLATE."""
        if self is Direction.UP:
            return 1
        if self is Direction.DOWN:
            return -1
        return 0

    def opposite(self) -> "Direction":
        if self is Direction.UP:
            return Direction.DOWN
        if self is Direction.DOWN:
            return Direction.UP
        return Direction.OSCILLATE


@unique
class Trend(str, Enum):
    """Candle colour. BULLISH iff close > open."""
    BULLISH = "Bullish"
    BEARISH = "Bearish"


@unique
class StageBucket(str, Enum):
    """Coarse age ranges used to select base volatility."""
    CHILDHOOD    = "1-20"
    YOUTH        = "21-40"
    MIDLIFE      = "41-60"
    LATE_MIDLIFE = "61-80"
    OLD_AGE      = "81+"


# =============================================================================
# SECTION 2 -- INTERNAL VALIDATION HELPERS
# =============================================================================
# Shared with fortune_kline.core.rules. Each helper takes an explicit
# field_name so error messages are always self-identifying.

def _check_finite(field_name: str, value: float) -> None:
    """V1 gate: raise KLineNumericalError if value is not finite."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise KLineValidationError(
            field_name=field_name,
            value=value,
            constraint="must be a real number",
        )
    if not math.isfinite(value):
        raise KLineNumericalError(field_name=field_name, value=value)


def _check_positive(field_name: str, value: float) -> None:
    """V2: value must be strictly > 0."""
    if value <= 0.0:
        raise KLineValidationError(
            field_name=field_name,
            value=value,
            constraint="must be > 0",
        )


def _check_unit_interval_open_open(field_name: str, value: float) -> None:
    """V2: value must be in (0.0, 1.0)."""
    if not (0.0 < value < 1.0):
        raise KLineValidationError(
            field_name=field_name,
            value=value,
            constraint="must be in (0.0, 1.0)",
        )


def _check_unit_interval_open_closed(field_name: str, value: float) -> None:
    """V2: value must be in (0.0, 1.0]."""
    if not (0.0 < value <= 1.0):
        raise KLineValidationError(
            field_name=field_name,
            value=value,
            constraint="must be in (0.0, 1.0]",
        )


def _check_positive_int(field_name: str, value: int) -> None:
    """V2: value must be an int >= 1."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise KLineValidationError(
            field_name=field_name,
            value=value,
            constraint="must be a positive integer",
        )
    if value < 1:
        raise KLineValidationError(
            field_name=field_name,
            value=value,
            constraint="must be >= 1",
        )


def _check_non_negative_int(field_name: str, value: int) -> None:
    """V2: value must be an int >= 0."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise KLineValidationError(
            field_name=field_name,
            value=value,
            constraint="must be a non-negative integer",
        )
    if value < 0:
        raise KLineValidationError(
            field_name=field_name,
            value=value,
            constraint="must be >= 0",
        )


def _check_enum(field_name: str, value: object, enum_type: type) -> None:
    """V3: value must be a member of enum_type."""
    if not isinstance(value, enum_type):
        raise KLineValidationError(
            field_name=field_name,
            value=value,
            constraint="must be a " + enum_type.__name__ + " member",
        )


def _check_optional_str(field_name: str, value: object) -> None:
    """V3: value must be None or a string."""
    if value is not None and not isinstance(value, str):
        raise KLineValidationError(
            field_name=field_name,
            value=value,
            constraint="must be a string or None",
        )


# =============================================================================
# SECTION 3 -- YEARLY FACT
# =============================================================================

@dataclass(frozen=True)
class YearlyFact:
    """
    One qualitative per-age fact produced by the fact collaborator.

    Attributes:
        age:                 1-based age. Positive integer.
        life_period_effect:  Effect of the active life period.
        relation_tags:       Free-form relation tags, e.g. ("clash",
                             "self-reinforcement"). Semantically a set; order
                             never affects interpretation.
        judgement:           Collaborator verdict for the year.
        narrative:           Free text. May be empty.
        period_label:        Optional label of the active life period.
        cycle_label:         Optional label of the year in the 60-year cycle.
    """

    age:                int
    life_period_effect: LifePeriodEffect = LifePeriodEffect.NEUTRAL
    relation_tags:      Tuple[str, ...] = ()
    judgement:          Judgement = Judgement.BALANCED
    narrative:          str = ""
    period_label:       Optional[str] = None
    cycle_label:        Optional[str] = None

    def __post_init__(self) -> None:
        _check_positive_int("age", self.age)
        _check_enum("life_period_effect", self.life_period_effect, LifePeriodEffect)
        _check_enum("judgement", self.judgement, Judgement)
        if not isinstance(self.relation_tags, (tuple, frozenset)):
            raise KLineValidationError(
                field_name="relation_tags",
                value=self.relation_tags,
                constraint="must be a tuple or frozenset of strings",
            )
        for tag in self.relation_tags:
            if not isinstance(tag, str):
                raise KLineValidationError(
                    field_name="relation_tags",
                    value=tag,
                    constraint="every tag must be a string",
                )
        if not isinstance(self.narrative, str):
            raise KLineValidationError(
                field_name="narrative",
                value=self.narrative,
                constraint="must be a string",
            )
        _check_optional_str("period_label", self.period_label)
        _check_optional_str("cycle_label", self.cycle_label)


# =============================================================================
# SECTION 4 -- CANDIDATE ITEM
# =============================================================================

@dataclass(frozen=True)
class CandidateItem:
    """
    One untrusted per-age candidate produced by the raw-score collaborator.

    Only `age` is validated. Every other field may be absent (None) or
    contradictory; numeric fields are clamped by the delta calculator before
    use and are never trusted verbatim.
    """

    age:           int
    desired_score: Optional[float] = None
    open:          Optional[float] = None
    close:         Optional[float] = None
    trend_hint:    Optional[str] = None
    narrative:     Optional[str] = None
    cycle_label:   Optional[str] = None
    period_label:  Optional[str] = None

    def __post_init__(self) -> None:
        _check_positive_int("age", self.age)


# =============================================================================
# SECTION 5 -- KLINE POINT (OUTPUT CONTRACT)
# =============================================================================

_VALUE_MIN: int = 0
_VALUE_MAX: int = 100


@dataclass(frozen=True)
class KLinePoint:
    """
    One produced candlestick point. Owned by the caller once returned.

    Invariants INV-PT-01..04 (see module header) are checked on construction.
    """

    age:           int
    calendar_year: int
    cycle_label:   str
    period_label:  str
    open:          int
    close:         int
    score:         int
    trend:         Trend
    narrative:     str

    def __post_init__(self) -> None:
        _check_positive_int("age", self.age)
        for name, value in (("open", self.open), ("close", self.close), ("score", self.score)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise KLineInvariantError(self.age, "INV-PT-01", name + " must be an int, got " + repr(value))

        if not (_VALUE_MIN <= self.open <= _VALUE_MAX and _VALUE_MIN <= self.close <= _VALUE_MAX):
            raise KLineInvariantError(
                self.age, "INV-PT-01",
                "open/close must lie in [0, 100], got " + repr((self.open, self.close)),
            )
        if self.close == self.open:
            raise KLineInvariantError(
                self.age, "INV-PT-02",
                "close must differ from open, both are " + repr(self.open),
            )
        expected_trend = Trend.BULLISH if self.close > self.open else Trend.BEARISH
        if self.trend is not expected_trend:
            raise KLineInvariantError(
                self.age, "INV-PT-03",
                "trend " + repr(self.trend) + " contradicts open=" + repr(self.open)
                + ", close=" + repr(self.close),
            )
        if self.score != abs(self.close - self.open):
            raise KLineInvariantError(
                self.age, "INV-PT-04",
                "score " + repr(self.score) + " != |close - open|",
            )

    def to_dict(self) -> Dict[str, Any]:
        """Plain mapping with enum values flattened to strings."""
        return {
            "age":           self.age,
            "calendar_year": self.calendar_year,
            "cycle_label":   self.cycle_label,
            "period_label":  self.period_label,
            "open":          self.open,
            "close":         self.close,
            "score":         self.score,
            "trend":         self.trend.value,
            "narrative":     self.narrative,
        }


# =============================================================================
# SECTION 6 -- MODULE __all__
# =============================================================================

__all__ = [
    "LifePeriodEffect",
    "RelationClass",
    "EchoClass",
    "Judgement",
    "Direction",
    "Trend",
    "StageBucket",
    "YearlyFact",
    "CandidateItem",
    "KLinePoint",
]
