# =============================================================================
# FORTUNE-KLINE v1.0.0 -- SEQUENCE NORMALIZER (REPAIR MODE)
# File:   fortune_kline/core/normalizer.py
# =============================================================================
#
# SCOPE
# -----
# Minimally corrects an arbitrary candidate sequence so that it satisfies the
# same invariants as the rule-driven builder:
#
#   normalize_sequence(candidates, baseline, calendar, length, rules, journal)
#
# Candidate open/close values are never trusted: every open is forced to the
# previous close. Candidate content only steers direction and magnitude.
#
# REPAIR MODE DIFFERENCES
# -----------------------
#   - no noise, no streak decay, no echo amplification;
#   - reflection, mean reversion and the per-age cap still apply.
#
# DIRECTION ORDER
# ---------------
#   trend hint -> declared score vs. previous age's resolved (realised) score
#   -> UP. The comparison needs a candidate at age - 1. Equal scores resolve
#   UP.
#
# NOISE
# -----
# Repair mode never draws from a noise source; identical candidates and
# baseline always give the identical sequence.
# =============================================================================

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from fortune_kline.utils.constants import REPAIR_SEQUENCE_LENGTH
from .builder import index_by_age
from .calendar import CalendarContext
from .delta import repair_base_magnitude, resolve_repair_direction
from .domain import CandidateItem, KLinePoint
from .logging_layer import CANDIDATE_DEFAULTED, DIRECTION_FALLBACK, EventLogger
from .rules import DEFAULT_QUANT_RULES, QuantRules
from .walk import StepRequest, WalkState, run_walk


def normalize_sequence(
    candidates: Iterable[CandidateItem],
    baseline:   float,
    calendar:   CalendarContext,
    length:     int = REPAIR_SEQUENCE_LENGTH,
    rules:      QuantRules = DEFAULT_QUANT_RULES,
    journal:    Optional[EventLogger] = None,
) -> Tuple[KLinePoint, ...]:
    """
    Produce exactly `length` points from untrusted candidates.

    An empty candidate list still yields a full sequence built from the
    age-derived fallback magnitude.
    """
    by_age = index_by_age(candidates, length)

    def plan(state: WalkState) -> StepRequest:
        age = state.age
        candidate: Optional[CandidateItem] = by_age.get(age)
        # Only a candidate-backed previous age gives a comparable score.
        previous_score = state.previous_score if (age - 1) in by_age else None

        direction, direction_defaulted = resolve_repair_direction(
            trend_hint=candidate.trend_hint if candidate is not None else None,
            score=candidate.desired_score if candidate is not None else None,
            previous_score=previous_score,
        )
        magnitude, magnitude_defaulted = repair_base_magnitude(candidate, age, rules)

        if journal is not None:
            if candidate is None:
                journal.log_event(CANDIDATE_DEFAULTED, {"age": age, "reason": "missing"}, age)
            elif magnitude_defaulted:
                journal.log_event(CANDIDATE_DEFAULTED, {"age": age, "reason": "no_magnitude"}, age)
            if direction_defaulted:
                journal.log_event(DIRECTION_FALLBACK, {"age": age, "direction": direction.value}, age)

        labels = calendar.labels_for(
            age,
            cycle_label=candidate.cycle_label if candidate is not None else None,
            period_label=candidate.period_label if candidate is not None else None,
        )
        narrative = None
        if candidate is not None and isinstance(candidate.narrative, str) and candidate.narrative.strip():
            narrative = candidate.narrative
        return StepRequest(
            direction=direction,
            base_magnitude=magnitude,
            calendar_year=labels.calendar_year,
            cycle_label=labels.cycle_label,
            period_label=labels.period_label,
            narrative=narrative,
            noise=1.0,
            echoes=frozenset(),
            apply_streak_decay=False,
        )

    return run_walk(length, baseline, rules, plan, journal)


__all__ = ["normalize_sequence"]
