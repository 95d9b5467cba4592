# =============================================================================
# FORTUNE-KLINE v1.0.0 -- SHARED WALK
# File:   fortune_kline/core/walk.py
# =============================================================================
#
# SCOPE
# -----
# The single linear state machine behind both entry points.
#
#   state       WalkState(age, current_open, bull_streak, bear_streak,
#                         previous_score)
#   initial     (1, clamp_baseline(baseline), 0, 0, None)
#   transition  planner(state) -> StepRequest; compute_delta(); close;
#               consistency repair; streak update
#   terminal    age == length
#
# The planner is the only mode-specific part: it supplies direction, base
# magnitude, noise, echoes, labels and narrative for one age.
#
# INVARIANTS ENFORCED
# -------------------
#   open_1 = clamp(baseline, baseline_floor, baseline_ceiling)
#   open_n = close_{n-1}
#   close != open; trend follows the realised sign
#   score = |close - open| <= max_step_by_age(age)
#
# CONSISTENCY REPAIR
# ------------------
# If clamping leaves close == open, the step is nudged one unit in the
# resolved direction. When the open already sits on that bound, the step
# reflects one unit the other way, so the series is never pinned to 0 or 100.
#
# DETERMINISM CONSTRAINTS
# -----------------------
# DET-01  No backtracking, no cycles, no I/O.
# DET-02  The only side effect is appending to the caller's journal.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Any, Callable, Dict, List, Optional, Tuple

from .delta import compute_delta
from .domain import Direction, EchoClass, KLinePoint, Trend
from .logging_layer import (
    BOUNDARY_REFLECTED,
    STEP_NUDGED,
    WALK_COMPLETED,
    EventLogger,
)
from .rules import QuantRules


# =============================================================================
# SECTION 1 -- STATE AND REQUEST TYPES
# =============================================================================

@dataclass(frozen=True)
class WalkState:
    """previous_score is the realised score of age - 1; None at age 1."""

    age:            int
    current_open:   int
    bull_streak:    int = 0
    bear_streak:    int = 0
    previous_score: Optional[int] = None


@dataclass(frozen=True)
class StepRequest:
    """
    Planner output for one age.

    direction may be OSCILLATE; compute_delta() resolves it. narrative None
    means "use the trend phrase".
    """

    direction:          Direction
    base_magnitude:     float
    calendar_year:      int
    cycle_label:        str
    period_label:       str
    narrative:          Optional[str] = None
    noise:              float = 1.0
    echoes:             AbstractSet[EchoClass] = frozenset()
    apply_streak_decay: bool = True


Planner = Callable[[WalkState], StepRequest]

TREND_PHRASES: Dict[Trend, str] = {
    Trend.BULLISH: "Fortune rises this year.",
    Trend.BEARISH: "Fortune dips this year.",
}


# =============================================================================
# SECTION 2 -- HELPERS
# =============================================================================

def _record(journal: Optional[EventLogger], event_type: str, data: Dict[str, Any], step: int) -> None:
    if journal is not None:
        journal.log_event(event_type, data, step)


def settle_close(
    current_open: int,
    direction:    Direction,
    delta:        int,
    rules:        QuantRules,
) -> Tuple[int, Direction, Optional[str]]:
    """
    Apply a step and repair any contradiction between direction and movement.

    Returns:
        (close, realised_direction, repair) where repair is None,
        STEP_NUDGED or BOUNDARY_REFLECTED.
    """
    close = rules.clamp_value(current_open + direction.sign * delta)
    if (close - current_open) * direction.sign > 0:
        return close, direction, None

    nudged = rules.clamp_value(current_open + direction.sign)
    if nudged != current_open:
        return nudged, direction, STEP_NUDGED

    opposite = direction.opposite()
    return rules.clamp_value(current_open + opposite.sign), opposite, BOUNDARY_REFLECTED


def advance(state: WalkState, realised: Direction, close: int) -> WalkState:
    score = abs(close - state.current_open)
    if realised is Direction.UP:
        return WalkState(state.age + 1, close, state.bull_streak + 1, 0, score)
    return WalkState(state.age + 1, close, 0, state.bear_streak + 1, score)


# =============================================================================
# SECTION 3 -- WALK
# =============================================================================

def run_walk(
    length:   int,
    baseline: float,
    rules:    QuantRules,
    planner:  Planner,
    journal:  Optional[EventLogger] = None,
) -> Tuple[KLinePoint, ...]:
    """
    Walk ages 1..length and return exactly `length` points.

    baseline is re-clamped into [baseline_floor, baseline_ceiling]. The
    request gate has already rejected non-finite baselines and bad lengths.
    """
    anchor = rules.clamp_baseline(baseline)
    state = WalkState(age=1, current_open=anchor)
    points: List[KLinePoint] = []

    while state.age <= length:
        request = planner(state)
        step = compute_delta(
            direction=request.direction,
            base_magnitude=request.base_magnitude,
            age=state.age,
            current_open=state.current_open,
            baseline=anchor,
            bull_streak=state.bull_streak,
            bear_streak=state.bear_streak,
            noise=request.noise,
            echoes=request.echoes,
            apply_streak_decay=request.apply_streak_decay,
            rules=rules,
        )
        close, realised, repair = settle_close(state.current_open, step.direction, step.delta, rules)
        if repair is not None:
            _record(journal, repair, {
                "open": state.current_open,
                "resolved_direction": step.direction.value,
                "realised_direction": realised.value,
                "delta": step.delta,
            }, state.age)

        trend = Trend.BULLISH if close > state.current_open else Trend.BEARISH
        narrative = request.narrative if request.narrative else TREND_PHRASES[trend]
        points.append(KLinePoint(
            age=state.age,
            calendar_year=request.calendar_year,
            cycle_label=request.cycle_label,
            period_label=request.period_label,
            open=state.current_open,
            close=close,
            score=abs(close - state.current_open),
            trend=trend,
            narrative=narrative,
        ))
        state = advance(state, realised, close)

    _record(journal, WALK_COMPLETED, {
        "length": length,
        "baseline": anchor,
        "final_close": points[-1].close if points else anchor,
    }, length)
    return tuple(points)


__all__ = [
    "WalkState",
    "StepRequest",
    "Planner",
    "TREND_PHRASES",
    "settle_close",
    "advance",
    "run_walk",
]
