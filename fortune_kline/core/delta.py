# =============================================================================
# FORTUNE-KLINE v1.0.0 -- DELTA CALCULATOR
# File:   fortune_kline/core/delta.py
# =============================================================================
#
# SCOPE
# -----
# Computes one bounded, sign-resolved step from the current walk position.
# Shared by the rule-driven builder and the repair normalizer; the two modes
# differ only in how they derive direction and base magnitude, and in which
# of steps 3-5 they enable.
#
# PIPELINE (fixed order)
# ----------------------
#   1. Direction       OSCILLATE -> UP if current_open <= baseline, else DOWN.
#   2. Base magnitude  supplied by caller (rule_base_magnitude /
#                      repair_base_magnitude).
#   3. Noise           raw *= factor in [noise_low, noise_high].
#   4. Streak decay    L = continued streak length; L > threshold ->
#                      raw *= decay ** (L - threshold).
#   5. Echo            raw *= multiplier, then raw = min(raw, ceiling * 100).
#   6. Reflection      UP at open/100 >= high_threshold -> raw *= high_damping;
#                      DOWN at open/100 <= low_threshold -> raw *= low_damping.
#   7. Mean reversion  drift beyond margin in the direction of travel ->
#                      raw *= mean_reversion_factor.
#   8. Cap             delta = max(1, min(round_half_up(raw), max_step(age))).
#
# ROBUSTNESS
# ----------
# compute_delta() never raises for numeric content. Non-finite or negative
# magnitudes, open values and baselines are clamped before use. A step of at
# least one unit is always produced.
# =============================================================================

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import AbstractSet, Optional, Tuple

from .domain import (
    CandidateItem,
    Direction,
    EchoClass,
    LifePeriodEffect,
    RelationClass,
)
from .rules import DEFAULT_QUANT_RULES, QuantRules, round_half_up


# =============================================================================
# SECTION 1 -- RESULT TYPE
# =============================================================================

@dataclass(frozen=True)
class StepDelta:
    """
    One computed step.

    direction is always UP or DOWN. delta is the capped integer step
    (>= 1). raw is the pre-rounding magnitude, kept for diagnostics and
    tests.
    """

    direction: Direction
    delta:     int
    raw:       float


# =============================================================================
# SECTION 2 -- NUMERIC HYGIENE
# =============================================================================

def _finite_or(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not math.isfinite(value):
        return default
    return float(value)


def _positive_or_none(value: object) -> Optional[float]:
    v = _finite_or(value, 0.0)
    return v if v > 0.0 else None


# =============================================================================
# SECTION 3 -- DIRECTION
# =============================================================================

def resolve_oscillation(direction: Direction, current_open: float, baseline: float) -> Direction:
    """Turn OSCILLATE into a step back toward the baseline."""
    if direction is not Direction.OSCILLATE:
        return direction
    return Direction.UP if current_open <= baseline else Direction.DOWN


def resolve_repair_direction(
    trend_hint:     Optional[str],
    score:          Optional[float],
    previous_score: Optional[float],
) -> Tuple[Direction, bool]:
    """
    Repair-mode direction.

    Order: explicit hint ("bull"/"bear", case-insensitive substring), then
    the candidate's declared score against the previous age's resolved score
    (higher -> UP, lower -> DOWN, equal -> UP), then UP.

    Returns:
        (direction, used_default). used_default is True only when neither
        a hint nor a comparable score pair was available.
    """
    if isinstance(trend_hint, str):
        lowered = trend_hint.lower()
        if "bull" in lowered:
            return Direction.UP, False
        if "bear" in lowered:
            return Direction.DOWN, False
    current = _positive_or_none(score)
    previous = _positive_or_none(previous_score)
    if current is not None and previous is not None:
        if current < previous:
            return Direction.DOWN, False
        return Direction.UP, False
    return Direction.UP, True


# =============================================================================
# SECTION 4 -- BASE MAGNITUDE
# =============================================================================

def rule_base_magnitude(
    age:      int,
    effect:   LifePeriodEffect,
    relation: RelationClass,
    rules:    QuantRules = DEFAULT_QUANT_RULES,
) -> float:
    """100 * base_amplitude(stage) * effect multiplier * relation multiplier * body_scale."""
    amplitude = rules.base_amplitude[rules.stage_bucket(age)]
    return (
        100.0
        * amplitude
        * rules.life_period_multiplier[effect]
        * rules.relation_multiplier[relation]
        * rules.body_scale
    )


def repair_base_magnitude(
    candidate: Optional[CandidateItem],
    age:       int,
    rules:     QuantRules = DEFAULT_QUANT_RULES,
) -> Tuple[float, bool]:
    """
    Repair-mode magnitude: declared score, else |close - open|, else the
    age-derived fallback 1 + age % max_step(age). Scaled by body_scale.

    Returns:
        (magnitude, used_fallback).
    """
    if candidate is not None:
        declared = _positive_or_none(candidate.desired_score)
        if declared is not None:
            return declared * rules.body_scale, False
        if candidate.open is not None and candidate.close is not None:
            span = abs(_finite_or(candidate.close, 0.0) - _finite_or(candidate.open, 0.0))
            if span > 0.0:
                return span * rules.body_scale, False
    fallback = 1 + age % rules.max_step_by_age(age)
    return float(fallback) * rules.body_scale, True


# =============================================================================
# SECTION 5 -- STEP PIPELINE
# =============================================================================

def continued_streak(direction: Direction, bull_streak: int, bear_streak: int) -> int:
    """Length the streak would reach if this step moves in `direction`."""
    if direction is Direction.UP:
        return bull_streak + 1
    return bear_streak + 1


def compute_delta(
    direction:          Direction,
    base_magnitude:     float,
    age:                int,
    current_open:       float,
    baseline:           float,
    bull_streak:        int = 0,
    bear_streak:        int = 0,
    noise:              float = 1.0,
    echoes:             AbstractSet[EchoClass] = frozenset(),
    apply_streak_decay: bool = True,
    rules:              QuantRules = DEFAULT_QUANT_RULES,
) -> StepDelta:
    """
    Run steps 1 and 3-8 of the pipeline over a precomputed base magnitude.

    Repair mode passes noise=1.0, no echoes and apply_streak_decay=False so
    that corrections stay minimal.
    """
    current_open = min(float(rules.value_ceiling),
                       max(float(rules.value_floor), _finite_or(current_open, float(rules.value_floor))))
    baseline = _finite_or(baseline, (rules.baseline_floor + rules.baseline_ceiling) / 2.0)
    raw = max(0.0, _finite_or(base_magnitude, 0.0))

    # 1. direction
    resolved = resolve_oscillation(direction, current_open, baseline)

    # 3. noise
    raw *= max(0.0, _finite_or(noise, 1.0))

    # 4. streak decay
    if apply_streak_decay:
        length = continued_streak(resolved, bull_streak, bear_streak)
        if length > rules.streak_threshold:
            decay = rules.favorable_decay if resolved is Direction.UP else rules.unfavorable_decay
            raw *= decay ** (length - rules.streak_threshold)

    # 5. echo amplification; sorted so that two echoes apply in a fixed order
    for echo in sorted(echoes, key=lambda e: e.value):
        raw *= rules.echo_multiplier[echo]
        raw = min(raw, rules.echo_ceiling[echo] * 100.0)

    # 6. boundary reflection
    position = current_open / 100.0
    if resolved is Direction.UP and position >= rules.high_threshold:
        raw *= rules.high_damping
    elif resolved is Direction.DOWN and position <= rules.low_threshold:
        raw *= rules.low_damping

    # 7. mean reversion
    drift = current_open - baseline
    if resolved is Direction.UP and drift > rules.mean_reversion_margin:
        raw *= rules.mean_reversion_factor
    elif resolved is Direction.DOWN and drift < -rules.mean_reversion_margin:
        raw *= rules.mean_reversion_factor

    # 8. cap
    delta = max(1, min(round_half_up(raw), rules.max_step_by_age(age)))
    return StepDelta(direction=resolved, delta=delta, raw=raw)


# =============================================================================
# SECTION 6 -- MODULE __all__
# =============================================================================

__all__ = [
    "StepDelta",
    "resolve_oscillation",
    "resolve_repair_direction",
    "rule_base_magnitude",
    "repair_base_magnitude",
    "continued_streak",
    "compute_delta",
]
