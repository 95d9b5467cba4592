# =============================================================================
# FORTUNE-KLINE v1.0.0 -- SEQUENCE INVARIANT AUDIT
# File:   fortune_kline/verification/invariants.py
# =============================================================================
#
# PURPOSE
# -------
# Independent re-check of a produced sequence. Unlike KLinePoint.__post_init__
# (which stops at the first violation of one point), audit_sequence() walks
# the whole sequence and reports every violation it finds, so a failing
# vector yields a complete diagnosis.
#
# CHECKS
# ------
#   SEQ-LEN   exactly `length` points, ages 1..length in order.
#   SEQ-OPEN  open_1 == clamp_baseline(baseline).
#   SEQ-CONT  open_n == close_{n-1}.
#   SEQ-BND   0 <= open, close <= 100.
#   SEQ-TRD   trend Bullish <=> close > open; close != open.
#   SEQ-SCR   score == |close - open| and score >= 1.
#   SEQ-CAP   score <= max_step_by_age(age).
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from fortune_kline.core.domain import KLinePoint, Trend
from fortune_kline.core.rules import DEFAULT_QUANT_RULES, QuantRules


@dataclass(frozen=True)
class InvariantViolation:
    check: str
    age:   int
    detail: str


@dataclass(frozen=True)
class InvariantReport:
    passed:     bool
    violations: tuple
    points_checked: int


def audit_sequence(
    points:   Sequence[KLinePoint],
    baseline: float,
    length:   int,
    rules:    QuantRules = DEFAULT_QUANT_RULES,
) -> InvariantReport:
    """Return every violated invariant; passed is True only if none."""
    violations: List[InvariantViolation] = []

    if len(points) != length:
        violations.append(InvariantViolation(
            "SEQ-LEN", 0, f"expected {length} points, got {len(points)}"))

    anchor = rules.clamp_baseline(baseline)
    previous_close = None
    for index, point in enumerate(points):
        expected_age = index + 1
        if point.age != expected_age:
            violations.append(InvariantViolation(
                "SEQ-LEN", point.age, f"expected age {expected_age} at position {index}"))

        if index == 0 and point.open != anchor:
            violations.append(InvariantViolation(
                "SEQ-OPEN", point.age, f"open {point.open} != clamped baseline {anchor}"))
        if previous_close is not None and point.open != previous_close:
            violations.append(InvariantViolation(
                "SEQ-CONT", point.age, f"open {point.open} != previous close {previous_close}"))

        for name, value in (("open", point.open), ("close", point.close)):
            if not (rules.value_floor <= value <= rules.value_ceiling):
                violations.append(InvariantViolation(
                    "SEQ-BND", point.age, f"{name} {value} outside "
                    f"[{rules.value_floor}, {rules.value_ceiling}]"))

        if point.close == point.open:
            violations.append(InvariantViolation(
                "SEQ-TRD", point.age, f"zero-length body at {point.open}"))
        else:
            expected_trend = Trend.BULLISH if point.close > point.open else Trend.BEARISH
            if point.trend is not expected_trend:
                violations.append(InvariantViolation(
                    "SEQ-TRD", point.age, f"trend {point.trend.value} for "
                    f"open={point.open}, close={point.close}"))

        if point.score != abs(point.close - point.open) or point.score < 1:
            violations.append(InvariantViolation(
                "SEQ-SCR", point.age, f"score {point.score} for "
                f"open={point.open}, close={point.close}"))

        cap = rules.max_step_by_age(point.age)
        if point.score > cap:
            violations.append(InvariantViolation(
                "SEQ-CAP", point.age, f"score {point.score} exceeds cap {cap}"))

        previous_close = point.close

    return InvariantReport(
        passed=not violations,
        violations=tuple(violations),
        points_checked=len(points),
    )


__all__ = [
    "InvariantViolation",
    "InvariantReport",
    "audit_sequence",
]
