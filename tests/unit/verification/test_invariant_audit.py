# =============================================================================
# FORTUNE-KLINE v1.0.0 -- INVARIANT AUDIT TESTS
# File:   tests/unit/verification/test_invariant_audit.py
# =============================================================================
#
# KLinePoint refuses to construct most broken points, so violations are
# exercised through a plain stand-in with the same attributes.

from dataclasses import dataclass

import pytest

from fortune_kline.core.builder import build_sequence
from fortune_kline.core.calendar import CalendarContext
from fortune_kline.core.domain import Trend
from fortune_kline.verification.invariants import (
    InvariantReport,
    InvariantViolation,
    audit_sequence,
)


@dataclass
class _LoosePoint:
    age:   int
    open:  int
    close: int
    score: int
    trend: Trend


def _loose(age, open_, close, score=None, trend=None):
    if score is None:
        score = abs(close - open_)
    if trend is None:
        trend = Trend.BULLISH if close > open_ else Trend.BEARISH
    return _LoosePoint(age, open_, close, score, trend)


def _checks(report):
    return [v.check for v in report.violations]


class TestCleanSequences:

    def test_built_sequence_passes(self):
        points = build_sequence((), 50, CalendarContext(1990), length=100)
        report = audit_sequence(points, 50, 100)
        assert isinstance(report, InvariantReport)
        assert report.passed is True
        assert report.violations == ()
        assert report.points_checked == 100

    def test_clamped_baseline_anchor(self):
        points = build_sequence((), 95.5, CalendarContext(1990), length=10)
        assert audit_sequence(points, 95.5, 10).passed is True

    def test_loose_clean_points_pass(self):
        points = [_loose(1, 50, 54), _loose(2, 54, 50)]
        assert audit_sequence(points, 50, 2).passed is True


class TestViolations:

    def test_wrong_length(self):
        report = audit_sequence([_loose(1, 50, 54)], 50, 2)
        assert _checks(report) == ["SEQ-LEN"]
        assert report.violations[0].age == 0

    def test_age_gap(self):
        assert "SEQ-LEN" in _checks(audit_sequence([_loose(1, 50, 54), _loose(3, 54, 50)], 50, 2))

    def test_first_open_not_anchor(self):
        assert _checks(audit_sequence([_loose(1, 51, 54)], 50, 1)) == ["SEQ-OPEN"]

    def test_discontinuity(self):
        report = audit_sequence([_loose(1, 50, 54), _loose(2, 53, 50)], 50, 2)
        assert _checks(report) == ["SEQ-CONT"]
        assert report.violations[0] == InvariantViolation(
            "SEQ-CONT", 2, "open 53 != previous close 54")

    def test_out_of_bounds(self):
        report = audit_sequence([_loose(1, 80, 101, score=21)], 80, 1)
        assert "SEQ-BND" in _checks(report)

    def test_flat_body(self):
        report = audit_sequence([_loose(1, 50, 50, score=0, trend=Trend.BULLISH)], 50, 1)
        assert "SEQ-TRD" in _checks(report)
        assert "SEQ-SCR" in _checks(report)

    def test_trend_contradiction(self):
        report = audit_sequence([_loose(1, 50, 54, trend=Trend.BEARISH)], 50, 1)
        assert _checks(report) == ["SEQ-TRD"]

    def test_score_mismatch(self):
        assert _checks(audit_sequence([_loose(1, 50, 54, score=3)], 50, 1)) == ["SEQ-SCR"]

    @pytest.mark.parametrize("age,step", [(1, 5), (30, 13), (90, 5)])
    def test_cap_exceeded(self, age, step):
        points = [_loose(a, 50, 54) if a % 2 else _loose(a, 54, 50) for a in range(1, age)]
        anchor_open = 50 if age % 2 else 54
        points.append(_loose(age, anchor_open, anchor_open + step))
        report = audit_sequence(points, 50, age)
        assert _checks(report) == ["SEQ-CAP"]

    def test_report_not_passed_with_violations(self):
        assert audit_sequence([], 50, 1).passed is False
