import pytest

from fortune_kline.core.delta import (
    StepDelta,
    compute_delta,
    continued_streak,
    repair_base_magnitude,
    resolve_oscillation,
    resolve_repair_direction,
    rule_base_magnitude,
)
from fortune_kline.core.domain import (
    CandidateItem,
    Direction,
    EchoClass,
    LifePeriodEffect,
    RelationClass,
)
from fortune_kline.core.rules import load_quant_rules


def _delta(**overrides):
    """compute_delta with a neutral mid-life setup: age 30 (cap 12), open == baseline."""
    kwargs = dict(
        direction=Direction.UP,
        base_magnitude=10.0,
        age=30,
        current_open=50,
        baseline=50,
    )
    kwargs.update(overrides)
    return compute_delta(**kwargs)


# =============================================================================
# SECTION 1 -- Direction
# =============================================================================

class TestResolveOscillation:
    def test_up_and_down_pass_through(self):
        assert resolve_oscillation(Direction.UP, 90, 50) is Direction.UP
        assert resolve_oscillation(Direction.DOWN, 10, 50) is Direction.DOWN

    def test_oscillate_at_or_below_baseline_goes_up(self):
        assert resolve_oscillation(Direction.OSCILLATE, 50, 50) is Direction.UP
        assert resolve_oscillation(Direction.OSCILLATE, 40, 50) is Direction.UP

    def test_oscillate_above_baseline_goes_down(self):
        assert resolve_oscillation(Direction.OSCILLATE, 51, 50) is Direction.DOWN


class TestResolveRepairDirection:
    @pytest.mark.parametrize("hint,expected", [
        ("Bullish", Direction.UP),
        ("BULL", Direction.UP),
        ("bearish", Direction.DOWN),
        ("Bear market", Direction.DOWN),
    ])
    def test_hint_wins(self, hint, expected):
        assert resolve_repair_direction(hint, 10.0, 90.0) == (expected, False)

    def test_lower_score_goes_down(self):
        assert resolve_repair_direction(None, 30.0, 40.0) == (Direction.DOWN, False)

    def test_higher_score_goes_up(self):
        assert resolve_repair_direction(None, 50.0, 40.0) == (Direction.UP, False)

    def test_equal_scores_go_up(self):
        assert resolve_repair_direction(None, 40.0, 40.0) == (Direction.UP, False)

    def test_unrecognised_hint_falls_through_to_scores(self):
        assert resolve_repair_direction("sideways", 20.0, 30.0) == (Direction.DOWN, False)

    @pytest.mark.parametrize("score,previous", [
        (40.0, None),
        (None, 40.0),
        (0.0, 30.0),
        (-5.0, 30.0),
        (float("nan"), 30.0),
    ])
    def test_default_up(self, score, previous):
        assert resolve_repair_direction(None, score, previous) == (Direction.UP, True)


# =============================================================================
# SECTION 2 -- Base magnitude
# =============================================================================

class TestBaseMagnitude:
    def test_rule_magnitude(self):
        value = rule_base_magnitude(10, LifePeriodEffect.SUPPORTIVE, RelationClass.GENERATION)
        assert value == pytest.approx(100 * 0.05 * 1.2 * 1.1 * 2.0)

    def test_rule_magnitude_neutral_childhood(self):
        value = rule_base_magnitude(1, LifePeriodEffect.NEUTRAL, RelationClass.NO_RELATION)
        assert value == pytest.approx(10.0)

    def test_rule_magnitude_old_age(self):
        value = rule_base_magnitude(90, LifePeriodEffect.ADVERSE, RelationClass.CLASH)
        assert value == pytest.approx(100 * 0.005 * 1.5 * 1.4 * 2.0)

    def test_repair_uses_declared_score(self):
        assert repair_base_magnitude(CandidateItem(age=3, desired_score=40.0), 3) == (80.0, False)

    def test_repair_uses_open_close_span(self):
        item = CandidateItem(age=3, open=50.0, close=56.0)
        assert repair_base_magnitude(item, 3) == (12.0, False)

    @pytest.mark.parametrize("age,expected", [(3, 8.0), (4, 2.0), (30, 14.0)])
    def test_repair_fallback(self, age, expected):
        # 1 + age % max_step(age), doubled
        assert repair_base_magnitude(None, age) == (expected, True)

    def test_repair_bad_fields_fall_back(self):
        item = CandidateItem(age=3, desired_score=float("nan"), open=55.0, close=55.0)
        assert repair_base_magnitude(item, 3) == (8.0, True)


# =============================================================================
# SECTION 3 -- Step pipeline
# =============================================================================

class TestComputeDelta:
    def test_returns_step_delta(self):
        assert isinstance(_delta(), StepDelta)

    def test_neutral_first_step(self):
        step = compute_delta(Direction.OSCILLATE, 10.0, 1, 50, 50)
        assert step == StepDelta(direction=Direction.UP, delta=4, raw=10.0)

    def test_age_cap(self):
        step = compute_delta(Direction.UP, 80.0, 3, 50, 50)
        assert step.delta == 4

    def test_minimum_step_is_one(self):
        assert _delta(base_magnitude=0.1).delta == 1

    def test_noise_scales_raw(self):
        assert _delta(noise=1.15).raw == pytest.approx(11.5)

    def test_streak_decay_from_fourth_step(self):
        base = rule_base_magnitude(30, LifePeriodEffect.SUPPORTIVE, RelationClass.GENERATION)
        unthrottled = _delta(base_magnitude=base, apply_streak_decay=False)
        throttled = [_delta(base_magnitude=base, bull_streak=s) for s in range(6)]
        for step in throttled[:3]:
            assert step.raw == pytest.approx(unthrottled.raw)
        for step in throttled[3:]:
            assert step.raw < unthrottled.raw
            assert step.delta < unthrottled.delta
        assert throttled[3].raw > throttled[4].raw > throttled[5].raw
        assert throttled[3].raw == pytest.approx(unthrottled.raw * 0.8)

    def test_unfavorable_decay_constant(self):
        step = _delta(direction=Direction.DOWN, bear_streak=3)
        assert step.raw == pytest.approx(10.0 * 0.7)

    def test_opposite_streak_does_not_decay(self):
        assert _delta(direction=Direction.UP, bear_streak=10).raw == pytest.approx(10.0)

    def test_echo_amplified_and_capped(self):
        step = _delta(echoes=frozenset({EchoClass.SELF_REINFORCEMENT}))
        assert step.raw == pytest.approx(15.0)
        assert step.delta == 12

    def test_echo_below_ceiling(self):
        step = _delta(base_magnitude=5.0, echoes=frozenset({EchoClass.SELF_REVERSAL}))
        assert step.raw == pytest.approx(8.0)

    def test_self_reversal_ceiling(self):
        step = _delta(echoes=frozenset({EchoClass.SELF_REVERSAL}))
        assert step.raw == pytest.approx(10.0)

    def test_high_reflection(self):
        rules = load_quant_rules({"mean_reversion_margin": 100})
        reflected = _delta(current_open=96, rules=rules)
        free = _delta(current_open=89, rules=rules)
        assert reflected.raw == pytest.approx(5.0)
        assert reflected.delta < free.delta

    def test_high_reflection_default_rules(self):
        step = _delta(current_open=96)
        assert step.delta < 10

    def test_low_reflection(self):
        rules = load_quant_rules({"mean_reversion_margin": 100})
        step = _delta(direction=Direction.DOWN, current_open=10, rules=rules)
        assert step.raw == pytest.approx(6.0)

    def test_no_reflection_when_moving_away_from_bound(self):
        rules = load_quant_rules({"mean_reversion_margin": 100})
        assert _delta(direction=Direction.DOWN, current_open=96, rules=rules).raw == pytest.approx(10.0)

    def test_mean_reversion_up(self):
        assert _delta(current_open=61).raw == pytest.approx(5.0)

    def test_mean_reversion_down(self):
        assert _delta(direction=Direction.DOWN, current_open=39).raw == pytest.approx(5.0)

    def test_no_mean_reversion_toward_baseline(self):
        assert _delta(direction=Direction.DOWN, current_open=61).raw == pytest.approx(10.0)

    def test_margin_is_exclusive(self):
        assert _delta(current_open=60).raw == pytest.approx(10.0)

    def test_non_finite_inputs_do_not_raise(self):
        step = _delta(base_magnitude=float("nan"), current_open=float("inf"),
                      baseline=float("nan"), noise=float("nan"))
        assert step.delta >= 1
        assert step.direction in (Direction.UP, Direction.DOWN)

    def test_negative_magnitude_clamped(self):
        assert _delta(base_magnitude=-50.0).delta == 1

    def test_oscillate_always_resolved(self):
        for open_value in range(0, 101, 5):
            step = _delta(direction=Direction.OSCILLATE, current_open=open_value)
            assert step.direction in (Direction.UP, Direction.DOWN)


class TestContinuedStreak:
    def test_up(self):
        assert continued_streak(Direction.UP, 3, 0) == 4

    def test_down(self):
        assert continued_streak(Direction.DOWN, 3, 1) == 2
