import pytest

from fortune_kline.core.domain import Direction, Trend
from fortune_kline.core.logging_layer import (
    BOUNDARY_REFLECTED,
    STEP_NUDGED,
    WALK_COMPLETED,
    EventFilter,
)
from fortune_kline.core.rules import DEFAULT_QUANT_RULES
from fortune_kline.core.walk import (
    TREND_PHRASES,
    StepRequest,
    WalkState,
    advance,
    run_walk,
    settle_close,
)


def _planner(direction=Direction.UP, magnitude=100.0, narrative=None):
    """Planner that always asks for the same step, with decay disabled."""
    def plan(state):
        return StepRequest(
            direction=direction,
            base_magnitude=magnitude,
            calendar_year=2000 + state.age,
            cycle_label="Jia-Zi",
            period_label="Childhood",
            narrative=narrative,
            apply_streak_decay=False,
        )
    return plan


class TestSettleClose:
    @pytest.mark.parametrize("open_,direction,delta,expected", [
        (98, Direction.UP, 4, (100, Direction.UP, None)),
        (50, Direction.DOWN, 3, (47, Direction.DOWN, None)),
        (100, Direction.UP, 3, (99, Direction.DOWN, BOUNDARY_REFLECTED)),
        (0, Direction.DOWN, 2, (1, Direction.UP, BOUNDARY_REFLECTED)),
        (50, Direction.UP, 0, (51, Direction.UP, STEP_NUDGED)),
    ])
    def test_cases(self, open_, direction, delta, expected):
        assert settle_close(open_, direction, delta, DEFAULT_QUANT_RULES) == expected


class TestAdvance:
    def test_up_extends_bull_and_resets_bear(self):
        state = advance(WalkState(age=4, current_open=50, bull_streak=2, bear_streak=0), Direction.UP, 54)
        assert state == WalkState(age=5, current_open=54, bull_streak=3, bear_streak=0, previous_score=4)

    def test_down_resets_bull(self):
        state = advance(WalkState(age=4, current_open=50, bull_streak=2), Direction.DOWN, 47)
        assert state == WalkState(age=5, current_open=47, bull_streak=0, bear_streak=1, previous_score=3)


class TestRunWalk:
    def test_length_and_ages(self):
        points = run_walk(12, 50, DEFAULT_QUANT_RULES, _planner())
        assert len(points) == 12
        assert [p.age for p in points] == list(range(1, 13))

    def test_first_open_is_clamped_baseline(self):
        assert run_walk(3, 95.5, DEFAULT_QUANT_RULES, _planner())[0].open == 80
        assert run_walk(3, 5, DEFAULT_QUANT_RULES, _planner())[0].open == 20

    def test_open_follows_previous_close(self):
        points = run_walk(30, 50, DEFAULT_QUANT_RULES, _planner(Direction.OSCILLATE, 20.0))
        for prev, cur in zip(points, points[1:]):
            assert cur.open == prev.close

    def test_boundary_reflection(self, journal):
        points = run_walk(6, 80, DEFAULT_QUANT_RULES, _planner(), journal)
        assert [p.close for p in points] == [84, 88, 92, 96, 100, 99]
        assert points[5].trend is Trend.BEARISH
        reflections = journal.query_events(EventFilter(event_type=BOUNDARY_REFLECTED))
        assert [e.step for e in reflections] == [6]
        assert reflections[0].data["realised_direction"] == "Down"

    def test_walk_completed_logged(self, journal):
        run_walk(6, 80, DEFAULT_QUANT_RULES, _planner(), journal)
        done = journal.query_events(EventFilter(event_type=WALK_COMPLETED))
        assert len(done) == 1
        assert done[0].step == 6
        assert done[0].data == {"length": 6, "baseline": 80, "final_close": 99}

    def test_never_pinned_at_floor(self):
        points = run_walk(40, 20, DEFAULT_QUANT_RULES, _planner(Direction.DOWN))
        assert all(p.open != p.close for p in points)
        assert min(p.close for p in points) >= 0

    def test_trend_phrase_when_no_narrative(self):
        points = run_walk(2, 50, DEFAULT_QUANT_RULES, _planner(Direction.OSCILLATE, 10.0))
        assert points[0].narrative == TREND_PHRASES[Trend.BULLISH]
        assert points[1].narrative == TREND_PHRASES[Trend.BEARISH]

    def test_request_narrative_kept(self):
        points = run_walk(2, 50, DEFAULT_QUANT_RULES, _planner(narrative="Steady."))
        assert {p.narrative for p in points} == {"Steady."}

    def test_labels_come_from_request(self):
        point = run_walk(1, 50, DEFAULT_QUANT_RULES, _planner())[0]
        assert (point.calendar_year, point.cycle_label, point.period_label) == (2001, "Jia-Zi", "Childhood")

    def test_planner_sees_previous_realised_score(self):
        seen = []
        base = _planner()

        def plan(state):
            seen.append(state.previous_score)
            return base(state)

        run_walk(6, 80, DEFAULT_QUANT_RULES, plan)
        assert seen == [None, 4, 4, 4, 4, 4]

    def test_without_journal(self):
        assert len(run_walk(6, 80, DEFAULT_QUANT_RULES, _planner())) == 6
