import dataclasses

import pytest

from fortune_kline.core.domain import (
    CandidateItem,
    Direction,
    EchoClass,
    Judgement,
    KLinePoint,
    LifePeriodEffect,
    RelationClass,
    StageBucket,
    Trend,
    YearlyFact,
)
from fortune_kline.core.exceptions import KLineInvariantError, KLineValidationError


def _point_kwargs():
    return dict(
        age=1,
        calendar_year=1990,
        cycle_label="Geng-Wu",
        period_label="Childhood",
        open=50,
        close=54,
        score=4,
        trend=Trend.BULLISH,
        narrative="Fortune rises this year.",
    )


# =============================================================================
# SECTION 1 -- Enumerations
# =============================================================================

class TestEnums:
    def test_trend_values_are_wire_strings(self):
        assert Trend.BULLISH == "Bullish"
        assert Trend.BEARISH == "Bearish"

    def test_relation_class_has_ten_members(self):
        assert len(RelationClass) == 10
        assert RelationClass("no-relation") is RelationClass.NO_RELATION

    def test_echo_values(self):
        assert {e.value for e in EchoClass} == {"self-reinforcement", "self-reversal"}

    def test_stage_bucket_values(self):
        assert [b.value for b in StageBucket] == ["1-20", "21-40", "41-60", "61-80", "81+"]

    def test_effect_and_judgement_lookup_by_value(self):
        assert LifePeriodEffect("Adverse") is LifePeriodEffect.ADVERSE
        assert Judgement("Balanced") is Judgement.BALANCED


class TestDirection:
    @pytest.mark.parametrize("direction,sign", [
        (Direction.UP, 1),
        (Direction.DOWN, -1),
        (Direction.OSCILLATE, 0),
    ])
    def test_sign(self, direction, sign):
        assert direction.sign == sign

    def test_opposite(self):
        assert Direction.UP.opposite() is Direction.DOWN
        assert Direction.DOWN.opposite() is Direction.UP
        assert Direction.OSCILLATE.opposite() is Direction.OSCILLATE


# =============================================================================
# SECTION 2 -- YearlyFact
# =============================================================================

class TestYearlyFact:
    def test_defaults(self):
        fact = YearlyFact(age=3)
        assert fact.life_period_effect is LifePeriodEffect.NEUTRAL
        assert fact.relation_tags == ()
        assert fact.judgement is Judgement.BALANCED
        assert fact.narrative == ""
        assert fact.period_label is None
        assert fact.cycle_label is None

    def test_frozen(self):
        fact = YearlyFact(age=3)
        with pytest.raises(dataclasses.FrozenInstanceError):
            fact.age = 4  # type: ignore

    @pytest.mark.parametrize("age", [0, -1, 1.5, True, "3"])
    def test_invalid_age_raises(self, age):
        with pytest.raises(KLineValidationError) as exc_info:
            YearlyFact(age=age)
        assert exc_info.value.field_name == "age"

    def test_effect_must_be_enum(self):
        with pytest.raises(KLineValidationError) as exc_info:
            YearlyFact(age=1, life_period_effect="Supportive")  # type: ignore
        assert exc_info.value.field_name == "life_period_effect"

    def test_judgement_must_be_enum(self):
        with pytest.raises(KLineValidationError):
            YearlyFact(age=1, judgement="Favorable")  # type: ignore

    def test_tags_list_rejected(self):
        with pytest.raises(KLineValidationError) as exc_info:
            YearlyFact(age=1, relation_tags=["clash"])  # type: ignore
        assert exc_info.value.field_name == "relation_tags"

    def test_tags_frozenset_accepted(self):
        fact = YearlyFact(age=1, relation_tags=frozenset({"clash", "harm"}))
        assert "clash" in fact.relation_tags

    def test_non_string_tag_rejected(self):
        with pytest.raises(KLineValidationError):
            YearlyFact(age=1, relation_tags=("clash", 3))  # type: ignore

    def test_labels_must_be_strings(self):
        with pytest.raises(KLineValidationError) as exc_info:
            YearlyFact(age=1, cycle_label=1990)  # type: ignore
        assert exc_info.value.field_name == "cycle_label"


# =============================================================================
# SECTION 3 -- CandidateItem
# =============================================================================

class TestCandidateItem:
    def test_only_age_is_validated(self):
        item = CandidateItem(age=2, desired_score=float("nan"), open=-500.0, close=1e9,
                             trend_hint="???")
        assert item.age == 2

    def test_invalid_age_raises(self):
        with pytest.raises(KLineValidationError):
            CandidateItem(age=0)


# =============================================================================
# SECTION 4 -- KLinePoint
# =============================================================================

class TestKLinePoint:
    def test_valid_point(self):
        point = KLinePoint(**_point_kwargs())
        assert point.score == 4

    def test_bearish_point(self):
        point = KLinePoint(**{**_point_kwargs(), "open": 54, "close": 50,
                              "trend": Trend.BEARISH})
        assert point.trend is Trend.BEARISH

    def test_out_of_range_raises(self):
        with pytest.raises(KLineInvariantError) as exc_info:
            KLinePoint(**{**_point_kwargs(), "open": 98, "close": 102, "score": 4})
        assert exc_info.value.invariant == "INV-PT-01"

    def test_float_value_raises(self):
        with pytest.raises(KLineInvariantError) as exc_info:
            KLinePoint(**{**_point_kwargs(), "close": 54.0})
        assert exc_info.value.invariant == "INV-PT-01"

    def test_flat_body_raises(self):
        with pytest.raises(KLineInvariantError) as exc_info:
            KLinePoint(**{**_point_kwargs(), "close": 50, "score": 0})
        assert exc_info.value.invariant == "INV-PT-02"

    def test_trend_mismatch_raises(self):
        with pytest.raises(KLineInvariantError) as exc_info:
            KLinePoint(**{**_point_kwargs(), "trend": Trend.BEARISH})
        assert exc_info.value.invariant == "INV-PT-03"
        assert exc_info.value.age == 1

    def test_score_mismatch_raises(self):
        with pytest.raises(KLineInvariantError) as exc_info:
            KLinePoint(**{**_point_kwargs(), "score": 5})
        assert exc_info.value.invariant == "INV-PT-04"

    def test_to_dict_flattens_trend(self):
        d = KLinePoint(**_point_kwargs()).to_dict()
        assert d["trend"] == "Bullish"
        assert type(d["trend"]) is str
        assert set(d) == {"age", "calendar_year", "cycle_label", "period_label",
                          "open", "close", "score", "trend", "narrative"}
