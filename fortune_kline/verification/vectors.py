# fortune_kline/verification/vectors.py
# Version: 1.0.0
# Fixed, version-controlled input matrix for the determinism gate.
#
# NO VECTOR IS GENERATED AT RUNTIME. NO VECTOR IS SAMPLED.
# The matrix is identical on every gate run for a given package version.
#
# Groups:
#   G-RULE   rule-driven builder vectors (facts)
#   G-REP    repair normalizer vectors (candidates)
# Within each group: ascending numeric order of vector ID suffix.

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from fortune_kline.core.calendar import CalendarContext, boundaries_from_pairs
from fortune_kline.core.domain import (
    CandidateItem,
    Judgement,
    LifePeriodEffect,
    YearlyFact,
)


@dataclass(frozen=True)
class GateVector:
    vector_id:   str
    group_id:    str
    mode:        str                 # "build" or "normalize"
    items:       Tuple[Union[YearlyFact, CandidateItem], ...]
    baseline:    float
    length:      int
    calendar:    CalendarContext
    seed:        Optional[Union[int, str]] = None
    description: str = ""


# ---------------------------------------------------------------------------
# SHARED CALENDARS
# ---------------------------------------------------------------------------

_CAL_1990 = CalendarContext(
    birth_year=1990,
    boundaries=boundaries_from_pairs(((8, "Wu-Yin"), (18, "Ji-Mao"), (28, "Geng-Chen"),
                                      (38, "Xin-Si"), (48, "Ren-Wu"), (58, "Gui-Wei"),
                                      (68, "Jia-Shen"), (78, "Yi-You"), (88, "Bing-Xu"))),
)
_CAL_1975 = CalendarContext(birth_year=1975)


# ---------------------------------------------------------------------------
# FACT SETS
# ---------------------------------------------------------------------------

_FACTS_MIXED: tuple = tuple(
    YearlyFact(
        age=age,
        life_period_effect=(LifePeriodEffect.SUPPORTIVE, LifePeriodEffect.ADVERSE,
                            LifePeriodEffect.NEUTRAL)[age % 3],
        relation_tags=(("generation",), ("clash",), ("mutual harm",), ("combine",),
                       ("harm", "self-reinforcement"), ())[age % 6],
        judgement=(Judgement.FAVORABLE, Judgement.UNFAVORABLE, Judgement.BALANCED)[age % 3],
        narrative="" if age % 4 else "Milestone year.",
    )
    for age in range(1, 101)
)

_FACTS_SUPPORTIVE_RUN: tuple = tuple(
    YearlyFact(age=age, life_period_effect=LifePeriodEffect.SUPPORTIVE,
               relation_tags=("generation",), judgement=Judgement.FAVORABLE)
    for age in range(1, 101)
)

_FACTS_ADVERSE_RUN: tuple = tuple(
    YearlyFact(age=age, life_period_effect=LifePeriodEffect.ADVERSE,
               relation_tags=("clash", "self-reversal"), judgement=Judgement.UNFAVORABLE)
    for age in range(1, 101)
)

_FACTS_SPARSE: tuple = (
    YearlyFact(age=5, life_period_effect=LifePeriodEffect.SUPPORTIVE, relation_tags=("combine",)),
    YearlyFact(age=5, life_period_effect=LifePeriodEffect.ADVERSE, relation_tags=("clash",)),
    YearlyFact(age=40, life_period_effect=LifePeriodEffect.ADVERSE, relation_tags=("domination",)),
    YearlyFact(age=120, life_period_effect=LifePeriodEffect.SUPPORTIVE),
)


# ---------------------------------------------------------------------------
# CANDIDATE SETS
# ---------------------------------------------------------------------------

_CANDIDATES_FULL: tuple = tuple(
    CandidateItem(age=age, desired_score=float(30 + (age * 7) % 50),
                  narrative="Year " + str(age) + ".")
    for age in range(1, 81)
)

_CANDIDATES_CONTRADICTORY: tuple = (
    CandidateItem(age=1, desired_score=40.0, trend_hint="Bearish", open=10.0, close=90.0),
    CandidateItem(age=2, desired_score=float("nan")),
    CandidateItem(age=3, open=55.0, close=55.0),
    CandidateItem(age=4, desired_score=-5.0, trend_hint="sideways"),
    CandidateItem(age=10, desired_score=float("inf"), trend_hint="BULL"),
    CandidateItem(age=10, desired_score=1.0),
    CandidateItem(age=79, close=300.0, open=-300.0),
)


# ---------------------------------------------------------------------------
# VECTOR MATRIX
# ---------------------------------------------------------------------------

GATE_VECTORS: Tuple[GateVector, ...] = (
    GateVector("RULE-01", "G-RULE", "build", _FACTS_MIXED, 50, 100, _CAL_1990, 42,
               "mixed effects and relations, default seed"),
    GateVector("RULE-02", "G-RULE", "build", _FACTS_SUPPORTIVE_RUN, 80, 100, _CAL_1990, "req-0002",
               "sustained upward drift from the ceiling of the baseline band"),
    GateVector("RULE-03", "G-RULE", "build", _FACTS_ADVERSE_RUN, 20, 100, _CAL_1975, 7,
               "sustained downward drift with echo tags"),
    GateVector("RULE-04", "G-RULE", "build", (), 50, 100, _CAL_1975, 42,
               "no facts at all"),
    GateVector("RULE-05", "G-RULE", "build", _FACTS_SPARSE, 95.5, 60, _CAL_1990, 11,
               "sparse facts, duplicate and out-of-range ages, clamped baseline"),
    GateVector("REP-01", "G-REP", "normalize", _CANDIDATES_FULL, 50, 80, _CAL_1990, None,
               "complete candidate sequence"),
    GateVector("REP-02", "G-REP", "normalize", (), 35, 80, _CAL_1975, None,
               "empty candidate sequence"),
    GateVector("REP-03", "G-REP", "normalize", _CANDIDATES_CONTRADICTORY, 5, 80, _CAL_1990, None,
               "contradictory and non-finite candidate fields"),
)


__all__ = ["GateVector", "GATE_VECTORS"]
