# =============================================================================
# FORTUNE-KLINE v1.0.0 -- RULE-DRIVEN SEQUENCE BUILDER
# File:   fortune_kline/core/builder.py
# =============================================================================
#
# SCOPE
# -----
# Walks qualitative per-age facts through the quantization rule table.
#
#   build_sequence(facts, baseline, calendar, length, noise, rules, journal)
#
# Facts may cover any subset of ages. Missing ages interpret as NEUTRAL /
# NO_RELATION; duplicate ages keep the first occurrence; ages beyond the
# requested length are ignored. Every recovery is journaled, none raises.
#
# NARRATIVE ORDER
# ---------------
#   fact narrative -> judgement phrase (fact present) -> trend phrase.
# =============================================================================

from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from fortune_kline.utils.constants import RULE_SEQUENCE_LENGTH
from .calendar import CalendarContext
from .delta import rule_base_magnitude
from .domain import Judgement, KLinePoint, YearlyFact
from .interpreter import interpret_fact
from .logging_layer import FACT_DEFAULTED, EventLogger
from .noise import NoiseSource, SeededNoiseSource, noise_factor
from .rules import DEFAULT_QUANT_RULES, QuantRules
from .walk import StepRequest, WalkState, run_walk

JUDGEMENT_PHRASES: Dict[Judgement, str] = {
    Judgement.FAVORABLE:   "Leaning favorable.",
    Judgement.UNFAVORABLE: "Leaning unfavorable.",
    Judgement.BALANCED:    "A balanced year.",
}


def index_by_age(items: Iterable, length: int) -> Dict[int, object]:
    """First occurrence per age within 1..length."""
    indexed: Dict[int, object] = {}
    for item in items:
        if item is None:
            continue
        if 1 <= item.age <= length and item.age not in indexed:
            indexed[item.age] = item
    return indexed


def build_sequence(
    facts:    Iterable[YearlyFact],
    baseline: float,
    calendar: CalendarContext,
    length:   int = RULE_SEQUENCE_LENGTH,
    noise:    Optional[NoiseSource] = None,
    rules:    QuantRules = DEFAULT_QUANT_RULES,
    journal:  Optional[EventLogger] = None,
) -> Tuple[KLinePoint, ...]:
    """
    Produce exactly `length` points from facts.

    noise defaults to SeededNoiseSource() (seed 42); pass a request-derived
    seed to vary output per request while staying reproducible.
    """
    source: NoiseSource = noise if noise is not None else SeededNoiseSource()
    by_age = index_by_age(facts, length)

    def plan(state: WalkState) -> StepRequest:
        fact: Optional[YearlyFact] = by_age.get(state.age)
        if fact is None and journal is not None:
            journal.log_event(FACT_DEFAULTED, {"age": state.age}, state.age)
        interpreted = interpret_fact(fact)
        labels = calendar.labels_for(
            state.age,
            cycle_label=fact.cycle_label if fact is not None else None,
            period_label=fact.period_label if fact is not None else None,
        )
        if fact is None:
            narrative = None
        elif fact.narrative.strip():
            narrative = fact.narrative
        else:
            narrative = JUDGEMENT_PHRASES[fact.judgement]
        return StepRequest(
            direction=rules.direction_for(interpreted.effect, interpreted.relation),
            base_magnitude=rule_base_magnitude(state.age, interpreted.effect, interpreted.relation, rules),
            calendar_year=labels.calendar_year,
            cycle_label=labels.cycle_label,
            period_label=labels.period_label,
            narrative=narrative,
            noise=noise_factor(source.draw(state.age), rules.noise_low, rules.noise_high),
            echoes=interpreted.echoes,
            apply_streak_decay=True,
        )

    return run_walk(length, baseline, rules, plan, journal)


__all__ = [
    "JUDGEMENT_PHRASES",
    "index_by_age",
    "build_sequence",
]
