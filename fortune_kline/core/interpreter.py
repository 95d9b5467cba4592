# =============================================================================
# FORTUNE-KLINE v1.0.0 -- FACT INTERPRETER
# File:   fortune_kline/core/interpreter.py
# =============================================================================
#
# SCOPE
# -----
# Maps one YearlyFact (or its absence) to the quantised classes consumed by
# the delta calculator:
#
#   interpret_fact(fact) -> InterpretedFact(effect, relation, echoes, judgement)
#
# RELATION PRIORITY
# -----------------
# Tier 1 (compound)  mutual-clash, mutual-harm, mutual-generation
# Tier 2 (single)    clash, harm, domination, half-combine, combine, generation
#
# The outer loop walks the fixed class order; the inner loop walks the tags.
# A fact tagged both "clash" and "generation" therefore always resolves to
# CLASH regardless of tag order. "mutual-clash" contains "clash", so the
# compound forms must be tried first.
#
# DETERMINISM CONSTRAINTS
# -----------------------
# DET-01  Pure function. No journal writes, no I/O.
# DET-02  Result depends on the tag SET, never on tag order.
#
# Echo classes are also read from the narrative; relation classes come from
# tags only.
# =============================================================================

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from .domain import (
    EchoClass,
    Judgement,
    LifePeriodEffect,
    RelationClass,
    YearlyFact,
)


# =============================================================================
# SECTION 1 -- PRIORITY ORDER
# =============================================================================

RELATION_PRIORITY: Tuple[RelationClass, ...] = (
    RelationClass.MUTUAL_CLASH,
    RelationClass.MUTUAL_HARM,
    RelationClass.MUTUAL_GENERATION,
    RelationClass.CLASH,
    RelationClass.HARM,
    RelationClass.DOMINATION,
    RelationClass.HALF_COMBINE,
    RelationClass.COMBINE,
    RelationClass.GENERATION,
)

# Keywords per class: the canonical English form plus the collaborator's
# native term. Priority order above guarantees that a compound such as
# "相冲" is matched before its single form "冲".
RELATION_KEYWORDS: Dict[RelationClass, Tuple[str, ...]] = {
    RelationClass.MUTUAL_CLASH:      ("mutual-clash", "相冲"),
    RelationClass.MUTUAL_HARM:       ("mutual-harm", "相害"),
    RelationClass.MUTUAL_GENERATION: ("mutual-generation", "相生"),
    RelationClass.CLASH:             ("clash", "冲"),
    RelationClass.HARM:              ("harm", "害"),
    RelationClass.DOMINATION:        ("domination", "克"),
    RelationClass.HALF_COMBINE:      ("half-combine", "半合"),
    RelationClass.COMBINE:           ("combine", "合"),
    RelationClass.GENERATION:        ("generation", "生"),
}

ECHO_KEYWORDS: Dict[EchoClass, Tuple[str, ...]] = {
    EchoClass.SELF_REINFORCEMENT: ("self-reinforcement", "伏吟"),
    EchoClass.SELF_REVERSAL:      ("self-reversal", "反吟"),
}

_SEPARATORS = re.compile(r"[\s_]+")


# =============================================================================
# SECTION 2 -- RESULT TYPE
# =============================================================================

@dataclass(frozen=True)
class InterpretedFact:
    """Quantised view of one fact."""

    effect:    LifePeriodEffect
    relation:  RelationClass
    echoes:    FrozenSet[EchoClass]
    judgement: Judgement


NEUTRAL_INTERPRETATION = InterpretedFact(
    effect=LifePeriodEffect.NEUTRAL,
    relation=RelationClass.NO_RELATION,
    echoes=frozenset(),
    judgement=Judgement.BALANCED,
)


# =============================================================================
# SECTION 3 -- NORMALISATION
# =============================================================================

def normalize_tag(tag: str) -> str:
    """Lower-case, collapse whitespace/underscores into single hyphens."""
    return _SEPARATORS.sub("-", tag.strip().lower())


def resolve_relation(tags: Iterable[str]) -> RelationClass:
    normalised = [normalize_tag(t) for t in tags]
    for relation in RELATION_PRIORITY:
        keywords = RELATION_KEYWORDS[relation]
        for tag in normalised:
            if any(keyword in tag for keyword in keywords):
                return relation
    return RelationClass.NO_RELATION


def detect_echoes(tags: Iterable[str], narrative: Optional[str] = None) -> FrozenSet[EchoClass]:
    """Echo classes named in any tag or anywhere in the narrative."""
    normalised = [normalize_tag(t) for t in tags]
    if isinstance(narrative, str) and narrative.strip():
        normalised.append(normalize_tag(narrative))
    return frozenset(
        echo for echo, keywords in ECHO_KEYWORDS.items()
        if any(keyword in tag for keyword in keywords for tag in normalised)
    )


# =============================================================================
# SECTION 4 -- FREE-TEXT ENUM PARSERS
# =============================================================================
# Collaborators return loosely formatted strings ("supportive", "ADVERSE",
# "favourable", ...). Unknown or empty text maps to the neutral member.

_EFFECT_KEYWORDS: Tuple[Tuple[str, LifePeriodEffect], ...] = (
    ("support", LifePeriodEffect.SUPPORTIVE),
    ("advers",  LifePeriodEffect.ADVERSE),
    ("扶",      LifePeriodEffect.SUPPORTIVE),
    ("克",      LifePeriodEffect.ADVERSE),
)

_JUDGEMENT_KEYWORDS: Tuple[Tuple[str, Judgement], ...] = (
    ("unfavo", Judgement.UNFAVORABLE),
    ("favo",   Judgement.FAVORABLE),
    ("凶",     Judgement.UNFAVORABLE),
    ("吉",     Judgement.FAVORABLE),
)


def parse_life_period_effect(text: Optional[str]) -> LifePeriodEffect:
    if isinstance(text, LifePeriodEffect):
        return text
    if not isinstance(text, str):
        return LifePeriodEffect.NEUTRAL
    lowered = text.strip().lower()
    for keyword, effect in _EFFECT_KEYWORDS:
        if keyword in lowered:
            return effect
    return LifePeriodEffect.NEUTRAL


def parse_judgement(text: Optional[str]) -> Judgement:
    if isinstance(text, Judgement):
        return text
    if not isinstance(text, str):
        return Judgement.BALANCED
    lowered = text.strip().lower()
    # "unfavorable" contains "favo"; the negative form is checked first.
    for keyword, judgement in _JUDGEMENT_KEYWORDS:
        if keyword in lowered:
            return judgement
    return Judgement.BALANCED


# =============================================================================
# SECTION 5 -- ENTRY POINT
# =============================================================================

def interpret_fact(fact: Optional[YearlyFact]) -> InterpretedFact:
    """
    Quantise one fact.

    A missing fact yields NEUTRAL_INTERPRETATION (NEUTRAL, NO_RELATION, no
    echoes, BALANCED). Never raises for a well-typed YearlyFact.
    """
    if fact is None:
        return NEUTRAL_INTERPRETATION
    return InterpretedFact(
        effect=fact.life_period_effect,
        relation=resolve_relation(fact.relation_tags),
        echoes=detect_echoes(fact.relation_tags, fact.narrative),
        judgement=fact.judgement,
    )


# =============================================================================
# SECTION 6 -- MODULE __all__
# =============================================================================

__all__ = [
    "RELATION_PRIORITY",
    "RELATION_KEYWORDS",
    "ECHO_KEYWORDS",
    "InterpretedFact",
    "NEUTRAL_INTERPRETATION",
    "normalize_tag",
    "resolve_relation",
    "detect_echoes",
    "parse_life_period_effect",
    "parse_judgement",
    "interpret_fact",
]
