# =============================================================================
# FORTUNE-KLINE v1.0.0 -- RECORD INGESTION
# File:   fortune_kline/core/ingest.py
# =============================================================================
#
# SCOPE
# -----
# Coerces plain mappings (decoded collaborator JSON) into typed inputs:
#
#   facts_from_records(records, journal)       -> Tuple[YearlyFact, ...]
#   candidates_from_records(records, journal)  -> Tuple[CandidateItem, ...]
#
# Keys are accepted in snake_case or in the collaborator's own field names
# (see FACT_KEYS / CANDIDATE_KEYS). A record without a usable age is dropped
# and journaled as RECORD_REJECTED; every other unusable field degrades to
# None or the type's default. Nothing here raises for record content.
# =============================================================================

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from .domain import CandidateItem, YearlyFact
from .interpreter import parse_judgement, parse_life_period_effect
from .logging_layer import RECORD_REJECTED, EventLogger

# canonical field -> accepted keys, first present wins
FACT_KEYS: Dict[str, Tuple[str, ...]] = {
    "age":                ("age",),
    "life_period_effect": ("life_period_effect", "dayun_effect", "effect"),
    "relation_tags":      ("relation_tags", "relations", "tags"),
    "judgement":          ("judgement", "judgment"),
    "narrative":          ("narrative", "comment"),
    "period_label":       ("period_label", "dayun"),
    "cycle_label":        ("cycle_label", "liunian"),
}

CANDIDATE_KEYS: Dict[str, Tuple[str, ...]] = {
    "age":           ("age",),
    "desired_score": ("desired_score", "score"),
    "open":          ("open",),
    "close":         ("close",),
    "trend_hint":    ("trend_hint", "trend"),
    "narrative":     ("narrative", "content"),
    "cycle_label":   ("cycle_label", "ganZhi", "gan_zhi"),
    "period_label":  ("period_label", "daYun", "da_yun"),
}


# =============================================================================
# SECTION 1 -- FIELD COERCION
# =============================================================================

def _pick(record: Mapping[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return None


def coerce_age(value: Any) -> Optional[int]:
    """Positive int, or None. Accepts integral floats and numeric strings."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, float):
        if not math.isfinite(value) or value != int(value):
            return None
        value = int(value)
    if isinstance(value, int) and value >= 1:
        return value
    return None


def coerce_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return float(value)
    return None


def coerce_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def coerce_tags(value: Any) -> Tuple[str, ...]:
    """A single string, or any iterable of strings; non-strings are dropped."""
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(t for t in value if isinstance(t, str) and t.strip())
    return ()


def _reject(journal: Optional[EventLogger], index: int, reason: str, kind: str) -> None:
    if journal is not None:
        journal.log_event(RECORD_REJECTED, {"index": index, "kind": kind, "reason": reason}, 0)


# =============================================================================
# SECTION 2 -- FACTS
# =============================================================================

def fact_from_record(record: Mapping[str, Any]) -> Optional[YearlyFact]:
    age = coerce_age(_pick(record, FACT_KEYS["age"]))
    if age is None:
        return None
    return YearlyFact(
        age=age,
        life_period_effect=parse_life_period_effect(_pick(record, FACT_KEYS["life_period_effect"])),
        relation_tags=coerce_tags(_pick(record, FACT_KEYS["relation_tags"])),
        judgement=parse_judgement(_pick(record, FACT_KEYS["judgement"])),
        narrative=coerce_text(_pick(record, FACT_KEYS["narrative"])) or "",
        period_label=coerce_text(_pick(record, FACT_KEYS["period_label"])),
        cycle_label=coerce_text(_pick(record, FACT_KEYS["cycle_label"])),
    )


def facts_from_records(
    records: Iterable[Any],
    journal: Optional[EventLogger] = None,
) -> Tuple[YearlyFact, ...]:
    """Typed facts in input order. Unusable records are dropped and journaled."""
    facts = []
    for index, record in enumerate(records or ()):
        if not isinstance(record, Mapping):
            _reject(journal, index, "not a mapping", "fact")
            continue
        fact = fact_from_record(record)
        if fact is None:
            _reject(journal, index, "missing or invalid age", "fact")
            continue
        facts.append(fact)
    return tuple(facts)


# =============================================================================
# SECTION 3 -- CANDIDATES
# =============================================================================

def candidate_from_record(record: Mapping[str, Any]) -> Optional[CandidateItem]:
    age = coerce_age(_pick(record, CANDIDATE_KEYS["age"]))
    if age is None:
        return None
    return CandidateItem(
        age=age,
        desired_score=coerce_number(_pick(record, CANDIDATE_KEYS["desired_score"])),
        open=coerce_number(_pick(record, CANDIDATE_KEYS["open"])),
        close=coerce_number(_pick(record, CANDIDATE_KEYS["close"])),
        trend_hint=coerce_text(_pick(record, CANDIDATE_KEYS["trend_hint"])),
        narrative=coerce_text(_pick(record, CANDIDATE_KEYS["narrative"])),
        cycle_label=coerce_text(_pick(record, CANDIDATE_KEYS["cycle_label"])),
        period_label=coerce_text(_pick(record, CANDIDATE_KEYS["period_label"])),
    )


def candidates_from_records(
    records: Iterable[Any],
    journal: Optional[EventLogger] = None,
) -> Tuple[CandidateItem, ...]:
    """Typed candidates in input order. Unusable records are dropped and journaled."""
    candidates = []
    for index, record in enumerate(records or ()):
        if not isinstance(record, Mapping):
            _reject(journal, index, "not a mapping", "candidate")
            continue
        candidate = candidate_from_record(record)
        if candidate is None:
            _reject(journal, index, "missing or invalid age", "candidate")
            continue
        candidates.append(candidate)
    return tuple(candidates)


__all__ = [
    "FACT_KEYS",
    "CANDIDATE_KEYS",
    "coerce_age",
    "coerce_number",
    "coerce_text",
    "coerce_tags",
    "fact_from_record",
    "facts_from_records",
    "candidate_from_record",
    "candidates_from_records",
]
