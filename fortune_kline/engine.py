# fortune_kline/engine.py
# Version: 1.0.0
# External orchestration layer.
#
# GOVERNANCE GATE (request-scoped):
#   Every public entry point runs validate_walk_request() first and raises
#   InvalidWalkRequestError on any blocking violation:
#     GOV-01: baseline finite real number
#     GOV-02: length int in [1, 150]
#     GOV-03: birth_year int in [1, 9999]
#
#   NOT gated (recovered inside the walk, journaled only):
#     missing / duplicate / out-of-range ages, empty inputs,
#     contradictory candidate fields, unknown tags.
#
# Standard import:
#   from fortune_kline.engine import build_sequence, normalize_sequence

from typing import Any, Iterable, Optional, Tuple

from fortune_kline.core.builder import build_sequence as _build
from fortune_kline.core.calendar import CalendarContext
from fortune_kline.core.domain import CandidateItem, KLinePoint, YearlyFact
from fortune_kline.core.ingest import candidates_from_records, facts_from_records
from fortune_kline.core.logging_layer import EventLogger
from fortune_kline.core.noise import NoiseSource
from fortune_kline.core.normalizer import normalize_sequence as _normalize
from fortune_kline.core.rules import DEFAULT_QUANT_RULES, QuantRules
from fortune_kline.governance.exceptions import InvalidWalkRequestError
from fortune_kline.governance.policy_validator import validate_walk_request
from fortune_kline.utils.constants import REPAIR_SEQUENCE_LENGTH, RULE_SEQUENCE_LENGTH


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _gate(baseline: Any, length: Any, calendar: CalendarContext) -> None:
    result = validate_walk_request(
        baseline=baseline,
        length=length,
        birth_year=calendar.birth_year,
    )
    if not result.is_compliant:
        raise InvalidWalkRequestError(result)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_sequence(
    facts: Iterable[YearlyFact],
    baseline: float,
    calendar: CalendarContext,
    length: int = RULE_SEQUENCE_LENGTH,
    noise: Optional[NoiseSource] = None,
    rules: QuantRules = DEFAULT_QUANT_RULES,
    journal: Optional[EventLogger] = None,
) -> Tuple[KLinePoint, ...]:
    """
    Rule-driven generation: facts -> exactly `length` points.

    Raises
    ------
    InvalidWalkRequestError
        Blocking GOV-01/02/03 violation.
    """
    _gate(baseline, length, calendar)
    return _build(facts, baseline, calendar, length=length, noise=noise,
                  rules=rules, journal=journal)


def normalize_sequence(
    candidates: Iterable[CandidateItem],
    baseline: float,
    calendar: CalendarContext,
    length: int = REPAIR_SEQUENCE_LENGTH,
    rules: QuantRules = DEFAULT_QUANT_RULES,
    journal: Optional[EventLogger] = None,
) -> Tuple[KLinePoint, ...]:
    """
    Repair: untrusted candidates -> exactly `length` consistent points.

    Raises
    ------
    InvalidWalkRequestError
        Blocking GOV-01/02/03 violation.
    """
    _gate(baseline, length, calendar)
    return _normalize(candidates, baseline, calendar, length=length,
                      rules=rules, journal=journal)


def build_from_records(
    records: Iterable[Any],
    baseline: float,
    calendar: CalendarContext,
    length: int = RULE_SEQUENCE_LENGTH,
    noise: Optional[NoiseSource] = None,
    rules: QuantRules = DEFAULT_QUANT_RULES,
    journal: Optional[EventLogger] = None,
) -> Tuple[KLinePoint, ...]:
    """build_sequence() over raw fact mappings (decoded collaborator JSON)."""
    _gate(baseline, length, calendar)
    facts = facts_from_records(records, journal=journal)
    return _build(facts, baseline, calendar, length=length, noise=noise,
                  rules=rules, journal=journal)


def normalize_from_records(
    records: Iterable[Any],
    baseline: float,
    calendar: CalendarContext,
    length: int = REPAIR_SEQUENCE_LENGTH,
    rules: QuantRules = DEFAULT_QUANT_RULES,
    journal: Optional[EventLogger] = None,
) -> Tuple[KLinePoint, ...]:
    """normalize_sequence() over raw candidate mappings."""
    _gate(baseline, length, calendar)
    candidates = candidates_from_records(records, journal=journal)
    return _normalize(candidates, baseline, calendar, length=length,
                      rules=rules, journal=journal)


__all__ = [
    "build_sequence",
    "normalize_sequence",
    "build_from_records",
    "normalize_from_records",
]
