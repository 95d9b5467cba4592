# fortune_kline/__init__.py
# Version: 1.0.0
# Deterministic per-age fortune K-line sequence engine.
#
# Standard import:
#   from fortune_kline import build_sequence, normalize_sequence, CalendarContext

from fortune_kline.engine import (
    build_sequence,
    normalize_sequence,
    build_from_records,
    normalize_from_records,
)
from fortune_kline.core.calendar import CalendarContext, PeriodBoundary, SexagenaryCalendar
from fortune_kline.core.domain import (
    CandidateItem,
    KLinePoint,
    Trend,
    YearlyFact,
)
from fortune_kline.core.noise import FixedNoiseSource, SeededNoiseSource
from fortune_kline.core.rules import DEFAULT_QUANT_RULES, QuantRules, load_quant_rules
from fortune_kline.governance.exceptions import InvalidWalkRequestError

__version__ = "1.0.0"

__all__ = [
    "build_sequence",
    "normalize_sequence",
    "build_from_records",
    "normalize_from_records",
    "CalendarContext",
    "PeriodBoundary",
    "SexagenaryCalendar",
    "CandidateItem",
    "KLinePoint",
    "Trend",
    "YearlyFact",
    "FixedNoiseSource",
    "SeededNoiseSource",
    "DEFAULT_QUANT_RULES",
    "QuantRules",
    "load_quant_rules",
    "InvalidWalkRequestError",
]
