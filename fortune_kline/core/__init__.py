# fortune_kline/core/__init__.py
# Core canonical types for the sequence engine.
# Authoritative import source for enums and dataclasses: fortune_kline.core.domain

from fortune_kline.core.exceptions import (
    KLineError,
    KLineNumericalError,
    KLineValidationError,
    KLineConsistencyError,
    KLineInvariantError,
    RuleTableLoadError,
)
from fortune_kline.core.domain import (
    LifePeriodEffect,
    RelationClass,
    EchoClass,
    Judgement,
    Direction,
    Trend,
    StageBucket,
    YearlyFact,
    CandidateItem,
    KLinePoint,
)
from fortune_kline.core.rules import QuantRules, DEFAULT_QUANT_RULES, load_quant_rules
from fortune_kline.core.integrity_layer import IntegrityLayer
from fortune_kline.core.logging_layer import EventLogger, Event, EventFilter, JournalError
from fortune_kline.core.interpreter import InterpretedFact, interpret_fact
from fortune_kline.core.delta import StepDelta, compute_delta
from fortune_kline.core.walk import WalkState, StepRequest, run_walk
