# fortune_kline/verification/__init__.py
# Invariant audit and determinism gate for the sequence engine.
#
# DEPLOYMENT NOTE:
#   Nothing in fortune_kline.core or fortune_kline.engine imports this
#   package. It is a development and CI dependency only.
#
# CI GATE:
#   python -m fortune_kline.verification.determinism_gate

from .invariants import InvariantReport, InvariantViolation, audit_sequence
from .vectors import GATE_VECTORS, GateVector
from .determinism_gate import VectorOutcome, check_vector, run_gate
from .determinism_gate import main as run_ci_gate

__all__ = [
    "InvariantReport",
    "InvariantViolation",
    "audit_sequence",
    "GATE_VECTORS",
    "GateVector",
    "VectorOutcome",
    "check_vector",
    "run_gate",
    "run_ci_gate",
]
