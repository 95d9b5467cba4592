#!/usr/bin/env python3
# =============================================================================
# FORTUNE-KLINE v1.0.0 -- DETERMINISM GATE
# File:   fortune_kline/verification/determinism_gate.py
# =============================================================================
#
# PURPOSE
# -------
# CI enforcement script. Runs every fixed gate vector twice, audits the
# sequence invariants, and compares sequence fingerprints and journal chain
# heads between the two runs.
#
#   python -m fortune_kline.verification.determinism_gate
#
# Exit codes:
#   0 -- PASS: every vector is invariant-clean and bit-identical across runs.
#   1 -- FAIL or ERROR: CI must block merge.
#
# No I/O beyond stdout/stderr. No network calls.
# =============================================================================

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from fortune_kline.core.integrity_layer import fingerprint_points, fingerprint_rules
from fortune_kline.core.logging_layer import EventLogger
from fortune_kline.core.noise import SeededNoiseSource
from fortune_kline.core.rules import DEFAULT_QUANT_RULES, QuantRules
from fortune_kline.engine import build_sequence, normalize_sequence
from fortune_kline.verification.invariants import audit_sequence
from fortune_kline.verification.vectors import GATE_VECTORS, GateVector


@dataclass(frozen=True)
class VectorOutcome:
    vector_id:        str
    passed:           bool
    fingerprint:      str
    journal_head:     str
    failures:         Tuple[str, ...]


def _execute(vector: GateVector, rules: QuantRules) -> Tuple[tuple, EventLogger]:
    journal = EventLogger()
    if vector.mode == "build":
        noise = SeededNoiseSource(vector.seed) if vector.seed is not None else None
        points = build_sequence(vector.items, vector.baseline, vector.calendar,
                                length=vector.length, noise=noise, rules=rules,
                                journal=journal)
    elif vector.mode == "normalize":
        points = normalize_sequence(vector.items, vector.baseline, vector.calendar,
                                    length=vector.length, rules=rules, journal=journal)
    else:
        raise ValueError("unknown vector mode: " + repr(vector.mode))
    return points, journal


def check_vector(vector: GateVector, rules: QuantRules = DEFAULT_QUANT_RULES) -> VectorOutcome:
    first, first_journal = _execute(vector, rules)
    second, second_journal = _execute(vector, rules)

    failures: List[str] = []
    report = audit_sequence(first, vector.baseline, vector.length, rules)
    for violation in report.violations:
        failures.append(f"{violation.check} age={violation.age}: {violation.detail}")

    fingerprint = fingerprint_points(first)
    if fingerprint != fingerprint_points(second):
        failures.append("sequence fingerprint differs between runs")
    if first_journal.chain_head() != second_journal.chain_head():
        failures.append("journal chain head differs between runs")
    if not first_journal.verify_integrity().valid:
        failures.append("journal chain failed verification")

    return VectorOutcome(
        vector_id=vector.vector_id,
        passed=not failures,
        fingerprint=fingerprint,
        journal_head=first_journal.chain_head(),
        failures=tuple(failures),
    )


def run_gate(
    vectors: Sequence[GateVector] = GATE_VECTORS,
    rules: QuantRules = DEFAULT_QUANT_RULES,
) -> Tuple[VectorOutcome, ...]:
    return tuple(check_vector(v, rules) for v in vectors)


def main() -> int:
    """
    Run the gate and return an exit code.

    Returns:
        0 if every vector passes.
        1 if any vector fails, or an exception occurs.
    """
    try:
        print(f"DETERMINISM-GATE: rules fingerprint {fingerprint_rules(DEFAULT_QUANT_RULES)}")
        outcomes = run_gate()
    except Exception as exc:  # noqa: BLE001
        print(f"DETERMINISM-GATE EXCEPTION: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    failed = [o for o in outcomes if not o.passed]
    for outcome in outcomes:
        status = "PASS" if outcome.passed else "FAIL"
        print(f"  [{status}] {outcome.vector_id} {outcome.fingerprint[:16]}")
        for failure in outcome.failures:
            print(f"         {failure}", file=sys.stderr)

    if failed:
        print(f"DETERMINISM-GATE: {len(failed)}/{len(outcomes)} vector(s) failed. Merge BLOCKED.",
              file=sys.stderr)
        return 1
    print(f"DETERMINISM-GATE: {len(outcomes)} vector(s) PASS. Merge permitted.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
