# =============================================================================
# FORTUNE-KLINE v1.0.0 -- DETERMINISM GATE TESTS
# File:   tests/unit/verification/test_determinism_gate.py
# =============================================================================

import dataclasses

import pytest

import fortune_kline.verification.determinism_gate as gate
from fortune_kline.verification import GATE_VECTORS, check_vector, run_ci_gate, run_gate


class TestVectors:

    def test_ids_unique(self):
        ids = [v.vector_id for v in GATE_VECTORS]
        assert len(ids) == len(set(ids))

    def test_both_modes_covered(self):
        assert {v.mode for v in GATE_VECTORS} == {"build", "normalize"}

    @pytest.mark.parametrize("vector", GATE_VECTORS, ids=lambda v: v.vector_id)
    def test_each_vector_passes(self, vector):
        outcome = check_vector(vector)
        assert outcome.passed, outcome.failures
        assert len(outcome.fingerprint) == 64

    def test_unknown_mode_raises(self):
        bad = dataclasses.replace(GATE_VECTORS[0], mode="replay")
        with pytest.raises(ValueError, match="replay"):
            check_vector(bad)


class TestRunGate:

    def test_all_pass(self):
        outcomes = run_gate()
        assert len(outcomes) == len(GATE_VECTORS)
        assert all(o.passed for o in outcomes)

    def test_fingerprints_stable_across_runs(self):
        first = [o.fingerprint for o in run_gate()]
        second = [o.fingerprint for o in run_gate()]
        assert first == second

    def test_vectors_produce_distinct_sequences(self):
        fingerprints = [o.fingerprint for o in run_gate()]
        assert len(set(fingerprints)) == len(fingerprints)


class TestMain:

    def test_main_returns_zero(self, capsys):
        assert gate.main() == 0
        out = capsys.readouterr().out
        assert "rules fingerprint" in out
        assert "PASS" in out

    def test_alias(self):
        assert run_ci_gate is gate.main

    def test_exception_returns_one(self, monkeypatch, capsys):
        def _boom():
            raise RuntimeError("boom")

        monkeypatch.setattr(gate, "run_gate", _boom)
        assert gate.main() == 1
        assert "boom" in capsys.readouterr().err

    def test_failed_vector_returns_one(self, monkeypatch, capsys):
        failing = gate.VectorOutcome("X-01", False, "0" * 64, "0" * 64, ("forced",))
        monkeypatch.setattr(gate, "run_gate", lambda: (failing,))
        assert gate.main() == 1
        assert "BLOCKED" in capsys.readouterr().err
