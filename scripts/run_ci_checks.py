#!/usr/bin/env python3
# =============================================================================
# FORTUNE-KLINE v1.0.0 -- CI CHECKS RUNNER
# File:   scripts/run_ci_checks.py
# =============================================================================
#
# PURPOSE
# -------
# Runs the full CI gate in two sequential stages:
#   Stage 1: pytest with coverage over the fortune_kline package
#   Stage 2: determinism gate (fixed vectors, run twice, audited)
#
# Exit codes:
#   0 -- All stages passed.
#   1 -- Stage 1 (pytest) failed.
#   2 -- Stage 2 (determinism gate) failed.
#
# Usage:
#   python scripts/run_ci_checks.py
# =============================================================================

from __future__ import annotations

import subprocess
import sys
import pathlib

_REPO_ROOT = pathlib.Path(__file__).parent.parent
_PYTHON    = sys.executable
_COVERAGE_FLOOR = 90


def _separator(char: str = "=", width: int = 72) -> str:
    return char * width


def _run(cmd: list, label: str) -> int:
    """Run a subprocess command with live output and return its exit code."""
    print(_separator())
    print(f"CI STAGE: {label}")
    print(f"CMD:      {' '.join(cmd)}")
    print(_separator("-"))
    sys.stdout.flush()

    proc = subprocess.run(cmd, cwd=str(_REPO_ROOT))
    return proc.returncode


def _fail(stage: str, rc: int, code: int) -> int:
    print(_separator())
    print(f"CI RESULT: FAIL  [stage={stage}  exit_code={rc}]")
    print(f"Merge BLOCKED: {stage} stage did not pass.")
    print(_separator())
    sys.stdout.flush()
    return code


def main() -> int:
    print(_separator())
    print("FORTUNE-KLINE CI GATE -- starting")
    print(_separator())
    sys.stdout.flush()

    pytest_rc = _run(
        [_PYTHON, "-m", "pytest",
         "--cov=fortune_kline", "--cov-report=term-missing",
         f"--cov-fail-under={_COVERAGE_FLOOR}"],
        f"pytest (tests + coverage >= {_COVERAGE_FLOOR}%)",
    )
    if pytest_rc != 0:
        return _fail("pytest", pytest_rc, 1)

    print(_separator("-"))
    print("CI STAGE pytest: PASS")
    sys.stdout.flush()

    gate_rc = _run(
        [_PYTHON, "-m", "fortune_kline.verification.determinism_gate"],
        "determinism gate",
    )
    if gate_rc != 0:
        return _fail("determinism", gate_rc, 2)

    print(_separator("-"))
    print("CI STAGE determinism: PASS")
    print(_separator())
    print("CI RESULT: PASS  [stages=pytest,determinism]")
    print("Merge permitted.")
    print(_separator())
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
