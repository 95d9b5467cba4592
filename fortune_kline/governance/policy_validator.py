# fortune_kline/governance/policy_validator.py
# Version: 1.0.0

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import List
from fortune_kline.utils.constants import (
    BASELINE_CEILING,
    BASELINE_FLOOR,
    MAX_SEQUENCE_LENGTH,
    REPAIR_SEQUENCE_LENGTH,
    RULE_SEQUENCE_LENGTH,
)

_LENGTH_MINIMUM: int             = 1
_BIRTH_YEAR_MIN: int             = 1
_BIRTH_YEAR_MAX: int             = 9999
_STANDARD_LENGTHS: frozenset     = frozenset({REPAIR_SEQUENCE_LENGTH, RULE_SEQUENCE_LENGTH})


@dataclass(frozen=True)
class PolicyViolation:
    rule_id:        str
    field_name:     str
    observed_value: object
    message:        str
    is_blocking:    bool


@dataclass(frozen=True)
class PolicyValidationResult:
    is_compliant:        bool
    violations:          tuple
    warnings:            tuple
    blocking_violations: tuple
    validated_fields:    tuple


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_walk_request(
    baseline: float,
    length: int,
    birth_year: int,
) -> PolicyValidationResult:
    """
    Request-level gate shared by build and normalize.

    GOV-01  baseline finite real (blocking); outside the baseline band
            (advisory, it is clamped).
    GOV-02  length int in [1, MAX_SEQUENCE_LENGTH] (blocking); a length other
            than the two standard ones is advisory.
    GOV-03  birth_year int in [1, 9999] (blocking).
    """
    violations: List[PolicyViolation] = []
    validated_fields: List[str] = []

    validated_fields.append("baseline")
    if isinstance(baseline, bool) or not isinstance(baseline, (int, float)):
        violations.append(PolicyViolation("GOV-01", "baseline", baseline,
            f"baseline must be numeric; got: {type(baseline).__name__}.", True))
    elif not math.isfinite(baseline):
        violations.append(PolicyViolation("GOV-01", "baseline", baseline,
            f"baseline must be finite; got: {baseline}.", True))
    elif not (BASELINE_FLOOR <= baseline <= BASELINE_CEILING):
        violations.append(PolicyViolation("GOV-01", "baseline", baseline,
            f"baseline {baseline} lies outside [{BASELINE_FLOOR}, {BASELINE_CEILING}] "
            f"and will be clamped.", False))

    validated_fields.append("length")
    if not _is_int(length):
        violations.append(PolicyViolation("GOV-02", "length", length,
            f"length must be an integer; got: {type(length).__name__}.", True))
    elif not (_LENGTH_MINIMUM <= length <= MAX_SEQUENCE_LENGTH):
        violations.append(PolicyViolation("GOV-02", "length", length,
            f"length must be in [{_LENGTH_MINIMUM}, {MAX_SEQUENCE_LENGTH}]; got: {length}.", True))
    elif length not in _STANDARD_LENGTHS:
        violations.append(PolicyViolation("GOV-02", "length", length,
            f"length={length} is non-standard. "
            f"Standard values: {sorted(_STANDARD_LENGTHS)}. Accepted, flagged for audit.", False))

    validated_fields.append("birth_year")
    if not _is_int(birth_year):
        violations.append(PolicyViolation("GOV-03", "birth_year", birth_year,
            f"birth_year must be an integer; got: {type(birth_year).__name__}.", True))
    elif not (_BIRTH_YEAR_MIN <= birth_year <= _BIRTH_YEAR_MAX):
        violations.append(PolicyViolation("GOV-03", "birth_year", birth_year,
            f"birth_year must be in [{_BIRTH_YEAR_MIN}, {_BIRTH_YEAR_MAX}]; got: {birth_year}.", True))

    blocking = tuple(v for v in violations if v.is_blocking)
    advisory = tuple(v for v in violations if not v.is_blocking)
    return PolicyValidationResult(
        is_compliant=len(blocking) == 0,
        violations=tuple(violations),
        warnings=advisory,
        blocking_violations=blocking,
        validated_fields=tuple(validated_fields),
    )
