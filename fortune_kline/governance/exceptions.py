# fortune_kline/governance/exceptions.py
# Version: 1.0.0

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fortune_kline.governance.policy_validator import PolicyValidationResult


class InvalidWalkRequestError(Exception):
    """
    Raised by the public entry points when validate_walk_request() returns
    blocking violations.

    Attributes
    ----------
    result : PolicyValidationResult
    blocking_violations : tuple
    """

    def __init__(self, result: "PolicyValidationResult") -> None:
        self.result = result
        self.blocking_violations = result.blocking_violations
        lines = [
            f"Walk request rejected: "
            f"{len(result.blocking_violations)} blocking violation(s) detected.",
        ]
        for v in result.blocking_violations:
            lines.append(f"  [{v.rule_id}] {v.field_name}: {v.message}")
        super().__init__("\n".join(lines))
