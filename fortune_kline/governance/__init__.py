# fortune_kline/governance/__init__.py
# Version: 1.0.0

from fortune_kline.governance.policy_validator import (
    validate_walk_request,
    PolicyValidationResult,
    PolicyViolation,
)
from fortune_kline.governance.exceptions import InvalidWalkRequestError

__all__ = [
    "validate_walk_request",
    "PolicyValidationResult",
    "PolicyViolation",
    "InvalidWalkRequestError",
]
