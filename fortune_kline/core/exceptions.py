# =============================================================================
# FORTUNE-KLINE v1.0.0 -- SEQUENCE ENGINE
# File:   fortune_kline/core/exceptions.py
# =============================================================================
#
# SCOPE
# -----
# Exception hierarchy for the sequence engine. All exceptions are pure value
# objects: no side effects, no journal writes, no I/O of any kind.
#
# EXCEPTION HIERARCHY
# -------------------
#   KLineError(Exception)                    -- base; never raised directly
#     KLineNumericalError(KLineError)        -- NaN / Inf in a numeric field
#     KLineValidationError(KLineError)       -- range / sign / type violation
#     KLineConsistencyError(KLineError)      -- cross-field logic violation
#     KLineInvariantError(KLineError)        -- output point breaks a sequence
#                                               invariant (engine defect)
#     RuleTableLoadError(KLineError)         -- rule table cannot be built;
#                                               fatal at startup
#
# WHAT IS NOT AN EXCEPTION
# ------------------------
# Missing, partial or contradictory per-age data never raises. The builder
# and normalizer degrade such input to documented defaults. Only invalid
# configuration and invalid request-level arguments surface to callers.
#
# MESSAGE CONTRACT
# ----------------
# Every exception message is:
#   - Deterministic: identical inputs -> identical message string.
#   - Explicit: field name and violating value always included.
#   - ASCII-safe.
#   - Non-empty.
# =============================================================================

from __future__ import annotations

from typing import Any


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class KLineError(Exception):
    """
    Base class for all sequence engine exceptions.

    Never raised directly. Use a concrete subclass.

    Attributes:
        field_name:  Name of the offending field, or empty string when the
                     violation is not tied to a single field.
        value:       The offending value, or None for relational violations.
        message:     Human-readable description. Always non-empty.
    """

    def __init__(
        self,
        message:    str,
        field_name: str = "",
        value:      Any = None,
    ) -> None:
        if not isinstance(message, str) or not message:
            raise ValueError(
                "KLineError: message must be a non-empty string"
            )
        if not isinstance(field_name, str):
            raise ValueError(
                "KLineError: field_name must be a string"
            )
        super().__init__(message)
        self.field_name: str = field_name
        self.value:      Any = value
        self.message:    str = message

    def __repr__(self) -> str:
        return (
            self.__class__.__name__
            + "(field_name=" + repr(self.field_name)
            + ", value=" + repr(self.value)
            + ", message=" + repr(self.message)
            + ")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KLineError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.field_name == other.field_name
            and self.value == other.value
            and self.message == other.message
        )


# =============================================================================
# CONCRETE EXCEPTIONS
# =============================================================================

class KLineNumericalError(KLineError):
    """
    Raised when a validated numeric field contains NaN or Inf.

    First validation gate. No range check is attempted after it fires.

    Message format:
        "KLineNumericalError: field '<field_name>' contains non-finite
         value: <value>. NaN and Inf are not permitted."
    """

    def __init__(self, field_name: str, value: float) -> None:
        if not field_name:
            raise ValueError(
                "KLineNumericalError: field_name must be a non-empty string"
            )
        message = (
            "KLineNumericalError: field '"
            + field_name
            + "' contains non-finite value: "
            + repr(value)
            + ". NaN and Inf are not permitted."
        )
        super().__init__(message=message, field_name=field_name, value=value)


class KLineValidationError(KLineError):
    """
    Raised when a field value violates a range, sign, type, or membership
    constraint.

    Message format:
        "KLineValidationError: field '<field_name>' violates constraint
         '<constraint>': got <value>."

    Args:
        field_name:  Name of the offending field. Non-empty.
        value:       The offending value.
        constraint:  Human-readable constraint, e.g. "must be in (0.0, 1.0)".
    """

    def __init__(
        self,
        field_name:  str,
        value:       Any,
        constraint:  str,
    ) -> None:
        if not field_name:
            raise ValueError(
                "KLineValidationError: field_name must be a non-empty string"
            )
        if not isinstance(constraint, str) or not constraint:
            raise ValueError(
                "KLineValidationError: constraint must be a non-empty string"
            )
        message = (
            "KLineValidationError: field '"
            + field_name
            + "' violates constraint '"
            + constraint
            + "': got "
            + repr(value)
            + "."
        )
        super().__init__(message=message, field_name=field_name, value=value)
        self.constraint: str = constraint


class KLineConsistencyError(KLineError):
    """
    Raised when two fields are individually valid but together violate a
    cross-field invariant (e.g. low_threshold >= high_threshold).

    The base field_name / value are set to field_a / value_a; field_b and
    value_b are available as additional attributes.
    """

    def __init__(
        self,
        field_a:               str,
        value_a:               Any,
        field_b:               str,
        value_b:               Any,
        invariant_description: str,
    ) -> None:
        if not field_a:
            raise ValueError(
                "KLineConsistencyError: field_a must be non-empty"
            )
        if not field_b:
            raise ValueError(
                "KLineConsistencyError: field_b must be non-empty"
            )
        if not isinstance(invariant_description, str) or not invariant_description:
            raise ValueError(
                "KLineConsistencyError: invariant_description must be non-empty"
            )
        message = (
            "KLineConsistencyError: cross-field invariant violated -- "
            + invariant_description
            + ". Field '"
            + field_a
            + "' = "
            + repr(value_a)
            + ", field '"
            + field_b
            + "' = "
            + repr(value_b)
            + "."
        )
        super().__init__(message=message, field_name=field_a, value=value_a)
        self.field_a:               str = field_a
        self.value_a:               Any = value_a
        self.field_b:               str = field_b
        self.value_b:               Any = value_b
        self.invariant_description: str = invariant_description


class KLineInvariantError(KLineError):
    """
    Raised when a KLinePoint would be constructed in violation of a sequence
    invariant (bounds, score identity, trend consistency).

    The walk never produces such a point; this error marks an engine defect
    rather than bad input.
    """

    def __init__(self, age: int, invariant: str, detail: str) -> None:
        if not invariant:
            raise ValueError(
                "KLineInvariantError: invariant must be non-empty"
            )
        message = (
            "KLineInvariantError: point at age "
            + repr(age)
            + " violates invariant '"
            + invariant
            + "': "
            + detail
            + "."
        )
        super().__init__(message=message, field_name=invariant, value=age)
        self.age:       int = age
        self.invariant: str = invariant


class RuleTableLoadError(KLineError):
    """
    Raised by load_quant_rules() when a rule table cannot be built.

    Fatal: a process that cannot load its rule table must not serve any
    request. The underlying validation error, if any, is kept on `cause`.
    """

    def __init__(self, reason: str, cause: Any = None) -> None:
        if not isinstance(reason, str) or not reason:
            raise ValueError(
                "RuleTableLoadError: reason must be a non-empty string"
            )
        message = "RuleTableLoadError: " + reason
        super().__init__(message=message, field_name="", value=cause)
        self.cause: Any = cause


# =============================================================================
# MODULE __all__
# =============================================================================

__all__ = [
    "KLineError",
    "KLineNumericalError",
    "KLineValidationError",
    "KLineConsistencyError",
    "KLineInvariantError",
    "RuleTableLoadError",
]
