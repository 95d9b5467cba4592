# =============================================================================
# FORTUNE-KLINE v1.0.0 -- NOISE SOURCES
# File:   fortune_kline/core/noise.py
# =============================================================================
#
# SCOPE
# -----
# Injectable, deterministic noise for the rule-driven walk. A noise source
# maps an age to a draw in [0, 1); the delta calculator scales the draw into
# [noise_low, noise_high].
#
# DETERMINISM CONSTRAINTS
# -----------------------
# DET-01  No random module, no process-global RNG state.
# DET-02  draw(age) is a pure function of (seed, age): call order and call
#         count never change a draw.
# =============================================================================

from __future__ import annotations

import hashlib
import math
from typing import Protocol, Union

from fortune_kline.utils.constants import DEFAULT_NOISE_SEED
from .exceptions import KLineValidationError

# 53 bits fit exactly in a float mantissa.
_MANTISSA_BITS = 53
_SCALE = float(1 << _MANTISSA_BITS)


class NoiseSource(Protocol):
    def draw(self, age: int) -> float:
        """Return a value in [0.0, 1.0) for this age."""
        ...


class SeededNoiseSource:
    """
    SHA-256 keyed noise.

    The seed may be an int or a string (e.g. a request id). Two sources with
    the same seed produce identical draws for every age.
    """

    def __init__(self, seed: Union[int, str] = DEFAULT_NOISE_SEED) -> None:
        if isinstance(seed, bool) or not isinstance(seed, (int, str)):
            raise KLineValidationError(
                field_name="seed", value=seed, constraint="must be an int or str",
            )
        self._seed = seed

    @property
    def seed(self) -> Union[int, str]:
        return self._seed

    def draw(self, age: int) -> float:
        payload = (str(self._seed) + "|" + str(age)).encode("utf-8")
        digest = hashlib.sha256(payload).digest()
        bits = int.from_bytes(digest[:8], "big") >> (64 - _MANTISSA_BITS)
        return bits / _SCALE

    def __repr__(self) -> str:
        return "SeededNoiseSource(seed=" + repr(self._seed) + ")"


class FixedNoiseSource:
    """Constant draw for fixtures. FixedNoiseSource(0.5) yields factor 1.0 with default rules."""

    def __init__(self, value: float) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise KLineValidationError(
                field_name="value", value=value, constraint="must be a finite real number",
            )
        if not (0.0 <= value < 1.0):
            raise KLineValidationError(
                field_name="value", value=value, constraint="must be in [0.0, 1.0)",
            )
        self._value = float(value)

    def draw(self, age: int) -> float:
        return self._value

    def __repr__(self) -> str:
        return "FixedNoiseSource(value=" + repr(self._value) + ")"


def noise_factor(draw: float, low: float, high: float) -> float:
    """
    Scale a [0, 1) draw into [low, high].

    Out-of-range or non-finite draws from a misbehaving source are clamped
    rather than propagated.
    """
    if not isinstance(draw, (int, float)) or not math.isfinite(draw):
        draw = 0.5
    draw = min(1.0, max(0.0, float(draw)))
    return low + (high - low) * draw


__all__ = [
    "NoiseSource",
    "SeededNoiseSource",
    "FixedNoiseSource",
    "noise_factor",
]
