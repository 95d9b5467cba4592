# =============================================================================
# FORTUNE-KLINE v1.0.0 -- QUANTIZATION RULE TABLE
# File:   fortune_kline/core/rules.py
# =============================================================================
#
# SCOPE
# -----
# Immutable configuration object for the sequence engine:
#
#   QuantRules           -- frozen dataclass; a closed set of typed tables.
#   DEFAULT_QUANT_RULES  -- built once at import from utils.constants.
#   load_quant_rules()   -- defaults + overrides -> validated QuantRules,
#                           or RuleTableLoadError (fatal).
#
# The table is constructed once, shared by reference into every walk, and
# never mutated. Mapping fields are wrapped in MappingProxyType so that a
# caller holding a reference cannot edit a live table either.
#
# VALIDATION ORDER (fail-fast, fixed)
# -----------------------------------
#   V1  Finiteness   -- every float scalar and every float table value.
#   V2  Sign / Range -- ratios in (0, 1), multipliers > 0, ints >= 1.
#   V3  Membership   -- every StageBucket / LifePeriodEffect / RelationClass /
#                       EchoClass has a table entry.
#   V4  Cross-field  -- noise_low < noise_high, low_threshold < high_threshold,
#                       baseline band inside value band, ascending age tiers.
#
# INVARIANTS ENFORCED
# -------------------
#   INV-QR-01  base_amplitude values in (0.0, 1.0), one per StageBucket.
#   INV-QR-02  multipliers > 0, one per enum member.
#   INV-QR-03  decay / damping / reversion factors in (0.0, 1.0].
#   INV-QR-04  echo ceilings in (0.0, 1.0], multipliers > 0.
#   INV-QR-05  max_step_tiers strictly ascending by age, steps >= 1.
#   INV-QR-06  value_floor <= baseline_floor < baseline_ceiling <= value_ceiling.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass, fields as dataclass_fields
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from fortune_kline.utils import constants as _c
from .domain import (
    Direction,
    EchoClass,
    LifePeriodEffect,
    RelationClass,
    StageBucket,
    _check_finite,
    _check_non_negative_int,
    _check_positive,
    _check_positive_int,
    _check_unit_interval_open_closed,
    _check_unit_interval_open_open,
)
from .exceptions import (
    KLineConsistencyError,
    KLineError,
    KLineValidationError,
    RuleTableLoadError,
)


# =============================================================================
# SECTION 1 -- QUANT RULES
# =============================================================================

@dataclass(frozen=True)
class QuantRules:
    """
    Immutable quantization rule table.

    Every field is required; DEFAULT_QUANT_RULES supplies the production
    values. Use load_quant_rules() to derive a variant.
    """

    direction_table:        Mapping[Tuple[LifePeriodEffect, RelationClass], Direction]
    base_amplitude:         Mapping[StageBucket, float]
    stage_bucket_bounds:    Tuple[Tuple[int, StageBucket], ...]
    life_period_multiplier: Mapping[LifePeriodEffect, float]
    relation_multiplier:    Mapping[RelationClass, float]
    body_scale:             float
    noise_low:              float
    noise_high:             float
    streak_threshold:       int
    favorable_decay:        float
    unfavorable_decay:      float
    echo_multiplier:        Mapping[EchoClass, float]
    echo_ceiling:           Mapping[EchoClass, float]
    high_threshold:         float
    high_damping:           float
    low_threshold:          float
    low_damping:            float
    mean_reversion_margin:  int
    mean_reversion_factor:  float
    max_step_tiers:         Tuple[Tuple[int, int], ...]
    max_step_default:       int
    value_floor:            int
    value_ceiling:          int
    baseline_floor:         int
    baseline_ceiling:       int

    def __post_init__(self) -> None:
        # Freeze mapping fields. object.__setattr__ is the sanctioned way to
        # normalise fields of a frozen dataclass during construction.
        for name in ("direction_table", "base_amplitude", "life_period_multiplier",
                     "relation_multiplier", "echo_multiplier", "echo_ceiling"):
            value = getattr(self, name)
            if not isinstance(value, Mapping):
                raise KLineValidationError(
                    field_name=name, value=value, constraint="must be a mapping",
                )
            object.__setattr__(self, name, MappingProxyType(dict(value)))
        object.__setattr__(self, "stage_bucket_bounds", tuple(self.stage_bucket_bounds))
        object.__setattr__(self, "max_step_tiers", tuple(self.max_step_tiers))

        # --- V1: finiteness on all float scalars ---
        _FLOAT_SCALARS = (
            ("body_scale",            self.body_scale),
            ("noise_low",             self.noise_low),
            ("noise_high",            self.noise_high),
            ("favorable_decay",       self.favorable_decay),
            ("unfavorable_decay",     self.unfavorable_decay),
            ("high_threshold",        self.high_threshold),
            ("high_damping",          self.high_damping),
            ("low_threshold",         self.low_threshold),
            ("low_damping",           self.low_damping),
            ("mean_reversion_factor", self.mean_reversion_factor),
        )
        for fname, fvalue in _FLOAT_SCALARS:
            _check_finite(fname, fvalue)

        # --- V2: scalar ranges ---
        _check_positive("body_scale", self.body_scale)
        _check_positive("noise_low", self.noise_low)
        _check_positive("noise_high", self.noise_high)
        _check_unit_interval_open_closed("favorable_decay", self.favorable_decay)
        _check_unit_interval_open_closed("unfavorable_decay", self.unfavorable_decay)
        _check_unit_interval_open_open("high_threshold", self.high_threshold)
        _check_unit_interval_open_closed("high_damping", self.high_damping)
        _check_unit_interval_open_open("low_threshold", self.low_threshold)
        _check_unit_interval_open_closed("low_damping", self.low_damping)
        _check_unit_interval_open_closed("mean_reversion_factor", self.mean_reversion_factor)
        _check_non_negative_int("streak_threshold", self.streak_threshold)
        _check_non_negative_int("mean_reversion_margin", self.mean_reversion_margin)
        _check_positive_int("max_step_default", self.max_step_default)
        for name in ("value_floor", "value_ceiling", "baseline_floor", "baseline_ceiling"):
            _check_non_negative_int(name, getattr(self, name))

        # --- V2 + V3: tables ---
        self._check_table("base_amplitude", self.base_amplitude, StageBucket,
                          _check_unit_interval_open_open)
        self._check_table("life_period_multiplier", self.life_period_multiplier,
                          LifePeriodEffect, _check_positive)
        self._check_table("relation_multiplier", self.relation_multiplier,
                          RelationClass, _check_positive)
        self._check_table("echo_multiplier", self.echo_multiplier, EchoClass, _check_positive)
        self._check_table("echo_ceiling", self.echo_ceiling, EchoClass,
                          _check_unit_interval_open_closed)
        for key, direction in self.direction_table.items():
            if (not isinstance(key, tuple) or len(key) != 2
                    or not isinstance(key[0], LifePeriodEffect)
                    or not isinstance(key[1], RelationClass)):
                raise KLineValidationError(
                    field_name="direction_table", value=key,
                    constraint="keys must be (LifePeriodEffect, RelationClass) pairs",
                )
            if not isinstance(direction, Direction):
                raise KLineValidationError(
                    field_name="direction_table", value=direction,
                    constraint="values must be Direction members",
                )

        # --- V4: cross-field ---
        if self.noise_low >= self.noise_high:
            raise KLineConsistencyError(
                "noise_low", self.noise_low, "noise_high", self.noise_high,
                "noise_low must be strictly less than noise_high",
            )
        if self.low_threshold >= self.high_threshold:
            raise KLineConsistencyError(
                "low_threshold", self.low_threshold, "high_threshold", self.high_threshold,
                "low_threshold must be strictly less than high_threshold",
            )
        if not (self.value_floor <= self.baseline_floor < self.baseline_ceiling <= self.value_ceiling):
            raise KLineConsistencyError(
                "baseline_floor", self.baseline_floor, "baseline_ceiling", self.baseline_ceiling,
                "baseline band must be non-empty and lie inside [value_floor, value_ceiling]",
            )
        self._check_ascending_tiers("max_step_tiers", self.max_step_tiers, int)
        self._check_ascending_tiers("stage_bucket_bounds", self.stage_bucket_bounds, StageBucket)

    # -----------------------------------------------------------------------
    # Validation helpers
    # -----------------------------------------------------------------------

    @staticmethod
    def _check_table(name: str, table: Mapping, enum_type: type, range_check) -> None:
        for member in enum_type:
            if member not in table:
                raise KLineValidationError(
                    field_name=name, value=member,
                    constraint="missing entry for " + enum_type.__name__ + "." + member.name,
                )
        for key, value in table.items():
            _check_finite(name + "[" + str(getattr(key, "name", key)) + "]", value)
            range_check(name + "[" + str(getattr(key, "name", key)) + "]", value)

    @staticmethod
    def _check_ascending_tiers(name: str, tiers: tuple, value_type: type) -> None:
        previous = 0
        for tier in tiers:
            if not isinstance(tier, tuple) or len(tier) != 2:
                raise KLineValidationError(
                    field_name=name, value=tier, constraint="entries must be (age, value) pairs",
                )
            upper_age, value = tier
            _check_positive_int(name + ".age", upper_age)
            if upper_age <= previous:
                raise KLineConsistencyError(
                    name + ".age", upper_age, name + ".previous_age", previous,
                    "tier ages must be strictly ascending",
                )
            if value_type is int:
                _check_positive_int(name + ".value", value)
            elif not isinstance(value, value_type):
                raise KLineValidationError(
                    field_name=name + ".value", value=value,
                    constraint="must be a " + value_type.__name__ + " member",
                )
            previous = upper_age

    # -----------------------------------------------------------------------
    # Lookups
    # -----------------------------------------------------------------------

    def stage_bucket(self, age: int) -> StageBucket:
        """Coarse life-stage bucket for a 1-based age."""
        for upper_age, bucket in self.stage_bucket_bounds:
            if age <= upper_age:
                return bucket
        return StageBucket.OLD_AGE

    def max_step_by_age(self, age: int) -> int:
        """Largest permitted |close - open| at this age."""
        for upper_age, step in self.max_step_tiers:
            if age <= upper_age:
                return step
        return self.max_step_default

    def direction_for(self, effect: LifePeriodEffect, relation: RelationClass) -> Direction:
        """Rule-table direction; unlisted pairs oscillate."""
        return self.direction_table.get((effect, relation), Direction.OSCILLATE)

    def clamp_baseline(self, baseline: float) -> int:
        """Round half up, then clamp into [baseline_floor, baseline_ceiling]."""
        return max(self.baseline_floor, min(self.baseline_ceiling, round_half_up(baseline)))

    def clamp_value(self, value: int) -> int:
        return max(self.value_floor, min(self.value_ceiling, value))


# =============================================================================
# SECTION 2 -- SHARED ARITHMETIC
# =============================================================================

def round_half_up(value: float) -> int:
    """
    Round to the nearest int, halves away from zero for positives.

    Python's round() is banker's rounding; step sizes use half-up so that a
    raw 2.5 becomes 3, not 2.
    """
    if value >= 0:
        return int(value + 0.5)
    return -int(-value + 0.5)


# =============================================================================
# SECTION 3 -- DEFAULTS AND LOADER
# =============================================================================

def _default_fields() -> dict:
    return dict(
        direction_table=_c.DIRECTION_TABLE,
        base_amplitude=_c.BASE_AMPLITUDE,
        stage_bucket_bounds=_c.STAGE_BUCKET_BOUNDS,
        life_period_multiplier=_c.LIFE_PERIOD_MULTIPLIER,
        relation_multiplier=_c.RELATION_MULTIPLIER,
        body_scale=_c.BODY_SCALE,
        noise_low=_c.NOISE_LOW,
        noise_high=_c.NOISE_HIGH,
        streak_threshold=_c.STREAK_THRESHOLD,
        favorable_decay=_c.FAVORABLE_DECAY,
        unfavorable_decay=_c.UNFAVORABLE_DECAY,
        echo_multiplier=_c.ECHO_MULTIPLIER,
        echo_ceiling=_c.ECHO_CEILING,
        high_threshold=_c.HIGH_THRESHOLD,
        high_damping=_c.HIGH_DAMPING,
        low_threshold=_c.LOW_THRESHOLD,
        low_damping=_c.LOW_DAMPING,
        mean_reversion_margin=_c.MEAN_REVERSION_MARGIN,
        mean_reversion_factor=_c.MEAN_REVERSION_FACTOR,
        max_step_tiers=_c.MAX_STEP_TIERS,
        max_step_default=_c.MAX_STEP_DEFAULT,
        value_floor=_c.VALUE_FLOOR,
        value_ceiling=_c.VALUE_CEILING,
        baseline_floor=_c.BASELINE_FLOOR,
        baseline_ceiling=_c.BASELINE_CEILING,
    )


def load_quant_rules(overrides: Optional[Mapping[str, Any]] = None) -> QuantRules:
    """
    Build a validated QuantRules from the fixed defaults plus overrides.

    Mapping-valued overrides are merged entry-wise over the default table;
    scalar and tuple overrides replace the default outright.

    Raises:
        RuleTableLoadError: unknown override key, or any KLineError raised
            while validating the resulting table. The original error is
            kept on RuleTableLoadError.cause.
    """
    values = _default_fields()
    if overrides:
        known = {f.name for f in dataclass_fields(QuantRules)}
        unknown = sorted(str(k) for k in overrides if k not in known)
        if unknown:
            raise RuleTableLoadError("unknown rule field(s): " + ", ".join(unknown))
        for key, value in overrides.items():
            if isinstance(values[key], Mapping) and isinstance(value, Mapping):
                merged = dict(values[key])
                merged.update(value)
                values[key] = merged
            else:
                values[key] = value
    try:
        return QuantRules(**values)
    except KLineError as exc:
        raise RuleTableLoadError(exc.message, cause=exc) from exc


DEFAULT_QUANT_RULES: QuantRules = load_quant_rules()


# =============================================================================
# SECTION 4 -- MODULE __all__
# =============================================================================

__all__ = [
    "QuantRules",
    "DEFAULT_QUANT_RULES",
    "load_quant_rules",
    "round_half_up",
]
