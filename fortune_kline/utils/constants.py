# fortune_kline/utils/constants.py
# Version: 1.0.0
# FIXED QUANTIZATION CONSTANTS -- NEVER OVERWRITE AT RUNTIME.
# These values seed DEFAULT_QUANT_RULES (fortune_kline.core.rules). Any
# change alters every produced sequence for a given seed; the determinism
# gate vectors must be re-baselined with it.
#
# Standard import pattern:
#   from fortune_kline.utils.constants import (
#       DIRECTION_TABLE,
#       BASE_AMPLITUDE,
#       LIFE_PERIOD_MULTIPLIER,
#       RELATION_MULTIPLIER,
#       MAX_STEP_TIERS,
#   )

from fortune_kline.core.domain import (
    Direction,
    EchoClass,
    LifePeriodEffect,
    RelationClass,
    StageBucket,
)


# ---------------------------------------------------------------------------
# DIRECTION TABLE
# ---------------------------------------------------------------------------
# Keys: (LifePeriodEffect, RelationClass). Pairs not listed resolve to
# Direction.OSCILLATE, which the delta calculator turns into a step back
# toward the baseline.

DIRECTION_TABLE: dict = {
    (LifePeriodEffect.SUPPORTIVE, RelationClass.GENERATION):        Direction.UP,
    (LifePeriodEffect.SUPPORTIVE, RelationClass.COMBINE):           Direction.UP,
    (LifePeriodEffect.SUPPORTIVE, RelationClass.HALF_COMBINE):      Direction.OSCILLATE,
    (LifePeriodEffect.ADVERSE,    RelationClass.DOMINATION):        Direction.DOWN,
    (LifePeriodEffect.ADVERSE,    RelationClass.CLASH):             Direction.DOWN,
    (LifePeriodEffect.ADVERSE,    RelationClass.HARM):              Direction.DOWN,
    (LifePeriodEffect.NEUTRAL,    RelationClass.MUTUAL_CLASH):      Direction.OSCILLATE,
    (LifePeriodEffect.NEUTRAL,    RelationClass.MUTUAL_HARM):       Direction.OSCILLATE,
    (LifePeriodEffect.NEUTRAL,    RelationClass.MUTUAL_GENERATION): Direction.OSCILLATE,
    (LifePeriodEffect.NEUTRAL,    RelationClass.NO_RELATION):       Direction.OSCILLATE,
}


# ---------------------------------------------------------------------------
# AMPLITUDE
# ---------------------------------------------------------------------------
# Base amplitude is a ratio of full scale (0..100) per stage bucket.

BASE_AMPLITUDE: dict = {
    StageBucket.CHILDHOOD:    0.05,
    StageBucket.YOUTH:        0.03,
    StageBucket.MIDLIFE:      0.02,
    StageBucket.LATE_MIDLIFE: 0.01,
    StageBucket.OLD_AGE:      0.005,
}

# Inclusive upper age of each bucket; anything above the last is OLD_AGE.
STAGE_BUCKET_BOUNDS: tuple = (
    (20, StageBucket.CHILDHOOD),
    (40, StageBucket.YOUTH),
    (60, StageBucket.MIDLIFE),
    (80, StageBucket.LATE_MIDLIFE),
)

LIFE_PERIOD_MULTIPLIER: dict = {
    LifePeriodEffect.SUPPORTIVE: 1.2,
    LifePeriodEffect.ADVERSE:    1.5,
    LifePeriodEffect.NEUTRAL:    1.0,
}

# Compound MUTUAL_* forms and NO_RELATION carry no extra weight.
RELATION_MULTIPLIER: dict = {
    RelationClass.GENERATION:        1.1,
    RelationClass.DOMINATION:        1.3,
    RelationClass.COMBINE:           1.05,
    RelationClass.CLASH:             1.4,
    RelationClass.HARM:              1.35,
    RelationClass.HALF_COMBINE:      1.02,
    RelationClass.MUTUAL_CLASH:      1.0,
    RelationClass.MUTUAL_HARM:       1.0,
    RelationClass.MUTUAL_GENERATION: 1.0,
    RelationClass.NO_RELATION:       1.0,
}

# Candle bodies are visually too short at raw amplitude; doubled before caps.
BODY_SCALE: float = 2.0

NOISE_LOW:  float = 0.85
NOISE_HIGH: float = 1.15

DEFAULT_NOISE_SEED: int = 42


# ---------------------------------------------------------------------------
# STREAK DECAY
# ---------------------------------------------------------------------------

STREAK_THRESHOLD:  int   = 3
FAVORABLE_DECAY:   float = 0.8
UNFAVORABLE_DECAY: float = 0.7


# ---------------------------------------------------------------------------
# ECHO CLASSES (multiplier, hard ceiling as a fraction of full scale)
# ---------------------------------------------------------------------------

ECHO_MULTIPLIER: dict = {
    EchoClass.SELF_REINFORCEMENT: 1.7,
    EchoClass.SELF_REVERSAL:      1.6,
}

ECHO_CEILING: dict = {
    EchoClass.SELF_REINFORCEMENT: 0.15,
    EchoClass.SELF_REVERSAL:      0.10,
}


# ---------------------------------------------------------------------------
# BOUNDARY REFLECTION
# ---------------------------------------------------------------------------

HIGH_THRESHOLD: float = 0.9    # open/100 at or above -> UP steps damped
HIGH_DAMPING:   float = 0.5
LOW_THRESHOLD:  float = 0.1    # open/100 at or below -> DOWN steps damped
LOW_DAMPING:    float = 0.6


# ---------------------------------------------------------------------------
# MEAN REVERSION
# ---------------------------------------------------------------------------

MEAN_REVERSION_MARGIN: int   = 10
MEAN_REVERSION_FACTOR: float = 0.5


# ---------------------------------------------------------------------------
# PER-AGE VOLATILITY CAP
# ---------------------------------------------------------------------------
# (inclusive upper age, max step). Ages above the last tier use the default.

MAX_STEP_TIERS: tuple = (
    (12, 4),
    (25, 8),
    (45, 12),
    (65, 8),
)
MAX_STEP_DEFAULT: int = 4


# ---------------------------------------------------------------------------
# VALUE DOMAIN
# ---------------------------------------------------------------------------

VALUE_FLOOR:      int = 0
VALUE_CEILING:    int = 100
BASELINE_FLOOR:   int = 20
BASELINE_CEILING: int = 80


# ---------------------------------------------------------------------------
# SEQUENCE LENGTHS
# ---------------------------------------------------------------------------

RULE_SEQUENCE_LENGTH:   int = 100
REPAIR_SEQUENCE_LENGTH: int = 80
MAX_SEQUENCE_LENGTH:    int = 150
