import pytest

from fortune_kline.core.calendar import CalendarContext, PeriodBoundary
from fortune_kline.core.domain import (
    Judgement,
    LifePeriodEffect,
    YearlyFact,
)
from fortune_kline.core.logging_layer import EventLogger
from fortune_kline.core.noise import FixedNoiseSource


@pytest.fixture
def calendar_1990() -> CalendarContext:
    """Born 1990; first life period from age 8, second from age 18."""
    return CalendarContext(
        birth_year=1990,
        boundaries=(
            PeriodBoundary(start_age=8, label="Wu-Yin"),
            PeriodBoundary(start_age=18, label="Ji-Mao"),
        ),
    )


@pytest.fixture
def unit_noise() -> FixedNoiseSource:
    """Draw 0.5 -> noise factor exactly 1.0 with the default [0.85, 1.15] band."""
    return FixedNoiseSource(0.5)


@pytest.fixture
def journal() -> EventLogger:
    return EventLogger()


@pytest.fixture
def supportive_fact_at_10() -> YearlyFact:
    return YearlyFact(
        age=10,
        life_period_effect=LifePeriodEffect.SUPPORTIVE,
        relation_tags=("generation",),
        judgement=Judgement.FAVORABLE,
        narrative="A helpful mentor appears.",
    )
