# usage_example.py
# Minimal usage example for fortune_kline.build_sequence.
# This file is not part of the fortune_kline package. For reference only.

from fortune_kline import (
    CalendarContext,
    FixedNoiseSource,
    PeriodBoundary,
    YearlyFact,
    build_sequence,
)
from fortune_kline.core.domain import Judgement, LifePeriodEffect

# Inputs
calendar = CalendarContext(
    birth_year=1990,
    boundaries=(PeriodBoundary(8, "Wu-Yin"), PeriodBoundary(18, "Ji-Mao")),
)
facts = [
    YearlyFact(age=3, life_period_effect=LifePeriodEffect.SUPPORTIVE,
               relation_tags=("generation",), narrative="Support from elders."),
    YearlyFact(age=5, life_period_effect=LifePeriodEffect.ADVERSE,
               relation_tags=("clash",), judgement=Judgement.UNFAVORABLE),
]

# Compute
# FixedNoiseSource(0.5) gives a noise factor of exactly 1.0; omit it to use
# the seeded default.
points = build_sequence(facts, baseline=50, calendar=calendar, length=80,
                        noise=FixedNoiseSource(0.5))

# Inspect
# Ages without a fact oscillate back toward the baseline. Every step before
# age 13 is capped at 4.
for p in points[:6]:
    print(f"{p.age:>2} {p.calendar_year} {p.cycle_label:<9} "
          f"{p.open:>3} -> {p.close:>3} {p.trend.value:<7} {p.narrative}")

# Expected output:
#  1 1990 Geng-Wu    50 ->  54 Bullish Fortune rises this year.
#  2 1991 Xin-Wei    54 ->  50 Bearish Fortune dips this year.
#  3 1992 Ren-Shen   50 ->  54 Bullish Support from elders.
#  4 1993 Gui-You    54 ->  50 Bearish Fortune dips this year.
#  5 1994 Jia-Xu     50 ->  46 Bearish Leaning unfavorable.
#  6 1995 Yi-Hai     46 ->  50 Bullish Fortune rises this year.

# InvalidWalkRequestError examples:
# build_sequence(facts, float("nan"), calendar)          # GOV-01 non-finite baseline
# build_sequence(facts, 50, calendar, length=0)          # GOV-02 length out of range
# build_sequence(facts, 50, CalendarContext(0))          # GOV-03 birth year out of range
