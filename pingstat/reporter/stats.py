# pingstat/reporter/stats.py
import math
from decimal import ROUND_DOWN, Decimal
from typing import Sequence

from pingstat.schemas import StatisticsSummary

AVERAGE_DECIMALS = 4
DEVIATION_DECIMALS = 4
PERCENT_DECIMALS = 1


def cut_number(value: float, decimals: int = 0) -> float:
    """
    Truncate toward zero at `decimals` places, never rounding.

    Goes through the shortest decimal repr of the float so values such as
    0.29 are not cut to 0.28 by binary representation error.
    """
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"cannot truncate {value!r}")
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_DOWN))


def success_percent(success_count: int, attempts: int) -> float:
    if attempts == 0:
        return 0.0
    return cut_number(success_count / attempts * 100, 0)


def _percent_of(value: float, average: float) -> float:
    if average <= 0:
        return 0.0
    return cut_number(value / average * 100, PERCENT_DECIMALS)


def summarize(round_trips: Sequence[int]) -> StatisticsSummary:
    """Sample statistics over round trips in milliseconds.

    With no samples every field is None. With one sample variance and
    standard deviation are exactly 0.
    """
    n = len(round_trips)
    if n == 0:
        return StatisticsSummary()

    average = sum(round_trips) / n
    if n > 1:
        variance = sum((x - average) ** 2 for x in round_trips) / (n - 1)
    else:
        variance = 0.0
    std_dev = math.sqrt(variance) if variance > 0 else 0.0
    mad = sum(abs(x - average) for x in round_trips) / n

    return StatisticsSummary(
        average=cut_number(average, AVERAGE_DECIMALS),
        min=min(round_trips),
        max=max(round_trips),
        variance=cut_number(variance, DEVIATION_DECIMALS),
        standard_deviation=cut_number(std_dev, DEVIATION_DECIMALS),
        standard_deviation_pct=_percent_of(std_dev, average),
        mean_absolute_deviation=cut_number(mad, DEVIATION_DECIMALS),
        mean_absolute_deviation_pct=_percent_of(mad, average),
    )
