"""Feature engineering over price history."""

from __future__ import annotations

import math
from collections.abc import Sequence

from lucienesl.linear import _f32


class MovingAverageCalculator:
    """Simple moving averages over a fixed set of periods."""

    def __init__(self, periods: Sequence[int]) -> None:
        self.periods = tuple(periods)

    def calculate_sma(self, prices: Sequence[float]) -> list[float]:
        """One average per period, over the first ``period`` prices.

        The sum is always divided by the period, even when fewer prices are
        available; a period of zero gives NaN.
        """
        averages = []
        for period in self.periods:
            total = 0.0
            for price in prices[:period]:
                total = _f32(total + _f32(price))
            if period == 0:
                averages.append(math.nan)
            else:
                averages.append(_f32(total / _f32(period)))
        return averages