"""Account state records for the model, its features and the price history."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import ClassVar

from lucienesl.linear import _f32

_KEY_LEN = 32
_DISCRIMINATOR_LEN = 8
_U32_MAX = 2**32 - 1


def _empty_key() -> bytes:
    return bytes(_KEY_LEN)


@dataclass
class DataPrices:
    """Circular buffer of the most recent prices and their timestamps."""

    CAPACITY: ClassVar[int] = 10
    LEN: ClassVar[int] = (
        _DISCRIMINATOR_LEN + _KEY_LEN + 8 + 2 + 4 * 10 + 8 * 10 + 1 + 1
    )

    authority: bytes = field(default_factory=_empty_key)
    last_updated: int = 0
    current_index: int = 0
    prices: list[float] = field(default_factory=lambda: [0.0] * DataPrices.CAPACITY)
    timestamps: list[int] = field(default_factory=lambda: [0] * DataPrices.CAPACITY)
    is_full: bool = False
    bump: int = 0

    def add_price(self, price: float, timestamp: int) -> None:
        """Write a price at the current slot and advance, wrapping around."""
        self.prices[self.current_index] = _f32(price)
        self.timestamps[self.current_index] = timestamp
        self.last_updated = timestamp
        self.current_index = (self.current_index + 1) % self.CAPACITY
        if self.current_index == 0:
            self.is_full = True

    def get_recent_prices(self, count: int) -> list[float]:
        """Up to ``count`` stored prices, taken from the start of the buffer."""
        if count < 0:
            raise ValueError("count must not be negative")
        available = self.CAPACITY if self.is_full else self.current_index
        return self.prices[: min(count, available)]


@dataclass
class ModelParameters:
    """Weights and bias of the linear model."""

    LEN: ClassVar[int] = _DISCRIMINATOR_LEN + _KEY_LEN + 8 + 4 * 5 + 4 + 1 + 1

    authority: bytes = field(default_factory=_empty_key)
    last_update: int = 0
    weights: list[float] = field(default_factory=lambda: [0.0] * 5)
    bias: float = 0.0
    is_active: bool = False
    bump: int = 0

    def predict(self, features: Sequence[float]) -> float:
        """Bias plus the weighted sum of the features."""
        total = _f32(self.bias)
        for weight, feature in zip(self.weights, features, strict=True):
            total = _f32(total + _f32(_f32(weight) * _f32(feature)))
        return total

    def classify(self, features: Sequence[float]) -> int:
        """1 if the logistic of the prediction exceeds one half, else 0."""
        prediction = self.predict(features)
        try:
            probability = 1.0 / (1.0 + math.exp(-prediction))
        except OverflowError:
            probability = 0.0
        return 1 if probability > 0.5 else 0


@dataclass
class ModelResults:
    """Latest prediction and the running count of predictions."""

    LEN: ClassVar[int] = _DISCRIMINATOR_LEN + _KEY_LEN + 8 + 1 + 4 + 8 + 1

    authority: bytes = field(default_factory=_empty_key)
    last_update: int = 0
    latest_prediction: int = 0
    price_at_prediction: float = 0.0
    predictions_count: int = 0
    bump: int = 0

    def update_prediction(self, prediction: int, price: float, timestamp: int) -> None:
        """Record a prediction made at ``timestamp``."""
        if self.predictions_count >= _U32_MAX:
            raise OverflowError("prediction count overflow")
        self.latest_prediction = prediction
        self.price_at_prediction = _f32(price)
        self.predictions_count += 1
        self.last_update = timestamp


@dataclass
class ModelFeatures:
    """Moving-average periods and the features last computed from them."""

    LEN: ClassVar[int] = _DISCRIMINATOR_LEN + _KEY_LEN + 8 + 4 * 5 + 4 * 5 + 1

    authority: bytes = field(default_factory=_empty_key)
    last_update: int = 0
    price_periods: list[int] = field(default_factory=lambda: [0] * 5)
    computed_features: list[float] = field(default_factory=lambda: [0.0] * 5)
    bump: int = 0


@dataclass
class ModelExperiments:
    """Bookkeeping for training experiments."""

    LEN: ClassVar[int] = _DISCRIMINATOR_LEN + _KEY_LEN + 8 + 4 + 4 + 1

    authority: bytes = field(default_factory=_empty_key)
    last_update: int = 0
    iterations: float = 0.0
    best_loss: float = 0.0
    bump: int = 0