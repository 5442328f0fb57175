"""Linear model with logistic output for binary direction classification."""

from __future__ import annotations

import math
import struct
from collections.abc import Sequence


def _f32(value: float) -> float:
    """Round a float to single precision."""
    if math.isnan(value) or math.isinf(value):
        return value
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _logistic(x: float) -> float:
    try:
        return 1.0 / (1.0 + math.exp(-x))
    except OverflowError:
        return 0.0


def sigmoid(x: float) -> float:
    """Logistic function, computed in double precision and rounded to single."""
    return _f32(_logistic(_f32(x)))


def predict(weights: Sequence[float], bias: float, features: Sequence[float]) -> float:
    """Weighted sum of the features plus the bias."""
    total = 0.0
    for weight, feature in zip(weights, features, strict=True):
        total = _f32(total + _f32(_f32(weight) * _f32(feature)))
    return _f32(total + _f32(bias))


def classify(
    weights: Sequence[float], bias: float, features: Sequence[float]
) -> tuple[int, float]:
    """Return the predicted class (1 for up, 0 for down) and its probability."""
    probability = sigmoid(predict(weights, bias, features))
    return (1 if probability > 0.5 else 0), probability