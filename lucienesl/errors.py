"""Errors raised by the agent's operations."""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Error codes with their numeric identifier and message."""

    MODEL_NOT_INITIALIZED = (6000, "Model parameters not initialized")
    INSUFFICIENT_PRICE_HISTORY = (6001, "Insufficient price history for calculations")
    STALE_PRICE_DATA = (6002, "Price data is too old")
    INVALID_PRICE_DATA = (6003, "Invalid price data received")
    PREDICTION_FAILED = (6004, "Model prediction failed")
    FEATURE_CALCULATION_FAILED = (6005, "Feature calculation failed")
    UNAUTHORIZED = (6006, "Unauthorized access")
    MODEL_INACTIVE = (6007, "Model is not active")
    LOW_PRICE_CONFIDENCE = (6008, "Price confidence too low")
    COMPUTATION_ERROR = (6009, "Mathematical computation error")
    ARRAY_LENGTH_MISMATCH = (6010, "Array length mismatch")
    PRICE_FEED_NOT_FOUND = (6011, "Price feed not found")
    INVALID_FEED_ID = (6012, "Invalid feed ID")
    INCOMPLETE_TRAINING_DATA = (6013, "Training data incomplete")
    METRICS_UPDATE_FAILED = (6014, "Metrics update failed")

    def __init__(self, number: int, message: str) -> None:
        self.number = number
        self.message = message


class LucieneError(Exception):
    """An operation failed with one of the known error codes."""

    def __init__(self, code: ErrorCode) -> None:
        super().__init__(code.message)
        self.code = code