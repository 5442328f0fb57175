"""The agent program: account initialisation, price intake, features and inference."""

from __future__ import annotations

import hashlib
import logging
import time
from collections.abc import Callable, Sequence
from typing import Union

from lucienesl.errors import ErrorCode, LucieneError
from lucienesl.features import MovingAverageCalculator
from lucienesl.linear import _f32, classify
from lucienesl.price_feed import (
    SOL_USD_FEED_ID,
    USDC_USD_FEED_ID,
    PriceFeedError,
    PriceUpdate,
    calculate_pair_midprice,
    get_oracle_price,
)
from lucienesl.state import (
    DataPrices,
    ModelExperiments,
    ModelFeatures,
    ModelParameters,
    ModelResults,
)

log = logging.getLogger(__name__)

PROGRAM_ID = "2ViX4tfo3HcFkwRBeDmBesq7kWrBJNAxpkNFsKpA9HLk"

MODEL_PARAMS_SEED = b"model_params"
MODEL_RESULTS_SEED = b"model_results"
MODEL_FEATURES_SEED = b"model_features"
MODEL_EXPERIMENTS_SEED = b"model_experiments"
DATA_PRICES_SEED = b"data_prices"

_DEFAULT_MAX_PERIOD = 50
_KEY_LEN = 32

Account = Union[DataPrices, ModelParameters, ModelResults, ModelFeatures, ModelExperiments]

_BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"

_P = 2**255 - 19
_D = (-121665 * pow(121666, _P - 2, _P)) % _P


def _base58_decode(text: str) -> bytes:
    number = 0
    for char in text:
        number = number * 58 + _BASE58_ALPHABET.index(char)
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    leading = len(text) - len(text.lstrip("1"))
    return bytes(leading) + body


_PROGRAM_KEY = _base58_decode(PROGRAM_ID)


def _is_on_curve(key: bytes) -> bool:
    """Whether 32 bytes decompress to a point on the ed25519 curve."""
    y = (int.from_bytes(key, "little") & ((1 << 255) - 1)) % _P
    y2 = y * y % _P
    u = (y2 - 1) % _P
    v = (_D * y2 + 1) % _P
    if v == 0:
        return u == 0
    ratio = u * pow(v, _P - 2, _P) % _P
    return ratio == 0 or pow(ratio, (_P - 1) // 2, _P) == 1


def _as_seed(seed: bytes | str) -> bytes:
    return seed.encode() if isinstance(seed, str) else bytes(seed)


def _as_key(authority: bytes) -> bytes:
    key = bytes(authority)
    if len(key) != _KEY_LEN:
        raise ValueError(f"authority must be {_KEY_LEN} bytes, got {len(key)}")
    return key


def derive_address(seed: bytes | str, authority: bytes) -> tuple[bytes, int]:
    """The program-derived address for ``seed`` and ``authority``, with its bump."""
    prefix = _as_seed(seed) + _as_key(authority)
    for bump in range(255, -1, -1):
        digest = hashlib.sha256(
            prefix + bytes([bump]) + _PROGRAM_KEY + b"ProgramDerivedAddress"
        ).digest()
        if not _is_on_curve(digest):
            return digest, bump
    raise ValueError("no viable bump seed found")


class AccountExistsError(Exception):
    """An account was to be created at an address that is already in use."""

    def __init__(self, address: bytes) -> None:
        super().__init__(f"account {address.hex()} already exists")
        self.address = address


class AccountNotFoundError(Exception):
    """An account the operation needs has not been created."""

    def __init__(self, address: bytes) -> None:
        super().__init__(f"account {address.hex()} not found")
        self.address = address


class Program:
    """Holds the accounts of every authority and runs the agent's instructions."""

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self.clock = clock if clock is not None else (lambda: int(time.time()))
        self._accounts: dict[bytes, Account] = {}

    def account(self, seed: bytes | str, authority: bytes) -> Account:
        """The account stored at the address derived from ``seed`` and ``authority``."""
        address, _ = derive_address(seed, authority)
        try:
            return self._accounts[address]
        except KeyError:
            raise AccountNotFoundError(address) from None

    def _create(self, seed: bytes, authority: bytes, build: Callable[[bytes, int], Account]) -> Account:
        address, bump = derive_address(seed, authority)
        if address in self._accounts:
            raise AccountExistsError(address)
        created = build(_as_key(authority), bump)
        self._accounts[address] = created
        return created

    def initialize_params(
        self, authority: bytes, weights: Sequence[float], bias: float
    ) -> ModelParameters:
        """Create the model parameters account with the given weights and bias."""
        values = [_f32(w) for w in weights]
        if len(values) != 5:
            raise LucieneError(ErrorCode.ARRAY_LENGTH_MISMATCH)
        now = self.clock()
        created = self._create(
            MODEL_PARAMS_SEED,
            authority,
            lambda key, bump: ModelParameters(
                authority=key,
                last_update=now,
                weights=values,
                bias=_f32(bias),
                is_active=True,
                bump=bump,
            ),
        )
        log.info("Model parameters initialized")
        return created

    def initialize_results(self, authority: bytes) -> ModelResults:
        """Create the model results account; the parameters account must exist."""
        self.account(MODEL_PARAMS_SEED, authority)
        now = self.clock()
        created = self._create(
            MODEL_RESULTS_SEED,
            authority,
            lambda key, bump: ModelResults(
                authority=key,
                last_update=now,
                latest_prediction=0,
                price_at_prediction=0.0,
                predictions_count=0,
                bump=bump,
            ),
        )
        log.info("Model results account initialized")
        return created

    def initialize_features(self, authority: bytes) -> ModelFeatures:
        """Create the features account with unit periods."""
        now = self.clock()
        created = self._create(
            MODEL_FEATURES_SEED,
            authority,
            lambda key, bump: ModelFeatures(
                authority=key,
                last_update=now,
                price_periods=[1] * 5,
                computed_features=[_f32(0.1)] * 5,
                bump=bump,
            ),
        )
        log.info("Model Features account initialized")
        return created

    def initialize_experiments(self, authority: bytes) -> ModelExperiments:
        """Create the experiments account."""
        now = self.clock()
        created = self._create(
            MODEL_EXPERIMENTS_SEED,
            authority,
            lambda key, bump: ModelExperiments(
                authority=key,
                last_update=now,
                iterations=0.0,
                best_loss=0.0,
                bump=bump,
            ),
        )
        log.info("Model Experiments account initialized")
        return created

    def initialize_data_prices(self, authority: bytes) -> DataPrices:
        """Create an empty price history."""
        created = self._create(
            DATA_PRICES_SEED,
            authority,
            lambda key, bump: DataPrices(authority=key, bump=bump),
        )
        log.info(
            "Data Prices account initialized with capacity for %d price points",
            DataPrices.CAPACITY,
        )
        return created

    def fetch_and_store_price(self, authority: bytes, price_update: PriceUpdate) -> float:
        """Store the SOL/USDC midprice from the oracle update and return it."""
        data_prices = self.account(DATA_PRICES_SEED, authority)
        try:
            sol_price, sol_timestamp = get_oracle_price(price_update, SOL_USD_FEED_ID)
            usdc_price, _ = get_oracle_price(price_update, USDC_USD_FEED_ID)
        except PriceFeedError as exc:
            raise LucieneError(ErrorCode.PRICE_FEED_NOT_FOUND) from exc
        midprice = calculate_pair_midprice(sol_price, usdc_price)
        data_prices.add_price(midprice, sol_timestamp)
        log.info(
            "Price stored: SOL/USDC = %.6f, SOL/USD = %.2f, USDC/USD = %.4f",
            midprice,
            sol_price,
            usdc_price,
        )
        return midprice

    def calculate_features(self, authority: bytes) -> list[float]:
        """Compute moving averages from the stored prices and return them."""
        model_features = self.account(MODEL_FEATURES_SEED, authority)
        data_prices = self.account(DATA_PRICES_SEED, authority)
        periods = model_features.price_periods
        max_period = max(periods, default=_DEFAULT_MAX_PERIOD)
        recent = data_prices.get_recent_prices(max_period)
        averages = MovingAverageCalculator(periods).calculate_sma(recent)
        model_features.last_update = self.clock()
        model_features.computed_features = averages
        log.info("Features values = [%s]", ", ".join(f"{v:.6f}" for v in averages))
        return averages

    def run_inference(self, authority: bytes) -> tuple[int, float]:
        """Classify the current features and record the prediction."""
        model_params = self.account(MODEL_PARAMS_SEED, authority)
        model_results = self.account(MODEL_RESULTS_SEED, authority)
        model_features = self.account(MODEL_FEATURES_SEED, authority)
        if not model_params.is_active:
            raise LucieneError(ErrorCode.MODEL_INACTIVE)
        prediction, confidence = classify(
            model_params.weights, model_params.bias, model_features.computed_features
        )
        model_results.update_prediction(
            prediction, model_results.price_at_prediction, self.clock()
        )
        log.info(
            "ML Prediction: %s (confidence: %.3f) at price %.6f",
            "UP" if prediction == 1 else "DOWN",
            confidence,
            model_results.price_at_prediction,
        )
        return prediction, confidence