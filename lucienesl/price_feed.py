"""Oracle price extraction and pair price calculation."""

from __future__ import annotations

import math
import string
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from lucienesl.linear import _f32

SOL_USD_FEED_ID = "0xef0d8b6fda2ceba41da15d4095d1da392a0d2f8ed0c6c7bc0f4cfac8c280b56d"
USDC_USD_FEED_ID = "0xeaa020c61cc479712813461ce153894a96a6c00b21ed0cfc2798d1f9a9e9c94a"


class PriceFeedErrorCode(Enum):
    """Errors while reading oracle prices."""

    INVALID_FEED_ID = (6000, "Invalid feed ID provided")
    PRICE_FEED_NOT_FOUND = (6001, "Price feed not found")
    INVALID_PRICE_DATA = (6002, "Invalid price data")
    LOW_PRICE_CONFIDENCE = (6003, "Price confidence too low")

    def __init__(self, number: int, message: str) -> None:
        self.number = number
        self.message = message


class PriceFeedError(Exception):
    """A price could not be read from the oracle update."""

    def __init__(self, code: PriceFeedErrorCode) -> None:
        super().__init__(code.message)
        self.code = code


@dataclass(frozen=True)
class PriceFeedMessage:
    """One oracle price: ``price * 10**exponent``, published at ``publish_time``."""

    feed_id: bytes
    price: int
    exponent: int
    publish_time: int
    conf: int = 0


class PriceUpdate:
    """A set of oracle price messages keyed by feed id."""

    def __init__(self, feeds: Iterable[PriceFeedMessage]) -> None:
        self.feeds = {message.feed_id: message for message in feeds}

    def get_price_unchecked(self, feed_id: bytes) -> PriceFeedMessage:
        """The message for ``feed_id``, without checking its age."""
        try:
            return self.feeds[bytes(feed_id)]
        except KeyError:
            raise PriceFeedError(PriceFeedErrorCode.PRICE_FEED_NOT_FOUND) from None


def feed_id_from_hex(feed_id: str) -> bytes:
    """Decode a 32-byte feed id from hex, with or without a ``0x`` prefix."""
    digits = feed_id[2:] if feed_id.startswith(("0x", "0X")) else feed_id
    if len(digits) != 64 or not all(c in string.hexdigits for c in digits):
        raise PriceFeedError(PriceFeedErrorCode.INVALID_FEED_ID)
    return bytes.fromhex(digits)


def get_oracle_price(price_update: PriceUpdate, feed_id: str) -> tuple[float, int]:
    """The exponent-adjusted price for ``feed_id`` and its publish time."""
    message = price_update.get_price_unchecked(feed_id_from_hex(feed_id))
    adjusted = float(message.price) * 10.0 ** message.exponent
    return adjusted, message.publish_time


def calculate_pair_midprice(base_price: float, quote_price: float) -> float:
    """Base price divided by quote price in single precision.

    Falls back to the base price when the quote price is zero.
    """
    base = _f32(base_price)
    if quote_price == 0.0:
        return base
    quote = _f32(quote_price)
    if quote == 0.0:
        if base == 0.0 or math.isnan(base):
            return math.nan
        return math.copysign(math.inf, base) * math.copysign(1.0, quote)
    return _f32(base / quote)