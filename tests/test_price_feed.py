import pytest

from lucienesl.price_feed import (
    SOL_USD_FEED_ID,
    USDC_USD_FEED_ID,
    PriceFeedError,
    PriceFeedErrorCode,
    PriceFeedMessage,
    PriceUpdate,
    calculate_pair_midprice,
    feed_id_from_hex,
    get_oracle_price,
)


def _update():
    return PriceUpdate(
        [
            PriceFeedMessage(feed_id_from_hex(SOL_USD_FEED_ID), 15000000000, -8, 1700),
            PriceFeedMessage(feed_id_from_hex(USDC_USD_FEED_ID), 100000000, -8, 1701),
        ]
    )


def test_feed_id_round_trip():
    raw = feed_id_from_hex(SOL_USD_FEED_ID)
    assert len(raw) == 32
    assert "0x" + raw.hex() == SOL_USD_FEED_ID


def test_feed_id_without_prefix():
    assert feed_id_from_hex(USDC_USD_FEED_ID[2:]) == feed_id_from_hex(USDC_USD_FEED_ID)


@pytest.mark.parametrize("bad", ["0x1234", "", "0x" + "zz" * 32, SOL_USD_FEED_ID + "00"])
def test_invalid_feed_id(bad):
    with pytest.raises(PriceFeedError) as info:
        feed_id_from_hex(bad)
    assert info.value.code is PriceFeedErrorCode.INVALID_FEED_ID


def test_get_oracle_price_applies_exponent():
    price, publish_time = get_oracle_price(_update(), SOL_USD_FEED_ID)
    assert price == pytest.approx(150.0)
    assert publish_time == 1700


def test_get_oracle_price_missing_feed():
    update = PriceUpdate([])
    with pytest.raises(PriceFeedError) as info:
        get_oracle_price(update, SOL_USD_FEED_ID)
    assert info.value.code is PriceFeedErrorCode.PRICE_FEED_NOT_FOUND
    assert str(info.value) == "Price feed not found"


def test_get_oracle_price_invalid_id_before_lookup():
    with pytest.raises(PriceFeedError) as info:
        get_oracle_price(_update(), "0xabc")
    assert info.value.code is PriceFeedErrorCode.INVALID_FEED_ID


def test_get_price_unchecked_returns_message():
    message = _update().get_price_unchecked(feed_id_from_hex(USDC_USD_FEED_ID))
    assert message.publish_time == 1701
    assert message.price == 100000000


def test_midprice_divides():
    assert calculate_pair_midprice(3.0, 1.5) == 2.0


def test_midprice_with_unit_quote_is_base():
    sol, _ = get_oracle_price(_update(), SOL_USD_FEED_ID)
    usdc, _ = get_oracle_price(_update(), USDC_USD_FEED_ID)
    assert calculate_pair_midprice(sol, usdc) == pytest.approx(sol)


def test_midprice_falls_back_on_zero_quote():
    assert calculate_pair_midprice(42.5, 0.0) == 42.5