# lucienesl

An in-memory model of a trading agent for the SOL/USDC pair. It keeps a
ten-slot price history and computes simple moving-average features from it.
A five-weight logistic-regression model then turns those features into an
UP/DOWN signal.

## Installation

```
pip install lucienesl
```

To run the tests:

```
pip install "lucienesl[test]"
pytest
```

## Building blocks

- `lucienesl.state`: the account records, as dataclasses.
  - `DataPrices` is a circular buffer of `DataPrices.CAPACITY` (10) prices and timestamps.
    - `add_price(price, timestamp)` writes at the current slot and wraps around.
    - `get_recent_prices(count)` returns up to `count` prices from the start of the buffer.
  - `ModelParameters` holds five weights and a bias. It has `predict(features)` and `classify(features)`.
  - `ModelResults` has `update_prediction(prediction, price, timestamp)`, which also counts predictions.
  - `ModelFeatures` holds the moving-average periods and the last computed features.
  - `ModelExperiments` holds `iterations` and `best_loss`.
  - Each record has a `LEN` class attribute giving its serialized account size.
- `lucienesl.features`: `MovingAverageCalculator(periods)`.
  - `calculate_sma(prices)` returns one average per period over the first `period` prices.
  - The sum is always divided by the period, even when fewer prices are available.
  - A period of zero gives NaN.
- `lucienesl.linear`: `sigmoid`, `predict` and `classify`.
  - Arithmetic is rounded to single precision.
  - `classify` returns `(1, p)` for up or `(0, p)` for down.
- `lucienesl.price_feed`: oracle price handling.
  - `PriceFeedMessage` holds `feed_id`, `price`, `exponent`, `publish_time` and `conf`.
  - `PriceUpdate(feeds)` indexes those messages by feed id. `get_price_unchecked(feed_id)` looks one up.
  - `feed_id_from_hex` decodes a 32-byte feed id, with or without the `0x` prefix.
  - `get_oracle_price` returns `price * 10**exponent` and the publish time.
  - `calculate_pair_midprice` divides base by quote, falling back to the base price when the quote is zero.
  - `SOL_USD_FEED_ID` and `USDC_USD_FEED_ID` are the feed ids used by the program.
  - Failures raise `PriceFeedError`, carrying a `PriceFeedErrorCode`.
- `lucienesl.errors`: `LucieneError`, carrying an `ErrorCode` with a number and a message.
- `lucienesl.program`: `Program`, which ties everything together.
  - Each account is stored under an address derived from a seed and a 32-byte authority key. `derive_address(seed, authority)` returns that address and its bump.
  - The seeds are `MODEL_PARAMS_SEED`, `MODEL_RESULTS_SEED`, `MODEL_FEATURES_SEED`, `MODEL_EXPERIMENTS_SEED` and `DATA_PRICES_SEED`.
  - `Program(clock)` takes an optional function that returns the current Unix time.
  - `Program.account(seed, authority)` returns a stored record.
  - The instructions are:
    - `initialize_params(authority, weights, bias)`
    - `initialize_results(authority)` (needs the parameters account)
    - `initialize_features(authority)` (all periods 1, all features 0.1)
    - `initialize_experiments(authority)`
    - `initialize_data_prices(authority)`
    - `fetch_and_store_price(authority, price_update)` (stores the SOL/USDC midprice and returns it)
    - `calculate_features(authority)` (returns the moving averages)
    - `run_inference(authority)` (returns `(prediction, confidence)`)

## Example

```python
from lucienesl.program import Program, MODEL_RESULTS_SEED
from lucienesl.price_feed import (
    PriceFeedMessage,
    PriceUpdate,
    SOL_USD_FEED_ID,
    USDC_USD_FEED_ID,
    feed_id_from_hex,
)

program = Program(clock=lambda: 1_700_000_000)
authority = bytes(range(32))

program.initialize_params(authority, [0.1, 0.2, 0.3, 0.4, 0.5], 1.0)
program.initialize_results(authority)
program.initialize_features(authority)
program.initialize_data_prices(authority)

update = PriceUpdate([
    PriceFeedMessage(feed_id=feed_id_from_hex(SOL_USD_FEED_ID),
                     price=15_000_000_000, exponent=-8, publish_time=1_700_000_000),
    PriceFeedMessage(feed_id=feed_id_from_hex(USDC_USD_FEED_ID),
                     price=100_000_000, exponent=-8, publish_time=1_700_000_000),
])
program.fetch_and_store_price(authority, update)
program.calculate_features(authority)
prediction, confidence = program.run_inference(authority)

results = program.account(MODEL_RESULTS_SEED, authority)
print(results.latest_prediction, results.predictions_count)
```

Failures are raised as exceptions:

- `LucieneError` is raised when the model is inactive, when a price feed is missing, or when there are not exactly five weights.
- `AccountExistsError` is raised when an account is initialized twice.
- `AccountNotFoundError` is raised when a required account is missing.
- `ValueError` is raised when an authority key is not 32 bytes.

## What it does not do

- Accounts live only in the memory of a `Program` object. Nothing is persisted.
- The package does not talk to any network, node or oracle service. Price updates are built by the caller and passed in as `PriceUpdate` objects.
- There is no command-line tool.