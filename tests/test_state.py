import pytest

from lucienesl.state import (
    DataPrices,
    ModelExperiments,
    ModelFeatures,
    ModelParameters,
    ModelResults,
)


def test_data_prices_starts_empty():
    data = DataPrices()
    assert data.get_recent_prices(10) == []
    assert len(data.prices) == DataPrices.CAPACITY
    assert not data.is_full


def test_add_price_advances_index_and_records_time():
    data = DataPrices()
    data.add_price(1.5, 100)
    data.add_price(2.5, 200)
    assert data.current_index == 2
    assert data.last_updated == 200
    assert data.timestamps[:2] == [100, 200]
    assert data.get_recent_prices(10) == [1.5, 2.5]


def test_get_recent_prices_limited_by_count():
    data = DataPrices()
    for i in range(5):
        data.add_price(float(i), i)
    assert data.get_recent_prices(3) == [0.0, 1.0, 2.0]


def test_buffer_fills_and_wraps():
    data = DataPrices()
    for i in range(DataPrices.CAPACITY):
        data.add_price(float(i + 1), i)
    assert data.is_full
    assert data.current_index == 0
    assert len(data.get_recent_prices(50)) == DataPrices.CAPACITY
    data.add_price(99.0, 1000)
    assert data.prices[0] == 99.0
    assert data.current_index == 1
    assert data.is_full


def test_get_recent_prices_rejects_negative_count():
    with pytest.raises(ValueError):
        DataPrices().get_recent_prices(-1)


def test_params_predict_zero_features_is_bias():
    params = ModelParameters(weights=[0.1, 0.2, 0.3, 0.4, 0.5], bias=1.0)
    assert params.predict([0.0] * 5) == 1.0


def test_params_classify_follows_sign():
    features = [0.1] * 5
    up = ModelParameters(weights=[0.1, 0.2, 0.3, 0.4, 0.5], bias=1.0)
    down = ModelParameters(weights=[0.1, 0.2, 0.3, 0.4, 0.5], bias=-5.0)
    assert up.classify(features) == 1
    assert down.classify(features) == 0


def test_params_classify_extreme_negative():
    params = ModelParameters(weights=[0.0] * 5, bias=-1e6)
    assert params.classify([1.0] * 5) == 0


def test_params_classify_zero_output_is_down():
    assert ModelParameters().classify([1.0] * 5) == 0


def test_results_update_prediction():
    results = ModelResults()
    results.update_prediction(1, 150.5, 42)
    results.update_prediction(0, 151.0, 43)
    assert results.latest_prediction == 0
    assert results.price_at_prediction == 151.0
    assert results.predictions_count == 2
    assert results.last_update == 43


def test_results_count_overflow():
    results = ModelResults(predictions_count=2**32 - 1)
    with pytest.raises(OverflowError):
        results.update_prediction(1, 1.0, 1)
    assert results.predictions_count == 2**32 - 1


def test_account_sizes_hold_their_fields():
    assert ModelFeatures.LEN > ModelExperiments.LEN
    assert DataPrices.LEN > ModelParameters.LEN > ModelResults.LEN
    assert ModelExperiments().iterations == 0.0
    assert ModelFeatures().computed_features == [0.0] * 5