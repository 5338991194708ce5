import pytest
import requests
import responses
from responses import matchers

from txbot.metrics import MetricsConfig, MetricsManager
from txbot.price_fetchers import (
    COINGECKO_API_URL,
    CoingeckoPriceFetcher,
    MockPriceFetcher,
)
from txbot.responses import DenomInfo

PRICE_URL = "https://api.coingecko.com/api/v3/simple/price"


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def metrics():
    return MetricsManager(MetricsConfig(enabled=False))


def test_coingecko_query_fail(mocked, metrics):
    mocked.get(
        PRICE_URL,
        body=requests.ConnectionError("custom error"),
        match=[matchers.query_param_matcher({"ids": "cosmos", "vs_currencies": "usd"})],
    )
    fetcher = CoingeckoPriceFetcher(metrics)
    denom_infos = [DenomInfo(denom="atom", coingecko_currency="cosmos")]

    with pytest.raises(requests.ConnectionError, match="custom error"):
        fetcher.get_prices(denom_infos)

    assert metrics.failed_queries.value(
        chain="coingecko", node=COINGECKO_API_URL, type="prices"
    ) == 1


def test_coingecko_query_success(mocked, metrics):
    mocked.get(
        PRICE_URL,
        json={"cosmos": {"usd": 7.5}, "akash-network": {"usd": 1.25}},
        match=[
            matchers.query_param_matcher(
                {"ids": "cosmos,akash-network,random", "vs_currencies": "usd"}
            )
        ],
    )
    fetcher = CoingeckoPriceFetcher(metrics)
    denom_infos = [
        DenomInfo(denom="atom", coingecko_currency="cosmos"),
        DenomInfo(denom="akt", coingecko_currency="akash-network"),
        DenomInfo(denom="random", coingecko_currency="random"),
    ]

    prices = fetcher.get_prices(denom_infos)

    assert len(prices) == 2
    assert prices[denom_infos[0]] == 7.5
    assert prices[denom_infos[1]] == 1.25
    assert denom_infos[2] not in prices
    assert metrics.successful_queries.value(
        chain="coingecko", node=COINGECKO_API_URL, type="prices"
    ) == 1


def test_coingecko_missing_base_currency_gives_zero(mocked, metrics):
    mocked.get(PRICE_URL, json={"cosmos": {"eur": 3.0}})
    fetcher = CoingeckoPriceFetcher(metrics)
    info = DenomInfo(denom="atom", coingecko_currency="cosmos")

    assert fetcher.get_prices([info]) == {info: 0.0}


def test_coingecko_http_error_raises(mocked, metrics):
    mocked.get(PRICE_URL, status=429, json={"error": "rate limited"})
    fetcher = CoingeckoPriceFetcher(metrics)

    with pytest.raises(requests.HTTPError):
        fetcher.get_prices([DenomInfo(denom="atom", coingecko_currency="cosmos")])


def test_coingecko_name():
    assert CoingeckoPriceFetcher().name == "coingecko"


def test_mock_fetcher_returns_nothing():
    fetcher = MockPriceFetcher()
    assert fetcher.name == "mock"
    assert fetcher.get_prices([DenomInfo(denom="atom", coingecko_currency="cosmos")]) == {}