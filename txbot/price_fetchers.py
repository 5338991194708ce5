"""Sources of USD prices for chain denoms."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from datetime import timedelta
from typing import Any

import requests

from txbot.metrics import MetricsManager
from txbot.query_info import QueryInfo, QueryType
from txbot.responses import DenomInfo

COINGECKO_PRICE_FETCHER_NAME = "coingecko"
MOCK_PRICE_FETCHER_NAME = "mock"
COINGECKO_BASE_CURRENCY = "usd"
COINGECKO_API_URL = "https://api.coingecko.com"

_logger = logging.getLogger(__name__)


class CoingeckoPriceFetcher:
    """Fetches USD prices from the Coingecko simple price API."""

    def __init__(
        self,
        metrics_manager: MetricsManager | None = None,
        *,
        base_url: str = COINGECKO_API_URL,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.metrics_manager = metrics_manager
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    @property
    def name(self) -> str:
        return COINGECKO_PRICE_FETCHER_NAME

    def _fetch(self, url: str) -> Any:
        started = time.perf_counter()
        success = False
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
            success = True
            return data
        finally:
            if self.metrics_manager is not None:
                info = QueryInfo(
                    success=success,
                    time=timedelta(seconds=time.perf_counter() - started),
                    node=self.base_url,
                )
                self.metrics_manager.log_query(COINGECKO_PRICE_FETCHER_NAME, info, QueryType.PRICES)

    def get_prices(self, denom_infos: Iterable[DenomInfo]) -> dict[DenomInfo, float]:
        """Return the USD price of each denom Coingecko knows about.

        Denoms missing from the response are left out. Network and HTTP
        errors are raised after being logged.
        """
        infos = list(denom_infos)
        currencies = [info.coingecko_currency for info in infos]
        url = (
            f"{self.base_url}/api/v3/simple/price"
            f"?ids={','.join(currencies)}&vs_currencies={COINGECKO_BASE_CURRENCY}"
        )

        try:
            data = self._fetch(url)
        except (requests.RequestException, ValueError):
            _logger.error(
                "Could not get rates for %s, probably rate-limiting", currencies, exc_info=True
            )
            raise

        prices = data if isinstance(data, dict) else {}
        result: dict[DenomInfo, float] = {}
        for info in infos:
            coin_price = prices.get(info.coingecko_currency)
            if coin_price is None:
                continue
            result[info] = float((coin_price or {}).get(COINGECKO_BASE_CURRENCY, 0))
        return result


class MockPriceFetcher:
    """A price fetcher that knows no prices."""

    @property
    def name(self) -> str:
        return MOCK_PRICE_FETCHER_NAME

    def get_prices(self, denom_infos: Iterable[DenomInfo]) -> dict[DenomInfo, float]:
        return {}