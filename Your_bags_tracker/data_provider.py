# data_provider.py
from typing import Dict, Iterable
from loguru import logger

from Your_bags_tracker.coingecko_client import CoinGeckoClient
from Your_bags_tracker.models import PriceQuote, as_finite


class DataProvider:
    """
    Provides current USD prices for portfolio holdings.
    """

    def __init__(self, client: CoinGeckoClient, include_24hr_change: bool = True):
        """
        Initialize data provider with the price service client.

        Args:
            client: CoinGecko API client
            include_24hr_change: Whether to request the 24h change alongside the price
        """
        self.client = client
        self.include_24hr_change = include_24hr_change

        logger.info("📊 Data provider initialized")

    def fetch_prices(self, ids: Iterable[str]) -> Dict[str, PriceQuote]:
        """
        Get current prices for a set of coin ids.

        Ids the service does not know are simply missing from the result. An
        empty id set returns an empty mapping without touching the network.

        Args:
            ids: Canonical coin ids

        Returns:
            Dict mapping coin id to its quote

        Raises:
            PriceServiceError: On network failure or non-success response
        """
        unique_ids = sorted({coin_id for coin_id in ids if coin_id})
        if not unique_ids:
            logger.debug("📊 No ids to price, skipping request")
            return {}

        logger.debug(f"📊 Fetching prices for {len(unique_ids)} coins...")
        data = self.client.simple_price(
            unique_ids, include_24hr_change=self.include_24hr_change
        )

        quotes = {}
        for coin_id in unique_ids:
            entry = data.get(coin_id)
            if not isinstance(entry, dict):
                continue
            usd = as_finite(entry.get("usd"))
            if usd is None:
                continue
            quotes[coin_id] = PriceQuote(
                usd=usd, usd_24h_change=as_finite(entry.get("usd_24h_change"))
            )

        missing = len(unique_ids) - len(quotes)
        if missing:
            logger.warning(f"⚠️ No price returned for {missing} of {len(unique_ids)} coins")
        logger.debug(f"📊 Retrieved prices for {len(quotes)} coins")
        return quotes
