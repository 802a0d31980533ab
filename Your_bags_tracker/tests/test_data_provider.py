import unittest
from unittest.mock import MagicMock

from Your_bags_tracker.coingecko_client import PriceServiceError
from Your_bags_tracker.data_provider import DataProvider
from Your_bags_tracker.models import PriceQuote


class TestDataProviderFetchPrices(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.provider = DataProvider(self.client, include_24hr_change=True)

    def test_empty_ids_make_no_request(self):
        self.assertEqual(self.provider.fetch_prices([]), {})
        self.assertEqual(self.provider.fetch_prices(set()), {})
        self.client.simple_price.assert_not_called()

    def test_returns_quotes_and_skips_unknown_ids(self):
        self.client.simple_price.return_value = {
            "bitcoin": {"usd": 50000, "usd_24h_change": -1.5},
            "ethereum": {"usd": 3000.5},
            "broken": {"usd": None},
        }

        quotes = self.provider.fetch_prices({"bitcoin", "ethereum", "broken", "nope"})

        self.client.simple_price.assert_called_once_with(
            ["bitcoin", "broken", "ethereum", "nope"], include_24hr_change=True
        )
        self.assertEqual(
            quotes,
            {
                "bitcoin": PriceQuote(usd=50000.0, usd_24h_change=-1.5),
                "ethereum": PriceQuote(usd=3000.5, usd_24h_change=None),
            },
        )

    def test_failure_propagates(self):
        self.client.simple_price.side_effect = PriceServiceError("HTTP 429")
        with self.assertRaises(PriceServiceError):
            self.provider.fetch_prices(["bitcoin"])


if __name__ == "__main__":
    unittest.main()
