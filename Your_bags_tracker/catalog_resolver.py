# catalog_resolver.py
from typing import Dict, Any, Iterable, List, Mapping, Union
from loguru import logger

from Your_bags_tracker.coingecko_client import CoinGeckoClient
from Your_bags_tracker.models import CoinDetail, CoinRecord, as_finite


class CoinNotFoundError(LookupError):
    """Raised when free text does not resolve to a catalog coin."""

    pass


CoinRef = Union[str, CoinRecord, Mapping[str, Any]]


def dedupe_by_id(entries: Iterable[Dict[str, Any]]) -> List[CoinRecord]:
    """Build coin records keeping the first entry seen for each id."""
    unique = {}
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("id"):
            continue
        if entry["id"] not in unique:
            unique[entry["id"]] = CoinRecord.from_api(entry)
    return list(unique.values())


class CatalogResolver:
    """Read-only lookups against the coin catalog."""

    def __init__(
        self,
        client: CoinGeckoClient,
        min_query_length: int = 2,
        max_suggestions: int = 10,
    ):
        self.client = client
        self.min_query_length = min_query_length
        self.max_suggestions = max_suggestions

    def search(self, query: str) -> List[CoinRecord]:
        """
        Typeahead search.

        Queries shorter than the minimum length return nothing and make no
        request.

        Raises:
            CatalogServiceError: When the search request fails
        """
        query = (query or "").strip()
        if len(query) < self.min_query_length:
            return []

        results = dedupe_by_id(self.client.search(query))
        logger.debug(f"🔎 Search '{query}' matched {len(results)} coins")
        if self.max_suggestions:
            results = results[: self.max_suggestions]
        return results

    def list(self) -> List[CoinRecord]:
        coins = dedupe_by_id(self.client.coins_list())
        logger.info(f"📋 Loaded {len(coins)} coins from catalog")
        return coins

    def coin_detail(self, coin_id: str) -> CoinDetail:
        data = self.client.coin_detail(coin_id)
        image = data.get("image")
        if isinstance(image, dict):
            image = image.get("large") or image.get("small") or image.get("thumb")
        market_data = data.get("market_data") or {}
        current_price = (market_data.get("current_price") or {}).get("usd")
        return CoinDetail(
            id=str(data.get("id", coin_id)),
            name=str(data.get("name", coin_id)),
            image=image,
            current_price_usd=as_finite(current_price),
        )

    def resolve(self, coin_ref: CoinRef) -> CoinRecord:
        """
        Turn a selected suggestion or free text into a canonical coin record.

        Records and mappings carrying an id pass straight through. Free text is
        matched against search results by id, then symbol, then name.

        Raises:
            CoinNotFoundError: When nothing in the catalog matches
            CatalogServiceError: When the search request fails
        """
        if isinstance(coin_ref, CoinRecord):
            return coin_ref
        if isinstance(coin_ref, Mapping):
            if not coin_ref.get("id"):
                raise CoinNotFoundError("Coin reference has no id")
            return CoinRecord.from_api(dict(coin_ref))

        text = (coin_ref or "").strip()
        candidates = self.search(text)
        needle = text.lower()
        for attribute in ("id", "symbol", "name"):
            for candidate in candidates:
                if getattr(candidate, attribute).lower() == needle:
                    return candidate
        raise CoinNotFoundError(f"No coin matches '{text}'")
