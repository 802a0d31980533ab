# tracker_engine.py
from enum import Enum
from typing import Dict, Any, List, Mapping, Optional
from loguru import logger

from Your_bags_tracker.catalog_resolver import CatalogResolver, CoinNotFoundError, CoinRef
from Your_bags_tracker.coingecko_client import CoinGeckoError
from Your_bags_tracker.data_provider import DataProvider
from Your_bags_tracker.models import CoinRecord, Valuation
from Your_bags_tracker.notification_manager import NotificationManager
from Your_bags_tracker.portfolio_store import PortfolioStore
from Your_bags_tracker.valuation_engine import holding_value, value_portfolio


class AddFlowState(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    SUGGESTIONS = "suggestions"
    RESOLVING = "resolving"
    ADDED = "added"


class TrackerEngine:
    """Turns display layer intents into store mutations, fetches and notices."""

    def __init__(
        self,
        portfolio_store: PortfolioStore,
        data_provider: DataProvider,
        catalog_resolver: CatalogResolver,
        notification_manager: Optional[NotificationManager] = None,
        logo_url_template: Optional[str] = None,
    ):
        """Initialize tracker engine with all components."""
        self.portfolio_store = portfolio_store
        self.data_provider = data_provider
        self.catalog_resolver = catalog_resolver
        self.notification_manager = notification_manager or NotificationManager()
        self.logo_url_template = logo_url_template

        self.add_flow_state = AddFlowState.IDLE
        self.query = ""
        self.suggestions: List[CoinRecord] = []

        logger.info("🏭 Tracker engine initialized")

    # === ADD FLOW ===

    def _reset_add_flow(self):
        self.add_flow_state = AddFlowState.IDLE
        self.query = ""
        self.suggestions = []

    def enter_query(self, text: str) -> List[CoinRecord]:
        """
        Update the typeahead query and return the suggestions for it.

        Short queries clear the suggestions without a request. Repeating the
        current query reuses the suggestions already shown.
        """
        text = (text or "").strip()
        if len(text) < self.catalog_resolver.min_query_length:
            self._reset_add_flow()
            return []
        if text == self.query and self.add_flow_state == AddFlowState.SUGGESTIONS:
            return list(self.suggestions)

        self.query = text
        self.add_flow_state = AddFlowState.SEARCHING
        try:
            self.suggestions = self.catalog_resolver.search(text)
        except CoinGeckoError as e:
            self._reset_add_flow()
            self.notification_manager.error(f"Search failed: {e}")
            return []

        self.add_flow_state = AddFlowState.SUGGESTIONS
        return list(self.suggestions)

    def search(self, query: str) -> List[CoinRecord]:
        return self.enter_query(query)

    def _held_id(self, coin_ref: CoinRef) -> Optional[str]:
        if isinstance(coin_ref, CoinRecord):
            coin_id = coin_ref.id
        elif isinstance(coin_ref, Mapping):
            coin_id = coin_ref.get("id")
        else:
            coin_id = (coin_ref or "").strip().lower()
        return coin_id if coin_id and coin_id in self.portfolio_store else None

    def add(self, coin_ref: CoinRef) -> bool:
        """
        Add a coin from a suggestion or free text.

        The coin is only added once its price request succeeds; coins already
        held are rejected before any request.
        """
        held_id = self._held_id(coin_ref)
        if held_id:
            self._reset_add_flow()
            self.notification_manager.info(f"{held_id} is already in your bags")
            return False

        self.add_flow_state = AddFlowState.RESOLVING
        try:
            coin = self.catalog_resolver.resolve(coin_ref)
            if coin.id in self.portfolio_store:
                self._reset_add_flow()
                self.notification_manager.info(f"{coin.id} is already in your bags")
                return False
            quotes = self.data_provider.fetch_prices([coin.id])
        except CoinNotFoundError as e:
            self._reset_add_flow()
            self.notification_manager.error(str(e))
            return False
        except CoinGeckoError as e:
            self._reset_add_flow()
            self.notification_manager.error(f"Could not add coin: {e}")
            return False

        self.portfolio_store.add(coin)
        quote = quotes.get(coin.id)
        if quote is not None:
            self.portfolio_store.set_prices(
                {coin.id: quote.usd}, {coin.id: quote.usd_24h_change}
            )
        image = coin.image or self._fallback_logo(coin.symbol)
        if image:
            self.portfolio_store.set_images({coin.id: image})

        self._reset_add_flow()
        self.add_flow_state = AddFlowState.ADDED
        return True

    # === HOLDING INTENTS ===

    def remove(self, coin_id: str) -> bool:
        return self.portfolio_store.remove(coin_id)

    def set_quantity(self, coin_id: str, value) -> bool:
        if coin_id not in self.portfolio_store:
            return False
        if not self.portfolio_store.set_quantity(coin_id, value):
            self.notification_manager.warning(
                f"Invalid quantity {value!r}: enter a number of 0 or more"
            )
            return False
        return True

    def reorder(self, from_index: int, to_index: int) -> bool:
        return self.portfolio_store.reorder(from_index, to_index)

    # === PRICES & LOGOS ===

    def refresh_prices(self) -> bool:
        """
        Fetch prices for every holding.

        Returns False when the request failed; prices then stay as they were.
        """
        ids = self.portfolio_store.ids()
        if not ids:
            logger.debug("📊 Portfolio empty, nothing to refresh")
            return True

        try:
            quotes = self.data_provider.fetch_prices(ids)
        except CoinGeckoError as e:
            self.notification_manager.error(f"Price refresh failed: {e}")
            return False

        self.portfolio_store.set_prices(
            {coin_id: quote.usd for coin_id, quote in quotes.items()},
            {coin_id: quote.usd_24h_change for coin_id, quote in quotes.items()},
        )
        logger.info(f"📊 Refreshed prices for {len(quotes)}/{len(ids)} holdings")
        return True

    def _fallback_logo(self, symbol: str) -> Optional[str]:
        if not self.logo_url_template or not symbol:
            return None
        return self.logo_url_template.format(symbol=symbol.lower())

    def refresh_logos(self) -> int:
        """Look up a logo for each holding, falling back to the URL template."""
        images = {}
        for holding in list(self.portfolio_store.holdings):
            try:
                images[holding.id] = self.catalog_resolver.coin_detail(holding.id).image
            except CoinGeckoError as e:
                logger.debug(f"🖼️ Logo lookup failed for {holding.id}: {e}")
            if not images.get(holding.id):
                images[holding.id] = self._fallback_logo(holding.symbol)
        return self.portfolio_store.set_images(images)

    # === VIEWS ===

    def valuation(self) -> Valuation:
        return value_portfolio(self.portfolio_store.holdings)

    def holdings_view(self) -> List[Dict[str, Any]]:
        """Holdings in display order, each annotated with its value."""
        return [
            {
                "id": holding.id,
                "name": holding.name,
                "symbol": holding.symbol,
                "quantity": holding.quantity,
                "price": holding.price,
                "change_24h": holding.change_24h,
                "image": holding.image,
                "value": holding_value(holding),
            }
            for holding in self.portfolio_store.holdings
        ]

    def shutdown(self):
        """Final best-effort persist."""
        self.portfolio_store.persist()
        logger.info("👋 Tracker engine stopped")
