# portfolio_store.py
import math
from typing import Dict, Any, List, Mapping, Optional, Union
from loguru import logger

from Your_bags_tracker.models import CoinRecord, Holding, as_finite


def parse_quantity(value) -> Optional[float]:
    """
    Parse user input into a holding quantity.

    Returns None unless the value is a finite number >= 0. Strings are parsed,
    so "1.5" is accepted and "abc", "-1", "nan" and "inf" are not.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        quantity = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(quantity) or quantity < 0:
        return None
    return quantity


class PortfolioStore:
    """
    Ordered in-memory holdings, kept in sync with local storage.

    Every successful mutation rewrites the stored snapshot with the full
    sequence of {id, name, symbol, quantity} records.
    """

    def __init__(self, persistence_adapter=None):
        self.persistence_adapter = persistence_adapter
        self.holdings: List[Holding] = []

    def hydrate(self) -> int:
        """Load holdings from storage, replacing whatever is in memory."""
        records = self.persistence_adapter.load() if self.persistence_adapter else []
        self.holdings = [
            Holding(
                id=record["id"],
                name=record["name"],
                symbol=record.get("symbol", ""),
                quantity=record["quantity"],
            )
            for record in records
        ]
        logger.info(f"💼 Portfolio hydrated with {len(self.holdings)} holdings")
        return len(self.holdings)

    def persist(self) -> bool:
        if self.persistence_adapter is None:
            return True
        return self.persistence_adapter.save(self.snapshot())

    def snapshot(self) -> List[Dict[str, Any]]:
        return [holding.to_record() for holding in self.holdings]

    def ids(self) -> List[str]:
        return [holding.id for holding in self.holdings]

    def get(self, coin_id: str) -> Optional[Holding]:
        for holding in self.holdings:
            if holding.id == coin_id:
                return holding
        return None

    def __contains__(self, coin_id) -> bool:
        return self.get(coin_id) is not None

    def __len__(self) -> int:
        return len(self.holdings)

    def add(self, coin: Union[CoinRecord, Mapping[str, Any]]) -> bool:
        """Append a coin with quantity 1 and unknown price. Duplicate ids are ignored."""
        if isinstance(coin, CoinRecord):
            coin_id, name, symbol = coin.id, coin.name, coin.symbol
        else:
            coin_id, name, symbol = coin["id"], coin.get("name"), coin.get("symbol")

        if coin_id in self:
            logger.warning(f"⚠️ Already holding {coin_id}")
            return False

        self.holdings.append(
            Holding(id=coin_id, name=name or coin_id, symbol=symbol or "")
        )
        logger.info(f"🟢 Added {coin_id} to portfolio")
        self.persist()
        return True

    def remove(self, coin_id: str) -> bool:
        holding = self.get(coin_id)
        if holding is None:
            return False
        self.holdings.remove(holding)
        logger.info(f"🔴 Removed {coin_id} from portfolio")
        self.persist()
        return True

    def set_quantity(self, coin_id: str, value) -> bool:
        """Replace the quantity of a holding; invalid values leave it untouched."""
        holding = self.get(coin_id)
        if holding is None:
            return False
        quantity = parse_quantity(value)
        if quantity is None:
            logger.warning(f"⚠️ Rejected quantity {value!r} for {coin_id}")
            return False
        holding.quantity = quantity
        logger.debug(f"📝 Quantity of {coin_id} set to {quantity}")
        self.persist()
        return True

    def reorder(self, from_index: int, to_index: int) -> bool:
        """Move the holding at from_index to to_index, shifting the ones in between."""
        size = len(self.holdings)
        if not (0 <= from_index < size and 0 <= to_index < size):
            return False
        if from_index == to_index:
            return False
        holding = self.holdings.pop(from_index)
        self.holdings.insert(to_index, holding)
        logger.debug(f"↕️ Moved {holding.id} from {from_index} to {to_index}")
        self.persist()
        return True

    def set_prices(
        self,
        price_by_id: Mapping[str, float],
        change_by_id: Optional[Mapping[str, Optional[float]]] = None,
    ) -> int:
        """
        Update prices for holdings present in the mapping.

        Holdings missing from the mapping keep their previous price.
        """
        change_by_id = change_by_id or {}
        updated = 0
        for holding in self.holdings:
            if holding.id not in price_by_id:
                continue
            price = as_finite(price_by_id[holding.id])
            if price is None:
                continue
            holding.price = price
            if holding.id in change_by_id:
                holding.change_24h = change_by_id[holding.id]
            updated += 1

        logger.debug(f"📊 Updated prices for {updated} holdings")
        self.persist()
        return updated

    def set_images(self, image_by_id: Mapping[str, Optional[str]]) -> int:
        updated = 0
        for holding in self.holdings:
            if image_by_id.get(holding.id):
                holding.image = image_by_id[holding.id]
                updated += 1
        return updated
