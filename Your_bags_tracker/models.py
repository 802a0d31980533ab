# models.py
import math
from dataclasses import dataclass, field
from typing import Dict, Any, Optional


@dataclass(frozen=True)
class CoinRecord:
    """Canonical catalog entry."""

    id: str
    name: str
    symbol: str = ""
    image: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CoinRecord":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or data["id"]),
            symbol=str(data.get("symbol") or ""),
            image=data.get("large") or data.get("thumb"),
        )


@dataclass(frozen=True)
class PriceQuote:
    usd: float
    usd_24h_change: Optional[float] = None


@dataclass(frozen=True)
class CoinDetail:
    id: str
    name: str
    image: Optional[str]
    current_price_usd: Optional[float]


@dataclass
class Holding:
    """
    One owned coin.

    Only id, name, symbol and quantity are durable. price, change_24h and image
    are refreshed from the price service and never written to storage.
    """

    id: str
    name: str
    symbol: str = ""
    quantity: float = 1.0
    price: Optional[float] = None
    change_24h: Optional[float] = None
    image: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "symbol": self.symbol,
            "quantity": self.quantity,
        }


@dataclass(frozen=True)
class Valuation:
    per_holding: Dict[str, float] = field(default_factory=dict)
    total: float = 0.0


@dataclass(frozen=True)
class Notice:
    """Transient user-visible message."""

    level: str
    message: str


def as_finite(value) -> Optional[float]:
    """Return value as a float when it is a finite real number, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    return value if math.isfinite(value) else None
