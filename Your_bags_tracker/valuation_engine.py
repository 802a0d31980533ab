# valuation_engine.py
from typing import Iterable

from Your_bags_tracker.models import Holding, Valuation


def holding_value(holding: Holding) -> float:
    """quantity x price, with an unknown price counting as zero."""
    if holding.price is None:
        return 0.0
    return holding.quantity * holding.price


def value_portfolio(holdings: Iterable[Holding]) -> Valuation:
    """
    Value every holding and the portfolio total.

    Pure and uncached; call it again whenever the holdings change.
    """
    per_holding = {holding.id: holding_value(holding) for holding in holdings}
    return Valuation(per_holding=per_holding, total=sum(per_holding.values()))


def format_usd(value: float) -> str:
    return f"${value:,.2f}"
