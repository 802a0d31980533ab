import unittest

from Your_bags_tracker.models import Holding
from Your_bags_tracker.valuation_engine import format_usd, value_portfolio


class TestValuationEngine(unittest.TestCase):
    def test_total_for_priced_holding(self):
        holdings = [Holding(id="bitcoin", name="Bitcoin", quantity=2, price=50000.0)]
        valuation = value_portfolio(holdings)

        self.assertEqual(valuation.per_holding, {"bitcoin": 100000.0})
        self.assertEqual(format_usd(valuation.total), "$100,000.00")

    def test_unknown_price_counts_as_zero(self):
        holdings = [
            Holding(id="bitcoin", name="Bitcoin", quantity=1, price=30000.0),
            Holding(id="mystery", name="Mystery", quantity=5, price=None),
            Holding(id="ethereum", name="Ethereum", quantity=0, price=2000.0),
        ]
        valuation = value_portfolio(holdings)

        self.assertEqual(valuation.per_holding["mystery"], 0.0)
        self.assertEqual(valuation.per_holding["ethereum"], 0.0)
        self.assertEqual(valuation.total, 30000.0)

    def test_empty_portfolio(self):
        valuation = value_portfolio([])
        self.assertEqual(valuation.per_holding, {})
        self.assertEqual(valuation.total, 0)

    def test_recomputes_after_change(self):
        holding = Holding(id="bitcoin", name="Bitcoin", quantity=1, price=10.0)
        self.assertEqual(value_portfolio([holding]).total, 10.0)
        holding.quantity = 3
        self.assertEqual(value_portfolio([holding]).total, 30.0)


if __name__ == "__main__":
    unittest.main()
