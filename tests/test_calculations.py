"""
Tests for calculations.py

Valuation, portfolio summary, allocation and display formatting.
"""

import pytest

from portfolio.calculations import (
    calculate_allocations,
    format_currency,
    format_percent,
    summarize,
    valuate,
)
from portfolio.models import Holding, ValuedHolding


def make_holding(ticker='AAPL', quantity=10.0, purchase_price=150.0, holding_id='1'):
    return Holding(
        id=holding_id,
        ticker=ticker,
        quantity=quantity,
        purchase_price=purchase_price,
        purchase_date='2025-01-02T10:00:00+00:00'
    )


def make_valued(ticker, pnl_percent, current_value=100.0, cost_basis=100.0):
    return ValuedHolding(
        holding=make_holding(ticker=ticker, holding_id=ticker),
        current_price=current_value,
        current_value=current_value,
        cost_basis=cost_basis,
        pnl=current_value - cost_basis,
        pnl_percent=pnl_percent
    )


# ============================================================================
# Valuation
# ============================================================================

class TestValuate:
    """Test per-holding P&L"""

    def test_example_gain(self):
        """10 AAPL bought at 150, now 180 -> +300 / +20%"""
        valued = valuate(make_holding(), 180.0)

        assert valued.current_price == 180.0
        assert valued.current_value == 1800.0
        assert valued.cost_basis == 1500.0
        assert valued.pnl == 300.0
        assert valued.pnl_percent == pytest.approx(20.0)
        assert valued.price_stale is False

    def test_loss(self):
        valued = valuate(make_holding(quantity=4, purchase_price=50.0), 40.0)

        assert valued.current_value == 160.0
        assert valued.cost_basis == 200.0
        assert valued.pnl == -40.0
        assert valued.pnl_percent == pytest.approx(-20.0)

    @pytest.mark.parametrize('quantity,purchase_price,price', [
        (1, 1.0, 0.0),
        (3.5, 12.25, 99.99),
        (1000, 0.5, 0.75),
    ])
    def test_derived_fields_follow_formulas(self, quantity, purchase_price, price):
        holding = make_holding(quantity=quantity, purchase_price=purchase_price)
        valued = valuate(holding, price)

        assert valued.current_value == price * quantity
        assert valued.cost_basis == purchase_price * quantity
        assert valued.pnl == valued.current_value - valued.cost_basis

    def test_zero_purchase_price_does_not_crash(self):
        """Zero cost basis gives 0% rather than dividing by zero"""
        valued = valuate(make_holding(purchase_price=0.0), 25.0)

        assert valued.pnl == 250.0
        assert valued.pnl_percent == 0

    def test_fallback_price_breaks_even(self):
        holding = make_holding()
        valued = valuate(holding, holding.purchase_price, price_stale=True)

        assert valued.pnl == 0
        assert valued.pnl_percent == 0
        assert valued.price_stale is True

    def test_exposes_holding_fields(self):
        valued = valuate(make_holding(ticker='MSFT', holding_id='abc'), 1.0)

        assert valued.id == 'abc'
        assert valued.ticker == 'MSFT'
        assert valued.quantity == 10.0
        assert valued.purchase_price == 150.0


# ============================================================================
# Summary
# ============================================================================

class TestSummarize:
    """Test portfolio aggregation"""

    def test_empty_portfolio(self):
        summary = summarize([])

        assert summary.total_value == 0
        assert summary.total_cost == 0
        assert summary.total_pnl == 0
        assert summary.total_pnl_percent == 0
        assert summary.best_performer is None
        assert summary.worst_performer is None

    def test_single_holding_is_best_and_worst(self):
        valued = make_valued('AAPL', 5.0)
        summary = summarize([valued])

        assert summary.best_performer is valued
        assert summary.worst_performer is valued

    def test_best_and_worst_by_percent(self):
        summary = summarize([
            make_valued('A', 10.0),
            make_valued('B', -5.0),
            make_valued('C', 20.0),
        ])

        assert summary.best_performer.pnl_percent == 20.0
        assert summary.best_performer.ticker == 'C'
        assert summary.worst_performer.pnl_percent == -5.0
        assert summary.worst_performer.ticker == 'B'

    def test_ties_keep_input_order(self):
        first = make_valued('FIRST', 0.0)
        second = make_valued('SECOND', 0.0)
        summary = summarize([first, second])

        assert summary.best_performer is first
        assert summary.worst_performer is second

    def test_totals(self):
        holdings = [
            valuate(make_holding(ticker='AAPL', quantity=10, purchase_price=150.0), 180.0),
            valuate(make_holding(ticker='MSFT', quantity=5, purchase_price=300.0), 270.0),
        ]
        summary = summarize(holdings)

        assert summary.total_value == 1800.0 + 1350.0
        assert summary.total_cost == 1500.0 + 1500.0
        assert summary.total_pnl == pytest.approx(150.0)
        assert summary.total_pnl_percent == pytest.approx(5.0)

    def test_zero_total_cost(self):
        summary = summarize([make_valued('X', 0.0, current_value=10.0, cost_basis=0.0)])

        assert summary.total_pnl == 10.0
        assert summary.total_pnl_percent == 0

    def test_input_not_reordered(self):
        holdings = [make_valued('A', -1.0), make_valued('B', 1.0)]
        summarize(holdings)

        assert [h.ticker for h in holdings] == ['A', 'B']


# ============================================================================
# Allocation & formatting
# ============================================================================

class TestAllocations:
    """Test allocation percentages"""

    def test_empty(self):
        assert calculate_allocations([]) == []

    def test_zero_total_value(self):
        assert calculate_allocations([make_valued('A', 0.0, current_value=0.0)]) == []

    def test_percentages(self):
        allocations = calculate_allocations([
            make_valued('A', 0.0, current_value=300.0),
            make_valued('B', 0.0, current_value=100.0),
        ])

        assert [a.ticker for a in allocations] == ['A', 'B']
        assert allocations[0].value == 300.0
        assert allocations[0].percentage == pytest.approx(75.0)
        assert allocations[1].percentage == pytest.approx(25.0)
        assert sum(a.percentage for a in allocations) == pytest.approx(100.0)


class TestFormatting:
    """Test display formatting"""

    def test_format_currency(self):
        assert format_currency(1234.56) == '£1,234.56'
        assert format_currency(0) == '£0.00'
        assert format_currency(-12) == '-£12.00'

    def test_format_currency_custom_symbol(self):
        assert format_currency(5, symbol='$') == '$5.00'

    def test_format_percent(self):
        assert format_percent(12.3456) == '+12.35%'
        assert format_percent(0) == '+0.00%'
        assert format_percent(-5) == '-5.00%'
