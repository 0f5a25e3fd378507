"""
Profit & Loss Calculations

Pure functions for valuing holdings, summarizing a portfolio and computing
allocation percentages. No I/O.
"""

from typing import List, Sequence

from portfolio.config import PortfolioConfig
from portfolio.models import Allocation, Holding, PortfolioSummary, ValuedHolding


def valuate(holding: Holding, current_price: float, price_stale: bool = False) -> ValuedHolding:
    """
    Value a single holding at the given price.

    Example: 10 shares bought at 150, now 180
        current_value = 1800, cost_basis = 1500, pnl = 300, pnl_percent = 20.0

    Args:
        holding: Holding to value
        current_price: Latest price per share
        price_stale: Whether current_price is a fallback rather than a live quote

    Returns:
        ValuedHolding with derived fields
    """
    current_value = current_price * holding.quantity
    cost_basis = holding.purchase_price * holding.quantity
    pnl = current_value - cost_basis
    pnl_percent = (pnl / cost_basis) * 100 if cost_basis > 0 else 0.0

    return ValuedHolding(
        holding=holding,
        current_price=current_price,
        current_value=current_value,
        cost_basis=cost_basis,
        pnl=pnl,
        pnl_percent=pnl_percent,
        price_stale=price_stale
    )


def summarize(valued_holdings: Sequence[ValuedHolding]) -> PortfolioSummary:
    """
    Calculate portfolio-wide totals and best/worst performers.

    Performers are ranked by pnl_percent. Ties keep input order.

    Args:
        valued_holdings: Holdings with current prices

    Returns:
        PortfolioSummary (all zeros and no performers for an empty list)
    """
    if not valued_holdings:
        return PortfolioSummary(
            total_value=0.0,
            total_cost=0.0,
            total_pnl=0.0,
            total_pnl_percent=0.0,
            best_performer=None,
            worst_performer=None
        )

    total_value = sum(v.current_value for v in valued_holdings)
    total_cost = sum(v.cost_basis for v in valued_holdings)
    total_pnl = total_value - total_cost
    total_pnl_percent = (total_pnl / total_cost) * 100 if total_cost > 0 else 0.0

    ranked = sorted(valued_holdings, key=lambda v: v.pnl_percent, reverse=True)

    return PortfolioSummary(
        total_value=total_value,
        total_cost=total_cost,
        total_pnl=total_pnl,
        total_pnl_percent=total_pnl_percent,
        best_performer=ranked[0],
        worst_performer=ranked[-1]
    )


def calculate_allocations(valued_holdings: Sequence[ValuedHolding]) -> List[Allocation]:
    """Each holding's percentage of total portfolio value, in input order"""
    total_value = sum(v.current_value for v in valued_holdings)

    if total_value == 0:
        return []

    return [
        Allocation(
            ticker=v.ticker,
            value=v.current_value,
            percentage=(v.current_value / total_value) * 100
        )
        for v in valued_holdings
    ]


def format_currency(amount: float, symbol: str = PortfolioConfig.CURRENCY_SYMBOL) -> str:
    """Example: 1234.56 -> '£1,234.56', -12 -> '-£12.00'"""
    sign = '-' if amount < 0 else ''
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_percent(percent: float) -> str:
    """Example: 12.3456 -> '+12.35%'"""
    sign = '+' if percent >= 0 else ''
    return f"{sign}{percent:.2f}%"
