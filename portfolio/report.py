"""
Tabular rendering of valued holdings, summary and allocations
"""

from typing import List, Sequence

import pandas as pd

from portfolio.calculations import format_currency, format_percent
from portfolio.models import Allocation, Holding, PortfolioSummary, ValuedHolding

HOLDING_COLUMNS = ['id', 'ticker', 'quantity', 'purchase_price', 'purchase_date']
VALUED_COLUMNS = ['id', 'ticker', 'quantity', 'purchase_price', 'current_price',
                  'current_value', 'cost_basis', 'pnl', 'pnl_percent', 'stale']


def holdings_frame(holdings: Sequence[Holding]) -> pd.DataFrame:
    """Stored holdings, one row each"""
    rows = [
        {
            'id': h.id,
            'ticker': h.ticker,
            'quantity': h.quantity,
            'purchase_price': format_currency(h.purchase_price),
            'purchase_date': h.purchase_date
        }
        for h in holdings
    ]
    return pd.DataFrame(rows, columns=HOLDING_COLUMNS)


def valued_holdings_frame(valued_holdings: Sequence[ValuedHolding]) -> pd.DataFrame:
    """Valued holdings with formatted money and percentage columns"""
    rows = [
        {
            'id': v.id,
            'ticker': v.ticker,
            'quantity': v.quantity,
            'purchase_price': format_currency(v.purchase_price),
            'current_price': format_currency(v.current_price),
            'current_value': format_currency(v.current_value),
            'cost_basis': format_currency(v.cost_basis),
            'pnl': format_currency(v.pnl),
            'pnl_percent': format_percent(v.pnl_percent),
            'stale': 'yes' if v.price_stale else ''
        }
        for v in valued_holdings
    ]
    return pd.DataFrame(rows, columns=VALUED_COLUMNS)


def allocations_frame(allocations: Sequence[Allocation]) -> pd.DataFrame:
    rows = [
        {
            'ticker': a.ticker,
            'value': format_currency(a.value),
            'allocation': f"{a.percentage:.1f}%"
        }
        for a in allocations
    ]
    return pd.DataFrame(rows, columns=['ticker', 'value', 'allocation'])


def summary_lines(summary: PortfolioSummary) -> List[str]:
    lines = [
        f"Total Value:      {format_currency(summary.total_value)}",
        f"Total Cost:       {format_currency(summary.total_cost)}",
        f"Total P&L:        {format_currency(summary.total_pnl)} ({format_percent(summary.total_pnl_percent)})",
    ]
    if summary.best_performer is not None:
        best = summary.best_performer
        lines.append(f"Best Performer:   {best.ticker} ({format_percent(best.pnl_percent)})")
    if summary.worst_performer is not None:
        worst = summary.worst_performer
        lines.append(f"Worst Performer:  {worst.ticker} ({format_percent(worst.pnl_percent)})")
    return lines
