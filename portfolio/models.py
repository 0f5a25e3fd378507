"""
Common data models for the portfolio tracker
"""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class Holding:
    """A position in one ticker"""
    id: str
    ticker: str
    quantity: float
    purchase_price: float
    purchase_date: str  # ISO format string for compatibility

    def to_dict(self) -> Dict:
        """Serialize using the persisted field names"""
        return {
            'id': self.id,
            'ticker': self.ticker,
            'quantity': self.quantity,
            'purchasePrice': self.purchase_price,
            'purchaseDate': self.purchase_date
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Holding':
        """
        Build a Holding from a persisted record.

        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError(f"Holding record must be an object, got {type(data).__name__}")

        missing = [f for f in ('id', 'ticker', 'quantity', 'purchasePrice', 'purchaseDate')
                   if f not in data]
        if missing:
            raise ValueError(f"Holding record missing required fields: {', '.join(missing)}")

        for field in ('quantity', 'purchasePrice'):
            value = data[field]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Holding field '{field}' must be a number")

        for field in ('id', 'ticker', 'purchaseDate'):
            if not isinstance(data[field], str):
                raise ValueError(f"Holding field '{field}' must be a string")

        return cls(
            id=data['id'],
            ticker=data['ticker'],
            quantity=data['quantity'],
            purchase_price=data['purchasePrice'],
            purchase_date=data['purchaseDate']
        )


@dataclass(frozen=True)
class ValuedHolding:
    """Holding enriched with a point-in-time quote"""
    holding: Holding
    current_price: float
    current_value: float
    cost_basis: float
    pnl: float
    pnl_percent: float
    price_stale: bool = False  # True when current_price is the purchase-price fallback

    @property
    def id(self) -> str:
        return self.holding.id

    @property
    def ticker(self) -> str:
        return self.holding.ticker

    @property
    def quantity(self) -> float:
        return self.holding.quantity

    @property
    def purchase_price(self) -> float:
        return self.holding.purchase_price


@dataclass(frozen=True)
class PortfolioSummary:
    """Aggregate over all valued holdings at one instant"""
    total_value: float
    total_cost: float
    total_pnl: float
    total_pnl_percent: float
    best_performer: Optional[ValuedHolding]
    worst_performer: Optional[ValuedHolding]


@dataclass(frozen=True)
class Allocation:
    """Share of total portfolio value held in one position"""
    ticker: str
    value: float
    percentage: float
