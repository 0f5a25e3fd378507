"""
Holding Store

Persists the list of holdings as a single JSON array under one fixed storage
key. Every write replaces the whole array; there is no versioning or
conflict detection (last write wins).
"""

import json
import logging
import math
import time
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

from portfolio.config import PortfolioConfig
from portfolio.models import Holding
from portfolio.storage import StorageBackend

logger = logging.getLogger(__name__)


def _timestamp_id() -> str:
    # Milliseconds since epoch; two adds in the same millisecond collide
    return str(int(time.time() * 1000))


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_holding_input(ticker: str, quantity: str, purchase_price: str) -> Dict:
    """
    Validate raw user input for a new holding.

    Args:
        ticker: Ticker symbol as typed
        quantity: Number of shares as typed
        purchase_price: Price per share as typed

    Returns:
        Dictionary with ticker (uppercased), quantity and purchase_price

    Raises:
        ValueError: With a user-facing message if any field is invalid
    """
    ticker = (ticker or '').strip()
    quantity = (quantity or '').strip()
    purchase_price = (purchase_price or '').strip()

    if not ticker or not quantity or not purchase_price:
        raise ValueError("Please fill in all fields")

    qty = _parse_positive(quantity)
    if qty is None:
        raise ValueError("Quantity must be a positive number")

    price = _parse_positive(purchase_price)
    if price is None:
        raise ValueError("Purchase price must be a positive number")

    return {
        'ticker': ticker.upper(),
        'quantity': qty,
        'purchase_price': price
    }


def _parse_positive(raw: str) -> Optional[float]:
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


class HoldingStore:
    """Reads and writes the holdings list through a storage backend"""

    def __init__(self, storage: StorageBackend, key: str = PortfolioConfig.STORAGE_KEY,
                 id_factory: Callable[[], str] = _timestamp_id,
                 clock: Callable[[], str] = _now_iso):
        """
        Initialize the holding store.

        Args:
            storage: Backend providing the storage slot
            key: Storage key for the holdings array
            id_factory: Produces ids for new holdings (time-based by default)
            clock: Produces the ISO timestamp stamped on new holdings
        """
        self.storage = storage
        self.key = key
        self.id_factory = id_factory
        self.clock = clock

    def load(self) -> List[Holding]:
        """
        Load all holdings.

        Returns:
            Stored holdings, or an empty list if nothing is stored or the
            stored value is not a valid holdings array
        """
        try:
            raw = self.storage.get_item(self.key)
            if not raw:
                return []

            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("Stored holdings must be a list/array")

            return [Holding.from_dict(entry) for entry in data]
        except (ValueError, OSError) as e:
            logger.error(f"Error loading holdings from '{self.key}': {e}")
            return []

    def save(self, holdings: Sequence[Holding]) -> None:
        """Replace the stored holdings with the given list"""
        try:
            payload = json.dumps([h.to_dict() for h in holdings])
            self.storage.set_item(self.key, payload)
            logger.debug(f"Saved {len(holdings)} holdings to '{self.key}'")
        except (TypeError, ValueError, OSError) as e:
            logger.error(f"Error saving holdings to '{self.key}': {e}")

    def add(self, ticker: str, quantity: float, purchase_price: float,
            purchase_date: Optional[str] = None) -> Holding:
        """
        Create a holding with a fresh id and append it to the stored list.

        Args:
            ticker: Ticker symbol (uppercased and stripped)
            quantity: Number of shares, must be > 0
            purchase_price: Price per share, must be > 0
            purchase_date: ISO timestamp (defaults to now)

        Returns:
            The created Holding

        Raises:
            ValueError: If ticker is empty or quantity/price is not positive
        """
        ticker = (ticker or '').strip().upper()
        if not ticker:
            raise ValueError("Ticker is required")
        if not quantity > 0:
            raise ValueError("Quantity must be a positive number")
        if not purchase_price > 0:
            raise ValueError("Purchase price must be a positive number")

        holding = Holding(
            id=self.id_factory(),
            ticker=ticker,
            quantity=quantity,
            purchase_price=purchase_price,
            purchase_date=purchase_date or self.clock()
        )

        holdings = self.load()
        holdings.append(holding)
        self.save(holdings)

        logger.info(f"Added {holding.ticker} x{holding.quantity} @ {holding.purchase_price} (id={holding.id})")
        return holding

    def remove(self, holding_id: str) -> bool:
        """
        Remove the holding with the given id; no-op if it doesn't exist.

        Returns:
            True if a holding was removed
        """
        holdings = self.load()
        remaining = [h for h in holdings if h.id != holding_id]

        if len(remaining) == len(holdings):
            logger.debug(f"No holding with id={holding_id}, nothing removed")
            return False

        self.save(remaining)
        logger.info(f"Removed holding id={holding_id}")
        return True

    def clear(self) -> None:
        """Remove all holdings"""
        try:
            self.storage.remove_item(self.key)
            logger.info("Cleared all holdings")
        except OSError as e:
            logger.error(f"Error clearing holdings from '{self.key}': {e}")
