"""
Refresh Orchestration

Fetches a current price for every holding, one at a time in stored order,
and values each holding. A failed fetch falls back to the holding's own
purchase price so the refresh always returns one result per holding.
"""

import logging
from typing import List, Optional, Sequence

from tqdm import tqdm

from market_data.quote_source import QuoteSource
from market_data.rate_limiter import RateLimiter
from portfolio.calculations import valuate
from portfolio.config import PortfolioConfig
from portfolio.models import Holding, ValuedHolding

logger = logging.getLogger(__name__)


class PortfolioRefresher:
    """Serial quote fetcher with a fixed delay between requests"""

    def __init__(self, quote_source: QuoteSource, rate_limiter: Optional[RateLimiter] = None,
                 show_progress: bool = False):
        """
        Initialize the refresher.

        Args:
            quote_source: Source of current prices
            rate_limiter: Gate between requests (defaults to PortfolioConfig.QUOTE_DELAY_SECONDS)
            show_progress: Display a progress bar while fetching
        """
        self.quote_source = quote_source
        self.rate_limiter = rate_limiter or RateLimiter(PortfolioConfig.QUOTE_DELAY_SECONDS)
        self.show_progress = show_progress

    def refresh(self, holdings: Sequence[Holding]) -> List[ValuedHolding]:
        """
        Value every holding at its latest price.

        Args:
            holdings: Holdings to value; a snapshot is taken at call time

        Returns:
            ValuedHoldings in the same order and of the same length as holdings
        """
        snapshot = list(holdings)
        logger.info(f"Refreshing prices for {len(snapshot)} holdings")

        valued: List[ValuedHolding] = []
        failed = 0

        for holding in tqdm(snapshot, desc="Fetching quotes", disable=not self.show_progress):
            self.rate_limiter.acquire()
            try:
                price = self.quote_source.fetch_price(holding.ticker)
                valued.append(valuate(holding, price))
            except Exception as e:
                logger.warning(f"Failed to fetch price for {holding.ticker}, "
                               f"using purchase price {holding.purchase_price}: {e}")
                valued.append(valuate(holding, holding.purchase_price, price_stale=True))
                failed += 1
            finally:
                self.rate_limiter.release()

        logger.info(f"Refresh complete: {len(snapshot) - failed} priced, {failed} fell back to purchase price")
        return valued
