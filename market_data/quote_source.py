"""
Quote Source Abstraction

Provides abstract interface and implementations for fetching the current
price of a single ticker. Responses are validated into typed schemas and
failures are raised as QuoteError subclasses. No retries, no caching.
"""

import logging
import math
import requests
import yfinance as yf
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from portfolio.config import PortfolioConfig

logger = logging.getLogger(__name__)


class QuoteError(ValueError):
    """Quote could not be fetched"""


class UnknownSymbolError(QuoteError):
    """Provider does not recognize the ticker"""


class RateLimitError(QuoteError):
    """Provider rejected the request because of its rate limit"""


class MissingPriceError(QuoteError):
    """Response did not contain a usable price"""


def _parse_float(raw: Any) -> Optional[float]:
    if raw is None or raw == '':
        return None
    try:
        value = float(str(raw).strip().rstrip('%'))
    except ValueError:
        return None
    return value if math.isfinite(value) else None


@dataclass(frozen=True)
class GlobalQuote:
    """Validated Alpha Vantage GLOBAL_QUOTE payload"""
    symbol: str
    price: float
    change: Optional[float] = None
    change_percent: Optional[float] = None

    @classmethod
    def from_response(cls, symbol: str, data: Any) -> 'GlobalQuote':
        """
        Validate a decoded GLOBAL_QUOTE response.

        Example response:
            {"Global Quote": {"01. symbol": "AAPL", "05. price": "180.75",
                              "09. change": "2.50", "10. change percent": "1.40%"}}

        Raises:
            UnknownSymbolError: Response carries 'Error Message'
            RateLimitError: Response carries 'Note' or 'Information'
            MissingPriceError: No quote object or no parseable price
        """
        if not isinstance(data, dict):
            raise MissingPriceError(f"No price data available for {symbol}")

        if 'Error Message' in data:
            raise UnknownSymbolError(f"Invalid stock symbol: {symbol}")

        if 'Note' in data or 'Information' in data:
            raise RateLimitError("API rate limit reached. Please wait a minute.")

        quote = data.get('Global Quote')
        if not isinstance(quote, dict) or not quote.get('05. price'):
            raise MissingPriceError(f"No price data available for {symbol}")

        price = _parse_float(quote['05. price'])
        if price is None:
            raise MissingPriceError(f"Unparseable price for {symbol}: {quote['05. price']!r}")

        return cls(
            symbol=quote.get('01. symbol') or symbol,
            price=price,
            change=_parse_float(quote.get('09. change')),
            change_percent=_parse_float(quote.get('10. change percent'))
        )


@dataclass(frozen=True)
class SymbolMatch:
    """One symbol search result"""
    symbol: str
    name: str
    region: str = ''
    currency: str = ''
    match_score: Optional[float] = None


class QuoteSource(ABC):
    """Abstract base class for quote sources"""

    @abstractmethod
    def fetch_price(self, ticker: str) -> float:
        """
        Fetch the current price for a single ticker.

        Args:
            ticker: Stock symbol

        Returns:
            Latest price per share

        Raises:
            QuoteError: If the price cannot be obtained
        """
        pass

    @abstractmethod
    def search_symbol(self, keywords: str) -> List[SymbolMatch]:
        """
        Search for ticker symbols by company name.

        Returns:
            Best matches, or an empty list on any failure
        """
        pass


class AlphaVantageQuoteSource(QuoteSource):
    """Alpha Vantage GLOBAL_QUOTE / SYMBOL_SEARCH client"""

    def __init__(self, api_key: str = None, base_url: str = None, timeout: float = None):
        """
        Initialize the Alpha Vantage client.

        Args:
            api_key: Alpha Vantage API key (defaults to PortfolioConfig)
            base_url: Query endpoint (defaults to PortfolioConfig)
            timeout: Request timeout in seconds (defaults to PortfolioConfig)
        """
        self.api_key = api_key or PortfolioConfig.ALPHA_VANTAGE_API_KEY
        self.base_url = base_url or PortfolioConfig.ALPHA_VANTAGE_BASE_URL
        self.timeout = timeout or PortfolioConfig.REQUEST_TIMEOUT

        if not self.api_key:
            raise ValueError("Alpha Vantage API key is required")

        logger.debug(f"Initialized AlphaVantageQuoteSource: base_url={self.base_url}")

    def _get(self, params: Dict[str, str]) -> Any:
        params = {**params, 'apikey': self.api_key}

        try:
            response = requests.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise QuoteError(f"Failed to fetch data from Alpha Vantage: {str(e)}") from e

        try:
            return response.json()
        except ValueError as e:
            raise QuoteError(f"Failed to parse Alpha Vantage response: {str(e)}") from e

    def fetch_global_quote(self, ticker: str) -> GlobalQuote:
        """Fetch and validate the full GLOBAL_QUOTE record for a ticker"""
        logger.debug(f"Fetching quote for {ticker}")

        try:
            data = self._get({'function': 'GLOBAL_QUOTE', 'symbol': ticker})
            quote = GlobalQuote.from_response(ticker, data)
        except QuoteError as e:
            logger.error(f"Error fetching price for {ticker}: {e}")
            raise

        logger.debug(f"{ticker} quoted at {quote.price}")
        return quote

    def fetch_price(self, ticker: str) -> float:
        return self.fetch_global_quote(ticker).price

    def search_symbol(self, keywords: str) -> List[SymbolMatch]:
        try:
            data = self._get({'function': 'SYMBOL_SEARCH', 'keywords': keywords})
        except QuoteError as e:
            logger.error(f"Error searching symbols for '{keywords}': {e}")
            return []

        matches = data.get('bestMatches') if isinstance(data, dict) else None
        if not isinstance(matches, list):
            logger.warning(f"No 'bestMatches' field in search response for '{keywords}'")
            return []

        results = []
        for match in matches:
            if not isinstance(match, dict) or not match.get('1. symbol'):
                continue
            results.append(SymbolMatch(
                symbol=match['1. symbol'],
                name=match.get('2. name', ''),
                region=match.get('4. region', ''),
                currency=match.get('8. currency', ''),
                match_score=_parse_float(match.get('9. matchScore'))
            ))

        logger.info(f"Found {len(results)} matches for '{keywords}'")
        return results


class YFinanceQuoteSource(QuoteSource):
    """yfinance implementation, no API key required"""

    def fetch_price(self, ticker: str) -> float:
        try:
            fast_info = yf.Ticker(ticker).fast_info
            last_price = getattr(fast_info, 'last_price', None)
        except Exception as e:
            error_msg = f"Failed to fetch price for {ticker}: {str(e)}"
            logger.error(error_msg)
            raise QuoteError(error_msg) from e

        price = _parse_float(last_price)
        if price is None:
            error_msg = f"No price data available for {ticker}"
            logger.error(error_msg)
            raise MissingPriceError(error_msg)

        return price

    def search_symbol(self, keywords: str) -> List[SymbolMatch]:
        try:
            quotes = yf.Search(keywords, max_results=10).quotes
        except Exception as e:
            logger.error(f"Error searching symbols for '{keywords}': {e}")
            return []

        return [
            SymbolMatch(
                symbol=q['symbol'],
                name=q.get('shortname') or q.get('longname') or '',
                region=q.get('exchange', '')
            )
            for q in quotes
            if isinstance(q, dict) and q.get('symbol')
        ]


def create_quote_source(name: str = None, api_key: str = None) -> QuoteSource:
    """
    Build a quote source by name.

    Args:
        name: 'alphavantage' or 'yfinance' (defaults to PortfolioConfig)
        api_key: Alpha Vantage API key override

    Raises:
        ValueError: If name is unknown
    """
    name = (name or PortfolioConfig.QUOTE_SOURCE).lower()
    if name == 'alphavantage':
        return AlphaVantageQuoteSource(api_key=api_key)
    if name == 'yfinance':
        return YFinanceQuoteSource()
    raise ValueError(f"Unknown quote source: {name}")
