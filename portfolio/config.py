"""
Unified configuration for the portfolio tracker
Used by the holding store, quote sources and the CLI
"""

import os


class PortfolioConfig:
    """Unified configuration for the portfolio tracker"""

    # Market data
    QUOTE_SOURCE = os.getenv('PORTFOLIO_QUOTE_SOURCE', 'alphavantage')  # 'alphavantage' or 'yfinance'
    ALPHA_VANTAGE_API_KEY = os.getenv('ALPHA_VANTAGE_API_KEY', 'demo')
    ALPHA_VANTAGE_BASE_URL = 'https://www.alphavantage.co/query'
    REQUEST_TIMEOUT = 30  # seconds

    # Rate limiting (free tier = 5 calls/minute)
    QUOTE_DELAY_SECONDS = 0.3

    # Storage
    DATA_DIR = os.getenv('PORTFOLIO_DATA_DIR', 'data')
    STORAGE_KEY = 'portfolio_stocks'

    # Display
    CURRENCY_SYMBOL = '£'

    # Logging
    LOG_LEVEL = os.getenv('PORTFOLIO_LOG_LEVEL', 'INFO')
