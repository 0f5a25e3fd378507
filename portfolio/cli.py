"""
Portfolio Tracker CLI

Add, remove and list holdings, and refresh live prices to see P&L and
allocation.
"""

import argparse
import logging
import sys

from market_data.quote_source import create_quote_source
from portfolio.calculations import calculate_allocations, summarize
from portfolio.config import PortfolioConfig
from portfolio.holding_store import HoldingStore, parse_holding_input
from portfolio.refresh import PortfolioRefresher
from portfolio.report import allocations_frame, holdings_frame, summary_lines, valued_holdings_frame
from portfolio.storage import JsonFileStorage

# Logger will be configured in main()
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Track stock holdings and their profit/loss',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Record 10 shares of Apple bought at 150
  portfolio-tracker add AAPL 10 150

  # Fetch live prices and show P&L
  portfolio-tracker refresh

  # Use yfinance instead of Alpha Vantage
  portfolio-tracker --source yfinance refresh
        """
    )

    parser.add_argument(
        '--data-dir',
        type=str,
        default=PortfolioConfig.DATA_DIR,
        help=f'Directory holding the portfolio file (default: {PortfolioConfig.DATA_DIR})'
    )
    parser.add_argument(
        '--source',
        type=str,
        choices=['alphavantage', 'yfinance'],
        default=PortfolioConfig.QUOTE_SOURCE,
        help=f'Quote source (default: {PortfolioConfig.QUOTE_SOURCE})'
    )
    parser.add_argument(
        '--api-key',
        type=str,
        default=None,
        help='Alpha Vantage API key (default: $ALPHA_VANTAGE_API_KEY or "demo")'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default=PortfolioConfig.LOG_LEVEL,
        help=f'Logging level (default: {PortfolioConfig.LOG_LEVEL})'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    add_parser = subparsers.add_parser('add', help='Add a holding')
    add_parser.add_argument('ticker', help='Stock symbol (e.g., AAPL)')
    add_parser.add_argument('quantity', help='Number of shares')
    add_parser.add_argument('purchase_price', help='Price paid per share')

    remove_parser = subparsers.add_parser('remove', help='Remove a holding by id')
    remove_parser.add_argument('id', help='Holding id (see list)')

    subparsers.add_parser('list', help='Show stored holdings without fetching prices')
    subparsers.add_parser('refresh', help='Fetch live prices and show P&L')
    subparsers.add_parser('clear', help='Remove all holdings')

    search_parser = subparsers.add_parser('search', help='Search ticker symbols by company name')
    search_parser.add_argument('keywords', help='Company name or partial symbol')

    return parser


def _refresh(store: HoldingStore, args) -> None:
    holdings = store.load()
    if not holdings:
        print("No stocks in your portfolio yet. Add one with: portfolio-tracker add TICKER QUANTITY PRICE")
        return

    refresher = PortfolioRefresher(
        create_quote_source(args.source, api_key=args.api_key),
        show_progress=True
    )
    valued = refresher.refresh(holdings)
    summary = summarize(valued)

    print("\n" + "=" * 60)
    print("Portfolio Summary")
    print("=" * 60)
    for line in summary_lines(summary):
        print(line)
    print("=" * 60)
    print(valued_holdings_frame(valued).to_string(index=False))

    allocations = calculate_allocations(valued)
    if allocations:
        print("\nAllocation")
        print(allocations_frame(allocations).to_string(index=False))

    stale = [v.ticker for v in valued if v.price_stale]
    if stale:
        print(f"\n⚠ Live price unavailable, showing purchase price for: {', '.join(stale)}")


def main(argv=None):
    """
    Main CLI entry point.

    Returns:
        Exit code (0 on success, 1 on error)
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    store = HoldingStore(JsonFileStorage(args.data_dir))

    try:
        if args.command == 'add':
            fields = parse_holding_input(args.ticker, args.quantity, args.purchase_price)
            holding = store.add(**fields)
            print(f"✓ Added {holding.ticker}: {holding.quantity} @ {holding.purchase_price} (id {holding.id})")

        elif args.command == 'remove':
            if store.remove(args.id):
                print(f"✓ Removed {args.id}")
            else:
                print(f"No holding with id {args.id}, nothing removed")

        elif args.command == 'list':
            holdings = store.load()
            if holdings:
                print(holdings_frame(holdings).to_string(index=False))
            else:
                print("No stocks in your portfolio yet.")

        elif args.command == 'clear':
            store.clear()
            print("✓ Cleared all holdings")

        elif args.command == 'search':
            source = create_quote_source(args.source, api_key=args.api_key)
            matches = source.search_symbol(args.keywords)
            if not matches:
                print(f"No matches for '{args.keywords}'")
            for match in matches:
                print(f"{match.symbol:<12} {match.name} {match.region}".rstrip())

        elif args.command == 'refresh':
            _refresh(store, args)

        return 0

    except ValueError as e:
        logger.error(f"Validation error: {e}")
        print(f"\n❌ Error: {e}\n", file=sys.stderr)
        return 1

    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        print(f"\n❌ Unexpected error: {e}\n", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
