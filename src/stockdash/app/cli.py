"""
Command-line interface for the stock dashboard data pipeline.
Provides commands for preprocessing, metadata merge, logo sync, listing, statistics and serving.
"""

import argparse
import json
import sys

from loguru import logger

from stockdash.analytics.table import SortField
from stockdash.core.errors import StockDashError
from stockdash.core.logging import configure_logging


def setup_logging(verbose: bool = False):
    """Configure logging based on verbosity."""
    from stockdash.core.config import settings

    level = "DEBUG" if verbose else settings.log_level
    configure_logging(level=level)


def cmd_preprocess(args):
    """Handle preprocess command."""
    from stockdash.core.config import settings
    from stockdash.pipeline.runner import run_preprocess

    report = run_preprocess(settings)

    print(f"\n{'='*50}")
    print("  Preprocess complete")
    print(f"{'='*50}")
    print(f"  Eligible:  {report.eligible}")
    print(f"  Processed: {report.processed}")
    print(f"  Skipped:   {report.skipped_count}")
    print(f"  Output:    {settings.output_dir}")
    print(f"{'='*50}\n")


def cmd_merge_metadata(args):
    """Handle merge-metadata command."""
    from stockdash.core.config import settings
    from stockdash.pipeline.runner import run_merge

    matched = run_merge(settings)
    print(f"Matched metadata for {matched} stocks")


def cmd_sync_logos(args):
    """Handle sync-logos command."""
    from stockdash.core.config import settings
    from stockdash.pipeline.logo_sync import sync_logos

    copied = sync_logos(settings.logos_source_path, settings.logos_dest_dir)
    print(f"Copied {copied} logos to {settings.logos_dest_dir}")


def cmd_build(args):
    """Run preprocess then merge-metadata."""
    cmd_preprocess(args)
    cmd_merge_metadata(args)


def cmd_stats(args):
    """Handle stats command."""
    from stockdash.analytics.formatting import (
        category_label,
        exchange_label,
        format_market_cap,
        format_volume,
    )
    from stockdash.analytics.stats import summarize_series
    from stockdash.app.cache import StockDataCache
    from stockdash.core.config import settings

    symbol = args.symbol
    cache = StockDataCache(settings.output_dir)
    stock = cache.get_stock(symbol)
    if stock is None:
        logger.error(f"Symbol not in index: {symbol}")
        sys.exit(1)

    stats = summarize_series(cache.get_series(symbol), args.range)

    if args.json:
        print(json.dumps(stats.to_json_dict(), indent=2))
        return

    def price(value):
        return f"${value:,.2f}" if value is not None else "â"

    sign = "+" if stock.variation_percent >= 0 else ""
    print(f"\n{'='*60}")
    print(f"  {stock.symbol}  {stock.name}")
    print(f"{'='*60}")
    print(f"  Exchange:     {exchange_label(stock.exchange)} ({category_label(stock.market_category)})")
    if stock.sector or stock.industry:
        print(f"  Sector:       {stock.sector or 'â'} / {stock.industry or 'â'}")
    print(f"  Last price:   {price(stock.last_price)} ({sign}{stock.variation_percent:.2f}%) as of {stock.last_date}")
    print(f"  52w high:     {price(stats.fifty_two_week_high)}")
    print(f"  52w low:      {price(stats.fifty_two_week_low)}")
    print(f"  Avg volume:   {format_volume(stats.average_volume)}")
    print(f"  Market cap:   {format_market_cap(stock.market_cap)}")
    print(f"  History:      {stats.trading_days} trading days, {len(stats.points)} points in {stats.range}")

    if stats.points:
        print("\n  Latest points:")
        print(f"  {'Date':<12} {'Open':>10} {'High':>10} {'Low':>10} {'Close':>10} {'Volume':>12}")
        print(f"  {'-'*12} {'-'*10} {'-'*10} {'-'*10} {'-'*10} {'-'*12}")
        for p in stats.points[-5:]:
            print(f"  {p.date:<12} {p.open:>10.2f} {p.high:>10.2f} {p.low:>10.2f} {p.close:>10.2f} {p.volume:>12,}")

    print(f"{'='*60}\n")


def cmd_list(args):
    """Handle list command."""
    from stockdash.analytics.formatting import exchange_label
    from stockdash.analytics.table import filter_options, search_stocks, sort_stocks
    from stockdash.app.cache import StockDataCache
    from stockdash.core.config import settings

    stocks = StockDataCache(settings.output_dir).get_index().stocks

    if args.filters:
        options = filter_options(stocks)
        exchanges = [f"{exchange_label(e)} ({e})" for e in options.exchanges]
        print(f"Exchanges:  {', '.join(exchanges) or '—'}")
        print(f"Sectors:    {', '.join(options.sectors) or '—'}")
        print(f"Industries: {', '.join(options.industries) or '—'}")
        return

    matches = search_stocks(stocks, args.search, args.exchange, args.sector, args.industry)
    rows = sort_stocks(matches, args.sort, args.desc)[:args.limit]

    if args.json:
        print(json.dumps([s.to_json_dict() for s in rows], indent=2))
        return

    print(f"\n  {'Symbol':<8} {'Name':<32} {'Last':>10} {'Change':>9} {'Exchange':<8} {'Sector'}")
    print(f"  {'-'*8} {'-'*32} {'-'*10} {'-'*9} {'-'*8} {'-'*20}")
    for s in rows:
        change = f"{s.variation_percent:+.2f}%"
        print(f"  {s.symbol:<8} {s.name[:32]:<32} {s.last_price:>10.2f} {change:>9} "
              f"{exchange_label(s.exchange):<8} {s.sector or '—'}")
    print(f"\n  Showing {len(rows)} of {len(matches)} matching stocks\n")


def cmd_serve(args):
    """Serve the artifacts and statistics API."""
    import uvicorn

    uvicorn.run("stockdash.app.api:app", host=args.host, port=args.port)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Stock dashboard data pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  stockdash preprocess
  stockdash merge-metadata
  stockdash build
  stockdash stats AAPL --range 6M
  stockdash stats MSFT --range ALL --json
  stockdash list -q apple --sort variationPercent --desc
  stockdash list --filters
  stockdash serve --port 8000
        """
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    preprocess_parser = subparsers.add_parser(
        "preprocess", help="Build stocks-index.json and per-symbol price files"
    )
    preprocess_parser.set_defaults(func=cmd_preprocess)

    merge_parser = subparsers.add_parser(
        "merge-metadata", help="Merge company metadata into the index and sync logos"
    )
    merge_parser.set_defaults(func=cmd_merge_metadata)

    logos_parser = subparsers.add_parser("sync-logos", help="Copy logos into the served assets")
    logos_parser.set_defaults(func=cmd_sync_logos)

    build_parser = subparsers.add_parser("build", help="Run preprocess and merge-metadata")
    build_parser.set_defaults(func=cmd_build)

    stats_parser = subparsers.add_parser("stats", help="Show detail statistics for a symbol")
    stats_parser.add_argument("symbol", help="Ticker symbol as listed in the index")
    stats_parser.add_argument("--range", choices=["1M", "3M", "6M", "1Y", "ALL"], default="1Y",
                              help="Chart range")
    stats_parser.add_argument("--json", action="store_true", help="Output as JSON")
    stats_parser.set_defaults(func=cmd_stats)

    list_parser = subparsers.add_parser("list", help="Search, filter and sort the stocks index")
    list_parser.add_argument("-q", "--search", default="", help="Contains-match over symbol, name, exchange, industry, sector")
    list_parser.add_argument("--exchange", help="Exchange code filter (Q, N, A, P)")
    list_parser.add_argument("--sector", help="Sector filter")
    list_parser.add_argument("--industry", help="Industry filter")
    list_parser.add_argument("--sort", choices=[f.value for f in SortField], default="symbol",
                             help="Sort column")
    list_parser.add_argument("--desc", action="store_true", help="Sort descending")
    list_parser.add_argument("--limit", type=int, default=20, help="Maximum rows to show")
    list_parser.add_argument("--filters", action="store_true", help="Show the available filter values")
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")
    list_parser.set_defaults(func=cmd_list)

    serve_parser = subparsers.add_parser("serve", help="Serve artifacts over HTTP")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args()

    setup_logging(verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        args.func(args)
    except StockDashError as e:
        logger.error(f"{args.command} failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
