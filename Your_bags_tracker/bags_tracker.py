#!/usr/bin/env python3
"""
Your Bags: track a crypto portfolio against live CoinGecko prices.

Usage:
    your-bags show                  # Refresh prices and print holdings
    your-bags add bitcoin           # Add a coin by id, symbol or name
    your-bags qty bitcoin 0.25      # Set the held quantity
    your-bags move 0 2              # Move the first holding to third place
    your-bags remove bitcoin
    your-bags search eth
"""

# Standard library imports
import argparse
import sys
from pathlib import Path
from typing import List, Optional

# Third-party imports
from colorama import init, Fore, Style
from loguru import logger
from prettytable import PrettyTable

# Local imports
from Your_bags_tracker.catalog_resolver import CatalogResolver
from Your_bags_tracker.coingecko_client import CoinGeckoClient
from Your_bags_tracker.configuration_manager import (
    ConfigurationManager,
    ConfigurationError,
)
from Your_bags_tracker.data_provider import DataProvider
from Your_bags_tracker.globals import user_data_path
from Your_bags_tracker.notification_manager import NotificationManager
from Your_bags_tracker.persistence_adapter import PersistenceAdapter
from Your_bags_tracker.portfolio_store import PortfolioStore
from Your_bags_tracker.tracker_engine import TrackerEngine
from Your_bags_tracker.valuation_engine import format_usd

# Initialize colorama for colored console output
init(autoreset=True)


def setup_logging(level: str = "INFO", log_dir: str = "logs"):
    """
    Configure Loguru logging with console and file outputs.
    """
    logger.remove()

    Path(log_dir).mkdir(exist_ok=True)

    logger.add(
        sys.stdout,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>",
        colorize=True,
    )

    logger.add(
        f"{log_dir}/bags_tracker_debug.log",
        level="DEBUG",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}",
        rotation="10 MB",
        retention="7 days",
        compression="zip",
    )

    logger.add(
        f"{log_dir}/bags_tracker_errors.log",
        level="ERROR",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message} | {extra}",
        rotation="5 MB",
        retention="30 days",
        compression="zip",
    )


class BagsTracker:
    """
    Wires configuration, price service, storage and the tracker engine together.
    """

    def __init__(self, config_file: Optional[str] = None, creds_file: Optional[str] = None):
        """
        Load configuration and hydrate the portfolio from local storage.

        Raises:
            ConfigurationError: When the configuration cannot be loaded
        """
        config_file = config_file or f"{user_data_path}/config.yml"
        creds_file = creds_file or f"{user_data_path}/creds.yml"
        self.config_manager = ConfigurationManager(config_file, creds_file)

        api_options = self.config_manager.get_api_options()
        search_options = self.config_manager.get_search_options()
        display_options = self.config_manager.get_display_options()
        self.fetch_logos = display_options["FETCH_LOGOS"]

        self.client = CoinGeckoClient(
            base_url=api_options["API_BASE_URL"],
            timeout=api_options["REQUEST_TIMEOUT"],
            api_key=self.config_manager.get_api_key(),
        )
        logger.info(f"🔑 CoinGecko client initialized: {self.client.base_url}")

        self.persistence_adapter = PersistenceAdapter(
            self.config_manager.get_storage_filename(),
            self.config_manager.get_storage_key(),
        )
        self.portfolio_store = PortfolioStore(self.persistence_adapter)
        self.portfolio_store.hydrate()

        self.engine = TrackerEngine(
            self.portfolio_store,
            DataProvider(self.client, api_options["INCLUDE_24HR_CHANGE"]),
            CatalogResolver(
                self.client,
                min_query_length=search_options["MIN_QUERY_LENGTH"],
                max_suggestions=search_options["MAX_SUGGESTIONS"],
            ),
            NotificationManager(),
            logo_url_template=display_options["LOGO_URL_TEMPLATE"],
        )
        logger.success("🎯 Tracker ready")

    def refresh(self) -> bool:
        ok = self.engine.refresh_prices()
        if self.fetch_logos:
            self.engine.refresh_logos()
        return ok

    def shutdown(self):
        self.engine.shutdown()


def format_price(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return format_usd(value)


def format_change(value: Optional[float]) -> str:
    if value is None:
        return ""
    color = Fore.GREEN if value >= 0 else Fore.RED
    sign = "+" if value >= 0 else ""
    return f"{color}{sign}{value:.2f}%{Style.RESET_ALL}"


def render_holdings(engine: TrackerEngine) -> str:
    """Build the holdings table followed by the portfolio total."""
    table = PrettyTable()
    table.field_names = ["#", "Coin", "Symbol", "Quantity", "Price", "24h", "Value"]
    table.align["Coin"] = "l"
    table.align["Quantity"] = "r"
    table.align["Price"] = "r"
    table.align["Value"] = "r"

    for index, row in enumerate(engine.holdings_view()):
        table.add_row(
            [
                index,
                row["name"],
                row["symbol"].upper(),
                f"{row['quantity']:g}",
                format_price(row["price"]),
                format_change(row["change_24h"]),
                format_usd(row["value"]),
            ]
        )

    total = engine.valuation().total
    return f"{table}\n{Fore.GREEN}Total: {format_usd(total)}{Style.RESET_ALL}"


def print_notices(engine: TrackerEngine):
    colors = {"error": Fore.RED, "warning": Fore.YELLOW, "success": Fore.GREEN}
    for notice in engine.notification_manager.drain():
        print(f"{colors.get(notice.level, Fore.CYAN)}{notice.message}{Style.RESET_ALL}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="your-bags", description="Track your crypto bags against live prices."
    )
    parser.add_argument("--config", help="Path to config.yml")
    parser.add_argument("--creds", help="Path to creds.yml")
    parser.add_argument("--log-level", default="WARNING", help="Console log level")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("show", help="Refresh prices and show holdings")
    subparsers.add_parser("refresh", help="Same as show")

    add_parser = subparsers.add_parser("add", help="Add a coin by id, symbol or name")
    add_parser.add_argument("query", nargs="+")

    remove_parser = subparsers.add_parser("remove", help="Remove a coin by id")
    remove_parser.add_argument("coin_id")

    qty_parser = subparsers.add_parser("qty", help="Set the held quantity")
    qty_parser.add_argument("coin_id")
    qty_parser.add_argument("value")

    move_parser = subparsers.add_parser("move", help="Move a holding to another position")
    move_parser.add_argument("from_index", type=int)
    move_parser.add_argument("to_index", type=int)

    search_parser = subparsers.add_parser("search", help="Search the coin catalog")
    search_parser.add_argument("query", nargs="+")
    return parser


def run_command(tracker: BagsTracker, args: argparse.Namespace) -> int:
    engine = tracker.engine
    command = args.command or "show"
    exit_code = 0

    if command in ("show", "refresh"):
        if not tracker.refresh():
            exit_code = 1
        print(render_holdings(engine))

    elif command == "add":
        if engine.add(" ".join(args.query)):
            print(render_holdings(engine))
        else:
            exit_code = 1

    elif command == "remove":
        if not engine.remove(args.coin_id):
            print(f"{Fore.YELLOW}{args.coin_id} is not in your bags{Style.RESET_ALL}")
            exit_code = 1

    elif command == "qty":
        if args.coin_id not in engine.portfolio_store:
            print(f"{Fore.YELLOW}{args.coin_id} is not in your bags{Style.RESET_ALL}")
            exit_code = 1
        elif not engine.set_quantity(args.coin_id, args.value):
            exit_code = 1

    elif command == "move":
        if not engine.reorder(args.from_index, args.to_index):
            print(f"{Fore.YELLOW}Nothing moved{Style.RESET_ALL}")
            exit_code = 1

    elif command == "search":
        suggestions = engine.search(" ".join(args.query))
        for coin in suggestions:
            print(f"{coin.id:<30} {coin.name} ({coin.symbol.upper()})")
        if not suggestions:
            print(f"{Fore.YELLOW}No matches{Style.RESET_ALL}")

    print_notices(engine)
    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level.upper())

    try:
        tracker = BagsTracker(args.config, args.creds)
    except ConfigurationError as e:
        logger.error(f"⚙️ Configuration error: {e}")
        print(f"{Fore.RED}Configuration Error: {e}{Style.RESET_ALL}")
        return 1

    try:
        return run_command(tracker, args)
    except KeyboardInterrupt:
        logger.warning("⏹️ Interrupted by user")
        return 130
    finally:
        tracker.shutdown()


if __name__ == "__main__":
    sys.exit(main())
