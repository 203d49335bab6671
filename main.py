# main.py

"""Entry point for the price_trends command line."""

import argparse
import logging
import sys
from pathlib import Path

from src.config.logging_config import setup_logging

logger = logging.getLogger("price_trends.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="price_trends",
        description="Product price history and trend forecasts.",
    )
    parser.add_argument(
        "--db",
        default=None,
        dest="db_path",
        help="SQLite database path (default: data/price_history.db).",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    add = commands.add_parser(
        "add-product", help="Create a catalog product.",
    )
    add.add_argument("price", type=float)
    add.add_argument("-t", "--title", default="")

    set_price = commands.add_parser(
        "set-price", help="Change a product's catalog price.",
    )
    set_price.add_argument("product_id", type=int)
    set_price.add_argument("price", type=float)

    correct = commands.add_parser(
        "correct-price",
        help="Append an administrative price correction.",
    )
    correct.add_argument("product_id", type=int)
    correct.add_argument("price", type=float)

    for name, help_text in (
        ("history", "Show a product's recorded price events."),
        ("series", "Show monthly prices with a 3-month forecast."),
    ):
        query = commands.add_parser(name, help=help_text)
        query.add_argument("product_id", type=int)
        query.add_argument(
            "-f",
            "--format",
            choices=["json", "table"],
            default="json",
            dest="output_format",
            help="Output format (default: json).",
        )
    return parser


def run(args: argparse.Namespace) -> int:
    """Dispatch a parsed command and return its exit code."""
    from src.cli import runner

    db_path = Path(args.db_path) if args.db_path else None

    if args.command == "add-product":
        return runner.run_add_product(args.price, args.title, db_path)
    if args.command == "set-price":
        return runner.run_set_price(args.product_id, args.price, db_path)
    if args.command == "correct-price":
        return runner.run_correct_price(
            args.product_id, args.price, db_path,
        )
    if args.command == "history":
        return runner.run_history(
            args.product_id, args.output_format, db_path,
        )
    return runner.run_series(
        args.product_id, args.output_format, db_path,
    )


def main() -> None:
    """Parse arguments, run one command and exit with its status."""
    log_file = setup_logging()
    logger.info("price_trends starting, log file: %s", log_file)

    args = _build_parser().parse_args()
    try:
        exit_code = run(args)
    except Exception:
        logger.critical("Fatal error running %s", args.command, exc_info=True)
        raise
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
