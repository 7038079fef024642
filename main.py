# main.py

"""Entry point for the shopdash dashboard (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from shopdash.config.logging_config import setup_logging
from shopdash.config.settings import Settings

logger = logging.getLogger("shopdash.main")

_COMMANDS = ("products", "product", "cart")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="shopdash",
        description="Product catalog and cart dashboard.",
        epilog=f"Remote API: {Settings.API_BASE_URL}",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default=None,
        choices=_COMMANDS,
        help="Headless command. Omit to launch the interactive TUI.",
    )
    parser.add_argument(
        "product_id",
        nargs="?",
        default=None,
        help="Product id for the 'product' command.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--email",
        default=None,
        help="Sign-in email (default: SHOPDASH_EMAIL).",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Sign-in password (default: SHOPDASH_PASSWORD).",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on the remote API.",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from shopdash.ui.app import DashboardApp

    try:
        app = DashboardApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("shopdash TUI shutting down")


def _run_cli(args: argparse.Namespace) -> None:
    """Run one headless command and exit."""
    from shopdash.cli import runner

    if args.command == "product" and not args.product_id:
        _build_parser().error("the 'product' command needs a product id")

    services = runner.sign_in(args.email, args.password)
    if services is None:
        sys.exit(1)
    try:
        if args.command == "products":
            exit_code = runner.run_list_products(
                services, args.output_format
            )
        elif args.command == "product":
            exit_code = runner.run_show_product(
                services, args.product_id, args.output_format
            )
        else:
            exit_code = runner.run_show_cart(services, args.output_format)
    finally:
        services.close()
    sys.exit(exit_code)


def _run_health_check() -> None:
    """Run remote API connectivity health check."""
    from shopdash.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check())
    sys.exit(exit_code)


def main() -> None:
    """Route to TUI (no args) or a headless command."""
    log_file = setup_logging()
    logger.info("shopdash starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.health:
        _run_health_check()
    elif args.command is None:
        _run_tui()
    else:
        _run_cli(args)


if __name__ == "__main__":
    main()
