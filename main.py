"""TickerLens Entry Point.

This module is the bootstrap layer. It contains NO business logic - all
functional code resides in /tickerlens.

Responsibilities:
    1. Load and validate configuration
    2. Initialize logging infrastructure (fail-fast on error)
    3. Serve the HTTP API, or analyze a single ticker from the command line
    4. Handle top-level exceptions with a meaningful exit code

Usage:
    python main.py                  # serve the API
    python main.py PETR4            # print a stock report
    python main.py HGLG11 --fund    # print a fund report
"""

import argparse
import asyncio
import json
import sys
from typing import NoReturn

from loguru import logger

from config.settings import GlobalConfig, get_config
from tickerlens.exceptions import (
    IncompleteDataError,
    LoggingInitializationError,
    TickerLensError,
    TickerNotFoundError,
)
from tickerlens.logger import configure_logging


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fundamental indicators for B3 tickers")
    parser.add_argument("ticker", nargs="?", help="Analyze one ticker and exit")
    parser.add_argument("--fund", action="store_true", help="Treat the ticker as a real-estate fund")
    return parser.parse_args(argv)


async def _analyze_once(config: GlobalConfig, ticker: str, fund: bool) -> int:
    """Run one analysis with a private session and print the report.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    from tickerlens.browser import SessionManager
    from tickerlens.scraper import TickerClass
    from tickerlens.service import analyze_ticker

    ticker_class = TickerClass.FUND if fund else TickerClass.EQUITY
    session = SessionManager(config)
    try:
        report = await analyze_ticker(session, ticker, ticker_class, config)
    finally:
        await session.close()

    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0


def _serve(config: GlobalConfig) -> int:
    import uvicorn

    from tickerlens.api import create_app

    logger.info("Starting HTTP server", host=config.host, port=config.port)
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_config=None)
    return 0


def _handle_fatal_error(exc: Exception) -> NoReturn:
    """Handle fatal errors with structured logging and graceful exit.

    Args:
        exc: The exception that caused the fatal error.
    """
    if isinstance(exc, TickerNotFoundError):
        logger.error("Ticker not found", ticker=exc.ticker)
        sys.exit(3)

    if isinstance(exc, IncompleteDataError):
        logger.error("Incomplete data", ticker=exc.ticker, missing=exc.missing)
        sys.exit(4)

    if isinstance(exc, TickerLensError):
        logger.critical(
            "Fatal application error",
            error_type=type(exc).__name__,
            message=exc.message,
            context=exc.context,
        )
        sys.exit(1)

    logger.exception("Unexpected fatal error", error=str(exc))
    sys.exit(1)


def main(argv: list[str] | None = None) -> int:
    """Application entry point.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    args = _parse_args(argv)

    # Step 1: Load configuration (validates via Pydantic)
    try:
        config = get_config()
    except Exception as exc:
        # Cannot log yet - print to stderr
        print(f"FATAL: Configuration loading failed: {exc}", file=sys.stderr)
        return 1

    # Step 2: Initialize logging (fail-fast)
    try:
        configure_logging(config)
    except LoggingInitializationError as exc:
        print(f"FATAL: {exc}", file=sys.stderr)
        return 1

    # Step 3: Serve or analyze once
    try:
        if args.ticker:
            return asyncio.run(_analyze_once(config, args.ticker, args.fund))
        return _serve(config)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (Ctrl+C)")
        return 130  # Standard Unix SIGINT exit code
    except Exception as exc:
        _handle_fatal_error(exc)


if __name__ == "__main__":
    sys.exit(main())
