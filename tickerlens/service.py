"""Ticker analysis: scrape, gate on essential data, assemble the report."""

from typing import Any

from config.settings import GlobalConfig
from tickerlens.browser import SessionManager
from tickerlens.logger import get_logger
from tickerlens.report import assemble_equity_report, assemble_fund_report
from tickerlens.scraper import TickerClass, scrape
from tickerlens.validator import ensure_essential_fields

log = get_logger(__name__)

ASSEMBLERS = {
    TickerClass.EQUITY: assemble_equity_report,
    TickerClass.FUND: assemble_fund_report,
}


async def analyze_ticker(
    session: SessionManager,
    ticker: str,
    ticker_class: TickerClass,
    config: GlobalConfig | None = None,
) -> dict[str, Any]:
    """Produce the JSON report for one ticker.

    Args:
        session: Shared browser session manager.
        ticker: Exchange code, any case.
        ticker_class: Stock or real-estate fund.
        config: Optional GlobalConfig. Uses singleton if not provided.

    Returns:
        JSON-ready report dict.

    Raises:
        TickerNotFoundError: If the ticker page does not exist.
        NavigationError: If the page could not be loaded.
        IncompleteDataError: If the market price is missing.
    """
    raw = await scrape(session, ticker, ticker_class, config)
    ensure_essential_fields(raw, ticker)

    report = ASSEMBLERS[ticker_class](ticker, raw)
    log.info("Report assembled", ticker=report["ticker"], ticker_class=ticker_class.name)
    return report
