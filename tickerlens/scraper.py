"""Scrape orchestration for the stock and fund page templates.

Each ticker class has one concrete scraper that declares where its page
lives, which selectors signal readiness, and which field table to run.
The shared flow in ``BaseScraper.scrape``:

1. Open an isolated page context from the session manager
2. Navigate, waiting only for the initial document to be parsed
3. Wait for every readiness selector concurrently, tolerating misses
4. Snapshot the DOM and resolve the full field table

Design Rationale:
    Waiting for ``domcontentloaded`` instead of the full load trades some
    completeness for latency. The readiness waits claw most of it back, and
    any field still missing is reported as absent rather than failing the
    request. Only navigation itself is fatal.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import StrEnum

from playwright.async_api import Error as PlaywrightError, Page

from config.settings import GlobalConfig, get_config
from tickerlens.browser import SessionManager
from tickerlens.extractor import FieldSpec, RawFieldMap, extract_fields, parse_document
from tickerlens.fields import EQUITY_FIELDS, FUND_FIELDS
from tickerlens.logger import get_logger
from tickerlens.validator import check_coverage

log = get_logger(__name__)


class TickerClass(StrEnum):
    """Ticker class, valued by its URL path segment on the site."""

    EQUITY = "acoes"
    FUND = "fiis"


class BaseScraper(ABC):
    """Template for one ticker class's page.

    Subclasses declare the page specifics; the scrape flow is shared.

    Attributes:
        config: GlobalConfig instance for runtime configuration.
        session: SessionManager providing page contexts.
    """

    ticker_class: TickerClass

    def __init__(self, session: SessionManager, config: GlobalConfig | None = None) -> None:
        self.config = config or get_config()
        self.session = session

    @property
    @abstractmethod
    def fields(self) -> Mapping[str, FieldSpec]:
        """Field table resolved on every scrape."""
        ...

    @property
    @abstractmethod
    def readiness_selectors(self) -> list[str]:
        """Page-structure markers awaited before extraction."""
        ...

    @property
    @abstractmethod
    def navigation_timeout_ms(self) -> int: ...

    @property
    @abstractmethod
    def readiness_timeout_ms(self) -> int: ...

    def url_for(self, ticker: str) -> str:
        """Build the ticker page URL from the lower-cased ticker."""
        return f"{self.config.base_url}{self.ticker_class.value}/{ticker.strip().lower()}/"

    async def wait_for_readiness(self, page: Page, selector: str) -> bool:
        """Wait for one readiness selector, swallowing its failure.

        Returns:
            True if the selector appeared, False otherwise.
        """
        try:
            await page.wait_for_selector(selector, timeout=self.readiness_timeout_ms)
            return True
        except PlaywrightError as exc:
            log.debug(
                "Suppressed readiness wait failure",
                selector=selector,
                timeout_ms=self.readiness_timeout_ms,
                error=str(exc),
            )
            return False

    async def scrape(self, ticker: str) -> RawFieldMap:
        """Load the ticker page and resolve every field.

        Args:
            ticker: Exchange code, any case.

        Returns:
            Read-only field map; absent fields map to None.

        Raises:
            TickerNotFoundError: If the page answers 404.
            NavigationError: If navigation fails for any other reason.
        """
        url = self.url_for(ticker)
        log.info("Starting scrape", ticker=ticker, ticker_class=self.ticker_class.name, url=url)

        async with self.session.page() as page:
            await self.session.navigate(page, url, timeout_ms=self.navigation_timeout_ms, ticker=ticker)

            ready = await asyncio.gather(
                *(self.wait_for_readiness(page, selector) for selector in self.readiness_selectors)
            )
            if not all(ready):
                log.info("Proceeding with partially ready page", ticker=ticker, ready=list(ready))

            try:
                html = await page.content()
            except PlaywrightError as exc:
                log.debug("Suppressed page snapshot failure", ticker=ticker, error=str(exc))
                html = ""

        raw = extract_fields(parse_document(html), self.fields)
        check_coverage(raw, url, self.config)

        log.info(
            "Scrape complete",
            ticker=ticker,
            resolved=sum(value is not None for value in raw.values()),
            total=len(raw),
        )
        return raw


class EquityScraper(BaseScraper):
    """Stock page: header cards plus the indicator grid."""

    ticker_class = TickerClass.EQUITY

    @property
    def fields(self) -> Mapping[str, FieldSpec]:
        return EQUITY_FIELDS

    @property
    def readiness_selectors(self) -> list[str]:
        return self.config.equity_readiness_selectors

    @property
    def navigation_timeout_ms(self) -> int:
        return self.config.equity_navigation_timeout_ms

    @property
    def readiness_timeout_ms(self) -> int:
        return self.config.equity_readiness_timeout_ms


class FundScraper(BaseScraper):
    """Real-estate fund page: header cards plus the fund details block."""

    ticker_class = TickerClass.FUND

    @property
    def fields(self) -> Mapping[str, FieldSpec]:
        return FUND_FIELDS

    @property
    def readiness_selectors(self) -> list[str]:
        return self.config.fund_readiness_selectors

    @property
    def navigation_timeout_ms(self) -> int:
        return self.config.fund_navigation_timeout_ms

    @property
    def readiness_timeout_ms(self) -> int:
        return self.config.fund_readiness_timeout_ms


SCRAPERS: dict[TickerClass, type[BaseScraper]] = {
    TickerClass.EQUITY: EquityScraper,
    TickerClass.FUND: FundScraper,
}


async def scrape(
    session: SessionManager,
    ticker: str,
    ticker_class: TickerClass,
    config: GlobalConfig | None = None,
) -> RawFieldMap:
    """Scrape one ticker with the scraper registered for its class."""
    scraper = SCRAPERS[ticker_class](session, config)
    return await scraper.scrape(ticker)
