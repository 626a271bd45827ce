"""Browser session management for repeated ticker scrapes.

This module owns the one Chromium process the service shares across
requests and hands out short-lived page contexts on top of it:
- Lazy launch on first use, liveness check before every reuse
- Relaunch after a crash or disconnect, serialized so concurrent requests
  share a single in-flight launch
- Reduced-resource launch flags for shared-memory hosts
- Per-request browser contexts with a resource-type request filter and
  light stealth settings, always closed on exit

Design Rationale:
    A browser launch costs seconds while a new context costs milliseconds,
    so the process is kept warm and each request gets its own isolated
    context. Nothing in a context outlives the request that opened it.

Anti-Bot Measures:
    - Disables navigator.webdriver flag
    - Randomizes viewport dimensions within realistic bounds
    - Rotates user-agents from a configurable pool
"""

import asyncio
import random
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from playwright.async_api import (
    Browser,
    Error as PlaywrightError,
    Page,
    Playwright,
    Route,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from config.settings import GlobalConfig, get_config
from tickerlens.exceptions import (
    BrowserInitializationError,
    NavigationError,
    TickerNotFoundError,
)
from tickerlens.logger import get_logger

log = get_logger(__name__)

# Trades isolation and parallelism for survival under tight memory limits.
CONSTRAINED_LAUNCH_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--single-process",
    "--disable-gpu",
)

STEALTH_JS = """
Object.defineProperty(navigator, 'webdriver', {
    get: () => undefined,
});
Object.defineProperty(navigator, 'languages', {
    get: () => ['pt-BR', 'pt', 'en-US', 'en'],
});
window.chrome = {
    runtime: {},
};
"""


class SessionManager:
    """Owns the shared browser process and opens per-request pages.

    Attributes:
        config: GlobalConfig instance for runtime configuration.
        _playwright: Playwright driver (started with the first launch).
        _browser: Live Chromium handle, or None before the first launch.
        _lock: Serializes acquisition so only one relaunch runs at a time.

    Example:
        session = SessionManager(config)
        async with session.page() as page:
            await session.navigate(page, url, timeout_ms=60000)
        await session.close()
    """

    def __init__(self, config: GlobalConfig | None = None) -> None:
        self.config = config or get_config()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()

    @property
    def launch_args(self) -> list[str]:
        """Chromium flags for the configured deployment mode."""
        if self.config.constrained_mode:
            return list(CONSTRAINED_LAUNCH_ARGS)
        return []

    @property
    def is_connected(self) -> bool:
        """Check whether a live browser process is attached."""
        return self._browser is not None and self._browser.is_connected()

    async def acquire(self) -> Browser:
        """Return the live browser, launching or relaunching it when needed.

        Returns:
            A connected Browser handle.

        Raises:
            BrowserInitializationError: If the launch fails. The next call
                tries again.
        """
        async with self._lock:
            if self._browser is not None and self._browser.is_connected():
                return self._browser

            if self._browser is not None:
                log.warning("Browser disconnected, relaunching")
                await self._close_browser()

            self._browser = await self._launch()
            return self._browser

    async def _launch(self) -> Browser:
        mode = "constrained" if self.config.constrained_mode else "local"
        log.info("Launching browser", mode=mode, headless=self.config.headless)

        try:
            if self._playwright is None:
                self._playwright = await async_playwright().start()

            browser = await self._playwright.chromium.launch(
                headless=self.config.headless,
                args=self.launch_args,
            )
        except Exception as exc:
            await self._stop_playwright()
            raise BrowserInitializationError(reason=str(exc), browser_type="chromium") from exc

        log.info("Browser launched", mode=mode)
        return browser

    async def _filter_request(self, route: Route) -> None:
        """Abort heavy resources; only the document and scripts are needed."""
        if route.request.resource_type in self.config.blocked_resource_types:
            await route.abort()
        else:
            await route.continue_()

    @asynccontextmanager
    async def page(self) -> AsyncIterator[Page]:
        """Open an isolated page for the duration of one request.

        The browser context behind the page is closed on every exit path.
        A close failure is logged and suppressed so it never masks the
        error that is already propagating.

        Yields:
            A Page with the request filter installed and default timeouts set.
        """
        browser = await self.acquire()
        context = await browser.new_context(
            viewport={
                "width": random.randint(1280, 1920),
                "height": random.randint(720, 1080),
            },
            user_agent=random.choice(self.config.user_agents),
            locale="pt-BR",
            timezone_id="America/Sao_Paulo",
        )

        try:
            await context.add_init_script(STEALTH_JS)
            await context.route("**/*", self._filter_request)

            page = await context.new_page()
            page.set_default_timeout(self.config.request_timeout_ms)
            page.set_default_navigation_timeout(self.config.request_timeout_ms)

            yield page
        finally:
            try:
                await context.close()
            except Exception as exc:
                log.debug("Suppressed error closing page context", error=str(exc))

    async def navigate(self, page: Page, url: str, timeout_ms: int, ticker: str = "") -> None:
        """Navigate and wait only until the initial document is parsed.

        Args:
            page: Page opened through ``page()``.
            url: Ticker page URL.
            timeout_ms: Navigation timeout.
            ticker: Ticker being loaded, for the not-found error.

        Raises:
            TickerNotFoundError: If the server answers 404.
            NavigationError: On timeout, network failure or other error status.
        """
        log.debug("Navigating to URL", url=url, timeout_ms=timeout_ms)

        try:
            response = await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
        except PlaywrightTimeoutError as exc:
            raise NavigationError(
                url=url,
                reason=f"Navigation timeout after {timeout_ms}ms",
            ) from exc
        except PlaywrightError as exc:
            raise NavigationError(url=url, reason=str(exc)) from exc

        if response is None:
            raise NavigationError(url=url, reason="No response received")

        status_code = response.status
        if status_code == 404:
            raise TickerNotFoundError(ticker=ticker or url, url=url)
        if status_code >= 400:
            raise NavigationError(url=url, reason=f"HTTP {status_code}", status_code=status_code)

        log.info("Navigation successful", url=url, status_code=status_code)

    async def _close_browser(self) -> None:
        if self._browser is None:
            return
        try:
            await self._browser.close()
        except Exception as exc:
            log.debug("Suppressed error closing stale browser", error=str(exc))
        self._browser = None

    async def _stop_playwright(self) -> None:
        if self._playwright is None:
            return
        try:
            await self._playwright.stop()
        except Exception as exc:
            log.warning("Error stopping playwright", error=str(exc))
        self._playwright = None

    async def close(self) -> None:
        """Tear down the browser and driver. Safe to call repeatedly."""
        async with self._lock:
            await self._close_browser()
            await self._stop_playwright()
        log.info("Browser resources cleaned up")
