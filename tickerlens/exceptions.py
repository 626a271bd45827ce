"""Custom exception hierarchy for TickerLens.

This module defines domain-specific exceptions that provide semantic clarity
and enable targeted error handling throughout the application. Each exception
includes contextual information to aid debugging and observability.

The HTTP layer maps these onto distinct responses: an unknown ticker, a page
that loaded without its market price, and everything else.
"""

from datetime import UTC, datetime
from typing import Any


class TickerLensError(Exception):
    """Base exception for all TickerLens errors.

    Attributes:
        message: Human-readable error description.
        context: Optional dictionary with additional debugging information.
        timestamp: UTC timestamp when the exception was raised.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        self.timestamp = datetime.now(UTC)
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format exception message with context for logging."""
        base = f"[{self.timestamp.isoformat()}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} | Context: {context_str}"
        return base


class BrowserInitializationError(TickerLensError):
    """Raised when the browser process fails to launch.

    Common causes include missing Playwright browsers or resource constraints.
    The session manager stays usable and retries on the next acquisition.
    """

    def __init__(self, reason: str, browser_type: str = "chromium") -> None:
        super().__init__(
            message=f"Failed to initialize {browser_type} browser: {reason}",
            context={"browser_type": browser_type, "reason": reason},
        )


class NavigationError(TickerLensError):
    """Raised when page navigation fails.

    This may indicate network issues, timeouts or error statuses. Fatal to
    the request that triggered it, never to the browser session.
    """

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        super().__init__(
            message=f"Navigation to '{url}' failed: {reason}",
            context={"url": url, "reason": reason, "status_code": status_code},
        )
        self.url = url
        self.status_code = status_code


class TickerNotFoundError(NavigationError):
    """Raised when the ticker page answers HTTP 404.

    The ticker identity itself is invalid, so retrying will not help.
    """

    def __init__(self, ticker: str, url: str) -> None:
        super().__init__(url=url, reason=f"Ticker '{ticker}' not found", status_code=404)
        self.ticker = ticker


class IncompleteDataError(TickerLensError):
    """Raised when an essential field is missing after a scrape.

    Without the market price every valuation is meaningless, so the
    report is not assembled.
    """

    def __init__(self, ticker: str, missing: list[str]) -> None:
        super().__init__(
            message=f"Essential data missing for '{ticker}': {', '.join(missing)}",
            context={"ticker": ticker, "missing": missing},
        )
        self.ticker = ticker
        self.missing = missing


class LoggingInitializationError(TickerLensError):
    """Raised when the logging system fails to initialize.

    This is a startup-blocking error - the application cannot proceed
    without a functioning logging infrastructure.
    """

    def __init__(self, log_dir: str, reason: str) -> None:
        super().__init__(
            message=f"Failed to initialize logging at '{log_dir}': {reason}",
            context={"log_dir": log_dir, "reason": reason},
        )
