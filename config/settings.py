"""Global configuration management using pydantic-settings.

This module implements the 12-factor app methodology for configuration,
loading values from environment variables with strict type validation.
The Singleton pattern ensures consistent configuration state across the application.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GlobalConfig(BaseSettings):
    """Centralized configuration with environment variable binding.

    All configuration values are loaded from environment variables,
    with sensible defaults for development. Production deployments
    should override these via .env or environment injection.

    Attributes:
        app_name: Application identifier for logging.
        environment: Deployment environment.
        debug: Enable verbose debugging output.
        headless: Run Chromium without a visible window.
        constrained_mode: Launch Chromium with the reduced-resource flag set
            (shared-memory hosts such as Render). Also read from ``RENDER``.
        log_level: Minimum log level for output filtering.
        log_dir: Directory path for structured JSON log files.
        log_rotation: Log file rotation interval.
        log_retention: Log file retention period.
        base_url: Financial data site root; ticker pages hang below it.
        host: Bind address for the HTTP server.
        port: Bind port for the HTTP server.
        cors_origins: Origins allowed by the CORS middleware.
        request_timeout_ms: Default timeout applied to every page action.
        equity_navigation_timeout_ms: Navigation timeout for stock pages.
        fund_navigation_timeout_ms: Navigation timeout for fund pages.
        equity_readiness_timeout_ms: Per-selector readiness wait for stock pages.
        fund_readiness_timeout_ms: Per-selector readiness wait for fund pages.
        equity_readiness_selectors: Selectors awaited before extracting a stock page.
        fund_readiness_selectors: Selectors awaited before extracting a fund page.
        blocked_resource_types: Request resource types aborted by the page filter.
        missing_field_warning_ratio: Share of absent fields that triggers a
            layout-drift warning.
        user_agents: Rotating user-agent strings, one picked per page context.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Metadata
    app_name: str = Field(default="TickerLens", description="Application identifier")
    environment: Literal["development", "test", "staging", "production"] = Field(
        default="development", description="Deployment environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Browser Configuration
    headless: bool = Field(default=True, description="Run browser in headless mode")
    constrained_mode: bool = Field(
        default=False,
        validation_alias=AliasChoices("constrained_mode", "render"),
        description="Apply reduced-resource Chromium launch flags",
    )

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Minimum log level"
    )
    log_dir: Path = Field(default=Path("logs"), description="Log output directory")
    log_rotation: str = Field(default="1 week", description="Log rotation interval")
    log_retention: str = Field(default="1 month", description="Log retention period")

    # Target Configuration
    base_url: str = Field(
        default="https://investidor10.com.br/",
        description="Financial data site base URL",
    )

    # HTTP Server
    host: str = Field(default="0.0.0.0", description="HTTP bind address")
    port: int = Field(default=3000, ge=1, le=65535, description="HTTP bind port")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")

    # Timeouts
    request_timeout_ms: int = Field(
        default=30000, ge=1000, le=120000, description="Default page action timeout"
    )
    equity_navigation_timeout_ms: int = Field(
        default=60000, ge=1000, le=180000, description="Stock page navigation timeout"
    )
    fund_navigation_timeout_ms: int = Field(
        default=45000, ge=1000, le=180000, description="Fund page navigation timeout"
    )
    equity_readiness_timeout_ms: int = Field(
        default=30000, ge=0, le=120000, description="Stock page readiness wait"
    )
    fund_readiness_timeout_ms: int = Field(
        default=20000, ge=0, le=120000, description="Fund page readiness wait"
    )

    # Page Template
    equity_readiness_selectors: list[str] = Field(
        default=["#cards-ticker", "#table-indicators"],
        description="Readiness selectors for stock pages",
    )
    fund_readiness_selectors: list[str] = Field(
        default=["#cards-ticker"],
        description="Readiness selectors for fund pages",
    )
    blocked_resource_types: list[str] = Field(
        default=["image", "stylesheet", "font", "media"],
        description="Resource types aborted by the request filter",
    )

    # Data Quality
    missing_field_warning_ratio: float = Field(
        default=0.50, ge=0.0, le=1.0, description="Absent-field ratio that triggers a warning"
    )

    # Stealth Configuration - User Agent Rotation Pool
    user_agents: list[str] = Field(
        default=[
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15",
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        ],
        min_length=1,
        description="User-agent rotation pool",
    )

    @field_validator("log_dir", mode="before")
    @classmethod
    def ensure_path(cls, value: str | Path) -> Path:
        """Convert string paths to Path objects."""
        return Path(value) if isinstance(value, str) else value

    @field_validator("base_url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        """Ensure base_url ends with trailing slash for consistent URL joining."""
        return value if value.endswith("/") else f"{value}/"


@lru_cache(maxsize=1)
def get_config() -> GlobalConfig:
    """Retrieve the singleton GlobalConfig instance.

    Uses LRU cache to ensure single instantiation across the application lifecycle.

    Returns:
        GlobalConfig: The validated configuration instance.
    """
    return GlobalConfig()
