"""Result schemas and data-quality checks.

This module implements:
- Pydantic models for the per-field report entries
- The essential-field gate that refuses to report without a market price
- A coverage check that flags probable layout drift in the logs

Design Rationale:
    A page that loads but renders nothing useful is indistinguishable from
    a markup change on the site. Missing secondary fields are tolerated and
    shown as placeholders, but a high miss ratio is logged loudly so that
    selector updates are not discovered by users first.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from config.settings import GlobalConfig, get_config
from tickerlens.exceptions import IncompleteDataError
from tickerlens.extractor import RawFieldMap
from tickerlens.logger import get_logger

log = get_logger(__name__)

PLACEHOLDER = "-"
ESSENTIAL_FIELDS: tuple[str, ...] = ("cotacao",)


class Signal(StrEnum):
    """Classification tag, spelled the way the HTTP clients expect it."""

    GOOD = "good"
    NEUTRAL = "neutral"
    BAD = "bad"


class IndicatorResult(BaseModel):
    """Display string paired with its classification.

    Serializes as ``{"value": ..., "class": ...}``.
    """

    model_config = ConfigDict(frozen=True)

    value: str = Field(default=PLACEHOLDER, description="Text shown to the user")
    signal: Signal = Field(
        default=Signal.NEUTRAL,
        serialization_alias="class",
        description="Favorable, neutral or unfavorable",
    )

    @classmethod
    def from_raw(cls, raw: str | None, signal: Signal = Signal.NEUTRAL) -> "IndicatorResult":
        """Build an entry from page text, using the placeholder when absent."""
        return cls(value=raw or PLACEHOLDER, signal=signal)

    def to_json(self) -> dict[str, str]:
        return self.model_dump(mode="json", by_alias=True)


class ValuationEstimate(BaseModel):
    """A derived price and how the market price compares with it.

    Attributes:
        estimate: Computed price, None when its inputs were unusable.
        result: Display entry (formatted price or placeholder) and signal.
    """

    model_config = ConfigDict(frozen=True)

    estimate: float | None = None
    result: IndicatorResult = Field(default_factory=IndicatorResult)


def is_present(raw: str | None) -> bool:
    return bool(raw) and raw.strip() != PLACEHOLDER


def ensure_essential_fields(raw: RawFieldMap, ticker: str) -> None:
    """Refuse to continue when the market price was not found.

    Args:
        raw: Scraped field map.
        ticker: Ticker for the error message.

    Raises:
        IncompleteDataError: If any essential field is absent.
    """
    missing = [name for name in ESSENTIAL_FIELDS if not is_present(raw.get(name))]
    if missing:
        log.warning("Essential fields missing after scrape", ticker=ticker, missing=missing)
        raise IncompleteDataError(ticker=ticker, missing=missing)


def check_coverage(raw: RawFieldMap, url: str, config: GlobalConfig | None = None) -> float:
    """Log how many fields the scrape resolved and warn on probable drift.

    Never raises; partial data is an accepted outcome.

    Args:
        raw: Scraped field map.
        url: Page the map came from, for log context.
        config: Optional GlobalConfig. Uses singleton if not provided.

    Returns:
        Ratio of absent fields, between 0.0 and 1.0.
    """
    config = config or get_config()
    if not raw:
        return 0.0

    missing = sorted(name for name, value in raw.items() if value is None)
    ratio = len(missing) / len(raw)
    threshold = config.missing_field_warning_ratio

    if ratio > threshold + 1e-9:
        log.warning(
            "Possible layout shift: too many fields missing",
            url=url,
            missing_ratio=f"{ratio:.1%}",
            threshold=f"{threshold:.1%}",
            missing=missing,
        )
    else:
        log.debug(
            "Field coverage evaluated",
            url=url,
            resolved=len(raw) - len(missing),
            total=len(raw),
        )
    return ratio
