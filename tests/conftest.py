"""Pytest configuration and shared fixtures for the TickerLens test suite.

This module provides hermetic test infrastructure with the following guarantees:
- No external network requests (Playwright is always mocked)
- Isolated state (config singleton reset, env vars monkeypatched)
- Realistic page markup generated by factory fixtures

Design Rationale:
    Factory fixtures over static fixtures enable dynamic test case generation
    without code duplication. The HTML factories mimic the stock and fund
    page templates closely enough to exercise every selector strategy.
"""

from collections.abc import Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from pytest_mock import MockerFixture

from config.settings import GlobalConfig

EQUITY_DEFAULTS: dict[str, str] = {
    "cotacao": "R$ 10,00",
    "dy": "6,00%",
    "P/VP": "0,80",
    "P/L": "5,00",
    "VPA": "8,00",
    "LPA": "2,00",
    "ROE": "18,50%",
    "ROIC": "12,10%",
    "ROA": "7,20%",
    "Margem Bruta": "40,00%",
    "Margem EBITDA": "25,00%",
    "Margem Líquida": "16,00%",
    "Dívida Líquida / EBITDA": "1,50",
    "Dívida Líquida / Patrimônio": "0,40",
    "Liquidez Corrente": "1,80",
    "Payout": "50,00%",
    "Giro Ativos": "0,60",
    "CAGR Lucros 5 Anos": "12,00%",
    "Setor": "Petróleo, Gás e Biocombustíveis",
    "Segmento": "Exploração, Refino e Distribuição",
    "dy5Anos": "7,50%",
}

FUND_DEFAULTS: dict[str, str] = {
    "cotacao": "R$ 100,00",
    "vp": "0,95",
    "dy": "9,50%",
    "val": "R$ 5,2 M",
    "Último Rendimento": "R$ 0,50",
    "Yield 1 Mês": "0,80%",
    "Valor Patrimonial": "R$ 2,10 Bilhões",
    "Val. Patrimonial p/ Cota": "R$ 105,26",
    "Vacância": "3,00%",
    "Numero de Cotistas": "250.000",
    "Cotas Emitidas": "20.000.000",
    "Segmento": "Logística",
    "Tipo de Fundo": "Fundo de Tijolo",
    "Tipo de Gestão": "Ativa",
    "Taxa de Administração": "0,60% a.a.",
}

_EQUITY_CARDS = ("cotacao", "dy")
_EQUITY_LINKS = ("Setor", "Segmento")
_FUND_CARDS = ("cotacao", "vp", "dy", "val")


def _card(card_class: str, value: str) -> str:
    return (
        f'<div class="_card {card_class}">'
        f'<div class="_card-header"><span>{card_class}</span></div>'
        f'<div class="_card-body"><span>{value}</span></div>'
        f"</div>"
    )


def _document(body: str) -> str:
    return f"<!DOCTYPE html><html><head><title>Ticker</title></head><body>{body}</body></html>"


@pytest.fixture
def mock_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> GlobalConfig:
    """Provide isolated GlobalConfig with safe test defaults.

    Overrides the lru_cache singleton to prevent state leakage between tests.
    """
    from config.settings import get_config

    get_config.cache_clear()

    log_dir = tmp_path / "logs"
    log_dir.mkdir()

    test_env = {
        "APP_NAME": "TickerLens-Test",
        "ENVIRONMENT": "test",
        "DEBUG": "false",
        "HEADLESS": "true",
        "CONSTRAINED_MODE": "false",
        "LOG_LEVEL": "DEBUG",
        "LOG_DIR": str(log_dir),
        "LOG_ROTATION": "1 day",
        "LOG_RETENTION": "1 day",
        "BASE_URL": "https://test.example.com/",
        "REQUEST_TIMEOUT_MS": "5000",
        "EQUITY_NAVIGATION_TIMEOUT_MS": "6000",
        "FUND_NAVIGATION_TIMEOUT_MS": "4500",
        "EQUITY_READINESS_TIMEOUT_MS": "3000",
        "FUND_READINESS_TIMEOUT_MS": "2000",
    }

    for key, value in test_env.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("RENDER", raising=False)

    config = get_config()

    yield config

    get_config.cache_clear()


@pytest.fixture
def equity_html_factory() -> Callable[..., str]:
    """Factory fixture for stock page markup.

    Keys of ``overrides`` are card classes (``cotacao``, ``dy``), indicator
    labels as shown on the page (``"P/VP"``), ``Setor``/``Segmento`` or
    ``dy5Anos``. A None override omits the element.

    ``layout="table"`` renders indicators inside ``#table-indicators`` with
    the value wrapped in a span; ``layout="loose"`` renders them outside the
    table with bare ``.value`` text, which only the fallback strategy reads.
    """

    def _generate_html(
        overrides: dict[str, str | None] | None = None,
        layout: str = "table",
    ) -> str:
        values: dict[str, str | None] = {**EQUITY_DEFAULTS, **(overrides or {})}

        cards = "".join(
            _card(name, values[name]) for name in _EQUITY_CARDS if values.get(name) is not None
        )

        cells = []
        for label, value in values.items():
            if value is None or label in _EQUITY_CARDS or label in _EQUITY_LINKS or label == "dy5Anos":
                continue
            if layout == "table":
                cells.append(
                    f'<div class="cell"><span class="d-flex">{label}</span>'
                    f'<div class="value d-flex"><span>{value}</span></div></div>'
                )
            else:
                cells.append(
                    f'<div class="cell"><span class="d-flex">{label}</span>'
                    f'<div class="value">{value}</div></div>'
                )

        links = "".join(
            f'<div class="cell"><a href="/setores/{label.lower()}/">'
            f'<span class="title">{label}</span><span class="value">{values[label]}</span></a></div>'
            for label in _EQUITY_LINKS
            if values.get(label) is not None
        )

        history = ""
        if values.get("dy5Anos") is not None:
            history = (
                '<div class="dy-history"><h3 class="box-span">'
                f'DY médio em 5 anos <span>{values["dy5Anos"]}</span></h3></div>'
            )

        grid = "".join(cells)
        if layout == "table":
            grid = f'<div id="table-indicators">{grid}</div>'
        else:
            grid = f'<section class="indicators-v2">{grid}</section>'

        body = f'<div id="cards-ticker">{cards}</div>{grid}<div id="info_about">{links}</div>{history}'
        return _document(body)

    return _generate_html


@pytest.fixture
def fund_html_factory() -> Callable[..., str]:
    """Factory fixture for real-estate fund page markup.

    ``layout`` selects how the detail items are rendered: ``"desc"``,
    ``"content"`` or ``"cell"``, one per fallback strategy.
    """

    def _generate_html(
        overrides: dict[str, str | None] | None = None,
        layout: str = "desc",
    ) -> str:
        values: dict[str, str | None] = {**FUND_DEFAULTS, **(overrides or {})}

        cards = "".join(
            _card(name, values[name]) for name in _FUND_CARDS if values.get(name) is not None
        )

        items = []
        for label, value in values.items():
            if value is None or label in _FUND_CARDS:
                continue
            if layout == "desc":
                items.append(
                    f'<div class="desc"><span class="name">{label}</span>'
                    f'<div class="value"><span>{value}</span></div></div>'
                )
            elif layout == "content":
                items.append(
                    f'<div class="content--info--item">'
                    f'<span class="content--info--item--title">{label}</span>'
                    f'<span class="content--info--item--value">{value}</span></div>'
                )
            else:
                items.append(
                    f'<div class="cell"><span>{label}</span><div class="value">{value}</div></div>'
                )

        body = f'<div id="cards-ticker">{cards}</div><div id="info">{"".join(items)}</div>'
        return _document(body)

    return _generate_html


@dataclass
class PlaywrightMocks:
    """The mocked async_playwright() chain, down to one page."""

    async_playwright: MagicMock
    playwright: MagicMock
    browser: MagicMock
    context: MagicMock
    page: MagicMock


def build_playwright_mocks() -> PlaywrightMocks:
    """Create a Playwright mock chain for the async_playwright().start() pattern."""
    page = MagicMock()
    page.goto = AsyncMock(return_value=MagicMock(status=200))
    page.wait_for_selector = AsyncMock()
    page.content = AsyncMock(return_value="<html></html>")

    context = MagicMock()
    context.add_init_script = AsyncMock()
    context.route = AsyncMock()
    context.new_page = AsyncMock(return_value=page)
    context.close = AsyncMock()

    browser = MagicMock()
    browser.is_connected = MagicMock(return_value=True)
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()

    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)
    playwright.stop = AsyncMock()

    async_playwright_instance = MagicMock()
    async_playwright_instance.start = AsyncMock(return_value=playwright)

    return PlaywrightMocks(async_playwright_instance, playwright, browser, context, page)


@pytest.fixture
def playwright_mocks(mocker: MockerFixture) -> PlaywrightMocks:
    """Patch async_playwright in the browser module and expose the mock chain."""
    mocks = build_playwright_mocks()
    mocker.patch("tickerlens.browser.async_playwright", return_value=mocks.async_playwright)
    return mocks


@pytest.fixture
def fake_session_factory() -> Callable[..., MagicMock]:
    """Factory for a session manager stand-in serving one HTML snapshot.

    The returned mock exposes ``page()`` as an async context manager over a
    mocked page, and ``navigate`` as an AsyncMock (pass ``navigate_error``
    to make it raise). ``page_closed`` records whether the context exited.
    """

    def _build(html: str, navigate_error: Exception | None = None) -> MagicMock:
        page = MagicMock()
        page.content = AsyncMock(return_value=html)
        page.wait_for_selector = AsyncMock()

        session = MagicMock()
        session.page_closed = False
        session.mock_page = page

        @asynccontextmanager
        async def _page():
            try:
                yield page
            finally:
                session.page_closed = True

        session.page = _page
        session.navigate = AsyncMock(side_effect=navigate_error)
        return session

    return _build


def pytest_configure(config: Any) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests requiring full stack",
    )
