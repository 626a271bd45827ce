"""
FastAPI application serving ticker reports.

Routes:
    POST /buscar       stock report
    POST /buscar-fii   real-estate fund report
    GET  /health       liveness and browser state

The browser session lives in the application lifespan: created lazily on
the first scrape, closed when the server shuts down.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config.settings import GlobalConfig, get_config
from tickerlens import __version__
from tickerlens.browser import SessionManager
from tickerlens.exceptions import IncompleteDataError, TickerNotFoundError
from tickerlens.logger import get_logger
from tickerlens.scraper import TickerClass
from tickerlens.service import analyze_ticker

log = get_logger(__name__)


class TickerRequest(BaseModel):
    ticker: str = ""


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, "code": code})


async def _handle_not_found(request: Request, exc: TickerNotFoundError) -> JSONResponse:
    log.info("Ticker not found", ticker=exc.ticker, path=request.url.path)
    return _error(404, "ticker_not_found", "Ativo não encontrado.")


async def _handle_incomplete(request: Request, exc: IncompleteDataError) -> JSONResponse:
    return _error(404, "incomplete_data", "Dados essenciais (cotação) não encontrados.")


async def _handle_http(request: Request, exc: HTTPException) -> JSONResponse:
    return _error(exc.status_code, "invalid_request", str(exc.detail))


async def _handle_invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    log.info("Rejected malformed request body", path=request.url.path, errors=len(exc.errors()))
    return _error(400, "invalid_request", "Ticker não informado.")


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    log.exception("Unhandled error serving request", path=request.url.path, error=str(exc))
    return _error(500, "internal_error", "Erro interno ao processar dados.")


def create_app(config: GlobalConfig | None = None) -> FastAPI:
    """Build the application with its own session manager.

    Args:
        config: Optional GlobalConfig. Uses singleton if not provided.
    """
    config = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.session = SessionManager(config)
        log.info("API started", app_name=config.app_name, environment=config.environment)
        try:
            yield
        finally:
            await app.state.session.close()
            log.info("API stopped")

    app = FastAPI(
        title=f"{config.app_name} API",
        description="Fundamental indicators and valuation estimates for B3 tickers",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TickerNotFoundError, _handle_not_found)
    app.add_exception_handler(IncompleteDataError, _handle_incomplete)
    app.add_exception_handler(HTTPException, _handle_http)
    app.add_exception_handler(RequestValidationError, _handle_invalid_body)
    app.add_exception_handler(Exception, _handle_unexpected)

    async def _report(request: Request, body: TickerRequest, ticker_class: TickerClass) -> dict[str, Any]:
        ticker = body.ticker.strip()
        if not ticker:
            raise HTTPException(status_code=400, detail="Ticker não informado.")
        log.info("Report requested", ticker=ticker, ticker_class=ticker_class.name)
        return await analyze_ticker(request.app.state.session, ticker, ticker_class, config)

    @app.post("/buscar")
    async def equity_report(request: Request, body: TickerRequest) -> dict[str, Any]:
        """Stock indicators, classifications and valuation estimates."""
        return await _report(request, body, TickerClass.EQUITY)

    @app.post("/buscar-fii")
    async def fund_report(request: Request, body: TickerRequest) -> dict[str, Any]:
        """Real-estate fund indicators and magic number."""
        return await _report(request, body, TickerClass.FUND)

    @app.get("/health")
    async def health(request: Request) -> dict[str, Any]:
        return {"status": "ok", "browser_connected": request.app.state.session.is_connected}

    return app
