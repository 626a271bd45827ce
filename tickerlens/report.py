"""Report assembly: field-by-field JSON responses.

Pure composition over a scraped field map. Raw page text is passed through
untouched as the display value; classification and valuation come from
``tickerlens.classifier`` and ``tickerlens.valuation``.
"""

from collections.abc import Mapping
from typing import Any

from tickerlens.classifier import (
    FUND_INDICATOR_RULES,
    INDICATOR_RULES,
    ThresholdRule,
    classify_raw,
)
from tickerlens.extractor import RawFieldMap
from tickerlens.validator import IndicatorResult, Signal
from tickerlens.valuation import value_equity, value_fund

# Report order; True marks fields classified against INDICATOR_RULES.
EQUITY_REPORT_FIELDS: tuple[tuple[str, bool], ...] = (
    # price and market
    ("cotacao", False),
    ("pl", True),
    ("pvp", True),
    # income
    ("dy", True),
    ("dy5Anos", True),
    ("payout", True),
    # profitability
    ("roe", True),
    ("roic", True),
    ("roa", False),
    ("margemBruta", False),
    ("margemEbitda", True),
    ("margemLiquida", True),
    # debt and liquidity
    ("dividaLiquidaEbitda", True),
    ("dividaLiquidaPatrimonio", False),
    ("liquidezCorrente", True),
    # other
    ("cagrLucros", True),
    ("lpa", False),
    ("vpa", False),
    ("giroAtivos", False),
)

FUND_REPORT_FIELDS: tuple[str, ...] = (
    "cotacao",
    "pvp",
    "dy",
    "liquidezDiaria",
    "ultimoRendimento",
    "y1m",
    "valorPatrimonial",
    "vpa",
    "vacancia",
    "numCotistas",
    "cotasEmitidas",
    "segmento",
    "tipoFundo",
    "tipoGestao",
    "taxaAdm",
)


def indicator(
    raw: RawFieldMap,
    name: str,
    classified: bool,
    rules: Mapping[str, ThresholdRule] = INDICATOR_RULES,
) -> dict[str, str]:
    """Report entry for one raw field, classified on request."""
    signal = classify_raw(name, raw.get(name), rules) if classified else Signal.NEUTRAL
    return IndicatorResult.from_raw(raw.get(name), signal).to_json()


def assemble_equity_report(ticker: str, raw: RawFieldMap) -> dict[str, Any]:
    """Build the stock report.

    Args:
        ticker: Ticker as requested; upper-cased in the output.
        raw: Scraped stock field map.

    Returns:
        JSON-ready dict with one ``{"value", "class"}`` entry per indicator,
        the four valuation entries and the nullable ``grahamWarning``.
    """
    report: dict[str, Any] = {"ticker": ticker.strip().upper()}
    for name, classified in EQUITY_REPORT_FIELDS:
        report[name] = indicator(raw, name, classified)

    valuation = value_equity(raw)
    report["precoTeto"] = valuation.preco_teto.result.to_json()
    report["bazin5Y"] = valuation.bazin_5y.result.to_json()
    report["valorJusto"] = valuation.valor_justo.result.to_json()
    report["valorRevisado"] = valuation.valor_revisado.result.to_json()
    report["grahamWarning"] = valuation.graham_warning
    return report


def assemble_fund_report(ticker: str, raw: RawFieldMap) -> dict[str, Any]:
    """Build the real-estate fund report.

    Only P/VP is classified, with the fund-specific thresholds. ``ebn`` is
    the magic number and ``vn`` the cost of buying that many shares.
    """
    report: dict[str, Any] = {"ticker": ticker.strip().upper()}
    for name in FUND_REPORT_FIELDS:
        report[name] = indicator(raw, name, name in FUND_INDICATOR_RULES, FUND_INDICATOR_RULES)

    valuation = value_fund(raw)
    report["ebn"] = IndicatorResult(value=valuation.magic_number_display).to_json()
    report["vn"] = IndicatorResult(value=valuation.cost_display).to_json()
    return report
