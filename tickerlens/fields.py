"""Field tables for the stock and fund page templates.

Each entry maps a report field to the ordered strategies that locate it.
Selectors target the investidor10 ticker pages; when the site reshuffles a
card layout, add a strategy to the relevant helper rather than replacing one.
"""

from collections.abc import Mapping
from types import MappingProxyType

from tickerlens.extractor import FieldSpec, LabelStrategy, SelectorStrategy


def ticker_card(card_class: str) -> FieldSpec:
    """Header card value, e.g. ``cotacao`` or ``dy``."""
    return (SelectorStrategy(f"#cards-ticker ._card.{card_class} ._card-body span"),)


def indicator_cell(label: str) -> FieldSpec:
    """Indicator grid cell, falling back to any cell on the page."""
    return (
        LabelStrategy(
            label_selector="#table-indicators .cell span:first-child",
            container=".cell",
            value_selector=".value span",
            label=label,
        ),
        LabelStrategy(
            label_selector=".cell span:first-child",
            container=".cell",
            value_selector=".value span, .value",
            label=label,
        ),
    )


def sector_link(label: str) -> FieldSpec:
    """Sector/segment cells, rendered as links to the sector listing."""
    return (
        LabelStrategy(
            label_selector='.cell a[href*="/setores/"] span.title',
            container="a",
            value_selector=".value",
            label=label,
        ),
    )


def dividend_history_average() -> FieldSpec:
    """Five-year average dividend yield from the dividend history header."""
    return (
        LabelStrategy(
            label_selector=".dy-history h3.box-span",
            container="h3",
            value_selector="span",
            label="DY médio em 5 anos",
            match="contains",
        ),
    )


def fund_info(label: str) -> FieldSpec:
    """Fund detail item across the three layouts the fund page has used."""
    return (
        LabelStrategy(
            label_selector=".desc .name",
            container=".desc",
            value_selector=".value span",
            label=label,
        ),
        LabelStrategy(
            label_selector=".content--info--item--title",
            container=".content--info--item",
            value_selector=".content--info--item--value",
            label=label,
        ),
        LabelStrategy(
            label_selector=".cell span:first-child",
            container=".cell",
            value_selector=".value span, .value",
            label=label,
        ),
    )


EQUITY_FIELDS: Mapping[str, FieldSpec] = MappingProxyType({
    "cotacao": ticker_card("cotacao"),
    "pvp": indicator_cell("p/vp"),
    "pl": indicator_cell("p/l"),
    "dy": ticker_card("dy"),
    "vpa": indicator_cell("vpa"),
    "lpa": indicator_cell("lpa"),
    "roe": indicator_cell("roe"),
    "margemLiquida": indicator_cell("margem líquida"),
    "cagrLucros": indicator_cell("cagr lucros 5 anos"),
    "setor": sector_link("setor"),
    "segmento": sector_link("segmento"),
    "dy5Anos": dividend_history_average(),
    "margemBruta": indicator_cell("margem bruta"),
    "margemEbitda": indicator_cell("margem ebitda"),
    "roic": indicator_cell("roic"),
    "dividaLiquidaEbitda": indicator_cell("dívida líquida / ebitda"),
    "dividaLiquidaPatrimonio": indicator_cell("dívida líquida / patrimônio"),
    "liquidezCorrente": indicator_cell("liquidez corrente"),
    "payout": indicator_cell("payout"),
    "giroAtivos": indicator_cell("giro ativos"),
    "roa": indicator_cell("roa"),
})

FUND_FIELDS: Mapping[str, FieldSpec] = MappingProxyType({
    "cotacao": ticker_card("cotacao"),
    "pvp": ticker_card("vp"),
    "dy": ticker_card("dy"),
    "liquidezDiaria": ticker_card("val"),
    "ultimoRendimento": fund_info("último rendimento"),
    "y1m": fund_info("yield 1 mês"),
    "valorPatrimonial": fund_info("valor patrimonial"),
    "vpa": fund_info("val. patrimonial p/ cota"),
    "vacancia": fund_info("vacância"),
    "numCotistas": fund_info("numero de cotistas"),
    "cotasEmitidas": fund_info("cotas emitidas"),
    "segmento": fund_info("segmento"),
    "tipoFundo": fund_info("tipo de fundo"),
    "tipoGestao": fund_info("tipo de gestão"),
    "taxaAdm": fund_info("taxa de administração"),
})
