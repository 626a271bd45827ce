"""Valuation estimates derived from scraped primitives.

Formulas:
    Graham intrinsic value    sqrt(22.5 * EPS * BVPS)
    Bazin ceiling price       (price * yield / 100) / 0.06
    Revised Graham            EPS * (8.5 + 2g) * 4.4 / 5.5
    Fund magic number         ceil(price / last distribution)

Every estimate is None, never zero, when its inputs are missing or not
positive. The estimate is then compared with the market price using one
rule for all models: trading strictly below the estimate is favorable.
"""

import math

from pydantic import BaseModel, ConfigDict

from tickerlens.extractor import RawFieldMap
from tickerlens.normalizer import format_brl, normalize
from tickerlens.validator import IndicatorResult, Signal, ValuationEstimate

GRAHAM_MULTIPLIER = 22.5
BAZIN_TARGET_YIELD = 0.06
DEFAULT_GROWTH_RATE = 5.0
NO_GROWTH_PE = 8.5
AAA_YIELD_AVERAGE = 4.4
AAA_YIELD_CURRENT = 5.5

GRAHAM_UNRELIABLE_SECTORS = frozenset({"Tecnologia da Informação", "Financeiro e Outros"})
GRAHAM_UNRELIABLE_SEGMENTS = frozenset({"Software e Dados", "Bancos"})
GRAHAM_ADVISORY = "Graham pode ser impreciso p/ setor"


def _positive(*values: float | None) -> bool:
    return all(value is not None and value > 0 for value in values)


def graham_value(lpa: float | None, vpa: float | None) -> float | None:
    """Graham intrinsic value from earnings and book value per share."""
    if not _positive(lpa, vpa):
        return None
    return math.sqrt(GRAHAM_MULTIPLIER * lpa * vpa)


def bazin_ceiling(price: float | None, yield_pct: float | None) -> float | None:
    """Highest price that still pays the 6% target yield.

    Args:
        price: Current market price.
        yield_pct: Dividend yield in percent, e.g. 6.0 for 6%.
    """
    if not _positive(price, yield_pct):
        return None
    return (price * (yield_pct / 100)) / BAZIN_TARGET_YIELD


def revised_graham(lpa: float | None, cagr: float | None) -> float | None:
    """Growth-adjusted Graham estimate.

    Uses the five-year earnings CAGR as growth rate when it is positive,
    otherwise a conservative 5%.
    """
    if not _positive(lpa):
        return None
    growth = cagr if cagr is not None and cagr > 0 else DEFAULT_GROWTH_RATE
    return (lpa * (NO_GROWTH_PE + 2 * growth) * AAA_YIELD_AVERAGE) / AAA_YIELD_CURRENT


def classify_estimate(price: float | None, estimate: float | None) -> ValuationEstimate:
    """Compare the market price with an estimate.

    Returns:
        GOOD when the price is strictly below the estimate at centavo
        precision, BAD otherwise.
        Neutral with a placeholder when either side is absent or not positive.
    """
    if not _positive(price, estimate):
        return ValuationEstimate(estimate=estimate, result=IndicatorResult())

    # centavo precision, matching the displayed value
    signal = Signal.GOOD if round(price, 2) < round(estimate, 2) else Signal.BAD
    return ValuationEstimate(
        estimate=estimate,
        result=IndicatorResult(value=format_brl(estimate), signal=signal),
    )


def graham_advisory(setor: str | None, segmento: str | None) -> str | None:
    """Flag sectors where book value says little about a company's worth."""
    if setor in GRAHAM_UNRELIABLE_SECTORS or segmento in GRAHAM_UNRELIABLE_SEGMENTS:
        return GRAHAM_ADVISORY
    return None


def magic_number(price: float | None, last_dividend: float | None) -> int | None:
    """Shares whose monthly distribution pays for one more share."""
    if not _positive(price, last_dividend):
        return None
    return math.ceil(price / last_dividend)


class EquityValuation(BaseModel):
    """All estimates for one stock, plus the Graham advisory."""

    model_config = ConfigDict(frozen=True)

    preco_teto: ValuationEstimate
    bazin_5y: ValuationEstimate
    valor_justo: ValuationEstimate
    valor_revisado: ValuationEstimate
    graham_warning: str | None = None


class FundValuation(BaseModel):
    """Magic number and the cost of reaching it."""

    model_config = ConfigDict(frozen=True)

    magic_number: int | None = None
    magic_number_cost: float | None = None

    @property
    def magic_number_display(self) -> str:
        return str(self.magic_number) if self.magic_number is not None else "-"

    @property
    def cost_display(self) -> str:
        return format_brl(self.magic_number_cost) if self.magic_number_cost is not None else "-"


def value_equity(raw: RawFieldMap) -> EquityValuation:
    """Derive every stock estimate from a scraped field map."""
    price = normalize(raw.get("cotacao"))
    lpa = normalize(raw.get("lpa"))
    vpa = normalize(raw.get("vpa"))

    return EquityValuation(
        preco_teto=classify_estimate(price, bazin_ceiling(price, normalize(raw.get("dy")))),
        bazin_5y=classify_estimate(price, bazin_ceiling(price, normalize(raw.get("dy5Anos")))),
        valor_justo=classify_estimate(price, graham_value(lpa, vpa)),
        valor_revisado=classify_estimate(
            price, revised_graham(lpa, normalize(raw.get("cagrLucros")))
        ),
        graham_warning=graham_advisory(raw.get("setor"), raw.get("segmento")),
    )


def value_fund(raw: RawFieldMap) -> FundValuation:
    """Derive the magic number from a scraped fund field map."""
    price = normalize(raw.get("cotacao"))
    count = magic_number(price, normalize(raw.get("ultimoRendimento")))
    if count is None:
        return FundValuation()
    return FundValuation(magic_number=count, magic_number_cost=count * price)
