"""Indicator classification against static threshold tables.

Each indicator maps to a pair of predicates over its normalized value:
the favorable test runs first, then the unfavorable one, and anything in
between is neutral. A missing value or an unknown indicator is neutral.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from tickerlens.normalizer import normalize
from tickerlens.validator import Signal

Predicate = Callable[[float], bool]


@dataclass(frozen=True)
class ThresholdRule:
    """Favorable and unfavorable predicates for one indicator."""

    favorable: Predicate
    unfavorable: Predicate

    def apply(self, value: float) -> Signal:
        if self.favorable(value):
            return Signal.GOOD
        if self.unfavorable(value):
            return Signal.BAD
        return Signal.NEUTRAL


_DIVIDEND_YIELD = ThresholdRule(lambda v: v >= 6, lambda v: v < 4)

INDICATOR_RULES: Mapping[str, ThresholdRule] = MappingProxyType({
    "pvp": ThresholdRule(lambda v: v < 1.0, lambda v: v > 1.5),
    "pl": ThresholdRule(lambda v: 0 < v < 10, lambda v: v > 20),
    "dy": _DIVIDEND_YIELD,
    "dy5Anos": _DIVIDEND_YIELD,
    "roe": ThresholdRule(lambda v: v >= 15, lambda v: v < 8),
    "roic": ThresholdRule(lambda v: v >= 10, lambda v: v < 5),
    "margemLiquida": ThresholdRule(lambda v: v >= 15, lambda v: v < 5),
    "margemEbitda": ThresholdRule(lambda v: v >= 20, lambda v: v < 10),
    "dividaLiquidaEbitda": ThresholdRule(lambda v: v <= 2.0, lambda v: v > 4.0),
    "liquidezCorrente": ThresholdRule(lambda v: v >= 1.5, lambda v: v < 1.0),
    "payout": ThresholdRule(lambda v: 25 <= v <= 75, lambda v: v > 100),
    # analyst target upside and risk, in percent
    "potencial": ThresholdRule(lambda v: v > 15, lambda v: v < 0),
    "risco": ThresholdRule(lambda v: v <= 25, lambda v: v > 50),
    "cagrLucros": ThresholdRule(lambda v: v >= 10, lambda v: v < 5),
})

FUND_INDICATOR_RULES: Mapping[str, ThresholdRule] = MappingProxyType({
    "pvp": ThresholdRule(lambda v: v < 1.0, lambda v: v > 1.05),
})


def classify(
    indicator_id: str,
    value: float | None,
    rules: Mapping[str, ThresholdRule] = INDICATOR_RULES,
) -> Signal:
    """Classify a normalized value for the given indicator.

    Args:
        indicator_id: Field name, e.g. ``"pvp"``.
        value: Normalized value, or None when absent.
        rules: Threshold table to look the indicator up in.

    Returns:
        GOOD, NEUTRAL or BAD.
    """
    rule = rules.get(indicator_id)
    if rule is None or value is None:
        return Signal.NEUTRAL
    return rule.apply(value)


def classify_raw(
    indicator_id: str,
    raw: str | None,
    rules: Mapping[str, ThresholdRule] = INDICATOR_RULES,
) -> Signal:
    """Normalize page text, then classify it."""
    return classify(indicator_id, normalize(raw), rules)
