"""Locale-aware numeric normalization for Brazilian-formatted page values.

Values on the ticker pages are rendered the pt-BR way: ``.`` groups
thousands, ``,`` separates decimals, and money or ratios carry an ``R$``
prefix or ``%`` suffix. ``normalize`` turns those strings into floats.

Malformed and absent values both collapse to ``None``; callers never need
to tell them apart.
"""

import math
import re

_CURRENCY_RE = re.compile(r"R\$")
_LEADING_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


def normalize(raw: str | None) -> float | None:
    """Convert a pt-BR formatted number into a float.

    Parses the leading numeric part once markers are stripped, so a trailing
    unit such as ``"2,5 Bilhões"`` still yields ``2.5``.

    Args:
        raw: Text as rendered on the page, or None.

    Returns:
        The parsed finite value, or None for absent/non-numeric input.

    Example:
        >>> normalize("1.234,56")
        1234.56
        >>> normalize("12,5%")
        12.5
    """
    if not raw or not isinstance(raw, str):
        return None

    cleaned = _CURRENCY_RE.sub("", raw)
    cleaned = cleaned.replace("%", "").replace(".", "").replace(",", ".")
    cleaned = "".join(cleaned.split())

    match = _LEADING_NUMBER_RE.match(cleaned)
    if match is None:
        return None

    value = float(match.group(0))
    return value if math.isfinite(value) else None


def format_brl(value: float) -> str:
    """Render a price as ``R$ 18,97``."""
    return f"R$ {value:.2f}".replace(".", ",")
