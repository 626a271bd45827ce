"""Field extraction implementing ordered fallback strategies.

A logical field ("p/vp", "setor", ...) is resolved against a parsed HTML
snapshot by walking an ordered tuple of strategies. The first strategy that
yields text wins; later entries only exist to survive alternative card
layouts of the same page template and are never merged with earlier ones.

Design Rationale:
    Every strategy is a small frozen object with a pure ``resolve`` method
    over a BeautifulSoup document. That keeps selector drift fixes local to
    the field tables in ``tickerlens.fields`` and makes each strategy testable
    against a literal HTML string, without a browser.

An absent field is not an error: ``extract`` returns None and downstream
stages render a placeholder.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Protocol

from bs4 import BeautifulSoup, Tag

from tickerlens.logger import get_logger

log = get_logger(__name__)

RawFieldMap = Mapping[str, str | None]


def _clean_text(element: Tag) -> str:
    """Collapse whitespace the way a rendered innerText would read."""
    return " ".join(element.get_text(" ").split())


def _fold(text: str) -> str:
    return " ".join(text.split()).casefold()


def parse_document(html: str) -> BeautifulSoup:
    """Parse a page snapshot into a queryable document."""
    return BeautifulSoup(html, "lxml")


class Strategy(Protocol):
    """Anything that can resolve one field from a document."""

    def resolve(self, document: BeautifulSoup) -> str | None: ...


@dataclass(frozen=True)
class SelectorStrategy:
    """Read the first element matching a direct CSS selector.

    Used for the ticker header cards, whose position in the markup
    identifies the field without a label.
    """

    selector: str

    def resolve(self, document: BeautifulSoup) -> str | None:
        element = document.select_one(self.selector)
        if element is None:
            return None
        return _clean_text(element) or None


@dataclass(frozen=True)
class LabelStrategy:
    """Find a label element by its text and read the paired value.

    Attributes:
        label_selector: Candidate label elements to scan, in document order.
        container: Selector of the ancestor grouping a label with its value.
            The label itself counts when it matches.
        value_selector: Value element, searched inside the container.
        label: Target label text, compared case-insensitively.
        match: ``"exact"`` requires equal text, ``"contains"`` accepts
            the label as a substring.
    """

    label_selector: str
    container: str
    value_selector: str
    label: str
    match: Literal["exact", "contains"] = "exact"

    def _matches(self, text: str) -> bool:
        target = _fold(self.label)
        folded = _fold(text)
        if self.match == "contains":
            return target in folded
        return folded == target

    def resolve(self, document: BeautifulSoup) -> str | None:
        for candidate in document.select(self.label_selector):
            if not self._matches(candidate.get_text(" ")):
                continue

            container = candidate.css.closest(self.container)
            if container is None:
                return None

            value = container.select_one(self.value_selector)
            if value is None:
                return None
            return _clean_text(value) or None

        return None


FieldSpec = tuple[Strategy, ...]


def extract(document: BeautifulSoup, field_spec: FieldSpec) -> str | None:
    """Resolve one field, short-circuiting on the first strategy that matches.

    Args:
        document: Parsed page snapshot.
        field_spec: Ordered strategies; earlier entries take precedence.

    Returns:
        The trimmed field text, or None if no strategy matched.
    """
    for index, strategy in enumerate(field_spec):
        value = strategy.resolve(document)
        if value is not None:
            if index > 0:
                log.debug("Field resolved by fallback strategy", strategy_index=index)
            return value
    return None


def extract_fields(document: BeautifulSoup, specs: Mapping[str, FieldSpec]) -> RawFieldMap:
    """Run a whole field table against one document.

    Args:
        document: Parsed page snapshot.
        specs: Field name to ordered strategies.

    Returns:
        Read-only mapping of field name to raw text (None when absent).
    """
    values = {name: extract(document, spec) for name, spec in specs.items()}
    return MappingProxyType(values)
