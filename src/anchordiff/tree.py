from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag
import soupsieve

from .errors import ParseError, SelectorSyntaxError

logger = logging.getLogger("anchordiff.core")

_PARSER = "html5lib"


class TreeModel:
    """Read-only view over one parsed markup snapshot.

    Markup goes through the HTML5 tree-construction algorithm, so implied
    html, head and body elements and implied end tags match a browser DOM.
    Attribute values are kept as raw strings (``class`` included) so that value
    comparisons see exactly what the markup carried.
    """

    __slots__ = ("_soup", "_elements")

    def __init__(self, soup: BeautifulSoup) -> None:
        self._soup = soup
        self._elements: tuple[Tag, ...] = tuple(soup.find_all(True))

    @property
    def element_count(self) -> int:
        return len(self._elements)

    def elements(self) -> tuple[Tag, ...]:
        return self._elements

    def select_strict(self, selector: str) -> list[Tag]:
        try:
            return self._soup.select(selector)
        except (soupsieve.SelectorSyntaxError, NotImplementedError, ValueError) as exc:
            # soupsieve rejects pseudo-elements and at-rules with NotImplementedError
            # and over-nested pseudo-classes with ValueError.
            raise SelectorSyntaxError(selector, next(iter(str(exc).splitlines()), "")) from exc

    def find_all(self, selector: str) -> list[Tag]:
        try:
            return self.select_strict(selector)
        except SelectorSyntaxError as exc:
            logger.debug("Selector query skipped: %s", exc)
            return []

    def find_first(self, selector: str) -> Tag | None:
        matches = self.find_all(selector)
        return matches[0] if matches else None

    def elements_with_attribute(self, name: str) -> list[Tag]:
        return [element for element in self._elements if element.has_attr(name)]

    def elements_with_attribute_prefix(self, prefix: str) -> list[Tag]:
        return [
            element
            for element in self._elements
            if any(key.startswith(prefix) for key in element.attrs)
        ]


def parse(markup: str | bytes | None) -> TreeModel:
    if markup is None:
        markup = ""
    if isinstance(markup, bytes):
        try:
            markup = markup.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Snapshot is not valid UTF-8: {exc}") from exc
    if not isinstance(markup, str):
        raise ParseError(f"Snapshot must be text, got {type(markup).__name__}.")

    try:
        soup = BeautifulSoup(markup, _PARSER, multi_valued_attributes=None)
    except Exception as exc:
        raise ParseError(f"Snapshot could not be tokenized: {exc}") from exc
    if not markup.strip():
        # A blank snapshot has no elements, not an implied html/head/body skeleton.
        soup.clear()
    return TreeModel(soup)


def tag_name(element: Tag) -> str:
    return (element.name or "").lower()


def attributes_of(element: Tag) -> dict[str, str]:
    return {str(key): _attribute_text(value) for key, value in element.attrs.items()}


def element_children(element: Tag) -> list[Tag]:
    return [child for child in element.children if isinstance(child, Tag)]


def sibling_index(element: Tag) -> int:
    return sum(1 for sibling in element.previous_siblings if isinstance(sibling, Tag))


def has_element_siblings(element: Tag) -> bool:
    previous = element.find_previous_sibling(True)
    return previous is not None or element.find_next_sibling(True) is not None


def parent_element(element: Tag) -> Tag | None:
    parent = element.parent
    if parent is None or isinstance(parent, BeautifulSoup):
        return None
    return parent


def text_content(element: Tag) -> str:
    return element.get_text()


def _attribute_text(value: object) -> str:
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value)
    return "" if value is None else str(value)
