"""Locate the elements each directive hashes or nonces."""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

# Inline content, hashed
INLINE_SELECTORS: dict[str, str] = {
    "script-src": "script:not([src])",
    "style-src": "style:not([href])",
}

# Externally referenced content, nonced
EXTERNAL_SELECTORS: dict[str, str] = {
    "script-src": "script[src]",
    "style-src": 'link[rel="stylesheet"]',
}

_REFERENCE_ATTRIBUTES = ("src", "href")


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def find_inline_elements(document: BeautifulSoup, directive: str) -> list[Tag]:
    """Inline elements for a directive, in document order.

    Elements nested in wrappers such as ``<noscript>`` are included.
    """
    selector = INLINE_SELECTORS.get(directive)
    if selector is None:
        return []
    return document.select(selector)


def find_external_elements(document: BeautifulSoup, directive: str) -> list[Tag]:
    selector = EXTERNAL_SELECTORS.get(directive)
    if selector is None:
        return []
    return document.select(selector)


def element_reference(element: Tag) -> str:
    """The URL an external element loads, or "" when it has none."""
    for attribute in _REFERENCE_ATTRIBUTES:
        value = element.get(attribute)
        if value:
            return value if isinstance(value, str) else " ".join(value)
    return ""


def inner_content(element: Tag) -> str:
    """Raw inner content of an element.

    script and style bodies are stored unparsed, so entities such as
    ``&amp;`` come back exactly as written.
    """
    return element.decode_contents()
