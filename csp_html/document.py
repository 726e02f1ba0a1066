"""Write the computed policy and nonces back into the document."""

from __future__ import annotations

from collections.abc import Iterable

import structlog
from bs4 import BeautifulSoup, Doctype, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from csp_html.config.defaults import CSP_HTTP_EQUIV
from csp_html.policy.nonce import AttributeWrite

logger = structlog.get_logger()

# Void elements without the trailing slash; XHTML output keeps bs4's "/>"
_HTML_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)
_XHTML_FORMATTER = "minimal"


def find_csp_meta(document: BeautifulSoup) -> Tag | None:
    """The CSP meta element; the http-equiv match is case-sensitive."""
    return document.find("meta", attrs={"http-equiv": CSP_HTTP_EQUIV})


def _ensure_head(document: BeautifulSoup) -> Tag:
    head = document.find("head")
    if head is not None:
        return head
    head = document.new_tag("head")
    html = document.find("html")
    if html is not None:
        html.insert(0, head)
        return head
    # No <html> either: place it after a leading doctype, if any
    position = 0
    for index, node in enumerate(document.contents):
        if isinstance(node, Doctype):
            position = index + 1
            break
    document.insert(position, head)
    return head


def serialize(document: BeautifulSoup, xhtml: bool = False) -> str:
    """Render the tree; a doctype is written as ``<!...>`` with nothing appended."""
    formatter = _XHTML_FORMATTER if xhtml else _HTML_FORMATTER
    parts = []
    for node in document.contents:
        if isinstance(node, Doctype):
            parts.append(f"<!{node}>")
        elif isinstance(node, Tag):
            parts.append(node.decode(formatter=formatter))
        else:
            parts.append(node.output_ready(formatter))
    return "".join(parts)


class DocumentPatcher:
    """Default finalization: CSP meta tag injection and serialization."""

    def apply_writes(self, writes: Iterable[AttributeWrite]) -> None:
        for write in writes:
            write.element[write.name] = write.value

    def inject_policy(self, document: BeautifulSoup, policy: str) -> Tag:
        """Set the policy on the CSP meta tag, creating it first in <head> if absent."""
        meta = find_csp_meta(document)
        if meta is None:
            meta = document.new_tag("meta", attrs={"http-equiv": CSP_HTTP_EQUIV})
            _ensure_head(document).insert(0, meta)
            logger.debug("csp_meta_tag_created")
        meta["content"] = policy
        return meta

    def apply(self, document: BeautifulSoup, policy: str, xhtml: bool = False) -> str:
        self.inject_policy(document, policy)
        return serialize(document, xhtml=xhtml)
