"""Per-element nonces for externally referenced scripts and styles."""

from __future__ import annotations

import base64
import secrets
from collections.abc import Callable
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from csp_html.config.defaults import STRICT_DYNAMIC
from csp_html.policy.scanner import element_reference, find_external_elements

_NONCE_BYTES = 16
_URL_SCHEMES = ("http://", "https://")


@dataclass(frozen=True)
class AttributeWrite:
    """An attribute to set on a document element."""

    element: Tag
    name: str
    value: str


def nonce_token(value: str) -> str:
    return f"'nonce-{value}'"


def whitelisted_hosts(tokens: list[str]) -> list[str]:
    """Tokens that allow-list an http(s) URL prefix."""
    return [token for token in tokens if any(scheme in token for scheme in _URL_SCHEMES)]


class NonceGenerator:
    """Create nonces and decide which external elements need one."""

    def __init__(self, random_bytes: Callable[[int], bytes] = secrets.token_bytes) -> None:
        self._random_bytes = random_bytes

    def create_nonce(self) -> str:
        """Base64 of 16 random bytes, as written to the element attribute."""
        return base64.b64encode(self._random_bytes(_NONCE_BYTES)).decode("ascii")

    def compute_nonces_for_directive(
        self,
        document: BeautifulSoup,
        directive: str,
        tokens: list[str],
        enabled: bool = True,
    ) -> tuple[list[str], list[AttributeWrite]]:
        """Nonce tokens for the directive and the attribute writes backing them.

        Elements already covered by an allow-listed host are skipped, unless
        'strict-dynamic' is present: browsers honoring it ignore host lists,
        so every element needs its nonce.
        """
        if not enabled:
            return [], []

        hosts = whitelisted_hosts(tokens)
        strict_dynamic = STRICT_DYNAMIC in tokens

        nonce_tokens: list[str] = []
        writes: list[AttributeWrite] = []
        for element in find_external_elements(document, directive):
            reference = element_reference(element)
            if not strict_dynamic and any(reference.startswith(host) for host in hosts):
                continue
            value = self.create_nonce()
            writes.append(AttributeWrite(element=element, name="nonce", value=value))
            nonce_tokens.append(nonce_token(value))
        return nonce_tokens, writes
