"""Content digests formatted as CSP hash sources."""

from __future__ import annotations

import base64
import hashlib

from csp_html.config.defaults import VALID_HASHING_METHODS
from csp_html.errors import InvalidHashingMethodError


class Hasher:
    """Hash strings with one of the CSP-supported digests.

    The method is checked once, here, so a bad value aborts setup before
    any document is processed.
    """

    def __init__(self, method: str = "sha256") -> None:
        if method not in VALID_HASHING_METHODS:
            raise InvalidHashingMethodError(method)
        self.method = method

    def hash(self, content: str) -> str:
        """Return ``'<method>-<base64 digest>'`` for the UTF-8 bytes of content."""
        digest = hashlib.new(self.method, content.encode("utf-8")).digest()
        encoded = base64.b64encode(digest).decode("ascii")
        return f"'{self.method}-{encoded}'"
