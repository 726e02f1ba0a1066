"""Per-document policy construction."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

import structlog
from bs4 import BeautifulSoup

from csp_html.config.defaults import AUGMENTED_DIRECTIVES, UNSAFE_SOURCES
from csp_html.policy.hasher import Hasher
from csp_html.policy.nonce import AttributeWrite, NonceGenerator
from csp_html.policy.scanner import find_inline_elements, inner_content
from csp_html.policy.serializer import Policy, finalize_tokens, serialize_policy, to_tokens

logger = structlog.get_logger()


@dataclass
class BuiltPolicy:
    """Result of building the policy for one document."""

    directives: dict[str, list[str]] = field(default_factory=dict)
    writes: list[AttributeWrite] = field(default_factory=list)

    @property
    def header(self) -> str:
        return serialize_policy(self.directives)


class PolicyBuilder:
    """Augment an effective policy with the hashes and nonces a document needs.

    Only script-src and style-src are augmented; every other directive
    passes through untouched.
    """

    def __init__(
        self,
        hasher: Hasher,
        nonce_generator: NonceGenerator | None = None,
        *,
        dev_allow_unsafe: bool = False,
    ) -> None:
        self._hasher = hasher
        self._nonces = nonce_generator or NonceGenerator()
        self._dev_allow_unsafe = dev_allow_unsafe

    def compute_hashes(self, document: BeautifulSoup, directive: str, enabled: bool = True) -> list[str]:
        if not enabled:
            return []
        return [self._hasher.hash(inner_content(el)) for el in find_inline_elements(document, directive)]

    def _allows_unsafe(self, tokens: list[str]) -> bool:
        return self._dev_allow_unsafe and any(token in UNSAFE_SOURCES for token in tokens)

    def build(
        self,
        policy: Policy,
        hash_enabled: Mapping[str, bool],
        nonce_enabled: Mapping[str, bool],
        document: BeautifulSoup,
    ) -> BuiltPolicy:
        built = BuiltPolicy(
            directives={directive: to_tokens(value) for directive, value in policy.items()},
        )

        for directive in AUGMENTED_DIRECTIVES:
            tokens = built.directives.get(directive, [])
            if self._allows_unsafe(tokens):
                logger.debug("csp_unsafe_allowed", directive=directive)
                continue

            hashes = self.compute_hashes(document, directive, hash_enabled.get(directive, False))
            nonces, writes = self._nonces.compute_nonces_for_directive(
                document,
                directive,
                tokens,
                enabled=nonce_enabled.get(directive, False),
            )
            if directive not in built.directives and not (hashes or nonces):
                continue
            built.directives[directive] = [*tokens, *hashes, *nonces]
            built.writes.extend(writes)

        built.directives = {
            directive: finalize_tokens(tokens) for directive, tokens in built.directives.items()
        }
        return built
