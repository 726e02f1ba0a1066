"""Host-facing CSP plugin.

Resolves the effective configuration for each generated document, builds
its policy and hands the result to the default meta-tag patcher or to a
caller supplied ``process_fn``.
"""

from __future__ import annotations

import types
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any

import structlog
from bs4 import BeautifulSoup

from csp_html.config.defaults import (
    DEFAULT_HASH_ENABLED,
    DEFAULT_NONCE_ENABLED,
    DEFAULT_POLICY,
    DOCUMENT_OPTIONS_KEY,
)
from csp_html.config.loader import get_settings
from csp_html.document import DocumentPatcher, serialize
from csp_html.errors import InvalidOptionError
from csp_html.pipeline import BuildContext, BuildPipeline, GeneratedDocument
from csp_html.policy.builder import PolicyBuilder
from csp_html.policy.hasher import Hasher
from csp_html.policy.merger import merge_enabled_maps, merge_policies
from csp_html.policy.nonce import NonceGenerator
from csp_html.policy.scanner import parse_document
from csp_html.policy.validator import validate_policy

logger = structlog.get_logger()

ProcessFn = Callable[[str, GeneratedDocument, BeautifulSoup, BuildContext], "str | None"]


@dataclass(frozen=True)
class Always:
    """Enabled flag fixed at construction."""

    value: bool

    def __call__(self, document: GeneratedDocument) -> bool:
        return self.value


@dataclass(frozen=True)
class Predicate:
    """Enabled flag decided per document."""

    fn: Callable[[GeneratedDocument], bool]

    def __call__(self, document: GeneratedDocument) -> bool:
        return bool(self.fn(document))


Enabled = Always | Predicate


def to_enabled(value: Any) -> Enabled:
    """Wrap a bool or predicate option in its Enabled variant."""
    if isinstance(value, (Always, Predicate)):
        return value
    if isinstance(value, bool):
        return Always(value)
    if callable(value):
        return Predicate(value)
    raise InvalidOptionError(f"'enabled' must be a bool or a callable, got {type(value).__name__}")


def _freeze(mapping: Mapping[str, Any] | None) -> types.MappingProxyType:
    return types.MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class PluginOptions:
    """Instance-level options, frozen once the plugin is constructed."""

    enabled: Enabled
    hashing_method: str
    hash_enabled: types.MappingProxyType
    nonce_enabled: types.MappingProxyType
    process_fn: ProcessFn | None = None
    dev_allow_unsafe: bool = False

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None = None) -> PluginOptions:
        """Build options from a plain mapping, falling back to env settings."""
        options = options or {}
        settings = get_settings()
        return cls(
            enabled=to_enabled(options.get("enabled", settings.enabled)),
            hashing_method=options.get("hashing_method", settings.hashing_method),
            hash_enabled=_freeze(options.get("hash_enabled")),
            nonce_enabled=_freeze(options.get("nonce_enabled")),
            process_fn=options.get("process_fn"),
            dev_allow_unsafe=bool(options.get("dev_allow_unsafe", settings.dev_allow_unsafe)),
        )


def document_options(document: GeneratedDocument) -> Mapping[str, Any]:
    """The CSP section of a document's plugin options."""
    return document.plugin_options.get(DOCUMENT_OPTIONS_KEY) or {}


class CspHtmlPlugin:
    """Inject a Content-Security-Policy into generated HTML documents.

    - Merges the built-in, instance and per-document policies
    - Reports unquoted keywords as build errors without stopping the build
    - Hashes inline scripts/styles and nonces external ones
    - Writes the policy into a CSP meta tag, or calls ``process_fn`` instead
    """

    def __init__(
        self,
        policy: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
        *,
        nonce_generator: NonceGenerator | None = None,
        patcher: DocumentPatcher | None = None,
    ) -> None:
        self.policy = _freeze(policy)
        self.options = PluginOptions.from_mapping(options)
        self.builder = PolicyBuilder(
            Hasher(self.options.hashing_method),
            nonce_generator or NonceGenerator(),
            dev_allow_unsafe=self.options.dev_allow_unsafe,
        )
        self.patcher = patcher or DocumentPatcher()

    def apply(self, pipeline: BuildPipeline) -> None:
        """Register on the host's HTML hook for its API version."""
        pipeline.tap(pipeline.html_hook, self.process_document)

    def is_enabled(self, document: GeneratedDocument) -> bool:
        if document_options(document).get("enabled") is False:
            return False
        return self.options.enabled(document)

    def effective_policy(self, document: GeneratedDocument) -> dict[str, Any]:
        return merge_policies(DEFAULT_POLICY, self.policy, document_options(document).get("policy"))

    def process_document(self, document: GeneratedDocument, context: BuildContext) -> GeneratedDocument:
        if not self.is_enabled(document):
            logger.info("csp_document_skipped", document=document.name)
            context.policies[document.name] = None
            return document

        doc_options = document_options(document)
        policy = self.effective_policy(document)
        for violation in validate_policy(policy):
            logger.warning(
                "csp_policy_violation",
                document=document.name,
                directive=violation.directive,
                keyword=violation.keyword,
            )
            context.report_error(violation.to_error())

        hash_enabled = merge_enabled_maps(
            DEFAULT_HASH_ENABLED, self.options.hash_enabled, doc_options.get("hash_enabled"),
        )
        nonce_enabled = merge_enabled_maps(
            DEFAULT_NONCE_ENABLED, self.options.nonce_enabled, doc_options.get("nonce_enabled"),
        )

        soup = parse_document(document.html)
        built = self.builder.build(policy, hash_enabled, nonce_enabled, soup)
        self.patcher.apply_writes(built.writes)
        header = built.header
        context.policies[document.name] = header
        logger.info(
            "csp_policy_built",
            document=document.name,
            directives=len(built.directives),
            nonces=len(built.writes),
        )

        process_fn = doc_options.get("process_fn") or self.options.process_fn
        if process_fn is None:
            html = self.patcher.apply(soup, header, xhtml=document.xhtml)
        else:
            result = process_fn(header, document, soup, context)
            html = result if result is not None else serialize(soup, xhtml=document.xhtml)
        return replace(document, html=html)
