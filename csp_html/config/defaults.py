"""Built-in policy, enable maps and hashing methods."""

from __future__ import annotations

import types

# Frozen defaults — shared by every plugin instance and never mutated.
DEFAULT_POLICY: types.MappingProxyType = types.MappingProxyType({
    "base-uri": "'self'",
    "object-src": "'none'",
    "script-src": ("'unsafe-inline'", "'self'", "'unsafe-eval'"),
    "style-src": ("'unsafe-inline'", "'self'", "'unsafe-eval'"),
})

DEFAULT_HASH_ENABLED: types.MappingProxyType = types.MappingProxyType({
    "script-src": True,
    "style-src": True,
})

DEFAULT_NONCE_ENABLED: types.MappingProxyType = types.MappingProxyType({
    "script-src": True,
    "style-src": True,
})

# Digests allowed in CSP hash sources
VALID_HASHING_METHODS = frozenset({"sha256", "sha384", "sha512"})

# Only these directives are augmented with hashes and nonces
AUGMENTED_DIRECTIVES: tuple[str, ...] = ("script-src", "style-src")

# Keywords that must be quoted inside a policy
STATIC_KEYWORDS: tuple[str, ...] = (
    "self",
    "unsafe-inline",
    "unsafe-eval",
    "none",
    "strict-dynamic",
    "report-sample",
)

STRICT_DYNAMIC = "'strict-dynamic'"
UNSAFE_SOURCES = frozenset({"'unsafe-inline'", "'unsafe-eval'"})

CSP_HTTP_EQUIV = "Content-Security-Policy"

# Key in a document's plugin options holding the per-document CSP overrides
DOCUMENT_OPTIONS_KEY = "csp_plugin"
