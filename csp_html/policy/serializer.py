"""Pure-function CSP policy utilities: token normalization, parsing, serialization."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from csp_html.config.defaults import STRICT_DYNAMIC

DirectiveValue = str | Sequence[str]
Policy = Mapping[str, DirectiveValue]


def to_tokens(value: DirectiveValue | None) -> list[str]:
    """Flatten a directive value into a list of source tokens.

    A string is split on whitespace, so ``"'self' https:"`` and
    ``["'self'", "https:"]`` yield the same tokens.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    tokens: list[str] = []
    for item in value:
        if item:
            tokens.extend(str(item).split())
    return tokens


def dedupe(tokens: Iterable[str]) -> list[str]:
    """Drop duplicates and empty tokens, keeping first occurrence order."""
    seen: set[str] = set()
    result: list[str] = []
    for token in tokens:
        if not token or token in seen:
            continue
        seen.add(token)
        result.append(token)
    return result


def finalize_tokens(value: DirectiveValue | None) -> list[str]:
    """Normalize a directive value for output, moving 'strict-dynamic' last.

    CSP2 browsers ignore the unknown trailing keyword; CSP3 browsers honor
    it in any position.
    """
    tokens = dedupe(to_tokens(value))
    if STRICT_DYNAMIC in tokens:
        tokens.remove(STRICT_DYNAMIC)
        tokens.append(STRICT_DYNAMIC)
    return tokens


def parse_policy(csp_string: str) -> dict[str, list[str]]:
    """Parse a CSP string into {directive: [tokens]} dict.

    The ``inject`` command accepts ``--policy`` as a header-style string as
    well as JSON; this turns the string form into the mapping the plugin
    merges. Directive names are lowercased, and a repeated directive keeps
    its last value.

    Example:
        >>> parse_policy("default-src 'self'; script-src 'self' https:")
        {"default-src": ["'self'"], "script-src": ["'self'", "https:"]}
    """
    result: dict[str, list[str]] = {}
    if not csp_string or not csp_string.strip():
        return result
    for part in csp_string.split(";"):
        tokens = part.split()
        if not tokens:
            continue
        result[tokens[0].lower()] = tokens[1:]
    return result


def serialize_policy(policy: Policy) -> str:
    """Build a CSP string from a policy mapping, in insertion order.

    Example:
        >>> serialize_policy({"base-uri": "'self'", "script-src": ["'self'", "https:"]})
        "base-uri 'self'; script-src 'self' https:"

    A directive left without tokens is written as its bare name, which is
    also the form valueless directives such as upgrade-insecure-requests take.
    """
    parts = []
    for directive, value in policy.items():
        tokens = finalize_tokens(value)
        if tokens:
            parts.append(f"{directive} {' '.join(tokens)}")
        else:
            parts.append(directive)
    return "; ".join(parts)
