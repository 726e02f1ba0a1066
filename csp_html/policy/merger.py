"""Three-tier merge of policies and enable maps."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

V = TypeVar("V")


def _merge(*layers: Mapping[str, V] | None) -> dict[str, V]:
    """Merge mappings in increasing precedence, replacing whole values per key.

    Keys keep the position of their first appearance.
    """
    merged: dict[str, V] = {}
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            merged[key] = value
    return merged


def merge_policies(
    default: Mapping[str, Any] | None,
    instance: Mapping[str, Any] | None = None,
    document: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Merge default, plugin-instance and per-document policies.

    A directive defined at a higher tier replaces the lower tier's value
    entirely; arrays are never concatenated. Values are kept verbatim.
    """
    return _merge(default, instance, document)


def merge_enabled_maps(
    default: Mapping[str, bool] | None,
    instance: Mapping[str, bool] | None = None,
    document: Mapping[str, bool] | None = None,
) -> dict[str, bool]:
    """Merge hash-enabled or nonce-enabled maps with the same precedence."""
    return {key: bool(value) for key, value in _merge(default, instance, document).items()}
