"""Exceptions raised or reported by the CSP plugin."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Invalid plugin configuration, raised at construction time."""


class InvalidHashingMethodError(ConfigurationError):
    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"'{method}' is not a valid hashing method")


class InvalidOptionError(ConfigurationError):
    pass


class PolicyViolationError(Exception):
    """A policy authoring mistake, reported to the build instead of raised."""

    def __init__(self, directive: str, keyword: str, message: str) -> None:
        self.directive = directive
        self.keyword = keyword
        super().__init__(message)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PolicyViolationError):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))
