"""Policy authoring checks.

Catches static keywords written without their surrounding apostrophes,
e.g. ``script-src self`` instead of ``script-src 'self'``. Browsers read the
bare form as a host name, so the policy silently means something else.
"""

from __future__ import annotations

from dataclasses import dataclass

from csp_html.config.defaults import STATIC_KEYWORDS
from csp_html.errors import PolicyViolationError
from csp_html.policy.serializer import Policy, dedupe, to_tokens

_MESSAGE = "CSP: policy for {directive} contains {keyword} which should be wrapped in apostrophes"


@dataclass(frozen=True, slots=True)
class PolicyViolation:
    """An unquoted static keyword found in a directive."""

    directive: str
    keyword: str

    @property
    def message(self) -> str:
        return _MESSAGE.format(directive=self.directive, keyword=self.keyword)

    def to_error(self) -> PolicyViolationError:
        return PolicyViolationError(self.directive, self.keyword, self.message)


def validate_policy(policy: Policy) -> list[PolicyViolation]:
    """Return one violation per (directive, unquoted keyword) pair.

    Matching is whitespace-bounded on the padded, space-joined value, so
    ``'self'`` never matches ``self``.
    """
    violations: list[PolicyViolation] = []
    for directive, value in policy.items():
        joined = f" {' '.join(dedupe(to_tokens(value)))} "
        for keyword in STATIC_KEYWORDS:
            if f" {keyword} " in joined:
                violations.append(PolicyViolation(directive=directive, keyword=keyword))
    return violations
