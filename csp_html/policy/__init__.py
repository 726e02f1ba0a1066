"""Policy construction: merge, validate, hash, nonce and serialize."""

from csp_html.policy.builder import BuiltPolicy, PolicyBuilder
from csp_html.policy.hasher import Hasher
from csp_html.policy.merger import merge_enabled_maps, merge_policies
from csp_html.policy.nonce import AttributeWrite, NonceGenerator
from csp_html.policy.serializer import parse_policy, serialize_policy
from csp_html.policy.validator import PolicyViolation, validate_policy

__all__ = [
    "AttributeWrite",
    "BuiltPolicy",
    "Hasher",
    "NonceGenerator",
    "PolicyBuilder",
    "PolicyViolation",
    "merge_enabled_maps",
    "merge_policies",
    "parse_policy",
    "serialize_policy",
    "validate_policy",
]
