"""Tests for CSP hash sources."""

from __future__ import annotations

import pytest

from csp_html.errors import ConfigurationError, InvalidHashingMethodError
from csp_html.policy.hasher import Hasher


class TestHasher:
    def test_empty_string_sha256(self):
        assert Hasher("sha256").hash("") == "'sha256-47DEQpj8HBSa+/TImW+5JCeuQeRkm5NMpJWZG3hSuFU='"

    def test_default_method_is_sha256(self):
        assert Hasher().hash("").startswith("'sha256-")

    @pytest.mark.parametrize("method", ["sha256", "sha384", "sha512"])
    def test_all_allowed_methods(self, method, sha):
        assert Hasher(method).hash("alert(1)") == sha("alert(1)", method)

    def test_same_input_same_token(self):
        hasher = Hasher("sha384")
        assert hasher.hash("body{color:red}") == hasher.hash("body{color:red}")

    def test_utf8_content(self, sha):
        assert Hasher().hash("console.log('héllo ✓')") == sha("console.log('héllo ✓')")

    def test_token_is_quoted(self):
        token = Hasher("sha512").hash("x")
        assert token.startswith("'sha512-")
        assert token.endswith("'")


class TestHasherConfiguration:
    def test_invalid_method_raises(self):
        with pytest.raises(InvalidHashingMethodError, match="'invalid' is not a valid hashing method"):
            Hasher("invalid")

    def test_invalid_method_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            Hasher("md5")

    def test_method_is_case_sensitive(self):
        with pytest.raises(InvalidHashingMethodError):
            Hasher("SHA256")
