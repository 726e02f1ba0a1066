"""Shared test fixtures."""

from __future__ import annotations

import base64
import hashlib
from pathlib import Path

import pytest

from csp_html.pipeline import BuildContext, BuildPipeline, GeneratedDocument, HostApiVersion
from csp_html.plugin import CspHtmlPlugin
from csp_html.policy.nonce import NonceGenerator

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class SequentialBytes:
    """Deterministic stand-in for secrets.token_bytes: call N returns bytes([N]) * size."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, size: int) -> bytes:
        self.calls += 1
        return bytes([self.calls]) * size


@pytest.fixture(autouse=True)
def _mock_settings(monkeypatch):
    """Provide default settings for all tests."""
    for key in ("CSP_ENABLED", "CSP_HASHING_METHOD", "CSP_DEV_ALLOW_UNSAFE", "CSP_XHTML"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("CSP_LOG_JSON", "false")
    monkeypatch.setenv("CSP_LOG_LEVEL", "debug")

    # Reset cached settings
    import csp_html.config.loader as loader
    loader._settings = None
    yield
    loader._settings = None


@pytest.fixture
def random_bytes():
    return SequentialBytes()


@pytest.fixture
def nonce_generator(random_bytes):
    return NonceGenerator(random_bytes)


@pytest.fixture
def nonce():
    """Attribute value of the Nth generated nonce (1-based)."""
    def _nonce(n: int) -> str:
        return base64.b64encode(bytes([n]) * 16).decode("ascii")
    return _nonce


@pytest.fixture
def sha():
    """Expected hash source for content."""
    def _sha(content: str, method: str = "sha256") -> str:
        digest = hashlib.new(method, content.encode("utf-8")).digest()
        return f"'{method}-{base64.b64encode(digest).decode('ascii')}'"
    return _sha


@pytest.fixture
def load_fixture():
    def _load(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")
    return _load


@pytest.fixture
def make_plugin(nonce_generator):
    """CspHtmlPlugin factory with deterministic nonces."""
    def _make(policy=None, options=None) -> CspHtmlPlugin:
        return CspHtmlPlugin(policy, options, nonce_generator=nonce_generator)
    return _make


@pytest.fixture
def run_build():
    """Run documents through a pipeline with the given plugin applied."""
    def _run(plugin, *documents: GeneratedDocument, api_version=HostApiVersion.HOOKS):
        pipeline = BuildPipeline(api_version)
        plugin.apply(pipeline)
        emitted, context = pipeline.run(list(documents), BuildContext())
        return {doc.name: doc for doc in emitted}, context
    return _run
