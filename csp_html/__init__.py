"""Content-Security-Policy injection for generated HTML documents."""

from csp_html.errors import ConfigurationError, InvalidHashingMethodError, PolicyViolationError
from csp_html.pipeline import BuildContext, BuildPipeline, GeneratedDocument, HostApiVersion
from csp_html.plugin import Always, CspHtmlPlugin, Predicate

__all__ = [
    "Always",
    "BuildContext",
    "BuildPipeline",
    "ConfigurationError",
    "CspHtmlPlugin",
    "GeneratedDocument",
    "HostApiVersion",
    "InvalidHashingMethodError",
    "Predicate",
    "PolicyViolationError",
]
