"""Plugin configuration: frozen defaults and env settings."""

from csp_html.config.loader import CspSettings, get_settings, load_settings

__all__ = ["CspSettings", "get_settings", "load_settings"]
