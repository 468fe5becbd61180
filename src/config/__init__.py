"""
Configuration package for tweeformat

Provides the formatter option schema and application settings via
environment variables using pydantic-settings.
"""

from .options import FormatterOptions, options_merge
from .settings import appsettings, AppSettings

__all__ = ["FormatterOptions", "options_merge", "appsettings", "AppSettings"]
