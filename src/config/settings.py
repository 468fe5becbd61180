"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use TWEEFORMAT_ prefix (e.g., TWEEFORMAT_DEBUG_MODE=true).

Settings can also be loaded from a .env file in the project root.
Formatter behaviour itself lives in FormatterOptions (config/options.py);
the settings here describe where documents come from and how they are
written back.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use TWEEFORMAT_ prefix.

    Examples:
        TWEEFORMAT_SOURCE_GLOB=passages/**/*.twee
        TWEEFORMAT_DEBUG_MODE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="TWEEFORMAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Document discovery
    source_glob: str = Field(
        default="**/*.tw*",
        description="Glob (relative to the input directory) used to find Twee documents",
    )

    source_suffixes: List[str] = Field(
        default=[".tw", ".twee"],
        description="File suffixes accepted as Twee documents after globbing",
    )

    # Macro dictionary files
    twee_config_suffixes: List[str] = Field(
        default=[".twee-config.yml", ".twee-config.yaml", ".twee-config.json"],
        description="Suffixes of twee-config macro dictionary files",
    )

    # Output configuration
    line_break: str = Field(
        default="\n",
        description="Line break written between output lines",
    )

    debug_mode: bool = Field(
        default=False,
        description="Log formatter fallbacks (structured passages, malformed tags)",
    )

    def source_accepts(self, filename: str) -> bool:
        """
        Check whether a file name looks like a Twee document.

        Example:
            >>> AppSettings().source_accepts("story.twee")
            True
            >>> AppSettings().source_accepts("story.twee-config.yml")
            False
        """
        return any(filename.endswith(suffix) for suffix in self.source_suffixes)

    def tweeConfig_kind(self, filename: str) -> str | None:
        """
        Classify a twee-config file name by its serialization.

        Returns:
            "yaml", "json", or None if the file is not a twee-config file

        Example:
            >>> AppSettings().tweeConfig_kind("t3lt.twee-config.yml")
            'yaml'
        """
        for suffix in self.twee_config_suffixes:
            if filename.endswith(suffix):
                return "json" if suffix.endswith(".json") else "yaml"
        return None


# Singleton instance - import this in your code
appsettings = AppSettings()
