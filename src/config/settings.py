"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use INLINER_ prefix (e.g., INLINER_MAX_DEPTH=20).

Settings can also be loaded from a .env file in the project root.
"""

import re

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Engine configuration via environment variables.

    Environment variables use INLINER_ prefix.

    Examples:
        INLINER_MARKER=@include
        INLINER_MAX_DEPTH=20
        INLINER_DEFAULT_RESOURCE=text
    """

    model_config = SettingsConfigDict(
        env_prefix="INLINER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Parser configuration
    marker: str = Field(
        default="$inline",
        description="Marker text that introduces a directive",
    )

    # Resolution configuration
    max_depth: int = Field(
        default=10,
        ge=0,
        description="Maximum nesting depth of resolved resources",
    )

    default_resource: str = Field(
        default="file",
        description="Resource kind used when a pipe head carries no arguments",
    )

    text_encoding: str = Field(
        default="utf-8",
        description="Encoding applied to text segments joined with binary content",
    )

    # Logging configuration
    verbosity: int = Field(
        default=0,
        ge=0,
        description="Logging verbosity (0=silent, 1=normal, 2=verbose, 3=trace)",
    )

    def directivePattern_make(self, marker: str | None = None) -> re.Pattern[str]:
        """
        Build the regex that locates directive markers in source text.

        A marker only counts when followed by a method suffix or an
        argument list, so prose mentioning the bare marker is left alone.

        Args:
            marker: Marker text, defaults to the configured marker

        Returns:
            Compiled pattern matching the marker plus its next character

        Example:
            >>> settings = AppSettings()
            >>> bool(settings.directivePattern_make().match("$inline('a')"))
            True
        """
        text = self.marker if marker is None else marker
        return re.compile(re.escape(text) + r"[.(]")


# Singleton instance - import this in your code
appsettings = AppSettings()
