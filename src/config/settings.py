"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use LINEVIEW_ prefix (e.g., LINEVIEW_ENCODING=latin-1).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use LINEVIEW_ prefix.

    Examples:
        LINEVIEW_DIRECTIVE_MARKER=#-
        LINEVIEW_WATCH_INTERVAL=1.5
        LINEVIEW_OUTPUT_FILE=menu.txt
    """

    model_config = SettingsConfigDict(
        env_prefix="LINEVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Document syntax
    directive_marker: str = Field(
        default="#-",
        description="Prefix that turns a line into a directive",
    )

    comment_marker: str = Field(
        default="#",
        description="Prefix that turns a line into a comment (doubled, it escapes to text)",
    )

    encoding: str = Field(
        default="utf-8",
        description="Text encoding used when opening documents",
    )

    # Command execution
    line_nr_env: str = Field(
        default="LINE_VIEW_LINE_NR",
        description="Environment variable carrying the selected line number to a spawned command",
    )

    line_src_env: str = Field(
        default="LINE_VIEW_LINE_SRC",
        description="Environment variable carrying the selected line's source file to a spawned command",
    )

    # Watch configuration
    watch_interval: float = Field(
        default=0.3,
        description="Seconds between two polls of the watched document files",
    )

    # Output configuration
    output_file: str = Field(
        default="lines.txt",
        description="Name of the rendered line listing written to the output directory",
    )


# Singleton instance - import this in your code
appsettings = AppSettings()
