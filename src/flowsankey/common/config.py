"""Application configuration using Pydantic Settings.

Loads configuration from environment variables and .env files.
Each concern gets its own settings class with a dedicated env prefix.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LEVEL_COLORS = [
    "#C7D2FE",
    "#A7F3D0",
    "#FDE68A",
    "#FCA5A5",
    "#D8B4FE",
    "#93C5FD",
]


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"
    include_timestamp: bool = True
    include_caller: bool = True


class SankeySettings(BaseSettings):
    """Default theme for Graphviz DOT emission."""

    model_config = SettingsConfigDict(env_prefix="SANKEY_")

    units: str | None = None
    penwidth_min: float = Field(default=1.0, ge=0.0)
    penwidth_scale: float = Field(default=1.0, ge=0.0)

    # Dimension prefixes in display order, e.g. ["SrcAS", "ExporterAddress"]
    level_order: list[str] | None = None
    level_colors: list[str] = Field(default_factory=lambda: list(DEFAULT_LEVEL_COLORS))
    node_fill_default: str = "#eef5ff"

    rankdir: Literal["LR", "RL", "TB", "BT"] = "LR"
    fontname: str = "Inter,Arial"
    color_nodes_by_level: bool = True
    color_edges_by_source_level: bool = False

    @field_validator("level_colors")
    @classmethod
    def validate_level_colors(cls, v: list[str]) -> list[str]:
        """Ensure the palette has at least one colour."""
        if not v:
            raise ValueError("level_colors must contain at least one colour")
        return v


class QuerySettings(BaseSettings):
    """Defaults for building flow-analytics graph queries."""

    model_config = SettingsConfigDict(env_prefix="QUERY_")

    lookback_minutes: int = Field(default=60, ge=1, le=60 * 24 * 31)
    limit: int = Field(default=12, ge=1, le=1000)
    limit_type: Literal["avg", "max", "sum", "p95"] = "avg"
    units: str = "l3bps"
    filter: str | None = None

    # Number of links listed by the summary command
    top: int = Field(default=20, ge=1, le=10000)


class Settings(BaseSettings):
    """Main application settings aggregating all configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Application info
    app_name: str = "FlowSankey"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"

    # Sub-configurations
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    sankey: SankeySettings = Field(default_factory=SankeySettings)
    query: QuerySettings = Field(default_factory=QuerySettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings singleton."""
    return Settings()
