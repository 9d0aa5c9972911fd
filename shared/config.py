"""
Type-safe configuration for the workflow templating engine using Pydantic Settings.

Values load from environment variables (prefixed ``WORKFLOW_TEMPLATING_``) or
a ``.env`` file.

Usage:
    from shared.config import config

    if depth >= config.max_schema_depth:
        ...
"""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TemplatingConfig(BaseSettings):
    """
    Central configuration for the templating engine.

    Everything here is a tunable default; resolvers also accept explicit
    overrides so tests never need to touch the environment.
    """
    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_TEMPLATING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # ============================================================================
    # Logging
    # ============================================================================

    log_level: str = Field(default="INFO", description="Level for loggers created via shared.logger")

    # ============================================================================
    # Schema Analysis
    # ============================================================================

    max_schema_depth: int = Field(
        default=32,
        ge=1,
        description="Maximum nesting depth expanded when flattening declared schemas. Deeper levels are truncated."
    )

    # ============================================================================
    # Display Names
    # ============================================================================

    default_action_label: str = Field(default="HTTP Request", description="Label for action nodes with no discriminant")
    default_trigger_label: str = Field(default="Manual", description="Label for trigger nodes with no discriminant")
    fallback_node_label: str = Field(default="Node", description="Label for nodes of unknown kind")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unsupported log level '{value}'")
        return level

# ============================================================================
# Global Config Instance
# ============================================================================

config = TemplatingConfig()
