"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (LOFTSCOPE__SECTION__KEY)
3. Project YAML (.loftscope/config.yaml)
4. Global YAML (~/.config/loftscope/config.yaml)
5. Built-in defaults (this file)

Examples:
    LOFTSCOPE__LOGGING__LEVEL=DEBUG
    LOFTSCOPE__LINTING__ON_TYPE=false
    LOFTSCOPE__RESOLUTION__EXTENSION=.pf
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        LOFTSCOPE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOFTSCOPE__LOGGING__FORMAT: console or json
    """

    level: LogLevel = Field(default="WARNING", description="Root log level.")
    format: Literal["json", "console"] = "console"


class ResolutionConfig(BaseModel):
    """Where imports are looked up."""

    stdlib_roots: list[Path] = Field(
        default_factory=lambda: [Path("~/.polyloft/libs"), Path("~/.polyloft/src")],
        description="Standard library folders, searched after the project.",
    )
    source_dirs: list[str] = Field(
        default_factory=lambda: ["", "libs", "src"],
        description="Folders under the project root searched in order. '' is the root itself.",
    )
    extension: str = Field(default=".pf", description="Polyloft source file extension.")

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        if not v.startswith(".") or len(v) < 2:
            raise ValueError(f"Extension must start with '.': {v}")
        return v


class LintingConfig(BaseModel):
    """Lint gates, applied by the session before the core runs."""

    enabled: bool = True
    on_type: bool = True
    indent_width: int = Field(default=4, ge=1, description="Indentation unit for the indent check.")


class CompletionConfig(BaseModel):
    enabled: bool = True


class LoftscopeConfig(BaseModel):
    """Root configuration for loftscope."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)
    linting: LintingConfig = Field(default_factory=LintingConfig)
    completion: CompletionConfig = Field(default_factory=CompletionConfig)
