"""Config module exports."""

from loftscope.config.loader import load_config
from loftscope.config.models import (
    CompletionConfig,
    LintingConfig,
    LoftscopeConfig,
    LoggingConfig,
    ResolutionConfig,
)

__all__ = [
    "load_config",
    "LoftscopeConfig",
    "LoggingConfig",
    "ResolutionConfig",
    "LintingConfig",
    "CompletionConfig",
]
