"""Workspace configuration and advisory checks."""

from rules.checks import check_brackets, check_duplicates, run_checks
from rules.config import (
    CONFIG_FILENAME,
    ChecksConfig,
    CompletionConfig,
    ConfigError,
    LdlMapConfig,
    load_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "ChecksConfig",
    "CompletionConfig",
    "ConfigError",
    "LdlMapConfig",
    "check_brackets",
    "check_duplicates",
    "load_config",
    "run_checks",
]
