from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "ldlmap.toml"


class CompletionConfig(BaseModel):
    """Tuning knobs for completion ranking, caching and heuristics."""

    model_config = ConfigDict(extra="forbid")

    cache_ttl_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Lifetime of a cached completion result",
    )
    cache_max_entries: int = Field(
        default=100,
        gt=0,
        description="Entry count above which expired results are swept",
    )
    cache_key_tail: int = Field(
        default=20,
        gt=0,
        description="Trailing characters of the line included in the cache key",
    )
    history_size: int = Field(
        default=50,
        gt=0,
        description="Bounded FIFO of recently accepted candidates",
    )
    proximity_window: int = Field(
        default=10,
        ge=0,
        description="Lines above/below the cursor considered 'nearby'",
    )
    similarity_threshold: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Normalized edit-distance similarity for related names",
    )
    max_results: int = Field(
        default=200,
        gt=0,
        description="Cap applied by the engine after ranking",
    )


class ChecksConfig(BaseModel):
    """Configuration for the advisory checks."""

    model_config = ConfigDict(extra="forbid")

    check_brackets: bool = Field(
        default=True,
        description="Report unmatched, mismatched and unclosed brackets",
    )
    flag_unversioned_duplicates: bool = Field(
        default=True,
        description=(
            "Also warn when two same-named functions both omit a version"
        ),
    )


class LdlMapConfig(BaseModel):
    """Configuration for an LDL workspace."""

    model_config = ConfigDict(extra="forbid")

    extensions: list[str] = Field(
        default_factory=lambda: [".ldl"],
        description="File suffixes treated as LDL sources",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all sources)",
    )
    exclude: list[str] = Field(
        default_factory=lambda: ["**/node_modules/**"],
        description="Glob patterns for files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    completion: CompletionConfig = Field(default_factory=CompletionConfig)
    checks: ChecksConfig = Field(default_factory=ChecksConfig)

    @field_validator("extensions", mode="before")
    @classmethod
    def validate_extensions(cls, v: Any) -> Any:
        """Require dotted suffixes such as ``.ldl``."""
        if not isinstance(v, list):
            msg = "extensions must be a list of file suffixes"
            raise TypeError(msg)

        for suffix in v:
            if not isinstance(suffix, str) or not suffix.startswith("."):
                msg = f"Invalid extension {suffix!r}: suffixes must start with '.'"
                raise ValueError(msg)

        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path) -> LdlMapConfig:
    """Load configuration from ldlmap.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return LdlMapConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return LdlMapConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
