from __future__ import annotations

from pathlib import Path

import pytest

from rules.config import ConfigError, LdlMapConfig, load_config


def _write_config(repo_root: Path, toml_content: str) -> None:
    (repo_root / "ldlmap.toml").write_text(toml_content, encoding="utf-8")


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config == LdlMapConfig()
    assert config.extensions == [".ldl"]
    assert config.completion.cache_ttl_seconds == 30.0
    assert config.completion.history_size == 50


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unknown_completion_key_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[completion]
fuzzy = true
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "exclude = [")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_extension_without_dot_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, 'extensions = ["ldl"]')

    with pytest.raises(ConfigError, match="must start with"):
        load_config(tmp_path)


def test_similarity_threshold_out_of_range_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[completion]
similarity_threshold = 1.5
""".strip(),
    )

    with pytest.raises(ConfigError, match="Invalid config"):
        load_config(tmp_path)


def test_valid_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
exclude = ["drafts/**"]

[completion]
cache_ttl_seconds = 5
max_results = 20

[checks]
flag_unversioned_duplicates = false
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.exclude == ["drafts/**"]
    assert config.completion.cache_ttl_seconds == 5
    assert config.completion.max_results == 20
    assert config.checks.flag_unversioned_duplicates is False
    assert config.checks.check_brackets is True
