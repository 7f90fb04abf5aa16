from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from scan.files import _build_gitignore_matcher, find_ldl_files

if TYPE_CHECKING:
    from pathlib import Path


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_find_ldl_files_skips_symlinked_dirs(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    (repo_root / "methods").mkdir()
    (repo_root / "methods" / "sq3r.ldl").write_text("fn SQ3R() {}\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "leak.ldl").write_text("fn leak() {}\n", encoding="utf-8")

    symlink_dir = repo_root / "linked"
    symlink_dir.symlink_to(external_root, target_is_directory=True)

    results = [
        path.relative_to(repo_root).as_posix() for path in find_ldl_files(repo_root)
    ]

    assert "methods/sq3r.ldl" in results
    assert "linked/leak.ldl" not in results


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_find_ldl_files_skips_symlinked_files(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    (repo_root / "real.ldl").write_text("fn real() {}\n", encoding="utf-8")

    outside = tmp_path / "outside.ldl"
    outside.write_text("fn outside() {}\n", encoding="utf-8")
    (repo_root / "alias.ldl").symlink_to(outside)

    results = [
        path.relative_to(repo_root).as_posix() for path in find_ldl_files(repo_root)
    ]

    assert results == ["real.ldl"]


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_nested_gitignore_skips_symlinked_gitignore(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    (repo_root / "methods").mkdir()
    (repo_root / "methods" / "sq3r.ldl").write_text("fn SQ3R() {}\n", encoding="utf-8")
    (repo_root / ".gitignore").write_text("*.bin\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "outside.gitignore").write_text(
        "methods/sq3r.ldl\n", encoding="utf-8"
    )

    symlink_gitignore = repo_root / "linked.gitignore"
    symlink_gitignore.symlink_to(external_root / "outside.gitignore")

    matcher = _build_gitignore_matcher(repo_root, nested_gitignore=True)
    assert matcher is not None
    assert matcher(str(repo_root / "methods" / "sq3r.ldl")) is False
