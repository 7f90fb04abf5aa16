from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any

import orjson
import pytest

from cli import main
from completion.ranking import UsageLearner

_WORKSPACE = Path(__file__).parent / "fixtures" / "ldl_workspace"


def _copy_workspace_fixture(root: Path) -> None:
    shutil.copytree(_WORKSPACE, root)


def _read_json(capsys: pytest.CaptureFixture[str]) -> Any:
    return orjson.loads(capsys.readouterr().out)


def test_cli_symbols_label_query(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["symbols", "label:learning", "--root", str(_WORKSPACE)])

    assert exit_code == 0
    hits = _read_json(capsys)
    assert [(h["name"], h["path"]) for h in hits] == [
        ("SQ3R", "learning.ldl"),
        ("SQ3R", "learning.ldl"),
    ]


def test_cli_definition_resolves_versioned_call(
    capsys: pytest.CaptureFixture[str],
) -> None:
    exit_code = main(
        ["definition", "main.ldl", "--line", "4", "--col", "17", "--root", str(_WORKSPACE)]
    )

    assert exit_code == 0
    result = _read_json(capsys)
    assert result["status"] == "unique"
    assert result["locations"][0]["path"] == "learning.ldl"
    assert result["locations"][0]["symbol"]["version"] == "classic"


def test_cli_definition_not_found_exit_code(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(
        ["definition", "main.ldl", "--line", "2", "--col", "1", "--root", str(_WORKSPACE)]
    )

    assert exit_code == 1
    assert _read_json(capsys)["status"] == "not_found"


def test_cli_references(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["references", "SQ3R", "--root", str(_WORKSPACE)])

    assert exit_code == 0
    refs = _read_json(capsys)
    paths = {ref["src_span"]["path"] for ref in refs}
    assert {"main.ldl", "methods/analysis.ldl"} <= paths


def test_cli_references_missing_name_exit_code(
    capsys: pytest.CaptureFixture[str],
) -> None:
    exit_code = main(["references", "nowhere_to_be_found", "--root", str(_WORKSPACE)])

    assert exit_code == 1
    assert _read_json(capsys) == []


def test_cli_complete_call_context(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    usage = tmp_path / "usage.json"
    exit_code = main(
        [
            "complete",
            "main.ldl",
            "--line",
            "4",
            "--col",
            "21",
            "--root",
            str(_WORKSPACE),
            "--usage",
            str(usage),
        ]
    )

    assert exit_code == 0
    candidates = _read_json(capsys)
    assert [c["label"] for c in candidates] == ["SQ3R"]


def test_cli_accept_updates_usage_history(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    usage = tmp_path / "usage.json"
    args = ["accept", "SQ3R", "--usage", str(usage), "--root", str(_WORKSPACE)]

    assert main([*args, "--context", "call"]) == 0
    capsys.readouterr()
    assert main(args) == 0

    stats = _read_json(capsys)
    assert stats["frequency"] == 2
    assert stats["contexts"] == ["call"]
    learner = UsageLearner.load(usage)
    assert learner.recent() == ["SQ3R", "SQ3R"]


def test_cli_outline(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["outline", str(_WORKSPACE / "learning.ldl")])

    assert exit_code == 0
    groups = _read_json(capsys)
    assert [g["label"] for g in groups] == ["learning", "reading", "memory", "Unlabeled"]


def test_cli_check_clean_workspace(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["check", "--root", str(_WORKSPACE)])

    assert exit_code == 0
    report = _read_json(capsys)
    assert sorted(report) == ["learning.ldl", "main.ldl", "methods/analysis.ldl"]
    assert all(findings == [] for findings in report.values())


def test_cli_check_reports_findings(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    repo_root = tmp_path / "repo"
    _copy_workspace_fixture(repo_root)
    (repo_root / "broken.ldl").write_text("fn a() {\n", encoding="utf-8")

    exit_code = main(["check", "broken.ldl", "--root", str(repo_root)])

    assert exit_code == 1
    report = _read_json(capsys)
    assert [f["code"] for f in report["broken.ldl"]] == ["unclosed_bracket"]


def test_cli_invalid_config_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_workspace_fixture(repo_root)
    (repo_root / "ldlmap.toml").write_text("bogus_key = true\n", encoding="utf-8")

    exit_code = main(["symbols", "--root", str(repo_root)])

    assert exit_code == 2
    assert "error:" in capsys.readouterr().err


def test_cli_missing_file_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(["outline", str(tmp_path / "missing.ldl")])

    assert exit_code == 2
    assert "error:" in capsys.readouterr().err
