"""Unit tests for CLI command handling."""

from __future__ import annotations

import json
from pathlib import Path

from cli.main import main
from tests.fixture_paths import fixture_path


def _reconcile_args(project_root: Path, *extra: str) -> list[str]:
    return [
        "--project-root",
        str(project_root),
        "reconcile",
        "--source-root",
        str(fixture_path("terminology")),
        *extra,
    ]


def test_cli_reconcile_prints_outcomes_and_summary(tmp_path: Path, capsys) -> None:
    """CLI reconcile should print one line per code system plus counts."""
    exit_code = main(_reconcile_args(tmp_path))
    output = capsys.readouterr().out.splitlines()

    assert exit_code == 0
    assert "NEW   construction-type.json (1 concepts)" in output
    assert "SKIP  retired-codes (no non-deprecated concepts)" in output
    assert output[-4:] == ["created=3", "merged=0", "skipped=1", "mappings=12"]


def test_cli_reconcile_reports_merge_deltas_on_rerun(tmp_path: Path, capsys) -> None:
    """A second run should report merges with zero appended concepts."""
    main(_reconcile_args(tmp_path))
    capsys.readouterr()

    exit_code = main(_reconcile_args(tmp_path))
    output = capsys.readouterr().out.splitlines()

    assert exit_code == 0
    assert "MERGE line-of-business.json (4 existing + 0 new = 4 total)" in output


def test_cli_source_root_keeps_code_lists_dir_from_env(
    tmp_path: Path, capsys, monkeypatch
) -> None:
    """--source-root must not override an explicit BIND_CODE_LISTS_DIR."""
    empty_lists = tmp_path / "no-code-lists"
    empty_lists.mkdir()
    monkeypatch.setenv("BIND_CODE_LISTS_DIR", str(empty_lists))

    exit_code = main(_reconcile_args(tmp_path / "project"))
    output = capsys.readouterr().out.splitlines()

    assert exit_code == 0
    assert output[-4:] == ["created=2", "merged=0", "skipped=1", "mappings=7"]
    assert not (tmp_path / "project" / "codesystems" / "roof-material-type.json").exists()


def test_cli_reconcile_applies_rules_file(tmp_path: Path) -> None:
    """The --rules option should steer code-list id mapping."""
    rules_path = str(fixture_path("rules/valid_rules.yaml"))

    exit_code = main(_reconcile_args(tmp_path, "--rules", rules_path))

    assert exit_code == 0
    assert (tmp_path / "codesystems" / "roof-material.json").exists()


def test_cli_reconcile_returns_error_code_for_missing_sources(tmp_path: Path, capsys) -> None:
    """Fatal errors should print a message and exit non-zero."""
    args = ["--project-root", str(tmp_path), "reconcile", "--source-root", str(tmp_path / "nope")]

    exit_code = main(args)
    output = capsys.readouterr().out

    assert exit_code == 1
    assert output.startswith("reconcile_error=")


def test_cli_reconcile_dry_run_with_fixed_timestamp(tmp_path: Path, capsys) -> None:
    """Dry runs should print outcomes but leave the project root empty."""
    args = _reconcile_args(tmp_path, "--dry-run", "--generated-at", "2026-01-01T00:00:00")

    exit_code = main(args)

    assert exit_code == 0
    assert "created=3" in capsys.readouterr().out
    assert not (tmp_path / "codesystems").exists()


def test_cli_derive_prints_derived_code(capsys) -> None:
    """CLI derive should print the derived code for one upstream code."""
    exit_code = main(["derive", "047", "--display", "Fire & Theft"])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == "fire-and-theft"


def test_cli_written_record_passes_structural_expectations(tmp_path: Path) -> None:
    """Written records should carry the fields downstream validation expects."""
    main(_reconcile_args(tmp_path))

    record = json.loads((tmp_path / "codesystems" / "roof-material-type.json").read_text("utf-8"))

    assert record["resourceType"] == "CodeSystem"
    assert record["url"].endswith(f"/{record['id']}")
    assert record["status"] == "draft"
    assert record["concept"][0]["code"] == "asphalt-shingle"
