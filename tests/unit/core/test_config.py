"""Unit tests for core config parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import BindConfig
from core.errors import BindConfigError


def test_from_env_defaults_code_lists_under_source_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Code-lists directory should default to a child of the source root."""
    monkeypatch.setenv("BIND_SOURCE_ROOT", "./.tmp-terminology")

    config = BindConfig.from_env()

    assert config.code_lists_dir == config.source_root / "code-lists"


def test_from_env_reads_explicit_code_lists_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """An explicit code-lists directory should override the default."""
    monkeypatch.setenv("BIND_CODE_LISTS_DIR", str(tmp_path / "lists"))

    config = BindConfig.from_env()

    assert config.code_lists_dir == (tmp_path / "lists").resolve()


def test_from_env_raises_for_host_with_scheme(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject canonical hosts that carry a scheme."""
    monkeypatch.setenv("BIND_CANONICAL_HOST", "https://bind.codes")

    with pytest.raises(BindConfigError):
        BindConfig.from_env()


def test_derived_paths_live_under_project_root(tmp_path: Path) -> None:
    """Code systems, mapping, and .gitignore should resolve under the project root."""
    config = BindConfig(source_root=tmp_path, code_lists_dir=tmp_path, project_root=tmp_path)

    assert config.codesystems_dir == tmp_path / "codesystems"
    assert config.mapping_file == tmp_path / ".mapping" / "source-mapping.json"
    assert config.gitignore_path == tmp_path / ".gitignore"


def test_canonical_url_ends_with_id(tmp_path: Path) -> None:
    """Canonical URLs should be https://<host>/<id>."""
    config = BindConfig(
        source_root=tmp_path,
        code_lists_dir=tmp_path,
        project_root=tmp_path,
        canonical_host="codes.example.org",
    )

    assert config.canonical_url("line-of-business") == "https://codes.example.org/line-of-business"


def test_with_source_root_moves_default_code_lists_dir(tmp_path: Path) -> None:
    """A derived code-lists directory should follow a new source root."""
    config = BindConfig(
        source_root=tmp_path / "old",
        code_lists_dir=tmp_path / "old" / "code-lists",
        project_root=tmp_path,
    )

    moved = config.with_source_root(tmp_path / "new")

    assert moved.code_lists_dir == tmp_path / "new" / "code-lists"


def test_with_source_root_keeps_explicit_code_lists_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """BIND_CODE_LISTS_DIR should survive a source-root override."""
    monkeypatch.setenv("BIND_CODE_LISTS_DIR", str(tmp_path / "lists"))

    moved = BindConfig.from_env().with_source_root(tmp_path / "new")

    assert moved.source_root == tmp_path / "new"
    assert moved.code_lists_dir == (tmp_path / "lists").resolve()
