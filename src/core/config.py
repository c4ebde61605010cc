"""Runtime configuration model for BIND terminology tooling.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from pathlib import Path

from core.constants import (
    CODE_LISTS_DIR_NAME,
    CODESYSTEMS_DIR_NAME,
    DEFAULT_CANONICAL_HOST,
    DEFAULT_PROJECT_ROOT,
    DEFAULT_SOURCE_ROOT,
    GITIGNORE_FILE_NAME,
    MAPPING_DIR_NAME,
    MAPPING_FILE_NAME,
)
from core.errors import BindConfigError


@dataclass(frozen=True)
class BindConfig:
    """Validated runtime configuration.

    Attributes:
        source_root: Directory holding simple-array upstream files.
        code_lists_dir: Directory holding structured code-list files.
        project_root: Root holding code systems, mapping, and .gitignore.
        canonical_host: Host used to build canonical code-system URLs.
        rules_path: Optional YAML reconcile rules file.
    """

    source_root: Path
    code_lists_dir: Path
    project_root: Path
    canonical_host: str = DEFAULT_CANONICAL_HOST
    rules_path: Path | None = None

    @classmethod
    def from_env(cls) -> "BindConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            BindConfigError: If environment values are invalid.
        """
        source_root = _resolve_path(os.getenv("BIND_SOURCE_ROOT", str(DEFAULT_SOURCE_ROOT)))
        code_lists_value = os.getenv("BIND_CODE_LISTS_DIR")
        code_lists_dir = (
            _resolve_path(code_lists_value)
            if code_lists_value
            else source_root / CODE_LISTS_DIR_NAME
        )
        project_root = _resolve_path(os.getenv("BIND_PROJECT_ROOT", str(DEFAULT_PROJECT_ROOT)))
        canonical_host = _parse_canonical_host(
            os.getenv("BIND_CANONICAL_HOST", DEFAULT_CANONICAL_HOST)
        )
        rules_value = os.getenv("BIND_RULES_FILE")
        return cls(
            source_root=source_root,
            code_lists_dir=code_lists_dir,
            project_root=project_root,
            canonical_host=canonical_host,
            rules_path=_resolve_path(rules_value) if rules_value else None,
        )

    @property
    def codesystems_dir(self) -> Path:
        """Directory holding canonical code-system files."""
        return self.project_root / CODESYSTEMS_DIR_NAME

    @property
    def mapping_dir(self) -> Path:
        """Directory holding the private provenance mapping."""
        return self.project_root / MAPPING_DIR_NAME

    @property
    def mapping_file(self) -> Path:
        """Provenance mapping file path."""
        return self.mapping_dir / MAPPING_FILE_NAME

    @property
    def gitignore_path(self) -> Path:
        """Project .gitignore path."""
        return self.project_root / GITIGNORE_FILE_NAME

    def with_source_root(self, source_root: Path) -> "BindConfig":
        """Return a copy reading simple-array files from another root.

        The code-lists directory follows the new root only while it is
        still the default child of the old one; an explicit directory stays.
        """
        code_lists_dir = self.code_lists_dir
        if code_lists_dir == self.source_root / CODE_LISTS_DIR_NAME:
            code_lists_dir = source_root / CODE_LISTS_DIR_NAME
        return replace(self, source_root=source_root, code_lists_dir=code_lists_dir)

    def canonical_url(self, target_id: str) -> str:
        """Build the canonical URL for a code-system id."""
        return f"https://{self.canonical_host}/{target_id}"


def _resolve_path(raw_value: str) -> Path:
    return Path(raw_value).expanduser().resolve()


def _parse_canonical_host(raw_value: str) -> str:
    """Validate the canonical host environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Bare host name.

    Raises:
        BindConfigError: If value is empty or carries a scheme or path.
    """
    host = raw_value.strip()
    if not host or "/" in host or ":" in host:
        raise BindConfigError(
            "Invalid BIND_CANONICAL_HOST value: "
            f"expected a bare host name, got '{raw_value}'. "
            "Set BIND_CANONICAL_HOST to a value such as 'bind.codes'."
        )
    return host
