"""Canonical code-system store.

This module loads hand-curated code systems and persists reconciled
records, one JSON document per code system, plus the manifest that
lists them for the serving layer.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.config import BindConfig
from core.constants import MANIFEST_FILE_NAME, SOURCE_FILE_EXTENSION
from core.errors import BindStoreError
from core.logging_config import get_logger
from core.types import TargetRecord
from store.codesystem_payload import record_from_payload, record_to_payload

_LOGGER = get_logger(__name__)


class CodeSystemStore:
    """Filesystem-backed code-system store.

    This class owns the code-systems directory. A record is fully built
    before it is written, so files are never left half-reconciled.
    """

    def __init__(self, config: BindConfig) -> None:
        """Initialize the store from config.

        Args:
            config: Runtime configuration.
        """
        self._config = config
        self._codesystems_dir = config.codesystems_dir

    def load(self, target_id: str) -> TargetRecord | None:
        """Load an existing code system.

        Args:
            target_id: Code-system id.

        Returns:
            Parsed record, or None when no file exists for the id.

        Raises:
            BindStoreError: If the existing file cannot be read or parsed.
        """
        record_path = self.record_path(target_id)
        if not record_path.exists():
            return None
        try:
            payload = json.loads(record_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as error:
            raise BindStoreError(
                f"Failed to read code system at {record_path}: {error}. "
                "Check file permissions and retry."
            ) from error
        except json.JSONDecodeError as error:
            raise BindStoreError(
                f"Failed to parse code system at {record_path}: {error.msg}. "
                "Fix the curated JSON before re-running reconcile."
            ) from error
        try:
            return record_from_payload(payload)
        except ValueError as error:
            raise BindStoreError(
                f"Invalid code system at {record_path}: {error}. "
                "Fix the curated record before re-running reconcile."
            ) from error

    def write(self, record: TargetRecord) -> Path:
        """Persist one code system, replacing any prior file.

        Args:
            record: Fully built code system.

        Returns:
            Written file path.

        Raises:
            BindStoreError: If the file cannot be written.
        """
        record_path = self.record_path(record.id)
        _write_json(record_path, record_to_payload(record))
        return record_path

    def write_manifest(self) -> Path:
        """Rewrite the manifest listing every code-system file.

        Returns:
            Manifest file path.

        Raises:
            BindStoreError: If the directory cannot be listed or written.
        """
        manifest_path = self._codesystems_dir / MANIFEST_FILE_NAME
        try:
            file_names = sorted(
                path.name
                for path in self._codesystems_dir.glob(f"*{SOURCE_FILE_EXTENSION}")
                if not path.name.startswith("_")
            )
        except OSError as error:
            raise BindStoreError(
                f"Failed to list code systems at {self._codesystems_dir}: {error}."
            ) from error
        _write_json(manifest_path, file_names)
        _LOGGER.info("manifest_written", path=str(manifest_path), file_count=len(file_names))
        return manifest_path

    def record_path(self, target_id: str) -> Path:
        """Return the file path for a code-system id."""
        return self._codesystems_dir / f"{target_id}{SOURCE_FILE_EXTENSION}"


def _write_json(file_path: Path, payload: object) -> None:
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
    except OSError as error:
        raise BindStoreError(
            f"Failed to write {file_path}: {error}. "
            "Check that the output directory is writable and retry."
        ) from error
