"""Provenance mapping accumulation and persistence.

This module collects the mapping from every derived code back to its
upstream origin during one run, then writes the sorted set wholesale.
The mapping lives in a private directory kept out of version control.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from core.constants import GITIGNORE_COMMENT, MAPPING_DESCRIPTION
from core.errors import BindStoreError
from core.logging_config import get_logger
from core.types import ProvenanceRecord

_LOGGER = get_logger(__name__)


class ProvenanceRecorder:
    """Per-run accumulator of provenance records."""

    def __init__(self) -> None:
        self._records: list[ProvenanceRecord] = []

    def extend(self, records: Iterable[ProvenanceRecord]) -> None:
        """Append provenance records in decision order."""
        self._records.extend(records)

    def __len__(self) -> int:
        return len(self._records)

    def sorted_records(self) -> tuple[ProvenanceRecord, ...]:
        """Return records sorted by code-system id then derived code."""
        return tuple(
            sorted(
                self._records,
                key=lambda record: (record.target_record_id, record.derived_code),
            )
        )


def provenance_to_payload(record: ProvenanceRecord) -> dict[str, str]:
    """Serialize one provenance record."""
    return {
        "derivedCode": record.derived_code,
        "upstreamCode": record.upstream_code,
        "upstreamSourceFile": record.upstream_source_file,
        "targetRecordId": record.target_record_id,
    }


def write_provenance_file(
    mapping_path: Path,
    records: tuple[ProvenanceRecord, ...],
    generated_at: datetime | None = None,
) -> Path:
    """Write the provenance mapping, replacing the prior file.

    Args:
        mapping_path: Mapping file path.
        records: Sorted provenance records for this run.
        generated_at: Timestamp to embed, current UTC time when omitted.

    Returns:
        Written mapping path.

    Raises:
        BindStoreError: If the file cannot be written.
    """
    timestamp = generated_at or datetime.now(timezone.utc)
    payload = {
        "generatedAt": timestamp.isoformat(),
        "description": MAPPING_DESCRIPTION,
        "totalMappings": len(records),
        "mappings": [provenance_to_payload(record) for record in records],
    }
    try:
        mapping_path.parent.mkdir(parents=True, exist_ok=True)
        mapping_path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
    except OSError as error:
        raise BindStoreError(
            f"Failed to write provenance mapping at {mapping_path}: {error}. "
            "Check that the project root is writable and retry."
        ) from error
    _LOGGER.info("provenance_written", path=str(mapping_path), total_mappings=len(records))
    return mapping_path


def ensure_gitignore_entry(gitignore_path: Path, entry: str) -> bool:
    """Append an ignore entry once, keeping the mapping out of history.

    Args:
        gitignore_path: Project .gitignore path, created when missing.
        entry: Ignore pattern such as ``.mapping/``.

    Returns:
        True when the entry was appended.

    Raises:
        BindStoreError: If the file cannot be read or written.
    """
    try:
        content = gitignore_path.read_text(encoding="utf-8") if gitignore_path.exists() else ""
        if entry in content.splitlines():
            return False
        separator = "" if not content or content.endswith("\n") else "\n"
        gitignore_path.write_text(
            f"{content}{separator}\n{GITIGNORE_COMMENT}\n{entry}\n",
            encoding="utf-8",
        )
    except OSError as error:
        raise BindStoreError(
            f"Failed to update {gitignore_path}: {error}. Add '{entry}' to it manually."
        ) from error
    _LOGGER.info("gitignore_updated", path=str(gitignore_path), entry=entry)
    return True
