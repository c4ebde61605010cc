"""Unit tests for provenance recording and persistence."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from core.types import ProvenanceRecord
from store.provenance_store import (
    ProvenanceRecorder,
    ensure_gitignore_entry,
    write_provenance_file,
)


def _provenance(target_id: str, derived_code: str, upstream_code: str) -> ProvenanceRecord:
    return ProvenanceRecord(
        derived_code=derived_code,
        upstream_code=upstream_code,
        upstream_source_file=f"{target_id}.json",
        target_record_id=target_id,
    )


def test_recorder_sorts_by_target_then_code_and_keeps_ties_stable() -> None:
    """Sorted output should order by id and code, keeping duplicate order."""
    recorder = ProvenanceRecorder()
    recorder.extend(
        [
            _provenance("risk-type", "B", "csio:B"),
            _provenance("coverage", "Z", "Z"),
            _provenance("risk-type", "A", "1"),
            _provenance("risk-type", "A", "2"),
        ]
    )

    records = recorder.sorted_records()

    assert len(recorder) == 4
    assert [(item.target_record_id, item.upstream_code) for item in records] == [
        ("coverage", "Z"),
        ("risk-type", "1"),
        ("risk-type", "2"),
        ("risk-type", "csio:B"),
    ]


def test_write_provenance_file_replaces_prior_mapping(tmp_path: Path) -> None:
    """Mapping file should be rewritten wholesale with camelCase rows."""
    mapping_path = tmp_path / ".mapping" / "source-mapping.json"
    generated_at = datetime(2026, 3, 4, 5, 6, 7, tzinfo=timezone.utc)
    write_provenance_file(mapping_path, (_provenance("a", "X", "X"),) * 3, generated_at)

    write_provenance_file(mapping_path, (_provenance("risk-type", "A", "1"),), generated_at)

    payload = json.loads(mapping_path.read_text(encoding="utf-8"))
    assert payload["totalMappings"] == 1
    assert payload["generatedAt"] == "2026-03-04T05:06:07+00:00"
    assert payload["mappings"] == [
        {
            "derivedCode": "A",
            "upstreamCode": "1",
            "upstreamSourceFile": "risk-type.json",
            "targetRecordId": "risk-type",
        }
    ]


def test_ensure_gitignore_entry_appends_once(tmp_path: Path) -> None:
    """The ignore entry should be appended once and preserve existing lines."""
    gitignore_path = tmp_path / ".gitignore"
    gitignore_path.write_text("node_modules/", encoding="utf-8")

    first = ensure_gitignore_entry(gitignore_path, ".mapping/")
    second = ensure_gitignore_entry(gitignore_path, ".mapping/")

    lines = gitignore_path.read_text(encoding="utf-8").splitlines()
    assert (first, second) == (True, False)
    assert lines[0] == "node_modules/"
    assert lines.count(".mapping/") == 1
