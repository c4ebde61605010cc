"""Upstream terminology source readers.

This module loads the two upstream shapes from disk: simple-array files
and structured code-list files. Each file passes one parse-and-validate
boundary that yields a tagged source variant; malformed JSON is skipped
with a warning and non-vocabulary shapes are skipped silently.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from core.constants import SOURCE_FILE_EXTENSION
from core.errors import BindIngestError
from core.logging_config import get_logger
from core.reconcile_rules import ReconcileRules
from core.types import (
    CodeListSource,
    SimpleArraySource,
    SourceFile,
    UnrecognizedSource,
    UpstreamCodeListEntry,
    UpstreamEntry,
)
from transforms.code_system_naming import to_kebab_case

_LOGGER = get_logger(__name__)

_CODE_LIST_NAME_FIELDS = ("code_list_name", "name")
_SECONDARY_DISPLAY_FIELDS = ("display_fr", "secondaryDisplay")


def read_simple_array_sources(
    source_root: Path,
    rules: ReconcileRules,
) -> dict[str, list[UpstreamEntry]]:
    """Read simple-array files keyed by code-system id.

    Args:
        source_root: Directory holding one JSON array file per vocabulary.
        rules: Reconcile rules with id overrides and skip files.

    Returns:
        Mapping of code-system id to upstream entries in file order.

    Raises:
        BindIngestError: If the directory does not exist.
    """
    entries_by_id: dict[str, list[UpstreamEntry]] = {}
    for file_path in _list_source_files(source_root):
        if file_path.name in rules.skip_files:
            continue
        payload = _load_json_file(file_path)
        if payload is None:
            continue
        source = parse_simple_array_payload(payload, file_path.name, rules)
        if isinstance(source, SimpleArraySource):
            entries_by_id.setdefault(source.target_id, []).extend(source.entries)
    return entries_by_id


def read_code_list_sources(
    code_lists_dir: Path,
    rules: ReconcileRules,
) -> dict[str, list[UpstreamCodeListEntry]]:
    """Read structured code-list files keyed by code-system id.

    Args:
        code_lists_dir: Directory holding one JSON object file per code list.
        rules: Reconcile rules with code-list name overrides.

    Returns:
        Mapping of code-system id to code-list entries in file order.

    Raises:
        BindIngestError: If the directory does not exist.
    """
    entries_by_id: dict[str, list[UpstreamCodeListEntry]] = {}
    for file_path in _list_source_files(code_lists_dir):
        payload = _load_json_file(file_path)
        if payload is None:
            continue
        source_file = f"{code_lists_dir.name}/{file_path.name}"
        source = parse_code_list_payload(payload, source_file, rules)
        if isinstance(source, CodeListSource):
            entries_by_id.setdefault(source.target_id, []).extend(source.entries)
    return entries_by_id


def parse_simple_array_payload(
    payload: object,
    source_file: str,
    rules: ReconcileRules,
) -> SourceFile:
    """Validate a decoded simple-array payload.

    Args:
        payload: Decoded JSON document.
        source_file: Source file name, e.g. ``lines-of-business.json``.
        rules: Reconcile rules with file-stem id overrides.

    Returns:
        ``SimpleArraySource`` for top-level arrays, else ``UnrecognizedSource``.
    """
    if not isinstance(payload, list):
        return UnrecognizedSource(source_file=source_file, reason="expected top-level array")
    stem = Path(source_file).stem
    target_id = rules.simple_array_ids.get(stem, stem)
    entries: list[UpstreamEntry] = []
    for index, row in enumerate(payload):
        code = _read_code(row)
        if code is None:
            _LOGGER.warning("source_entry_skipped", source_file=source_file, index=index)
            continue
        entries.append(
            UpstreamEntry(
                code=code,
                source_file=source_file,
                display=_optional_string(row, "display"),
            )
        )
    return SimpleArraySource(source_file=source_file, target_id=target_id, entries=tuple(entries))


def parse_code_list_payload(
    payload: object,
    source_file: str,
    rules: ReconcileRules,
) -> SourceFile:
    """Validate a decoded code-list payload.

    Args:
        payload: Decoded JSON document.
        source_file: Source path relative to the source root.
        rules: Reconcile rules with code-list name overrides.

    Returns:
        ``CodeListSource`` when a name and a list of codes are present,
        else ``UnrecognizedSource``.
    """
    if not isinstance(payload, dict):
        return UnrecognizedSource(source_file=source_file, reason="expected top-level object")
    name = _first_string(payload, _CODE_LIST_NAME_FIELDS)
    codes = payload.get("codes")
    if not name or not isinstance(codes, list):
        return UnrecognizedSource(source_file=source_file, reason="missing name or codes")
    target_id = rules.code_list_ids.get(name) or to_kebab_case(name)
    entries: list[UpstreamCodeListEntry] = []
    for index, row in enumerate(codes):
        code = _read_code(row)
        if code is None:
            _LOGGER.warning("source_entry_skipped", source_file=source_file, index=index)
            continue
        entries.append(
            UpstreamCodeListEntry(
                code=code,
                display=_optional_string(row, "display") or "",
                source_file=source_file,
                secondary_display=_first_string(row, _SECONDARY_DISPLAY_FIELDS),
                deprecated=row.get("deprecated") is True,
                owner=_optional_string(row, "owner"),
            )
        )
    return CodeListSource(
        source_file=source_file,
        name=name,
        target_id=target_id,
        entries=tuple(entries),
    )


def _list_source_files(directory: Path) -> list[Path]:
    if not directory.is_dir():
        raise BindIngestError(
            f"Failed to read sources at {directory}: directory does not exist. "
            "Point the source settings at an unpacked terminology release."
        )
    return sorted(
        path
        for path in directory.iterdir()
        if path.is_file() and path.suffix.lower() == SOURCE_FILE_EXTENSION
    )


def _load_json_file(file_path: Path) -> Any | None:
    """Decode one source file, returning None when it is not valid JSON."""
    try:
        return json.loads(file_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as error:
        _LOGGER.warning("source_file_skipped", source_file=str(file_path), reason=str(error))
        return None


def _read_code(row: object) -> str | None:
    if not isinstance(row, dict):
        return None
    code = row.get("code")
    if isinstance(code, bool):
        return None
    if isinstance(code, int):
        return str(code)
    if isinstance(code, str) and code:
        return code
    return None


def _optional_string(row: Mapping[str, object], field_name: str) -> str | None:
    value = row.get(field_name)
    return value if isinstance(value, str) else None


def _first_string(row: Mapping[str, object], field_names: tuple[str, ...]) -> str | None:
    for field_name in field_names:
        value = _optional_string(row, field_name)
        if value:
            return value
    return None
