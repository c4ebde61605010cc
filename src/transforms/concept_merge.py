"""Append-only merge of derived concepts into code systems.

This module builds concepts from deduplicated upstream entries and
appends them to an existing hand-curated record, or synthesizes a fresh
record when none exists. Existing concepts are never removed or altered.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

from core.constants import DEFAULT_LANGUAGE, DEFAULT_SECONDARY_LANGUAGE, DEFAULT_STATUS
from core.errors import BindReconcileError
from core.types import Concept, Designation, TargetRecord, UpstreamCodeListEntry
from transforms.code_derivation import build_definition, clean_display
from transforms.code_system_naming import to_pascal_case, to_title
from transforms.deduplication import DerivedEntry


@dataclass(frozen=True)
class MergeResult:
    """Merge output for one code system.

    Attributes:
        record: Fully built code system.
        appended_count: Concepts appended by this merge.
    """

    record: TargetRecord
    appended_count: int


def build_concept(
    derived_entry: DerivedEntry,
    title: str,
    secondary_language: str = DEFAULT_SECONDARY_LANGUAGE,
) -> Concept:
    """Build one immutable concept from a deduplicated entry.

    Args:
        derived_entry: Winner entry and its derived code.
        title: Code-system title used in the synthesized definition.
        secondary_language: Tag for the secondary display designation.

    Returns:
        Concept with cleaned display, definition, and designations.
    """
    entry = derived_entry.entry
    display = entry.display or ""
    designations: tuple[Designation, ...] | None = None
    if isinstance(entry, UpstreamCodeListEntry):
        designations = build_designations(entry.secondary_display, secondary_language) or None
    return Concept(
        code=derived_entry.derived_code,
        display=clean_display(display),
        definition=build_definition(display, title),
        designations=designations,
    )


def build_designations(
    secondary_display: str | None,
    secondary_language: str,
) -> tuple[Designation, ...]:
    """Build the secondary-language designation when text is available."""
    if not secondary_display:
        return ()
    value = clean_display(secondary_display)
    if not value:
        return ()
    return (Designation(language=secondary_language, value=value),)


def new_target_record(target_id: str, url: str) -> TargetRecord:
    """Synthesize an empty code system with default metadata.

    Args:
        target_id: Code-system id in kebab-case.
        url: Canonical URL for the id.

    Returns:
        Record with draft status, English language, and no concepts.
    """
    title = to_title(target_id)
    return TargetRecord(
        id=target_id,
        url=url,
        name=to_pascal_case(target_id),
        title=title,
        status=DEFAULT_STATUS,
        language=DEFAULT_LANGUAGE,
        description=f"{title} codes for insurance operations.",
        concepts=(),
    )


def merge_concepts(
    existing_record: TargetRecord | None,
    target_id: str,
    url: str,
    derived_entries: Iterable[DerivedEntry],
    secondary_language: str = DEFAULT_SECONDARY_LANGUAGE,
) -> MergeResult:
    """Append concepts whose codes are absent from the base record.

    Args:
        existing_record: Curated or baseline record, None when absent.
        target_id: Code-system id.
        url: Canonical URL used when a fresh record is synthesized.
        derived_entries: Deduplicated entries to turn into concepts.
        secondary_language: Tag for secondary display designations.

    Returns:
        Merged record and the number of appended concepts.

    Raises:
        BindReconcileError: If the existing record belongs to another id.
    """
    if existing_record is not None and existing_record.id != target_id:
        raise BindReconcileError(
            f"Cannot merge concepts for {target_id} into record {existing_record.id}: "
            "ids differ. Rename the curated file or fix its id field."
        )
    base_record = existing_record or new_target_record(target_id, url)
    title = to_title(target_id)
    known_codes = base_record.concept_codes()
    appended: list[Concept] = []
    for derived_entry in derived_entries:
        if derived_entry.derived_code in known_codes:
            continue
        known_codes.add(derived_entry.derived_code)
        appended.append(build_concept(derived_entry, title, secondary_language))
    merged_record = replace(
        base_record,
        language=base_record.language or DEFAULT_LANGUAGE,
        concepts=base_record.concepts + tuple(appended),
    )
    return MergeResult(record=merged_record, appended_count=len(appended))
