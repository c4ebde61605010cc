"""Derived-code deduplication transform.

This module collapses upstream entries that derive to the same code
within one source. Every entry considered is traced in provenance,
including duplicates, deprecated entries, and entries without display.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from core.constants import DEFAULT_NAMESPACE_PREFIXES
from core.types import AnyUpstreamEntry, ProvenanceRecord
from transforms.code_derivation import derive_code, is_deprecated_entry


@dataclass(frozen=True)
class DerivedEntry:
    """Upstream entry paired with its derived code."""

    derived_code: str
    entry: AnyUpstreamEntry


@dataclass(frozen=True)
class DeduplicationResult:
    """Deduplication output for one source.

    Attributes:
        kept_entries: One winner per derived code, ready to become concepts.
        excluded_entries: Winners dropped as deprecated or lacking display.
        provenance: One provenance row per upstream entry considered.
    """

    kept_entries: list[DerivedEntry]
    excluded_entries: list[DerivedEntry]
    provenance: list[ProvenanceRecord]


def deduplicate_entries(
    entries: Iterable[AnyUpstreamEntry],
    target_id: str,
    namespace_prefixes: Sequence[str] = DEFAULT_NAMESPACE_PREFIXES,
) -> DeduplicationResult:
    """Select one winner per derived code.

    The first-seen entry wins unless it is deprecated and a later entry
    for the same code is neither deprecated nor missing display text.

    Args:
        entries: Upstream entries in source order.
        target_id: Code-system id the entries belong to.
        namespace_prefixes: Prefixes stripped during derivation.

    Returns:
        Kept and excluded winners plus provenance for every entry.
    """
    winners: dict[str, AnyUpstreamEntry] = {}
    provenance: list[ProvenanceRecord] = []
    for entry in entries:
        derived_code = derive_code(entry.code, entry.display, namespace_prefixes)
        provenance.append(
            ProvenanceRecord(
                derived_code=derived_code,
                upstream_code=entry.code,
                upstream_source_file=entry.source_file,
                target_record_id=target_id,
            )
        )
        current = winners.get(derived_code)
        if current is None or _should_replace(current, entry):
            winners[derived_code] = entry
    kept_entries: list[DerivedEntry] = []
    excluded_entries: list[DerivedEntry] = []
    for derived_code, winner in winners.items():
        derived_entry = DerivedEntry(derived_code=derived_code, entry=winner)
        if is_deprecated_entry(winner) or not winner.display:
            excluded_entries.append(derived_entry)
            continue
        kept_entries.append(derived_entry)
    return DeduplicationResult(
        kept_entries=kept_entries,
        excluded_entries=excluded_entries,
        provenance=provenance,
    )


def _should_replace(current: AnyUpstreamEntry, candidate: AnyUpstreamEntry) -> bool:
    # TODO: precedence depends on upstream ordering; confirm whether a
    # non-deprecated entry seen first should ever yield to a later one.
    if not is_deprecated_entry(current):
        return False
    return bool(candidate.display) and not is_deprecated_entry(candidate)
