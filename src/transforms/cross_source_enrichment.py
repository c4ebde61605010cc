"""Cross-source designation enrichment.

This module backfills secondary-language designations onto concepts
that have none, using a structured code list describing the same code
system. Concepts that already carry any designation are never touched.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

from core.constants import DEFAULT_SECONDARY_LANGUAGE
from core.types import Concept, TargetRecord, UpstreamCodeListEntry
from transforms.code_derivation import clean_display
from transforms.concept_merge import build_designations


@dataclass(frozen=True)
class EnrichmentResult:
    """Enrichment output for one code system."""

    record: TargetRecord
    enriched_count: int


def enrich_designations(
    record: TargetRecord,
    code_list_entries: Iterable[UpstreamCodeListEntry],
    secondary_language: str = DEFAULT_SECONDARY_LANGUAGE,
) -> EnrichmentResult:
    """Backfill designations from code-list secondary display text.

    Matching tries the raw code-list code against the concept code first,
    then falls back to case-insensitive equality of cleaned display text.
    The display fallback is not scoped to any namespace, so two distinct
    codes sharing wording receive the same translation.

    Args:
        record: Code system to enrich.
        code_list_entries: Structured entries for the same code-system id.
        secondary_language: Tag for the backfilled designation.

    Returns:
        New record with backfilled designations and the enriched count.
    """
    entries = list(code_list_entries)
    by_code = {entry.code: entry for entry in entries}
    by_display = {
        clean_display(entry.display).lower(): entry for entry in entries if entry.display
    }
    concepts: list[Concept] = []
    enriched_count = 0
    for concept in record.concepts:
        enriched = _enrich_concept(concept, by_code, by_display, secondary_language)
        if enriched is not concept:
            enriched_count += 1
        concepts.append(enriched)
    if enriched_count == 0:
        return EnrichmentResult(record=record, enriched_count=0)
    return EnrichmentResult(
        record=replace(record, concepts=tuple(concepts)),
        enriched_count=enriched_count,
    )


def _enrich_concept(
    concept: Concept,
    by_code: dict[str, UpstreamCodeListEntry],
    by_display: dict[str, UpstreamCodeListEntry],
    secondary_language: str,
) -> Concept:
    if concept.designations:
        return concept
    match = by_code.get(concept.code) or by_display.get(concept.display.lower())
    if match is None:
        return concept
    designations = build_designations(match.secondary_display, secondary_language)
    if not designations:
        return concept
    return replace(concept, designations=designations)
