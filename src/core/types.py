"""Shared typed models.

This module defines immutable data models used by ingest, transforms,
and store layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Mapping, Union

OutcomeStatus = Literal["created", "merged", "skipped"]


@dataclass(frozen=True)
class UpstreamEntry:
    """One entry from a simple-array source file.

    Attributes:
        code: Raw upstream code, possibly namespaced or numeric.
        source_file: Source file name relative to the source root.
        display: Optional display text.
    """

    code: str
    source_file: str
    display: str | None = None


@dataclass(frozen=True)
class UpstreamCodeListEntry:
    """One entry from a structured code-list source file.

    Attributes:
        code: Raw upstream code, possibly namespaced or numeric.
        display: Primary display text, empty when missing upstream.
        source_file: Source file path relative to the source root.
        secondary_display: Optional secondary-language display text.
        deprecated: Upstream deprecation flag.
        owner: Optional owning standards body.
    """

    code: str
    display: str
    source_file: str
    secondary_display: str | None = None
    deprecated: bool = False
    owner: str | None = None


AnyUpstreamEntry = Union[UpstreamEntry, UpstreamCodeListEntry]


@dataclass(frozen=True)
class SimpleArraySource:
    """Parsed simple-array source file."""

    source_file: str
    target_id: str
    entries: tuple[UpstreamEntry, ...]


@dataclass(frozen=True)
class CodeListSource:
    """Parsed structured code-list source file."""

    source_file: str
    name: str
    target_id: str
    entries: tuple[UpstreamCodeListEntry, ...]


@dataclass(frozen=True)
class UnrecognizedSource:
    """Source file whose shape is not a vocabulary."""

    source_file: str
    reason: str


SourceFile = Union[SimpleArraySource, CodeListSource, UnrecognizedSource]


@dataclass(frozen=True)
class Designation:
    """Translated display string for a concept.

    Attributes:
        language: BCP 47 language tag.
        value: Translated display text.
    """

    language: str
    value: str


@dataclass(frozen=True)
class Concept:
    """Canonical code inside a code system.

    Attributes:
        code: Stable derived code, unique within its code system.
        display: Primary display text.
        definition: Short human-readable definition, None when a curated
            concept carries no definition key.
        designations: Translations of the display text, None when the
            concept carries no designation key.
        extra_fields: Curated fields preserved verbatim.
    """

    code: str
    display: str
    definition: str | None
    designations: tuple[Designation, ...] | None = None
    extra_fields: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class TargetRecord:
    """Canonical code system persisted as the system of record.

    Attributes:
        id: Stable code-system identifier.
        url: Canonical URL ending with the id.
        name: PascalCase machine name.
        title: Human-friendly title.
        status: Publication status.
        language: Default language of display text, None when unset.
        description: Free-text description.
        concepts: Ordered concepts.
        extra_fields: Curated top-level fields preserved verbatim.
    """

    id: str
    url: str
    name: str
    title: str
    status: str
    language: str | None
    description: str
    concepts: tuple[Concept, ...]
    extra_fields: Mapping[str, object] = field(default_factory=dict)

    def concept_codes(self) -> set[str]:
        """Return the set of concept codes in this record."""
        return {concept.code for concept in self.concepts}


@dataclass(frozen=True)
class ProvenanceRecord:
    """Link from a derived code back to its upstream origin.

    Attributes:
        derived_code: Code derived for the code system.
        upstream_code: Raw upstream code.
        upstream_source_file: Source file the upstream code came from.
        target_record_id: Code-system id the derived code belongs to.
    """

    derived_code: str
    upstream_code: str
    upstream_source_file: str
    target_record_id: str


@dataclass(frozen=True)
class ReconcileOptions:
    """Reconcile command options.

    Attributes:
        dry_run: Build and report records without writing any files.
        generated_at: Optional fixed provenance timestamp, now when omitted.
    """

    dry_run: bool = False
    generated_at: datetime | None = None


@dataclass(frozen=True)
class VocabularyOutcome:
    """Per code-system result of one reconcile run.

    Attributes:
        target_id: Code-system id.
        status: Whether the record was created, merged, or skipped.
        appended_count: Concepts appended during this run.
        total_count: Concepts in the record after this run.
    """

    target_id: str
    status: OutcomeStatus
    appended_count: int
    total_count: int


@dataclass(frozen=True)
class ReconcileResult:
    """Reconcile run output.

    Attributes:
        outcomes: Per code-system outcomes sorted by id.
        provenance: Provenance records sorted by code-system id and code.
    """

    outcomes: tuple[VocabularyOutcome, ...]
    provenance: tuple[ProvenanceRecord, ...]

    @property
    def created_count(self) -> int:
        """Number of newly created code systems."""
        return _count_status(self.outcomes, "created")

    @property
    def merged_count(self) -> int:
        """Number of merged code systems."""
        return _count_status(self.outcomes, "merged")

    @property
    def skipped_count(self) -> int:
        """Number of code systems skipped for having no concepts."""
        return _count_status(self.outcomes, "skipped")


def _count_status(outcomes: tuple[VocabularyOutcome, ...], status: OutcomeStatus) -> int:
    return sum(1 for outcome in outcomes if outcome.status == status)
