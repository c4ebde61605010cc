"""Reconciliation orchestration for upstream terminology releases.

This module coordinates source reading, code derivation, deduplication,
append-only merge, cross-source enrichment, and persistence. All run
state lives in a context object created per run and returned as a result.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.config import BindConfig
from core.constants import MAPPING_DIR_NAME
from core.logging_config import get_logger
from core.reconcile_rules import ReconcileRules, load_reconcile_rules
from core.types import (
    ReconcileOptions,
    ReconcileResult,
    TargetRecord,
    UpstreamCodeListEntry,
    UpstreamEntry,
    VocabularyOutcome,
)
from ingest.source_reader import read_code_list_sources, read_simple_array_sources
from store.codesystem_store import CodeSystemStore
from store.provenance_store import (
    ProvenanceRecorder,
    ensure_gitignore_entry,
    write_provenance_file,
)
from transforms.concept_merge import merge_concepts
from transforms.cross_source_enrichment import enrich_designations
from transforms.deduplication import deduplicate_entries

_LOGGER = get_logger(__name__)


@dataclass
class ReconcileContext:
    """Mutable state owned by exactly one reconcile run."""

    provenance: ProvenanceRecorder = field(default_factory=ProvenanceRecorder)
    outcomes: list[VocabularyOutcome] = field(default_factory=list)


class ReconcilePipelineRunner:
    """Single-pass runner that reconciles every code-system id in order."""

    def __init__(
        self,
        config: BindConfig,
        options: ReconcileOptions,
        rules: ReconcileRules | None = None,
    ) -> None:
        self._config = config
        self._options = options
        self._rules = rules if rules is not None else load_reconcile_rules(config.rules_path)
        self._store = CodeSystemStore(config)

    def run(self) -> ReconcileResult:
        """Execute the pipeline and return outcomes and provenance."""
        context = ReconcileContext()
        simple_sources = read_simple_array_sources(self._config.source_root, self._rules)
        code_list_sources = read_code_list_sources(self._config.code_lists_dir, self._rules)
        _LOGGER.info(
            "sources_loaded",
            simple_array_count=len(simple_sources),
            code_list_count=len(code_list_sources),
        )
        for target_id in sorted(set(simple_sources) | set(code_list_sources)):
            outcome = self._reconcile_code_system(
                target_id,
                simple_sources.get(target_id),
                code_list_sources.get(target_id),
                context,
            )
            context.outcomes.append(outcome)
        result = ReconcileResult(
            outcomes=tuple(context.outcomes),
            provenance=context.provenance.sorted_records(),
        )
        if not self._options.dry_run:
            self._write_run_artifacts(result)
        _log_reconcile_completion(result, self._options.dry_run)
        return result

    def _reconcile_code_system(
        self,
        target_id: str,
        simple_entries: list[UpstreamEntry] | None,
        code_list_entries: list[UpstreamCodeListEntry] | None,
        context: ReconcileContext,
    ) -> VocabularyOutcome:
        existing_record = self._store.load(target_id)
        record = self._build_record(
            target_id, existing_record, simple_entries, code_list_entries, context
        )
        if record is None or not record.concepts:
            _LOGGER.info("vocabulary_skipped", target_id=target_id, reason="no_concepts")
            return VocabularyOutcome(
                target_id=target_id, status="skipped", appended_count=0, total_count=0
            )
        existing_count = len(existing_record.concepts) if existing_record else 0
        outcome = VocabularyOutcome(
            target_id=target_id,
            status="merged" if existing_record else "created",
            appended_count=len(record.concepts) - existing_count,
            total_count=len(record.concepts),
        )
        if not self._options.dry_run:
            self._store.write(record)
        _LOGGER.info(
            f"vocabulary_{outcome.status}",
            target_id=target_id,
            existing_count=existing_count,
            appended_count=outcome.appended_count,
            total_count=outcome.total_count,
        )
        return outcome

    def _build_record(
        self,
        target_id: str,
        existing_record: TargetRecord | None,
        simple_entries: list[UpstreamEntry] | None,
        code_list_entries: list[UpstreamCodeListEntry] | None,
        context: ReconcileContext,
    ) -> TargetRecord | None:
        """Merge code-list concepts first, then simple-array concepts on top."""
        record = existing_record
        url = self._config.canonical_url(target_id)
        secondary_language = self._rules.secondary_language
        for entries in (code_list_entries, simple_entries):
            if entries is None:
                continue
            deduplication = deduplicate_entries(
                entries, target_id, self._rules.namespace_prefixes
            )
            context.provenance.extend(deduplication.provenance)
            record = merge_concepts(
                record, target_id, url, deduplication.kept_entries, secondary_language
            ).record
        if record is not None and simple_entries is not None and code_list_entries is not None:
            enrichment = enrich_designations(record, code_list_entries, secondary_language)
            if enrichment.enriched_count:
                _LOGGER.info(
                    "designations_backfilled",
                    target_id=target_id,
                    enriched_count=enrichment.enriched_count,
                )
            record = enrichment.record
        return record

    def _write_run_artifacts(self, result: ReconcileResult) -> None:
        write_provenance_file(
            self._config.mapping_file,
            result.provenance,
            self._options.generated_at,
        )
        ensure_gitignore_entry(self._config.gitignore_path, f"{MAPPING_DIR_NAME}/")
        self._store.write_manifest()


def reconcile_terminology(
    config: BindConfig,
    options: ReconcileOptions | None = None,
    rules: ReconcileRules | None = None,
) -> ReconcileResult:
    """Run the reconciliation pipeline and persist code systems.

    Args:
        config: Runtime configuration.
        options: Optional run options, defaults when omitted.
        rules: Optional rules overriding the configured rules file.

    Returns:
        Per code-system outcomes and sorted provenance records.

    Raises:
        BindIngestError: If a source directory is missing.
        BindRulesError: If the configured rules file is invalid.
        BindReconcileError: If a curated record is filed under another id.
        BindStoreError: If a curated record is invalid or a write fails.
    """
    runner = ReconcilePipelineRunner(config, options or ReconcileOptions(), rules)
    return runner.run()


def _log_reconcile_completion(result: ReconcileResult, dry_run: bool) -> None:
    """Log run completion with summary counts."""
    _LOGGER.info(
        "reconcile_completed",
        created_count=result.created_count,
        merged_count=result.merged_count,
        skipped_count=result.skipped_count,
        total_mappings=len(result.provenance),
        dry_run=dry_run,
    )
