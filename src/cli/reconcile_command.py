"""Reconcile command wiring for the BIND terminology CLI."""

from __future__ import annotations

import argparse
from datetime import datetime
from typing import Any

from core.config import BindConfig
from core.errors import BindError
from core.types import ReconcileOptions, ReconcileResult, VocabularyOutcome
from ingest.reconcile_pipeline import reconcile_terminology

_STATUS_LABELS = {"created": "NEW  ", "merged": "MERGE", "skipped": "SKIP "}


def add_reconcile_command(subparsers: Any) -> None:
    """Register reconcile subcommand."""
    parser = subparsers.add_parser(
        "reconcile",
        help="Convert upstream terminology sources into canonical code systems",
    )
    parser.add_argument(
        "--source-root",
        help="Override BIND_SOURCE_ROOT; code lists follow unless BIND_CODE_LISTS_DIR is set",
    )
    parser.add_argument("--code-lists-dir", help="Override BIND_CODE_LISTS_DIR for this run")
    parser.add_argument("--rules", help="Override BIND_RULES_FILE with a YAML rules file")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report outcomes without writing any files",
    )
    parser.add_argument(
        "--generated-at",
        type=datetime.fromisoformat,
        help="Fixed ISO timestamp for the provenance mapping",
    )


def run_reconcile_command(config: BindConfig, args: argparse.Namespace) -> int:
    """Execute reconcile and print per code-system outcomes."""
    options = ReconcileOptions(dry_run=args.dry_run, generated_at=args.generated_at)
    try:
        result = reconcile_terminology(config, options)
    except BindError as error:
        print(f"reconcile_error={error}")
        return 1
    for line in render_reconcile_report(result):
        print(line)
    return 0


def render_reconcile_report(result: ReconcileResult) -> list[str]:
    """Render outcome lines followed by summary counts."""
    lines = [_render_outcome(outcome) for outcome in result.outcomes]
    lines.extend(
        [
            f"created={result.created_count}",
            f"merged={result.merged_count}",
            f"skipped={result.skipped_count}",
            f"mappings={len(result.provenance)}",
        ]
    )
    return lines


def _render_outcome(outcome: VocabularyOutcome) -> str:
    label = _STATUS_LABELS[outcome.status]
    if outcome.status == "skipped":
        return f"{label} {outcome.target_id} (no non-deprecated concepts)"
    if outcome.status == "merged":
        existing_count = outcome.total_count - outcome.appended_count
        return (
            f"{label} {outcome.target_id}.json ({existing_count} existing + "
            f"{outcome.appended_count} new = {outcome.total_count} total)"
        )
    return f"{label} {outcome.target_id}.json ({outcome.total_count} concepts)"
