"""Public SDK surface for BIND terminology reconciliation.

This module provides a stable import path for pipeline users.
It re-exports the reconcile entry point and typed models.
"""

from __future__ import annotations

from core.config import BindConfig
from core.reconcile_rules import ReconcileRules, default_reconcile_rules, load_reconcile_rules
from core.types import (
    Concept,
    Designation,
    ProvenanceRecord,
    ReconcileOptions,
    ReconcileResult,
    TargetRecord,
    VocabularyOutcome,
)
from ingest.reconcile_pipeline import reconcile_terminology
from transforms.code_derivation import derive_code

__all__ = [
    "BindConfig",
    "Concept",
    "Designation",
    "ProvenanceRecord",
    "ReconcileOptions",
    "ReconcileResult",
    "ReconcileRules",
    "TargetRecord",
    "VocabularyOutcome",
    "default_reconcile_rules",
    "derive_code",
    "load_reconcile_rules",
    "reconcile_terminology",
]
