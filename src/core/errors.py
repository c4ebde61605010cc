"""BIND terminology exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class BindError(Exception):
    """Base exception for all terminology pipeline failures."""


class BindConfigError(BindError):
    """Raised for invalid runtime configuration."""


class BindRulesError(BindError):
    """Raised for invalid or unsupported reconcile rules files."""


class BindIngestError(BindError):
    """Raised for upstream source reading failures."""


class BindReconcileError(BindError):
    """Raised when derived concepts cannot be reconciled into a record."""


class BindStoreError(BindError):
    """Raised for code-system and provenance persistence failures."""
