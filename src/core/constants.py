"""Core constants used across BIND terminology modules.

This module centralizes file names, defaults, and upstream tables.
Keeping values here avoids magic literals in reconciliation logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_SOURCE_ROOT = Path("terminology")
DEFAULT_PROJECT_ROOT = Path(".")
CODE_LISTS_DIR_NAME = "code-lists"
CODESYSTEMS_DIR_NAME = "codesystems"
MAPPING_DIR_NAME = ".mapping"
MAPPING_FILE_NAME = "source-mapping.json"
MANIFEST_FILE_NAME = "_manifest.json"
GITIGNORE_FILE_NAME = ".gitignore"
GITIGNORE_COMMENT = "# Private source mapping (generated)"
SOURCE_FILE_EXTENSION = ".json"
DEFAULT_CANONICAL_HOST = "bind.codes"
CODE_SYSTEM_RESOURCE_TYPE = "CodeSystem"
DEFAULT_STATUS = "draft"
DEFAULT_LANGUAGE = "en"
DEFAULT_SECONDARY_LANGUAGE = "fr-CA"
VALID_STATUSES = ("draft", "active", "retired", "unknown")
DEFAULT_NAMESPACE_PREFIXES = ("csio:", "acord:")
DEPRECATION_MARKERS = ("DEPRECATED", "DÉSUET")
MAPPING_DESCRIPTION = (
    "Maps BIND codes to their original source codes. "
    "This file is private and excluded from version control."
)
RULES_FILE_VERSION = 1

DEFAULT_SKIP_FILES = (
    "code-list-summary.json",
    "acord-csio-unified.json",
)

DEFAULT_SIMPLE_ARRAY_IDS = {
    "lines-of-business": "line-of-business",
    "construction-types": "construction-type",
    "loss-cause-codes": "loss-cause",
    "coverage-options": "coverage-option",
    "commodity-codes": "commodity-code",
    "conviction-codes": "conviction-code",
    "driving-record-codes": "driving-record-code",
    "exposure-types": "exposure-type",
    "occupancy-types": "occupancy-type",
    "occupation-classes": "occupation-class",
    "policy-status-codes": "policy-status",
    "policy-types": "policy-type",
    "premium-base-codes": "premium-base",
    "producer-roles": "producer-role",
    "protection-devices": "protection-device",
    "risk-types": "risk-type",
    "role-types": "role-type",
    "sub-risk-types": "sub-risk-type",
    "underwriting-questions": "underwriting-question",
    "vehicle-body-types": "vehicle-body-type",
    "coverages": "coverage",
    "claims-party-roles": "claims-party-role",
    "insured-principal-roles": "insured-principal-role",
    "mercantile-business-types": "mercantile-business-type",
}

DEFAULT_CODE_LIST_IDS = {
    "LineOfBusiness": "line-of-business",
    "LineOfBusinessSubCode": "line-of-business-sub-code",
    "BroadLineBusiness": "broad-line-business",
    "ConstructionType": "construction-type",
    "CauseOfLoss": "cause-of-loss",
    "VehicleBodyType": "vehicle-body-type",
}
