"""Typed reconcile rules for upstream terminology releases.

This module loads and validates YAML rules files that steer how upstream
file names and code-list names map onto code-system ids. Built-in defaults
cover the current upstream release; a rules file extends or overrides them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Sequence, cast

import yaml

from core.constants import (
    DEFAULT_CODE_LIST_IDS,
    DEFAULT_NAMESPACE_PREFIXES,
    DEFAULT_SECONDARY_LANGUAGE,
    DEFAULT_SIMPLE_ARRAY_IDS,
    DEFAULT_SKIP_FILES,
    RULES_FILE_VERSION,
)
from core.errors import BindRulesError

_ALLOWED_ROOT_KEYS = {
    "version",
    "simple_array_ids",
    "code_list_ids",
    "skip_files",
    "namespace_prefixes",
    "secondary_language",
}


@dataclass(frozen=True)
class ReconcileRules:
    """Tables that steer source reading and code derivation.

    Attributes:
        simple_array_ids: Simple-array file stem to code-system id overrides.
        code_list_ids: Code-list name to code-system id overrides.
        skip_files: File names ignored in the simple-array directory.
        namespace_prefixes: Prefixes stripped from upstream codes.
        secondary_language: Language tag for secondary display designations.
    """

    simple_array_ids: Mapping[str, str] = field(
        default_factory=lambda: dict(DEFAULT_SIMPLE_ARRAY_IDS)
    )
    code_list_ids: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_CODE_LIST_IDS))
    skip_files: tuple[str, ...] = DEFAULT_SKIP_FILES
    namespace_prefixes: tuple[str, ...] = DEFAULT_NAMESPACE_PREFIXES
    secondary_language: str = DEFAULT_SECONDARY_LANGUAGE


def default_reconcile_rules() -> ReconcileRules:
    """Return rules matching the current upstream release."""
    return ReconcileRules()


def load_reconcile_rules(rules_path: Path | None) -> ReconcileRules:
    """Load and validate a YAML rules file on top of the defaults.

    Args:
        rules_path: Rules file path, or None for defaults only.

    Returns:
        Fully validated rules object.

    Raises:
        BindRulesError: If the file is missing, invalid, or fails schema checks.
    """
    defaults = default_reconcile_rules()
    if rules_path is None:
        return defaults
    payload = _load_yaml_payload(rules_path)
    root_mapping = _expect_mapping(payload, "rules root")
    _validate_root_keys(root_mapping)
    _parse_version(root_mapping)
    rules = defaults
    if "simple_array_ids" in root_mapping:
        overrides = _string_mapping(root_mapping["simple_array_ids"], "simple_array_ids")
        rules = replace(rules, simple_array_ids={**rules.simple_array_ids, **overrides})
    if "code_list_ids" in root_mapping:
        overrides = _string_mapping(root_mapping["code_list_ids"], "code_list_ids")
        rules = replace(rules, code_list_ids={**rules.code_list_ids, **overrides})
    if "skip_files" in root_mapping:
        rules = replace(rules, skip_files=_string_list(root_mapping["skip_files"], "skip_files"))
    if "namespace_prefixes" in root_mapping:
        prefixes = _string_list(root_mapping["namespace_prefixes"], "namespace_prefixes")
        if any(not prefix for prefix in prefixes):
            raise BindRulesError("Rules field 'namespace_prefixes' must not contain empty values.")
        rules = replace(rules, namespace_prefixes=prefixes)
    if "secondary_language" in root_mapping:
        rules = replace(
            rules,
            secondary_language=_required_string(
                root_mapping["secondary_language"], "secondary_language"
            ),
        )
    return rules


def _load_yaml_payload(rules_path: Path) -> object:
    rules_file = rules_path.expanduser().resolve()
    if not rules_file.exists():
        raise BindRulesError(
            f"Rules file does not exist at {rules_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(rules_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise BindRulesError(
            f"Failed to read rules at {rules_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise BindRulesError(
            f"Failed to parse YAML rules at {rules_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise BindRulesError(f"Rules file at {rules_file} is empty. Define at least 'version'.")
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise BindRulesError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise BindRulesError(f"Invalid {context}: expected object mapping, got {type(value).__name__}.")


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise BindRulesError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise BindRulesError(
            f"Rules field 'version' must be an integer. Set version: {RULES_FILE_VERSION}."
        )
    if raw_version != RULES_FILE_VERSION:
        raise BindRulesError(
            f"Unsupported rules version {raw_version}. Use version: {RULES_FILE_VERSION}."
        )
    return raw_version


def _string_mapping(value: object, field_name: str) -> dict[str, str]:
    mapping = _expect_mapping(value, f"rules field '{field_name}'")
    parsed: dict[str, str] = {}
    for key, target in mapping.items():
        parsed[key] = _required_string(target, f"{field_name}.{key}")
    return parsed


def _string_list(value: object, field_name: str) -> tuple[str, ...]:
    rows = _expect_sequence(value, f"rules field '{field_name}'")
    return tuple(_required_string(row, field_name) for row in rows)


def _required_string(value: object, field_name: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    raise BindRulesError(f"Rules field '{field_name}' must be a non-empty string.")


def _validate_root_keys(root_mapping: Mapping[str, object]) -> None:
    unknown_keys = sorted(set(root_mapping) - _ALLOWED_ROOT_KEYS)
    if unknown_keys:
        raise BindRulesError(f"Rules file contains unknown root fields: {', '.join(unknown_keys)}.")
