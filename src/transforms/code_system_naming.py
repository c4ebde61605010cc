"""Naming helpers for code-system ids, names, and titles."""

from __future__ import annotations

import re

_LOWER_UPPER_PATTERN = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_PATTERN = re.compile(r"([A-Z]+)([A-Z][a-z])")
_SEPARATOR_PATTERN = re.compile(r"[\s_]+")


def to_kebab_case(name: str) -> str:
    """Convert PascalCase or camelCase to kebab-case.

    ``RoofMaterialType`` becomes ``roof-material-type`` and
    ``HTTPStatus`` becomes ``http-status``.
    """
    kebab = _LOWER_UPPER_PATTERN.sub(r"\1-\2", name)
    kebab = _ACRONYM_PATTERN.sub(r"\1-\2", kebab)
    kebab = _SEPARATOR_PATTERN.sub("-", kebab)
    return kebab.lower()


def to_pascal_case(kebab: str) -> str:
    """Convert a kebab-case id to a PascalCase name."""
    return "".join(_capitalize_first(part) for part in kebab.split("-"))


def to_title(kebab: str) -> str:
    """Convert a kebab-case id to a human-friendly title."""
    return " ".join(_capitalize_first(part) for part in kebab.split("-"))


def _capitalize_first(part: str) -> str:
    return part[:1].upper() + part[1:]
