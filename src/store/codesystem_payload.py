"""Shared JSON serialization for code-system payloads.

This module centralizes CodeSystem JSON conversion logic. Curated
fields unknown to the pipeline are carried through verbatim so that
rewriting a hand-edited record never drops them.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.constants import CODE_SYSTEM_RESOURCE_TYPE
from core.types import Concept, Designation, TargetRecord

_RECORD_FIELDS = (
    "resourceType",
    "id",
    "url",
    "name",
    "title",
    "status",
    "language",
    "description",
    "concept",
)
_CONCEPT_FIELDS = ("code", "display", "definition", "designation")


def record_to_payload(record: TargetRecord) -> dict[str, object]:
    """Serialize a code system into a JSON-safe payload.

    Args:
        record: Code system to serialize.

    Returns:
        Dictionary payload in canonical key order.
    """
    payload: dict[str, object] = {
        "resourceType": CODE_SYSTEM_RESOURCE_TYPE,
        "id": record.id,
        "url": record.url,
        "name": record.name,
        "title": record.title,
        "status": record.status,
    }
    if record.language is not None:
        payload["language"] = record.language
    payload["description"] = record.description
    payload.update(record.extra_fields)
    payload["concept"] = [concept_to_payload(concept) for concept in record.concepts]
    return payload


def concept_to_payload(concept: Concept) -> dict[str, object]:
    """Serialize one concept, writing only the optional keys it carries."""
    payload: dict[str, object] = {"code": concept.code, "display": concept.display}
    if concept.definition is not None:
        payload["definition"] = concept.definition
    if concept.designations is not None:
        payload["designation"] = [
            {"language": designation.language, "value": designation.value}
            for designation in concept.designations
        ]
    payload.update(concept.extra_fields)
    return payload


def record_from_payload(payload: object) -> TargetRecord:
    """Deserialize and validate a code-system payload.

    Args:
        payload: Decoded JSON document.

    Returns:
        Parsed code system.

    Raises:
        ValueError: If required fields are missing or mistyped.
    """
    if not isinstance(payload, dict):
        raise ValueError("expected JSON object at top level")
    if payload.get("resourceType") != CODE_SYSTEM_RESOURCE_TYPE:
        raise ValueError(f"expected resourceType '{CODE_SYSTEM_RESOURCE_TYPE}'")
    raw_concepts = payload.get("concept")
    if not isinstance(raw_concepts, list):
        raise ValueError("expected 'concept' to be a list")
    language = payload.get("language")
    if language is not None and not isinstance(language, str):
        raise ValueError("expected 'language' to be a string")
    return TargetRecord(
        id=_required_string(payload, "id"),
        url=_required_string(payload, "url"),
        name=_required_string(payload, "name"),
        title=_required_string(payload, "title"),
        status=_required_string(payload, "status"),
        language=language,
        description=_required_string(payload, "description"),
        concepts=tuple(
            concept_from_payload(item, index) for index, item in enumerate(raw_concepts)
        ),
        extra_fields=_extra_fields(payload, _RECORD_FIELDS),
    )


def concept_from_payload(payload: object, index: int) -> Concept:
    """Deserialize one concept payload.

    Raises:
        ValueError: If the concept lacks a string code or display, or
            carries a non-string definition.
    """
    if not isinstance(payload, dict):
        raise ValueError(f"concept #{index} is not an object")
    definition = payload.get("definition")
    if definition is not None and not isinstance(definition, str):
        raise ValueError(f"concept #{index} field 'definition' must be a string")
    return Concept(
        code=_required_string(payload, "code", f"concept #{index}"),
        display=_required_string(payload, "display", f"concept #{index}"),
        definition=definition,
        designations=_designations_from_payload(payload.get("designation"), index),
        extra_fields=_extra_fields(
            payload, tuple(key for key in _CONCEPT_FIELDS if payload.get(key) is not None)
        ),
    )


def _designations_from_payload(
    raw_value: object,
    index: int,
) -> tuple[Designation, ...] | None:
    if raw_value is None:
        return None
    if not isinstance(raw_value, list):
        raise ValueError(f"concept #{index} has a non-list 'designation'")
    designations: list[Designation] = []
    for row in raw_value:
        if not isinstance(row, dict):
            raise ValueError(f"concept #{index} has a non-object designation")
        designations.append(
            Designation(
                language=_required_string(row, "language", f"concept #{index} designation"),
                value=_required_string(row, "value", f"concept #{index} designation"),
            )
        )
    return tuple(designations)


def _required_string(payload: Mapping[str, Any], field_name: str, context: str = "record") -> str:
    value = payload.get(field_name)
    if not isinstance(value, str):
        raise ValueError(f"{context} field '{field_name}' must be a string")
    return value


def _extra_fields(payload: Mapping[str, Any], known_fields: tuple[str, ...]) -> dict[str, object]:
    return {key: value for key, value in payload.items() if key not in known_fields}
