"""Stable code derivation transform.

This module maps one upstream code plus its display text onto the code
used inside a canonical code system. Derivation is a pure function so
identifiers stay stable across runs and across both upstream shapes.
"""

from __future__ import annotations

import re
from typing import Sequence

from core.constants import DEFAULT_NAMESPACE_PREFIXES, DEPRECATION_MARKERS
from core.types import AnyUpstreamEntry, UpstreamCodeListEntry

_NUMERIC_PATTERN = re.compile(r"[0-9]+")
_MARKER_PATTERNS = tuple(
    re.compile(rf"^{re.escape(marker)}\s*", re.IGNORECASE) for marker in DEPRECATION_MARKERS
)
_APOSTROPHE_PATTERN = re.compile("['’]")
_PUNCTUATION_PATTERN = re.compile(r"[^a-zA-Z0-9\s-]")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_HYPHEN_RUN_PATTERN = re.compile(r"-+")


def derive_code(
    upstream_code: str,
    display: str | None = None,
    namespace_prefixes: Sequence[str] = DEFAULT_NAMESPACE_PREFIXES,
) -> str:
    """Derive the canonical code for one upstream code.

    Args:
        upstream_code: Raw upstream code, e.g. ``csio:AUTO`` or ``047``.
        display: Optional display text used when the code is numeric.
        namespace_prefixes: Prefixes stripped repeatedly from the code.

    Returns:
        The stripped code verbatim, or a display slug for numeric codes.
    """
    stripped = strip_namespace_prefixes(upstream_code, namespace_prefixes)
    if is_numeric_only(stripped) and display:
        slug = display_to_slug(clean_display(display))
        return slug or stripped
    return stripped


def strip_namespace_prefixes(
    upstream_code: str,
    namespace_prefixes: Sequence[str] = DEFAULT_NAMESPACE_PREFIXES,
) -> str:
    """Strip known namespace prefixes until none remain.

    ``csio:csio:X`` and ``acord:csio:X`` both reduce to ``X``.
    """
    result = upstream_code
    stripped = True
    while stripped:
        stripped = False
        for prefix in namespace_prefixes:
            if result.startswith(prefix):
                result = result[len(prefix) :]
                stripped = True
    return result


def is_numeric_only(code: str) -> bool:
    """Return whether a code consists only of ASCII digits."""
    return _NUMERIC_PATTERN.fullmatch(code) is not None


def display_to_slug(display: str) -> str:
    """Build a lowercase hyphenated slug from display text.

    Args:
        display: Display text, already cleaned of deprecation markers.

    Returns:
        Slug such as ``fire-and-theft``, possibly empty.
    """
    slug = display.replace("&amp;", "and").replace("&", "and")
    slug = _APOSTROPHE_PATTERN.sub("", slug)
    slug = _PUNCTUATION_PATTERN.sub(" ", slug)
    slug = _WHITESPACE_PATTERN.sub("-", slug.strip()).lower()
    slug = _HYPHEN_RUN_PATTERN.sub("-", slug)
    return slug.strip("-")


def clean_display(display: str) -> str:
    """Remove leading deprecation markers and surrounding whitespace."""
    cleaned = display.strip()
    for pattern in _MARKER_PATTERNS:
        cleaned = pattern.sub("", cleaned)
    return cleaned.strip()


def has_deprecation_marker(display: str | None) -> bool:
    """Return whether display text starts with a deprecation marker.

    Matching is case-sensitive: only the upper-case release markers flag
    an entry, while ``clean_display`` strips any casing from the text.
    """
    if not display:
        return False
    leading_text = display.lstrip()
    return any(leading_text.startswith(marker) for marker in DEPRECATION_MARKERS)


def is_deprecated_entry(entry: AnyUpstreamEntry) -> bool:
    """Return whether an upstream entry is flagged or marked deprecated."""
    if isinstance(entry, UpstreamCodeListEntry) and entry.deprecated:
        return True
    return has_deprecation_marker(entry.display)


def build_definition(display: str, title: str) -> str:
    """Generate a short definition from display text and code-system title."""
    return f"{clean_display(display)} — {title.lower()} code."
