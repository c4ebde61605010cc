"""Unit tests for stable code derivation."""

from __future__ import annotations

from core.types import UpstreamCodeListEntry, UpstreamEntry
from transforms.code_derivation import (
    build_definition,
    clean_display,
    derive_code,
    display_to_slug,
    has_deprecation_marker,
    is_deprecated_entry,
    strip_namespace_prefixes,
)


def test_derive_code_strips_namespace_and_keeps_case() -> None:
    """Non-numeric codes should be used verbatim after prefix stripping."""
    assert derive_code("csio:AUTO", "Automobile") == "AUTO"


def test_derive_code_slugs_numeric_codes_from_display() -> None:
    """Numeric codes should derive a slug from their display text."""
    assert derive_code("047", "Fire & Theft") == "fire-and-theft"


def test_derive_code_falls_back_to_numeric_without_display() -> None:
    """An empty display should keep the numeric remainder."""
    assert derive_code("acord:0", "") == "0"
    assert derive_code("acord:0") == "0"


def test_derive_code_falls_back_when_slug_is_empty() -> None:
    """Displays made only of punctuation should keep the numeric remainder."""
    assert derive_code("12", "!!! ???") == "12"


def test_derive_code_slugs_deprecated_display_without_marker() -> None:
    """Deprecation markers should not leak into derived slugs."""
    assert derive_code("1", "DEPRECATED Wood Frame") == "wood-frame"


def test_strip_namespace_prefixes_repeats_until_clean() -> None:
    """Stacked prefixes should all be removed."""
    assert strip_namespace_prefixes("csio:csio:X") == "X"
    assert strip_namespace_prefixes("acord:csio:Y") == "Y"


def test_strip_namespace_prefixes_honors_custom_prefixes() -> None:
    """Only configured prefixes should be stripped."""
    assert strip_namespace_prefixes("ibc:csio:Z", ("ibc:",)) == "csio:Z"


def test_display_to_slug_folds_apostrophes_and_punctuation() -> None:
    """Slugs should drop apostrophes and collapse punctuation into hyphens."""
    assert display_to_slug("Owner's  Liability / Other") == "owners-liability-other"
    assert display_to_slug("Dwelling &amp; Contents") == "dwelling-and-contents"


def test_clean_display_strips_both_markers() -> None:
    """English and French deprecation markers should be stripped."""
    assert clean_display("DEPRECATED  Wood Frame ") == "Wood Frame"
    assert clean_display("désuet Charpente de bois") == "Charpente de bois"


def test_is_deprecated_entry_checks_flag_and_marker() -> None:
    """Entries are deprecated by flag or by display marker."""
    flagged = UpstreamCodeListEntry(code="A", display="Alpha", source_file="x", deprecated=True)
    marked = UpstreamEntry(code="B", source_file="y", display="DEPRECATED Beta")
    active = UpstreamEntry(code="C", source_file="y", display="Gamma")

    assert is_deprecated_entry(flagged)
    assert is_deprecated_entry(marked)
    assert not is_deprecated_entry(active)


def test_build_definition_uses_clean_display_and_title() -> None:
    """Definitions should combine cleaned display and lowercase title."""
    definition = build_definition("DEPRECATED Wood Frame", "Construction Type")

    assert definition == "Wood Frame — construction type code."


def test_deprecation_marker_detection_is_case_sensitive() -> None:
    """Only upper-case markers deprecate, though cleaning strips any casing."""
    assert has_deprecation_marker("  DÉSUET Chalet")
    assert not has_deprecation_marker("Deprecated Foo")
    assert clean_display("Deprecated Foo") == "Foo"
    lower_case = UpstreamEntry(code="F", source_file="z", display="Deprecated Foo")
    assert not is_deprecated_entry(lower_case)
