"""Code-system and provenance persistence layer.

This package loads hand-curated code systems and writes reconciled
records, the serving manifest, and the private provenance mapping.
"""
