"""Domain layer for CDCROUTE.

Contains the record shapes and invariants of the pipeline: change events,
outgoing records, business keys and write-intents. This package is
deliberately technology-agnostic.

Dependency rule: do not import from `cdcroute.adapters` or `cdcroute.entrypoints`.
"""
