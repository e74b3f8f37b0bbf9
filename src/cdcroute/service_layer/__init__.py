"""Service layer for CDCROUTE.

Implements the pipeline: envelope decoding, type normalization, routing,
payload transformation, write-intent reconciliation, and the source/sink
stages that compose them.

Dependency rule: may import `cdcroute.domain` and `cdcroute.interfaces`, but
not `cdcroute.adapters` or `cdcroute.entrypoints`.
"""
