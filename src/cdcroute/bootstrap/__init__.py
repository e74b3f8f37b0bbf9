"""Bootstrap (composition root) for CDCROUTE.

Assembles the pipeline at runtime: reads settings, builds the source and sink
stages, and wires concrete adapters (document store, dead-letter queue) into
them.

Import rules:
- Entry points import *this* package (not adapters/service_layer/interfaces/domain).
- This package may import: `cdcroute.adapters`, `cdcroute.service_layer`,
  `cdcroute.interfaces`, `cdcroute.domain`, and `cdcroute.config`.
- Inner layers must not import `cdcroute.bootstrap`.
"""

from .bootstrap import (
    AppContainer,
    bootstrap,
    build_dead_letter_queue,
    build_sink_stage,
    build_source_stage,
)

__all__ = [
    "AppContainer",
    "bootstrap",
    "build_dead_letter_queue",
    "build_sink_stage",
    "build_source_stage",
]
