"""Entrypoints (inbound adapters) for CDCROUTE.

Expose the pipeline to the outside world. Parse and validate inputs, call the
stages wired by `cdcroute.bootstrap`, and present results.

Dependency rule: may import `cdcroute.bootstrap` and `cdcroute.service_layer`;
avoid importing `cdcroute.adapters` directly.
"""
