"""CDCROUTE

The in-flight transformation and reconciliation stage of a change-data-capture
pipeline. Row-level change events are decoded, optionally type-normalized,
routed to a destination collection by table name, and reconciled into
idempotent write-intents matched by business key.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
