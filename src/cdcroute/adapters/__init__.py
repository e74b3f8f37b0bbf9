"""Adapters (infrastructure) for CDCROUTE.

Provide concrete implementations of the ports in `cdcroute.interfaces`
(document stores, dead-letter queues, ID generators).

Dependency rule: may import `cdcroute.domain` and `cdcroute.interfaces`; the
domain must not import this package.
"""
