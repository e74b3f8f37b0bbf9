"""Support namespace for cross-cutting, dependency-light helpers.

Small, stateless helpers with minimal dependencies. No business rules, no
orchestration, no wiring.

Import direction:
- May be imported by any CDCROUTE package.
- Must not import from application packages.

Nothing is re-exported at the package level. Import specific helpers from
their defining modules.
"""
