"""Interfaces (application boundary) for CDCROUTE.

Defines framework-free application contracts: ABCs and small DTOs shared by
the service layer and adapters (document stores, dead-letter queues, ID
generators, schema-described structures). Business rules stay out of this
package.

Dependency rule: this package may import `cdcroute.domain` only. It may be
imported by `cdcroute.service_layer`, `cdcroute.adapters`, and
`cdcroute.bootstrap`.
"""
