"""Domain-layer error definitions."""

# ============================================================================
#                           General domain errors
# ============================================================================


class CdcRouteError(Exception):
    """Base class for domain-layer errors."""


# ============================================================================
#                           Source-side errors
# ============================================================================


class MalformedEnvelope(CdcRouteError):
    """Raised when a change event cannot be decoded.

    The operation kind, source table or record key could not be determined, or
    an image is present but is not a row. The record is skipped, never fatal to
    the pipeline.
    """


# ============================================================================
#                           Sink-side errors
# ============================================================================


class MissingBusinessKey(CdcRouteError):
    """Raised when no usable business key can be established for a record.

    Attributes:
        routing_target (str | None): The collection the record was addressed at.
    """

    def __init__(self, reason: str, routing_target: str | None = None) -> None:
        message = (
            f"{reason} (routing target '{routing_target}')"
            if routing_target is not None
            else reason
        )
        super().__init__(message)
        self.reason = reason
        self.routing_target = routing_target
