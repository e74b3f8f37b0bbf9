"""Unit tests for domain errors."""

from cdcroute.domain import errors


class TestMissingBusinessKey:
    """Tests for the MissingBusinessKey domain error."""

    @staticmethod
    def test_attributes() -> None:
        """The error keeps the reason and the routing target."""
        error = errors.MissingBusinessKey("business key is missing or empty", "orders")
        assert error.reason == "business key is missing or empty"
        assert error.routing_target == "orders"

    @staticmethod
    def test_error_message_names_routing_target() -> None:
        """The message mentions the routing target when known."""
        error = errors.MissingBusinessKey("business key is missing or empty", "orders")
        assert str(error) == "business key is missing or empty (routing target 'orders')"

    @staticmethod
    def test_error_message_without_routing_target() -> None:
        """The message is just the reason when no target is known."""
        error = errors.MissingBusinessKey("no key")
        assert str(error) == "no key"
        assert error.routing_target is None


def test_errors_share_a_base() -> None:
    """All domain errors derive from CdcRouteError."""
    assert issubclass(errors.MalformedEnvelope, errors.CdcRouteError)
    assert issubclass(errors.MissingBusinessKey, errors.CdcRouteError)
