"""Unit tests for the DeadLetter DTO."""

from datetime import datetime, timezone

import pytest

from cdcroute.interfaces.dead_letter import DeadLetter


def test_failed_at_defaults_to_utc_now() -> None:
    """Letters are timestamped with an aware UTC time."""
    before = datetime.now(timezone.utc)
    letter = DeadLetter(
        routing_target="orders", key=None, value={}, error_type="E", reason="r"
    )
    assert letter.failed_at.tzinfo is not None
    assert letter.failed_at >= before


def test_naive_failed_at_rejected() -> None:
    """A naive timestamp is rejected."""
    with pytest.raises(ValueError):
        DeadLetter(
            routing_target="orders",
            key=None,
            value={},
            error_type="E",
            reason="r",
            failed_at=datetime(2026, 1, 1),
        )
