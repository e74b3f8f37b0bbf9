"""Fixtures for id_generator contract tests.

`GENERATORS` lists every adapter; `ORDERED` names the ones whose ids sort in
creation order, which the in-memory document store relies on when it is
asked to list documents by `_id`.
"""

from collections.abc import Callable

import pytest

from cdcroute.adapters.id_generators import (
    ObjectIdGenerator,
    SequentialIdGenerator,
    ULIDGenerator,
)
from cdcroute.interfaces.id_generator import IdGenerator

GENERATORS: dict[str, Callable[[], IdGenerator]] = {
    "objectid": ObjectIdGenerator,
    "ulid": ULIDGenerator,
    "sequential": SequentialIdGenerator,
}
ORDERED = ("ulid", "sequential")


@pytest.fixture(params=sorted(GENERATORS))
def id_generator(request: pytest.FixtureRequest) -> IdGenerator:
    """A fresh generator of each kind."""
    return GENERATORS[request.param]()


@pytest.fixture(params=ORDERED)
def ordered_id_generator(request: pytest.FixtureRequest) -> IdGenerator:
    """A fresh generator whose ids sort in creation order."""
    return GENERATORS[request.param]()
