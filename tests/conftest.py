"""Global pytest configuration for CDCROUTE.

Shared fixtures are loaded from `tests.fixtures`. Every test is marked with
the suite it lives in (``unit``, ``contract``, ``integration`` or
``functional``), so ``pytest -m unit`` selects by folder.
"""

from pathlib import Path

import pytest

# pylint: disable=unused-argument

pytest_plugins = [
    "tests.fixtures.sqlite",
    "tests.fixtures.datagen",
]

TESTS_ROOT = Path(__file__).parent.resolve()
SUITES = ("unit", "contract", "integration", "functional")


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark each item with the suite folder it was collected from."""
    for item in items:
        path = item.path.resolve()
        if TESTS_ROOT not in path.parents:
            continue
        suite = path.relative_to(TESTS_ROOT).parts[0]
        if suite in SUITES and item.get_closest_marker(suite) is None:
            item.add_marker(getattr(pytest.mark, suite))
