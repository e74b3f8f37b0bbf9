"""Routing of change events to destination collections."""

from collections.abc import Mapping
from types import MappingProxyType

# pylint: disable=too-few-public-methods


class RoutingResolver:
    """Derive the routing target (collection name) from a source table name.

    The default mapping lower-cases the table name. Explicit `overrides`
    (keyed by lower-cased table name) take precedence. The resolver holds no
    mutable state and performs no I/O, so the same table always resolves to
    the same target, across calls and across restarts.

    Args:
        overrides: Optional table → collection mapping.
    """

    def __init__(self, overrides: Mapping[str, str] | None = None) -> None:
        self._overrides = MappingProxyType(
            {table.strip().lower(): target for table, target in (overrides or {}).items()}
        )

    def resolve(self, source_table: str) -> str:
        """Return the routing target for `source_table`."""
        table = source_table.strip().lower()
        return self._overrides.get(table, table)
