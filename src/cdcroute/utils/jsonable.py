"""Conversion of record values into JSON-safe structures.

Normalized after-images may hold datetimes and bytes, which neither JSON
output nor JSON database columns accept. `to_jsonable` renders them as:

- `datetime` / `date` → ISO-8601 string;
- `bytes` / `bytearray` → base64 string;
- `Decimal` → string (no precision loss);
- `Struct` and other objects exposing ``to_dict()`` → dict;
- mappings and sequences → converted recursively.
"""

import base64
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Any


def to_jsonable(value: Any) -> Any:
    """Return `value` with every nested item made JSON-serializable."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, date):  # includes datetime
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, Decimal):
        return str(value)
    if hasattr(value, "to_dict"):
        return to_jsonable(value.to_dict())
    if isinstance(value, Mapping):
        return {str(name): to_jsonable(item) for name, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(item) for item in value]
    return str(value)
