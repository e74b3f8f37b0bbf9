"""Unit tests for schema-described structures and their helpers."""

import pytest

from cdcroute.interfaces.connect import (
    Field,
    Schema,
    Struct,
    as_field_map,
    is_json_converter_message,
)

KEY_SCHEMA = Schema(
    type="struct",
    name="Key",
    fields=(
        Field("ORDER_ID", Schema(type="int32")),
        Field("LINE_NO", Schema(type="int16")),
    ),
)


class TestStruct:
    """Tests for Struct field access."""

    @staticmethod
    def test_get_and_put() -> None:
        """Declared fields can be set and read; unset ones read as None."""
        struct = Struct(KEY_SCHEMA).put("ORDER_ID", 7)
        assert struct.get("ORDER_ID") == 7
        assert struct.get("LINE_NO") is None

    @staticmethod
    def test_unknown_field() -> None:
        """Undeclared fields raise KeyError on read and write."""
        struct = Struct(KEY_SCHEMA)
        with pytest.raises(KeyError):
            struct.get("NOPE")
        with pytest.raises(KeyError):
            struct.put("NOPE", 1)

    @staticmethod
    def test_requires_struct_schema() -> None:
        """Only struct schemas can back a Struct."""
        with pytest.raises(ValueError):
            Struct(Schema(type="string"))

    @staticmethod
    def test_to_dict_follows_schema_order() -> None:
        """to_dict lists every declared field in schema order."""
        struct = Struct(KEY_SCHEMA, {"LINE_NO": 2, "ORDER_ID": 7})
        assert list(struct.to_dict().items()) == [("ORDER_ID", 7), ("LINE_NO", 2)]

    @staticmethod
    def test_equality() -> None:
        """Structs compare by schema and values."""
        assert Struct(KEY_SCHEMA, {"ORDER_ID": 7}) == Struct(KEY_SCHEMA, {"ORDER_ID": 7})
        assert Struct(KEY_SCHEMA, {"ORDER_ID": 7}) != Struct(KEY_SCHEMA, {"ORDER_ID": 8})


class TestJsonConverterForm:
    """Tests for reading the JSON converter wire form."""

    @staticmethod
    def test_schema_from_json_keeps_parameters() -> None:
        """Field parameters survive the conversion."""
        schema = Schema.from_json(
            {
                "type": "struct",
                "fields": [
                    {
                        "field": "NAME",
                        "type": "string",
                        "optional": True,
                        "parameters": {"__debezium.source.column.type": "VARCHAR2"},
                    }
                ],
            }
        )
        member = schema.get_field("NAME")
        assert member is not None
        assert member.schema.optional
        assert member.schema.parameters == {"__debezium.source.column.type": "VARCHAR2"}

    @staticmethod
    def test_struct_from_json_nests_structs() -> None:
        """Nested struct payloads become nested Structs."""
        struct = Struct.from_json(
            {
                "type": "struct",
                "fields": [
                    {
                        "field": "source",
                        "type": "struct",
                        "fields": [{"field": "table", "type": "string"}],
                    }
                ],
            },
            {"source": {"table": "ORDERS"}},
        )
        source = struct.get("source")
        assert isinstance(source, Struct)
        assert source.get("table") == "ORDERS"

    @staticmethod
    @pytest.mark.parametrize(
        "raw",
        [
            "struct",
            {"type": "struct", "fields": [{"type": "int32"}]},
            {"type": "struct", "fields": [{"field": 3, "type": "int32"}]},
            {"type": "struct", "fields": {"field": "ID"}},
        ],
    )
    def test_schema_from_json_rejects_bad_shapes(raw) -> None:
        """Non-objects, unnamed fields and non-list field sets are rejected."""
        with pytest.raises(ValueError):
            Schema.from_json(raw)

    @staticmethod
    def test_struct_from_json_requires_struct_schema() -> None:
        """A top-level schema other than a struct cannot back a Struct."""
        with pytest.raises(ValueError, match="struct schema"):
            Struct.from_json({"type": "string"}, {"op": "c"})

    @staticmethod
    def test_struct_from_json_rejects_non_object_struct_value() -> None:
        """A value declared as a nested struct must be an object."""
        schema = {
            "type": "struct",
            "fields": [
                {
                    "field": "after",
                    "type": "struct",
                    "fields": [{"field": "ID", "type": "int32"}],
                }
            ],
        }
        with pytest.raises(ValueError, match="must be an object"):
            Struct.from_json(schema, {"after": "ID"})
        assert Struct.from_json(schema, {"after": None}).get("after") is None

    @staticmethod
    @pytest.mark.parametrize(
        ("obj", "expected"),
        [
            ({"schema": {"type": "struct"}, "payload": {}}, True),
            ({"schema": {"type": "struct"}, "payload": {}, "extra": 1}, False),
            ({"schema": "struct", "payload": {}}, False),
            ({"op": "c"}, False),
            ("schema", False),
        ],
    )
    def test_is_json_converter_message(obj, expected: bool) -> None:
        """Only objects with exactly schema and payload qualify."""
        assert is_json_converter_message(obj) is expected


@pytest.mark.parametrize(
    ("obj", "expected"),
    [
        (None, None),
        ({"ID": 1}, {"ID": 1}),
        (Struct(KEY_SCHEMA, {"ORDER_ID": 7, "LINE_NO": 2}), {"ORDER_ID": 7, "LINE_NO": 2}),
        ({"schema": {"type": "struct"}, "payload": {"ID": 3}}, {"ID": 3}),
        (42, None),
        ("ID=1", None),
    ],
)
def test_as_field_map(obj, expected) -> None:
    """Every accepted representation flattens to a plain dict."""
    assert as_field_map(obj) == expected
