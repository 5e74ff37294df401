"""Tests for value cleaning and form-payload parsing."""

import logging
from datetime import date
from types import MappingProxyType

import pytest

from schemakit import Boolean, Number, Object, Schema, String
from schemakit.cleaning import clean_value, parse_value
from schemakit.types import ArrayOf, Instance, Kind, Primitive


class TestCleanValue:
    """Test cleaning of individual values."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("  abc  ", "abc"),
            ("\tabc\n", "abc"),
            ("   ", None),
            ("", None),
            (None, None),
            (0, 0),
            (False, False),
        ],
    )
    def test_scalars(self, value, expected):
        """Test trimming and blank-to-None conversion."""
        assert clean_value(value) == expected

    def test_list_is_cleaned_in_place(self):
        """Test that list elements are cleaned in place."""
        items = [" a ", "", 3, [" b "]]
        assert clean_value(items) is items
        assert items == ["a", None, 3, ["b"]]

    def test_tuple_is_rebuilt(self):
        """Test that tuples are returned as new tuples."""
        assert clean_value((" a ", " ")) == ("a", None)

    def test_mapping_is_cleaned_recursively(self):
        """Test that nested mappings are cleaned in place."""
        obj = {"a": " x ", "b": {"c": [" y ", "  "]}}
        clean_value(obj)
        assert obj == {"a": "x", "b": {"c": ["y", None]}}

    def test_custom_clean_function(self):
        """Test that a custom function replaces trimming."""
        assert clean_value(" Ab ", str.lower) == " ab "
        assert clean_value(["A", "B"], str.lower) == ["a", "b"]

    def test_custom_clean_returning_blank(self):
        """Test that a blank result of a custom function becomes None."""
        assert clean_value("---", lambda s: s.strip("-")) is None

    def test_idempotent(self):
        """Test that cleaning twice gives the same result as cleaning once."""
        obj = {"a": "  x ", "b": ["  ", " y"], "c": {"d": " z "}}
        once = clean_value(obj)
        snapshot = {"a": once["a"], "b": list(once["b"]), "c": dict(once["c"])}
        assert clean_value(obj) == snapshot


class TestSchemaClean:
    """Test cleaning of objects through a schema."""

    def test_clean_declared_fields(self):
        """Test that declared string fields are trimmed."""
        schema = Schema({"name": {"type": String}, "nick": {"type": String, "required": False}})
        obj = {"name": "  Alice ", "nick": "   "}
        assert schema.clean(obj) is obj
        assert obj == {"name": "Alice", "nick": None}

    def test_clean_nested_values(self):
        """Test that lists and mappings in fields are cleaned recursively."""
        schema = Schema({"tags": {"type": [String]}, "meta": {"type": Object}})
        obj = {"tags": [" a ", "b "], "meta": {"k": " v "}}
        schema.clean(obj)
        assert obj == {"tags": ["a", "b"], "meta": {"k": "v"}}

    def test_field_clean_function(self):
        """Test that a field's clean function is used for its strings."""
        schema = Schema({"code": {"type": String, "clean": lambda s: s.strip().upper()}})
        obj = {"code": " ab "}
        schema.validate(obj)
        assert obj == {"code": "AB"}

    def test_non_strings_are_untouched(self):
        """Test that non-string values are kept as is."""
        schema = Schema({"n": {"type": Number}})
        obj = {"n": 0}
        schema.clean(obj)
        assert obj == {"n": 0}

    def test_remove_unknown_by_default(self):
        """Test that undeclared keys are deleted."""
        schema = Schema({"a": {"type": String}})
        obj = {"a": "x", "b": " y "}
        schema.clean(obj)
        assert obj == {"a": "x"}

    def test_keep_unknown(self):
        """Test that remove_unknown=False keeps undeclared keys untouched."""
        schema = Schema({"a": {"type": String}})
        obj = {"a": " x ", "b": " y "}
        schema.clean(obj, remove_unknown=False)
        assert obj == {"a": "x", "b": " y "}

    def test_keep_unknown_camel_case(self):
        """Test the camelCase form of the option."""
        schema = Schema({"a": {"type": String}})
        obj = {"a": "x", "b": 1}
        schema.clean(obj, {"removeUnknown": False})
        assert obj == {"a": "x", "b": 1}

    def test_removal_is_logged(self, caplog):
        """Test that removed keys are logged at debug level."""
        schema = Schema({"a": {"type": String}})
        with caplog.at_level(logging.DEBUG, logger="schemakit.schema"):
            schema.clean({"a": "x", "b": 1})
        assert 'Removing unknown field "b"' in caplog.text

    def test_read_only_mapping(self):
        """Test that read-only mappings are returned unchanged."""
        schema = Schema({"a": {"type": String}})
        obj = MappingProxyType({"a": " x ", "b": 1})
        assert schema.clean(obj) is obj
        assert dict(obj) == {"a": " x ", "b": 1}

    def test_validate_read_only_mapping(self):
        """Test that read-only mappings can still be validated."""
        schema = Schema({"a": {"type": String, "length": 1}})
        schema.validate(MappingProxyType({"a": "x"}))


class TestParseValue:
    """Test conversion of form-payload strings."""

    @pytest.mark.parametrize(
        "value,expected",
        [("1", True), ("true", True), ("True", True), ("0", False), ("yes", False), (False, False)],
    )
    def test_boolean(self, value, expected):
        assert parse_value(value, Primitive(Kind.BOOLEAN)) is expected

    @pytest.mark.parametrize(
        "value,expected", [("42", 42), ("-3", -3), ("1.5", 1.5), ("1e3", 1000.0), (7, 7)]
    )
    def test_number(self, value, expected):
        assert parse_value(value, Primitive(Kind.NUMBER)) == expected

    def test_unparseable_number_is_kept(self):
        """Test that strings which are not numbers are left unchanged."""
        assert parse_value("abc", Primitive(Kind.NUMBER)) == "abc"

    def test_string_is_kept(self):
        assert parse_value("42", Primitive(Kind.STRING)) == "42"

    def test_custom_parse_function(self):
        """Test that a field-level function replaces the built-in conversion."""
        assert parse_value("2024-02-29", Instance(date), date.fromisoformat) == date(2024, 2, 29)
        assert parse_value("yes", Primitive(Kind.BOOLEAN), lambda s: s == "yes") is True

    def test_list_elements(self):
        """Test that list elements are parsed in place with the element type."""
        values = ["1", "2.5", 3]
        assert parse_value(values, ArrayOf(Primitive(Kind.NUMBER))) is values
        assert values == [1, 2.5, 3]
        assert parse_value(("1",), ArrayOf(Primitive(Kind.BOOLEAN))) == (True,)


class TestSchemaParse:
    """Test parsing of objects through a schema."""

    def test_parse_declared_fields(self):
        """Test that declared fields are converted in place."""
        schema = Schema(
            {
                "age": {"type": Number},
                "active": {"type": Boolean},
                "born": {"type": date, "parse": date.fromisoformat},
                "name": {"type": String},
            }
        )
        obj = {"age": "30", "active": "1", "born": "1994-05-01", "name": "7", "extra": "1"}
        assert schema.parse(obj) is obj
        assert obj == {
            "age": 30,
            "active": True,
            "born": date(1994, 5, 1),
            "name": "7",
            "extra": "1",
        }

    def test_parse_nested_objects(self):
        """Test that nested objects and list elements use their own schema."""
        child = Schema({"qty": {"type": Number}})
        schema = Schema({"main": {"type": child}, "lines": {"type": [child]}})
        obj = {"main": {"qty": "2"}, "lines": [{"qty": "3"}, {"qty": "4"}]}
        schema.parse(obj)
        assert obj == {"main": {"qty": 2}, "lines": [{"qty": 3}, {"qty": 4}]}

    def test_parse_read_only_mapping(self):
        """Test that read-only mappings are returned unchanged."""
        schema = Schema({"age": {"type": Number}})
        obj = MappingProxyType({"age": "30"})
        assert schema.parse(obj) is obj
