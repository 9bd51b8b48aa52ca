"""
Unit tests for the document codec.

Tests encoding into SON/list documents, symbol handling, error paths and
tagged decoding back to plain dicts and lists.
"""

import datetime
import enum

import pytest
from bson import ObjectId, Timestamp
from bson.son import SON

from mdb_facade.core.codec import is_symbol, symbol_to_str
from mdb_facade.exceptions import DocumentEncodingError, InvalidArgumentError


class Color(enum.Enum):
    RED = "red"


class Level(enum.Enum):
    LOW = 1


@pytest.mark.unit
class TestSymbols:
    def test_string_valued_member_uses_value(self):
        assert symbol_to_str(Color.RED) == "red"

    def test_non_string_member_uses_name(self):
        assert symbol_to_str(Level.LOW) == "LOW"

    def test_is_symbol(self):
        assert is_symbol(Color.RED)
        assert not is_symbol("red")


@pytest.mark.unit
class TestEncode:
    def test_encode_map_builds_son_in_order(self, codec):
        native = codec.encode({"b": 1, "a": 2})
        assert isinstance(native, SON)
        assert list(native.keys()) == ["b", "a"]

    def test_encode_nested(self, codec):
        native = codec.encode({"user": {"tags": ["x", ("y", 2)]}})
        assert isinstance(native["user"], SON)
        assert native["user"]["tags"] == ["x", ["y", 2]]
        assert isinstance(native["user"]["tags"][1], list)

    def test_encode_scalars_pass_through(self, codec):
        oid = ObjectId()
        when = datetime.datetime(2024, 1, 1)
        native = codec.encode({"id": oid, "when": when, "flag": True, "none": None})
        assert native["id"] is oid
        assert native["when"] == when
        assert native["flag"] is True
        assert native["none"] is None

    def test_encode_symbols(self, codec):
        native = codec.encode({Color.RED: Level.LOW})
        assert native == {"red": "LOW"}

    def test_encode_does_not_mutate_input(self, codec):
        document = {"a": [1, 2], "b": {"c": 3}}
        codec.encode(document)
        assert document == {"a": [1, 2], "b": {"c": 3}}

    def test_unsupported_value_reports_path(self, codec):
        with pytest.raises(DocumentEncodingError) as exc_info:
            codec.encode({"a": {"b": object()}})
        assert exc_info.value.path == "a.b"
        assert exc_info.value.value_type == "object"

    def test_unsupported_value_in_list_reports_index(self, codec):
        with pytest.raises(DocumentEncodingError) as exc_info:
            codec.encode({"tags": ["ok", {1, 2}]})
        assert exc_info.value.path == "tags.1"

    def test_non_string_key_rejected(self, codec):
        with pytest.raises(DocumentEncodingError) as exc_info:
            codec.encode({1: "one"})
        assert isinstance(exc_info.value, InvalidArgumentError)
        assert isinstance(exc_info.value, TypeError)


@pytest.mark.unit
class TestDecode:
    def test_decode_son_to_plain_dict(self, codec):
        native = SON([("a", SON([("b", [SON([("c", 1)])])]))])
        decoded = codec.decode(native)
        assert decoded == {"a": {"b": [{"c": 1}]}}
        assert type(decoded) is dict
        assert type(decoded["a"]["b"][0]) is dict

    def test_decode_scalar(self, codec):
        assert codec.decode(5) == 5
        assert codec.decode(None) is None

    def test_encode_decode_keeps_key_order(self, codec):
        document = {"z": 1, "a": 2, "m": 3}
        assert list(codec.decode(codec.encode(document))) == ["z", "a", "m"]

    @pytest.mark.parametrize(
        "document",
        [
            {"value": 2.5},
            {"value": b"\x00\xffraw"},
            {"value": ObjectId("5f2b8c1e9d3e4a1b2c3d4e5f")},
            {"value": Timestamp(1, 1)},
            {"value": datetime.datetime(2024, 5, 1, 12, 30)},
            {"value": None},
            {"yes": True, "no": False},
            {},
            {"empty": {}, "items": []},
        ],
    )
    def test_round_trip(self, codec, document):
        assert codec.decode(codec.encode(document)) == document

    def test_round_trip_nested_keeps_order_at_every_level(self, codec):
        document = {
            "z": [{"y": 1, "b": 2}, {"x": [], "a": {}}],
            "a": {"q": 1, "c": 2},
        }
        decoded = codec.decode(codec.encode(document))

        assert decoded == document
        assert list(decoded) == ["z", "a"]
        assert list(decoded["z"][0]) == ["y", "b"]
        assert list(decoded["z"][1]) == ["x", "a"]
        assert list(decoded["a"]) == ["q", "c"]
