"""
Unit tests for Cursor.
"""

import pytest
from bson.son import SON

from mdb_facade.core.query_options import NormalizedQuery
from mdb_facade.database.cursor import Cursor


@pytest.fixture
def make_cursor(codec, native_cursor_factory):
    def make(documents):
        native = native_cursor_factory(documents)
        return Cursor(native, codec, NormalizedQuery(selector={}), "users"), native

    return make


@pytest.mark.unit
class TestCursor:
    def test_iteration_decodes_documents(self, make_cursor):
        cursor, _ = make_cursor([SON([("a", 1)]), SON([("b", [SON([("c", 2)])])])])
        documents = list(cursor)
        assert documents == [{"a": 1}, {"b": [{"c": 2}]}]
        assert type(documents[0]) is dict

    def test_next_document_returns_none_when_exhausted(self, make_cursor):
        cursor, _ = make_cursor([SON([("a", 1)])])
        assert cursor.next_document() == {"a": 1}
        assert cursor.next_document() is None

    def test_to_list_with_length(self, make_cursor):
        cursor, _ = make_cursor([SON([("i", i)]) for i in range(5)])
        assert cursor.to_list(2) == [{"i": 0}, {"i": 1}]
        assert cursor.to_list() == [{"i": 2}, {"i": 3}, {"i": 4}]

    def test_close_is_idempotent(self, make_cursor):
        cursor, native = make_cursor([])
        cursor.close()
        cursor.close()
        assert cursor.closed
        assert native.close_calls == 1

    def test_closed_cursor_stops_iterating(self, make_cursor):
        cursor, _ = make_cursor([SON([("a", 1)])])
        cursor.close()
        assert list(cursor) == []

    def test_context_manager_closes(self, make_cursor):
        cursor, native = make_cursor([SON([("a", 1)])])
        with cursor as c:
            assert c is cursor
        assert native.close_calls == 1

    def test_query_and_repr(self, make_cursor):
        cursor, _ = make_cursor([])
        assert cursor.query.selector == {}
        assert repr(cursor) == "<Cursor 'users' open>"
