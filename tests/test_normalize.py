"""Tests for converting decoded values into Python values."""

import pytest

from mup.normalize import normalize, normalize_key
from mup.sexp import NIL, T, Cons, Symbol, parse


class TestScalars:
    """Tests for scalar and symbol conversion."""

    def test_nil_is_none(self):
        assert normalize(NIL) is None

    def test_t_is_true(self):
        assert normalize(T) is True

    def test_other_symbols_become_names(self):
        assert normalize(Symbol("seen")) == "seen"

    @pytest.mark.parametrize(
        "value", ["text", 0, 42, -1.5, True, None, NIL, T, Symbol("flag")]
    )
    def test_idempotent(self, value):
        once = normalize(value)
        assert normalize(once) == once


class TestPropertyLists:
    """Tests for keyword/value list folding."""

    def test_fold(self):
        decoded = (Symbol(":a"), 1, Symbol(":b"), 2)
        assert normalize(decoded) == {"a": 1, "b": 2}

    def test_nested_values_are_normalized(self):
        decoded = parse('(:docid 7 :thread nil :personal t :meta (:level 2))')
        assert normalize(decoded) == {
            "docid": 7,
            "thread": None,
            "personal": True,
            "meta": {"level": 2},
        }

    def test_odd_length_stays_a_list(self):
        decoded = (Symbol(":a"), 1, Symbol(":b"))
        assert normalize(decoded) == [":a", 1, ":b"]

    def test_plain_list(self):
        assert normalize(parse("(seen replied)")) == ["seen", "replied"]
        assert normalize(parse("(21000 1234 0)")) == [21000, 1234, 0]

    def test_empty_list(self):
        assert normalize(()) == []


class TestAssociationLists:
    """Tests for dotted-pair list folding."""

    def test_fold(self):
        decoded = parse('(("Alice" . "alice@example.com") ("Bob" . "bob@example.com"))')
        assert normalize(decoded) == {
            "Alice": "alice@example.com",
            "Bob": "bob@example.com",
        }

    def test_keyword_keys_are_stripped(self):
        decoded = (Cons(Symbol(":name"), "Alice"), Cons(Symbol(":email"), NIL))
        assert normalize(decoded) == {"name": "Alice", "email": None}

    def test_standalone_pair(self):
        assert normalize(Cons("a", 1)) == ["a", 1]


class TestMappings:
    def test_mapping_input(self):
        value = {Symbol(":subject"): "hi", ":flags": (Symbol("seen"),), "n": T}
        assert normalize(value) == {"subject": "hi", "flags": ["seen"], "n": True}

    def test_normalize_key(self):
        assert normalize_key(Symbol(":docid")) == "docid"
        assert normalize_key(":path") == "path"
        assert normalize_key("plain") == "plain"
        assert normalize_key(":") == ":"
        assert normalize_key(3) == "3"
