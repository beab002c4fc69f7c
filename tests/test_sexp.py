"""Tests for the s-expression decoder."""

import pytest

from mup.errors import SExpressionError
from mup.sexp import NIL, T, Cons, Symbol, parse, parse_all


class TestAtoms:
    """Tests for scalar tokens."""

    def test_integer(self):
        assert parse("42") == 42
        assert parse("-7") == -7

    def test_float(self):
        assert parse("1.5") == 1.5
        assert parse("-.25") == -0.25
        assert parse("1e3") == 1000.0

    def test_symbols(self):
        assert parse("nil") == NIL
        assert parse("t") == T
        assert parse(":docid") == Symbol(":docid")
        assert parse("+") == Symbol("+")

    def test_keyword_detection(self):
        assert Symbol(":subject").is_keyword
        assert not Symbol("subject").is_keyword
        assert not Symbol(":").is_keyword

    def test_string_escapes(self):
        assert parse(r'"say \"hi\" \\ there"') == 'say "hi" \\ there'
        assert parse(r'"a\nb\tc"') == "a\nb\tc"

    def test_string_keeps_literal_newlines(self):
        assert parse('"line one\nline two"') == "line one\nline two"

    def test_string_with_parens_and_semicolons(self):
        assert parse('"(not a list); really"') == "(not a list); really"

    def test_unicode(self):
        assert parse('"héllo wörld ✓"') == "héllo wörld ✓"


class TestLists:
    """Tests for list and dotted-pair syntax."""

    def test_empty_list(self):
        assert parse("()") == ()

    def test_nested(self):
        assert parse('(:a 1 :b (2 "x" (nil)))') == (
            Symbol(":a"),
            1,
            Symbol(":b"),
            (2, "x", (NIL,)),
        )

    def test_dotted_pair(self):
        assert parse('("Alice" . "alice@example.com")') == Cons(
            "Alice", "alice@example.com"
        )

    def test_improper_list(self):
        assert parse("(1 2 . 3)") == Cons(1, Cons(2, 3))

    def test_dot_prefixed_number_is_not_a_pair(self):
        assert parse("(1 .5)") == (1, 0.5)

    def test_comments_and_whitespace(self):
        assert parse("  ; leading comment\n(1 ; inline\n 2)\n") == (1, 2)

    def test_lists_are_immutable(self):
        assert isinstance(parse("(1 2)"), tuple)


class TestErrors:
    """Tests for malformed input."""

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "(1 2", '"unterminated', ")", "(. 1)", "(1 . 2 3)", "1 2"],
    )
    def test_malformed(self, text):
        with pytest.raises(SExpressionError):
            parse(text)

    def test_error_reports_position(self):
        with pytest.raises(SExpressionError) as exc_info:
            parse("(1 2")
        assert exc_info.value.position == 0


class TestParseAll:
    def test_multiple_values(self):
        assert parse_all("(:a 1) (:b 2) t") == [
            (Symbol(":a"), 1),
            (Symbol(":b"), 2),
            T,
        ]

    def test_empty(self):
        assert parse_all("  ") == []
