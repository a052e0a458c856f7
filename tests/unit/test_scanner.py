#!/usr/bin/env python3
"""
Tests for the scanner: command mode, expression mode and quoted-string
splitting.
"""

import pytest
from tclish.frontend.scanner import Scanner, split_words, is_complete
from tclish.frontend.words import WordType


def _words(text: str, keep_blanks: bool = False):
    return [(w.type, w.literal) for w in Scanner(text, keep_blanks=keep_blanks)]


def _tokens(text: str):
    scanner = Scanner(text)
    tokens = []
    while True:
        word = scanner.tokenize()
        if word.type is WordType.EOF:
            return tokens
        tokens.append((word.type, word.literal))


class TestCommandMode:
    """Word recognition in command mode"""

    def test_literal_words(self):
        assert _words("set x 1") == [
            (WordType.LITERAL, "set"),
            (WordType.LITERAL, "x"),
            (WordType.LITERAL, "1"),
        ]

    def test_blanks_reported_by_default(self):
        types = [w.type for w in Scanner("a  b")]
        assert types == [WordType.LITERAL, WordType.BLANK, WordType.LITERAL]

    def test_nested_block_kept_raw(self):
        assert _words("{a {b c} $d}") == [(WordType.BLOCK, "a {b c} $d")]

    def test_script_with_inner_block(self):
        assert _words("[expr {1 + 2}]") == [(WordType.SCRIPT, "expr {1 + 2}")]

    def test_quote(self):
        assert _words('"hello $name"') == [(WordType.QUOTE, "hello $name")]

    @pytest.mark.parametrize("text,name", [
        ("$a", "a"),
        ("${a b}", "a b"),
        ("$arr(k)", "arr(k)"),
        ("$ns::v", "ns::v"),
    ])
    def test_variable_forms(self, text, name):
        assert _words(text) == [(WordType.VARIABLE, name)]

    def test_lone_dollar_is_literal(self):
        assert _words("$ x") == [(WordType.LITERAL, "$"), (WordType.LITERAL, "x")]

    def test_adjacent_words_of_one_argument(self):
        types = [t for t, _ in _words("a$x.b", keep_blanks=True)]
        assert types == [WordType.LITERAL, WordType.VARIABLE, WordType.LITERAL]

    def test_escapes(self):
        assert _words(r"a\tb") == [(WordType.LITERAL, "a\tb")]
        assert _words(r"a\qb") == [(WordType.LITERAL, "a\\qb")]
        assert _words(r"a\ b") == [(WordType.LITERAL, "a b")]

    def test_eol_swallows_separators(self):
        assert [t for t, _ in _words("a;; \n b")] == [
            WordType.LITERAL, WordType.EOL, WordType.LITERAL,
        ]

    def test_crlf_normalised(self):
        assert [t for t, _ in _words("a\r\nb")] == [
            WordType.LITERAL, WordType.EOL, WordType.LITERAL,
        ]

    def test_line_continuation_separates_words(self):
        assert _words("a \\\n  b") == [(WordType.LITERAL, "a"), (WordType.LITERAL, "b")]

    def test_comment_only_at_command_start(self):
        words = _words("# note\nset x #y")
        assert words[0] == (WordType.COMMENT, "note")
        assert words[-1] == (WordType.LITERAL, "#y")

    def test_comments_disabled(self):
        words = [(w.type, w.literal) for w in Scanner("#x", comments=False)]
        assert words == [(WordType.LITERAL, "#x")]

    def test_locations(self):
        words = list(Scanner("set x\nputs y", "main.tcl", keep_blanks=False))
        puts = words[3]
        assert puts.literal == "puts"
        assert (puts.location.file, puts.location.line, puts.location.column) == ("main.tcl", 2, 1)


class TestIllegalWords:
    """Unterminated constructs"""

    @pytest.mark.parametrize("text", ['"abc', "{abc", "[abc", "{a {b}", "${abc"])
    def test_unterminated_is_incomplete(self, text):
        words = list(Scanner(text))
        assert words[-1].type is WordType.ILLEGAL
        assert words[-1].incomplete

    @pytest.mark.parametrize("text,expected", [
        ("set x {", False),
        ("set x {a}", True),
        ('puts "a', False),
        ("proc f {} {\n", False),
        ("puts [list a b]", True),
        ("", True),
    ])
    def test_is_complete(self, text, expected):
        assert is_complete(text) is expected


class TestExpressionMode:
    """Tokenizing expressions"""

    def test_numbers_and_operators(self):
        assert [t for t, _ in _tokens("1+2.5*0x10 ** $x")] == [
            WordType.INT, WordType.ADD, WordType.FLOAT, WordType.MUL,
            WordType.INT, WordType.POW, WordType.VARIABLE,
        ]

    def test_maximal_munch(self):
        assert [t for t, _ in _tokens("1<=2<<3")] == [
            WordType.INT, WordType.LE, WordType.INT, WordType.LSHIFT, WordType.INT,
        ]

    def test_float_exponent(self):
        assert _tokens("2.5e-3") == [(WordType.FLOAT, "2.5e-3")]

    def test_identifiers_and_groups(self):
        assert [t for t, _ in _tokens("!(true || off)")] == [
            WordType.NOT, WordType.LPAREN, WordType.IDENT, WordType.OR,
            WordType.IDENT, WordType.RPAREN,
        ]

    def test_malformed_number(self):
        assert _tokens("12abc") == [(WordType.ILLEGAL, "12abc")]

    def test_newlines_skipped(self):
        assert [t for t, _ in _tokens("1 +\n 2")] == [WordType.INT, WordType.ADD, WordType.INT]

    def test_ternary(self):
        assert [t for t, _ in _tokens("1 ? 2 : 3")] == [
            WordType.INT, WordType.TERNARY, WordType.INT, WordType.ALT, WordType.INT,
        ]


class TestSplitMode:
    """Sub-scanning of quoted strings"""

    def test_interleaves_substitutions(self):
        assert [(w.type, w.literal) for w in split_words("a $b [c] d")] == [
            (WordType.LITERAL, "a "),
            (WordType.VARIABLE, "b"),
            (WordType.LITERAL, " "),
            (WordType.SCRIPT, "c"),
            (WordType.LITERAL, " d"),
        ]

    def test_empty(self):
        assert split_words("") == []
