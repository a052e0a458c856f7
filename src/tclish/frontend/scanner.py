"""
Scanner for tclish scripts.

Converts script text into a lazy stream of words. Three lexing modes share
one character-reading core and differ in what ends a literal run:

- ``scan``: command mode. Blanks, ``;`` and newlines separate words;
  ``{...}``, ``[...]``, ``"..."`` and ``$name`` are recognised, and ``#``
  opens a comment only where a command may start.
- ``tokenize``: expression mode. Blanks and newlines are skipped; numbers,
  identifiers, parentheses and the operator set are recognised with
  maximal munch.
- ``split``: used on the body of a quoted word to interleave literal runs
  with variable and script substitutions.

Brace blocks and bracketed scripts are matched by counting nested
delimiters of the same kind; their raw text is kept for later evaluation.
An unterminated quote, brace or bracket yields an ``ILLEGAL`` word.
"""

from typing import Callable, Iterator, List, Tuple

from .words import Word, WordType
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_SCRIPT_NAME


_NUL = "\0"
_BLANKS = " \t"
_EOL_CHARS = ";\n"

# Backslash sequences replaced inside literal text; others pass through
_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "$": "$",
    " ": " ",
    "\\": "\\",
    '"': '"',
}

_OPERATORS_2 = {
    "**": WordType.POW,
    "==": WordType.EQ,
    "!=": WordType.NE,
    "&&": WordType.AND,
    "||": WordType.OR,
    "<=": WordType.LE,
    "<<": WordType.LSHIFT,
    ">=": WordType.GE,
    ">>": WordType.RSHIFT,
    "::": WordType.NAMESPACE,
}

_OPERATORS_1 = {
    "+": WordType.ADD,
    "-": WordType.SUB,
    "*": WordType.MUL,
    "/": WordType.DIV,
    "%": WordType.MOD,
    "!": WordType.NOT,
    "&": WordType.BAND,
    "|": WordType.BOR,
    "^": WordType.BXOR,
    "~": WordType.BNOT,
    "<": WordType.LT,
    ">": WordType.GT,
    "?": WordType.TERNARY,
    ":": WordType.ALT,
    "=": WordType.LITERAL,
}

_BASE_DIGITS = {
    "x": "0123456789abcdefABCDEF",
    "o": "01234567",
    "b": "01",
}


def _is_command_delimiter(ch: str) -> bool:
    return ch in _BLANKS or ch in _EOL_CHARS or ch in '"$['


def _is_quoted_delimiter(ch: str) -> bool:
    return ch in "$["


def _is_expression_delimiter(ch: str) -> bool:
    return not (ch.isalnum() or ch == "_")


class Scanner:
    """
    Character-level word scanner.

    Usage:
        scanner = Scanner("set x 1; puts $x")
        for word in scanner:        # command-mode words, EOF excluded
            ...

    Or pull words one at a time with ``scan()``, ``tokenize()`` or
    ``split()``; each returns an ``EOF`` word once input is exhausted.
    """

    def __init__(
        self,
        source: str,
        filename: str = DEFAULT_SCRIPT_NAME,
        keep_blanks: bool = True,
        comments: bool = True,
    ):
        self.source = source.replace("\r\n", "\n")
        self.filename = filename
        self.keep_blanks = keep_blanks  # False: blanks are skipped, not reported
        self.comments = comments        # False: '#' is always literal text
        self.pos = 0
        self.line = 1
        self.column = 1
        self._command_start = True

    def __iter__(self) -> Iterator[Word]:
        while True:
            word = self.scan()
            if word.type is WordType.EOF:
                return
            yield word

    # ------------------------------------------------------------------
    # Character core
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx >= len(self.source):
            return _NUL
        return self.source[idx]

    def _advance(self) -> str:
        if self.pos >= len(self.source):
            return _NUL
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column)

    def _word(
        self,
        type: WordType,
        literal: str,
        start: SourceLocation,
        incomplete: bool = False,
    ) -> Word:
        span = SourceLocation(
            start.file, start.line, start.column, self.line, self.column
        )
        return Word(type, literal, span, incomplete)

    def _read_while(self, accept: Callable[[str], bool]) -> str:
        begin = self.pos
        while not self._is_at_end() and accept(self._peek()):
            self._advance()
        return self.source[begin:self.pos]

    def _read_name(self) -> str:
        """Variable name: letters, digits, underscores and `::` separators."""
        begin = self.pos
        while not self._is_at_end():
            ch = self._peek()
            if ch.isalnum() or ch == "_":
                self._advance()
            elif ch == ":" and self._peek(1) == ":":
                self._advance()
                self._advance()
            else:
                break
        return self.source[begin:self.pos]

    def _at_line_continuation(self) -> bool:
        return self._peek() == "\\" and self._peek(1) == "\n"

    def _skip_blanks(self, newlines: bool = False) -> None:
        while not self._is_at_end():
            ch = self._peek()
            if self._at_line_continuation():
                self._advance()
                self._advance()
            elif ch in _BLANKS or (newlines and ch in "\n\r"):
                self._advance()
            else:
                break

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------

    def scan(self) -> Word:
        """Next word in command mode."""
        start = self._location()
        if self._is_at_end():
            return self._word(WordType.EOF, "", start)
        ch = self._peek()
        if ch in _BLANKS or self._at_line_continuation():
            self._skip_blanks()
            if self.keep_blanks:
                return self._word(WordType.BLANK, "", start)
            return self.scan()
        if ch in _EOL_CHARS:
            return self._scan_eol(start)
        if ch == "#" and self._command_start and self.comments:
            return self._scan_comment(start)

        self._command_start = False
        if ch == "[":
            return self._scan_nested(start, WordType.SCRIPT, "[", "]")
        if ch == "{":
            return self._scan_nested(start, WordType.BLOCK, "{", "}")
        if ch == '"':
            return self._scan_quote(start)
        if ch == "$":
            return self._scan_variable(start, _is_command_delimiter)
        return self._scan_literal(start, _is_command_delimiter)

    def split(self) -> Word:
        """Next word of a quoted string body."""
        start = self._location()
        if self._is_at_end():
            return self._word(WordType.EOF, "", start)
        ch = self._peek()
        if ch == "$":
            return self._scan_variable(start, _is_quoted_delimiter)
        if ch == "[":
            return self._scan_nested(start, WordType.SCRIPT, "[", "]")
        return self._scan_literal(start, _is_quoted_delimiter)

    def tokenize(self) -> Word:
        """Next word in expression mode."""
        self._skip_blanks(newlines=True)
        start = self._location()
        if self._is_at_end():
            return self._word(WordType.EOF, "", start)
        ch = self._peek()
        if ch == "$":
            return self._scan_variable(start, _is_expression_delimiter)
        if ch.isdigit() or (ch == "." and self._peek(1).isdigit()):
            return self._scan_number(start)
        if ch.isalpha() or ch == "_":
            name = self._read_while(lambda c: c.isalnum() or c == "_")
            return self._word(WordType.IDENT, name, start)
        if ch == "[":
            return self._scan_nested(start, WordType.SCRIPT, "[", "]")
        if ch == "{":
            return self._scan_nested(start, WordType.BLOCK, "{", "}")
        if ch == '"':
            return self._scan_quote(start)
        if ch == "(":
            self._advance()
            return self._word(WordType.LPAREN, "(", start)
        if ch == ")":
            self._advance()
            return self._word(WordType.RPAREN, ")", start)
        return self._scan_operator(start)

    # ------------------------------------------------------------------
    # Word readers
    # ------------------------------------------------------------------

    def _scan_eol(self, start: SourceLocation) -> Word:
        self._advance()
        while not self._is_at_end() and self._peek() in " \t\n;":
            self._advance()
        self._command_start = True
        return self._word(WordType.EOL, "", start)

    def _scan_comment(self, start: SourceLocation) -> Word:
        self._advance()
        text = self._read_while(lambda c: c != "\n")
        return self._word(WordType.COMMENT, text.strip(), start)

    def _scan_until(self, opening: str, closing: str) -> Tuple[str, bool]:
        """
        Read raw text up to the delimiter matching an already consumed
        ``opening``. Returns the inner text and whether it was terminated.

        A backslash protects the next character from delimiter counting;
        inside brackets, brace blocks are skipped as a unit.
        """
        parts: List[str] = []
        depth = 1
        while not self._is_at_end():
            ch = self._advance()
            if ch == "\\" and not self._is_at_end():
                parts.append(ch)
                parts.append(self._advance())
                continue
            if ch == closing:
                depth -= 1
                if depth == 0:
                    return "".join(parts), True
            elif ch == opening:
                depth += 1
            elif ch == "{" and opening == "[":
                inner, terminated = self._scan_until("{", "}")
                parts.append("{" + inner)
                if not terminated:
                    return "".join(parts), False
                parts.append("}")
                continue
            parts.append(ch)
        return "".join(parts), False

    def _scan_nested(
        self,
        start: SourceLocation,
        type: WordType,
        opening: str,
        closing: str,
    ) -> Word:
        self._advance()
        text, terminated = self._scan_until(opening, closing)
        if not terminated:
            return self._word(WordType.ILLEGAL, opening + text, start, incomplete=True)
        return self._word(type, text, start)

    def _scan_quote(self, start: SourceLocation) -> Word:
        self._advance()
        parts: List[str] = []
        while not self._is_at_end():
            ch = self._advance()
            if ch == '"':
                return self._word(WordType.QUOTE, "".join(parts), start)
            if ch == "\\" and not self._is_at_end():
                parts.append(ch)
                parts.append(self._advance())
                continue
            if ch == "[":
                inner, terminated = self._scan_until("[", "]")
                parts.append("[" + inner)
                if not terminated:
                    break
                parts.append("]")
                continue
            parts.append(ch)
        return self._word(WordType.ILLEGAL, '"' + "".join(parts), start, incomplete=True)

    def _scan_variable(
        self,
        start: SourceLocation,
        is_delimiter: Callable[[str], bool],
    ) -> Word:
        self._advance()
        if self._peek() == "{":
            self._advance()
            name = self._read_while(lambda c: c != "}")
            if self._is_at_end():
                return self._word(WordType.ILLEGAL, "${" + name, start, incomplete=True)
            self._advance()
            return self._word(WordType.VARIABLE, name, start)

        name = self._read_name()
        if not name:
            # a lone dollar is plain text
            return self._scan_literal(start, is_delimiter, prefix="$")
        if self._peek() == "(":
            self._advance()
            key, terminated = self._scan_until("(", ")")
            if not terminated:
                return self._word(
                    WordType.ILLEGAL, f"${name}({key}", start, incomplete=True
                )
            name = f"{name}({key})"
        return self._word(WordType.VARIABLE, name, start)

    def _scan_literal(
        self,
        start: SourceLocation,
        is_delimiter: Callable[[str], bool],
        prefix: str = "",
    ) -> Word:
        parts = [prefix]
        while not self._is_at_end():
            ch = self._peek()
            if ch == "\\":
                if self._at_line_continuation():
                    break
                self._advance()
                if self._is_at_end():
                    parts.append("\\")
                    break
                nxt = self._advance()
                if nxt in _ESCAPES:
                    parts.append(_ESCAPES[nxt])
                else:
                    parts.append("\\" + nxt)
                continue
            if is_delimiter(ch):
                break
            parts.append(self._advance())
        return self._word(WordType.LITERAL, "".join(parts), start)

    def _scan_number(self, start: SourceLocation) -> Word:
        begin = self.pos
        prefix = self._peek(1).lower()
        if self._peek() == "0" and prefix in _BASE_DIGITS:
            self._advance()
            self._advance()
            allowed = _BASE_DIGITS[prefix]
            if not self._read_while(lambda c: c in allowed):
                return self._malformed_number(start, begin)
            return self._finish_number(start, WordType.INT, begin)

        type = WordType.INT
        self._read_while(str.isdigit)
        if self._peek() == ".":
            type = WordType.FLOAT
            self._advance()
            self._read_while(str.isdigit)
        if self._peek() in "eE":
            sign = self._peek(1)
            if sign.isdigit() or (sign in "+-" and self._peek(2).isdigit()):
                type = WordType.FLOAT
                self._advance()
                if sign in "+-":
                    self._advance()
                self._read_while(str.isdigit)
        return self._finish_number(start, type, begin)

    def _finish_number(self, start: SourceLocation, type: WordType, begin: int) -> Word:
        nxt = self._peek()
        if nxt.isalnum() or nxt in "_.":
            return self._malformed_number(start, begin)
        return self._word(type, self.source[begin:self.pos], start)

    def _malformed_number(self, start: SourceLocation, begin: int) -> Word:
        self._read_while(lambda c: c.isalnum() or c in "_.")
        return self._word(WordType.ILLEGAL, self.source[begin:self.pos], start)

    def _scan_operator(self, start: SourceLocation) -> Word:
        pair = self._peek() + self._peek(1)
        if pair in _OPERATORS_2:
            self._advance()
            self._advance()
            return self._word(_OPERATORS_2[pair], pair, start)
        ch = self._advance()
        if ch in _OPERATORS_1:
            return self._word(_OPERATORS_1[ch], ch, start)
        return self._word(WordType.ILLEGAL, ch, start)


def split_words(text: str) -> List[Word]:
    """All ``split``-mode words of ``text`` (EOF excluded)."""
    scanner = Scanner(text)
    words: List[Word] = []
    while True:
        word = scanner.split()
        if word.type is WordType.EOF:
            return words
        words.append(word)


def is_complete(text: str) -> bool:
    """False when ``text`` ends inside an open quote, brace or bracket."""
    return not any(
        word.type is WordType.ILLEGAL and word.incomplete
        for word in Scanner(text)
    )
