"""
Word types produced by the scanner.

A word is one lexical unit of a script: a run of literal text, a variable
reference, a nested script, a brace block, an end-of-command marker, or, in
expression mode, a number or operator.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from ..shared.source_location import SourceLocation


class WordType(Enum):
    """All word kinds recognised by the scanner."""

    # --- Structure ---
    EOF = auto()
    EOL = auto()            # ; or newline (swallows following blanks/EOLs)
    BLANK = auto()          # run of spaces/tabs, or backslash-newline
    COMMENT = auto()        # # ... at command start
    ILLEGAL = auto()        # unterminated construct or malformed number

    # --- Substitution units ---
    LITERAL = auto()
    VARIABLE = auto()       # $name, ${name}, $name(key)
    SCRIPT = auto()         # [...]
    QUOTE = auto()          # "..."
    BLOCK = auto()          # {...}

    # --- Expression mode ---
    INT = auto()            # 42, 0x2a, 0o52, 0b101010
    FLOAT = auto()          # 4.2, 1e10, 2.5e-3
    IDENT = auto()          # true, false, yes, no, on, off
    LPAREN = auto()
    RPAREN = auto()
    NAMESPACE = auto()      # ::
    TERNARY = auto()        # ?
    ALT = auto()            # :
    AND = auto()            # &&
    OR = auto()             # ||
    NOT = auto()            # !
    ADD = auto()
    SUB = auto()
    MUL = auto()
    DIV = auto()
    MOD = auto()
    POW = auto()            # **
    EQ = auto()             # ==
    NE = auto()             # !=
    GT = auto()
    GE = auto()
    LT = auto()
    LE = auto()
    LSHIFT = auto()
    RSHIFT = auto()
    BAND = auto()           # &
    BOR = auto()            # |
    BXOR = auto()           # ^
    BNOT = auto()           # ~


# Words that terminate a command
EOL_TYPES = frozenset((WordType.EOF, WordType.EOL, WordType.COMMENT))


@dataclass(frozen=True)
class Word:
    """A single word from the scanner."""
    type: WordType
    literal: str = ""
    location: Optional[SourceLocation] = None
    incomplete: bool = False    # Illegal because input ended inside a construct

    @property
    def is_eol(self) -> bool:
        return self.type in EOL_TYPES

    @property
    def is_blank(self) -> bool:
        return self.type is WordType.BLANK

    def __str__(self) -> str:
        if self.literal:
            return f"{self.type.name.lower()}({self.literal})"
        return f"<{self.type.name.lower()}>"
