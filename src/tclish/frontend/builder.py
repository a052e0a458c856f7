"""
Substitution & Command Builder

Pulls words from the scanner and assembles fully substituted commands, one
per call. Variables are resolved and nested scripts executed through a
narrow capability supplied by the interpreter, so building command *n+1*
happens only after command *n* has run.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from typing_extensions import Protocol

from .scanner import Scanner, split_words
from .words import Word, WordType
from ..runtime.values import Value, String, list_of
from ..shared.errors import TclSyntaxError, IncompleteScriptError
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_SCRIPT_NAME

logger = logging.getLogger(__name__)

_ELEMENT_REFERENCE = re.compile(r"(.+?)\((.*)\)", re.DOTALL)


class SubstitutionContext(Protocol):
    """What the builder needs from the interpreter."""

    def resolve(self, name: str) -> Value:
        ...

    def execute(self, script: str) -> Value:
        ...


@dataclass
class Command:
    """One substituted command invocation."""
    name: str
    args: List[Value] = field(default_factory=list)
    location: Optional[SourceLocation] = None

    def __str__(self) -> str:
        return str(list_of([self.name, *self.args]))


def concat(values: List[Value]) -> Value:
    """Join the pieces of one argument; a single piece keeps its value."""
    if len(values) == 1:
        return values[0]
    return String("".join(str(v) for v in values))


class Builder:
    """
    Lazy command builder over a script.

    Usage:
        for command in Builder(script, interpreter):
            interpreter.dispatch(command)

    ``filename`` is given for top-level scripts only; syntax errors then
    carry the location of the offending word.
    """

    def __init__(
        self,
        source: str,
        context: SubstitutionContext,
        filename: Optional[str] = None,
    ):
        self.scanner = Scanner(source, filename or DEFAULT_SCRIPT_NAME)
        self.context = context
        self.track_locations = filename is not None
        self.curr: Word = self.scanner.scan()
        # location of the command being built or last built
        self.location: Optional[SourceLocation] = None

    def __iter__(self) -> Iterator[Command]:
        while True:
            command = self.next_command()
            if command is None:
                return
            yield command

    def next_command(self) -> Optional[Command]:
        """Build the next command, or None at end of script."""
        self._skip_empty()
        if self.curr.type is WordType.EOF:
            return None
        location = self.location = self.curr.location
        try:
            name = self._argument()
            args: List[Value] = []
            while not self.curr.is_eol:
                args.append(self._argument())
        except TclSyntaxError:
            logger.debug(f"Syntax error in command at {location}, skipping to end of command")
            self._skip_to_eol()
            raise
        self._advance()
        return Command(str(name), args, location)

    # ------------------------------------------------------------------

    def _advance(self) -> None:
        if self.curr.type is not WordType.EOF:
            self.curr = self.scanner.scan()

    def _skip_empty(self) -> None:
        while self.curr.type is not WordType.EOF and (self.curr.is_eol or self.curr.is_blank):
            self._advance()

    def _skip_to_eol(self) -> None:
        while not self.curr.is_eol:
            self._advance()
        self._advance()

    def _argument(self) -> Value:
        while self.curr.is_blank:
            self._advance()
        pieces: List[Value] = []
        while not (self.curr.is_eol or self.curr.is_blank):
            pieces.append(substitute(self.curr, self.context, self.track_locations))
            self._advance()
        if self.curr.is_blank:
            self._advance()
        return concat(pieces)


def substitute(
    word: Word,
    context: SubstitutionContext,
    track_locations: bool = False,
) -> Value:
    """Value of one word under the substitution rules."""
    if word.type in (WordType.LITERAL, WordType.BLOCK):
        return String(word.literal)
    if word.type is WordType.VARIABLE:
        return resolve_variable(word.literal, context)
    if word.type is WordType.QUOTE:
        return substitute_quoted(word.literal, context)
    if word.type is WordType.SCRIPT:
        return context.execute(word.literal)
    if word.type is WordType.ILLEGAL:
        location = word.location if track_locations else None
        if word.incomplete:
            raise IncompleteScriptError(
                f"missing close delimiter for \"{word.literal[:20]}\"",
                location,
            )
        raise TclSyntaxError(f"syntax error near \"{word.literal}\"", location)
    raise TclSyntaxError(f"unexpected {word}")


def resolve_variable(name: str, context: SubstitutionContext) -> Value:
    """Resolve ``name`` or ``name(key)``; the key is itself substituted."""
    match = _ELEMENT_REFERENCE.fullmatch(name)
    if match is not None:
        key = substitute_quoted(match.group(2), context)
        name = f"{match.group(1)}({key})"
    return context.resolve(name)


def substitute_quoted(text: str, context: SubstitutionContext) -> Value:
    """Substitute the body of a quoted word."""
    pieces = [substitute(w, context) for w in split_words(text)]
    if not pieces:
        return String("")
    return concat(pieces)
