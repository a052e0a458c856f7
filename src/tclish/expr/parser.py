"""
Expression parser.

Precedence climbing over the scanner's expression-mode words: a prefix
table handles operands, unary operators and grouping; an infix table keyed
by operator word handles binary operators, each with a binding power.
"""

import logging
from functools import lru_cache
from typing import Callable, Dict

from ..frontend.scanner import Scanner
from ..frontend.words import Word, WordType
from ..shared.errors import CastError, TclSyntaxError
from . import nodes
from . import values as ev

logger = logging.getLogger(__name__)

# Binding powers, lowest first
LOWEST = 0
CONDITION = 1
LOGICAL_OR = 2
LOGICAL_AND = 3
BIT_OR = 4
BIT_XOR = 5
BIT_AND = 6
EQUALITY = 7
RELATIONAL = 8
SHIFT = 9
ADDITIVE = 10
MULTIPLICATIVE = 11
POWER = 12
UNARY = 13

BINDINGS: Dict[WordType, int] = {
    WordType.TERNARY: CONDITION,
    WordType.OR: LOGICAL_OR,
    WordType.AND: LOGICAL_AND,
    WordType.BOR: BIT_OR,
    WordType.BXOR: BIT_XOR,
    WordType.BAND: BIT_AND,
    WordType.EQ: EQUALITY,
    WordType.NE: EQUALITY,
    WordType.LT: RELATIONAL,
    WordType.LE: RELATIONAL,
    WordType.GT: RELATIONAL,
    WordType.GE: RELATIONAL,
    WordType.LSHIFT: SHIFT,
    WordType.RSHIFT: SHIFT,
    WordType.ADD: ADDITIVE,
    WordType.SUB: ADDITIVE,
    WordType.MUL: MULTIPLICATIVE,
    WordType.DIV: MULTIPLICATIVE,
    WordType.MOD: MULTIPLICATIVE,
    WordType.POW: POWER,
}

# Right-associative operators bind their right operand one level lower
RIGHT_ASSOCIATIVE = frozenset((WordType.POW,))


class Parser:
    """Parses one expression string into a node tree."""

    def __init__(self, text: str):
        self.text = text
        self.scanner = Scanner(text)
        self.curr: Word = self.scanner.tokenize()

        self.prefix: Dict[WordType, Callable[[], nodes.Expression]] = {
            WordType.INT: self._parse_integer,
            WordType.FLOAT: self._parse_float,
            WordType.IDENT: self._parse_identifier,
            WordType.VARIABLE: self._parse_operand,
            WordType.SCRIPT: self._parse_operand,
            WordType.QUOTE: self._parse_operand,
            WordType.BLOCK: self._parse_operand,
            WordType.LPAREN: self._parse_group,
            WordType.NOT: self._parse_prefix,
            WordType.SUB: self._parse_prefix,
            WordType.ADD: self._parse_prefix,
            WordType.BNOT: self._parse_prefix,
        }
        self.infix: Dict[WordType, Callable[[nodes.Expression], nodes.Expression]] = {
            op: self._parse_infix for op in BINDINGS
        }
        self.infix[WordType.AND] = self._parse_logical
        self.infix[WordType.OR] = self._parse_logical
        self.infix[WordType.TERNARY] = self._parse_ternary

    def parse(self) -> nodes.Expression:
        if self.curr.type is WordType.EOF:
            raise TclSyntaxError("empty expression")
        expression = self.parse_expression(LOWEST)
        if self.curr.type is not WordType.EOF:
            raise self._unexpected()
        return expression

    def parse_expression(self, binding: int) -> nodes.Expression:
        prefix = self.prefix.get(self.curr.type)
        if prefix is None:
            raise self._unexpected()
        left = prefix()
        while binding < BINDINGS.get(self.curr.type, LOWEST):
            left = self.infix[self.curr.type](left)
        return left

    # ------------------------------------------------------------------

    def _advance(self) -> Word:
        word = self.curr
        self.curr = self.scanner.tokenize()
        return word

    def _unexpected(self) -> TclSyntaxError:
        if self.curr.type is WordType.EOF:
            return TclSyntaxError(f"incomplete expression \"{self.text}\"")
        return TclSyntaxError(
            f"syntax error in expression \"{self.text}\": unexpected \"{self.curr.literal}\""
        )

    def _expect(self, type: WordType) -> None:
        if self.curr.type is not type:
            raise self._unexpected()
        self._advance()

    def _parse_integer(self) -> nodes.Expression:
        literal = self._advance().literal
        try:
            value = ev.parse_integer(literal)
        except ValueError:
            raise TclSyntaxError(f"invalid integer \"{literal}\"") from None
        if not -(2 ** 63) <= value < 2 ** 63:
            raise TclSyntaxError(f"integer value too large to represent: {literal}")
        return nodes.Constant(ev.wrap(value))

    def _parse_float(self) -> nodes.Expression:
        return nodes.Constant(ev.make_real(float(self._advance().literal)))

    def _parse_identifier(self) -> nodes.Expression:
        literal = self._advance().literal
        try:
            value = ev.from_text(literal)
        except CastError:
            value = None
        if not isinstance(value, ev.Boolean):
            raise TclSyntaxError(f"invalid bareword \"{literal}\"")
        return nodes.Constant(value)

    def _parse_operand(self) -> nodes.Expression:
        word = self._advance()
        if word.type is WordType.VARIABLE:
            return nodes.Variable(word.literal)
        if word.type is WordType.SCRIPT:
            return nodes.Script(word.literal)
        if word.type is WordType.QUOTE:
            return nodes.Quoted(word.literal)
        return nodes.Text(word.literal)

    def _parse_group(self) -> nodes.Expression:
        self._advance()
        expression = self.parse_expression(LOWEST)
        if self.curr.type is not WordType.RPAREN:
            raise TclSyntaxError(f"missing close parenthesis in \"{self.text}\"")
        self._advance()
        return expression

    def _parse_prefix(self) -> nodes.Expression:
        op = self._advance().type
        return nodes.Prefix(op, self.parse_expression(UNARY))

    def _parse_infix(self, left: nodes.Expression) -> nodes.Expression:
        op = self._advance().type
        power = BINDINGS[op]
        if op in RIGHT_ASSOCIATIVE:
            power -= 1
        return nodes.Infix(op, left, self.parse_expression(power))

    def _parse_logical(self, left: nodes.Expression) -> nodes.Expression:
        op = self._advance().type
        return nodes.Logical(op, left, self.parse_expression(BINDINGS[op]))

    def _parse_ternary(self, left: nodes.Expression) -> nodes.Expression:
        self._advance()
        consequence = self.parse_expression(LOWEST)
        self._expect(WordType.ALT)
        alternative = self.parse_expression(CONDITION - 1)
        return nodes.Choice(left, consequence, alternative)


@lru_cache(maxsize=512)
def parse(text: str) -> nodes.Expression:
    """Parse (and cache) an expression."""
    logger.debug(f"Parsing expression: {text!r}")
    return Parser(text).parse()
