"""
Expression tree nodes.

Each node evaluates against a substitution context (variable resolution and
nested script execution) and yields an expression value.
"""

from dataclasses import dataclass

from ..frontend.builder import SubstitutionContext, resolve_variable, substitute_quoted
from ..frontend.words import WordType
from ..runtime.values import String
from . import values as ev


class Expression:
    """Base of expression nodes."""

    def evaluate(self, context: SubstitutionContext) -> ev.ExprValue:
        raise NotImplementedError


@dataclass(frozen=True)
class Constant(Expression):
    value: ev.ExprValue

    def evaluate(self, context: SubstitutionContext) -> ev.ExprValue:
        return self.value


@dataclass(frozen=True)
class Text(Expression):
    """Brace-quoted operand, taken verbatim."""
    text: str

    def evaluate(self, context: SubstitutionContext) -> ev.ExprValue:
        return ev.from_value(String(self.text))


@dataclass(frozen=True)
class Variable(Expression):
    name: str

    def evaluate(self, context: SubstitutionContext) -> ev.ExprValue:
        return ev.from_value(resolve_variable(self.name, context))


@dataclass(frozen=True)
class Script(Expression):
    script: str

    def evaluate(self, context: SubstitutionContext) -> ev.ExprValue:
        return ev.from_value(context.execute(self.script))


@dataclass(frozen=True)
class Quoted(Expression):
    text: str

    def evaluate(self, context: SubstitutionContext) -> ev.ExprValue:
        return ev.from_value(substitute_quoted(self.text, context))


@dataclass(frozen=True)
class Prefix(Expression):
    op: WordType
    right: Expression

    def evaluate(self, context: SubstitutionContext) -> ev.ExprValue:
        return ev.UNARY[self.op](self.right.evaluate(context))


@dataclass(frozen=True)
class Infix(Expression):
    op: WordType
    left: Expression
    right: Expression

    def evaluate(self, context: SubstitutionContext) -> ev.ExprValue:
        left = self.left.evaluate(context)
        right = self.right.evaluate(context)
        return ev.BINARY[self.op](left, right)


@dataclass(frozen=True)
class Logical(Expression):
    """Short-circuit ``&&`` / ``||``; both operands are read as booleans."""
    op: WordType
    left: Expression
    right: Expression

    def evaluate(self, context: SubstitutionContext) -> ev.ExprValue:
        left = ev.as_bool(self.left.evaluate(context))
        if self.op is WordType.AND and not left:
            return ev.Boolean(False)
        if self.op is WordType.OR and left:
            return ev.Boolean(True)
        return ev.Boolean(ev.as_bool(self.right.evaluate(context)))


@dataclass(frozen=True)
class Choice(Expression):
    condition: Expression
    consequence: Expression
    alternative: Expression

    def evaluate(self, context: SubstitutionContext) -> ev.ExprValue:
        if ev.as_bool(self.condition.evaluate(context)):
            return self.consequence.evaluate(context)
        return self.alternative.evaluate(context)
