"""
Expression sub-language used by ``expr`` and the condition arguments of the
control commands.
"""

from ..frontend.builder import SubstitutionContext
from ..runtime.values import Value
from . import values as ev
from .parser import parse, Parser


def evaluate(text: str, context: SubstitutionContext) -> ev.ExprValue:
    """Evaluate an expression to its typed result."""
    return parse(text).evaluate(context)


def evaluate_value(text: str, context: SubstitutionContext) -> Value:
    """Evaluate an expression to a script value."""
    return ev.to_value(evaluate(text, context))


def evaluate_bool(text: str, context: SubstitutionContext) -> bool:
    """Evaluate a condition."""
    return ev.as_bool(evaluate(text, context))


__all__ = ["evaluate", "evaluate_value", "evaluate_bool", "parse", "Parser"]
