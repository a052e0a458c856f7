"""
``::tcl::mathop`` commands: the expression operators as commands.
Operands are converted and combined with the expression value model.
"""

from functools import reduce
from typing import Callable, List

from ..expr import values as ev
from ..frontend.words import WordType
from ..runtime.commands import Builtin, CommandRegistry
from ..runtime.interpreter import Interpreter
from ..runtime.values import Value

NAMESPACE = "::tcl::mathop::"

Operator = Callable[[ev.ExprValue, ev.ExprValue], ev.ExprValue]


def _operands(args: List[Value]) -> List[ev.ExprValue]:
    return [ev.from_value(a) for a in args]


def _fold(op: Operator, identity: int):
    def run(interp: Interpreter, args: List[Value]) -> Value:
        return ev.to_value(reduce(op, _operands(args), ev.wrap(identity)))
    return run


def _binary(op: Operator):
    def run(interp: Interpreter, args: List[Value]) -> Value:
        left, right = _operands(args)
        return ev.to_value(op(left, right))
    return run


def run_subtract(interp: Interpreter, args: List[Value]) -> Value:
    operands = _operands(args)
    if len(operands) == 1:
        return ev.to_value(ev.negate(operands[0]))
    return ev.to_value(reduce(ev.subtract, operands))


def run_not(interp: Interpreter, args: List[Value]) -> Value:
    return ev.to_value(ev.logical_not(ev.from_value(args[0])))


_BINARY = {
    "/": WordType.DIV,
    "%": WordType.MOD,
    "**": WordType.POW,
    "==": WordType.EQ,
    "!=": WordType.NE,
    "<": WordType.LT,
    "<=": WordType.LE,
    ">": WordType.GT,
    ">=": WordType.GE,
}


def register(registry: CommandRegistry) -> None:
    registry.register(Builtin("+", _fold(ev.add, 0), 0, None, usage="?number ...?"), NAMESPACE + "+")
    registry.register(Builtin("*", _fold(ev.multiply, 1), 0, None, usage="?number ...?"), NAMESPACE + "*")
    registry.register(Builtin("-", run_subtract, 1, None, usage="number ?number ...?"), NAMESPACE + "-")
    registry.register(Builtin("!", run_not, 1, 1, usage="boolean"), NAMESPACE + "!")
    for name, op in _BINARY.items():
        registry.register(
            Builtin(name, _binary(ev.BINARY[op]), 2, 2, usage="value value"),
            NAMESPACE + name,
        )
