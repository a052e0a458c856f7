"""
List commands: list, llength, lindex, lappend, concat, join and split.
"""

from typing import List

from ..runtime.commands import Builtin, CommandRegistry
from ..runtime.interpreter import Interpreter
from ..runtime.values import Value, String, List as ListValue, list_of
from ..shared.errors import TclError


def parse_index(text: str, length: int) -> int:
    """Position for ``N``, ``end`` or ``end-N``."""
    if text == "end":
        return length - 1
    if text.startswith("end-"):
        offset = text[len("end-"):]
        if offset.isdigit():
            return length - 1 - int(offset)
    try:
        return int(text, 0)
    except ValueError:
        raise TclError(
            f"bad index \"{text}\": must be integer?[+-]integer? or end?[+-]integer?"
        ) from None


def run_list(interp: Interpreter, args: List[Value]) -> Value:
    return ListValue(tuple(args))


def run_llength(interp: Interpreter, args: List[Value]) -> Value:
    return String(str(len(args[0].to_list())))


def run_lindex(interp: Interpreter, args: List[Value]) -> Value:
    value = args[0]
    for arg in args[1:]:
        items = value.to_list()
        value = items.at(parse_index(str(arg), len(items)))
    return value


def run_lappend(interp: Interpreter, args: List[Value]) -> Value:
    name = str(args[0])
    current = interp.resolve(name).to_list() if interp.exists(name) else ListValue(())
    return interp.define(name, current.append(*args[1:]))


def run_concat(interp: Interpreter, args: List[Value]) -> Value:
    parts = [str(a).strip() for a in args]
    return String(" ".join(p for p in parts if p))


def run_join(interp: Interpreter, args: List[Value]) -> Value:
    separator = str(args[1]) if len(args) > 1 else " "
    return String(separator.join(str(v) for v in args[0].to_list()))


def run_split(interp: Interpreter, args: List[Value]) -> Value:
    text = str(args[0])
    separators = str(args[1]) if len(args) > 1 else " \t\n\r"
    if separators == "":
        return list_of(list(text))
    items, current = [], []
    for ch in text:
        if ch in separators:
            items.append("".join(current))
            current = []
        else:
            current.append(ch)
    items.append("".join(current))
    return list_of(items)


def register(registry: CommandRegistry) -> None:
    registry.register(Builtin(
        "list", run_list, 0, None, usage="?arg ...?",
        help="create a list",
    ))
    registry.register(Builtin(
        "llength", run_llength, 1, 1, usage="list",
        help="count the number of elements in a list",
    ))
    registry.register(Builtin(
        "lindex", run_lindex, 1, None, usage="list ?index ...?",
        help="retrieve an element from a list",
    ))
    registry.register(Builtin(
        "lappend", run_lappend, 1, None, usage="varName ?value ...?",
        help="append list elements onto a variable",
    ))
    registry.register(Builtin(
        "concat", run_concat, 0, None, usage="?arg ...?",
        help="join lists together",
    ))
    registry.register(Builtin(
        "join", run_join, 1, 2, usage="list ?joinString?",
        help="create a string by joining together list elements",
    ))
    registry.register(Builtin(
        "split", run_split, 1, 2, usage="string ?splitChars?",
        help="split a string into a proper list",
    ))
