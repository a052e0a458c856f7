"""
Variable commands: set, unset, incr, append, global, upvar, uplevel,
defer and typeof.
"""

from typing import List

from ..runtime.commands import Builtin, CommandRegistry, ScriptAction
from ..runtime.interpreter import Interpreter
from ..runtime.namespace import split_qualified
from ..runtime.values import Value, String, to_int

_EMPTY = String("")


def run_set(interp: Interpreter, args: List[Value]) -> Value:
    name = str(args[0])
    if len(args) == 1:
        return interp.resolve(name)
    return interp.define(name, args[1])


def run_unset(interp: Interpreter, args: List[Value]) -> Value:
    names = [str(a) for a in args]
    complain = True
    if names and names[0] == "-nocomplain":
        complain = False
        names = names[1:]
    if names and names[0] == "--":
        names = names[1:]
    for name in names:
        if complain or interp.exists(name):
            interp.delete(name)
    return _EMPTY


def run_incr(interp: Interpreter, args: List[Value]) -> Value:
    name = str(args[0])
    step = to_int(args[1]) if len(args) > 1 else 1
    current = to_int(interp.resolve(name)) if interp.exists(name) else 0
    return interp.define(name, String(str(current + step)))


def run_append(interp: Interpreter, args: List[Value]) -> Value:
    name = str(args[0])
    current = str(interp.resolve(name)) if interp.exists(name) else ""
    return interp.define(name, String(current + "".join(str(a) for a in args[1:])))


def run_global(interp: Interpreter, args: List[Value]) -> Value:
    for arg in args:
        name = str(arg)
        _, alias = split_qualified(name)
        interp.link(name, alias, 0)
    return _EMPTY


def run_upvar(interp: Interpreter, args: List[Value]) -> Value:
    level = "1"
    if len(args) % 2 == 1:
        level, args = str(args[0]), args[1:]
    target = interp.parse_level(level)
    for source, alias in zip(args[::2], args[1::2]):
        interp.link(str(source), str(alias), target)
    return _EMPTY


def run_uplevel(interp: Interpreter, args: List[Value]) -> Value:
    level = "1"
    if len(args) > 1 and Interpreter.is_level(str(args[0])):
        level, args = str(args[0]), args[1:]
    script = " ".join(str(a) for a in args)
    return interp.uplevel(interp.parse_level(level), script)


def run_defer(interp: Interpreter, args: List[Value]) -> Value:
    interp.defer(ScriptAction(str(args[0])))
    return _EMPTY


def run_typeof(interp: Interpreter, args: List[Value]) -> Value:
    return String(args[0].type_name)


def register(registry: CommandRegistry) -> None:
    registry.register(Builtin(
        "set", run_set, 1, 2, usage="varName ?newValue?",
        help="read and write variables",
    ))
    registry.register(Builtin(
        "unset", run_unset, 0, None, usage="?-nocomplain? ?--? ?name ...?",
        help="delete variables",
    ))
    registry.register(Builtin(
        "incr", run_incr, 1, 2, usage="varName ?increment?",
        help="increment the value of a variable",
    ))
    registry.register(Builtin(
        "append", run_append, 1, None, usage="varName ?value ...?",
        help="append to variable",
    ))
    registry.register(Builtin(
        "global", run_global, 1, None, usage="?varName ...?",
        help="access global variables",
    ))
    registry.register(Builtin(
        "upvar", run_upvar, 2, None, safe=False,
        usage="?level? otherVar localVar ?otherVar localVar ...?",
        help="create link to variable in a different stack frame",
    ))
    registry.register(Builtin(
        "uplevel", run_uplevel, 1, None, safe=False, usage="?level? command ?arg ...?",
        help="execute a script in a different stack frame",
    ))
    registry.register(Builtin(
        "defer", run_defer, 1, 1, usage="script",
        help="run a script when the current frame is left",
    ))
    registry.register(Builtin(
        "typeof", run_typeof, 1, 1, usage="value",
        help="name of the type of a value",
    ))
