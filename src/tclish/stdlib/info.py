"""
The ``info`` ensemble. Name listings accept an optional glob pattern.
"""

import fnmatch
from typing import List

from ..runtime.commands import Builtin, CommandRegistry, Ensemble
from ..runtime.interpreter import Interpreter
from ..runtime.values import Value, String, Boolean, list_of, to_int
from ..shared.errors import TclError
from ..utils.config import VARIADIC_PARAMETER


def _filtered(names: List[str], args: List[Value]) -> Value:
    if args:
        pattern = str(args[0])
        names = [n for n in names if fnmatch.fnmatchcase(n, pattern)]
    return list_of(sorted(names))


def info_exists(interp: Interpreter, args: List[Value]) -> Value:
    return Boolean(interp.exists(str(args[0])))


def info_commands(interp: Interpreter, args: List[Value]) -> Value:
    return _filtered(interp.command_names(), args)


def info_procs(interp: Interpreter, args: List[Value]) -> Value:
    return _filtered(interp.command_names(procedures_only=True), args)


def info_vars(interp: Interpreter, args: List[Value]) -> Value:
    return _filtered(interp.variable_names(), args)


def info_body(interp: Interpreter, args: List[Value]) -> Value:
    return String(interp.procedure(str(args[0])).body)


def info_args(interp: Interpreter, args: List[Value]) -> Value:
    procedure = interp.procedure(str(args[0]))
    names = [p.name for p in procedure.params]
    if procedure.variadic:
        names.append(VARIADIC_PARAMETER)
    return list_of(names)


def info_default(interp: Interpreter, args: List[Value]) -> Value:
    procedure = interp.procedure(str(args[0]))
    name = str(args[1])
    for param in procedure.params:
        if param.name == name:
            has_default = param.default is not None
            interp.define(str(args[2]), String(param.default if has_default else ""))
            return Boolean(has_default)
    raise TclError(f"procedure \"{args[0]}\" doesn't have an argument \"{name}\"")


def info_level(interp: Interpreter, args: List[Value]) -> Value:
    if not args:
        return String(str(interp.level))
    number = to_int(args[0])
    level = number if number > 0 else interp.level + number
    if not 0 < level <= interp.level:
        raise TclError(f"bad level \"{args[0]}\"")
    return list_of(interp.frames[level].command or [])


def info_cmdcount(interp: Interpreter, args: List[Value]) -> Value:
    return String(str(interp.count))


def register(registry: CommandRegistry) -> None:
    registry.register(Ensemble("info", [
        Builtin("exists", info_exists, 1, 1, usage="varName"),
        Builtin("commands", info_commands, 0, 1, usage="?pattern?"),
        Builtin("procs", info_procs, 0, 1, usage="?pattern?"),
        Builtin("vars", info_vars, 0, 1, usage="?pattern?"),
        Builtin("body", info_body, 1, 1, usage="procname"),
        Builtin("args", info_args, 1, 1, usage="procname"),
        Builtin("default", info_default, 3, 3, usage="procname arg varname"),
        Builtin("level", info_level, 0, 1, usage="?number?"),
        Builtin("cmdcount", info_cmdcount, 0, 0),
    ], help="information about the state of the interpreter"))
