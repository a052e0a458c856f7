"""
Procedure commands: proc, rename and help.
"""

from typing import List

from ..runtime.commands import Builtin, CommandRegistry, Ensemble
from ..runtime.interpreter import Interpreter
from ..runtime.values import Value, String
from ..shared.errors import TclError, UndefinedCommandError

_EMPTY = String("")


def run_proc(interp: Interpreter, args: List[Value]) -> Value:
    name, params, body = (str(a) for a in args)
    interp.define_procedure(name, params, body)
    return _EMPTY


def run_rename(interp: Interpreter, args: List[Value]) -> Value:
    interp.rename_command(str(args[0]), str(args[1]))
    return _EMPTY


def run_help(interp: Interpreter, args: List[Value]) -> Value:
    name = str(args[0])
    executable = interp.lookup_command(name)
    if executable is None:
        raise UndefinedCommandError(name)
    if not isinstance(executable, (Builtin, Ensemble)):
        raise TclError(f"{name}: can not retrieve help")
    return String(executable.help)


def register(registry: CommandRegistry) -> None:
    registry.register(Builtin(
        "proc", run_proc, 3, 3, usage="name args body",
        help="create a Tcl procedure",
    ))
    registry.register(Builtin(
        "rename", run_rename, 2, 2, usage="oldName newName",
        help="rename or delete a command",
    ))
    registry.register(Builtin(
        "help", run_help, 1, 1, usage="commandName",
        help="retrieve help of given builtin command",
    ))
