"""
The ``interp`` ensemble: a tree of child interpreters addressed by path.

A path is either a list (``{a b}``) or ``::``-separated (``a::b``).
"""

from typing import List

from ..runtime.commands import Builtin, CommandRegistry, Ensemble
from ..runtime.interpreter import Interpreter
from ..runtime.values import Value, String, Boolean, list_of, parse_words
from ..shared.errors import TclError
from ..utils.config import NAMESPACE_SEPARATOR


def interpreter_path(text: str) -> List[str]:
    if NAMESPACE_SEPARATOR in text:
        return [part for part in text.split(NAMESPACE_SEPARATOR) if part]
    return parse_words(text)


def _child(interp: Interpreter, args: List[Value]) -> Interpreter:
    if not args:
        return interp
    return interp.lookup_interpreter(interpreter_path(str(args[0])))


def interp_create(interp: Interpreter, args: List[Value]) -> Value:
    safe = False
    paths = []
    for arg in args:
        word = str(arg)
        if word == "-safe":
            safe = True
        elif word != "--":
            paths.append(word)
    if len(paths) != 1:
        raise TclError("wrong # args: should be \"interp create ?-safe? ?--? path\"")
    interp.create_interpreter(interpreter_path(paths[0]), safe=safe)
    return String(paths[0])


def interp_delete(interp: Interpreter, args: List[Value]) -> Value:
    for arg in args:
        interp.delete_interpreter(interpreter_path(str(arg)))
    return String("")


def interp_eval(interp: Interpreter, args: List[Value]) -> Value:
    child = _child(interp, args)
    return child.evaluate(" ".join(str(a) for a in args[1:]))


def interp_children(interp: Interpreter, args: List[Value]) -> Value:
    return list_of(_child(interp, args).child_names())


def interp_issafe(interp: Interpreter, args: List[Value]) -> Value:
    return Boolean(_child(interp, args).is_safe)


def interp_exists(interp: Interpreter, args: List[Value]) -> Value:
    try:
        interp.lookup_interpreter(interpreter_path(str(args[0])))
    except TclError:
        return Boolean(False)
    return Boolean(True)


def register(registry: CommandRegistry) -> None:
    registry.register(Ensemble("interp", [
        Builtin("create", interp_create, 1, 3, usage="?-safe? ?--? path"),
        Builtin("delete", interp_delete, 0, None, usage="?path ...?"),
        Builtin("eval", interp_eval, 2, None, usage="path arg ?arg ...?"),
        Builtin("children", interp_children, 0, 1, usage="?path?"),
        Builtin("issafe", interp_issafe, 0, 1, usage="?path?"),
        Builtin("exists", interp_exists, 1, 1, usage="path"),
    ], help="create and manipulate Tcl interpreters"))
