"""
The ``array`` ensemble. Arrays are immutable values: every update stores a
new Array under the variable name.
"""

import fnmatch
from typing import List

from ..runtime.commands import Builtin, CommandRegistry, Ensemble
from ..runtime.interpreter import Interpreter
from ..runtime.values import Value, String, Array, Boolean, list_of
from ..shared.errors import TclError


def _array(interp: Interpreter, name: str) -> Array:
    value = interp.resolve(name)
    if not isinstance(value, Array):
        raise TclError(f"\"{name}\" isn't an array")
    return value


def _matching(array: Array, args: List[Value]) -> List[str]:
    if len(args) < 2:
        return array.names()
    pattern = str(args[1])
    return [key for key in array.names() if fnmatch.fnmatchcase(key, pattern)]


def array_set(interp: Interpreter, args: List[Value]) -> Value:
    name = str(args[0])
    current = _array(interp, name) if interp.exists(name) else Array({})
    for key, value in args[1].to_array().values.items():
        current = current.with_item(key, value)
    interp.define(name, current)
    return String("")


def array_get(interp: Interpreter, args: List[Value]) -> Value:
    name = str(args[0])
    if not interp.exists(name):
        return list_of([])
    array = _array(interp, name)
    flat: List[Value] = []
    for key in _matching(array, args):
        flat += [String(key), array.get(key)]
    return list_of(flat)


def array_names(interp: Interpreter, args: List[Value]) -> Value:
    name = str(args[0])
    if not interp.exists(name):
        return list_of([])
    return list_of(_matching(_array(interp, name), args))


def array_size(interp: Interpreter, args: List[Value]) -> Value:
    name = str(args[0])
    if not interp.exists(name):
        return String("0")
    return String(str(len(_array(interp, name))))


def array_exists(interp: Interpreter, args: List[Value]) -> Value:
    name = str(args[0])
    return Boolean(interp.exists(name) and isinstance(interp.resolve(name), Array))


def array_unset(interp: Interpreter, args: List[Value]) -> Value:
    name = str(args[0])
    if not interp.exists(name):
        return String("")
    if len(args) < 2:
        interp.delete(name)
        return String("")
    array = _array(interp, name)
    for key in _matching(array, args):
        array = array.without(key)
    interp.define(name, array)
    return String("")


def register(registry: CommandRegistry) -> None:
    registry.register(Ensemble("array", [
        Builtin("set", array_set, 2, 2, usage="arrayName list"),
        Builtin("get", array_get, 1, 2, usage="arrayName ?pattern?"),
        Builtin("names", array_names, 1, 2, usage="arrayName ?pattern?"),
        Builtin("size", array_size, 1, 1, usage="arrayName"),
        Builtin("exists", array_exists, 1, 1, usage="arrayName"),
        Builtin("unset", array_unset, 1, 2, usage="arrayName ?pattern?"),
    ], help="manipulate array variables"))
