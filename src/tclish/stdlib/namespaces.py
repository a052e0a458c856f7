"""
The ``namespace`` ensemble.
"""

import fnmatch
from typing import List

from ..runtime.commands import Builtin, CommandRegistry, Ensemble
from ..runtime.interpreter import Interpreter
from ..runtime.namespace import split_qualified
from ..runtime.values import Value, String, Boolean, list_of, parse_words
from ..shared.errors import TclError
from ..utils.config import ROOT_NAMESPACE


def _namespace(interp: Interpreter, args: List[Value]) -> int:
    if not args:
        return interp.current_namespace
    return interp.namespaces.require(str(args[0]), interp.current_namespace)


def namespace_eval(interp: Interpreter, args: List[Value]) -> Value:
    script = " ".join(str(a) for a in args[1:])
    return interp.eval_in_namespace(str(args[0]), script)


def namespace_current(interp: Interpreter, args: List[Value]) -> Value:
    return String(interp.namespaces.qualified_name(interp.current_namespace))


def namespace_parent(interp: Interpreter, args: List[Value]) -> Value:
    namespace = interp.namespaces.get(_namespace(interp, args))
    if namespace.parent is None:
        return String("")
    return String(interp.namespaces.qualified_name(namespace.parent))


def namespace_children(interp: Interpreter, args: List[Value]) -> Value:
    tree = interp.namespaces
    names = [tree.qualified_name(i) for i in tree.children_of(_namespace(interp, args))]
    if len(args) > 1:
        pattern = str(args[1])
        names = [n for n in names if fnmatch.fnmatchcase(n, pattern)]
    return list_of(names)


def namespace_exists(interp: Interpreter, args: List[Value]) -> Value:
    found = interp.namespaces.lookup(str(args[0]), interp.current_namespace)
    return Boolean(found is not None)


def namespace_delete(interp: Interpreter, args: List[Value]) -> Value:
    tree = interp.namespaces
    for arg in args:
        index = tree.require(str(arg), interp.current_namespace)
        for frame in interp.frames:
            if index in tree.ancestors(frame.namespace):
                raise TclError(f"can not delete namespace \"{arg}\": it is in use")
        tree.delete(index)
    return String("")


def namespace_unknown(interp: Interpreter, args: List[Value]) -> Value:
    namespace = interp.namespaces.get(interp.current_namespace)
    if args:
        handler = parse_words(str(args[0]))
        namespace.unknown = handler or None
    return list_of(namespace.unknown or [])


def namespace_qualifiers(interp: Interpreter, args: List[Value]) -> Value:
    path, _ = split_qualified(str(args[0]))
    return String("" if path == ROOT_NAMESPACE else path)


def namespace_tail(interp: Interpreter, args: List[Value]) -> Value:
    _, tail = split_qualified(str(args[0]))
    return String(tail)


def register(registry: CommandRegistry) -> None:
    registry.register(Ensemble("namespace", [
        Builtin("eval", namespace_eval, 2, None, usage="name arg ?arg ...?"),
        Builtin("current", namespace_current, 0, 0),
        Builtin("parent", namespace_parent, 0, 1, usage="?name?"),
        Builtin("children", namespace_children, 0, 2, usage="?name? ?pattern?"),
        Builtin("exists", namespace_exists, 1, 1, usage="name"),
        Builtin("delete", namespace_delete, 0, None, usage="?name ...?"),
        Builtin("unknown", namespace_unknown, 0, 1, usage="?script?"),
        Builtin("qualifiers", namespace_qualifiers, 1, 1, usage="string"),
        Builtin("tail", namespace_tail, 1, 1, usage="string"),
    ], help="create and manipulate contexts for commands and variables"))
