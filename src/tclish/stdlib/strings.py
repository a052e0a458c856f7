"""
The ``string`` ensemble.
"""

from typing import List

from .lists import parse_index
from ..runtime.commands import Builtin, CommandRegistry, Ensemble
from ..runtime.interpreter import Interpreter
from ..runtime.values import Value, String, Boolean, to_int
from ..shared.errors import TclError


def string_length(interp: Interpreter, args: List[Value]) -> Value:
    return String(str(len(str(args[0]))))


def string_tolower(interp: Interpreter, args: List[Value]) -> Value:
    return String(str(args[0]).lower())


def string_toupper(interp: Interpreter, args: List[Value]) -> Value:
    return String(str(args[0]).upper())


def string_repeat(interp: Interpreter, args: List[Value]) -> Value:
    count = to_int(args[1])
    return String(str(args[0]) * max(count, 0))


def string_trim(interp: Interpreter, args: List[Value]) -> Value:
    chars = str(args[1]) if len(args) > 1 else None
    return String(str(args[0]).strip(chars))


def string_index(interp: Interpreter, args: List[Value]) -> Value:
    text = str(args[0])
    at = parse_index(str(args[1]), len(text))
    return String(text[at] if 0 <= at < len(text) else "")


def string_range(interp: Interpreter, args: List[Value]) -> Value:
    text = str(args[0])
    first = max(parse_index(str(args[1]), len(text)), 0)
    last = min(parse_index(str(args[2]), len(text)), len(text) - 1)
    return String(text[first:last + 1] if first <= last else "")


def string_equal(interp: Interpreter, args: List[Value]) -> Value:
    words = [str(a) for a in args]
    nocase = False
    while len(words) > 2:
        option = words.pop(0)
        if option != "-nocase":
            raise TclError(f"bad option \"{option}\": must be -nocase")
        nocase = True
    left, right = words
    if nocase:
        left, right = left.lower(), right.lower()
    return Boolean(left == right)


def string_first(interp: Interpreter, args: List[Value]) -> Value:
    needle, haystack = str(args[0]), str(args[1])
    start = max(parse_index(str(args[2]), len(haystack)), 0) if len(args) > 2 else 0
    return String(str(haystack.find(needle, start)))


def register(registry: CommandRegistry) -> None:
    registry.register(Ensemble("string", [
        Builtin("length", string_length, 1, 1, usage="string"),
        Builtin("tolower", string_tolower, 1, 1, usage="string"),
        Builtin("toupper", string_toupper, 1, 1, usage="string"),
        Builtin("repeat", string_repeat, 2, 2, usage="string count"),
        Builtin("trim", string_trim, 1, 2, usage="string ?chars?"),
        Builtin("index", string_index, 2, 2, usage="string charIndex"),
        Builtin("range", string_range, 3, 3, usage="string first last"),
        Builtin("equal", string_equal, 2, 3, usage="?-nocase? string1 string2"),
        Builtin("first", string_first, 2, 3, usage="needleString haystackString ?startIndex?"),
    ], help="manipulate strings"))
