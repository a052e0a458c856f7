"""
Control commands: if, while, for, foreach, switch, break, continue,
return, error, catch, eval, expr and exit.
"""

import fnmatch
from typing import List

from ..expr import evaluate_bool, evaluate_value
from ..runtime.commands import Builtin, CommandRegistry
from ..runtime.interpreter import Interpreter
from ..runtime.signals import BreakSignal, ContinueSignal, ExitSignal, ReturnSignal
from ..runtime.values import Value, String, parse_words, to_int, to_strings
from ..shared.errors import ArgumentCountError, TclError
from ..utils.config import (
    CATCH_OK, CATCH_ERROR, CATCH_RETURN, CATCH_BREAK, CATCH_CONTINUE,
)

_EMPTY = String("")


def _iterate(interp: Interpreter, body: str) -> bool:
    """Run one loop iteration; False once the loop should stop."""
    try:
        interp.execute(body)
    except BreakSignal:
        return False
    except ContinueSignal:
        pass
    return True


def run_if(interp: Interpreter, args: List[Value]) -> Value:
    words = [str(a) for a in args]
    i = 0
    while True:
        if i >= len(words):
            raise TclError("wrong # args: no expression after \"if\" argument")
        condition = words[i]
        i += 1
        if i < len(words) and words[i] == "then":
            i += 1
        if i >= len(words):
            raise TclError(f"wrong # args: no script following \"{condition}\" argument")
        body = words[i]
        i += 1
        if evaluate_bool(condition, interp):
            return interp.execute(body)
        if i >= len(words):
            return _EMPTY
        if words[i] == "elseif":
            i += 1
            continue
        if words[i] == "else":
            i += 1
        if i != len(words) - 1:
            raise TclError("wrong # args: extra words after \"else\" clause in \"if\" command")
        return interp.execute(words[i])


def run_while(interp: Interpreter, args: List[Value]) -> Value:
    test, body = str(args[0]), str(args[1])
    while evaluate_bool(test, interp):
        if not _iterate(interp, body):
            break
    return _EMPTY


def run_for(interp: Interpreter, args: List[Value]) -> Value:
    start, test, step, body = (str(a) for a in args)
    interp.execute(start)
    while evaluate_bool(test, interp):
        if not _iterate(interp, body):
            break
        interp.execute(step)
    return _EMPTY


def run_foreach(interp: Interpreter, args: List[Value]) -> Value:
    if len(args) % 2 == 0:
        raise ArgumentCountError(
            "wrong # args: should be \"foreach varList list ?varList list ...? command\""
        )
    body = str(args[-1])
    loops = []
    for var_list, values in zip(args[:-1:2], args[1:-1:2]):
        names = to_strings(var_list)
        if not names:
            raise TclError("foreach varlist is empty")
        loops.append((names, list(values.to_list())))
    rounds = max(-(-len(items) // len(names)) for names, items in loops)
    for n in range(rounds):
        for names, items in loops:
            for i, name in enumerate(names):
                at = n * len(names) + i
                interp.define(name, items[at] if at < len(items) else _EMPTY)
        if not _iterate(interp, body):
            break
    return _EMPTY


def _matches(mode: str, pattern: str, value: str) -> bool:
    if mode == "-glob":
        return fnmatch.fnmatchcase(value, pattern)
    return pattern == value


def run_switch(interp: Interpreter, args: List[Value]) -> Value:
    words = [str(a) for a in args]
    mode = "-exact"
    while words and words[0].startswith("-"):
        option = words.pop(0)
        if option == "--":
            break
        if option not in ("-exact", "-glob"):
            raise TclError(f"bad option \"{option}\": must be -exact, -glob, or --")
        mode = option
    if len(words) < 2:
        raise ArgumentCountError(
            "wrong # args: should be \"switch ?-option ...? string ?pattern body ...? ?default body?\""
        )
    value, clauses = words[0], words[1:]
    if len(clauses) == 1:
        clauses = parse_words(clauses[0])
    if len(clauses) % 2:
        raise TclError("extra switch pattern with no body")
    pairs = list(zip(clauses[::2], clauses[1::2]))
    for i, (pattern, body) in enumerate(pairs):
        is_default = pattern == "default" and i == len(pairs) - 1
        if not (is_default or _matches(mode, pattern, value)):
            continue
        while body == "-":
            i += 1
            if i >= len(pairs):
                raise TclError(f"no body specified for pattern \"{pattern}\"")
            body = pairs[i][1]
        return interp.execute(body)
    return _EMPTY


def run_break(interp: Interpreter, args: List[Value]) -> Value:
    raise BreakSignal()


def run_continue(interp: Interpreter, args: List[Value]) -> Value:
    raise ContinueSignal()


def run_return(interp: Interpreter, args: List[Value]) -> Value:
    raise ReturnSignal(args[0] if args else _EMPTY)


def run_error(interp: Interpreter, args: List[Value]) -> Value:
    raise TclError(str(args[0]))


def run_catch(interp: Interpreter, args: List[Value]) -> Value:
    code, result = CATCH_OK, _EMPTY
    try:
        result = interp.execute(str(args[0]))
    except ReturnSignal as signal:
        code, result = CATCH_RETURN, signal.value
    except BreakSignal:
        code = CATCH_BREAK
    except ContinueSignal:
        code = CATCH_CONTINUE
    except TclError as e:
        code, result = CATCH_ERROR, String(e.message)
        interp.last_error = e
    if len(args) > 1:
        interp.define(str(args[1]), result)
    return String(str(code))


def run_eval(interp: Interpreter, args: List[Value]) -> Value:
    return interp.execute(" ".join(str(a) for a in args))


def run_expr(interp: Interpreter, args: List[Value]) -> Value:
    return evaluate_value(" ".join(str(a) for a in args), interp)


def run_exit(interp: Interpreter, args: List[Value]) -> Value:
    raise ExitSignal(to_int(args[0]) if args else 0)


def register(registry: CommandRegistry) -> None:
    registry.register(Builtin(
        "if", run_if, 2, None,
        usage="expr1 ?then? body1 elseif expr2 ?then? body2 ... ?else? ?bodyN?",
        help="execute scripts conditionally",
    ))
    registry.register(Builtin(
        "while", run_while, 2, 2, usage="test command",
        help="execute script repeatedly as long as a condition is met",
    ))
    registry.register(Builtin(
        "for", run_for, 4, 4, usage="start test next command",
        help="'for' loop",
    ))
    registry.register(Builtin(
        "foreach", run_foreach, 3, None, usage="varList list ?varList list ...? command",
        help="iterate over all elements in one or more lists",
    ))
    registry.register(Builtin(
        "switch", run_switch, 2, None,
        usage="?-option ...? string ?pattern body ...? ?default body?",
        help="evaluate one of several scripts, depending on a given value",
    ))
    registry.register(Builtin("break", run_break, 0, 0, help="abort looping command"))
    registry.register(Builtin(
        "continue", run_continue, 0, 0,
        help="skip to the next iteration of a loop",
    ))
    registry.register(Builtin(
        "return", run_return, 0, 1, usage="?result?",
        help="return from a procedure",
    ))
    registry.register(Builtin("error", run_error, 1, 1, usage="message", help="generate an error"))
    registry.register(Builtin(
        "catch", run_catch, 1, 2, usage="script ?resultVarName?",
        help="evaluate script and trap exceptional returns",
    ))
    registry.register(Builtin(
        "eval", run_eval, 1, None, safe=False, usage="arg ?arg ...?",
        help="evaluate a script",
    ))
    registry.register(Builtin(
        "expr", run_expr, 1, None, usage="arg ?arg ...?",
        help="evaluate an expression",
    ))
    registry.register(Builtin(
        "exit", run_exit, 0, 1, safe=False, usage="?returnCode?",
        help="end the application",
    ))
