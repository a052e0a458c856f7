"""
Channel commands: puts, open, close, gets, read, eof, seek and tell.

Only ``puts`` is available to safe interpreters, and only on the standard
channels.
"""

from typing import List

from ..runtime.commands import Builtin, CommandRegistry
from ..runtime.interpreter import Interpreter
from ..runtime.values import Value, String, Boolean, to_int
from ..shared.errors import ArgumentCountError, UnsafeCommandError
from ..utils.config import STDIN_CHANNEL, STDOUT_CHANNEL, STANDARD_CHANNELS

_EMPTY = String("")


def run_puts(interp: Interpreter, args: List[Value]) -> Value:
    words = [str(a) for a in args]
    newline = True
    if len(words) > 1 and words[0] == "-nonewline":
        newline = False
        words = words[1:]
    if len(words) == 1:
        channel, text = STDOUT_CHANNEL, words[0]
    elif len(words) == 2:
        channel, text = words
    else:
        raise ArgumentCountError("wrong # args: should be \"puts ?-nonewline? ?channelId? string\"")
    if interp.is_safe and channel not in STANDARD_CHANNELS:
        raise UnsafeCommandError("puts")
    interp.files.write(channel, text, newline)
    return _EMPTY


def run_open(interp: Interpreter, args: List[Value]) -> Value:
    mode = str(args[1]) if len(args) > 1 else "r"
    return String(interp.files.open(str(args[0]), mode))


def run_close(interp: Interpreter, args: List[Value]) -> Value:
    interp.files.close(str(args[0]))
    return _EMPTY


def run_gets(interp: Interpreter, args: List[Value]) -> Value:
    channel = str(args[0])
    at_end = channel != STDIN_CHANNEL and interp.files.eof(channel)
    line = interp.files.gets(channel)
    if len(args) == 1:
        return String(line)
    interp.define(str(args[1]), String(line))
    return String("-1" if at_end else str(len(line)))


def run_read(interp: Interpreter, args: List[Value]) -> Value:
    words = [str(a) for a in args]
    strip_newline = words[0] == "-nonewline"
    if strip_newline:
        words = words[1:]
    if not words:
        raise ArgumentCountError("wrong # args: should be \"read ?-nonewline? channelId ?numChars?\"")
    count = to_int(String(words[1])) if len(words) > 1 else -1
    text = interp.files.read(words[0], count)
    if strip_newline and text.endswith("\n"):
        text = text[:-1]
    return String(text)


def run_eof(interp: Interpreter, args: List[Value]) -> Value:
    return Boolean(interp.files.eof(str(args[0])))


def run_seek(interp: Interpreter, args: List[Value]) -> Value:
    origin = str(args[2]) if len(args) > 2 else "start"
    interp.files.seek(str(args[0]), to_int(args[1]), origin)
    return _EMPTY


def run_tell(interp: Interpreter, args: List[Value]) -> Value:
    return String(str(interp.files.tell(str(args[0]))))


def register(registry: CommandRegistry) -> None:
    registry.register(Builtin(
        "puts", run_puts, 1, 3, usage="?-nonewline? ?channelId? string",
        help="print a message to given channel (default to stdout)",
    ))
    registry.register(Builtin(
        "open", run_open, 1, 2, safe=False, usage="fileName ?access?",
        help="open a file-based channel",
    ))
    registry.register(Builtin(
        "close", run_close, 1, 1, safe=False, usage="channelId",
        help="close an open channel",
    ))
    registry.register(Builtin(
        "gets", run_gets, 1, 2, safe=False, usage="channelId ?varName?",
        help="read a line from a channel",
    ))
    registry.register(Builtin(
        "read", run_read, 1, 3, safe=False, usage="?-nonewline? channelId ?numChars?",
        help="read from a channel",
    ))
    registry.register(Builtin(
        "eof", run_eof, 1, 1, safe=False, usage="channelId",
        help="check for end of file condition on channel",
    ))
    registry.register(Builtin(
        "seek", run_seek, 2, 3, safe=False, usage="channelId offset ?origin?",
        help="change the access position for an open channel",
    ))
    registry.register(Builtin(
        "tell", run_tell, 1, 1, safe=False, usage="channelId",
        help="return current access position for an open channel",
    ))
