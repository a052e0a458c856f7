"""
Process commands: exec, pwd, pid and cd. None of them is safe.
"""

import os
import subprocess
from typing import List

from ..runtime.commands import Builtin, CommandRegistry
from ..runtime.interpreter import Interpreter
from ..runtime.values import Value, String
from ..shared.errors import TclError


def run_exec(interp: Interpreter, args: List[Value]) -> Value:
    command = [str(a) for a in args]
    try:
        completed = subprocess.run(
            command, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True,
        )
    except OSError as exc:
        raise TclError(f"couldn't execute \"{command[0]}\": {exc.strerror}") from exc
    if completed.returncode != 0:
        message = completed.stderr.rstrip("\n") or "child process exited abnormally"
        raise TclError(message)
    return String(completed.stdout.rstrip("\n"))


def run_pwd(interp: Interpreter, args: List[Value]) -> Value:
    return String(os.getcwd())


def run_pid(interp: Interpreter, args: List[Value]) -> Value:
    return String(str(os.getpid()))


def run_cd(interp: Interpreter, args: List[Value]) -> Value:
    target = str(args[0]) if args else os.path.expanduser("~")
    try:
        os.chdir(target)
    except OSError as exc:
        raise TclError(f"couldn't change working directory to \"{target}\": {exc.strerror}") from exc
    return String("")


def register(registry: CommandRegistry) -> None:
    registry.register(Builtin(
        "exec", run_exec, 1, None, safe=False, usage="arg ?arg ...?",
        help="invoke subprocesses",
    ))
    registry.register(Builtin(
        "pwd", run_pwd, 0, 0, safe=False,
        help="return the absolute path of the current working directory",
    ))
    registry.register(Builtin(
        "pid", run_pid, 0, 0, safe=False,
        help="retrieve process identifier",
    ))
    registry.register(Builtin(
        "cd", run_cd, 0, 1, safe=False, usage="?dirName?",
        help="change working directory",
    ))
