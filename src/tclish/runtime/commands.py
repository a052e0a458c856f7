"""
Executables and the command registry.

Everything a command name can resolve to implements ``Executable``:
built-in commands wrapping a Python callable, ensembles dispatching on
their first argument, and procedures defined by scripts.
"""

import bisect
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Optional, Tuple

from typing_extensions import Protocol

from . import values
from .values import Value, String
from ..frontend.scanner import Scanner
from ..frontend.words import WordType
from ..shared.errors import ArgumentCountError, TclError, UnsafeCommandError
from ..utils.config import MAX_ARITY, VARIADIC_PARAMETER

if TYPE_CHECKING:
    from .interpreter import Interpreter

logger = logging.getLogger(__name__)

BuiltinImpl = Callable[["Interpreter", List[Value]], Value]


class Executable(Protocol):
    name: str

    def execute(self, interp: "Interpreter", args: List[Value]) -> Value:
        ...

    def is_safe(self) -> bool:
        ...


# ---------------------------------------------------------------------------
# Built-in commands
# ---------------------------------------------------------------------------

@dataclass
class Builtin:
    """A command implemented in Python; ``max_args=None`` means unbounded."""
    name: str
    impl: BuiltinImpl
    min_args: int = 0
    max_args: Optional[int] = None
    safe: bool = True
    usage: str = ""
    help: str = ""

    def validate(self, supplied: int) -> None:
        if supplied < self.min_args or (self.max_args is not None and supplied > self.max_args):
            usage = f"{self.name} {self.usage}".rstrip()
            raise ArgumentCountError(f"wrong # args: should be \"{usage}\"")

    def execute(self, interp: "Interpreter", args: List[Value]) -> Value:
        self.validate(len(args))
        return self.impl(interp, args)

    def is_safe(self) -> bool:
        return self.safe


@dataclass
class Ensemble:
    """A command whose first argument selects a sub-command."""
    name: str
    commands: List[Builtin] = field(default_factory=list)
    help: str = ""

    def __post_init__(self):
        self.commands.sort(key=lambda c: c.name)

    @property
    def usage(self) -> str:
        return "subcommand ?arg ...?"

    def lookup(self, name: str) -> Optional[Builtin]:
        names = [c.name for c in self.commands]
        at = bisect.bisect_left(names, name)
        if at < len(names) and names[at] == name:
            return self.commands[at]
        return None

    def execute(self, interp: "Interpreter", args: List[Value]) -> Value:
        if not args:
            raise ArgumentCountError(
                f"wrong # args: should be \"{self.name} subcommand ?arg ...?\""
            )
        sub = self.lookup(str(args[0]))
        if sub is None:
            choices = ", ".join(c.name for c in self.commands)
            raise TclError(
                f"unknown or ambiguous subcommand \"{args[0]}\": must be {choices}"
            )
        if interp.is_safe and not sub.is_safe():
            raise UnsafeCommandError(f"{self.name} {sub.name}")
        try:
            sub.validate(len(args) - 1)
        except ArgumentCountError:
            usage = f"{self.name} {sub.name} {sub.usage}".rstrip()
            raise ArgumentCountError(f"wrong # args: should be \"{usage}\"") from None
        return sub.impl(interp, args[1:])

    def is_safe(self) -> bool:
        return any(c.is_safe() for c in self.commands)


# ---------------------------------------------------------------------------
# Procedures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Parameter:
    name: str
    default: Optional[str] = None


@dataclass
class Procedure:
    """A command defined with ``proc``."""
    name: str
    params: List[Parameter]
    body: str
    namespace: int = 0
    variadic: bool = False

    @property
    def usage(self) -> str:
        parts = []
        for p in self.params:
            parts.append(p.name if p.default is None else f"?{p.name}?")
        if self.variadic:
            parts.append("?arg ...?")
        return " ".join(parts)

    def execute(self, interp: "Interpreter", args: List[Value]) -> Value:
        return interp.call_procedure(self, args)

    def is_safe(self) -> bool:
        return True

    def bind(self, args: List[Value]) -> List[Tuple[str, Value]]:
        """Pair parameters with arguments, applying defaults and ``args``."""
        required = sum(1 for p in self.params if p.default is None)
        if len(args) < required or (not self.variadic and len(args) > len(self.params)):
            usage = f"{self.name} {self.usage}".rstrip()
            raise ArgumentCountError(f"wrong # args: should be \"{usage}\"")
        bindings: List[Tuple[str, Value]] = []
        for i, param in enumerate(self.params):
            if i < len(args):
                bindings.append((param.name, args[i]))
            else:
                bindings.append((param.name, String(param.default)))
        if self.variadic:
            bindings.append((VARIADIC_PARAMETER, values.List(tuple(args[len(self.params):]))))
        return bindings


def _parameter_with_default(text: str) -> Parameter:
    words = [w for w in Scanner(text, keep_blanks=False, comments=False) if not w.is_eol]
    if not words:
        raise TclError("argument with no name")
    if len(words) == 1:
        return Parameter(words[0].literal)
    return Parameter(words[0].literal, " ".join(w.literal for w in words[1:]))


def parse_parameters(spec: str) -> Tuple[List[Parameter], bool]:
    """
    Parse a ``proc`` argument specification.

    Each element is either a name or a ``{name default}`` pair. A trailing
    ``args`` makes the procedure variadic.
    """
    params: List[Parameter] = []
    seen = set()
    for word in Scanner(spec, keep_blanks=False, comments=False):
        if word.type is WordType.EOL:
            continue
        if word.type is WordType.BLOCK:
            param = _parameter_with_default(word.literal)
        elif word.type is WordType.LITERAL:
            param = Parameter(word.literal)
        else:
            raise TclError(f"invalid parameter specification \"{word.literal}\"")
        if not param.name:
            raise TclError("argument with no name")
        if param.name in seen:
            raise TclError(f"duplicate parameter \"{param.name}\"")
        seen.add(param.name)
        params.append(param)

    variadic = bool(params) and params[-1].name == VARIADIC_PARAMETER and params[-1].default is None
    if variadic:
        params.pop()
    if len(params) > MAX_ARITY:
        raise TclError(f"too many parameters: at most {MAX_ARITY} allowed")
    return params, variadic


@dataclass(frozen=True)
class ScriptAction:
    """A deferred script, run in the frame that registered it."""
    script: str
    name: str = "defer"

    def execute(self, interp: "Interpreter", args: List[Value]) -> Value:
        return interp.execute(self.script)

    def is_safe(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.script


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class CommandRegistry:
    """Name -> Executable table used to populate a new interpreter."""

    def __init__(self, commands: Optional[Dict[str, Executable]] = None):
        self.table: Dict[str, Executable] = dict(commands or {})

    def register(self, executable: Executable, name: Optional[str] = None) -> Executable:
        self.table[name or executable.name] = executable
        return executable

    def builtin(
        self,
        name: str,
        min_args: int = 0,
        max_args: Optional[int] = None,
        safe: bool = True,
        usage: str = "",
        help: str = "",
    ) -> Callable[[BuiltinImpl], BuiltinImpl]:
        """Decorator registering a Python function as a built-in command."""
        def decorator(impl: BuiltinImpl) -> BuiltinImpl:
            self.register(Builtin(name, impl, min_args, max_args, safe, usage, help))
            return impl
        return decorator

    def lookup(self, name: str) -> Optional[Executable]:
        return self.table.get(name)

    def copy(self) -> "CommandRegistry":
        return CommandRegistry(self.table)

    def items(self) -> Iterator[Tuple[str, Executable]]:
        return iter(sorted(self.table.items()))

    def __contains__(self, name: str) -> bool:
        return name in self.table

    def __len__(self) -> int:
        return len(self.table)
