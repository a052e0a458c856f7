"""
Interpreter

Owns the frame stack, the namespace tree, the file table and the tree of
child interpreters, and exposes the resolve/execute capability the command
builder and the expression evaluator run against.

Frames are kept in a list indexed by depth; index 0 is the base frame bound
to the root namespace's environment. A Link stores the absolute index of
the frame it aliases, so ``uplevel`` truncates the list and puts it back
afterwards instead of copying environments around.
"""

import bisect
import logging
import re
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, Tuple

from .commands import CommandRegistry, Executable, Procedure, parse_parameters
from .environment import Environment
from .files import FileTable
from .frame import Frame
from .namespace import NamespaceTree, ROOT, split_qualified
from .signals import BreakSignal, ContinueSignal, ReturnSignal
from .values import Value, String, Link, Array, Binding, list_of
from ..frontend.builder import Builder, Command
from ..shared.errors import (
    TclError, TclSyntaxError, UndefinedVariableError, UndefinedCommandError,
    UnsafeCommandError, LinkScopeError,
)
from ..utils.config import (
    VERSION, DEFAULT_SCRIPT_NAME, NAMESPACE_SEPARATOR, GLOBAL_LEVEL_PREFIX,
    MAX_NESTING_DEPTH, VAR_VERSION, VAR_DEPTH, VAR_COMMAND,
    VAR_ARGV0, VAR_ARGV, VAR_ARGC, READONLY_VARIABLES, SPECIAL_VARIABLES,
)

logger = logging.getLogger(__name__)

_ELEMENT_REFERENCE = re.compile(r"(.+?)\((.*)\)", re.DOTALL)


def split_element(name: str) -> Tuple[str, Optional[str]]:
    """``arr(key)`` -> ``("arr", "key")``; a plain name has no key."""
    match = _ELEMENT_REFERENCE.fullmatch(name)
    if match is None:
        return name, None
    return match.group(1), match.group(2)


def _loop_escape(signal: Exception) -> TclError:
    keyword = "break" if isinstance(signal, BreakSignal) else "continue"
    return TclError(f"invoked \"{keyword}\" outside of a loop")


def _nesting_error() -> TclError:
    return TclError("too many nested evaluations (infinite loop?)")


class Interpreter:
    """
    One interpreter instance.

    Usage:
        interp = Interpreter(default_registry())
        interp.run("proc add {a b} { expr {$a + $b} }; add 2 3")
    """

    def __init__(
        self,
        registry: Optional[CommandRegistry] = None,
        name: str = "",
        safe: bool = False,
        parent: Optional["Interpreter"] = None,
        argv: Sequence[str] = (),
        script_name: str = "",
    ):
        self.name = name
        self.safe = safe
        self.parent = parent
        self.registry = registry if registry is not None else CommandRegistry()
        self.namespaces = NamespaceTree()
        self.frames: List[Frame] = [Frame(self.namespaces.root.env, ROOT)]
        self.last: Value = String("")
        self.last_error: Optional[TclError] = None
        self.count = 0
        self.files = FileTable()
        # (name, interpreter) pairs sorted by name
        self.children: List[Tuple[str, "Interpreter"]] = []
        self._nesting = 0

        for command_name, executable in self.registry.items():
            self.install(command_name, executable)

        root_env = self.namespaces.root.env
        root_env.bind(VAR_ARGV0, String(script_name))
        root_env.bind(VAR_ARGV, list_of(argv))
        root_env.bind(VAR_ARGC, String(str(len(argv))))

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def frame(self) -> Frame:
        return self.frames[-1]

    @property
    def level(self) -> int:
        return len(self.frames) - 1

    @property
    def current_namespace(self) -> int:
        return self.frame.namespace

    @property
    def is_safe(self) -> bool:
        """Safety restrictions apply to safe children, never to a root interpreter."""
        return self.safe and self.parent is not None

    # ------------------------------------------------------------------
    # Variables
    # ------------------------------------------------------------------

    def _special(self, name: str) -> Optional[Value]:
        if name == VAR_VERSION:
            return String(VERSION)
        if name == VAR_DEPTH:
            return String(str(self.level))
        if name == VAR_COMMAND:
            return String(str(self.count))
        return None

    def _check_writable(self, name: str) -> None:
        _, tail = split_qualified(name)
        if tail in SPECIAL_VARIABLES:
            raise TclError(f"can't modify \"{name}\": variable is read-only")

    def _target(
        self, name: str, fallback: bool = False,
    ) -> Tuple[Environment, str, Optional[str]]:
        """
        Environment, variable name and array key a reference ends up at
        after following namespace qualifiers and links. A link may itself
        point at an array element. With ``fallback`` an unqualified name
        missing from the frame is looked up in the namespace the frame
        runs in.
        """
        reference = name
        name, key = split_element(name)
        env = self.frame.env
        hops = 0
        while True:
            if NAMESPACE_SEPARATOR in name:
                path, name = split_qualified(name)
                index = self.namespaces.require(path, self.current_namespace)
                env = self.namespaces.get(index).env
            owner = env.owner(name)
            if owner is None and fallback and env is self.frame.env:
                namespace_env = self.namespaces.get(self.current_namespace).env
                if namespace_env.exists(name):
                    env, owner = namespace_env, namespace_env.owner(name)
            binding = owner.values[name] if owner is not None else None
            if not isinstance(binding, Link):
                return env, name, key
            hops += 1
            if hops > len(self.frames) or binding.level >= len(self.frames):
                raise TclError(f"can't access \"{binding.name}\": variable link is broken")
            env = self.frames[binding.level].env
            name, linked_key = split_element(binding.name)
            if linked_key is not None:
                if key is not None:
                    raise TclError(f"can't access \"{reference}\": variable isn't array")
                key = linked_key

    def resolve(self, name: str) -> Value:
        special = self._special(name)
        if special is not None:
            return special
        env, target, key = self._target(name, fallback=True)
        owner = env.owner(target)
        if owner is None:
            raise UndefinedVariableError(name)
        value = owner.values[target]
        if key is None:
            return value
        array = value.to_array()
        if key not in array:
            raise TclError(f"can't read \"{name}\": no such element in array")
        return array.get(key)

    def exists(self, name: str) -> bool:
        if name in READONLY_VARIABLES:
            return True
        env, target, key = self._target(name, fallback=True)
        owner = env.owner(target)
        if owner is None:
            return False
        if key is None:
            return True
        value = owner.values[target]
        return isinstance(value, Array) and key in value

    def define(self, name: str, value: Value) -> Value:
        self._check_writable(split_element(name)[0])
        env, target, key = self._target(name)
        if key is None:
            env.define(target, value)
            return value
        owner = env.owner(target)
        current = owner.values[target] if owner is not None else Array({})
        env.define(target, current.to_array().with_item(key, value))
        return value

    def delete(self, name: str) -> None:
        self._check_writable(split_element(name)[0])
        env, target, key = self._target(name)
        if key is None:
            try:
                env.delete(target)
            except UndefinedVariableError:
                raise TclError(f"can't unset \"{name}\": no such variable") from None
            return
        try:
            array = env.resolve(target).to_array()
        except UndefinedVariableError:
            raise TclError(f"can't unset \"{name}\": no such variable") from None
        if key not in array:
            raise TclError(f"can't unset \"{name}\": no such element in array")
        env.define(target, array.without(key))

    def variable_names(self) -> List[str]:
        """Names visible in the current frame, without special variables."""
        names = self.frame.env.all_names()
        namespace_env = self.namespaces.get(self.current_namespace).env
        if namespace_env is not self.frame.env:
            names += [n for n in namespace_env.all_names() if n not in names]
        return names

    # ------------------------------------------------------------------
    # Links and levels
    # ------------------------------------------------------------------

    def parse_level(self, text: str) -> int:
        """Absolute frame index for ``#N`` (absolute) or ``N`` (relative)."""
        absolute = text.startswith(GLOBAL_LEVEL_PREFIX)
        digits = text[1:] if absolute else text
        if not digits.isdigit():
            raise LinkScopeError(f"bad level \"{text}\"")
        level = int(digits) if absolute else self.level - int(digits)
        if not 0 <= level <= self.level:
            raise LinkScopeError(f"bad level \"{text}\"")
        return level

    @staticmethod
    def is_level(text: str) -> bool:
        digits = text[1:] if text.startswith(GLOBAL_LEVEL_PREFIX) else text
        return digits.isdigit()

    def link(self, source: str, alias: str, level: int) -> None:
        """Make ``alias`` in the current frame refer to ``source`` in frame ``level``."""
        if self.level == 0:
            raise LinkScopeError("cannot link variables at global level")
        if not 0 <= level <= self.level:
            raise LinkScopeError(f"bad level \"{level}\"")
        if level == self.level and source == alias:
            raise LinkScopeError("can't upvar from variable to itself")
        existing: Optional[Binding] = self.frame.env.values.get(alias)
        if existing is not None and not isinstance(existing, Link):
            raise LinkScopeError(f"variable \"{alias}\" already exists")
        self.frame.env.bind(alias, Link(source, level))
        logger.debug(f"Linked {alias} (frame {self.level}) to {source} (frame {level})")

    @contextmanager
    def at_level(self, level: int) -> Iterator[Frame]:
        """Run the body with the frame stack cut back to ``level``."""
        saved = self.frames
        self.frames = saved[:level + 1]
        try:
            yield self.frame
        finally:
            self.frames = saved

    def uplevel(self, level: int, script: str) -> Value:
        with self.at_level(level):
            return self.execute(script)

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    @contextmanager
    def push_frame(
        self,
        env: Environment,
        namespace: int,
        command: Optional[List[str]] = None,
    ) -> Iterator[Frame]:
        """Push a frame; its deferred actions run when the body exits, however it exits."""
        if len(self.frames) > MAX_NESTING_DEPTH:
            raise _nesting_error()
        frame = Frame(env, namespace, command)
        self.frames.append(frame)
        logger.debug(f"Pushed frame {self.level} in {self.namespaces.qualified_name(namespace)}")
        try:
            yield frame
        finally:
            try:
                self.run_deferred(frame)
            finally:
                self.frames.pop()
                logger.debug(f"Popped frame {self.level + 1}")

    def defer(self, action: Executable) -> None:
        self.frame.deferred.append(action)

    def run_deferred(self, frame: Frame) -> None:
        """
        Run ``frame``'s deferred actions, last registered first. Every
        action runs; if any failed, the last failure is raised afterwards.
        Otherwise the interpreter's last result is left as it was.

        A ``return`` inside an action only ends that action and its value
        is discarded; ``break`` and ``continue`` count as failures.
        """
        last = self.last
        error: Optional[TclError] = None
        while frame.deferred:
            action = frame.deferred.pop()
            try:
                action.execute(self, [])
            except ReturnSignal:
                logger.debug("Deferred action returned early")
            except (BreakSignal, ContinueSignal) as signal:
                error = _loop_escape(signal)
                logger.debug(f"Deferred action failed: {error}")
            except TclError as e:
                logger.debug(f"Deferred action failed: {e}")
                error = e
        if error is not None:
            raise error
        self.last = last

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def install(self, name: str, executable: Executable) -> None:
        """Register a command; a qualified name creates its namespaces."""
        path, tail = split_qualified(name)
        index = self.namespaces.ensure(path, self.current_namespace) if path else self.current_namespace
        self.namespaces.get(index).commands[tail] = executable

    def _command_home(self, name: str) -> Optional[Tuple[int, str]]:
        """Namespace holding command ``name`` and its unqualified name."""
        path, tail = split_qualified(name)
        if not path:
            for index in self.namespaces.ancestors(self.current_namespace):
                if tail in self.namespaces.get(index).commands:
                    return index, tail
            return None
        index = self.namespaces.lookup(path, self.current_namespace)
        if index is None or tail not in self.namespaces.get(index).commands:
            return None
        return index, tail

    def lookup_command(self, name: str) -> Optional[Executable]:
        home = self._command_home(name)
        if home is None:
            return None
        index, tail = home
        return self.namespaces.get(index).commands[tail]

    def rename_command(self, old: str, new: str) -> None:
        home = self._command_home(old)
        if home is None:
            raise TclError(f"can't rename \"{old}\": command doesn't exist")
        if new and self.lookup_command(new) is not None:
            raise TclError(f"can't rename to \"{new}\": command already exists")
        index, tail = home
        executable = self.namespaces.get(index).commands.pop(tail)
        if new:
            self.install(new, executable)

    def command_names(self, procedures_only: bool = False) -> List[str]:
        """Commands visible from the current namespace."""
        names = set()
        for index in self.namespaces.ancestors(self.current_namespace):
            for name, executable in self.namespaces.get(index).commands.items():
                if not procedures_only or isinstance(executable, Procedure):
                    names.add(name)
        return sorted(names)

    def define_procedure(self, name: str, params: str, body: str) -> Procedure:
        path, tail = split_qualified(name)
        index = self.namespaces.ensure(path, self.current_namespace) if path else self.current_namespace
        parameters, variadic = parse_parameters(params)
        procedure = Procedure(name, parameters, body, index, variadic)
        self.namespaces.get(index).commands[tail] = procedure
        logger.debug(f"Registered procedure {name} ({len(parameters)} parameter(s))")
        return procedure

    def procedure(self, name: str) -> Procedure:
        executable = self.lookup_command(name)
        if not isinstance(executable, Procedure):
            raise TclError(f"\"{name}\" isn't a procedure")
        return executable

    def _unknown_handler(self) -> Optional[List[str]]:
        for index in self.namespaces.ancestors(self.current_namespace):
            handler = self.namespaces.get(index).unknown
            if handler:
                return handler
        return None

    def dispatch(self, command: Command) -> Value:
        """Execute one built command in the current frame."""
        self.count += 1
        name, args = command.name, command.args
        executable = self.lookup_command(name)
        if executable is None:
            handler = self._unknown_handler()
            executable = self.lookup_command(handler[0]) if handler else None
            if executable is None:
                raise UndefinedCommandError(name)
            args = [*map(String, handler[1:]), String(name), *args]
            name = handler[0]
        if self.is_safe and not executable.is_safe():
            raise UnsafeCommandError(name)
        logger.debug(f"Dispatching {name} with {len(args)} argument(s)")
        result = executable.execute(self, args)
        self.last = result
        return result

    def call_procedure(self, procedure: Procedure, args: List[Value]) -> Value:
        if not self.namespaces.is_alive(procedure.namespace):
            raise TclError(f"can't invoke \"{procedure.name}\": its namespace has been deleted")
        env = Environment()
        for name, value in procedure.bind(args):
            env.bind(name, value)
        invocation = [procedure.name, *map(str, args)]
        with self.push_frame(env, procedure.namespace, invocation):
            return self.evaluate(procedure.body)

    # ------------------------------------------------------------------
    # Scripts
    # ------------------------------------------------------------------

    def execute(self, script: str) -> Value:
        """Run a nested script in the current frame; result of its last command."""
        if self._nesting >= MAX_NESTING_DEPTH:
            raise _nesting_error()
        self._nesting += 1
        try:
            result: Value = String("")
            for command in Builder(script, self):
                result = self.dispatch(command)
            return result
        except RecursionError:
            # the host stack ran out before MAX_NESTING_DEPTH was reached
            raise _nesting_error() from None
        finally:
            self._nesting -= 1

    def evaluate(self, script: str) -> Value:
        """Run a script as a unit: ``return`` ends it, loop signals may not escape it."""
        try:
            return self.execute(script)
        except ReturnSignal as signal:
            return signal.value
        except (BreakSignal, ContinueSignal) as signal:
            raise _loop_escape(signal) from None

    def run(self, script: str, filename: str = DEFAULT_SCRIPT_NAME) -> Value:
        """
        Run a top-level script. Errors get the location of the top-level
        command being built or executed when they carry none, and are kept
        in ``last_error`` before being re-raised.
        """
        builder = Builder(script, self, filename)
        command: Optional[Command] = None
        result: Value = String("")
        try:
            for command in builder:
                result = self.dispatch(command)
        except ReturnSignal as signal:
            result = signal.value
        except (BreakSignal, ContinueSignal) as signal:
            error = _loop_escape(signal)
            self._annotate(error, builder, command)
            raise error from None
        except RecursionError:
            error = _nesting_error()
            self._annotate(error, builder, command)
            raise error from None
        except TclError as error:
            self._annotate(error, builder, command)
            raise
        self.last = result
        return result

    def _annotate(self, error: TclError, builder: Builder, command: Optional[Command]) -> None:
        self.last_error = error
        if builder.location is None or isinstance(error, TclSyntaxError):
            return
        if error.location is None:
            error.location = builder.location
        # a failure while substituting has no command text yet
        if error.command is None and command is not None and command.location is builder.location:
            error.command = str(command)

    def eval_in_namespace(self, path: str, script: str) -> Value:
        """Run ``script`` in namespace ``path``, creating it if needed."""
        index = self.namespaces.ensure(path, self.current_namespace)
        env = self.namespaces.get(index).env
        with self.push_frame(env, index, ["namespace", "eval", path]):
            return self.execute(script)

    # ------------------------------------------------------------------
    # Child interpreters
    # ------------------------------------------------------------------

    def _child_index(self, name: str) -> int:
        names = [n for n, _ in self.children]
        at = bisect.bisect_left(names, name)
        if at < len(names) and names[at] == name:
            return at
        return -1

    def lookup_interpreter(self, path: Sequence[str]) -> "Interpreter":
        interp = self
        for name in path:
            at = interp._child_index(name)
            if at < 0:
                raise TclError(f"could not find interpreter \"{' '.join(path)}\"")
            interp = interp.children[at][1]
        return interp

    def create_interpreter(self, path: Sequence[str], safe: bool = False) -> "Interpreter":
        if not path:
            raise TclError("interpreter path is empty")
        owner = self.lookup_interpreter(path[:-1])
        name = path[-1]
        if owner._child_index(name) >= 0:
            raise TclError(f"interpreter named \"{' '.join(path)}\" already exists")
        child = Interpreter(
            owner.registry.copy(),
            name=name,
            safe=safe or owner.is_safe,
            parent=owner,
        )
        bisect.insort(owner.children, (name, child), key=lambda item: item[0])
        logger.debug(f"Created {'safe ' if child.safe else ''}interpreter {' '.join(path)}")
        return child

    def delete_interpreter(self, path: Sequence[str]) -> None:
        if not path:
            raise TclError("can not delete the current interpreter")
        owner = self.lookup_interpreter(path[:-1])
        at = owner._child_index(path[-1])
        if at < 0:
            raise TclError(f"could not find interpreter \"{' '.join(path)}\"")
        _, child = owner.children.pop(at)
        child.close()
        logger.debug(f"Deleted interpreter {' '.join(path)}")

    def child_names(self) -> List[str]:
        return [name for name, _ in self.children]

    # ------------------------------------------------------------------

    def close(self) -> None:
        """Run the base frame's deferred actions and release resources."""
        try:
            self.run_deferred(self.frames[0])
        finally:
            for _, child in self.children:
                child.close()
            self.children = []
            self.files.close_all()
