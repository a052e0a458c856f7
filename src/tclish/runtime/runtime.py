"""
Runtime

Thin facade over an Interpreter: builds it from a command registry, runs
scripts and turns their outcome (value, error or exit request) into an
ExecutionResult. This is the only layer that converts raised errors into
data.
"""

import logging
from typing import List, Optional, Sequence

from .commands import CommandRegistry
from .interpreter import Interpreter
from .signals import ExitSignal
from .values import Value
from ..shared.errors import TclError
from ..utils.config import DEFAULT_SCRIPT_NAME

logger = logging.getLogger(__name__)


class ExecutionResult:
    """
    Outcome of running one script.

    ``exit_code`` is set when the script called ``exit``.
    """
    def __init__(
        self,
        value: Optional[Value] = None,
        error: Optional[TclError] = None,
        exit_code: Optional[int] = None,
    ):
        self.value = value
        self.error = error
        self.exit_code = exit_code

    @property
    def success(self) -> bool:
        """Whether execution succeeded (no error)"""
        return self.error is None

    @property
    def exited(self) -> bool:
        return self.exit_code is not None

    @property
    def errors(self) -> List[str]:
        if self.error:
            return [str(self.error)]
        return []

    def __str__(self) -> str:
        return "" if self.value is None else str(self.value)


class TclishRuntime:
    """
    Owns one root interpreter for the lifetime of a session (a script run
    or a REPL), so definitions persist between ``execute`` calls.
    """

    def __init__(
        self,
        registry: Optional[CommandRegistry] = None,
        argv: Sequence[str] = (),
        script_name: str = "",
    ):
        if registry is None:
            from ..stdlib import default_registry
            registry = default_registry()
        self.interpreter = Interpreter(registry, argv=argv, script_name=script_name)
        self.closed = False

    def execute(self, source: str, filename: str = DEFAULT_SCRIPT_NAME) -> ExecutionResult:
        try:
            value = self.interpreter.run(source, filename)
        except ExitSignal as signal:
            logger.debug(f"Script requested exit with code {signal.code}")
            return ExecutionResult(exit_code=self.shutdown(signal.code))
        except TclError as e:
            return ExecutionResult(error=e)
        return ExecutionResult(value=value)

    def shutdown(self, code: int = 0) -> int:
        """Close the interpreter; a failing deferred action turns the exit code into 1."""
        try:
            self.close()
        except TclError as e:
            logger.warning(f"Error while running deferred actions at exit: {e}")
            return 1
        return code

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.interpreter.close()
