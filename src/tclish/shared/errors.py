"""
Error Reporting

Exception taxonomy of the interpreter plus a diagnostic renderer that prints
script errors with a source snippet and a caret under the failing command.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional, List, Dict
from .source_location import SourceLocation
from ..utils.config import COLOR_ENV


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set or TCLISH_COLOR says so)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get(COLOR_ENV, "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return sys.stderr.isatty()

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


# ---------------------------------------------------------------------------
# Error dataclass
# ---------------------------------------------------------------------------

@dataclass
class Error:
    """One diagnostic ready to be rendered."""
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None
    note: Optional[str] = None
    label: Optional[str] = None


# ---------------------------------------------------------------------------
# Formatting engine
# ---------------------------------------------------------------------------

def _format_diagnostic(
    error: Error,
    source_files: Dict[str, str],
    color: bool = False,
) -> str:
    """
    Render a single diagnostic.

    Example output (plain, no color)::

        error[T0425]: can't read "y": no such variable
         --> main.tcl:2:1
          |
        2 | puts $y
          | ^^^^
    """
    out: List[str] = []

    code_str = f"[{error.code}]" if error.code else ""
    out.append(
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {error.message}", _BOLD, color=color)
    )

    if error.location is None:
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + "<unknown location>")
        _append_annotations(out, error, 1, color)
        return "\n".join(out)

    loc = error.location
    source = source_files.get(loc.file)
    if source is None:
        out.append(
            _style(" --> ", _BOLD, _BLUE, color=color)
            + f"{loc.file}:{loc.line}:{loc.column}"
        )
        _append_annotations(out, error, 1, color)
        return "\n".join(out)

    src_lines = source.split("\n")
    gw = max(len(str(loc.line)), 1)

    out.append(
        _style(" " * gw + "--> ", _BOLD, _BLUE, color=color)
        + f"{loc.file}:{loc.line}:{loc.column}"
    )
    out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))

    idx = loc.line - 1
    code_line = src_lines[idx] if 0 <= idx < len(src_lines) else ""
    out.append(_style(str(loc.line).rjust(gw) + " | ", _BOLD, _BLUE, color=color) + code_line)

    col_start = max(loc.column, 1) - 1
    if loc.end_column > loc.column and loc.end_line in (0, loc.line):
        span_len = loc.end_column - loc.column
    else:
        span_len = _guess_span(code_line, col_start)
    carets = " " * col_start + "^" * max(1, span_len)
    label_suffix = f" {error.label}" if error.label else ""
    out.append(
        _style(" " * (gw + 1) + "| ", _BOLD, _BLUE, color=color)
        + _style(carets + label_suffix, _BOLD, _RED, color=color)
    )

    _append_annotations(out, error, gw, color)
    return "\n".join(out)


def _guess_span(code_line: str, col_start: int) -> int:
    """Guess word length when end_column is unavailable."""
    if col_start >= len(code_line):
        return 1
    length = 0
    for ch in code_line[col_start:]:
        if ch in (" ", "\t", ";", "]", "}"):
            break
        length += 1
    return max(1, length)


def _append_annotations(
    out: List[str],
    error: Error,
    gw: int,
    color: bool,
) -> None:
    if not (error.help or error.note):
        return
    out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))
    pad = " " * (gw + 1)
    if error.help:
        out.append(
            _style(f"{pad}= ", _BOLD, _CYAN, color=color)
            + _style("help: ", _BOLD, color=color)
            + error.help
        )
    if error.note:
        out.append(
            _style(f"{pad}= ", _BOLD, _CYAN, color=color)
            + _style("note: ", _BOLD, color=color)
            + error.note
        )


# ---------------------------------------------------------------------------
# ErrorReporter
# ---------------------------------------------------------------------------

class ErrorReporter:
    """Collects diagnostics and renders them against the known sources."""

    def __init__(self, source_files: Dict[str, str]):
        self.source_files = source_files
        self.errors: List[Error] = []

    def report_error(
        self,
        message: str,
        location: Optional[SourceLocation],
        code: Optional[str] = None,
        help: Optional[str] = None,
        note: Optional[str] = None,
        label: Optional[str] = None,
    ) -> None:
        self.errors.append(Error(
            message=message,
            location=location,
            code=code,
            help=help,
            note=note,
            label=label,
        ))

    def report_exception(self, exc: "TclError") -> None:
        """Record a raised TclError as a diagnostic."""
        self.report_error(
            exc.message,
            exc.location,
            code=exc.code,
            help=exc.help,
            note=exc.command and f"while executing \"{exc.command}\"",
        )

    def format_error(self, error: Error, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        return _format_diagnostic(error, self.source_files, color=use_color)

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        return "\n\n".join(self.format_error(e, color=color) for e in self.errors)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def print_errors(self) -> None:
        color = _use_color()
        for error in self.errors:
            print(self.format_error(error, color=color), file=sys.stderr)


# ============================================================================
# Exception Classes
# ============================================================================

class TclError(Exception):
    """Base exception for all script-level errors"""
    code = "T0001"

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        help: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.location = location
        self.help = help
        self.command: Optional[str] = None

    def __str__(self):
        return self.message


class TclSyntaxError(TclError):
    """Illegal word: unterminated quote/brace/bracket, malformed number."""
    code = "T0002"


class IncompleteScriptError(TclSyntaxError):
    """Input ended inside an open quote, brace or bracket."""
    code = "T0003"


class UndefinedVariableError(TclError):
    code = "T0425"

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        super().__init__(f"can't read \"{name}\": no such variable", location)
        self.name = name


class UndefinedCommandError(TclError):
    code = "T0423"

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        super().__init__(f"invalid command name \"{name}\"", location)
        self.name = name


class UndefinedNamespaceError(TclError):
    code = "T0433"

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        super().__init__(f"namespace \"{name}\" not found", location)
        self.name = name


class TclTypeError(TclError):
    """Operator applied to operands of incompatible types."""
    code = "T0308"


class CastError(TclTypeError):
    """Value can not be coerced to the requested representation."""
    code = "T0605"


class UnsupportedOperationError(TclTypeError):
    code = "T0369"

    def __init__(self, op: str, type_name: str, location: Optional[SourceLocation] = None):
        super().__init__(f"{op}: unsupported operation on {type_name} type", location)
        self.op = op
        self.type_name = type_name


class DivisionByZeroError(TclError):
    code = "T0080"

    def __init__(self, location: Optional[SourceLocation] = None):
        super().__init__("divide by zero", location)


class ArgumentCountError(TclError):
    code = "T0061"


class UnsafeCommandError(TclError):
    code = "T0133"

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        super().__init__(
            f"command {name}: can not be executed in safe interpreter",
            location,
        )
        self.name = name


class LinkScopeError(TclError):
    """Invalid upvar/global level."""
    code = "T0716"


class TclImplementationError(Exception):
    """
    Error in the Python implementation itself (not in the user's script).

    Never use this for errors in script code - use a TclError subclass instead.
    """
    def __init__(self, message: str, error_code: str = "T9999"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        return f"[{self.error_code}] {self.message}"
