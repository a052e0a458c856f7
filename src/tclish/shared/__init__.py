"""
Shared components: source locations and the error taxonomy.
"""

from .source_location import SourceLocation
from .errors import (
    Error, ErrorReporter,
    TclError, TclSyntaxError, IncompleteScriptError,
    UndefinedVariableError, UndefinedCommandError, UndefinedNamespaceError,
    TclTypeError, CastError, UnsupportedOperationError,
    DivisionByZeroError, ArgumentCountError, UnsafeCommandError,
    LinkScopeError, TclImplementationError,
)
