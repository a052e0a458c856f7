"""
tclish: an interpreter for a Tcl-like command language.

    from tclish import TclishRuntime
    result = TclishRuntime().execute("proc add {a b} { expr {$a + $b} }; add 2 3")
    print(result.value)   # 5
"""

from .utils.config import VERSION as __version__
from .runtime.runtime import TclishRuntime, ExecutionResult
from .runtime.interpreter import Interpreter
from .stdlib import default_registry

__all__ = ["TclishRuntime", "ExecutionResult", "Interpreter", "default_registry", "__version__"]
