"""
Pytest configuration and shared fixtures for all tclish tests.

Interpreters are cheap to build, so most fixtures are function-scoped; the
session-scoped registry is shared because registries are only read when an
interpreter is constructed.
"""

import sys
import pytest
from typing import Optional
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))
from tclish.runtime.interpreter import Interpreter
from tclish.runtime.runtime import TclishRuntime
from tclish.stdlib import default_registry


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_registry():
    """
    Session-scoped default registry.

    Interpreters install the registry's executables into their own namespace
    tree, so sharing the registry never leaks state between tests.
    """
    return default_registry()


# =============================================================================
# Class-scoped fixtures (shared within a test class)
# =============================================================================

@pytest.fixture(scope="class")
def class_runtime(session_registry):
    """Class-scoped runtime for read-only checks that may share globals."""
    runtime = TclishRuntime(session_registry)
    yield runtime
    runtime.close()


# =============================================================================
# Function-scoped fixtures (default - one per test)
# =============================================================================

@pytest.fixture
def interp(session_registry):
    """Fresh root interpreter with the standard command set."""
    interpreter = Interpreter(session_registry)
    yield interpreter
    interpreter.close()


@pytest.fixture
def runtime(session_registry):
    """Fresh runtime; definitions made by one test never reach another."""
    runtime = TclishRuntime(session_registry)
    yield runtime
    runtime.close()


# =============================================================================
# Helper fixtures
# =============================================================================

@pytest.fixture
def run_script(runtime):
    """
    Factory fixture returning ``run(source) -> tests.test_utils.ExecutionResult``
    bound to the test's runtime.
    """
    from tests.test_utils import run_script as _run_script

    def _run(source: str, source_file: Optional[str] = None):
        return _run_script(source, runtime, source_file=source_file)

    return _run


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "fast: marks tests as fast"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
