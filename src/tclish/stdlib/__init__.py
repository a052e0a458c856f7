"""
Standard command set.

``default_registry()`` builds a fresh CommandRegistry holding every
built-in command; each interpreter gets its own registry instance.
"""

from ..runtime.commands import CommandRegistry
from . import (
    arrays, control, core, info, interps, io, lists, mathop, namespaces,
    procs, strings, system,
)

_MODULES = (
    core, control, procs, lists, strings, arrays, namespaces, interps,
    info, io, system, mathop,
)


def default_registry() -> CommandRegistry:
    registry = CommandRegistry()
    for module in _MODULES:
        module.register(registry)
    return registry


__all__ = ["default_registry"]
