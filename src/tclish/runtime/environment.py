"""
Execution Environment

A chain of variable scopes. Reads walk from the innermost scope outward;
``define`` of a name that is already bound somewhere in the chain rewrites
it in the scope that owns it, otherwise the binding is created innermost.
"""

from typing import Dict, List, Optional

from .values import Binding
from ..shared.errors import UndefinedVariableError


class Environment:
    """
    One scope of variables, linked to an optional parent.

    - resolve(name): lookup from this scope outward
    - define(name, value): rewrite in the owning scope, else bind here
    - delete(name): remove from the owning scope
    - bind(name, value): bind in this scope regardless of parents
    """
    values: Dict[str, Binding]

    def __init__(self, parent: Optional["Environment"] = None):
        self.parent = parent
        self.values = {}

    def enclosed(self) -> "Environment":
        """New child scope of this one."""
        return Environment(self)

    def owner(self, name: str) -> Optional["Environment"]:
        """Innermost scope of the chain that binds ``name``."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env
            env = env.parent
        return None

    def exists(self, name: str) -> bool:
        return self.owner(name) is not None

    def resolve(self, name: str) -> Binding:
        env = self.owner(name)
        if env is None:
            raise UndefinedVariableError(name)
        return env.values[name]

    def define(self, name: str, value: Binding) -> None:
        env = self.owner(name)
        if env is None:
            env = self
        env.values[name] = value

    def bind(self, name: str, value: Binding) -> None:
        self.values[name] = value

    def delete(self, name: str) -> None:
        env = self.owner(name)
        if env is None:
            raise UndefinedVariableError(name)
        del env.values[name]

    def local_names(self) -> List[str]:
        return list(self.values)

    def all_names(self) -> List[str]:
        """Visible names, innermost first, without duplicates."""
        seen: Dict[str, None] = {}
        env: Optional[Environment] = self
        while env is not None:
            for name in env.values:
                seen.setdefault(name, None)
            env = env.parent
        return list(seen)
