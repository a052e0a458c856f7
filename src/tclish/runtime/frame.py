"""
Call frames.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .environment import Environment


@dataclass
class Frame:
    """
    One activation: a variable scope, the namespace commands resolve in,
    the command being executed (for ``info level``) and the actions
    registered with ``defer``, run LIFO when the frame is popped.
    """
    env: Environment
    namespace: int
    command: Optional[List[str]] = None
    deferred: List[object] = field(default_factory=list)
