"""
Namespace tree.

Namespaces live in an arena (a list indexed by integer id) so parent links
are plain indices; index 0 is the root namespace ``::``. Each namespace owns
its commands, a standalone variable scope, a sorted child list and an
optional ``unknown`` handler prefix.
"""

import bisect
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .environment import Environment
from ..shared.errors import TclError, TclImplementationError, UndefinedNamespaceError
from ..utils.config import NAMESPACE_SEPARATOR, ROOT_NAMESPACE

logger = logging.getLogger(__name__)

ROOT = 0


@dataclass
class Namespace:
    name: str
    parent: Optional[int]
    env: Environment = field(default_factory=Environment)
    commands: Dict[str, object] = field(default_factory=dict)
    # (name, index) pairs sorted by name
    children: List[Tuple[str, int]] = field(default_factory=list)
    unknown: Optional[List[str]] = None

    @property
    def is_root(self) -> bool:
        return self.parent is None


def split_qualified(name: str) -> Tuple[str, str]:
    """
    Split ``a::b::cmd`` into the namespace path and the tail.

    >>> split_qualified("a::b::cmd")
    ('a::b', 'cmd')
    >>> split_qualified("::cmd")
    ('::', 'cmd')
    >>> split_qualified("cmd")
    ('', 'cmd')
    """
    path, sep, tail = name.rpartition(NAMESPACE_SEPARATOR)
    if not sep:
        return "", name
    if not path:
        return ROOT_NAMESPACE, tail
    return path, tail


def _segments(path: str) -> Tuple[bool, List[str]]:
    """Whether the path is anchored at the root, and its non-empty parts."""
    anchored = path.startswith(NAMESPACE_SEPARATOR)
    parts = [p for p in path.split(NAMESPACE_SEPARATOR) if p]
    return anchored, parts


class NamespaceTree:
    """Arena of namespaces rooted at ``::``."""

    def __init__(self):
        self.nodes: List[Optional[Namespace]] = [Namespace("", None)]

    def get(self, index: int) -> Namespace:
        ns = self.nodes[index]
        if ns is None:
            raise TclImplementationError(f"namespace #{index} has been deleted")
        return ns

    def is_alive(self, index: int) -> bool:
        return 0 <= index < len(self.nodes) and self.nodes[index] is not None

    @property
    def root(self) -> Namespace:
        return self.nodes[ROOT]

    def child(self, index: int, name: str) -> Optional[int]:
        children = self.get(index).children
        at = bisect.bisect_left(children, (name, -1))
        if at < len(children) and children[at][0] == name:
            return children[at][1]
        return None

    def create(self, parent: int, name: str) -> int:
        """Create ``name`` under ``parent``; an existing child is returned."""
        existing = self.child(parent, name)
        if existing is not None:
            return existing
        index = len(self.nodes)
        self.nodes.append(Namespace(name, parent))
        bisect.insort(self.get(parent).children, (name, index))
        logger.debug(f"Created namespace {self.qualified_name(index)}")
        return index

    def delete(self, index: int) -> None:
        if index == ROOT:
            raise TclError("can not delete the global namespace")
        ns = self.get(index)
        for _, child in list(ns.children):
            self.delete(child)
        siblings = self.get(ns.parent).children
        siblings.remove((ns.name, index))
        self.nodes[index] = None
        logger.debug(f"Deleted namespace {ns.name}")

    def walk(self, start: int, parts: List[str]) -> Optional[int]:
        index: Optional[int] = start
        for part in parts:
            index = self.child(index, part)
            if index is None:
                return None
        return index

    def lookup(self, path: str, current: int = ROOT) -> Optional[int]:
        """
        Resolve a namespace path. ``::a::b`` is anchored at the root; a
        relative path is tried from ``current`` first, then from the root.
        """
        anchored, parts = _segments(path)
        if anchored or current == ROOT:
            return self.walk(ROOT, parts)
        found = self.walk(current, parts)
        if found is None:
            found = self.walk(ROOT, parts)
        return found

    def require(self, path: str, current: int = ROOT) -> int:
        index = self.lookup(path, current)
        if index is None:
            raise UndefinedNamespaceError(path)
        return index

    def ensure(self, path: str, current: int = ROOT) -> int:
        """Resolve a path, creating missing namespaces (intermediates too)."""
        found = self.lookup(path, current)
        if found is not None:
            return found
        anchored, parts = _segments(path)
        index = ROOT if anchored else current
        for part in parts:
            index = self.create(index, part)
        return index

    def ancestors(self, index: int) -> Iterator[int]:
        """``index`` and each of its parents up to the root."""
        node: Optional[int] = index
        while node is not None:
            yield node
            node = self.get(node).parent

    def qualified_name(self, index: int) -> str:
        names = [self.get(i).name for i in self.ancestors(index)][:-1]
        return ROOT_NAMESPACE + NAMESPACE_SEPARATOR.join(reversed(names))

    def children_of(self, index: int) -> List[int]:
        return [child for _, child in self.get(index).children]
