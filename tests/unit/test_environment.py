#!/usr/bin/env python3
"""
Tests for Environment scope chains and the namespace tree.
"""

import pytest
from tclish.runtime.environment import Environment
from tclish.runtime.namespace import NamespaceTree, ROOT, split_qualified
from tclish.runtime.values import String
from tclish.shared.errors import (
    TclError, TclImplementationError, UndefinedNamespaceError, UndefinedVariableError,
)


class TestEnvironment:
    """Scope chain semantics"""

    def test_resolve_walks_outward(self):
        outer = Environment()
        outer.define("x", String("1"))
        inner = outer.enclosed()
        assert inner.resolve("x") == String("1")
        assert inner.exists("x")

    def test_define_rewrites_in_owning_scope(self):
        outer = Environment()
        outer.define("x", String("1"))
        inner = outer.enclosed()
        inner.define("x", String("2"))
        assert outer.resolve("x") == String("2")
        assert inner.local_names() == []

    def test_define_new_name_binds_innermost(self):
        outer = Environment()
        inner = outer.enclosed()
        inner.define("y", String("1"))
        assert not outer.exists("y")
        assert inner.owner("y") is inner

    def test_bind_shadows(self):
        outer = Environment()
        outer.define("x", String("1"))
        inner = outer.enclosed()
        inner.bind("x", String("2"))
        assert outer.resolve("x") == String("1")
        assert inner.resolve("x") == String("2")

    def test_delete_from_owner(self):
        outer = Environment()
        outer.define("x", String("1"))
        inner = outer.enclosed()
        inner.delete("x")
        assert not outer.exists("x")
        with pytest.raises(UndefinedVariableError):
            inner.delete("x")

    def test_resolve_missing(self):
        with pytest.raises(UndefinedVariableError) as info:
            Environment().resolve("nope")
        assert info.value.name == "nope"
        assert "no such variable" in str(info.value)

    def test_all_names_innermost_first(self):
        outer = Environment()
        outer.define("a", String("1"))
        outer.define("b", String("1"))
        inner = outer.enclosed()
        inner.bind("b", String("2"))
        inner.bind("c", String("3"))
        assert inner.all_names() == ["b", "c", "a"]


class TestSplitQualified:
    """Namespace path splitting"""

    @pytest.mark.parametrize("name,expected", [
        ("a::b::cmd", ("a::b", "cmd")),
        ("::cmd", ("::", "cmd")),
        ("cmd", ("", "cmd")),
        ("::a::cmd", ("::a", "cmd")),
    ])
    def test_split(self, name, expected):
        assert split_qualified(name) == expected


class TestNamespaceTree:
    """Arena of namespaces"""

    def test_root(self):
        tree = NamespaceTree()
        assert tree.root.is_root
        assert tree.qualified_name(ROOT) == "::"

    def test_children_sorted(self):
        tree = NamespaceTree()
        for name in ("c", "a", "b"):
            tree.create(ROOT, name)
        names = [tree.get(i).name for i in tree.children_of(ROOT)]
        assert names == ["a", "b", "c"]

    def test_create_returns_existing(self):
        tree = NamespaceTree()
        first = tree.create(ROOT, "a")
        assert tree.create(ROOT, "a") == first
        assert len(tree.children_of(ROOT)) == 1

    def test_ensure_creates_intermediates(self):
        tree = NamespaceTree()
        index = tree.ensure("::a::b::c")
        assert tree.qualified_name(index) == "::a::b::c"
        assert tree.lookup("a::b") is not None

    def test_parent_is_an_index(self):
        tree = NamespaceTree()
        index = tree.ensure("a::b")
        parent = tree.get(index).parent
        assert tree.qualified_name(parent) == "::a"
        assert list(tree.ancestors(index)) == [index, parent, ROOT]

    def test_relative_lookup_tries_current_then_root(self):
        tree = NamespaceTree()
        a = tree.ensure("a")
        inner = tree.ensure("a::x")
        top = tree.ensure("x")
        assert tree.lookup("x", a) == inner
        assert tree.lookup("::x", a) == top
        assert tree.lookup("a", inner) == a

    def test_require_missing(self):
        with pytest.raises(UndefinedNamespaceError):
            NamespaceTree().require("nope")

    def test_delete_is_recursive(self):
        tree = NamespaceTree()
        a = tree.ensure("a")
        b = tree.ensure("a::b")
        tree.delete(a)
        assert tree.lookup("a") is None
        assert tree.children_of(ROOT) == []
        assert not tree.is_alive(b)
        with pytest.raises(TclImplementationError):
            tree.get(b)

    def test_root_can_not_be_deleted(self):
        with pytest.raises(TclError):
            NamespaceTree().delete(ROOT)
