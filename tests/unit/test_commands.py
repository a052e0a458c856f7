#!/usr/bin/env python3
"""
Tests for executables: built-ins, ensembles, procedure parameters and the
command registry.
"""

import pytest
from tclish.runtime.commands import (
    Builtin, CommandRegistry, Ensemble, Parameter, Procedure, parse_parameters,
)
from tclish.runtime.values import String, List, to_strings
from tclish.shared.errors import ArgumentCountError, TclError, UnsafeCommandError


class _Host:
    """Minimal interpreter stand-in for ensemble dispatch."""

    def __init__(self, is_safe=False):
        self.is_safe = is_safe


def _echo(interp, args):
    return String(" ".join(str(a) for a in args))


def _strings(*words):
    return [String(w) for w in words]


class TestBuiltin:
    """Arity validation and dispatch"""

    def test_executes_impl(self):
        command = Builtin("echo", _echo, 1, 2)
        assert command.execute(_Host(), _strings("a", "b")) == String("a b")

    @pytest.mark.parametrize("count", [0, 3])
    def test_arity(self, count):
        command = Builtin("echo", _echo, 1, 2, usage="first ?second?")
        with pytest.raises(ArgumentCountError) as info:
            command.execute(_Host(), _strings(*["x"] * count))
        assert str(info.value) == 'wrong # args: should be "echo first ?second?"'

    def test_unbounded(self):
        Builtin("echo", _echo, 0, None).validate(100)

    def test_usage_without_arguments(self):
        with pytest.raises(ArgumentCountError, match='should be "pwd"'):
            Builtin("pwd", _echo, 0, 0).validate(1)

    def test_safety_flag(self):
        assert Builtin("a", _echo).is_safe()
        assert not Builtin("b", _echo, safe=False).is_safe()


class TestEnsemble:
    """Sub-command lookup and errors"""

    @pytest.fixture
    def ensemble(self):
        return Ensemble("tool", [
            Builtin("zeta", _echo, 0, 0),
            Builtin("alpha", _echo, 1, 1, usage="value"),
            Builtin("danger", _echo, 0, None, safe=False),
        ])

    def test_sorted_lookup(self, ensemble):
        assert [c.name for c in ensemble.commands] == ["alpha", "danger", "zeta"]
        assert ensemble.lookup("zeta").name == "zeta"
        assert ensemble.lookup("al") is None

    def test_dispatch(self, ensemble):
        assert ensemble.execute(_Host(), _strings("alpha", "v")) == String("v")

    def test_unknown_subcommand(self, ensemble):
        with pytest.raises(TclError) as info:
            ensemble.execute(_Host(), _strings("nope"))
        assert str(info.value) == 'unknown or ambiguous subcommand "nope": must be alpha, danger, zeta'

    def test_missing_subcommand(self, ensemble):
        with pytest.raises(ArgumentCountError, match='should be "tool subcommand'):
            ensemble.execute(_Host(), [])

    def test_subcommand_arity(self, ensemble):
        with pytest.raises(ArgumentCountError) as info:
            ensemble.execute(_Host(), _strings("alpha"))
        assert str(info.value) == 'wrong # args: should be "tool alpha value"'

    def test_safe_gate(self, ensemble):
        with pytest.raises(UnsafeCommandError, match="tool danger"):
            ensemble.execute(_Host(is_safe=True), _strings("danger"))
        assert ensemble.execute(_Host(is_safe=True), _strings("zeta")) == String("")

    def test_safe_when_any_subcommand_is(self, ensemble):
        assert ensemble.is_safe()
        assert not Ensemble("x", [Builtin("y", _echo, safe=False)]).is_safe()


class TestParameters:
    """proc argument specifications"""

    def test_plain_and_defaults(self):
        params, variadic = parse_parameters("a {b 2} args")
        assert params == [Parameter("a"), Parameter("b", "2")]
        assert variadic

    def test_default_with_spaces(self):
        params, _ = parse_parameters("{msg {hello world}}")
        assert params == [Parameter("msg", "hello world")]

    def test_empty(self):
        assert parse_parameters("") == ([], False)

    def test_duplicates(self):
        with pytest.raises(TclError, match='duplicate parameter "a"'):
            parse_parameters("a b a")

    def test_empty_name(self):
        with pytest.raises(TclError, match="argument with no name"):
            parse_parameters("{}")

    def test_args_with_default_is_not_variadic(self):
        params, variadic = parse_parameters("{args 1}")
        assert not variadic
        assert params == [Parameter("args", "1")]

    def test_args_must_be_last_to_be_variadic(self):
        params, variadic = parse_parameters("args b")
        assert not variadic
        assert [p.name for p in params] == ["args", "b"]


class TestProcedureBinding:
    """Pairing arguments with parameters"""

    def _procedure(self, spec):
        params, variadic = parse_parameters(spec)
        return Procedure("p", params, "", 0, variadic)

    def test_defaults_fill_missing(self):
        bindings = self._procedure("a {b 2}").bind(_strings("1"))
        assert bindings == [("a", String("1")), ("b", String("2"))]

    def test_variadic_collects_rest(self):
        bindings = self._procedure("a args").bind(_strings("1", "2", "3"))
        name, rest = bindings[-1]
        assert name == "args"
        assert isinstance(rest, List)
        assert to_strings(rest) == ["2", "3"]

    def test_variadic_may_be_empty(self):
        _, rest = self._procedure("args").bind([])[-1]
        assert len(rest) == 0

    @pytest.mark.parametrize("count", [0, 3])
    def test_wrong_count(self, count):
        with pytest.raises(ArgumentCountError) as info:
            self._procedure("a {b 2}").bind(_strings(*["x"] * count))
        assert str(info.value) == 'wrong # args: should be "p a ?b?"'

    def test_variadic_usage(self):
        assert self._procedure("a args").usage == "a ?arg ...?"


class TestRegistry:
    """CommandRegistry"""

    def test_builtin_decorator(self):
        registry = CommandRegistry()

        @registry.builtin("greet", 1, 1, usage="name")
        def greet(interp, args):
            return String(f"hello {args[0]}")

        command = registry.lookup("greet")
        assert isinstance(command, Builtin)
        assert command.execute(_Host(), _strings("you")) == String("hello you")
        assert "greet" in registry

    def test_copy_is_independent(self):
        registry = CommandRegistry()
        registry.register(Builtin("a", _echo))
        clone = registry.copy()
        clone.register(Builtin("b", _echo))
        assert "b" not in registry
        assert len(clone) == 2

    def test_items_sorted(self):
        registry = CommandRegistry()
        for name in ("c", "a", "b"):
            registry.register(Builtin(name, _echo))
        assert [name for name, _ in registry.items()] == ["a", "b", "c"]

    def test_register_under_other_name(self):
        registry = CommandRegistry()
        registry.register(Builtin("+", _echo), "::tcl::mathop::+")
        assert registry.lookup("::tcl::mathop::+").name == "+"
        assert registry.lookup("+") is None
