#!/usr/bin/env python3
"""
Tests for substitution and command building against a stub context.
"""

import re
import pytest
from tclish.frontend.builder import Builder, Command, concat
from tclish.runtime.values import String, List, list_of
from tclish.shared.errors import IncompleteScriptError, UndefinedVariableError


class _Context:
    """Resolves from a dict and records executed scripts."""

    def __init__(self, variables=None, results=None):
        self.variables = variables or {}
        self.results = results or {}
        self.executed = []

    def resolve(self, name):
        if name not in self.variables:
            raise UndefinedVariableError(name)
        return String(self.variables[name])

    def execute(self, script):
        self.executed.append(script)
        return self.results.get(script, String(script.upper()))


def _build(script, **kwargs):
    return [(c.name, [str(a) for a in c.args]) for c in Builder(script, _Context(**kwargs))]


def _naive_split(script):
    commands = []
    for line in re.split(r"[;\n]", script):
        words = line.split()
        if words:
            commands.append((words[0], words[1:]))
    return commands


class TestCommandBoundaries:
    """Commands without substitution split like whitespace/semicolon text"""

    @pytest.mark.parametrize("script", [
        "set a 1",
        "set a 1; puts hello",
        "one two three\nfour five\n\nsix",
        "  lead;;trail  ;  x y  ",
        "a\tb\tc;d",
    ])
    def test_matches_naive_split(self, script):
        assert _build(script) == _naive_split(script)

    def test_comments_are_skipped(self):
        assert _build("# comment\nputs hi\n# another") == [("puts", ["hi"])]

    def test_command_locations(self):
        commands = list(Builder("a\n  b c", _Context(), "f.tcl"))
        location = commands[1].location
        assert (location.file, location.line, location.column) == ("f.tcl", 2, 3)

    def test_command_string_form(self):
        assert str(Command("puts", [String("a b"), String("c")])) == "puts {a b} c"


class TestSubstitution:
    """Word substitution rules"""

    def test_variable(self):
        assert _build("puts $x", variables={"x": "hi"}) == [("puts", ["hi"])]

    def test_concatenated_argument(self):
        assert _build("puts a$x.b", variables={"x": "hi"}) == [("puts", ["ahi.b"])]

    def test_quoted(self):
        assert _build('puts "v=$x [cmd]"', variables={"x": "hi"}) == [("puts", ["v=hi CMD"])]

    def test_block_is_verbatim(self):
        context = _Context()
        commands = list(Builder("puts {$x [y]}", context))
        assert str(commands[0].args[0]) == "$x [y]"
        assert context.executed == []

    def test_element_key_is_substituted(self):
        variables = {"k": "one", "arr(one)": "1"}
        assert _build("puts $arr($k)", variables=variables) == [("puts", ["1"])]

    def test_undefined_variable(self):
        with pytest.raises(UndefinedVariableError):
            _build("puts $missing")

    def test_single_word_keeps_value(self):
        items = list_of(["a", "b"])
        context = _Context(results={"mk": items})
        command = next(iter(Builder("puts [mk]", context)))
        assert command.args[0] is items

    def test_concatenation_yields_string(self):
        assert concat([String("a"), list_of(["b", "c"])]) == String("ab c")
        single = List((String("x"),))
        assert concat([single]) is single

    def test_building_is_lazy(self):
        context = _Context()
        builder = iter(Builder("a [one]; b [two]", context))
        next(builder)
        assert context.executed == ["one"]
        next(builder)
        assert context.executed == ["one", "two"]


class TestSyntaxErrors:
    """Illegal words"""

    def test_incomplete_with_location(self):
        with pytest.raises(IncompleteScriptError) as info:
            list(Builder('puts "abc', _Context(), "t.tcl"))
        location = info.value.location
        assert (location.file, location.line, location.column) == ("t.tcl", 1, 6)

    def test_nested_scripts_carry_no_location(self):
        with pytest.raises(IncompleteScriptError) as info:
            list(Builder("puts {abc", _Context()))
        assert info.value.location is None
