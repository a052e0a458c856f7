#!/usr/bin/env python3
"""
Tests for the command-line entry point: script mode, exit codes, argv and
the interactive shell.
"""

import builtins
import pytest
from tclish.__main__ import main
from tclish.utils.config import VERSION


@pytest.fixture
def script(tmp_path):
    """Write a script file and return its path."""
    def _write(source: str, name: str = "main.tcl"):
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def shell_input(monkeypatch):
    """Feed lines to the shell; EOF once they run out."""
    def _feed(*lines):
        pending = list(lines)

        def fake_input(prompt=""):
            if not pending:
                raise EOFError
            return pending.pop(0)

        monkeypatch.setattr(builtins, "input", fake_input)
    return _feed


@pytest.fixture(autouse=True)
def plain_diagnostics(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")


class TestScriptMode:
    """tclish FILE ?ARG ...?"""

    def test_output(self, script, capsys):
        assert main([str(script("puts hello"))]) == 0
        assert capsys.readouterr().out == "hello\n"

    def test_result_is_echoed(self, script, capsys):
        assert main([str(script("set a 1\nexpr {$a + 1}"))]) == 0
        assert capsys.readouterr().out == "2\n"

    def test_empty_result_is_not_echoed(self, script, capsys):
        assert main([str(script("set a {}"))]) == 0
        assert capsys.readouterr().out == ""

    def test_error(self, script, capsys):
        path = script("puts before\nnosuch 1")
        assert main([str(path)]) == 1
        captured = capsys.readouterr()
        assert captured.out == "before\n"
        assert "error[T0423]: invalid command name \"nosuch\"" in captured.err
        assert f"{path}:2:1" in captured.err
        assert "2 | nosuch 1" in captured.err
        assert "while executing \"nosuch 1\"" in captured.err

    def test_exit_code(self, script, capsys):
        assert main([str(script("puts a\nexit 4\nputs b"))]) == 4
        assert capsys.readouterr().out == "a\n"

    def test_arguments(self, script, capsys):
        path = script("puts $argc\nputs [lindex $argv 1]\nputs $argv0")
        assert main([str(path), "one", "two words", "-x"]) == 0
        assert capsys.readouterr().out == f"3\ntwo words\n{path}\n"

    def test_init_script(self, script, capsys):
        init = script("proc greet {} { return hi }", name="init.tcl")
        path = script("puts [greet]")
        assert main(["--init", str(init), str(path)]) == 0
        assert capsys.readouterr().out == "hi\n"

    def test_init_script_error_stops(self, script, capsys):
        init = script("error {bad init}", name="init.tcl")
        path = script("puts never")
        assert main(["-i", str(init), str(path)]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "bad init" in captured.err

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.tcl")]) == 1
        assert "tclish: error: could not read file:" in capsys.readouterr().err

    def test_deferred_actions_run_at_exit(self, script, capsys):
        assert main([str(script("defer {puts bye}\nputs hi"))]) == 0
        assert capsys.readouterr().out == "hi\nbye\n"

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as info:
            main(["--version"])
        assert info.value.code == 0
        assert VERSION in capsys.readouterr().out


class TestShell:
    """Interactive mode"""

    def test_results_are_numbered(self, shell_input, capsys):
        shell_input("expr {1 + 1}", "set x 6")
        assert main([]) == 0
        out = capsys.readouterr().out
        assert "out[  1]: 2" in out
        assert "out[  2]: 6" in out

    def test_incomplete_input_continues(self, shell_input, capsys):
        shell_input("proc f {} {", "  return 9", "}", "f")
        assert main([]) == 0
        assert "out[  2]: 9" in capsys.readouterr().out

    def test_errors_do_not_end_the_session(self, shell_input, capsys):
        shell_input("nosuch", "set y 1")
        assert main([]) == 0
        captured = capsys.readouterr()
        assert "invalid command name \"nosuch\"" in captured.err
        assert "out[  2]: 1" in captured.out

    def test_blank_lines_are_skipped(self, shell_input, capsys):
        shell_input("", "set z 1")
        assert main([]) == 0
        assert "out[  1]: 1" in capsys.readouterr().out

    def test_exit(self, shell_input, capsys):
        shell_input("exit 2", "set never 1")
        assert main([]) == 2

    def test_state_persists(self, shell_input, capsys):
        shell_input("set a 2", "set b 3", "puts ignored", "expr {$a * $b}")
        assert main([]) == 0
        assert "out[  4]: 6" in capsys.readouterr().out
