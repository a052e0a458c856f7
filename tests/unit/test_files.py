#!/usr/bin/env python3
"""
Tests for channels: the file table and the commands built on it.
"""

import pytest
from tests.test_utils import run_script, run_value
from tclish.runtime.files import FileTable
from tclish.shared.errors import TclError


@pytest.fixture
def text_file(tmp_path):
    path = tmp_path / "lines.txt"
    path.write_text("line one\nline two\n", encoding="utf-8")
    return path


def _with_path(runtime, path):
    run_value(f"set path {{{path}}}", runtime)


class TestFileTable:
    """Channel bookkeeping"""

    def test_channel_names(self, text_file):
        files = FileTable()
        first = files.open(str(text_file))
        second = files.open(str(text_file))
        assert (first, second) == ("file0", "file1")
        assert files.channels() == ["stdin", "stdout", "stderr", "file0", "file1"]
        files.close_all()
        assert files.channels() == ["stdin", "stdout", "stderr"]

    def test_bad_mode(self, text_file):
        with pytest.raises(TclError, match="illegal access mode"):
            FileTable().open(str(text_file), "q")

    def test_missing_file(self, tmp_path):
        with pytest.raises(TclError, match="couldn't open"):
            FileTable().open(str(tmp_path / "nope.txt"))

    def test_standard_channels_can_not_be_closed(self):
        with pytest.raises(TclError, match="can not close standard channel"):
            FileTable().close("stdout")

    def test_unknown_channel(self):
        with pytest.raises(TclError, match='can not find channel named "file9"'):
            FileTable().lookup("file9")

    def test_bad_origin(self, text_file):
        files = FileTable()
        channel = files.open(str(text_file))
        with pytest.raises(TclError, match="bad origin"):
            files.seek(channel, 0, "middle")
        files.close_all()


class TestFileCommands:
    """open, puts, gets, read, eof, seek, tell and close"""

    def test_write_then_read_lines(self, runtime, tmp_path):
        _with_path(runtime, tmp_path / "out.txt")
        source = """
        set f [open $path w]
        puts $f {line one}
        puts $f {line two}
        close $f
        set f [open $path r]
        gets $f a
        gets $f b
        set e [eof $f]
        close $f
        list $a $b $e
        """
        assert run_value(source, runtime) == "{line one} {line two} 1"
        assert (tmp_path / "out.txt").read_text(encoding="utf-8") == "line one\nline two\n"

    def test_gets_at_end(self, runtime, text_file):
        _with_path(runtime, text_file)
        source = "set f [open $path]; gets $f; gets $f; set n [gets $f rest]; close $f; list $n $rest"
        assert run_value(source, runtime) == "-1 {}"

    def test_gets_returns_length(self, runtime, text_file):
        _with_path(runtime, text_file)
        assert run_value("set f [open $path]; set n [gets $f line]; close $f; set n", runtime) == "8"

    def test_read(self, runtime, text_file):
        _with_path(runtime, text_file)
        assert run_value("set f [open $path]; set t [read $f]; close $f; set t", runtime) == "line one\nline two\n"
        assert run_value("set f [open $path]; set t [read -nonewline $f]; close $f; set t", runtime) == "line one\nline two"
        assert run_value("set f [open $path]; set t [read $f 4]; close $f; set t", runtime) == "line"

    def test_seek_and_tell(self, runtime, text_file):
        _with_path(runtime, text_file)
        source = "set f [open $path]; seek $f 5; set p [tell $f]; set t [read $f 3]; close $f; list $p $t"
        assert run_value(source, runtime) == "5 one"

    def test_append_mode(self, runtime, text_file):
        _with_path(runtime, text_file)
        run_value("set f [open $path a]; puts -nonewline $f three; close $f", runtime)
        assert text_file.read_text(encoding="utf-8").endswith("line two\nthree")

    def test_closed_channel(self, runtime, text_file):
        _with_path(runtime, text_file)
        result = run_script("set f [open $path]; close $f; gets $f", runtime)
        assert "can not find channel" in result.errors[0]

    def test_open_errors(self, runtime, tmp_path):
        _with_path(runtime, tmp_path / "missing.txt")
        assert "couldn't open" in run_script("open $path", runtime).errors[0]
        assert "illegal access mode" in run_script("open $path rw", runtime).errors[0]

    def test_close_stdout(self, runtime):
        assert "can not close standard channel" in run_script("close stdout", runtime).errors[0]

    def test_channels_closed_with_runtime(self, runtime, text_file):
        _with_path(runtime, text_file)
        run_value("open $path", runtime)
        files = runtime.interpreter.files
        assert files.channels()[-1] == "file0"
        runtime.close()
        assert files.channels() == ["stdin", "stdout", "stderr"]


class TestPuts:
    """puts on the standard channels"""

    def test_stdout(self, runtime, capsys):
        run_value("puts hello; puts -nonewline {a b}", runtime)
        assert capsys.readouterr().out == "hello\na b"

    def test_stderr(self, runtime, capsys):
        run_value("puts stderr oops", runtime)
        captured = capsys.readouterr()
        assert captured.err == "oops\n"
        assert captured.out == ""

    def test_unknown_channel(self, runtime):
        assert "can not find channel" in run_script("puts file7 x", runtime).errors[0]

    def test_too_many_arguments(self, runtime):
        assert not run_script("puts a b c", runtime).success
