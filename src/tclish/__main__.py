"""CLI entry point: run `tclish script.tcl ?arg ...?` or `python -m tclish` for a shell."""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from .frontend.scanner import is_complete
from .shared.errors import ErrorReporter
from .utils.config import (
    VERSION, REPL_INPUT_PROMPT, REPL_OUTPUT_PROMPT, REPL_CONTINUATION_PROMPT,
)
from .utils.io_utils import read_source_file


def _run_file(runtime, reporter: ErrorReporter, path: Path, echo: bool = False) -> Optional[int]:
    """Run one script file; an exit code when the session must end."""
    try:
        source = read_source_file(path)
    except OSError as e:
        sys.stderr.write(f"tclish: error: could not read file: {e}\n")
        return 1

    filename = str(path)
    reporter.source_files[filename] = source
    result = runtime.execute(source, filename)
    if result.exited:
        return result.exit_code
    if not result.success:
        reporter.report_exception(result.error)
        reporter.print_errors()
        return 1
    if echo and str(result):
        print(result)
    return None


def _repl(runtime, reporter: ErrorReporter) -> int:
    counter = 1
    lines: List[str] = []
    while True:
        prompt = REPL_CONTINUATION_PROMPT if lines else REPL_INPUT_PROMPT.format(counter)
        try:
            lines.append(input(prompt))
        except EOFError:
            print()
            return 0
        except KeyboardInterrupt:
            print()
            lines = []
            continue

        source = "\n".join(lines)
        if not is_complete(source):
            continue
        lines = []
        if not source.strip():
            continue

        filename = f"<in {counter}>"
        reporter.source_files[filename] = source
        result = runtime.execute(source, filename)
        if result.exited:
            return result.exit_code
        if result.success:
            if str(result):
                print(REPL_OUTPUT_PROMPT.format(counter) + str(result))
        else:
            reporter.report_exception(result.error)
            reporter.print_errors()
            reporter.errors.clear()
        counter += 1


def main(argv: Optional[List[str]] = None) -> int:
    import argparse
    from .runtime.runtime import TclishRuntime

    parser = argparse.ArgumentParser(
        prog="tclish",
        description="Run a tclish script, or start an interactive shell.",
    )
    parser.add_argument("-i", "--init", type=Path, help="Script to run before the main script")
    parser.add_argument("--debug", action="store_true", help="Log interpreter activity to stderr")
    parser.add_argument("--version", action="version", version=f"tclish {VERSION}")
    parser.add_argument("file", nargs="?", type=Path, help="Script to run (shell when omitted)")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Arguments passed to the script as $argv")
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    script_name = str(args.file) if args.file is not None else parser.prog
    runtime = TclishRuntime(argv=args.args, script_name=script_name)
    reporter = ErrorReporter({})

    code: Optional[int] = None
    if args.init is not None:
        code = _run_file(runtime, reporter, args.init)
    if code is None:
        if args.file is None:
            code = _repl(runtime, reporter)
        else:
            code = _run_file(runtime, reporter, args.file, echo=True)
    return runtime.shutdown(code or 0)


if __name__ == "__main__":
    sys.exit(main())
