"""lz4util CLI.

This is the stable CLI entrypoint (console-script: ``lz4util``).

UX policy:
  - Short flags match the historical tool (-i/-o/-c/-w/-d, --standard).
  - Per-file problems are printed and the batch goes on (exit 0).
  - Startup problems (missing -i, no match, bad --config) exit early, see errors.py.
  - Decoded text goes to stdout; errors and report lines go to stderr.
"""

from __future__ import annotations

import argparse
import glob
import os
import sys
import tracemalloc
from importlib import metadata
from pathlib import Path
from typing import TextIO

from lz4util.config_spec import ConfigSpecV1, load_config_spec
from lz4util.errors import EXIT_GENERIC, EXIT_OK, LZ4UtilError, NoInputMatch, UsageError
from lz4util.job import (
    COMPRESS,
    DECOMPRESS,
    Job,
    JobResult,
    accepts_input,
    derive_output_path,
    run_job,
)

PROG = "lz4util"

_RED = "\033[0;31m"
_GREEN = "\033[0;32m"
_RESET = "\033[0m"

_EXAMPLES = """\
examples:
  # read in.txt, create out.lz4 with compressed data
  lz4util -i in.txt -o out.lz4 -w -c

  # same, standard compression level (default is high), with report
  lz4util -i in.txt -o out.lz4 -w -c -d --standard

  # read in.lz4, create out.txt with decompressed data, with report
  lz4util -i in.lz4 -o out.txt -w -d

  # read in.lz4, print the decompressed text to the console
  lz4util -i in.lz4

  # compress every log file next to itself (a.log -> a.log.lz4)
  lz4util -i 'logs/*.log' -c
"""


def _version() -> str:
    try:
        return metadata.version(PROG)
    except metadata.PackageNotFoundError:
        return "0+unknown"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=PROG,
        description="LZ4 compression / decompression utility",
        epilog=_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("-i", dest="input", default=None, help="Input filename or file pattern")
    p.add_argument(
        "-o",
        dest="output",
        type=Path,
        default=None,
        help=(
            "Output filename (used only if a single file was found, "
            "else found names get the compression extension added or removed)"
        ),
    )
    p.add_argument("-c", dest="compress", action="store_true", help="Compress flag")
    p.add_argument(
        "-w",
        dest="write",
        action="store_true",
        help="Write data to output file(s) (decompressed data goes to the console if not set)",
    )
    p.add_argument(
        "-d", dest="report", action="store_true", help="Display debug information (time, memory)"
    )
    p.add_argument(
        "--standard",
        action="store_true",
        help="Use standard compression level (high is default)",
    )
    p.add_argument(
        "--rm",
        dest="delete_input",
        action="store_true",
        help="Delete each input file once its output was written to disk",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Run config (JSON). Use '@file.json' to load from file, or pass JSON inline.",
    )
    p.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Colorize errors and report lines (default: auto, only on a terminal)",
    )
    p.add_argument("--traceback", action="store_true", help="Show stack traces on errors")
    p.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    return p


def expand_pattern(pattern: str) -> list[str]:
    """Expand ``pattern`` like a shell glob; sorted for a stable processing order."""
    return sorted(glob.glob(os.path.expanduser(pattern)))


def _use_color(choice: str, stream: TextIO) -> bool:
    if choice == "always":
        return True
    if choice == "never" or "NO_COLOR" in os.environ:
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _paint(text: str, color: str, enabled: bool) -> str:
    return f"{color}{text}{_RESET}" if enabled else text


def _echo_lines(result: JobResult, stream: TextIO) -> None:
    buf = getattr(stream, "buffer", None)
    stream.flush()
    for line in result.iter_lines():
        if buf is not None:
            buf.write(line)
        else:
            stream.write(line.decode("utf-8", errors="replace"))
    if buf is not None:
        buf.flush()


def _emit(result: JobResult, *, out: TextIO, err: TextIO, color: bool) -> None:
    for error in result.errors:
        print(_paint(f"[{PROG}] {result.job.input_path}: {error}", _RED, color), file=err)
    for line in result.log:
        print(_paint(line, _GREEN, color), file=err)
    _echo_lines(result, out)


def _run(ns: argparse.Namespace) -> int:
    if not ns.input:
        raise UsageError("You must specify an input file or file pattern with -i argument")

    config = load_config_spec(ns.config) if ns.config else ConfigSpecV1()

    files = expand_pattern(ns.input)
    if not files:
        raise NoInputMatch("No input file matching your pattern")

    mode = COMPRESS if ns.compress else DECOMPRESS
    level = config.resolved_level(bool(ns.standard))
    hc_level = config.hc_level if config.hc_level is not None else 9
    write = bool(ns.write or config.write)
    report = bool(ns.report or config.report)
    delete_input = bool(ns.delete_input or config.delete_input)

    explicit_output: Path | None = None
    if ns.output is not None:
        if len(files) == 1:
            explicit_output = ns.output
        else:
            print(
                f"[{PROG}] -o ignored: {len(files)} files matched, using derived names",
                file=sys.stderr,
            )

    color = _use_color(ns.color, sys.stderr)

    # report figures are traced allocations for the whole batch
    started_tracing = report and not tracemalloc.is_tracing()
    if started_tracing:
        tracemalloc.start()
    try:
        for name in files:
            path = Path(name)
            if not accepts_input(path, mode):
                if report:
                    print(f"Skipping {path}: not a {mode} candidate", file=sys.stderr)
                continue

            job = Job(
                input_path=path,
                output_path=explicit_output or derive_output_path(path, mode),
                mode=mode,
                level=level,
                hc_level=hc_level,
                write=write,
                report=report,
                delete_input=delete_input,
            )
            _emit(run_job(job), out=sys.stdout, err=sys.stderr, color=color)
    finally:
        if started_tracing:
            tracemalloc.stop()

    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    p = build_parser()
    ns = p.parse_args(argv)

    try:
        return _run(ns)
    except SystemExit:
        raise
    except LZ4UtilError as e:
        if ns.traceback:
            raise
        print(f"[{PROG}] {e}", file=sys.stderr)
        return int(getattr(e, "exit_code", EXIT_GENERIC) or EXIT_GENERIC)
    except Exception as e:
        if ns.traceback:
            raise
        print(f"[{PROG}] error: {e}", file=sys.stderr)
        return EXIT_GENERIC


if __name__ == "__main__":
    raise SystemExit(main())
