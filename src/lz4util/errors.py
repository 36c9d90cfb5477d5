"""Typed errors for lz4util.

Single source of truth for exit codes lives here.

Policy:
- Errors are small and boring.
- Per-file errors are collected on the job result; they never change the exit code.
- The CLI maps startup errors to stable exit codes (see ExitCode).
- docs/exit_codes.md is generated from this module (scripts/gen_exit_codes_md.py).
"""

from __future__ import annotations

from enum import IntEnum

# -----------------------
# Exit codes (single source)
# -----------------------


class ExitCode(IntEnum):
    OK = 0
    USAGE = 2
    NO_INPUT = 3
    GENERIC = 10

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS: dict[ExitCode, str] = {
    ExitCode.OK: "Success (per-file errors are reported but do not fail the batch)",
    ExitCode.USAGE: "Usage/config error (missing -i, invalid flags, invalid --config)",
    ExitCode.NO_INPUT: "The input pattern matched no file",
    ExitCode.GENERIC: "Unexpected failure",
}

EXIT_OK = int(ExitCode.OK)
EXIT_USAGE = int(ExitCode.USAGE)
EXIT_NO_INPUT = int(ExitCode.NO_INPUT)
EXIT_GENERIC = int(ExitCode.GENERIC)

EXIT_CODES_DOC = "docs/exit_codes.md"


def describe_exit_code(code: int) -> ExitCode | None:
    try:
        return ExitCode(int(code))
    except ValueError:
        return None


def render_exit_codes_markdown() -> str:
    """Content of docs/exit_codes.md."""
    rows = "".join(f"| {c.value} | `{c.name}` | {c.description} |\n" for c in ExitCode)
    return (
        "# Exit codes\n"
        "> GENERATED FILE, do not edit manually.\n"
        "> Source of truth: `src/lz4util/errors.py` (ExitCode).\n"
        "> Regenerate: `python scripts/gen_exit_codes_md.py` (`--check` to verify).\n\n"
        "These are the CLI exit codes you can rely on.\n\n"
        "| Code | Name | Meaning |\n"
        "|---:|---|---|\n"
        f"{rows}"
        "\n## Notes\n"
        "- Startup errors extend `LZ4UtilError` and carry an `exit_code`.\n"
        "- Per-file errors (missing file, codec failure, bad content type) are printed\n"
        "  and processing continues with the next file.\n"
        "- `--traceback` re-raises unexpected errors to show full stack traces.\n"
    )


# ---------------
# Typed exceptions
# ---------------


class LZ4UtilError(Exception):
    """Base error for lz4util."""

    exit_code: int = EXIT_GENERIC


class UsageError(LZ4UtilError):
    exit_code = EXIT_USAGE


class NoInputMatch(LZ4UtilError):
    exit_code = EXIT_NO_INPUT


class CodecError(LZ4UtilError):
    """The LZ4 library rejected the buffer; the message is the library's."""


class InputFileError(LZ4UtilError):
    pass


class OutputFileError(LZ4UtilError):
    pass


class BadContentType(LZ4UtilError):
    def __init__(self, expected: str, found: str | None) -> None:
        super().__init__(
            f'Bad decoded content type detected, expected "{expected}" found "{found}"'
        )
        self.expected = expected
        self.found = found
