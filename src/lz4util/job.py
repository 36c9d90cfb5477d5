"""One input file's processing lifecycle.

``run_job`` reads the whole file, runs the LZ4 codec once, checks the decoded
content type when it is headed for the console, and writes the result when
asked to. Every per-file failure ends up in ``JobResult.errors``; nothing
escapes to the caller, so a batch can always move on to the next file.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from lz4util.core.codec_lz4 import FILE_EXT, HIGH_COMPRESSION, CodecLz4
from lz4util.core.content_type import TEXT_TYPE, sniff_content_type
from lz4util.core.memory import memory_usage
from lz4util.errors import BadContentType, InputFileError, LZ4UtilError, OutputFileError

COMPRESS = "compress"
DECOMPRESS = "decompress"

MODES = (COMPRESS, DECOMPRESS)


def has_lz4_ext(path: Path) -> bool:
    return path.suffix.lower() == "." + FILE_EXT


def accepts_input(path: Path, mode: str) -> bool:
    """Compress only what is not compressed yet, decompress only ``.lz4`` files."""
    if mode == COMPRESS:
        return not has_lz4_ext(path)
    return has_lz4_ext(path)


def derive_output_path(input_path: Path, mode: str) -> Path:
    """``a.txt`` -> ``a.txt.lz4`` when compressing, ``a.txt.lz4`` -> ``a.txt`` otherwise."""
    if mode == COMPRESS:
        return input_path.with_name(f"{input_path.name}.{FILE_EXT}")
    if has_lz4_ext(input_path):
        return input_path.with_name(input_path.name[: -len(FILE_EXT) - 1])
    return input_path


@dataclass(frozen=True)
class Job:
    input_path: Path
    output_path: Path | None = None
    mode: str = DECOMPRESS
    level: int = HIGH_COMPRESSION
    hc_level: int = 9
    write: bool = False
    report: bool = False
    delete_input: bool = False

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise ValueError(f"unknown mode: {self.mode!r}")

    @property
    def writes_to_disk(self) -> bool:
        # compressed bytes are never meant for a terminal
        return self.mode == COMPRESS or self.write


@dataclass
class JobResult:
    job: Job
    log: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    data: bytes | None = None
    output_written: Path | None = None
    bytes_written: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors

    def iter_lines(self) -> Iterator[bytes]:
        """Decoded content meant for the console, line by line (newlines kept)."""
        if not self.data:
            return
        start = 0
        while start < len(self.data):
            nl = self.data.find(b"\n", start)
            end = len(self.data) if nl < 0 else nl + 1
            yield self.data[start:end]
            start = end


def _read_input(path: Path) -> bytes:
    if not path.exists():
        raise InputFileError(f'Input file "{path}" not found')
    try:
        return path.read_bytes()
    except OSError as e:
        raise InputFileError(f"Unable to open input file {path}") from e


def _write_output(path: Path, data: bytes) -> int:
    try:
        path.write_bytes(data)
    except OSError as e:
        raise OutputFileError(f"Unable to create output file {path}") from e
    return len(data)


def _transform(job: Job, codec: CodecLz4, result: JobResult) -> None:
    raw = _read_input(job.input_path)
    out = codec.compress(raw) if job.mode == COMPRESS else codec.decompress(raw)
    del raw

    if not job.writes_to_disk:
        content_type = sniff_content_type(out)
        if content_type != TEXT_TYPE:
            raise BadContentType(TEXT_TYPE, content_type)
        result.data = out
        return

    if job.output_path is None or not out:
        return
    result.bytes_written = _write_output(job.output_path, out)
    result.output_written = job.output_path

    if job.delete_input:
        try:
            # -o pointing at the input: the output replaced it, unlinking would lose both
            if job.input_path.samefile(job.output_path):
                raise InputFileError(
                    f"Not deleting input file {job.input_path}: it was overwritten by the output"
                )
            job.input_path.unlink()
        except OSError as e:
            raise InputFileError(f"Unable to delete input file {job.input_path}: {e}") from e


def run_job(job: Job) -> JobResult:
    """Process one file. Never raises for per-file problems."""
    result = JobResult(job=job)
    codec = CodecLz4(level=job.level, hc_level=job.hc_level)

    t0 = 0.0
    if job.report:
        t0 = time.perf_counter()
        result.log.append(f"Begin {job.mode} process - {memory_usage()}")
        if job.mode == COMPRESS:
            result.log.append(f"Compression level: {codec.level_name}")

    try:
        _transform(job, codec, result)
    except LZ4UtilError as e:
        result.errors.append(str(e))
    finally:
        if job.report:
            elapsed = time.perf_counter() - t0
            result.log.append(f"Input file:  {job.input_path}")
            result.log.append(f"Output file: {job.output_path}")
            result.log.append(f"Finish {job.mode} process - {memory_usage()}")
            result.log.append(f"Total Execution Time: {elapsed:.6f} seconds")

    return result
