from __future__ import annotations

from pathlib import Path

import pytest

from lz4util.core.codec_lz4 import HIGH_COMPRESSION, STANDARD_COMPRESSION, CodecLz4
from lz4util.job import (
    COMPRESS,
    DECOMPRESS,
    Job,
    accepts_input,
    derive_output_path,
    run_job,
)

DATA = "FATTURA 1001\nRIGA ARTICOLO: vite M3 qty=10 prezzo=1.20\nTOTALE 12.00\n"
BINARY = bytes(range(256)) * 4


def _compress_to(tmp_path: Path, raw: bytes, name: str = "in.txt") -> Path:
    comp = tmp_path / f"{name}.lz4"
    comp.write_bytes(CodecLz4().compress(raw))
    return comp


@pytest.mark.parametrize("level", [STANDARD_COMPRESSION, HIGH_COMPRESSION])
def test_compress_then_decompress_to_disk(tmp_path: Path, level: int) -> None:
    inp = tmp_path / "in.txt"
    comp = tmp_path / "in.txt.lz4"
    back = tmp_path / "back.txt"
    inp.write_text(DATA, encoding="utf-8")

    r = run_job(Job(inp, comp, mode=COMPRESS, level=level))
    assert r.ok, r.errors
    assert r.output_written == comp
    assert r.bytes_written == comp.stat().st_size
    assert r.data is None

    r = run_job(Job(comp, back, mode=DECOMPRESS, write=True))
    assert r.ok, r.errors
    assert back.read_bytes() == inp.read_bytes()


def test_compress_writes_even_without_write_flag(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    inp.write_text(DATA, encoding="utf-8")
    out = tmp_path / "in.txt.lz4"

    r = run_job(Job(inp, out, mode=COMPRESS, write=False))
    assert r.ok, r.errors
    assert out.is_file()


def test_decompress_to_console_keeps_lines(tmp_path: Path) -> None:
    comp = _compress_to(tmp_path, DATA.encode("utf-8"))
    out = tmp_path / "in.txt"

    r = run_job(Job(comp, out, mode=DECOMPRESS, write=False))
    assert r.ok, r.errors
    assert not out.exists()
    assert r.output_written is None
    assert b"".join(r.iter_lines()) == DATA.encode("utf-8")
    assert list(r.iter_lines())[0] == b"FATTURA 1001\n"


def test_binary_payload_rejected_for_console(tmp_path: Path) -> None:
    comp = _compress_to(tmp_path, BINARY, name="blob.bin")
    out = tmp_path / "blob.bin"

    r = run_job(Job(comp, out, mode=DECOMPRESS, write=False))
    assert not r.ok
    assert r.errors == [
        'Bad decoded content type detected, expected "text/plain" found "application/octet-stream"'
    ]
    assert r.data is None
    assert list(r.iter_lines()) == []
    assert not out.exists()


def test_binary_payload_written_when_disk_output_allowed(tmp_path: Path) -> None:
    comp = _compress_to(tmp_path, BINARY, name="blob.bin")
    out = tmp_path / "blob.bin"

    r = run_job(Job(comp, out, mode=DECOMPRESS, write=True))
    assert r.ok, r.errors
    assert out.read_bytes() == BINARY


def test_missing_input_is_reported_not_raised(tmp_path: Path) -> None:
    missing = tmp_path / "nope.txt"
    r = run_job(Job(missing, tmp_path / "nope.txt.lz4", mode=COMPRESS))
    assert r.errors == [f'Input file "{missing}" not found']


def test_directory_input_cannot_be_opened(tmp_path: Path) -> None:
    d = tmp_path / "dir.lz4"
    d.mkdir()
    r = run_job(Job(d, tmp_path / "dir", mode=DECOMPRESS, write=True))
    assert r.errors == [f"Unable to open input file {d}"]


def test_unwritable_output_is_reported(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    inp.write_text(DATA, encoding="utf-8")
    out = tmp_path / "missing_dir" / "in.txt.lz4"

    r = run_job(Job(inp, out, mode=COMPRESS))
    assert r.errors == [f"Unable to create output file {out}"]
    assert r.output_written is None


def test_codec_error_carries_library_message(tmp_path: Path) -> None:
    bad = tmp_path / "bad.txt.lz4"
    bad.write_bytes(b"\x10\x00\x00\x00garbage")

    r = run_job(Job(bad, tmp_path / "bad.txt", mode=DECOMPRESS, write=True))
    assert len(r.errors) == 1
    assert r.errors[0]
    assert not (tmp_path / "bad.txt").exists()


def test_report_lines(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    inp.write_text(DATA, encoding="utf-8")
    out = tmp_path / "in.txt.lz4"

    r = run_job(Job(inp, out, mode=COMPRESS, level=STANDARD_COMPRESSION, report=True))
    assert r.ok, r.errors
    assert r.log[0].startswith("Begin compress process - Memory usage: ")
    assert r.log[1] == "Compression level: STANDARD"
    assert r.log[2] == f"Input file:  {inp}"
    assert r.log[3] == f"Output file: {out}"
    assert r.log[4].startswith("Finish compress process - Memory usage: ")
    assert r.log[5].startswith("Total Execution Time: ")
    assert r.log[5].endswith(" seconds")


def test_report_is_written_even_on_error(tmp_path: Path) -> None:
    r = run_job(Job(tmp_path / "x.lz4", tmp_path / "x", mode=DECOMPRESS, report=True))
    assert len(r.errors) == 1
    assert r.log[0].startswith("Begin decompress process")
    assert r.log[-1].startswith("Total Execution Time: ")


def test_no_report_means_no_log(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    inp.write_text(DATA, encoding="utf-8")
    r = run_job(Job(inp, tmp_path / "in.txt.lz4", mode=COMPRESS))
    assert r.log == []


def test_delete_input_after_write(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    inp.write_text(DATA, encoding="utf-8")
    out = tmp_path / "in.txt.lz4"

    r = run_job(Job(inp, out, mode=COMPRESS, delete_input=True))
    assert r.ok, r.errors
    assert out.is_file()
    assert not inp.exists()


def test_delete_input_kept_when_not_written(tmp_path: Path) -> None:
    comp = _compress_to(tmp_path, DATA.encode("utf-8"))
    r = run_job(Job(comp, tmp_path / "in.txt", mode=DECOMPRESS, delete_input=True))
    assert r.ok, r.errors
    assert comp.exists()


def test_output_paths() -> None:
    assert derive_output_path(Path("d/a.txt"), COMPRESS) == Path("d/a.txt.lz4")
    assert derive_output_path(Path("d/a.txt.lz4"), DECOMPRESS) == Path("d/a.txt")
    assert derive_output_path(Path("d/a.txt.LZ4"), DECOMPRESS) == Path("d/a.txt")
    assert derive_output_path(Path("d/lz4.data.lz4"), DECOMPRESS) == Path("d/lz4.data")


def test_accepts_input() -> None:
    assert accepts_input(Path("a.txt"), COMPRESS)
    assert not accepts_input(Path("a.txt.lz4"), COMPRESS)
    assert accepts_input(Path("a.txt.lz4"), DECOMPRESS)
    assert not accepts_input(Path("a.txt"), DECOMPRESS)


def test_unknown_mode_rejected() -> None:
    with pytest.raises(ValueError):
        Job(Path("a"), mode="shuffle")


def test_delete_input_refused_when_output_overwrote_it(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    inp.write_text(DATA, encoding="utf-8")

    r = run_job(Job(inp, inp, mode=COMPRESS, delete_input=True))
    assert r.errors == [f"Not deleting input file {inp}: it was overwritten by the output"]
    assert inp.is_file()
    assert CodecLz4().decompress(inp.read_bytes()) == DATA.encode("utf-8")


def test_delete_input_refused_through_other_spelling(tmp_path: Path, monkeypatch) -> None:
    inp = tmp_path / "in.txt"
    inp.write_text(DATA, encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    r = run_job(Job(Path("in.txt"), tmp_path / "." / "in.txt", mode=COMPRESS, delete_input=True))
    assert len(r.errors) == 1
    assert inp.is_file()


def test_report_memory_is_not_zero_without_tracing(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    inp.write_text(DATA * 1000, encoding="utf-8")

    r = run_job(Job(inp, tmp_path / "in.txt.lz4", mode=COMPRESS, report=True))
    assert r.ok, r.errors
    assert "Memory usage: 0 B" not in r.log[0]
