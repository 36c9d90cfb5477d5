"""Media-type sniffing for decoded buffers.

Only the first line is inspected: decoded files are checked before they are
echoed to a terminal, and a binary header is what gives them away.
"""

from __future__ import annotations

TEXT_TYPE = "text/plain"
EMPTY_TYPE = "application/x-empty"
BINARY_TYPE = "application/octet-stream"

# (prefix, media type), checked in order.
_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\x1f\x8b", "application/gzip"),
    (b"PK\x03\x04", "application/zip"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"%PDF-", "application/pdf"),
    (b"\x04\x22\x4d\x18", "application/x-lz4"),
    (b"\x28\xb5\x2f\xfd", "application/zstd"),
    (b"\x7fELF", "application/x-executable"),
)

_MARKUP: tuple[tuple[bytes, str], ...] = (
    (b"<?xml", "text/xml"),
    (b"<!doctype html", "text/html"),
    (b"<html", "text/html"),
)

# BEL, BS, TAB, LF, VT, FF, CR, ESC are fine in text; anything else below 0x20 is not.
# Bytes 0x80-0xFF pass as UTF-8 or extended ASCII (ISO-8859, cp1252, ...).
_TEXT_CONTROLS = frozenset(b"\x07\x08\t\n\x0b\x0c\r\x1b")


def first_line(data: bytes, limit: int = 8192) -> bytes:
    """Return the first line of ``data`` (newline included), capped at ``limit`` bytes."""
    head = bytes(data[:limit])
    nl = head.find(b"\n")
    return head if nl < 0 else head[: nl + 1]


def _looks_like_text(chunk: bytes) -> bool:
    return not any((b < 0x20 and b not in _TEXT_CONTROLS) or b == 0x7F for b in chunk)


def sniff_content_type(data: bytes) -> str:
    """Guess the media type of ``data`` from its first line.

    Returns a lowercase media type without parameters (no ``; charset=``).
    """
    line = first_line(data)
    if not line:
        return EMPTY_TYPE

    for prefix, media_type in _SIGNATURES:
        if line.startswith(prefix):
            return media_type

    if line.startswith(b"\xef\xbb\xbf"):
        line = line[3:]
    lowered = line.lstrip().lower()
    for prefix, media_type in _MARKUP:
        if lowered.startswith(prefix):
            return media_type

    return TEXT_TYPE if _looks_like_text(line) else BINARY_TYPE


def is_plain_text(data: bytes) -> bool:
    return sniff_content_type(data) == TEXT_TYPE
