from __future__ import annotations

from dataclasses import dataclass

import lz4.block

from lz4util.errors import CodecError

FILE_EXT = "lz4"

STANDARD_COMPRESSION = 0
HIGH_COMPRESSION = 1

LEVEL_NAMES: dict[int, str] = {
    STANDARD_COMPRESSION: "STANDARD",
    HIGH_COMPRESSION: "HIGH",
}


def level_from_name(name: str) -> int:
    """'standard' / 'high' (case-insensitive) -> level constant."""
    key = name.strip().upper()
    for level, level_name in LEVEL_NAMES.items():
        if level_name == key:
            return level
    raise ValueError(f"unknown compression level: {name!r} (expected standard or high)")


@dataclass
class CodecLz4:
    """
    LZ4 block codec.

    Layout: 4-byte little-endian uncompressed size + raw LZ4 block
    (``store_size=True``), readable by any LZ4 block decoder that expects
    the size prefix.

    ``level`` picks the LZ4 mode: STANDARD uses the default fast mode,
    HIGH uses LZ4-HC at ``hc_level``.
    """

    level: int = HIGH_COMPRESSION
    hc_level: int = 9
    codec_id: str = "lz4"

    def __post_init__(self) -> None:
        if self.level not in LEVEL_NAMES:
            raise ValueError(f"lz4 level must be one of {sorted(LEVEL_NAMES)}, got {self.level}")
        if not (1 <= int(self.hc_level) <= 12):
            raise ValueError(f"lz4 hc_level must be 1..12, got {self.hc_level}")

    @property
    def level_name(self) -> str:
        return LEVEL_NAMES[self.level]

    def compress(self, data: bytes) -> bytes:
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError("data must be bytes")
        try:
            if self.level == HIGH_COMPRESSION:
                return lz4.block.compress(
                    bytes(data),
                    mode="high_compression",
                    compression=int(self.hc_level),
                    store_size=True,
                )
            return lz4.block.compress(bytes(data), mode="default", store_size=True)
        except lz4.block.LZ4BlockError as e:
            raise CodecError(str(e)) from e

    def decompress(self, comp: bytes) -> bytes:
        if not isinstance(comp, (bytes, bytearray)):
            raise TypeError("comp must be bytes")
        # short or negative size prefix: ValueError; bogus huge prefix: MemoryError
        try:
            return lz4.block.decompress(bytes(comp))
        except (lz4.block.LZ4BlockError, ValueError, MemoryError) as e:
            raise CodecError(str(e)) from e
