#!/usr/bin/env python3
"""Per-file LZ4 benchmark.

Compresses and decompresses every file matched by a glob pattern, in memory,
at both compression levels, and prints one JSON row per (file, level) plus a
summary row. Nothing is written to disk.

Usage example:
  python tools/bench_files.py 'data/*.log' --iters 3

Notes:
- Uses internal APIs (no subprocess). Run inside repo venv.
- Peak RSS is process-wide, so it only ever grows across rows.
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="bench_files.py", description="lz4util file benchmark")
    ap.add_argument("pattern", help="Input filename or file pattern")
    ap.add_argument("--iters", type=int, default=3)
    ap.add_argument("--hc-level", type=int, default=9, help="LZ4-HC level for HIGH (1..12)")
    ns = ap.parse_args(argv)

    repo = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo / "src"))

    from lz4util.cli import expand_pattern  # noqa: E402
    from lz4util.core.codec_lz4 import LEVEL_NAMES, CodecLz4  # noqa: E402
    from lz4util.core.memory import peak_rss_bytes  # noqa: E402

    files = [Path(p) for p in expand_pattern(ns.pattern) if Path(p).is_file()]
    if not files:
        raise SystemExit("No input file matching your pattern")

    iters = max(1, int(ns.iters))
    rows: list[dict[str, Any]] = []
    t0_all = time.perf_counter()

    for path in files:
        raw = path.read_bytes()
        for level, level_name in sorted(LEVEL_NAMES.items()):
            codec = CodecLz4(level=level, hc_level=int(ns.hc_level))
            t_comp = 0.0
            t_dec = 0.0
            comp = b""
            same = True
            for _ in range(iters):
                t0 = time.perf_counter()
                comp = codec.compress(raw)
                t_comp += time.perf_counter() - t0

                t1 = time.perf_counter()
                back = codec.decompress(comp)
                t_dec += time.perf_counter() - t1
                same = same and back == raw

            row = {
                "file": str(path),
                "level": level_name,
                "size_in": len(raw),
                "size_out": len(comp),
                "ratio": (len(comp) / len(raw)) if raw else 0.0,
                "avg_sec": {"compress": t_comp / iters, "decompress": t_dec / iters},
                "peak_rss_bytes": peak_rss_bytes(),
                "roundtrip_ok": bool(same),
            }
            rows.append(row)
            print(json.dumps(row, ensure_ascii=False))
            if not same:
                raise SystemExit(f"roundtrip mismatch: {path} ({level_name})")

    summary = {
        "schema": "lz4util.bench_files.v1",
        "files": len(files),
        "iters": iters,
        "total_in": sum(r["size_in"] for r in rows if r["level"] == "HIGH"),
        "total_out": {
            name: sum(r["size_out"] for r in rows if r["level"] == name)
            for name in sorted(LEVEL_NAMES.values())
        },
        "wall_total_sec": time.perf_counter() - t0_all,
        "max_peak_rss_bytes": max((r["peak_rss_bytes"] for r in rows), default=0),
    }
    print(json.dumps(summary, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
