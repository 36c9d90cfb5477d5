from __future__ import annotations

import sys
import tracemalloc

try:
    import resource
except ImportError:  # pragma: no cover - not available on Windows
    resource = None  # type: ignore[assignment]


def bytes_h(n: int) -> str:
    if n < 0:
        return str(n)
    units = ["B", "KiB", "MiB", "GiB", "TiB"]
    f = float(n)
    u = 0
    while f >= 1024.0 and u < len(units) - 1:
        f /= 1024.0
        u += 1
    return f"{int(f)} {units[u]}" if u == 0 else f"{f:.2f} {units[u]}"


def peak_rss_bytes() -> int:
    if resource is None:
        return 0
    rss = int(resource.getrusage(resource.RUSAGE_SELF).ru_maxrss)
    # Linux: KiB, macOS: bytes
    return rss if sys.platform == "darwin" else rss * 1024


def memory_snapshot() -> tuple[int, int]:
    """Return (current, peak) bytes.

    Traced Python allocations when tracemalloc is running, otherwise the
    process peak RSS for both values.
    """
    if tracemalloc.is_tracing():
        current, peak = tracemalloc.get_traced_memory()
        return int(current), int(peak)
    rss = peak_rss_bytes()
    return rss, rss


def memory_usage() -> str:
    current, peak = memory_snapshot()
    return f"Memory usage: {bytes_h(current)} / peak usage: {bytes_h(peak)}"
