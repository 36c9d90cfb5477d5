#!/usr/bin/env python3
"""Write (or, with --check, verify) docs/exit_codes.md from lz4util.errors.

--check exits 1 when the committed doc differs from what errors.py renders,
so CI can catch a new exit code without a doc update.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO = Path(__file__).resolve().parents[1]


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="gen_exit_codes_md.py", description=__doc__)
    ap.add_argument("--check", action="store_true", help="Verify instead of writing")
    ns = ap.parse_args(argv)

    sys.path.insert(0, str(REPO / "src"))
    from lz4util.errors import EXIT_CODES_DOC, render_exit_codes_markdown  # noqa: E402

    doc = REPO / EXIT_CODES_DOC
    wanted = render_exit_codes_markdown()

    if ns.check:
        current = doc.read_text(encoding="utf-8") if doc.is_file() else ""
        if current != wanted:
            print(f"[lz4util] {doc} is stale, rerun without --check", file=sys.stderr)
            return 1
        print(f"[lz4util] {doc} is up to date")
        return 0

    doc.parent.mkdir(parents=True, exist_ok=True)
    doc.write_text(wanted, encoding="utf-8")
    print(f"[lz4util] wrote {doc}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
