from __future__ import annotations

import argparse
import sys
from collections import Counter
from pathlib import Path


def _human_bytes(n: float) -> str:
    for unit in ("B", "KiB", "MiB", "GiB"):
        if abs(n) < 1024:
            return f"{n:.1f} {unit}"
        n /= 1024
    return f"{n:.1f} TiB"


def main() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root / "src"))

    parser = argparse.ArgumentParser(description="Summarize a JSON report written by img-tool.")
    parser.add_argument("report", help="Path to the report JSON (the --report output).")
    args = parser.parse_args()

    from img_tool.output import load_report

    payload = load_report(Path(args.report).expanduser().resolve())
    processed = payload.get("processed", [])
    failed = payload.get("failed", [])

    print(f"Files: {len(processed) + len(failed)}")
    print(f"Processed: {len(processed)}")
    print(f"Failed: {len(failed)}")

    if processed:
        before = sum(int(r.get("size_before_bytes", 0)) for r in processed)
        after = sum(int(r.get("size_after_bytes", 0)) for r in processed)
        ratio = after / before if before else 0.0
        print(f"Size: {_human_bytes(before)} -> {_human_bytes(after)} ({ratio:.2%})")

        conversions = Counter(
            f"{r.get('original_format', '?')}->{r.get('new_format', '?')}" for r in processed
        )
        print("Conversions: " + ", ".join(f"{k}:{v}" for k, v in conversions.most_common()))

    if failed:
        reasons = Counter(e.get("reason", "?") for e in failed)
        print("Failure reasons: " + ", ".join(f"{k}:{v}" for k, v in reasons.most_common()))


if __name__ == "__main__":
    main()
