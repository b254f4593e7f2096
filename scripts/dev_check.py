#!/usr/bin/env python3
from __future__ import annotations

from pathlib import Path
import subprocess
import sys

ROOT = Path(__file__).resolve().parents[1]


def run(cmd: list[str]) -> int:
    print("$", " ".join(cmd))
    return subprocess.run(cmd, cwd=ROOT, check=False).returncode


def main() -> int:
    code = run([sys.executable, "-m", "unittest", "discover", "-s", "tests", "-p", "test_*.py"])
    if code != 0:
        print("\n❌ masonry-grid checks failed")
        return code

    print("\n✅ masonry-grid checks passed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
