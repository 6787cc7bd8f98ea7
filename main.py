"""Run posthaste from a checkout: `python main.py run input.txt`.

Puts `src/` on `sys.path` so `cli` and `core` import without
`pip install -e .`; the installed `posthaste` script does the same job.
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    # Response bodies are printed verbatim; cp1252 consoles choke on them.
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")

    src = Path(__file__).resolve().parent / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
