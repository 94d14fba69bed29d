from __future__ import annotations

import sys

try:
    from .cli import main as _cli_main
except ImportError:
    # Run as a plain script (runpy / frozen bundle).
    from textimage_app.cli import main as _cli_main


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    # No arguments opens the editor window.
    return int(_cli_main(args or ["run"]))


if __name__ == "__main__":
    raise SystemExit(main())
