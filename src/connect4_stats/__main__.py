from __future__ import annotations

import sys

from .cli.analyze import main as analyze_main


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    # "analyze" is the only subcommand; bare flags go straight to it
    if argv and argv[0].lower() in {"analyze", "analysis", "summary"}:
        argv = argv[1:]

    return analyze_main(argv)


if __name__ == "__main__":
    raise SystemExit(main())
