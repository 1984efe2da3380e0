from __future__ import annotations

import argparse
import sys
from pathlib import Path

from stack_init.errors import StackInitError
from stack_init.orchestrator import run
from stack_init.package_manager import PACKAGE_MANAGERS, detect_package_manager


def _eprint(*args: object) -> None:
    print(*args, file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stack-init",
        description="Customize a freshly generated stack: rename the app and strip unused tooling.",
    )
    parser.add_argument(
        "root",
        nargs="?",
        type=Path,
        default=Path("."),
        help="Root of the generated project (defaults to current directory).",
    )
    parser.add_argument(
        "--package-manager",
        choices=PACKAGE_MANAGERS,
        default=None,
        help="Package manager to configure for (defaults to the one in $npm_config_user_agent, else npm).",
    )
    variant = parser.add_mutually_exclusive_group()
    variant.add_argument(
        "--typescript",
        dest="is_typescript",
        action="store_true",
        default=True,
        help="Keep the TypeScript tooling (default).",
    )
    variant.add_argument(
        "--javascript",
        dest="is_typescript",
        action="store_false",
        help="Remove the typecheck job, script and TypeScript-only dev dependencies.",
    )
    parser.add_argument(
        "--skip-format",
        action="store_true",
        help="Do not run the project's format script afterwards.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    package_manager = args.package_manager or detect_package_manager()
    try:
        run(
            is_typescript=bool(args.is_typescript),
            package_manager=package_manager,
            root_directory=args.root.resolve(),
            run_format=not args.skip_format,
        )
    except StackInitError as exc:
        _eprint(f"ERROR: {exc}")
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
