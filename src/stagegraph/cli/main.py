"""Main CLI entry point for Stagegraph."""

from __future__ import annotations

import argparse
import sys

from stagegraph.cli.commands import replay


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="stagegraph",
        description="Stagegraph - staged flow diagram tools",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # replay command
    replay_parser = subparsers.add_parser(
        "replay",
        help="Apply a YAML script of operations to a new workflow and print the result",
    )
    replay_parser.add_argument("file", help="YAML file with an 'operations' list")
    replay_parser.add_argument(
        "--check",
        action="store_true",
        help="Verify graph invariants after every operation",
    )
    replay_parser.add_argument(
        "--layers",
        action="store_true",
        help="Also print items grouped into topological layers",
    )
    replay_parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON logs on stderr",
    )
    replay_parser.add_argument(
        "--log-level",
        default=None,
        help="Minimum log level (default: STAGEGRAPH_LOG_LEVEL or INFO)",
    )

    args = parser.parse_args(argv)

    if args.command == "replay":
        replay(
            args.file,
            check=args.check,
            layers=args.layers,
            json_logs=args.json_logs,
            log_level=args.log_level,
        )
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
