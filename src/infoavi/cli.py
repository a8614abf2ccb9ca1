"""
Command-line interface for infoavi.

Usage:
  infoavi video.avi                  # Chunk trace + summary
  infoavi -c video.avi               # No truncation of movi/idx1 listings
  infoavi -c50 a.avi b.avi           # Report up to 50 items per container
  infoavi -q *.avi                   # One-line summary per file
  infoavi -o report.json *.avi       # JSON export
"""

from __future__ import annotations

import argparse
import sys

from infoavi._version import __version__
from infoavi.analyze import analyze_file
from infoavi.config import get_config, parse_item_limit, parse_max_depth
from infoavi.formatters import format_default, format_json_list, format_quiet
from infoavi.parser import UNLIMITED, AviReadError, AviStructureError


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on invalid options."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _limit_arg(value: str) -> int:
    try:
        return parse_item_limit(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid limit value: '{value}'") from None


def _depth_arg(value: str) -> int:
    try:
        return parse_max_depth(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid depth value: '{value}'") from None


def _expand_bare_limit(argv: list[str]) -> list[str]:
    """Rewrite a bare ``-c`` (no attached count) to ``--no-limit``."""
    expanded = []
    for i, arg in enumerate(argv):
        if arg == "--":
            return expanded + argv[i:]
        expanded.append("--no-limit" if arg == "-c" else arg)
    return expanded


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="infoavi",
        description="Read and display the chunk structure and media summary of AVI files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Truncation:
  Inside 'movi' lists and 'idx1' indexes only the first items are listed
  (default 20). -cNN changes the count, -c alone lists everything.

Examples:
  infoavi video.avi                  # Chunk trace + summary
  infoavi -c video.avi               # No truncation
  infoavi -c50 a.avi b.avi           # Up to 50 items per container
  infoavi -q *.avi                   # One-line summary per file
  infoavi -o report.json *.avi       # JSON export
        """,
    )
    parser.add_argument("files", nargs="*", help="AVI file(s) to inspect")
    parser.add_argument(
        "-c",
        "--limit",
        type=_limit_arg,
        metavar="NN",
        help="Items listed per movi/idx1 container (-c alone: no limit)",
    )
    parser.add_argument(
        "--no-limit",
        action="store_true",
        help="List every chunk and index entry",
    )
    parser.add_argument(
        "--max-depth",
        type=_depth_arg,
        metavar="N",
        help="Maximum LIST nesting depth accepted",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="One-line summary only")
    parser.add_argument("-o", "--output", help="Save reports to JSON file")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for infoavi CLI."""
    parser = build_parser()
    args = parser.parse_args(_expand_bare_limit(sys.argv[1:] if argv is None else argv))

    if not args.files:
        print("No input files", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    try:
        config = get_config()
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    if args.no_limit:
        item_limit = UNLIMITED
    elif args.limit is not None:
        item_limit = args.limit
    else:
        item_limit = config.walker.item_limit
    max_depth = args.max_depth or config.walker.max_depth
    trace = sys.stdout if config.output.trace and not args.quiet else None

    reports = []
    errors = 0

    for file_path in args.files:
        try:
            report = analyze_file(
                file_path,
                item_limit=item_limit,
                max_depth=max_depth,
                trace=trace,
            )
        except FileNotFoundError:
            print(f'Error: file "{file_path}" does not exist', file=sys.stderr)
            errors += 1
            continue
        except AviStructureError as e:
            print(f'Error: "{file_path}" is not a valid AVI file: {e}', file=sys.stderr)
            errors += 1
            continue
        except (AviReadError, OSError) as e:
            print(f'Error: unable to read file "{file_path}": {e}', file=sys.stderr)
            errors += 1
            continue

        reports.append(report)
        if args.quiet:
            print(format_quiet(report))
        else:
            print(format_default(report))

    # JSON export
    if args.output and reports:
        json_output = format_json_list(reports)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(json_output)
        print(f"Report saved to: {args.output}")

    return 1 if errors > 0 else 0


if __name__ == "__main__":
    sys.exit(main())
