"""
Command-line interface for the directory organizer.

Handles argument parsing and dispatches to one operation per invocation.
"""

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from .config import Config, DEFAULT_CONFIG
from .operations import (
    organize_alphabetically,
    organize_by_content,
    organize_by_keyword,
)


def parse_keyword_list(text: str) -> List[str]:
    """
    Split a comma-separated keyword string.

    Whitespace around each keyword is removed and empty items are dropped.

    Example:
        >>> parse_keyword_list(" invoice, order ,,")
        ['invoice', 'order']
    """
    return [part.strip() for part in text.split(",") if part.strip()]


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def create_parser(config: Config = DEFAULT_CONFIG) -> argparse.ArgumentParser:
    """
    Create the argument parser for the CLI.

    Args:
        config: Configuration to use for default values in help text

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Sort the files of a directory into subfolders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  alpha    - A/ ... Z/ by the first letter of the file name
  keyword  - <keyword>/ for files whose name contains the keyword
  content  - <keyword>/ for the first keyword found in the file's text

Safety:
  Only the top level of the directory is scanned.
  Existing files are never overwritten; conflicts are reported and left in place.
  Use --dry-run to preview changes before applying.
        """
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "directory",
        type=str,
        help="Directory to organize"
    )
    common.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="Preview changes without moving files"
    )
    common.add_argument(
        "--workers", "-w",
        type=_positive_int,
        default=config.worker_count,
        help=f"Number of files moved in parallel (default: {config.worker_count})"
    )
    common.add_argument(
        "--skip-hidden",
        action="store_true",
        help="Leave files starting with '.' where they are"
    )
    common.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log each file as it is processed"
    )

    subparsers = parser.add_subparsers(dest="mode", metavar="MODE")
    subparsers.required = True

    subparsers.add_parser(
        "alpha",
        parents=[common],
        help="Organize by first letter"
    )

    keyword_parser = subparsers.add_parser(
        "keyword",
        parents=[common],
        help="Organize by a keyword in the file name"
    )
    keyword_parser.add_argument("keyword", type=str, help="Text to look for in file names")

    content_parser = subparsers.add_parser(
        "content",
        parents=[common],
        help="Organize by keywords in the file content"
    )
    content_parser.add_argument(
        "keywords",
        type=parse_keyword_list,
        help="Comma-separated keywords, first match wins (e.g. 'invoice,order')"
    )

    return parser


def run(
    args: argparse.Namespace,
    config: Config = DEFAULT_CONFIG,
) -> int:
    """
    Run one organize operation with the given arguments.

    Args:
        args: Parsed command-line arguments
        config: Configuration to use (worker count and hidden-file
            handling are taken from the arguments)

    Returns:
        Exit code (0 for success, 1 for error)
    """
    config = replace(
        config,
        worker_count=args.workers,
        skip_hidden=args.skip_hidden or config.skip_hidden,
    )

    try:
        if args.mode == "alpha":
            outcome = organize_alphabetically(args.directory, dry_run=args.dry_run, config=config)
        elif args.mode == "keyword":
            outcome = organize_by_keyword(args.directory, args.keyword, dry_run=args.dry_run, config=config)
        else:
            outcome = organize_by_content(args.directory, args.keywords, dry_run=args.dry_run, config=config)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0 if outcome.ok else 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    config = DEFAULT_CONFIG
    parser = create_parser(config)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s",
    )

    return run(args, config)


if __name__ == "__main__":
    sys.exit(main())
