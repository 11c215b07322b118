"""Command line entry point: mediaplacer SOURCE DEST [options]."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .core.config import ImportConfig, MetadataBackend, default_parallelism
from .core.errors import NotADirectory
from .logging import configure_logging
from .logging.rich_logger import RichProgressReporter, QuietProgressReporter
from .services.scanner import run_import


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mediaplacer",
        description="Import media into a tree organized by device, date, artist and album.",
    )
    parser.add_argument(
        "source",
        type=Path,
        help="Media source directory",
    )
    parser.add_argument(
        "dest",
        type=Path,
        help="Media destination directory",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without touching any file",
    )
    parser.add_argument(
        "--move",
        action="store_true",
        help="Move files instead of copying them",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace destination files that have different content",
    )
    parser.add_argument(
        "-j", "--max-procs",
        dest="max_procs",
        type=int,
        default=None,
        help=f"Files processed in parallel (default: CPU count, {default_parallelism()})",
    )
    parser.add_argument(
        "--only",
        action="append",
        default=[],
        metavar="EXT_OR_CATEGORY",
        help="Only import these extensions or categories (image, video, audio); "
             "comma separated, may be repeated",
    )
    parser.add_argument(
        "--accept-untagged",
        action="store_true",
        help="File media without usable metadata under Other/EXT instead of skipping it",
    )
    parser.add_argument(
        "--allow-hidden",
        action="store_true",
        help="Descend into hidden files and directories",
    )
    duplicates = parser.add_mutually_exclusive_group()
    duplicates.add_argument(
        "--delete-duplicates",
        dest="delete_duplicates",
        action="store_const",
        const=True,
        default=None,
        help="Delete source files already present at the destination (default with --move)",
    )
    duplicates.add_argument(
        "--keep-duplicates",
        dest="delete_duplicates",
        action="store_const",
        const=False,
        help="Never delete source files (default without --move)",
    )
    parser.add_argument(
        "--metadata",
        choices=[backend.value for backend in MetadataBackend],
        default=MetadataBackend.auto.value,
        help="Tag reader: embedded decoder, exiftool, or embedded with exiftool fallback (default: auto)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a debug log to this file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug messages",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only show warnings, errors and the final counts",
    )
    return parser


def build_config(args: argparse.Namespace) -> ImportConfig:
    """Turn parsed arguments into a validated configuration.

    Raises:
        ValidationError: An option value is invalid.
    """
    restrict = [
        entry
        for value in args.only
        for entry in value.split(",")
        if entry.strip()
    ]
    options = dict(
        source_dir=args.source,
        dest_dir=args.dest,
        dry_run=args.dry_run,
        move=args.move,
        overwrite=args.overwrite,
        restrict=restrict,
        accept_untagged=args.accept_untagged,
        allow_hidden=args.allow_hidden,
        delete_duplicates=args.delete_duplicates,
        metadata_backend=args.metadata,
    )
    if args.max_procs is not None:
        options["max_parallelism"] = args.max_procs
    return ImportConfig(**options)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.quiet:
        reporter = QuietProgressReporter()
        configure_logging(quiet=True, log_file=args.log_file)
    else:
        reporter = RichProgressReporter()
        configure_logging(verbose=args.verbose, console=reporter.console, log_file=args.log_file)

    try:
        config = build_config(args)
    except ValidationError as e:
        reporter.error(f"Invalid configuration: {e}")
        return 2

    reporter.print_header("mediaplacer import" + (" (dry run)" if config.dry_run else ""))
    reporter.print_config({
        "Source": str(config.source_dir),
        "Destination": str(config.dest_dir),
        "Mode": "move" if config.move else "copy",
        "Overwrite": config.overwrite,
        "Delete Duplicates": config.delete_duplicates,
        "Accept Untagged": config.accept_untagged,
        "Only": ", ".join(config.restrict) or "all",
        "Metadata": config.metadata_backend.value,
        "Parallelism": config.max_parallelism,
        "Dry Run": config.dry_run,
    })

    try:
        summary = run_import(config, progress=reporter)
    except NotADirectory as e:
        reporter.error(str(e))
        return 2
    except KeyboardInterrupt:
        # Clean exit on Ctrl+C - no stack trace
        reporter.warning("Interrupted")
        return 130
    except Exception as e:
        reporter.error(f"Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    reporter.print_stats(summary)
    if config.dry_run:
        reporter.success("Dry run: nothing was changed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
