"""Command line entry point for batch video analysis."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler

from . import __version__
from .core.config import (
    BatchConfig,
    DEFAULT_ANALYZER,
    DEFAULT_EXTENSION,
    DEFAULT_FRAME_SKIP,
    parse_analyzer_command,
)
from .core.errors import ReportWriteError, StartupFatalError
from .logging.rich_logger import RichProgressReporter, QuietProgressReporter

EPILOG = """\
Examples:
  vidbatch                          # Analyze current directory
  vidbatch ./VIDEOS                 # Analyze VIDEOS directory
  vidbatch ./VIDEOS --frame-skip 15 # Use frame-skip of 15
  vidbatch ./VIDEOS --force         # Re-analyze all files
  vidbatch ./VIDEOS --no-recursive  # Top-level directory only

Interrupting with Ctrl+C stops the running analyzer and exits without
writing a batch report. Finished outputs are kept and skipped next time.
"""


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="vidbatch",
        description="Run the video analyzer over every video in a directory tree.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "directory",
        type=Path,
        nargs="?",
        default=None,
        help="Directory to analyze (default: current directory)",
    )
    parser.add_argument(
        "-d", "--delay",
        type=float,
        default=0.0,
        help="Delay between frames in seconds (default: 0)",
    )
    parser.add_argument(
        "-f", "--frame-skip",
        dest="frame_skip",
        type=int,
        default=DEFAULT_FRAME_SKIP,
        help=f"Process every Nth frame (default: {DEFAULT_FRAME_SKIP})",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Force re-analyze files that already have output",
    )
    parser.add_argument(
        "-r", "--recursive",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Search subdirectories recursively (default: on)",
    )
    parser.add_argument(
        "--extension",
        type=str,
        default=DEFAULT_EXTENSION,
        help=f"File extension to analyze, case-insensitive (default: {DEFAULT_EXTENSION})",
    )
    parser.add_argument(
        "--analyzer",
        type=str,
        default=" ".join(DEFAULT_ANALYZER),
        help="Analyzer command line (default: %(default)s)",
    )
    parser.add_argument(
        "--no-slim",
        dest="slim",
        action="store_false",
        help="Do not pass --slim to the analyzer",
    )
    parser.add_argument(
        "--sort",
        action="store_true",
        help="Process files sorted by path instead of directory listing order",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def setup_logging(verbose: bool) -> None:
    """Route library logging through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


def build_config(args: argparse.Namespace) -> BatchConfig:
    """Build the batch config from parsed args.

    Raises:
        StartupFatalError: The target directory is missing or not a directory.
        ValueError: Any other invalid option.
    """
    return BatchConfig(
        directory=args.directory if args.directory is not None else Path.cwd(),
        delay=args.delay,
        frame_skip=args.frame_skip,
        force=args.force,
        recursive=args.recursive,
        extension=args.extension,
        analyzer_command=parse_analyzer_command(args.analyzer),
        slim=args.slim,
        sort=args.sort,
    )


def cmd_analyze(config: BatchConfig, reporter) -> int:
    """Run the batch and write the report."""
    from .engines.analyzer import VideoAnalyzer
    from .services.gate import IdempotencyGate
    from .services.report import ReportWriter
    from .services.runner import JobRunner, RunnerDependencies
    from .services.scanner import DirectoryScanner

    reporter.print_header(f"Video Batch Analyzer v{__version__}")
    reporter.print_config({
        "Directory": str(config.directory),
        "Delay between frames": f"{config.delay}s",
        "Frame skip": f"every {config.frame_skip} frame(s)",
        "Skip existing": "No" if config.force else "Yes",
        "Recursive search": "Yes" if config.recursive else "No",
        "Analyzer": " ".join(config.analyzer_command),
    })

    deps = RunnerDependencies(
        analyzer=VideoAnalyzer(
            command=config.analyzer_command,
            slim=config.slim,
            max_buffer=config.max_buffer,
        ),
        scanner=DirectoryScanner(
            extension=config.extension,
            follow_symlinks=config.follow_symlinks,
            progress=reporter,
        ),
        gate=IdempotencyGate(force=config.force, extension=config.extension),
        progress=reporter,
    )

    outcome = JobRunner(config=config, deps=deps).run()
    if outcome.nothing_to_do:
        return 0

    report_path = None
    write_error = None
    try:
        report_path = ReportWriter(config.directory).write(
            outcome.results, config, outcome.total_duration,
        )
    except ReportWriteError as e:
        write_error = e

    reporter.print_summary(outcome.summary(), outcome.errors)

    if write_error is not None:
        reporter.error(str(write_error))
        return 1

    reporter.success("Analysis complete!")
    reporter.info(f"Results saved in: {config.directory}")
    reporter.info(f"Batch report: {report_path.relative_to(config.directory)}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.quiet:
        reporter = QuietProgressReporter()
    else:
        reporter = RichProgressReporter(verbose=args.verbose)

    try:
        config = build_config(args)
    except StartupFatalError as e:
        reporter.error(f"Error: {e}")
        return 1
    except ValueError as e:
        reporter.error(f"Invalid option: {e}")
        return 2

    try:
        return cmd_analyze(config, reporter)
    except KeyboardInterrupt:
        # Clean exit on Ctrl+C - no stack trace
        reporter.error("Analysis interrupted by user")
        return 130
    except Exception as e:
        reporter.error(f"Fatal error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
