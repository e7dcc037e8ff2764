"""Command-line entry points for the chadoxml stripper and extractor."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from .config import Config
from .errors import ChadoxmlError, EmbeddedWiggleError
from .extractor import MetadataExtractor
from .logger import get_logger, init_logging, log_exception
from .stripper import ChadoxmlStripper

log = get_logger(__name__)

WIGGLE_HINT = "(Wiggle files will be made in the destination directory.)"


def _console() -> Console:
    return Console(highlight=False, soft_wrap=True, emoji=False)


def build_parser(prog: str, description: str) -> argparse.ArgumentParser:
    """Parser shared by both tools.

    Positionals are collected loosely so the tools themselves can print
    their usage line when the count is wrong, instead of argparse's error.
    Flags may appear anywhere, including between the two paths.
    """
    parser = argparse.ArgumentParser(prog=prog, description=description, add_help=True)
    parser.add_argument("paths", nargs="*", help="<source> <dest>")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print a run summary when done"
    )
    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Log every state transition to stderr"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail if the input ends inside an open element"
    )
    parser.add_argument(
        "-e", "--env",
        type=str,
        default=".env",
        help="Path to .env file (default: .env)"
    )
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Environment configuration with command-line flags layered on top."""
    config = Config.from_env(Path(args.env))
    config.verbose = config.verbose or args.verbose
    config.debug = config.debug or args.debug
    config.strict = config.strict or args.strict
    config.validate()
    init_logging(
        log_dir=config.log_dir,
        level=logging.INFO,
        debug=config.debug,
    )
    return config


def print_usage(console: Console, usage: str) -> None:
    console.print(usage, markup=False)
    console.print(WIGGLE_HINT, markup=False)


def run_strip(argv: Optional[List[str]] = None) -> int:
    """Run the feature stripper; returns the process exit code."""
    parser = build_parser("chadoxml-strip", "Strip feature elements from a chadoxml file")
    args = parser.parse_intermixed_args(argv)
    console = _console()

    if len(args.paths) != 2:
        print_usage(console, "Usage: chadoxml-strip [-v] [-d] <source> <dest>")
        return 0

    try:
        config = load_config(args)
    except ValueError as e:
        console.print(f"Configuration error: {e}", markup=False)
        return 1

    source, dest = args.paths
    log.info("strip %s -> %s", source, dest)

    stripper = ChadoxmlStripper(source, dest, config=config)
    if not stripper.ready:
        return 1

    try:
        stats = stripper.strip_features()
    except EmbeddedWiggleError:
        # Already reported by the stripper
        return 1
    except ChadoxmlError as e:
        console.print(f"Error: {e}", markup=False)
        return 1
    except Exception as e:
        log_exception(log, "strip failed", e)
        raise

    if config.verbose:
        console.print(stats.to_message(), markup=False)
    return 0


def run_extract(argv: Optional[List[str]] = None) -> int:
    """Run the metadata extractor; returns the process exit code."""
    parser = build_parser(
        "make-metadata-chadoxml",
        "Strip features from a chadoxml file and move wiggle data into sidecar files",
    )
    args = parser.parse_intermixed_args(argv)
    console = _console()

    if len(args.paths) != 2:
        print_usage(console, "Usage: make-metadata-chadoxml <source> <dest>")
        return 0

    try:
        config = load_config(args)
    except ValueError as e:
        console.print(f"Configuration error: {e}", markup=False)
        return 1

    source, dest = args.paths
    log.info("extract %s -> %s", source, dest)

    extractor = MetadataExtractor(source, dest, config=config)
    if not extractor.ready:
        return 1

    try:
        stats = extractor.extract()
    except ChadoxmlError as e:
        console.print(f"Error: {e}", markup=False)
        return 1
    except Exception as e:
        log_exception(log, "extract failed", e)
        raise

    if config.verbose:
        console.print(stats.to_message(), markup=False)
    return 0


def strip_main():
    """Console-script entry point for chadoxml-strip."""
    sys.exit(run_strip())


def extract_main():
    """Console-script entry point for make-metadata-chadoxml."""
    sys.exit(run_extract())


if __name__ == "__main__":
    strip_main()
