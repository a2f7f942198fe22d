#!/usr/bin/env python3
"""Main entry point for the traj-analysis CLI."""

import argparse
import sys

from .. import __version__
from ..utils.logger import configure_logger
from .commands import rdf


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="traj-analysis",
        description="Analysis of molecular dynamics trajectories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Radial distribution function of all atoms:
    traj-analysis rdf trajectory.xyz --cell 20

  Oxygen-hydrogen radial distribution function:
    traj-analysis rdf water.extxyz --selection "pairs: name($1) O and name($2) H"

For more help on specific commands:
    traj-analysis rdf --help
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress all output except errors",
    )

    subparsers = parser.add_subparsers(
        title="Commands",
        dest="command",
        help="Available commands",
        required=True,
    )

    rdf.add_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (for testing). If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.quiet and args.verbose:
        parser.error("Cannot use --quiet and --verbose together")

    configure_logger(verbose=args.verbose, quiet=args.quiet)

    if args.command == "rdf":
        return rdf.handle_command(args)

    parser.error(f"Unknown command: {args.command}")


if __name__ == "__main__":
    sys.exit(main())
