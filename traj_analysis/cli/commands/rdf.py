"""Radial distribution function command."""

import argparse
import sys
import traceback
from pathlib import Path

from ...analysis.errors import AnalysisError, ErrorKind
from ...analysis.parameters import AverageOptions, RdfParameters
from ...analysis.properties.rdf import RDF
from ...utils.logger import configure_logger, get_logger

DESCRIPTION = "Compute radial distribution functions"

EPILOG = """
Compute pair radial distribution function (often called g(r)). The pairs of
atoms to use are given with the selection language, either as a single atom
selection ("name O") or as a pair selection ("pairs: name($1) O and
name($2) H"). An alternative topology or unit cell can be given when this
information is not present in the trajectory.

Examples:
  Oxygen-oxygen RDF in a water trajectory:
    traj-analysis rdf water.xyz --cell 28 --selection "name O"

  Oxygen-hydrogen pairs, 150 points up to 6 Å:
    traj-analysis rdf water.extxyz -s "pairs: name($1) O and name($2) H" \\
        --max 6 --points 150

  Every tenth step of the first thousand, with a plot:
    traj-analysis rdf run.lammpstrj --format lammps-dump-text \\
        --steps 0:1000:10 --plot rdf.png
"""


def add_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the rdf options to ``parser``."""
    parser.add_argument(
        "trajectory",
        type=str,
        metavar="TRAJECTORY",
        help="Trajectory file path, in any format ASE can read",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=str,
        metavar="FILE",
        help="Write result to FILE. Defaults to the trajectory file name with a `.rdf` extension",
    )

    parser.add_argument(
        "--selection",
        "-s",
        type=str,
        default="all",
        metavar="SEL",
        help='Selection to use for the atoms, single ("name O") or pairs '
        '("pairs: name($1) O and name($2) H") (default: all)',
    )

    parser.add_argument(
        "--max",
        type=float,
        default=10.0,
        metavar="DIST",
        dest="rmax",
        help="Maximal distance to use in Angstroms (default: 10)",
    )

    parser.add_argument(
        "--points",
        "-p",
        type=int,
        default=200,
        metavar="N",
        help="Number of points in the histogram (default: 200)",
    )

    parser.add_argument(
        "--format",
        type=str,
        metavar="FORMAT",
        help="Force the input file format to be FORMAT (ASE format name)",
    )

    parser.add_argument(
        "--topology",
        "-t",
        type=str,
        metavar="PATH",
        help="Alternative topology file for the input",
    )

    parser.add_argument(
        "--topology-format",
        type=str,
        metavar="FORMAT",
        help="Use FORMAT as format for the topology file",
    )

    parser.add_argument(
        "--cell",
        "-c",
        type=str,
        metavar="CELL",
        help="Alternative unit cell, as <a:b:c:α:β:γ>, <a:b:c> or <a>. Lengths are in "
        "Angstroms and angles in degrees. Sets the maximal distance to half the "
        "shortest cell length",
    )

    parser.add_argument(
        "--steps",
        type=str,
        metavar="STEPS",
        help="Steps to use from the input, as <start>:<end>[:<stride>] with every part "
        "optional. Default is to use all steps",
    )

    parser.add_argument(
        "--save-data",
        type=str,
        metavar="FILE",
        help="Also save the RDF as CSV (.csv), JSON (.json) or NumPy (.npz)",
    )

    parser.add_argument(
        "--plot",
        type=str,
        metavar="FILE",
        help="Also plot g(r) with matplotlib to FILE (.png, .pdf, .svg)",
    )


def add_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add the rdf command parser."""
    parser = subparsers.add_parser(
        "rdf",
        help=DESCRIPTION,
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    add_arguments(parser)


def build_parameters(args: argparse.Namespace) -> RdfParameters:
    """Convert parsed command line arguments to RDF parameters."""
    return RdfParameters(
        average=AverageOptions(
            trajectory=args.trajectory,
            format=args.format,
            steps=args.steps,
            cell=args.cell,
            topology=args.topology,
            topology_format=args.topology_format,
        ),
        output=args.output,
        selection=args.selection,
        rmax=args.rmax,
        npoints=args.points,
    )


def handle_command(args: argparse.Namespace) -> int:
    """
    Handle the rdf command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, 2 for invalid options, 1 for other failures)
    """
    logger = get_logger()
    verbose = getattr(args, "verbose", False)

    try:
        parameters = build_parameters(args)

        logger.step(f"Computing RDF for trajectory: {Path(args.trajectory).name}")
        result = RDF().compute(parameters)

        logger.step(f"Writing RDF to {parameters.output}")
        result.write(parameters.output)

        if args.save_data:
            save_path = Path(args.save_data)
            format_ext = save_path.suffix.lstrip(".")
            if format_ext not in ["csv", "json", "npz"]:
                logger.warning(f"Unknown format '{format_ext}', defaulting to CSV")
                format_ext = "csv"
            result.save(save_path, format=format_ext)
            logger.info(f"Data saved to {save_path}")

        if args.plot:
            import matplotlib

            matplotlib.use("Agg")
            result.plot(output=args.plot)

        logger.info(f"Pairs counted: {result.npairs} over {result.nframes} frame(s)")
        logger.success("Analysis complete!")
        return 0

    except AnalysisError as e:
        logger.error(str(e))
        if verbose:
            traceback.print_exc()
        return 2 if e.kind == ErrorKind.CONFIGURATION else 1

    except Exception as e:
        logger.error(f"Error during RDF analysis: {e}")
        if verbose:
            traceback.print_exc()
        return 1


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the standalone traj-rdf command.

    Args:
        argv: Command line arguments (for testing). If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = argparse.ArgumentParser(
        prog="traj-rdf",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    add_arguments(parser)
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

    args = parser.parse_args(argv)

    if args.quiet and args.verbose:
        parser.error("Cannot use --quiet and --verbose together")

    configure_logger(verbose=args.verbose, quiet=args.quiet)
    return handle_command(args)


if __name__ == "__main__":
    sys.exit(main())
