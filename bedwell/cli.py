"""
Command Line Interface
----------------------

The ``bedwell`` command intersects two region files:

.. code-block:: shell

    bedwell -a peaksA.bed -b peaksB.bed -p 50 -o overlapA onlyA onlyB
    bedwell -a peaksA.bed -b peaksB.bed -p 10:90 -t -o overlapA overlapB

Without ``--percent`` (or with ``--any``) any overlap counts.  More than one percentage runs in
batch mode and writes the distribution table only.
"""

import argparse
import logging
import sys
from typing import List
from typing import Optional

from bedwell import __version__
from bedwell.intersect import Intersecter
from bedwell.options import IntersectOptions
from bedwell.options import OutputKind
from bedwell.policies import OverlapPolicy

logger = logging.getLogger(__name__)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses command-line arguments. Order: inputs, overlap, extension, outputs, run options."""
    parser = argparse.ArgumentParser(prog="bedwell",
                                     description="Intersect two genomic region files",
                                     formatter_class=argparse.ArgumentDefaultsHelpFormatter)

    # Inputs
    parser.add_argument("-a", "--inputA", dest="input_a", required=True, metavar="FILE",
                        help="First region file")
    parser.add_argument("-b", "--inputB", dest="input_b", required=True, metavar="FILE",
                        help="Second region file")

    # Overlap
    parser.add_argument("-p", "--percent", dest="percent", nargs="+", default=[], metavar="PERCENT",
                        help="Overlap percentage(s) in (0, 100]; ranges such as 10:90 are "
                             "expanded. More than one runs in batch mode")
    parser.add_argument("-y", "--any", dest="any", action="store_true",
                        help="Any overlap counts; overrides --percent")
    parser.add_argument("-t", "--both", dest="both", action="store_true",
                        help="A partial overlap may meet the percentage on either region")
    parser.add_argument("-c", "--exact", dest="exact", action="store_true",
                        help="Contained regions must also meet the percentage")

    # Extension
    parser.add_argument("-e", "--extend", dest="extend", nargs="+", type=int, default=None,
                        metavar="BP", help="Bases to extend upstream (and downstream) of each "
                                         "region's anchor; one value extends both sides")
    parser.add_argument("-x", "--autoextend", dest="autoextend", action="store_true",
                        help="Extend both sides of each anchor by half the median region length")
    parser.add_argument("-m", "--mode", dest="mode", type=int, default=None, metavar="COLUMN",
                        help="0-based column holding each region's anchor, e.g. a peak summit")

    # Outputs
    parser.add_argument("-o", "--output", dest="output", nargs="+", default=["overlapA"],
                        choices=[kind.value for kind in OutputKind], metavar="KIND",
                        help="Outputs to write: "
                             + ", ".join(kind.value for kind in OutputKind))
    parser.add_argument("-g", "--gap", dest="gap", type=int, default=0, metavar="BP",
                        help="Maximum distance to neighbours reported with the nonpairs output")
    parser.add_argument("-n", "--maxud", dest="maxud", type=int, default=0, metavar="N",
                        help="Maximum neighbours on each side reported with the nonpairs "
                             "output; 0 for no limit")
    parser.add_argument("-u", "--reportonce", dest="report_once", action="store_true",
                        help="Report each region once even if it matched several times")
    parser.add_argument("-d", "--keeporder", dest="keep_order", action="store_true",
                        help="Write regions in input order")
    parser.add_argument("--output-dir", dest="output_dir", default=None, metavar="DIR",
                        help="Output directory; the directory of the first file if not given")

    # Run options
    parser.add_argument("-z", "--dryrun", dest="dry_run", action="store_true",
                        help="Report counts without writing per-region files")
    parser.add_argument("-r", "--sort", dest="sort", action="store_true",
                        help="Sort the input files before reading")
    parser.add_argument("--threads", dest="threads", type=int, default=1, metavar="N",
                        help="Worker processes used in batch mode")
    parser.add_argument("-s", "--silent", dest="silent", action="store_true",
                        help="Only log warnings and errors")
    parser.add_argument("-v", "--verbose", dest="verbose", action="store_true",
                        help="Log debugging messages")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser.parse_args(argv)


def _policy(args: argparse.Namespace) -> OverlapPolicy:
    if args.any or not args.percent:
        return OverlapPolicy.Any
    if args.both and args.exact:
        return OverlapPolicy.PercentExactBoth
    elif args.both:
        return OverlapPolicy.PercentBoth
    elif args.exact:
        return OverlapPolicy.PercentExact
    return OverlapPolicy.Percent


def build_options(args: argparse.Namespace) -> IntersectOptions:
    """Builds the run options from parsed arguments.

    Raises:
        ValueError: if the arguments are inconsistent
    """
    policy = _policy(args)
    return IntersectOptions(input_a=args.input_a,
                            input_b=args.input_b,
                            policy=policy,
                            percent=args.percent if policy.uses_threshold else (),
                            extend=args.extend,
                            autoextend=args.autoextend,
                            mode_column=args.mode,
                            gap=args.gap,
                            maxud=args.maxud,
                            outputs=args.output,
                            report_once=args.report_once,
                            keep_order=args.keep_order,
                            dry_run=args.dry_run,
                            sort=args.sort,
                            output_dir=args.output_dir,
                            threads=args.threads)


def main(argv: Optional[List[str]] = None) -> int:
    """Runs the command line, returning the exit status."""
    args = parse_arguments(argv)
    level = logging.DEBUG if args.verbose else logging.WARNING if args.silent else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        options = build_options(args)
        intersecter = Intersecter(options)
        if options.batch:
            intersecter.distribution()
        else:
            intersecter.run()
    except (OSError, ValueError) as ex:
        logger.error("%s", ex)
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
