"""
Writing Intersection Results
----------------------------

This module writes the results of intersecting a file ``A`` with a file ``B``.  Output files are
written next to ``A`` (or to a chosen directory) and named after both inputs, e.g. intersecting
``peaksA.bed`` with ``peaksB.bed``:

    - ``peaksA_peaksB_OVERLAP_FROM_peaksA.bed`` -- regions of A overlapping B
    - ``peaksA_peaksB_OVERLAP_FROM_peaksB.bed`` -- regions of B overlapped by A
    - ``peaksA_peaksB_ONLY_peaksA.bed`` -- regions only in A
    - ``peaksA_peaksB_ONLY_peaksB.bed`` -- regions only in B
    - ``peaksA_peaksB_OVERDIST.bed`` -- overlapping pairs with their distances
    - ``peaksA_peaksB_NONDIST.bed`` -- nearby non-overlapping pairs with their distances
    - ``peaksA_peaksB_DISTRIB.txt`` -- the distribution table of a batch run

Region files start with the input's header line, if it had one.
"""

import logging
from pathlib import Path
from typing import Iterable
from typing import List
from typing import Optional
from typing import Sequence

import attr

from bedwell.distances import RegionPair
from bedwell.region import Region

logger = logging.getLogger(__name__)


def basename(path: Path) -> str:
    """The file name without its last extension."""
    return path.stem


def output_path(input_a: Path, input_b: Path, tag: str, directory: Optional[Path] = None) -> Path:
    """The path of an output file for the given tag.

    Args:
        input_a: the first input file
        input_b: the second input file
        tag: the output tag, e.g. ``OVERDIST``
        directory: where to write; the directory of the first input if not given
    """
    directory = input_a.parent if directory is None else directory
    return directory / f"{basename(input_a)}_{basename(input_b)}_{tag}{input_a.suffix}"


def distribution_path(input_a: Path, input_b: Path, directory: Optional[Path] = None) -> Path:
    """The path of the distribution table of a batch run, which is always a ``.txt`` file."""
    directory = input_a.parent if directory is None else directory
    return directory / f"{basename(input_a)}_{basename(input_b)}_DISTRIB.txt"


def write_regions(path: Path, regions: Iterable[Region], header: Optional[str] = None) -> int:
    """Writes regions as tab-delimited records, returning the number written."""
    count = 0
    with path.open("w") as out:
        if header:
            out.write(header + "\n")
        for region in regions:
            out.write(region.to_line() + "\n")
            count += 1
    logger.info("Wrote %d regions to %s", count, path)
    return count


def write_pairs(path: Path,
                pairs: Iterable[RegionPair],
                header_a: Optional[str] = None,
                header_b: Optional[str] = None) -> int:
    """Writes region pairs followed by their edge, anchor and outer distances."""
    count = 0
    with path.open("w") as out:
        if header_a and header_b:
            out.write(f"{header_a}\t{header_b}\tedge\tanchor\touter\n")
        for pair in pairs:
            out.write(pair.to_line() + "\n")
            count += 1
    logger.info("Wrote %d pairs to %s", count, path)
    return count


@attr.s(frozen=True, auto_attribs=True)
class DistributionRow:
    """One row of the distribution table of a batch run.

    Attributes:
        percent: the overlap percentage
        counts: the sizes of the selected collections, in output order
        mean_distance: the mean overpair anchor distance, None if there were no overpairs
        median_distance: the median overpair anchor distance, None if there were no overpairs
    """

    percent: float
    counts: Sequence[int] = attr.ib(converter=tuple)
    mean_distance: Optional[float] = None
    median_distance: Optional[float] = None


def _format_number(value: Optional[float]) -> str:
    if value is None:
        return "NA"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def write_distribution(path: Path,
                       column_names: Sequence[str],
                       rows: Iterable[DistributionRow]) -> None:
    """Writes the distribution table of a batch run.

    Args:
        path: the path to write to
        column_names: the names of the collection columns, in the order of each row's counts
        rows: the rows, one per percentage
    """
    header: List[str] = ["Percentage", *column_names, "Mean distance", "Median distance"]
    with path.open("w") as out:
        out.write("\t".join(header) + "\n")
        for row in rows:
            values = [_format_number(row.percent), *(str(c) for c in row.counts),
                      _format_number(row.mean_distance), _format_number(row.median_distance)]
            out.write("\t".join(values) + "\n")
    logger.info("Wrote distribution to %s", path)
