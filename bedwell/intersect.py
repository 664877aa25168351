"""
Intersecting Region Files
-------------------------

This module contains :class:`~bedwell.intersect.Intersecter`, which intersects a region file ``A``
with a region file ``B``, in one of two modes:

    - a single run, with one overlap percentage (or any overlap): every region of ``A`` is
      classified as overlapping ``B`` or not, the regions of ``B`` are classified as matched or
      not, distances between overlapping pairs and between nearby non-overlapping pairs can be
      computed, and the selected outputs are written.
    - a batch run, with several overlap percentages: the classification is repeated from scratch
      for each percentage, and only the number of regions in each selected class (plus the mean
      and median anchor distance between overlapping pairs) is reported, one row per percentage.

Examples
~~~~~~~~

.. code-block:: python

    >>> from bedwell.intersect import Intersecter
    >>> from bedwell.options import IntersectOptions, OutputKind
    >>> options = IntersectOptions(input_a="a.bed", input_b="b.bed",
    ...                            outputs=[OutputKind.OverlapA, OutputKind.OnlyA])
    >>> result = Intersecter(options).run()
    >>> len(result.collections.overlap_a)
    42

Implementation
~~~~~~~~~~~~~~

File ``B`` is indexed once per chromosome (:class:`~bedwell.overlap_detector.RegionIndex`) and
file ``A`` is scanned in file order.  Regions of ``A`` on a chromosome absent from ``B`` match
nothing.  With centered matching, ``B`` is indexed by the windows around each region's anchor;
neighbours for nonpairs are always searched on the regions' own coordinates.

Batch runs share nothing between percentages, so with ``threads > 1`` each percentage is
classified in its own worker process.
"""

import logging
import statistics
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path
from typing import Dict
from typing import List
from typing import Optional
from typing import Tuple

import attr

from bedwell.classified import ClassifiedCollections
from bedwell.distances import PairDistance
from bedwell.distances import RegionPair
from bedwell.distances import centered_distance
from bedwell.distances import raw_distance
from bedwell.options import IntersectOptions
from bedwell.options import OutputKind
from bedwell.overlap_detector import RegionIndex
from bedwell.policies import Extension
from bedwell.policies import Matcher
from bedwell.policies import median_extension
from bedwell.region import Region
from bedwell.region_reader import RegionSet
from bedwell.region_reader import read_regions
from bedwell.region_reader import sort_region_file
from bedwell.scratch import scratch_directory
from bedwell.writer import DistributionRow
from bedwell.writer import distribution_path
from bedwell.writer import output_path
from bedwell.writer import write_distribution
from bedwell.writer import write_pairs
from bedwell.writer import write_regions

logger = logging.getLogger(__name__)

# The collections reported in batch runs, in column order
_COUNTED_KINDS: Tuple[OutputKind, ...] = (
    OutputKind.OverlapA, OutputKind.OverlapB, OutputKind.OnlyA, OutputKind.OnlyB
)


@attr.s(frozen=True, auto_attribs=True)
class IntersectResult:
    """The outcome of classifying file ``A`` against file ``B`` at one percentage.

    Attributes:
        percent: the overlap percentage used (ignored by the any policy)
        collections: the classified regions
        overpairs: the overlapping pairs, with distances
        nonpairs: nearby non-overlapping pairs, with distances
    """

    percent: float
    collections: ClassifiedCollections
    overpairs: List[RegionPair] = attr.ib(factory=list)
    nonpairs: List[RegionPair] = attr.ib(factory=list)

    def count(self, kind: OutputKind) -> int:
        """The number of regions in the collection of the given kind."""
        return len({
            OutputKind.OverlapA: self.collections.overlap_a,
            OutputKind.OverlapB: self.collections.overlap_b,
            OutputKind.OnlyA: self.collections.only_a,
            OutputKind.OnlyB: self.collections.only_b,
        }[kind])


class Intersecter:
    """Intersects two region files.

    Args:
        options: the options of the run
    """

    def __init__(self, options: IntersectOptions) -> None:
        self.options = options

    def read_inputs(self) -> Tuple[RegionSet, RegionSet]:
        """Reads both inputs, sorting them first in a scratch directory if requested.

        Raises:
            FileNotFoundError: if either input does not exist
        """
        opts = self.options
        if not opts.sort:
            return (read_regions(opts.input_a, mode_column=opts.mode_column),
                    read_regions(opts.input_b, mode_column=opts.mode_column))

        with scratch_directory() as tmpdir:
            sorted_a = sort_region_file(opts.input_a, tmpdir / "tempA.in")
            sorted_b = sort_region_file(opts.input_b, tmpdir / "tempB.in")
            regions_a = read_regions(sorted_a, mode_column=opts.mode_column)
            regions_b = read_regions(sorted_b, mode_column=opts.mode_column)
        # Report under the input names
        regions_a.path, regions_b.path = opts.input_a, opts.input_b
        return regions_a, regions_b

    def extension_length(self, regions_a: RegionSet, regions_b: RegionSet) -> Optional[int]:
        """The extension on each side for autoextend runs, None otherwise."""
        if not self.options.autoextend:
            return None
        return median_extension([regions_a, regions_b])

    def _distance(self, matcher: Matcher, a: Region, b: Region) -> PairDistance:
        if matcher.extension is Extension.Centered:
            return centered_distance(a, b, matcher.upstream, matcher.downstream)
        return raw_distance(a, b)

    def _neighbours(self, query: Region, index: Optional[RegionIndex]) -> List[RegionPair]:
        """The nonpairs of an unmatched query: its closest regions up- and downstream."""
        if index is None:
            return []
        opts = self.options
        neighbours = (index.upstream(query, max_results=opts.maxud, max_distance=opts.gap)
                      + index.downstream(query, max_results=opts.maxud, max_distance=opts.gap))
        return [RegionPair(a=query, b=b, distance=raw_distance(query, b)) for b in neighbours]

    def classify(self,
                 regions_a: RegionSet,
                 regions_b: RegionSet,
                 percent: Optional[float] = None,
                 extend: Optional[int] = None,
                 with_overpairs: Optional[bool] = None) -> IntersectResult:
        """Classifies the regions of both files at one percentage.

        Args:
            regions_a: the regions of the first file
            regions_b: the regions of the second file
            percent: the overlap percentage; the first configured one if not given
            extend: the extension on each side computed for autoextend runs
            with_overpairs: compute overlapping pair distances; only if requested if not given

        Returns:
            the classified regions and the requested pairs
        """
        opts = self.options
        matcher = opts.matcher(percent=percent, extend=extend)
        if with_overpairs is None:
            with_overpairs = opts.wants(OutputKind.OverPairs)
        with_nonpairs = opts.wants(OutputKind.NonPairs) and opts.gap > 0

        indexes = matcher.build_indexes(regions_b)
        neighbour_indexes: Dict[str, RegionIndex] = {}
        if with_nonpairs:
            neighbour_indexes = (indexes if matcher.extension is Extension.Raw
                                 else RegionIndex.build_all(regions_b))

        collections = ClassifiedCollections.empty(report_once=opts.report_once,
                                                  keep_order=opts.keep_order)
        overpairs: List[RegionPair] = []
        nonpairs: List[RegionPair] = []
        for query in regions_a:
            result = matcher.match(query, indexes.get(query.chrom))
            if result:
                collections.add_match(query, result.candidates)
                if with_overpairs:
                    overpairs.extend(
                        RegionPair(a=query, b=b, distance=self._distance(matcher, query, b))
                        for b in result.candidates
                    )
            else:
                collections.add_unmatched(query)
                if with_nonpairs:
                    nonpairs.extend(self._neighbours(query, neighbour_indexes.get(query.chrom)))

        logger.debug("Retrieving only-B regions...")
        collections.resolve_only_b(regions_b)
        return IntersectResult(percent=matcher.percent,
                               collections=collections,
                               overpairs=overpairs,
                               nonpairs=nonpairs)

    def run(self) -> IntersectResult:
        """Runs a single intersection, writing the requested outputs unless this is a dry run.

        Raises:
            FileNotFoundError: if either input does not exist
            ValueError: if several percentages are configured; use
                :meth:`~bedwell.intersect.Intersecter.distribution` instead
        """
        opts = self.options
        if opts.batch:
            raise ValueError("Several overlap percentages given, run a distribution instead")
        self._describe()

        regions_a, regions_b = self.read_inputs()
        result = self.classify(regions_a, regions_b,
                               extend=self.extension_length(regions_a, regions_b))
        if not opts.dry_run:
            self.write(result, regions_a, regions_b)
        self.report(result, regions_a, regions_b)
        return result

    def write(self, result: IntersectResult, regions_a: RegionSet, regions_b: RegionSet) -> None:
        """Writes the requested outputs of a single run."""
        opts = self.options
        name_a, name_b = opts.input_a.stem, opts.input_b.stem
        collections = result.collections
        logger.info("Writing output...")

        def _path(tag: str) -> Path:
            return output_path(opts.input_a, opts.input_b, tag, directory=opts.destination)

        if opts.wants(OutputKind.OverlapA):
            write_regions(_path(f"OVERLAP_FROM_{name_a}"), collections.overlap_a, regions_a.header)
        if opts.wants(OutputKind.OverlapB):
            write_regions(_path(f"OVERLAP_FROM_{name_b}"), collections.overlap_b, regions_b.header)
        if opts.wants(OutputKind.OnlyA):
            write_regions(_path(f"ONLY_{name_a}"), collections.only_a, regions_a.header)
        if opts.wants(OutputKind.OnlyB):
            write_regions(_path(f"ONLY_{name_b}"), collections.only_b, regions_b.header)
        if opts.wants(OutputKind.OverPairs):
            write_pairs(_path("OVERDIST"), result.overpairs, regions_a.header, regions_b.header)
        if opts.wants(OutputKind.NonPairs):
            write_pairs(_path("NONDIST"), result.nonpairs, regions_a.header, regions_b.header)

    def report(self, result: IntersectResult, regions_a: RegionSet, regions_b: RegionSet) -> None:
        """Logs the size of each collection."""
        name_a, name_b = self.options.input_a.name, self.options.input_b.name
        total_a, total_b = len(regions_a), len(regions_b)
        logger.info("--- STATS ---")
        logger.info("%d out of %d regions from %s overlap with regions from %s",
                    result.count(OutputKind.OverlapA), total_a, name_a, name_b)
        logger.info("%d out of %d regions from %s overlap with regions from %s",
                    result.count(OutputKind.OverlapB), total_b, name_b, name_a)
        logger.info("%d out of %d regions exist only in %s",
                    result.count(OutputKind.OnlyA), total_a, name_a)
        logger.info("%d out of %d regions exist only in %s",
                    result.count(OutputKind.OnlyB), total_b, name_b)

    def column_names(self) -> List[str]:
        """The names of the collection columns of the distribution table."""
        name_a, name_b = self.options.input_a.name, self.options.input_b.name
        names = {
            OutputKind.OverlapA: f"Overlap {name_a}",
            OutputKind.OverlapB: f"Overlap {name_b}",
            OutputKind.OnlyA: f"Only {name_a}",
            OutputKind.OnlyB: f"Only {name_b}",
        }
        return [names[kind] for kind in _COUNTED_KINDS if self.options.wants(kind)]

    def distribution_row(self,
                         regions_a: RegionSet,
                         regions_b: RegionSet,
                         percent: float,
                         extend: Optional[int] = None) -> DistributionRow:
        """Classifies at one percentage and summarizes the result as a distribution row."""
        logger.info("Overlap percentage: %s", percent)
        result = self.classify(regions_a, regions_b, percent=percent, extend=extend,
                               with_overpairs=True)
        counts = [result.count(kind) for kind in _COUNTED_KINDS if self.options.wants(kind)]
        distances = [pair.distance.anchor for pair in result.overpairs]
        return DistributionRow(percent=percent,
                               counts=counts,
                               mean_distance=statistics.mean(distances) if distances else None,
                               median_distance=statistics.median(distances) if distances else None)

    def distribution(self) -> List[DistributionRow]:
        """Runs the intersection once per percentage and writes the distribution table.

        Dry runs write the table too; only per-region files are suppressed.

        Raises:
            FileNotFoundError: if either input does not exist
        """
        opts = self.options
        self._describe()
        regions_a, regions_b = self.read_inputs()
        extend = self.extension_length(regions_a, regions_b)

        if opts.threads > 1 and len(opts.percent) > 1:
            with ProcessPoolExecutor(max_workers=min(opts.threads, len(opts.percent))) as pool:
                futures = [pool.submit(_distribution_row, opts, regions_a, regions_b, p, extend)
                           for p in opts.percent]
                rows = [future.result() for future in futures]
        else:
            rows = [self.distribution_row(regions_a, regions_b, p, extend) for p in opts.percent]

        for row in rows:
            logger.info("%s%%: %s", row.percent, "\t".join(str(c) for c in row.counts))
        path = distribution_path(opts.input_a, opts.input_b, directory=opts.destination)
        write_distribution(path, self.column_names(), rows)
        return rows

    def _describe(self) -> None:
        opts = self.options
        if opts.batch:
            logger.info("Multiple overlap percentages... Running in batch mode to determine "
                        "overlapping distributions...")
        elif opts.policy.uses_threshold:
            logger.info("Type of overlap: %s%% overlap (%s)", opts.percent[0], opts.policy.value)
        else:
            logger.info("Type of overlap: any overlap")
        if opts.extend is not None:
            logger.info("Extending region modes upstream %d and downstream %d bps", *opts.extend)
        elif opts.autoextend:
            logger.info("Region modes extension on each side will be auto-calculated...")
        if opts.gap > 0 and opts.wants(OutputKind.NonPairs):
            logger.info("Retrieving distances between non-overlapping regions if distance <= %d "
                        "bps", opts.gap)


def _distribution_row(options: IntersectOptions,
                      regions_a: RegionSet,
                      regions_b: RegionSet,
                      percent: float,
                      extend: Optional[int]) -> DistributionRow:
    """Computes one distribution row in a worker process."""
    return Intersecter(options).distribution_row(regions_a, regions_b, percent, extend)
