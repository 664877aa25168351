"""
Indexing Regions for Overlap Queries
------------------------------------

This module contains the per-chromosome index used to find the regions of one file that touch a
window, built on :class:`~pybedlite.overlap_detector.OverlapDetector`.

Regions use closed coordinates and synthetic windows (e.g. a peak summit extended on both sides)
may start before position zero, whereas the detector stores 0-based, half-open, non-negative
intervals.  Each indexed window ``[s, e]`` is stored as ``[max(s, 0), max(e, 0) + 1)`` and each
query window is mapped the same way, which never loses a true hit; every hit is then re-checked
against the exact closed bounds.

Examples of Stabbing Queries
~~~~~~~~~~~~~~~~~~~~~~~~~~~~

.. code-block:: python

    >>> from bedwell.region import Region
    >>> from bedwell.overlap_detector import RegionIndex
    >>> index = RegionIndex([Region("chr1", 100, 200), Region("chr1", 300, 400)])
    >>> index.stab(200, 250)
    [Region(chrom='chr1', start=100, end=200, ...)]
    >>> index.stab(201, 299)
    []
    >>> index.downstream(Region("chr1", 10, 50), max_results=1, max_distance=100)
    [Region(chrom='chr1', start=100, end=200, ...)]

Module Contents
~~~~~~~~~~~~~~~

The module contains the following public classes:

    - :class:`~bedwell.overlap_detector.RegionIndex` -- Finds the regions of one chromosome
        touching a window, and the nearest regions up- or downstream of a region
"""

import logging
from typing import Callable
from typing import Dict
from typing import Iterable
from typing import List
from typing import Optional
from typing import Tuple

from pybedlite.overlap_detector import Interval
from pybedlite.overlap_detector import OverlapDetector

from bedwell.region import Region
from bedwell.region import Strand
from bedwell.region_reader import RegionSet

logger = logging.getLogger(__name__)

# Maps a region to the closed bounds under which it is indexed
WindowFunc = Callable[[Region], Tuple[int, int]]


def raw_window(region: Region) -> Tuple[int, int]:
    """The region's own coordinates."""
    return region.start, region.end


def _to_half_open(refname: str, start: int, end: int, name: Optional[str] = None) -> Interval:
    return Interval(refname, max(start, 0), max(end, 0) + 1, name=name)


class RegionIndex:
    """The regions of one chromosome, indexed for stabbing queries.

    The index is built once and never modified.

    Args:
        regions: the regions to index, all on the same chromosome
        window: maps each region to the closed bounds it is indexed under; the region's own
            coordinates if not given
    """

    def __init__(self, regions: Iterable[Region], window: Optional[WindowFunc] = None) -> None:
        self._window: WindowFunc = raw_window if window is None else window
        self._regions: List[Region] = list(regions)
        self._bounds: List[Tuple[int, int]] = [self._window(r) for r in self._regions]
        self._detector: OverlapDetector = OverlapDetector()
        self._refname: str = self._regions[0].chrom if self._regions else ""
        # The interval name is the region's position in the list, so hits map back to regions
        self._detector.add_all(
            [_to_half_open(self._refname, start, end, name=str(i))
             for i, (start, end) in enumerate(self._bounds)]
        )

    @classmethod
    def build_all(cls,
                  region_set: RegionSet,
                  window: Optional[WindowFunc] = None) -> Dict[str, "RegionIndex"]:
        """Builds one index per chromosome of the region set."""
        indexes = {chrom: cls(region_set.regions(chrom), window=window)
                   for chrom in region_set.chromosomes()}
        logger.debug("Indexed %d regions on %d chromosomes", len(region_set), len(indexes))
        return indexes

    def __len__(self) -> int:
        return len(self._regions)

    def _hits(self, window_start: int, window_end: int) -> List[int]:
        """The positions of the regions whose bounds touch the closed window, in index order."""
        if not self._regions or window_end < window_start:
            return []
        query = _to_half_open(self._refname, window_start, window_end)
        hits: List[int] = []
        for interval in self._detector.get_overlaps(query):
            i = int(interval.name)
            start, end = self._bounds[i]
            if start <= window_end and end >= window_start:
                hits.append(i)
        return sorted(hits)

    def stab(self, window_start: int, window_end: int) -> List[Region]:
        """Returns every region whose indexed bounds ``[s, e]`` touch the closed window.

        That is ``s <= window_end and e >= window_start``; touching endpoints count.
        """
        return [self._regions[i] for i in self._hits(window_start, window_end)]

    def _left_of(self, position: int, max_results: int, max_distance: int) -> List[Region]:
        """Regions ending at or before the position, at most max_distance away, closest first."""
        found = [i for i in self._hits(position - max_distance, position)
                 if self._bounds[i][1] <= position]
        found.sort(key=lambda i: position - self._bounds[i][1])
        if max_results > 0:
            found = found[:max_results]
        return [self._regions[i] for i in found]

    def _right_of(self, position: int, max_results: int, max_distance: int) -> List[Region]:
        """Regions starting at or after the position, at most max_distance away, closest first."""
        found = [i for i in self._hits(position, position + max_distance)
                 if self._bounds[i][0] >= position]
        found.sort(key=lambda i: self._bounds[i][0] - position)
        if max_results > 0:
            found = found[:max_results]
        return [self._regions[i] for i in found]

    def upstream(self, region: Region, max_results: int, max_distance: int) -> List[Region]:
        """Returns the regions upstream of the given region, closest first.

        Upstream is to the left for forward or unstranded regions and to the right for regions
        on the reverse strand.

        Args:
            region: the region to search from
            max_results: the maximum number of regions to return, or zero for no limit
            max_distance: the maximum gap between the region and a returned region
        """
        if region.strand == Strand.REVERSE:
            return self._right_of(region.end, max_results, max_distance)
        return self._left_of(region.start, max_results, max_distance)

    def downstream(self, region: Region, max_results: int, max_distance: int) -> List[Region]:
        """Returns the regions downstream of the given region, closest first.

        See :meth:`~bedwell.overlap_detector.RegionIndex.upstream` for the arguments.
        """
        if region.strand == Strand.REVERSE:
            return self._left_of(region.start, max_results, max_distance)
        return self._right_of(region.end, max_results, max_distance)
