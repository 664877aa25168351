"""
Classified Regions
------------------

This module contains the collections that accumulate the outcome of intersecting two region
files:

    - overlap_a: regions of the first file that matched regions of the second
    - overlap_b: the regions of the second file they matched
    - only_a: regions of the first file that matched nothing
    - only_b: regions of the second file that no region of the first file matched

A region is added once per match, so a region matching several others appears several times.
With ``report_once``, a region is kept only the first time its coordinates are seen on its
chromosome.  With ``keep_order``, regions are iterated in the order they were added; otherwise
chromosomes are iterated in natural order and regions by coordinates.

.. code-block:: python

    >>> from bedwell.region import Region
    >>> from bedwell.classified import RegionCollection
    >>> collection = RegionCollection(report_once=True)
    >>> collection.insert(Region("chr1", 10, 20, fields=["a"]))
    >>> collection.insert(Region("chr1", 10, 20, fields=["a"]))
    >>> len(collection)
    1

Module Contents
~~~~~~~~~~~~~~~

The module contains the following public classes:

    - :class:`~bedwell.classified.RegionCollection` -- Regions grouped by chromosome
    - :class:`~bedwell.classified.ClassifiedCollections` -- The four collections of a run
"""

import re
from typing import Dict
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Set
from typing import Tuple
from typing import Union

import attr

from bedwell.region import Region
from bedwell.region_reader import RegionSet

_DIGITS = re.compile(r"(\d+)")


def natural_key(chrom: str) -> Tuple[Union[int, str], ...]:
    """Sort key placing chr2 before chr10."""
    return tuple(int(part) if part.isdigit() else part for part in _DIGITS.split(chrom))


class RegionCollection:
    """Regions grouped by chromosome.

    Each chromosome owns its own list of regions.

    Args:
        report_once: keep only the first region seen with given coordinates on a chromosome
        keep_order: iterate in insertion order rather than sorted order
    """

    def __init__(self, report_once: bool = False, keep_order: bool = False) -> None:
        self.report_once = report_once
        self.keep_order = keep_order
        self._by_chrom: Dict[str, List[Region]] = {}
        self._seen: Dict[str, Set[Tuple[int, int]]] = {}

    def insert(self, region: Region) -> None:
        if self.report_once:
            seen = self._seen.setdefault(region.chrom, set())
            if region.coordinates in seen:
                return
            seen.add(region.coordinates)
        self._by_chrom.setdefault(region.chrom, []).append(region)

    def insert_all(self, regions: Iterable[Region]) -> None:
        for region in regions:
            self.insert(region)

    def chromosomes(self) -> List[str]:
        if self.keep_order:
            return list(self._by_chrom)
        return sorted(self._by_chrom, key=natural_key)

    def regions(self, chrom: str) -> List[Region]:
        regions = self._by_chrom.get(chrom, [])
        if self.keep_order:
            return list(regions)
        return sorted(regions, key=lambda r: r.coordinates)

    def __iter__(self) -> Iterator[Region]:
        for chrom in self.chromosomes():
            yield from self.regions(chrom)

    def __len__(self) -> int:
        return sum(len(regions) for regions in self._by_chrom.values())

    @property
    def size(self) -> int:
        return len(self)


@attr.s(auto_attribs=True)
class ClassifiedCollections:
    """The four collections filled by one intersection run.

    Attributes:
        overlap_a: regions of the first file that matched
        overlap_b: the regions of the second file that were matched
        only_a: regions of the first file that matched nothing
        only_b: regions of the second file that were never matched
    """

    overlap_a: RegionCollection
    overlap_b: RegionCollection
    only_a: RegionCollection
    only_b: RegionCollection
    _matched_b: Dict[str, Set[Tuple[int, int]]] = attr.ib(factory=dict)

    @classmethod
    def empty(cls, report_once: bool = False, keep_order: bool = False) -> "ClassifiedCollections":
        def _new() -> RegionCollection:
            return RegionCollection(report_once=report_once, keep_order=keep_order)

        return cls(overlap_a=_new(), overlap_b=_new(), only_a=_new(), only_b=_new())

    def add_match(self, query: Region, candidates: Iterable[Region]) -> None:
        """Records a query of the first file and the candidates of the second it matched."""
        for candidate in candidates:
            self.overlap_a.insert(query)
            self.overlap_b.insert(candidate)
            self._matched_b.setdefault(candidate.chrom, set()).add(candidate.coordinates)

    def add_unmatched(self, query: Region) -> None:
        self.only_a.insert(query)

    def resolve_only_b(self, regions_b: RegionSet) -> None:
        """Adds every region of the second file whose coordinates were never matched."""
        for region in regions_b:
            if region.coordinates not in self._matched_b.get(region.chrom, ()):
                self.only_b.insert(region)
