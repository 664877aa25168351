"""
Reading Region Files
--------------------

This module contains methods for reading tab-delimited region files (BED-like files where the
first three columns are chromosome, start and end, followed by any number of columns).

Regions are grouped by chromosome in the order chromosomes are first seen in the file:

.. code-block:: python

    >>> from bedwell.region_reader import read_regions
    >>> regions = read_regions("peaks.bed")
    >>> regions.chromosomes()
    ['chr1', 'chr2']
    >>> regions.header is None
    True

Reading rules
~~~~~~~~~~~~~

    - Lines on mitochondrial or unplaced/alternate-haplotype contigs (the chromosome matches
      ``chrM``, ``rand``, ``hap`` or ``chrU``, case-insensitive) are skipped.
    - The first line is a header unless its first field starts with ``chr`` and its second and
      third fields are numeric.
    - The strand is read from the sixth column, as in BED6.
    - Malformed lines (too few columns, non-numeric coordinates, start after end, or a missing
      anchor column) are silently skipped.

Module Contents
~~~~~~~~~~~~~~~

The module contains the following public classes:

    - :class:`~bedwell.region_reader.RegionSet` -- Regions of one file, grouped by chromosome

The module contains the following methods:

    - :func:`~bedwell.region_reader.read_regions` -- Reads a region file
    - :func:`~bedwell.region_reader.is_header` -- True if the line is a header line
    - :func:`~bedwell.region_reader.sort_region_file` -- Writes a sorted copy of a region file
"""

import logging
import re
from pathlib import Path
from typing import Dict
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Optional
from typing import Tuple
from typing import Union

from bedwell.region import Region
from bedwell.region import Strand
from bedwell.region import round_half_away

logger = logging.getLogger(__name__)

PathType = Union[Path, str]

# Mitochondrial, random, unplaced and alternate haplotype contigs
_BLACKLIST = re.compile(r"chrM|rand|hap|chrU", re.IGNORECASE)

_NUMERIC = re.compile(r"^\d+$")

# 0-based column holding the strand
_STRAND_COLUMN: int = 5


class RegionSet:
    """The regions read from one file, grouped by chromosome.

    Chromosomes and the regions within each chromosome keep the order they were read in.

    Attributes:
        path: the file the regions were read from
        header: the header line, if the file has one
    """

    def __init__(self, path: Path, header: Optional[str] = None) -> None:
        self.path = path
        self.header = header
        self._by_chrom: Dict[str, List[Region]] = {}

    def add(self, region: Region) -> None:
        self._by_chrom.setdefault(region.chrom, []).append(region)

    def chromosomes(self) -> List[str]:
        return list(self._by_chrom)

    def regions(self, chrom: str) -> List[Region]:
        """Returns the regions on the chromosome, or an empty list if there are none."""
        return self._by_chrom.get(chrom, [])

    def lengths(self) -> List[int]:
        return [region.length for region in self]

    def __contains__(self, chrom: object) -> bool:
        return chrom in self._by_chrom

    def __iter__(self) -> Iterator[Region]:
        for regions in self._by_chrom.values():
            yield from regions

    def __len__(self) -> int:
        return sum(len(regions) for regions in self._by_chrom.values())


def is_header(line: str) -> bool:
    """True if the line is a header line, False if it is a region record."""
    cols = line.rstrip("\r\n").split("\t")
    if len(cols) < 3:
        return True
    return not (cols[0].startswith("chr")
                and _NUMERIC.match(cols[1]) is not None
                and _NUMERIC.match(cols[2]) is not None)


def _parse_int(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        return round_half_away(float(token))


def parse_region(line: str, mode_column: Optional[int] = None) -> Optional[Region]:
    """Parses one line into a region.

    Args:
        line: the line, with or without its line terminator
        mode_column: the 0-based column holding the anchor (e.g. peak summit), if any

    Returns:
        the region, or None if the line is blacklisted or malformed
    """
    cols = line.rstrip("\r\n").split("\t")
    if len(cols) < 3 or _BLACKLIST.search(cols[0]) is not None:
        return None
    try:
        start, end = int(cols[1]), int(cols[2])
        mode = None if mode_column is None else _parse_int(cols[mode_column])
    except (ValueError, IndexError):
        return None
    if start > end:
        return None
    strand = Strand.from_token(cols[_STRAND_COLUMN]) if len(cols) > _STRAND_COLUMN else None
    return Region(chrom=cols[0], start=start, end=end, fields=cols[3:], strand=strand, mode=mode)


def _split_header(lines: Iterable[str]) -> Tuple[Optional[str], Iterator[str]]:
    """Splits off the header line, if the first line is one."""
    lines = iter(lines)
    first = next(lines, None)
    if first is None:
        return None, lines
    if is_header(first):
        return first.rstrip("\r\n"), lines

    def _rest() -> Iterator[str]:
        yield first
        yield from lines

    return None, _rest()


def read_regions(path: PathType, mode_column: Optional[int] = None) -> RegionSet:
    """Reads a region file.

    Args:
        path: the path to the region file
        mode_column: the 0-based column holding the anchor (e.g. peak summit), if any

    Returns:
        the regions grouped by chromosome, with the header line if the file has one

    Raises:
        FileNotFoundError: if the file does not exist
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"The file {path} does not exist!")

    logger.info("Reading file %s...", path)
    skipped = 0
    with path.open("r") as fh:
        header, lines = _split_header(fh)
        region_set = RegionSet(path=path, header=header)
        for line in lines:
            region = parse_region(line, mode_column=mode_column)
            if region is None:
                skipped += 1
            else:
                region_set.add(region)

    if skipped > 0:
        logger.debug("Skipped %d blacklisted or malformed lines in %s", skipped, path)
    return region_set


def _sort_key(line: str) -> Tuple[str, int]:
    cols = line.split("\t")
    try:
        return cols[0], int(cols[1])
    except (ValueError, IndexError):
        return cols[0], 0


def sort_region_file(path: PathType, destination: PathType) -> Path:
    """Writes a copy of the region file sorted by chromosome and then start.

    The header line, if any, is kept as the first line.

    Args:
        path: the region file to sort
        destination: where to write the sorted copy

    Returns:
        the path to the sorted copy
    """
    path, destination = Path(path), Path(destination)
    if not path.is_file():
        raise FileNotFoundError(f"The file {path} does not exist!")

    logger.info("Sorting file %s...", path)
    with path.open("r") as fh:
        header, lines = _split_header(fh)
        records = sorted((line.rstrip("\r\n") for line in lines if line.strip()), key=_sort_key)

    with destination.open("w") as out:
        if header is not None:
            out.write(header + "\n")
        for record in records:
            out.write(record + "\n")
    return destination
