"""
Genomic Regions
---------------

This module contains the immutable record for a single line of a region (BED-like) file.

A region is described by closed integer coordinates on a named chromosome, an identifier, an
optional strand and the raw columns that followed the coordinates on the input line, so that the
input record can be written back unchanged.

.. code-block:: python

    >>> from bedwell.region import Region
    >>> region = Region(chrom="chr1", start=100, end=200, fields=("peak1", "0", "+"))
    >>> region.id
    'peak1'
    >>> region.center
    150
    >>> region.to_line()
    'chr1\\t100\\t200\\tpeak1\\t0\\t+'

Module Contents
~~~~~~~~~~~~~~~

The module contains the following public classes:

    - :class:`~bedwell.region.Strand` -- The strand of a region
    - :class:`~bedwell.region.Region` -- A single region read from a region file

The module contains the following methods:

    - :func:`~bedwell.region.round_half_away` -- Rounds half away from zero
"""

import enum
from typing import Dict
from typing import Optional
from typing import Tuple

import attr


def round_half_away(value: float) -> int:
    """Rounds to the closest integer, with halves rounded away from zero."""
    if value < 0:
        return -int(-value + 0.5)
    return int(value + 0.5)


@enum.unique
class Strand(enum.IntEnum):
    """The strand of a region."""

    FORWARD = 1
    REVERSE = -1

    @classmethod
    def from_token(cls, token: Optional[str]) -> Optional["Strand"]:
        """Returns the strand encoded by the token, or None if the token is not a strand."""
        if token is None:
            return None
        value = _STRAND_TOKENS.get(token.strip())
        return None if value is None else cls(value)


_STRAND_TOKENS: Dict[str, int] = {"+": 1, "-": -1, "1": 1, "-1": -1, "F": 1, "R": -1}


def _default_id(region: "Region") -> str:
    return f"{region.chrom}:{region.start}-{region.end}"


@attr.s(frozen=True, auto_attribs=True)
class Region:
    """A region read from a region file.

    Coordinates are closed: a region covers every position from ``start`` to ``end``.

    Attributes:
        chrom: the chromosome name
        start: the start coordinate
        end: the end coordinate, never smaller than start
        fields: the raw columns that followed ``end`` on the input line
        strand: the strand, if one could be parsed from the sixth column
        mode: the anchor value (e.g. a peak summit), if an anchor column was configured
        id: the identifier; the fourth column if present, ``chrom:start-end`` otherwise
    """

    chrom: str
    start: int
    end: int
    fields: Tuple[str, ...] = attr.ib(default=(), converter=tuple)
    strand: Optional[Strand] = None
    mode: Optional[int] = None
    id: str = attr.ib(default=attr.Factory(lambda self: self.fields[0] if self.fields
                                           else _default_id(self), takes_self=True))

    def __attrs_post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"end < start: {self.end} < {self.start}")

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def center(self) -> int:
        """The geometric midpoint of the region."""
        return self.start + round_half_away(self.length / 2)

    @property
    def anchor(self) -> int:
        """The reference point used for centered matching and distances.

        This is the mode (e.g. peak summit) when one was read, otherwise the center.
        """
        return self.center if self.mode is None else self.mode

    @property
    def coordinates(self) -> Tuple[int, int]:
        """The coordinate pair identifying the physical region."""
        return self.start, self.end

    def to_line(self) -> str:
        """Reconstructs the tab-delimited record."""
        return "\t".join([self.chrom, str(self.start), str(self.end), *self.fields])

    def __str__(self) -> str:
        return f"{self.chrom}:{self.start}-{self.end}"
