"""
Distances Between Regions
-------------------------

This module computes three distances between a region ``A`` and a region ``B``:

    - edge: the gap between the facing edges; zero when the regions overlap
    - anchor: the signed distance between the anchors, ``anchor(A) - anchor(B)``
    - outer: the distance between the far edges, positive when the regions are disjoint,
      ``start(A) - end(B)`` when ``A`` overlaps ``B`` from the left and ``end(A) - start(B)`` when
      it overlaps from the right

The distances are taken either on the regions' own coordinates
(:func:`~bedwell.distances.raw_distance`) or on windows extended from each region's anchor
(:func:`~bedwell.distances.centered_distance`).  When one region contains the other, edge and
outer are zero.  The centered variant has no separate containment case: its windows all have the
same width, so one contains the other only if they are identical, which falls through to zero.

.. code-block:: python

    >>> from bedwell.region import Region
    >>> from bedwell.distances import raw_distance
    >>> raw_distance(Region("chr1", 100, 200), Region("chr1", 150, 250))
    PairDistance(edge=0, anchor=-50, outer=-150)
    >>> raw_distance(Region("chr1", 100, 200), Region("chr1", 300, 400))
    PairDistance(edge=100, anchor=-200, outer=300)

Module Contents
~~~~~~~~~~~~~~~

The module contains the following public classes:

    - :class:`~bedwell.distances.PairDistance` -- The three distances of a pair
    - :class:`~bedwell.distances.RegionPair` -- A pair of regions with their distances

The module contains the following methods:

    - :func:`~bedwell.distances.raw_distance` -- Distances on the regions' coordinates
    - :func:`~bedwell.distances.centered_distance` -- Distances on windows around the anchors
"""

from typing import Tuple

import attr

from bedwell.region import Region


@attr.s(frozen=True, auto_attribs=True)
class PairDistance:
    """The distances between two regions.

    Attributes:
        edge: the gap between the facing edges
        anchor: the signed distance between the anchors
        outer: the distance between the far edges
    """

    edge: int = 0
    anchor: int = 0
    outer: int = 0

    def as_row(self) -> Tuple[str, str, str]:
        return str(self.edge), str(self.anchor), str(self.outer)


@attr.s(frozen=True, auto_attribs=True)
class RegionPair:
    """A region of the first file paired with a region of the second, with their distances."""

    a: Region
    b: Region
    distance: PairDistance

    def to_line(self) -> str:
        return "\t".join([self.a.to_line(), self.b.to_line(), *self.distance.as_row()])


def _edge_and_outer(sa: int, ea: int, sb: int, eb: int) -> Tuple[int, int]:
    """Edge and outer distances for the cases where neither region contains the other."""
    if sa < sb and ea < eb and ea < sb:
        return sb - ea, eb - sa
    elif sa > sb and ea > eb and sa > eb:
        return sa - eb, ea - sb
    elif sa < sb and ea < eb and sb < ea:
        return 0, sa - eb
    elif sa > sb and ea > eb and eb > sa:
        return 0, ea - sb
    # touching or identical
    return 0, 0


def raw_distance(a: Region, b: Region) -> PairDistance:
    """Distances between two regions using their own coordinates.

    The anchor of a region is its mode if it has one, otherwise its center.
    """
    sa, ea, sb, eb = a.start, a.end, b.start, b.end
    if (sa <= sb and ea >= eb) or (sa >= sb and ea <= eb):
        edge, outer = 0, 0
    else:
        edge, outer = _edge_and_outer(sa, ea, sb, eb)
    return PairDistance(edge=edge, anchor=a.anchor - b.anchor, outer=outer)


def centered_distance(a: Region, b: Region, upstream: int, downstream: int) -> PairDistance:
    """Distances between two regions using windows of ``upstream`` bases before and
    ``downstream`` bases after each region's anchor."""
    ma, mb = a.anchor, b.anchor
    edge, outer = _edge_and_outer(ma - upstream, ma + downstream, mb - upstream, mb + downstream)
    return PairDistance(edge=edge, anchor=ma - mb, outer=outer)
