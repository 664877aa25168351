"""
Overlap Policies
----------------

This module decides whether a candidate region overlaps a query region, and finds the matching
candidates of a query in a :class:`~bedwell.overlap_detector.RegionIndex`.

Five policies are available (see :class:`~bedwell.policies.OverlapPolicy`), each of which can be
applied either to the regions' own coordinates or to windows extended from each region's anchor
(see :class:`~bedwell.policies.Extension`).  The policy is chosen once per run.

For a query ``[qs, qe]`` and a candidate ``[cs, ce]``, the cases are:

    - containment: ``cs >= qs and ce <= qe`` (candidate inside query) or ``cs <= qs and ce >= qe``
      (query inside candidate)
    - left-partial: ``cs < qs and ce < qe and qs < ce``, with overlap ``ce - qs``
    - right-partial: ``cs > qs and ce > qe and qe > cs``, with overlap ``qe - cs``

Thresholds are percentages.  ``overlap >= p * length`` is evaluated as
``100 * overlap >= percent * length``, which is exact for integer percentages.

.. code-block:: python

    >>> from bedwell.policies import OverlapPolicy, accepts
    >>> accepts(OverlapPolicy.Any, 100, 200, 150, 250)
    True
    >>> accepts(OverlapPolicy.Percent, 100, 200, 150, 250, percent=60)
    False
    >>> accepts(OverlapPolicy.Percent, 100, 200, 150, 250, percent=40)
    True

Module Contents
~~~~~~~~~~~~~~~

The module contains the following public classes:

    - :class:`~bedwell.policies.OverlapPolicy` -- The overlap policies
    - :class:`~bedwell.policies.Extension` -- Raw or centered coordinates
    - :class:`~bedwell.policies.MatchResult` -- The candidates matching one query
    - :class:`~bedwell.policies.Matcher` -- Applies a policy to queries against an index

The module contains the following methods:

    - :func:`~bedwell.policies.accepts` -- Decides a single query/candidate pair
    - :func:`~bedwell.policies.median_extension` -- Half the median region length
"""

import enum
import logging
import statistics
from typing import Callable
from typing import Dict
from typing import Iterable
from typing import Optional
from typing import Tuple

import attr

from bedwell.overlap_detector import RegionIndex
from bedwell.region import Region
from bedwell.region_reader import RegionSet

logger = logging.getLogger(__name__)


@enum.unique
class OverlapPolicy(enum.Enum):
    """The notion of overlap used to match regions."""

    Any = "any"
    Percent = "percent"
    PercentBoth = "percent_both"
    PercentExact = "percent_exact"
    PercentExactBoth = "percent_exact_both"

    @property
    def uses_threshold(self) -> bool:
        return self is not OverlapPolicy.Any


@enum.unique
class Extension(enum.Enum):
    """Whether regions are matched by their own coordinates or by windows around their anchors."""

    Raw = "raw"
    Centered = "centered"


def _meets(overlap: int, length: int, percent: float) -> bool:
    return 100 * overlap >= percent * length


def _any(qs: int, qe: int, cs: int, ce: int, percent: float) -> bool:
    return ((cs >= qs and ce <= qe)
            or (cs <= qs and ce >= qe)
            or (cs < qs and ce < qe and qs < ce)
            or (cs > qs and ce > qe and qe > cs))


def _partial(qs: int, qe: int, cs: int, ce: int, percent: float, both: bool) -> bool:
    """Decides the partial overlap cases; False if the pair does not partially overlap."""
    if cs < qs and ce < qe and qs < ce:
        overlap = ce - qs
    elif cs > qs and ce > qe and qe > cs:
        overlap = qe - cs
    else:
        return False
    if _meets(overlap, qe - qs, percent):
        return True
    return both and _meets(overlap, ce - cs, percent)


def _percent(qs: int, qe: int, cs: int, ce: int, percent: float) -> bool:
    if (cs >= qs and ce <= qe) or (cs <= qs and ce >= qe):
        return True
    return _partial(qs, qe, cs, ce, percent, both=False)


def _percent_both(qs: int, qe: int, cs: int, ce: int, percent: float) -> bool:
    if (cs >= qs and ce <= qe) or (cs <= qs and ce >= qe):
        return True
    return _partial(qs, qe, cs, ce, percent, both=True)


def _exact_containment(qs: int, qe: int, cs: int, ce: int, percent: float) -> Optional[bool]:
    """Decides the containment cases under exact semantics; None if neither region contains
    the other."""
    if cs >= qs and ce <= qe:
        return _meets(ce - cs, qe - qs, percent)
    if cs <= qs and ce >= qe:
        return _meets(qe - qs, ce - cs, percent)
    return None


def _percent_exact(qs: int, qe: int, cs: int, ce: int, percent: float) -> bool:
    contained = _exact_containment(qs, qe, cs, ce, percent)
    if contained is not None:
        return contained
    return _partial(qs, qe, cs, ce, percent, both=False)


def _percent_exact_both(qs: int, qe: int, cs: int, ce: int, percent: float) -> bool:
    contained = _exact_containment(qs, qe, cs, ce, percent)
    if contained is not None:
        return contained
    return _partial(qs, qe, cs, ce, percent, both=True)


DecisionFunc = Callable[[int, int, int, int, float], bool]

_DECISIONS: Dict[OverlapPolicy, DecisionFunc] = {
    OverlapPolicy.Any: _any,
    OverlapPolicy.Percent: _percent,
    OverlapPolicy.PercentBoth: _percent_both,
    OverlapPolicy.PercentExact: _percent_exact,
    OverlapPolicy.PercentExactBoth: _percent_exact_both,
}

_missing = sorted(p.value for p in set(OverlapPolicy) - set(_DECISIONS))
if _missing:
    raise NotImplementedError(f"No decision function for: {_missing}")


def accepts(policy: OverlapPolicy,
            qs: int,
            qe: int,
            cs: int,
            ce: int,
            percent: float = 100.0) -> bool:
    """Decides whether the candidate ``[cs, ce]`` matches the query ``[qs, qe]``.

    Args:
        policy: the overlap policy
        qs: the query start
        qe: the query end
        cs: the candidate start
        ce: the candidate end
        percent: the overlap threshold as a percentage; ignored by
            :attr:`~bedwell.policies.OverlapPolicy.Any`
    """
    return _DECISIONS[policy](qs, qe, cs, ce, percent)


def median_extension(region_sets: Iterable[RegionSet]) -> int:
    """Returns half of the median region length over all the given region sets.

    Raises:
        ValueError: if the region sets contain no regions
    """
    lengths = [length for region_set in region_sets for length in region_set.lengths()]
    if not lengths:
        raise ValueError("Cannot compute a median region length without regions")
    median = statistics.median(lengths)
    extension = int(median / 2)
    logger.info("Median region length is %s bps. Extending each region mode %d bps on each "
                "side...", median, extension)
    return extension


@attr.s(frozen=True, auto_attribs=True)
class MatchResult:
    """The candidates matching a query, in index order.

    Attributes:
        query: the query region
        candidates: the matching candidate regions
    """

    query: Region
    candidates: Tuple[Region, ...] = attr.ib(default=(), converter=tuple)

    def __bool__(self) -> bool:
        return len(self.candidates) > 0

    def __len__(self) -> int:
        return len(self.candidates)


@attr.s(frozen=True, auto_attribs=True)
class Matcher:
    """Matches query regions against an index with one policy.

    Attributes:
        policy: the overlap policy
        extension: whether regions are replaced by windows around their anchors
        percent: the overlap threshold as a percentage
        upstream: bases to extend upstream of the anchor for centered matching
        downstream: bases to extend downstream of the anchor for centered matching
    """

    policy: OverlapPolicy = OverlapPolicy.Any
    extension: Extension = Extension.Raw
    percent: float = 100.0
    upstream: int = 0
    downstream: int = 0

    def window(self, region: Region) -> Tuple[int, int]:
        """The closed bounds used for the region when matching."""
        if self.extension is Extension.Centered:
            anchor = region.anchor
            return anchor - self.upstream, anchor + self.downstream
        return region.start, region.end

    def build_index(self, regions: Iterable[Region]) -> RegionIndex:
        """Builds an index over the regions' matching windows."""
        return RegionIndex(regions, window=self.window)

    def build_indexes(self, region_set: RegionSet) -> Dict[str, RegionIndex]:
        """Builds one index per chromosome over the regions' matching windows."""
        return RegionIndex.build_all(region_set, window=self.window)

    def accepts(self, query: Region, candidate: Region) -> bool:
        """Decides whether the candidate matches the query."""
        qs, qe = self.window(query)
        cs, ce = self.window(candidate)
        return accepts(self.policy, qs, qe, cs, ce, self.percent)

    def match(self, query: Region, index: Optional[RegionIndex]) -> MatchResult:
        """Returns the candidates from the index matching the query.

        Args:
            query: the query region
            index: an index built with :meth:`~bedwell.policies.Matcher.build_index`, or None
                when the query's chromosome has no candidates
        """
        if index is None:
            return MatchResult(query=query)
        qs, qe = self.window(query)
        candidates = [c for c in index.stab(qs, qe) if self.accepts(query, c)]
        return MatchResult(query=query, candidates=candidates)
