"""
Options for Intersecting Region Files
-------------------------------------

This module contains the configuration of an intersection run:

    - :class:`~bedwell.options.OutputKind` -- The kinds of output that can be requested
    - :class:`~bedwell.options.IntersectOptions` -- All options of a run, validated on creation

.. code-block:: python

    >>> from bedwell.options import IntersectOptions, OutputKind
    >>> from bedwell.policies import OverlapPolicy
    >>> options = IntersectOptions(input_a="a.bed",
    ...                            input_b="b.bed",
    ...                            policy=OverlapPolicy.Percent,
    ...                            percent=[50],
    ...                            outputs=[OutputKind.OverlapA, OutputKind.OnlyB])
    >>> options.batch
    False

Percentages may be given as numbers or as ``a:b`` ranges with
:func:`~bedwell.options.parse_percentages`.
"""

import enum
from pathlib import Path
from typing import FrozenSet
from typing import Iterable
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple
from typing import Union

import attr

from bedwell.policies import Extension
from bedwell.policies import Matcher
from bedwell.policies import OverlapPolicy


@enum.unique
class OutputKind(enum.Enum):
    """The kinds of output of an intersection run."""

    OverlapA = "overlapA"
    OverlapB = "overlapB"
    OnlyA = "onlyA"
    OnlyB = "onlyB"
    OverPairs = "overpairs"
    NonPairs = "nonpairs"


def parse_percentages(tokens: Iterable[Union[str, float]]) -> Tuple[float, ...]:
    """Parses overlap percentages.

    Each token is either a number or a range ``a:b``, which expands to every integer percentage
    from ``a`` to ``b`` inclusive.

    Raises:
        ValueError: if a token is not a number or a range
    """
    percentages: List[float] = []
    for token in tokens:
        if isinstance(token, str) and ":" in token:
            first, last = token.split(":", 1)
            percentages.extend(float(p) for p in range(int(first), int(last) + 1))
        else:
            percentages.append(float(token))
    return tuple(percentages)


def _to_extend(value: Union[None, int, Sequence[int]]) -> Optional[Tuple[int, int]]:
    """One value extends both sides equally."""
    if value is None:
        return None
    if isinstance(value, int):
        return value, value
    values = tuple(int(v) for v in value)
    if len(values) == 0:
        return None
    elif len(values) == 1:
        return values[0], values[0]
    elif len(values) == 2:
        return values[0], values[1]
    raise ValueError(f"extend takes one or two values, found {len(values)}")


def _to_outputs(values: Optional[Iterable[Union[str, OutputKind]]]) -> FrozenSet[OutputKind]:
    if not values:
        return frozenset([OutputKind.OverlapA])
    return frozenset(OutputKind(v) for v in values)


def _to_optional_path(value: Union[None, str, Path]) -> Optional[Path]:
    return None if value is None else Path(value)


def _non_negative(instance: object, attribute: "attr.Attribute", value: int) -> None:
    if value < 0:
        raise ValueError(f"{attribute.name} must be >= 0, found {value}")


@attr.s(frozen=True, auto_attribs=True)
class IntersectOptions:
    """The options of an intersection run.

    Attributes:
        input_a: the first region file
        input_b: the second region file
        policy: the notion of overlap
        percent: the overlap percentage(s), each in (0, 100]; more than one runs in batch mode
        extend: bases to extend (upstream, downstream) of each region's anchor
        autoextend: extend both sides by half the median region length
        mode_column: the 0-based column with each region's anchor (e.g. peak summit)
        gap: the maximum distance to neighbours reported as nonpairs; zero disables the search
        maxud: the maximum number of neighbours on each side reported as nonpairs; zero means no
            limit
        outputs: the outputs to produce
        report_once: report a region once even if it matched several times
        keep_order: write regions in input order
        dry_run: do not write per-region files, only report counts
        sort: sort the input files before reading
        output_dir: where to write outputs; the directory of the first file if not given
        threads: worker processes used in batch mode
    """

    input_a: Path = attr.ib(converter=Path)
    input_b: Path = attr.ib(converter=Path)
    policy: OverlapPolicy = OverlapPolicy.Any
    percent: Tuple[float, ...] = attr.ib(default=(), converter=parse_percentages)
    extend: Optional[Tuple[int, int]] = attr.ib(default=None, converter=_to_extend)
    autoextend: bool = False
    mode_column: Optional[int] = None
    gap: int = attr.ib(default=0, validator=_non_negative)
    maxud: int = attr.ib(default=0, validator=_non_negative)
    outputs: FrozenSet[OutputKind] = attr.ib(default=None, converter=_to_outputs)
    report_once: bool = False
    keep_order: bool = False
    dry_run: bool = False
    sort: bool = False
    output_dir: Optional[Path] = attr.ib(default=None, converter=_to_optional_path)
    threads: int = 1

    def __attrs_post_init__(self) -> None:
        if self.policy.uses_threshold and not self.percent:
            raise ValueError(f"The {self.policy.value} policy needs an overlap percentage")
        for percent in self.percent:
            if not 0 < percent <= 100:
                raise ValueError(f"Overlap percentages must be in (0, 100], found {percent}")
        if self.batch and not self.policy.uses_threshold:
            raise ValueError("Multiple overlap percentages cannot be used with any overlap")
        if self.extend is not None and self.autoextend:
            raise ValueError("extend and autoextend cannot be given together")
        if self.extend is not None and min(self.extend) < 0:
            raise ValueError(f"Extension lengths must be >= 0, found {self.extend}")
        if self.mode_column is not None and self.mode_column < 0:
            raise ValueError(f"mode_column must be >= 0, found {self.mode_column}")
        if self.threads < 1:
            raise ValueError(f"threads must be >= 1, found {self.threads}")

    @property
    def extension(self) -> Extension:
        if self.extend is not None or self.autoextend:
            return Extension.Centered
        return Extension.Raw

    @property
    def batch(self) -> bool:
        """True if more than one percentage is given, i.e. the run reports distributions."""
        return len(self.percent) > 1

    def wants(self, kind: OutputKind) -> bool:
        return kind in self.outputs

    def matcher(self, percent: Optional[float] = None, extend: Optional[int] = None) -> Matcher:
        """Builds the matcher for one percentage.

        Args:
            percent: the percentage; the first configured one if not given
            extend: the extension on each side computed for autoextend
        """
        if percent is None:
            percent = self.percent[0] if self.percent else 100.0
        upstream, downstream = self.extend if self.extend is not None else (0, 0)
        if extend is not None:
            upstream = downstream = extend
        return Matcher(policy=self.policy,
                       extension=self.extension,
                       percent=percent,
                       upstream=upstream,
                       downstream=downstream)

    @property
    def destination(self) -> Path:
        """The directory outputs are written to."""
        return self.output_dir if self.output_dir is not None else self.input_a.parent
