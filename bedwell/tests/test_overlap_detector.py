"""Tests for :py:mod:`~bedwell.overlap_detector`"""

from pathlib import Path
from typing import List
from typing import Tuple

from bedwell.overlap_detector import RegionIndex
from bedwell.region import Region
from bedwell.region import Strand
from bedwell.region_reader import RegionSet


def run_test(targets: List[Region], window: Tuple[int, int], results: List[Region]) -> None:
    index = RegionIndex(targets)
    assert index.stab(*window) == results


def test_same_region() -> None:
    region = Region("chr1", 10, 100)
    run_test(targets=[region], window=(10, 100), results=[region])


def test_window_wholly_contained_in_target() -> None:
    target = Region("chr1", 10, 100)
    run_test(targets=[target], window=(11, 99), results=[target])


def test_target_wholly_contained_in_window() -> None:
    target = Region("chr1", 10, 100)
    run_test(targets=[target], window=(9, 101), results=[target])


def test_touching_endpoints_count() -> None:
    target = Region("chr1", 10, 100)
    run_test(targets=[target], window=(100, 150), results=[target])
    run_test(targets=[target], window=(0, 10), results=[target])


def test_window_before_target() -> None:
    target = Region("chr1", 10, 100)
    run_test(targets=[target], window=(0, 9), results=[])


def test_window_after_target() -> None:
    target = Region("chr1", 10, 100)
    run_test(targets=[target], window=(101, 150), results=[])


def test_single_base_regions() -> None:
    target = Region("chr1", 10, 10)
    run_test(targets=[target], window=(10, 10), results=[target])
    run_test(targets=[target], window=(11, 11), results=[])


def test_multiple_overlaps_in_index_order() -> None:
    region_a = Region("chr1", 10, 20)
    region_b = Region("chr1", 15, 25)
    region_c = Region("chr1", 19, 30)
    region_d = Region("chr1", 24, 35)

    run_test(targets=[region_c, region_a, region_b], window=(18, 19),
             results=[region_c, region_a, region_b])
    run_test(targets=[region_a, region_b, region_c, region_d], window=(24, 24),
             results=[region_b, region_c, region_d])


def test_same_region_twice() -> None:
    region = Region("chr1", 10, 100)
    run_test(targets=[region, region], window=(10, 100), results=[region, region])


def test_empty_index() -> None:
    index = RegionIndex([])
    assert len(index) == 0
    assert index.stab(0, 100) == []


def test_negative_windows() -> None:
    region = Region("chr1", 10, 20)
    index = RegionIndex([region], window=lambda r: (-30, -5))
    assert index.stab(-10, -8) == [region]
    assert index.stab(-4, 0) == []
    assert index.stab(-100, -31) == []


def test_indexed_under_window() -> None:
    region = Region("chr1", 100, 200, mode=150)
    index = RegionIndex([region], window=lambda r: (r.anchor - 10, r.anchor + 10))
    assert index.stab(100, 120) == []
    assert index.stab(155, 300) == [region]


def test_upstream_and_downstream() -> None:
    left = Region("chr1", 100, 200)
    right = Region("chr1", 300, 400)
    far_right = Region("chr1", 500, 600)
    index = RegionIndex([left, right, far_right])
    query = Region("chr1", 250, 280)

    assert index.upstream(query, max_results=0, max_distance=100) == [left]
    assert index.upstream(query, max_results=0, max_distance=49) == []
    assert index.downstream(query, max_results=0, max_distance=100) == [right]
    assert index.downstream(query, max_results=0, max_distance=400) == [right, far_right]
    assert index.downstream(query, max_results=1, max_distance=400) == [right]


def test_neighbours_exclude_overlapping_regions() -> None:
    target = Region("chr1", 100, 200)
    index = RegionIndex([target])
    query = Region("chr1", 150, 250)
    assert index.upstream(query, max_results=0, max_distance=1000) == []
    assert index.downstream(query, max_results=0, max_distance=1000) == []


def test_reverse_strand_swaps_directions() -> None:
    left = Region("chr1", 100, 200)
    right = Region("chr1", 300, 400)
    index = RegionIndex([left, right])
    query = Region("chr1", 250, 280, strand=Strand.REVERSE)

    assert index.upstream(query, max_results=0, max_distance=100) == [right]
    assert index.downstream(query, max_results=0, max_distance=100) == [left]


def test_build_all() -> None:
    region_set = RegionSet(path=Path("b.bed"))
    region_set.add(Region("chr1", 10, 20))
    region_set.add(Region("chr2", 10, 20))
    region_set.add(Region("chr1", 30, 40))
    indexes = RegionIndex.build_all(region_set)
    assert sorted(indexes) == ["chr1", "chr2"]
    assert len(indexes["chr1"]) == 2
    assert indexes["chr2"].stab(0, 100) == [Region("chr2", 10, 20)]
