"""Tests for :py:mod:`~bedwell.classified`"""

from pathlib import Path

from bedwell.classified import ClassifiedCollections
from bedwell.classified import RegionCollection
from bedwell.classified import natural_key
from bedwell.region import Region
from bedwell.region_reader import RegionSet


def test_natural_key() -> None:
    chroms = ["chr10", "chrX", "chr2", "chr1", "chr1_alt"]
    assert sorted(chroms, key=natural_key) == ["chr1", "chr1_alt", "chr2", "chr10", "chrX"]


def test_sorted_iteration() -> None:
    collection = RegionCollection()
    collection.insert_all([Region("chr10", 5, 10), Region("chr2", 30, 40), Region("chr2", 10, 20)])
    assert collection.chromosomes() == ["chr2", "chr10"]
    assert [r.coordinates for r in collection] == [(10, 20), (30, 40), (5, 10)]


def test_keep_order() -> None:
    collection = RegionCollection(keep_order=True)
    collection.insert_all([Region("chr10", 5, 10), Region("chr2", 30, 40), Region("chr2", 10, 20)])
    assert collection.chromosomes() == ["chr10", "chr2"]
    assert [r.coordinates for r in collection] == [(5, 10), (30, 40), (10, 20)]


def test_duplicates_are_kept_by_default() -> None:
    collection = RegionCollection()
    region = Region("chr1", 10, 20)
    collection.insert_all([region, region, region])
    assert len(collection) == 3
    assert collection.size == 3


def test_report_once() -> None:
    collection = RegionCollection(report_once=True)
    collection.insert_all([
        Region("chr1", 10, 20, fields=["a"]),
        Region("chr1", 10, 20, fields=["b"]),
        Region("chr1", 30, 40),
        Region("chr2", 10, 20),
        Region("chr1", 30, 40),
    ])
    assert len(collection) == 3
    # first seen wins
    assert collection.regions("chr1")[0].id == "a"


def test_classified_collections() -> None:
    query = Region("chr1", 100, 300)
    first = Region("chr1", 150, 200)
    second = Region("chr1", 250, 400)
    unmatched = Region("chr1", 1000, 1100)
    regions_b = RegionSet(path=Path("b.bed"))
    for region in (first, second, unmatched):
        regions_b.add(region)

    collections = ClassifiedCollections.empty()
    collections.add_match(query, [first, second])
    collections.add_unmatched(Region("chr2", 10, 20))
    collections.resolve_only_b(regions_b)

    assert list(collections.overlap_a) == [query, query]
    assert list(collections.overlap_b) == [first, second]
    assert list(collections.only_a) == [Region("chr2", 10, 20)]
    assert list(collections.only_b) == [unmatched]


def test_classified_collections_report_once() -> None:
    query = Region("chr1", 100, 300)
    collections = ClassifiedCollections.empty(report_once=True)
    collections.add_match(query, [Region("chr1", 150, 200), Region("chr1", 250, 400)])
    assert len(collections.overlap_a) == 1
    assert len(collections.overlap_b) == 2


def test_only_b_matches_on_coordinates() -> None:
    matched = Region("chr1", 150, 200, fields=["first"])
    duplicate = Region("chr1", 150, 200, fields=["second"])
    regions_b = RegionSet(path=Path("b.bed"))
    regions_b.add(matched)
    regions_b.add(duplicate)

    collections = ClassifiedCollections.empty()
    collections.add_match(Region("chr1", 100, 300), [matched])
    collections.resolve_only_b(regions_b)
    assert len(collections.only_b) == 0
