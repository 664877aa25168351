"""Tests for :py:mod:`~bedwell.region_reader`"""

from pathlib import Path
from typing import List

import pytest

from bedwell.region import Region
from bedwell.region import Strand
from bedwell.region import round_half_away
from bedwell.region_reader import is_header
from bedwell.region_reader import parse_region
from bedwell.region_reader import read_regions
from bedwell.region_reader import sort_region_file


def write_lines(path: Path, lines: List[str]) -> Path:
    path.write_text("".join(line + "\n" for line in lines))
    return path


def test_round_half_away() -> None:
    assert round_half_away(0.5) == 1
    assert round_half_away(1.4) == 1
    assert round_half_away(2.5) == 3
    assert round_half_away(-2.5) == -3
    assert round_half_away(-0.4) == 0


def test_region_center_and_anchor() -> None:
    assert Region("chr1", 100, 200).center == 150
    assert Region("chr1", 100, 201).center == 151
    assert Region("chr1", 100, 200).anchor == 150
    assert Region("chr1", 100, 200, mode=120).anchor == 120


def test_region_id() -> None:
    assert Region("chr1", 100, 200, fields=["peak1", "0", "+"]).id == "peak1"
    assert Region("chr1", 100, 200).id == "chr1:100-200"


def test_region_end_before_start() -> None:
    with pytest.raises(ValueError):
        Region("chr1", 200, 100)


def test_is_header() -> None:
    assert not is_header("chr1\t10\t20")
    assert not is_header("chr1\t10\t20\tpeak\n")
    assert is_header("chrom\tstart\tend")
    assert is_header("chr1\tstart\tend")
    assert is_header("1\t10\t20")
    assert is_header("chr1\t10")


def test_parse_region() -> None:
    region = parse_region("chr1\t10\t20\tp1\t0\t-\n")
    assert region is not None
    assert region.coordinates == (10, 20)
    assert region.fields == ("p1", "0", "-")
    assert region.strand is Strand.REVERSE
    assert region.id == "p1"
    assert region.to_line() == "chr1\t10\t20\tp1\t0\t-"


def test_parse_region_strand_tokens() -> None:
    assert parse_region("chr1\t10\t20\tp1\t0\t+").strand is Strand.FORWARD
    assert parse_region("chr1\t10\t20\tp1\t0\tF").strand is Strand.FORWARD
    assert parse_region("chr1\t10\t20\tp1\t0\tR").strand is Strand.REVERSE
    assert parse_region("chr1\t10\t20\tp1\t0\t.").strand is None
    assert parse_region("chr1\t10\t20\tp1").strand is None


def test_parse_region_blacklisted() -> None:
    assert parse_region("chrM\t10\t20") is None
    assert parse_region("chr1_random\t10\t20") is None
    assert parse_region("chr6_cox_hap2\t10\t20") is None
    assert parse_region("chrUn_gl000220\t10\t20") is None
    assert parse_region("CHRM\t10\t20") is None


def test_parse_region_malformed() -> None:
    assert parse_region("chr1\t10") is None
    assert parse_region("chr1\tten\t20") is None
    assert parse_region("chr1\t30\t20") is None
    assert parse_region("chr1\t10\t20", mode_column=3) is None


def test_parse_region_mode_column() -> None:
    assert parse_region("chr1\t10\t20\t15", mode_column=3).mode == 15
    assert parse_region("chr1\t10\t20\t15.5", mode_column=3).mode == 16
    assert parse_region("chr1\t10\t20\t15", mode_column=3).anchor == 15


def test_read_regions(tmp_path: Path) -> None:
    path = write_lines(tmp_path / "peaks.bed", [
        "chrom\tstart\tend\tname",
        "chr2\t10\t20\ta",
        "chrM\t10\t20\tb",
        "chr1\t30\t40\tc",
        "chr2\t50\t60\td",
        "chr1\tx\t40\te",
    ])
    regions = read_regions(path)
    assert regions.header == "chrom\tstart\tend\tname"
    assert regions.chromosomes() == ["chr2", "chr1"]
    assert len(regions) == 3
    assert [r.id for r in regions.regions("chr2")] == ["a", "d"]
    assert regions.regions("chr3") == []
    assert "chr1" in regions
    assert "chrM" not in regions
    assert regions.lengths() == [10, 10, 10]


def test_read_regions_without_header(tmp_path: Path) -> None:
    path = write_lines(tmp_path / "peaks.bed", ["chr1\t10\t20", "chr1\t30\t40"])
    regions = read_regions(path)
    assert regions.header is None
    assert len(regions) == 2


def test_read_regions_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_regions(tmp_path / "missing.bed")


def test_sort_region_file(tmp_path: Path) -> None:
    path = write_lines(tmp_path / "peaks.bed", [
        "chrom\tstart\tend",
        "chr2\t5\t10",
        "chr1\t30\t40",
        "chr1\t10\t20",
    ])
    sorted_path = sort_region_file(path, tmp_path / "sorted.bed")
    assert sorted_path.read_text().splitlines() == [
        "chrom\tstart\tend",
        "chr1\t10\t20",
        "chr1\t30\t40",
        "chr2\t5\t10",
    ]
