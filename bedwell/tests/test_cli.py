"""Tests for :py:mod:`~bedwell.cli`"""

from pathlib import Path

import pytest

from bedwell.cli import build_options
from bedwell.cli import main
from bedwell.cli import parse_arguments
from bedwell.options import IntersectOptions
from bedwell.options import OutputKind
from bedwell.policies import Extension
from bedwell.policies import OverlapPolicy


def options_for(*args: str) -> IntersectOptions:
    return build_options(parse_arguments(["-a", "a.bed", "-b", "b.bed", *args]))


def test_policy_flags() -> None:
    assert options_for().policy is OverlapPolicy.Any
    assert options_for("-p", "50").policy is OverlapPolicy.Percent
    assert options_for("-p", "50", "-t").policy is OverlapPolicy.PercentBoth
    assert options_for("-p", "50", "-c").policy is OverlapPolicy.PercentExact
    assert options_for("-p", "50", "-t", "-c").policy is OverlapPolicy.PercentExactBoth


def test_any_overrides_percent() -> None:
    options = options_for("-p", "10:20", "-y")
    assert options.policy is OverlapPolicy.Any
    assert options.percent == ()
    assert not options.batch


def test_batch_and_extension_flags() -> None:
    options = options_for("-p", "10:12", "-e", "100", "50", "-m", "9", "-o", "overlapB", "nonpairs",
                          "-g", "1000", "-n", "2", "-u", "-d", "--threads", "3")
    assert options.percent == (10.0, 11.0, 12.0)
    assert options.batch
    assert options.extend == (100, 50)
    assert options.extension is Extension.Centered
    assert options.mode_column == 9
    assert options.outputs == frozenset([OutputKind.OverlapB, OutputKind.NonPairs])
    assert (options.gap, options.maxud, options.threads) == (1000, 2, 3)
    assert options.report_once and options.keep_order


def test_unknown_output() -> None:
    with pytest.raises(SystemExit):
        parse_arguments(["-a", "a.bed", "-b", "b.bed", "-o", "everything"])


def test_main(tmp_path: Path) -> None:
    input_a = tmp_path / "a.bed"
    input_b = tmp_path / "b.bed"
    input_a.write_text("chr1\t100\t200\ta1\nchr1\t500\t600\ta2\n")
    input_b.write_text("chr1\t150\t250\tb1\n")
    out = tmp_path / "out"
    out.mkdir()

    assert main(["-a", str(input_a), "-b", str(input_b), "-p", "40", "-o", "overlapA", "onlyA",
                 "--output-dir", str(out)]) == 0
    assert (out / "a_b_OVERLAP_FROM_a.bed").read_text() == "chr1\t100\t200\ta1\n"
    assert (out / "a_b_ONLY_a.bed").read_text() == "chr1\t500\t600\ta2\n"

    assert main(["-a", str(input_a), "-b", str(input_b), "-p", "40", "60",
                 "--output-dir", str(out), "-s"]) == 0
    assert (out / "a_b_DISTRIB.txt").read_text().splitlines() == [
        "Percentage\tOverlap a.bed\tMean distance\tMedian distance",
        "40\t1\t-50\t-50",
        "60\t0\tNA\tNA",
    ]


def test_main_errors(tmp_path: Path) -> None:
    input_b = tmp_path / "b.bed"
    input_b.write_text("chr1\t150\t250\tb1\n")
    assert main(["-a", str(tmp_path / "missing.bed"), "-b", str(input_b)]) == 1
    assert main(["-a", str(input_b), "-b", str(input_b), "-e", "10", "-x"]) == 1


def test_help_and_usage_errors_exit() -> None:
    with pytest.raises(SystemExit):
        parse_arguments(["--help"])
    with pytest.raises(SystemExit):
        parse_arguments(["-a", "a.bed"])


def test_main_unreadable_input(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    input_a = tmp_path / "a.bed"
    input_b = tmp_path / "b.bed"
    input_a.write_text("chr1\t100\t200\ta1\n")
    input_b.write_text("chr1\t150\t250\tb1\n")

    def unreadable(path: Path, mode_column: object = None) -> None:
        raise PermissionError(f"Permission denied: '{path}'")

    monkeypatch.setattr("bedwell.intersect.read_regions", unreadable)
    assert main(["-a", str(input_a), "-b", str(input_b)]) == 1
