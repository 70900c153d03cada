import re

import numpy as np

import sugarscape_engine.config as cfg
from sugarscape_engine.distributions import Discrete, DiscreteItem, Uniform
from sugarscape_engine.histogram import (
    HistogramBin, auto_bin_count, bin_values, preview_histogram, wealth_histogram,
)


def wealth_table(values):
    agents = np.zeros((len(values), cfg.AGENT_FIELDS), dtype=np.int64)
    agents[:, cfg.AGENT_SUGAR] = values
    return agents


def bounds(label):
    lo, hi = re.fullmatch(r"(-?\d+)-(-?\d+)", label).groups()
    return int(lo), int(hi)


def test_empty_population_gives_single_zero_bin():
    assert wealth_histogram(wealth_table([])) == [HistogramBin("0-0", 0)]
    assert wealth_histogram([]) == [HistogramBin("0-0", 0)]


def test_equal_wealth_gives_single_bin():
    assert wealth_histogram(wealth_table([3, 3, 3, 3])) == [HistogramBin("3-3", 4)]


def test_auto_bin_count_follows_population():
    assert auto_bin_count(0) == 5
    assert auto_bin_count(2) == 5
    assert auto_bin_count(400) == 10
    assert auto_bin_count(10 ** 12) == 30


def test_small_range_with_auto_bins():
    bins = wealth_histogram(wealth_table([0, 9]), auto=True)
    assert [b.label for b in bins] == ["0-1", "2-3", "4-5", "6-7", "8-9"]
    assert [b.count for b in bins] == [1, 0, 0, 0, 1]


def test_manual_bin_count_is_clamped():
    one = wealth_histogram(wealth_table([0, 9]), auto=False, bin_count=0)
    assert one == [HistogramBin("0-9", 2)]
    many = wealth_histogram(wealth_table([0, 9]), auto=False, bin_count=500)
    assert len(many) == 10
    assert all(b.label == f"{i}-{i}" for i, b in enumerate(many))


def test_bin_count_can_come_out_lower_than_requested():
    # range 10 over 4 bins gives width 3, so only 4 bins of 3 cover 0..11.
    bins = bin_values([0, 9], 4)
    assert [b.label for b in bins] == ["0-2", "3-5", "6-8", "9-11"]
    bins = bin_values([0, 9], 6)
    assert len(bins) == 5


def test_bins_are_contiguous_and_counts_add_up():
    rng = np.random.default_rng(0)
    values = rng.integers(-20, 300, size=437)
    for auto, count in [(True, 12), (False, 7), (False, 50)]:
        bins = wealth_histogram(wealth_table(values), auto=auto, bin_count=count)
        assert sum(b.count for b in bins) == len(values)
        edges = [bounds(b.label) for b in bins]
        assert edges[0][0] == values.min()
        assert edges[-1][1] >= values.max()
        for (_, hi), (lo, _) in zip(edges, edges[1:]):
            assert lo == hi + 1


def test_negative_wealth_is_binned():
    bins = wealth_histogram(wealth_table([-3, -3, 2]), auto=False, bin_count=2)
    assert [b.label for b in bins] == ["-3--1", "0-2"]
    assert [b.count for b in bins] == [2, 1]


def test_preview_of_single_value_distribution():
    rng = np.random.default_rng(1)
    bins = preview_histogram(Discrete((DiscreteItem(1, 1),)), rng)
    assert bins == [HistogramBin("1-1", cfg.PREVIEW_SAMPLES)]


def test_preview_of_uniform_distribution():
    rng = np.random.default_rng(2)
    bins = preview_histogram(Uniform(1, 6), rng)
    assert [b.label for b in bins] == [f"{i}-{i}" for i in range(1, 7)]
    assert sum(b.count for b in bins) == cfg.PREVIEW_SAMPLES


def test_preview_caps_bin_count():
    rng = np.random.default_rng(3)
    bins = preview_histogram(Uniform(0, 10_000), rng, samples=10_000)
    assert len(bins) <= cfg.PREVIEW_BINS_MAX
