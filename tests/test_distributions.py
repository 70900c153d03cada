import numpy as np
import pytest

from sugarscape_engine.distributions import Discrete, DiscreteItem, Normal, Uniform, sample_int, sample_many


def test_discrete_single_item_always_returns_its_value():
    rng = np.random.default_rng(0)
    spec = Discrete((DiscreteItem(value=1, weight=1),))
    assert all(sample_int(spec, rng) == 1 for _ in range(200))


def test_discrete_without_positive_weight_falls_back_to_zero():
    rng = np.random.default_rng(0)
    assert sample_int(Discrete(()), rng) == 0
    assert sample_int(Discrete.from_pairs([(7, 0), (9, -2)]), rng) == 0


def test_discrete_ignores_zero_weight_items():
    rng = np.random.default_rng(1)
    spec = Discrete.from_pairs([(3, 0), (8, 2.5), (4, 0)])
    assert set(sample_many(spec, rng, 100)) == {8}


def test_discrete_respects_weights():
    rng = np.random.default_rng(2)
    spec = Discrete.from_pairs([(0, 1), (1, 3)])
    draws = sample_many(spec, rng, 4000)
    assert 0.70 < draws.mean() < 0.80


def test_uniform_is_inclusive_of_both_bounds():
    rng = np.random.default_rng(3)
    draws = sample_many(Uniform(1, 6), rng, 2000)
    assert draws.min() == 1
    assert draws.max() == 6
    assert set(draws) == {1, 2, 3, 4, 5, 6}


def test_uniform_tolerates_inverted_bounds():
    rng = np.random.default_rng(4)
    draws = sample_many(Uniform(5, 2), rng, 500)
    assert draws.min() >= 2
    assert draws.max() <= 5


def test_uniform_degenerate_range():
    rng = np.random.default_rng(5)
    assert set(sample_many(Uniform(3, 3), rng, 50)) == {3}


def test_normal_is_clamped():
    rng = np.random.default_rng(6)
    assert set(sample_many(Normal(mean=100, sd=1, min=0, max=30), rng, 50)) == {30}
    assert set(sample_many(Normal(mean=-100, sd=1, min=30, max=0), rng, 50)) == {0}


def test_normal_zero_sd_rounds_half_up():
    rng = np.random.default_rng(7)
    assert sample_int(Normal(mean=2.5, sd=0, min=0, max=10), rng) == 3
    assert sample_int(Normal(mean=3.5, sd=0, min=0, max=10), rng) == 4


def test_normal_centres_on_mean():
    rng = np.random.default_rng(8)
    draws = sample_many(Normal(mean=10, sd=2, min=0, max=30), rng, 3000)
    assert 9.8 < draws.mean() < 10.2
    assert draws.dtype == np.int64


def test_seeded_generators_repeat():
    spec = Normal(mean=10, sd=3, min=0, max=30)
    a = sample_many(spec, np.random.default_rng(42), 20)
    b = sample_many(spec, np.random.default_rng(42), 20)
    assert np.array_equal(a, b)


def test_unknown_spec_kind_is_rejected():
    with pytest.raises(AssertionError):
        sample_int("triangular", np.random.default_rng(0))


def test_normal_with_non_finite_parameters_lands_on_a_bound():
    rng = np.random.default_rng(9)
    for _ in range(20):
        assert sample_int(Normal(mean=0, sd=float("inf"), min=0, max=10), rng) in (0, 10)
    assert sample_int(Normal(mean=float("inf"), sd=1, min=0, max=10), rng) == 10
    assert sample_int(Normal(mean=float("-inf"), sd=1, min=0, max=10), rng) == 0
    assert sample_int(Normal(mean=float("nan"), sd=1, min=0, max=10), rng) == 10
