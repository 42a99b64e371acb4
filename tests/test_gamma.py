import math
import sys

import numpy as np
import pytest
from scipy import integrate, special, stats

from hypergeo.core import ConvergenceError, InvalidParameterError
from hypergeo.distributions import GammaDistribution
from hypergeo.distributions import gamma as gamma_module


def test_reference_values() -> None:
    dist = GammaDistribution(shape=2.0, scale=1.0)
    assert dist.density(2.0) == pytest.approx(0.2706705665, abs=1e-10)
    assert dist.cumulative_probability(2.0) == pytest.approx(0.5939941503, abs=1e-10)


@pytest.mark.parametrize(
    "shape,scale",
    [(0.0, 1.0), (-1.0, 1.0), (1.0, -1.0), (1.0, 0.0), (math.nan, 1.0), (2.0, math.inf)],
)
def test_invalid_parameters_raise(shape: float, scale: float) -> None:
    with pytest.raises(InvalidParameterError):
        GammaDistribution(shape, scale)


def test_invalid_accuracy_raises() -> None:
    with pytest.raises(InvalidParameterError) as excinfo:
        GammaDistribution(1.0, 1.0, accuracy=0.0)
    assert excinfo.value.parameter == "accuracy"


def test_validate_returns_result() -> None:
    good = GammaDistribution.validate(2.0, 3.0)
    assert good.ok
    assert good.unwrap().scale == 3.0

    bad = GammaDistribution.validate(2.0, -1.0)
    assert not bad.ok
    assert bad.value is None
    assert bad.error is not None and bad.error.parameter == "scale"
    with pytest.raises(InvalidParameterError):
        bad.unwrap()


def test_parameters_are_kept() -> None:
    dist = GammaDistribution(2.5, 4.0, accuracy=1e-6)
    assert dist.shape == 2.5
    assert dist.scale == 4.0
    assert dist.solver_absolute_accuracy == 1e-6
    assert dist.parameters == {"shape": 2.5, "scale": 4.0}
    with pytest.raises(AttributeError):
        dist.scale = 1.0  # type: ignore[misc]


@pytest.mark.parametrize("scale", [0.5, 1.0, 7.0])
def test_unit_shape_reduces_to_exponential(scale: float) -> None:
    dist = GammaDistribution(1.0, scale)
    for x in (0.0, 0.1, 1.0, 3.3, 25.0, 400.0):
        expected = math.exp(-x / scale) / scale
        assert dist.density(x) == pytest.approx(expected, rel=1e-9)


@pytest.mark.parametrize(
    "shape,scale",
    [(0.3, 2.0), (0.9, 1.0), (1.5, 0.4), (5.0, 3.0), (50.0, 1.0), (200.0, 0.5), (1000.0, 2.0)],
)
def test_density_matches_scipy(shape: float, scale: float) -> None:
    dist = GammaDistribution(shape, scale)
    mean = shape * scale
    sd = math.sqrt(shape) * scale
    for x in (mean * 0.01, max(mean - 3 * sd, mean * 0.1), mean, mean + 3 * sd, mean + 8 * sd):
        expected = stats.gamma.pdf(x, a=shape, scale=scale)
        assert dist.density(x) == pytest.approx(expected, rel=1e-8, abs=1e-300)
        if expected > 1e-300:
            assert dist.log_density(x) == pytest.approx(math.log(expected), rel=1e-8, abs=1e-8)


def test_large_shape_uses_log_space_branch() -> None:
    dist = GammaDistribution(1000.0, 1.0)
    y = 1000.0
    assert math.log(y) >= dist.max_log_y
    value = dist.density(y)
    assert math.isfinite(value)
    assert value == pytest.approx(stats.gamma.pdf(y, a=1000.0), rel=1e-8)


def test_density_outside_support() -> None:
    dist = GammaDistribution(2.0, 1.0)
    assert dist.density(-1.0) == 0.0
    assert dist.density(0.0) == 0.0
    assert dist.density(math.inf) == 0.0
    assert dist.log_density(-1.0) == -math.inf
    assert GammaDistribution(0.5, 1.0).density(0.0) == math.inf


def test_cumulative_probability_properties() -> None:
    for shape, scale in [(0.4, 1.0), (2.0, 1.0), (7.5, 0.3), (120.0, 2.0)]:
        dist = GammaDistribution(shape, scale)
        assert dist.cumulative_probability(0.0) == 0.0
        assert dist.cumulative_probability(-3.0) == 0.0
        xs = np.linspace(0.0, shape * scale * 4 + 20 * scale, 200)
        values = np.array([dist.cumulative_probability(x) for x in xs])
        assert np.all(np.diff(values) >= -1e-15)
        far = shape * scale + 40 * math.sqrt(shape) * scale + 40 * scale
        assert dist.cumulative_probability(far) == pytest.approx(1.0, abs=1e-12)
        assert dist.cumulative_probability(math.inf) == 1.0


@pytest.mark.parametrize("shape,scale", [(1.0, 2.0), (2.0, 1.0), (5.0, 0.5), (30.0, 3.0)])
def test_density_integrates_to_one(shape: float, scale: float) -> None:
    dist = GammaDistribution(shape, scale)
    upper = shape * scale + 40.0 * math.sqrt(shape) * scale
    total, _ = integrate.quad(dist.density, 0.0, upper, points=[shape * scale], limit=200)
    assert total == pytest.approx(1.0, abs=1e-7)


def test_interval_probability() -> None:
    dist = GammaDistribution(3.0, 2.0)
    expected = stats.gamma.cdf(8.0, a=3.0, scale=2.0) - stats.gamma.cdf(2.0, a=3.0, scale=2.0)
    assert dist.probability(2.0, 8.0) == pytest.approx(expected, abs=1e-12)
    with pytest.raises(ValueError):
        dist.probability(8.0, 2.0)


def test_moments_and_support() -> None:
    dist = GammaDistribution(3.0, 2.0)
    assert dist.numerical_mean == 6.0
    assert dist.numerical_variance == 12.0
    assert dist.support_lower_bound == 0.0
    assert dist.support_upper_bound == math.inf
    assert dist.is_support_lower_bound_inclusive
    assert not dist.is_support_upper_bound_inclusive
    assert dist.is_support_connected

    summary = dist.summary()
    assert summary.distribution == "gamma"
    assert summary.support == (0.0, math.inf)
    frame = summary.to_frame()
    assert frame.loc[0, "mean"] == 6.0
    assert frame.loc[0, "shape"] == 3.0


@pytest.mark.parametrize("shape,scale", [(0.5, 2.0), (2.5, 2.0), (9.0, 0.5)])
def test_sample_mean_close_to_expected(shape: float, scale: float) -> None:
    dist = GammaDistribution(shape, scale, random_source=12345)
    draws = dist.samples(100_000)
    assert np.all(draws >= 0)
    assert draws.mean() == pytest.approx(shape * scale, rel=0.03)
    assert draws.var() == pytest.approx(shape * scale * scale, rel=0.08)


def test_sample_is_reproducible_for_seed() -> None:
    first = GammaDistribution(2.0, 1.0, random_source=7).samples(50)
    second = GammaDistribution(2.0, 1.0, random_source=np.random.default_rng(7)).samples(50)
    np.testing.assert_array_equal(first, second)


def test_shared_random_source_advances() -> None:
    rng = np.random.default_rng(99)
    a = GammaDistribution(2.0, 1.0, random_source=rng)
    b = GammaDistribution(2.0, 1.0, random_source=rng)
    assert a.random_source.generator is b.random_source.generator  # type: ignore[attr-defined]
    assert a.sample() != b.sample()


def test_samples_negative_size_raises() -> None:
    with pytest.raises(ValueError):
        GammaDistribution(1.0, 1.0).samples(-1)


def test_convergence_failure_propagates(monkeypatch: pytest.MonkeyPatch) -> None:
    def _fail(a: float, x: float) -> float:
        raise ConvergenceError("no convergence", iterations=10)

    monkeypatch.setattr(gamma_module, "regularized_gamma_p", _fail)
    with pytest.raises(ConvergenceError):
        GammaDistribution(2.0, 1.0).cumulative_probability(1.0)


def test_density_when_scaled_argument_overflows() -> None:
    dist = GammaDistribution(2.0, 1e-10)
    assert dist.density(1e308) == 0.0
    assert dist.log_density(1e308) == -math.inf


def test_large_shape_density_where_prefactor_underflows() -> None:
    dist = GammaDistribution(200.0, 1.0)
    assert dist.density_prefactor1 == 0.0
    expected = stats.gamma.pdf(30.0, a=200.0)
    assert dist.density(30.0) == pytest.approx(expected, rel=1e-8, abs=0)
    assert dist.density(30.0) == pytest.approx(math.exp(dist.log_density(30.0)), rel=1e-12)


def test_derived_constants_are_read_only() -> None:
    dist = GammaDistribution(3.0, 2.0)
    assert dist.shifted_shape == pytest.approx(3.0 + 607.0 / 128.0 + 0.5)
    assert dist.max_log_y == pytest.approx(math.log(sys.float_info.max) / 2.0)
    for name in ("shifted_shape", "density_prefactor1", "density_prefactor2", "min_y", "max_log_y"):
        with pytest.raises(AttributeError):
            setattr(dist, name, 1.0)


def test_cdf_for_very_large_shape() -> None:
    dist = GammaDistribution(1e7, 1.0)
    expected = special.gammainc(1e7, 1e7)
    assert dist.cumulative_probability(1e7) == pytest.approx(expected, abs=1e-6)
