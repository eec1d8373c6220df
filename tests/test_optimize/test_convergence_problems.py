import numpy as np
import pytest

from unconopt.functions import (
    ExtendedRosenbrockFunction,
    QuadraticFunction,
    WoodFunction,
)
from unconopt.optimize import (
    Lbfgs,
    LbfgsConfig,
    SearchMethod,
    Status,
    TrustRegion,
    TrustRegionConfig,
)


def assert_near_ones(x: np.ndarray) -> None:
    assert np.all(x >= 0.5) and np.all(x <= 1.5), x


def run_lbfgs(fn, history_size):
    x = fn.starting_iterate()
    res = Lbfgs(fn, LbfgsConfig(history_size=history_size)).optimize(x)
    return res


def run_trust_region(fn):
    x = fn.starting_iterate()
    config = TrustRegionConfig(search_method=SearchMethod.CAUCHY)
    return TrustRegion(fn, config).optimize(x)


@pytest.mark.parametrize("k", [2, 5, 20])
def test_lbfgs_extended_rosenbrock(k):
    fn = ExtendedRosenbrockFunction(2 * k)
    res = run_lbfgs(fn, history_size=min(k, 20))
    assert -0.5 <= res.fun <= 0.5
    assert_near_ones(res.x)


@pytest.mark.slow
def test_lbfgs_extended_rosenbrock_random_dimension(rng):
    fn = ExtendedRosenbrockFunction.random(rng)
    res = run_lbfgs(fn, history_size=min(fn.num_dimensions // 2, 20))
    assert -0.5 <= res.fun <= 0.5
    assert_near_ones(res.x)


@pytest.mark.parametrize("k", [2, 5])
def test_trust_region_extended_rosenbrock(k):
    fn = ExtendedRosenbrockFunction(2 * k)
    res = run_trust_region(fn)
    assert -0.5 <= res.fun <= 0.5
    assert_near_ones(res.x)


@pytest.mark.slow
def test_trust_region_extended_rosenbrock_larger_dimension():
    fn = ExtendedRosenbrockFunction(40)
    res = run_trust_region(fn)
    assert -0.5 <= res.fun <= 0.5
    assert_near_ones(res.x)


def test_lbfgs_wood():
    fn = WoodFunction()
    res = run_lbfgs(fn, history_size=3)
    assert_near_ones(res.x)


def test_trust_region_wood():
    fn = WoodFunction()
    res = run_trust_region(fn)
    assert_near_ones(res.x)


def test_trust_region_zero_hessian_never_divides():
    fn = ExtendedRosenbrockFunction(6)
    start = fn.starting_iterate()
    optimizer = TrustRegion(fn, TrustRegionConfig(search_method="cauchy"))
    with np.errstate(divide="raise"):
        res = optimizer.optimize(start.copy(), max_iterations=500, trajectory=True)
    values = [fn.evaluate(x) for x in res.trajectory]
    assert len(values) > 1
    assert values[-1] < values[0]
    assert all(b <= a for a, b in zip(values, values[1:]))
    assert res.nhev >= 1


@pytest.mark.parametrize("n", [3, 8])
def test_well_conditioned_quadratic_both_optimizers(rng, n):
    q, _ = np.linalg.qr(rng.normal(size=(n, n)))
    A = q @ np.diag(np.linspace(1.0, 4.0, n)) @ q.T
    A = 0.5 * (A + A.T)
    fn = QuadraticFunction(A, rng.normal(size=n))
    x_star = fn.minimizer()
    x0 = x_star + rng.normal(size=n)

    res_lbfgs = Lbfgs(fn, LbfgsConfig(history_size=5)).optimize(x0.copy())
    res_cauchy = TrustRegion(fn).optimize(x0.copy(), max_iterations=20 * n)
    res_dogleg = TrustRegion(fn, TrustRegionConfig(search_method="dogleg")).optimize(
        x0.copy(), max_iterations=20 * n
    )
    for res in (res_lbfgs, res_cauchy, res_dogleg):
        assert res.status is Status.CONVERGED
        assert res.fun <= fn.evaluate(x0)
        assert np.allclose(res.x, x_star, atol=1e-5)
    assert res_lbfgs.nit <= 20 * n
