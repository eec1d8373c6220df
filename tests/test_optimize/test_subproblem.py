import numpy as np
import pytest

from unconopt.optimize import (
    SearchMethod,
    cauchy_point,
    dogleg_step,
    model_reduction,
    solve_subproblem,
)


def test_cauchy_point_interior_minimizer():
    grad = np.array([1.0, 0.0])
    hess = np.diag([2.0, 1.0])
    step = cauchy_point(grad, hess, delta=10.0)
    # Minimizer of g.p + 0.5 p.H.p along -g is -g / 2.
    assert np.allclose(step, [-0.5, 0.0])


def test_cauchy_point_clipped_to_radius():
    grad = np.array([3.0, 4.0])
    hess = np.eye(2)
    step = cauchy_point(grad, hess, delta=0.5)
    assert np.linalg.norm(step) == pytest.approx(0.5)
    assert np.allclose(step / np.linalg.norm(step), -grad / 5.0)


def test_cauchy_point_zero_hessian_goes_to_boundary():
    grad = np.array([0.3, -0.4])
    hess = np.zeros((2, 2))
    with np.errstate(divide="raise", invalid="raise"):
        trial = solve_subproblem(grad, hess, 2.0, SearchMethod.CAUCHY)
    assert trial.on_boundary
    assert np.linalg.norm(trial.step) == pytest.approx(2.0)
    assert trial.predicted_reduction == pytest.approx(2.0 * 0.5)


def test_cauchy_point_negative_curvature_goes_to_boundary():
    grad = np.array([1.0, 1.0])
    hess = -np.eye(2)
    step = cauchy_point(grad, hess, delta=1.5)
    assert np.linalg.norm(step) == pytest.approx(1.5)


def test_cauchy_point_zero_gradient():
    step = cauchy_point(np.zeros(3), np.eye(3), delta=1.0)
    assert np.array_equal(step, np.zeros(3))


def test_dogleg_returns_newton_step_inside_region():
    hess = np.array([[4.0, 1.0], [1.0, 3.0]])
    grad = np.array([1.0, 2.0])
    step = dogleg_step(grad, hess, delta=10.0)
    assert np.allclose(step, -np.linalg.solve(hess, grad))


def test_dogleg_path_hits_boundary_between_points():
    hess = np.diag([1.0, 10.0])
    grad = np.array([1.0, 1.0])
    p_newton = -np.linalg.solve(hess, grad)
    p_u = -(grad @ grad) / (grad @ hess @ grad) * grad
    delta = 0.5 * (np.linalg.norm(p_u) + np.linalg.norm(p_newton))
    trial = solve_subproblem(grad, hess, delta, SearchMethod.DOGLEG)
    assert trial.on_boundary
    assert np.linalg.norm(trial.step) == pytest.approx(delta)
    cauchy = solve_subproblem(grad, hess, delta, SearchMethod.CAUCHY)
    assert trial.predicted_reduction >= cauchy.predicted_reduction


def test_dogleg_short_radius_follows_steepest_descent():
    hess = np.diag([1.0, 10.0])
    grad = np.array([1.0, 1.0])
    step = dogleg_step(grad, hess, delta=0.01)
    assert np.linalg.norm(step) == pytest.approx(0.01)
    assert np.allclose(step / 0.01, -grad / np.linalg.norm(grad))


def test_dogleg_falls_back_to_cauchy_without_convexity():
    grad = np.array([1.0, -2.0])
    for hess in (np.zeros((2, 2)), np.diag([1.0, -1.0])):
        assert np.allclose(dogleg_step(grad, hess, 0.7), cauchy_point(grad, hess, 0.7))


def test_model_reduction_matches_quadratic():
    grad = np.array([1.0, -1.0])
    hess = np.array([[2.0, 0.0], [0.0, 4.0]])
    step = np.array([-0.5, 0.25])
    expected = -(grad @ step + 0.5 * step @ hess @ step)
    assert model_reduction(grad, hess, step) == pytest.approx(expected)


def test_predicted_reduction_positive_for_nonzero_gradient(rng):
    for _ in range(10):
        grad = rng.normal(size=4)
        m = rng.normal(size=(4, 4))
        hess = m + m.T
        for method in SearchMethod:
            trial = solve_subproblem(grad, hess, 0.8, method)
            assert np.linalg.norm(trial.step) <= 0.8 * (1 + 1e-12)
            assert trial.predicted_reduction > 0


def test_solve_subproblem_rejects_bad_radius():
    with pytest.raises(ValueError):
        solve_subproblem(np.ones(2), np.eye(2), 0.0)
