"""Tests for debug mode functionality."""

import numpy as np
import pytest

from unconopt import (
    CallableFunction,
    Lbfgs,
    QuadraticFunction,
    TrustRegion,
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
)


def _wrong_gradient_function() -> CallableFunction:
    return CallableFunction(
        fun=lambda x: float(x @ x),
        grad=lambda x: 3.0 * x,
        dim=2,
    )


def test_debug_mode_toggle_and_context() -> None:
    set_debug_enabled(False)
    assert not is_debug_enabled()

    with debug_context(True):
        assert is_debug_enabled()
    assert not is_debug_enabled()

    set_debug_enabled(True)
    with debug_context(False):
        assert not is_debug_enabled()
    assert is_debug_enabled()


def test_debug_context_nested() -> None:
    set_debug_enabled(False)
    with debug_context(True):
        with debug_context(False):
            assert not is_debug_enabled()
        assert is_debug_enabled()
    assert not is_debug_enabled()


def test_debug_mode_catches_inconsistent_gradient() -> None:
    fn = _wrong_gradient_function()
    with debug_context(True):
        with pytest.raises(ValueError, match="finite"):
            Lbfgs(fn).optimize(np.array([1.0, -2.0]))
        with pytest.raises(ValueError, match="finite"):
            TrustRegion(fn).optimize(np.array([1.0, -2.0]))


def test_debug_mode_off_skips_gradient_check() -> None:
    fn = _wrong_gradient_function()
    with debug_context(False):
        res = Lbfgs(fn).optimize(np.array([1.0, -2.0]))
    # A scaled gradient still points downhill, so the run completes.
    assert res.status.is_terminal


def test_debug_mode_rejects_asymmetric_hessian() -> None:
    fn = CallableFunction(
        fun=lambda x: float(x @ x),
        grad=lambda x: 2.0 * x,
        hess=lambda x: np.array([[2.0, 1.0], [0.0, 2.0]]),
        dim=2,
    )
    with debug_context(True):
        with pytest.raises(ValueError, match="symmetric"):
            TrustRegion(fn).optimize(np.array([1.0, 1.0]))


def test_debug_mode_accepts_consistent_problem() -> None:
    fn = QuadraticFunction(np.array([[3.0, 1.0], [1.0, 2.0]]), np.array([1.0, 0.0]))
    with debug_context(True):
        res = TrustRegion(fn).optimize(np.zeros(2))
    assert res.success
