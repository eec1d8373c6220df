"""Consistency checks for user-supplied derivatives."""

from __future__ import annotations

import numpy as np

from unconopt.optimize.core import Array, ObjectiveFunction
from unconopt.optimize.utils import approx_grad


def gradient_error(function: ObjectiveFunction, x: Array, eps: float = 1e-6) -> float:
    """
    Relative error between the supplied gradient and central differences.

    Parameters
    ----------
    function:
        Objective implementing evaluate and gradient.
    x:
        Point at which to compare.
    eps:
        Finite-difference step.

    Returns
    -------
    float
        ``||g - g_fd|| / max(1, ||g_fd||)``.
    """
    x = np.asarray(x, dtype=float)
    analytic = np.empty(x.size)
    function.gradient(x, analytic)
    numeric = approx_grad(function.evaluate, x, eps=eps)
    scale = max(1.0, float(np.linalg.norm(numeric)))
    return float(np.linalg.norm(analytic - numeric)) / scale


def is_gradient_consistent(
    function: ObjectiveFunction, x: Array, rtol: float = 1e-4
) -> bool:
    """Check the supplied gradient against central differences at x."""
    err = gradient_error(function, x)
    return bool(np.isfinite(err) and err <= rtol)


def assert_gradient_consistent(
    function: ObjectiveFunction, x: Array, rtol: float = 1e-4
) -> None:
    """
    Assert that the supplied gradient agrees with central differences.

    Raises
    ------
    ValueError
        If the relative error exceeds ``rtol``.
    """
    err = gradient_error(function, x)
    if not (np.isfinite(err) and err <= rtol):
        raise ValueError(
            f"Gradient of {type(function).__name__} disagrees with finite "
            f"differences: relative error {err:.3e} exceeds {rtol:g}."
        )


def is_symmetric(mat: Array, atol: float = 1e-8) -> bool:
    """Check whether a square matrix is symmetric within a tolerance."""
    mat = np.asarray(mat)
    if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
        return False
    max_dev = float(np.max(np.abs(mat - mat.T))) if mat.size else 0.0
    if not np.isfinite(max_dev):
        return False
    return max_dev <= atol * max(1.0, float(np.max(np.abs(mat))))


def assert_symmetric(mat: Array, atol: float = 1e-8) -> None:
    """
    Assert that a Hessian approximation is symmetric.

    Raises
    ------
    ValueError
        If the matrix is not square and symmetric within the tolerance.
    """
    if not is_symmetric(mat, atol=atol):
        raise ValueError(f"Matrix is not symmetric within tolerance {atol}.")
