"""Finite-difference and dense linear algebra helpers.

Pure NumPy; the optimizers only ever touch vectors and matrices through
these helpers and ``numpy.linalg``.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

Array = np.ndarray
Objective = Callable[[Array], float]


def approx_grad(
    fun: Objective, x: Array, eps: float = 1e-6, return_evals: bool = False
) -> Array | tuple[Array, int]:
    """Compute a central-difference gradient approximation.

    Parameters
    ----------
    fun:
        Objective function returning a scalar given x.
    x:
        Point where the gradient is approximated.
    eps:
        Perturbation size, scaled by ``max(1, |x_i|)`` per coordinate.
    return_evals:
        Also return the number of objective evaluations spent.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    x = np.asarray(x, dtype=float)
    grad = np.empty_like(x)
    work = x.copy()
    for i in range(x.size):
        h = eps * max(1.0, abs(x[i]))
        work[i] = x[i] + h
        f_plus = fun(work)
        work[i] = x[i] - h
        f_minus = fun(work)
        work[i] = x[i]
        grad[i] = (f_plus - f_minus) / (2.0 * h)
    if return_evals:
        return grad, 2 * x.size
    return grad


def approx_hessian(
    grad: Callable[[Array], Array],
    x: Array,
    eps: float = 1e-5,
    return_evals: bool = False,
) -> Array | tuple[Array, int]:
    """Approximate the Hessian by central differences of the gradient.

    The result is symmetrized, so it can be handed straight to a trust-region
    model.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    x = np.asarray(x, dtype=float)
    n = x.size
    hess = np.empty((n, n), dtype=float)
    work = x.copy()
    for j in range(n):
        h = eps * max(1.0, abs(x[j]))
        work[j] = x[j] + h
        g_plus = np.array(grad(work), dtype=float)
        work[j] = x[j] - h
        g_minus = np.array(grad(work), dtype=float)
        work[j] = x[j]
        hess[:, j] = (g_plus - g_minus) / (2.0 * h)
    hess = 0.5 * (hess + hess.T)
    if return_evals:
        return hess, 2 * n
    return hess


def is_pos_def(mat: Array) -> bool:
    """Check if a symmetric matrix is positive definite via Cholesky."""
    try:
        np.linalg.cholesky(0.5 * (mat + mat.T))
    except np.linalg.LinAlgError:
        return False
    return True


def safe_solve(mat: Array, vec: Array, reg: float = 1e-10) -> Array:
    """Solve ``mat @ x = vec`` with a ridge fallback for singular matrices."""
    try:
        return np.linalg.solve(mat, vec)
    except np.linalg.LinAlgError:
        scale = max(1.0, float(np.max(np.abs(np.diag(mat)))))
        eye = np.eye(mat.shape[0], dtype=mat.dtype)
        return np.linalg.solve(mat + reg * scale * eye, vec)


def boundary_intersection(p: Array, d: Array, radius: float) -> float:
    """
    Return the largest ``tau >= 0`` with ``||p + tau * d|| = radius``.

    ``p`` must lie inside the ball, so the quadratic has one non-negative
    root.
    """
    a = float(np.dot(d, d))
    if a <= 0.0:
        return 0.0
    b = 2.0 * float(np.dot(p, d))
    c = float(np.dot(p, p)) - radius**2
    disc = max(b * b - 4.0 * a * c, 0.0)
    return (-b + np.sqrt(disc)) / (2.0 * a)


__all__ = [
    "Array",
    "Objective",
    "approx_grad",
    "approx_hessian",
    "boundary_intersection",
    "is_pos_def",
    "safe_solve",
]
