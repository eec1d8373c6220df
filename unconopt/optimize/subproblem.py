"""Approximate solvers for the trust-region subproblem.

Each solver minimizes the quadratic model

    m(p) = g @ p + 0.5 * p @ B @ p    subject to    ||p|| <= delta

only approximately, which is all the outer trust-region iteration needs for
global convergence.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from .core import Array
from .utils import boundary_intersection, is_pos_def, safe_solve

# Relative slack when deciding whether a step sits on the boundary.
_BOUNDARY_RTOL = 1e-8


class SearchMethod(Enum):
    """Strategy used to solve the trust-region subproblem."""

    CAUCHY = "cauchy"
    DOGLEG = "dogleg"


@dataclass(frozen=True)
class TrustRegionStep:
    """Candidate step together with the model decrease it predicts."""

    step: Array
    predicted_reduction: float
    on_boundary: bool


def model_reduction(grad: Array, hess: Array, step: Array) -> float:
    """Return ``m(0) - m(step)`` for the quadratic model."""
    return -(float(np.dot(grad, step)) + 0.5 * float(step @ (hess @ step)))


def cauchy_point(grad: Array, hess: Array, delta: float) -> Array:
    """
    Minimizer of the model along the steepest-descent ray, clipped to delta.

    With non-positive curvature along ``-grad`` the model decreases without
    bound along the ray, so the step runs to the boundary.
    """
    grad_norm = float(np.linalg.norm(grad))
    if grad_norm == 0:
        return np.zeros_like(grad)
    gbg = float(grad @ (hess @ grad))
    if gbg <= 0:
        tau = 1.0
    else:
        tau = min(grad_norm**3 / (delta * gbg), 1.0)
    return -(tau * delta / grad_norm) * grad


def dogleg_step(grad: Array, hess: Array, delta: float) -> Array:
    """
    Dogleg path between the unconstrained Cauchy point and the Newton step.

    Falls back to :func:`cauchy_point` when the model is not convex, since
    the Newton step is then not a minimizer.
    """
    if not is_pos_def(hess):
        return cauchy_point(grad, hess, delta)
    p_newton = -safe_solve(hess, grad)
    if np.linalg.norm(p_newton) <= delta:
        return p_newton
    gg = float(np.dot(grad, grad))
    gbg = float(grad @ (hess @ grad))
    p_u = -(gg / gbg) * grad
    norm_u = float(np.linalg.norm(p_u))
    if norm_u >= delta:
        return (delta / norm_u) * p_u
    diff = p_newton - p_u
    tau = boundary_intersection(p_u, diff, delta)
    return p_u + tau * diff


def solve_subproblem(
    grad: Array, hess: Array, delta: float, method: SearchMethod = SearchMethod.CAUCHY
) -> TrustRegionStep:
    """Solve the trust-region subproblem with the selected strategy."""
    if delta <= 0:
        raise ValueError("Trust-region radius must be positive.")
    if method is SearchMethod.CAUCHY:
        step = cauchy_point(grad, hess, delta)
    elif method is SearchMethod.DOGLEG:
        step = dogleg_step(grad, hess, delta)
    else:
        raise ValueError(f"Unsupported search method {method!r}.")
    on_boundary = float(np.linalg.norm(step)) >= (1.0 - _BOUNDARY_RTOL) * delta
    return TrustRegionStep(
        step=step,
        predicted_reduction=model_reduction(grad, hess, step),
        on_boundary=on_boundary,
    )


__all__ = [
    "SearchMethod",
    "TrustRegionStep",
    "cauchy_point",
    "dogleg_step",
    "model_reduction",
    "solve_subproblem",
]
