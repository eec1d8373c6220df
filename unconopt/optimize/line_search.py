"""Deterministic line-search routines following Nocedal & Wright.

Both searches return ``(alpha, nfev)`` where ``nfev`` counts objective
evaluations made by the search itself, and raise
:class:`~unconopt.optimize.core.LineSearchFailure` rather than hand back a
step that violates sufficient decrease.
"""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np

from .core import Array, LineSearchFailure

Objective = Callable[[Array], float]
GradientFn = Callable[[Array], Array]

_MIN_STEP = 1e-16


def backtracking_armijo(
    f: Objective,
    x: Array,
    p: Array,
    grad_fx: Array,
    fx: Optional[float] = None,
    alpha0: float = 1.0,
    rho: float = 0.5,
    c: float = 1e-4,
    max_iter: int = 60,
) -> tuple[float, int]:
    """Classic Armijo backtracking line search."""
    if not (0 < c < 1):
        raise ValueError("Armijo constant c must lie in (0, 1)")
    if not (0 < rho < 1):
        raise ValueError("rho must lie in (0, 1)")
    nfev = 0
    if fx is None:
        fx = f(x)
        nfev += 1
    grad_dot = float(np.dot(grad_fx, p))
    if grad_dot >= 0:
        raise LineSearchFailure("Search direction is not a descent direction.", nfev=nfev)
    alpha = float(alpha0)
    for _ in range(max_iter):
        f_new = f(x + alpha * p)
        nfev += 1
        if np.isfinite(f_new) and f_new <= fx + c * alpha * grad_dot:
            return alpha, nfev
        alpha *= rho
        if alpha < _MIN_STEP:
            break
    raise LineSearchFailure(
        "Backtracking could not satisfy the sufficient decrease condition.",
        alpha=alpha,
        nfev=nfev,
    )


def wolfe_line_search(
    f: Objective,
    grad: GradientFn,
    x: Array,
    p: Array,
    fx: Optional[float] = None,
    grad_fx: Optional[Array] = None,
    alpha0: float = 1.0,
    c1: float = 1e-4,
    c2: float = 0.9,
    max_iter: int = 40,
    alpha_max: float = 1e10,
) -> tuple[float, int]:
    """
    Perform a strong Wolfe line search using bracketing and zoom.

    Parameters
    ----------
    f, grad:
        Objective and gradient callables.
    x, p:
        Current point and search direction; ``grad_fx @ p`` must be negative.
    fx, grad_fx:
        Objective value and gradient at ``x`` if already known.
    alpha0:
        Initial trial step.
    c1, c2:
        Sufficient decrease and curvature constants, ``0 < c1 < c2 < 1``.
    max_iter:
        Trial budget of the bracketing phase.
    """
    if not (0 < c1 < c2 < 1):
        raise ValueError("Require 0 < c1 < c2 < 1 for Wolfe conditions.")
    if alpha0 <= 0:
        raise ValueError("Initial step alpha0 must be positive.")

    nfev = 0

    def phi(alpha: float) -> float:
        nonlocal nfev
        nfev += 1
        return float(f(x + alpha * p))

    def phi_prime(alpha: float) -> float:
        return float(np.dot(grad(x + alpha * p), p))

    phi0 = phi(0.0) if fx is None else float(fx)
    der0 = phi_prime(0.0) if grad_fx is None else float(np.dot(grad_fx, p))
    if not der0 < 0:
        raise LineSearchFailure("Search direction is not a descent direction.", nfev=nfev)

    alpha_prev = 0.0
    phi_prev = phi0
    alpha = min(float(alpha0), alpha_max)

    for iteration in range(max_iter):
        phi_alpha = phi(alpha)
        if (
            not np.isfinite(phi_alpha)
            or phi_alpha > phi0 + c1 * alpha * der0
            or (iteration > 0 and phi_alpha >= phi_prev)
        ):
            alpha_star = _zoom(
                phi, phi_prime, alpha_prev, alpha, phi_prev, phi0, der0, c1, c2
            )
            break
        der_alpha = phi_prime(alpha)
        if abs(der_alpha) <= -c2 * der0:
            return alpha, nfev
        if der_alpha >= 0:
            alpha_star = _zoom(
                phi, phi_prime, alpha, alpha_prev, phi_alpha, phi0, der0, c1, c2
            )
            break
        if alpha >= alpha_max:
            raise LineSearchFailure(
                "Step length reached alpha_max; objective may be unbounded below.",
                alpha=alpha,
                nfev=nfev,
            )
        alpha_prev = alpha
        phi_prev = phi_alpha
        alpha = min(2.0 * alpha, alpha_max)
    else:
        raise LineSearchFailure(
            f"No step satisfying the Wolfe conditions within {max_iter} trials.",
            alpha=alpha,
            nfev=nfev,
        )

    if alpha_star is None:
        raise LineSearchFailure(
            "Step length underflowed without sufficient decrease.",
            alpha=0.0,
            nfev=nfev,
        )
    return alpha_star, nfev


def _zoom(
    phi: Callable[[float], float],
    phi_prime: Callable[[float], float],
    alo: float,
    ahi: float,
    phi_alo: float,
    phi0: float,
    der0: float,
    c1: float,
    c2: float,
    max_iter: int = 60,
) -> Optional[float]:
    """
    Zoom stage enforcing strong Wolfe conditions.

    ``alo`` always satisfies sufficient decrease. When the bracket collapses
    before the curvature condition is met, ``alo`` is returned if it is a
    genuine step, otherwise None.
    """
    for _ in range(max_iter):
        alpha = 0.5 * (alo + ahi)
        phi_alpha = phi(alpha)
        if (
            not np.isfinite(phi_alpha)
            or phi_alpha > phi0 + c1 * alpha * der0
            or phi_alpha >= phi_alo
        ):
            ahi = alpha
        else:
            der_alpha = phi_prime(alpha)
            if abs(der_alpha) <= -c2 * der0:
                return alpha
            if der_alpha * (ahi - alo) >= 0:
                ahi = alo
            alo = alpha
            phi_alo = phi_alpha
        if abs(ahi - alo) <= _MIN_STEP * max(1.0, abs(alo)):
            break
    if alo > 0:
        return alo
    return None


__all__ = ["backtracking_armijo", "wolfe_line_search"]
