"""Limited-memory BFGS with a strong Wolfe line search."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, List, Optional

import numpy as np

from unconopt.diagnostics import assert_gradient_consistent, is_debug_enabled
from unconopt.logging import get_logger

from .core import (
    GTOL,
    MAX_ITERATIONS_CAP,
    Array,
    InvalidConfiguration,
    LineSearchFailure,
    ObjectiveFunction,
    OptimizeResult,
    Status,
    check_convergence,
    resolve_max_iterations,
    validate_function,
    validate_iterate,
)
from .line_search import backtracking_armijo, wolfe_line_search

logger = get_logger(__name__)


class CurvatureHistory:
    """
    Bounded FIFO store of (position delta, gradient delta) pairs.

    Pushing beyond capacity evicts the oldest pair. Pairs with
    ``s @ y <= epsilon`` are refused so the implicit inverse Hessian stays
    positive definite.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise InvalidConfiguration(
                f"Curvature history size must be at least 1, got {capacity}."
            )
        self._capacity = int(capacity)
        self._s: Deque[Array] = deque(maxlen=self._capacity)
        self._y: Deque[Array] = deque(maxlen=self._capacity)
        self._rho: Deque[float] = deque(maxlen=self._capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._s)

    def __iter__(self) -> Iterator[tuple[Array, Array]]:
        """Yield stored pairs from oldest to newest."""
        return iter(zip(self._s, self._y))

    def clear(self) -> None:
        self._s.clear()
        self._y.clear()
        self._rho.clear()

    def push(self, s: Array, y: Array, epsilon: float = 0.0) -> bool:
        """Store a curvature pair; return False if it was refused."""
        sy = float(np.dot(s, y))
        if not sy > epsilon:
            return False
        self._s.append(np.array(s, dtype=float))
        self._y.append(np.array(y, dtype=float))
        self._rho.append(1.0 / sy)
        return True

    def apply_inverse_hessian(self, vec: Array) -> Array:
        """
        Two-loop recursion: apply the implicit inverse Hessian to ``vec``.

        With an empty history this is the identity.
        """
        q = np.array(vec, dtype=float)
        if not self._s:
            return q
        alphas: List[float] = []
        for s, y, rho in zip(reversed(self._s), reversed(self._y), reversed(self._rho)):
            alpha_i = rho * float(np.dot(s, q))
            q -= alpha_i * y
            alphas.append(alpha_i)
        last_s = self._s[-1]
        last_y = self._y[-1]
        gamma = float(np.dot(last_s, last_y) / np.dot(last_y, last_y))
        r = gamma * q
        for (s, y, rho), alpha_i in zip(
            zip(self._s, self._y, self._rho), reversed(alphas)
        ):
            beta = rho * float(np.dot(y, r))
            r += s * (alpha_i - beta)
        return r


@dataclass(frozen=True)
class LbfgsConfig:
    """
    Configuration for :class:`Lbfgs`.

    Args:
        history_size: Number of curvature pairs kept (m).
        gradient_tolerance: Convergence threshold on the gradient norm.
        c1: Sufficient decrease constant of the line search.
        c2: Curvature constant of the line search.
        curvature_epsilon: Pairs with ``s @ y`` at or below this are dropped.
        max_line_search_iterations: Trial budget of each line search.
        max_iterations_cap: Iteration bound used when no budget is given.
    """

    history_size: int = 10
    gradient_tolerance: float = GTOL
    c1: float = 1e-4
    c2: float = 0.9
    curvature_epsilon: float = 1e-12
    max_line_search_iterations: int = 40
    max_iterations_cap: int = MAX_ITERATIONS_CAP

    def __post_init__(self) -> None:
        if self.history_size < 1:
            raise InvalidConfiguration(
                f"history_size must be at least 1, got {self.history_size}."
            )
        if self.gradient_tolerance <= 0:
            raise InvalidConfiguration("gradient_tolerance must be positive.")
        if not (0 < self.c1 < self.c2 < 1):
            raise InvalidConfiguration(
                f"Require 0 < c1 < c2 < 1, got c1={self.c1}, c2={self.c2}."
            )
        if self.curvature_epsilon < 0:
            raise InvalidConfiguration("curvature_epsilon must be non-negative.")
        if self.max_line_search_iterations < 1:
            raise InvalidConfiguration("max_line_search_iterations must be at least 1.")
        if self.max_iterations_cap < 1:
            raise InvalidConfiguration("max_iterations_cap must be at least 1.")


class Lbfgs:
    """
    L-BFGS optimizer bound to one objective function.

    The optimizer owns its curvature history; each call to :meth:`optimize`
    starts from an empty history and fresh counters.

    Example
    -------
    >>> import numpy as np
    >>> from unconopt import Lbfgs, LbfgsConfig, QuadraticFunction
    >>> fn = QuadraticFunction(np.eye(2), np.array([1.0, -1.0]))
    >>> x = np.zeros(2)
    >>> res = Lbfgs(fn, LbfgsConfig(history_size=3)).optimize(x)
    >>> res.success, np.allclose(x, [1.0, -1.0])
    (True, True)
    """

    def __init__(
        self, function: ObjectiveFunction, config: Optional[LbfgsConfig] = None
    ) -> None:
        validate_function(function)
        self.function = function
        self.config = config if config is not None else LbfgsConfig()
        self.history = CurvatureHistory(self.config.history_size)
        self.status = Status.UNINITIALIZED
        self.nit = 0
        self.nfev = 0
        self.njev = 0

    def _evaluate(self, x: Array) -> float:
        self.nfev += 1
        return float(self.function.evaluate(x))

    def _gradient(self, x: Array, out: Optional[Array] = None) -> Array:
        if out is None:
            out = np.empty(self.function.num_dimensions)
        self.njev += 1
        self.function.gradient(x, out)
        return out

    def _search_direction(self, grad: Array, grad_norm: float) -> Array:
        if len(self.history) == 0:
            return -grad / max(grad_norm, 1.0)
        return -self.history.apply_inverse_hessian(grad)

    def _line_search(
        self, x: Array, fx: float, grad: Array, direction: Array
    ) -> tuple[float, Array]:
        """Return the accepted step length and direction, falling back once."""
        cfg = self.config
        try:
            alpha, ls_evals = wolfe_line_search(
                self.function.evaluate,
                self._gradient,
                x,
                direction,
                fx=fx,
                grad_fx=grad,
                c1=cfg.c1,
                c2=cfg.c2,
                max_iter=cfg.max_line_search_iterations,
            )
            self.nfev += ls_evals
            return alpha, direction
        except LineSearchFailure as exc:
            self.nfev += exc.nfev
            logger.warning(
                "Line search failed at iteration %d (%s); "
                "resetting curvature history and retrying along steepest descent.",
                self.nit,
                exc,
            )
        self.history.clear()
        direction = -grad / max(float(np.linalg.norm(grad)), 1.0)
        try:
            alpha, ls_evals = backtracking_armijo(
                self.function.evaluate,
                x,
                direction,
                grad,
                fx=fx,
                c=cfg.c1,
            )
        except LineSearchFailure as exc:
            self.nfev += exc.nfev
            raise
        self.nfev += ls_evals
        return alpha, direction

    def optimize(
        self,
        iterate: Array,
        max_iterations: Optional[int] = None,
        trajectory: bool = False,
    ) -> OptimizeResult:
        """
        Minimize the bound function starting from ``iterate``.

        Parameters
        ----------
        iterate:
            Starting point. A float64 1-D array is updated in place and
            holds the final iterate on return.
        max_iterations:
            Iteration budget; None runs until a terminal condition, bounded
            by ``config.max_iterations_cap``.
        trajectory:
            Record every accepted iterate in the result.
        """
        x = validate_iterate(self.function, iterate)
        limit = resolve_max_iterations(max_iterations, self.config.max_iterations_cap)
        self.history.clear()
        self.nit = 0
        self.nfev = 0
        self.njev = 0
        if is_debug_enabled():
            assert_gradient_consistent(self.function, x)

        self.status = Status.RUNNING
        path: List[Array] = [x.copy()] if trajectory else []
        fx = self._evaluate(x)
        grad = self._gradient(x)
        message = ""

        while True:
            grad_norm = float(np.linalg.norm(grad))
            if check_convergence(grad_norm, self.config.gradient_tolerance):
                self.status = Status.CONVERGED
                message = "Gradient tolerance satisfied."
                break
            direction = self._search_direction(grad, grad_norm)
            try:
                alpha, direction = self._line_search(x, fx, grad, direction)
            except LineSearchFailure as exc:
                self.status = Status.LINE_SEARCH_FAILED
                message = f"Line search failed: {exc}"
                break

            step = alpha * direction
            x_new = x + step
            f_new = self._evaluate(x_new)
            grad_new = self._gradient(x_new)
            self.history.push(step, grad_new - grad, self.config.curvature_epsilon)

            x[...] = x_new
            fx = f_new
            grad = grad_new
            self.nit += 1
            if trajectory:
                path.append(x.copy())
            logger.debug(
                "iter %d: f=%.6e |g|=%.3e alpha=%.3e pairs=%d",
                self.nit,
                fx,
                float(np.linalg.norm(grad)),
                alpha,
                len(self.history),
            )
            if self.nit >= limit:
                self.status = Status.ITERATION_LIMIT
                message = f"Iteration limit of {limit} reached."
                break

        grad_norm = float(np.linalg.norm(grad))
        logger.info(
            "L-BFGS finished with status %s after %d iterations (f=%.6e, |g|=%.3e).",
            self.status.value,
            self.nit,
            fx,
            grad_norm,
        )
        return OptimizeResult(
            x=x.copy(),
            fun=fx,
            status=self.status,
            message=message,
            nit=self.nit,
            grad_norm=grad_norm,
            nfev=self.nfev,
            njev=self.njev,
            nhev=0,
            trajectory=path,
        )


def lbfgs(
    function: ObjectiveFunction,
    x0: Array,
    history_size: int = 10,
    max_iterations: Optional[int] = None,
    tol: float = GTOL,
    trajectory: bool = False,
) -> OptimizeResult:
    """Limited-memory BFGS using two-loop recursion; ``x0`` is not modified."""
    config = LbfgsConfig(history_size=history_size, gradient_tolerance=tol)
    x = np.array(x0, dtype=float)
    return Lbfgs(function, config).optimize(
        x, max_iterations=max_iterations, trajectory=trajectory
    )


__all__ = ["CurvatureHistory", "Lbfgs", "LbfgsConfig", "lbfgs"]
