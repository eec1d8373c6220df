"""Trust-region methods with Cauchy point and dogleg strategies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

import numpy as np

from unconopt.diagnostics import (
    assert_gradient_consistent,
    assert_symmetric,
    is_debug_enabled,
)
from unconopt.logging import get_logger

from .core import (
    GTOL,
    MAX_ITERATIONS_CAP,
    Array,
    InvalidConfiguration,
    ObjectiveFunction,
    OptimizeResult,
    Status,
    check_convergence,
    resolve_max_iterations,
    validate_function,
    validate_iterate,
)
from .subproblem import SearchMethod, solve_subproblem

logger = get_logger(__name__)


@dataclass(frozen=True)
class TrustRegionConfig:
    """
    Configuration for :class:`TrustRegion`.

    A step is accepted when the ratio rho of actual to predicted decrease
    exceeds ``eta``. The radius is multiplied by ``shrink_factor`` when
    rho < ``shrink_threshold`` and by ``grow_factor`` when
    rho > ``expand_threshold`` and the step reached the boundary; it is
    always kept in ``[min_radius, max_radius]``.
    """

    search_method: Union[SearchMethod, str] = SearchMethod.CAUCHY
    initial_radius: float = 1.0
    min_radius: float = 1e-10
    max_radius: float = 1e3
    eta: float = 0.1
    shrink_threshold: float = 0.25
    expand_threshold: float = 0.75
    shrink_factor: float = 0.25
    grow_factor: float = 2.0
    gradient_tolerance: float = GTOL
    max_iterations_cap: int = MAX_ITERATIONS_CAP

    def __post_init__(self) -> None:
        if not isinstance(self.search_method, SearchMethod):
            try:
                method = SearchMethod(str(self.search_method).lower())
            except ValueError:
                supported = [m.value for m in SearchMethod]
                raise InvalidConfiguration(
                    f"Unsupported search method '{self.search_method}'. "
                    f"Supported methods: {supported}"
                ) from None
            object.__setattr__(self, "search_method", method)
        if not (0 < self.min_radius < self.max_radius):
            raise InvalidConfiguration(
                "Require 0 < min_radius < max_radius, got "
                f"min_radius={self.min_radius}, max_radius={self.max_radius}."
            )
        if not (self.min_radius <= self.initial_radius <= self.max_radius):
            raise InvalidConfiguration(
                "initial_radius must lie in [min_radius, max_radius]."
            )
        if not (0 <= self.eta < self.shrink_threshold < self.expand_threshold < 1):
            raise InvalidConfiguration(
                "Require 0 <= eta < shrink_threshold < expand_threshold < 1."
            )
        if not (0 < self.shrink_factor < 1):
            raise InvalidConfiguration("shrink_factor must lie in (0, 1).")
        if self.grow_factor <= 1:
            raise InvalidConfiguration("grow_factor must be greater than 1.")
        if self.gradient_tolerance <= 0:
            raise InvalidConfiguration("gradient_tolerance must be positive.")
        if self.max_iterations_cap < 1:
            raise InvalidConfiguration("max_iterations_cap must be at least 1.")


class TrustRegion:
    """
    Trust-region optimizer bound to one objective function.

    The quadratic model is rebuilt from the function's gradient and Hessian
    at every accepted iterate. Rejected steps keep the iterate and shrink
    the radius; a rejection at ``min_radius`` ends the run with
    ``Status.STAGNATION``.
    """

    def __init__(
        self,
        function: ObjectiveFunction,
        config: Optional[TrustRegionConfig] = None,
    ) -> None:
        validate_function(function)
        self.function = function
        self.config = config if config is not None else TrustRegionConfig()
        self.radius = self.config.initial_radius
        self.status = Status.UNINITIALIZED
        self.nit = 0
        self.nfev = 0
        self.njev = 0
        self.nhev = 0

    def _update_radius(self, rho: float, on_boundary: bool) -> None:
        cfg = self.config
        if rho < cfg.shrink_threshold:
            self.radius = max(cfg.shrink_factor * self.radius, cfg.min_radius)
        elif rho > cfg.expand_threshold and on_boundary:
            self.radius = min(cfg.grow_factor * self.radius, cfg.max_radius)

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
        cfg = self.config
        x = validate_iterate(self.function, iterate)
        limit = resolve_max_iterations(max_iterations, cfg.max_iterations_cap)
        self.radius = cfg.initial_radius
        self.nit = 0
        self.nfev = 0
        self.njev = 0
        self.nhev = 0
        debug = is_debug_enabled()
        if debug:
            assert_gradient_consistent(self.function, x)

        self.status = Status.RUNNING
        n = x.size
        grad = np.empty(n)
        hess = np.empty((n, n))
        path: List[Array] = [x.copy()] if trajectory else []
        fx = float(self.function.evaluate(x))
        self.nfev += 1
        stale = True
        message = ""

        while True:
            if stale:
                self.function.gradient(x, grad)
                self.function.hessian(x, hess)
                self.njev += 1
                self.nhev += 1
                if debug:
                    assert_symmetric(hess)
                stale = False
            grad_norm = float(np.linalg.norm(grad))
            if check_convergence(grad_norm, cfg.gradient_tolerance):
                self.status = Status.CONVERGED
                message = "Gradient tolerance satisfied."
                break

            radius_used = self.radius
            trial = solve_subproblem(grad, hess, radius_used, cfg.search_method)
            x_candidate = x + trial.step
            f_candidate = float(self.function.evaluate(x_candidate))
            self.nfev += 1
            if trial.predicted_reduction > 0 and np.isfinite(f_candidate):
                rho = (fx - f_candidate) / trial.predicted_reduction
            else:
                rho = 0.0
            accepted = rho > cfg.eta
            self._update_radius(rho, trial.on_boundary)

            if accepted:
                x[...] = x_candidate
                fx = f_candidate
                stale = True
                if trajectory:
                    path.append(x.copy())
            self.nit += 1
            logger.debug(
                "iter %d: f=%.6e |g|=%.3e rho=%.3f radius=%.3e %s",
                self.nit,
                fx,
                grad_norm,
                rho,
                self.radius,
                "accepted" if accepted else "rejected",
            )

            if not accepted and radius_used <= cfg.min_radius:
                self.status = Status.STAGNATION
                message = (
                    f"Step rejected at the minimum radius {cfg.min_radius:g}; "
                    "no further progress at current precision."
                )
                logger.warning("Trust region collapsed at iteration %d.", self.nit)
                break
            if self.nit >= limit:
                self.status = Status.ITERATION_LIMIT
                message = f"Iteration limit of {limit} reached."
                break

        if stale:
            self.function.gradient(x, grad)
            self.njev += 1
        grad_norm = float(np.linalg.norm(grad))
        logger.info(
            "Trust region finished with status %s after %d iterations "
            "(f=%.6e, |g|=%.3e, radius=%.3e).",
            self.status.value,
            self.nit,
            fx,
            grad_norm,
            self.radius,
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
            nhev=self.nhev,
            radius=self.radius,
            trajectory=path,
        )


def trust_region(
    function: ObjectiveFunction,
    x0: Array,
    search_method: Union[SearchMethod, str] = SearchMethod.CAUCHY,
    initial_radius: float = 1.0,
    max_radius: float = 1e3,
    eta: float = 0.1,
    max_iterations: Optional[int] = None,
    tol: float = GTOL,
    trajectory: bool = False,
) -> OptimizeResult:
    """Trust-region solver; ``x0`` is not modified."""
    config = TrustRegionConfig(
        search_method=search_method,
        initial_radius=initial_radius,
        max_radius=max_radius,
        eta=eta,
        gradient_tolerance=tol,
    )
    x = np.array(x0, dtype=float)
    return TrustRegion(function, config).optimize(
        x, max_iterations=max_iterations, trajectory=trajectory
    )


__all__ = ["TrustRegion", "TrustRegionConfig", "trust_region"]
