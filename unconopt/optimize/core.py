"""Core interfaces shared across the unconstrained optimizers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Protocol, runtime_checkable

import numpy as np

Array = np.ndarray

GTOL = 1e-6
ATOL = 1e-12
MAX_ITERATIONS_CAP = 100_000


class InvalidConfiguration(ValueError):
    """Raised when an optimizer is misconfigured, before any iteration runs."""


class LineSearchFailure(RuntimeError):
    """Raised when a line search cannot find an acceptable step length."""

    def __init__(self, message: str, alpha: float = 0.0, nfev: int = 0) -> None:
        super().__init__(message)
        self.alpha = alpha
        self.nfev = nfev


@runtime_checkable
class ObjectiveFunction(Protocol):
    """
    Contract for functions the optimizers can minimize.

    Implementations must be deterministic and free of side effects beyond
    the output buffers handed to `gradient` and `hessian`.
    """

    @property
    def num_dimensions(self) -> int:
        """Return the fixed dimensionality n of the domain."""
        ...

    def evaluate(self, x: Array) -> float:
        """Return the objective value at x."""
        ...

    def gradient(self, x: Array, out: Array) -> None:
        """Write the gradient at x into the length-n buffer `out`."""
        ...

    def hessian(self, x: Array, out: Array) -> None:
        """
        Write a symmetric n x n Hessian approximation at x into `out`.

        A cheap surrogate (e.g. the zero matrix) is acceptable when the
        chosen optimizer does not use second-order information.
        """
        ...


class Status(Enum):
    """Lifecycle and terminal status of an optimizer run."""

    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    CONVERGED = "converged"
    ITERATION_LIMIT = "iteration_limit"
    LINE_SEARCH_FAILED = "line_search_failed"
    STAGNATION = "stagnation"

    @property
    def is_terminal(self) -> bool:
        return self not in (Status.UNINITIALIZED, Status.RUNNING)


@dataclass
class OptimizeResult:
    """
    Result object returned by every optimizer in this package.

    Attributes:
        x: Copy of the final iterate.
        fun: Objective value at ``x``.
        status: Terminal condition that produced ``x``.
        message: Human-readable description of ``status``.
        nit: Number of iterations performed.
        grad_norm: Euclidean norm of the gradient at ``x``.
        nfev: Objective evaluations (line-search trials included).
        njev: Gradient evaluations.
        nhev: Hessian evaluations.
        radius: Final trust-region radius (trust-region runs only).
        trajectory: Accepted iterates, recorded on request.
    """

    x: Array
    fun: float
    status: Status
    message: str
    nit: int
    grad_norm: float
    nfev: int
    njev: int
    nhev: int
    radius: Optional[float] = None
    trajectory: List[Array] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status is Status.CONVERGED


def check_convergence(grad_norm: float, tol: float) -> bool:
    """Return True if gradient norm satisfies tolerance."""
    return grad_norm <= max(tol, ATOL)


def validate_function(function: Any) -> None:
    """Reject objects that do not implement :class:`ObjectiveFunction`."""
    if not isinstance(function, ObjectiveFunction):
        raise InvalidConfiguration(
            f"{type(function).__name__} does not implement evaluate, gradient, "
            "hessian and num_dimensions."
        )
    n = function.num_dimensions
    if int(n) != n or n < 1:
        raise InvalidConfiguration(
            f"num_dimensions must be a positive integer, got {n!r}."
        )


def validate_iterate(function: ObjectiveFunction, iterate: Any) -> Array:
    """
    Return the float64 working array for a caller-supplied iterate.

    A 1-D float64 ndarray is returned as-is so that updates are visible to
    the caller; anything else is converted into a fresh array.
    """
    x = np.asarray(iterate, dtype=float)
    if x.ndim != 1:
        raise InvalidConfiguration(
            f"Iterate must be a 1-D vector, got shape {x.shape}."
        )
    if x.size != function.num_dimensions:
        raise InvalidConfiguration(
            f"Iterate has {x.size} entries but the function has "
            f"{function.num_dimensions} dimensions."
        )
    if not np.all(np.isfinite(x)):
        raise InvalidConfiguration("Starting iterate contains non-finite values.")
    return x


def resolve_max_iterations(max_iterations: Optional[int], cap: int) -> int:
    """Translate an optional iteration budget into a concrete bound."""
    if max_iterations is None:
        return cap
    if max_iterations <= 0:
        raise InvalidConfiguration(
            "max_iterations must be positive, or None for no explicit limit."
        )
    return int(max_iterations)


__all__ = [
    "ATOL",
    "Array",
    "GTOL",
    "InvalidConfiguration",
    "LineSearchFailure",
    "MAX_ITERATIONS_CAP",
    "ObjectiveFunction",
    "OptimizeResult",
    "Status",
    "check_convergence",
    "resolve_max_iterations",
    "validate_function",
    "validate_iterate",
]
