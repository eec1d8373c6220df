"""Concrete objective functions implementing the optimizer interface.

``CallableFunction`` adapts plain callables; the remaining classes are the
classic test problems used to exercise the optimizers. The Rosenbrock and
Wood variants report a zero Hessian, matching their use as first-order
test problems.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from unconopt.optimize.core import Array, InvalidConfiguration
from unconopt.optimize.utils import approx_grad

Objective = Callable[[Array], float]
GradientFn = Callable[[Array], Array]
HessianFn = Callable[[Array], Array]


@dataclass(frozen=True)
class CallableFunction:
    """
    Objective described by plain callables.

    Missing gradients fall back to central finite differences; a missing
    Hessian is reported as the zero matrix.
    """

    fun: Objective
    dim: int
    grad: Optional[GradientFn] = None
    hess: Optional[HessianFn] = None

    def __post_init__(self) -> None:
        if self.dim < 1:
            raise InvalidConfiguration("dim must be at least 1.")

    @property
    def num_dimensions(self) -> int:
        return self.dim

    def evaluate(self, x: Array) -> float:
        return float(self.fun(x))

    def gradient(self, x: Array, out: Array) -> None:
        if self.grad is not None:
            out[:] = self.grad(x)
        else:
            out[:] = approx_grad(self.fun, x)

    def hessian(self, x: Array, out: Array) -> None:
        if self.hess is not None:
            out[:, :] = self.hess(x)
        else:
            out.fill(0.0)


class QuadraticFunction:
    """Convex quadratic ``0.5 x^T A x - b^T x + c`` with exact derivatives."""

    def __init__(self, A: Array, b: Array, c: float = 0.0) -> None:
        A = np.asarray(A, dtype=float)
        b = np.asarray(b, dtype=float)
        if A.ndim != 2 or A.shape[0] != A.shape[1]:
            raise InvalidConfiguration(f"A must be square, got shape {A.shape}.")
        if b.shape != (A.shape[0],):
            raise InvalidConfiguration(
                f"b must have shape ({A.shape[0]},), got {b.shape}."
            )
        if not np.allclose(A, A.T):
            raise InvalidConfiguration("A must be symmetric.")
        self.A = A
        self.b = b
        self.c = float(c)

    @property
    def num_dimensions(self) -> int:
        return self.b.size

    def evaluate(self, x: Array) -> float:
        return float(0.5 * x @ (self.A @ x) - self.b @ x + self.c)

    def gradient(self, x: Array, out: Array) -> None:
        np.subtract(self.A @ x, self.b, out=out)

    def hessian(self, x: Array, out: Array) -> None:
        out[:, :] = self.A

    def minimizer(self) -> Array:
        return np.linalg.solve(self.A, self.b)


class ExtendedRosenbrockFunction:
    """
    Chained Rosenbrock function in an even number of dimensions.

        f(x) = sum_{i < n-1} 100 (x_i^2 - x_{i+1})^2 + (x_i - 1)^2

    The global minimum is f = 0 at x = (1, ..., 1).
    """

    def __init__(self, num_dimensions: int) -> None:
        if num_dimensions < 2 or num_dimensions % 2:
            raise InvalidConfiguration(
                f"Extended Rosenbrock needs an even dimension >= 2, got {num_dimensions}."
            )
        self._num_dimensions = int(num_dimensions)

    @classmethod
    def random(cls, rng: np.random.Generator) -> "ExtendedRosenbrockFunction":
        """Instance of dimension 2k with k drawn uniformly from [2, 100]."""
        return cls(2 * int(rng.integers(2, 101)))

    @property
    def num_dimensions(self) -> int:
        return self._num_dimensions

    def evaluate(self, x: Array) -> float:
        head = x[:-1]
        return float(np.sum(100.0 * (head**2 - x[1:]) ** 2 + (head - 1.0) ** 2))

    def gradient(self, x: Array, out: Array) -> None:
        head = x[:-1]
        coupling = head**2 - x[1:]
        out.fill(0.0)
        out[:-1] = 400.0 * head * coupling + 2.0 * (head - 1.0)
        out[1:] -= 200.0 * coupling

    def hessian(self, x: Array, out: Array) -> None:
        out.fill(0.0)

    def starting_iterate(self) -> Array:
        """Alternating (-1.2, 1.0, -1.2, 1.0, ...)."""
        x = np.ones(self._num_dimensions)
        x[::2] = -1.2
        return x


class WoodFunction:
    """Four-dimensional Wood function; minimum f = 0 at (1, 1, 1, 1)."""

    @property
    def num_dimensions(self) -> int:
        return 4

    def evaluate(self, x: Array) -> float:
        return float(
            100.0 * (x[0] ** 2 - x[1]) ** 2
            + (1.0 - x[0]) ** 2
            + 90.0 * (x[2] ** 2 - x[3]) ** 2
            + (1.0 - x[2]) ** 2
            + 10.1 * ((1.0 - x[1]) ** 2 + (1.0 - x[3]) ** 2)
            + 19.8 * (1.0 - x[1]) * (1.0 - x[3])
        )

    def gradient(self, x: Array, out: Array) -> None:
        out[0] = 400.0 * x[0] * (x[0] ** 2 - x[1]) + 2.0 * (x[0] - 1.0)
        out[1] = (
            200.0 * (x[1] - x[0] ** 2) + 20.2 * (x[1] - 1.0) + 19.8 * (x[3] - 1.0)
        )
        out[2] = 360.0 * x[2] * (x[2] ** 2 - x[3]) + 2.0 * (x[2] - 1.0)
        out[3] = (
            180.0 * (x[3] - x[2] ** 2) + 20.2 * (x[3] - 1.0) + 19.8 * (x[1] - 1.0)
        )

    def hessian(self, x: Array, out: Array) -> None:
        out.fill(0.0)

    def starting_iterate(self) -> Array:
        return np.array([-3.0, -1.0, -3.0, -1.0])


__all__ = [
    "CallableFunction",
    "ExtendedRosenbrockFunction",
    "QuadraticFunction",
    "WoodFunction",
]
