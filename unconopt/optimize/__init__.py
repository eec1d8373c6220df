"""Unconstrained optimization engine: L-BFGS and trust-region methods.

Example
-------
>>> import numpy as np
>>> from unconopt.functions import CallableFunction
>>> from unconopt.optimize import Lbfgs, LbfgsConfig
>>> def rosen(x):
...     return (1 - x[0])**2 + 100 * (x[1] - x[0]**2)**2
>>> def rosen_grad(x):
...     return np.array([
...         -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
...         200 * (x[1] - x[0] ** 2),
...     ])
>>> fn = CallableFunction(fun=rosen, grad=rosen_grad, dim=2)
>>> x = np.array([-1.2, 1.0])
>>> res = Lbfgs(fn, LbfgsConfig(history_size=5)).optimize(x)
>>> res.status
<Status.CONVERGED: 'converged'>
"""

from .core import (
    ATOL,
    GTOL,
    MAX_ITERATIONS_CAP,
    InvalidConfiguration,
    LineSearchFailure,
    ObjectiveFunction,
    OptimizeResult,
    Status,
    check_convergence,
)
from .line_search import backtracking_armijo, wolfe_line_search
from .quasi_newton import CurvatureHistory, Lbfgs, LbfgsConfig, lbfgs
from .subproblem import (
    SearchMethod,
    TrustRegionStep,
    cauchy_point,
    dogleg_step,
    model_reduction,
    solve_subproblem,
)
from .trust_region import TrustRegion, TrustRegionConfig, trust_region
from .utils import approx_grad, approx_hessian, is_pos_def, safe_solve

__all__ = [
    "ATOL",
    "CurvatureHistory",
    "GTOL",
    "InvalidConfiguration",
    "Lbfgs",
    "LbfgsConfig",
    "LineSearchFailure",
    "MAX_ITERATIONS_CAP",
    "ObjectiveFunction",
    "OptimizeResult",
    "SearchMethod",
    "Status",
    "TrustRegion",
    "TrustRegionConfig",
    "TrustRegionStep",
    "approx_grad",
    "approx_hessian",
    "backtracking_armijo",
    "cauchy_point",
    "check_convergence",
    "dogleg_step",
    "is_pos_def",
    "lbfgs",
    "model_reduction",
    "safe_solve",
    "solve_subproblem",
    "trust_region",
    "wolfe_line_search",
]
