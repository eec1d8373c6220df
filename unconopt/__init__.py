"""unconopt - unconstrained numerical optimization with L-BFGS and trust regions."""

__version__ = "0.1.0"

from .logging import configure_logging, get_logger, set_log_level

# Optimization engine (imported before diagnostics, which builds on it)
from .optimize import (
    CurvatureHistory,
    InvalidConfiguration,
    Lbfgs,
    LbfgsConfig,
    LineSearchFailure,
    ObjectiveFunction,
    OptimizeResult,
    SearchMethod,
    Status,
    TrustRegion,
    TrustRegionConfig,
    backtracking_armijo,
    lbfgs,
    solve_subproblem,
    trust_region,
    wolfe_line_search,
)

# Diagnostics
from .diagnostics import (
    assert_gradient_consistent,
    assert_symmetric,
    debug_context,
    gradient_error,
    is_debug_enabled,
    is_gradient_consistent,
    set_debug_enabled,
)

# Objective functions
from .functions import (
    CallableFunction,
    ExtendedRosenbrockFunction,
    QuadraticFunction,
    WoodFunction,
)

__all__ = [
    "__version__",
    # Logging
    "configure_logging",
    "get_logger",
    "set_log_level",
    # Engine
    "CurvatureHistory",
    "InvalidConfiguration",
    "Lbfgs",
    "LbfgsConfig",
    "LineSearchFailure",
    "ObjectiveFunction",
    "OptimizeResult",
    "SearchMethod",
    "Status",
    "TrustRegion",
    "TrustRegionConfig",
    "backtracking_armijo",
    "lbfgs",
    "solve_subproblem",
    "trust_region",
    "wolfe_line_search",
    # Diagnostics
    "assert_gradient_consistent",
    "assert_symmetric",
    "debug_context",
    "gradient_error",
    "is_debug_enabled",
    "is_gradient_consistent",
    "set_debug_enabled",
    # Functions
    "CallableFunction",
    "ExtendedRosenbrockFunction",
    "QuadraticFunction",
    "WoodFunction",
]
