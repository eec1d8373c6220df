"""
Example: L-BFGS and trust-region minimization with unconopt

Runs both optimizers on the extended Rosenbrock function (random even
dimension) and on the Wood function, printing the final objective value,
the final iterate summary and the terminal status of every run.
"""

import numpy as np

from unconopt import (
    ExtendedRosenbrockFunction,
    Lbfgs,
    LbfgsConfig,
    SearchMethod,
    TrustRegion,
    TrustRegionConfig,
    WoodFunction,
)


def report(name, result):
    print(f"{name}:")
    print(f"  Status: {result.status.value}")
    print(f"  Final objective: {result.fun:.6e}")
    print(f"  Coordinates in [{result.x.min():.4f}, {result.x.max():.4f}]")
    print(f"  Iterations: {result.nit} (f evals: {result.nfev}, g evals: {result.njev})")


def example_extended_rosenbrock(num_dimensions):
    """Minimize the chained Rosenbrock function in an even dimension."""
    fn = ExtendedRosenbrockFunction(num_dimensions)
    n = fn.num_dimensions
    print("=" * 60)
    print(f"Example 1: Extended Rosenbrock function, dimension {n}")
    print("=" * 60)

    history_size = min(n // 2, 20)
    x = fn.starting_iterate()
    result = Lbfgs(fn, LbfgsConfig(history_size=history_size)).optimize(x)
    report(f"L-BFGS (history size {history_size})", result)

    x = fn.starting_iterate()
    result = TrustRegion(fn, TrustRegionConfig(search_method=SearchMethod.CAUCHY)).optimize(x)
    report("Trust region (Cauchy point)", result)
    print()


def example_wood():
    """Minimize the four-dimensional Wood function."""
    fn = WoodFunction()
    print("=" * 60)
    print("Example 2: Wood function")
    print("=" * 60)

    x = fn.starting_iterate()
    result = Lbfgs(fn, LbfgsConfig(history_size=3)).optimize(x)
    report("L-BFGS (history size 3)", result)

    x = fn.starting_iterate()
    result = TrustRegion(fn, TrustRegionConfig(search_method=SearchMethod.CAUCHY)).optimize(x)
    report("Trust region (Cauchy point)", result)
    print()


def main():
    """Run all examples."""
    print("\n" + "=" * 60)
    print("unconopt: Unconstrained Optimization Examples")
    print("=" * 60 + "\n")

    rng = np.random.default_rng(3)
    example_extended_rosenbrock(2 * int(rng.integers(2, 11)))
    example_wood()

    print("=" * 60)
    print("All examples completed")
    print("=" * 60)


if __name__ == "__main__":
    main()
