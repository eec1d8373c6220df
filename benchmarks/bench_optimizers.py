"""Benchmark L-BFGS and trust-region runs on the standard test functions."""

import time
from typing import Dict

from unconopt import (
    ExtendedRosenbrockFunction,
    Lbfgs,
    LbfgsConfig,
    TrustRegion,
    TrustRegionConfig,
    WoodFunction,
)


def benchmark_run(optimizer, function, repeats: int = 3) -> Dict[str, float]:
    """Time ``optimizer`` from the function's standard starting point.

    Args:
        optimizer: Bound ``Lbfgs`` or ``TrustRegion`` instance.
        function: Test function providing ``starting_iterate()``.
        repeats: Number of timed runs; the best time is reported.

    Returns:
        Dictionary with timing and counter results.
    """
    times = []
    result = None
    for _ in range(repeats):
        x = function.starting_iterate()
        start = time.perf_counter()
        result = optimizer.optimize(x)
        times.append(time.perf_counter() - start)

    return {
        "time_ms": min(times) * 1000,
        "nit": result.nit,
        "nfev": result.nfev,
        "fun": result.fun,
        "status": result.status.value,
    }


def main():
    """Run optimizer benchmarks."""
    print("Optimizer Benchmarks")
    print("=" * 78)
    print(f"{'problem':<22}{'optimizer':<14}{'time (ms)':>12}{'nit':>8}{'nfev':>8}  status")
    print("-" * 78)

    problems = [("wood", WoodFunction(), 3)]
    for n in (4, 20, 100):
        problems.append((f"rosenbrock n={n}", ExtendedRosenbrockFunction(n), min(n // 2, 20)))

    for name, fn, history_size in problems:
        runs = [
            ("lbfgs", Lbfgs(fn, LbfgsConfig(history_size=history_size))),
            ("trust-cauchy", TrustRegion(fn, TrustRegionConfig())),
        ]
        for label, optimizer in runs:
            stats = benchmark_run(optimizer, fn)
            print(
                f"{name:<22}{label:<14}{stats['time_ms']:>12.2f}"
                f"{stats['nit']:>8}{stats['nfev']:>8}  {stats['status']}"
            )


if __name__ == "__main__":
    main()
