"""Benchmark crossing searches on correlated Gaussian costs."""

import time
from typing import Dict

import numpy as np

from profilecross import FunctionCrossSolver, FunctionObjective, ParameterState, Strategy


def _correlated_chi2(n_params: int, rho: float) -> tuple[FunctionObjective, ParameterState]:
    cov = np.full((n_params, n_params), rho) + (1.0 - rho) * np.eye(n_params)
    inv = np.linalg.inv(cov)

    def chi2(p: np.ndarray) -> float:
        return float(p @ inv @ p)

    def grad(p: np.ndarray) -> np.ndarray:
        return 2.0 * inv @ p

    state = ParameterState()
    for i in range(n_params):
        state.add(f"p{i}", 0.0, 1.0 / np.sqrt(inv[i, i]))
    return FunctionObjective(chi2, grad=grad), state


def benchmark_crossing(
    n_params: int,
    rho: float = 0.5,
    method: str = "bfgs",
    repeats: int = 5,
) -> Dict[str, float]:
    """Benchmark the upper crossing of the first parameter.

    Args:
        n_params: Number of parameters (all but one are re-minimized).
        rho: Pairwise correlation of the Gaussian.
        method: Inner minimizer, "bfgs" or "lbfgs".
        repeats: Number of timed searches.

    Returns:
        Dictionary with timing results.
    """
    objective, state = _correlated_chi2(n_params, rho)
    solver = FunctionCrossSolver(objective, state, 0.0, strategy=Strategy(method=method))

    # Warmup
    solver.solve([0], [1.0], [state[0].error])

    start = time.perf_counter()
    for _ in range(repeats):
        result = solver.solve([0], [1.0], [state[0].error])
    end = time.perf_counter()

    total_time = end - start
    return {
        "n_params": n_params,
        "crossing": result.value,
        "nfcn": result.nfcn,
        "niter": result.niter,
        "time_per_search_sec": total_time / repeats,
    }


if __name__ == "__main__":
    print("Benchmarking crossing searches...")

    for method in ("bfgs", "lbfgs"):
        for n in (2, 10, 50):
            results = benchmark_crossing(n_params=n, method=method)
            print(f"{method} ({n} parameters):")
            print(f"  Crossing: {results['crossing']:.6f} (expected 1.0)")
            print(f"  Calls: {results['nfcn']}  trials: {results['niter']}")
            print(f"  Time per search: {results['time_per_search_sec']*1e3:.2f} ms")
