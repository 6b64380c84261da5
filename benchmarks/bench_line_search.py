"""Benchmark serial versus threaded grid line search."""

import time
from typing import Dict, Optional

import numpy as np
import torch

from fusionopt.optimize import NLCG, NLCGConfig, torch_gradient


def benchmark_nlcg(
    dim: int,
    workers: Optional[int] = None,
    n_runs: int = 5,
) -> Dict[str, float]:
    """Benchmark an NLCG run on a torch-evaluated quadratic.

    Args:
        dim: Dimension of the model.
        workers: Threads used by the grid line search (None for serial).
        n_runs: Number of runs to average.

    Returns:
        Dictionary with timing results.
    """
    rng = np.random.default_rng(0)
    a_mat = rng.normal(size=(dim, dim))
    hess = torch.as_tensor(a_mat.T @ a_mat + dim * np.eye(dim))
    target = torch.as_tensor(rng.normal(size=dim))

    def objective(x):
        diff = torch.as_tensor(x, dtype=torch.float64) - target
        return diff @ hess @ diff

    optimizer = NLCG(config=NLCGConfig(workers=workers), gradient=torch_gradient)

    # Warmup
    optimizer.optimize(objective, np.zeros(dim))

    start = time.perf_counter()
    for _ in range(n_runs):
        optimizer.optimize(objective, np.zeros(dim))
    elapsed = time.perf_counter() - start

    return {
        "dim": dim,
        "workers": workers or 1,
        "time_per_run": elapsed / n_runs,
        "steps": optimizer.step,
    }


def main():
    """Run line search benchmarks."""
    print("NLCG Grid Line Search Benchmarks")
    print("=" * 60)

    for dim in [4, 64, 256]:
        for workers in [None, 4]:
            result = benchmark_nlcg(dim, workers=workers)
            print(
                f"dim={result['dim']:4d}, workers={result['workers']}: "
                f"{result['time_per_run']*1000:.2f} ms/run, "
                f"steps={result['steps']}"
            )


if __name__ == "__main__":
    main()
