"""Line-search strategies for the conjugate gradient optimizer.

Every strategy answers the same question: given a model and a direction,
which step size minimizes the objective along that direction. The default is
an exhaustive grid search; Armijo backtracking is provided as an alternative.
"""

from __future__ import annotations

import math
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional

from .core import GradientOracle, Model, Objective, TangentVector
from .gradient import numerical_gradient
from .vector import dot, move, scale


@dataclass(frozen=True)
class GridLineSearch:
    """
    Exhaustive, deterministic grid search over step sizes.

    Candidate steps are ``resolution * i`` for ``i`` in ``[lower, upper)``.
    The defaults give the 200 steps ``-1.00, -0.99, ..., 0.99``. The grid
    contains 0, so the selected step never increases the objective.

    Ties resolve to the first (most negative) candidate. NaN and infinite
    objective values are never selected; if no finite value is sampled the
    step is 0 and the reported value is NaN.

    Args:
        lower: First grid index (inclusive).
        upper: Last grid index (exclusive).
        resolution: Spacing between candidate steps.
        workers: Evaluate candidates on this many threads. The objective must
            then be safe to call concurrently. Results match serial
            evaluation exactly.
        executor: Pool to evaluate candidates on. When unset and
            ``workers > 1`` a pool is created for each call;
            :class:`~fusionopt.optimize.nlcg.NLCG` shares one pool per run.
    """

    lower: int = -100
    upper: int = 100
    resolution: float = 0.01
    workers: Optional[int] = None
    executor: Optional[Executor] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.lower >= self.upper:
            raise ValueError(f"lower must be < upper, got [{self.lower}, {self.upper})")
        if not self.resolution > 0:
            raise ValueError(f"resolution must be > 0, got {self.resolution}")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

    @property
    def steps(self) -> list[float]:
        """Candidate step sizes in evaluation order."""
        return [self.resolution * i for i in range(self.lower, self.upper)]

    def __call__(
        self,
        objective: Objective,
        model: Model,
        direction: TangentVector,
        gradient: Optional[TangentVector] = None,
    ) -> tuple[float, float, int]:
        steps = self.steps

        def evaluate(alpha: float) -> float:
            return float(objective(move(model, scale(direction, alpha))))

        if self.executor is not None:
            values = list(self.executor.map(evaluate, steps))
        elif self.workers is not None and self.workers > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                values = list(pool.map(evaluate, steps))
        else:
            values = [evaluate(alpha) for alpha in steps]

        best_alpha = 0.0
        best_value = math.inf
        for alpha, value in zip(steps, values):
            if math.isfinite(value) and value < best_value:
                best_alpha, best_value = alpha, value
        if best_value == math.inf:
            return 0.0, math.nan, len(steps)
        return best_alpha, best_value, len(steps)


def grid_line_search(
    objective: Objective,
    model: Model,
    direction: TangentVector,
    lower: int = -100,
    upper: int = 100,
    resolution: float = 0.01,
    workers: Optional[int] = None,
) -> tuple[float, float, int]:
    """Function form of :class:`GridLineSearch`; returns ``(alpha, value, nfev)``."""
    search = GridLineSearch(lower=lower, upper=upper, resolution=resolution, workers=workers)
    return search(objective, model, direction)


def backtracking_armijo(
    f: Objective,
    x: Model,
    p: TangentVector,
    grad_fx: TangentVector,
    alpha0: float = 1.0,
    rho: float = 0.5,
    c: float = 1e-4,
    max_iter: int = 50,
) -> tuple[float, int]:
    """
    Classic Armijo backtracking line search along the descent direction ``p``.

    Returns ``(alpha, nfev)``. ``alpha`` is 0 when no trial step satisfies the
    sufficient-decrease condition within ``max_iter`` evaluations.
    """
    if not (0 < c < 1):
        raise ValueError("Armijo constant c must lie in (0, 1)")
    if not (0 < rho < 1):
        raise ValueError("rho must lie in (0, 1)")
    alpha = float(alpha0)
    fx = float(f(x))
    grad_dot = float(dot(grad_fx, p))
    nfev = 0
    for _ in range(max_iter):
        candidate = move(x, scale(p, alpha))
        f_new = float(f(candidate))
        nfev += 1
        if f_new <= fx + c * alpha * grad_dot:
            return alpha, nfev
        alpha *= rho
    return 0.0, nfev


@dataclass(frozen=True)
class ArmijoLineSearch:
    """
    Armijo backtracking packaged as a :class:`~fusionopt.optimize.core.LineSearch`.

    The conjugate direction built from raw gradients points uphill, so the
    search runs along whichever sign of ``direction`` descends and reports a
    signed step. The configured ``gradient`` oracle is only consulted when the
    caller does not pass the gradient at ``model``. A search that never meets
    the Armijo condition reports a zero step.
    """

    gradient: GradientOracle = numerical_gradient
    alpha0: float = 1.0
    rho: float = 0.5
    c: float = 1e-4
    max_iter: int = 50

    def __call__(
        self,
        objective: Objective,
        model: Model,
        direction: TangentVector,
        gradient: Optional[TangentVector] = None,
    ) -> tuple[float, float, int]:
        grad = gradient if gradient is not None else self.gradient(model, objective)
        sign = -1.0 if float(dot(grad, direction)) > 0 else 1.0
        alpha, nfev = backtracking_armijo(
            objective,
            model,
            scale(direction, sign),
            grad,
            alpha0=self.alpha0,
            rho=self.rho,
            c=self.c,
            max_iter=self.max_iter,
        )
        step = sign * alpha if alpha else 0.0
        value = float(objective(move(model, scale(direction, step))))
        return step, value, nfev + 1


__all__ = [
    "ArmijoLineSearch",
    "GridLineSearch",
    "backtracking_armijo",
    "grid_line_search",
]
