"""Nonlinear conjugate gradient (Fletcher-Reeves) over differentiable models.

Loosely follows Nocedal & Wright, *Numerical Optimization* (2006), §5.2.

Example
-------
>>> from fusionopt.geometry import Point2
>>> from fusionopt.optimize import NLCG, torch_gradient
>>> def loss(p):
...     return (p.x - 3.0) ** 2 + (p.y - 4.0) ** 2
>>> optimizer = NLCG(gradient=torch_gradient)
>>> p = optimizer.optimize(loss, Point2(0.0, 0.0))
>>> round(p.x, 4), round(p.y, 4)
(3.0, 4.0)
"""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Callable, Iterator, Optional

from ..diagnostics import assert_finite, is_debug_enabled
from ..logging import get_logger
from .core import (
    DEFAULT_MAX_ITERATION,
    DEFAULT_PRECISION,
    GradientOracle,
    LineSearch,
    Model,
    NLCGConfig,
    Objective,
    OptimizeResult,
    Problem,
    Status,
    TangentVector,
)
from .gradient import numerical_gradient
from .line_search import GridLineSearch
from .vector import add, dot, move, scale

logger = get_logger(__name__)

Callback = Callable[[int, Model, float], None]


def fletcher_reeves_beta(dx: TangentVector, dx_prev: TangentVector) -> float:
    """
    Fletcher-Reeves coefficient ``<dx, dx> / <dx_prev, dx_prev>``.

    When the previous gradient is exactly zero the ratio is undefined; the
    coefficient is then 0, which turns the next direction into the plain
    gradient (a steepest-descent restart).
    """
    denominator = float(dot(dx_prev, dx_prev))
    if denominator == 0.0:
        logger.debug("Previous gradient is zero, restarting with beta = 0.")
        return 0.0
    return float(dot(dx, dx)) / denominator


class NLCG:
    """
    Nonlinear conjugate gradient optimizer.

    Works on any model supported by :mod:`fusionopt.optimize.vector`. The
    gradient comes from an injected oracle ``gradient(model, objective)``
    and the step size along each conjugate direction from a pluggable line
    search.

    Args:
        model: Prototype of the model type. Accepted for symmetry with
            typed call sites and otherwise ignored.
        precision: Convergence threshold on the squared norm of the applied
            displacement.
        max_iteration: Hard cap on the number of iterations.
        initial_step: Step along the first gradient taken before the
            conjugate iterations start.
        gradient: Gradient oracle. Defaults to central differences.
        line_search: Line-search strategy. Defaults to the grid search
            described by the configuration.
        config: Full configuration. Takes precedence over ``precision``,
            ``max_iteration`` and ``initial_step``.
        callback: Called as ``callback(step, model, value)`` after every
            accepted iterate.

    Attributes:
        step: Number of completed iterations of the last run.
        status: :class:`~fusionopt.optimize.core.Status` of the last run.
        last_result: Full :class:`~fusionopt.optimize.core.OptimizeResult` of
            the last run.
    """

    def __init__(
        self,
        model: Any = None,
        precision: float = DEFAULT_PRECISION,
        max_iteration: int = DEFAULT_MAX_ITERATION,
        *,
        initial_step: float = 1.0,
        gradient: Optional[GradientOracle] = None,
        line_search: Optional[LineSearch] = None,
        config: Optional[NLCGConfig] = None,
        callback: Optional[Callback] = None,
    ) -> None:
        if config is None:
            config = NLCGConfig(
                precision=precision,
                max_iteration=max_iteration,
                initial_step=initial_step,
            )
        self.config = config
        self.gradient: GradientOracle = gradient if gradient is not None else numerical_gradient
        if line_search is None:
            line_search = GridLineSearch(
                lower=config.grid_lower,
                upper=config.grid_upper,
                resolution=config.grid_resolution,
                workers=config.workers,
            )
        self.line_search: LineSearch = line_search
        self.callback = callback
        self.step = 0
        self.status = Status.NOT_STARTED
        self.last_result: Optional[OptimizeResult] = None

    @property
    def precision(self) -> float:
        return self.config.precision

    @property
    def max_iteration(self) -> int:
        return self.config.max_iteration

    def __repr__(self) -> str:
        return (
            f"NLCG(precision={self.precision!r}, max_iteration={self.max_iteration!r}, "
            f"step={self.step!r}, status={self.status.value!r})"
        )

    def _gradient_at(self, model: Model, objective: Objective) -> TangentVector:
        grad = self.gradient(model, objective)
        if is_debug_enabled():
            assert_finite(grad, "gradient")
        return grad

    @contextmanager
    def _run_line_search(self) -> Iterator[LineSearch]:
        """Yield the line search for one run, with one thread pool shared by all its calls."""
        search = self.line_search
        if (
            isinstance(search, GridLineSearch)
            and search.executor is None
            and search.workers is not None
            and search.workers > 1
        ):
            with ThreadPoolExecutor(max_workers=search.workers) as pool:
                yield replace(search, executor=pool)
        else:
            yield search

    def optimize(self, objective: Objective, model: Model) -> Model:
        """
        Minimize ``objective`` starting from ``model`` and return the final iterate.

        The input model is not modified. Running out of iterations is not an
        error: inspect :attr:`status` or :attr:`step` to tell the outcomes
        apart.
        """
        return self.minimize(objective, model).x

    def minimize(self, objective: Objective, model: Model, history: bool = False) -> OptimizeResult:
        """
        Run the optimizer and return the full result record.

        Exceptions raised by the objective or the gradient oracle propagate
        and leave :attr:`status` at ``Status.FAILED``.
        """
        self.step = 0
        self.status = Status.ITERATING
        try:
            with self._run_line_search() as line_search:
                result = self._iterate(objective, model, line_search, history)
        except Exception:
            self.status = Status.FAILED
            raise
        self.status = result.status
        self.last_result = result
        return result

    def _iterate(
        self, objective: Objective, model: Model, line_search: LineSearch, history: bool
    ) -> OptimizeResult:
        cfg = self.config
        nfev = 0
        njev = 0
        hist: list[Model] = []

        dx_0 = self._gradient_at(model, objective)
        njev += 1

        # Bootstrap step along the raw gradient, without a line search
        x_n = move(model, scale(dx_0, cfg.initial_step))
        if history:
            hist.append(x_n)

        dx_prev = dx_0
        s = dx_0
        fx = math.nan
        status = Status.MAX_ITER

        while self.step < cfg.max_iteration:
            dx = self._gradient_at(x_n, objective)
            njev += 1

            beta = fletcher_reeves_beta(dx, dx_prev)
            s = add(dx, scale(s, beta))

            alpha, fx, evals = line_search(objective, x_n, s, gradient=dx)
            nfev += evals

            delta = scale(s, alpha)
            x_n = move(x_n, delta)
            if history:
                hist.append(x_n)
            if self.callback is not None:
                self.callback(self.step, x_n, fx)

            logger.debug(
                "step=%d beta=%.6g alpha=%.4g f=%.10g", self.step, beta, alpha, fx
            )

            if float(dot(delta, delta)) < cfg.precision:
                status = Status.CONVERGED
                break

            dx_prev = dx
            self.step += 1

        if not math.isfinite(fx):
            fx = float(objective(x_n))
            nfev += 1

        if not math.isfinite(fx):
            # a zero step over an all-NaN grid also lands here
            status = Status.NUMERICAL_ERROR
            message = "Objective is not finite at the final iterate."
            logger.warning("Stopped after %d steps with a non-finite objective (f=%s).", self.step, fx)
        elif status is Status.CONVERGED:
            message = "Step size below precision."
            logger.info("Converged after %d steps (f=%.10g).", self.step, fx)
        else:
            message = "Maximum iterations reached."
            logger.warning(
                "Stopped after max_iteration=%d steps without converging (f=%.10g).",
                cfg.max_iteration,
                fx,
            )

        return OptimizeResult(
            x=x_n,
            fun=float(fx),
            nit=self.step,
            status=status,
            success=status is Status.CONVERGED,
            message=message,
            nfev=nfev,
            njev=njev,
            history=hist,
        )


def nonlinear_cg(
    problem: Problem,
    x0: Model,
    maxiter: int = DEFAULT_MAX_ITERATION,
    tol: float = DEFAULT_PRECISION,
    initial_step: float = 1.0,
    line_search: Optional[LineSearch] = None,
    callback: Optional[Callback] = None,
    history: bool = False,
) -> OptimizeResult:
    """Fletcher-Reeves nonlinear conjugate gradient on a :class:`Problem`.

    Uses ``problem.grad`` when given and central differences otherwise.
    ``tol`` bounds the squared norm of the final displacement.
    """
    gradient: GradientOracle
    if problem.grad is not None:
        grad = problem.grad

        def gradient(model: Model, objective: Objective) -> TangentVector:
            return grad(model)

    else:
        gradient = numerical_gradient

    optimizer = NLCG(
        precision=tol,
        max_iteration=maxiter,
        initial_step=initial_step,
        gradient=gradient,
        line_search=line_search,
        callback=callback,
    )
    return optimizer.minimize(problem.fun, x0, history=history)


__all__ = ["NLCG", "fletcher_reeves_beta", "nonlinear_cg"]
