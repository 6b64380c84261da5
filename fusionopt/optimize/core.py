"""Core interfaces shared across the optimizers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Protocol

Model = Any
TangentVector = Any
Objective = Callable[[Model], float]
Gradient = Callable[[Model], TangentVector]
GradientOracle = Callable[[Model, Objective], TangentVector]

DEFAULT_PRECISION = 1e-10
DEFAULT_MAX_ITERATION = 400


class Status(Enum):
    """Lifecycle of an optimizer run."""

    NOT_STARTED = "not_started"
    ITERATING = "iterating"
    CONVERGED = "converged"
    MAX_ITER = "max_iter"
    NUMERICAL_ERROR = "numerical_error"
    FAILED = "failed"


class LineSearch(Protocol):
    """Find a step size along ``direction`` that minimizes ``objective``.

    Implementations return ``(alpha, value, nfev)`` where ``value`` is the
    objective at the displaced model and ``nfev`` the number of objective
    evaluations spent. ``gradient`` is the gradient at ``model`` when the
    caller already has it, so strategies that need it can skip their own oracle.
    """

    def __call__(
        self,
        objective: Objective,
        model: Model,
        direction: TangentVector,
        gradient: Optional[TangentVector] = None,
    ) -> tuple[float, float, int]:
        ...


@dataclass(frozen=True)
class NLCGConfig:
    """
    Configuration for the nonlinear conjugate gradient optimizer.

    Args:
        precision: Convergence threshold on the squared norm of the applied
            displacement. Must be positive.
        max_iteration: Hard cap on the number of iterations. Must be >= 1.
        initial_step: Step applied along the first gradient before the
            conjugate iterations start (no line search for this step).
        grid_lower: First grid index of the line search (inclusive).
        grid_upper: Last grid index of the line search (exclusive).
        grid_resolution: Spacing of the line-search grid; candidate step sizes
            are ``grid_resolution * i`` for ``i`` in ``[grid_lower, grid_upper)``.
        workers: Number of threads used to evaluate the line-search grid.
            ``None`` or 1 evaluates serially.
    """

    precision: float = DEFAULT_PRECISION
    max_iteration: int = DEFAULT_MAX_ITERATION
    initial_step: float = 1.0
    grid_lower: int = -100
    grid_upper: int = 100
    grid_resolution: float = 0.01
    workers: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.precision > 0:
            raise ValueError(f"precision must be > 0, got {self.precision}")
        if self.max_iteration < 1:
            raise ValueError(f"max_iteration must be >= 1, got {self.max_iteration}")
        if not self.grid_resolution > 0:
            raise ValueError(f"grid_resolution must be > 0, got {self.grid_resolution}")
        if self.grid_lower >= self.grid_upper:
            raise ValueError(
                f"grid_lower must be < grid_upper, got [{self.grid_lower}, {self.grid_upper})"
            )
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")


@dataclass(frozen=True)
class Problem:
    """Container describing an optimization problem.

    ``grad`` maps a model to its gradient tangent vector. When it is omitted
    the gradient is approximated with central differences.
    """

    fun: Objective
    grad: Optional[Gradient] = None


@dataclass
class OptimizeResult:
    """Result object returned by the optimizers in this package."""

    x: Model
    fun: float
    nit: int
    status: Status
    success: bool
    message: str
    nfev: int
    njev: int
    history: List[Model] = field(default_factory=list)


__all__ = [
    "DEFAULT_MAX_ITERATION",
    "DEFAULT_PRECISION",
    "Gradient",
    "GradientOracle",
    "LineSearch",
    "Model",
    "NLCGConfig",
    "Objective",
    "OptimizeResult",
    "Problem",
    "Status",
    "TangentVector",
]
