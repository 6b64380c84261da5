"""Conjugate gradient optimization over differentiable models.

Example
-------
>>> import numpy as np
>>> from fusionopt.optimize import Problem, nonlinear_cg
>>> target = np.array([1.0, -2.0, 0.5])
>>> def bowl(x):
...     return float((x - target) @ (x - target))
>>> def bowl_grad(x):
...     return 2.0 * (x - target)
>>> res = nonlinear_cg(Problem(fun=bowl, grad=bowl_grad), np.zeros(3))
>>> bool(np.allclose(res.x, target, atol=1e-5))
True
"""

from .autodiff import torch_gradient, torch_jacobian
from .core import (
    DEFAULT_MAX_ITERATION,
    DEFAULT_PRECISION,
    GradientOracle,
    LineSearch,
    NLCGConfig,
    Objective,
    OptimizeResult,
    Problem,
    Status,
)
from .gradient import basis_vectors, numerical_gradient, numerical_jacobian
from .line_search import ArmijoLineSearch, GridLineSearch, backtracking_armijo, grid_line_search
from .nlcg import NLCG, fletcher_reeves_beta, nonlinear_cg
from .vector import (
    ForEachComponent,
    Manifold,
    Vector,
    add,
    components,
    dot,
    move,
    rebuild,
    scale,
    size,
    zero_tangent,
    zeros_like,
)

__all__ = [
    "ArmijoLineSearch",
    "DEFAULT_MAX_ITERATION",
    "DEFAULT_PRECISION",
    "ForEachComponent",
    "GradientOracle",
    "GridLineSearch",
    "LineSearch",
    "Manifold",
    "NLCG",
    "NLCGConfig",
    "Objective",
    "OptimizeResult",
    "Problem",
    "Status",
    "Vector",
    "add",
    "backtracking_armijo",
    "basis_vectors",
    "components",
    "dot",
    "fletcher_reeves_beta",
    "grid_line_search",
    "move",
    "nonlinear_cg",
    "numerical_gradient",
    "numerical_jacobian",
    "rebuild",
    "scale",
    "size",
    "torch_gradient",
    "torch_jacobian",
    "zero_tangent",
    "zeros_like",
]
