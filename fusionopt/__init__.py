"""fusionopt - nonlinear conjugate gradient over differentiable models."""

__version__ = "0.1.0"

# Geometry
from .geometry import Point2, Pose2, Pose2Tangent, Rot2, Vector2

# Optimization
from .optimize import (
    NLCG,
    ArmijoLineSearch,
    GridLineSearch,
    NLCGConfig,
    OptimizeResult,
    Problem,
    Status,
    dot,
    nonlinear_cg,
    numerical_gradient,
    numerical_jacobian,
    torch_gradient,
    torch_jacobian,
)

# Diagnostics and logging
from .diagnostics import debug_context, is_debug_enabled, set_debug_enabled
from .logging import configure_logging, get_logger, set_log_level

__all__ = [
    "__version__",
    "ArmijoLineSearch",
    "GridLineSearch",
    "NLCG",
    "NLCGConfig",
    "OptimizeResult",
    "Point2",
    "Pose2",
    "Pose2Tangent",
    "Problem",
    "Rot2",
    "Status",
    "Vector2",
    "configure_logging",
    "debug_context",
    "dot",
    "get_logger",
    "is_debug_enabled",
    "nonlinear_cg",
    "numerical_gradient",
    "numerical_jacobian",
    "set_debug_enabled",
    "set_log_level",
    "torch_gradient",
    "torch_jacobian",
]
