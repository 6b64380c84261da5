"""Finite-difference gradients and Jacobians over structured models.

Derivatives are taken along the basis of the model's tangent space, so they
work for any model supported by :mod:`fusionopt.optimize.vector`, not only
flat arrays.
"""

from __future__ import annotations

from typing import Any, Callable

import numpy as np

from .core import Model, Objective, TangentVector
from .vector import components, move, rebuild, scale, size, zero_tangent


def basis_vectors(tangent: TangentVector) -> list[TangentVector]:
    """Return the standard basis of the vector space ``tangent`` belongs to."""
    return [rebuild(tangent, row.tolist()) for row in np.eye(size(tangent))]


def numerical_gradient(
    model: Model, objective: Objective, eps: float = 1e-6, return_evals: bool = False
) -> TangentVector | tuple[TangentVector, int]:
    """Compute a central-difference gradient of ``objective`` at ``model``.

    Parameters
    ----------
    model:
        Point where the gradient is approximated.
    objective:
        Scalar function of the model.
    eps:
        Perturbation size along each tangent basis vector.
    return_evals:
        Also return the number of objective evaluations.

    Returns
    -------
    The gradient as a tangent vector with the structure of
    ``zero_tangent(model)``.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    template = zero_tangent(model)
    basis = basis_vectors(template)
    grad = np.zeros(len(basis), dtype=float)
    for i, e in enumerate(basis):
        f_plus = float(objective(move(model, scale(e, eps))))
        f_minus = float(objective(move(model, scale(e, -eps))))
        grad[i] = (f_plus - f_minus) / (2.0 * eps)
    result = rebuild(template, grad.tolist())
    if return_evals:
        return result, 2 * len(basis)
    return result


def numerical_jacobian(
    f: Callable[[Model], Any], model: Model, eps: float = 1e-6
) -> list[TangentVector]:
    """Approximate the Jacobian of a vector-valued function with central differences.

    The output of ``f`` may be anything exposing scalar components (a float,
    an array, a :class:`~fusionopt.geometry.Point2`, a tuple of poses, ...).
    Row ``i`` of the result is the gradient of the ``i``-th output component,
    expressed as a tangent vector of the input.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    template = zero_tangent(model)
    columns = []
    for e in basis_vectors(template):
        out_plus = np.fromiter((float(c) for c in components(f(move(model, scale(e, eps))))), float)
        out_minus = np.fromiter((float(c) for c in components(f(move(model, scale(e, -eps))))), float)
        columns.append((out_plus - out_minus) / (2.0 * eps))
    jac = np.stack(columns, axis=1)
    return [rebuild(template, row.tolist()) for row in jac]


__all__ = ["basis_vectors", "numerical_gradient", "numerical_jacobian"]
