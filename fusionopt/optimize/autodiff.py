"""Gradient and Jacobian oracles backed by PyTorch autograd.

The model is displaced along a zero tangent vector whose components are
autograd leaves; differentiating the objective with respect to those leaves
gives the gradient in the model's tangent space. Objectives therefore have to
be written with arithmetic or ``torch`` operations so that the graph is
recorded.
"""

from __future__ import annotations

from typing import Any, Callable

import numpy as np
import torch

from .core import Model, Objective, TangentVector
from .vector import components, move, rebuild, size, zero_tangent, zeros_like

_DTYPE = torch.float64


def _seed(template: TangentVector) -> tuple[torch.Tensor, TangentVector]:
    delta = torch.zeros(size(template), dtype=_DTYPE, requires_grad=True)
    return delta, rebuild(template, delta.unbind(0))


def torch_gradient(model: Model, objective: Objective) -> TangentVector:
    """
    Gradient of ``objective`` at ``model`` computed by reverse-mode autograd.

    Matches the ``GradientOracle`` signature so it can be passed straight to
    :class:`~fusionopt.optimize.nlcg.NLCG`.

    Args:
        model: Point at which to differentiate. Arrays and tensors are handed
            to the objective as a float64 tensor; structured models receive
            0-d tensor leaves.
        objective: Scalar function of the model.

    Returns:
        Tangent vector with the structure of ``zero_tangent(model)``. Array
        models get an ``ndarray`` back, tensor models a tensor.
    """
    if isinstance(model, (np.ndarray, torch.Tensor)):
        x = torch.as_tensor(model, dtype=_DTYPE).detach().clone().requires_grad_(True)
        value = objective(x)
        if not isinstance(value, torch.Tensor) or not value.requires_grad:
            return zero_tangent(model)
        (grad,) = torch.autograd.grad(value, x, allow_unused=True)
        if grad is None:
            return zero_tangent(model)
        if isinstance(model, np.ndarray):
            return grad.detach().numpy().astype(float)
        return grad.detach().to(model.dtype)

    template = zero_tangent(model)
    delta, tangent = _seed(template)
    value = objective(move(model, tangent))
    if not isinstance(value, torch.Tensor) or not value.requires_grad:
        return zeros_like(template)
    (grad,) = torch.autograd.grad(value, delta, allow_unused=True)
    if grad is None:
        return zeros_like(template)
    return rebuild(template, grad.tolist())


def torch_jacobian(f: Callable[[Model], Any], model: Model) -> list[TangentVector]:
    """
    Jacobian of a vector-valued function computed with autograd.

    Same layout as :func:`~fusionopt.optimize.gradient.numerical_jacobian`:
    one row per scalar output component, each row a tangent vector of the
    input.
    """
    template = zero_tangent(model)

    def flat_output(delta: torch.Tensor) -> torch.Tensor:
        out = f(move(model, rebuild(template, delta.unbind(0))))
        return torch.stack([torch.as_tensor(c, dtype=_DTYPE) for c in components(out)])

    delta = torch.zeros(size(template), dtype=_DTYPE)
    jac = torch.autograd.functional.jacobian(flat_output, delta)
    return [rebuild(template, row.tolist()) for row in jac]


__all__ = ["torch_gradient", "torch_jacobian"]
