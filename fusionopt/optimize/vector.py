"""Generic vector-space operations over models and their tangent vectors.

Optimizers in this package never look inside a model. They only need to
displace it along a tangent vector and to do arithmetic on tangent vectors.
The helpers below provide that arithmetic for

* Python scalars, ``numpy.ndarray`` and ``torch.Tensor``;
* ``tuple``, ``list`` and ``dict`` containers of any of the above, nested to
  any depth;
* user types implementing :class:`Vector` (tangent vectors) or
  :class:`Manifold` (models).

Composite types expose their scalar leaves through ``components()``, which
is all :func:`dot` needs to compute an inner product across heterogeneous
nested structures.
"""

from __future__ import annotations

import numbers
from itertools import islice
from typing import Any, Iterable, Iterator, Protocol, runtime_checkable

import numpy as np
import torch


@runtime_checkable
class ForEachComponent(Protocol):
    """Anything that can enumerate its scalar components depth-first."""

    def components(self) -> Iterator[Any]:
        ...


@runtime_checkable
class Vector(ForEachComponent, Protocol):
    """A tangent vector: closed under addition and scaling."""

    def __add__(self, other: Any) -> Any:
        ...

    def scaled(self, factor: float) -> Any:
        ...

    def with_components(self, values: Iterator[Any]) -> Any:
        """Return a vector of the same structure filled from ``values``."""
        ...


@runtime_checkable
class Manifold(Protocol):
    """A model that can be displaced along its tangent vectors."""

    def move(self, direction: Any) -> Any:
        """Return a new model displaced along ``direction``."""
        ...

    def zero_tangent(self) -> Any:
        ...


def _is_scalar(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


_SENTINEL = object()


def _take(values: Iterator[Any], n: int) -> list[Any]:
    items = list(islice(values, n))
    if len(items) != n:
        raise ValueError("Not enough values to rebuild the tangent structure.")
    return items


def components(value: Any) -> Iterator[Any]:
    """
    Yield every scalar leaf of ``value`` in a fixed depth-first order.

    Tensor leaves are yielded as 0-d tensors so autograd graphs survive;
    array leaves are yielded as Python floats.

    Raises:
        TypeError: If ``value`` (or one of its parts) is not a supported kind.
    """
    if isinstance(value, ForEachComponent) and not isinstance(value, (np.ndarray, torch.Tensor)):
        yield from value.components()
    elif isinstance(value, torch.Tensor):
        if value.dim() == 0:
            yield value
        else:
            yield from value.reshape(-1).unbind(0)
    elif isinstance(value, np.ndarray):
        yield from value.ravel().tolist()
    elif _is_scalar(value):
        yield value
    elif isinstance(value, (tuple, list)):
        for item in value:
            yield from components(item)
    elif isinstance(value, dict):
        for key in value:
            yield from components(value[key])
    else:
        raise TypeError(f"Unsupported vector type: {type(value).__name__}")


def size(value: Any) -> int:
    """Return the number of scalar components of ``value``."""
    if isinstance(value, np.ndarray):
        return int(value.size)
    if isinstance(value, torch.Tensor):
        return int(value.numel())
    return sum(1 for _ in components(value))


def _rebuild(template: Any, values: Iterator[Any]) -> Any:
    if isinstance(template, Vector):
        try:
            return template.with_components(values)
        except StopIteration:
            # must not escape into the tuple/list/dict comprehensions below
            raise ValueError("Not enough values to rebuild the tangent structure.") from None
    if isinstance(template, torch.Tensor):
        items = _take(values, int(template.numel()))
        if items and isinstance(items[0], torch.Tensor):
            return torch.stack(items).reshape(template.shape)
        return torch.tensor(items, dtype=template.dtype).reshape(template.shape)
    if isinstance(template, np.ndarray):
        items = _take(values, int(template.size))
        if items and isinstance(items[0], torch.Tensor):
            return torch.stack(items).reshape(template.shape)
        return np.asarray(items, dtype=float).reshape(template.shape)
    if _is_scalar(template):
        return _take(values, 1)[0]
    if isinstance(template, tuple):
        return tuple(_rebuild(item, values) for item in template)
    if isinstance(template, list):
        return [_rebuild(item, values) for item in template]
    if isinstance(template, dict):
        return {key: _rebuild(template[key], values) for key in template}
    raise TypeError(f"Unsupported vector type: {type(template).__name__}")


def rebuild(template: Any, values: Iterable[Any]) -> Any:
    """
    Build a value shaped like ``template`` from a flat sequence of scalars.

    This is the inverse of :func:`components`.

    Raises:
        ValueError: If ``values`` has too few or too many elements.
    """
    it = iter(values)
    result = _rebuild(template, it)
    if next(it, _SENTINEL) is not _SENTINEL:
        raise ValueError("Too many values to rebuild the tangent structure.")
    return result


def add(a: Any, b: Any) -> Any:
    """Return the sum of two tangent vectors of the same structure."""
    if isinstance(a, (tuple, list)):
        if not isinstance(b, (tuple, list)) or len(a) != len(b):
            raise ValueError("Cannot add tangent vectors of different structure.")
        summed = [add(x, y) for x, y in zip(a, b)]
        return tuple(summed) if isinstance(a, tuple) else summed
    if isinstance(a, dict):
        if not isinstance(b, dict) or a.keys() != b.keys():
            raise ValueError("Cannot add tangent vectors of different structure.")
        return {key: add(a[key], b[key]) for key in a}
    if isinstance(a, np.ndarray) and isinstance(b, np.ndarray) and a.shape != b.shape:
        raise ValueError(f"Cannot add arrays of shape {a.shape} and {b.shape}.")
    return a + b


def scale(value: Any, factor: float) -> Any:
    """Return ``value`` scaled by the real number ``factor``."""
    if isinstance(value, Vector):
        return value.scaled(factor)
    if isinstance(value, tuple):
        return tuple(scale(item, factor) for item in value)
    if isinstance(value, list):
        return [scale(item, factor) for item in value]
    if isinstance(value, dict):
        return {key: scale(value[key], factor) for key in value}
    if isinstance(value, (np.ndarray, torch.Tensor)) or _is_scalar(value):
        return value * factor
    raise TypeError(f"Unsupported vector type: {type(value).__name__}")


def zeros_like(value: Any) -> Any:
    """Return the zero element of the vector space ``value`` belongs to."""
    if isinstance(value, np.ndarray):
        return np.zeros(value.shape, dtype=float)
    if isinstance(value, torch.Tensor):
        return torch.zeros_like(value)
    return rebuild(value, [0.0] * size(value))


def dot(a: Any, b: Any) -> Any:
    """
    Inner product of two tangent vectors.

    Sums ``a_i * b_i`` over all scalar components, whatever the nesting.
    The result is a float, or a 0-d tensor when the leaves are tensors.

    Raises:
        ValueError: If the two vectors have a different number of components.

    Example:
        >>> dot((1.0, np.array([2.0, 3.0])), (4.0, np.array([5.0, 6.0])))
        32.0
    """
    if isinstance(a, np.ndarray) and isinstance(b, np.ndarray):
        if a.size != b.size:
            raise ValueError("Cannot take the inner product of vectors of different size.")
        return float(np.dot(a.ravel(), b.ravel()))
    left = list(components(a))
    right = list(components(b))
    if len(left) != len(right):
        raise ValueError(
            f"Cannot take the inner product of vectors with {len(left)} and "
            f"{len(right)} components."
        )
    return sum((x * y for x, y in zip(left, right)), 0.0)


def move(model: Any, direction: Any) -> Any:
    """Return ``model`` displaced along the tangent vector ``direction``."""
    if isinstance(model, Manifold):
        return model.move(direction)
    if isinstance(model, tuple):
        if not isinstance(direction, (tuple, list)) or len(model) != len(direction):
            raise ValueError("Direction does not match the model structure.")
        return tuple(move(m, d) for m, d in zip(model, direction))
    if isinstance(model, list):
        if not isinstance(direction, (tuple, list)) or len(model) != len(direction):
            raise ValueError("Direction does not match the model structure.")
        return [move(m, d) for m, d in zip(model, direction)]
    if isinstance(model, dict):
        if not isinstance(direction, dict) or model.keys() != direction.keys():
            raise ValueError("Direction does not match the model structure.")
        return {key: move(model[key], direction[key]) for key in model}
    if isinstance(model, np.ndarray) and isinstance(direction, torch.Tensor):
        return torch.as_tensor(model, dtype=direction.dtype) + direction
    if isinstance(model, (np.ndarray, torch.Tensor)) or _is_scalar(model):
        return model + direction
    raise TypeError(f"Unsupported model type: {type(model).__name__}")


def zero_tangent(model: Any) -> Any:
    """Return the zero tangent vector at ``model``."""
    if isinstance(model, Manifold):
        return model.zero_tangent()
    if isinstance(model, tuple):
        return tuple(zero_tangent(m) for m in model)
    if isinstance(model, list):
        return [zero_tangent(m) for m in model]
    if isinstance(model, dict):
        return {key: zero_tangent(model[key]) for key in model}
    if isinstance(model, np.ndarray):
        return np.zeros(model.shape, dtype=float)
    if isinstance(model, torch.Tensor):
        return torch.zeros_like(model)
    if _is_scalar(model):
        return 0.0
    raise TypeError(f"Unsupported model type: {type(model).__name__}")


__all__ = [
    "ForEachComponent",
    "Manifold",
    "Vector",
    "add",
    "components",
    "dot",
    "move",
    "rebuild",
    "scale",
    "size",
    "zero_tangent",
    "zeros_like",
]
