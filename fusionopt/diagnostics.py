"""Debug mode and finiteness checks.

Debug mode starts from the ``FUSIONOPT_DEBUG`` environment variable and can
be flipped at runtime. While it is on, :class:`~fusionopt.optimize.NLCG`
rejects gradients with NaN or infinite components instead of letting them
drive the line search.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Any, Iterator

import numpy as np

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _env_flag(name: str) -> bool:
    return os.getenv(name, "0").strip().lower() in _TRUTHY


_debug_enabled: bool = _env_flag("FUSIONOPT_DEBUG")


def is_debug_enabled() -> bool:
    """Whether gradients are checked for non-finite values."""
    return _debug_enabled


def set_debug_enabled(enabled: bool) -> None:
    global _debug_enabled
    _debug_enabled = bool(enabled)


@contextmanager
def debug_context(enabled: bool = True) -> Iterator[None]:
    """
    Temporarily switch debug mode, restoring the previous setting on exit.

    Example
    -------
    >>> with debug_context(True):
    ...     pass  # NaN gradients raise in here
    """
    previous = is_debug_enabled()
    set_debug_enabled(enabled)
    try:
        yield
    finally:
        set_debug_enabled(previous)


def _leaves(value: Any) -> np.ndarray:
    from .optimize.vector import components

    return np.fromiter((float(c) for c in components(value)), dtype=float)


def all_finite(value: Any) -> bool:
    """Return True if every scalar component of ``value`` is finite."""
    return bool(np.isfinite(_leaves(value)).all())


def assert_finite(value: Any, what: str = "value") -> None:
    """
    Raise if any scalar component of ``value`` is NaN or infinite.

    Parameters
    ----------
    value:
        Scalar, array, tensor or structured tangent vector.
    what:
        Name used in the error message.

    Raises
    ------
    ValueError
        With the number of offending components.
    """
    leaves = _leaves(value)
    bad = int(np.count_nonzero(~np.isfinite(leaves)))
    if bad:
        raise ValueError(f"{what} contains non-finite values ({bad} of {leaves.size} components).")


__all__ = [
    "all_finite",
    "assert_finite",
    "debug_context",
    "is_debug_enabled",
    "set_debug_enabled",
]
