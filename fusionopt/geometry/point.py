"""Planar points and their tangent vectors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator


@dataclass(frozen=True)
class Vector2:
    """
    A 2D vector.

    Serves as the tangent vector of :class:`Point2`. It is also a model in its
    own right (a flat vector space is its own tangent space).
    """

    x: Any = 0.0
    y: Any = 0.0

    @classmethod
    def zero(cls) -> "Vector2":
        return cls(0.0, 0.0)

    def __add__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Vector2":
        return Vector2(-self.x, -self.y)

    def __mul__(self, factor: float) -> "Vector2":
        return self.scaled(factor)

    __rmul__ = __mul__

    def scaled(self, factor: float) -> "Vector2":
        return Vector2(self.x * factor, self.y * factor)

    def norm_squared(self) -> Any:
        return self.x * self.x + self.y * self.y

    def components(self) -> Iterator[Any]:
        yield self.x
        yield self.y

    def with_components(self, values: Iterator[Any]) -> "Vector2":
        x = next(values)
        y = next(values)
        return Vector2(x, y)

    def move(self, direction: "Vector2") -> "Vector2":
        return self + direction

    def zero_tangent(self) -> "Vector2":
        return Vector2.zero()


@dataclass(frozen=True)
class Point2:
    """A point in the plane. Moving a point translates it."""

    x: Any = 0.0
    y: Any = 0.0

    def move(self, direction: Vector2) -> "Point2":
        return Point2(self.x + direction.x, self.y + direction.y)

    def zero_tangent(self) -> Vector2:
        return Vector2.zero()

    def vector(self) -> Vector2:
        """Return the coordinates as a :class:`Vector2`."""
        return Vector2(self.x, self.y)

    def __sub__(self, other: "Point2") -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def components(self) -> Iterator[Any]:
        """Coordinates ``x, y``; lets points be Jacobian outputs."""
        yield self.x
        yield self.y


__all__ = ["Point2", "Vector2"]
