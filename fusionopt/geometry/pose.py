"""Planar rotations and rigid poses as differentiable models.

Only the vector-space side of these types is modelled: construction,
displacement along a tangent vector and access to coordinates. A pose is
moved by translating its position and adding to its heading independently.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterator

import torch

from .point import Point2, Vector2


@dataclass(frozen=True)
class Rot2:
    """A planar rotation stored as its angle in radians. Tangent is a scalar."""

    theta: Any = 0.0

    @property
    def c(self) -> Any:
        """Cosine of the angle."""
        if isinstance(self.theta, torch.Tensor):
            return torch.cos(self.theta)
        return math.cos(self.theta)

    @property
    def s(self) -> Any:
        """Sine of the angle."""
        if isinstance(self.theta, torch.Tensor):
            return torch.sin(self.theta)
        return math.sin(self.theta)

    def move(self, direction: Any) -> "Rot2":
        return Rot2(self.theta + direction)

    def zero_tangent(self) -> float:
        return 0.0

    def components(self) -> Iterator[Any]:
        yield self.theta


@dataclass(frozen=True)
class Pose2Tangent:
    """Tangent vector of :class:`Pose2`: a translation part and a rotation part."""

    t: Vector2 = field(default_factory=Vector2.zero)
    rot: Any = 0.0

    @classmethod
    def zero(cls) -> "Pose2Tangent":
        return cls(Vector2.zero(), 0.0)

    def __add__(self, other: "Pose2Tangent") -> "Pose2Tangent":
        return Pose2Tangent(self.t + other.t, self.rot + other.rot)

    def __neg__(self) -> "Pose2Tangent":
        return Pose2Tangent(-self.t, -self.rot)

    def __mul__(self, factor: float) -> "Pose2Tangent":
        return self.scaled(factor)

    __rmul__ = __mul__

    def scaled(self, factor: float) -> "Pose2Tangent":
        return Pose2Tangent(self.t.scaled(factor), self.rot * factor)

    def components(self) -> Iterator[Any]:
        yield from self.t.components()
        yield self.rot

    def with_components(self, values: Iterator[Any]) -> "Pose2Tangent":
        t = self.t.with_components(values)
        rot = next(values)
        return Pose2Tangent(t, rot)


@dataclass(frozen=True)
class Pose2:
    """A rigid pose in the plane: a position and a heading."""

    t: Point2 = field(default_factory=Point2)
    rot: Rot2 = field(default_factory=Rot2)

    @classmethod
    def from_xytheta(cls, x: Any, y: Any, theta: Any) -> "Pose2":
        return cls(Point2(x, y), Rot2(theta))

    @property
    def x(self) -> Any:
        return self.t.x

    @property
    def y(self) -> Any:
        return self.t.y

    @property
    def theta(self) -> Any:
        return self.rot.theta

    def move(self, direction: Pose2Tangent) -> "Pose2":
        return Pose2(self.t.move(direction.t), self.rot.move(direction.rot))

    def zero_tangent(self) -> Pose2Tangent:
        return Pose2Tangent.zero()

    def components(self) -> Iterator[Any]:
        """Coordinates ``x, y, theta``."""
        yield from self.t.components()
        yield from self.rot.components()


__all__ = ["Pose2", "Pose2Tangent", "Rot2"]
