"""Planar geometric models usable with the optimizers."""

from .point import Point2, Vector2
from .pose import Pose2, Pose2Tangent, Rot2

__all__ = [
    "Point2",
    "Pose2",
    "Pose2Tangent",
    "Rot2",
    "Vector2",
]
