"""
Rotation and rigid-body transform helpers used by the scene tree.

- SO(3) rotations (so3 module): Euler, roll-pitch-yaw and axis-angle
- SE(3) homogeneous transforms (se3 module)
"""

from . import so3
from . import se3

__all__ = [
    "so3",
    "se3",
]
