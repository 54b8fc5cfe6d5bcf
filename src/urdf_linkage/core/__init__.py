"""Core robot-description data structures.

Immutable entities (materials, shapes, links, joints) and the mutable
transform nodes they are composed into.
"""

from .scene import Renderer, ShapeMesh, TransformNode
from .robot_model import (
    CYLINDER_RADIAL_SEGMENTS,
    Box,
    Cylinder,
    Joint,
    JointLimits,
    JointOrigin,
    Link,
    Material,
    RobotDescription,
    VisualShape,
)

__all__ = [
    "Box",
    "CYLINDER_RADIAL_SEGMENTS",
    "Cylinder",
    "Joint",
    "JointLimits",
    "JointOrigin",
    "Link",
    "Material",
    "Renderer",
    "RobotDescription",
    "ShapeMesh",
    "TransformNode",
    "VisualShape",
]
