"""Immutable robot-description entities.

Materials, visual shapes, joints and links are frozen ``flax.struct``
dataclasses built once per parse. Every field is static metadata, so
entities compare by value.
"""

from typing import Dict, Optional, Tuple, Union

from flax import struct

from .scene import TransformNode

# Radial segment count used when a cylinder is turned into a mesh
CYLINDER_RADIAL_SEGMENTS = 32


@struct.dataclass
class Material:
    """Named surface color.

    Attributes:
        name: Unique material name.
        color: Linear RGB triple, components in [0, 1].
        opacity: Alpha in [0, 1].
    """
    name: str = struct.field(pytree_node=False)
    color: Tuple[float, float, float] = struct.field(pytree_node=False)
    opacity: float = struct.field(pytree_node=False, default=1.0)

    @property
    def is_transparent(self) -> bool:
        return self.opacity != 1


@struct.dataclass
class Box:
    width: float = struct.field(pytree_node=False)
    height: float = struct.field(pytree_node=False)
    depth: float = struct.field(pytree_node=False)

    @property
    def kind(self) -> str:
        return "box"


@struct.dataclass
class Cylinder:
    radius: float = struct.field(pytree_node=False)
    height: float = struct.field(pytree_node=False)
    radial_segments: int = struct.field(pytree_node=False, default=CYLINDER_RADIAL_SEGMENTS)

    @property
    def kind(self) -> str:
        return "cylinder"


VisualShape = Union[Box, Cylinder]


@struct.dataclass
class JointLimits:
    """Motion limits of a joint; angular values are radians. Not range-checked."""
    lower: float = struct.field(pytree_node=False)
    upper: float = struct.field(pytree_node=False)
    effort: float = struct.field(pytree_node=False)
    velocity: float = struct.field(pytree_node=False)


@struct.dataclass
class JointOrigin:
    """Pose of the child link frame relative to the parent, as written in the document."""
    xyz: Tuple[float, float, float] = struct.field(pytree_node=False, default=(0.0, 0.0, 0.0))
    rpy: Tuple[float, float, float] = struct.field(pytree_node=False, default=(0.0, 0.0, 0.0))


@struct.dataclass
class Joint:
    """A named parent/child connection between two links.

    Attributes:
        name: Joint name.
        kind: The ``type`` attribute, e.g. ``"revolute"``. Stored as given.
        parent: Name of the parent link.
        child: Name of the child link.
        axis: (x, y, z) rotation axis, unnormalized.
        limits: Motion limits.
        origin: Optional child frame pose; ``None`` when the document has no
                ``<origin>`` element.
    """
    name: str = struct.field(pytree_node=False)
    kind: str = struct.field(pytree_node=False)
    parent: str = struct.field(pytree_node=False)
    child: str = struct.field(pytree_node=False)
    axis: Tuple[float, float, float] = struct.field(pytree_node=False)
    limits: JointLimits = struct.field(pytree_node=False)
    origin: Optional[JointOrigin] = struct.field(pytree_node=False, default=None)


@struct.dataclass
class Link:
    """A rigid body rendered as one visual shape.

    ``node`` is the link's group transform node; it holds the shape mesh and
    becomes a pose slot once the hierarchy is built.
    """
    name: str = struct.field(pytree_node=False)
    shape: VisualShape = struct.field(pytree_node=False)
    material: Material = struct.field(pytree_node=False)
    node: TransformNode = struct.field(pytree_node=False)


@struct.dataclass
class RobotDescription:
    """Everything produced by one parse: the registries and the tree root."""
    name: Optional[str] = struct.field(pytree_node=False)
    materials: Dict[str, Material] = struct.field(pytree_node=False)
    links: Dict[str, Link] = struct.field(pytree_node=False)
    joints: Dict[str, Joint] = struct.field(pytree_node=False)
    root: TransformNode = struct.field(pytree_node=False)

    def get_link_node(self, link_name: str) -> Optional[TransformNode]:
        """Find a link's node in the built tree by name."""
        return self.root.get_object_by_name(link_name)
