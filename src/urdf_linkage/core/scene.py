"""Mutable scene-graph nodes handed to the renderer.

A ``TransformNode`` is a named group with a local pose (position plus
rotation matrix) and an ordered list of children. Each link owns one such
node; joint control writes poses into them by link name.
"""

from typing import Any, Callable, Iterator, List, Optional, Protocol, Sequence

import jax
import jax.numpy as jnp

from urdf_linkage.transforms import se3, so3

Array = jax.Array


class TransformNode:
    """Positionable, rotatable group node.

    Attributes:
        name: Node name; link nodes carry the link name.
        position: (3,) local translation relative to the parent.
        rotation: (3, 3) local rotation matrix.
        parent: Parent node, or ``None`` for a tree root.
        children: Child nodes in insertion order.
        mesh: The visual drawn at this node, if any.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self.position = jnp.zeros(3, dtype=jnp.float64)
        self.rotation = jnp.eye(3, dtype=jnp.float64)
        self.parent: Optional["TransformNode"] = None
        self.children: List["TransformNode"] = []
        self.mesh: Optional["ShapeMesh"] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, children={len(self.children)})"

    # Tree editing
    def add(self, child: "TransformNode") -> "TransformNode":
        """Attach ``child``, detaching it from its current parent first."""
        if child is self:
            raise ValueError(f"node '{self.name}' cannot be added to itself")
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.append(child)
        return self

    def remove(self, child: "TransformNode") -> "TransformNode":
        if child in self.children:
            self.children.remove(child)
            child.parent = None
        return self

    def is_ancestor_of(self, node: "TransformNode") -> bool:
        current = node.parent
        while current is not None:
            if current is self:
                return True
            current = current.parent
        return False

    # Lookup
    def traverse(self, callback: Optional[Callable[["TransformNode"], Any]] = None) -> Iterator["TransformNode"]:
        """Depth-first pre-order walk; calls ``callback`` on every node when given."""
        nodes = list(self._walk())
        if callback is not None:
            for node in nodes:
                callback(node)
        return iter(nodes)

    def _walk(self) -> Iterator["TransformNode"]:
        yield self
        for child in self.children:
            yield from child._walk()

    def get_object_by_name(self, name: str) -> Optional["TransformNode"]:
        for node in self._walk():
            if node.name == name:
                return node
        return None

    # Pose
    def set_position(self, xyz: Sequence[float]) -> None:
        self.position = jnp.asarray(xyz, dtype=jnp.float64).reshape(3)

    def reset_rotation(self) -> None:
        self.rotation = jnp.eye(3, dtype=jnp.float64)

    def set_rotation_from_euler(self, angles: Sequence[float], order: str = "XYZ") -> None:
        """Overwrite the local rotation from (x, y, z) Euler angles in radians."""
        self.rotation = so3.from_euler(angles, order=order)

    def set_rotation_from_axis_angle(self, axis: Sequence[float], angle: float) -> None:
        """Overwrite the local rotation with ``angle`` radians about ``axis``."""
        self.rotation = so3.from_axis_angle(axis, angle)

    def local_matrix(self) -> Array:
        return se3.from_position_and_rotation(self.position, self.rotation)

    def world_matrix(self) -> Array:
        """Compose local matrices from the tree root down to this node."""
        T = self.local_matrix()
        current = self.parent
        while current is not None:
            T = current.local_matrix() @ T
            current = current.parent
        return T


class ShapeMesh:
    """Renderable pairing of a visual shape with its material.

    Held in a link node's ``mesh`` slot rather than among its children, so
    the children of a node are exactly its child links.
    """

    def __init__(self, shape, material):
        self.shape = shape
        self.material = material
        self.cast_shadow = False
        self.receive_shadow = False


class Renderer(Protocol):
    """Display collaborator that receives the built tree."""

    def add(self, node: TransformNode) -> Any:
        ...
