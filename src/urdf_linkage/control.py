"""Slider-driven joint control.

Each control names the link whose node it rotates, the single axis it
rotates about and the offset the node is kept at. Updates overwrite the
node's rotation, so repeated or out-of-order slider events always leave the
same pose for the same angle.
"""

import logging
import math
from typing import Mapping, Optional, Tuple

from flax import struct

from .core import Joint, TransformNode

logger = logging.getLogger(__name__)

_AXIS_INDEX = {"x": 0, "y": 1, "z": 2}


@struct.dataclass
class JointControl:
    """Binding of a slider to a link pose slot.

    Attributes:
        link: Name of the link node to rotate.
        axis: ``"x"``, ``"y"`` or ``"z"``.
        offset: Local position the node is held at.
    """
    link: str = struct.field(pytree_node=False)
    axis: str = struct.field(pytree_node=False)
    offset: Tuple[float, float, float] = struct.field(pytree_node=False, default=(0.0, 0.0, 0.0))

    def __post_init__(self):
        if self.axis not in _AXIS_INDEX:
            raise ValueError(f"axis must be one of 'x', 'y', 'z', got {self.axis!r}")


# Slider bindings of the UR5 arm viewer
UR5_JOINT_CONTROLS = {
    "base_to_shoulder": JointControl(link="base_link", axis="y", offset=(0.0, 0.0, 0.0)),
    "shoulder_to_upper_arm": JointControl(link="shoulder_link", axis="x", offset=(0.0, 0.15, 0.0)),
    "upper_arm_to_forearm": JointControl(link="upper_arm_link", axis="x", offset=(0.0, 0.3, 0.0)),
    "forearm_to_wrist_1": JointControl(link="forearm_link", axis="x", offset=(0.0, 0.3, 0.0)),
    "wrist_1_to_wrist_2": JointControl(link="wrist_1_link", axis="z", offset=(0.0, 0.15, 0.0)),
    "wrist_2_to_wrist_3": JointControl(link="wrist_2_link", axis="x", offset=(0.0, 0.1, 0.0)),
}


def initialize_joint_rotations(root: TransformNode, controls: Mapping[str, JointControl] = UR5_JOINT_CONTROLS) -> None:
    """Move every controlled link to its offset with an identity rotation."""
    for joint_name, control in controls.items():
        node = root.get_object_by_name(control.link)
        if node is None:
            logger.debug("Control '%s' targets missing link '%s'", joint_name, control.link)
            continue
        node.set_position(control.offset)
        node.reset_rotation()


def set_joint_angle(
    root: TransformNode,
    joint_name: str,
    degrees: float,
    controls: Mapping[str, JointControl] = UR5_JOINT_CONTROLS,
) -> Optional[TransformNode]:
    """Rotate the link bound to ``joint_name`` to ``degrees`` about its control axis.

    The previous rotation is discarded, never accumulated onto.

    Returns:
        The updated node, or ``None`` when the link is not in the tree.

    Raises:
        KeyError: If no control is bound to ``joint_name``.
    """
    control = controls[joint_name]
    node = root.get_object_by_name(control.link)
    if node is None:
        logger.debug("Control '%s' targets missing link '%s'", joint_name, control.link)
        return None

    angles = [0.0, 0.0, 0.0]
    angles[_AXIS_INDEX[control.axis]] = math.radians(float(degrees))
    node.set_rotation_from_euler(angles)
    node.set_position(control.offset)
    return node


def enable_shadows(root: TransformNode) -> None:
    """Let every mesh in the tree cast and receive shadows."""
    for node in root.traverse():
        if node.mesh is not None:
            node.mesh.cast_shadow = True
            node.mesh.receive_shadow = True


def set_joint_position(root: TransformNode, joint: Joint, angle: float, clamp: bool = False) -> Optional[TransformNode]:
    """Rotate a joint's child link to ``angle`` radians about the joint axis.

    Like :func:`set_joint_angle` the rotation is overwritten, and the node's
    position is left as built. With ``clamp`` the angle is limited to the
    joint's ``[lower, upper]`` range when that range is ordered.

    Returns:
        The updated node, or ``None`` when the child link is not in the tree.
    """
    node = root.get_object_by_name(joint.child)
    if node is None:
        logger.debug("Joint '%s' moves missing link '%s'", joint.name, joint.child)
        return None

    if clamp and joint.limits.lower <= joint.limits.upper:
        angle = min(max(angle, joint.limits.lower), joint.limits.upper)
    node.set_rotation_from_axis_angle(joint.axis, angle)
    return node
