"""Link hierarchy construction.

Composes the per-link group nodes into one tree rooted at ``base_link`` by
following joint parent/child references.
"""

import logging
import warnings
from typing import Dict, Mapping, Sequence

from .core import Joint, Link, TransformNode
from .errors import CyclicJointWarning, DanglingJointWarning, ReparentWarning, RootNotFoundError
from .transforms import so3

logger = logging.getLogger(__name__)

ROOT_LINK_NAME = "base_link"

# Placement of every attached child link when no joint origin is used.
# Not derived from the document's joint geometry.
DEFAULT_CHILD_OFFSET = (0.0, 0.15, 0.0)


def build_hierarchy(
    links: Mapping[str, Link],
    joints: Mapping[str, Joint],
    *,
    use_joint_origins: bool = False,
    child_offset: Sequence[float] = DEFAULT_CHILD_OFFSET,
) -> TransformNode:
    """Attach every link node under its joint parent and return the root node.

    Joints are applied in mapping (document) order:

    * a joint naming a link that does not exist is skipped with a
      ``DanglingJointWarning``;
    * a joint that would make a link its own ancestor is skipped with a
      ``CyclicJointWarning``;
    * a child already attached by an earlier joint is moved to the new
      parent (last joint wins) with a ``ReparentWarning``.

    Args:
        links: Link registry keyed by name.
        joints: Joint registry keyed by name, in document order.
        use_joint_origins: Place a child at its joint's origin when the joint
            has one; ``child_offset`` remains the fallback.
        child_offset: Local translation given to each attached child.

    Returns:
        The ``base_link`` node.

    Raises:
        RootNotFoundError: If there is no link named ``base_link``.
    """
    root_link = links.get(ROOT_LINK_NAME)
    if root_link is None:
        raise RootNotFoundError(f"No link named '{ROOT_LINK_NAME}' among {sorted(links)}")
    root = root_link.node

    # Which joint attached each child so far
    attached_by: Dict[str, str] = {}

    for joint_name, joint in joints.items():
        parent_link = links.get(joint.parent)
        child_link = links.get(joint.child)
        if parent_link is None or child_link is None:
            missing = [name for name, link in ((joint.parent, parent_link), (joint.child, child_link)) if link is None]
            warnings.warn(
                f"Joint '{joint_name}' skipped: unknown link(s) {missing}",
                DanglingJointWarning,
                stacklevel=2,
            )
            continue

        parent_node = parent_link.node
        child_node = child_link.node
        if child_node is root or child_node is parent_node or child_node.is_ancestor_of(parent_node):
            warnings.warn(
                f"Joint '{joint_name}' skipped: attaching '{joint.child}' under '{joint.parent}' would form a cycle",
                CyclicJointWarning,
                stacklevel=2,
            )
            continue

        if joint.child in attached_by:
            warnings.warn(
                f"Link '{joint.child}' moved from joint '{attached_by[joint.child]}' to joint '{joint_name}'",
                ReparentWarning,
                stacklevel=2,
            )

        _place_child(child_node, joint, use_joint_origins, child_offset)
        parent_node.add(child_node)
        attached_by[joint.child] = joint_name
        logger.debug("Attached '%s' under '%s' via joint '%s'", joint.child, joint.parent, joint_name)

    return root


def _place_child(node: TransformNode, joint: Joint, use_joint_origins: bool, child_offset: Sequence[float]) -> None:
    if use_joint_origins and joint.origin is not None:
        node.set_position(joint.origin.xyz)
        node.rotation = so3.from_rpy(joint.origin.rpy)
    else:
        node.set_position(child_offset)
