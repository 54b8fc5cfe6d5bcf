"""Tests for link hierarchy construction."""

import warnings

import jax.numpy as jnp
import numpy as np
import pytest

from urdf_linkage.core import Box, Joint, JointLimits, JointOrigin, Link, Material, TransformNode
from urdf_linkage.errors import CyclicJointWarning, DanglingJointWarning, ReparentWarning, RootNotFoundError
from urdf_linkage.hierarchy import DEFAULT_CHILD_OFFSET, build_hierarchy
from urdf_linkage.io import parse_urdf
from urdf_linkage.transforms import so3

BLUE = Material(name="blue", color=(0.0, 0.0, 1.0), opacity=1.0)


def make_links(*names):
    return {name: Link(name=name, shape=Box(1.0, 1.0, 1.0), material=BLUE, node=TransformNode(name)) for name in names}


def make_joint(name, parent, child, origin=None):
    return Joint(
        name=name,
        kind="revolute",
        parent=parent,
        child=child,
        axis=(0.0, 1.0, 0.0),
        limits=JointLimits(lower=0.0, upper=1.57, effort=10.0, velocity=1.0),
        origin=origin,
    )


def make_joints(*joints):
    return {joint.name: joint for joint in joints}


def count_paths(root, target):
    return sum(1 for node in root.traverse() if node is target)


def test_missing_root_raises():
    """Test that a link set without base_link raises RootNotFoundError."""
    links = make_links("arm_link")
    with pytest.raises(RootNotFoundError):
        build_hierarchy(links, {})


def test_base_link_without_joints_is_single_node():
    """Test that a lone base_link builds a single childless node."""
    links = make_links("base_link")
    root = build_hierarchy(links, {})

    assert root is links["base_link"].node
    assert root.children == []
    assert root.parent is None


def test_simple_chain():
    """Test nesting of a three-link serial chain."""
    links = make_links("base_link", "arm_link", "hand_link")
    joints = make_joints(
        make_joint("base_to_arm", "base_link", "arm_link"),
        make_joint("arm_to_hand", "arm_link", "hand_link"),
    )
    root = build_hierarchy(links, joints)

    assert root.children == [links["arm_link"].node]
    assert links["arm_link"].node.children == [links["hand_link"].node]
    assert root.get_object_by_name("hand_link") is links["hand_link"].node


def test_children_get_fixed_offset():
    """Test that attached children sit at the default offset."""
    links = make_links("base_link", "arm_link")
    build_hierarchy(links, make_joints(make_joint("j", "base_link", "arm_link")))

    arm = links["arm_link"].node
    np.testing.assert_allclose(arm.position, DEFAULT_CHILD_OFFSET)
    np.testing.assert_allclose(arm.rotation, jnp.eye(3))
    # Root is left where it was
    np.testing.assert_allclose(links["base_link"].node.position, [0.0, 0.0, 0.0])


def test_custom_child_offset():
    """Test that child_offset overrides the default placement."""
    links = make_links("base_link", "arm_link")
    build_hierarchy(links, make_joints(make_joint("j", "base_link", "arm_link")), child_offset=(1.0, 2.0, 3.0))
    np.testing.assert_allclose(links["arm_link"].node.position, [1.0, 2.0, 3.0])


@pytest.mark.parametrize("parent, child", [
    ("ghost_link", "arm_link"),
    ("base_link", "ghost_link"),
])
def test_dangling_joint_is_skipped(parent, child):
    """Test that joints naming unknown links add no edge and warn."""
    links = make_links("base_link", "arm_link", "hand_link")
    joints = make_joints(
        make_joint("dangling", parent, child),
        make_joint("arm_to_hand", "arm_link", "hand_link"),
        make_joint("base_to_arm", "base_link", "arm_link"),
    )

    with pytest.warns(DanglingJointWarning, match="dangling"):
        root = build_hierarchy(links, joints)

    # Valid joints still apply, and the dangling one adds no edge
    assert root.children == [links["arm_link"].node]
    assert links["arm_link"].node.children == [links["hand_link"].node]
    assert links["hand_link"].node.children == []


def test_same_child_twice_reparents_to_last_parent():
    """Test that the last joint claiming a child wins."""
    links = make_links("base_link", "left_link", "right_link", "tool_link")
    joints = make_joints(
        make_joint("base_to_left", "base_link", "left_link"),
        make_joint("base_to_right", "base_link", "right_link"),
        make_joint("left_to_tool", "left_link", "tool_link"),
        make_joint("right_to_tool", "right_link", "tool_link"),
    )

    with pytest.warns(ReparentWarning, match="tool_link"):
        root = build_hierarchy(links, joints)

    tool = links["tool_link"].node
    assert tool.parent is links["right_link"].node
    assert links["left_link"].node.children == []
    assert links["right_link"].node.children == [tool]
    assert count_paths(root, tool) == 1


def test_cycle_forming_joint_is_skipped():
    """Test that joints closing a cycle are skipped with a warning."""
    links = make_links("base_link", "arm_link", "hand_link")
    joints = make_joints(
        make_joint("base_to_arm", "base_link", "arm_link"),
        make_joint("arm_to_hand", "arm_link", "hand_link"),
        make_joint("hand_to_arm", "hand_link", "arm_link"),
        make_joint("hand_to_base", "hand_link", "base_link"),
    )

    with pytest.warns(CyclicJointWarning):
        root = build_hierarchy(links, joints)

    assert root.parent is None
    assert links["arm_link"].node.parent is root
    assert links["hand_link"].node.children == []
    assert len(list(root.traverse())) == 3


def test_no_warnings_for_clean_tree():
    """Test that a well-formed tree builds without warnings."""
    links = make_links("base_link", "arm_link")
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        build_hierarchy(links, make_joints(make_joint("j", "base_link", "arm_link")))


def test_joint_origins_used_when_enabled():
    """Test origin-driven placement with offset fallback."""
    origin = JointOrigin(xyz=(0.0, 0.0, 0.5), rpy=(0.0, 0.0, jnp.pi / 2))
    links = make_links("base_link", "arm_link", "hand_link")
    joints = make_joints(
        make_joint("base_to_arm", "base_link", "arm_link", origin=origin),
        make_joint("arm_to_hand", "arm_link", "hand_link"),
    )
    build_hierarchy(links, joints, use_joint_origins=True)

    arm = links["arm_link"].node
    np.testing.assert_allclose(arm.position, [0.0, 0.0, 0.5])
    np.testing.assert_allclose(arm.rotation, so3.rot_z(jnp.pi / 2), atol=1e-12)
    # No origin on the joint: fixed offset fallback
    np.testing.assert_allclose(links["hand_link"].node.position, DEFAULT_CHILD_OFFSET)


def test_joint_origins_ignored_by_default():
    """Test that origins are ignored unless requested."""
    origin = JointOrigin(xyz=(0.0, 0.0, 0.5), rpy=(0.3, 0.0, 0.0))
    links = make_links("base_link", "arm_link")
    build_hierarchy(links, make_joints(make_joint("j", "base_link", "arm_link", origin=origin)))

    np.testing.assert_allclose(links["arm_link"].node.position, DEFAULT_CHILD_OFFSET)
    np.testing.assert_allclose(links["arm_link"].node.rotation, jnp.eye(3))


def test_world_matrix_composes_offsets():
    """Test world position of a nested link."""
    links = make_links("base_link", "arm_link", "hand_link")
    joints = make_joints(
        make_joint("base_to_arm", "base_link", "arm_link"),
        make_joint("arm_to_hand", "arm_link", "hand_link"),
    )
    build_hierarchy(links, joints)

    T = links["hand_link"].node.world_matrix()
    np.testing.assert_allclose(T[:3, 3], [0.0, 0.3, 0.0], atol=1e-12)


def test_round_trip_scenario():
    """Test the two-link round trip from text to tree."""
    robot = parse_urdf("""<robot>
      <material name="blue"><color rgba="0 0 1 1"/></material>
      <link name="base_link"><visual><geometry><box size="1 1 1"/></geometry><material name="blue"/></visual></link>
      <link name="arm_link"><visual><geometry><cylinder radius="0.1" length="0.5"/></geometry>
        <material name="blue"/></visual></link>
      <joint name="base_to_arm" type="revolute">
        <parent link="base_link"/><child link="arm_link"/>
        <axis xyz="0 1 0"/><limit lower="0" upper="1.57" effort="10" velocity="1"/>
      </joint>
    </robot>""")

    assert robot.root.name == "base_link"
    assert [child.name for child in robot.root.children] == ["arm_link"]
    assert robot.root.children[0].children == []
    assert len(robot.joints) == 1
    joint = robot.joints["base_to_arm"]
    assert joint.limits.lower == 0.0
    assert joint.limits.upper == 1.57


def test_joint_origin_rpy_applies_yaw_pitch_roll():
    """Test that origin rpy is composed as Rz(yaw) Ry(pitch) Rx(roll)."""
    roll, pitch, yaw = 0.1, 0.2, 0.3
    origin = JointOrigin(xyz=(0.0, 0.0, 0.0), rpy=(roll, pitch, yaw))
    links = make_links("base_link", "arm_link")
    build_hierarchy(links, make_joints(make_joint("j", "base_link", "arm_link", origin=origin)), use_joint_origins=True)

    expected = so3.rot_z(yaw) @ so3.rot_y(pitch) @ so3.rot_x(roll)
    np.testing.assert_allclose(links["arm_link"].node.rotation, expected, atol=1e-12)
