"""URDF parser for loading robot descriptions into immutable registries.

The document is read in three independent passes (materials, links,
joints). Each pass returns a plain name-keyed mapping in document order, and
the mappings are then handed to the hierarchy builder. No state is kept
between calls, so concurrent parses never share registries.
"""

import logging
from typing import Dict, Optional, Sequence, Tuple, Union

from lxml import etree

from urdf_linkage.core.robot_model import (
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
from urdf_linkage.core.scene import ShapeMesh, TransformNode
from urdf_linkage.errors import (
    MalformedDocumentError,
    MalformedValueError,
    MissingAttributeError,
    UnresolvedMaterialError,
    UnsupportedGeometryError,
)
from urdf_linkage.hierarchy import DEFAULT_CHILD_OFFSET, build_hierarchy
from urdf_linkage.io.document import parse_document, read_document

logger = logging.getLogger(__name__)

_LIMIT_ATTRIBUTES = ("lower", "upper", "effort", "velocity")


def parse_urdf(
    text: Union[str, bytes],
    *,
    use_joint_origins: bool = False,
    child_offset: Sequence[float] = DEFAULT_CHILD_OFFSET,
) -> RobotDescription:
    """Parse URDF text and build the link hierarchy.

    Args:
        text: The robot description document.
        use_joint_origins: Place child links at their joint's ``<origin>``
            when one is given instead of at ``child_offset``.
        child_offset: Translation given to every attached child link.

    Returns:
        RobotDescription: Registries plus the root transform node.
    """
    return _describe(parse_document(text), use_joint_origins, child_offset)


def load_urdf(
    urdf_path: str,
    *,
    use_joint_origins: bool = False,
    child_offset: Sequence[float] = DEFAULT_CHILD_OFFSET,
) -> RobotDescription:
    """Load a URDF file; see :func:`parse_urdf`."""
    return _describe(read_document(urdf_path), use_joint_origins, child_offset)


def _describe(document: etree._Element, use_joint_origins: bool, child_offset: Sequence[float]) -> RobotDescription:
    robot = find_robot(document)

    materials = extract_materials(robot)
    links = extract_links(robot, materials)
    joints = extract_joints(robot)
    root = build_hierarchy(links, joints, use_joint_origins=use_joint_origins, child_offset=child_offset)

    logger.info(
        "Loaded robot %r: %d materials, %d links, %d joints",
        robot.get("name"), len(materials), len(links), len(joints),
    )
    return RobotDescription(
        name=robot.get("name"),
        materials=materials,
        links=links,
        joints=joints,
        root=root,
    )


def find_robot(document: etree._Element) -> etree._Element:
    """Return the ``<robot>`` element: the document root or its first descendant of that name."""
    if document.tag == "robot":
        return document
    robot = document.find(".//robot")
    if robot is None:
        raise MalformedDocumentError(f"Document has no <robot> element (root is <{document.tag}>)")
    return robot


def extract_materials(root: etree._Element) -> Dict[str, Material]:
    """Collect every material definition under ``root`` in document order.

    Materials declared directly under ``root`` must carry a color. Deeper
    ones, inside a link visual, are definitions when they carry a ``<color>``
    and plain references otherwise; references are not read here. When two
    definitions share a name, the later one replaces the earlier.

    Raises:
        MissingAttributeError: A material lacks ``name`` or a ``color`` with ``rgba``.
        MalformedValueError: ``rgba`` holds fewer than four numbers.
    """
    materials: Dict[str, Material] = {}
    for material_elem in root.iter("material"):
        if material_elem.getparent() is not root and material_elem.find("color") is None:
            continue
        material = _parse_material(material_elem)
        if material.name in materials:
            logger.debug("Material '%s' redefined; keeping the later definition", material.name)
        materials[material.name] = material
    return materials


def extract_links(root: etree._Element, materials: Dict[str, Material]) -> Dict[str, Link]:
    """Collect the links declared under ``root``, each with its own group node.

    Raises:
        MissingAttributeError: A link or its visual material has no name.
        UnsupportedGeometryError: The first visual is absent or is not a box or cylinder.
        UnresolvedMaterialError: The visual names a material that is not defined.
        MalformedValueError: Two links share a name.
    """
    links: Dict[str, Link] = {}
    for link_elem in root.findall("link"):
        link = _parse_link(link_elem, materials)
        if link.name in links:
            raise MalformedValueError(f"Duplicate link name '{link.name}'")
        links[link.name] = link
        logger.debug("Parsed link '%s' (%s)", link.name, link.shape.kind)
    return links


def extract_joints(root: etree._Element) -> Dict[str, Joint]:
    """Collect the joints declared under ``root`` in document order.

    Limits are read as given; ``lower`` may exceed ``upper``. When two joints
    share a name, the later one replaces the earlier.

    Raises:
        MissingAttributeError: A required element or attribute is absent.
        MalformedValueError: A numeric attribute cannot be read.
    """
    joints: Dict[str, Joint] = {}
    for joint_elem in root.findall("joint"):
        joint = _parse_joint(joint_elem)
        if joint.name in joints:
            logger.debug("Joint '%s' redefined; keeping the later definition", joint.name)
        joints[joint.name] = joint
        logger.debug("Parsed joint '%s': %s -> %s", joint.name, joint.parent, joint.child)
    return joints


def _parse_material(material_elem: etree._Element) -> Material:
    name = _require(material_elem, "name")
    color_elem = _require_child(material_elem, "color", f"material '{name}'")
    rgba = _require(color_elem, "rgba", f"material '{name}'")
    r, g, b, a = _parse_floats(rgba, 4, f"rgba of material '{name}'")
    return Material(name=name, color=(r, g, b), opacity=a)


def _parse_link(link_elem: etree._Element, materials: Dict[str, Material]) -> Link:
    name = _require(link_elem, "name")

    visual = link_elem.find("visual")
    if visual is None:
        raise UnsupportedGeometryError(f"Link '{name}' has no <visual> element")
    geometry = visual.find("geometry")
    if geometry is None:
        raise UnsupportedGeometryError(f"Link '{name}' has no <geometry> element")
    shape = _parse_shape(name, geometry)

    material_elem = _require_child(visual, "material", f"visual of link '{name}'")
    material_name = _require(material_elem, "name", f"visual of link '{name}'")
    material = materials.get(material_name)
    if material is None:
        raise UnresolvedMaterialError(name, material_name)

    node = TransformNode(name)
    node.mesh = ShapeMesh(shape, material)
    return Link(name=name, shape=shape, material=material, node=node)


def _parse_shape(link_name: str, geometry: etree._Element) -> VisualShape:
    context = f"geometry of link '{link_name}'"

    box = geometry.find("box")
    if box is not None:
        width, height, depth = _parse_floats(_require(box, "size", context), 3, f"box size of link '{link_name}'")
        return Box(width=width, height=height, depth=depth)

    cylinder = geometry.find("cylinder")
    if cylinder is not None:
        (radius,) = _parse_floats(_require(cylinder, "radius", context), 1, f"cylinder radius of link '{link_name}'")
        (length,) = _parse_floats(_require(cylinder, "length", context), 1, f"cylinder length of link '{link_name}'")
        return Cylinder(radius=radius, height=length)

    kinds = [child.tag for child in geometry if isinstance(child.tag, str)]
    raise UnsupportedGeometryError(
        f"Link '{link_name}' uses unsupported geometry {kinds or 'none'}; expected box or cylinder"
    )


def _parse_joint(joint_elem: etree._Element) -> Joint:
    name = _require(joint_elem, "name")
    context = f"joint '{name}'"
    kind = _require(joint_elem, "type", context)

    parent = _require(_require_child(joint_elem, "parent", context), "link", context)
    child = _require(_require_child(joint_elem, "child", context), "link", context)

    axis_xyz = _require(_require_child(joint_elem, "axis", context), "xyz", context)
    axis = _parse_floats(axis_xyz, 3, f"axis of {context}")

    limit_elem = _require_child(joint_elem, "limit", context)
    lower, upper, effort, velocity = (
        _parse_floats(_require(limit_elem, attr, context), 1, f"limit {attr} of {context}")[0]
        for attr in _LIMIT_ATTRIBUTES
    )

    return Joint(
        name=name,
        kind=kind,
        parent=parent,
        child=child,
        axis=axis,
        limits=JointLimits(lower=lower, upper=upper, effort=effort, velocity=velocity),
        origin=_parse_origin(joint_elem.find("origin"), context),
    )


def _parse_origin(origin_elem: Optional[etree._Element], context: str) -> Optional[JointOrigin]:
    if origin_elem is None:
        return None
    xyz = _parse_floats(origin_elem.get("xyz", "0 0 0"), 3, f"origin xyz of {context}")
    rpy = _parse_floats(origin_elem.get("rpy", "0 0 0"), 3, f"origin rpy of {context}")
    return JointOrigin(xyz=xyz, rpy=rpy)


def _require(elem: etree._Element, attribute: str, context: str = "") -> str:
    value = elem.get(attribute)
    if value is None:
        raise MissingAttributeError(elem.tag, attribute, context)
    return value


def _require_child(elem: etree._Element, tag: str, context: str = "") -> etree._Element:
    child = elem.find(tag)
    if child is None:
        raise MissingAttributeError(tag, None, context)
    return child


def _parse_floats(text: str, count: int, what: str) -> Tuple[float, ...]:
    """Read the first ``count`` whitespace-separated numbers of ``text``."""
    tokens = text.split()
    if len(tokens) < count:
        raise MalformedValueError(f"Expected {count} numbers for {what}, got {text!r}")
    try:
        return tuple(float(token) for token in tokens[:count])
    except ValueError as exc:
        raise MalformedValueError(f"Non-numeric value for {what}: {text!r}") from exc
