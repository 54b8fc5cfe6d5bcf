"""I/O utilities for loading robot descriptions.

Reads URDF text or files and turns them into immutable registries plus a
built link hierarchy.
"""

from .document import parse_document, read_document
from .urdf_parser import (
    extract_joints,
    extract_links,
    extract_materials,
    find_robot,
    load_urdf,
    parse_urdf,
)

__all__ = [
    "extract_joints",
    "extract_links",
    "extract_materials",
    "find_robot",
    "load_urdf",
    "parse_document",
    "parse_urdf",
    "read_document",
]
