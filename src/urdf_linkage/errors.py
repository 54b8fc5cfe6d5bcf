"""Exceptions and warnings raised while loading a robot description.

Every error is a ``ValueError`` so callers that only guard against bad input
can keep catching that. Any of them aborts the load: no partial robot is
returned.
"""

from typing import Optional


class URDFError(ValueError):
    """Base class for robot-description loading failures."""


class MalformedDocumentError(URDFError):
    """The text is not well-formed markup."""


class MissingAttributeError(URDFError):
    """A required element or attribute is absent."""

    def __init__(self, tag: str, attribute: Optional[str] = None, context: str = ""):
        self.tag = tag
        self.attribute = attribute
        self.context = context
        if attribute is None:
            message = f"missing required <{tag}> element"
        else:
            message = f"<{tag}> is missing required attribute '{attribute}'"
        if context:
            message = f"{message} ({context})"
        super().__init__(message)


class MalformedValueError(URDFError):
    """An attribute holds too few numbers or a non-numeric token."""


class UnsupportedGeometryError(URDFError):
    """A link visual is absent or uses a shape other than box or cylinder."""


class UnresolvedMaterialError(URDFError):
    """A link references a material that was never defined."""

    def __init__(self, link_name: str, material_name: str):
        self.link_name = link_name
        self.material_name = material_name
        super().__init__(f"Link '{link_name}' references unknown material '{material_name}'")


class RootNotFoundError(URDFError):
    """The root link is missing from the link set."""


class DanglingJointWarning(UserWarning):
    """A joint names a parent or child link that does not exist; the joint is skipped."""


class CyclicJointWarning(DanglingJointWarning):
    """A joint would close a cycle in the link tree; the joint is skipped."""


class ReparentWarning(UserWarning):
    """A link claimed by an earlier joint was moved under a new parent."""
