"""Markup reading: raw text to an lxml element tree.

Only syntax is checked here; what the elements mean is the parser's job.
"""

from typing import Optional, Union

from lxml import etree

from urdf_linkage.errors import MalformedDocumentError


def _make_parser(encoding: Optional[str] = None) -> etree.XMLParser:
    # Comments and processing instructions never carry robot data
    return etree.XMLParser(encoding=encoding, remove_comments=True, remove_pis=True, resolve_entities=False)


def parse_document(text: Union[str, bytes]) -> etree._Element:
    """Parse markup text into an element tree.

    Args:
        text: The document, as ``str`` or encoded ``bytes``.

    Returns:
        The root element.

    Raises:
        MalformedDocumentError: If the text is empty or not well-formed.
    """
    encoding = None
    if isinstance(text, str):
        # lxml refuses str input that carries an encoding declaration; the
        # declared encoding no longer applies once the text is decoded
        text = text.encode("utf-8")
        encoding = "utf-8"
    if not text.strip():
        raise MalformedDocumentError("Document is empty")

    try:
        return etree.fromstring(text, _make_parser(encoding))
    except etree.XMLSyntaxError as exc:
        raise MalformedDocumentError(f"Document is not well-formed: {exc}") from exc


def read_document(path: str) -> etree._Element:
    """Read and parse a markup file. I/O errors propagate unchanged."""
    try:
        tree = etree.parse(path, _make_parser())
    except etree.XMLSyntaxError as exc:
        raise MalformedDocumentError(f"{path} is not well-formed: {exc}") from exc
    return tree.getroot()
