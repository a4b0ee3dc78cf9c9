"""
Default GIR document parser.

Turns the XML of a ``.gir`` file into a ``GirModule``: namespace, version,
``<include>`` dependencies and the top-level elements of the namespace.
Anything deeper (members, signatures) is a generation-time concern.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from .errors import ParseError
from .ir import GirElement, GirModule

logger = logging.getLogger(__name__)

C_NS = "{http://www.gtk.org/introspection/c/1.0}"
GLIB_NS = "{http://www.gtk.org/introspection/glib/1.0}"

ELEMENT_KINDS = (
    "alias",
    "bitfield",
    "callback",
    "class",
    "constant",
    "enumeration",
    "function",
    "interface",
    "record",
    "union",
)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _parse_element(node: ET.Element, kind: str) -> GirElement | None:
    name = node.get("name")
    if not name:
        return None
    c_type = node.get(f"{C_NS}type") or node.get(f"{GLIB_NS}type-name") or node.get(
        f"{C_NS}identifier"
    )
    implements = [
        impl.get("name", "")
        for impl in node
        if _local_name(impl.tag) == "implements" and impl.get("name")
    ]
    return GirElement(
        kind=kind,
        name=name,
        c_type=c_type,
        parent=node.get("parent"),
        implements=implements,
    )


def parse_gir(text: str, path: Path | None = None) -> GirModule:
    """
    Parse GIR XML text into a GirModule.

    Args:
        text: Document contents
        path: Source file, used in error messages

    Returns:
        The parsed module

    Raises:
        ParseError: If the XML is malformed or has no usable <namespace>
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ParseError(f"Malformed GIR document: {e}", path) from e

    dependencies: list[str] = []
    namespace_node: ET.Element | None = None
    for child in root:
        tag = _local_name(child.tag)
        if tag == "include":
            name, version = child.get("name"), child.get("version")
            if name and version:
                package_name = f"{name}-{version}"
                if package_name not in dependencies:
                    dependencies.append(package_name)
        elif tag == "namespace" and namespace_node is None:
            namespace_node = child

    if namespace_node is None:
        raise ParseError("GIR document has no <namespace> element", path)

    namespace = namespace_node.get("name")
    version = namespace_node.get("version")
    if not namespace or not version:
        raise ParseError("<namespace> requires 'name' and 'version' attributes", path)

    elements: list[GirElement] = []
    for node in namespace_node:
        kind = _local_name(node.tag)
        if kind not in ELEMENT_KINDS:
            continue
        element = _parse_element(node, kind)
        if element is not None:
            elements.append(element)

    return GirModule(
        namespace=namespace,
        version=version,
        dependencies=dependencies,
        elements=elements,
        path=path,
    )


def parse_gir_file(path: Path) -> GirModule:
    """Read a .gir file as UTF-8 and parse it."""
    logger.info(f"Parsing {path}...")
    return parse_gir(path.read_text(encoding="utf-8"), path)
