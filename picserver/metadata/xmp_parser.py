"""Parses a raw XMP packet into ImageMetadata.

Only the parts of the RDF/XML serialization that XMP writers actually emit
are handled: simple properties (as attributes of rdf:Description or as leaf
elements), rdf:resource references, and rdf:Seq/Bag/Alt arrays whose items
are plain text or flat structures.
"""

from collections.abc import Mapping
from xml.etree import ElementTree

from picserver.metadata.exceptions import MetadataNotFoundError
from picserver.metadata.models import NS_RDF, ArrayItem, ImageMetadata, qualified_name

_RDF_ROOT = qualified_name(NS_RDF, "RDF")
_RDF_DESCRIPTION = qualified_name(NS_RDF, "Description")
_RDF_LI = qualified_name(NS_RDF, "li")
_RDF_RESOURCE = qualified_name(NS_RDF, "resource")
_RDF_CONTAINERS = frozenset(
    qualified_name(NS_RDF, kind) for kind in ("Seq", "Bag", "Alt")
)
_XML_NS = "{http://www.w3.org/XML/1998/namespace}"


def parse_xmp_packet(packet: bytes, container_type: str) -> ImageMetadata:
    """Build ImageMetadata from the bytes of an XMP packet.

    Raises:
        MetadataNotFoundError: if the packet is empty or not well-formed XML.
    """
    payload = packet.strip(b"\x00 \t\r\n")
    if not payload:
        raise MetadataNotFoundError("XMP packet is empty")
    try:
        root = ElementTree.fromstring(payload)
    except ElementTree.ParseError as exc:
        raise MetadataNotFoundError(f"Malformed XMP packet: {exc}") from exc

    rdf_roots = list(root.iter(_RDF_ROOT))
    if not rdf_roots:
        raise MetadataNotFoundError("XMP packet has no rdf:RDF element")

    properties: dict[str, str] = {}
    arrays: dict[str, tuple[ArrayItem, ...]] = {}
    for rdf in rdf_roots:
        for description in rdf.findall(_RDF_DESCRIPTION):
            properties.update(_attribute_properties(description))
            for element in description:
                _collect_element(element, properties, arrays)
    return ImageMetadata(container_type=container_type, properties=properties, arrays=arrays)


def _attribute_properties(element: ElementTree.Element) -> dict[str, str]:
    return {
        key: value
        for key, value in element.attrib.items()
        if not key.startswith(f"{{{NS_RDF}}}") and not key.startswith(_XML_NS)
    }


def _collect_element(
    element: ElementTree.Element,
    properties: dict[str, str],
    arrays: dict[str, tuple[ArrayItem, ...]],
) -> None:
    container = next((child for child in element if child.tag in _RDF_CONTAINERS), None)
    if container is not None:
        arrays[element.tag] = tuple(_array_item(li) for li in container.iter(_RDF_LI))
        return
    if _RDF_RESOURCE in element.attrib:
        properties[element.tag] = element.attrib[_RDF_RESOURCE]
        return
    if len(element) == 0:
        properties[element.tag] = (element.text or "").strip()


def _array_item(li: ElementTree.Element) -> ArrayItem:
    fields = _structure_fields(li)
    if fields:
        return fields
    return (li.text or "").strip()


def _structure_fields(element: ElementTree.Element) -> Mapping[str, str]:
    # parseType="Resource" items put fields directly on rdf:li; others nest an rdf:Description
    fields = _attribute_properties(element)
    for child in element:
        if child.tag == _RDF_DESCRIPTION:
            fields.update(_structure_fields(child))
        elif len(child) == 0:
            fields[child.tag] = (child.text or "").strip()
    return fields
