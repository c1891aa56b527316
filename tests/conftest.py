import io
from collections.abc import Callable, Sequence

import pytest
from PIL import Image
from PIL.PngImagePlugin import PngInfo

from picserver.metadata.pillow_adapter import XMP_APP1_HEADER

XmpBuilder = Callable[..., bytes]


def _history_xml(history: Sequence[tuple[str, str]]) -> str:
    if not history:
        return ""
    items = "".join(
        '<rdf:li rdf:parseType="Resource">'
        f"<stEvt:action>{action}</stEvt:action>"
        f"<stEvt:softwareAgent>{agent}</stEvt:softwareAgent>"
        "</rdf:li>"
        for action, agent in history
    )
    return f"<xmpMM:History><rdf:Seq>{items}</rdf:Seq></xmpMM:History>"


def _app1_segment(packet: bytes) -> bytes:
    segment = XMP_APP1_HEADER + packet
    return b"\xff\xe1" + (len(segment) + 2).to_bytes(2, "big") + segment


@pytest.fixture()
def make_xmp() -> XmpBuilder:
    """Build an XMP packet with the given xmp: properties and history."""

    def build(
        creator_tool: str | None = None,
        create_date: str | None = None,
        modify_date: str | None = None,
        history: Sequence[tuple[str, str]] = (),
    ) -> bytes:
        attributes = {
            "xmp:CreatorTool": creator_tool,
            "xmp:CreateDate": create_date,
            "xmp:ModifyDate": modify_date,
        }
        rendered = " ".join(f'{key}="{value}"' for key, value in attributes.items() if value)
        packet = (
            '<?xpacket begin="\ufeff" id="W5M0MpCehiHzreSzNTczkc9d"?>'
            '<x:xmpmeta xmlns:x="adobe:ns:meta/">'
            '<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">'
            '<rdf:Description rdf:about=""'
            ' xmlns:xmp="http://ns.adobe.com/xap/1.0/"'
            ' xmlns:xmpMM="http://ns.adobe.com/xap/1.0/mm/"'
            ' xmlns:stEvt="http://ns.adobe.com/xap/1.0/sType/ResourceEvent#"'
            f" {rendered}>"
            f"{_history_xml(history)}"
            "</rdf:Description>"
            "</rdf:RDF>"
            "</x:xmpmeta>"
            '<?xpacket end="w"?>'
        )
        return packet.encode("utf-8")

    return build


@pytest.fixture()
def make_jpeg() -> Callable[[bytes | None], bytes]:
    """Encode a small JPEG, embedding the XMP packet in an APP1 segment."""

    def build(packet: bytes | None = None) -> bytes:
        buf = io.BytesIO()
        Image.new("RGB", (16, 16), "white").save(buf, format="JPEG")
        data = buf.getvalue()
        if packet is None:
            return data
        return data[:2] + _app1_segment(packet) + data[2:]

    return build


@pytest.fixture()
def make_png() -> Callable[[bytes | None], bytes]:
    """Encode a small PNG, embedding the XMP packet in an iTXt chunk."""

    def build(packet: bytes | None = None) -> bytes:
        buf = io.BytesIO()
        info = PngInfo()
        if packet is not None:
            info.add_itxt("XML:com.adobe.xmp", packet.decode("utf-8"))
        Image.new("RGB", (16, 16), "white").save(buf, format="PNG", pnginfo=info)
        return buf.getvalue()

    return build


@pytest.fixture()
def make_mpo() -> Callable[[bytes | None], bytes]:
    """Encode a two-frame MPO, embedding the XMP packet in the first frame's APP1."""

    def build(packet: bytes | None = None) -> bytes:
        buf = io.BytesIO()
        first = Image.new("RGB", (16, 16), "white")
        second = Image.new("RGB", (16, 16), "black")
        first.save(buf, format="MPO", save_all=True, append_images=[second])
        data = buf.getvalue()
        if packet is None:
            return data
        return data[:2] + _app1_segment(packet) + data[2:]

    return build
