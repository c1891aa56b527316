import struct
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from picserver.metadata.base import BaseMetadataExtractor
from picserver.metadata.exceptions import (
    MetadataNotFoundError,
    StagedFileOpenError,
    UnsupportedContainerError,
)
from picserver.metadata.models import ImageMetadata
from picserver.metadata.xmp_parser import parse_xmp_packet

XMP_APP1_HEADER = b"http://ns.adobe.com/xap/1.0/\x00"

# Multi-picture JPEGs are still JPEG streams with XMP in APP1.
CONTAINER_ALIASES = {"MPO": "JPEG"}


class PillowMetadataExtractor(BaseMetadataExtractor):
    """Extracts XMP metadata from images using Pillow."""

    _INFO_KEYS = ("xmp", "XML:com.adobe.xmp")

    def extract(self, path: Path) -> ImageMetadata:
        with self._session(path) as image:
            container_type = self._container_type(image)
            packet = self._find_packet(image)
        if packet is None:
            raise MetadataNotFoundError(f"No XMP packet in {container_type or 'image'}")
        return parse_xmp_packet(packet, container_type=container_type)

    @contextmanager
    def _session(self, path: Path) -> Iterator[Image.Image]:
        """Open the staged file; the handle is closed on every exit path."""
        try:
            image = Image.open(path)
        except UnidentifiedImageError as exc:
            raise UnsupportedContainerError(f"Unrecognized image container: {exc}") from exc
        except Image.DecompressionBombError as exc:
            raise UnsupportedContainerError(f"Image rejected by Pillow: {exc}") from exc
        except OSError as exc:
            raise StagedFileOpenError(f"Cannot open staged file {path}: {exc}") from exc
        except (ValueError, struct.error) as exc:
            raise UnsupportedContainerError(f"Corrupt image container: {exc}") from exc
        with image:
            yield image

    def _container_type(self, image: Image.Image) -> str:
        name = (image.format or "").upper()
        return CONTAINER_ALIASES.get(name, name)

    def _find_packet(self, image: Image.Image) -> bytes | None:
        for marker, payload in getattr(image, "applist", []):
            if marker == "APP1" and payload.startswith(XMP_APP1_HEADER):
                return payload[len(XMP_APP1_HEADER):]
        for key in self._INFO_KEYS:
            value = image.info.get(key)
            if isinstance(value, str):
                return value.encode("utf-8")
            if isinstance(value, bytes):
                return value
        return None
