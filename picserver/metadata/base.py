from abc import ABC, abstractmethod
from pathlib import Path

from picserver.metadata.models import ImageMetadata


class BaseMetadataExtractor(ABC):
    """Contract for all image metadata extraction adapters."""

    @abstractmethod
    def extract(self, path: Path) -> ImageMetadata:
        """Extract embedded XMP metadata from a staged image file.

        Args:
            path: Location of the staged upload.

        Returns:
            ImageMetadata carrying the container type and parsed properties.

        Raises:
            StagedFileOpenError: if the file cannot be opened.
            MetadataNotFoundError: if no well-formed XMP packet is present.
            UnsupportedContainerError: if the container cannot be identified.
        """
