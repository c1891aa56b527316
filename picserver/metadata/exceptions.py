class MetadataExtractionError(Exception):
    """Base exception for all metadata extraction failures."""


class StagedFileOpenError(MetadataExtractionError):
    """Raised when the staged file cannot be opened for reading."""


class MetadataNotFoundError(MetadataExtractionError):
    """Raised when the image carries no XMP packet or a malformed one."""


class UnsupportedContainerError(MetadataExtractionError):
    """Raised when the image container is unknown or not accepted."""
