from picserver.analysis.exceptions import InvalidRequestError
from picserver.analysis.models import UploadRequest
from picserver.analysis.sanitizer import sanitize

MAX_IMAGE_SIZE = 128 * 1024 * 1024
ACCEPTED_CONTENT_TYPE = "application/x-www-form-urlencoded"


def path_segments(path: str) -> list[str]:
    """Split a request path into its non-empty segments."""
    return [segment for segment in path.split("/") if segment]


class RequestValidator:
    """Enforces upload preconditions before any expensive work begins."""

    def validate(self, request: UploadRequest) -> str:
        """Return the accepted basename.

        Raises:
            InvalidRequestError: on the first failed check, with the reason.
        """
        segments = path_segments(request.path)
        # for now, the single path segment is the file basename
        if len(segments) != 1:
            raise InvalidRequestError(
                f"Expected exactly one path segment, got {len(segments)}"
            )
        basename = segments[0]
        if not sanitize(basename):
            raise InvalidRequestError("Filename contains disallowed characters or is too long")

        if request.declared_length is None:
            raise InvalidRequestError("Content length is unknown")
        if request.declared_length > MAX_IMAGE_SIZE:
            raise InvalidRequestError(
                f"Declared length {request.declared_length} exceeds {MAX_IMAGE_SIZE} bytes"
            )

        # multipart/form-data is not handled
        if request.content_type != ACCEPTED_CONTENT_TYPE:
            raise InvalidRequestError(f"Unsupported content type '{request.content_type}'")

        return basename
