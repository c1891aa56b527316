import os
import tempfile
from collections.abc import AsyncIterator, Iterator
from contextlib import contextmanager
from pathlib import Path

from picserver.logging.logger import Log


class StagedFile:
    """Uniquely named transient copy of one request's bytes."""

    PREFIX = "picserver."

    def __init__(self, path: Path) -> None:
        self.path = path

    @classmethod
    @contextmanager
    def create(cls, directory: Path | None = None) -> Iterator["StagedFile"]:
        """Create an empty staged file, removed again when the block exits.

        Raises:
            OSError: if the file cannot be created.
        """
        fd, name = tempfile.mkstemp(prefix=cls.PREFIX, dir=directory)
        os.close(fd)
        staged = cls(Path(name))
        try:
            yield staged
        finally:
            staged.remove()

    async def write_from(self, chunks: AsyncIterator[bytes], limit: int) -> int:
        """Copy the streamed body to disk and return the number of bytes written.

        Raises:
            ValueError: if the body grows beyond ``limit`` bytes.
        """
        written = 0
        with self.path.open("wb") as handle:
            async for chunk in chunks:
                written += len(chunk)
                if written > limit:
                    raise ValueError(f"Body exceeds {limit} bytes")
                handle.write(chunk)
        return written

    def remove(self) -> None:
        """Delete the file; a failure is logged, never raised."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            Log.warning(f"Failed to remove staged file {self.path}: {exc}")
