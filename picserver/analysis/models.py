from collections.abc import AsyncIterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class UploadRequest:
    """Immutable view of one upload as delivered by the HTTP layer."""

    path: str
    declared_length: int | None  # None when Content-Length is missing or unusable
    content_type: str
    byte_stream: AsyncIterator[bytes]
    client: str = "unknown"


@dataclass(frozen=True)
class TestResult:
    """Outcome of a single heuristic."""

    __test__ = False  # not a pytest test class

    test_name: str
    passed: bool


@dataclass
class Verdict:
    """Overall result returned to the caller."""

    is_valid: bool = False
    name: str | None = None
    tests: tuple[TestResult, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        """Build the JSON payload; keys and tests keep their order."""
        payload: dict[str, object] = {"is_valid": self.is_valid}
        if self.name is not None:
            payload["name"] = self.name
        if self.is_valid:
            payload["tests"] = {result.test_name: result.passed for result in self.tests}
        return payload
