from abc import ABC, abstractmethod
from contextlib import ExitStack
from dataclasses import dataclass, field

from picserver.analysis.models import TestResult, UploadRequest, Verdict
from picserver.analysis.staging import StagedFile
from picserver.metadata.models import ImageMetadata


@dataclass(slots=True)
class AnalysisContext:
    request: UploadRequest
    resources: ExitStack
    basename: str | None = None
    staged: StagedFile | None = None
    bytes_staged: int = 0
    metadata: ImageMetadata | None = None
    test_results: list[TestResult] = field(default_factory=list)
    is_valid: bool = False

    def to_verdict(self) -> Verdict:
        if not self.is_valid:
            return Verdict(is_valid=False, name=self.basename)
        return Verdict(is_valid=True, name=self.basename, tests=tuple(self.test_results))


class PipelineStep(ABC):
    @abstractmethod
    async def run(self, context: AnalysisContext) -> AnalysisContext:
        raise NotImplementedError
