from collections.abc import Iterable
from pathlib import Path

from starlette.concurrency import run_in_threadpool

from picserver.analysis.exceptions import StagingError
from picserver.analysis.pipeline import AnalysisContext, PipelineStep
from picserver.analysis.staging import StagedFile
from picserver.analysis.validator import RequestValidator
from picserver.heuristics.battery import HeuristicBattery
from picserver.logging.logger import Log
from picserver.metadata.base import BaseMetadataExtractor
from picserver.metadata.exceptions import UnsupportedContainerError

ACCEPTED_CONTAINERS = frozenset({"JPEG"})


class ValidateRequestStep(PipelineStep):
    def __init__(self, validator: RequestValidator) -> None:
        self._validator = validator

    async def run(self, context: AnalysisContext) -> AnalysisContext:
        context.basename = self._validator.validate(context.request)
        return context


class StageUploadStep(PipelineStep):
    def __init__(self, staging_dir: Path | None = None) -> None:
        self._staging_dir = staging_dir

    async def run(self, context: AnalysisContext) -> AnalysisContext:
        limit = context.request.declared_length
        if limit is None:
            raise StagingError("Cannot stage a body of unknown length")
        try:
            staged = context.resources.enter_context(StagedFile.create(self._staging_dir))
        except OSError as exc:
            raise StagingError(f"Cannot create staged file: {exc}") from exc
        context.staged = staged
        try:
            context.bytes_staged = await staged.write_from(context.request.byte_stream, limit)
        except (OSError, ValueError) as exc:
            raise StagingError(f"Cannot write staged file: {exc}") from exc
        Log.debug(f"Staged {context.bytes_staged} bytes to {staged.path}")
        return context


class ExtractMetadataStep(PipelineStep):
    def __init__(self, extractor: BaseMetadataExtractor) -> None:
        self._extractor = extractor

    async def run(self, context: AnalysisContext) -> AnalysisContext:
        if context.staged is None:
            raise ValueError("AnalysisContext.staged must be set before extraction")
        context.metadata = await run_in_threadpool(self._extractor.extract, context.staged.path)
        Log.debug(
            f"Extracted {len(context.metadata.properties)} XMP properties "
            f"from {context.metadata.container_type} image"
        )
        return context


class CheckContainerStep(PipelineStep):
    def __init__(self, accepted: Iterable[str] = ACCEPTED_CONTAINERS) -> None:
        self._accepted = frozenset(accepted)

    async def run(self, context: AnalysisContext) -> AnalysisContext:
        if context.metadata is None:
            raise ValueError("AnalysisContext.metadata must be set before the type check")
        container_type = context.metadata.container_type
        if container_type not in self._accepted:
            raise UnsupportedContainerError(
                f"Container '{container_type}' is not one of {sorted(self._accepted)}"
            )
        return context


class RunHeuristicsStep(PipelineStep):
    def __init__(self, battery: HeuristicBattery) -> None:
        self._battery = battery

    async def run(self, context: AnalysisContext) -> AnalysisContext:
        if context.metadata is None:
            raise ValueError("AnalysisContext.metadata must be set before running heuristics")
        context.test_results = self._battery.run(context.metadata)
        context.metadata = None
        context.is_valid = True
        return context
