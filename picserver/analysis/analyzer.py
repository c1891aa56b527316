import asyncio
from contextlib import ExitStack

from picserver.analysis.exceptions import InvalidRequestError, StagingError
from picserver.analysis.models import UploadRequest, Verdict
from picserver.analysis.pipeline import AnalysisContext, PipelineStep
from picserver.analysis.steps import (
    CheckContainerStep,
    ExtractMetadataStep,
    RunHeuristicsStep,
    StageUploadStep,
    ValidateRequestStep,
)
from picserver.analysis.validator import RequestValidator
from picserver.config.settings import Settings
from picserver.heuristics.factory import HeuristicBatteryFactory
from picserver.logging.logger import Log
from picserver.metadata.base import BaseMetadataExtractor
from picserver.metadata.exceptions import MetadataExtractionError
from picserver.metadata.pillow_adapter import PillowMetadataExtractor


class Analyzer:
    """Orchestrates the analysis pipeline for one upload at a time.

    Pipeline: validate -> stage -> extract -> check container -> run heuristics.
    The first failing step ends the run; every outcome becomes a Verdict.
    Resources registered by the steps are released before the Verdict is
    returned, whichever step stopped the run.
    """

    def __init__(
        self,
        steps: list[PipelineStep],
        timeout_seconds: float | None = None,
    ) -> None:
        self._steps = steps
        self._timeout_seconds = timeout_seconds

    async def analyze(self, request: UploadRequest) -> Verdict:
        """Run the pipeline for a request and return its Verdict. Never raises."""
        Log.info(
            f"Request from {request.client} of {request.declared_length} bytes",
            client=request.client,
        )
        with ExitStack() as resources:
            context = AnalysisContext(request=request, resources=resources)
            try:
                await asyncio.wait_for(self._run_steps(context), timeout=self._timeout_seconds)
            except InvalidRequestError as exc:
                Log.info(f"Rejected request: {exc}", client=request.client, stage="validate")
            except StagingError as exc:
                Log.error(f"Staging failed: {exc}", client=request.client, stage="stage")
            except MetadataExtractionError as exc:
                Log.warning(
                    f"Metadata extraction failed ({type(exc).__name__}): {exc}",
                    client=request.client,
                    stage="extract",
                )
            except asyncio.TimeoutError:
                Log.error(
                    f"Analysis timed out after {self._timeout_seconds}s",
                    client=request.client,
                )
            except Exception as exc:
                Log.error(f"Unexpected analysis failure: {exc!r}", client=request.client)

        verdict = context.to_verdict()
        if verdict.is_valid:
            Log.info(
                f"Analyzed {verdict.name}: "
                + ", ".join(f"{r.test_name}={r.passed}" for r in verdict.tests),
                client=request.client,
            )
        return verdict

    async def _run_steps(self, context: AnalysisContext) -> None:
        for step in self._steps:
            context = await step.run(context)


def build_analyzer(
    settings: Settings,
    extractor: BaseMetadataExtractor | None = None,
) -> Analyzer:
    """Build an Analyzer with all required components."""
    battery = HeuristicBatteryFactory.create(settings)
    steps: list[PipelineStep] = [
        ValidateRequestStep(RequestValidator()),
        StageUploadStep(staging_dir=settings.staging_dir),
        ExtractMetadataStep(extractor if extractor is not None else PillowMetadataExtractor()),
        CheckContainerStep(),
        RunHeuristicsStep(battery),
    ]
    return Analyzer(steps=steps, timeout_seconds=settings.request_timeout_seconds)
