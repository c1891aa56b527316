from collections.abc import Sequence

from picserver.analysis.models import TestResult
from picserver.heuristics.registry import Heuristic
from picserver.metadata.models import ImageMetadata


class HeuristicBattery:
    """Runs an ordered set of independent heuristics against one image."""

    def __init__(self, heuristics: Sequence[tuple[str, Heuristic]]) -> None:
        self._heuristics = list(heuristics)

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self._heuristics]

    def run(self, meta: ImageMetadata) -> list[TestResult]:
        """Evaluate every heuristic; results keep the configured order."""
        return [
            TestResult(test_name=name, passed=bool(heuristic(meta)))
            for name, heuristic in self._heuristics
        ]
