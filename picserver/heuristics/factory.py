from picserver.config.settings import Settings
from picserver.heuristics import builtin  # noqa: F401  (registers the built-in heuristics)
from picserver.heuristics.battery import HeuristicBattery
from picserver.heuristics.registry import HeuristicRegistry, registry


class HeuristicBatteryFactory:
    """Creates the configured heuristic battery."""

    @classmethod
    def create(
        cls,
        settings: Settings,
        source: HeuristicRegistry | None = None,
    ) -> HeuristicBattery:
        source = source if source is not None else registry
        names = settings.heuristics
        if not names:
            raise ValueError("At least one heuristic must be configured")
        selected = []
        for name in names:
            heuristic = source.get(name)
            if heuristic is None:
                raise ValueError(
                    f"Unknown heuristic '{name}'. Choose from: {source.names()}"
                )
            selected.append((name, heuristic))
        return HeuristicBattery(selected)
