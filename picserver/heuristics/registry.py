from collections.abc import Callable

from picserver.metadata.models import ImageMetadata

Heuristic = Callable[[ImageMetadata], bool]


class HeuristicRegistry:
    """Named heuristics available to a battery, in registration order."""

    def __init__(self) -> None:
        self._heuristics: dict[str, Heuristic] = {}

    def register(self, name: str) -> Callable[[Heuristic], Heuristic]:
        """Decorator registering a predicate under ``name``."""

        def decorator(func: Heuristic) -> Heuristic:
            if name in self._heuristics:
                raise ValueError(f"Heuristic '{name}' is already registered")
            self._heuristics[name] = func
            return func

        return decorator

    def get(self, name: str) -> Heuristic | None:
        return self._heuristics.get(name)

    def names(self) -> list[str]:
        return list(self._heuristics)


registry = HeuristicRegistry()
