from picserver.heuristics.battery import HeuristicBattery
from picserver.heuristics.factory import HeuristicBatteryFactory
from picserver.heuristics.registry import HeuristicRegistry, registry

__all__ = ["HeuristicBattery", "HeuristicBatteryFactory", "HeuristicRegistry", "registry"]
