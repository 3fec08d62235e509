"""Local storage for weights, funnel snapshots and simulation scenarios."""

from funnel_landing.store.scenario_store import ScenarioStore, SimulationScenario
from funnel_landing.store.snapshot_store import CachedSnapshot, SnapshotStore
from funnel_landing.store.weight_store import StatusWeight, WeightKind, WeightStore, validate_weight

__all__ = [
    "CachedSnapshot",
    "ScenarioStore",
    "SimulationScenario",
    "SnapshotStore",
    "StatusWeight",
    "WeightKind",
    "WeightStore",
    "validate_weight",
]
