"""Spawning module -- live creature registry and lootable remains."""

from mob_engine.sim.spawning.registry import SpawnRegistry, roll_instance, scale_stat
from mob_engine.sim.spawning.remains import Remains, RemainsRegistry

__all__ = [
    "Remains",
    "RemainsRegistry",
    "SpawnRegistry",
    "roll_instance",
    "scale_stat",
]
