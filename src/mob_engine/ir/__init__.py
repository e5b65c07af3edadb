"""Immutable content schema for the mob encounter engine.

All realm content -- creature templates, items, loot tables, factions,
zones and their spawn slots -- is represented as Pydantic models that
serialise cleanly to/from JSON.  The :class:`ContentSet` is the top-level
container handed to the content registry.
"""

from .content_set import ContentSet
from .creatures import BaseStats, CreatureTemplate, LevelRange, WeightedDrop
from .factions import FactionDefinition, FactionStanding, standing_for
from .items import ItemDefinition, LootEntry, LootTable, StatBonus
from .zones import Placement, Position, SpawnSlot, ZoneDefinition

__all__ = [
    # content_set
    "ContentSet",
    # creatures
    "BaseStats",
    "CreatureTemplate",
    "LevelRange",
    "WeightedDrop",
    # factions
    "FactionDefinition",
    "FactionStanding",
    "standing_for",
    # items
    "ItemDefinition",
    "LootEntry",
    "LootTable",
    "StatBonus",
    # zones
    "Placement",
    "Position",
    "SpawnSlot",
    "ZoneDefinition",
]
