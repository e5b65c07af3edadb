"""Core runtime primitives for the mob encounter engine."""

from mob_engine.sim.core.entities import (
    CombatantStats,
    CreatureInstance,
    EquippedItem,
    PlayerRecord,
)
from mob_engine.sim.core.events import (
    CombatTick,
    CreatureRemoved,
    CreatureSpawned,
    EncounterEnded,
    EncounterStarted,
    EventBus,
    FactionStandingChanged,
    RemainsCreated,
)
from mob_engine.sim.core.rng import GameRNG
from mob_engine.sim.core.scheduler import ScheduledTask, Scheduler

__all__ = [
    # rng
    "GameRNG",
    # scheduler
    "ScheduledTask",
    "Scheduler",
    # entities
    "CombatantStats",
    "CreatureInstance",
    "EquippedItem",
    "PlayerRecord",
    # events
    "EventBus",
    "CreatureSpawned",
    "CreatureRemoved",
    "EncounterStarted",
    "CombatTick",
    "EncounterEnded",
    "RemainsCreated",
    "FactionStandingChanged",
]
