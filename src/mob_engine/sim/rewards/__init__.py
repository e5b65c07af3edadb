"""Rewards module -- experience, currency, loot, faction standing and death recovery."""

from mob_engine.sim.rewards.death import recover_from_death
from mob_engine.sim.rewards.experience import (
    ConLevel,
    base_experience,
    consider,
    experience_for_kill,
)
from mob_engine.sim.rewards.loot import LootDrop, roll_loot
from mob_engine.sim.rewards.reputation import kill_faction_deltas, propagate_kill
from mob_engine.sim.rewards.resolver import RewardResult, resolve_kill_reward

__all__ = [
    "ConLevel",
    "LootDrop",
    "RewardResult",
    "base_experience",
    "consider",
    "experience_for_kill",
    "kill_faction_deltas",
    "propagate_kill",
    "recover_from_death",
    "resolve_kill_reward",
    "roll_loot",
]
