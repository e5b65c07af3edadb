"""Combat mechanics for the encounter engine.

Usage::

    from mob_engine.sim.mechanics import resolve_attack, base_damage
"""

from .damage import (
    Ability,
    AttackOutcome,
    AttackResult,
    apply_variance,
    base_damage,
    dodge_chance,
    hit_chance,
    resolve_attack,
)

__all__ = [
    "Ability",
    "AttackOutcome",
    "AttackResult",
    "apply_variance",
    "base_damage",
    "dodge_chance",
    "hit_chance",
    "resolve_attack",
]
