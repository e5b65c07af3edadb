"""Attack resolution: hit, dodge, damage, critical.

Strict sequential pipeline, one roll per step, in this order:

    1. hit check   -- miss if ``roll >= hit_chance``
    2. dodge check -- dodge if ``roll < dodge_chance``
    3. base damage -- ``max(1, offense - defense)``
    4. variance    -- uniform integer jitter of +/-30% of base, floor 1
    5. critical    -- independent roll, ``floor(damage * 1.5)``

Resolved damage on a hit is always >= 1.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from mob_engine.sim.core.entities import CombatantStats
    from mob_engine.sim.core.rng import GameRNG

BASE_HIT_CHANCE = 0.80
HIT_CHANCE_PER_LEVEL = 0.02
MIN_HIT_CHANCE = 0.05
MAX_HIT_CHANCE = 0.95
MAX_DODGE_CHANCE = 0.20
VARIANCE_FRACTION = 0.30
CRIT_CHANCE = 0.15
CRIT_MULTIPLIER = 1.5


class AttackOutcome(str, Enum):
    MISS = "miss"
    DODGE = "dodge"
    HIT = "hit"


class Ability(BaseModel):
    """Optional override supplied by a special attack."""

    name: str
    damage: int | None = None
    """Replaces the attacker's offense when set."""

    bonus: int = 0
    """Flat offense added on top of either offense source."""

    accuracy_bonus: int = 0
    crit_chance: float | None = Field(default=None, ge=0.0, le=1.0)


class AttackResult(BaseModel):
    outcome: AttackOutcome
    damage: int = 0
    critical: bool = False

    @property
    def landed(self) -> bool:
        return self.outcome == AttackOutcome.HIT


# ---------------------------------------------------------------------------
# Formula pieces
# ---------------------------------------------------------------------------

def base_damage(offense: int, defense: int) -> int:
    """``max(1, offense - defense)`` -- never zero or negative."""
    return max(1, offense - defense)


def hit_chance(attacker: CombatantStats, defender: CombatantStats, accuracy_bonus: int = 0) -> float:
    """Chance to hit from level delta and accuracy versus evasion."""
    chance = (
        BASE_HIT_CHANCE
        + HIT_CHANCE_PER_LEVEL * (attacker.level - defender.level)
        + (attacker.accuracy + accuracy_bonus - defender.evasion) / 200
    )
    return min(MAX_HIT_CHANCE, max(MIN_HIT_CHANCE, chance))


def dodge_chance(defender: CombatantStats) -> float:
    """``evasion / 100``, capped at 20%."""
    return min(max(0, defender.evasion) / 100, MAX_DODGE_CHANCE)


def apply_variance(base: int, rng: GameRNG) -> int:
    """Jitter *base* by up to 30% either way, floored at 1."""
    spread = math.floor(base * VARIANCE_FRACTION)
    if spread <= 0:
        return max(1, base)
    return max(1, base + rng.random_int(-spread, spread))


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def resolve_attack(
    attacker: CombatantStats,
    defender: CombatantStats,
    rng: GameRNG,
    ability: Ability | None = None,
) -> AttackResult:
    """Resolve a single attack.  Stateless apart from the injected *rng*."""
    accuracy_bonus = ability.accuracy_bonus if ability else 0

    if rng.random_float() >= hit_chance(attacker, defender, accuracy_bonus):
        return AttackResult(outcome=AttackOutcome.MISS)

    if rng.random_float() < dodge_chance(defender):
        return AttackResult(outcome=AttackOutcome.DODGE)

    offense = attacker.attack
    if ability is not None:
        if ability.damage is not None:
            offense = ability.damage
        offense += ability.bonus

    damage = apply_variance(base_damage(offense, defender.defense), rng)

    crit_chance = CRIT_CHANCE
    if ability is not None and ability.crit_chance is not None:
        crit_chance = ability.crit_chance
    critical = rng.random_float() < crit_chance
    if critical:
        damage = max(1, math.floor(damage * CRIT_MULTIPLIER))

    return AttackResult(outcome=AttackOutcome.HIT, damage=damage, critical=critical)
