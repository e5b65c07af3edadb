"""Kill rewards: experience, currency and loot for one defeated creature.

Values:
- Experience: see :mod:`mob_engine.sim.rewards.experience`.
- Currency: ``currency_base * level`` plus integer jitter of up to 10%
  (at least 1) either way, never negative.
- Loot: see :mod:`mob_engine.sim.rewards.loot`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from mob_engine.sim.rewards.experience import ConLevel, consider, experience_for_kill
from mob_engine.sim.rewards.loot import LootDrop, merge_drops, roll_loot

if TYPE_CHECKING:
    from mob_engine.ir.creatures import CreatureTemplate
    from mob_engine.sim.content.registry import ContentRegistry
    from mob_engine.sim.core.entities import CreatureInstance
    from mob_engine.sim.core.rng import GameRNG


class RewardResult(BaseModel):
    """Transient reward summary, consumed by the player store and listeners."""

    experience: int = 0
    currency: int = 0
    items: list[LootDrop] = Field(default_factory=list)
    con_level: ConLevel = ConLevel.EVEN

    def item_totals(self) -> dict[str, int]:
        return merge_drops(self.items)


def generate_currency_reward(template: CreatureTemplate, level: int, rng: GameRNG) -> int:
    """Level-scaled currency with a small random jitter."""
    base = template.currency_base * level
    if base <= 0:
        return 0
    jitter = max(1, base // 10)
    return max(0, base + rng.random_int(-jitter, jitter))


def resolve_kill_reward(
    content: ContentRegistry,
    rng: GameRNG,
    creature: CreatureInstance,
    template: CreatureTemplate,
    player_level: int,
    zone_modifier: float = 1.0,
) -> RewardResult:
    """Compute everything a kill of *creature* is worth to the player.

    Parameters
    ----------
    content:
        Content registry for loot tables and item flags.
    rng:
        Seeded RNG for currency and loot rolls.
    creature:
        The defeated instance; its rolled level drives every formula.
    template:
        The instance's template (experience/currency bases, loot policy).
    player_level:
        The killer's level at the moment of the kill.
    zone_modifier:
        Zone experience modifier.
    """
    return RewardResult(
        experience=experience_for_kill(
            creature.level, player_level, template.xp_base, zone_modifier,
        ),
        currency=generate_currency_reward(template, creature.level, rng),
        items=roll_loot(template, content, rng),
        con_level=consider(creature.level, player_level),
    )
