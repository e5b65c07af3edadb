"""Loot rolls for defeated creatures.

Two policies, chosen per template:

- **weighted** -- the template carries its own ``drop_table``; exactly one
  row is picked, each weight normalised against the table total.
- **independent** -- the template names a shared ``loot_table_id``; every
  entry is rolled on its own chance and a success yields a quantity in
  the entry's range.

Rolled drops then pass through :func:`filter_droppable`, which removes
unknown and non-droppable items before anything is granted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from mob_engine.ir.creatures import CreatureTemplate, WeightedDrop
    from mob_engine.ir.items import LootTable
    from mob_engine.sim.content.registry import ContentRegistry
    from mob_engine.sim.core.rng import GameRNG

logger = logging.getLogger(__name__)


class LootDrop(BaseModel):
    """A quantity of one item won from a kill."""

    item_id: str
    quantity: int = Field(default=1, ge=1)


def roll_weighted_drop(drop_table: list[WeightedDrop], rng: GameRNG) -> list[LootDrop]:
    """Pick a single row from a creature-specific weighted table."""
    item_id = rng.weighted_choice((d.item_id, d.weight) for d in drop_table)
    if item_id is None:
        return []
    return [LootDrop(item_id=item_id)]


def roll_loot_table(table: LootTable, rng: GameRNG) -> list[LootDrop]:
    """Roll every entry of a shared table independently."""
    drops: list[LootDrop] = []
    for entry in table.entries:
        if rng.random_float() < entry.chance:
            qty = rng.random_int(entry.min_quantity, entry.max_quantity)
            drops.append(LootDrop(item_id=entry.item_id, quantity=qty))
    return drops


def filter_droppable(drops: list[LootDrop], content: ContentRegistry) -> list[LootDrop]:
    """Drop unknown items (with a warning) and items flagged non-droppable."""
    kept: list[LootDrop] = []
    for drop in drops:
        item = content.get_item(drop.item_id)
        if item is None:
            logger.warning("Loot item %r not found, skipping", drop.item_id)
            continue
        if not item.droppable:
            logger.debug("Loot item %r is not droppable, skipping", drop.item_id)
            continue
        kept.append(drop)
    return kept


def roll_loot(template: CreatureTemplate, content: ContentRegistry, rng: GameRNG) -> list[LootDrop]:
    """Roll loot for one kill of *template* using its configured policy."""
    if template.drop_table:
        drops = roll_weighted_drop(template.drop_table, rng)
    elif template.loot_table_id:
        table = content.get_loot_table(template.loot_table_id)
        if table is None:
            logger.warning(
                "Loot table %r for template %r not found",
                template.loot_table_id, template.id,
            )
            return []
        drops = roll_loot_table(table, rng)
    else:
        return []
    return filter_droppable(drops, content)


def merge_drops(drops: list[LootDrop]) -> dict[str, int]:
    """Collapse drops into ``item_id -> total quantity``."""
    totals: dict[str, int] = {}
    for drop in drops:
        totals[drop.item_id] = totals.get(drop.item_id, 0) + drop.quantity
    return totals
