"""Lootable remains left behind by defeated creatures.

Remains hold the loot a kill produced until the player claims it or the
remains decay.  Each remains record arms one expiry task on creation;
looting the last item removes the remains and cancels that task.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from mob_engine.ir.zones import Position
from mob_engine.sim.core.events import RemainsCreated
from mob_engine.sim.rewards.loot import LootDrop, merge_drops

if TYPE_CHECKING:
    from mob_engine.sim.content.registry import ContentRegistry
    from mob_engine.sim.core.entities import CreatureInstance
    from mob_engine.sim.core.events import EventBus
    from mob_engine.sim.core.scheduler import ScheduledTask, Scheduler
    from mob_engine.sim.player_store import PlayerStore

logger = logging.getLogger(__name__)


class Remains(BaseModel):
    """Unclaimed loot lying where a creature died."""

    id: str = Field(default_factory=lambda: f"remains_{uuid.uuid4().hex[:12]}")
    zone_id: str
    position: Position
    instance_id: str
    """The creature instance these remains came from."""

    name: str
    items: list[LootDrop] = Field(default_factory=list)
    created_at: float = 0.0
    expires_at: float = 0.0

    @property
    def empty(self) -> bool:
        return not self.items


class RemainsRegistry:
    """Tracks remains per zone and expires them on the scheduler."""

    def __init__(
        self,
        content: ContentRegistry,
        scheduler: Scheduler,
        bus: EventBus | None = None,
        lifetime: float = 300.0,
    ) -> None:
        self.content = content
        self.scheduler = scheduler
        self.bus = bus
        self.lifetime = lifetime
        self._remains: dict[str, Remains] = {}
        self._expiry: dict[str, ScheduledTask] = {}

    # -- creation ------------------------------------------------------------

    def create(self, creature: CreatureInstance, items: list[LootDrop]) -> Remains | None:
        """Leave remains holding *items* on the creature's tile.

        Returns ``None`` when there is nothing to hold or the tile is not
        walkable; the caller then grants the items directly.
        """
        if not items:
            return None
        pos = creature.position
        if not self.content.is_walkable(creature.zone_id, pos.x, pos.y):
            logger.debug("No remains for %r: tile (%d, %d) not walkable", creature.id, pos.x, pos.y)
            return None

        now = self.scheduler.now
        remains = Remains(
            zone_id=creature.zone_id,
            position=pos,
            instance_id=creature.id,
            name=f"{creature.name}'s remains",
            items=list(items),
            created_at=now,
            expires_at=now + self.lifetime,
        )
        self._remains[remains.id] = remains
        self._expiry[remains.id] = self.scheduler.call_later(self.lifetime, self._expire, remains.id)
        if self.bus is not None:
            self.bus.publish(RemainsCreated(
                zone_id=remains.zone_id,
                remains_id=remains.id,
                instance_id=creature.id,
                item_count=len(remains.items),
            ))
        return remains

    # -- queries -------------------------------------------------------------

    def get(self, remains_id: str) -> Remains | None:
        return self._remains.get(remains_id)

    def in_zone(self, zone_id: str) -> list[Remains]:
        return [r for r in self._remains.values() if r.zone_id == zone_id]

    def at_position(self, zone_id: str, x: int, y: int) -> list[Remains]:
        return [
            r for r in self._remains.values()
            if r.zone_id == zone_id and r.position.x == x and r.position.y == y
        ]

    # -- looting -------------------------------------------------------------

    def loot_item(self, remains_id: str, index: int, store: PlayerStore) -> LootDrop | None:
        """Move one item stack from the remains into the player's inventory."""
        remains = self._remains.get(remains_id)
        if remains is None:
            logger.debug("Loot from %r ignored: remains gone", remains_id)
            return None
        if not 0 <= index < len(remains.items):
            logger.debug("Loot index %d out of range for %r", index, remains_id)
            return None

        drop = remains.items.pop(index)
        store.add_items({drop.item_id: drop.quantity})
        if remains.empty:
            self._discard(remains_id)
        return drop

    def loot_all(self, remains_id: str, store: PlayerStore) -> dict[str, int]:
        """Claim everything; the remains disappear afterwards."""
        remains = self._remains.get(remains_id)
        if remains is None:
            logger.debug("Loot from %r ignored: remains gone", remains_id)
            return {}
        totals = merge_drops(remains.items)
        remains.items.clear()
        store.add_items(totals)
        self._discard(remains_id)
        return totals

    # -- lifetime ------------------------------------------------------------

    def clear_zone(self, zone_id: str) -> int:
        ids = [r.id for r in self.in_zone(zone_id)]
        for remains_id in ids:
            self._discard(remains_id)
        return len(ids)

    def shutdown(self) -> None:
        for remains_id in list(self._remains):
            self._discard(remains_id)

    def _expire(self, remains_id: str) -> None:
        self._expiry.pop(remains_id, None)
        remains = self._remains.pop(remains_id, None)
        if remains is not None:
            logger.debug("Remains %r decayed with %d item(s)", remains_id, len(remains.items))

    def _discard(self, remains_id: str) -> None:
        self._remains.pop(remains_id, None)
        task = self._expiry.pop(remains_id, None)
        if task is not None:
            task.cancel()

    def __len__(self) -> int:
        return len(self._remains)
