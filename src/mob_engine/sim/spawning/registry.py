"""Spawn registry -- owns every live creature instance and its respawn timer.

The registry's :class:`CreatureInstance` is the single source of truth for
a creature's health; encounter sessions write damage straight into it and
re-resolve it by id every tick.

Spawn slots choose their placement (static points or any free walkable
tile) and their respawn timing (fixed interval or a random window) per
slot, see :mod:`mob_engine.ir.zones`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mob_engine.config import EngineConfig
from mob_engine.ir.zones import Placement, Position
from mob_engine.sim.core.entities import CreatureInstance
from mob_engine.sim.core.events import CreatureRemoved, CreatureSpawned

if TYPE_CHECKING:
    from mob_engine.ir.creatures import CreatureTemplate
    from mob_engine.ir.zones import SpawnSlot, ZoneDefinition
    from mob_engine.sim.content.registry import ContentRegistry
    from mob_engine.sim.core.events import EventBus
    from mob_engine.sim.core.rng import GameRNG
    from mob_engine.sim.core.scheduler import ScheduledTask, Scheduler

logger = logging.getLogger(__name__)

# Stats grow 15% per level above the bottom of the template's range.
LEVEL_SCALE_PERCENT = 15


# ---------------------------------------------------------------------------
# Level scaling
# ---------------------------------------------------------------------------

def scale_stat(value: int, level: int, min_level: int) -> int:
    """Scale a template stat to *level*: ``floor(value * (1 + 0.15 * steps))``."""
    steps = max(0, level - min_level)
    return value * (100 + LEVEL_SCALE_PERCENT * steps) // 100


def roll_instance(
    template: CreatureTemplate,
    level: int,
    zone_id: str,
    position: Position,
    slot_id: str | None = None,
    spawned_at: float = 0.0,
) -> CreatureInstance:
    """Build a fresh instance of *template* at *level*."""
    low = template.level_range.min
    stats = template.base_stats
    health = max(1, scale_stat(stats.max_health, level, low))
    return CreatureInstance(
        template_id=template.id,
        name=template.name,
        zone_id=zone_id,
        slot_id=slot_id,
        position=position,
        level=level,
        max_health=health,
        current_health=health,
        attack=scale_stat(stats.attack, level, low),
        defense=scale_stat(stats.defense, level, low),
        evasion=scale_stat(stats.evasion, level, low),
        accuracy=scale_stat(stats.accuracy, level, low),
        spawned_at=spawned_at,
    )


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class SpawnRegistry:
    """Live creature bookkeeping for every zone of one realm.

    Parameters
    ----------
    content:
        World collaborator: templates, zones, walkability.
    scheduler:
        Virtual clock the respawn timers are armed on.
    bus:
        Receives :class:`CreatureSpawned` / :class:`CreatureRemoved`.
    rng:
        Stream for level, template and placement rolls.
    config:
        Supplies the default respawn window.
    """

    def __init__(
        self,
        content: ContentRegistry,
        scheduler: Scheduler,
        bus: EventBus,
        rng: GameRNG,
        config: EngineConfig | None = None,
    ) -> None:
        self.content = content
        self.scheduler = scheduler
        self.bus = bus
        self.rng = rng
        self.config = config or EngineConfig()
        self._live: dict[str, CreatureInstance] = {}
        self._initialized: set[str] = set()
        # removed instance id -> (zone id, pending respawn task)
        self._respawns: dict[str, tuple[str, ScheduledTask]] = {}

    # ------------------------------------------------------------------
    # Zone population
    # ------------------------------------------------------------------

    def initialize_zone(self, zone_id: str) -> int:
        """Seed every spawn slot of *zone_id* up to its cap.

        Idempotent: a zone already initialised is left alone.  Returns the
        number of creatures spawned.
        """
        if zone_id in self._initialized:
            return 0
        zone = self.content.get_zone(zone_id)
        if zone is None:
            logger.warning("Cannot initialise unknown zone %r", zone_id)
            return 0

        self._initialized.add(zone_id)
        spawned = 0
        for slot in zone.spawn_slots:
            while self.live_count(slot.id) < slot.max_concurrent:
                if self.spawn(zone_id, slot.id) is None:
                    break
                spawned += 1
        logger.info("Initialised zone %r with %d creatures", zone_id, spawned)
        return spawned

    def clear_zone(self, zone_id: str) -> int:
        """Despawn everything in *zone_id* without respawning.

        Pending respawn timers for the zone are cancelled and the zone is
        marked uninitialised, so entering it again seeds a fresh population.
        Returns the number of creatures removed.
        """
        removed = 0
        for inst in self.live(zone_id):
            if self.remove(inst.id, respawn=False):
                removed += 1
        for removed_id, (zid, task) in list(self._respawns.items()):
            if zid == zone_id:
                task.cancel()
                del self._respawns[removed_id]
        self._initialized.discard(zone_id)
        return removed

    def shutdown(self) -> None:
        """Cancel every pending respawn timer."""
        for _, task in self._respawns.values():
            task.cancel()
        self._respawns.clear()

    # ------------------------------------------------------------------
    # Spawn / remove
    # ------------------------------------------------------------------

    def spawn(
        self,
        zone_id: str,
        slot_id: str,
        template_id: str | None = None,
    ) -> CreatureInstance | None:
        """Spawn one creature for *slot_id*.

        *template_id* pins the template (respawns reuse the removed
        creature's); otherwise one is picked by the slot's weights.
        Returns ``None`` when the slot is at its cap, a reference is
        missing, or no placement is free.
        """
        zone = self.content.get_zone(zone_id)
        slot = self.content.get_spawn_slot(slot_id)
        if zone is None or slot is None or self.content.zone_of_slot(slot_id) != zone_id:
            logger.warning("Spawn slot %r not found in zone %r", slot_id, zone_id)
            return None

        if self.live_count(slot_id) >= slot.max_concurrent:
            logger.debug("Slot %r is at its cap of %d", slot_id, slot.max_concurrent)
            return None

        if template_id is None:
            template_id = self.rng.weighted_choice(slot.templates.items())
            if template_id is None:
                logger.warning("Spawn slot %r has no positive template weight", slot_id)
                return None
        template = self.content.get_template(template_id)
        if template is None:
            logger.warning("Creature template %r not found", template_id)
            return None

        position = self._place(zone, slot)
        if position is None:
            logger.debug("No free placement for slot %r in zone %r", slot_id, zone_id)
            return None

        level = self.rng.random_int(template.level_range.min, template.level_range.max)
        inst = roll_instance(template, level, zone_id, position, slot_id, self.scheduler.now)
        return self._register(inst)

    def spawn_at(self, zone_id: str, template_id: str, x: int, y: int) -> CreatureInstance | None:
        """Place an ad-hoc creature on a specific tile.

        Ad-hoc creatures count against no slot and never respawn.  Returns
        ``None`` for a missing template, a non-walkable tile, or a tile
        already occupied.
        """
        template = self.content.get_template(template_id)
        if template is None:
            logger.warning("Creature template %r not found", template_id)
            return None
        if not self.content.is_walkable(zone_id, x, y) or self.at_position(zone_id, x, y) is not None:
            logger.debug("Tile (%d, %d) in %r is not free", x, y, zone_id)
            return None
        level = self.rng.random_int(template.level_range.min, template.level_range.max)
        inst = roll_instance(template, level, zone_id, Position(x=x, y=y), None, self.scheduler.now)
        return self._register(inst)

    def remove(self, instance_id: str, respawn: bool = True) -> bool:
        """Take a creature out of the live set.

        Removing an instance that is not live is a no-op returning
        ``False``.  Otherwise exactly one respawn timer is armed for the
        removed instance (slot creatures only, when *respawn* is set).
        """
        inst = self._live.pop(instance_id, None)
        if inst is None:
            logger.debug("Remove of %r ignored: not live", instance_id)
            return False

        inst.current_health = max(0, inst.current_health)
        inst.alive = False
        inst.in_combat = False
        self.bus.publish(CreatureRemoved(
            zone_id=inst.zone_id, instance_id=inst.id, template_id=inst.template_id,
        ))

        if respawn and inst.slot_id is not None:
            slot = self.content.get_spawn_slot(inst.slot_id)
            if slot is None:
                logger.warning("Spawn slot %r vanished; %r will not respawn", inst.slot_id, inst.id)
            else:
                self._arm_respawn(inst.id, inst.zone_id, slot, inst.template_id)
        return True

    def respawn_delay(self, slot: SpawnSlot) -> float:
        """Fixed slot interval if set, else a draw from the slot or default window."""
        if slot.respawn_seconds is not None:
            return slot.respawn_seconds
        low, high = slot.respawn_window or self.config.respawn_window
        return self.rng.random_uniform(low, high)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, instance_id: str) -> CreatureInstance | None:
        """Resolve the current live instance for *instance_id*."""
        return self._live.get(instance_id)

    def live(self, zone_id: str | None = None) -> list[CreatureInstance]:
        """Live instances, optionally restricted to one zone, in spawn order."""
        return [
            inst for inst in self._live.values()
            if zone_id is None or inst.zone_id == zone_id
        ]

    def at_position(self, zone_id: str, x: int, y: int) -> CreatureInstance | None:
        for inst in self._live.values():
            if inst.zone_id == zone_id and inst.position.x == x and inst.position.y == y:
                return inst
        return None

    def nearby(self, zone_id: str, x: int, y: int, radius: int) -> list[CreatureInstance]:
        """Live instances within Manhattan *radius* of ``(x, y)``, nearest first."""
        found = [
            (abs(inst.position.x - x) + abs(inst.position.y - y), inst)
            for inst in self.live(zone_id)
        ]
        found = [(d, inst) for d, inst in found if d <= radius]
        found.sort(key=lambda pair: pair[0])
        return [inst for _, inst in found]

    def live_count(self, slot_id: str) -> int:
        return sum(1 for inst in self._live.values() if inst.slot_id == slot_id)

    def pending_respawns(self, zone_id: str | None = None) -> int:
        return sum(
            1 for zid, task in self._respawns.values()
            if not task.cancelled and (zone_id is None or zid == zone_id)
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _register(self, inst: CreatureInstance) -> CreatureInstance:
        self._live[inst.id] = inst
        self.bus.publish(CreatureSpawned(
            zone_id=inst.zone_id, instance_id=inst.id, template_id=inst.template_id,
        ))
        logger.debug(
            "Spawned %s (level %d) at (%d, %d) in %r",
            inst.template_id, inst.level, inst.position.x, inst.position.y, inst.zone_id,
        )
        return inst

    def _place(self, zone: ZoneDefinition, slot: SpawnSlot) -> Position | None:
        occupied = {inst.position for inst in self.live(zone.id)}
        if slot.placement == Placement.STATIC:
            free = [
                p for p in slot.spawn_points
                if p not in occupied and self.content.is_walkable(zone.id, p.x, p.y)
            ]
        else:
            free = [p for p in self.content.walkable_tiles(zone.id) if p not in occupied]
        if not free:
            return None
        return self.rng.random_choice(free)

    def _arm_respawn(self, removed_id: str, zone_id: str, slot: SpawnSlot, template_id: str) -> None:
        delay = self.respawn_delay(slot)
        task = self.scheduler.call_later(
            delay, self._respawn, removed_id, zone_id, slot.id, template_id,
        )
        self._respawns[removed_id] = (zone_id, task)
        logger.debug("Respawn of %r armed in %.1fs", template_id, delay)

    def _respawn(self, removed_id: str, zone_id: str, slot_id: str, template_id: str) -> None:
        """Respawn timer callback.

        A respawn blocked only by placement (every point or tile occupied)
        is re-armed with a fresh delay.  One rejected by the cap or by a
        missing reference is dropped.
        """
        self._respawns.pop(removed_id, None)
        if self.spawn(zone_id, slot_id, template_id) is not None:
            return
        slot = self.content.get_spawn_slot(slot_id)
        if (
            slot is None
            or self.content.zone_of_slot(slot_id) != zone_id
            or self.content.get_template(template_id) is None
            or self.live_count(slot_id) >= slot.max_concurrent
        ):
            logger.debug("Respawn for removed %r was rejected", removed_id)
            return
        logger.debug("Respawn for removed %r blocked; retrying", removed_id)
        self._arm_respawn(removed_id, zone_id, slot, template_id)

    def __repr__(self) -> str:
        return f"SpawnRegistry(live={len(self._live)}, pending_respawns={self.pending_respawns()})"
