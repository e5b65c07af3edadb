"""In-process notification bus and the events the engine publishes.

Decouples the engine from whatever presents it.  Delivery is synchronous
and immediate: :meth:`EventBus.publish` calls every listener registered
for the event's type, in subscription order, before returning::

    bus = EventBus()
    bus.subscribe(CreatureSpawned, on_spawn)
    bus.publish(CreatureSpawned(zone_id="meadow", instance_id="c1", template_id="wolf"))

Events are plain dataclasses -- no behaviour.  A listener that raises is
logged and skipped; it never stops delivery to the other listeners.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from mob_engine.sim.rewards.resolver import RewardResult

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Event definitions
# ---------------------------------------------------------------------------

@dataclass
class CreatureSpawned:
    """A fresh creature instance became live."""

    zone_id: str
    instance_id: str
    template_id: str


@dataclass
class CreatureRemoved:
    """A creature instance left the live set (killed or despawned)."""

    zone_id: str
    instance_id: str
    template_id: str


@dataclass
class EncounterStarted:
    session_id: str
    instance_id: str
    template_id: str


@dataclass
class CombatTick:
    """Per-tick (and per-attack) snapshot for the combat display."""

    session_id: str
    player_hp: int
    player_max_hp: int
    creature_hp: int
    creature_max_hp: int
    last_outcome: str | None = None
    """``"hit"``, ``"miss"``, ``"dodge"`` or ``None`` before any attack."""


@dataclass
class EncounterEnded:
    session_id: str
    outcome: str
    reward: RewardResult | None = None


@dataclass
class RemainsCreated:
    zone_id: str
    remains_id: str
    instance_id: str
    item_count: int


@dataclass
class FactionStandingChanged:
    faction_id: str
    delta: int
    value: int


# ---------------------------------------------------------------------------
# Event bus
# ---------------------------------------------------------------------------

class EventBus:
    """Synchronous publish/subscribe keyed by event class."""

    def __init__(self) -> None:
        self._subs: dict[type, list[Callable[[Any], None]]] = defaultdict(list)
        self._stats: dict[str, int] = defaultdict(int)

    def subscribe(self, event_type: type, handler: Callable[[Any], None]) -> None:
        """Register *handler* for events of exactly *event_type*."""
        self._subs[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Callable[[Any], None]) -> None:
        """Remove *handler*.  Unknown handlers are ignored."""
        handlers = self._subs.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: Any) -> int:
        """Deliver *event* to its listeners now.  Returns listeners called."""
        self._stats[type(event).__name__] += 1
        delivered = 0
        # Copy so listeners may (un)subscribe while being notified.
        for handler in list(self._subs.get(type(event), [])):
            try:
                handler(event)
            except Exception:
                logger.exception("Listener %r failed on %s", handler, type(event).__name__)
            delivered += 1
        return delivered

    def stats(self) -> dict[str, int]:
        """Return cumulative publish counts by event type name."""
        return dict(self._stats)

    def __repr__(self) -> str:
        n = sum(len(h) for h in self._subs.values())
        return f"EventBus(listeners={n})"
