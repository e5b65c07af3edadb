"""Realm -- the explicitly constructed owner of all mutable engine state.

A realm is created for one play session and torn down at its end.  It
owns the virtual scheduler, the event bus, the forked RNG streams, the
spawn and remains registries and the active encounter sessions, and it
is the only object passed around; nothing in the engine is global.

Usage::

    content = ContentRegistry()
    content.load_vanilla_realm()
    store = PlayerStore(PlayerRecord(name="Ayla"))

    with Realm(content, store, seed=7) as realm:
        realm.enter_zone("whisperwood")
        target = realm.spawns.live("whisperwood")[0]
        session = realm.engage(target.id)
        session.attack()
        realm.advance(1.0)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mob_engine.config import EngineConfig
from mob_engine.sim.core.events import EventBus
from mob_engine.sim.core.rng import COMBAT_STREAM, REWARD_STREAM, SPAWN_STREAM, GameRNG
from mob_engine.sim.core.scheduler import Scheduler
from mob_engine.sim.encounter.session import EncounterSession
from mob_engine.sim.spawning.registry import SpawnRegistry
from mob_engine.sim.spawning.remains import RemainsRegistry
from mob_engine.sim.telemetry import RealmTelemetry

if TYPE_CHECKING:
    from mob_engine.sim.content.registry import ContentRegistry
    from mob_engine.sim.player_store import PlayerStore

logger = logging.getLogger(__name__)


class Realm:
    """Container with a defined lifetime for one player's encounters.

    Parameters
    ----------
    content:
        Loaded content registry (world collaborator).
    store:
        Player store (player collaborator).
    seed:
        Master seed.  Combat, spawn and reward rolls each use their own
        fork of it.
    config:
        Engine tunables; defaults apply when omitted.
    """

    def __init__(
        self,
        content: ContentRegistry,
        store: PlayerStore,
        seed: int = 0,
        config: EngineConfig | None = None,
    ) -> None:
        self.content = content
        self.store = store
        self.config = config or EngineConfig()
        self.rng = GameRNG(seed)
        self.combat_rng = self.rng.fork(COMBAT_STREAM)
        self.spawn_rng = self.rng.fork(SPAWN_STREAM)
        self.rewards_rng = self.rng.fork(REWARD_STREAM)
        self.scheduler = Scheduler()
        self.bus = EventBus()
        self.spawns = SpawnRegistry(content, self.scheduler, self.bus, self.spawn_rng, self.config)
        self.remains = RemainsRegistry(content, self.scheduler, self.bus, self.config.remains_lifetime)
        self.telemetry = RealmTelemetry(seed=seed)
        self.closed = False
        # creature instance id -> the one session engaging it
        self._sessions: dict[str, EncounterSession] = {}

    # ------------------------------------------------------------------
    # Lifetime
    # ------------------------------------------------------------------

    def __enter__(self) -> Realm:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        """End active sessions as fled and cancel every pending timer."""
        if self.closed:
            return
        for session in list(self._sessions.values()):
            session.flee()
        self.spawns.shutdown()
        self.remains.shutdown()
        self.closed = True
        logger.info("Realm closed after %d encounter(s)", len(self.telemetry.encounters))

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------

    def enter_zone(self, zone_id: str) -> int:
        """Move the player into *zone_id* and populate it.

        Leaving a zone clears its creatures, remains and respawn timers.
        Entering a safe zone records it as the player's last safe zone.
        Returns the number of creatures spawned.
        """
        zone = self.content.get_zone(zone_id)
        if zone is None:
            logger.warning("Cannot enter unknown zone %r", zone_id)
            return 0

        previous = self.store.get().location
        if previous is not None and previous != zone_id:
            for session in list(self._sessions.values()):
                session.flee()
            self.spawns.clear_zone(previous)
            self.remains.clear_zone(previous)

        update: dict[str, str] = {"location": zone_id}
        if zone.safe:
            update["last_safe_zone"] = zone_id
        self.store.apply_update(update)
        return self.spawns.initialize_zone(zone_id)

    # ------------------------------------------------------------------
    # Encounters
    # ------------------------------------------------------------------

    def engage(self, instance_id: str) -> EncounterSession | None:
        """Start an encounter against *instance_id*.

        At most one session exists per creature instance; returns ``None``
        if one is already active or the creature cannot be engaged.
        """
        if self.closed:
            logger.debug("Engage of %r ignored: realm closed", instance_id)
            return None
        if instance_id in self._sessions:
            logger.debug("Engage of %r ignored: already engaged", instance_id)
            return None
        session = EncounterSession(self, instance_id, on_end=self._session_ended)
        if not session.start():
            return None
        self._sessions[instance_id] = session
        return session

    def session_for(self, instance_id: str) -> EncounterSession | None:
        return self._sessions.get(instance_id)

    def active_sessions(self) -> list[EncounterSession]:
        return list(self._sessions.values())

    def _session_ended(self, session: EncounterSession) -> None:
        self._sessions.pop(session.instance_id, None)
        if session.telemetry is not None:
            self.telemetry.encounters.append(session.telemetry)

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    def advance(self, seconds: float) -> int:
        """Advance virtual time, running every timer that falls due."""
        return self.scheduler.advance(seconds)

    def __repr__(self) -> str:
        return (
            f"Realm(seed={self.rng.seed}, now={self.scheduler.now:.1f}, "
            f"live={len(self.spawns.live())}, sessions={len(self._sessions)})"
        )
