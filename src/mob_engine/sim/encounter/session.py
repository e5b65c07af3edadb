"""Encounter session -- one player-versus-creature engagement.

State machine::

    IDLE --start()--> ENGAGED --+--> VICTORY    creature health reached 0
                                +--> DEFEAT     player health reached 0
                                +--> FLED       flee()
                                +--> ABANDONED  target vanished from the registry

While engaged the player's attack resolves first.  If the creature
survives, its reply is scheduled ``attack_delay`` seconds later (or runs
at once in turn-based mode); a player attack made while that reply is
pending is discarded.  A periodic sync tick re-resolves the creature
from the spawn registry, mirrors both health values into
:attr:`EncounterSession.display` and catches deaths caused outside the
session.

The state is switched to its terminal value *before* any terminal side
effect runs, and every entry point checks the state first, so nothing
resolved after a terminal transition can touch either combatant.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

from mob_engine.sim.core.events import CombatTick, EncounterEnded, EncounterStarted
from mob_engine.sim.mechanics.damage import AttackOutcome, resolve_attack
from mob_engine.sim.rewards.death import recover_from_death
from mob_engine.sim.rewards.reputation import propagate_kill
from mob_engine.sim.rewards.resolver import resolve_kill_reward
from mob_engine.sim.telemetry import EncounterTelemetry

if TYPE_CHECKING:
    from mob_engine.sim.core.entities import CombatantStats, CreatureInstance
    from mob_engine.sim.core.scheduler import ScheduledTask
    from mob_engine.sim.mechanics.damage import Ability, AttackResult
    from mob_engine.sim.realm import Realm
    from mob_engine.sim.rewards.resolver import RewardResult

logger = logging.getLogger(__name__)


class EncounterState(str, Enum):
    IDLE = "idle"
    ENGAGED = "engaged"
    VICTORY = "victory"
    DEFEAT = "defeat"
    FLED = "fled"
    ABANDONED = "abandoned"

    @property
    def terminal(self) -> bool:
        return self not in (EncounterState.IDLE, EncounterState.ENGAGED)


@dataclass
class CombatDisplay:
    """Display-side copy of both health bars.  Written only by the session."""

    creature_name: str
    creature_level: int
    creature_hp: int
    creature_max_hp: int
    player_hp: int
    player_max_hp: int
    last_outcome: str | None = None


class EncounterSession:
    """Drives one engagement against a single creature instance.

    Parameters
    ----------
    realm:
        Owner of every collaborator the session touches (content, player
        store, spawn registry, scheduler, bus, RNG streams, config).
    instance_id:
        Id of the creature instance to engage.  The session never keeps
        the instance itself; it resolves the id against the spawn
        registry whenever it needs the creature.
    on_end:
        Called with the session once it reaches a terminal state.
    """

    def __init__(
        self,
        realm: Realm,
        instance_id: str,
        on_end: Callable[[EncounterSession], None] | None = None,
    ) -> None:
        self.realm = realm
        self.instance_id = instance_id
        self.id = f"enc_{uuid.uuid4().hex[:12]}"
        self.state = EncounterState.IDLE
        self.snapshot: CombatantStats | None = None
        """Creature stats captured when the encounter started."""

        self.display: CombatDisplay | None = None
        self.reward: RewardResult | None = None
        self.remains_id: str | None = None
        self.telemetry: EncounterTelemetry | None = None
        self._on_end = on_end
        self._pending_attack: ScheduledTask | None = None
        self._tick_task: ScheduledTask | None = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def engaged(self) -> bool:
        return self.state == EncounterState.ENGAGED

    @property
    def terminal(self) -> bool:
        return self.state.terminal

    @property
    def reply_pending(self) -> bool:
        """True while the creature's scheduled attack has not fired yet."""
        return self._pending_attack is not None

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Engage the creature.  Returns False if it cannot be engaged."""
        if self.state != EncounterState.IDLE:
            logger.debug("Session %s already started", self.id)
            return False

        creature = self._resolve_creature()
        if creature is None:
            logger.debug("Cannot engage %r: not live", self.instance_id)
            return False
        template = self.realm.content.get_template(creature.template_id)
        if template is None:
            logger.warning("Creature template %r not found", creature.template_id)
            return False
        if not template.engageable:
            logger.debug("Cannot engage %r: not hostile", creature.id)
            return False
        if creature.in_combat:
            logger.debug("Cannot engage %r: already in combat", creature.id)
            return False

        player = self.realm.store.get()
        self.snapshot = creature.combat_stats()
        creature.in_combat = True
        self.state = EncounterState.ENGAGED
        self.telemetry = EncounterTelemetry(
            template_id=creature.template_id,
            creature_level=creature.level,
            player_level=player.level,
        )
        self.display = CombatDisplay(
            creature_name=creature.name,
            creature_level=creature.level,
            creature_hp=creature.current_health,
            creature_max_hp=creature.max_health,
            player_hp=player.health,
            player_max_hp=player.max_health,
        )
        self._tick_task = self.realm.scheduler.call_every(self.realm.config.tick_interval, self.tick)
        self.realm.bus.publish(EncounterStarted(
            session_id=self.id, instance_id=creature.id, template_id=creature.template_id,
        ))
        logger.info("%s engaged %s (level %d)", player.name, creature.name, creature.level)
        return True

    def attack(self, ability: Ability | None = None) -> AttackResult | None:
        """Resolve the player's attack.

        Returns ``None`` when the attack is discarded: the session is not
        engaged, the creature's reply is still pending, the creature has
        vanished (which abandons the session), or the latest player record
        is already dead (which ends the session in defeat).
        """
        if self.state != EncounterState.ENGAGED:
            logger.debug("Attack on session %s discarded: %s", self.id, self.state.value)
            return None
        if self.realm.store.get().is_dead:
            self._defeat()
            return None
        if self._pending_attack is not None:
            logger.debug("Attack on session %s discarded: creature reply pending", self.id)
            return None
        creature = self._resolve_creature()
        if creature is None:
            self._abandon()
            return None

        player_stats = self.realm.store.combat_stats(self.realm.content)
        result = resolve_attack(player_stats, creature.combat_stats(), self.realm.combat_rng, ability)
        lost = creature.take_damage(result.damage) if result.landed else 0
        self._record(result, lost, by_player=True)
        self._sync(creature, result.outcome)

        if creature.is_dead:
            self._victory(creature)
            return result

        if self.realm.config.turn_based:
            self._creature_attack()
        else:
            self._pending_attack = self.realm.scheduler.call_later(
                self.realm.config.attack_delay, self._creature_attack,
            )
        return result

    def flee(self) -> bool:
        """Disengage.  The creature stays alive and no reward is granted."""
        if self.state != EncounterState.ENGAGED:
            logger.debug("Flee from session %s discarded: %s", self.id, self.state.value)
            return False
        self._enter(EncounterState.FLED)
        self._close()
        return True

    # ------------------------------------------------------------------
    # Scheduled work
    # ------------------------------------------------------------------

    def tick(self) -> None:
        """Combat-sync tick: re-resolve the creature and check for deaths."""
        if self.state != EncounterState.ENGAGED:
            return
        creature = self._resolve_creature()
        if creature is None:
            self._abandon()
            return
        self._sync(creature, self.display.last_outcome if self.display else None)
        if creature.is_dead:
            self._victory(creature)
        elif self.realm.store.get().is_dead:
            self._defeat()

    def _creature_attack(self) -> None:
        self._pending_attack = None
        if self.state != EncounterState.ENGAGED:
            logger.debug("Late creature attack on session %s discarded", self.id)
            return
        creature = self._resolve_creature()
        if creature is None:
            self._abandon()
            return
        if creature.is_dead:
            self._victory(creature)
            return

        store = self.realm.store
        result = resolve_attack(
            creature.combat_stats(), store.combat_stats(self.realm.content), self.realm.combat_rng,
        )
        lost = 0
        if result.landed:
            before = store.get().health
            lost = before - store.adjust_health(-result.damage).health
        self._record(result, lost, by_player=False)
        self._sync(creature, result.outcome)

        if store.get().is_dead:
            self._defeat()

    # ------------------------------------------------------------------
    # Terminal transitions
    # ------------------------------------------------------------------

    def _victory(self, creature: CreatureInstance) -> None:
        self._enter(EncounterState.VICTORY)
        realm = self.realm
        store = realm.store

        template = realm.content.get_template(creature.template_id)
        if template is None:
            logger.warning("Creature template %r not found; no reward granted", creature.template_id)
        else:
            zone = realm.content.get_zone(creature.zone_id)
            zone_modifier = zone.xp_modifier if zone is not None else 1.0
            reward = resolve_kill_reward(
                realm.content, realm.rewards_rng, creature, template,
                store.get().level, zone_modifier,
            )
            store.grant_experience(reward.experience)
            store.add_currency(reward.currency)
            if reward.items:
                remains = None
                if realm.config.create_remains:
                    remains = realm.remains.create(creature, reward.items)
                if remains is None:
                    store.add_items(reward.item_totals())
                else:
                    self.remains_id = remains.id
            propagate_kill(template, realm.content, store, realm.bus)
            self.reward = reward
            if self.telemetry is not None:
                self.telemetry.experience_gained = reward.experience

        realm.spawns.remove(creature.id)
        self._close()

    def _defeat(self) -> None:
        self._enter(EncounterState.DEFEAT)
        recover_from_death(self.realm.store, self.realm.content, self.realm.config.start_location)
        self._close()

    def _abandon(self) -> None:
        logger.debug("Session %s abandoned: %r no longer live", self.id, self.instance_id)
        self._enter(EncounterState.ABANDONED)
        self._close()

    def _enter(self, state: EncounterState) -> None:
        """Switch to a terminal *state* and drop every pending task."""
        self.state = state
        self.realm.scheduler.cancel(self._pending_attack)
        self.realm.scheduler.cancel(self._tick_task)
        self._pending_attack = None
        self._tick_task = None
        creature = self.realm.spawns.get(self.instance_id)
        if creature is not None:
            creature.in_combat = False

    def _close(self) -> None:
        if self.telemetry is not None:
            self.telemetry.result = self.state.value
        self.realm.bus.publish(EncounterEnded(
            session_id=self.id, outcome=self.state.value, reward=self.reward,
        ))
        logger.info("Encounter %s ended: %s", self.id, self.state.value)
        if self._on_end is not None:
            self._on_end(self)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve_creature(self) -> CreatureInstance | None:
        creature = self.realm.spawns.get(self.instance_id)
        if creature is None or not creature.alive:
            return None
        return creature

    def _sync(self, creature: CreatureInstance, outcome: AttackOutcome | str | None) -> None:
        """Mirror the authoritative health values and publish a tick."""
        if self.display is None:
            return
        player = self.realm.store.get()
        if isinstance(outcome, AttackOutcome):
            outcome = outcome.value
        d = self.display
        d.creature_hp = creature.current_health
        d.creature_max_hp = creature.max_health
        d.player_hp = player.health
        d.player_max_hp = player.max_health
        d.last_outcome = outcome
        self.realm.bus.publish(CombatTick(
            session_id=self.id,
            player_hp=d.player_hp,
            player_max_hp=d.player_max_hp,
            creature_hp=d.creature_hp,
            creature_max_hp=d.creature_max_hp,
            last_outcome=outcome,
        ))

    def _record(self, result: AttackResult, lost: int, by_player: bool) -> None:
        t = self.telemetry
        if t is None:
            return
        if by_player:
            t.turns += 1
            t.damage_dealt += lost
            t.player_misses += result.outcome == AttackOutcome.MISS
            t.player_dodged += result.outcome == AttackOutcome.DODGE
            t.player_crits += result.critical
        else:
            t.damage_taken += lost
            t.creature_misses += result.outcome == AttackOutcome.MISS
            t.creature_dodged += result.outcome == AttackOutcome.DODGE
            t.creature_crits += result.critical

    def __repr__(self) -> str:
        return f"EncounterSession({self.id!r}, target={self.instance_id!r}, state={self.state.value})"
