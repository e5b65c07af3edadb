"""Player death recovery.

On defeat the player loses a tenth of ``level * 200`` experience (never
going below zero), is restored to full health and mana, and is moved to
the first of these that exists in the realm: bind point, last safe zone,
start location.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mob_engine.sim.content.registry import ContentRegistry
    from mob_engine.sim.core.entities import PlayerRecord
    from mob_engine.sim.player_store import PlayerStore

logger = logging.getLogger(__name__)

DEATH_XP_LEVEL_CONSTANT = 200
DEATH_XP_PENALTY_DIVISOR = 10


def death_experience_loss(level: int) -> int:
    return level * DEATH_XP_LEVEL_CONSTANT // DEATH_XP_PENALTY_DIVISOR


def respawn_location(
    record: PlayerRecord,
    content: ContentRegistry,
    default_start: str | None = None,
) -> str | None:
    """Pick where a dead player wakes up."""
    candidates = (
        record.bind_point,
        record.last_safe_zone,
        record.start_location or default_start,
    )
    for candidate in candidates:
        if content.location_exists(candidate):
            return candidate
    logger.warning("No respawn location for %s, staying at %r", record.name, record.location)
    return record.location


def recover_from_death(
    store: PlayerStore,
    content: ContentRegistry,
    default_start: str | None = None,
) -> PlayerRecord:
    """Apply the death penalty and respawn the player.  Persists the record."""
    rec = store.get()
    loss = death_experience_loss(rec.level)
    experience = max(0, rec.experience - loss)
    location = respawn_location(rec, content, default_start)
    logger.info("%s died: -%d experience, respawning at %r", rec.name, rec.experience - experience, location)
    return store.apply_update({
        "experience": experience,
        "health": rec.max_health,
        "mana": rec.max_mana,
        "location": location,
    })
