"""Faction standing changes caused by kills."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mob_engine.sim.core.events import FactionStandingChanged

if TYPE_CHECKING:
    from mob_engine.ir.creatures import CreatureTemplate
    from mob_engine.sim.content.registry import ContentRegistry
    from mob_engine.sim.core.events import EventBus
    from mob_engine.sim.player_store import PlayerStore

logger = logging.getLogger(__name__)

KILL_STANDING_PENALTY = -5
RIVAL_STANDING_BONUS = 2


def kill_faction_deltas(template: CreatureTemplate, content: ContentRegistry) -> dict[str, int]:
    """Standing deltas earned by killing one *template* creature.

    Explicit ``faction_changes`` on the template replace the default of a
    penalty with the creature's own faction plus a smaller bonus with that
    faction's rival.
    """
    if template.faction_changes:
        return dict(template.faction_changes)
    if not template.faction_id:
        return {}

    deltas = {template.faction_id: KILL_STANDING_PENALTY}
    faction = content.get_faction(template.faction_id)
    if faction is None:
        logger.warning("Faction %r of template %r not found", template.faction_id, template.id)
        return deltas
    if faction.rival:
        if content.get_faction(faction.rival) is None:
            logger.warning("Rival faction %r of %r not found", faction.rival, faction.id)
        else:
            deltas[faction.rival] = RIVAL_STANDING_BONUS
    return deltas


def propagate_kill(
    template: CreatureTemplate,
    content: ContentRegistry,
    store: PlayerStore,
    bus: EventBus | None = None,
) -> dict[str, int]:
    """Apply kill standing deltas to the player and announce each change.

    Returns the deltas applied.
    """
    deltas = kill_faction_deltas(template, content)
    for faction_id, delta in deltas.items():
        value = store.adjust_standing(faction_id, delta)
        if bus is not None:
            bus.publish(FactionStandingChanged(faction_id=faction_id, delta=delta, value=value))
    return deltas
