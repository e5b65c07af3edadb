"""Player store -- the player collaborator the engine reads and updates.

Other systems (healing, regeneration, inventory screens) change the same
record the encounter engine does, so every helper here is a
read-modify-write against the *latest* record.  Nothing should hold on
to a :class:`PlayerRecord` across a suspension point and write it back.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from mob_engine.sim.core.entities import CombatantStats, PlayerRecord
from mob_engine.sim.rewards.experience import MAX_LEVEL, level_for_experience

if TYPE_CHECKING:
    from mob_engine.sim.content.registry import ContentRegistry

logger = logging.getLogger(__name__)


class PlayerStore:
    """Owns the authoritative :class:`PlayerRecord` and its flat snapshot.

    Parameters
    ----------
    record:
        Initial record.
    path:
        Optional JSON snapshot path.  When set, every update is persisted.
    """

    def __init__(self, record: PlayerRecord, path: str | Path | None = None) -> None:
        self._record = record
        self.path = Path(path) if path is not None else None

    # -- persistence ---------------------------------------------------------

    @classmethod
    def load(cls, path: str | Path) -> PlayerStore:
        """Restore a store from a snapshot written by :meth:`save`."""
        path = Path(path)
        record = PlayerRecord.model_validate_json(path.read_text())
        return cls(record, path)

    def save(self) -> None:
        """Write the current record to the snapshot path, if any."""
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self._record.model_dump_json(indent=2))

    # -- record access -------------------------------------------------------

    def get(self) -> PlayerRecord:
        """Return the latest record."""
        return self._record

    def apply_update(self, partial: dict[str, Any]) -> PlayerRecord:
        """Merge *partial* into the latest record, validate, and persist.

        Dict-valued fields (inventory, factions, equipment) are merged per
        key rather than replaced wholesale, so ``{"factions": {"orcs": -5}}``
        touches only the ``orcs`` standing.
        """
        merged = self._record.model_dump()
        for key, value in partial.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = {**merged[key], **value}
            else:
                merged[key] = value
        self._record = PlayerRecord.model_validate(merged)
        self.save()
        return self._record

    # -- read-modify-write helpers -------------------------------------------

    def adjust_health(self, delta: int) -> PlayerRecord:
        """Change health by *delta*, clamped to ``[0, max_health]``."""
        rec = self._record
        new_health = max(0, min(rec.max_health, rec.health + delta))
        return self.apply_update({"health": new_health})

    def grant_experience(self, amount: int) -> PlayerRecord:
        """Add experience and apply any level-ups it earns."""
        if amount <= 0:
            return self._record
        rec = self._record
        experience = rec.experience + amount
        level = min(MAX_LEVEL, max(rec.level, level_for_experience(experience)))
        if level > rec.level:
            logger.info("%s reached level %d", rec.name, level)
        return self.apply_update({"experience": experience, "level": level})

    def add_currency(self, amount: int) -> PlayerRecord:
        if amount <= 0:
            return self._record
        return self.apply_update({"currency": self._record.currency + amount})

    def add_items(self, items: dict[str, int]) -> PlayerRecord:
        """Add quantities of items to the inventory."""
        if not items:
            return self._record
        inventory = self._record.inventory
        update = {
            item_id: inventory.get(item_id, 0) + qty
            for item_id, qty in items.items()
            if qty > 0
        }
        return self.apply_update({"inventory": update})

    def adjust_standing(self, faction_id: str, delta: int) -> int:
        """Change the standing with *faction_id*; returns the new value."""
        value = self._record.factions.get(faction_id, 0) + delta
        self.apply_update({"factions": {faction_id: value}})
        return value

    # -- derived stats -------------------------------------------------------

    def combat_stats(self, content: ContentRegistry) -> CombatantStats:
        """Derive combat stats from base stats plus working equipment.

        Recomputed on every call: equipment and durability change outside
        combat, so a cached value would go stale.
        """
        rec = self._record
        attack = rec.base_attack
        defense = rec.base_defense
        evasion = rec.base_evasion
        accuracy = rec.base_accuracy

        for slot, equipped in rec.equipment.items():
            item = content.get_item(equipped.item_id)
            if item is None:
                logger.warning("Equipped item %r in slot %r not found", equipped.item_id, slot)
                continue
            # Only items with a max durability can wear out.
            if item.max_durability > 0 and equipped.broken:
                continue
            bonus = item.bonuses
            attack += bonus.attack + bonus.all
            defense += bonus.defense + bonus.all
            evasion += bonus.evasion
            accuracy += bonus.accuracy

        return CombatantStats(
            name=rec.name,
            level=rec.level,
            attack=attack,
            defense=defense,
            evasion=evasion,
            accuracy=accuracy,
        )

    def __repr__(self) -> str:
        rec = self._record
        return f"PlayerStore({rec.name!r}, level={rec.level}, hp={rec.health}/{rec.max_health})"
