"""Content registry -- loads and serves creature templates, items, loot
tables, factions and zones for the encounter engine.

Vanilla content is loaded from the JSON realm document in
``data/vanilla/``.  Additional content can be merged from any
:class:`ContentSet`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from mob_engine.ir.content_set import ContentSet
from mob_engine.ir.creatures import CreatureTemplate
from mob_engine.ir.factions import FactionDefinition
from mob_engine.ir.items import ItemDefinition, LootTable
from mob_engine.ir.zones import Position, SpawnSlot, ZoneDefinition

logger = logging.getLogger(__name__)

# Default paths relative to the project root.
_PROJECT_ROOT = Path(__file__).resolve().parents[4]  # src/mob_engine/sim/content -> root
_DEFAULT_REALM_PATH = _PROJECT_ROOT / "data" / "vanilla" / "realm.json"


class ContentRegistry:
    """Loads and serves every immutable definition the engine consults.

    The registry is the world collaborator: the spawn registry looks up
    templates and walkability here, the reward resolver looks up loot
    tables and items, the reputation propagator looks up rivals.  Unknown
    ids always come back as ``None`` so callers can apply the
    skip-and-log policy.

    Usage::

        registry = ContentRegistry()
        registry.load_vanilla_realm()

        wolf = registry.get_template("forest_wolf")
        ok = registry.is_walkable("whisperwood", 3, 4)
    """

    def __init__(self) -> None:
        self.templates: dict[str, CreatureTemplate] = {}
        self.items: dict[str, ItemDefinition] = {}
        self.loot_tables: dict[str, LootTable] = {}
        self.factions: dict[str, FactionDefinition] = {}
        self.zones: dict[str, ZoneDefinition] = {}
        self._blocked: dict[str, set[Position]] = {}
        self._slot_zone: dict[str, str] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_vanilla_realm(self, path: str | Path | None = None) -> None:
        """Load a realm document from a JSON file.

        Parameters
        ----------
        path:
            Path to the JSON file.  Defaults to
            ``data/vanilla/realm.json`` relative to the project root.
        """
        if path is None:
            path = _DEFAULT_REALM_PATH
        path = Path(path)

        with open(path) as f:
            raw: dict[str, Any] = json.load(f)

        self.load_content_set(ContentSet.model_validate(raw))

    def load_content_set(self, content_set: ContentSet) -> None:
        """Merge a :class:`ContentSet` into the registry.

        Definitions with an id already present replace the earlier one.
        Dangling cross references are logged, not rejected.
        """
        for tpl in content_set.templates:
            self.templates[tpl.id] = tpl
        for item in content_set.items:
            self.items[item.id] = item
        for table in content_set.loot_tables:
            self.loot_tables[table.id] = table
        for faction in content_set.factions:
            self.factions[faction.id] = faction
        for zone in content_set.zones:
            self.zones[zone.id] = zone
            self._blocked[zone.id] = set(zone.blocked)
            for slot in zone.spawn_slots:
                self._slot_zone[slot.id] = zone.id

        for problem in content_set.dangling_references():
            logger.warning("Content %r has a dangling reference: %s", content_set.name, problem)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_template(self, template_id: str) -> CreatureTemplate | None:
        """Return the :class:`CreatureTemplate` for *template_id*, or ``None``."""
        return self.templates.get(template_id)

    def get_item(self, item_id: str) -> ItemDefinition | None:
        return self.items.get(item_id)

    def get_loot_table(self, table_id: str) -> LootTable | None:
        return self.loot_tables.get(table_id)

    def get_faction(self, faction_id: str) -> FactionDefinition | None:
        return self.factions.get(faction_id)

    def get_zone(self, zone_id: str) -> ZoneDefinition | None:
        return self.zones.get(zone_id)

    def get_spawn_slot(self, slot_id: str) -> SpawnSlot | None:
        """Return the spawn slot with *slot_id* from whichever zone owns it."""
        zone = self.zones.get(self._slot_zone.get(slot_id, ""))
        if zone is None:
            return None
        for slot in zone.spawn_slots:
            if slot.id == slot_id:
                return slot
        return None

    def zone_of_slot(self, slot_id: str) -> str | None:
        return self._slot_zone.get(slot_id)

    def location_exists(self, location: str | None) -> bool:
        """True if *location* names a known zone."""
        return location is not None and location in self.zones

    # ------------------------------------------------------------------
    # Walkability
    # ------------------------------------------------------------------

    def is_walkable(self, zone_id: str, x: int, y: int) -> bool:
        """True if the tile exists in *zone_id* and is not blocked."""
        zone = self.zones.get(zone_id)
        if zone is None or not zone.in_bounds(x, y):
            return False
        return Position(x=x, y=y) not in self._blocked.get(zone_id, set())

    def walkable_tiles(self, zone_id: str) -> list[Position]:
        """Every walkable tile of *zone_id* in row-major order."""
        zone = self.zones.get(zone_id)
        if zone is None:
            return []
        blocked = self._blocked.get(zone_id, set())
        return [
            Position(x=x, y=y)
            for y in range(zone.height)
            for x in range(zone.width)
            if Position(x=x, y=y) not in blocked
        ]

    # ------------------------------------------------------------------
    # Representation
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"ContentRegistry(templates={len(self.templates)}, "
            f"items={len(self.items)}, "
            f"loot_tables={len(self.loot_tables)}, "
            f"zones={len(self.zones)})"
        )
