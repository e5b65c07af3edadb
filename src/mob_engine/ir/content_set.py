"""Top-level container that bundles all realm content into a single document."""

from __future__ import annotations

from collections import Counter

from pydantic import BaseModel, Field, model_validator

from .creatures import CreatureTemplate
from .factions import FactionDefinition
from .items import ItemDefinition, LootTable
from .zones import ZoneDefinition


def _duplicates(ids: list[str]) -> list[str]:
    return sorted(i for i, n in Counter(ids).items() if n > 1)


class ContentSet(BaseModel):
    """Every template, item, loot table, faction and zone of a realm.

    Cross references (a slot naming a template, a template naming a loot
    table) are deliberately *not* validated here: a dangling reference is
    skipped at runtime with a logged warning so one bad row never takes a
    whole zone down.
    """

    name: str = "realm"
    templates: list[CreatureTemplate] = Field(default_factory=list)
    items: list[ItemDefinition] = Field(default_factory=list)
    loot_tables: list[LootTable] = Field(default_factory=list)
    factions: list[FactionDefinition] = Field(default_factory=list)
    zones: list[ZoneDefinition] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_ids(self) -> ContentSet:
        groups = {
            "template": [t.id for t in self.templates],
            "item": [i.id for i in self.items],
            "loot table": [t.id for t in self.loot_tables],
            "faction": [f.id for f in self.factions],
            "zone": [z.id for z in self.zones],
            "spawn slot": [s.id for z in self.zones for s in z.spawn_slots],
        }
        errors = [
            f"Duplicate {kind} ids: {dupes}"
            for kind, ids in groups.items()
            if (dupes := _duplicates(ids))
        ]
        if errors:
            raise ValueError("; ".join(errors))
        return self

    def dangling_references(self) -> list[str]:
        """Describe every cross reference that points at nothing.

        Used by loaders to log data problems up front; never raises.
        """
        template_ids = {t.id for t in self.templates}
        item_ids = {i.id for i in self.items}
        table_ids = {t.id for t in self.loot_tables}
        faction_ids = {f.id for f in self.factions}

        problems: list[str] = []
        for zone in self.zones:
            for slot in zone.spawn_slots:
                for tid in slot.templates:
                    if tid not in template_ids:
                        problems.append(f"slot {slot.id!r} -> template {tid!r}")
        for tpl in self.templates:
            if tpl.loot_table_id and tpl.loot_table_id not in table_ids:
                problems.append(f"template {tpl.id!r} -> loot table {tpl.loot_table_id!r}")
            for drop in tpl.drop_table:
                if drop.item_id not in item_ids:
                    problems.append(f"template {tpl.id!r} -> item {drop.item_id!r}")
            if tpl.faction_id and tpl.faction_id not in faction_ids:
                problems.append(f"template {tpl.id!r} -> faction {tpl.faction_id!r}")
        for table in self.loot_tables:
            for entry in table.entries:
                if entry.item_id not in item_ids:
                    problems.append(f"loot table {table.id!r} -> item {entry.item_id!r}")
        for faction in self.factions:
            if faction.rival and faction.rival not in faction_ids:
                problems.append(f"faction {faction.id!r} -> rival {faction.rival!r}")
        return problems
