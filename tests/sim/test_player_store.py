"""Tests for the PlayerStore read-modify-write helpers and derived stats."""

import pytest
from pydantic import ValidationError

from mob_engine.sim.core.entities import EquippedItem
from mob_engine.sim.player_store import PlayerStore


# ---------------------------------------------------------------------------
# apply_update
# ---------------------------------------------------------------------------

class TestApplyUpdate:
    def test_scalar_fields_replaced(self, store):
        rec = store.apply_update({"currency": 12, "location": "town"})
        assert rec.currency == 12
        assert rec.location == "town"
        assert store.get() is rec

    def test_dict_fields_merged_per_key(self, store):
        store.apply_update({"factions": {"goblins": -5}})
        store.apply_update({"factions": {"dwarves": 2}})
        assert store.get().factions == {"goblins": -5, "dwarves": 2}

    def test_invalid_update_rejected(self, store):
        with pytest.raises(ValidationError):
            store.apply_update({"level": 0})
        assert store.get().level == 3


# ---------------------------------------------------------------------------
# Read-modify-write helpers
# ---------------------------------------------------------------------------

class TestHelpers:
    def test_adjust_health_clamped(self, store):
        assert store.adjust_health(-30).health == 70
        assert store.adjust_health(-500).health == 0
        assert store.adjust_health(1000).health == 100

    def test_adjust_health_uses_latest_record(self, store):
        store.apply_update({"health": 40})  # e.g. an external regeneration tick
        assert store.adjust_health(-4).health == 36

    def test_grant_experience_levels_up(self, make_store):
        store = make_store(level=1, experience=150)
        rec = store.grant_experience(60)
        assert rec.experience == 210
        assert rec.level == 2

    def test_grant_experience_never_levels_down(self, make_store):
        store = make_store(level=5, experience=0)
        assert store.grant_experience(10).level == 5

    def test_grant_zero_is_noop(self, store):
        before = store.get()
        assert store.grant_experience(0) is before

    def test_add_currency(self, store):
        store.add_currency(5)
        store.add_currency(-3)
        assert store.get().currency == 5

    def test_add_items_stacks(self, store):
        store.add_items({"ear": 1})
        store.add_items({"ear": 2, "club": 1})
        assert store.get().inventory == {"ear": 3, "club": 1}

    def test_adjust_standing_returns_value(self, store):
        assert store.adjust_standing("goblins", -5) == -5
        assert store.adjust_standing("goblins", -5) == -10


# ---------------------------------------------------------------------------
# Derived combat stats
# ---------------------------------------------------------------------------

class TestCombatStats:
    def test_base_only(self, store, content):
        stats = store.combat_stats(content)
        assert (stats.level, stats.attack, stats.defense) == (3, 30, 2)

    def test_equipment_bonuses(self, make_store, content):
        store = make_store(equipment={
            "weapon": EquippedItem(item_id="sword", durability=10),
            "neck": EquippedItem(item_id="amulet"),
        })
        stats = store.combat_stats(content)
        assert stats.attack == 30 + 4 + 2
        assert stats.defense == 2 + 2

    def test_broken_items_ignored(self, make_store, content):
        store = make_store(equipment={"weapon": EquippedItem(item_id="sword", durability=0)})
        assert store.combat_stats(content).attack == 30

    def test_items_without_max_durability_never_break(self, make_store, content):
        store = make_store(equipment={"neck": EquippedItem(item_id="amulet", durability=0)})
        stats = store.combat_stats(content)
        assert stats.attack == 30 + 2
        assert stats.defense == 2 + 2

    def test_unknown_item_ignored(self, make_store, content):
        store = make_store(equipment={"weapon": EquippedItem(item_id="excalibur")})
        assert store.combat_stats(content).attack == 30

    def test_recomputed_after_equipment_change(self, store, content):
        assert store.combat_stats(content).attack == 30
        store.apply_update({"equipment": {"weapon": {"item_id": "sword", "durability": 5}}})
        assert store.combat_stats(content).attack == 34


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

class TestPersistence:
    def test_every_update_saved(self, make_store, tmp_path):
        path = tmp_path / "saves" / "tess.json"
        store = make_store()
        store.path = path
        store.add_currency(7)

        reloaded = PlayerStore.load(path)
        assert reloaded.get().currency == 7
        assert reloaded.path == path

    def test_no_path_no_file(self, store, tmp_path):
        store.add_currency(1)
        assert list(tmp_path.iterdir()) == []
