"""Tests for lootable remains."""

import pytest

from mob_engine.ir.zones import Position
from mob_engine.sim.core.entities import CreatureInstance
from mob_engine.sim.core.events import EventBus, RemainsCreated
from mob_engine.sim.core.scheduler import Scheduler
from mob_engine.sim.rewards.loot import LootDrop
from mob_engine.sim.spawning.remains import RemainsRegistry


def _make_creature(x: int = 1, y: int = 1, zone_id: str = "arena") -> CreatureInstance:
    return CreatureInstance(
        template_id="goblin", name="Goblin", zone_id=zone_id,
        position=Position(x=x, y=y), level=3,
        max_health=50, current_health=0, attack=6, defense=2, alive=False,
    )


def _drops() -> list[LootDrop]:
    return [LootDrop(item_id="ear"), LootDrop(item_id="club", quantity=2)]


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def remains(content, bus) -> RemainsRegistry:
    return RemainsRegistry(content, Scheduler(), bus, lifetime=300.0)


class TestCreate:
    def test_create_on_walkable_tile(self, remains, bus):
        seen = []
        bus.subscribe(RemainsCreated, seen.append)
        creature = _make_creature()

        r = remains.create(creature, _drops())

        assert r is not None
        assert r.position == creature.position
        assert r.instance_id == creature.id
        assert r.expires_at == 300.0
        assert remains.in_zone("arena") == [r]
        assert seen[0].item_count == 2

    def test_blocked_tile_creates_nothing(self, remains):
        assert remains.create(_make_creature(2, 2), _drops()) is None
        assert len(remains) == 0

    def test_nothing_to_hold(self, remains):
        assert remains.create(_make_creature(), []) is None


class TestLooting:
    def test_loot_item_moves_one_stack(self, remains, store):
        r = remains.create(_make_creature(), _drops())

        drop = remains.loot_item(r.id, 0, store)

        assert drop.item_id == "ear"
        assert store.get().inventory == {"ear": 1}
        assert remains.get(r.id) is not None
        assert [d.item_id for d in r.items] == ["club"]

    def test_last_item_removes_remains(self, remains, store):
        r = remains.create(_make_creature(), [LootDrop(item_id="ear")])
        remains.loot_item(r.id, 0, store)
        assert remains.get(r.id) is None
        assert remains.scheduler.pending_count() == 0

    def test_bad_index_ignored(self, remains, store):
        r = remains.create(_make_creature(), _drops())
        assert remains.loot_item(r.id, 5, store) is None
        assert store.get().inventory == {}

    def test_loot_all(self, remains, store):
        r = remains.create(_make_creature(), _drops() + [LootDrop(item_id="ear")])
        assert remains.loot_all(r.id, store) == {"ear": 2, "club": 2}
        assert store.get().inventory == {"ear": 2, "club": 2}
        assert remains.get(r.id) is None

    def test_loot_from_missing_remains(self, remains, store):
        assert remains.loot_all("remains_nope", store) == {}
        assert remains.loot_item("remains_nope", 0, store) is None


class TestLifetime:
    def test_expires_after_lifetime(self, remains, store):
        r = remains.create(_make_creature(), _drops())
        remains.scheduler.advance(299.0)
        assert remains.get(r.id) is not None
        remains.scheduler.advance(1.0)
        assert remains.get(r.id) is None
        assert store.get().inventory == {}

    def test_clear_zone(self, remains):
        remains.create(_make_creature(0, 0), _drops())
        remains.create(_make_creature(1, 1, zone_id="cave"), _drops())
        assert remains.clear_zone("arena") == 1
        assert len(remains) == 1
        assert remains.in_zone("cave")
