"""Shared fixtures and helpers for simulation tests."""

from __future__ import annotations

from typing import Any, Callable, Iterable

import pytest

from mob_engine.config import EngineConfig
from mob_engine.ir.content_set import ContentSet
from mob_engine.sim.content.registry import ContentRegistry
from mob_engine.sim.core.entities import PlayerRecord
from mob_engine.sim.core.rng import GameRNG
from mob_engine.sim.player_store import PlayerStore
from mob_engine.sim.realm import Realm


# ---------------------------------------------------------------------------
# Controlled randomness
# ---------------------------------------------------------------------------

class ScriptedRNG(GameRNG):
    """GameRNG that replays scripted floats/ints before falling back to its seed.

    Scripted ints are clamped into the requested range.
    """

    def __init__(self, floats: Iterable[float] = (), ints: Iterable[int] = (), seed: int = 0) -> None:
        super().__init__(seed)
        self.floats = list(floats)
        self.ints = list(ints)

    def random_float(self) -> float:
        if self.floats:
            return self.floats.pop(0)
        return super().random_float()

    def random_int(self, low: int, high: int) -> int:
        if self.ints:
            return max(low, min(high, self.ints.pop(0)))
        return super().random_int(low, high)


class FixedRNG(GameRNG):
    """Every float roll returns *value*; every int roll the range midpoint.

    With the default 0.5 an ordinary attack always hits, is never dodged
    or critical, and has no variance.
    """

    def __init__(self, value: float = 0.5, seed: int = 0) -> None:
        super().__init__(seed)
        self.value = value

    def random_float(self) -> float:
        return self.value

    def random_int(self, low: int, high: int) -> int:
        return (low + high) // 2


@pytest.fixture
def scripted_rng() -> type[ScriptedRNG]:
    return ScriptedRNG


@pytest.fixture
def fixed_rng() -> type[FixedRNG]:
    return FixedRNG


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------

ARENA_CONTENT: dict[str, Any] = {
    "name": "arena",
    "factions": [
        {"id": "goblins", "name": "Goblins", "rival": "dwarves"},
        {"id": "dwarves", "name": "Dwarves", "rival": "goblins"},
        {"id": "hermits", "name": "Hermits", "rival": "nobody"},
    ],
    "items": [
        {"id": "ear", "name": "Goblin Ear"},
        {"id": "club", "name": "Club"},
        {"id": "totem", "name": "Tribal Totem", "droppable": False},
        {"id": "sword", "name": "Sword", "bonuses": {"attack": 4}, "max_durability": 10},
        {"id": "amulet", "name": "Amulet", "bonuses": {"all": 2}},
    ],
    "loot_tables": [
        {
            "id": "goblin_loot",
            "entries": [
                {"item_id": "ear", "chance": 1.0},
                {"item_id": "totem", "chance": 1.0},
                {"item_id": "club", "chance": 0.5, "min_quantity": 1, "max_quantity": 3},
            ],
        },
    ],
    "templates": [
        {
            "id": "goblin", "name": "Goblin",
            "level_range": {"min": 3, "max": 3},
            "base_stats": {"max_health": 50, "attack": 6, "defense": 2},
            "xp_base": 10, "currency_base": 2,
            "faction_id": "goblins", "loot_table_id": "goblin_loot",
        },
        {
            "id": "rat", "name": "Rat",
            "level_range": {"min": 1, "max": 1},
            "base_stats": {"max_health": 5, "attack": 2},
            "drop_table": [{"item_id": "ear", "weight": 1}],
        },
        {
            "id": "ogre", "name": "Ogre",
            "level_range": {"min": 1, "max": 4},
            "base_stats": {"max_health": 40, "attack": 12, "defense": 3},
            "faction_id": "goblins",
            "faction_changes": {"dwarves": 7},
        },
        {
            "id": "hermit", "name": "Hermit",
            "base_stats": {"max_health": 10},
            "faction_id": "hermits",
        },
        {
            "id": "guard", "name": "Guard",
            "base_stats": {"max_health": 100, "attack": 20},
            "is_guard": True,
        },
        {
            "id": "deer", "name": "Deer",
            "base_stats": {"max_health": 8},
            "hostile": False,
        },
    ],
    "zones": [
        {
            "id": "arena", "name": "Arena", "width": 5, "height": 5,
            "blocked": [{"x": 2, "y": 2}],
            "spawn_slots": [
                {"id": "arena_pit", "templates": {"goblin": 1}, "respawn_seconds": 20},
            ],
        },
        {
            "id": "camp", "name": "Camp", "width": 4, "height": 4,
            "spawn_slots": [
                {
                    "id": "camp_tents", "templates": {"goblin": 1},
                    "max_concurrent": 3, "placement": "static",
                    "spawn_points": [{"x": 0, "y": 0}, {"x": 3, "y": 3}],
                    "respawn_window": [15, 30],
                },
            ],
        },
        {
            "id": "cave", "name": "Cave", "width": 3, "height": 3, "xp_modifier": 1.5,
            "spawn_slots": [
                {"id": "cave_rats", "templates": {"rat": 1}, "max_concurrent": 2},
            ],
        },
        {"id": "town", "name": "Town", "width": 3, "height": 3, "safe": True},
    ],
}


@pytest.fixture
def content() -> ContentRegistry:
    """Registry loaded with the small arena content set."""
    reg = ContentRegistry()
    reg.load_content_set(ContentSet.model_validate(ARENA_CONTENT))
    return reg


@pytest.fixture(scope="module")
def vanilla() -> ContentRegistry:
    """Module-scoped registry with the vanilla realm loaded once."""
    reg = ContentRegistry()
    reg.load_vanilla_realm()
    return reg


# ---------------------------------------------------------------------------
# Player and realm
# ---------------------------------------------------------------------------

def make_record(**kwargs: Any) -> PlayerRecord:
    defaults: dict[str, Any] = dict(
        name="Tess", level=3, health=100, max_health=100, mana=10, max_mana=10,
        base_attack=30, base_defense=2, bind_point="town", location="arena",
    )
    defaults.update(kwargs)
    return PlayerRecord(**defaults)


@pytest.fixture
def store() -> PlayerStore:
    return PlayerStore(make_record())


@pytest.fixture
def make_store() -> Callable[..., PlayerStore]:
    def _make(**kwargs: Any) -> PlayerStore:
        return PlayerStore(make_record(**kwargs))
    return _make


@pytest.fixture
def make_realm(content: ContentRegistry) -> Callable[..., Realm]:
    """Factory: ``make_realm(store=None, seed=1, **config)``.

    Combat and reward rolls use ``FixedRNG(0.5)`` unless *combat_rng* /
    *rewards_rng* are passed.
    """
    def _make(
        store: PlayerStore | None = None,
        seed: int = 1,
        combat_rng: GameRNG | None = None,
        rewards_rng: GameRNG | None = None,
        **config: Any,
    ) -> Realm:
        realm = Realm(content, store or PlayerStore(make_record()), seed=seed, config=EngineConfig(**config))
        realm.combat_rng = combat_rng or FixedRNG(0.5)
        realm.rewards_rng = rewards_rng or FixedRNG(0.5)
        return realm
    return _make
