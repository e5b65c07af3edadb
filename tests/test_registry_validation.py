"""Quick validation that the vanilla realm loads correctly."""

import json

from mob_engine.ir import ContentSet, Placement
from mob_engine.sim.content.registry import _DEFAULT_REALM_PATH, ContentRegistry


def test_load_all():
    registry = ContentRegistry()
    registry.load_vanilla_realm()

    assert set(registry.zones) == {"hollow_village", "whisperwood", "old_barrow"}
    assert len(registry.templates) == 4
    assert registry.get_zone("hollow_village").safe

    # Every template id referenced by a slot resolves
    for zone in registry.zones.values():
        for slot in zone.spawn_slots:
            assert registry.zone_of_slot(slot.id) == zone.id
            assert registry.get_spawn_slot(slot.id) is slot
            for tid in slot.templates:
                assert registry.get_template(tid) is not None
            if slot.placement == Placement.STATIC:
                for point in slot.spawn_points:
                    assert registry.is_walkable(zone.id, point.x, point.y)


def test_no_dangling_references():
    with open(_DEFAULT_REALM_PATH) as f:
        content_set = ContentSet.model_validate(json.load(f))
    assert content_set.dangling_references() == []


def test_walkable_tiles():
    registry = ContentRegistry()
    registry.load_vanilla_realm()

    tiles = registry.walkable_tiles("hollow_village")
    assert len(tiles) == 8 * 8 - 4
    assert not registry.is_walkable("hollow_village", 3, 3)
    assert not registry.is_walkable("hollow_village", 8, 0)
    assert registry.walkable_tiles("nowhere") == []
    assert registry.get_spawn_slot("nowhere") is None
