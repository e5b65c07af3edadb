"""Run seeded encounters against the vanilla realm in virtual time.

Usage:
    uv run python scripts/demo_encounter.py [--zone whisperwood] [--fights 5] [--seed 42]
"""

from __future__ import annotations

import argparse
import logging

from mob_engine.config import EngineConfig
from mob_engine.ir.factions import standing_for
from mob_engine.sim.content.registry import ContentRegistry
from mob_engine.sim.core.entities import PlayerRecord
from mob_engine.sim.core.events import CreatureSpawned, EncounterEnded, FactionStandingChanged
from mob_engine.sim.player_store import PlayerStore
from mob_engine.sim.realm import Realm

# Long enough for any encounter on the vanilla realm to finish.
_MAX_ROUNDS = 200


def main() -> None:
    parser = argparse.ArgumentParser(description="Run seeded mob encounters")
    parser.add_argument("--zone", type=str, default="whisperwood", help="Zone to hunt in")
    parser.add_argument("--fights", type=int, default=5, help="Number of encounters")
    parser.add_argument("--seed", type=int, default=42, help="Master seed")
    parser.add_argument("--level", type=int, default=2, help="Starting player level")
    parser.add_argument("--config", type=str, default=None, help="EngineConfig JSON file")
    parser.add_argument("--player", type=str, default=None, help="Player snapshot JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    content = ContentRegistry()
    content.load_vanilla_realm()
    config = EngineConfig.load(args.config) if args.config else EngineConfig(
        start_location="hollow_village",
    )
    if args.player:
        store = PlayerStore.load(args.player)
    else:
        store = PlayerStore(PlayerRecord(
            name="Ayla", level=args.level, health=40, max_health=40,
            base_attack=9, base_defense=3, bind_point="hollow_village",
        ))

    with Realm(content, store, seed=args.seed, config=config) as realm:
        realm.bus.subscribe(CreatureSpawned, lambda e: print(f"  + {e.template_id} ({e.instance_id})"))
        realm.bus.subscribe(FactionStandingChanged, lambda e: print(
            f"  faction {e.faction_id}: {e.delta:+d} -> {e.value} ({standing_for(e.value).value})"
        ))
        realm.bus.subscribe(EncounterEnded, lambda e: print(
            f"  => {e.outcome}"
            + (f": {e.reward.experience} xp, {e.reward.currency} coin, {e.reward.item_totals()}"
               if e.reward else "")
        ))

        print(f"Entering {args.zone}...")
        realm.enter_zone(args.zone)

        for n in range(1, args.fights + 1):
            if store.get().location != args.zone:
                realm.enter_zone(args.zone)
            targets = [
                c for c in realm.spawns.live(args.zone)
                if content.get_template(c.template_id).engageable
            ]
            if not targets:
                print("Nothing to fight; waiting for respawns...")
                realm.advance(30.0)
                continue

            target = targets[0]
            print(f"Fight {n}: {target.name} (level {target.level}, {target.current_health} hp)")
            session = realm.engage(target.id)
            rounds = 0
            while session is not None and session.engaged and rounds < _MAX_ROUNDS:
                session.attack()
                realm.advance(config.attack_delay + config.tick_interval)
                rounds += 1
            if session is not None and session.engaged:
                session.flee()

        rec = store.get()
        print()
        print(f"{rec.name}: level {rec.level}, {rec.experience} xp, {rec.currency} coin")
        print(f"Inventory: {rec.inventory}")
        print(f"Results: {realm.telemetry.results()}")


if __name__ == "__main__":
    main()
