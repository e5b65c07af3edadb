"""Telemetry data models for per-encounter and per-realm statistics.

These lightweight dataclasses capture enough to judge how encounters
play out without storing every attack:

- **EncounterTelemetry**: outcome, turns, damage dealt/taken, misses,
  dodges, crits.
- **RealmTelemetry**: seed and the ordered list of finished encounters.

Both classes are plain ``dataclass`` instances (not Pydantic models) to
keep collection cheap while sessions tick.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class EncounterTelemetry:
    """Stats from a single encounter.

    Attributes
    ----------
    template_id:
        Template of the creature engaged.
    creature_level:
        Rolled level of the creature instance.
    player_level:
        Player level when the encounter started.
    result:
        Terminal state name (``"victory"``, ``"defeat"``, ``"fled"`` or
        ``"abandoned"``); empty while the encounter is running.
    turns:
        Number of player attacks resolved.
    damage_dealt:
        Total health removed from the creature.
    damage_taken:
        Total health removed from the player by creature attacks.
    player_misses / creature_misses:
        Attacks that failed the hit check, per side.
    player_dodged / creature_dodged:
        Attacks the *defender* dodged, keyed by the attacking side.
    player_crits / creature_crits:
        Critical hits landed, per side.
    """

    template_id: str
    creature_level: int
    player_level: int
    result: str = ""
    turns: int = 0
    damage_dealt: int = 0
    damage_taken: int = 0
    player_misses: int = 0
    player_dodged: int = 0
    player_crits: int = 0
    creature_misses: int = 0
    creature_dodged: int = 0
    creature_crits: int = 0
    experience_gained: int = 0


@dataclass
class RealmTelemetry:
    """Stats from one realm lifetime.

    Attributes
    ----------
    seed:
        The master RNG seed the realm was created with.
    encounters:
        Finished encounters in the order they ended.
    """

    seed: int
    encounters: list[EncounterTelemetry] = field(default_factory=list)

    def results(self) -> dict[str, int]:
        """Count finished encounters by result."""
        counts: dict[str, int] = {}
        for enc in self.encounters:
            counts[enc.result] = counts.get(enc.result, 0) + 1
        return counts
