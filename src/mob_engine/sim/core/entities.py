"""Runtime entity models for the mob encounter engine.

All data classes use Pydantic v2 BaseModel for validation and
serialization.  Creature instances are mutable and owned by the spawn
registry; the player record is owned by the player store.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel, Field

from mob_engine.ir.zones import Position


# ---------------------------------------------------------------------------
# Combat stat block
# ---------------------------------------------------------------------------

class CombatantStats(BaseModel):
    """Everything the damage resolver needs to know about one side."""

    name: str
    level: int = 1
    attack: int = 1
    defense: int = 0
    evasion: int = 0
    accuracy: int = 0


# ---------------------------------------------------------------------------
# Creature instance
# ---------------------------------------------------------------------------

class CreatureInstance(BaseModel):
    """One spawned, trackable occurrence of a creature template."""

    id: str = Field(default_factory=lambda: f"mob_{uuid.uuid4().hex[:12]}")
    template_id: str
    name: str
    zone_id: str
    slot_id: str | None = None
    """Spawn slot the instance counts against.  ``None`` for ad-hoc spawns."""

    position: Position
    level: int
    max_health: int
    current_health: int
    attack: int
    defense: int
    evasion: int = 0
    accuracy: int = 0
    alive: bool = True
    in_combat: bool = False
    """Set while an encounter session holds this instance."""

    spawned_at: float = 0.0

    # -- HP queries ----------------------------------------------------------

    @property
    def is_dead(self) -> bool:
        return self.current_health <= 0

    # -- damage --------------------------------------------------------------

    def take_damage(self, amount: int) -> int:
        """Apply *amount* damage.  Health never drops below zero.

        Returns the health actually lost.
        """
        if amount <= 0:
            return 0
        lost = min(self.current_health, amount)
        self.current_health -= lost
        return lost

    def combat_stats(self) -> CombatantStats:
        return CombatantStats(
            name=self.name,
            level=self.level,
            attack=self.attack,
            defense=self.defense,
            evasion=self.evasion,
            accuracy=self.accuracy,
        )


# ---------------------------------------------------------------------------
# Player record
# ---------------------------------------------------------------------------

class EquippedItem(BaseModel):
    """An item worn in an equipment slot, with its own wear."""

    item_id: str
    durability: int | None = None
    """Current durability.  ``None`` means the item does not wear; ``0``
    means broken.  Broken items grant no bonuses, unless their definition
    has no ``max_durability`` and so never wears."""

    @property
    def broken(self) -> bool:
        return self.durability is not None and self.durability <= 0


class PlayerRecord(BaseModel):
    """Flat, persisted player state the engine reads and updates."""

    name: str
    level: int = Field(default=1, ge=1)
    experience: int = Field(default=0, ge=0)
    """Cumulative experience."""

    health: int = 20
    max_health: int = Field(default=20, ge=1)
    mana: int = 0
    max_mana: int = 0

    base_attack: int = 5
    base_defense: int = 2
    base_evasion: int = 0
    base_accuracy: int = 0

    currency: int = 0
    inventory: dict[str, int] = Field(default_factory=dict)
    """Item id -> quantity carried."""

    equipment: dict[str, EquippedItem] = Field(default_factory=dict)
    """Equipment slot name -> worn item."""

    factions: dict[str, int] = Field(default_factory=dict)
    """Faction id -> raw standing value."""

    location: str | None = None
    bind_point: str | None = None
    last_safe_zone: str | None = None
    start_location: str | None = None

    @property
    def is_dead(self) -> bool:
        return self.health <= 0
