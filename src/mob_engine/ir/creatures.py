"""Creature templates -- the immutable definitions every spawned mob is rolled from."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class LevelRange(BaseModel):
    """Inclusive level range a template spawns within."""

    min: int = Field(default=1, ge=1)
    max: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def _check_order(self) -> LevelRange:
        if self.min > self.max:
            raise ValueError(
                f"Level range min ({self.min}) exceeds max ({self.max})"
            )
        return self


class BaseStats(BaseModel):
    """Unscaled stat block of a template at the bottom of its level range."""

    max_health: int = Field(ge=1)
    attack: int = Field(default=1, ge=0)
    defense: int = Field(default=0, ge=0)
    evasion: int = Field(default=0, ge=0)
    """Feeds the defender's dodge chance and the attacker's miss chance."""

    accuracy: int = Field(default=0, ge=0)


class WeightedDrop(BaseModel):
    """One row of a creature-specific weighted drop table."""

    item_id: str
    weight: float = Field(default=1.0, ge=0)


class CreatureTemplate(BaseModel):
    """Complete, never-mutated definition of a hostile creature type."""

    id: str
    """Unique identifier (e.g. ``"forest_wolf"``)."""

    name: str
    """Display name."""

    description: str = ""

    level_range: LevelRange = Field(default_factory=LevelRange)
    """Spawned instances roll their level uniformly inside this range."""

    base_stats: BaseStats

    xp_base: int = Field(default=10, ge=0)
    """Experience base fed into the exponential level curve."""

    currency_base: int = Field(default=1, ge=0)
    """Per-level currency base before jitter."""

    faction_id: str | None = None
    """Faction the creature belongs to.  ``None`` means neutral."""

    faction_changes: dict[str, int] = Field(default_factory=dict)
    """Explicit standing deltas applied on kill.  When non-empty these
    replace the default own-faction / rival adjustment entirely."""

    drop_table: list[WeightedDrop] = Field(default_factory=list)
    """Creature-specific table: a single weighted pick on defeat."""

    loot_table_id: str | None = None
    """Shared loot table rolled entry-by-entry.  Only consulted when
    ``drop_table`` is empty."""

    hostile: bool = True
    """Non-hostile creatures cannot be engaged."""

    is_guard: bool = False
    """Guards patrol towns and are never valid combat targets."""

    @property
    def engageable(self) -> bool:
        return self.hostile and not self.is_guard
