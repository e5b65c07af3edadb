"""Item and loot-table definitions."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class StatBonus(BaseModel):
    """Flat combat bonuses granted by an equipped item."""

    attack: int = 0
    defense: int = 0
    evasion: int = 0
    accuracy: int = 0
    all: int = 0
    """Added to both attack and defense (charms)."""


class ItemDefinition(BaseModel):
    """An item that can be looted, carried, or equipped."""

    id: str
    name: str
    level: int = Field(default=1, ge=1)
    droppable: bool = True
    """Non-droppable items are stripped from loot before it is granted."""

    bonuses: StatBonus = Field(default_factory=StatBonus)
    max_durability: int = Field(default=0, ge=0)
    """``0`` means the item has no durability and never breaks."""


class LootEntry(BaseModel):
    """One independently rolled row of a shared loot table."""

    item_id: str
    chance: float = Field(ge=0.0, le=1.0)
    min_quantity: int = Field(default=1, ge=1)
    max_quantity: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def _check_quantity(self) -> LootEntry:
        if self.min_quantity > self.max_quantity:
            raise ValueError(
                f"Loot entry {self.item_id!r}: min_quantity "
                f"{self.min_quantity} > max_quantity {self.max_quantity}"
            )
        return self


class LootTable(BaseModel):
    """A loot table shared between several creature templates."""

    id: str
    entries: list[LootEntry] = Field(default_factory=list)
