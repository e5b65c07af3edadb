"""Zone and spawn-slot definitions.

Two spawn models coexist and are selected per slot:

- **static** slots own fixed spawn points; each point holds at most one
  live creature and usually respawns on a fixed interval.
- **roaming** slots place creatures on any free walkable tile of the
  zone and usually respawn after a randomised window.

Either placement may use either respawn timing; ``respawn_seconds`` wins
when both timings are set.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class Position(BaseModel):
    """A tile coordinate inside a zone."""

    model_config = {"frozen": True}

    x: int
    y: int


class Placement(str, Enum):
    STATIC = "static"
    ROAMING = "roaming"


class SpawnSlot(BaseModel):
    """Zone-scoped rule bounding how many creatures of given templates live at once."""

    id: str
    templates: dict[str, float]
    """Eligible template ids mapped to their relative spawn weight."""

    max_concurrent: int = Field(default=1, ge=1)
    """Hard cap on live creatures tied to this slot, enforced at spawn time."""

    placement: Placement = Placement.ROAMING

    spawn_points: list[Position] = Field(default_factory=list)
    """Fixed points used by static slots."""

    respawn_seconds: float | None = Field(default=None, gt=0)
    """Fixed respawn interval.  Takes precedence over ``respawn_window``."""

    respawn_window: tuple[float, float] | None = None
    """Inclusive ``(min, max)`` seconds a respawn delay is drawn from.
    When neither timing is set the engine-wide default window applies."""

    @model_validator(mode="after")
    def _check_slot(self) -> SpawnSlot:
        if not self.templates:
            raise ValueError(f"Spawn slot {self.id!r} names no templates")
        if self.placement == Placement.STATIC and not self.spawn_points:
            raise ValueError(f"Static spawn slot {self.id!r} has no spawn points")
        if self.respawn_window is not None:
            low, high = self.respawn_window
            if low < 0 or low > high:
                raise ValueError(
                    f"Spawn slot {self.id!r} has invalid respawn window {self.respawn_window}"
                )
        return self


class ZoneDefinition(BaseModel):
    """A rectangular zone of tiles plus the spawn rules that populate it."""

    id: str
    name: str
    width: int = Field(ge=1)
    height: int = Field(ge=1)
    blocked: list[Position] = Field(default_factory=list)
    """Tiles creatures and remains may not occupy."""

    safe: bool = False
    """Safe zones are remembered as the player's last safe location."""

    xp_modifier: float = Field(default=1.0, gt=0)
    """Zone experience modifier applied on top of the level multiplier."""

    spawn_slots: list[SpawnSlot] = Field(default_factory=list)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height
