"""Engine-wide tunables.

Formula constants (experience brackets, critical multiplier, ...) live
next to the formulas that use them; this model only holds the knobs a
realm is expected to change.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, model_validator


class EngineConfig(BaseModel):
    """Timing and policy settings for one realm."""

    model_config = {"extra": "forbid"}

    tick_interval: float = Field(default=0.1, gt=0)
    """Seconds between combat-sync ticks."""

    attack_delay: float = Field(default=0.8, ge=0)
    """Seconds between the player's attack and the creature's reply."""

    turn_based: bool = False
    """When set, the creature replies immediately instead of after
    ``attack_delay``."""

    respawn_window: tuple[float, float] = (15.0, 30.0)
    """Default ``(min, max)`` respawn delay for slots without their own timing."""

    create_remains: bool = False
    """Leave lootable remains on victory instead of granting items directly."""

    remains_lifetime: float = Field(default=300.0, gt=0)
    """Seconds before unlooted remains decay."""

    start_location: str | None = None
    """Fallback respawn location for players with no bind point or safe zone."""

    @model_validator(mode="after")
    def _check_window(self) -> EngineConfig:
        low, high = self.respawn_window
        if low < 0 or low > high:
            raise ValueError(f"Invalid respawn window {self.respawn_window}")
        return self

    @classmethod
    def load(cls, path: str | Path) -> EngineConfig:
        """Read a config from a JSON file.  Unknown keys are rejected."""
        return cls.model_validate_json(Path(path).read_text())
