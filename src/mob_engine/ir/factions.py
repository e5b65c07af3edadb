"""Faction definitions and the standing ladder."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class FactionDefinition(BaseModel):
    """A faction creatures can belong to."""

    id: str
    name: str
    rival: str | None = None
    """Faction that gains standing when a member of this one is killed."""


class FactionStanding(str, Enum):
    """Named standing bands, best to worst."""

    ALLY = "ally"
    WARMLY = "warmly"
    KINDLY = "kindly"
    AMIABLE = "amiable"
    INDIFFERENT = "indifferent"
    APPREHENSIVE = "apprehensive"
    DUBIOUS = "dubious"
    THREATENING = "threatening"
    SCOWLS = "scowls"


# Lower bound (inclusive) of each band, checked top-down.
_STANDING_THRESHOLDS: tuple[tuple[int, FactionStanding], ...] = (
    (1100, FactionStanding.ALLY),
    (750, FactionStanding.WARMLY),
    (500, FactionStanding.KINDLY),
    (100, FactionStanding.AMIABLE),
    (0, FactionStanding.INDIFFERENT),
    (-100, FactionStanding.APPREHENSIVE),
    (-500, FactionStanding.DUBIOUS),
    (-750, FactionStanding.THREATENING),
)


def standing_for(value: int) -> FactionStanding:
    """Map a raw standing value onto its named band."""
    for threshold, standing in _STANDING_THRESHOLDS:
        if value >= threshold:
            return standing
    return FactionStanding.SCOWLS
