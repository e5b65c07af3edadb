"""Encounter module -- the player-versus-creature state machine."""

from mob_engine.sim.encounter.session import CombatDisplay, EncounterSession, EncounterState

__all__ = ["CombatDisplay", "EncounterSession", "EncounterState"]
