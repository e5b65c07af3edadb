"""Reproducible random source for a realm.

Every roll in the engine -- hit and dodge checks, damage variance, spawn
levels and placement, respawn delays, loot and currency -- is drawn from
a :class:`GameRNG`.  A realm seeds one master generator and hands each
subsystem its own named fork, so extra combat rolls never change which
creature spawns next or what it drops.
"""

from __future__ import annotations

import hashlib
import random
from typing import Iterable, Sequence, TypeVar

T = TypeVar("T")

# Names of the streams a realm forks from its master seed.
COMBAT_STREAM = "combat"
SPAWN_STREAM = "spawns"
REWARD_STREAM = "rewards"


class GameRNG:
    """Seeded generator with named, independent child streams.

    ``random_int`` and ``random_float`` are the two primitive draws; the
    other helpers are built on them, so a subclass that scripts those two
    controls every roll except ``random_choice`` and ``shuffle``.

    Parameters
    ----------
    seed:
        Any integer.  Equal seeds give equal sequences.
    """

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    # ------------------------------------------------------------------
    # Primitive draws
    # ------------------------------------------------------------------

    def random_int(self, low: int, high: int) -> int:
        """Uniform integer in the inclusive range ``[low, high]``."""
        return self._rng.randint(low, high)

    def random_float(self) -> float:
        """Uniform float in ``[0.0, 1.0)``."""
        return self._rng.random()

    # ------------------------------------------------------------------
    # Derived draws
    # ------------------------------------------------------------------

    def random_uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.random_float()

    def chance(self, probability: float) -> bool:
        """True with *probability*; 0 never succeeds and 1 always does."""
        return self.random_float() < probability

    def random_choice(self, seq: Sequence[T]) -> T:
        return self._rng.choice(seq)

    def weighted_choice(self, pairs: Iterable[tuple[T, float]]) -> T | None:
        """Pick one value from ``(value, weight)`` pairs.

        Weights are relative: each is divided by the total, so they need
        not sum to 1.  Zero weights are never picked.  Returns ``None``
        when nothing has a positive weight.
        """
        options = [(value, weight) for value, weight in pairs if weight > 0]
        total = sum(weight for _, weight in options)
        if total <= 0:
            return None
        roll = self.random_float() * total
        for value, weight in options:
            roll -= weight
            if roll < 0:
                return value
        return options[-1][0]

    def shuffle(self, items: list[T]) -> None:
        self._rng.shuffle(items)

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------

    def fork(self, name: str) -> GameRNG:
        """Derive the child stream called *name*.

        The child seed is a hash of this seed and *name*, so the same pair
        always yields the same stream and drawing from one child leaves
        its siblings untouched.
        """
        digest = hashlib.sha256(f"{self._seed}:{name}".encode()).digest()
        return GameRNG(int.from_bytes(digest[:8], "big"))

    def __repr__(self) -> str:
        return f"GameRNG(seed={self._seed})"
