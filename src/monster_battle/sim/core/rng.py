"""Seeded random number generator for reproducible battles.

Every randomized sub-step of the engine -- hit rolls, critical hits, effect
procs, speed ties, AI choice -- draws from a ``BattleRNG`` that the caller
passes in.  Two battles started from the same seed with the same actions
produce the same log.
"""

from __future__ import annotations

import hashlib
import random
from typing import Sequence, TypeVar

T = TypeVar("T")


class BattleRNG:
    """Deterministic RNG that can be forked into independent sub-streams.

    Parameters
    ----------
    seed:
        Integer seed for the underlying Mersenne Twister.
    """

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    # -- core draws ----------------------------------------------------------

    def random_int(self, low: int, high: int) -> int:
        """Return a random integer *N* such that ``low <= N <= high``."""
        return self._rng.randint(low, high)

    def random_float(self) -> float:
        """Return a random float in the half-open interval ``[0.0, 1.0)``."""
        return self._rng.random()

    def uniform(self, low: float, high: float) -> float:
        """Return a random float between *low* and *high*."""
        return self._rng.uniform(low, high)

    def random_choice(self, seq: Sequence[T]) -> T:
        """Return a random element from a non-empty sequence."""
        return self._rng.choice(seq)

    # -- derived helpers -----------------------------------------------------

    def chance(self, probability: float) -> bool:
        """Return ``True`` with the given probability (0.0 -- 1.0)."""
        if probability <= 0:
            return False
        if probability >= 1:
            return True
        return self.random_float() < probability

    def roll_percent(self, percent: float) -> bool:
        """Return ``True`` with ``percent`` in 100 odds."""
        return self.chance(percent / 100)

    # -- forking -------------------------------------------------------------

    def fork(self, name: str) -> BattleRNG:
        """Create a child RNG whose seed is derived from this seed and *name*.

        Lets the turn engine and the AI agents draw from separate streams so
        that an agent's choices never shift the engine's rolls.
        """
        digest = hashlib.sha256(f"{self._seed}:{name}".encode()).digest()
        child_seed = int.from_bytes(digest[:8], "big")
        return BattleRNG(child_seed)

    def __repr__(self) -> str:
        return f"BattleRNG(seed={self._seed})"
