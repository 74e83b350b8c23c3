"""Exception types raised by the battle engine.

Only *invalid references* are exceptions.  Illegal actions (no PP, switching
into a fainted monster, ...) and probabilistic failures (misses, failed
catches) are ordinary outcomes reported through ``BattleResult``.
"""

from __future__ import annotations


class BattleError(Exception):
    """Base for engine errors."""


class InvalidReferenceError(BattleError, KeyError):
    """An id does not resolve to a catalog entry.

    Raised before any combatant or context state is mutated, so callers can
    treat the whole call as not having happened.
    """

    def __init__(self, kind: str, ref_id: str) -> None:
        super().__init__(f"Unknown {kind} id {ref_id!r}")
        self.kind = kind
        self.ref_id = ref_id

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return self.args[0]
