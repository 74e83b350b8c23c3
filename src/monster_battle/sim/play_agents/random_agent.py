"""Random move agent -- the wild-monster AI.

The ``RandomMoveAgent`` is the baseline opponent for batch simulation runs
and the default AI for wild encounters.

Behaviour:
    - A charging or locked monster repeats its committed move.
    - Below 30 % HP it picks a random usable move with power >= 60, if it
      has one.
    - Otherwise it picks a random usable move.
    - With nothing usable it falls back to its first known move, which the
      resolver then refuses (no PP) like any other attempt.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from monster_battle.sim import multi_turn, two_turn
from monster_battle.sim.core.actions import AttackAction
from monster_battle.sim.core.rng import BattleRNG
from monster_battle.sim.move_validation import get_usable_moves
from monster_battle.sim.play_agents.base import BattleAgent

if TYPE_CHECKING:
    from monster_battle.sim.content.registry import CatalogRegistry
    from monster_battle.sim.core.battle_state import BattleContext
    from monster_battle.sim.core.entities import Combatant

LOW_HP_FRACTION = 0.3
STRONG_MOVE_POWER = 60
FALLBACK_MOVE_ID = "tackle"


class RandomMoveAgent(BattleAgent):
    """Agent that attacks with a random usable move each turn.

    Parameters
    ----------
    rng:
        Seeded RNG for deterministic randomness.  If ``None``, a default
        ``BattleRNG(seed=0)`` is created.
    low_hp_fraction:
        HP fraction below which the agent prefers strong moves.
    """

    def __init__(
        self,
        rng: BattleRNG | None = None,
        low_hp_fraction: float = LOW_HP_FRACTION,
    ) -> None:
        self._rng = rng or BattleRNG(seed=0)
        self._low_hp_fraction = low_hp_fraction

    def choose_action(
        self,
        combatant: Combatant,
        opponent: Combatant,
        context: BattleContext,
        registry: CatalogRegistry,
    ) -> AttackAction:
        if combatant.is_fainted:
            raise ValueError(f"fainted monster {combatant.id!r} cannot choose an action")

        committed = two_turn.forced_move(combatant) or multi_turn.forced_move(combatant)
        if committed is not None:
            return AttackAction(move_id=committed)

        usable = [c.move_id for c in get_usable_moves(registry, context, combatant) if c.can_use]
        if not usable:
            return AttackAction(move_id=combatant.moves[0] if combatant.moves else FALLBACK_MOVE_ID)

        if combatant.hp_fraction < self._low_hp_fraction:
            strong = [m for m in usable if registry.get_move(m).power >= STRONG_MOVE_POWER]
            if strong:
                return AttackAction(move_id=self._rng.random_choice(strong))

        return AttackAction(move_id=self._rng.random_choice(usable))
