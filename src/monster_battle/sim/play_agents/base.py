"""Base class for AI agents that pick battle actions.

All battle agents must subclass ``BattleAgent`` and implement
``choose_action``.  The battle simulator calls it once per side per turn.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from monster_battle.sim.content.registry import CatalogRegistry
    from monster_battle.sim.core.actions import BattleAction
    from monster_battle.sim.core.battle_state import BattleContext
    from monster_battle.sim.core.entities import Combatant


class BattleAgent(ABC):
    """Base class for agents that choose one side's action each turn."""

    @abstractmethod
    def choose_action(
        self,
        combatant: Combatant,
        opponent: Combatant,
        context: BattleContext,
        registry: CatalogRegistry,
    ) -> BattleAction:
        """Choose what *combatant* does this turn.

        Parameters
        ----------
        combatant:
            The agent's active monster.  Must not be fainted.
        opponent:
            The opposing active monster.
        context:
            The current battle context, giving the agent full observability.
        registry:
            Catalog lookup for move data.

        Returns
        -------
        BattleAction
            The action to resolve.  A combatant with a committed move
            (charging or locked) should repeat it; the resolver enforces the
            commitment either way.
        """
