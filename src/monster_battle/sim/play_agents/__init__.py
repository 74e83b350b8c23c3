"""Battle agent implementations for headless simulation.

Re-exports the base class and all concrete agent implementations so
consumers can do::

    from monster_battle.sim.play_agents import BattleAgent, RandomMoveAgent
"""

from .base import BattleAgent
from .random_agent import RandomMoveAgent

__all__ = ["BattleAgent", "RandomMoveAgent"]
