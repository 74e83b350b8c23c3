"""Core battle primitives: combatants, per-battle context, actions, RNG."""

from monster_battle.sim.core.entities import (
    Charging,
    Combatant,
    Commitment,
    Idle,
    Locked,
    Recharging,
    StatBlock,
    StatusCondition,
    Trapped,
)
from monster_battle.sim.core.battle_state import (
    BattleContext,
    FieldEntry,
    FieldTracker,
    Side,
    StatStages,
    WeatherCondition,
    Winner,
    other_side,
)
from monster_battle.sim.core.actions import (
    ActionModifiers,
    AttackAction,
    BattleAction,
    BattleResult,
    CatchAction,
    FleeAction,
    ItemAction,
    SwitchAction,
)
from monster_battle.sim.core.rng import BattleRNG

__all__ = [
    # rng
    "BattleRNG",
    # entities
    "Combatant",
    "StatBlock",
    "StatusCondition",
    "Commitment",
    "Idle",
    "Charging",
    "Recharging",
    "Locked",
    "Trapped",
    # battle_state
    "BattleContext",
    "FieldEntry",
    "FieldTracker",
    "Side",
    "StatStages",
    "WeatherCondition",
    "Winner",
    "other_side",
    # actions
    "ActionModifiers",
    "AttackAction",
    "BattleAction",
    "BattleResult",
    "CatchAction",
    "FleeAction",
    "ItemAction",
    "SwitchAction",
]
