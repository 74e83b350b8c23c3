"""Catalog schema for the battle engine.

Moves, monster species, abilities and items are Pydantic models that load
cleanly from JSON.  The engine only ever reads them: every lookup goes
through :class:`~monster_battle.sim.content.registry.CatalogRegistry`.
"""

from .abilities import AbilityDefinition, AbilityEffect
from .items import BALL_MULTIPLIERS, BallTier, ItemDefinition, ItemEffect
from .monsters import BaseStats, MonsterDefinition
from .moves import (
    HealEffect,
    InflictStatusEffect,
    LockingData,
    MoveCategory,
    MoveDefinition,
    MoveEffect,
    MoveRestrictions,
    MultiHitData,
    MultiTurnMoveData,
    SemiInvulnerableState,
    SetWeatherEffect,
    StatStageEffect,
    TrappingData,
    TwoTurnMoveData,
    TwoTurnMoveType,
)
from .types import MonsterType, Rarity, StatName, StatusEffect, Weather

__all__ = [
    # abilities
    "AbilityDefinition",
    "AbilityEffect",
    # items
    "BALL_MULTIPLIERS",
    "BallTier",
    "ItemDefinition",
    "ItemEffect",
    # monsters
    "BaseStats",
    "MonsterDefinition",
    # moves
    "HealEffect",
    "InflictStatusEffect",
    "LockingData",
    "MoveCategory",
    "MoveDefinition",
    "MoveEffect",
    "MoveRestrictions",
    "MultiHitData",
    "MultiTurnMoveData",
    "SemiInvulnerableState",
    "SetWeatherEffect",
    "StatStageEffect",
    "TrappingData",
    "TwoTurnMoveData",
    "TwoTurnMoveType",
    # types
    "MonsterType",
    "Rarity",
    "StatName",
    "StatusEffect",
    "Weather",
]
