"""Ability definitions.

Abilities are passive: they never take a turn or spend PP.  The engine keys
its hooks on ``effect``, not on the ability id, so several abilities may share
an effect.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class AbilityEffect(str, Enum):
    FIRE_BOOST_LOW_HP = "fire_boost_low_hp"
    WATER_BOOST_LOW_HP = "water_boost_low_hp"
    GRASS_BOOST_LOW_HP = "grass_boost_low_hp"
    LOWER_OPPONENT_ATTACK = "lower_opponent_attack"
    SPEED_BOOST_WATER = "speed_boost_water"
    NONE = "none"


class AbilityDefinition(BaseModel):
    id: str
    name: str
    description: str = ""
    effect: AbilityEffect = AbilityEffect.NONE
