"""Ability hooks.

Abilities fire at exactly two moments: battle start
(:func:`apply_battle_start_abilities`) and damage/speed computation
(:func:`stab_multiplier`, :func:`modified_speed`).  They never consume a
turn or PP.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from monster_battle.ir.abilities import AbilityEffect
from monster_battle.ir.types import MonsterType, Weather

from .stat_stages import stage_multiplier
from .status_effects import get_modified_stats

if TYPE_CHECKING:
    from monster_battle.ir.moves import MoveDefinition
    from monster_battle.sim.content.registry import CatalogRegistry
    from monster_battle.sim.core.battle_state import BattleContext, WeatherCondition
    from monster_battle.sim.core.entities import Combatant

STAB = 1.5
LOW_HP_THRESHOLD = 0.33
LOW_HP_BOOST = 1.5
SWIFT_SWIM_BOOST = 1.5
SWIFT_SWIM_RAIN_BOOST = 2.0

_LOW_HP_BOOST_TYPES: dict[AbilityEffect, MonsterType] = {
    AbilityEffect.FIRE_BOOST_LOW_HP: MonsterType.FIRE,
    AbilityEffect.WATER_BOOST_LOW_HP: MonsterType.WATER,
    AbilityEffect.GRASS_BOOST_LOW_HP: MonsterType.GRASS,
}


def ability_effect(combatant: Combatant, registry: CatalogRegistry) -> AbilityEffect:
    """Effect tag of the combatant's ability; ``NONE`` if it has none."""
    if not combatant.ability:
        return AbilityEffect.NONE
    return registry.get_ability(combatant.ability).effect


def apply_battle_start_abilities(context: BattleContext, registry: CatalogRegistry) -> list[str]:
    """Run battle-start abilities for both sides; returns log lines.

    Intimidate-style abilities set the opposing side's attack stage to -1.
    """
    messages: list[str] = []
    for side, opposing in (("player", "opponent"), ("opponent", "player")):
        user = context.active(side)
        if ability_effect(user, registry) == AbilityEffect.LOWER_OPPONENT_ATTACK:
            context.stages(opposing).attack = -1
            target = context.active(opposing)
            messages.append(f"{user.name}'s Intimidate lowered {target.name}'s Attack!")
    return messages


def stab_multiplier(attacker: Combatant, move: MoveDefinition, registry: CatalogRegistry) -> float:
    """Same-type bonus, boosted further by low-HP type abilities."""
    stab = STAB if move.type in attacker.types else 1.0
    boosted_type = _LOW_HP_BOOST_TYPES.get(ability_effect(attacker, registry))
    if boosted_type == move.type and attacker.hp_fraction <= LOW_HP_THRESHOLD:
        stab *= LOW_HP_BOOST
    return stab


def modified_speed(
    combatant: Combatant,
    registry: CatalogRegistry,
    weather: WeatherCondition | None = None,
    stage: int = 0,
) -> int:
    """Speed after status reductions, the speed stage and speed abilities."""
    speed = get_modified_stats(combatant).speed
    if stage:
        speed = math.floor(speed * stage_multiplier(stage))
    if ability_effect(combatant, registry) == AbilityEffect.SPEED_BOOST_WATER:
        in_rain = weather is not None and weather.weather == Weather.RAIN
        speed = math.floor(speed * (SWIFT_SWIM_RAIN_BOOST if in_rain else SWIFT_SWIM_BOOST))
    return speed
