"""Damage calculation.

Implements the damage pipeline, in this order:
    stat pair by category -> status stat reductions -> stat stages (floor)
    -> base formula -> STAB (with ability boost) -> type effectiveness
    (weather-adjusted) -> critical hit -> weather power -> random factor
    -> floor, minimum 1

All multiplicative terms are composed by straight multiplication in the
order above and floored once at the end, so reordering them changes
results.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from monster_battle.ir.moves import MoveCategory
from monster_battle.ir.types import StatName

from .abilities import stab_multiplier
from .stat_stages import stage_multiplier
from .status_effects import get_modified_stats
from .type_chart import type_effectiveness
from .weather import weather_power_multiplier

if TYPE_CHECKING:
    from monster_battle.ir.moves import MoveDefinition
    from monster_battle.sim.content.registry import CatalogRegistry
    from monster_battle.sim.core.battle_state import BattleContext
    from monster_battle.sim.core.entities import Combatant, StatBlock
    from monster_battle.sim.core.rng import BattleRNG

logger = logging.getLogger(__name__)

CRITICAL_CHANCE = 0.01
CRITICAL_MULTIPLIER = 2.0
RANDOM_FACTOR_MIN = 0.85
RANDOM_FACTOR_MAX = 1.0


@dataclass
class DamageResult:
    damage: int
    is_critical: bool = False
    effectiveness: float = 1.0


def level_factor(level: int) -> float:
    return 2 * level / 5 + 2


def base_damage(level: int, power: float, attack: int, defense: int) -> float:
    """The unmodified formula: ``(level_factor * power * atk / def) / 50 + 2``."""
    return (level_factor(level) * power * attack / max(1, defense)) / 50 + 2


def _stat_pair(category: MoveCategory) -> tuple[StatName, StatName]:
    if category == MoveCategory.PHYSICAL:
        return StatName.ATTACK, StatName.DEFENSE
    return StatName.SPECIAL_ATTACK, StatName.SPECIAL_DEFENSE


def _staged_stat(
    combatant: Combatant,
    stats: StatBlock,
    stat: StatName,
    context: BattleContext | None,
) -> int:
    value = getattr(stats, stat.value)
    if context is None:
        return value
    stages = context.stages_for(combatant)
    if stages is None:
        return value
    return math.floor(value * stage_multiplier(stages.get(stat)))


def compute_damage(
    attacker: Combatant,
    defender: Combatant,
    move: MoveDefinition,
    registry: CatalogRegistry,
    rng: BattleRNG,
    context: BattleContext | None = None,
    power: float | None = None,
) -> DamageResult:
    """Compute the damage *move* deals from *attacker* to *defender*.

    Does not touch HP; the resolver applies the result.

    Parameters
    ----------
    move:
        The move being used.  Status moves and zero-power moves deal 0.
    registry:
        Catalog lookup, used for ability hooks.
    rng:
        Source for the critical-hit roll and the random factor, drawn in
        that order.
    context:
        Battle context supplying stat stages and weather.  Without it no
        stages or weather apply.
    power:
        Overrides the move's power (multi-hit per-hit power, scaled
        locking power).
    """
    move_power = move.power if power is None else power
    if move.category == MoveCategory.STATUS or move_power <= 0:
        return DamageResult(damage=0)

    attack_stat, defense_stat = _stat_pair(move.category)
    attack = _staged_stat(attacker, get_modified_stats(attacker), attack_stat, context)
    defense = _staged_stat(defender, get_modified_stats(defender), defense_stat, context)

    weather = context.weather if context is not None else None
    stab = stab_multiplier(attacker, move, registry)
    effectiveness = type_effectiveness(move.type, defender.types, weather)
    is_critical = rng.chance(CRITICAL_CHANCE)
    critical = CRITICAL_MULTIPLIER if is_critical else 1.0
    weather_mult = weather_power_multiplier(move.type, weather)
    random_factor = rng.uniform(RANDOM_FACTOR_MIN, RANDOM_FACTOR_MAX)

    raw = base_damage(attacker.level, move_power, attack, defense)
    damage = math.floor(raw * stab * effectiveness * critical * weather_mult * random_factor)
    damage = max(1, damage)

    logger.debug(
        "%s -> %s with %s: atk=%d def=%d stab=%.2f eff=%.2f crit=%s weather=%.2f rand=%.3f = %d",
        attacker.id, defender.id, move.id, attack, defense, stab, effectiveness,
        is_critical, weather_mult, random_factor, damage,
    )
    return DamageResult(damage=damage, is_critical=is_critical, effectiveness=effectiveness)


def compute_confusion_damage(
    combatant: Combatant,
    power: int,
    context: BattleContext | None = None,
) -> int:
    """Self-hit damage from confusion.

    A typeless physical hit of *power* using the combatant's own attack
    against its own defense; no STAB, crit, weather or random factor.
    """
    if power <= 0:
        return 0
    stats = get_modified_stats(combatant)
    attack = _staged_stat(combatant, stats, StatName.ATTACK, context)
    defense = _staged_stat(combatant, stats, StatName.DEFENSE, context)
    return max(1, math.floor(base_damage(combatant.level, power, attack, defense)))
