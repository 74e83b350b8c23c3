"""Type effectiveness chart.

Only non-neutral matchups are listed; anything missing is ``1.0``.
Multi-type defenders multiply the per-type factors together.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from monster_battle.ir.types import MonsterType as T

from .weather import weather_type_effectiveness

if TYPE_CHECKING:
    from monster_battle.sim.core.battle_state import WeatherCondition

SUPER_EFFECTIVE = 2.0
NOT_VERY_EFFECTIVE = 0.5
IMMUNE = 0.0

TYPE_CHART: dict[T, dict[T, float]] = {
    T.FIRE: {
        T.FIRE: 0.5, T.WATER: 0.5, T.GRASS: 2.0, T.ROCK: 0.5, T.ICE: 2.0,
        T.BUG: 2.0, T.DRAGON: 0.5, T.STEEL: 2.0,
    },
    T.WATER: {
        T.FIRE: 2.0, T.WATER: 0.5, T.GRASS: 0.5, T.GROUND: 2.0, T.ROCK: 2.0,
        T.DRAGON: 0.5,
    },
    T.NORMAL: {T.ROCK: 0.5, T.GHOST: 0.0, T.STEEL: 0.5},
    T.FIGHTING: {
        T.NORMAL: 2.0, T.FLYING: 0.5, T.POISON: 0.5, T.PSYCHIC: 0.5,
        T.ROCK: 2.0, T.ICE: 2.0, T.BUG: 0.5, T.GHOST: 0.0, T.DARK: 2.0,
        T.STEEL: 2.0, T.FAIRY: 0.5,
    },
    T.FLYING: {
        T.FIGHTING: 2.0, T.GRASS: 2.0, T.ELECTRIC: 0.5, T.ROCK: 0.5,
        T.BUG: 2.0, T.STEEL: 0.5,
    },
    T.GRASS: {
        T.FIRE: 0.5, T.WATER: 2.0, T.FLYING: 0.5, T.GRASS: 0.5, T.POISON: 0.5,
        T.GROUND: 2.0, T.ROCK: 2.0, T.BUG: 0.5, T.DRAGON: 0.5, T.STEEL: 0.5,
    },
    T.POISON: {
        T.GRASS: 2.0, T.POISON: 0.5, T.GROUND: 0.5, T.ROCK: 0.5, T.GHOST: 0.5,
        T.STEEL: 0.0, T.FAIRY: 2.0,
    },
    T.ELECTRIC: {
        T.WATER: 2.0, T.FLYING: 2.0, T.GRASS: 0.5, T.ELECTRIC: 0.5,
        T.GROUND: 0.0, T.DRAGON: 0.5,
    },
    T.GROUND: {
        T.FIRE: 2.0, T.FLYING: 0.0, T.GRASS: 0.5, T.POISON: 2.0,
        T.ELECTRIC: 2.0, T.ROCK: 2.0, T.BUG: 0.5, T.STEEL: 2.0,
    },
    T.PSYCHIC: {
        T.FIGHTING: 2.0, T.POISON: 2.0, T.PSYCHIC: 0.5, T.DARK: 0.0,
        T.STEEL: 0.5,
    },
    T.ROCK: {
        T.FIRE: 2.0, T.FIGHTING: 0.5, T.FLYING: 2.0, T.GROUND: 0.5, T.ICE: 2.0,
        T.BUG: 2.0, T.STEEL: 0.5,
    },
    T.ICE: {
        T.FIRE: 0.5, T.WATER: 0.5, T.FLYING: 2.0, T.GRASS: 2.0, T.GROUND: 2.0,
        T.ICE: 0.5, T.DRAGON: 2.0, T.STEEL: 0.5,
    },
    T.BUG: {
        T.FIRE: 0.5, T.FIGHTING: 0.5, T.FLYING: 0.5, T.GRASS: 2.0,
        T.POISON: 0.5, T.PSYCHIC: 2.0, T.GHOST: 0.5, T.DARK: 2.0,
        T.STEEL: 0.5, T.FAIRY: 0.5,
    },
    T.DRAGON: {T.DRAGON: 2.0, T.STEEL: 0.5, T.FAIRY: 0.0},
    T.GHOST: {T.NORMAL: 0.0, T.PSYCHIC: 2.0, T.GHOST: 2.0, T.DARK: 0.5},
    T.DARK: {
        T.FIGHTING: 0.5, T.PSYCHIC: 2.0, T.GHOST: 2.0, T.DARK: 0.5,
        T.FAIRY: 0.5,
    },
    T.STEEL: {
        T.FIRE: 0.5, T.WATER: 0.5, T.ELECTRIC: 0.5, T.ROCK: 2.0, T.ICE: 2.0,
        T.STEEL: 0.5, T.FAIRY: 2.0,
    },
    T.FAIRY: {
        T.FIRE: 0.5, T.FIGHTING: 2.0, T.POISON: 0.5, T.DRAGON: 2.0,
        T.DARK: 2.0, T.STEEL: 0.5,
    },
}


def base_effectiveness(move_type: T, defender_type: T) -> float:
    """Chart lookup for a single attacking/defending type pair."""
    return TYPE_CHART.get(move_type, {}).get(defender_type, 1.0)


def type_effectiveness(
    move_type: T,
    defender_types: Iterable[T],
    weather: WeatherCondition | None = None,
) -> float:
    """Product of the per-type factors, each adjusted for *weather*."""
    effectiveness = 1.0
    for defender_type in defender_types:
        factor = base_effectiveness(move_type, defender_type)
        effectiveness *= weather_type_effectiveness(move_type, defender_type, factor, weather)
    return effectiveness


def effectiveness_message(effectiveness: float) -> str | None:
    """Battle-log line for an effectiveness factor, or ``None`` if neutral."""
    if effectiveness > 1:
        return "It's super effective!"
    if effectiveness < 1:
        return "It's not very effective..."
    return None
