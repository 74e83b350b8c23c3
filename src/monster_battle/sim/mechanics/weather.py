"""Weather -- pure modifier lookups plus the end-of-turn countdown.

Every function accepts ``None`` for "no weather" and then returns the
neutral value.  Setting a new weather replaces the old one outright; there
is no stacking.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Iterable

from monster_battle.ir.types import MonsterType, StatName, StatusEffect, Weather

if TYPE_CHECKING:
    from monster_battle.sim.core.battle_state import WeatherCondition
    from monster_battle.sim.core.rng import BattleRNG

logger = logging.getLogger(__name__)

DEFAULT_WEATHER_DURATION = 5
WEATHER_BOOST = 1.5
WEATHER_PENALTY = 0.5
FOG_ACCURACY = 0.8
WEATHER_DAMAGE_DIVISOR = 16

_WEATHER_DESCRIPTIONS: dict[Weather, str] = {
    Weather.HARSH_SUNLIGHT: "The sunlight is harsh!",
    Weather.RAIN: "It's raining!",
    Weather.SANDSTORM: "A sandstorm is raging!",
    Weather.HAIL: "It's hailing!",
    Weather.FOG: "A thick fog has rolled in!",
    Weather.STRONG_WINDS: "Strong winds are blowing!",
}

_WEATHER_END_MESSAGES: dict[Weather, str] = {
    Weather.HARSH_SUNLIGHT: "The harsh sunlight faded.",
    Weather.RAIN: "The rain stopped.",
    Weather.SANDSTORM: "The sandstorm subsided.",
    Weather.HAIL: "The hail stopped.",
    Weather.FOG: "The fog cleared.",
    Weather.STRONG_WINDS: "The strong winds died down.",
}

# Types that take no chip damage from the given weather.
_CHIP_IMMUNE_TYPES: dict[Weather, frozenset[MonsterType]] = {
    Weather.SANDSTORM: frozenset({MonsterType.ROCK, MonsterType.GROUND, MonsterType.STEEL}),
    Weather.HAIL: frozenset({MonsterType.ICE}),
}

_CHIP_MESSAGES: dict[Weather, str] = {
    Weather.SANDSTORM: "{name} is buffeted by the sandstorm!",
    Weather.HAIL: "{name} is pelted by hail!",
}

_WIND_NEUTRALIZED_TYPES = frozenset({MonsterType.ELECTRIC, MonsterType.ICE, MonsterType.ROCK})


def _tag(weather: WeatherCondition | None) -> Weather | None:
    return weather.weather if weather is not None else None


# ---------------------------------------------------------------------------
# Modifier lookups
# ---------------------------------------------------------------------------

def weather_power_multiplier(move_type: MonsterType, weather: WeatherCondition | None) -> float:
    """Sunlight boosts fire and halves water; rain does the inverse."""
    match _tag(weather):
        case Weather.HARSH_SUNLIGHT:
            if move_type == MonsterType.FIRE:
                return WEATHER_BOOST
            if move_type == MonsterType.WATER:
                return WEATHER_PENALTY
        case Weather.RAIN:
            if move_type == MonsterType.WATER:
                return WEATHER_BOOST
            if move_type == MonsterType.FIRE:
                return WEATHER_PENALTY
    return 1.0


def weather_accuracy_multiplier(weather: WeatherCondition | None) -> float:
    return FOG_ACCURACY if _tag(weather) == Weather.FOG else 1.0


def weather_type_effectiveness(
    move_type: MonsterType,
    defender_type: MonsterType,
    effectiveness: float,
    weather: WeatherCondition | None,
) -> float:
    """Adjust one chart factor for weather.

    Strong winds turn electric, ice and rock weaknesses of flying defenders
    into neutral hits.  Resistances are left alone.
    """
    if (
        _tag(weather) == Weather.STRONG_WINDS
        and defender_type == MonsterType.FLYING
        and move_type in _WIND_NEUTRALIZED_TYPES
        and effectiveness > 1
    ):
        return 1.0
    return effectiveness


def prevents_status(status: StatusEffect, weather: WeatherCondition | None) -> bool:
    """Harsh sunlight stops frostbite from being inflicted."""
    return _tag(weather) == Weather.HARSH_SUNLIGHT and status == StatusEffect.FROSTBITE


def weather_damage(
    name: str,
    max_hp: int,
    types: Iterable[MonsterType],
    weather: WeatherCondition | None,
) -> tuple[int, str | None]:
    """End-of-turn chip damage for a combatant; ``(0, None)`` when immune.

    Damage is ``max(1, max_hp // 16)`` for non-immune types.
    """
    tag = _tag(weather)
    if tag is None or tag not in _CHIP_IMMUNE_TYPES:
        return 0, None
    if _CHIP_IMMUNE_TYPES[tag].intersection(types):
        return 0, None
    damage = max(1, math.floor(max_hp / WEATHER_DAMAGE_DIVISOR))
    return damage, _CHIP_MESSAGES[tag].format(name=name)


def battle_start_stage_boosts(
    types: Iterable[MonsterType],
    weather: WeatherCondition | None,
) -> dict[StatName, int]:
    """Stage boosts a combatant receives when the battle opens in *weather*."""
    types = set(types)
    match _tag(weather):
        case Weather.SANDSTORM if MonsterType.ROCK in types:
            return {StatName.SPECIAL_DEFENSE: 1}
        case Weather.HAIL if MonsterType.ICE in types:
            return {StatName.DEFENSE: 1}
    return {}


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

def start_weather(weather: Weather, turns: int = DEFAULT_WEATHER_DURATION) -> WeatherCondition:
    from monster_battle.sim.core.battle_state import WeatherCondition

    return WeatherCondition(weather=weather, turns_remaining=turns)


def random_weather(rng: BattleRNG, turns: int = DEFAULT_WEATHER_DURATION) -> WeatherCondition:
    """Pick a weather uniformly at random."""
    return start_weather(rng.random_choice(list(Weather)), turns)


def update_weather(weather: WeatherCondition | None) -> WeatherCondition | None:
    """Advance the countdown by one turn.

    Returns the updated condition, or ``None`` once it has run out.  Calling
    it with ``None`` returns ``None``, so the count never goes negative.
    """
    if weather is None:
        return None
    remaining = weather.turns_remaining - 1
    if remaining <= 0:
        logger.debug("Weather %s ended", weather.weather.value)
        return None
    return weather.model_copy(update={"turns_remaining": remaining})


def weather_description(weather: Weather) -> str:
    return _WEATHER_DESCRIPTIONS[weather]


def weather_end_message(weather: Weather) -> str:
    return _WEATHER_END_MESSAGES[weather]
