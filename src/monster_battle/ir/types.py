"""Elemental types and the enums shared by every catalog definition."""

from __future__ import annotations

from enum import Enum


class MonsterType(str, Enum):
    """The eighteen elemental types a monster or move can carry."""

    FIRE = "fire"
    WATER = "water"
    NORMAL = "normal"
    FIGHTING = "fighting"
    FLYING = "flying"
    GRASS = "grass"
    POISON = "poison"
    ELECTRIC = "electric"
    GROUND = "ground"
    PSYCHIC = "psychic"
    ROCK = "rock"
    ICE = "ice"
    BUG = "bug"
    DRAGON = "dragon"
    GHOST = "ghost"
    DARK = "dark"
    STEEL = "steel"
    FAIRY = "fairy"


class Rarity(str, Enum):
    """Species rarity -- drives catch rates and experience yield."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    LEGENDARY = "legendary"


class StatusEffect(str, Enum):
    """Status condition tags.

    ``CONFUSION`` is the only volatile condition; every other tag is a
    primary condition.
    """

    POISON = "poison"
    BURN = "burn"
    PARALYSIS = "paralysis"
    FROSTBITE = "frostbite"
    SLEEP = "sleep"
    BADLY_POISONED = "badly_poisoned"
    BADLY_BURNED = "badly_burned"
    CONFUSION = "confusion"


class Weather(str, Enum):
    """Battlefield weather tags."""

    HARSH_SUNLIGHT = "harsh_sunlight"
    RAIN = "rain"
    SANDSTORM = "sandstorm"
    HAIL = "hail"
    FOG = "fog"
    STRONG_WINDS = "strong_winds"


class StatName(str, Enum):
    """Stats that can carry a per-battle stage modifier."""

    ATTACK = "attack"
    DEFENSE = "defense"
    SPECIAL_ATTACK = "special_attack"
    SPECIAL_DEFENSE = "special_defense"
    SPEED = "speed"
