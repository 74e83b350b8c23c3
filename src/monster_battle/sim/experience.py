"""Experience awarded for defeating a monster.

Levelling and move learning belong to the roster service; the engine only
reports how much experience a defeated monster is worth.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from monster_battle.ir.types import Rarity

if TYPE_CHECKING:
    from monster_battle.sim.content.registry import CatalogRegistry
    from monster_battle.sim.core.entities import Combatant

BASE_EXPERIENCE_PER_LEVEL = 100

RARITY_EXPERIENCE_MULTIPLIERS: dict[Rarity, float] = {
    Rarity.COMMON: 1.0,
    Rarity.UNCOMMON: 1.2,
    Rarity.RARE: 1.5,
    Rarity.LEGENDARY: 2.0,
}


def experience_for(level: int, rarity: Rarity) -> int:
    return math.floor(level * BASE_EXPERIENCE_PER_LEVEL * RARITY_EXPERIENCE_MULTIPLIERS[rarity])


def generate_experience(defeated: Combatant, registry: CatalogRegistry) -> int:
    """Experience for defeating *defeated*: ``level * 100 * rarity multiplier``."""
    rarity = registry.get_monster(defeated.species_id).rarity
    return experience_for(defeated.level, rarity)
