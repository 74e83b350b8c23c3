"""Monster species definitions."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .types import MonsterType, Rarity


class BaseStats(BaseModel):
    """The six species base stats."""

    hp: int = Field(ge=1)
    attack: int = Field(ge=1)
    defense: int = Field(ge=1)
    special_attack: int = Field(ge=1)
    special_defense: int = Field(ge=1)
    speed: int = Field(ge=1)


class MonsterDefinition(BaseModel):
    """Complete definition of a monster species."""

    id: str
    name: str
    types: list[MonsterType] = Field(min_length=1, max_length=2)
    base_stats: BaseStats
    abilities: list[str] = Field(default_factory=list)
    """Ability ids this species may be assigned."""

    learnable_moves: list[tuple[str, int]] = Field(default_factory=list)
    """``(move_id, level_learned)`` pairs."""

    rarity: Rarity = Rarity.COMMON
    description: str = ""

    def moves_known_at(self, level: int) -> list[str]:
        """The (up to) four most recently learned moves at *level*."""
        learned = sorted(
            (lvl, move_id) for move_id, lvl in self.learnable_moves if lvl <= level
        )
        seen: list[str] = []
        for _, move_id in learned:
            if move_id in seen:
                seen.remove(move_id)
            seen.append(move_id)
        return seen[-4:]
