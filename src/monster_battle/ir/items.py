"""Item definitions.

Items are owned by the external inventory collaborator.  The engine only
reads an item's ``effect`` to route the two primitives items may trigger:
a catch attempt with a given ball tier, or a guaranteed flee.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class BallTier(str, Enum):
    STANDARD = "standard"
    IMPROVED = "improved"
    EXCELLENT = "excellent"


BALL_MULTIPLIERS: dict[BallTier, float] = {
    BallTier.STANDARD: 1.0,
    BallTier.IMPROVED: 1.5,
    BallTier.EXCELLENT: 2.5,
}


class ItemEffect(str, Enum):
    CATCH_STANDARD = "catch_standard"
    CATCH_IMPROVED = "catch_improved"
    CATCH_EXCELLENT = "catch_excellent"
    GUARANTEED_FLEE = "guaranteed_flee"
    HEAL = "heal"
    OTHER = "other"


_BALL_FOR_EFFECT: dict[ItemEffect, BallTier] = {
    ItemEffect.CATCH_STANDARD: BallTier.STANDARD,
    ItemEffect.CATCH_IMPROVED: BallTier.IMPROVED,
    ItemEffect.CATCH_EXCELLENT: BallTier.EXCELLENT,
}


class ItemDefinition(BaseModel):
    id: str
    name: str
    description: str = ""
    effect: ItemEffect = ItemEffect.OTHER
    value: int | None = None
    """Effect magnitude (e.g. HP restored).  Interpreted by the inventory."""

    @property
    def ball_tier(self) -> BallTier | None:
        """The ball tier this item throws, or ``None`` if it is not a ball."""
        return _BALL_FOR_EFFECT.get(self.effect)
