"""Battle actions and the result of resolving one.

An action is what one side chose to do this turn.  ``BattleResult`` is what
happened: narrative lines in ``effects`` plus the flags the orchestrating
caller reacts to (battle end, capture, auto-switch).
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from monster_battle.ir.items import BallTier
from monster_battle.sim.core.battle_state import Winner
from monster_battle.sim.core.entities import Combatant


class AttackAction(BaseModel):
    type: Literal["attack"] = "attack"
    move_id: str


class CatchAction(BaseModel):
    type: Literal["catch"] = "catch"
    ball: BallTier = BallTier.STANDARD


class FleeAction(BaseModel):
    type: Literal["flee"] = "flee"


class ItemAction(BaseModel):
    type: Literal["item"] = "item"
    item_id: str


class SwitchAction(BaseModel):
    type: Literal["switch"] = "switch"
    replacement: Combatant


BattleAction = Annotated[
    Union[AttackAction, CatchAction, FleeAction, ItemAction, SwitchAction],
    Field(discriminator="type"),
]

# Actions that always resolve before moves, regardless of speed.
PRIORITY_ACTION_TYPES = frozenset({"catch", "item", "switch", "flee"})


class ActionModifiers(BaseModel):
    """Modifiers supplied by the inventory collaborator for one action."""

    ball: BallTier | None = None
    """Overrides the ball tier of a catch attempt."""

    guaranteed_flee: bool = False


class BattleResult(BaseModel):
    """Outcome of resolving one action."""

    success: bool
    damage: int | None = None
    is_critical: bool = False
    effects: list[str] = Field(default_factory=list)
    battle_ended: bool = False
    winner: Winner | None = None
    monster_caught: bool = False
    monster_switched: bool = False
    fled: bool = False
    item_consumed: str | None = None
    """Id of an item (or ball tier) the inventory should deduct."""

    requires_auto_switch: bool = False
