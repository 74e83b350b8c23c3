"""Per-battle state: stat stages, weather, field tracking and the context.

A ``BattleContext`` lives for exactly one battle.  The caller creates it at
battle start (see :meth:`TurnManager.start_battle`), threads it through every
resolution call and drops it when the battle ends.  Nothing here is shared
between battles.
"""

from __future__ import annotations

import logging
import uuid
from typing import Literal

from pydantic import BaseModel, Field

from monster_battle.ir.types import StatName, Weather
from monster_battle.sim.core.entities import Combatant
from monster_battle.sim.mechanics.stat_stages import add_stages

logger = logging.getLogger(__name__)

Side = Literal["player", "opponent"]
Winner = Literal["player", "opponent", "draw"]


def other_side(side: Side) -> Side:
    return "opponent" if side == "player" else "player"


# ---------------------------------------------------------------------------
# StatStages
# ---------------------------------------------------------------------------

class StatStages(BaseModel):
    """Stage modifiers for one side; reset on switch-out."""

    attack: int = 0
    defense: int = 0
    special_attack: int = 0
    special_defense: int = 0
    speed: int = 0

    def get(self, stat: StatName) -> int:
        return getattr(self, stat.value)

    def change(self, stat: StatName, delta: int) -> int:
        """Apply *delta* stages (clamped); returns the stages actually applied."""
        new_stage, applied = add_stages(self.get(stat), delta)
        setattr(self, stat.value, new_stage)
        return applied

    def reset(self) -> None:
        for stat in StatName:
            setattr(self, stat.value, 0)


# ---------------------------------------------------------------------------
# WeatherCondition
# ---------------------------------------------------------------------------

class WeatherCondition(BaseModel):
    weather: Weather
    turns_remaining: int = Field(ge=0)


# ---------------------------------------------------------------------------
# FieldTracker
# ---------------------------------------------------------------------------

class FieldEntry(BaseModel):
    monster_id: str
    turns_on_field: int = 0
    just_entered: bool = True


class FieldTracker(BaseModel):
    """Tracks how long each side's active monster has been on the field.

    Queries about a monster the tracker does not know degrade to "first
    turn on the field" rather than failing.
    """

    player: FieldEntry | None = None
    opponent: FieldEntry | None = None

    def switch_in(self, side: Side, monster_id: str) -> None:
        setattr(self, side, FieldEntry(monster_id=monster_id))

    def _entry_for(self, monster_id: str) -> FieldEntry | None:
        for entry in (self.player, self.opponent):
            if entry is not None and entry.monster_id == monster_id:
                return entry
        return None

    def record_action(self, monster_id: str) -> None:
        entry = self._entry_for(monster_id)
        if entry is None:
            logger.warning("record_action for untracked monster %s", monster_id)
            return
        entry.turns_on_field += 1

    def end_turn(self) -> None:
        for entry in (self.player, self.opponent):
            if entry is not None:
                entry.just_entered = False

    def is_first_turn_on_field(self, monster_id: str) -> bool:
        entry = self._entry_for(monster_id)
        if entry is None:
            return True
        return entry.turns_on_field == 0

    def turns_on_field(self, monster_id: str) -> int:
        entry = self._entry_for(monster_id)
        return entry.turns_on_field if entry is not None else 0


# ---------------------------------------------------------------------------
# BattleContext
# ---------------------------------------------------------------------------

class BattleContext(BaseModel):
    """Full mutable state of a single 1-vs-1 battle."""

    battle_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    player: Combatant
    opponent: Combatant
    player_stages: StatStages = Field(default_factory=StatStages)
    opponent_stages: StatStages = Field(default_factory=StatStages)
    weather: WeatherCondition | None = None
    field: FieldTracker = Field(default_factory=FieldTracker)
    turn: int = 0

    # -- queries -------------------------------------------------------------

    def side_of(self, combatant: Combatant) -> Side | None:
        """Which side *combatant* is active on, or ``None``."""
        if combatant.id == self.player.id:
            return "player"
        if combatant.id == self.opponent.id:
            return "opponent"
        return None

    def active(self, side: Side) -> Combatant:
        return self.player if side == "player" else self.opponent

    def opponent_of(self, combatant: Combatant) -> Combatant | None:
        side = self.side_of(combatant)
        return self.active(other_side(side)) if side is not None else None

    def stages(self, side: Side) -> StatStages:
        return self.player_stages if side == "player" else self.opponent_stages

    def stages_for(self, combatant: Combatant) -> StatStages | None:
        side = self.side_of(combatant)
        return self.stages(side) if side is not None else None

    # -- mutation ------------------------------------------------------------

    def replace_active(self, side: Side, combatant: Combatant) -> Combatant:
        """Switch *combatant* in for *side*; returns the outgoing combatant.

        The side's stat stages reset and field tracking restarts for the
        incoming monster.
        """
        outgoing = self.active(side)
        setattr(self, side, combatant)
        self.stages(side).reset()
        self.field.switch_in(side, combatant.id)
        return outgoing
