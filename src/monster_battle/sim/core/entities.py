"""Battle-facing combatant models.

All data classes use Pydantic v2 BaseModel for validation and
serialization.  Combatants are owned by the caller (the external roster or
encounter service); the engine mutates the instances it is handed in place
and never keeps a reference past the call.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator

from monster_battle.ir.moves import SemiInvulnerableState
from monster_battle.ir.types import MonsterType, StatusEffect


# ---------------------------------------------------------------------------
# Stats and status conditions
# ---------------------------------------------------------------------------

class StatBlock(BaseModel):
    """Computed (level-adjusted) stats of a combatant."""

    hp: int
    attack: int
    defense: int
    special_attack: int
    special_defense: int
    speed: int


class StatusCondition(BaseModel):
    """One active status tag on a combatant."""

    effect: StatusEffect
    turns_active: int = 0
    duration: int | None = None
    """If set, the condition expires once ``turns_active`` reaches it."""


# ---------------------------------------------------------------------------
# Multi-turn commitment -- exactly one of these at any time
# ---------------------------------------------------------------------------

class Idle(BaseModel):
    kind: Literal["idle"] = "idle"


class Charging(BaseModel):
    """Turn one of a two-turn move has been spent charging."""

    kind: Literal["charging"] = "charging"
    move_id: str
    semi_invulnerable: SemiInvulnerableState | None = None


class Recharging(BaseModel):
    """The next action is forfeited to recharge."""

    kind: Literal["recharging"] = "recharging"
    move_id: str


class Locked(BaseModel):
    """Forced to repeat ``move_id`` until the countdown runs out."""

    kind: Literal["locked"] = "locked"
    move_id: str
    turns_remaining: int
    """Turns left *including* the current one; decremented at end of turn."""

    total_turns: int
    hit_on_first_turn: bool = False

    @property
    def current_turn(self) -> int:
        return self.total_turns - self.turns_remaining + 1


class Trapped(BaseModel):
    """Held by the opponent's trapping move."""

    kind: Literal["trapped"] = "trapped"
    move_id: str
    turns_remaining: int
    damage_per_turn: int


Commitment = Annotated[
    Union[Idle, Charging, Recharging, Locked, Trapped],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Combatant
# ---------------------------------------------------------------------------

class Combatant(BaseModel):
    """A monster instance as the battle engine sees it."""

    id: str
    species_id: str
    name: str
    level: int = Field(ge=1)
    current_hp: int
    max_hp: int = Field(ge=1)
    stats: StatBlock
    types: list[MonsterType] = Field(min_length=1, max_length=2)
    moves: list[str] = Field(default_factory=list, max_length=4)
    move_pp: dict[str, int] = Field(default_factory=dict)
    ability: str = ""
    statuses: list[StatusCondition] = Field(default_factory=list)
    commitment: Commitment = Field(default_factory=Idle)

    @model_validator(mode="after")
    def _check_hp(self) -> Combatant:
        if not 0 <= self.current_hp <= self.max_hp:
            raise ValueError(
                f"current_hp must be within [0, {self.max_hp}], got {self.current_hp}"
            )
        return self

    # -- HP queries ----------------------------------------------------------

    @property
    def is_fainted(self) -> bool:
        return self.current_hp <= 0

    @property
    def hp_fraction(self) -> float:
        return self.current_hp / self.max_hp

    # -- PP ------------------------------------------------------------------

    def remaining_pp(self, move_id: str) -> int:
        return self.move_pp.get(move_id, 0)

    def spend_pp(self, move_id: str) -> None:
        """Spend one PP of *move_id* (never below 0)."""
        self.move_pp[move_id] = max(0, self.remaining_pp(move_id) - 1)

    # -- damage / heal -------------------------------------------------------

    def take_damage(self, amount: int) -> int:
        """Lose up to *amount* HP; returns the HP actually lost.

        Fainting discards any multi-turn commitment: a fainted combatant
        never resumes a charge, lock or trap after revival.
        """
        if amount < 0:
            raise ValueError(f"take_damage amount must be >= 0, got {amount}")
        hp_lost = min(self.current_hp, amount)
        self.current_hp -= hp_lost
        if self.current_hp == 0:
            self.commitment = Idle()
        return hp_lost

    def heal(self, amount: int) -> int:
        """Heal *amount* HP, capped at ``max_hp``; returns HP restored."""
        if amount <= 0 or self.is_fainted:
            return 0
        restored = min(self.max_hp - self.current_hp, amount)
        self.current_hp += restored
        return restored
