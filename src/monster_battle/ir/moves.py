"""Move definitions -- the catalog entries a combatant draws its attacks from.

Secondary effects and multi-turn descriptors are closed discriminated unions
keyed on ``kind``: adding a new kind means adding a model here *and* a branch
in every ``match`` that consumes it.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator

from .types import MonsterType, StatName, StatusEffect, Weather


class MoveCategory(str, Enum):
    """Which stat pair a move uses -- or ``STATUS`` for non-damaging moves."""

    PHYSICAL = "physical"
    SPECIAL = "special"
    STATUS = "status"


EffectTarget = Literal["self", "opponent"]


# ---------------------------------------------------------------------------
# Secondary effects
# ---------------------------------------------------------------------------

class _EffectBase(BaseModel):
    target: EffectTarget = "opponent"
    chance: int = Field(default=100, ge=0, le=100)
    """Percent chance the effect procs once the move connects."""


class StatStageEffect(_EffectBase):
    """Raise or lower one stat stage."""

    kind: Literal["stat_stage"] = "stat_stage"
    stat: StatName
    stages: int = Field(ge=-6, le=6)


class InflictStatusEffect(_EffectBase):
    """Inflict a status condition."""

    kind: Literal["inflict_status"] = "inflict_status"
    status: StatusEffect


class SetWeatherEffect(_EffectBase):
    """Replace the active weather."""

    kind: Literal["set_weather"] = "set_weather"
    target: EffectTarget = "self"
    weather: Weather
    turns: int = Field(default=5, ge=1)


class HealEffect(_EffectBase):
    """Restore a fraction of the target's max HP."""

    kind: Literal["heal"] = "heal"
    target: EffectTarget = "self"
    fraction: float = Field(gt=0, le=1)


MoveEffect = Annotated[
    Union[StatStageEffect, InflictStatusEffect, SetWeatherEffect, HealEffect],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Two-turn moves
# ---------------------------------------------------------------------------

class TwoTurnMoveType(str, Enum):
    CHARGE = "charge"
    """Charge on turn one, strike on turn two (e.g. a solar beam)."""

    SEMI_INVULNERABLE = "semi_invulnerable"
    """Like ``CHARGE`` but the user is out of reach while charging."""

    RECHARGE = "recharge"
    """Strike immediately, then lose the next turn recharging."""


class SemiInvulnerableState(str, Enum):
    FLYING = "flying"
    UNDERGROUND = "underground"
    UNDERWATER = "underwater"
    VANISHED = "vanished"


class TwoTurnMoveData(BaseModel):
    kind: TwoTurnMoveType
    semi_invulnerable: SemiInvulnerableState | None = None
    requires_recharge: bool = False
    charge_message: str | None = None
    """Template for the charging line; ``{name}`` is the user's name."""

    @model_validator(mode="after")
    def _check_consistency(self) -> TwoTurnMoveData:
        if self.kind == TwoTurnMoveType.SEMI_INVULNERABLE and self.semi_invulnerable is None:
            raise ValueError("semi_invulnerable moves must name a semi_invulnerable state")
        if self.kind != TwoTurnMoveType.SEMI_INVULNERABLE and self.semi_invulnerable is not None:
            raise ValueError(f"{self.kind.value} moves cannot carry a semi_invulnerable state")
        if self.kind == TwoTurnMoveType.RECHARGE:
            self.requires_recharge = True
        return self


# ---------------------------------------------------------------------------
# Multi-turn moves
# ---------------------------------------------------------------------------

class MultiHitData(BaseModel):
    kind: Literal["multi_hit"] = "multi_hit"
    min_hits: int = Field(ge=1)
    max_hits: int = Field(ge=1)
    accuracy_type: Literal["single", "per_hit"] = "single"
    power_per_hit: int | None = None
    """Overrides the move's power for every individual hit."""

    @model_validator(mode="after")
    def _check_range(self) -> MultiHitData:
        if self.min_hits > self.max_hits:
            raise ValueError("min_hits must be <= max_hits")
        return self


class LockingData(BaseModel):
    kind: Literal["locking"] = "locking"
    min_turns: int = Field(ge=1)
    max_turns: int = Field(ge=1)
    power_multiplier: float | None = None
    """Power grows by this factor for every turn after the first."""

    confuses_after: bool = False

    @model_validator(mode="after")
    def _check_range(self) -> LockingData:
        if self.min_turns > self.max_turns:
            raise ValueError("min_turns must be <= max_turns")
        return self


class TrappingData(BaseModel):
    kind: Literal["trapping"] = "trapping"
    min_turns: int = Field(ge=1)
    max_turns: int = Field(ge=1)
    damage_fraction: float = Field(gt=0, le=1)
    """Per-turn damage as a fraction of the victim's max HP."""

    @model_validator(mode="after")
    def _check_range(self) -> TrappingData:
        if self.min_turns > self.max_turns:
            raise ValueError("min_turns must be <= max_turns")
        return self


MultiTurnMoveData = Annotated[
    Union[MultiHitData, LockingData, TrappingData],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# MoveDefinition
# ---------------------------------------------------------------------------

class MoveRestrictions(BaseModel):
    first_turn_only: bool = False
    """Usable only on the user's first turn on the field."""


class MoveDefinition(BaseModel):
    """Complete definition of a single move."""

    id: str
    name: str
    type: MonsterType
    category: MoveCategory
    power: int = Field(default=0, ge=0)
    accuracy: int = Field(default=100, ge=0, le=100)
    pp: int = Field(default=20, ge=1)
    description: str = ""

    effects: list[MoveEffect] = Field(default_factory=list)
    two_turn: TwoTurnMoveData | None = None
    multi_turn: MultiTurnMoveData | None = None
    restrictions: MoveRestrictions = Field(default_factory=MoveRestrictions)

    @model_validator(mode="after")
    def _check_shape(self) -> MoveDefinition:
        if self.two_turn is not None and self.multi_turn is not None:
            raise ValueError(f"move {self.id!r} cannot be both two-turn and multi-turn")
        if self.category == MoveCategory.STATUS and self.power:
            raise ValueError(f"status move {self.id!r} must have power 0")
        return self

    @property
    def is_damaging(self) -> bool:
        return self.category != MoveCategory.STATUS and self.power > 0
