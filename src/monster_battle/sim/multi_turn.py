"""Multi-hit, locking and trapping moves.

*Locking* (user side): ``Idle -> Locked(d) -> ... -> Idle``.  The lock's
``turns_remaining`` counts the current turn and is decremented at end of
turn, so a lock drawn as *d* turns lasts exactly *d* turns.

*Trapping* (victim side): ``Idle -> Trapped(d) -> Idle``.  Per-turn damage is
fixed when the trap is applied.  A victim that already has a commitment
(charging, locked, ...) cannot be trapped.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from monster_battle.ir.moves import LockingData, MultiHitData, TrappingData
from monster_battle.ir.types import StatusEffect
from monster_battle.sim.core.entities import Idle, Locked, Trapped
from monster_battle.sim.mechanics.status_effects import add_status

if TYPE_CHECKING:
    from monster_battle.ir.moves import MoveDefinition
    from monster_battle.sim.content.registry import CatalogRegistry
    from monster_battle.sim.core.entities import Combatant
    from monster_battle.sim.core.rng import BattleRNG

logger = logging.getLogger(__name__)

EXHAUSTION_CONFUSION_MIN = 2
EXHAUSTION_CONFUSION_MAX = 5


@dataclass
class TrapDamage:
    damage: int = 0
    messages: list[str] = field(default_factory=list)


@dataclass
class SwitchCheck:
    can_switch: bool
    reason: str | None = None


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def is_locked(combatant: Combatant) -> bool:
    commitment = combatant.commitment
    return isinstance(commitment, Locked) and commitment.turns_remaining > 0


def is_trapped(combatant: Combatant) -> bool:
    commitment = combatant.commitment
    return isinstance(commitment, Trapped) and commitment.turns_remaining > 0


def forced_move(combatant: Combatant) -> str | None:
    """The move a locked combatant must repeat this turn, if any."""
    if is_locked(combatant):
        return combatant.commitment.move_id
    return None


def can_switch_out(combatant: Combatant, registry: CatalogRegistry) -> SwitchCheck:
    if is_trapped(combatant):
        move = registry.get_move(combatant.commitment.move_id)
        return SwitchCheck(
            False, f"{combatant.name} is trapped by {move.name} and cannot be switched out!"
        )
    return SwitchCheck(True)


# ---------------------------------------------------------------------------
# Multi-hit
# ---------------------------------------------------------------------------

def roll_hit_count(data: MultiHitData, rng: BattleRNG) -> int:
    """Number of hits, uniform in ``[min_hits, max_hits]``."""
    return rng.random_int(data.min_hits, data.max_hits)


# ---------------------------------------------------------------------------
# Locking
# ---------------------------------------------------------------------------

def start_lock(combatant: Combatant, move: MoveDefinition, rng: BattleRNG) -> str:
    """Lock *combatant* into *move* for a drawn number of turns."""
    data = move.multi_turn
    if not isinstance(data, LockingData):
        raise ValueError(f"move {move.id!r} is not a locking move")
    turns = rng.random_int(data.min_turns, data.max_turns)
    combatant.commitment = Locked(move_id=move.id, turns_remaining=turns, total_turns=turns)
    logger.debug("%s locked into %s for %d turns", combatant.id, move.id, turns)
    return f"{combatant.name} is locked into using {move.name}!"


def locking_power_multiplier(combatant: Combatant, move: MoveDefinition) -> float:
    """``power_multiplier ** (current_turn - 1)``; 1.0 when not applicable."""
    data = move.multi_turn
    commitment = combatant.commitment
    if not isinstance(data, LockingData) or data.power_multiplier is None:
        return 1.0
    if not isinstance(commitment, Locked) or commitment.move_id != move.id:
        return 1.0
    return data.power_multiplier ** (commitment.current_turn - 1)


def advance_lock(combatant: Combatant, registry: CatalogRegistry, rng: BattleRNG) -> list[str]:
    """Count one lock turn down; on exhaustion clear it (maybe confusing)."""
    commitment = combatant.commitment
    if not isinstance(commitment, Locked):
        return []

    commitment.turns_remaining -= 1
    if commitment.turns_remaining > 0:
        return []

    messages: list[str] = []
    combatant.commitment = Idle()
    data = registry.get_move(commitment.move_id).multi_turn
    if isinstance(data, LockingData) and data.confuses_after and not combatant.is_fainted:
        duration = rng.random_int(EXHAUSTION_CONFUSION_MIN, EXHAUSTION_CONFUSION_MAX)
        if add_status(combatant, StatusEffect.CONFUSION, duration=duration).applied:
            messages.append(f"{combatant.name} became confused from exhaustion!")
    return messages


# ---------------------------------------------------------------------------
# Trapping
# ---------------------------------------------------------------------------

def apply_trap(target: Combatant, move: MoveDefinition, rng: BattleRNG) -> str | None:
    """Trap *target* with *move*; returns the log line, or ``None`` if it
    could not be trapped."""
    data = move.multi_turn
    if not isinstance(data, TrappingData):
        raise ValueError(f"move {move.id!r} is not a trapping move")
    if target.is_fainted or not isinstance(target.commitment, Idle):
        return None
    turns = rng.random_int(data.min_turns, data.max_turns)
    damage = max(1, math.floor(target.max_hp * data.damage_fraction))
    target.commitment = Trapped(move_id=move.id, turns_remaining=turns, damage_per_turn=damage)
    logger.debug("%s trapped by %s for %d turns (%d/turn)", target.id, move.id, turns, damage)
    return f"{target.name} was trapped by {move.name}!"


def process_trapping_damage(combatant: Combatant, registry: CatalogRegistry) -> TrapDamage:
    """Deal the trap's fixed damage and count it down."""
    result = TrapDamage()
    commitment = combatant.commitment
    if not isinstance(commitment, Trapped) or commitment.turns_remaining <= 0:
        return result

    move = registry.get_move(commitment.move_id)
    commitment.turns_remaining -= 1
    result.damage = combatant.take_damage(commitment.damage_per_turn)
    result.messages.append(
        f"{combatant.name} is hurt by {move.name}! ({commitment.damage_per_turn} damage)"
    )
    if combatant.is_fainted:
        return result
    if commitment.turns_remaining == 0:
        combatant.commitment = Idle()
        result.messages.append(f"{combatant.name} is freed from {move.name}!")
    return result


def status_message(combatant: Combatant, registry: CatalogRegistry) -> str | None:
    commitment = combatant.commitment
    if isinstance(commitment, Locked) and commitment.turns_remaining > 0:
        move = registry.get_move(commitment.move_id)
        return (
            f"{combatant.name} must continue using {move.name}! "
            f"({commitment.turns_remaining} turns left)"
        )
    if isinstance(commitment, Trapped) and commitment.turns_remaining > 0:
        move = registry.get_move(commitment.move_id)
        return (
            f"{combatant.name} is trapped by {move.name}! "
            f"({commitment.turns_remaining} turns left)"
        )
    return None
