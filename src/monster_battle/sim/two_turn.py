"""Two-turn move state machine.

    Idle --(first use)--> Charging --(strike: hit or miss)--> Idle
                                   \\--(hit, requires recharge)--> Recharging
    Idle --(recharge-kind move hits)--> Recharging --(next action)--> Idle

A charging combatant may be *semi-invulnerable* (flying, underground,
underwater, vanished); only the counter moves listed for that tag can hit
it.  Recharging is cleared by the resolver when it consumes the user's next
action.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from monster_battle.ir.moves import SemiInvulnerableState
from monster_battle.sim.core.entities import Charging, Idle, Recharging

if TYPE_CHECKING:
    from monster_battle.ir.moves import MoveDefinition
    from monster_battle.sim.content.registry import CatalogRegistry
    from monster_battle.sim.core.entities import Combatant

logger = logging.getLogger(__name__)

COUNTER_MOVES: dict[SemiInvulnerableState, frozenset[str]] = {
    SemiInvulnerableState.FLYING: frozenset(
        {"gust", "hurricane", "sky_uppercut", "smack_down", "thunder", "twister"}
    ),
    SemiInvulnerableState.UNDERGROUND: frozenset({"earthquake", "fissure", "magnitude"}),
    SemiInvulnerableState.UNDERWATER: frozenset({"surf", "whirlpool"}),
    SemiInvulnerableState.VANISHED: frozenset(),
}

_BLOCKED_REASONS: dict[SemiInvulnerableState, str] = {
    SemiInvulnerableState.FLYING: "{name} is too high to be hit!",
    SemiInvulnerableState.UNDERGROUND: "{name} is underground and can't be hit!",
    SemiInvulnerableState.UNDERWATER: "{name} is underwater and can't be hit!",
    SemiInvulnerableState.VANISHED: "{name} is nowhere to be found!",
}

_CHARGING_MESSAGES: dict[SemiInvulnerableState, str] = {
    SemiInvulnerableState.FLYING: "{name} is flying high!",
    SemiInvulnerableState.UNDERGROUND: "{name} is underground!",
    SemiInvulnerableState.UNDERWATER: "{name} is underwater!",
    SemiInvulnerableState.VANISHED: "{name} has vanished!",
}


@dataclass
class HitCheck:
    can_hit: bool
    reason: str | None = None


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def is_charging(combatant: Combatant) -> bool:
    return isinstance(combatant.commitment, Charging)


def must_recharge(combatant: Combatant) -> bool:
    return isinstance(combatant.commitment, Recharging)


def forced_move(combatant: Combatant) -> str | None:
    """The move a charging combatant must release this turn, if any."""
    commitment = combatant.commitment
    if isinstance(commitment, Charging):
        return commitment.move_id
    return None


def semi_invulnerable_state(combatant: Combatant) -> SemiInvulnerableState | None:
    commitment = combatant.commitment
    if isinstance(commitment, Charging):
        return commitment.semi_invulnerable
    return None


def is_semi_invulnerable(combatant: Combatant) -> bool:
    return semi_invulnerable_state(combatant) is not None


def can_hit_semi_invulnerable(target: Combatant, move: MoveDefinition) -> HitCheck:
    """Whether *move* can reach *target* given its semi-invulnerable tag.

    Only the counter moves listed for the tag get through, and never a
    two-turn move.
    """
    state = semi_invulnerable_state(target)
    if state is None:
        return HitCheck(True)
    if move.two_turn is None and move.id in COUNTER_MOVES[state]:
        return HitCheck(True)
    return HitCheck(False, _BLOCKED_REASONS[state].format(name=target.name))


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def charge_message(combatant: Combatant, move: MoveDefinition) -> str:
    two_turn = move.two_turn
    if two_turn is not None and two_turn.charge_message:
        return two_turn.charge_message.format(name=combatant.name)
    if two_turn is not None and two_turn.semi_invulnerable is not None:
        return _CHARGING_MESSAGES[two_turn.semi_invulnerable].format(name=combatant.name)
    return f"{combatant.name} is charging up {move.name}!"


def start_charging(combatant: Combatant, move: MoveDefinition) -> str:
    """Enter the charging phase of *move*; returns the charging line."""
    semi = move.two_turn.semi_invulnerable if move.two_turn is not None else None
    combatant.commitment = Charging(move_id=move.id, semi_invulnerable=semi)
    logger.debug("%s charging %s (semi=%s)", combatant.id, move.id, semi)
    return charge_message(combatant, move)


def start_recharging(combatant: Combatant, move: MoveDefinition) -> None:
    combatant.commitment = Recharging(move_id=move.id)


def clear_commitment(combatant: Combatant) -> None:
    combatant.commitment = Idle()


def process_end_of_turn(combatant: Combatant) -> list[str]:
    """End-of-turn housekeeping for two-turn state.

    A fainted combatant never carries a charge or recharge into a later
    turn, even if its HP was zeroed without going through ``take_damage``.
    """
    if combatant.is_fainted and (is_charging(combatant) or must_recharge(combatant)):
        clear_commitment(combatant)
    return []


def status_message(combatant: Combatant, registry: CatalogRegistry) -> str | None:
    """Describe the combatant's two-turn phase, or ``None`` when idle."""
    commitment = combatant.commitment
    if isinstance(commitment, Charging):
        return charge_message(combatant, registry.get_move(commitment.move_id))
    if isinstance(commitment, Recharging):
        return f"{combatant.name} must recharge!"
    return None
