"""Move-level restrictions, checked independently of the resolver.

Used by agents to pick legal moves and as a pre-flight check before an
attack is resolved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from monster_battle.sim.content.registry import CatalogRegistry
    from monster_battle.sim.core.battle_state import BattleContext
    from monster_battle.sim.core.entities import Combatant


@dataclass
class MoveCheck:
    move_id: str
    can_use: bool
    reason: str | None = None


def can_use(
    registry: CatalogRegistry,
    context: BattleContext | None,
    monster_id: str,
    move_id: str,
    combatant: Combatant | None = None,
) -> MoveCheck:
    """Whether *monster_id* may use *move_id* right now.

    Parameters
    ----------
    registry:
        Catalog lookup.  An unknown *move_id* raises
        :class:`~monster_battle.errors.InvalidReferenceError`.
    context:
        The battle's context.  Without one, field tracking is unknown and
        the monster counts as being on its first turn.
    monster_id:
        Id of the acting monster.
    move_id:
        The move to check.
    combatant:
        When supplied, remaining PP is checked too.
    """
    move = registry.get_move(move_id)

    if move.restrictions.first_turn_only:
        first_turn = context.field.is_first_turn_on_field(monster_id) if context is not None else True
        if not first_turn:
            return MoveCheck(
                move_id, False,
                f"{move.name} can only be used on the first turn the user is in battle!",
            )

    if combatant is not None and combatant.remaining_pp(move_id) <= 0:
        return MoveCheck(move_id, False, f"{move.name} has no PP left!")

    return MoveCheck(move_id, True)


def get_usable_moves(
    registry: CatalogRegistry,
    context: BattleContext | None,
    combatant: Combatant,
) -> list[MoveCheck]:
    """One :class:`MoveCheck` per known move, in move-slot order."""
    return [
        can_use(registry, context, combatant.id, move_id, combatant)
        for move_id in combatant.moves
    ]


def has_usable_moves(
    registry: CatalogRegistry,
    context: BattleContext | None,
    combatant: Combatant,
) -> bool:
    return any(check.can_use for check in get_usable_moves(registry, context, combatant))


def first_usable_move(
    registry: CatalogRegistry,
    context: BattleContext | None,
    combatant: Combatant,
) -> str | None:
    for check in get_usable_moves(registry, context, combatant):
        if check.can_use:
            return check.move_id
    return None
