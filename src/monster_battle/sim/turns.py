"""Turn manager -- orders both sides' actions and runs one full turn.

A turn is:

1. initiative: priority actions (catch, item, switch, flee) first, then
   modified speed, ties broken at random.  Order is computed once per turn.
2. each side's action through the :class:`ActionResolver`, stopping as soon
   as the battle ends.
3. end-of-turn effects in fixed order:
   status damage -> recovery -> two-turn/lock advance -> trapping damage
   -> weather damage -> weather countdown.
   Faints are checked after every damage-producing step.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from monster_battle.sim import multi_turn, two_turn
from monster_battle.sim.core.actions import (
    PRIORITY_ACTION_TYPES,
    ActionModifiers,
    BattleAction,
    BattleResult,
)
from monster_battle.sim.core.battle_state import BattleContext, Side, Winner, other_side
from monster_battle.sim.mechanics.abilities import apply_battle_start_abilities, modified_speed
from monster_battle.sim.mechanics.status_effects import (
    apply_end_of_turn_damage,
    process_natural_recovery,
)
from monster_battle.sim.mechanics.weather import (
    battle_start_stage_boosts,
    update_weather,
    weather_damage,
    weather_description,
    weather_end_message,
)
from monster_battle.sim.resolver import ActionResolver

if TYPE_CHECKING:
    from monster_battle.sim.content.registry import CatalogRegistry
    from monster_battle.sim.core.battle_state import WeatherCondition
    from monster_battle.sim.core.entities import Combatant
    from monster_battle.sim.core.rng import BattleRNG

logger = logging.getLogger(__name__)

SIDES: tuple[Side, Side] = ("player", "opponent")


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class SideActionResult(BaseModel):
    side: Side
    action_type: str
    result: BattleResult


class BattleEnd(BaseModel):
    """A battle-ending condition found outside an action (e.g. a faint)."""

    winner: Winner
    fainted: list[Side] = Field(default_factory=list)


class TurnResult(BaseModel):
    """Everything that happened during one turn."""

    turn: int
    order: list[Side] = Field(default_factory=list)
    actions: list[SideActionResult] = Field(default_factory=list)
    end_of_turn: list[str] = Field(default_factory=list)
    battle_ended: bool = False
    winner: Winner | None = None
    monster_caught: bool = False
    fled: bool = False
    fainted: list[Side] = Field(default_factory=list)
    """Sides whose active monster fainted and needs replacing."""

    @property
    def effects(self) -> list[str]:
        """Full narrative log of the turn, in order."""
        lines: list[str] = []
        for entry in self.actions:
            lines.extend(entry.result.effects)
        lines.extend(self.end_of_turn)
        return lines

    def result_for(self, side: Side) -> BattleResult | None:
        for entry in self.actions:
            if entry.side == side:
                return entry.result
        return None


# ---------------------------------------------------------------------------
# TurnManager
# ---------------------------------------------------------------------------

class TurnManager:
    """Runs battle start and full turns on a :class:`BattleContext`.

    Parameters
    ----------
    registry:
        Catalog lookup.
    rng:
        Random source for speed ties and (when no resolver is supplied) every
        roll the resolver makes.
    resolver:
        Optional pre-built resolver; one is created from *registry* and
        *rng* otherwise.
    """

    def __init__(
        self,
        registry: CatalogRegistry,
        rng: BattleRNG,
        resolver: ActionResolver | None = None,
    ) -> None:
        self.registry = registry
        self.rng = rng
        self.resolver = resolver or ActionResolver(registry, rng)

    # -- battle start --------------------------------------------------------

    def start_battle(
        self,
        player: Combatant,
        opponent: Combatant,
        weather: WeatherCondition | None = None,
    ) -> tuple[BattleContext, list[str]]:
        """Create the battle context and run battle-start hooks.

        Weather stage boosts apply first, then battle-start abilities; both
        active monsters are registered with the field tracker.
        """
        context = BattleContext(player=player, opponent=opponent, weather=weather)
        messages: list[str] = []

        if weather is not None:
            messages.append(weather_description(weather.weather))
            for side in SIDES:
                boosts = battle_start_stage_boosts(context.active(side).types, weather)
                stages = context.stages(side)
                for stat, delta in boosts.items():
                    stages.change(stat, delta)

        messages.extend(apply_battle_start_abilities(context, self.registry))
        for side in SIDES:
            context.field.switch_in(side, context.active(side).id)

        logger.debug(
            "Battle %s started: %s vs %s (weather=%s)",
            context.battle_id, player.id, opponent.id,
            weather.weather.value if weather else None,
        )
        return context, messages

    # -- ordering ------------------------------------------------------------

    def determine_turn_order(
        self,
        context: BattleContext,
        player_action: BattleAction,
        opponent_action: BattleAction,
    ) -> list[Side]:
        """Which side acts first this turn.

        Priority actions beat moves.  Within the same priority bracket the
        faster side goes first and a speed tie is a coin flip.
        """
        player_priority = player_action.type in PRIORITY_ACTION_TYPES
        opponent_priority = opponent_action.type in PRIORITY_ACTION_TYPES
        if player_priority != opponent_priority:
            return ["player", "opponent"] if player_priority else ["opponent", "player"]

        player_speed = self._speed(context, "player")
        opponent_speed = self._speed(context, "opponent")
        if player_speed != opponent_speed:
            first: Side = "player" if player_speed > opponent_speed else "opponent"
        else:
            first = "player" if self.rng.random_float() < 0.5 else "opponent"
        logger.debug(
            "Turn order: speed %d vs %d -> %s first", player_speed, opponent_speed, first,
        )
        return [first, other_side(first)]

    def _speed(self, context: BattleContext, side: Side) -> int:
        combatant = context.active(side)
        return modified_speed(
            combatant, self.registry, context.weather, context.stages(side).speed,
        )

    # -- turn ----------------------------------------------------------------

    def resolve_turn(
        self,
        context: BattleContext,
        player_action: BattleAction,
        opponent_action: BattleAction,
        player_modifiers: ActionModifiers | None = None,
        opponent_modifiers: ActionModifiers | None = None,
    ) -> TurnResult:
        """Resolve one full turn and return what happened.

        Parameters
        ----------
        context:
            The battle's context; mutated in place.
        player_action, opponent_action:
            Each side's chosen action.
        player_modifiers, opponent_modifiers:
            Inventory-supplied modifiers for each side's action.
        """
        order = self.determine_turn_order(context, player_action, opponent_action)
        context.turn += 1
        result = TurnResult(turn=context.turn, order=order)
        actions = {"player": player_action, "opponent": opponent_action}
        modifiers = {"player": player_modifiers, "opponent": opponent_modifiers}

        for side in order:
            actor = context.active(side)
            target = context.active(other_side(side))
            action = actions[side]
            outcome = self.resolver.resolve_action(actor, target, action, modifiers[side], context)
            if action.type != "switch":
                context.field.record_action(actor.id)
            result.actions.append(SideActionResult(side=side, action_type=action.type, result=outcome))

            if outcome.monster_caught:
                result.monster_caught = True
            if outcome.fled:
                result.fled = True
            if outcome.battle_ended:
                result.battle_ended = True
                result.winner = outcome.winner
                result.fainted = [s for s in SIDES if context.active(s).is_fainted]
                logger.debug("Battle %s ended on turn %d by %s's action", context.battle_id, context.turn, side)
                return result

        end = self.process_end_of_turn(context, result.end_of_turn)
        if end is not None:
            result.battle_ended = True
            result.winner = end.winner
            result.fainted = end.fainted
        context.field.end_turn()
        return result

    # -- end of turn ---------------------------------------------------------

    def process_end_of_turn(self, context: BattleContext, messages: list[str]) -> BattleEnd | None:
        """Apply end-of-turn effects, appending log lines to *messages*.

        Returns the battle end as soon as any damage step makes a monster
        faint; the remaining steps are skipped.
        """
        # Status damage
        for side in SIDES:
            combatant = context.active(side)
            if combatant.is_fainted:
                continue
            messages.extend(apply_end_of_turn_damage(combatant).messages)
        end = self._check_faints(context, messages)
        if end is not None:
            return end

        # Natural recovery
        for side in SIDES:
            combatant = context.active(side)
            if not combatant.is_fainted:
                messages.extend(process_natural_recovery(combatant, self.rng).messages)

        # Two-turn / locking countdown
        for side in SIDES:
            combatant = context.active(side)
            messages.extend(two_turn.process_end_of_turn(combatant))
            messages.extend(multi_turn.advance_lock(combatant, self.registry, self.rng))

        # Trapping damage
        for side in SIDES:
            combatant = context.active(side)
            if not combatant.is_fainted:
                messages.extend(multi_turn.process_trapping_damage(combatant, self.registry).messages)
        end = self._check_faints(context, messages)
        if end is not None:
            return end

        # Weather damage
        if context.weather is not None:
            for side in SIDES:
                combatant = context.active(side)
                if combatant.is_fainted:
                    continue
                damage, message = weather_damage(
                    combatant.name, combatant.max_hp, combatant.types, context.weather,
                )
                if damage:
                    combatant.take_damage(damage)
                if message:
                    messages.append(message)
            end = self._check_faints(context, messages)
            if end is not None:
                return end

        # Weather countdown
        if context.weather is not None:
            current = context.weather.weather
            context.weather = update_weather(context.weather)
            if context.weather is None:
                messages.append(weather_end_message(current))
        return None

    def _check_faints(self, context: BattleContext, messages: list[str]) -> BattleEnd | None:
        end = self.check_battle_end(context)
        if end is not None:
            for side in end.fainted:
                messages.append(f"{context.active(side).name} fainted!")
        return end

    @staticmethod
    def check_battle_end(context: BattleContext) -> BattleEnd | None:
        """Battle end from faints alone; both sides fainting is a draw."""
        fainted = [side for side in SIDES if context.active(side).is_fainted]
        if not fainted:
            return None
        if len(fainted) == 2:
            return BattleEnd(winner="draw", fainted=fainted)
        return BattleEnd(winner=other_side(fainted[0]), fainted=fainted)
