"""Action resolver -- resolves one side's chosen action for one turn.

The resolver mutates the combatants (and context) it is handed in place and
keeps no reference to them once ``resolve_action`` returns.

Attack resolution runs these gates in order; the first one that fails ends
the action:

    fainted -> recharging -> status skip -> restrictions -> PP
    -> confusion self-hit -> semi-invulnerable target -> accuracy

after which the move's own shape (two-turn, multi-hit, locking, trapping or
single hit) takes over.  An unknown move, item, ability or species id raises
:class:`~monster_battle.errors.InvalidReferenceError` before anything is
mutated.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, assert_never

from monster_battle.ir.items import BALL_MULTIPLIERS, BallTier, ItemEffect
from monster_battle.ir.moves import (
    HealEffect,
    InflictStatusEffect,
    LockingData,
    MoveCategory,
    MultiHitData,
    SetWeatherEffect,
    StatStageEffect,
    TrappingData,
    TwoTurnMoveType,
)
from monster_battle.ir.types import Rarity, StatName, StatusEffect
from monster_battle.sim import multi_turn, two_turn
from monster_battle.sim.core.actions import (
    ActionModifiers,
    AttackAction,
    BattleAction,
    BattleResult,
    CatchAction,
    FleeAction,
    ItemAction,
    SwitchAction,
)
from monster_battle.sim.core.battle_state import other_side
from monster_battle.sim.core.entities import Charging, Idle, Locked
from monster_battle.sim.mechanics.damage import compute_confusion_damage, compute_damage
from monster_battle.sim.mechanics.status_effects import (
    add_status,
    clear_confusion,
    should_hit_self,
    should_skip_turn,
)
from monster_battle.sim.mechanics.type_chart import effectiveness_message
from monster_battle.sim.mechanics.weather import (
    prevents_status,
    start_weather,
    weather_accuracy_multiplier,
    weather_description,
)
from monster_battle.sim.move_validation import can_use

if TYPE_CHECKING:
    from monster_battle.ir.moves import MoveDefinition
    from monster_battle.sim.content.registry import CatalogRegistry
    from monster_battle.sim.core.battle_state import BattleContext, Side
    from monster_battle.sim.core.entities import Combatant
    from monster_battle.sim.core.rng import BattleRNG

logger = logging.getLogger(__name__)

# -- catch / flee tunables ---------------------------------------------------
RARITY_CATCH_RATES: dict[Rarity, float] = {
    Rarity.COMMON: 70,
    Rarity.UNCOMMON: 50,
    Rarity.RARE: 30,
    Rarity.LEGENDARY: 10,
}
MISSING_HP_CATCH_BONUS = 30
MAX_CATCH_RATE = 95

CONFUSION_MIN_TURNS = 2
CONFUSION_MAX_TURNS = 5

_STAT_LABELS: dict[StatName, str] = {
    StatName.ATTACK: "Attack",
    StatName.DEFENSE: "Defense",
    StatName.SPECIAL_ATTACK: "Sp. Atk",
    StatName.SPECIAL_DEFENSE: "Sp. Def",
    StatName.SPEED: "Speed",
}


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def catch_rate(rarity: Rarity, hp_fraction: float, ball: BallTier = BallTier.STANDARD) -> float:
    """Percent chance to catch a monster, capped at 95.

    ``(rarity base + missing-HP fraction * 30) * ball multiplier``.
    """
    rate = RARITY_CATCH_RATES[rarity] + (1 - hp_fraction) * MISSING_HP_CATCH_BONUS
    return min(MAX_CATCH_RATE, rate * BALL_MULTIPLIERS[ball])


def stat_change_message(name: str, stat: StatName, applied: int, requested: int) -> str:
    label = _STAT_LABELS[stat]
    if applied == 0:
        direction = "higher" if requested > 0 else "lower"
        return f"{name}'s {label} won't go any {direction}!"
    if applied > 0:
        adverb = {1: "", 2: " sharply"}.get(applied, " drastically")
        return f"{name}'s {label} rose{adverb}!"
    adverb = {-1: "", -2: " harshly"}.get(applied, " severely")
    return f"{name}'s {label}{adverb} fell!"


# ---------------------------------------------------------------------------
# ActionResolver
# ---------------------------------------------------------------------------

class ActionResolver:
    """Resolves a single :data:`BattleAction`.

    Parameters
    ----------
    registry:
        Catalog lookup for moves, species, abilities and items.
    rng:
        Random source for every roll the resolver makes.
    """

    def __init__(self, registry: CatalogRegistry, rng: BattleRNG) -> None:
        self.registry = registry
        self.rng = rng

    def resolve_action(
        self,
        actor: Combatant,
        target: Combatant,
        action: BattleAction,
        modifiers: ActionModifiers | None = None,
        context: BattleContext | None = None,
    ) -> BattleResult:
        """Resolve *action* taken by *actor* against *target*.

        Parameters
        ----------
        actor:
            The acting combatant.
        target:
            The opposing active combatant.
        action:
            What the actor's side chose to do.
        modifiers:
            Inventory-supplied modifiers (ball tier, guaranteed flee).
        context:
            The battle context.  Without one the actor is treated as the
            player side, and stat stages, weather and field tracking are
            unavailable.
        """
        modifiers = modifiers or ActionModifiers()
        if isinstance(action, ItemAction):
            self.registry.get_item(action.item_id)
        if not isinstance(action, AttackAction) and two_turn.must_recharge(actor):
            # Whatever the actor does this turn is its recharge turn.
            two_turn.clear_commitment(actor)
        match action:
            case AttackAction():
                return self._resolve_attack(actor, target, action.move_id, context)
            case CatchAction():
                ball = modifiers.ball or action.ball
                return self._resolve_catch(actor, target, ball, context, ball.value)
            case FleeAction():
                return self._resolve_flee(actor, target, modifiers.guaranteed_flee)
            case ItemAction():
                return self._resolve_item(actor, target, action.item_id, modifiers, context)
            case SwitchAction():
                return self._resolve_switch(actor, action.replacement, context)
            case _:
                assert_never(action)

    # ------------------------------------------------------------------
    # Attack
    # ------------------------------------------------------------------

    def _resolve_attack(
        self,
        actor: Combatant,
        target: Combatant,
        requested_move_id: str,
        context: BattleContext | None,
    ) -> BattleResult:
        committed = two_turn.forced_move(actor) or multi_turn.forced_move(actor)
        if committed is not None and committed != requested_move_id:
            logger.debug(
                "%s is committed to %s; ignoring requested %s",
                actor.id, committed, requested_move_id,
            )
        move = self.registry.get_move(committed or requested_move_id)
        for combatant in (actor, target):
            if combatant.ability:
                self.registry.get_ability(combatant.ability)

        if actor.is_fainted:
            return BattleResult(success=False, effects=[f"{actor.name} is unable to attack! (Fainted)"])

        if two_turn.must_recharge(actor):
            two_turn.clear_commitment(actor)
            return BattleResult(success=False, effects=[f"{actor.name} must recharge!"])

        if committed is None and move.id not in actor.moves:
            return BattleResult(success=False, effects=[f"{actor.name} doesn't know {move.name}!"])

        skip = should_skip_turn(actor, self.rng)
        if skip.skip:
            self._cancel_own_commitment(actor)
            return BattleResult(success=False, effects=[skip.reason])

        continuing = committed is not None
        if not continuing:
            refusal = self._refuse_fresh_use(actor, move, context)
            if refusal is not None:
                return refusal
            actor.spend_pp(move.id)

        self_hit = should_hit_self(actor, self.rng)
        if self_hit.skip:
            return self._resolve_confusion_hit(actor, move, self_hit.reason, context)

        if move.two_turn is not None:
            return self._resolve_two_turn(actor, target, move, context)
        match move.multi_turn:
            case None:
                return self._strike(actor, target, move, context)
            case MultiHitData():
                return self._resolve_multi_hit(actor, target, move, move.multi_turn, context)
            case LockingData():
                return self._resolve_locking(actor, target, move, context)
            case TrappingData():
                return self._resolve_trapping(actor, target, move, context)
            case _:
                assert_never(move.multi_turn)

    def _refuse_fresh_use(
        self,
        actor: Combatant,
        move: MoveDefinition,
        context: BattleContext | None,
    ) -> BattleResult | None:
        """Checks that refuse a fresh use before any PP is spent."""
        check = can_use(self.registry, context, actor.id, move.id)
        if not check.can_use:
            return BattleResult(success=False, effects=[check.reason])

        if actor.remaining_pp(move.id) <= 0:
            return BattleResult(
                success=False,
                effects=[f"{actor.name} tried to use {move.name}, but there's no PP left!"],
            )

        starts_commitment = move.two_turn is not None or isinstance(move.multi_turn, LockingData)
        if starts_commitment and multi_turn.is_trapped(actor):
            trap = self.registry.get_move(actor.commitment.move_id)
            return BattleResult(
                success=False,
                effects=[f"{actor.name} can't use {move.name} while trapped by {trap.name}!"],
            )
        return None

    def _resolve_confusion_hit(
        self,
        actor: Combatant,
        move: MoveDefinition,
        reason: str,
        context: BattleContext | None,
    ) -> BattleResult:
        self._cancel_own_commitment(actor)
        damage = compute_confusion_damage(actor, move.power, context)
        damage = actor.take_damage(damage)
        effects = [
            f"{actor.name} used {move.name}!",
            reason,
            f"It dealt {damage} damage to itself!",
        ]
        result = BattleResult(success=True, damage=damage, effects=effects)
        if actor.is_fainted:
            self._record_faint(result, actor, winner=other_side(self._side(actor, context)))
        return result

    # -- two-turn --------------------------------------------------------

    def _resolve_two_turn(
        self,
        actor: Combatant,
        target: Combatant,
        move: MoveDefinition,
        context: BattleContext | None,
    ) -> BattleResult:
        data = move.two_turn
        if data.kind == TwoTurnMoveType.RECHARGE:
            result = self._strike(actor, target, move, context)
            if result.success and not actor.is_fainted:
                two_turn.start_recharging(actor, move)
                result.effects.append(f"{actor.name} must recharge next turn!")
            return result

        if not two_turn.is_charging(actor):
            message = two_turn.start_charging(actor, move)
            return BattleResult(success=True, damage=0, effects=[message])

        two_turn.clear_commitment(actor)
        result = self._strike(actor, target, move, context)
        if result.success and data.requires_recharge and not actor.is_fainted:
            two_turn.start_recharging(actor, move)
            result.effects.append(f"{actor.name} must recharge next turn!")
        return result

    # -- multi-hit -------------------------------------------------------

    def _resolve_multi_hit(
        self,
        actor: Combatant,
        target: Combatant,
        move: MoveDefinition,
        data: MultiHitData,
        context: BattleContext | None,
    ) -> BattleResult:
        blocked = self._check_reach(actor, target, move)
        if blocked is not None:
            return blocked

        power = data.power_per_hit or move.power
        max_hits = multi_turn.roll_hit_count(data, self.rng)
        if data.accuracy_type == "single" and not self._accuracy_hits(move, context):
            return self._miss(actor, move)

        effects = [f"{actor.name} used {move.name}!"]
        total = 0
        landed = 0
        any_critical = False
        effectiveness = 1.0
        for _ in range(max_hits):
            if target.is_fainted:
                break
            if data.accuracy_type == "per_hit" and not self._accuracy_hits(move, context):
                if landed == 0:
                    return self._miss(actor, move)
                break
            hit = compute_damage(actor, target, move, self.registry, self.rng, context, power=power)
            total += target.take_damage(hit.damage)
            landed += 1
            effectiveness = hit.effectiveness
            if hit.is_critical:
                any_critical = True
                effects.append("Critical hit!")

        effects.append(f"Hit {landed} time{'s' if landed != 1 else ''}!")
        effects.append(f"It dealt {total} damage to {target.name}!")
        message = effectiveness_message(effectiveness)
        if message:
            effects.append(message)

        result = BattleResult(success=True, damage=total, is_critical=any_critical, effects=effects)
        self._finish_damaging_hit(result, actor, target, move, context)
        return result

    # -- locking ---------------------------------------------------------

    def _resolve_locking(
        self,
        actor: Combatant,
        target: Combatant,
        move: MoveDefinition,
        context: BattleContext | None,
    ) -> BattleResult:
        if multi_turn.is_locked(actor):
            lock = actor.commitment
            power = math.floor(move.power * multi_turn.locking_power_multiplier(actor, move))
            return self._strike(
                actor, target, move, context,
                power=power, auto_hit=lock.hit_on_first_turn,
            )

        lock_message = multi_turn.start_lock(actor, move, self.rng)
        result = self._strike(actor, target, move, context)
        if result.success and isinstance(actor.commitment, Locked):
            actor.commitment.hit_on_first_turn = True
            result.effects.insert(1, lock_message)
        elif isinstance(actor.commitment, Locked):
            two_turn.clear_commitment(actor)
        return result

    # -- trapping --------------------------------------------------------

    def _resolve_trapping(
        self,
        actor: Combatant,
        target: Combatant,
        move: MoveDefinition,
        context: BattleContext | None,
    ) -> BattleResult:
        result = self._strike(actor, target, move, context)
        if result.success and not target.is_fainted:
            message = multi_turn.apply_trap(target, move, self.rng)
            if message:
                result.effects.append(message)
        return result

    # -- single hit ------------------------------------------------------

    def _strike(
        self,
        actor: Combatant,
        target: Combatant,
        move: MoveDefinition,
        context: BattleContext | None,
        power: int | None = None,
        auto_hit: bool = False,
    ) -> BattleResult:
        """One ordinary use of *move*: reach, accuracy, damage, effects."""
        blocked = self._check_reach(actor, target, move)
        if blocked is not None:
            return blocked
        if not auto_hit and not self._accuracy_hits(move, context):
            return self._miss(actor, move)

        effects = [f"{actor.name} used {move.name}!"]
        if move.category == MoveCategory.STATUS:
            applied = self._apply_effects(actor, target, move, context, effects)
            if not applied:
                effects.append("But it had no effect!")
            return BattleResult(success=applied, damage=0, effects=effects)

        hit = compute_damage(actor, target, move, self.registry, self.rng, context, power=power)
        dealt = target.take_damage(hit.damage)
        if hit.is_critical:
            effects.append("Critical hit!")
        effects.append(f"It dealt {dealt} damage to {target.name}!")
        message = effectiveness_message(hit.effectiveness)
        if message:
            effects.append(message)

        result = BattleResult(success=True, damage=dealt, is_critical=hit.is_critical, effects=effects)
        self._finish_damaging_hit(result, actor, target, move, context)
        return result

    def _finish_damaging_hit(
        self,
        result: BattleResult,
        actor: Combatant,
        target: Combatant,
        move: MoveDefinition,
        context: BattleContext | None,
    ) -> None:
        if target.is_fainted:
            self._record_faint(result, target, winner=self._side(actor, context))
        else:
            self._apply_effects(actor, target, move, context, result.effects)

    def _check_reach(
        self,
        actor: Combatant,
        target: Combatant,
        move: MoveDefinition,
    ) -> BattleResult | None:
        """Blocked result if *target* is out of reach of *move*, else ``None``."""
        targets_opponent = move.is_damaging or any(e.target == "opponent" for e in move.effects)
        if not targets_opponent:
            return None
        check = two_turn.can_hit_semi_invulnerable(target, move)
        if check.can_hit:
            return None
        return BattleResult(
            success=False,
            effects=[f"{actor.name} used {move.name}!", check.reason],
        )

    def _accuracy_hits(self, move: MoveDefinition, context: BattleContext | None) -> bool:
        weather = context.weather if context is not None else None
        accuracy = move.accuracy * weather_accuracy_multiplier(weather)
        if accuracy >= 100:
            return True
        return self.rng.random_float() * 100 < accuracy

    @staticmethod
    def _miss(actor: Combatant, move: MoveDefinition) -> BattleResult:
        return BattleResult(success=False, damage=0, effects=[f"{actor.name} used {move.name}, but it missed!"])

    # -- secondary effects -----------------------------------------------

    def _apply_effects(
        self,
        actor: Combatant,
        target: Combatant,
        move: MoveDefinition,
        context: BattleContext | None,
        effects: list[str],
    ) -> bool:
        """Apply *move*'s secondary effects; returns whether any applied."""
        applied_any = False
        report_failures = move.category == MoveCategory.STATUS
        for effect in move.effects:
            recipient = actor if effect.target == "self" else target
            if recipient.is_fainted:
                continue
            if effect.chance < 100 and not self.rng.roll_percent(effect.chance):
                continue

            match effect:
                case StatStageEffect():
                    stages = context.stages_for(recipient) if context is not None else None
                    if stages is None:
                        logger.warning("No stat stages for %s; skipping %s", recipient.id, move.id)
                        continue
                    applied = stages.change(effect.stat, effect.stages)
                    effects.append(stat_change_message(recipient.name, effect.stat, applied, effect.stages))
                    applied_any = applied_any or applied != 0

                case InflictStatusEffect():
                    weather = context.weather if context is not None else None
                    if prevents_status(effect.status, weather):
                        if report_failures:
                            effects.append(f"The harsh sunlight prevented {recipient.name} from freezing!")
                        continue
                    duration = None
                    if effect.status == StatusEffect.CONFUSION:
                        duration = self.rng.random_int(CONFUSION_MIN_TURNS, CONFUSION_MAX_TURNS)
                    application = add_status(recipient, effect.status, duration=duration)
                    if application.applied or report_failures:
                        effects.append(application.message)
                    applied_any = applied_any or application.applied

                case SetWeatherEffect():
                    if context is None:
                        logger.warning("No battle context; %s cannot set weather", move.id)
                        continue
                    context.weather = start_weather(effect.weather, effect.turns)
                    effects.append(weather_description(effect.weather))
                    applied_any = True

                case HealEffect():
                    restored = recipient.heal(math.floor(recipient.max_hp * effect.fraction))
                    if restored:
                        effects.append(f"{recipient.name} regained {restored} HP!")
                        applied_any = True
                    elif report_failures:
                        effects.append(f"{recipient.name}'s HP is full!")

                case _:
                    assert_never(effect)
        return applied_any

    # ------------------------------------------------------------------
    # Catch / flee / item / switch
    # ------------------------------------------------------------------

    def _resolve_catch(
        self,
        actor: Combatant,
        target: Combatant,
        ball: BallTier,
        context: BattleContext | None,
        consumed: str,
    ) -> BattleResult:
        if target.is_fainted:
            return BattleResult(success=False, effects=[f"{target.name} has fainted and can't be caught!"])

        rarity = self.registry.get_monster(target.species_id).rarity
        rate = catch_rate(rarity, target.hp_fraction, ball)
        roll = self.rng.random_float() * 100
        logger.debug("Catch %s: rate=%.1f roll=%.1f", target.id, rate, roll)
        if roll < rate:
            return BattleResult(
                success=True,
                effects=[f"{target.name} was caught successfully!"],
                battle_ended=True,
                winner=self._side(actor, context),
                monster_caught=True,
                item_consumed=consumed,
            )
        return BattleResult(
            success=False,
            effects=[f"{target.name} broke free from the capture attempt!"],
            item_consumed=consumed,
        )

    def _resolve_flee(
        self,
        actor: Combatant,
        target: Combatant,
        guaranteed: bool,
        item_name: str = "Escape Rope",
    ) -> BattleResult:
        if guaranteed:
            return BattleResult(
                success=True, effects=[f"Used {item_name}! Got away safely!"],
                battle_ended=True, fled=True,
            )

        level_diff = target.level - actor.level
        if level_diff <= 0 or self.rng.random_int(0, 2 * level_diff) < level_diff:
            return BattleResult(success=True, effects=["Got away safely!"], battle_ended=True, fled=True)
        return BattleResult(success=False, effects=["Could not escape!"])

    def _resolve_item(
        self,
        actor: Combatant,
        target: Combatant,
        item_id: str,
        modifiers: ActionModifiers,
        context: BattleContext | None,
    ) -> BattleResult:
        item = self.registry.get_item(item_id)
        if item.ball_tier is not None:
            ball = modifiers.ball or item.ball_tier
            return self._resolve_catch(actor, target, ball, context, item.id)
        if item.effect == ItemEffect.GUARANTEED_FLEE:
            result = self._resolve_flee(actor, target, guaranteed=True, item_name=item.name)
            result.item_consumed = item.id
            return result
        return BattleResult(success=True, effects=[f"Used {item.name}!"], item_consumed=item.id)

    def _resolve_switch(
        self,
        actor: Combatant,
        replacement: Combatant,
        context: BattleContext | None,
    ) -> BattleResult:
        if replacement.is_fainted:
            return BattleResult(success=False, effects=[f"{replacement.name} has fainted and can't battle!"])
        if replacement.id == actor.id or (context is not None and context.side_of(replacement) is not None):
            return BattleResult(success=False, effects=[f"{replacement.name} is already in battle!"])
        check = multi_turn.can_switch_out(actor, self.registry)
        if not check.can_switch:
            return BattleResult(success=False, effects=[check.reason])

        # Volatile state does not survive leaving the field.
        actor.commitment = Idle()
        clear_confusion(actor)
        if context is not None:
            side = context.side_of(actor)
            if side is not None:
                context.replace_active(side, replacement)

        effects = [f"{actor.name}, come back!"] if not actor.is_fainted else []
        effects.append(f"Go, {replacement.name}!")
        return BattleResult(success=True, effects=effects, monster_switched=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _side(combatant: Combatant, context: BattleContext | None) -> Side:
        """Side of *combatant*; without a context the actor is the player."""
        side = context.side_of(combatant) if context is not None else None
        return side or "player"

    @staticmethod
    def _cancel_own_commitment(actor: Combatant) -> None:
        if isinstance(actor.commitment, (Charging, Locked)):
            actor.commitment = Idle()

    @staticmethod
    def _record_faint(result: BattleResult, fainted: Combatant, winner: Side) -> None:
        result.effects.append(f"{fainted.name} fainted!")
        result.battle_ended = True
        result.winner = winner
        result.requires_auto_switch = True
