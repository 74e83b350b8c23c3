"""Status effect lifecycle -- apply, remove, query, tick, recover.

Manages the ``statuses`` list on :class:`Combatant` objects.  Each tag maps
to a fixed :class:`StatusConfig` (end-of-turn damage, skip chance, stat
reductions, natural cure chance).

A combatant may carry several tags at once, except that tags in the same
conflict group exclude each other: sleep excludes paralysis and frostbite,
and each poison/burn excludes its "badly" variant.  Confusion coexists with
everything.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from monster_battle.ir.types import StatusEffect
from monster_battle.sim.core.entities import StatBlock, StatusCondition

if TYPE_CHECKING:
    from monster_battle.sim.core.entities import Combatant
    from monster_battle.sim.core.rng import BattleRNG

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StatusConfig:
    damage_fraction: float = 0.0
    skip_chance: float = 0.0
    attack_reduction: float = 0.0
    defense_reduction: float = 0.0
    special_attack_reduction: float = 0.0
    special_defense_reduction: float = 0.0
    speed_reduction: float = 0.0
    cure_chance: float = 0.0
    self_hit_chance: float = 0.0


STATUS_CONFIGS: dict[StatusEffect, StatusConfig] = {
    StatusEffect.POISON: StatusConfig(
        damage_fraction=0.05, attack_reduction=0.1, special_attack_reduction=0.1,
    ),
    StatusEffect.BURN: StatusConfig(
        damage_fraction=0.05, attack_reduction=0.1, special_attack_reduction=0.1,
    ),
    StatusEffect.PARALYSIS: StatusConfig(skip_chance=0.4, speed_reduction=0.1),
    StatusEffect.FROSTBITE: StatusConfig(damage_fraction=0.05, skip_chance=0.3),
    StatusEffect.SLEEP: StatusConfig(skip_chance=1.0, cure_chance=0.4),
    StatusEffect.BADLY_POISONED: StatusConfig(
        damage_fraction=0.1, attack_reduction=0.1, special_attack_reduction=0.1,
    ),
    StatusEffect.BADLY_BURNED: StatusConfig(
        damage_fraction=0.1, attack_reduction=0.1, special_attack_reduction=0.1,
    ),
    StatusEffect.CONFUSION: StatusConfig(self_hit_chance=0.3),
}

# Tags that cannot be held together with the key tag.
_CONFLICTS: dict[StatusEffect, frozenset[StatusEffect]] = {
    StatusEffect.SLEEP: frozenset({StatusEffect.PARALYSIS, StatusEffect.FROSTBITE}),
    StatusEffect.PARALYSIS: frozenset({StatusEffect.SLEEP}),
    StatusEffect.FROSTBITE: frozenset({StatusEffect.SLEEP}),
    StatusEffect.POISON: frozenset({StatusEffect.BADLY_POISONED}),
    StatusEffect.BADLY_POISONED: frozenset({StatusEffect.POISON}),
    StatusEffect.BURN: frozenset({StatusEffect.BADLY_BURNED}),
    StatusEffect.BADLY_BURNED: frozenset({StatusEffect.BURN}),
}

_APPLY_MESSAGES: dict[StatusEffect, str] = {
    StatusEffect.POISON: "{name} was poisoned!",
    StatusEffect.BURN: "{name} was burned!",
    StatusEffect.PARALYSIS: "{name} was paralyzed!",
    StatusEffect.FROSTBITE: "{name} was frozen!",
    StatusEffect.SLEEP: "{name} fell asleep!",
    StatusEffect.BADLY_POISONED: "{name} was badly poisoned!",
    StatusEffect.BADLY_BURNED: "{name} was badly burned!",
    StatusEffect.CONFUSION: "{name} became confused!",
}

_DAMAGE_MESSAGES: dict[StatusEffect, str] = {
    StatusEffect.POISON: "{name} is hurt by poison! ({damage} damage)",
    StatusEffect.BURN: "{name} is hurt by burn! ({damage} damage)",
    StatusEffect.FROSTBITE: "{name} is hurt by frostbite! ({damage} damage)",
    StatusEffect.BADLY_POISONED: "{name} is badly poisoned! ({damage} damage)",
    StatusEffect.BADLY_BURNED: "{name} is badly burned! ({damage} damage)",
}

_SKIP_MESSAGES: dict[StatusEffect, str] = {
    StatusEffect.PARALYSIS: "{name} is paralyzed and can't move!",
    StatusEffect.FROSTBITE: "{name} is frozen and can't move!",
    StatusEffect.SLEEP: "{name} is fast asleep!",
}

_RECOVERY_MESSAGES: dict[StatusEffect, str] = {
    StatusEffect.SLEEP: "{name} woke up!",
    StatusEffect.CONFUSION: "{name} snapped out of its confusion!",
}

CONFUSION_SELF_HIT_MESSAGE = "{name} is confused and hurt itself in its confusion!"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass
class StatusApplication:
    applied: bool
    message: str


@dataclass
class StatusDamage:
    damage: int = 0
    messages: list[str] = field(default_factory=list)


@dataclass
class SkipCheck:
    skip: bool
    reason: str | None = None
    status: StatusEffect | None = None


@dataclass
class Recovery:
    cured: list[StatusEffect] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Apply / remove / query
# ---------------------------------------------------------------------------

def has_status(combatant: Combatant, status: StatusEffect) -> bool:
    return any(c.effect == status for c in combatant.statuses)


def get_status(combatant: Combatant, status: StatusEffect) -> StatusCondition | None:
    for condition in combatant.statuses:
        if condition.effect == status:
            return condition
    return None


def add_status(
    combatant: Combatant,
    status: StatusEffect,
    duration: int | None = None,
) -> StatusApplication:
    """Attach *status* to *combatant* unless it is blocked.

    Fails (``applied=False``) if the tag is already present or a
    conflicting tag is active; the status list is left unchanged.

    Parameters
    ----------
    combatant:
        The combatant receiving the condition.
    status:
        Tag to add.
    duration:
        Optional number of turns after which natural recovery removes the
        condition regardless of its cure chance.
    """
    name = combatant.name
    if has_status(combatant, status):
        return StatusApplication(False, f"{name} is already affected by {_label(status)}!")
    blocking = _CONFLICTS.get(status, frozenset())
    if any(has_status(combatant, other) for other in blocking):
        return StatusApplication(False, f"{name} is already affected by a status condition!")

    combatant.statuses.append(StatusCondition(effect=status, duration=duration))
    logger.debug("%s gained %s (duration=%s)", combatant.id, status.value, duration)
    return StatusApplication(True, _APPLY_MESSAGES[status].format(name=name))


def remove_status(combatant: Combatant, status: StatusEffect) -> bool:
    """Remove *status*; returns whether it was present."""
    before = len(combatant.statuses)
    combatant.statuses = [c for c in combatant.statuses if c.effect != status]
    return len(combatant.statuses) != before


def clear_confusion(combatant: Combatant) -> bool:
    return remove_status(combatant, StatusEffect.CONFUSION)


def clear_all(combatant: Combatant) -> None:
    combatant.statuses = []


# ---------------------------------------------------------------------------
# Per-turn effects
# ---------------------------------------------------------------------------

def apply_end_of_turn_damage(combatant: Combatant) -> StatusDamage:
    """Apply every active tag's damage fraction of max HP.

    Each damaging tag deals ``max(1, floor(max_hp * fraction))``.  Stops as
    soon as the combatant faints.
    """
    result = StatusDamage()
    for condition in list(combatant.statuses):
        if combatant.is_fainted:
            break
        config = STATUS_CONFIGS[condition.effect]
        if not config.damage_fraction:
            continue
        damage = max(1, math.floor(combatant.max_hp * config.damage_fraction))
        result.damage += combatant.take_damage(damage)
        result.messages.append(
            _DAMAGE_MESSAGES[condition.effect].format(name=combatant.name, damage=damage)
        )
    return result


def should_skip_turn(combatant: Combatant, rng: BattleRNG) -> SkipCheck:
    """Roll each tag's skip chance independently; the first success wins."""
    for condition in combatant.statuses:
        config = STATUS_CONFIGS[condition.effect]
        if config.skip_chance and rng.chance(config.skip_chance):
            reason = _SKIP_MESSAGES[condition.effect].format(name=combatant.name)
            return SkipCheck(True, reason, condition.effect)
    return SkipCheck(False)


def should_hit_self(combatant: Combatant, rng: BattleRNG) -> SkipCheck:
    """Confusion roll; only confusion can make a combatant hit itself."""
    if not has_status(combatant, StatusEffect.CONFUSION):
        return SkipCheck(False)
    config = STATUS_CONFIGS[StatusEffect.CONFUSION]
    if rng.chance(config.self_hit_chance):
        return SkipCheck(
            True,
            CONFUSION_SELF_HIT_MESSAGE.format(name=combatant.name),
            StatusEffect.CONFUSION,
        )
    return SkipCheck(False)


def get_modified_stats(combatant: Combatant) -> StatBlock:
    """Stats after every active tag's reductions, composed multiplicatively.

    Each stat is floored once after composition.  HP is never reduced.
    """
    attack = defense = special_attack = special_defense = speed = 1.0
    for condition in combatant.statuses:
        config = STATUS_CONFIGS[condition.effect]
        attack *= 1 - config.attack_reduction
        defense *= 1 - config.defense_reduction
        special_attack *= 1 - config.special_attack_reduction
        special_defense *= 1 - config.special_defense_reduction
        speed *= 1 - config.speed_reduction

    stats = combatant.stats
    return StatBlock(
        hp=stats.hp,
        attack=math.floor(stats.attack * attack),
        defense=math.floor(stats.defense * defense),
        special_attack=math.floor(stats.special_attack * special_attack),
        special_defense=math.floor(stats.special_defense * special_defense),
        speed=math.floor(stats.speed * speed),
    )


def process_natural_recovery(combatant: Combatant, rng: BattleRNG) -> Recovery:
    """Roll each tag's cure chance once; survivors age by one turn.

    A tag with a ``duration`` also expires once it has been active that
    many turns.
    """
    result = Recovery()
    survivors: list[StatusCondition] = []
    for condition in combatant.statuses:
        config = STATUS_CONFIGS[condition.effect]
        cured = bool(config.cure_chance) and rng.chance(config.cure_chance)
        if not cured:
            condition.turns_active += 1
            cured = condition.duration is not None and condition.turns_active >= condition.duration
        if cured:
            result.cured.append(condition.effect)
            result.messages.append(_recovery_message(combatant.name, condition.effect))
        else:
            survivors.append(condition)
    combatant.statuses = survivors
    return result


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _label(status: StatusEffect) -> str:
    return status.value.replace("_", " ")


def _recovery_message(name: str, status: StatusEffect) -> str:
    template = _RECOVERY_MESSAGES.get(status)
    if template is not None:
        return template.format(name=name)
    return f"{name} recovered from {_label(status)}!"
