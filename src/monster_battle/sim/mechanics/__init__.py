"""Core battle mechanics.

Re-exports the primary functions from each mechanics module for convenience.

Usage::

    from monster_battle.sim.mechanics import (
        compute_damage, compute_confusion_damage,
        add_status, remove_status, has_status, should_skip_turn,
        type_effectiveness, update_weather, stage_multiplier,
    )
"""

# -- stat stages -------------------------------------------------------------
from .stat_stages import MAX_STAGE, MIN_STAGE, add_stages, clamp_stage, stage_multiplier

# -- status effects ----------------------------------------------------------
from .status_effects import (
    STATUS_CONFIGS,
    add_status,
    apply_end_of_turn_damage,
    clear_all,
    clear_confusion,
    get_modified_stats,
    get_status,
    has_status,
    process_natural_recovery,
    remove_status,
    should_hit_self,
    should_skip_turn,
)

# -- weather -----------------------------------------------------------------
from .weather import (
    battle_start_stage_boosts,
    prevents_status,
    random_weather,
    start_weather,
    update_weather,
    weather_accuracy_multiplier,
    weather_damage,
    weather_description,
    weather_end_message,
    weather_power_multiplier,
    weather_type_effectiveness,
)

# -- type chart --------------------------------------------------------------
from .type_chart import TYPE_CHART, base_effectiveness, effectiveness_message, type_effectiveness

# -- abilities ---------------------------------------------------------------
from .abilities import ability_effect, apply_battle_start_abilities, modified_speed, stab_multiplier

# -- damage ------------------------------------------------------------------
from .damage import DamageResult, compute_confusion_damage, compute_damage

__all__ = [
    # stat stages
    "MIN_STAGE",
    "MAX_STAGE",
    "add_stages",
    "clamp_stage",
    "stage_multiplier",
    # status effects
    "STATUS_CONFIGS",
    "add_status",
    "remove_status",
    "has_status",
    "get_status",
    "clear_all",
    "clear_confusion",
    "apply_end_of_turn_damage",
    "should_skip_turn",
    "should_hit_self",
    "get_modified_stats",
    "process_natural_recovery",
    # weather
    "battle_start_stage_boosts",
    "prevents_status",
    "random_weather",
    "start_weather",
    "update_weather",
    "weather_accuracy_multiplier",
    "weather_damage",
    "weather_description",
    "weather_end_message",
    "weather_power_multiplier",
    "weather_type_effectiveness",
    # type chart
    "TYPE_CHART",
    "base_effectiveness",
    "effectiveness_message",
    "type_effectiveness",
    # abilities
    "ability_effect",
    "apply_battle_start_abilities",
    "modified_speed",
    "stab_multiplier",
    # damage
    "DamageResult",
    "compute_damage",
    "compute_confusion_damage",
]
