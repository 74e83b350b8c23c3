"""Tests for type effectiveness and stat stage multipliers."""

import pytest

from monster_battle.ir.types import MonsterType as T
from monster_battle.ir.types import Weather
from monster_battle.sim.core.battle_state import WeatherCondition
from monster_battle.sim.mechanics.stat_stages import (
    MAX_STAGE,
    MIN_STAGE,
    add_stages,
    clamp_stage,
    stage_multiplier,
)
from monster_battle.sim.mechanics.type_chart import (
    base_effectiveness,
    effectiveness_message,
    type_effectiveness,
)


# ---------------------------------------------------------------------------
# Type chart
# ---------------------------------------------------------------------------

class TestTypeEffectiveness:
    @pytest.mark.parametrize("move_type,defender,expected", [
        (T.FIRE, T.GRASS, 2.0),
        (T.FIRE, T.WATER, 0.5),
        (T.NORMAL, T.GHOST, 0.0),
        (T.ELECTRIC, T.GROUND, 0.0),
        (T.NORMAL, T.FIRE, 1.0),
    ])
    def test_single_type(self, move_type, defender, expected):
        assert base_effectiveness(move_type, defender) == expected

    def test_dual_type_multiplies(self):
        assert type_effectiveness(T.GRASS, [T.WATER, T.GROUND]) == 4.0
        assert type_effectiveness(T.FIRE, [T.GRASS, T.WATER]) == 1.0

    def test_strong_winds_neutralize_weakness(self):
        winds = WeatherCondition(weather=Weather.STRONG_WINDS, turns_remaining=3)
        assert type_effectiveness(T.ELECTRIC, [T.FLYING]) == 2.0
        assert type_effectiveness(T.ELECTRIC, [T.FLYING], winds) == 1.0
        assert type_effectiveness(T.ROCK, [T.FLYING, T.NORMAL], winds) == 1.0

    def test_strong_winds_leave_other_types(self):
        winds = WeatherCondition(weather=Weather.STRONG_WINDS, turns_remaining=3)
        assert type_effectiveness(T.ELECTRIC, [T.WATER], winds) == 2.0
        assert type_effectiveness(T.FIGHTING, [T.FLYING], winds) == 0.5


class TestEffectivenessMessage:
    def test_messages(self):
        assert effectiveness_message(2.0) == "It's super effective!"
        assert effectiveness_message(0.5) == "It's not very effective..."
        assert effectiveness_message(0.0) == "It's not very effective..."
        assert effectiveness_message(1.0) is None


# ---------------------------------------------------------------------------
# Stat stages
# ---------------------------------------------------------------------------

class TestStageMultiplier:
    def test_zero_is_neutral(self):
        assert stage_multiplier(0) == 1.0

    def test_known_values(self):
        assert stage_multiplier(1) == 1.5
        assert stage_multiplier(6) == 4.0
        assert stage_multiplier(-1) == pytest.approx(2 / 3)
        assert stage_multiplier(-6) == 0.25

    def test_monotonic(self):
        values = [stage_multiplier(s) for s in range(MIN_STAGE, MAX_STAGE + 1)]
        assert values == sorted(values)

    def test_out_of_range_clamped(self):
        assert stage_multiplier(9) == stage_multiplier(6)
        assert stage_multiplier(-9) == stage_multiplier(-6)


class TestAddStages:
    def test_clamp(self):
        assert clamp_stage(7) == 6
        assert clamp_stage(-7) == -6

    def test_applied_delta(self):
        assert add_stages(0, 2) == (2, 2)
        assert add_stages(5, 2) == (6, 1)
        assert add_stages(-6, -1) == (-6, 0)
