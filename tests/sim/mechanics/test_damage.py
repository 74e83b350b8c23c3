"""Tests for damage calculation."""

import pytest

from monster_battle.ir.types import MonsterType, StatusEffect, Weather
from monster_battle.sim.core.battle_state import BattleContext, WeatherCondition
from monster_battle.sim.mechanics.damage import (
    base_damage,
    compute_confusion_damage,
    compute_damage,
    level_factor,
)
from monster_battle.sim.mechanics.status_effects import add_status

# Queued floats: crit roll, then random factor (1.0 -> factor 1.0).
NO_CRIT_MAX_ROLL = [0.5, 1.0]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def attacker(make_combatant):
    return make_combatant(
        "Attacker", types=[MonsterType.FIRE], attack=100, special_attack=100,
    )


@pytest.fixture
def defender(make_combatant):
    return make_combatant("Defender", types=[MonsterType.WATER], defense=50, special_defense=50)


# ---------------------------------------------------------------------------
# Formula
# ---------------------------------------------------------------------------

class TestFormula:
    def test_level_factor(self):
        assert level_factor(50) == 22

    def test_base_damage(self):
        assert base_damage(50, 40, 100, 50) == pytest.approx(37.2)

    def test_zero_defense_treated_as_one(self):
        assert base_damage(50, 40, 100, 0) == base_damage(50, 40, 100, 1)


# ---------------------------------------------------------------------------
# compute_damage -- reference and modifiers
# ---------------------------------------------------------------------------

class TestComputeDamage:
    def test_reference_value(self, registry, make_rng, attacker, defender):
        """Level 50, 40 power, atk 100 vs def 50, everything neutral -> 37."""
        rng = make_rng(NO_CRIT_MAX_ROLL)
        result = compute_damage(attacker, defender, registry.get_move("tackle"), registry, rng)
        assert result.damage == 37
        assert not result.is_critical
        assert result.effectiveness == 1.0

    def test_critical_hit_doubles(self, registry, make_rng, attacker, defender):
        rng = make_rng([0.0, 1.0])
        result = compute_damage(attacker, defender, registry.get_move("tackle"), registry, rng)
        assert result.is_critical
        assert result.damage == 74

    def test_stab(self, registry, make_rng, make_combatant, defender):
        normal_attacker = make_combatant(types=[MonsterType.NORMAL], attack=100)
        rng = make_rng(NO_CRIT_MAX_ROLL)
        result = compute_damage(normal_attacker, defender, registry.get_move("tackle"), registry, rng)
        assert result.damage == 55  # floor(37.2 * 1.5)

    def test_super_effective(self, registry, make_rng, make_combatant):
        attacker = make_combatant(types=[MonsterType.WATER], special_attack=100)
        grass = make_combatant(types=[MonsterType.GRASS], special_defense=50)
        result = compute_damage(attacker, grass, registry.get_move("ember"), registry, make_rng(NO_CRIT_MAX_ROLL))
        assert result.effectiveness == 2.0
        assert result.damage == 74

    def test_immune_still_deals_one(self, registry, make_rng, attacker, make_combatant):
        ghost = make_combatant(types=[MonsterType.GHOST])
        result = compute_damage(attacker, ghost, registry.get_move("tackle"), registry, make_rng(NO_CRIT_MAX_ROLL))
        assert result.effectiveness == 0.0
        assert result.damage == 1

    def test_floor_of_one(self, registry, make_rng, make_combatant):
        weak = make_combatant(level=1, attack=1)
        wall = make_combatant(types=[MonsterType.ROCK, MonsterType.STEEL], defense=999)
        result = compute_damage(weak, wall, registry.get_move("tackle"), registry, make_rng([0.5, 0.0]))
        assert result.effectiveness == 0.25
        assert result.damage == 1

    def test_status_move_deals_zero(self, registry, make_rng, attacker, defender):
        rng = make_rng()
        assert compute_damage(attacker, defender, registry.get_move("growl"), registry, rng).damage == 0
        assert rng.float_draws == 0

    def test_power_override(self, registry, make_rng, attacker, defender):
        rng = make_rng(NO_CRIT_MAX_ROLL)
        result = compute_damage(attacker, defender, registry.get_move("tackle"), registry, rng, power=80)
        assert result.damage == 72

    def test_attack_stage(self, registry, make_rng, attacker, defender):
        context = BattleContext(player=attacker, opponent=defender)
        context.player_stages.attack = 2
        result = compute_damage(
            attacker, defender, registry.get_move("tackle"), registry,
            make_rng(NO_CRIT_MAX_ROLL), context,
        )
        assert result.damage == 72  # attack 100 * 2.0

    def test_burn_reduces_attack(self, registry, make_rng, attacker, defender):
        add_status(attacker, StatusEffect.BURN)
        result = compute_damage(attacker, defender, registry.get_move("tackle"), registry, make_rng(NO_CRIT_MAX_ROLL))
        assert result.damage == 33  # attack floor(100 * 0.9)

    @pytest.mark.parametrize("weather,expected", [
        (Weather.RAIN, 55),
        (Weather.HARSH_SUNLIGHT, 18),
        (Weather.FOG, 37),
    ])
    def test_weather_power(self, registry, make_rng, attacker, make_combatant, weather, expected):
        target = make_combatant(types=[MonsterType.NORMAL], special_defense=50)
        context = BattleContext(
            player=attacker, opponent=target,
            weather=WeatherCondition(weather=weather, turns_remaining=3),
        )
        result = compute_damage(
            attacker, target, registry.get_move("water_gun"), registry,
            make_rng(NO_CRIT_MAX_ROLL), context,
        )
        assert result.damage == expected

    def test_low_hp_ability_boost(self, registry, make_rng, make_combatant):
        blaze = make_combatant(types=[MonsterType.FIRE], special_attack=100, current_hp=30, ability="blaze")
        target = make_combatant(types=[MonsterType.NORMAL], special_defense=50)
        result = compute_damage(blaze, target, registry.get_move("ember"), registry, make_rng(NO_CRIT_MAX_ROLL))
        assert result.damage == 83  # floor(37.2 * 1.5 * 1.5)

    def test_random_factor_range(self, registry, attacker, defender):
        from monster_battle.sim.core.rng import BattleRNG

        rng = BattleRNG(3)
        move = registry.get_move("tackle")
        for _ in range(200):
            result = compute_damage(attacker, defender, move, registry, rng)
            cap = 74 if result.is_critical else 37
            assert 1 <= result.damage <= cap


# ---------------------------------------------------------------------------
# Confusion self-hit
# ---------------------------------------------------------------------------

class TestConfusionDamage:
    def test_uses_own_attack_and_defense(self, make_combatant):
        mon = make_combatant(attack=100, defense=50)
        assert compute_confusion_damage(mon, 40) == 37

    def test_zero_power(self, make_combatant):
        assert compute_confusion_damage(make_combatant(), 0) == 0
