"""Tests for the battle simulator, batch runner and telemetry."""

import pytest

from monster_battle.errors import InvalidReferenceError
from monster_battle.ir.types import Weather
from monster_battle.sim.core.rng import BattleRNG
from monster_battle.sim.play_agents.random_agent import RandomMoveAgent
from monster_battle.sim.runner import BatchRunner, BattleSimulator, SimulationConfig
from monster_battle.sim.telemetry import BattleTelemetry, MatchupSummary


def _simulator(registry) -> BattleSimulator:
    return BattleSimulator(
        registry,
        RandomMoveAgent(rng=BattleRNG(1)),
        RandomMoveAgent(rng=BattleRNG(2)),
    )


# ---------------------------------------------------------------------------
# BattleSimulator
# ---------------------------------------------------------------------------

class TestBattleSimulator:
    def test_battle_completes(self, registry):
        player = registry.create_combatant("flamepup", 20)
        opponent = registry.create_combatant("leaflet", 20)
        telemetry = _simulator(registry).run_battle(player, opponent, BattleRNG(7))

        assert telemetry.winner in ("player", "opponent", "draw")
        assert telemetry.turns >= 1
        assert telemetry.player_species == "flamepup"
        assert telemetry.opponent_species == "leaflet"
        assert telemetry.player_hp_start == player.max_hp
        assert telemetry.player_hp_end == player.current_hp
        assert telemetry.damage_dealt == telemetry.opponent_hp_start - telemetry.opponent_hp_end
        assert telemetry.damage_taken == telemetry.player_hp_start - telemetry.player_hp_end

    def test_loser_has_fainted(self, registry):
        player = registry.create_combatant("voltmouse", 20)
        opponent = registry.create_combatant("aquafin", 20)
        telemetry = _simulator(registry).run_battle(player, opponent, BattleRNG(3))
        if telemetry.winner == "player":
            assert telemetry.opponent_hp_end == 0
        elif telemetry.winner == "opponent":
            assert telemetry.player_hp_end == 0

    def test_turn_cap(self, registry):
        player = registry.create_combatant("rockmole", 30)
        opponent = registry.create_combatant("steelclaw", 30)
        config = SimulationConfig(max_turns=1)
        telemetry = _simulator(registry).run_battle(player, opponent, BattleRNG(0), config)
        assert telemetry.turns == 1
        assert telemetry.timed_out

    def test_moves_counted(self, registry):
        player = registry.create_combatant("flamepup", 20)
        opponent = registry.create_combatant("leaflet", 20)
        telemetry = _simulator(registry).run_battle(player, opponent, BattleRNG(11))
        chosen = sum(telemetry.moves_used["player"].values())
        assert chosen == telemetry.turns
        assert set(telemetry.moves_used["player"]) <= set(player.moves)

    def test_opening_weather(self, registry):
        player = registry.create_combatant("flamepup", 20)
        opponent = registry.create_combatant("aquafin", 20)
        config = SimulationConfig(weather=Weather.RAIN, weather_turns=3, keep_log=True)
        telemetry = _simulator(registry).run_battle(player, opponent, BattleRNG(5), config)
        assert telemetry.weather == "rain"
        assert telemetry.log[0] == "It's raining!"

    def test_log_off_by_default(self, registry):
        player = registry.create_combatant("flamepup", 20)
        opponent = registry.create_combatant("aquafin", 20)
        telemetry = _simulator(registry).run_battle(player, opponent, BattleRNG(5))
        assert telemetry.log == []


# ---------------------------------------------------------------------------
# BatchRunner
# ---------------------------------------------------------------------------

class TestBatchRunner:
    def test_seeds_increment(self, registry):
        results = BatchRunner(registry).run_batch("flamepup", "leaflet", 4, SimulationConfig(seed=100))
        assert [r.seed for r in results] == [100, 101, 102, 103]

    def test_deterministic(self, registry):
        runner = BatchRunner(registry)
        first = runner.run_batch("aquafin", "flamepup", 3, SimulationConfig(seed=9))
        second = runner.run_batch("aquafin", "flamepup", 3, SimulationConfig(seed=9))
        assert first == second

    def test_unknown_species_fails_fast(self, registry):
        with pytest.raises(InvalidReferenceError):
            BatchRunner(registry).run_batch("flamepup", "missingno", 5)

    def test_parallel_matches_serial(self, registry):
        runner = BatchRunner(registry)
        config = SimulationConfig(seed=21, level=15)
        serial = runner.run_batch("skyhawk", "mindmoth", 2, config)
        parallel = runner.run_batch("skyhawk", "mindmoth", 2, config, parallel=True)
        assert serial == parallel


# ---------------------------------------------------------------------------
# Telemetry
# ---------------------------------------------------------------------------

def _telemetry(winner, turns=5) -> BattleTelemetry:
    return BattleTelemetry(
        seed=0, player_species="a", opponent_species="b", winner=winner, turns=turns,
        player_hp_start=50, player_hp_end=10, opponent_hp_start=50, opponent_hp_end=0,
    )


class TestMatchupSummary:
    def test_counts(self):
        summary = MatchupSummary.from_battles([
            _telemetry("player", 4),
            _telemetry("player", 6),
            _telemetry("opponent", 8),
            _telemetry("draw", 2),
            _telemetry(None, 200),
        ])
        assert summary.battles == 5
        assert summary.player_wins == 2
        assert summary.opponent_wins == 1
        assert summary.draws == 1
        assert summary.timeouts == 1
        assert summary.player_win_rate == pytest.approx(0.4)
        assert summary.mean_turns == pytest.approx(44.0)

    def test_empty_batch(self):
        with pytest.raises(ValueError):
            MatchupSummary.from_battles([])

    def test_empty_summary_rates(self):
        summary = MatchupSummary("a", "b")
        assert summary.player_win_rate == 0.0
        assert summary.mean_turns == 0.0
