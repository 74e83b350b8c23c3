"""Battle simulation runner -- ties the turn manager, agents and telemetry together.

Provides three key classes:

- **SimulationConfig**: run-level settings (seed, turn cap, weather).
- **BattleSimulator**: plays one battle to completion with two agents.
- **BatchRunner**: orchestrates many seeded battles (optionally in parallel).
"""

from __future__ import annotations

import logging
import multiprocessing
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from monster_battle.ir.types import Weather
from monster_battle.sim.core.actions import AttackAction
from monster_battle.sim.core.rng import BattleRNG
from monster_battle.sim.mechanics.weather import (
    DEFAULT_WEATHER_DURATION,
    random_weather,
    start_weather,
)
from monster_battle.sim.play_agents.base import BattleAgent
from monster_battle.sim.play_agents.random_agent import RandomMoveAgent
from monster_battle.sim.telemetry import BattleTelemetry
from monster_battle.sim.turns import TurnManager

if TYPE_CHECKING:
    from monster_battle.sim.content.registry import CatalogRegistry
    from monster_battle.sim.core.battle_state import WeatherCondition
    from monster_battle.sim.core.entities import Combatant

logger = logging.getLogger(__name__)

MAX_TURNS = 200


class SimulationConfig(BaseModel):
    """Settings for a simulated battle (or a batch of them)."""

    seed: int = 42
    max_turns: int = Field(default=MAX_TURNS, ge=1)
    weather: Weather | None = None
    """Weather the battle opens in.  Takes precedence over random weather."""

    weather_turns: int = Field(default=DEFAULT_WEATHER_DURATION, ge=1)
    random_weather_chance: float = Field(default=0.0, ge=0.0, le=1.0)
    level: int = Field(default=20, ge=1)
    keep_log: bool = False


# =====================================================================
# BattleSimulator
# =====================================================================

class BattleSimulator:
    """Runs a single battle to completion."""

    def __init__(
        self,
        registry: CatalogRegistry,
        player_agent: BattleAgent,
        opponent_agent: BattleAgent,
    ) -> None:
        self.registry = registry
        self.player_agent = player_agent
        self.opponent_agent = opponent_agent

    def run_battle(
        self,
        player: Combatant,
        opponent: Combatant,
        rng: BattleRNG,
        config: SimulationConfig | None = None,
    ) -> BattleTelemetry:
        """Play *player* against *opponent* until the battle ends or the turn cap.

        Parameters
        ----------
        player, opponent:
            The combatants; mutated in place.
        rng:
            Engine RNG (turn order, accuracy, damage, procs).  Agents draw
            from their own streams.
        config:
            Turn cap, opening weather and logging.
        """
        config = config or SimulationConfig()
        manager = TurnManager(self.registry, rng)
        weather = self._opening_weather(rng, config)

        telemetry = BattleTelemetry(
            seed=config.seed,
            player_species=player.species_id,
            opponent_species=opponent.species_id,
            winner=None,
            turns=0,
            player_hp_start=player.current_hp,
            player_hp_end=player.current_hp,
            opponent_hp_start=opponent.current_hp,
            opponent_hp_end=opponent.current_hp,
            moves_used={"player": {}, "opponent": {}},
            weather=weather.weather.value if weather is not None else None,
        )

        context, messages = manager.start_battle(player, opponent, weather)
        if config.keep_log:
            telemetry.log.extend(messages)

        while context.turn < config.max_turns:
            player_action = self.player_agent.choose_action(
                context.player, context.opponent, context, self.registry,
            )
            opponent_action = self.opponent_agent.choose_action(
                context.opponent, context.player, context, self.registry,
            )
            for side, action in (("player", player_action), ("opponent", opponent_action)):
                if isinstance(action, AttackAction):
                    used = telemetry.moves_used[side]
                    used[action.move_id] = used.get(action.move_id, 0) + 1

            player_hp_before = context.player.current_hp
            opponent_hp_before = context.opponent.current_hp

            turn = manager.resolve_turn(context, player_action, opponent_action)

            telemetry.damage_taken += max(0, player_hp_before - context.player.current_hp)
            telemetry.damage_dealt += max(0, opponent_hp_before - context.opponent.current_hp)
            if config.keep_log:
                telemetry.log.extend(turn.effects)

            if turn.battle_ended:
                telemetry.winner = turn.winner
                break
        else:
            logger.info(
                "Battle %s hit the %d-turn cap (seed=%d)",
                context.battle_id, config.max_turns, config.seed,
            )

        telemetry.turns = context.turn
        telemetry.player_hp_end = context.player.current_hp
        telemetry.opponent_hp_end = context.opponent.current_hp
        return telemetry

    @staticmethod
    def _opening_weather(rng: BattleRNG, config: SimulationConfig) -> WeatherCondition | None:
        if config.weather is not None:
            return start_weather(config.weather, config.weather_turns)
        if config.random_weather_chance and rng.chance(config.random_weather_chance):
            return random_weather(rng, config.weather_turns)
        return None


# =====================================================================
# Batch running
# =====================================================================

def _run_single_battle(
    registry: CatalogRegistry,
    player_species: str,
    opponent_species: str,
    config: SimulationConfig,
) -> BattleTelemetry:
    """Run one battle with the given seed and configuration."""
    master_rng = BattleRNG(config.seed)
    battle_rng = master_rng.fork("battle")

    player = registry.create_combatant(
        player_species, config.level, instance_id=f"player-{player_species}",
    )
    opponent = registry.create_combatant(
        opponent_species, config.level, instance_id=f"opponent-{opponent_species}",
    )
    simulator = BattleSimulator(
        registry,
        RandomMoveAgent(rng=master_rng.fork("player_agent")),
        RandomMoveAgent(rng=master_rng.fork("opponent_agent")),
    )
    return simulator.run_battle(player, opponent, battle_rng, config)


def _worker_run_single(args: tuple) -> BattleTelemetry:
    """Top-level worker function for multiprocessing (must be picklable)."""
    data_dir, player_species, opponent_species, config = args

    from monster_battle.sim.content.registry import CatalogRegistry

    registry = CatalogRegistry()
    registry.load_all(data_dir)
    return _run_single_battle(registry, player_species, opponent_species, config)


class BatchRunner:
    """Runs many seeded battles of one matchup, optionally in parallel.

    Parameters
    ----------
    registry:
        Loaded catalog.  Parallel runs reload it in each worker from
        *data_dir* instead of pickling it.
    data_dir:
        Catalog directory for parallel workers; the packaged catalog when
        ``None``.
    """

    def __init__(
        self,
        registry: CatalogRegistry,
        data_dir: str | Path | None = None,
    ) -> None:
        self.registry = registry
        self.data_dir = data_dir

    def run_batch(
        self,
        player_species: str,
        opponent_species: str,
        n_runs: int,
        config: SimulationConfig | None = None,
        parallel: bool = False,
    ) -> list[BattleTelemetry]:
        """Run *n_runs* battles seeded ``config.seed``, ``config.seed + 1``, ..."""
        config = config or SimulationConfig()
        # Fail fast on unknown species before spawning anything.
        self.registry.get_monster(player_species)
        self.registry.get_monster(opponent_species)

        configs = [
            config.model_copy(update={"seed": config.seed + i}) for i in range(n_runs)
        ]
        if parallel and n_runs > 1:
            return self._run_parallel(player_species, opponent_species, configs)
        return [
            _run_single_battle(self.registry, player_species, opponent_species, c)
            for c in configs
        ]

    def _run_parallel(
        self,
        player_species: str,
        opponent_species: str,
        configs: list[SimulationConfig],
    ) -> list[BattleTelemetry]:
        data_dir = str(self.data_dir) if self.data_dir is not None else None
        work_items = [(data_dir, player_species, opponent_species, c) for c in configs]
        n_workers = min(len(configs), multiprocessing.cpu_count() or 1)

        with multiprocessing.Pool(processes=n_workers) as pool:
            return pool.map(_worker_run_single, work_items)
