"""Telemetry data models for per-battle and per-matchup statistics.

These lightweight dataclasses capture everything needed to evaluate a
matchup without storing the whole battle state history:

- **BattleTelemetry**: outcome, turn count, HP, damage, moves used.
- **MatchupSummary**: aggregate over many seeded battles of one matchup.

Both are plain ``dataclass`` instances (not Pydantic models) to keep
telemetry collection cheap during batch runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class BattleTelemetry:
    """Stats from a single simulated battle.

    Attributes
    ----------
    seed:
        The master RNG seed used for this battle.
    player_species, opponent_species:
        Species ids of the two combatants.
    winner:
        ``"player"``, ``"opponent"`` or ``"draw"``; ``None`` if the battle hit
        the turn limit.
    turns:
        Number of turns resolved.
    player_hp_start, player_hp_end, opponent_hp_start, opponent_hp_end:
        HP at the start and end of the battle.
    damage_dealt:
        Total HP the opponent lost across all turns.
    damage_taken:
        Total HP the player lost across all turns.
    moves_used:
        Per side, ``move_id -> times chosen``.
    weather:
        Weather tag the battle opened with, if any.
    log:
        Full narrative log; only filled when the run asks for it.
    """

    seed: int
    player_species: str
    opponent_species: str
    winner: str | None
    turns: int
    player_hp_start: int
    player_hp_end: int
    opponent_hp_start: int
    opponent_hp_end: int
    damage_dealt: int = 0
    damage_taken: int = 0
    moves_used: dict[str, dict[str, int]] = field(default_factory=dict)
    weather: str | None = None
    log: list[str] = field(default_factory=list)

    @property
    def timed_out(self) -> bool:
        return self.winner is None


@dataclass
class MatchupSummary:
    """Aggregate outcome of a batch of battles between the same two species."""

    player_species: str
    opponent_species: str
    battles: int = 0
    player_wins: int = 0
    opponent_wins: int = 0
    draws: int = 0
    timeouts: int = 0
    turn_counts: list[int] = field(default_factory=list)

    @property
    def player_win_rate(self) -> float:
        return self.player_wins / self.battles if self.battles else 0.0

    @property
    def mean_turns(self) -> float:
        return sum(self.turn_counts) / len(self.turn_counts) if self.turn_counts else 0.0

    @classmethod
    def from_battles(cls, battles: list[BattleTelemetry]) -> MatchupSummary:
        if not battles:
            raise ValueError("cannot summarize an empty batch")
        summary = cls(battles[0].player_species, battles[0].opponent_species)
        for battle in battles:
            summary.battles += 1
            summary.turn_counts.append(battle.turns)
            if battle.winner == "player":
                summary.player_wins += 1
            elif battle.winner == "opponent":
                summary.opponent_wins += 1
            elif battle.winner == "draw":
                summary.draws += 1
            else:
                summary.timeouts += 1
        return summary
