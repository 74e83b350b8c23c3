"""Shared fixtures and helpers for simulation tests."""

from __future__ import annotations

import itertools
from typing import Callable, Iterable, Sequence, TypeVar

import pytest

from monster_battle.ir.types import MonsterType
from monster_battle.sim.content.registry import CatalogRegistry
from monster_battle.sim.core.entities import Combatant, StatBlock
from monster_battle.sim.core.rng import BattleRNG

T = TypeVar("T")


class ScriptedRNG(BattleRNG):
    """BattleRNG whose draws come from fixed queues.

    ``random_float`` pops from *floats* (0.5 once the queue is empty),
    ``uniform`` maps the next float onto its range, ``random_int`` pops from
    *ints* (the low bound once empty) and ``random_choice`` takes the first
    element.  With the defaults: no critical hits, a 0.925 random factor,
    every accuracy above 50 hits, and skip / self-hit / cure rolls below
    0.5 all fail.
    """

    def __init__(self, floats: Iterable[float] = (), ints: Iterable[int] = ()) -> None:
        super().__init__(seed=0)
        self.floats = list(floats)
        self.ints = list(ints)
        self.float_draws = 0

    def random_float(self) -> float:
        self.float_draws += 1
        return self.floats.pop(0) if self.floats else 0.5

    def uniform(self, low: float, high: float) -> float:
        return low + self.random_float() * (high - low)

    def random_int(self, low: int, high: int) -> int:
        return self.ints.pop(0) if self.ints else low

    def random_choice(self, seq: Sequence[T]) -> T:
        return seq[0]


@pytest.fixture(scope="module")
def registry() -> CatalogRegistry:
    """Module-scoped registry with the packaged catalog loaded once."""
    reg = CatalogRegistry()
    reg.load_all()
    return reg


@pytest.fixture
def make_rng() -> Callable[..., ScriptedRNG]:
    def _make(floats: Iterable[float] = (), ints: Iterable[int] = ()) -> ScriptedRNG:
        return ScriptedRNG(floats, ints)
    return _make


_ids = itertools.count(1)


@pytest.fixture
def make_combatant() -> Callable[..., Combatant]:
    """Factory for combatants with flat, easy-to-reason-about stats.

    Defaults: level 50, 100 HP, every other stat 50, normal type, no
    ability, knows Tackle with 10 PP.  ``stats`` keyword overrides are
    merged into the defaults.
    """

    def _make(
        name: str = "Testmon",
        species_id: str = "flamepup",
        level: int = 50,
        hp: int = 100,
        current_hp: int | None = None,
        types: list[MonsterType] | None = None,
        moves: list[str] | None = None,
        pp: int = 10,
        ability: str = "",
        **stats: int,
    ) -> Combatant:
        block = dict(hp=hp, attack=50, defense=50, special_attack=50, special_defense=50, speed=50)
        block.update(stats)
        moves = moves if moves is not None else ["tackle"]
        return Combatant(
            id=f"{name.lower()}-{next(_ids)}",
            species_id=species_id,
            name=name,
            level=level,
            current_hp=hp if current_hp is None else current_hp,
            max_hp=hp,
            stats=StatBlock(**block),
            types=types or [MonsterType.NORMAL],
            moves=moves,
            move_pp={m: pp for m in moves},
            ability=ability,
        )

    return _make
