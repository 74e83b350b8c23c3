"""Catalog registry -- loads and serves move, monster, ability and item
definitions for the battle engine.

The bundled sample catalogs live in ``monster_battle/data/``.  Any other
catalog directory with the same four JSON files can be loaded instead.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel

from monster_battle.errors import InvalidReferenceError
from monster_battle.ir.abilities import AbilityDefinition
from monster_battle.ir.items import ItemDefinition
from monster_battle.ir.monsters import BaseStats, MonsterDefinition
from monster_battle.ir.moves import MoveDefinition
from monster_battle.sim.core.entities import Combatant, StatBlock

logger = logging.getLogger(__name__)

# Default catalog directory inside the installed package.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"  # sim/content -> monster_battle

_M = TypeVar("_M", bound=BaseModel)


def _load_definitions(path: Path, model: type[_M]) -> dict[str, _M]:
    """Parse a JSON list of definitions into ``{id: model}``."""
    with open(path) as f:
        raw_defs: list[dict[str, Any]] = json.load(f)

    defs: dict[str, _M] = {}
    for raw in raw_defs:
        if "_section" in raw:
            continue  # Skip organizational section markers
        defn = model.model_validate(raw)
        defs[defn.id] = defn
    return defs


def compute_stats(base: BaseStats, level: int) -> StatBlock:
    """Level-adjusted stats.

    HP is ``floor(2 * base * level / 100) + level + 10``; every other stat
    is ``floor(2 * base * level / 100) + 5``.
    """
    def scaled(value: int) -> int:
        return math.floor(2 * value * level / 100)

    return StatBlock(
        hp=scaled(base.hp) + level + 10,
        attack=scaled(base.attack) + 5,
        defense=scaled(base.defense) + 5,
        special_attack=scaled(base.special_attack) + 5,
        special_defense=scaled(base.special_defense) + 5,
        speed=scaled(base.speed) + 5,
    )


class CatalogRegistry:
    """Read-only lookup of every catalog the engine consumes.

    ``get_*`` raises :class:`InvalidReferenceError` for unknown ids;
    ``find_*`` returns ``None`` instead.

    Usage::

        registry = CatalogRegistry()
        registry.load_all()

        move = registry.get_move("ember")
        monster = registry.create_combatant("flamepup", level=12)
    """

    def __init__(self) -> None:
        self.moves: dict[str, MoveDefinition] = {}
        self.monsters: dict[str, MonsterDefinition] = {}
        self.abilities: dict[str, AbilityDefinition] = {}
        self.items: dict[str, ItemDefinition] = {}
        self._instance_counter = 0

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_all(self, data_dir: str | Path | None = None) -> None:
        """Load all four catalogs from *data_dir*.

        Parameters
        ----------
        data_dir:
            Directory holding ``moves.json``, ``monsters.json``,
            ``abilities.json`` and ``items.json``.  Defaults to the
            catalogs bundled with the package.
        """
        data_dir = Path(data_dir) if data_dir is not None else _DEFAULT_DATA_DIR
        self.load_moves(data_dir / "moves.json")
        self.load_monsters(data_dir / "monsters.json")
        self.load_abilities(data_dir / "abilities.json")
        self.load_items(data_dir / "items.json")
        logger.debug("Loaded catalogs from %s: %r", data_dir, self)

    def load_moves(self, path: str | Path) -> None:
        self.moves.update(_load_definitions(Path(path), MoveDefinition))

    def load_monsters(self, path: str | Path) -> None:
        self.monsters.update(_load_definitions(Path(path), MonsterDefinition))

    def load_abilities(self, path: str | Path) -> None:
        self.abilities.update(_load_definitions(Path(path), AbilityDefinition))

    def load_items(self, path: str | Path) -> None:
        self.items.update(_load_definitions(Path(path), ItemDefinition))

    def add_move(self, move: MoveDefinition) -> None:
        """Register (or replace) a single move definition."""
        self.moves[move.id] = move

    def add_monster(self, monster: MonsterDefinition) -> None:
        self.monsters[monster.id] = monster

    def add_ability(self, ability: AbilityDefinition) -> None:
        self.abilities[ability.id] = ability

    def add_item(self, item: ItemDefinition) -> None:
        self.items[item.id] = item

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_move(self, move_id: str) -> MoveDefinition | None:
        return self.moves.get(move_id)

    def find_monster(self, monster_id: str) -> MonsterDefinition | None:
        return self.monsters.get(monster_id)

    def find_ability(self, ability_id: str) -> AbilityDefinition | None:
        return self.abilities.get(ability_id)

    def find_item(self, item_id: str) -> ItemDefinition | None:
        return self.items.get(item_id)

    def get_move(self, move_id: str) -> MoveDefinition:
        move = self.moves.get(move_id)
        if move is None:
            raise InvalidReferenceError("move", move_id)
        return move

    def get_monster(self, monster_id: str) -> MonsterDefinition:
        monster = self.monsters.get(monster_id)
        if monster is None:
            raise InvalidReferenceError("monster", monster_id)
        return monster

    def get_ability(self, ability_id: str) -> AbilityDefinition:
        ability = self.abilities.get(ability_id)
        if ability is None:
            raise InvalidReferenceError("ability", ability_id)
        return ability

    def get_item(self, item_id: str) -> ItemDefinition:
        item = self.items.get(item_id)
        if item is None:
            raise InvalidReferenceError("item", item_id)
        return item

    def list_monster_ids(self) -> list[str]:
        """Return a sorted list of all registered species identifiers."""
        return sorted(self.monsters.keys())

    # ------------------------------------------------------------------
    # Combatant construction
    # ------------------------------------------------------------------

    def create_combatant(
        self,
        species_id: str,
        level: int,
        ability: str | None = None,
        moves: list[str] | None = None,
        instance_id: str | None = None,
    ) -> Combatant:
        """Build a full-HP battle instance of *species_id*.

        Parameters
        ----------
        species_id:
            Species to instantiate.
        level:
            Level of the instance; drives stats and the default move set.
        ability:
            Ability id.  Defaults to the species' first listed ability.
        moves:
            Explicit move list (at most four).  Defaults to the four most
            recently learned moves at *level*.
        instance_id:
            Identity of the instance.  Defaults to a registry-unique id.

        Raises
        ------
        InvalidReferenceError
            If the species, the ability or any move is unknown.
        """
        species = self.get_monster(species_id)
        if ability is None:
            ability = species.abilities[0] if species.abilities else ""
        if ability:
            self.get_ability(ability)
        if moves is None:
            moves = species.moves_known_at(level)
        move_pp = {move_id: self.get_move(move_id).pp for move_id in moves}

        if instance_id is None:
            self._instance_counter += 1
            instance_id = f"{species_id}-{self._instance_counter}"

        stats = compute_stats(species.base_stats, level)
        return Combatant(
            id=instance_id,
            species_id=species.id,
            name=species.name,
            level=level,
            current_hp=stats.hp,
            max_hp=stats.hp,
            stats=stats,
            types=list(species.types),
            moves=list(moves),
            move_pp=move_pp,
            ability=ability,
        )

    # ------------------------------------------------------------------
    # Representation
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"CatalogRegistry(moves={len(self.moves)}, "
            f"monsters={len(self.monsters)}, "
            f"abilities={len(self.abilities)}, "
            f"items={len(self.items)})"
        )
