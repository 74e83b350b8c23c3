"""Tests for the Combatant model and its commitment variants."""

import pytest
from pydantic import ValidationError

from monster_battle.ir.moves import SemiInvulnerableState
from monster_battle.ir.types import MonsterType
from monster_battle.sim.core.entities import (
    Charging,
    Combatant,
    Idle,
    Locked,
    StatBlock,
    Trapped,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _stats(hp: int = 60) -> StatBlock:
    return StatBlock(hp=hp, attack=40, defense=40, special_attack=40, special_defense=40, speed=40)


def _make_combatant(**kwargs) -> Combatant:
    defaults = dict(
        id="mon-1", species_id="flamepup", name="Flamepup", level=10,
        current_hp=60, max_hp=60, stats=_stats(), types=[MonsterType.FIRE],
        moves=["scratch", "ember"], move_pp={"scratch": 35, "ember": 1},
    )
    defaults.update(kwargs)
    return Combatant(**defaults)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestCombatantValidation:
    def test_valid_combatant(self):
        mon = _make_combatant()
        assert mon.commitment == Idle()
        assert mon.statuses == []

    def test_hp_above_max_rejected(self):
        with pytest.raises(ValidationError):
            _make_combatant(current_hp=61)

    def test_negative_hp_rejected(self):
        with pytest.raises(ValidationError):
            _make_combatant(current_hp=-1)

    def test_more_than_four_moves_rejected(self):
        with pytest.raises(ValidationError):
            _make_combatant(moves=["a", "b", "c", "d", "e"])

    def test_more_than_two_types_rejected(self):
        with pytest.raises(ValidationError):
            _make_combatant(types=[MonsterType.FIRE, MonsterType.WATER, MonsterType.GRASS])

    def test_commitment_round_trips_through_json(self):
        mon = _make_combatant(commitment=Locked(move_id="outrage", turns_remaining=2, total_turns=3))
        restored = Combatant.model_validate_json(mon.model_dump_json())
        assert isinstance(restored.commitment, Locked)
        assert restored.commitment.current_turn == 2


# ---------------------------------------------------------------------------
# take_damage / heal
# ---------------------------------------------------------------------------

class TestTakeDamage:
    def test_returns_hp_lost(self):
        mon = _make_combatant()
        assert mon.take_damage(15) == 15
        assert mon.current_hp == 45

    def test_overkill_caps_at_remaining_hp(self):
        mon = _make_combatant(current_hp=10)
        assert mon.take_damage(50) == 10
        assert mon.current_hp == 0
        assert mon.is_fainted

    def test_negative_damage_raises(self):
        mon = _make_combatant()
        with pytest.raises(ValueError):
            mon.take_damage(-1)

    def test_fainting_discards_charge(self):
        mon = _make_combatant(
            commitment=Charging(move_id="fly", semi_invulnerable=SemiInvulnerableState.FLYING),
        )
        mon.take_damage(999)
        assert mon.commitment == Idle()

    def test_fainting_discards_trap(self):
        mon = _make_combatant(commitment=Trapped(move_id="wrap", turns_remaining=3, damage_per_turn=7))
        mon.take_damage(999)
        assert mon.commitment == Idle()

    def test_surviving_keeps_commitment(self):
        mon = _make_combatant(commitment=Charging(move_id="solar_beam"))
        mon.take_damage(5)
        assert isinstance(mon.commitment, Charging)


class TestHeal:
    def test_heal_caps_at_max(self):
        mon = _make_combatant(current_hp=50)
        assert mon.heal(30) == 10
        assert mon.current_hp == 60

    def test_heal_fainted_does_nothing(self):
        mon = _make_combatant(current_hp=0)
        assert mon.heal(30) == 0
        assert mon.current_hp == 0


# ---------------------------------------------------------------------------
# PP
# ---------------------------------------------------------------------------

class TestPP:
    def test_spend_pp(self):
        mon = _make_combatant()
        mon.spend_pp("scratch")
        assert mon.remaining_pp("scratch") == 34

    def test_pp_never_negative(self):
        mon = _make_combatant()
        mon.spend_pp("ember")
        mon.spend_pp("ember")
        assert mon.remaining_pp("ember") == 0

    def test_unknown_move_has_no_pp(self):
        assert _make_combatant().remaining_pp("surf") == 0


class TestLocked:
    def test_current_turn_counts_from_one(self):
        lock = Locked(move_id="rollout", turns_remaining=5, total_turns=5)
        assert lock.current_turn == 1
        lock.turns_remaining = 2
        assert lock.current_turn == 4
