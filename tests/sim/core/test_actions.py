"""Tests for the action union and BattleResult."""

from pydantic import TypeAdapter

from monster_battle.ir.items import BallTier
from monster_battle.sim.core.actions import (
    PRIORITY_ACTION_TYPES,
    AttackAction,
    BattleAction,
    BattleResult,
    CatchAction,
    FleeAction,
    SwitchAction,
)

_adapter = TypeAdapter(BattleAction)


class TestBattleActionUnion:
    def test_attack_from_dict(self):
        action = _adapter.validate_python({"type": "attack", "move_id": "tackle"})
        assert isinstance(action, AttackAction)
        assert action.move_id == "tackle"

    def test_catch_defaults_to_standard_ball(self):
        action = _adapter.validate_python({"type": "catch"})
        assert isinstance(action, CatchAction)
        assert action.ball == BallTier.STANDARD

    def test_flee(self):
        assert isinstance(_adapter.validate_python({"type": "flee"}), FleeAction)

    def test_switch_carries_replacement(self, make_combatant):
        mon = make_combatant("Bench")
        action = _adapter.validate_python({"type": "switch", "replacement": mon.model_dump()})
        assert isinstance(action, SwitchAction)
        assert action.replacement.name == "Bench"

    def test_attack_is_not_priority(self):
        assert "attack" not in PRIORITY_ACTION_TYPES
        assert {"catch", "item", "switch", "flee"} <= PRIORITY_ACTION_TYPES


class TestBattleResult:
    def test_defaults(self):
        result = BattleResult(success=True)
        assert result.effects == []
        assert not result.battle_ended
        assert result.winner is None
        assert not result.requires_auto_switch
