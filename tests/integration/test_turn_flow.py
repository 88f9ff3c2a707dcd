"""Integration tests for the turn pipeline.

Tests complete turns from a tagged action to the recorded history,
using seeded sessions and checking invariants rather than exact rolls.
"""

from __future__ import annotations

from dnd_rules.engine.inventory import carrying_capacity, get_total_inventory_weight
from dnd_rules.engine.orchestrator import Action, process_turn, resolve_action
from dnd_rules.engine.session import GameSession
from dnd_rules.models.character import Character, create_character
from dnd_rules.models.enums import ActionType, SceneType


class TestTurnFlow:
    """Test complete multi-turn scenarios."""

    def test_fight_until_goblin_falls(self, fighter: Character, goblin: Character) -> None:
        """Alternate attack turns and narrative turns until the goblin drops."""
        session = GameSession(seed=2024)
        session.add_character(fighter)
        session.add_character(goblin)
        attack = Action(type=ActionType.ATTACK, target="Goblin", description="I attack the goblin")

        previous_hp = goblin.hp
        for _ in range(40):
            actor = session.active_character()
            if actor is fighter:
                outcome = process_turn(session, "Aria", attack, 12)
                assert outcome.scene_type == SceneType.COMBAT
                assert outcome.action_result is not None
                if outcome.action_result.success:
                    assert outcome.action_result.damage >= 1
            else:
                process_turn(session, "Goblin", "I plead for mercy", 12)
            assert 0 <= goblin.hp <= previous_hp
            previous_hp = goblin.hp
            if goblin.hp == 0:
                break

        assert goblin.hp == 0
        assert not goblin.is_conscious
        assert len(session.history) == session.turn_index
        assert [record.character for record in session.history[:2]] == ["Aria", "Goblin"]

    def test_loot_never_exceeds_capacity(self, fighter: Character, goblin: Character) -> None:
        """Combat loot is only kept while it fits."""
        session = GameSession(seed=7)
        session.add_character(fighter)
        session.add_character(goblin)

        for _ in range(30):
            outcome = process_turn(session, "Aria", "I fight the horde", 12)
            assert len(outcome.loot_messages) == len(outcome.loot)

        assert get_total_inventory_weight(fighter) <= carrying_capacity(fighter)

    def test_levels_follow_turn_count(self) -> None:
        """A level-1 character gains one level per five turns up to the cap."""
        hero = create_character("Lia", "Elf", "Ranger")
        session = GameSession(seed=3)
        session.add_character(hero)

        for _ in range(60):
            process_turn(session, "Lia", "I chat with the innkeeper", 12)
            assert hero.level == min(session.settings.max_level, session.turn_index // 5 + 1)
            assert hero.hp <= hero.max_hp

        assert hero.level == session.settings.max_level
        assert sum(record.leveled_up for record in session.history) == session.settings.max_level - 1

    def test_wizard_runs_out_of_slots(self, wizard: Character, goblin: Character) -> None:
        """Slots are spent per cast and restored by a long rest."""
        session = GameSession(seed=11)
        session.add_character(wizard)
        session.add_character(goblin)
        missile = Action(type=ActionType.SPELL, spell_id="magic_missile")

        results = [resolve_action(wizard, missile, goblin, session=session) for _ in range(5)]

        assert [result.success for result in results] == [True, True, True, True, False]
        assert results[-1].message == "No level 1 spell slots remaining."
        assert wizard.slot(1).remaining == 0

        process_turn(session, "Merlin", Action(type=ActionType.SPELL, spell_id="fire_bolt"), 12, "Goblin")
        assert wizard.slot(1).remaining == 0
