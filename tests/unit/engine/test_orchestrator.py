"""Tests for action orchestration and the turn pipeline."""

from __future__ import annotations

import pytest

from conftest import scripted_dice
from dnd_rules.core.exceptions import SessionError
from dnd_rules.engine.dice import RollMode
from dnd_rules.engine.inventory import add_item, create_item_from_template
from dnd_rules.engine.orchestrator import (
    ACTION_HANDLERS,
    EXPLORATION_FINDS,
    Action,
    ActionResult,
    KeywordSceneClassifier,
    SceneClassifier,
    apply_roll_consequences,
    auto_level_up,
    check_level_up,
    generate_scene_loot,
    loot_messages,
    perform_rest,
    process_turn,
    resolve_action,
)
from dnd_rules.engine.session import GameSession
from dnd_rules.models.character import Character
from dnd_rules.models.enums import ActionType, Rarity, RestType, SceneType
from dnd_rules.models.items import ITEM_TEMPLATES


def scripted_session(*characters: Character, ints: tuple[int, ...] = (), floats: tuple[float, ...] = ()) -> GameSession:
    """Build a session whose dice come out in the given order."""
    session = GameSession(dice=scripted_dice(*ints, floats=floats))
    for character in characters:
        session.add_character(character)
    return session


class SocialOnly:
    """Classifier that treats every action as social."""

    def classify(self, action_description: str) -> SceneType:
        return SceneType.SOCIAL


# =============================================================================
# Tagged Actions
# =============================================================================


class TestAttackAction:
    """Tests for attack actions."""

    def test_hit_damages_target(self, fighter: Character, goblin: Character) -> None:
        """Test a hit applies damage to the target."""
        session = scripted_session(fighter, goblin, ints=(10, 2))

        result = resolve_action(fighter, Action(type=ActionType.ATTACK), goblin, session=session)

        assert result.success
        assert result.damage == 5
        assert result.message == "Aria hits Goblin for 5 damage!"
        assert goblin.hp == 3

    def test_critical_hit(self, fighter: Character, goblin: Character) -> None:
        """Test a natural 20 doubles the dice and is announced."""
        session = scripted_session(fighter, goblin, ints=(20, 1, 1))

        result = resolve_action(fighter, Action(type="attack"), goblin, session=session)

        assert result.message == "Aria hits Goblin for 5 damage! CRITICAL HIT!"

    def test_miss(self, fighter: Character, goblin: Character) -> None:
        """Test a miss leaves the target unharmed."""
        session = scripted_session(fighter, goblin, ints=(2,))

        result = resolve_action(fighter, Action(type=ActionType.ATTACK), goblin, session=session)

        assert not result.success
        assert result.message == "Aria misses Goblin!"
        assert goblin.hp == goblin.max_hp

    def test_poisoned_attacker_has_disadvantage(self, fighter: Character, goblin: Character) -> None:
        """Test conditions feed the attack roll mode."""
        fighter.add_condition("poisoned")
        session = scripted_session(fighter, goblin, ints=(18, 3))

        result = resolve_action(fighter, Action(type=ActionType.ATTACK), goblin, session=session)

        assert result.message == "Aria misses Goblin!"

    def test_advantage_cancels_poison(self, fighter: Character, goblin: Character) -> None:
        """Test requested advantage and poisoned cancel to one die."""
        fighter.add_condition("poisoned")
        session = scripted_session(fighter, goblin, ints=(15, 4))

        result = resolve_action(
            fighter, Action(type=ActionType.ATTACK, mode=RollMode.ADVANTAGE), goblin, session=session
        )

        assert result.message == "Aria hits Goblin for 7 damage!"

    def test_missing_target(self, fighter: Character) -> None:
        """Test an attack without a target fails."""
        session = scripted_session(fighter)

        result = resolve_action(fighter, Action(type=ActionType.ATTACK), session=session)

        assert result == ActionResult(success=False, message="No target specified for attack")


class TestSpellAction:
    """Tests for spell actions."""

    def test_cantrip_uses_no_slot(self, wizard: Character, goblin: Character) -> None:
        """Test Fire Bolt against the target's AC."""
        session = scripted_session(wizard, goblin, ints=(7, 10))
        slots = [slot.used for slot in wizard.spell_slots]

        result = resolve_action(wizard, Action(type=ActionType.SPELL, spell_id="fire_bolt"), goblin, session=session)

        assert result.success
        assert result.message == "Cast Fire Bolt! Hit for 7 fire damage!"
        assert goblin.hp == 1
        assert [slot.used for slot in wizard.spell_slots] == slots

    def test_leveled_spell_spends_slot(self, wizard: Character, goblin: Character) -> None:
        """Test Magic Missile spends a first-level slot."""
        session = scripted_session(wizard, goblin, ints=(3,))

        result = resolve_action(
            wizard, Action(type=ActionType.SPELL, spell_id="magic_missile"), goblin, session=session
        )

        assert result.damage == 4
        assert result.message == "Cast Magic Missile! Hit for 4 force damage!"
        assert wizard.slot(1).used == 1

    def test_upcast(self, wizard: Character, goblin: Character) -> None:
        """Test a higher slot adds a die."""
        session = scripted_session(wizard, goblin, ints=(2, 3))

        result = resolve_action(
            wizard,
            Action(type=ActionType.SPELL, spell_id="magic_missile", slot_level=2),
            goblin,
            session=session,
        )

        assert result.damage == 6
        assert wizard.slot(2).used == 1
        assert wizard.slot(1).used == 0

    def test_healing_without_target_heals_caster(self, wizard: Character) -> None:
        """Test a healing spell with no target affects the caster."""
        wizard.take_damage(5)
        session = scripted_session(wizard, ints=(4,))

        result = resolve_action(wizard, Action(type=ActionType.SPELL, spell_id="cure_wounds"), session=session)

        assert result.healing == 4
        assert result.message == "Cast Cure Wounds! Healed for 4 HP!"
        assert wizard.missing_hp == 1

    def test_no_slots(self, fighter: Character, goblin: Character) -> None:
        """Test a caster without slots fails cleanly."""
        session = scripted_session(fighter, goblin)

        result = resolve_action(
            fighter, Action(type=ActionType.SPELL, spell_id="magic_missile"), goblin, session=session
        )

        assert result == ActionResult(success=False, message="No level 1 spell slots remaining.")
        assert goblin.hp == goblin.max_hp

    def test_unknown_spell(self, wizard: Character) -> None:
        """Test an unknown spell fails without raising."""
        session = scripted_session(wizard)

        result = resolve_action(wizard, Action(type=ActionType.SPELL, spell_id="wish_granting"), session=session)

        assert not result.success

    def test_missing_spell(self, wizard: Character) -> None:
        """Test a spell action without a spell."""
        result = resolve_action(wizard, Action(type=ActionType.SPELL), session=scripted_session(wizard))

        assert result.message == "No spell specified"

    def test_damage_spell_without_target(self, wizard: Character) -> None:
        """Test a damaging spell with no target fails and keeps the slot."""
        session = scripted_session(wizard)

        result = resolve_action(
            wizard, Action(type=ActionType.SPELL, spell_id="fireball", slot_level=3), session=session
        )

        assert result == ActionResult(success=False, message="Fireball needs a target")
        assert wizard.slot(3).used == 0


class TestOtherActions:
    """Tests for ability, item and skill actions."""

    def test_class_ability(self, fighter: Character) -> None:
        """Test Second Wind through the orchestrator."""
        fighter.take_damage(20)
        session = scripted_session(fighter, ints=(5,))

        result = resolve_action(fighter, Action(type=ActionType.ABILITY, ability_id="second_wind"), session=session)

        assert result.healing == 9
        assert result.message == "Used Second Wind! Healed for 9 HP."

    def test_missing_ability(self, fighter: Character) -> None:
        """Test an ability action without an ability."""
        result = resolve_action(fighter, Action(type=ActionType.ABILITY), session=scripted_session(fighter))

        assert result.message == "No ability specified"

    def test_item(self, fighter: Character) -> None:
        """Test drinking a potion."""
        potion = create_item_from_template("healing_potion")
        add_item(fighter, potion)
        fighter.take_damage(20)
        session = scripted_session(fighter, ints=(3, 4))

        result = resolve_action(fighter, Action(type=ActionType.ITEM, item_id=potion.id), session=session)

        assert result.healing == 9
        assert fighter.hp == 25

    def test_missing_item(self, fighter: Character) -> None:
        """Test an item action without an item."""
        result = resolve_action(fighter, Action(type=ActionType.ITEM), session=scripted_session(fighter))

        assert result.message == "No item specified"

    def test_item_not_consumable(self, fighter: Character) -> None:
        """Test using a weapon as an item fails without touching it."""
        sword = fighter.equipped_weapon()
        session = scripted_session(fighter)

        result = resolve_action(fighter, Action(type=ActionType.ITEM, item_id=sword.id), session=session)

        assert result == ActionResult(success=False, message="Longsword is not consumable.")
        assert fighter.find_item(sword.id) is sword

    def test_skill(self, fighter: Character) -> None:
        """Test a proficient skill check."""
        session = scripted_session(fighter, ints=(10,))

        result = resolve_action(
            fighter, Action(type=ActionType.SKILL, skill_name="Athletics", dc=15), session=session
        )

        assert result.success
        assert result.message == "Athletics check: Athletics (STR): 10 + 5 = 15 vs DC 15"

    def test_poisoned_skill_check(self, fighter: Character) -> None:
        """Test poisoned imposes disadvantage on ability checks."""
        fighter.add_condition("poisoned")
        session = scripted_session(fighter, ints=(15, 4))

        result = resolve_action(
            fighter, Action(type=ActionType.SKILL, skill_name="Athletics", dc=15), session=session
        )

        assert not result.success

    def test_skill_requires_dc(self, fighter: Character) -> None:
        """Test a skill action without a DC."""
        result = resolve_action(
            fighter, Action(type=ActionType.SKILL, skill_name="Athletics"), session=scripted_session(fighter)
        )

        assert result.message == "Skill check requires skill name and DC"

    def test_unhandled_type(self, fighter: Character, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test an action type with no handler."""
        monkeypatch.delitem(ACTION_HANDLERS, ActionType.SKILL)

        result = resolve_action(
            fighter, Action(type=ActionType.SKILL, skill_name="Athletics", dc=10), session=scripted_session(fighter)
        )

        assert result == ActionResult(success=False, message="Unknown action type: skill")


# =============================================================================
# Roll Consequences
# =============================================================================


class TestRollConsequences:
    """Tests for the narrative roll bands."""

    def test_exceptional_success_with_loot(self, fighter: Character) -> None:
        """Test bonus loot on an exceptional roll."""
        session = scripted_session(fighter, ints=(1,), floats=(0.1,))
        count = len(fighter.inventory)

        outcome = apply_roll_consequences(fighter, "vault the wall", 20, session=session)

        assert outcome.success
        assert outcome.consequences == ["Exceptional success!"]
        assert len(outcome.rewards) == 1
        assert outcome.rewards[0].startswith("Bonus loot: ")
        assert len(fighter.inventory) == count + 1

    def test_exceptional_success_heals(self, fighter: Character) -> None:
        """Test the healing chance on a wounded character."""
        fighter.take_damage(10)
        session = scripted_session(fighter, floats=(0.9, 0.1))

        outcome = apply_roll_consequences(fighter, "rally", 18, session=session)

        assert outcome.consequences == ["Exceptional success!", "Recovered 3 HP from success"]
        assert outcome.rewards == []
        assert fighter.hp == 29

    @pytest.mark.parametrize(
        ("roll", "headline", "success"),
        [
            (17, "Strong success!", True),
            (15, "Strong success!", True),
            (14, "Partial success with complications", True),
            (10, "Partial success with complications", True),
        ],
    )
    def test_middle_bands(self, fighter: Character, roll: int, headline: str, success: bool) -> None:
        """Test bands that roll no further dice."""
        outcome = apply_roll_consequences(fighter, "act", roll, session=scripted_session(fighter))

        assert outcome.consequences == [headline]
        assert outcome.success is success

    def test_minor_failure_damage(self, fighter: Character) -> None:
        """Test minor damage on a failed roll."""
        session = scripted_session(fighter, floats=(0.1,))

        outcome = apply_roll_consequences(fighter, "jump", 7, session=session)

        assert not outcome.success
        assert outcome.consequences == ["Failure with minor consequences", "Took 3 damage from failure"]
        assert fighter.hp == 33

    def test_minor_failure_without_damage(self, fighter: Character) -> None:
        """Test the damage chance can miss."""
        outcome = apply_roll_consequences(fighter, "jump", 6, session=scripted_session(fighter, floats=(0.9,)))

        assert outcome.consequences == ["Failure with minor consequences"]
        assert fighter.hp == fighter.max_hp

    def test_critical_failure(self, fighter: Character) -> None:
        """Test critical failure damage."""
        outcome = apply_roll_consequences(fighter, "jump", 3, session=scripted_session(fighter, floats=(0.9,)))

        assert outcome.consequences == ["Critical failure!", "Took 5 damage from critical failure"]
        assert fighter.hp == 31

    def test_critical_failure_loses_common_item(self, fighter: Character) -> None:
        """Test only common unequipped gear can be lost."""
        rope = create_item_from_template("rope_hemp")
        add_item(fighter, rope)
        session = scripted_session(fighter, floats=(0.1,))

        outcome = apply_roll_consequences(fighter, "jump", 1, session=session)

        assert outcome.consequences[-1] == "Lost Hemp Rope (50 feet) in the chaos"
        assert fighter.find_item(rope.id) is None
        assert fighter.equipped_weapon() is not None

    def test_nothing_to_lose(self, fighter: Character) -> None:
        """Test weapons and armor are never lost."""
        count = len(fighter.inventory)

        outcome = apply_roll_consequences(fighter, "jump", 2, session=scripted_session(fighter, floats=(0.1,)))

        assert len(outcome.consequences) == 2
        assert len(fighter.inventory) == count

    @pytest.mark.parametrize(("roll", "headline"), [(25, "Exceptional success!"), (-3, "Critical failure!")])
    def test_rolls_are_clamped(self, fighter: Character, roll: int, headline: str) -> None:
        """Test out-of-range rolls land in the outer bands."""
        outcome = apply_roll_consequences(fighter, "act", roll, session=scripted_session(fighter, floats=(0.9,)))

        assert outcome.consequences[0] == headline


# =============================================================================
# Scenes and Loot
# =============================================================================


class TestScenes:
    """Tests for scene classification and scene loot."""

    @pytest.mark.parametrize(
        ("text", "scene"),
        [
            ("I attack the orc", SceneType.COMBAT),
            ("Cast a spell at the door", SceneType.COMBAT),
            ("I search the chest", SceneType.EXPLORATION),
            ("Sneak past the guards", SceneType.EXPLORATION),
            ("I chat with the barkeep", SceneType.SOCIAL),
        ],
    )
    def test_keyword_classifier(self, text: str, scene: SceneType) -> None:
        """Test keyword classification."""
        assert KeywordSceneClassifier().classify(text) == scene

    def test_custom_classifier_satisfies_protocol(self) -> None:
        """Test structural typing of classifiers."""
        assert isinstance(SocialOnly(), SceneClassifier)

    def test_low_level_combat_loot_is_common(self, fighter: Character) -> None:
        """Test rarity upgrades need a minimum level."""
        session = scripted_session(fighter, ints=(2,), floats=(0.01,))

        items = generate_scene_loot(1, SceneType.COMBAT, session=session)

        assert len(items) == 2
        assert all(item.rarity == Rarity.COMMON for item in items)

    def test_rare_combat_loot(self, fighter: Character) -> None:
        """Test a low roll at level 5 yields rare loot."""
        session = scripted_session(fighter, ints=(1,), floats=(0.01,))

        items = generate_scene_loot(5, "combat", session=session)

        assert [item.rarity for item in items] == [Rarity.RARE]

    def test_uncommon_combat_loot(self, fighter: Character) -> None:
        """Test the uncommon band."""
        session = scripted_session(fighter, ints=(1,), floats=(0.1,))

        items = generate_scene_loot(3, SceneType.COMBAT, session=session)

        assert [item.rarity for item in items] == [Rarity.UNCOMMON]

    def test_exploration_find(self, fighter: Character) -> None:
        """Test exploration sometimes yields a utility item."""
        session = scripted_session(fighter, floats=(0.1,))
        names = {ITEM_TEMPLATES[key].name for key in EXPLORATION_FINDS}

        items = generate_scene_loot(1, SceneType.EXPLORATION, session=session)

        assert len(items) == 1
        assert items[0].name in names

    def test_exploration_without_find(self, fighter: Character) -> None:
        """Test the find chance can miss."""
        assert generate_scene_loot(1, SceneType.EXPLORATION, session=scripted_session(fighter, floats=(0.9,))) == []

    def test_social_scenes_yield_nothing(self, fighter: Character) -> None:
        """Test social scenes."""
        assert generate_scene_loot(10, SceneType.SOCIAL, session=scripted_session(fighter)) == []

    def test_loot_messages(self) -> None:
        """Test narration lines per scene."""
        items = [create_item_from_template("healing_potion")]

        assert loot_messages(items, SceneType.COMBAT) == ["Found: Potion of Healing (common)"]
        assert loot_messages(items, "exploration") == ["Discovered: Potion of Healing"]


# =============================================================================
# Rest and Leveling
# =============================================================================


class TestRestAndLeveling:
    """Tests for rests and turn-based leveling."""

    def test_short_rest(self, fighter: Character) -> None:
        """Test a short rest spends a hit die."""
        fighter.take_damage(10)
        session = scripted_session(fighter, ints=(3,))

        messages = perform_rest(fighter, RestType.SHORT, session=session)

        assert messages[-1] == "Recovered 5 HP from Hit Die"

    def test_long_rest(self, fighter: Character) -> None:
        """Test a long rest restores everything."""
        fighter.take_damage(10)

        messages = perform_rest(fighter, "long", session=scripted_session(fighter))

        assert messages[0] == "Recovered 10 HP"
        assert fighter.hp == fighter.max_hp

    @pytest.mark.parametrize(
        ("level", "turn_index", "expected"),
        [(1, 4, False), (1, 5, True), (2, 5, False), (4, 20, True), (10, 100, False)],
    )
    def test_check_level_up(self, fighter: Character, level: int, turn_index: int, expected: bool) -> None:
        """Test the level earned by turn count."""
        fighter.level = level

        assert check_level_up(fighter, turn_index) is expected

    def test_auto_level_up(self, fighter: Character) -> None:
        """Test leveling when the turn count calls for it."""
        session = scripted_session(fighter, ints=(6,))

        messages = auto_level_up(fighter, 20, session=session)

        assert messages[0] == "Level up! Now level 5"
        assert fighter.level == 5

    def test_no_level_up_when_current(self, fighter: Character) -> None:
        """Test nothing happens when the level is current."""
        assert auto_level_up(fighter, 10, session=scripted_session(fighter)) == []
        assert fighter.level == 4


# =============================================================================
# Turn Pipeline
# =============================================================================


class TestProcessTurn:
    """Tests for the full turn pipeline."""

    def test_free_text_turn(self, fighter: Character, goblin: Character) -> None:
        """Test a narrative-only turn."""
        session = scripted_session(fighter, goblin, floats=(0.9,))

        outcome = process_turn(session, "Aria", "I search the room", 16)

        assert outcome.scene_type == SceneType.EXPLORATION
        assert outcome.action_result is None
        assert outcome.consequences.consequences == ["Strong success!"]
        assert outcome.loot == []
        assert outcome.level_up == []
        assert outcome.combat_stats.armor_class == 18
        assert session.turn_index == 1
        record = session.history[0]
        assert (record.turn_index, record.action_type, record.success) == (0, None, True)
        assert record.message == "Strong success!"

    def test_attack_turn(self, fighter: Character, goblin: Character) -> None:
        """Test a tagged attack with combat loot."""
        session = scripted_session(fighter, goblin, ints=(15, 4, 1), floats=(0.5,))
        action = Action(type=ActionType.ATTACK, target="Goblin", description="I attack the goblin")

        outcome = process_turn(session, "Aria", action, 12)

        assert outcome.action_result is not None
        assert outcome.action_result.message == "Aria hits Goblin for 7 damage!"
        assert goblin.hp == 1
        assert outcome.scene_type == SceneType.COMBAT
        assert len(outcome.loot) == 1
        assert outcome.loot_messages[0].startswith("Found: ")
        assert fighter.find_item(outcome.loot[0].id) is outcome.loot[0]
        assert session.history[0].action_type == ActionType.ATTACK
        assert session.history[0].items_gained == (outcome.loot[0].name,)
        assert outcome.action_result.items_gained == [outcome.loot[0].name]

    def test_target_by_argument(self, fighter: Character, goblin: Character) -> None:
        """Test the target can be named outside the action."""
        session = scripted_session(fighter, goblin, ints=(2,))

        outcome = process_turn(
            session, "Aria", Action(type=ActionType.ATTACK), 12, "Goblin", classifier=SocialOnly()
        )

        assert outcome.action_result.message == "Aria misses Goblin!"
        assert session.history[0].success is False

    def test_unknown_character(self, fighter: Character) -> None:
        """Test an unknown name raises."""
        session = scripted_session(fighter)

        with pytest.raises(SessionError):
            process_turn(session, "Nobody", "I wave", 10)

        assert session.turn_index == 0

    def test_custom_classifier(self, fighter: Character) -> None:
        """Test an injected classifier decides the scene."""
        session = scripted_session(fighter)

        outcome = process_turn(session, "Aria", "I attack the door", 12, classifier=SocialOnly())

        assert outcome.scene_type == SceneType.SOCIAL
        assert outcome.loot == []

    def test_auto_level_up(self, fighter: Character) -> None:
        """Test the turn that completes a level advances the character."""
        session = scripted_session(fighter, ints=(6,))
        session.turn_index = 19

        outcome = process_turn(session, "Aria", "I chat", 12, classifier=SocialOnly())

        assert outcome.level_up[0] == "Level up! Now level 5"
        assert fighter.level == 5
        assert session.history[-1].leveled_up
        assert session.turn_index == 20
