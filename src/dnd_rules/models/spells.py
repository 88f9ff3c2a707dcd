"""Spell model and the static spell catalog.

The catalog covers cantrips through 7th level. Spells are immutable
reference data; per-character state (slots) lives on the Character.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dnd_rules.core.exceptions import NotFoundError
from dnd_rules.models.enums import Ability, DamageType, SpellSchool
from dnd_rules.models.notation import DiceSpec


class Spell(BaseModel):
    """A spell definition.

    Attributes:
        id: Catalog key.
        name: Display name.
        level: Spell level (0 for cantrips).
        school: School of magic.
        casting_time: Casting time text.
        range: Range text.
        components: Verbal, somatic and material components.
        duration: Duration text.
        description: Rules text.
        damage_type: Damage type for damaging spells.
        damage_dice: Damage dice, possibly with a flat bonus (``1d4+1``).
        saving_throw: Ability the target saves with, if any.
        attack_roll: Whether the caster makes a spell attack.
        healing_dice: Healing dice for restorative spells.
        tags: Free-form tags (``auto_hit`` marks spells that never miss).
        damage: Parsed damage dice, or None for spells that deal no damage.
        healing: Parsed healing dice, or None for spells that do not heal.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    level: int = Field(ge=0, le=9)
    school: SpellSchool
    casting_time: str = "1 action"
    range: str
    components: tuple[str, ...]
    duration: str = "Instantaneous"
    description: str
    damage_type: DamageType | None = None
    damage_dice: str | None = None
    saving_throw: Ability | None = None
    attack_roll: bool = False
    healing_dice: str | None = None
    tags: tuple[str, ...] = ()
    damage: DiceSpec | None = None
    healing: DiceSpec | None = None

    @model_validator(mode="before")
    @classmethod
    def parse_dice_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "damage" not in data and data.get("damage_dice"):
            data["damage"] = DiceSpec.parse(data["damage_dice"])
        if "healing" not in data and data.get("healing_dice"):
            data["healing"] = DiceSpec.parse(data["healing_dice"])
        return data

    @property
    def is_cantrip(self) -> bool:
        return self.level == 0

    @property
    def auto_hit(self) -> bool:
        return "auto_hit" in self.tags

    @property
    def requires_concentration(self) -> bool:
        return self.duration.lower().startswith("concentration")


_SPELL_DATA: dict[str, dict[str, Any]] = {
    # =========================================================================
    # Cantrips
    # =========================================================================
    "acid_splash": {
        "name": "Acid Splash", "level": 0, "school": SpellSchool.CONJURATION,
        "range": "60 feet", "components": ("V", "S"),
        "description": (
            "You hurl a bubble of acid. Choose one creature within range, or choose two "
            "creatures within range that are within 5 feet of each other. A target must "
            "succeed on a Dexterity saving throw or take 1d6 acid damage."
        ),
        "damage_type": DamageType.ACID, "damage_dice": "1d6", "saving_throw": Ability.DEX,
        "tags": ("cantrip", "damage", "acid", "area_small"),
    },
    "chill_touch": {
        "name": "Chill Touch", "level": 0, "school": SpellSchool.NECROMANCY,
        "range": "120 feet", "components": ("V", "S"),
        "description": (
            "You create a ghostly, skeletal hand in the space of a creature within range. "
            "Make a ranged spell attack against the creature to assail it with the chill "
            "of the grave."
        ),
        "damage_type": DamageType.NECROTIC, "damage_dice": "1d8", "attack_roll": True,
        "tags": ("cantrip", "damage", "necrotic", "debuff"),
    },
    "eldritch_blast": {
        "name": "Eldritch Blast", "level": 0, "school": SpellSchool.EVOCATION,
        "range": "120 feet", "components": ("V", "S"),
        "description": (
            "A beam of crackling energy streaks toward a creature within range. Make a "
            "ranged spell attack against the target. On a hit, the target takes 1d10 "
            "force damage."
        ),
        "damage_type": DamageType.FORCE, "damage_dice": "1d10", "attack_roll": True,
        "tags": ("cantrip", "damage", "force", "warlock"),
    },
    "fire_bolt": {
        "name": "Fire Bolt", "level": 0, "school": SpellSchool.EVOCATION,
        "range": "120 feet", "components": ("V", "S"),
        "description": (
            "You hurl a mote of fire at a creature or object within range. Make a ranged "
            "spell attack against the target. On a hit, the target takes 1d10 fire damage."
        ),
        "damage_type": DamageType.FIRE, "damage_dice": "1d10", "attack_roll": True,
        "tags": ("cantrip", "damage", "fire"),
    },
    "light": {
        "name": "Light", "level": 0, "school": SpellSchool.EVOCATION,
        "range": "Touch", "components": ("V", "M"), "duration": "1 hour",
        "description": (
            "You touch one object that is no larger than 10 feet in any dimension. Until "
            "the spell ends, the object sheds bright light in a 20-foot radius and dim "
            "light for an additional 20 feet."
        ),
        "tags": ("cantrip", "utility", "light"),
    },
    "mage_hand": {
        "name": "Mage Hand", "level": 0, "school": SpellSchool.CONJURATION,
        "range": "30 feet", "components": ("V", "S"), "duration": "1 minute",
        "description": (
            "A spectral, floating hand appears at a point you choose within range. The "
            "hand lasts for the duration or until you dismiss it as an action."
        ),
        "tags": ("cantrip", "utility", "manipulation"),
    },
    "minor_illusion": {
        "name": "Minor Illusion", "level": 0, "school": SpellSchool.ILLUSION,
        "range": "30 feet", "components": ("S", "M"), "duration": "1 minute",
        "description": (
            "You create a sound or an image of an object within range that lasts for the "
            "duration. The illusion also ends if you dismiss it as an action or cast this "
            "spell again."
        ),
        "tags": ("cantrip", "utility", "illusion", "deception"),
    },
    "prestidigitation": {
        "name": "Prestidigitation", "level": 0, "school": SpellSchool.TRANSMUTATION,
        "range": "10 feet", "components": ("V", "S"), "duration": "Up to 1 hour",
        "description": (
            "This spell is a minor magical trick that novice spellcasters use for "
            "practice. You create one of several minor effects within range."
        ),
        "tags": ("cantrip", "utility", "versatile"),
    },
    "ray_of_frost": {
        "name": "Ray of Frost", "level": 0, "school": SpellSchool.EVOCATION,
        "range": "60 feet", "components": ("V", "S"),
        "description": (
            "A frigid beam of blue-white light streaks toward a creature within range. "
            "Make a ranged spell attack against the target."
        ),
        "damage_type": DamageType.COLD, "damage_dice": "1d8", "attack_roll": True,
        "tags": ("cantrip", "damage", "cold", "slow"),
    },
    "sacred_flame": {
        "name": "Sacred Flame", "level": 0, "school": SpellSchool.EVOCATION,
        "range": "60 feet", "components": ("V", "S"),
        "description": (
            "Flame-like radiance descends on a creature that you can see within range. "
            "The target must succeed on a Dexterity saving throw or take 1d8 radiant damage."
        ),
        "damage_type": DamageType.RADIANT, "damage_dice": "1d8", "saving_throw": Ability.DEX,
        "tags": ("cantrip", "damage", "radiant", "cleric"),
    },
    # =========================================================================
    # 1st level
    # =========================================================================
    "burning_hands": {
        "name": "Burning Hands", "level": 1, "school": SpellSchool.EVOCATION,
        "range": "Self (15-foot cone)", "components": ("V", "S"),
        "description": (
            "As you hold your hands with thumbs touching and fingers spread, a thin sheet "
            "of flames shoots forth from your outstretched fingertips."
        ),
        "damage_type": DamageType.FIRE, "damage_dice": "3d6", "saving_throw": Ability.DEX,
        "tags": ("damage", "fire", "area", "cone"),
    },
    "charm_person": {
        "name": "Charm Person", "level": 1, "school": SpellSchool.ENCHANTMENT,
        "range": "30 feet", "components": ("V", "S"), "duration": "1 hour",
        "description": (
            "You attempt to charm a humanoid you can see within range. It must make a "
            "Wisdom saving throw, and it does so with advantage if you or your companions "
            "are fighting it."
        ),
        "saving_throw": Ability.WIS,
        "tags": ("enchantment", "charm", "social"),
    },
    "cure_wounds": {
        "name": "Cure Wounds", "level": 1, "school": SpellSchool.EVOCATION,
        "range": "Touch", "components": ("V", "S"),
        "description": (
            "A creature you touch regains a number of hit points equal to 1d8 + your "
            "spellcasting ability modifier."
        ),
        "healing_dice": "1d8",
        "tags": ("healing", "touch"),
    },
    "detect_magic": {
        "name": "Detect Magic", "level": 1, "school": SpellSchool.DIVINATION,
        "range": "Self", "components": ("V", "S"), "duration": "Concentration, up to 10 minutes",
        "description": "For the duration, you sense the presence of magic within 30 feet of you.",
        "tags": ("divination", "detection", "concentration"),
    },
    "healing_word": {
        "name": "Healing Word", "level": 1, "school": SpellSchool.EVOCATION,
        "casting_time": "1 bonus action", "range": "60 feet", "components": ("V",),
        "description": (
            "A creature of your choice that you can see within range regains hit points "
            "equal to 1d4 + your spellcasting ability modifier."
        ),
        "healing_dice": "1d4",
        "tags": ("healing", "bonus_action", "ranged"),
    },
    "magic_missile": {
        "name": "Magic Missile", "level": 1, "school": SpellSchool.EVOCATION,
        "range": "120 feet", "components": ("V", "S"),
        "description": (
            "You create three glowing darts of magical force. Each dart hits a creature of "
            "your choice that you can see within range. A dart deals 1d4 + 1 force damage "
            "to its target."
        ),
        "damage_type": DamageType.FORCE, "damage_dice": "1d4+1",
        "tags": ("damage", "force", "auto_hit", "multiple"),
    },
    "shield": {
        "name": "Shield", "level": 1, "school": SpellSchool.ABJURATION,
        "casting_time": "1 reaction", "range": "Self", "components": ("V", "S"), "duration": "1 round",
        "description": (
            "An invisible barrier of magical force appears and protects you. Until the start "
            "of your next turn, you have a +5 bonus to AC, including against the triggering attack."
        ),
        "tags": ("protection", "reaction", "ac_bonus"),
    },
    "sleep": {
        "name": "Sleep", "level": 1, "school": SpellSchool.ENCHANTMENT,
        "range": "90 feet", "components": ("V", "S", "M"), "duration": "1 minute",
        "description": (
            "This spell sends creatures into a magical slumber. Roll 5d8; the total is how "
            "many hit points of creatures this spell can affect."
        ),
        "tags": ("enchantment", "area", "incapacitate"),
    },
    "thunderwave": {
        "name": "Thunderwave", "level": 1, "school": SpellSchool.EVOCATION,
        "range": "Self (15-foot cube)", "components": ("V", "S"),
        "description": (
            "A wave of thunderous force sweeps out from you. Each creature in a 15-foot cube "
            "originating from you must make a Constitution saving throw."
        ),
        "damage_type": DamageType.THUNDER, "damage_dice": "2d8", "saving_throw": Ability.CON,
        "tags": ("damage", "thunder", "area", "knockback"),
    },
    # =========================================================================
    # 2nd level
    # =========================================================================
    "acid_arrow": {
        "name": "Melf's Acid Arrow", "level": 2, "school": SpellSchool.EVOCATION,
        "range": "90 feet", "components": ("V", "S", "M"),
        "description": (
            "A shimmering green arrow streaks toward a target within range and bursts in a "
            "spray of acid. Make a ranged spell attack against the target."
        ),
        "damage_type": DamageType.ACID, "damage_dice": "4d4", "attack_roll": True,
        "tags": ("damage", "acid", "persistent"),
    },
    "blur": {
        "name": "Blur", "level": 2, "school": SpellSchool.ILLUSION,
        "range": "Self", "components": ("V",), "duration": "Concentration, up to 1 minute",
        "description": (
            "Your body becomes blurred, shifting and wavering to all who can see you. For the "
            "duration, any creature has disadvantage on attack rolls against you."
        ),
        "tags": ("illusion", "protection", "concentration", "disadvantage"),
    },
    "hold_person": {
        "name": "Hold Person", "level": 2, "school": SpellSchool.ENCHANTMENT,
        "range": "60 feet", "components": ("V", "S", "M"), "duration": "Concentration, up to 1 minute",
        "description": (
            "Choose a humanoid that you can see within range. The target must succeed on a "
            "Wisdom saving throw or be paralyzed for the duration."
        ),
        "saving_throw": Ability.WIS,
        "tags": ("enchantment", "paralysis", "concentration", "control"),
    },
    "invisibility": {
        "name": "Invisibility", "level": 2, "school": SpellSchool.ILLUSION,
        "range": "Touch", "components": ("V", "S", "M"), "duration": "Concentration, up to 1 hour",
        "description": (
            "A creature you touch becomes invisible until the spell ends. Anything the target "
            "is wearing or carrying is invisible as long as it is on the target's person."
        ),
        "tags": ("illusion", "stealth", "concentration", "buff"),
    },
    "misty_step": {
        "name": "Misty Step", "level": 2, "school": SpellSchool.CONJURATION,
        "casting_time": "1 bonus action", "range": "Self", "components": ("V",),
        "description": (
            "Briefly surrounded by silvery mist, you teleport up to 30 feet to an unoccupied "
            "space that you can see."
        ),
        "tags": ("conjuration", "teleport", "bonus_action", "mobility"),
    },
    "scorching_ray": {
        "name": "Scorching Ray", "level": 2, "school": SpellSchool.EVOCATION,
        "range": "120 feet", "components": ("V", "S"),
        "description": (
            "You create three rays of fire and hurl them at targets within range. You can "
            "hurl them at one target or several. Make a ranged spell attack for each ray."
        ),
        "damage_type": DamageType.FIRE, "damage_dice": "2d6", "attack_roll": True,
        "tags": ("damage", "fire", "multiple", "rays"),
    },
    "web": {
        "name": "Web", "level": 2, "school": SpellSchool.CONJURATION,
        "range": "60 feet", "components": ("V", "S", "M"), "duration": "Concentration, up to 1 hour",
        "description": (
            "You conjure a mass of thick, sticky webbing at a point of your choice within "
            "range. The webs fill a 20-foot cube from that point for the duration."
        ),
        "saving_throw": Ability.DEX,
        "tags": ("conjuration", "area", "restrain", "concentration"),
    },
    # =========================================================================
    # 3rd level
    # =========================================================================
    "counterspell": {
        "name": "Counterspell", "level": 3, "school": SpellSchool.ABJURATION,
        "casting_time": "1 reaction", "range": "60 feet", "components": ("S",),
        "description": (
            "You attempt to interrupt a creature in the process of casting a spell. If the "
            "creature is casting a spell of 3rd level or lower, its spell fails and has no effect."
        ),
        "tags": ("abjuration", "reaction", "counter", "interrupt"),
    },
    "dispel_magic": {
        "name": "Dispel Magic", "level": 3, "school": SpellSchool.ABJURATION,
        "range": "120 feet", "components": ("V", "S"),
        "description": (
            "Choose one creature, object, or magical effect within range. Any spell of 3rd "
            "level or lower on the target ends."
        ),
        "tags": ("abjuration", "dispel", "utility"),
    },
    "fireball": {
        "name": "Fireball", "level": 3, "school": SpellSchool.EVOCATION,
        "range": "150 feet", "components": ("V", "S", "M"),
        "description": (
            "A bright streak flashes from your pointing finger to a point you choose within "
            "range and then blossoms with a low roar into an explosion of flame."
        ),
        "damage_type": DamageType.FIRE, "damage_dice": "8d6", "saving_throw": Ability.DEX,
        "tags": ("damage", "fire", "area", "explosion"),
    },
    "fly": {
        "name": "Fly", "level": 3, "school": SpellSchool.TRANSMUTATION,
        "range": "Touch", "components": ("V", "S", "M"), "duration": "Concentration, up to 10 minutes",
        "description": (
            "You touch a willing creature. The target gains a flying speed of 60 feet for "
            "the duration."
        ),
        "tags": ("transmutation", "movement", "fly", "concentration"),
    },
    "haste": {
        "name": "Haste", "level": 3, "school": SpellSchool.TRANSMUTATION,
        "range": "30 feet", "components": ("V", "S", "M"), "duration": "Concentration, up to 1 minute",
        "description": (
            "Choose a willing creature that you can see within range. Until the spell ends, "
            "the target's speed is doubled, it gains a +2 bonus to AC, it has advantage on "
            "Dexterity saving throws, and it gains an additional action on each of its turns."
        ),
        "tags": ("transmutation", "buff", "concentration", "speed"),
    },
    "lightning_bolt": {
        "name": "Lightning Bolt", "level": 3, "school": SpellSchool.EVOCATION,
        "range": "Self (100-foot line)", "components": ("V", "S", "M"),
        "description": (
            "A stroke of lightning forming a line 100 feet long and 5 feet wide blasts out "
            "from you in a direction you choose."
        ),
        "damage_type": DamageType.LIGHTNING, "damage_dice": "8d6", "saving_throw": Ability.DEX,
        "tags": ("damage", "lightning", "line", "area"),
    },
    # =========================================================================
    # 4th level
    # =========================================================================
    "greater_invisibility": {
        "name": "Greater Invisibility", "level": 4, "school": SpellSchool.ILLUSION,
        "range": "Touch", "components": ("V", "S"), "duration": "Concentration, up to 1 minute",
        "description": (
            "You or a creature you touch becomes invisible until the spell ends. Anything the "
            "target is wearing or carrying is invisible as long as it is on the target's person."
        ),
        "tags": ("illusion", "stealth", "concentration", "buff", "greater"),
    },
    "ice_storm": {
        "name": "Ice Storm", "level": 4, "school": SpellSchool.EVOCATION,
        "range": "300 feet", "components": ("V", "S", "M"),
        "description": (
            "A hail of rock-hard ice pounds to the ground in a 20-foot-radius, 40-foot-high "
            "cylinder centered on a point within range."
        ),
        "damage_type": DamageType.BLUDGEONING, "damage_dice": "2d8", "saving_throw": Ability.DEX,
        "tags": ("damage", "cold", "bludgeoning", "area", "cylinder"),
    },
    "polymorph": {
        "name": "Polymorph", "level": 4, "school": SpellSchool.TRANSMUTATION,
        "range": "60 feet", "components": ("V", "S", "M"), "duration": "Concentration, up to 1 hour",
        "description": (
            "This spell transforms a creature that you can see within range into a new form. "
            "An unwilling creature must make a Wisdom saving throw to avoid the effect."
        ),
        "saving_throw": Ability.WIS,
        "tags": ("transmutation", "shapechange", "concentration", "control"),
    },
    "wall_of_fire": {
        "name": "Wall of Fire", "level": 4, "school": SpellSchool.EVOCATION,
        "range": "120 feet", "components": ("V", "S", "M"), "duration": "Concentration, up to 1 minute",
        "description": (
            "You create a wall of fire on a solid surface within range. You can make the wall "
            "up to 60 feet long, 20 feet high, and 1 foot thick, or a ringed wall up to 20 feet "
            "in diameter, 20 feet high, and 1 foot thick."
        ),
        "damage_type": DamageType.FIRE, "damage_dice": "5d8", "saving_throw": Ability.DEX,
        "tags": ("damage", "fire", "area", "wall", "concentration"),
    },
    # =========================================================================
    # 5th level and above
    # =========================================================================
    "cone_of_cold": {
        "name": "Cone of Cold", "level": 5, "school": SpellSchool.EVOCATION,
        "range": "Self (60-foot cone)", "components": ("V", "S", "M"),
        "description": (
            "A blast of cold air erupts from your hands. Each creature in a 60-foot cone must "
            "make a Constitution saving throw."
        ),
        "damage_type": DamageType.COLD, "damage_dice": "8d8", "saving_throw": Ability.CON,
        "tags": ("damage", "cold", "cone", "area"),
    },
    "dominate_person": {
        "name": "Dominate Person", "level": 5, "school": SpellSchool.ENCHANTMENT,
        "range": "60 feet", "components": ("V", "S"), "duration": "Concentration, up to 1 minute",
        "description": (
            "You attempt to beguile a humanoid that you can see within range. It must succeed "
            "on a Wisdom saving throw or be charmed by you for the duration."
        ),
        "saving_throw": Ability.WIS,
        "tags": ("enchantment", "dominate", "concentration", "control"),
    },
    "teleport": {
        "name": "Teleport", "level": 7, "school": SpellSchool.CONJURATION,
        "range": "10 feet", "components": ("V",),
        "description": (
            "This spell instantly transports you and up to eight willing creatures of your "
            "choice that you can see within range, or a single object that you can see within "
            "range, to a destination you select."
        ),
        "tags": ("conjuration", "teleport", "travel", "group"),
    },
}


SPELLS: dict[str, Spell] = {
    spell_id: Spell(id=spell_id, **data) for spell_id, data in _SPELL_DATA.items()
}
"""Every spell by id."""


def get_spell(spell_id: str) -> Spell:
    """Look up a spell by id.

    Args:
        spell_id: Catalog key such as 'fireball'.

    Returns:
        The Spell.

    Raises:
        NotFoundError: If no spell has that id.
    """
    spell = SPELLS.get(spell_id)
    if spell is None:
        raise NotFoundError(f"Spell {spell_id} not found.", kind="spell", identifier=spell_id)
    return spell


def spells_by_level(level: int) -> list[Spell]:
    """Get every spell of one level, in catalog order."""
    return [spell for spell in SPELLS.values() if spell.level == level]


__all__ = [
    "Spell",
    "SPELLS",
    "get_spell",
    "spells_by_level",
]
