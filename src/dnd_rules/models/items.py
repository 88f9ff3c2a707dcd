"""Item models and the item template catalog.

Items are instantiated from templates with a fresh unique id. Effect
strings, armor class notation and weapon damage dice are parsed once when
the model is built; resolvers read the typed fields afterwards.
"""

from __future__ import annotations

import re
from typing import Any, Self
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dnd_rules.models.effects import ACBase, Effect, parse_effects
from dnd_rules.models.enums import (
    AcquisitionMethod,
    ArmorWeight,
    ItemType,
    Rarity,
    RechargeType,
)
from dnd_rules.models.notation import DiceSpec, find_dice


_AC_PATTERN = re.compile(r"AC\s*(\d+)", re.IGNORECASE)

EQUIPPED_TAG = "equipped"
ATTUNED_PROPERTY = "attuned"
ATTUNEMENT_REQUIRED = "attunement_required"
STACKABLE_TAG = "stackable"
SHIELD_PROPERTY = "shield"

EQUIPPABLE_TYPES = frozenset({ItemType.WEAPON, ItemType.ARMOR, ItemType.WONDROUS})


def _derive_parsed_fields(data: Any) -> Any:
    """Fill ``effect_list`` and ``damage`` from the raw text fields."""
    if not isinstance(data, dict):
        return data
    data = dict(data)
    if "effect_list" not in data:
        effects = list(parse_effects(data.get("effects", "")))
        item_type = data.get("type")
        if item_type == ItemType.ARMOR and not any(isinstance(e, ACBase) for e in effects):
            match = _AC_PATTERN.search(data.get("description", ""))
            if match:
                effects.append(ACBase(source=match.group(0), value=int(match.group(1))))
        data["effect_list"] = tuple(effects)
    if "damage" not in data and data.get("type") == ItemType.WEAPON:
        data["damage"] = find_dice(data.get("description", ""))
    return data


class ItemUses(BaseModel):
    """Charges on an item.

    Attributes:
        max: Maximum charges.
        current: Charges remaining.
        recharge: When charges return.
    """

    model_config = ConfigDict(validate_assignment=True)

    max: int = Field(ge=0)
    current: int = Field(ge=0)
    recharge: RechargeType = RechargeType.NONE

    @model_validator(mode="after")
    def check_current_within_max(self) -> Self:
        if self.current > self.max:
            raise ValueError(f"current ({self.current}) cannot exceed max ({self.max})")
        return self


class ItemTemplate(BaseModel):
    """Immutable reference data for one kind of item.

    Attributes:
        key: Catalog key (e.g., 'longsword').
        name: Display name.
        type: Item category.
        rarity: Rarity tier.
        properties: Rules properties such as 'finesse' or '+1'.
        weight: Weight in kilograms.
        value: Value in gold pieces.
        description: Rules text; may embed damage dice or 'AC N'.
        effects: Raw effect string.
        tags: Free-form tags for filtering.
        effect_list: Parsed effect descriptors.
        damage: Weapon damage dice parsed from the description.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    type: ItemType
    rarity: Rarity
    properties: tuple[str, ...] = ()
    weight: float = Field(ge=0)
    value: float = Field(ge=0)
    description: str = ""
    effects: str = ""
    tags: tuple[str, ...] = ()
    effect_list: tuple[Effect, ...] = ()
    damage: DiceSpec | None = None

    @model_validator(mode="before")
    @classmethod
    def parse_text_fields(cls, data: Any) -> Any:
        return _derive_parsed_fields(data)

    def instantiate(
        self,
        acquisition_method: AcquisitionMethod = AcquisitionMethod.LOOT,
        location_state: str = "world",
        provenance: str = "Generated",
    ) -> Item:
        """Create a new Item from this template with a fresh id.

        Items that need attunement get the 'attunement_required'
        prerequisite; consumables get a single charge.
        """
        uses = None
        if self.type == ItemType.CONSUMABLE:
            uses = ItemUses(max=1, current=1, recharge=RechargeType.NONE)
        return Item(
            id=generate_item_id(self.key),
            name=self.name,
            type=self.type,
            rarity=self.rarity,
            properties=list(self.properties),
            weight=self.weight,
            value=self.value,
            description=self.description,
            prerequisites=[ATTUNEMENT_REQUIRED] if ATTUNEMENT_REQUIRED in self.properties else [],
            effects=self.effects,
            uses=uses,
            location_state=location_state,
            acquisition_method=acquisition_method,
            provenance=provenance,
            tags=list(self.tags),
            effect_list=self.effect_list,
            damage=self.damage,
        )


class Item(BaseModel):
    """A concrete item instance carried by a character or lying in the world.

    Attributes:
        id: Unique id of this instance (not of the template).
        name: Display name.
        type: Item category.
        rarity: Rarity tier.
        properties: Rules properties, including 'attuned' once attuned.
        weight: Weight in kilograms.
        value: Value in gold pieces.
        description: Rules text.
        prerequisites: Requirements such as 'attunement_required'.
        effects: Raw effect string, kept for narration.
        uses: Optional charges.
        location_state: Where the item is ('world', 'player:<name>', ...).
        discovery_requirements: What it takes to find the item.
        acquisition_method: How the item was acquired.
        provenance: Where the item came from.
        tags: Free-form tags, including 'equipped' while equipped.
        effect_list: Parsed effect descriptors.
        damage: Weapon damage dice, if any.
        quantity: Units in this stack.
        stack_ids: Ids of the units merged into this stack after the first.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    type: ItemType
    rarity: Rarity = Rarity.COMMON
    properties: list[str] = Field(default_factory=list)
    weight: float = Field(default=0.0, ge=0)
    value: float = Field(default=0.0, ge=0)
    description: str = ""
    prerequisites: list[str] = Field(default_factory=list)
    effects: str = ""
    uses: ItemUses | None = None
    location_state: str = "world"
    discovery_requirements: str = ""
    acquisition_method: AcquisitionMethod = AcquisitionMethod.LOOT
    provenance: str = "Generated"
    tags: list[str] = Field(default_factory=list)
    effect_list: tuple[Effect, ...] = ()
    damage: DiceSpec | None = None
    quantity: int = Field(default=1, ge=1)
    stack_ids: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def parse_text_fields(cls, data: Any) -> Any:
        return _derive_parsed_fields(data)

    # -------------------------------------------------------------------------
    # Flags
    # -------------------------------------------------------------------------

    @property
    def is_equipped(self) -> bool:
        return EQUIPPED_TAG in self.tags

    @property
    def is_attuned(self) -> bool:
        return ATTUNED_PROPERTY in self.properties

    @property
    def requires_attunement(self) -> bool:
        return ATTUNEMENT_REQUIRED in self.prerequisites

    @property
    def is_shield(self) -> bool:
        return SHIELD_PROPERTY in self.properties

    @property
    def is_equippable(self) -> bool:
        return self.type in EQUIPPABLE_TYPES

    @property
    def is_stackable(self) -> bool:
        """Consumables, currency and anything tagged 'stackable' merge into stacks."""
        return (
            self.type in (ItemType.CONSUMABLE, ItemType.CURRENCY)
            or STACKABLE_TAG in self.tags
        )

    def answers_to(self, item_id: str) -> bool:
        """Whether ``item_id`` names this item or a unit merged into its stack."""
        return item_id == self.id or item_id in self.stack_ids

    @property
    def is_finesse(self) -> bool:
        return "finesse" in self.properties

    # -------------------------------------------------------------------------
    # Derived numbers
    # -------------------------------------------------------------------------

    @property
    def enhancement_bonus(self) -> int:
        """Numeric bonus from a '+N' property, 0 when absent."""
        for prop in self.properties:
            if prop.startswith("+") and prop[1:].isdigit():
                return int(prop[1:])
        return 0

    @property
    def armor_weight(self) -> ArmorWeight | None:
        """Light, medium or heavy for armor; None otherwise or when unspecified."""
        if self.type != ItemType.ARMOR:
            return None
        for weight in (ArmorWeight.HEAVY, ArmorWeight.MEDIUM, ArmorWeight.LIGHT):
            if weight.value in self.properties:
                return weight
        return None

    @property
    def base_armor_class(self) -> int:
        """Base AC from the armor's effects or 'AC N' text, 0 meaning no override."""
        for effect in self.effect_list:
            if isinstance(effect, ACBase):
                return effect.value
        return 0

    def effects_of(self, kind: type[Any]) -> list[Any]:
        """Get the parsed effects of one descriptor type."""
        return [effect for effect in self.effect_list if isinstance(effect, kind)]

    # -------------------------------------------------------------------------
    # Tag helpers
    # -------------------------------------------------------------------------

    def mark_equipped(self) -> None:
        if EQUIPPED_TAG not in self.tags:
            self.tags = [*self.tags, EQUIPPED_TAG]

    def mark_unequipped(self) -> None:
        self.tags = [tag for tag in self.tags if tag != EQUIPPED_TAG]

    def mark_attuned(self) -> None:
        if ATTUNED_PROPERTY not in self.properties:
            self.properties = [*self.properties, ATTUNED_PROPERTY]


def generate_item_id(template_key: str) -> str:
    """Generate a unique instance id such as ``longsword_3f2a9c1b7d04``."""
    return f"{template_key}_{uuid4().hex[:12]}"


# =============================================================================
# Item Template Catalog
# =============================================================================

_WEAPONS: dict[str, dict[str, Any]] = {
    # Simple melee
    "club": {
        "name": "Club", "properties": ("light", "simple"), "weight": 0.9, "value": 0.1,
        "description": "1d4 bludgeoning damage", "tags": ("melee", "simple", "light"),
    },
    "dagger": {
        "name": "Dagger", "properties": ("finesse", "light", "thrown", "simple"), "weight": 0.5, "value": 2,
        "description": "1d4 piercing damage. Range 20/60 feet when thrown",
        "tags": ("melee", "ranged", "finesse", "thrown"),
    },
    "handaxe": {
        "name": "Handaxe", "properties": ("light", "thrown", "simple"), "weight": 0.9, "value": 5,
        "description": "1d6 slashing damage. Range 20/60 feet when thrown", "tags": ("melee", "thrown", "axe"),
    },
    "javelin": {
        "name": "Javelin", "properties": ("thrown", "simple"), "weight": 0.9, "value": 0.5,
        "description": "1d6 piercing damage. Range 30/120 feet", "tags": ("melee", "thrown", "spear"),
    },
    "mace": {
        "name": "Mace", "properties": ("simple",), "weight": 1.8, "value": 5,
        "description": "1d6 bludgeoning damage", "tags": ("melee", "bludgeoning"),
    },
    "quarterstaff": {
        "name": "Quarterstaff", "properties": ("versatile", "simple"), "weight": 1.8, "value": 0.2,
        "description": "1d6 bludgeoning damage (1d8 when used with two hands)",
        "tags": ("melee", "versatile", "staff"),
    },
    "spear": {
        "name": "Spear", "properties": ("thrown", "versatile", "simple"), "weight": 1.4, "value": 1,
        "description": "1d6 piercing damage (1d8 when used with two hands). Range 20/60 feet when thrown",
        "tags": ("melee", "thrown", "versatile", "spear"),
    },
    # Simple ranged
    "crossbow_light": {
        "name": "Light Crossbow", "properties": ("ammunition", "loading", "two_handed", "simple"),
        "weight": 2.3, "value": 25, "description": "1d8 piercing damage. Range 80/320 feet",
        "tags": ("ranged", "crossbow", "two_handed"),
    },
    "dart": {
        "name": "Dart", "properties": ("finesse", "thrown", "simple"), "weight": 0.1, "value": 0.05,
        "description": "1d4 piercing damage. Range 20/60 feet", "tags": ("ranged", "thrown", "finesse"),
    },
    "shortbow": {
        "name": "Shortbow", "properties": ("ammunition", "two_handed", "simple"), "weight": 0.9, "value": 25,
        "description": "1d6 piercing damage. Range 80/320 feet", "tags": ("ranged", "bow", "two_handed"),
    },
    "sling": {
        "name": "Sling", "properties": ("ammunition", "simple"), "weight": 0, "value": 0.1,
        "description": "1d4 bludgeoning damage. Range 30/120 feet", "tags": ("ranged", "sling"),
    },
    # Martial melee
    "battleaxe": {
        "name": "Battleaxe", "properties": ("versatile", "martial"), "weight": 1.8, "value": 10,
        "description": "1d8 slashing damage (1d10 when used with two hands)",
        "tags": ("melee", "axe", "versatile"),
    },
    "flail": {
        "name": "Flail", "properties": ("martial",), "weight": 0.9, "value": 10,
        "description": "1d8 bludgeoning damage", "tags": ("melee", "bludgeoning", "chain"),
    },
    "glaive": {
        "name": "Glaive", "properties": ("heavy", "reach", "two_handed", "martial"), "weight": 2.7, "value": 20,
        "description": "1d10 slashing damage. Reach 10 feet", "tags": ("melee", "polearm", "reach", "two_handed"),
    },
    "greataxe": {
        "name": "Greataxe", "properties": ("heavy", "two_handed", "martial"), "weight": 3.2, "value": 30,
        "description": "1d12 slashing damage", "tags": ("melee", "axe", "two_handed", "heavy"),
    },
    "greatsword": {
        "name": "Greatsword", "properties": ("heavy", "two_handed", "martial"), "weight": 2.7, "value": 50,
        "description": "2d6 slashing damage", "tags": ("melee", "sword", "two_handed", "heavy"),
    },
    "halberd": {
        "name": "Halberd", "properties": ("heavy", "reach", "two_handed", "martial"), "weight": 2.7, "value": 20,
        "description": "1d10 slashing damage. Reach 10 feet", "tags": ("melee", "polearm", "reach", "two_handed"),
    },
    "lance": {
        "name": "Lance", "properties": ("reach", "special", "martial"), "weight": 2.7, "value": 10,
        "description": (
            "1d12 piercing damage. Reach 10 feet. Special: disadvantage when attacking "
            "targets within 5 feet unless mounted"
        ),
        "tags": ("melee", "spear", "reach", "mounted"),
    },
    "longsword": {
        "name": "Longsword", "properties": ("versatile", "martial"), "weight": 1.4, "value": 15,
        "description": "1d8 slashing damage (1d10 when used with two hands)",
        "tags": ("melee", "sword", "versatile"),
    },
    "maul": {
        "name": "Maul", "properties": ("heavy", "two_handed", "martial"), "weight": 4.5, "value": 10,
        "description": "2d6 bludgeoning damage", "tags": ("melee", "bludgeoning", "two_handed", "heavy"),
    },
    "morningstar": {
        "name": "Morningstar", "properties": ("martial",), "weight": 1.8, "value": 15,
        "description": "1d8 piercing damage", "tags": ("melee", "piercing", "spiked"),
    },
    "pike": {
        "name": "Pike", "properties": ("heavy", "reach", "two_handed", "martial"), "weight": 8.2, "value": 5,
        "description": "1d10 piercing damage. Reach 10 feet", "tags": ("melee", "spear", "reach", "two_handed"),
    },
    "rapier": {
        "name": "Rapier", "properties": ("finesse", "martial"), "weight": 0.9, "value": 25,
        "description": "1d8 piercing damage", "tags": ("melee", "sword", "finesse"),
    },
    "scimitar": {
        "name": "Scimitar", "properties": ("finesse", "light", "martial"), "weight": 1.4, "value": 25,
        "description": "1d6 slashing damage", "tags": ("melee", "sword", "finesse", "light"),
    },
    "shortsword": {
        "name": "Shortsword", "properties": ("finesse", "light", "martial"), "weight": 0.9, "value": 10,
        "description": "1d6 piercing damage", "tags": ("melee", "sword", "finesse", "light"),
    },
    "trident": {
        "name": "Trident", "properties": ("thrown", "versatile", "martial"), "weight": 1.8, "value": 5,
        "description": "1d6 piercing damage (1d8 when used with two hands). Range 20/60 feet when thrown",
        "tags": ("melee", "thrown", "versatile", "spear"),
    },
    "war_pick": {
        "name": "War Pick", "properties": ("martial",), "weight": 0.9, "value": 5,
        "description": "1d8 piercing damage", "tags": ("melee", "pick", "piercing"),
    },
    "warhammer": {
        "name": "Warhammer", "properties": ("versatile", "martial"), "weight": 0.9, "value": 15,
        "description": "1d8 bludgeoning damage (1d10 when used with two hands)",
        "tags": ("melee", "hammer", "versatile"),
    },
    "whip": {
        "name": "Whip", "properties": ("finesse", "reach", "martial"), "weight": 1.4, "value": 2,
        "description": "1d4 slashing damage. Reach 10 feet", "tags": ("melee", "whip", "finesse", "reach"),
    },
    # Martial ranged
    "blowgun": {
        "name": "Blowgun", "properties": ("ammunition", "loading", "martial"), "weight": 0.5, "value": 10,
        "description": "1 piercing damage. Range 25/100 feet", "tags": ("ranged", "blowgun", "stealth"),
    },
    "crossbow_hand": {
        "name": "Hand Crossbow", "properties": ("ammunition", "light", "loading", "martial"),
        "weight": 1.4, "value": 75, "description": "1d6 piercing damage. Range 30/120 feet",
        "tags": ("ranged", "crossbow", "light"),
    },
    "crossbow_heavy": {
        "name": "Heavy Crossbow", "properties": ("ammunition", "heavy", "loading", "two_handed", "martial"),
        "weight": 8.2, "value": 50, "description": "1d10 piercing damage. Range 100/400 feet",
        "tags": ("ranged", "crossbow", "heavy", "two_handed"),
    },
    "longbow": {
        "name": "Longbow", "properties": ("ammunition", "heavy", "two_handed", "martial"),
        "weight": 0.9, "value": 50, "description": "1d8 piercing damage. Range 150/600 feet",
        "tags": ("ranged", "bow", "heavy", "two_handed"),
    },
    "net": {
        "name": "Net", "properties": ("special", "thrown", "martial"), "weight": 1.4, "value": 1,
        "description": "No damage. Range 5/15 feet. Special: restrains Large or smaller creatures on hit",
        "effects": "restrain", "tags": ("ranged", "thrown", "special", "restraint"),
    },
}

_ARMOR: dict[str, dict[str, Any]] = {
    # Light
    "leather_armor": {
        "name": "Leather Armor", "properties": ("light",), "weight": 4.5, "value": 10,
        "description": "AC 11 + Dex modifier", "effects": "ac_base:11", "tags": ("armor", "light"),
    },
    "studded_leather": {
        "name": "Studded Leather", "properties": ("light",), "weight": 6.0, "value": 45,
        "description": "AC 12 + Dex modifier", "effects": "ac_base:12", "tags": ("armor", "light"),
    },
    "padded_armor": {
        "name": "Padded Armor", "properties": ("light", "stealth_disadvantage"), "weight": 3.6, "value": 5,
        "description": "AC 11 + Dex modifier. Disadvantage on Stealth checks",
        "effects": "ac_base:11,stealth_disadvantage", "tags": ("armor", "light"),
    },
    # Medium
    "hide_armor": {
        "name": "Hide Armor", "properties": ("medium",), "weight": 5.4, "value": 10,
        "description": "AC 12 + Dex modifier (max 2)", "effects": "ac_base:12,dex_max:2",
        "tags": ("armor", "medium"),
    },
    "chain_shirt": {
        "name": "Chain Shirt", "properties": ("medium",), "weight": 9.1, "value": 50,
        "description": "AC 13 + Dex modifier (max 2)", "effects": "ac_base:13,dex_max:2",
        "tags": ("armor", "medium", "mail"),
    },
    "scale_mail": {
        "name": "Scale Mail", "properties": ("medium", "stealth_disadvantage"), "weight": 20.4, "value": 50,
        "description": "AC 14 + Dex modifier (max 2). Disadvantage on Stealth checks",
        "effects": "ac_base:14,dex_max:2,stealth_disadvantage", "tags": ("armor", "medium"),
    },
    "breastplate": {
        "name": "Breastplate", "properties": ("medium",), "weight": 9.1, "value": 400,
        "description": "AC 14 + Dex modifier (max 2)", "effects": "ac_base:14,dex_max:2",
        "tags": ("armor", "medium", "plate"),
    },
    "half_plate": {
        "name": "Half Plate", "properties": ("medium", "stealth_disadvantage"), "weight": 18.1, "value": 750,
        "description": "AC 15 + Dex modifier (max 2). Disadvantage on Stealth checks",
        "effects": "ac_base:15,dex_max:2,stealth_disadvantage", "tags": ("armor", "medium", "plate"),
    },
    # Heavy
    "ring_mail": {
        "name": "Ring Mail", "properties": ("heavy", "stealth_disadvantage"), "weight": 18.1, "value": 30,
        "description": "AC 14. Heavy armor. Disadvantage on Stealth checks",
        "effects": "ac_base:14,stealth_disadvantage", "tags": ("armor", "heavy"),
    },
    "chain_mail": {
        "name": "Chain Mail", "properties": ("heavy", "stealth_disadvantage"), "weight": 25, "value": 75,
        "description": "AC 16. Heavy armor. Disadvantage on Stealth checks",
        "effects": "ac_base:16,stealth_disadvantage", "tags": ("armor", "heavy", "mail"),
    },
    "splint_armor": {
        "name": "Splint Armor", "properties": ("heavy", "stealth_disadvantage"), "weight": 27.2, "value": 200,
        "description": "AC 17. Heavy armor. Disadvantage on Stealth checks",
        "effects": "ac_base:17,stealth_disadvantage", "tags": ("armor", "heavy"),
    },
    "plate_armor": {
        "name": "Plate Armor", "properties": ("heavy", "stealth_disadvantage"), "weight": 29.5, "value": 1500,
        "description": "AC 18. Heavy armor. Disadvantage on Stealth checks",
        "effects": "ac_base:18,stealth_disadvantage", "tags": ("armor", "heavy", "plate"),
    },
    # Shield
    "shield": {
        "name": "Shield", "properties": ("shield",), "weight": 2.7, "value": 10,
        "description": "+2 AC bonus", "effects": "ac_bonus:+2", "tags": ("shield", "armor"),
    },
}

_CONSUMABLES: dict[str, dict[str, Any]] = {
    "healing_potion": {
        "name": "Potion of Healing", "properties": ("consumable", "magical"), "weight": 0.2, "value": 50,
        "description": "Heals 2d4 + 2 hit points when consumed", "effects": "healing:2d4+2",
        "tags": ("potion", "healing"),
    },
    "greater_healing_potion": {
        "name": "Potion of Greater Healing", "rarity": Rarity.UNCOMMON, "properties": ("consumable", "magical"),
        "weight": 0.2, "value": 150, "description": "Heals 4d4 + 4 hit points when consumed",
        "effects": "healing:4d4+4", "tags": ("potion", "healing", "greater"),
    },
    "superior_healing_potion": {
        "name": "Potion of Superior Healing", "rarity": Rarity.RARE, "properties": ("consumable", "magical"),
        "weight": 0.2, "value": 500, "description": "Heals 8d4 + 8 hit points when consumed",
        "effects": "healing:8d4+8", "tags": ("potion", "healing", "superior"),
    },
    "supreme_healing_potion": {
        "name": "Potion of Supreme Healing", "rarity": Rarity.VERY_RARE, "properties": ("consumable", "magical"),
        "weight": 0.2, "value": 1350, "description": "Heals 10d4 + 20 hit points when consumed",
        "effects": "healing:10d4+20", "tags": ("potion", "healing", "supreme"),
    },
    "antitoxin": {
        "name": "Antitoxin", "properties": ("consumable",), "weight": 0.2, "value": 50,
        "description": "Advantage on saving throws against poison for 1 hour",
        "effects": "poison_advantage:1h", "tags": ("potion", "poison", "medicine"),
    },
}

_GEAR: dict[str, dict[str, Any]] = {
    "thieves_tools": {
        "name": "Thieves' Tools", "type": ItemType.TOOL, "properties": ("tool",), "weight": 0.5, "value": 25,
        "description": "Used for picking locks and disarming traps",
        "effects": "lockpicking:+2,trap_disarm:+2", "tags": ("tools", "rogue", "stealth"),
    },
    "smiths_tools": {
        "name": "Smith's Tools", "type": ItemType.TOOL, "properties": ("tool",), "weight": 3.6, "value": 20,
        "description": "Used for crafting and repairing metal items", "effects": "metalwork:+2",
        "tags": ("tools", "crafting", "smith"),
    },
    "rope_hemp": {
        "name": "Hemp Rope (50 feet)", "type": ItemType.MISC, "weight": 4.5, "value": 2,
        "description": "50 feet of sturdy hemp rope", "tags": ("utility", "rope", "climbing"),
    },
    "rope_silk": {
        "name": "Silk Rope (50 feet)", "type": ItemType.MISC, "weight": 2.3, "value": 10,
        "description": "50 feet of strong silk rope", "tags": ("utility", "rope", "climbing", "light"),
    },
    "grappling_hook": {
        "name": "Grappling Hook", "type": ItemType.MISC, "weight": 1.8, "value": 2,
        "description": "Iron hook for climbing and utility", "tags": ("utility", "climbing", "iron"),
    },
    "crowbar": {
        "name": "Crowbar", "type": ItemType.TOOL, "properties": ("tool",), "weight": 2.3, "value": 2,
        "description": "Advantage on Strength checks where leverage can be applied",
        "effects": "leverage:advantage", "tags": ("tool", "utility", "strength"),
    },
    "torch": {
        "name": "Torch", "type": ItemType.MISC, "properties": ("light",), "weight": 0.5, "value": 0.01,
        "description": "Bright light 20 feet, dim light 20 feet beyond. Burns for 1 hour",
        "effects": "light:20/40,duration:1h", "tags": ("utility", "light", "fire"),
    },
    "lantern_hooded": {
        "name": "Hooded Lantern", "type": ItemType.MISC, "properties": ("light",), "weight": 0.9, "value": 5,
        "description": "Bright light 30 feet, dim light 30 feet beyond. Burns for 6 hours on a flask of oil",
        "effects": "light:30/60,duration:6h", "tags": ("utility", "light", "oil"),
    },
}

_MAGIC_ITEMS: dict[str, dict[str, Any]] = {
    "weapon_plus_1": {
        "name": "+1 Weapon", "type": ItemType.WEAPON, "rarity": Rarity.UNCOMMON, "properties": ("magical", "+1"),
        "weight": 1.4, "value": 500, "description": "+1 bonus to attack and damage rolls",
        "effects": "attack_bonus:+1,damage_bonus:+1", "tags": ("magical", "enhancement"),
    },
    "armor_plus_1": {
        "name": "+1 Armor", "type": ItemType.ARMOR, "rarity": Rarity.RARE, "properties": ("magical", "+1"),
        "weight": 15, "value": 1000, "description": "+1 bonus to AC", "effects": "ac_bonus:+1",
        "tags": ("magical", "armor", "enhancement"),
    },
    "shield_plus_1": {
        "name": "+1 Shield", "type": ItemType.ARMOR, "rarity": Rarity.UNCOMMON,
        "properties": ("shield", "magical", "+1"), "weight": 2.7, "value": 750,
        "description": "+3 AC bonus total (+2 base +1 enhancement)", "effects": "ac_bonus:+3",
        "tags": ("shield", "magical", "enhancement"),
    },
    "flaming_sword": {
        "name": "Flame Tongue", "type": ItemType.WEAPON, "rarity": Rarity.RARE,
        "properties": ("versatile", "martial", "magical", "attunement_required"), "weight": 1.4, "value": 2000,
        "description": "Longsword. Bonus action to ignite: sheds bright light and deals extra 2d6 fire damage",
        "effects": "fire_damage:2d6,light:40/40", "tags": ("melee", "sword", "magical", "fire", "light"),
    },
    "frost_brand": {
        "name": "Frost Brand", "type": ItemType.WEAPON, "rarity": Rarity.VERY_RARE,
        "properties": ("versatile", "martial", "magical", "attunement_required"), "weight": 1.4, "value": 5000,
        "description": "+1 sword. Extra 1d6 cold damage. Fire resistance. Extinguishes fires.",
        "effects": "attack_bonus:+1,damage_bonus:+1,cold_damage:1d6,fire_resistance",
        "tags": ("melee", "sword", "magical", "cold", "resistance"),
    },
    "cloak_of_protection": {
        "name": "Cloak of Protection", "type": ItemType.WONDROUS, "rarity": Rarity.UNCOMMON,
        "properties": ("magical", "attunement_required"), "weight": 1, "value": 500,
        "description": "+1 bonus to AC and saving throws while worn", "effects": "ac_bonus:+1,saving_throws:+1",
        "tags": ("cloak", "protection", "magical", "saves"),
    },
    "ring_of_protection": {
        "name": "Ring of Protection", "type": ItemType.WONDROUS, "rarity": Rarity.RARE,
        "properties": ("magical", "attunement_required"), "weight": 0, "value": 1000,
        "description": "+1 bonus to AC and saving throws while worn", "effects": "ac_bonus:+1,saving_throws:+1",
        "tags": ("ring", "protection", "magical", "saves"),
    },
    "bag_of_holding": {
        "name": "Bag of Holding", "type": ItemType.WONDROUS, "rarity": Rarity.UNCOMMON,
        "properties": ("magical",), "weight": 6.8, "value": 2000,
        "description": "This bag has an interior space considerably larger than its outside dimensions",
        "effects": "extra_storage:500", "tags": ("bag", "storage", "magical", "utility"),
    },
    "boots_of_speed": {
        "name": "Boots of Speed", "type": ItemType.WONDROUS, "rarity": Rarity.RARE,
        "properties": ("magical", "attunement_required"), "weight": 0.5, "value": 2000,
        "description": "Double speed for 10 minutes. Once per day.", "effects": "speed_double:10min,uses:1/day",
        "tags": ("boots", "speed", "magical", "movement"),
    },
    "gauntlets_of_ogre_power": {
        "name": "Gauntlets of Ogre Power", "type": ItemType.WONDROUS, "rarity": Rarity.UNCOMMON,
        "properties": ("magical", "attunement_required"), "weight": 0.9, "value": 1000,
        "description": "Your Strength score is 19 while you wear these gauntlets", "effects": "str_set:19",
        "tags": ("gauntlets", "strength", "magical", "enhancement"),
    },
}


def _build_catalog() -> dict[str, ItemTemplate]:
    catalog: dict[str, ItemTemplate] = {}
    sections: list[tuple[ItemType, dict[str, dict[str, Any]]]] = [
        (ItemType.WEAPON, _WEAPONS),
        (ItemType.ARMOR, _ARMOR),
        (ItemType.CONSUMABLE, _CONSUMABLES),
        (ItemType.MISC, _GEAR),
        (ItemType.WONDROUS, _MAGIC_ITEMS),
    ]
    for default_type, section in sections:
        for key, data in section.items():
            fields = {"type": default_type, "rarity": Rarity.COMMON, **data}
            catalog[key] = ItemTemplate(key=key, **fields)
    return catalog


ITEM_TEMPLATES: dict[str, ItemTemplate] = _build_catalog()
"""Every item template by key."""


# =============================================================================
# Starting Equipment
# =============================================================================

STARTING_KITS: dict[str, tuple[str, ...]] = {
    "fighter": ("longsword", "chain_mail", "shield"),
    "rogue": ("shortsword", "leather_armor", "thieves_tools"),
    "wizard": ("quarterstaff",),
    "cleric": ("mace", "scale_mail", "shield"),
    "barbarian": ("greataxe",),
    "bard": ("rapier", "leather_armor"),
    "druid": ("club", "leather_armor"),
    "monk": ("shortsword",),
    "paladin": ("longsword", "chain_mail", "shield"),
    "ranger": ("longbow", "shortsword", "leather_armor"),
    "sorcerer": ("quarterstaff",),
    "warlock": ("quarterstaff", "leather_armor"),
}
"""Template keys of each class kit; unknown classes get a club."""

_DEFAULT_KIT: tuple[str, ...] = ("club",)


def starting_equipment(klass: str) -> list[Item]:
    """Build the starting equipment of a class, with the kit already worn.

    Every class except monk also carries a spare dagger. The first weapon,
    the first body armor and the first shield are tagged as equipped.

    Args:
        klass: Class name (case-insensitive).

    Returns:
        New Item instances acquired by purchase.
    """
    name = klass.lower()
    keys = list(STARTING_KITS.get(name, _DEFAULT_KIT))
    if name != "monk":
        keys.append("dagger")

    items = [
        ITEM_TEMPLATES[key].instantiate(AcquisitionMethod.PURCHASE, "player")
        for key in keys
    ]

    weapon = next((item for item in items if item.type == ItemType.WEAPON), None)
    armor = next(
        (item for item in items if item.type == ItemType.ARMOR and not item.is_shield),
        None,
    )
    shield = next((item for item in items if item.is_shield), None)
    for item in (weapon, armor, shield):
        if item is not None:
            item.mark_equipped()
    return items


__all__ = [
    "EQUIPPED_TAG",
    "ATTUNED_PROPERTY",
    "ATTUNEMENT_REQUIRED",
    "STACKABLE_TAG",
    "SHIELD_PROPERTY",
    "EQUIPPABLE_TYPES",
    "ItemUses",
    "ItemTemplate",
    "Item",
    "generate_item_id",
    "ITEM_TEMPLATES",
    "STARTING_KITS",
    "starting_equipment",
]
