"""Inventory management: carrying, stacking, consumables and equipment.

The public operations never raise rules errors to their callers: a
failure comes back as an InventoryResult with ``success=False`` and the
character untouched. Successful operations return a message ready for
narration.

Example:
    >>> potion = create_item_from_template("healing_potion")
    >>> add_item(hero, potion).message
    'Added Potion of Healing to inventory.'
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, TypeVar, cast

from pydantic import BaseModel

from dnd_rules.core.config import get_settings
from dnd_rules.core.exceptions import DndRulesError, NotFoundError, PreconditionFailedError, RulesError
from dnd_rules.core.logging import get_logger
from dnd_rules.engine.dice import DiceRoller
from dnd_rules.models.character import Character
from dnd_rules.models.effects import Heal
from dnd_rules.models.enums import AcquisitionMethod, ItemType, Rarity
from dnd_rules.models.items import ITEM_TEMPLATES, Item, ItemUses, starting_equipment


logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class InventoryResult(BaseModel):
    """Outcome of an inventory operation.

    Attributes:
        success: Whether the operation succeeded.
        message: Narration of what happened.
        item: The item affected, if any.
        healing: Hit points restored by a consumable.
    """

    success: bool = True
    message: str
    item: Item | None = None
    healing: int = 0

    @classmethod
    def failure(cls, error: DndRulesError) -> InventoryResult:
        """Build a failed result from a rules error."""
        return cls(success=False, message=error.message)


def reports_failures(operation: F) -> F:
    """Return rules errors raised by an inventory operation as failed results.

    Operations check every precondition before mutating anything, so a
    failed result always leaves the character as it was.
    """

    @functools.wraps(operation)
    def wrapper(*args: Any, **kwargs: Any) -> InventoryResult:
        try:
            return operation(*args, **kwargs)
        except RulesError as e:
            logger.warning("Inventory operation failed", operation=operation.__name__, error=e.message)
            return InventoryResult.failure(e)

    return cast(F, wrapper)


# =============================================================================
# Creation
# =============================================================================


def create_item_from_template(
    template_key: str,
    acquisition_method: AcquisitionMethod | str = AcquisitionMethod.LOOT,
    location_state: str = "world",
    provenance: str = "Generated",
) -> Item:
    """Instantiate a catalog item with a unique id.

    Raises:
        NotFoundError: If no template has that key.
    """
    template = ITEM_TEMPLATES.get(template_key)
    if template is None:
        raise NotFoundError(
            f"Item template {template_key} not found.",
            kind="template",
            identifier=template_key,
        )
    return template.instantiate(AcquisitionMethod(acquisition_method), location_state, provenance)


def get_starting_equipment(klass: str) -> list[Item]:
    """Starting kit of a class, with weapon, armor and shield equipped."""
    return starting_equipment(klass)


# =============================================================================
# Weight and Value
# =============================================================================


class CarryingCapacity(BaseModel):
    """Carrying thresholds in kilograms."""

    normal: float
    push_drag_lift: float
    encumbered: float
    heavily_encumbered: float


def carrying_capacity(character: Character) -> float:
    """Maximum carried weight: Strength times the carry factor (kg)."""
    return character.ability_score("STR") * get_settings().game.carry_factor_kg


def carrying_capacity_tiers(character: Character) -> CarryingCapacity:
    normal = carrying_capacity(character)
    return CarryingCapacity(
        normal=normal,
        push_drag_lift=normal * 2,
        encumbered=normal * 0.67,
        heavily_encumbered=normal * 0.33,
    )


def get_total_inventory_weight(character: Character) -> float:
    return sum(item.weight for item in character.inventory)


def calculate_inventory_value(character: Character) -> float:
    return sum(item.value for item in character.inventory)


# =============================================================================
# Stacks
# =============================================================================


def _merge_into(stack: Item, item: Item) -> int:
    """Merge ``item`` into ``stack``; returns the charges added."""
    assert stack.uses is not None and item.uses is not None
    added = item.uses.current
    # Grow max first so current never exceeds it
    stack.uses.max += item.uses.max
    stack.uses.current += added
    stack.weight += item.weight
    stack.value += item.value
    stack.quantity += item.quantity
    stack.stack_ids.extend([item.id, *item.stack_ids])
    return added


def _release_id(stack: Item, unit_id: str) -> None:
    if unit_id in stack.stack_ids:
        stack.stack_ids.remove(unit_id)
    elif stack.stack_ids:
        # The stack's own id leaves; the next merged unit takes over
        stack.id = stack.stack_ids.pop(0)


def _split_unit(stack: Item, unit_id: str, *, charges: int | None = None) -> Item:
    """Take one unit off a stack and return it as an item of its own.

    The unit leaves with its share of weight, value and maximum charges,
    and with ``charges`` remaining charges (its full share when None).
    ``unit_id`` stops resolving to the stack.
    """
    units = stack.quantity
    unit_weight = stack.weight / units
    unit_value = stack.value / units
    unit_uses = None
    if stack.uses is not None:
        unit_max = stack.uses.max // units
        taken = min(unit_max, stack.uses.current) if charges is None else charges
        unit_uses = ItemUses(max=unit_max, current=taken, recharge=stack.uses.recharge)
        stack.uses.current -= taken
        stack.uses.max -= unit_max

    _release_id(stack, unit_id)
    stack.quantity = units - 1
    stack.weight = unit_weight * stack.quantity
    stack.value = unit_value * stack.quantity
    return stack.model_copy(
        deep=True,
        update={
            "id": unit_id,
            "quantity": 1,
            "stack_ids": [],
            "weight": unit_weight,
            "value": unit_value,
            "uses": unit_uses,
            "location_state": "world",
        },
    )


# =============================================================================
# Adding and Removing
# =============================================================================


def _require_item(character: Character, item_id: str) -> Item:
    item = character.find_item(item_id)
    if item is None:
        raise NotFoundError(
            f"Item with ID {item_id} not found.",
            kind="item",
            identifier=item_id,
            character=character.name,
        )
    return item


@reports_failures
def add_item(character: Character, item: Item) -> InventoryResult:
    """Add an item, merging it into an existing stack when possible.

    A stackable item merges with a carried item of the same name and
    rarity when both have uses; the stack's uses, weight and value grow,
    and the merged item's id keeps resolving to the stack.

    Fails when the item would exceed carrying capacity.
    """
    if get_total_inventory_weight(character) + item.weight > carrying_capacity(character):
        raise PreconditionFailedError(
            f"Cannot carry {item.name}. Exceeds carrying capacity.",
            reason="carrying_capacity",
            character=character.name,
        )

    if item.is_stackable and item.uses is not None:
        existing = next(
            (
                carried
                for carried in character.inventory
                if carried.name == item.name and carried.rarity == item.rarity and carried.uses is not None
            ),
            None,
        )
        if existing is not None:
            added = _merge_into(existing, item)
            logger.debug("Item stacked", character=character.name, item=item.name, added=added)
            return InventoryResult(message=f"Added {added} {item.name}(s) to existing stack.", item=existing)

    item.location_state = f"player:{character.name}"
    character.inventory.append(item)
    logger.debug("Item added", character=character.name, item=item.name, item_id=item.id)
    return InventoryResult(message=f"Added {item.name} to inventory.", item=item)


@reports_failures
def remove_item(character: Character, item_id: str) -> InventoryResult:
    """Remove an item from the inventory.

    When ``item_id`` names one unit of a stack, only that unit leaves,
    taking its weight, value and charges with it.
    """
    item = _require_item(character, item_id)
    if item.quantity > 1:
        unit = _split_unit(item, item_id)
        logger.info("Item removed", character=character.name, item=item.name, remaining=item.quantity)
        return InventoryResult(message=f"Removed {unit.name} from inventory.", item=unit)

    character.inventory.remove(item)
    item.location_state = "world"
    if item.is_equipped:
        item.mark_unequipped()
        character.refresh_armor_class()
    logger.info("Item removed", character=character.name, item=item.name)
    return InventoryResult(message=f"Removed {item.name} from inventory.", item=item)


# =============================================================================
# Consumables
# =============================================================================


@reports_failures
def use_consumable(character: Character, item_id: str, *, dice: DiceRoller) -> InventoryResult:
    """Use one charge of a consumable, applying its healing.

    The item is removed once its last charge is spent. On a stack, a unit
    whose charges are all spent leaves the stack with its weight and value.
    """
    item = _require_item(character, item_id)
    if item.type != ItemType.CONSUMABLE or item.uses is None:
        raise PreconditionFailedError(
            f"{item.name} is not consumable.",
            reason="not_consumable",
            character=character.name,
        )
    if item.uses.current <= 0:
        raise PreconditionFailedError(
            f"{item.name} has no uses remaining.",
            reason="no_uses",
            character=character.name,
        )

    healed = 0
    for heal in item.effects_of(Heal):
        rolled = dice.roll_total(heal.dice) + (character.level if heal.per_level else 0)
        healed += character.heal(rolled)

    item.uses.current -= 1
    if item.uses.current <= 0:
        character.inventory.remove(item)
    elif item.quantity > 1 and item.uses.current <= item.uses.max - item.uses.max // item.quantity:
        _split_unit(item, item_id, charges=0)

    message = f"Used {item.name}. {item.uses.current} uses remaining."
    if healed:
        message += f" Healed for {healed} HP."
    logger.info("Consumable used", character=character.name, item=item.name, healed=healed)
    return InventoryResult(message=message, item=item, healing=healed)


# =============================================================================
# Equipment
# =============================================================================


def _slot_rivals(character: Character, item: Item) -> list[Item]:
    """Equipped items that occupy the same slot as ``item``."""
    if item.type == ItemType.WEAPON:
        return [other for other in character.equipped_items() if other.type == ItemType.WEAPON]
    if item.type == ItemType.ARMOR:
        return [
            other
            for other in character.equipped_items()
            if other.type == ItemType.ARMOR and other.is_shield == item.is_shield
        ]
    return []


@reports_failures
def equip_item(character: Character, item_id: str, attunement_limit: int | None = None) -> InventoryResult:
    """Equip an item, attuning to it first when it requires attunement.

    Equipping a weapon replaces the equipped weapon; body armor replaces
    body armor and a shield replaces a shield. Armor class is refreshed.
    Fails when the item cannot be equipped or the attunement limit is
    reached.

    Args:
        character: The character.
        item_id: Id of a carried item.
        attunement_limit: Maximum attuned items, the configured limit when None.

    Returns:
        The InventoryResult.
    """
    item = _require_item(character, item_id)
    if attunement_limit is None:
        attunement_limit = get_settings().game.attunement_limit

    if not item.is_equippable:
        raise PreconditionFailedError(
            f"{item.name} cannot be equipped.",
            reason="not_equippable",
            character=character.name,
        )

    messages = []
    if item.requires_attunement and not item.is_attuned:
        if len(character.attuned_items()) >= attunement_limit:
            raise PreconditionFailedError(
                f"Cannot attune to {item.name}. Maximum of {attunement_limit} attuned items.",
                reason="attunement_limit",
                character=character.name,
            )
        item.mark_attuned()
        messages.append(f"Successfully attuned to {item.name}.")

    for rival in _slot_rivals(character, item):
        if rival is not item:
            rival.mark_unequipped()
    item.mark_equipped()
    character.refresh_armor_class()
    messages.append(f"Equipped {item.name}.")

    logger.info("Item equipped", character=character.name, item=item.name, ac=character.ac)
    return InventoryResult(message=" ".join(messages), item=item)


@reports_failures
def unequip_item(character: Character, item_id: str) -> InventoryResult:
    """Unequip a carried item. Attunement is kept."""
    item = _require_item(character, item_id)
    item.mark_unequipped()
    character.refresh_armor_class()
    return InventoryResult(message=f"Unequipped {item.name}.", item=item)


# =============================================================================
# Loot and Search
# =============================================================================


def generate_random_loot(
    level: int,
    rarity: Rarity | str = Rarity.COMMON,
    *,
    dice: DiceRoller,
) -> list[Item]:
    """Draw one to three items of a rarity, with replacement.

    Returns:
        New items lying in the world, or an empty list when no template
        has that rarity.
    """
    rarity = Rarity(rarity)
    pool = [key for key, template in ITEM_TEMPLATES.items() if template.rarity == rarity]
    if not pool:
        return []
    count = dice.randint(1, 3)
    return [
        create_item_from_template(dice.choice(pool), AcquisitionMethod.LOOT, "world", f"Level {level} loot")
        for _ in range(count)
    ]


def find_items_by_type(character: Character, item_type: ItemType | str) -> list[Item]:
    item_type = ItemType(item_type)
    return [item for item in character.inventory if item.type == item_type]


def get_equippable_items(character: Character) -> list[Item]:
    return [item for item in character.inventory if item.is_equippable]


def search_inventory(character: Character, query: str) -> list[Item]:
    """Case-insensitive search over name, description, tags and type."""
    needle = query.lower()
    return [
        item
        for item in character.inventory
        if needle in item.name.lower()
        or needle in item.description.lower()
        or any(needle in tag.lower() for tag in item.tags)
        or needle in item.type.value
    ]


__all__ = [
    "InventoryResult",
    "CarryingCapacity",
    "reports_failures",
    "create_item_from_template",
    "get_starting_equipment",
    "carrying_capacity",
    "carrying_capacity_tiers",
    "get_total_inventory_weight",
    "calculate_inventory_value",
    "add_item",
    "remove_item",
    "use_consumable",
    "equip_item",
    "unequip_item",
    "generate_random_loot",
    "find_items_by_type",
    "get_equippable_items",
    "search_inventory",
]
