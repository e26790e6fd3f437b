"""Miner equipment: inventories of hand and head items, equipping and remelting."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List

from .constants import MAX_ITEM_LEVEL, SEED_EQUIPMENT, SEED_EQUIPMENT_INVENTORY
from .errors import GameError, MoeError, require
from .rules import (
    SLOT_HAND,
    SLOT_HEAD,
    derive_address,
    hand_power_bps_by_tier,
    head_discount_bps_by_tier,
    remelt_cost_ess,
)
from .state import Config, EquipmentInventoryState, EquipmentState, MinerState
from .tokens import TokenAccount, token_transfer

U16_MAX = 2**16 - 1

REMELT_INPUT_COUNT = 4


class EquipmentSlotKind(Enum):
    """Where an item is worn on a miner."""

    HAND = 0
    HEAD = 1


def _bucket_name(slot: EquipmentSlotKind, remelted: bool, broken: bool) -> str:
    state = "broken" if broken else "new"
    part = "hand" if slot is EquipmentSlotKind.HAND else "head"
    suffix = "_remelted" if remelted else ""
    return f"{state}_{part}{suffix}"


def _bucket(
    inventory: EquipmentInventoryState, slot: EquipmentSlotKind, remelted: bool, broken: bool
) -> List[int]:
    return getattr(inventory, _bucket_name(slot, remelted, broken))


def _index(level: int) -> int:
    require(1 <= level <= MAX_ITEM_LEVEL, MoeError.INVALID_BASE_LEVEL)
    return level


def _add(counts: List[int], index: int, amount: int) -> None:
    counts[index] = min(counts[index] + amount, U16_MAX)


@dataclass(frozen=True)
class _SlotRules:
    kind: EquipmentSlotKind
    code: int
    level_attr: str
    bonus_attr: str
    remelted_attr: str
    bonus: Callable[[int], int]


_HAND = _SlotRules(
    kind=EquipmentSlotKind.HAND,
    code=SLOT_HAND,
    level_attr="hand_level",
    bonus_attr="hand_power_bps",
    remelted_attr="hand_is_remelted",
    bonus=hand_power_bps_by_tier,
)

_HEAD = _SlotRules(
    kind=EquipmentSlotKind.HEAD,
    code=SLOT_HEAD,
    level_attr="head_level",
    bonus_attr="head_recharge_discount_bps",
    remelted_attr="head_is_remelted",
    bonus=head_discount_bps_by_tier,
)


def inventory_init(owner: bytes) -> EquipmentInventoryState:
    """Create an empty equipment inventory for ``owner``."""
    return EquipmentInventoryState(
        owner=owner,
        address=derive_address(SEED_EQUIPMENT_INVENTORY, owner),
    )


def grant_item(
    config: Config,
    admin: bytes,
    inventory: EquipmentInventoryState,
    slot: EquipmentSlotKind,
    level: int,
    amount: int,
    remelted: bool,
    broken: bool,
) -> None:
    """Let the admin add ``amount`` items of one kind and level to an inventory."""
    require(config.admin == admin, MoeError.UNAUTHORIZED)
    require(amount > 0, MoeError.NO_ITEM_AVAILABLE)
    index = _index(level)
    _add(_bucket(inventory, EquipmentSlotKind(slot), remelted, broken), index, amount)


def equipment_init(owner: bytes, miner: MinerState) -> EquipmentState:
    """Create the empty equipment record of a miner owned by ``owner``."""
    require(miner.owner == owner, MoeError.UNAUTHORIZED)
    require(not miner.listed, MoeError.ASSET_LISTED_LOCKED)
    return EquipmentState(
        owner=owner,
        miner=miner.address,
        address=derive_address(SEED_EQUIPMENT, miner.address),
    )


def _check_access(
    owner: bytes,
    miner: MinerState,
    equipment: EquipmentState,
    inventory: EquipmentInventoryState,
) -> None:
    require(inventory.owner == owner, MoeError.UNAUTHORIZED)
    require(miner.owner == owner, MoeError.UNAUTHORIZED)
    require(equipment.owner == owner, MoeError.UNAUTHORIZED)
    require(equipment.miner == miner.address, MoeError.INVALID_MINER_REF)
    require(not miner.listed, MoeError.ASSET_LISTED_LOCKED)


def _replace(
    rules: _SlotRules,
    owner: bytes,
    miner: MinerState,
    equipment: EquipmentState,
    inventory: EquipmentInventoryState,
    new_level: int,
) -> None:
    _check_access(owner, miner, equipment, inventory)

    current = getattr(equipment, rules.level_attr)
    require(new_level > current, MoeError.INVALID_UPGRADE)

    index = _index(new_level)
    plain = _bucket(inventory, rules.kind, remelted=False, broken=False)
    remelted = _bucket(inventory, rules.kind, remelted=True, broken=False)
    if plain[index] > 0:
        source, was_remelted = plain, False
    elif remelted[index] > 0:
        source, was_remelted = remelted, True
    else:
        raise GameError(MoeError.NO_ITEM_AVAILABLE)

    # Validate the tier before touching the inventory so a failure changes nothing.
    bonus = rules.bonus(new_level)

    source[index] -= 1
    if current > 0:
        old_remelted = getattr(equipment, rules.remelted_attr)
        _add(_bucket(inventory, rules.kind, old_remelted, broken=True), _index(current), 1)

    setattr(equipment, rules.level_attr, new_level)
    setattr(equipment, rules.bonus_attr, bonus)
    setattr(equipment, rules.remelted_attr, was_remelted)


def _remelt(
    rules: _SlotRules,
    owner: bytes,
    miner: MinerState,
    equipment: EquipmentState,
    inventory: EquipmentInventoryState,
    user_account: TokenAccount,
    rewards_vault: TokenAccount,
    base_level: int,
) -> None:
    cost = remelt_cost_ess(rules.code, base_level)
    index = _index(base_level)
    require(base_level < MAX_ITEM_LEVEL, MoeError.INVALID_BASE_LEVEL)

    _check_access(owner, miner, equipment, inventory)

    plain = _bucket(inventory, rules.kind, remelted=False, broken=False)
    broken = _bucket(inventory, rules.kind, remelted=False, broken=True)
    require(plain[index] + broken[index] >= REMELT_INPUT_COUNT, MoeError.NOT_ENOUGH_FOR_REMELT)

    new_level = base_level + 1
    require(new_level > getattr(equipment, rules.level_attr), MoeError.INVALID_UPGRADE)
    new_index = _index(new_level)

    token_transfer(user_account, rewards_vault, owner, cost)

    take_broken = min(broken[index], REMELT_INPUT_COUNT)
    broken[index] -= take_broken
    plain[index] -= REMELT_INPUT_COUNT - take_broken

    _add(_bucket(inventory, rules.kind, remelted=True, broken=False), new_index, 1)


def replace_hand(
    owner: bytes,
    miner: MinerState,
    equipment: EquipmentState,
    inventory: EquipmentInventoryState,
    new_level: int,
) -> None:
    """Equip a higher-level hand item from the inventory; the old one becomes broken."""
    _replace(_HAND, owner, miner, equipment, inventory, new_level)


def replace_head(
    owner: bytes,
    miner: MinerState,
    equipment: EquipmentState,
    inventory: EquipmentInventoryState,
    new_level: int,
) -> None:
    """Equip a higher-level head item from the inventory; the old one becomes broken."""
    _replace(_HEAD, owner, miner, equipment, inventory, new_level)


def remelt_hand(
    owner: bytes,
    miner: MinerState,
    equipment: EquipmentState,
    inventory: EquipmentInventoryState,
    user_account: TokenAccount,
    rewards_vault: TokenAccount,
    base_level: int,
) -> None:
    """Melt four hand items of ``base_level`` into one remelted item a level higher."""
    _remelt(_HAND, owner, miner, equipment, inventory, user_account, rewards_vault, base_level)


def remelt_head(
    owner: bytes,
    miner: MinerState,
    equipment: EquipmentState,
    inventory: EquipmentInventoryState,
    user_account: TokenAccount,
    rewards_vault: TokenAccount,
    base_level: int,
) -> None:
    """Melt four head items of ``base_level`` into one remelted item a level higher."""
    _remelt(_HEAD, owner, miner, equipment, inventory, user_account, rewards_vault, base_level)