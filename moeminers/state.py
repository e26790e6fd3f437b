"""Account records of the game: config, assets, lootboxes, economy and listings."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar, List

from .constants import MAX_ITEM_LEVEL

DEFAULT_PUBKEY = bytes(32)


def _levels() -> List[int]:
    return [0] * (MAX_ITEM_LEVEL + 1)


def _by_rarity() -> List[int]:
    return [0] * 5


@dataclass
class AffinityResult:
    user: bytes = DEFAULT_PUBKEY
    land_element: int = 0
    miner_element: int = 0
    bps: int = 0
    bump: int = 0
    address: bytes = DEFAULT_PUBKEY

    LEN: ClassVar[int] = 8 + 32 + 1 + 1 + 2 + 1


@dataclass
class Config:
    admin: bytes = DEFAULT_PUBKEY
    paused: bool = False
    next_miner_id: int = 0
    next_land_id: int = 0
    next_listing_id: int = 0
    bump: int = 0
    address: bytes = DEFAULT_PUBKEY

    LEN: ClassVar[int] = 8 + 32 + 1 + 8 + 8 + 8 + 1


@dataclass(frozen=True)
class Allocation7:
    """Split of a spend across seven destinations, in basis points."""

    burn_bps: int = 0
    liquidity_bps: int = 0
    mining_pool_bps: int = 0
    marketing_bps: int = 0
    dev_infra_bps: int = 0
    forges_bps: int = 0
    treasury_bps: int = 0

    def sum(self) -> int:
        return (
            self.burn_bps
            + self.liquidity_bps
            + self.mining_pool_bps
            + self.marketing_bps
            + self.dev_infra_bps
            + self.forges_bps
            + self.treasury_bps
        )


@dataclass(frozen=True)
class Allocation3:
    """Split of a recharge across burn, forges and treasury, in basis points."""

    burn_bps: int = 0
    forges_bps: int = 0
    treasury_bps: int = 0

    def sum(self) -> int:
        return self.burn_bps + self.forges_bps + self.treasury_bps


@dataclass
class Totals7:
    burn: int = 0
    liquidity: int = 0
    mining_pool: int = 0
    marketing: int = 0
    dev_infra: int = 0
    forges: int = 0
    treasury: int = 0


@dataclass
class Totals3:
    burn: int = 0
    forges: int = 0
    treasury: int = 0


@dataclass
class EconomyConfig:
    admin: bytes = DEFAULT_PUBKEY
    ess_mint: bytes = DEFAULT_PUBKEY
    recipient_wallet: bytes = DEFAULT_PUBKEY
    rewards_authority: bytes = DEFAULT_PUBKEY
    rewards_vault: bytes = DEFAULT_PUBKEY

    buy: Allocation7 = field(default_factory=Allocation7)
    trade_fee: Allocation7 = field(default_factory=Allocation7)
    send: Allocation7 = field(default_factory=Allocation7)
    recharge: Allocation3 = field(default_factory=Allocation3)

    totals_buy: Totals7 = field(default_factory=Totals7)
    totals_trade_fee: Totals7 = field(default_factory=Totals7)
    totals_send: Totals7 = field(default_factory=Totals7)
    totals_recharge: Totals3 = field(default_factory=Totals3)

    bump: int = 0
    address: bytes = DEFAULT_PUBKEY

    LEN: ClassVar[int] = (
        8 + 32 * 5 + (2 * 7) * 3 + (2 * 3) + (8 * 7) * 3 + (8 * 3) + 1
    )


@dataclass
class EquipmentState:
    owner: bytes = DEFAULT_PUBKEY
    miner: bytes = DEFAULT_PUBKEY

    hand_level: int = 0
    hand_power_bps: int = 0
    hand_is_remelted: bool = False

    head_level: int = 0
    head_recharge_discount_bps: int = 0
    head_is_remelted: bool = False

    bump: int = 0
    address: bytes = DEFAULT_PUBKEY

    LEN: ClassVar[int] = 32 + 32 + 1 + 2 + 1 + 1 + 2 + 1 + 1


@dataclass
class EquipmentInventoryState:
    """Item counts per level (index 0 unused) for each equipment bucket."""

    owner: bytes = DEFAULT_PUBKEY

    new_hand: List[int] = field(default_factory=_levels)
    new_head: List[int] = field(default_factory=_levels)

    broken_hand: List[int] = field(default_factory=_levels)
    broken_head: List[int] = field(default_factory=_levels)

    new_hand_remelted: List[int] = field(default_factory=_levels)
    new_head_remelted: List[int] = field(default_factory=_levels)

    broken_hand_remelted: List[int] = field(default_factory=_levels)
    broken_head_remelted: List[int] = field(default_factory=_levels)

    bump: int = 0
    address: bytes = DEFAULT_PUBKEY

    LEN: ClassVar[int] = 32 + (8 * (MAX_ITEM_LEVEL + 1) * 2) + 1


@dataclass
class GlobalMiningState:
    admin: bytes = DEFAULT_PUBKEY

    week_index: int = 0
    week_start_ts: int = 0

    tick_len_sec: int = 0
    weekly_pool_amount: int = 0
    total_ep_tw: int = 0

    frozen: bool = False
    frozen_week_index: int = 0
    frozen_weekly_pool_amount: int = 0
    frozen_total_ep_tw: int = 0

    bump: int = 0
    address: bytes = DEFAULT_PUBKEY

    LEN: ClassVar[int] = 8 + 32 + 8 + 8 + 4 + 8 + 16 + 1 + 8 + 8 + 16 + 1


@dataclass
class MinerMiningState:
    owner: bytes = DEFAULT_PUBKEY
    miner: bytes = DEFAULT_PUBKEY
    week_index: int = 0

    last_tick: int = 0
    ep_tw: int = 0
    claimed: bool = False

    bump: int = 0
    address: bytes = DEFAULT_PUBKEY

    LEN: ClassVar[int] = 8 + 32 + 32 + 8 + 4 + 16 + 1 + 1


@dataclass
class LandState:
    id: int = 0
    owner: bytes = DEFAULT_PUBKEY
    rarity: int = 0
    element: int = 0
    slots: int = 0
    listed: bool = False
    allocated_miners_count: int = 0
    created_at: int = 0
    bump: int = 0
    address: bytes = DEFAULT_PUBKEY

    LEN: ClassVar[int] = 8 + 8 + 32 + 1 + 1 + 1 + 1 + 2 + 8 + 1


class ListingAssetKind(IntEnum):
    MINER = 1
    LAND = 2
    EQUIPMENT_INVENTORY = 3


class EquipmentInventoryBucket(IntEnum):
    NEW_HAND = 1
    NEW_HEAD = 2
    BROKEN_HAND = 3
    BROKEN_HEAD = 4
    NEW_HAND_REMELTED = 5
    NEW_HEAD_REMELTED = 6
    BROKEN_HAND_REMELTED = 7
    BROKEN_HEAD_REMELTED = 8


@dataclass
class ListingState:
    id: int = 0
    seller: bytes = DEFAULT_PUBKEY
    active: bool = False
    asset_kind: int = 0
    price_ess: int = 0
    created_at: int = 0

    miner: bytes = DEFAULT_PUBKEY
    land: bytes = DEFAULT_PUBKEY

    inventory_owner: bytes = DEFAULT_PUBKEY
    equipment_bucket: int = 0
    equipment_level: int = 0
    equipment_amount: int = 0

    bump: int = 0
    address: bytes = DEFAULT_PUBKEY

    LEN: ClassVar[int] = 8 + 8 + 32 + 1 + 1 + 8 + 8 + 32 + 32 + 32 + 1 + 1 + 2 + 1


@dataclass
class LootboxLandState:
    lootbox_id: int = 0
    owner: bytes = DEFAULT_PUBKEY

    committed: bool = False
    revealed: bool = False

    commit_slot: int = 0
    commitment: bytes = bytes(32)

    rarity: int = 0
    element: int = 0
    slots: int = 0

    bump: int = 0
    address: bytes = DEFAULT_PUBKEY

    LEN: ClassVar[int] = 8 + 8 + 32 + 1 + 1 + 8 + 32 + 1 + 1 + 1 + 1


@dataclass
class LootboxMinerState:
    lootbox_id: int = 0
    owner: bytes = DEFAULT_PUBKEY

    committed: bool = False
    revealed: bool = False

    commit_slot: int = 0
    commitment: bytes = bytes(32)

    rarity: int = 0
    element: int = 0
    hash_base: int = 0

    face: int = 0
    helmet: int = 0
    backpack: int = 0
    jacket: int = 0
    item: int = 0
    background: int = 0

    bump: int = 0
    address: bytes = DEFAULT_PUBKEY

    LEN: ClassVar[int] = (
        8 + 8 + 32 + 1 + 1 + 8 + 32 + 1 + 1 + 8 + 1 + 1 + 1 + 1 + 1 + 1 + 1
    )


@dataclass
class MinerState:
    id: int = 0
    owner: bytes = DEFAULT_PUBKEY
    rarity: int = 0
    element: int = 0
    hash_base: int = 0
    face: int = 0
    helmet: int = 0
    backpack: int = 0
    jacket: int = 0
    item: int = 0
    background: int = 0

    allocated_land: bytes = DEFAULT_PUBKEY
    listed: bool = False

    created_at: int = 0
    bump: int = 0
    address: bytes = DEFAULT_PUBKEY

    LEN: ClassVar[int] = (
        8 + 8 + 32 + 1 + 1 + 8 + 1 + 1 + 1 + 1 + 1 + 1 + 32 + 1 + 8 + 1
    )


@dataclass
class MinerProgress:
    miner: bytes = DEFAULT_PUBKEY
    owner: bytes = DEFAULT_PUBKEY
    level: int = 0
    exp: int = 0
    last_exp_claim_ts: int = 0
    bump: int = 0
    address: bytes = DEFAULT_PUBKEY

    LEN: ClassVar[int] = 8 + 32 + 32 + 2 + 8 + 8 + 1


@dataclass
class ProgressionConfig:
    admin: bytes = DEFAULT_PUBKEY

    mining_window_secs: int = 0
    max_accrual_windows: int = 0
    linear_hash_k_bps: int = 0

    max_level_by_rarity: List[int] = field(default_factory=_by_rarity)

    exp_base_by_rarity: List[int] = field(default_factory=_by_rarity)
    exp_growth_bps: int = 0

    ess_base_cost_by_rarity: List[int] = field(default_factory=_by_rarity)
    ess_growth_bps: int = 0

    bump: int = 0
    address: bytes = DEFAULT_PUBKEY

    LEN: ClassVar[int] = (
        8 + 32 + 8 + 2 + 2 + (2 * 5) + (8 * 5) + 2 + (8 * 5) + 2 + 1
    )