"""Marketplace: list, cancel and buy miners, lands and equipment for ESS."""

from dataclasses import dataclass
from typing import List, Tuple

from .constants import (
    BPS_DENOM,
    MARKETPLACE_FEE_BPS,
    MAX_ITEM_LEVEL,
    SEED_LISTING,
    U64_MAX,
    u64_le_bytes,
)
from .economy import mul_bps
from .errors import GameError, MoeError, require
from .rules import derive_address
from .state import (
    DEFAULT_PUBKEY,
    Config,
    EconomyConfig,
    EquipmentInventoryBucket,
    EquipmentInventoryState,
    EquipmentState,
    LandState,
    ListingAssetKind,
    ListingState,
    MinerMiningState,
    MinerProgress,
    MinerState,
)
from .tokens import Mint, TokenAccount, TokenError, token_transfer

U16_MAX = 2**16 - 1

_BUCKET_FIELDS = {
    EquipmentInventoryBucket.NEW_HAND: "new_hand",
    EquipmentInventoryBucket.NEW_HEAD: "new_head",
    EquipmentInventoryBucket.BROKEN_HAND: "broken_hand",
    EquipmentInventoryBucket.BROKEN_HEAD: "broken_head",
    EquipmentInventoryBucket.NEW_HAND_REMELTED: "new_hand_remelted",
    EquipmentInventoryBucket.NEW_HEAD_REMELTED: "new_head_remelted",
    EquipmentInventoryBucket.BROKEN_HAND_REMELTED: "broken_hand_remelted",
    EquipmentInventoryBucket.BROKEN_HEAD_REMELTED: "broken_head_remelted",
}

_TOTAL_FIELDS = (
    ("burn", "burn_bps"),
    ("liquidity", "liquidity_bps"),
    ("mining_pool", "mining_pool_bps"),
    ("marketing", "marketing_bps"),
    ("dev_infra", "dev_infra_bps"),
    ("forges", "forges_bps"),
    ("treasury", "treasury_bps"),
)


@dataclass
class BuyAccounts:
    """The parties and token accounts involved in a purchase."""

    buyer: bytes
    seller: bytes
    economy: EconomyConfig
    ess_mint: Mint
    buyer_account: TokenAccount
    seller_account: TokenAccount
    recipient_account: TokenAccount


def marketplace_fee(price: int) -> int:
    """Marketplace fee taken from ``price``, rounded down."""
    fee = price * MARKETPLACE_FEE_BPS // BPS_DENOM
    require(fee <= U64_MAX, MoeError.MATH_OVERFLOW)
    return fee


def _bucket_counts(inventory: EquipmentInventoryState, bucket: int) -> List[int]:
    try:
        kind = EquipmentInventoryBucket(bucket)
    except ValueError:
        raise GameError(MoeError.EQUIPMENT_BUCKET_MISMATCH) from None
    return getattr(inventory, _BUCKET_FIELDS[kind])


def _locate(
    inventory: EquipmentInventoryState, bucket: int, level: int, amount: int
) -> Tuple[List[int], int]:
    require(amount > 0, MoeError.INVALID_EQUIPMENT_AMOUNT)
    require(1 <= level <= MAX_ITEM_LEVEL, MoeError.INVALID_BASE_LEVEL)
    return _bucket_counts(inventory, bucket), level


def reserve_inventory(
    inventory: EquipmentInventoryState, bucket: int, level: int, amount: int
) -> None:
    """Take ``amount`` items of one bucket and level out of an inventory."""
    counts, index = _locate(inventory, bucket, level, amount)
    require(counts[index] >= amount, MoeError.INSUFFICIENT_EQUIPMENT_INVENTORY)
    counts[index] -= amount


def release_inventory(
    inventory: EquipmentInventoryState, bucket: int, level: int, amount: int
) -> None:
    """Put ``amount`` items of one bucket and level into an inventory."""
    counts, index = _locate(inventory, bucket, level, amount)
    counts[index] = min(counts[index] + amount, U16_MAX)


def _new_listing(
    config: Config, seller: bytes, kind: ListingAssetKind, price_ess: int, now_ts: int
) -> ListingState:
    require(price_ess > 0, MoeError.LISTING_PRICE_INVALID)
    listing_id = config.next_listing_id
    return ListingState(
        id=listing_id,
        seller=seller,
        active=True,
        asset_kind=int(kind),
        price_ess=price_ess,
        created_at=now_ts,
        miner=DEFAULT_PUBKEY,
        land=DEFAULT_PUBKEY,
        inventory_owner=DEFAULT_PUBKEY,
        equipment_bucket=0,
        equipment_level=0,
        equipment_amount=0,
        address=derive_address(SEED_LISTING, u64_le_bytes(listing_id)),
    )


def _advance(config: Config) -> None:
    config.next_listing_id = min(config.next_listing_id + 1, U64_MAX)


def create_miner_listing(
    config: Config, seller: bytes, miner: MinerState, price_ess: int, now_ts: int
) -> ListingState:
    """List an unassigned miner for sale; it stays locked while listed."""
    require(miner.owner == seller, MoeError.UNAUTHORIZED)
    require(not miner.listed, MoeError.ASSET_ALREADY_LISTED)
    require(
        miner.allocated_land == DEFAULT_PUBKEY,
        MoeError.MINER_MUST_BE_UNASSIGNED_FOR_LISTING,
    )
    listing = _new_listing(config, seller, ListingAssetKind.MINER, price_ess, now_ts)
    listing.miner = miner.address
    miner.listed = True
    _advance(config)
    return listing


def create_land_listing(
    config: Config, seller: bytes, land: LandState, price_ess: int, now_ts: int
) -> ListingState:
    """List a land with no allocated miners for sale."""
    require(land.owner == seller, MoeError.UNAUTHORIZED)
    require(not land.listed, MoeError.ASSET_ALREADY_LISTED)
    require(land.allocated_miners_count == 0, MoeError.LAND_HAS_ALLOCATED_MINERS)
    listing = _new_listing(config, seller, ListingAssetKind.LAND, price_ess, now_ts)
    listing.land = land.address
    land.listed = True
    _advance(config)
    return listing


def create_equipment_listing(
    config: Config,
    seller: bytes,
    inventory: EquipmentInventoryState,
    bucket: int,
    level: int,
    amount: int,
    price_ess: int,
    now_ts: int,
) -> ListingState:
    """List items from the seller's inventory; they are held back until sold or cancelled."""
    require(inventory.owner == seller, MoeError.UNAUTHORIZED)
    counts, index = _locate(inventory, bucket, level, amount)
    require(counts[index] >= amount, MoeError.INSUFFICIENT_EQUIPMENT_INVENTORY)

    listing = _new_listing(
        config, seller, ListingAssetKind.EQUIPMENT_INVENTORY, price_ess, now_ts
    )
    counts[index] -= amount

    listing.inventory_owner = seller
    listing.equipment_bucket = int(bucket)
    listing.equipment_level = level
    listing.equipment_amount = amount
    _advance(config)
    return listing


def _check_cancel(seller: bytes, listing: ListingState, kind: ListingAssetKind) -> None:
    require(listing.seller == seller, MoeError.NOT_SELLER)
    require(listing.asset_kind == kind, MoeError.INVALID_LISTING)


def cancel_miner_listing(seller: bytes, listing: ListingState, miner: MinerState) -> None:
    """Withdraw a miner listing and unlock the miner."""
    _check_cancel(seller, listing, ListingAssetKind.MINER)
    require(miner.address == listing.miner, MoeError.INVALID_LISTING)
    require(listing.active, MoeError.LISTING_INACTIVE)
    miner.listed = False
    listing.active = False


def cancel_land_listing(seller: bytes, listing: ListingState, land: LandState) -> None:
    """Withdraw a land listing and unlock the land."""
    _check_cancel(seller, listing, ListingAssetKind.LAND)
    require(land.address == listing.land, MoeError.INVALID_LISTING)
    require(listing.active, MoeError.LISTING_INACTIVE)
    land.listed = False
    listing.active = False


def cancel_equipment_listing(
    seller: bytes, listing: ListingState, inventory: EquipmentInventoryState
) -> None:
    """Withdraw an equipment listing and return the items to the seller."""
    _check_cancel(seller, listing, ListingAssetKind.EQUIPMENT_INVENTORY)
    require(inventory.owner == seller, MoeError.UNAUTHORIZED)
    require(listing.inventory_owner == seller, MoeError.INVALID_LISTING)
    require(listing.active, MoeError.LISTING_INACTIVE)
    release_inventory(
        inventory,
        listing.equipment_bucket,
        listing.equipment_level,
        listing.equipment_amount,
    )
    listing.active = False


def _validate_buy(accounts: BuyAccounts, listing: ListingState) -> None:
    mint = accounts.ess_mint.address
    require(listing.active, MoeError.LISTING_INACTIVE)
    require(listing.seller != accounts.buyer, MoeError.SELF_PURCHASE_NOT_ALLOWED)
    require(accounts.seller == listing.seller, MoeError.INVALID_LISTING)

    require(accounts.economy.ess_mint == mint, MoeError.MINT_MISMATCH)
    require(accounts.buyer_account.owner == accounts.buyer, MoeError.UNAUTHORIZED)
    require(accounts.buyer_account.mint == mint, MoeError.MINT_MISMATCH)
    require(accounts.seller_account.owner == accounts.seller, MoeError.UNAUTHORIZED)
    require(accounts.seller_account.mint == mint, MoeError.MINT_MISMATCH)
    require(
        accounts.recipient_account.owner == accounts.economy.recipient_wallet,
        MoeError.RECIPIENT_MISMATCH,
    )
    require(accounts.recipient_account.mint == mint, MoeError.MINT_MISMATCH)


def _accumulate_trade_fee(economy: EconomyConfig, fee: int) -> None:
    alloc = economy.trade_fee
    totals = economy.totals_trade_fee
    for total_name, bps_name in _TOTAL_FIELDS:
        share = mul_bps(fee, getattr(alloc, bps_name))
        setattr(totals, total_name, min(getattr(totals, total_name) + share, U64_MAX))


def _settle(accounts: BuyAccounts, listing: ListingState) -> None:
    fee = marketplace_fee(listing.price_ess)
    seller_amount = max(listing.price_ess - fee, 0)

    # Fee and payment succeed together or not at all.
    if accounts.buyer_account.amount < fee + seller_amount:
        raise TokenError("insufficient funds")

    if fee > 0:
        token_transfer(
            accounts.buyer_account, accounts.recipient_account, accounts.buyer, fee
        )
        _accumulate_trade_fee(accounts.economy, fee)
    if seller_amount > 0:
        token_transfer(
            accounts.buyer_account, accounts.seller_account, accounts.buyer, seller_amount
        )


def buy_miner_listing(
    accounts: BuyAccounts,
    listing: ListingState,
    miner: MinerState,
    progress: MinerProgress,
    mining: MinerMiningState,
    equipment: EquipmentState,
) -> None:
    """Buy a listed miner together with its progress, mining record and equipment."""
    require(listing.asset_kind == ListingAssetKind.MINER, MoeError.INVALID_LISTING)
    require(progress.miner == miner.address, MoeError.INVALID_MINER_PROGRESS)
    require(mining.miner == miner.address, MoeError.INVALID_MINER_REF)
    require(equipment.miner == miner.address, MoeError.INVALID_MINER_REF)

    _validate_buy(accounts, listing)

    seller = accounts.seller
    require(miner.address == listing.miner, MoeError.INVALID_LISTING)
    require(miner.listed, MoeError.INVALID_LISTING)
    require(miner.owner == seller, MoeError.INVALID_LISTING)
    require(progress.owner == seller, MoeError.INVALID_LISTING)
    require(mining.owner == seller, MoeError.INVALID_LISTING)
    require(equipment.owner == seller, MoeError.INVALID_LISTING)

    _settle(accounts, listing)

    buyer = accounts.buyer
    miner.owner = buyer
    miner.listed = False
    progress.owner = buyer
    mining.owner = buyer
    equipment.owner = buyer
    listing.active = False


def buy_land_listing(accounts: BuyAccounts, listing: ListingState, land: LandState) -> None:
    """Buy a listed land."""
    require(listing.asset_kind == ListingAssetKind.LAND, MoeError.INVALID_LISTING)
    _validate_buy(accounts, listing)

    require(land.address == listing.land, MoeError.INVALID_LISTING)
    require(land.listed, MoeError.INVALID_LISTING)
    require(land.owner == accounts.seller, MoeError.INVALID_LISTING)
    require(land.allocated_miners_count == 0, MoeError.LAND_HAS_ALLOCATED_MINERS)

    _settle(accounts, listing)

    land.owner = accounts.buyer
    land.listed = False
    listing.active = False


def buy_equipment_listing(
    accounts: BuyAccounts, listing: ListingState, buyer_inventory: EquipmentInventoryState
) -> None:
    """Buy listed equipment; the items land in the buyer's inventory."""
    require(
        listing.asset_kind == ListingAssetKind.EQUIPMENT_INVENTORY,
        MoeError.INVALID_LISTING,
    )
    require(buyer_inventory.owner == accounts.buyer, MoeError.UNAUTHORIZED)
    _validate_buy(accounts, listing)
    require(listing.inventory_owner == accounts.seller, MoeError.INVALID_LISTING)

    # Check the delivery target before any funds move.
    _locate(
        buyer_inventory,
        listing.equipment_bucket,
        listing.equipment_level,
        listing.equipment_amount,
    )

    _settle(accounts, listing)

    release_inventory(
        buyer_inventory,
        listing.equipment_bucket,
        listing.equipment_level,
        listing.equipment_amount,
    )
    listing.active = False