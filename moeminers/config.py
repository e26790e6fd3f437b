"""Protocol config, pause switch, debug asset creation and affinity results."""

from .constants import SEED_AFF, SEED_CONFIG, SEED_LAND, SEED_MINER, U64_MAX, u64_le_bytes
from .errors import MoeError, require
from .rules import (
    compute_affinity_bps,
    derive_address,
    require_element,
    require_not_paused,
    require_rarity,
    require_slots,
)
from .state import DEFAULT_PUBKEY, AffinityResult, Config, LandState, MinerState


def _next_id(value: int) -> int:
    return min(value + 1, U64_MAX)


def initialize_config(admin: bytes) -> Config:
    """Create the protocol config owned by ``admin``, unpaused with zeroed counters."""
    return Config(
        admin=admin,
        paused=False,
        next_miner_id=0,
        next_land_id=0,
        next_listing_id=0,
        address=derive_address(SEED_CONFIG),
    )


def set_paused(config: Config, admin: bytes, paused: bool) -> None:
    """Switch the pause flag; only the config admin may do this."""
    require(config.admin == admin, MoeError.UNAUTHORIZED)
    config.paused = paused


def create_miner_debug(
    config: Config,
    owner: bytes,
    rarity: int,
    element: int,
    hash_base: int,
    now_ts: int,
) -> MinerState:
    """Mint a plain miner with the given traits and the next miner id."""
    require_not_paused(config.paused)
    require_rarity(rarity)
    require_element(element)

    miner_id = config.next_miner_id
    miner = MinerState(
        id=miner_id,
        owner=owner,
        rarity=rarity,
        element=element,
        hash_base=hash_base,
        allocated_land=DEFAULT_PUBKEY,
        listed=False,
        created_at=now_ts,
        address=derive_address(SEED_MINER, owner, u64_le_bytes(miner_id)),
    )
    config.next_miner_id = _next_id(miner_id)
    return miner


def create_land_debug(
    config: Config,
    owner: bytes,
    rarity: int,
    element: int,
    slots: int,
    now_ts: int,
) -> LandState:
    """Mint a plain land with the given traits and the next land id."""
    require_not_paused(config.paused)
    require_rarity(rarity)
    require_element(element)
    require_slots(slots)

    land_id = config.next_land_id
    land = LandState(
        id=land_id,
        owner=owner,
        rarity=rarity,
        element=element,
        slots=slots,
        listed=False,
        allocated_miners_count=0,
        created_at=now_ts,
        address=derive_address(SEED_LAND, owner, u64_le_bytes(land_id)),
    )
    config.next_land_id = _next_id(land_id)
    return land


def compute_affinity(user: bytes, land_element: int, miner_element: int) -> AffinityResult:
    """Record the affinity of a miner element on a land element for ``user``."""
    bps = compute_affinity_bps(miner_element, land_element)
    return AffinityResult(
        user=user,
        land_element=land_element,
        miner_element=miner_element,
        bps=bps,
        bump=0,
        address=derive_address(SEED_AFF, user, bytes([land_element]), bytes([miner_element])),
    )