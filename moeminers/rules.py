"""Pure game rules: affinity, commit-reveal hashing, equipment balance, progression."""

import hashlib
from typing import Dict

from .constants import BPS_DENOM, ELEMENTS, RARITIES, U64_MAX
from .errors import MoeError, require
from .state import MinerProgress, ProgressionConfig

SLOT_HAND = 0
SLOT_HEAD = 1

MAX_EQUIPMENT_TIER = 6

MAX_SEED_LEN = 32
MAX_SEEDS = 16

_ADDRESS_TAG = b"moeminers:address"

_HAND_POWER_BPS: Dict[int, int] = {1: 200, 2: 450, 3: 800, 4: 1400, 5: 2200, 6: 3500}
_HEAD_DISCOUNT_BPS: Dict[int, int] = {1: 300, 2: 600, 3: 1000, 4: 1500, 5: 2200, 6: 3000}
_REMELT_COST: Dict[int, Dict[int, int]] = {
    SLOT_HAND: {1: 10, 2: 25, 3: 60, 4: 140, 5: 320},
    SLOT_HEAD: {1: 8, 2: 20, 3: 48, 4: 110, 5: 250},
}


def _sat_mul(a: int, b: int) -> int:
    return min(a * b, U64_MAX)


def _sat_add(a: int, b: int) -> int:
    return min(a + b, U64_MAX)


def derive_address(*args: bytes) -> bytes:
    """Derive a deterministic 32-byte account address from seed byte strings."""
    if len(args) > MAX_SEEDS:
        raise ValueError(f"at most {MAX_SEEDS} seeds are allowed")
    digest = hashlib.sha256()
    for seed in args:
        seed = bytes(seed)
        if len(seed) > MAX_SEED_LEN:
            raise ValueError(f"seed longer than {MAX_SEED_LEN} bytes")
        digest.update(seed)
    digest.update(_ADDRESS_TAG)
    return digest.digest()


def compute_affinity_bps(miner_element: int, land_element: int) -> int:
    """Mining multiplier in bps for a miner element placed on a land element."""
    require_element(miner_element)
    require_element(land_element)

    if miner_element == land_element:
        return 10_000

    strong_against = (miner_element + 1) % ELEMENTS
    weak_against = (miner_element + 4) % ELEMENTS

    if land_element == strong_against:
        return 11_000
    if land_element == weak_against:
        return 8_000
    return 10_000


def _hashv(*parts: bytes) -> bytes:
    digest = hashlib.sha256()
    for part in parts:
        digest.update(part)
    return digest.digest()


def commitment(domain: bytes, lootbox_id: int, salt32: bytes) -> bytes:
    """Hash committing to a lootbox id and a secret 32-byte salt."""
    require(len(salt32) == 32, MoeError.INVALID_SALT_LENGTH)
    return _hashv(domain, lootbox_id.to_bytes(8, "little"), bytes(salt32))


def rng32(slot_hash_32: bytes, commitment_32: bytes, extra: int) -> bytes:
    """32 pseudo-random bytes from entropy, a commitment and a 64-bit tweak."""
    if len(slot_hash_32) != 32 or len(commitment_32) != 32:
        raise ValueError("entropy and commitment must be 32 bytes each")
    return _hashv(bytes(slot_hash_32), bytes(commitment_32), extra.to_bytes(8, "little"))


def pick_u8(data: bytes, idx: int, max_value: int) -> int:
    """Byte at ``idx`` (wrapping over 32) reduced modulo ``max_value``."""
    if max_value == 0:
        return 0
    return data[idx % 32] % max_value


def validate_equipment_tier(tier: int) -> None:
    require(1 <= tier <= MAX_EQUIPMENT_TIER, MoeError.INVALID_BASE_LEVEL)


def hand_power_bps_by_tier(tier: int) -> int:
    validate_equipment_tier(tier)
    return _HAND_POWER_BPS[tier]


def head_discount_bps_by_tier(tier: int) -> int:
    validate_equipment_tier(tier)
    return _HEAD_DISCOUNT_BPS[tier]


def remelt_cost_ess(slot: int, base_tier: int) -> int:
    """Whole-ESS cost to remelt four items of ``base_tier`` into the next tier."""
    validate_equipment_tier(base_tier)
    require(base_tier < MAX_EQUIPMENT_TIER, MoeError.INVALID_BASE_LEVEL)
    costs = _REMELT_COST.get(slot)
    require(costs is not None and base_tier in costs, MoeError.INVALID_BASE_LEVEL)
    return costs[base_tier]


def _pow_bps(base_bps: int, exp: int) -> int:
    result = BPS_DENOM
    base = base_bps
    while exp > 0:
        if exp & 1:
            result = _sat_mul(result, base) // BPS_DENOM
        base = _sat_mul(base, base) // BPS_DENOM
        exp >>= 1
    return result


def exp_required(cfg: ProgressionConfig, rarity_idx: int, level: int) -> int:
    """EXP needed to leave ``level`` for a miner of the given rarity."""
    base = cfg.exp_base_by_rarity[rarity_idx]
    mult = _pow_bps(cfg.exp_growth_bps, max(level - 1, 0))
    return _sat_mul(base, mult) // BPS_DENOM


def ess_cost(cfg: ProgressionConfig, rarity_idx: int, level: int) -> int:
    """ESS cost to level up from ``level`` for a miner of the given rarity."""
    base = cfg.ess_base_cost_by_rarity[rarity_idx]
    mult = _pow_bps(cfg.ess_growth_bps, max(level - 1, 0))
    return _sat_mul(base, mult) // BPS_DENOM


def require_not_paused(paused: bool) -> None:
    require(not paused, MoeError.PAUSED)


def require_element(e: int) -> None:
    require(0 <= e < ELEMENTS, MoeError.INVALID_ELEMENT)


def require_rarity(r: int) -> None:
    require(0 <= r < RARITIES, MoeError.INVALID_RARITY)


def require_slots(s: int) -> None:
    require(0 < s <= 10, MoeError.INVALID_SLOTS)


def add_exp(progress: MinerProgress, amount: int) -> None:
    """Add EXP to a miner, saturating at the 64-bit maximum."""
    progress.exp = _sat_add(progress.exp, amount)