"""Seeds, domains and limits shared by the game rules."""

SEED_CONFIG = b"config"
SEED_MINER = b"miner"
SEED_LAND = b"land"
SEED_AFF = b"affinity_v2"
SEED_LB_MINER = b"lb_miner"
SEED_LB_LAND = b"lb_land"

ELEMENTS = 5
RARITIES = 5

MIN_REVEAL_DELAY_SLOTS = 2
MAX_COMMIT_AGE_SLOTS = 21_600  # about three days of ~400 ms slots

DOMAIN_MINER = b"MOE:LB:MINER"
DOMAIN_LAND = b"MOE:LB:LAND"

SEED_ECONOMY = b"economy_v4"

SEED_GLOBAL_MINING = b"global_mining_v2"
SEED_MINER_MINING = b"miner_mining_v1"

SEED_REWARDS_AUTH = b"rewards_auth"
SEED_REWARDS_VAULT = b"rewards_vault"

SEED_PROGRESSION = b"progression_v1"
SEED_MINER_PROGRESS = b"miner_progress_v1"

BPS_DENOM = 10_000

SEED_EQUIPMENT = b"equipment_v1"
SEED_EQUIPMENT_INVENTORY = b"equipment_inventory_v1"

MAX_ITEM_LEVEL = 10

SEED_LISTING = b"listing_v1"

MARKETPLACE_FEE_BPS = 500

U64_MAX = 2**64 - 1


def u64_le_bytes(x: int) -> bytes:
    """Encode an unsigned 64-bit integer as 8 little-endian bytes."""
    return x.to_bytes(8, "little", signed=False)