"""Game error codes and the exception that carries them."""

from enum import Enum

ERROR_CODE_OFFSET = 6000


class MoeError(Enum):
    """Every rule violation the game can report, with its message."""

    REVEAL_EXPIRED = "Reveal window expired"
    PAUSED = "Protocol is paused"
    INVALID_ELEMENT = "Invalid element"
    INVALID_SLOTS = "Invalid slots"
    LOOTBOX_ID_MISMATCH = "Lootbox id mismatch"
    LOOTBOX_NOT_INITIALIZED = "Lootbox not initialized"
    ALREADY_COMMITTED = "Already committed"
    NOT_COMMITTED = "Not committed"
    REVEAL_TOO_EARLY = "Reveal too early"
    ALREADY_REVEALED = "Already revealed"
    COMMITMENT_MISMATCH = "Commitment mismatch"
    INVALID_SLOT_HASHES_SYSVAR = "Sysvar slot hashes mismatch"
    INVALID_BPS_SUM = "Invalid BPS (sum must be 10000)"
    MINT_MISMATCH = "Mint mismatch"
    RECIPIENT_MISMATCH = "Recipient wallet mismatch"
    UNAUTHORIZED = "Unauthorized"
    INVALID_MINER_PROGRESS = "Invalid miner progress account"
    INVALID_RARITY = "Invalid rarity"
    MAX_LEVEL_REACHED = "Max level reached for this rarity"
    NOT_ENOUGH_EXP = "Not enough EXP"
    INVALID_SALT_LENGTH = "Invalid salt length. Expected 32 bytes."
    INVALID_TICK_LEN = "Invalid tick length"
    INVALID_MINER_REF = "Invalid miner reference"
    ALREADY_CLAIMED = "Already claimed"
    INVALID_UPGRADE = "Invalid upgrade (new level must be greater than current level)"
    INVALID_EQUIPMENT_PARAMS = "Invalid equipment parameters"
    NOT_ENOUGH_FOR_REMELT = "Inventory not enough items (need 4 total) for remelt."
    INVALID_BASE_LEVEL = "Invalid base level."
    INVALID_ESS_COST = "Invalid ESS cost."
    NO_ITEM_AVAILABLE = "No item available in inventory"
    LISTING_INACTIVE = "Listing is inactive"
    INVALID_LISTING = "Invalid listing"
    NOT_SELLER = "Only seller can cancel listing"
    SELF_PURCHASE_NOT_ALLOWED = "Self purchase not allowed"
    LISTING_PRICE_INVALID = "Listing price must be greater than zero"
    ASSET_ALREADY_LISTED = "Asset already listed"
    ASSET_BUSY = "Asset busy"
    MINER_MUST_BE_UNASSIGNED_FOR_LISTING = "Miner must be unassigned for listing"
    LAND_HAS_ALLOCATED_MINERS = "Land has allocated miners"
    INSUFFICIENT_EQUIPMENT_INVENTORY = "Insufficient equipment inventory"
    EQUIPMENT_BUCKET_MISMATCH = "Equipment bucket mismatch"
    INVALID_EQUIPMENT_AMOUNT = "Invalid equipment amount"
    ASSET_LISTED_LOCKED = "Asset is listed and locked"
    MATH_OVERFLOW = "Math overflow"

    @property
    def message(self) -> str:
        return self.value

    @property
    def code(self) -> int:
        """Numeric code, numbered in declaration order from the offset."""
        return ERROR_CODE_OFFSET + list(MoeError).index(self)


class GameError(Exception):
    """Raised when an instruction breaks one of the game's rules."""

    def __init__(self, error: MoeError):
        super().__init__(error.message)
        self.error = error
        self.code = error.code


def require(condition: bool, error: MoeError) -> None:
    """Raise ``GameError(error)`` unless ``condition`` holds."""
    if not condition:
        raise GameError(error)