"""Commit-reveal lootboxes that mint miners and lands."""

from typing import NamedTuple, Tuple

from .constants import (
    DOMAIN_LAND,
    DOMAIN_MINER,
    MAX_COMMIT_AGE_SLOTS,
    MIN_REVEAL_DELAY_SLOTS,
    SEED_LAND,
    SEED_LB_LAND,
    SEED_LB_MINER,
    SEED_MINER,
    SEED_MINER_PROGRESS,
    U64_MAX,
    u64_le_bytes,
)
from .errors import MoeError, require
from .rules import commitment, derive_address, rng32
from .state import (
    DEFAULT_PUBKEY,
    Config,
    LandState,
    LootboxLandState,
    LootboxMinerState,
    MinerProgress,
    MinerState,
)

MINER_DNA_TWEAK = 0x4D4F455F4D494E45
LAND_DNA_TWEAK = 0x4D4F455F4C414E44

ROLL_DENOM = 10_000


class Visuals(NamedTuple):
    """Traits rolled for a miner."""

    face: int
    element: int
    helmet: int
    backpack: int
    jacket: int
    item: int
    background: int


def build_entropy(owner: bytes, slot: int) -> bytes:
    """32 bytes of entropy: the slot little-endian, then the owner's first 24 bytes."""
    return u64_le_bytes(slot) + bytes(owner)[:24]


def pick_miner_rarity(roll: int) -> int:
    if roll < 5_500:
        return 0
    if roll < 8_000:
        return 1
    if roll < 9_200:
        return 2
    if roll < 9_800:
        return 3
    return 4


def pick_land_rarity(roll: int) -> int:
    if roll < 7_000:
        return 0
    if roll < 9_000:
        return 1
    if roll < 9_700:
        return 2
    if roll < 9_950:
        return 3
    return 4


_LAND_BASE_SLOTS = {0: 2, 1: 4, 2: 7, 3: 10, 4: 13}


def slots_by_rarity(rarity: int, dna_byte: int) -> int:
    """Number of miner slots on a land of the given rarity."""
    base = _LAND_BASE_SLOTS.get(rarity)
    if base is None:
        return 2
    return base + dna_byte % 2


def pick_background(rarity: int, dna_byte: int) -> int:
    if rarity == 0:
        return dna_byte % 3
    if rarity == 1:
        return 3 + dna_byte % 3
    if rarity == 2:
        return 6 + dna_byte % 3
    if rarity == 3:
        return 9 + dna_byte % 2
    if rarity == 4:
        return 11
    return 0


def _u16(dna: bytes, start: int) -> int:
    return int.from_bytes(dna[start : start + 2], "little")


def pick_hash_base(rarity: int, dna: bytes) -> int:
    """Base hash power of a miner of the given rarity."""
    if rarity == 0:
        return 60 + dna[2] % 41
    if rarity == 1:
        return 120 + _u16(dna, 2) % 61
    if rarity == 2:
        return 300 + _u16(dna, 3) % 151
    if rarity == 3:
        return 600 + _u16(dna, 4) % 301
    if rarity == 4:
        return 1200 + _u16(dna, 5) % 401
    return 60


def pick_visuals(rarity: int, dna: bytes) -> Visuals:
    """Roll a miner's looks; lower rarities get fewer accessories."""
    face = dna[0] % 12
    element = dna[1] % 5
    helmet = dna[2] % 12
    backpack = dna[3] % 12
    jacket = dna[4] % 3
    item = dna[5] % 12
    background = pick_background(rarity, dna[6])

    if rarity == 0:
        helmet = backpack = jacket = item = 0
    elif rarity == 1:
        backpack = jacket = item = 0
    elif rarity == 2:
        jacket = item = 0
    elif rarity == 3:
        item = 0
    elif rarity == 4:
        if face == 0:
            face = 1 + dna[0] % 11
        if helmet == 0:
            helmet = 1 + dna[2] % 11
        if backpack == 0:
            backpack = 1 + dna[3] % 11
        if item == 0:
            item = 1 + dna[5] % 11

    return Visuals(face, element, helmet, backpack, jacket, item, background)


def _next_id(value: int) -> int:
    return min(value + 1, U64_MAX)


def _rarity_roll(entropy: bytes, committed: bytes, lootbox_id: int) -> int:
    return _u16(rng32(entropy, committed, lootbox_id), 0) % ROLL_DENOM


def _commit(lootbox, owner: bytes, lootbox_id: int, salt32: bytes, slot: int, domain: bytes) -> None:
    require(lootbox.owner == owner, MoeError.UNAUTHORIZED)
    require(lootbox.lootbox_id == lootbox_id, MoeError.LOOTBOX_ID_MISMATCH)
    require(not lootbox.committed, MoeError.ALREADY_COMMITTED)
    require(not lootbox.revealed, MoeError.ALREADY_REVEALED)

    lootbox.commitment = commitment(domain, lootbox_id, salt32)
    lootbox.committed = True
    lootbox.commit_slot = slot


def _check_reveal(
    config: Config, lootbox, owner: bytes, lootbox_id: int, salt32: bytes, slot: int, domain: bytes
) -> None:
    require(lootbox.owner == owner, MoeError.UNAUTHORIZED)
    require(not config.paused, MoeError.PAUSED)
    require(lootbox.lootbox_id == lootbox_id, MoeError.LOOTBOX_ID_MISMATCH)
    require(lootbox.committed, MoeError.NOT_COMMITTED)
    require(not lootbox.revealed, MoeError.ALREADY_REVEALED)
    age = max(slot - lootbox.commit_slot, 0)
    require(age >= MIN_REVEAL_DELAY_SLOTS, MoeError.REVEAL_TOO_EARLY)
    require(age <= MAX_COMMIT_AGE_SLOTS, MoeError.REVEAL_EXPIRED)
    expected = commitment(domain, lootbox_id, salt32)
    require(expected == lootbox.commitment, MoeError.COMMITMENT_MISMATCH)


def lootbox_miner_init(config: Config, owner: bytes, lootbox_id: int) -> LootboxMinerState:
    """Open a fresh, uncommitted miner lootbox for ``owner``."""
    require(not config.paused, MoeError.PAUSED)
    return LootboxMinerState(
        lootbox_id=lootbox_id,
        owner=owner,
        address=derive_address(SEED_LB_MINER, owner, u64_le_bytes(lootbox_id)),
    )


def lootbox_miner_commit(
    lootbox: LootboxMinerState, owner: bytes, lootbox_id: int, salt32: bytes, slot: int
) -> None:
    """Commit to a secret salt at ``slot``."""
    _commit(lootbox, owner, lootbox_id, salt32, slot, DOMAIN_MINER)


def lootbox_miner_reveal(
    config: Config,
    lootbox: LootboxMinerState,
    owner: bytes,
    lootbox_id: int,
    salt32: bytes,
    slot: int,
    now_ts: int,
) -> Tuple[MinerState, MinerProgress]:
    """Reveal the salt and mint the rolled miner with fresh progress."""
    _check_reveal(config, lootbox, owner, lootbox_id, salt32, slot, DOMAIN_MINER)

    entropy = build_entropy(owner, slot)
    rarity = pick_miner_rarity(_rarity_roll(entropy, lootbox.commitment, lootbox_id))
    dna = rng32(entropy, lootbox.commitment, lootbox_id ^ MINER_DNA_TWEAK)
    hash_base = pick_hash_base(rarity, dna)
    looks = pick_visuals(rarity, dna)

    lootbox.rarity = rarity
    lootbox.element = looks.element
    lootbox.hash_base = hash_base
    lootbox.face = looks.face
    lootbox.helmet = looks.helmet
    lootbox.backpack = looks.backpack
    lootbox.jacket = looks.jacket
    lootbox.item = looks.item
    lootbox.background = looks.background
    lootbox.revealed = True

    miner_id = config.next_miner_id
    miner = MinerState(
        id=miner_id,
        owner=owner,
        rarity=rarity,
        element=looks.element,
        hash_base=hash_base,
        face=looks.face,
        helmet=looks.helmet,
        backpack=looks.backpack,
        jacket=looks.jacket,
        item=looks.item,
        background=looks.background,
        allocated_land=DEFAULT_PUBKEY,
        listed=False,
        created_at=now_ts,
        address=derive_address(SEED_MINER, owner, u64_le_bytes(miner_id)),
    )
    progress = MinerProgress(
        miner=miner.address,
        owner=owner,
        level=0,
        exp=0,
        last_exp_claim_ts=now_ts,
        address=derive_address(SEED_MINER_PROGRESS, miner.address),
    )

    config.next_miner_id = _next_id(miner_id)
    return miner, progress


def lootbox_land_init(config: Config, owner: bytes, lootbox_id: int) -> LootboxLandState:
    """Open a fresh, uncommitted land lootbox for ``owner``."""
    require(not config.paused, MoeError.PAUSED)
    return LootboxLandState(
        lootbox_id=lootbox_id,
        owner=owner,
        address=derive_address(SEED_LB_LAND, owner, u64_le_bytes(lootbox_id)),
    )


def lootbox_land_commit(
    lootbox: LootboxLandState, owner: bytes, lootbox_id: int, salt32: bytes, slot: int
) -> None:
    """Commit to a secret salt at ``slot``."""
    _commit(lootbox, owner, lootbox_id, salt32, slot, DOMAIN_LAND)


def lootbox_land_reveal(
    config: Config,
    lootbox: LootboxLandState,
    owner: bytes,
    lootbox_id: int,
    salt32: bytes,
    slot: int,
    now_ts: int,
) -> LandState:
    """Reveal the salt and mint the rolled land."""
    _check_reveal(config, lootbox, owner, lootbox_id, salt32, slot, DOMAIN_LAND)

    entropy = build_entropy(owner, slot)
    rarity = pick_land_rarity(_rarity_roll(entropy, lootbox.commitment, lootbox_id))
    dna = rng32(entropy, lootbox.commitment, lootbox_id ^ LAND_DNA_TWEAK)
    element = dna[0] % 5
    slots = slots_by_rarity(rarity, dna[1])

    lootbox.rarity = rarity
    lootbox.element = element
    lootbox.slots = slots
    lootbox.revealed = True

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