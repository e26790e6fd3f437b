import pytest

from moeminers.config import (
    compute_affinity,
    create_land_debug,
    create_miner_debug,
    initialize_config,
    set_paused,
)
from moeminers.constants import SEED_CONFIG, SEED_LAND, SEED_MINER, U64_MAX, u64_le_bytes
from moeminers.errors import GameError, MoeError
from moeminers.rules import derive_address
from moeminers.state import DEFAULT_PUBKEY

ADMIN = b"\x01" * 32
OWNER = b"\x02" * 32
OTHER = b"\x03" * 32


def test_initialize_config_defaults():
    cfg = initialize_config(ADMIN)
    assert cfg.admin == ADMIN
    assert cfg.paused is False
    assert (cfg.next_miner_id, cfg.next_land_id, cfg.next_listing_id) == (0, 0, 0)
    assert cfg.address == derive_address(SEED_CONFIG)


def test_set_paused_by_admin():
    cfg = initialize_config(ADMIN)
    set_paused(cfg, ADMIN, True)
    assert cfg.paused is True
    set_paused(cfg, ADMIN, False)
    assert cfg.paused is False


def test_set_paused_rejects_non_admin():
    cfg = initialize_config(ADMIN)
    with pytest.raises(GameError) as exc:
        set_paused(cfg, OTHER, True)
    assert exc.value.error is MoeError.UNAUTHORIZED
    assert cfg.paused is False


def test_create_miner_debug_assigns_sequential_ids():
    cfg = initialize_config(ADMIN)
    first = create_miner_debug(cfg, OWNER, 2, 3, 300, 1_700_000_000)
    second = create_miner_debug(cfg, OWNER, 0, 0, 60, 1_700_000_001)
    assert first.id == 0
    assert second.id == 1
    assert cfg.next_miner_id == 2
    assert first.address == derive_address(SEED_MINER, OWNER, u64_le_bytes(0))
    assert first.address != second.address


def test_create_miner_debug_fields():
    cfg = initialize_config(ADMIN)
    miner = create_miner_debug(cfg, OWNER, 4, 1, 1234, 1_700_000_000)
    assert miner.owner == OWNER
    assert (miner.rarity, miner.element, miner.hash_base) == (4, 1, 1234)
    assert miner.created_at == 1_700_000_000
    assert miner.allocated_land == DEFAULT_PUBKEY
    assert miner.listed is False
    assert (miner.face, miner.helmet, miner.item) == (0, 0, 0)


@pytest.mark.parametrize(
    "rarity, element, error",
    [(5, 0, MoeError.INVALID_RARITY), (0, 5, MoeError.INVALID_ELEMENT)],
)
def test_create_miner_debug_validation(rarity, element, error):
    cfg = initialize_config(ADMIN)
    with pytest.raises(GameError) as exc:
        create_miner_debug(cfg, OWNER, rarity, element, 60, 0)
    assert exc.value.error is error
    assert cfg.next_miner_id == 0


def test_create_miner_debug_when_paused():
    cfg = initialize_config(ADMIN)
    set_paused(cfg, ADMIN, True)
    with pytest.raises(GameError) as exc:
        create_miner_debug(cfg, OWNER, 0, 0, 60, 0)
    assert exc.value.error is MoeError.PAUSED


def test_miner_counter_saturates():
    cfg = initialize_config(ADMIN)
    cfg.next_miner_id = U64_MAX
    miner = create_miner_debug(cfg, OWNER, 0, 0, 60, 0)
    assert miner.id == U64_MAX
    assert cfg.next_miner_id == U64_MAX


def test_create_land_debug():
    cfg = initialize_config(ADMIN)
    land = create_land_debug(cfg, OWNER, 1, 2, 10, 1_700_000_000)
    assert land.id == 0
    assert cfg.next_land_id == 1
    assert (land.rarity, land.element, land.slots) == (1, 2, 10)
    assert land.allocated_miners_count == 0
    assert land.address == derive_address(SEED_LAND, OWNER, u64_le_bytes(0))


@pytest.mark.parametrize("slots", [0, 11])
def test_create_land_debug_invalid_slots(slots):
    cfg = initialize_config(ADMIN)
    with pytest.raises(GameError) as exc:
        create_land_debug(cfg, OWNER, 0, 0, slots, 0)
    assert exc.value.error is MoeError.INVALID_SLOTS
    assert cfg.next_land_id == 0


def test_create_land_debug_when_paused():
    cfg = initialize_config(ADMIN)
    set_paused(cfg, ADMIN, True)
    with pytest.raises(GameError) as exc:
        create_land_debug(cfg, OWNER, 0, 0, 2, 0)
    assert exc.value.error is MoeError.PAUSED


@pytest.mark.parametrize(
    "land_element, miner_element, bps",
    [(3, 3, 10_000), (1, 0, 11_000), (4, 0, 8_000), (2, 0, 10_000), (0, 4, 11_000)],
)
def test_compute_affinity(land_element, miner_element, bps):
    result = compute_affinity(OWNER, land_element, miner_element)
    assert result.bps == bps
    assert result.user == OWNER
    assert (result.land_element, result.miner_element) == (land_element, miner_element)


def test_compute_affinity_rejects_bad_element():
    with pytest.raises(GameError) as exc:
        compute_affinity(OWNER, 5, 0)
    assert exc.value.error is MoeError.INVALID_ELEMENT


def test_compute_affinity_address_depends_on_elements():
    a = compute_affinity(OWNER, 1, 0)
    b = compute_affinity(OWNER, 0, 1)
    assert a.address != b.address