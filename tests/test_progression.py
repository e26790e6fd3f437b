import pytest

from moeminers.config import initialize_config
from moeminers.constants import SEED_PROGRESSION, U64_MAX
from moeminers.errors import GameError, MoeError
from moeminers.progression import (
    admin_grant_exp,
    claim_mining_exp,
    miner_level_up,
    progression_init,
)
from moeminers.rules import derive_address, ess_cost, exp_required
from moeminers.state import EconomyConfig, MinerProgress, MinerState
from moeminers.tokens import Mint, TokenAccount, TokenError

ADMIN = b"\x01" * 32
OWNER = b"\x02" * 32
OTHER = b"\x03" * 32
MINER_ADDR = b"\x04" * 32
MINT_ADDR = b"\x05" * 32
RECIPIENT = b"\x06" * 32
WINDOW = 21600
START = 1_700_000_000


def _miner(rarity=0, listed=False):
    return MinerState(address=MINER_ADDR, owner=OWNER, rarity=rarity, listed=listed)


def _progress(level=0, exp=0, last=START):
    return MinerProgress(miner=MINER_ADDR, owner=OWNER, level=level, exp=exp, last_exp_claim_ts=last)


def _bank(balance=1000):
    mint = Mint(address=MINT_ADDR, supply=10_000)
    user = TokenAccount(address=b"\x07" * 32, mint=MINT_ADDR, owner=OWNER, amount=balance)
    recipient = TokenAccount(address=b"\x08" * 32, mint=MINT_ADDR, owner=RECIPIENT, amount=0)
    economy = EconomyConfig(ess_mint=MINT_ADDR, recipient_wallet=RECIPIENT)
    return economy, mint, user, recipient


def test_progression_init_values():
    cfg = progression_init(ADMIN)
    assert cfg.admin == ADMIN
    assert cfg.mining_window_secs == 21600
    assert cfg.max_accrual_windows == 28
    assert cfg.linear_hash_k_bps == 200
    assert cfg.max_level_by_rarity == [20, 30, 40, 50, 60]
    assert cfg.exp_base_by_rarity == [10, 15, 25, 40, 60]
    assert cfg.exp_growth_bps == 12000
    assert cfg.ess_base_cost_by_rarity == [5, 8, 12, 20, 35]
    assert cfg.ess_growth_bps == 12500
    assert cfg.address == derive_address(SEED_PROGRESSION)


def test_claim_credits_full_windows():
    cfg = progression_init(ADMIN)
    prog = _progress()
    claim_mining_exp(OWNER, _miner(), cfg, prog, START + 3 * WINDOW)
    assert prog.exp == 3
    assert prog.last_exp_claim_ts == START + 3 * WINDOW


def test_claim_keeps_partial_window():
    cfg = progression_init(ADMIN)
    prog = _progress()
    claim_mining_exp(OWNER, _miner(), cfg, prog, START + 2 * WINDOW + 5)
    assert prog.exp == 2
    assert prog.last_exp_claim_ts == START + 2 * WINDOW


def test_claim_nothing_before_a_window():
    cfg = progression_init(ADMIN)
    prog = _progress()
    claim_mining_exp(OWNER, _miner(), cfg, prog, START + WINDOW - 1)
    claim_mining_exp(OWNER, _miner(), cfg, prog, START - 10)
    assert prog.exp == 0
    assert prog.last_exp_claim_ts == START


def test_claim_caps_accrual_windows():
    cfg = progression_init(ADMIN)
    prog = _progress()
    claim_mining_exp(OWNER, _miner(rarity=4), cfg, prog, START + 100 * WINDOW)
    assert prog.exp == cfg.max_accrual_windows
    assert prog.last_exp_claim_ts == START + cfg.max_accrual_windows * WINDOW


def test_claim_caps_at_required_exp():
    cfg = progression_init(ADMIN)
    prog = _progress(exp=8)
    claim_mining_exp(OWNER, _miner(), cfg, prog, START + 5 * WINDOW)
    assert prog.exp == exp_required(cfg, 0, 0)


def test_claim_when_full_only_moves_timestamp():
    cfg = progression_init(ADMIN)
    need = exp_required(cfg, 0, 0)
    prog = _progress(exp=need)
    now = START + 2 * WINDOW + 7
    claim_mining_exp(OWNER, _miner(), cfg, prog, now)
    assert prog.exp == need
    assert prog.last_exp_claim_ts == now


@pytest.mark.parametrize(
    "owner, miner, prog, error",
    [
        (OTHER, _miner(), _progress(), MoeError.UNAUTHORIZED),
        (OWNER, _miner(listed=True), _progress(), MoeError.ASSET_LISTED_LOCKED),
        (OWNER, _miner(), MinerProgress(miner=MINER_ADDR, owner=OTHER), MoeError.UNAUTHORIZED),
        (OWNER, _miner(), MinerProgress(miner=OTHER, owner=OWNER), MoeError.INVALID_MINER_PROGRESS),
    ],
)
def test_claim_rejects(owner, miner, prog, error):
    cfg = progression_init(ADMIN)
    with pytest.raises(GameError) as exc:
        claim_mining_exp(owner, miner, cfg, prog, START + WINDOW)
    assert exc.value.error is error


def test_claim_invalid_rarity():
    cfg = progression_init(ADMIN)
    with pytest.raises(GameError) as exc:
        claim_mining_exp(OWNER, _miner(rarity=7), cfg, _progress(), START + WINDOW)
    assert exc.value.error is MoeError.INVALID_RARITY


def test_level_up_spends_cost_and_resets_exp():
    cfg = progression_init(ADMIN)
    economy, mint, user, recipient = _bank()
    prog = _progress(exp=exp_required(cfg, 0, 0))
    cost = ess_cost(cfg, 0, 0)
    miner_level_up(OWNER, _miner(), cfg, prog, economy, mint, user, RECIPIENT, recipient)
    assert prog.level == 1
    assert prog.exp == 0
    assert user.amount == 1000 - cost
    burned = 10_000 - mint.supply
    assert burned + recipient.amount == cost
    assert burned == cost * 35 // 100


def test_level_up_not_enough_exp():
    cfg = progression_init(ADMIN)
    economy, mint, user, recipient = _bank()
    prog = _progress(exp=1)
    with pytest.raises(GameError) as exc:
        miner_level_up(OWNER, _miner(), cfg, prog, economy, mint, user, RECIPIENT, recipient)
    assert exc.value.error is MoeError.NOT_ENOUGH_EXP
    assert user.amount == 1000


def test_level_up_max_level():
    cfg = progression_init(ADMIN)
    economy, mint, user, recipient = _bank()
    prog = _progress(level=cfg.max_level_by_rarity[0], exp=U64_MAX)
    with pytest.raises(GameError) as exc:
        miner_level_up(OWNER, _miner(), cfg, prog, economy, mint, user, RECIPIENT, recipient)
    assert exc.value.error is MoeError.MAX_LEVEL_REACHED


def test_level_up_economy_mint_mismatch():
    cfg = progression_init(ADMIN)
    economy, mint, user, recipient = _bank()
    economy.ess_mint = OTHER
    prog = _progress(exp=U64_MAX)
    with pytest.raises(GameError) as exc:
        miner_level_up(OWNER, _miner(), cfg, prog, economy, mint, user, RECIPIENT, recipient)
    assert exc.value.error is MoeError.MINT_MISMATCH


def test_level_up_recipient_mismatch():
    cfg = progression_init(ADMIN)
    economy, mint, user, recipient = _bank()
    economy.recipient_wallet = OTHER
    prog = _progress(exp=U64_MAX)
    with pytest.raises(GameError) as exc:
        miner_level_up(OWNER, _miner(), cfg, prog, economy, mint, user, RECIPIENT, recipient)
    assert exc.value.error is MoeError.RECIPIENT_MISMATCH
    assert prog.level == 0


def test_level_up_user_account_not_owned():
    cfg = progression_init(ADMIN)
    economy, mint, user, recipient = _bank()
    user.owner = OTHER
    with pytest.raises(GameError) as exc:
        miner_level_up(OWNER, _miner(), cfg, _progress(exp=U64_MAX), economy, mint, user, RECIPIENT, recipient)
    assert exc.value.error is MoeError.UNAUTHORIZED


def test_level_up_insufficient_funds_changes_nothing():
    cfg = progression_init(ADMIN)
    economy, mint, user, recipient = _bank(balance=1)
    prog = _progress(exp=exp_required(cfg, 0, 0))
    with pytest.raises(TokenError):
        miner_level_up(OWNER, _miner(), cfg, prog, economy, mint, user, RECIPIENT, recipient)
    assert user.amount == 1
    assert mint.supply == 10_000
    assert prog.level == 0


def test_admin_grant_exp_capped():
    config = initialize_config(ADMIN)
    cfg = progression_init(ADMIN)
    prog = _progress()
    admin_grant_exp(config, ADMIN, cfg, _miner(), prog, 1_000_000)
    assert prog.exp == exp_required(cfg, 0, 0)


def test_admin_grant_exp_adds():
    config = initialize_config(ADMIN)
    cfg = progression_init(ADMIN)
    prog = _progress(exp=2)
    admin_grant_exp(config, ADMIN, cfg, _miner(rarity=4), prog, 5)
    assert prog.exp == 7


def test_admin_grant_exp_rejects_non_admin():
    config = initialize_config(ADMIN)
    cfg = progression_init(ADMIN)
    with pytest.raises(GameError) as exc:
        admin_grant_exp(config, OTHER, cfg, _miner(), _progress(), 1)
    assert exc.value.error is MoeError.UNAUTHORIZED


def test_admin_grant_exp_overflow():
    config = initialize_config(ADMIN)
    cfg = progression_init(ADMIN)
    prog = _progress(exp=5)
    with pytest.raises(GameError) as exc:
        admin_grant_exp(config, ADMIN, cfg, _miner(), prog, U64_MAX)
    assert exc.value.error is MoeError.MATH_OVERFLOW
    assert prog.exp == 5


def test_admin_grant_exp_wrong_progress():
    config = initialize_config(ADMIN)
    cfg = progression_init(ADMIN)
    prog = MinerProgress(miner=OTHER, owner=OWNER)
    with pytest.raises(GameError) as exc:
        admin_grant_exp(config, ADMIN, cfg, _miner(), prog, 1)
    assert exc.value.error is MoeError.INVALID_MINER_PROGRESS


def test_admin_grant_exp_full_is_noop():
    config = initialize_config(ADMIN)
    cfg = progression_init(ADMIN)
    need = exp_required(cfg, 0, 0)
    prog = _progress(exp=need + 3)
    admin_grant_exp(config, ADMIN, cfg, _miner(), prog, 1)
    assert prog.exp == need + 3