"""Miner progression: config, EXP accrual, admin grants and level-ups."""

from .constants import SEED_PROGRESSION, U64_MAX
from .errors import MoeError, require
from .rules import derive_address, ess_cost, exp_required
from .state import (
    Config,
    EconomyConfig,
    MinerProgress,
    MinerState,
    ProgressionConfig,
)
from .tokens import Mint, TokenAccount, TokenError, token_burn, token_transfer

I64_MAX = 2**63 - 1
U16_MAX = 2**16 - 1

LEVEL_UP_BURN_PERCENT = 35


def progression_init(admin: bytes) -> ProgressionConfig:
    """Create the progression config with the default curves."""
    return ProgressionConfig(
        admin=admin,
        mining_window_secs=21600,
        max_accrual_windows=28,
        linear_hash_k_bps=200,
        max_level_by_rarity=[20, 30, 40, 50, 60],
        exp_base_by_rarity=[10, 15, 25, 40, 60],
        exp_growth_bps=12000,
        ess_base_cost_by_rarity=[5, 8, 12, 20, 35],
        ess_growth_bps=12500,
        address=derive_address(SEED_PROGRESSION),
    )


def _check_owned_progress(owner: bytes, miner: MinerState, progress: MinerProgress) -> None:
    require(miner.owner == owner, MoeError.UNAUTHORIZED)
    require(not miner.listed, MoeError.ASSET_LISTED_LOCKED)
    require(progress.owner == owner, MoeError.UNAUTHORIZED)
    require(progress.miner == miner.address, MoeError.INVALID_MINER_PROGRESS)


def _rarity_index(miner: MinerState) -> int:
    require(0 <= miner.rarity < 5, MoeError.INVALID_RARITY)
    return miner.rarity


def claim_mining_exp(
    owner: bytes,
    miner: MinerState,
    progression: ProgressionConfig,
    progress: MinerProgress,
    now_ts: int,
) -> None:
    """Credit one EXP per full mining window elapsed since the last claim."""
    _check_owned_progress(owner, miner, progress)

    if now_ts <= progress.last_exp_claim_ts:
        return

    window = max(progression.mining_window_secs, 1)
    windows = (now_ts - progress.last_exp_claim_ts) // window
    if windows == 0:
        return

    cap = progression.max_accrual_windows
    if cap > 0 and windows > cap:
        windows = cap

    rarity = _rarity_index(miner)
    need_exp = exp_required(progression, rarity, progress.level)

    if progress.exp >= need_exp:
        progress.last_exp_claim_ts = now_ts
        return

    progress.exp = min(min(progress.exp + windows, U64_MAX), need_exp)
    advance = min(windows * window, I64_MAX)
    progress.last_exp_claim_ts = min(progress.last_exp_claim_ts + advance, I64_MAX)


def miner_level_up(
    owner: bytes,
    miner: MinerState,
    progression: ProgressionConfig,
    progress: MinerProgress,
    economy: EconomyConfig,
    ess_mint: Mint,
    user_account: TokenAccount,
    recipient_wallet: bytes,
    recipient_account: TokenAccount,
) -> None:
    """Spend ESS (35% burned, the rest to the recipient) to raise a miner one level."""
    require(user_account.mint == ess_mint.address, MoeError.MINT_MISMATCH)
    require(user_account.owner == owner, MoeError.UNAUTHORIZED)
    require(recipient_account.mint == ess_mint.address, MoeError.MINT_MISMATCH)
    require(recipient_account.owner == recipient_wallet, MoeError.UNAUTHORIZED)

    _check_owned_progress(owner, miner, progress)
    rarity = _rarity_index(miner)

    max_level = progression.max_level_by_rarity[rarity]
    require(progress.level < max_level, MoeError.MAX_LEVEL_REACHED)

    need_exp = exp_required(progression, rarity, progress.level)
    require(progress.exp >= need_exp, MoeError.NOT_ENOUGH_EXP)

    cost = ess_cost(progression, rarity, progress.level)

    require(economy.ess_mint == ess_mint.address, MoeError.MINT_MISMATCH)
    require(economy.recipient_wallet == recipient_wallet, MoeError.RECIPIENT_MISMATCH)
    require(recipient_account.owner == recipient_wallet, MoeError.UNAUTHORIZED)

    burn_amt = min(cost * LEVEL_UP_BURN_PERCENT, U64_MAX) // 100
    transfer_amt = max(cost - burn_amt, 0)

    # Both movements succeed or neither happens.
    if user_account.amount < burn_amt + transfer_amt:
        raise TokenError("insufficient funds")

    if burn_amt > 0:
        token_burn(ess_mint, user_account, owner, burn_amt)
    if transfer_amt > 0:
        token_transfer(user_account, recipient_account, owner, transfer_amt)

    progress.level = min(progress.level + 1, U16_MAX)
    progress.exp = 0


def admin_grant_exp(
    config: Config,
    admin: bytes,
    progression: ProgressionConfig,
    miner: MinerState,
    progress: MinerProgress,
    amount: int,
) -> None:
    """Let the admin add EXP to a miner, capped at what its level requires."""
    require(config.admin == admin, MoeError.UNAUTHORIZED)
    require(progress.owner == miner.owner, MoeError.UNAUTHORIZED)
    require(progress.miner == miner.address, MoeError.INVALID_MINER_PROGRESS)

    rarity = _rarity_index(miner)
    need_exp = exp_required(progression, rarity, progress.level)

    if progress.exp >= need_exp:
        return

    added = progress.exp + amount
    require(added <= U64_MAX, MoeError.MATH_OVERFLOW)
    progress.exp = min(added, need_exp)