"""ESS economy: allocation config, reward deposits and spending with burn splits."""

from dataclasses import dataclass
from typing import Dict

from .constants import BPS_DENOM, SEED_ECONOMY, SEED_REWARDS_AUTH, U64_MAX
from .errors import MoeError, require
from .rules import derive_address
from .state import Allocation3, Allocation7, EconomyConfig, Totals3, Totals7
from .tokens import Mint, TokenAccount, TokenError, token_burn, token_transfer

MECHANISM_BUY = 1
MECHANISM_SEND = 2
MECHANISM_RECHARGE = 3
MECHANISM_TRADE_FEE = 4

_FULL_BPS = 10_000


@dataclass(frozen=True)
class EconomySpent:
    """Record of one spend: how much was burned and how much went to the recipient."""

    mechanism: int
    user: bytes
    mint: bytes
    total_amount: int
    burn_amount: int
    recipient_amount: int
    recipient_wallet: bytes


@dataclass
class SpendAccounts:
    """Everything a spend touches."""

    user: bytes
    ess_mint: Mint
    user_account: TokenAccount
    recipient_wallet: bytes
    recipient_account: TokenAccount
    economy: EconomyConfig


def _sat_add(a: int, b: int) -> int:
    return min(a + b, U64_MAX)


def mul_bps(amount: int, bps: int) -> int:
    """``amount`` scaled by ``bps`` basis points, rounded down."""
    return min(amount * bps // BPS_DENOM, U64_MAX)


def validate_alloc7(alloc: Allocation7) -> None:
    require(alloc.sum() == _FULL_BPS, MoeError.INVALID_BPS_SUM)


def validate_alloc3(alloc: Allocation3) -> None:
    require(alloc.sum() == _FULL_BPS, MoeError.INVALID_BPS_SUM)


def _rewards_authority_address() -> bytes:
    return derive_address(SEED_REWARDS_AUTH)


def _require_admin(economy: EconomyConfig, admin: bytes) -> None:
    require(economy.admin == admin, MoeError.UNAUTHORIZED)


def economy_init(
    admin: bytes,
    ess_mint: Mint,
    recipient_wallet: bytes,
    rewards_authority: bytes,
    rewards_vault: TokenAccount,
) -> EconomyConfig:
    """Create the economy config with the default spend allocations."""
    require(rewards_authority == _rewards_authority_address(), MoeError.UNAUTHORIZED)
    require(rewards_vault.mint == ess_mint.address, MoeError.MINT_MISMATCH)
    require(rewards_vault.owner == rewards_authority, MoeError.UNAUTHORIZED)

    buy = Allocation7(
        burn_bps=3500,
        liquidity_bps=2500,
        mining_pool_bps=1000,
        marketing_bps=1000,
        dev_infra_bps=1000,
        forges_bps=500,
        treasury_bps=500,
    )
    send = Allocation7(
        burn_bps=6000,
        liquidity_bps=500,
        mining_pool_bps=500,
        marketing_bps=500,
        dev_infra_bps=1000,
        forges_bps=500,
        treasury_bps=1000,
    )
    recharge = Allocation3(burn_bps=4500, forges_bps=4500, treasury_bps=1000)

    economy = EconomyConfig(
        admin=admin,
        ess_mint=ess_mint.address,
        recipient_wallet=recipient_wallet,
        rewards_authority=rewards_authority,
        rewards_vault=rewards_vault.address,
        buy=buy,
        trade_fee=buy,
        send=send,
        recharge=recharge,
        address=derive_address(SEED_ECONOMY),
    )

    validate_alloc7(economy.buy)
    validate_alloc7(economy.trade_fee)
    validate_alloc7(economy.send)
    validate_alloc3(economy.recharge)
    return economy


def set_rewards_vault(
    economy: EconomyConfig,
    admin: bytes,
    rewards_authority: bytes,
    rewards_vault: TokenAccount,
) -> None:
    """Point the economy at a new rewards vault held by the rewards authority."""
    _require_admin(economy, admin)
    require(rewards_authority == _rewards_authority_address(), MoeError.UNAUTHORIZED)
    require(rewards_vault.owner == rewards_authority, MoeError.UNAUTHORIZED)
    require(rewards_vault.mint == economy.ess_mint, MoeError.MINT_MISMATCH)
    economy.rewards_authority = rewards_authority
    economy.rewards_vault = rewards_vault.address


def set_recipient(economy: EconomyConfig, admin: bytes, recipient_wallet: bytes) -> None:
    """Change the wallet that receives the non-burned part of spends."""
    _require_admin(economy, admin)
    economy.recipient_wallet = recipient_wallet


def set_mint(economy: EconomyConfig, admin: bytes, ess_mint: Mint) -> None:
    """Change the ESS mint the economy works with."""
    _require_admin(economy, admin)
    economy.ess_mint = ess_mint.address


def rewards_deposit(
    economy: EconomyConfig,
    depositor: bytes,
    ess_mint: Mint,
    depositor_account: TokenAccount,
    rewards_authority: bytes,
    rewards_vault: TokenAccount,
    amount: int,
) -> None:
    """Move ``amount`` ESS from the depositor into the rewards vault."""
    require(depositor_account.mint == ess_mint.address, MoeError.MINT_MISMATCH)
    require(depositor_account.owner == depositor, MoeError.UNAUTHORIZED)
    require(rewards_authority == _rewards_authority_address(), MoeError.UNAUTHORIZED)
    require(rewards_vault.address == economy.rewards_vault, MoeError.UNAUTHORIZED)
    require(rewards_vault.owner == rewards_authority, MoeError.UNAUTHORIZED)
    require(rewards_vault.mint == ess_mint.address, MoeError.MINT_MISMATCH)

    require(amount > 0, MoeError.INVALID_SLOTS)
    require(economy.ess_mint == ess_mint.address, MoeError.MINT_MISMATCH)
    require(rewards_vault.address == economy.rewards_vault, MoeError.UNAUTHORIZED)

    token_transfer(depositor_account, rewards_vault, depositor, amount)


def _check_accounts(accounts: SpendAccounts) -> None:
    mint = accounts.ess_mint.address
    require(accounts.user_account.mint == mint, MoeError.MINT_MISMATCH)
    require(accounts.user_account.owner == accounts.user, MoeError.UNAUTHORIZED)
    require(accounts.recipient_account.mint == mint, MoeError.MINT_MISMATCH)
    require(
        accounts.recipient_account.owner == accounts.recipient_wallet,
        MoeError.RECIPIENT_MISMATCH,
    )
    require(accounts.economy.ess_mint == mint, MoeError.MINT_MISMATCH)
    require(
        accounts.economy.recipient_wallet == accounts.recipient_wallet,
        MoeError.RECIPIENT_MISMATCH,
    )


def _move_funds(accounts: SpendAccounts, burn_amt: int, non_burn: int) -> None:
    # Burn and transfer succeed together or not at all.
    if accounts.user_account.amount < burn_amt + non_burn:
        raise TokenError("insufficient funds")
    token_burn(accounts.ess_mint, accounts.user_account, accounts.user, burn_amt)
    token_transfer(accounts.user_account, accounts.recipient_account, accounts.user, non_burn)


def _accumulate(totals, amounts: Dict[str, int]) -> None:
    for name, value in amounts.items():
        setattr(totals, name, _sat_add(getattr(totals, name), value))


def _event(accounts: SpendAccounts, mechanism: int, amount: int, burn: int, rest: int) -> EconomySpent:
    return EconomySpent(
        mechanism=mechanism,
        user=accounts.user,
        mint=accounts.ess_mint.address,
        total_amount=amount,
        burn_amount=burn,
        recipient_amount=rest,
        recipient_wallet=accounts.recipient_wallet,
    )


def _spend_7(accounts: SpendAccounts, amount: int, mechanism: int) -> EconomySpent:
    require(amount > 0, MoeError.INVALID_SLOTS)
    economy = accounts.economy

    alloc, totals = {
        MECHANISM_BUY: (economy.buy, economy.totals_buy),
        MECHANISM_SEND: (economy.send, economy.totals_send),
        MECHANISM_TRADE_FEE: (economy.trade_fee, economy.totals_trade_fee),
    }[mechanism]
    validate_alloc7(alloc)

    amounts = {
        "burn": mul_bps(amount, alloc.burn_bps),
        "liquidity": mul_bps(amount, alloc.liquidity_bps),
        "mining_pool": mul_bps(amount, alloc.mining_pool_bps),
        "marketing": mul_bps(amount, alloc.marketing_bps),
        "dev_infra": mul_bps(amount, alloc.dev_infra_bps),
        "forges": mul_bps(amount, alloc.forges_bps),
        "treasury": mul_bps(amount, alloc.treasury_bps),
    }
    burn_amt = amounts["burn"]
    non_burn = 0
    for name, value in amounts.items():
        if name != "burn":
            non_burn = _sat_add(non_burn, value)

    _move_funds(accounts, burn_amt, non_burn)
    _accumulate(totals, amounts)
    return _event(accounts, mechanism, amount, burn_amt, non_burn)


def _spend_3(accounts: SpendAccounts, amount: int, mechanism: int) -> EconomySpent:
    require(amount > 0, MoeError.INVALID_SLOTS)
    economy = accounts.economy
    alloc = economy.recharge
    validate_alloc3(alloc)

    amounts = {
        "burn": mul_bps(amount, alloc.burn_bps),
        "forges": mul_bps(amount, alloc.forges_bps),
        "treasury": mul_bps(amount, alloc.treasury_bps),
    }
    burn_amt = amounts["burn"]
    non_burn = _sat_add(amounts["forges"], amounts["treasury"])

    _move_funds(accounts, burn_amt, non_burn)
    totals: Totals3 = economy.totals_recharge
    _accumulate(totals, amounts)
    return _event(accounts, mechanism, amount, burn_amt, non_burn)


def spend_buy(accounts: SpendAccounts, amount: int) -> EconomySpent:
    """Spend ESS on a purchase, split by the buy allocation."""
    _check_accounts(accounts)
    return _spend_7(accounts, amount, MECHANISM_BUY)


def spend_send(accounts: SpendAccounts, amount: int) -> EconomySpent:
    """Spend ESS on a send, split by the send allocation."""
    _check_accounts(accounts)
    return _spend_7(accounts, amount, MECHANISM_SEND)


def spend_recharge(accounts: SpendAccounts, amount: int) -> EconomySpent:
    """Spend ESS on a recharge, split by the recharge allocation."""
    _check_accounts(accounts)
    return _spend_3(accounts, amount, MECHANISM_RECHARGE)


def spend_trade_fee(accounts: SpendAccounts, fee_amount: int) -> EconomySpent:
    """Spend a trade fee, split by the trade-fee allocation."""
    _check_accounts(accounts)
    return _spend_7(accounts, fee_amount, MECHANISM_TRADE_FEE)


__all__ = [
    "EconomySpent",
    "SpendAccounts",
    "Totals7",
    "mul_bps",
    "validate_alloc7",
    "validate_alloc3",
    "economy_init",
    "set_rewards_vault",
    "set_recipient",
    "set_mint",
    "rewards_deposit",
    "spend_buy",
    "spend_send",
    "spend_recharge",
    "spend_trade_fee",
]