"""Token balances: mints, token accounts, transfers and burns."""

from dataclasses import dataclass

from .constants import U64_MAX


class TokenError(Exception):
    """A token movement was refused."""


@dataclass
class Mint:
    address: bytes
    supply: int = 0
    decimals: int = 0


@dataclass
class TokenAccount:
    address: bytes
    mint: bytes
    owner: bytes
    amount: int = 0


def _check_spend(source: TokenAccount, authority: bytes, amount: int) -> None:
    if amount < 0:
        raise TokenError("amount must not be negative")
    if source.owner != authority:
        raise TokenError("owner does not match")
    if source.amount < amount:
        raise TokenError("insufficient funds")


def token_transfer(
    source: TokenAccount, destination: TokenAccount, authority: bytes, amount: int
) -> None:
    """Move ``amount`` from ``source`` to ``destination``; zero is a no-op."""
    if amount == 0:
        return
    _check_spend(source, authority, amount)
    if source.mint != destination.mint:
        raise TokenError("account mints differ")
    if source is not destination and destination.amount + amount > U64_MAX:
        raise TokenError("balance overflow")
    source.amount -= amount
    destination.amount += amount


def token_burn(mint: Mint, source: TokenAccount, authority: bytes, amount: int) -> None:
    """Destroy ``amount`` from ``source`` and the mint's supply; zero is a no-op."""
    if amount == 0:
        return
    _check_spend(source, authority, amount)
    if source.mint != mint.address:
        raise TokenError("account mint differs from mint")
    source.amount -= amount
    mint.supply = max(mint.supply - amount, 0)