import pytest

from moeminers.constants import U64_MAX
from moeminers.tokens import Mint, TokenAccount, TokenError, token_burn, token_transfer

MINT = b"\x10" * 32
OTHER_MINT = b"\x11" * 32
ALICE = b"\x01" * 32
BOB = b"\x02" * 32


def _accounts(balance=100):
    src = TokenAccount(address=b"\x21" * 32, mint=MINT, owner=ALICE, amount=balance)
    dst = TokenAccount(address=b"\x22" * 32, mint=MINT, owner=BOB, amount=0)
    return src, dst


def test_transfer_moves_and_preserves_total():
    src, dst = _accounts()
    token_transfer(src, dst, ALICE, 30)
    assert (src.amount, dst.amount) == (70, 30)
    assert src.amount + dst.amount == 100


def test_transfer_zero_skips_checks():
    src, dst = _accounts()
    token_transfer(src, dst, BOB, 0)
    assert (src.amount, dst.amount) == (100, 0)


def test_transfer_wrong_authority():
    src, dst = _accounts()
    with pytest.raises(TokenError):
        token_transfer(src, dst, BOB, 1)
    assert src.amount == 100


def test_transfer_insufficient_funds():
    src, dst = _accounts(5)
    with pytest.raises(TokenError):
        token_transfer(src, dst, ALICE, 6)
    assert dst.amount == 0


def test_transfer_mint_mismatch():
    src, _ = _accounts()
    dst = TokenAccount(address=b"\x23" * 32, mint=OTHER_MINT, owner=BOB)
    with pytest.raises(TokenError):
        token_transfer(src, dst, ALICE, 1)


def test_transfer_overflow():
    src, dst = _accounts()
    dst.amount = U64_MAX
    with pytest.raises(TokenError):
        token_transfer(src, dst, ALICE, 1)


def test_burn_reduces_balance_and_supply():
    mint = Mint(address=MINT, supply=1000)
    src, _ = _accounts()
    token_burn(mint, src, ALICE, 40)
    assert src.amount == 60
    assert mint.supply == 960


def test_burn_wrong_mint():
    mint = Mint(address=OTHER_MINT, supply=1000)
    src, _ = _accounts()
    with pytest.raises(TokenError):
        token_burn(mint, src, ALICE, 1)
    assert mint.supply == 1000


def test_burn_zero_is_noop():
    mint = Mint(address=MINT, supply=10)
    src, _ = _accounts()
    token_burn(mint, src, BOB, 0)
    assert (src.amount, mint.supply) == (100, 10)