import pytest

from moeminers.errors import GameError, MoeError, require


def test_game_error_carries_error_and_message():
    exc = GameError(MoeError.PAUSED)
    assert exc.error is MoeError.PAUSED
    assert str(exc) == "Protocol is paused"


def test_game_error_keeps_each_error():
    exc = GameError(MoeError.MATH_OVERFLOW)
    assert exc.error is MoeError.MATH_OVERFLOW
    assert str(exc) == "Math overflow"


def test_require_raises_the_given_error():
    with pytest.raises(GameError) as info:
        require(False, MoeError.UNAUTHORIZED)
    assert info.value.error is MoeError.UNAUTHORIZED


def test_require_passes_on_true():
    assert require(True, MoeError.UNAUTHORIZED) is None


def test_message_of_bps_error():
    exc = GameError(MoeError.INVALID_BPS_SUM)
    assert str(exc) == "Invalid BPS (sum must be 10000)"