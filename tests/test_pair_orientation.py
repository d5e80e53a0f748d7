from __future__ import annotations

import pytest

from twap_oracle.domain.entities.pool import PoolKey
from twap_oracle.domain.services.pair_orientation import get_pool_key, normalize_address, sorts_before


TOKEN_A = "0x" + "11" * 20
TOKEN_B = "0x" + "22" * 20


def test_get_pool_key_sorts_tokens():
    assert get_pool_key(TOKEN_B, TOKEN_A, 500) == PoolKey(token0=TOKEN_A, token1=TOKEN_B, fee=500)
    assert get_pool_key(TOKEN_A, TOKEN_B, 500) == PoolKey(token0=TOKEN_A, token1=TOKEN_B, fee=500)


def test_ordering_is_numeric_and_case_insensitive():
    lower = "0x" + "a" * 40
    upper = "0x" + "B" * 40
    assert sorts_before(lower, upper)
    assert not sorts_before(upper, lower)
    assert get_pool_key(upper, lower, 3000).token0 == lower
    assert get_pool_key(upper, lower, 3000).token1 == upper.lower()


def test_get_pool_key_rejects_identical_tokens():
    with pytest.raises(ValueError):
        get_pool_key(TOKEN_A, TOKEN_A.upper().replace("0X", "0x"), 500)


def test_get_pool_key_rejects_fee_outside_uint24():
    with pytest.raises(ValueError):
        get_pool_key(TOKEN_A, TOKEN_B, 2**24)
    with pytest.raises(ValueError):
        get_pool_key(TOKEN_A, TOKEN_B, -1)


@pytest.mark.parametrize("value", ["", "0x1234", "11" * 20, "0x" + "zz" * 20])
def test_normalize_address_rejects_malformed_values(value: str):
    with pytest.raises(ValueError):
        normalize_address(value)
