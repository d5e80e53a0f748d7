from __future__ import annotations

import re

from twap_oracle.domain.entities.pool import PoolKey


_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def normalize_address(address: str, *, field_name: str = "address") -> str:
    value = (address or "").strip()
    if not _ADDRESS_RE.match(value):
        raise ValueError(f"{field_name} must be a 0x-prefixed 20-byte hex address.")
    return value.lower()


def token_sort_key(address: str) -> int:
    return int(normalize_address(address), 16)


def sorts_before(token_a: str, token_b: str) -> bool:
    return token_sort_key(token_a) < token_sort_key(token_b)


def get_pool_key(token_a: str, token_b: str, fee: int) -> PoolKey:
    token_a = normalize_address(token_a, field_name="token_a")
    token_b = normalize_address(token_b, field_name="token_b")
    if token_a == token_b:
        raise ValueError("token_a and token_b must be different.")
    if fee < 0 or fee >= 2**24:
        raise ValueError("fee must be a uint24 value.")
    if sorts_before(token_b, token_a):
        token_a, token_b = token_b, token_a
    return PoolKey(token0=token_a, token1=token_b, fee=fee)
