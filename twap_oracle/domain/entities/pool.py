from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PoolKey:
    token0: str
    token1: str
    fee: int
