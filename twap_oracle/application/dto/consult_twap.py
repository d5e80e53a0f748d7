from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ConsultTwapInput:
    base_token: str
    quote_token: str
    fee: int
    base_amount: int | str
    seconds_ago: int


@dataclass(frozen=True)
class ConsultTwapOutput:
    pool_address: str
    arithmetic_mean_tick: int
    harmonic_mean_liquidity: int | None
    sqrt_ratio_x96: int
    base_amount: int
    quote_amount: int


@dataclass(frozen=True)
class ConsultTwapPathInput:
    tokens: list[str]
    fees: list[int]
    base_amount: int | str
    seconds_ago: int


@dataclass(frozen=True)
class ConsultTwapPathOutput:
    pool_addresses: list[str]
    hop_ticks: list[int]
    synthetic_tick: int
    base_amount: int
    quote_amount: int
