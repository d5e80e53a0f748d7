from __future__ import annotations

from pydantic import BaseModel, Field


class TwapQuoteResponse(BaseModel):
    pool_address: str
    arithmetic_mean_tick: int
    harmonic_mean_liquidity: str | None = Field(None, description="Harmonic mean in-range liquidity over the window, null when it did not move.")
    sqrt_price_x96: str = Field(..., description="Q64.96 sqrt price at the mean tick.")
    base_amount: str
    quote_amount: str


class TwapPathQuoteRequest(BaseModel):
    tokens: list[str] = Field(..., description="Route from base token to quote token.")
    fees: list[int] = Field(..., description="Pool fee for each hop.")
    base_amount: str
    seconds_ago: int


class TwapPathQuoteResponse(BaseModel):
    pool_addresses: list[str]
    hop_ticks: list[int]
    synthetic_tick: int
    base_amount: str
    quote_amount: str
