from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TwapObservation:
    arithmetic_mean_tick: int
    harmonic_mean_liquidity: int | None
