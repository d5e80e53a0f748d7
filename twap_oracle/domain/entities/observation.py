from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ObservationSample:
    """Cumulative values returned by ``observe``, one entry per requested offset."""

    tick_cumulatives: list[int]
    seconds_per_liquidity_cumulative_x128s: list[int]
