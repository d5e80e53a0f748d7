from __future__ import annotations

from collections.abc import Sequence

from twap_oracle.domain.entities.observation import ObservationSample
from twap_oracle.domain.entities.twap import TwapObservation
from twap_oracle.domain.exceptions import InvalidWindowError
from twap_oracle.domain.services.full_math import MAX_UINT128, MAX_UINT160, mul_div
from twap_oracle.domain.services.pair_orientation import sorts_before
from twap_oracle.domain.services.tick_math import get_sqrt_ratio_at_tick


Q96 = 2**96
Q128 = 2**128
Q192 = 2**192

MAX_UINT32 = 2**32 - 1


def validate_seconds_ago(seconds_ago: int) -> int:
    if seconds_ago == 0:
        raise InvalidWindowError("seconds_ago must be greater than zero.")
    if seconds_ago < 0 or seconds_ago > MAX_UINT32:
        raise InvalidWindowError("seconds_ago must be a uint32 value.")
    return seconds_ago


def observation_offsets(seconds_ago: int) -> list[int]:
    """Offsets passed to ``observe``: the window start first, then now."""
    return [validate_seconds_ago(seconds_ago), 0]


def arithmetic_mean_tick(tick_cumulatives: Sequence[int], seconds_ago: int) -> int:
    validate_seconds_ago(seconds_ago)
    if len(tick_cumulatives) != 2:
        raise ValueError("Exactly two tick cumulatives are required.")
    tick_cumulatives_delta = tick_cumulatives[1] - tick_cumulatives[0]
    # Floor, not truncation toward zero: negative averages round down.
    return tick_cumulatives_delta // seconds_ago


def harmonic_mean_liquidity(
    seconds_per_liquidity_cumulative_x128s: Sequence[int],
    seconds_ago: int,
) -> int | None:
    """Harmonic mean in-range liquidity over the window, or None when the accumulator did not move."""
    validate_seconds_ago(seconds_ago)
    if len(seconds_per_liquidity_cumulative_x128s) != 2:
        raise ValueError("Exactly two seconds-per-liquidity cumulatives are required.")
    # uint160 accumulator, wraps on overflow.
    delta = (
        seconds_per_liquidity_cumulative_x128s[1] - seconds_per_liquidity_cumulative_x128s[0]
    ) & MAX_UINT160
    if delta == 0:
        return None
    seconds_ago_x160 = seconds_ago * MAX_UINT160
    return seconds_ago_x160 // (delta << 32)


def consult_observation(sample: ObservationSample, seconds_ago: int) -> TwapObservation:
    return TwapObservation(
        arithmetic_mean_tick=arithmetic_mean_tick(sample.tick_cumulatives, seconds_ago),
        harmonic_mean_liquidity=harmonic_mean_liquidity(
            sample.seconds_per_liquidity_cumulative_x128s,
            seconds_ago,
        ),
    )


def quote_from_full_ratio(sqrt_ratio_x96: int, base_amount: int, *, base_is_token0: bool) -> int:
    """Quote with the squared ratio kept in Q128.192. Requires sqrt_ratio_x96 <= 2**128 - 1."""
    if sqrt_ratio_x96 > MAX_UINT128:
        raise ValueError("sqrt_ratio_x96 does not fit in 128 bits.")
    ratio_x192 = sqrt_ratio_x96 * sqrt_ratio_x96
    if base_is_token0:
        return mul_div(ratio_x192, base_amount, Q192)
    return mul_div(Q192, base_amount, ratio_x192)


def quote_from_shifted_ratio(sqrt_ratio_x96: int, base_amount: int, *, base_is_token0: bool) -> int:
    """Quote with the ratio pre-shifted by 32 bits into Q64.128 so the square fits in 256 bits."""
    shifted = sqrt_ratio_x96 >> 32
    ratio_x128 = shifted * shifted
    if base_is_token0:
        return mul_div(ratio_x128, base_amount, Q128)
    return mul_div(Q128, base_amount, ratio_x128)


def quote_from_sqrt_ratio(sqrt_ratio_x96: int, base_amount: int, *, base_is_token0: bool) -> int:
    if sqrt_ratio_x96 <= MAX_UINT128:
        return quote_from_full_ratio(sqrt_ratio_x96, base_amount, base_is_token0=base_is_token0)
    return quote_from_shifted_ratio(sqrt_ratio_x96, base_amount, base_is_token0=base_is_token0)


def get_quote_at_tick(tick: int, base_amount: int, base_token: str, quote_token: str) -> int:
    """Amount of ``quote_token`` received for ``base_amount`` of ``base_token`` at ``tick``."""
    sqrt_ratio_x96 = get_sqrt_ratio_at_tick(tick)
    return quote_from_sqrt_ratio(
        sqrt_ratio_x96,
        base_amount,
        base_is_token0=sorts_before(base_token, quote_token),
    )


def get_chained_price(tokens: Sequence[str], ticks: Sequence[int]) -> int:
    """Synthetic tick for the route tokens[0] -> tokens[-1], priced in the last token."""
    if len(tokens) < 2 or len(tokens) - 1 != len(ticks):
        raise ValueError("tokens must have exactly one more entry than ticks.")
    synthetic_tick = 0
    for index, tick in enumerate(ticks):
        if sorts_before(tokens[index], tokens[index + 1]):
            synthetic_tick += tick
        else:
            synthetic_tick -= tick
    return synthetic_tick
