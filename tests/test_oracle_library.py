from __future__ import annotations

from fractions import Fraction
from math import floor

import pytest

from twap_oracle.domain.entities.observation import ObservationSample
from twap_oracle.domain.exceptions import ArithmeticOverflowError, InvalidWindowError
from twap_oracle.domain.services.full_math import MAX_UINT128, MAX_UINT160, MAX_UINT256
from twap_oracle.domain.services.oracle_library import (
    Q192,
    arithmetic_mean_tick,
    consult_observation,
    get_chained_price,
    get_quote_at_tick,
    harmonic_mean_liquidity,
    observation_offsets,
    quote_from_full_ratio,
    quote_from_shifted_ratio,
    quote_from_sqrt_ratio,
)
from twap_oracle.domain.services.tick_math import MAX_TICK, MIN_TICK


TOKEN_A = "0x" + "11" * 20
TOKEN_B = "0x" + "22" * 20
TOKEN_C = "0x" + "33" * 20


def _reference_quote(sqrt_ratio_x96: int, base_amount: int, *, base_is_token0: bool) -> int:
    price = Fraction(sqrt_ratio_x96 * sqrt_ratio_x96, Q192)
    if base_is_token0:
        return floor(price * base_amount)
    return floor(base_amount / price)


class TestArithmeticMeanTick:
    @pytest.mark.parametrize("tick", [-887000, -123, 0, 1, 45678])
    def test_constant_tick_over_window_is_returned_exactly(self, tick: int):
        seconds_ago = 600
        start = 1_000_000
        assert arithmetic_mean_tick([start, start + tick * seconds_ago], seconds_ago) == tick

    def test_negative_average_rounds_toward_negative_infinity(self):
        assert arithmetic_mean_tick([0, -7], 2) == -4
        assert arithmetic_mean_tick([7, 0], 2) == -4

    def test_negative_exact_average_is_not_decremented(self):
        assert arithmetic_mean_tick([0, -8], 2) == -4

    def test_positive_average_rounds_down(self):
        assert arithmetic_mean_tick([0, 7], 2) == 3

    def test_cumulatives_from_a_real_window(self):
        assert arithmetic_mean_tick([1000, 1100], 50) == 2

    def test_rejects_zero_window(self):
        with pytest.raises(InvalidWindowError):
            arithmetic_mean_tick([0, 0], 0)

    def test_rejects_window_outside_uint32(self):
        with pytest.raises(InvalidWindowError):
            arithmetic_mean_tick([0, 0], 2**32)
        with pytest.raises(InvalidWindowError):
            arithmetic_mean_tick([0, 0], -5)

    def test_requires_two_samples(self):
        with pytest.raises(ValueError):
            arithmetic_mean_tick([0, 1, 2], 10)


def test_observation_offsets_put_window_start_first():
    assert observation_offsets(1800) == [1800, 0]
    with pytest.raises(InvalidWindowError):
        observation_offsets(0)


class TestHarmonicMeanLiquidity:
    def test_constant_liquidity_rounds_down(self):
        # 1024 units of liquidity over 60s accumulate 60 * 2**128 / 1024.
        delta = 60 * 2**118
        assert harmonic_mean_liquidity([5, 5 + delta], 60) == 1023

    def test_accumulator_wraps_at_160_bits(self):
        old = MAX_UINT160 + 1 - 30 * 2**118
        new = 30 * 2**118
        assert harmonic_mean_liquidity([old, new], 60) == 1023

    def test_zero_delta_has_no_mean(self):
        assert harmonic_mean_liquidity([10, 10], 60) is None
        assert harmonic_mean_liquidity([MAX_UINT160, MAX_UINT160], 60) is None

    def test_zero_delta_keeps_the_mean_tick(self):
        sample = ObservationSample(
            tick_cumulatives=[1000, 1100],
            seconds_per_liquidity_cumulative_x128s=[7, 7],
        )
        result = consult_observation(sample, 50)
        assert result.arithmetic_mean_tick == 2
        assert result.harmonic_mean_liquidity is None

    def test_consult_observation_combines_both_means(self):
        sample = ObservationSample(
            tick_cumulatives=[1000, 1100],
            seconds_per_liquidity_cumulative_x128s=[0, 50 * 2**118],
        )
        result = consult_observation(sample, 50)
        assert result.arithmetic_mean_tick == 2
        assert result.harmonic_mean_liquidity == 1023


class TestQuoteAtTick:
    def test_tick_zero_quotes_one_to_one_in_both_directions(self):
        assert get_quote_at_tick(0, 123_456_789, TOKEN_A, TOKEN_B) == 123_456_789
        assert get_quote_at_tick(0, 123_456_789, TOKEN_B, TOKEN_A) == 123_456_789

    def test_tick_two_golden_values(self):
        # 1.0001 ** 2 = 1.00020001
        assert get_quote_at_tick(2, 1_000_000, TOKEN_A, TOKEN_B) == 1_000_200
        assert get_quote_at_tick(2, 1_000_000, TOKEN_B, TOKEN_A) == 999_800

    @pytest.mark.parametrize("tick", [MIN_TICK, -1, 0, 1, MAX_TICK])
    def test_zero_amount_quotes_zero(self, tick: int):
        assert get_quote_at_tick(tick, 0, TOKEN_A, TOKEN_B) == 0
        assert get_quote_at_tick(tick, 0, TOKEN_B, TOKEN_A) == 0

    @pytest.mark.parametrize("tick", [-200000, -1000, 1000, 200000])
    def test_swapping_orientation_inverts_the_rate(self, tick: int):
        amount = 10**18
        forward = get_quote_at_tick(tick, amount, TOKEN_A, TOKEN_B)
        backward = get_quote_at_tick(tick, amount, TOKEN_B, TOKEN_A)
        assert abs(forward * backward - amount * amount) <= forward + backward + amount * amount // 2**90

    def test_orientation_follows_address_order_not_argument_order(self):
        upper = "0x" + "B" * 40
        lower = "0x" + "a" * 40
        assert get_quote_at_tick(2, 1_000_000, lower, upper) == 1_000_200
        assert get_quote_at_tick(2, 1_000_000, upper, lower) == 999_800

    def test_overflowing_quote_is_reported(self):
        with pytest.raises(ArithmeticOverflowError):
            get_quote_at_tick(MAX_TICK, MAX_UINT256, TOKEN_A, TOKEN_B)
        with pytest.raises(ArithmeticOverflowError):
            get_quote_at_tick(MIN_TICK, MAX_UINT256, TOKEN_B, TOKEN_A)

    def test_extreme_ticks_quote_large_amounts_without_overflow(self):
        amount = 10**30
        for tick in (MIN_TICK, MAX_TICK):
            for base, quote in ((TOKEN_A, TOKEN_B), (TOKEN_B, TOKEN_A)):
                result = get_quote_at_tick(tick, amount, base, quote)
                assert 0 <= result <= MAX_UINT256


class TestQuotePathsAtThreshold:
    @pytest.mark.parametrize("base_is_token0", [True, False])
    def test_full_ratio_path_matches_reference_exactly(self, base_is_token0: bool):
        amount = 10**24
        result = quote_from_full_ratio(MAX_UINT128, amount, base_is_token0=base_is_token0)
        assert result == _reference_quote(MAX_UINT128, amount, base_is_token0=base_is_token0)

    @pytest.mark.parametrize("sqrt_ratio_x96", [MAX_UINT128, MAX_UINT128 + 1, 2**159])
    @pytest.mark.parametrize("base_is_token0", [True, False])
    def test_shifted_ratio_path_matches_reference_within_tolerance(
        self,
        sqrt_ratio_x96: int,
        base_is_token0: bool,
    ):
        amount = 10**24
        result = quote_from_shifted_ratio(sqrt_ratio_x96, amount, base_is_token0=base_is_token0)
        reference = _reference_quote(sqrt_ratio_x96, amount, base_is_token0=base_is_token0)
        assert abs(result - reference) <= reference // 2**90 + 1

    def test_shifted_ratio_path_is_exact_for_power_of_two(self):
        amount = 10**30
        assert quote_from_shifted_ratio(2**128, amount, base_is_token0=True) == amount * 2**64
        assert quote_from_shifted_ratio(2**128, amount, base_is_token0=False) == amount // 2**64

    def test_both_paths_agree_at_threshold(self):
        amount = 10**24
        full = quote_from_full_ratio(MAX_UINT128, amount, base_is_token0=True)
        shifted = quote_from_shifted_ratio(MAX_UINT128, amount, base_is_token0=True)
        assert abs(full - shifted) <= full // 2**90 + 1

    def test_dispatch_selects_path_by_magnitude(self):
        amount = 10**24
        assert quote_from_sqrt_ratio(MAX_UINT128, amount, base_is_token0=True) == quote_from_full_ratio(
            MAX_UINT128, amount, base_is_token0=True
        )
        assert quote_from_sqrt_ratio(
            MAX_UINT128 + 1, amount, base_is_token0=False
        ) == quote_from_shifted_ratio(MAX_UINT128 + 1, amount, base_is_token0=False)

    def test_full_ratio_path_rejects_values_above_128_bits(self):
        with pytest.raises(ValueError):
            quote_from_full_ratio(MAX_UINT128 + 1, 1, base_is_token0=True)


class TestChainedPrice:
    def test_ascending_route_adds_ticks(self):
        assert get_chained_price([TOKEN_A, TOKEN_B, TOKEN_C], [100, 200]) == 300

    def test_descending_route_subtracts_ticks(self):
        assert get_chained_price([TOKEN_C, TOKEN_B, TOKEN_A], [100, 200]) == -300

    def test_mixed_route(self):
        assert get_chained_price([TOKEN_A, TOKEN_C, TOKEN_B], [50, 20]) == 30

    def test_rejects_length_mismatch(self):
        with pytest.raises(ValueError):
            get_chained_price([TOKEN_A, TOKEN_B], [1, 2])
        with pytest.raises(ValueError):
            get_chained_price([TOKEN_A], [])
