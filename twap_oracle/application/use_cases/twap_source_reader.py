from __future__ import annotations

from decimal import Decimal

from twap_oracle.application.ports.observation_source_port import ObservationSourceResolverPort
from twap_oracle.domain.entities.pool import PoolKey
from twap_oracle.domain.entities.twap import TwapObservation
from twap_oracle.domain.exceptions import DomainError, QuoteInputError, SourceUnavailableError
from twap_oracle.domain.services.full_math import MAX_UINT256
from twap_oracle.domain.services.oracle_library import consult_observation, observation_offsets
from twap_oracle.domain.services.pair_orientation import get_pool_key


def parse_uint256(value: int | str | Decimal | None) -> int:
    if value is None:
        raise ValueError("Missing uint256 value.")
    if isinstance(value, bool):
        raise ValueError("Unsupported uint256 value type.")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise ValueError("Empty uint256 string.")
        parsed = int(raw, 16) if raw.lower().startswith("0x") else int(raw)
    elif isinstance(value, Decimal):
        if value != value.to_integral_value():
            raise ValueError("Decimal uint256 value must be integral.")
        parsed = int(value)
    else:
        raise ValueError("Unsupported uint256 value type.")

    if parsed < 0:
        raise ValueError("uint256 value must be non-negative.")
    if parsed > MAX_UINT256:
        raise ValueError("uint256 value is too large.")
    return parsed


def build_pool_key(token_a: str, token_b: str, fee: int) -> PoolKey:
    try:
        return get_pool_key(token_a, token_b, fee)
    except ValueError as exc:
        raise QuoteInputError(str(exc)) from exc


def parse_base_amount(value: int | str) -> int:
    try:
        return parse_uint256(value)
    except ValueError as exc:
        raise QuoteInputError(f"base_amount: {exc}") from exc


def read_twap(
    resolver: ObservationSourceResolverPort,
    *,
    pool_key: PoolKey,
    seconds_ago: int,
) -> tuple[str, TwapObservation]:
    """Resolve the pool for ``pool_key`` and average its observations over the window.

    Returns the pool address together with the mean tick and liquidity.
    Resolution and read failures surface as ``SourceUnavailableError``.
    """
    offsets = observation_offsets(seconds_ago)
    try:
        source = resolver.resolve(pool_key=pool_key)
        sample = source.observe(seconds_agos=offsets)
        address = source.address
    except DomainError:
        raise
    except Exception as exc:
        raise SourceUnavailableError(
            f"Observation source unavailable for {pool_key.token0}/{pool_key.token1} fee={pool_key.fee}: {exc}"
        ) from exc

    if len(sample.tick_cumulatives) != len(offsets):
        raise SourceUnavailableError("Observation source returned an unexpected number of tick samples.")
    if len(sample.seconds_per_liquidity_cumulative_x128s) != len(offsets):
        raise SourceUnavailableError("Observation source returned an unexpected number of liquidity samples.")
    return address, consult_observation(sample, seconds_ago)
