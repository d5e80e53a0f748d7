from __future__ import annotations

from twap_oracle.application.dto.consult_twap import ConsultTwapInput, ConsultTwapOutput
from twap_oracle.application.ports.observation_source_port import ObservationSourceResolverPort
from twap_oracle.application.use_cases.twap_source_reader import (
    build_pool_key,
    parse_base_amount,
    read_twap,
)
from twap_oracle.domain.services.oracle_library import get_quote_at_tick, validate_seconds_ago
from twap_oracle.domain.services.tick_math import get_sqrt_ratio_at_tick


class ConsultTwapUseCase:
    def __init__(self, *, source_resolver: ObservationSourceResolverPort):
        self._source_resolver = source_resolver

    def execute(self, command: ConsultTwapInput) -> ConsultTwapOutput:
        seconds_ago = validate_seconds_ago(command.seconds_ago)
        base_amount = parse_base_amount(command.base_amount)
        pool_key = build_pool_key(command.base_token, command.quote_token, command.fee)

        pool_address, observation = read_twap(
            self._source_resolver,
            pool_key=pool_key,
            seconds_ago=seconds_ago,
        )

        sqrt_ratio_x96 = get_sqrt_ratio_at_tick(observation.arithmetic_mean_tick)
        quote_amount = get_quote_at_tick(
            observation.arithmetic_mean_tick,
            base_amount,
            command.base_token,
            command.quote_token,
        )

        return ConsultTwapOutput(
            pool_address=pool_address,
            arithmetic_mean_tick=observation.arithmetic_mean_tick,
            harmonic_mean_liquidity=observation.harmonic_mean_liquidity,
            sqrt_ratio_x96=sqrt_ratio_x96,
            base_amount=base_amount,
            quote_amount=quote_amount,
        )
