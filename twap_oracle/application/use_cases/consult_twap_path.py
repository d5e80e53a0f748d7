from __future__ import annotations

from twap_oracle.application.dto.consult_twap import ConsultTwapPathInput, ConsultTwapPathOutput
from twap_oracle.application.ports.observation_source_port import ObservationSourceResolverPort
from twap_oracle.application.use_cases.twap_source_reader import (
    build_pool_key,
    parse_base_amount,
    read_twap,
)
from twap_oracle.domain.exceptions import QuoteInputError
from twap_oracle.domain.services.oracle_library import (
    get_chained_price,
    quote_from_sqrt_ratio,
    validate_seconds_ago,
)
from twap_oracle.domain.services.tick_math import get_sqrt_ratio_at_tick


class ConsultTwapPathUseCase:
    def __init__(self, *, source_resolver: ObservationSourceResolverPort):
        self._source_resolver = source_resolver

    def execute(self, command: ConsultTwapPathInput) -> ConsultTwapPathOutput:
        seconds_ago = validate_seconds_ago(command.seconds_ago)
        if len(command.tokens) < 2:
            raise QuoteInputError("tokens must contain at least two addresses.")
        if len(command.fees) != len(command.tokens) - 1:
            raise QuoteInputError("fees must have exactly one entry per hop.")
        base_amount = parse_base_amount(command.base_amount)

        pool_keys = [
            build_pool_key(command.tokens[index], command.tokens[index + 1], fee)
            for index, fee in enumerate(command.fees)
        ]

        pool_addresses: list[str] = []
        hop_ticks: list[int] = []
        for pool_key in pool_keys:
            pool_address, observation = read_twap(
                self._source_resolver,
                pool_key=pool_key,
                seconds_ago=seconds_ago,
            )
            pool_addresses.append(pool_address)
            hop_ticks.append(observation.arithmetic_mean_tick)

        synthetic_tick = get_chained_price(command.tokens, hop_ticks)
        sqrt_ratio_x96 = get_sqrt_ratio_at_tick(synthetic_tick)
        # The synthetic tick already prices the first token in the last one.
        quote_amount = quote_from_sqrt_ratio(sqrt_ratio_x96, base_amount, base_is_token0=True)

        return ConsultTwapPathOutput(
            pool_addresses=pool_addresses,
            hop_ticks=hop_ticks,
            synthetic_tick=synthetic_tick,
            base_amount=base_amount,
            quote_amount=quote_amount,
        )
