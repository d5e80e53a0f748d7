from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from twap_oracle.api.deps import get_consult_twap_path_use_case, get_consult_twap_use_case
from twap_oracle.api.schemas.twap import (
    TwapPathQuoteRequest,
    TwapPathQuoteResponse,
    TwapQuoteResponse,
)
from twap_oracle.application.dto.consult_twap import ConsultTwapInput, ConsultTwapPathInput
from twap_oracle.application.use_cases.consult_twap import ConsultTwapUseCase
from twap_oracle.application.use_cases.consult_twap_path import ConsultTwapPathUseCase
from twap_oracle.domain.exceptions import (
    ArithmeticOverflowError,
    QuoteInputError,
    SourceUnavailableError,
    TickOutOfRangeError,
)

router = APIRouter()


def _int_to_str_or_none(value: int | None) -> str | None:
    if value is None:
        return None
    return str(value)


@router.get("/v1/twap/quote", response_model=TwapQuoteResponse)
def get_twap_quote(
    base_token: str,
    quote_token: str,
    fee: int,
    base_amount: str,
    seconds_ago: int,
    use_case: ConsultTwapUseCase = Depends(get_consult_twap_use_case),
):
    try:
        result = use_case.execute(
            ConsultTwapInput(
                base_token=base_token,
                quote_token=quote_token,
                fee=fee,
                base_amount=base_amount,
                seconds_ago=seconds_ago,
            )
        )
    except QuoteInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except SourceUnavailableError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except (ArithmeticOverflowError, TickOutOfRangeError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return TwapQuoteResponse(
        pool_address=result.pool_address,
        arithmetic_mean_tick=result.arithmetic_mean_tick,
        harmonic_mean_liquidity=_int_to_str_or_none(result.harmonic_mean_liquidity),
        sqrt_price_x96=str(result.sqrt_ratio_x96),
        base_amount=str(result.base_amount),
        quote_amount=str(result.quote_amount),
    )


@router.post("/v1/twap/quote-path", response_model=TwapPathQuoteResponse)
def post_twap_path_quote(
    req: TwapPathQuoteRequest,
    use_case: ConsultTwapPathUseCase = Depends(get_consult_twap_path_use_case),
):
    try:
        result = use_case.execute(
            ConsultTwapPathInput(
                tokens=req.tokens,
                fees=req.fees,
                base_amount=req.base_amount,
                seconds_ago=req.seconds_ago,
            )
        )
    except QuoteInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except SourceUnavailableError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except (ArithmeticOverflowError, TickOutOfRangeError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return TwapPathQuoteResponse(
        pool_addresses=result.pool_addresses,
        hop_ticks=result.hop_ticks,
        synthetic_tick=result.synthetic_tick,
        base_amount=str(result.base_amount),
        quote_amount=str(result.quote_amount),
    )
