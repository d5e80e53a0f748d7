from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException

from twap_oracle.application.use_cases.consult_twap import ConsultTwapUseCase
from twap_oracle.application.use_cases.consult_twap_path import ConsultTwapPathUseCase
from twap_oracle.infrastructure.clients.univ3_pool_rpc_client import (
    Univ3PoolResolver,
    Univ3PoolRpcClient,
    Univ3PoolRpcClientSettings,
)
from twap_oracle.shared.config import get_settings


@lru_cache(maxsize=1)
def _get_pool_rpc_client(
    rpc_url: str,
    timeout_seconds: float,
    max_retries: int,
    min_interval_ms: int,
) -> Univ3PoolRpcClient:
    return Univ3PoolRpcClient(
        Univ3PoolRpcClientSettings(
            rpc_url=rpc_url,
            timeout_seconds=timeout_seconds,
            max_retries=max_retries,
            min_interval_ms=min_interval_ms,
        )
    )


def get_pool_resolver() -> Univ3PoolResolver:
    settings = get_settings()
    if not settings.eth_rpc_url:
        raise HTTPException(status_code=500, detail="ETH_RPC_URL is required.")
    client = _get_pool_rpc_client(
        settings.eth_rpc_url,
        settings.rpc_timeout_seconds,
        settings.rpc_max_retries,
        settings.rpc_min_interval_ms,
    )
    return Univ3PoolResolver(
        client=client,
        factory_address=settings.univ3_factory_address,
        init_code_hash=settings.univ3_pool_init_code_hash,
    )


def get_consult_twap_use_case() -> ConsultTwapUseCase:
    return ConsultTwapUseCase(source_resolver=get_pool_resolver())


def get_consult_twap_path_use_case() -> ConsultTwapPathUseCase:
    return ConsultTwapPathUseCase(source_resolver=get_pool_resolver())
