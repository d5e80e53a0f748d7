from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


UNIV3_MAINNET_FACTORY = "0x1F98431c8aD98523631AE4a59f267346ea31F984"
UNIV3_POOL_INIT_CODE_HASH = "0xe34f199b19b2b4f47f68442619d555527d244f78a3297ea89325f843f87b8b54"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


@dataclass(frozen=True)
class Settings:
    eth_rpc_url: str
    univ3_factory_address: str
    univ3_pool_init_code_hash: str
    rpc_timeout_seconds: float
    rpc_max_retries: int
    rpc_min_interval_ms: int


def get_settings() -> Settings:
    return Settings(
        eth_rpc_url=_env("ETH_RPC_URL", ""),
        univ3_factory_address=_env("UNIV3_FACTORY_ADDRESS", UNIV3_MAINNET_FACTORY),
        univ3_pool_init_code_hash=_env("UNIV3_POOL_INIT_CODE_HASH", UNIV3_POOL_INIT_CODE_HASH),
        rpc_timeout_seconds=float(_env("RPC_TIMEOUT_SECONDS", "10")),
        rpc_max_retries=int(_env("RPC_MAX_RETRIES", "3")),
        rpc_min_interval_ms=int(_env("RPC_MIN_INTERVAL_MS", "0")),
    )
