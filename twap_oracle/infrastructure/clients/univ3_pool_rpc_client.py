from __future__ import annotations

from dataclasses import dataclass
import logging
from threading import Lock
import time

import httpx
from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from web3 import Web3

from twap_oracle.domain.entities.observation import ObservationSample
from twap_oracle.domain.entities.pool import PoolKey
from twap_oracle.infrastructure.clients.pool_address import compute_pool_address


logger = logging.getLogger(__name__)


OBSERVE_SELECTOR = bytes(Web3.keccak(text="observe(uint32[])"))[:4]


class PoolCallRevertedError(RuntimeError):
    pass


class PoolNotDeployedError(RuntimeError):
    pass


@dataclass(frozen=True)
class Univ3PoolRpcClientSettings:
    rpc_url: str
    timeout_seconds: float
    max_retries: int
    min_interval_ms: int


class Univ3PoolRpcClient:
    def __init__(self, settings: Univ3PoolRpcClientSettings):
        self._settings = settings
        self._lock = Lock()
        self._last_request_at = 0.0
        self._request_id = 0

    def observe(self, *, pool_address: str, seconds_agos: list[int]) -> ObservationSample:
        calldata = OBSERVE_SELECTOR + encode(["uint32[]"], [seconds_agos])
        result = self._eth_call(to=pool_address, data="0x" + calldata.hex())
        if not result or result == "0x":
            raise PoolNotDeployedError(f"No pool contract at {pool_address}.")

        try:
            tick_cumulatives, seconds_per_liquidity = decode(
                ["int56[]", "uint160[]"],
                bytes.fromhex(result[2:] if result.startswith("0x") else result),
            )
        except DecodingError as exc:
            raise RuntimeError(f"Malformed observe result from {pool_address}: {exc}") from exc
        logger.debug(
            "univ3_pool_rpc_client: observe pool=%s seconds_agos=%s tick_cumulatives=%s",
            pool_address,
            seconds_agos,
            list(tick_cumulatives),
        )
        return ObservationSample(
            tick_cumulatives=[int(value) for value in tick_cumulatives],
            seconds_per_liquidity_cumulative_x128s=[int(value) for value in seconds_per_liquidity],
        )

    def _eth_call(self, *, to: str, data: str) -> str:
        payload = self._post_rpc(
            method="eth_call",
            params=[{"to": Web3.to_checksum_address(to), "data": data}, "latest"],
        )
        return payload.get("result") or ""

    def _post_rpc(self, *, method: str, params: list) -> dict:
        attempts = max(1, self._settings.max_retries)
        delay = 0.25
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            self._respect_rate_limit()
            try:
                with httpx.Client(timeout=self._settings.timeout_seconds) as client:
                    response = client.post(
                        self._settings.rpc_url,
                        json={
                            "jsonrpc": "2.0",
                            "id": self._next_request_id(),
                            "method": method,
                            "params": params,
                        },
                    )
                    response.raise_for_status()
                    payload = response.json()

                if not isinstance(payload, dict):
                    raise RuntimeError("Malformed JSON-RPC response.")
                error = payload.get("error")
                if error:
                    message = str(error.get("message", error)) if isinstance(error, dict) else str(error)
                    if "revert" in message.lower():
                        raise PoolCallRevertedError(message)
                    raise RuntimeError(message)

                return payload
            except PoolCallRevertedError:
                raise
            except (httpx.HTTPError, RuntimeError, ValueError) as exc:
                last_exc = exc
                if attempt == attempts:
                    break
                logger.warning(
                    "univ3_pool_rpc_client: rpc_retry method=%s attempt=%s/%s error=%s",
                    method,
                    attempt,
                    attempts,
                    exc,
                )
                time.sleep(delay)
                delay *= 2

        raise RuntimeError(f"RPC request failed after retries: {last_exc}") from last_exc

    def _respect_rate_limit(self) -> None:
        min_interval = max(0, self._settings.min_interval_ms) / 1000.0
        if min_interval <= 0:
            return

        with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request_at
            if elapsed < min_interval:
                time.sleep(min_interval - elapsed)
            self._last_request_at = time.monotonic()

    def _next_request_id(self) -> int:
        with self._lock:
            self._request_id += 1
            return self._request_id


class Univ3PoolObservationSource:
    def __init__(self, *, client: Univ3PoolRpcClient, pool_address: str):
        self._client = client
        self._pool_address = pool_address

    @property
    def address(self) -> str:
        return self._pool_address

    def observe(self, *, seconds_agos: list[int]) -> ObservationSample:
        return self._client.observe(pool_address=self._pool_address, seconds_agos=seconds_agos)


class Univ3PoolResolver:
    def __init__(self, *, client: Univ3PoolRpcClient, factory_address: str, init_code_hash: str):
        self._client = client
        self._factory_address = factory_address
        self._init_code_hash = init_code_hash

    def resolve(self, *, pool_key: PoolKey) -> Univ3PoolObservationSource:
        pool_address = compute_pool_address(
            factory_address=self._factory_address,
            pool_key=pool_key,
            init_code_hash=self._init_code_hash,
        )
        logger.info(
            "univ3_pool_resolver: resolved pool=%s token0=%s token1=%s fee=%s",
            pool_address,
            pool_key.token0,
            pool_key.token1,
            pool_key.fee,
        )
        return Univ3PoolObservationSource(client=self._client, pool_address=pool_address)
