from __future__ import annotations

from eth_abi import encode
from web3 import Web3

from twap_oracle.domain.entities.pool import PoolKey


def compute_pool_address(*, factory_address: str, pool_key: PoolKey, init_code_hash: str) -> str:
    """CREATE2 address of the pool deployed by ``factory_address`` for ``pool_key``."""
    if int(pool_key.token0, 16) >= int(pool_key.token1, 16):
        raise ValueError("pool_key tokens must be sorted.")
    salt = Web3.keccak(
        encode(
            ["address", "address", "uint24"],
            [
                Web3.to_checksum_address(pool_key.token0),
                Web3.to_checksum_address(pool_key.token1),
                pool_key.fee,
            ],
        )
    )
    digest = Web3.keccak(
        b"\xff"
        + bytes.fromhex(_strip_0x(factory_address))
        + bytes(salt)
        + bytes.fromhex(_strip_0x(init_code_hash))
    )
    return Web3.to_checksum_address("0x" + bytes(digest)[12:].hex())


def _strip_0x(value: str) -> str:
    return value[2:] if value.lower().startswith("0x") else value
