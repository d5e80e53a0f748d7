from __future__ import annotations

from typing import Protocol

from twap_oracle.domain.entities.observation import ObservationSample
from twap_oracle.domain.entities.pool import PoolKey


class ObservationSourcePort(Protocol):
    @property
    def address(self) -> str:
        ...

    def observe(self, *, seconds_agos: list[int]) -> ObservationSample:
        ...


class ObservationSourceResolverPort(Protocol):
    def resolve(self, *, pool_key: PoolKey) -> ObservationSourcePort:
        ...
