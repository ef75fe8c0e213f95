"""Copy-on-write contract cache.

Readers take no lock: a lookup reads the current snapshot reference, and the
snapshot is never mutated. Publishing takes the process-wide _PUBLISH_LOCK,
copies the snapshot, adds the entry and swaps the reference. Builds happen
outside the lock. When two threads race to build the same key, the
first contract published is kept and the second build is discarded.

There is no eviction: entries live as long as the cache.
"""

from __future__ import annotations

from threading import Lock
from types import MappingProxyType
from typing import Any

import structlog

from jsoncontract.contracts.contract import JsonContract

logger = structlog.get_logger(__name__)

ContractKey = tuple[type, Any]

_PUBLISH_LOCK = Lock()


class ContractCache:
    """Contracts keyed by (resolver class, underlying type)."""

    __slots__ = ("_snapshot",)

    def __init__(self) -> None:
        self._snapshot: MappingProxyType[ContractKey, JsonContract] = MappingProxyType({})

    def get(self, key: ContractKey) -> JsonContract | None:
        return self._snapshot.get(key)

    def publish(self, key: ContractKey, contract: JsonContract) -> JsonContract:
        """Publish ``contract`` unless another thread got there first.

        Returns:
            The contract now cached under ``key``
        """
        with _PUBLISH_LOCK:
            current = self._snapshot.get(key)
            if current is not None:
                return current
            updated = dict(self._snapshot)
            updated[key] = contract
            self._snapshot = MappingProxyType(updated)
            size = len(updated)

        logger.debug("contract_published", type=repr(key[1]), resolver=key[0].__qualname__, cache_size=size)
        return contract

    @property
    def snapshot(self) -> MappingProxyType[ContractKey, JsonContract]:
        return self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)

    def __contains__(self, key: object) -> bool:
        return key in self._snapshot


# Shared by every resolver constructed with shared_cache=True
SHARED_CONTRACT_CACHE = ContractCache()
