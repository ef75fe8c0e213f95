"""Structural protocol implemented by contract resolvers."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from jsoncontract.contracts.contract import JsonContract


@runtime_checkable
class ContractResolver(Protocol):
    """Anything that maps a runtime type to its contract.

    Implementations must raise TypeError for ``None`` and must return the
    same contract instance for repeated requests of the same type.
    """

    def resolve_contract(self, object_type: Any) -> JsonContract: ...
