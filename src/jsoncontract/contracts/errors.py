"""Exceptions raised while resolving contracts.

Configuration errors describe an authoring mistake in the target type. They
abort resolution for that type and nothing is published to the cache. They
are never retried.
"""

from __future__ import annotations

from typing import Any


class JsonContractError(Exception):
    """Base class for every error raised by jsoncontract."""


class ContractConfigurationError(JsonContractError):
    """The target type's annotations cannot produce a consistent contract.

    Attributes:
        target_type: The type whose contract was being built
    """

    def __init__(self, message: str, *, target_type: Any = None) -> None:
        self.target_type = target_type
        super().__init__(message)


class ConstructorSelectionError(ContractConfigurationError):
    """More than one constructor is designated for deserialization."""


class CallbackConfigurationError(ContractConfigurationError):
    """A lifecycle hook is declared twice, stacked, abstract or has a bad signature.

    Attributes:
        method_name: Qualified name of the offending method
    """

    def __init__(self, message: str, *, target_type: Any = None, method_name: str | None = None) -> None:
        self.method_name = method_name
        super().__init__(message, target_type=target_type)


class MemberDiscoveryError(JsonContractError):
    """Member discovery returned an invalid result (precondition violation)."""


class ValueProviderError(JsonContractError):
    """Getting or setting a member value through a property accessor failed.

    Attributes:
        member_name: Member being accessed
        target_type: Type declaring the member
    """

    def __init__(self, message: str, *, member_name: str, target_type: Any) -> None:
        self.member_name = member_name
        self.target_type = target_type
        super().__init__(message)
