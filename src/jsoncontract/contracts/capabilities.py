"""Explicit capabilities a type opts into by subclassing.

The resolver classifies types and attaches property predicates based on these
ABCs. A method that happens to share a name is not enough: a type has to
inherit the capability (or be registered with it via ``register``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, MutableMapping
from typing import Any

from jsoncontract.contracts.context import SerializationContext


class ConditionalSerialization(ABC):
    """Decides per member whether its value is written.

    Every property of an implementing type gets a ``should_serialize``
    predicate that calls this method with the member's name.
    """

    @abstractmethod
    def should_serialize(self, member_name: str) -> bool: ...


class SpecifiedTracking(ABC):
    """Tracks whether each member's value was present in the input."""

    @abstractmethod
    def is_specified(self, member_name: str) -> bool: ...

    @abstractmethod
    def set_specified(self, member_name: str, value: bool) -> None: ...


class CustomSerializable(ABC):
    """Type that supplies its own member data instead of a property list.

    Implementations may also define a ``from_object_data(info, context)``
    classmethod; the resolver exposes it as the contract's creator.
    """

    @abstractmethod
    def get_object_data(self, info: MutableMapping[str, Any], context: SerializationContext) -> None: ...


class DynamicMemberProvider(ABC):
    """Type whose members are discovered at runtime from the instance."""

    @abstractmethod
    def get_dynamic_member_names(self) -> Iterable[str]: ...

    @abstractmethod
    def try_get_member(self, name: str) -> tuple[bool, Any]: ...

    @abstractmethod
    def try_set_member(self, name: str, value: Any) -> bool: ...
