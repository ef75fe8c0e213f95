"""Member accessors attached to JsonProperty.

ReflectionValueProvider looks the member up by name on every call.
CompiledValueProvider binds the getter and setter once at construction.
Both wrap accessor failures in ValueProviderError, so the serializer sees one
error type whatever the member raised.

Static (ClassVar) members read and write the declaring class and ignore the
target instance. Read-only fields (Final, frozen dataclass) are written with
object.__setattr__. The property builder only marks them writable when an
explicit member marker asks for it.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from typing import Any

from jsoncontract.contracts.descriptors import MemberDescriptor
from jsoncontract.contracts.enums import MemberKind
from jsoncontract.contracts.errors import ValueProviderError
from jsoncontract.contracts.property import ValueProvider


def _get_error(member: MemberDescriptor, target: Any) -> ValueProviderError:
    return ValueProviderError(
        f"Error getting value from '{member.name}' on '{type(target).__qualname__}'.",
        member_name=member.name,
        target_type=member.declaring_type,
    )


def _set_error(member: MemberDescriptor, target: Any) -> ValueProviderError:
    return ValueProviderError(
        f"Error setting value to '{member.name}' on '{type(target).__qualname__}'.",
        member_name=member.name,
        target_type=member.declaring_type,
    )


class ReflectionValueProvider(ValueProvider):
    """Accessor that resolves the member by name on each call."""

    __slots__ = ("_member",)

    def __init__(self, member: MemberDescriptor) -> None:
        self._member = member

    def get_value(self, target: Any) -> Any:
        member = self._member
        owner = member.declaring_type if member.is_static else target
        try:
            return getattr(owner, member.name)
        except Exception as exc:
            raise _get_error(member, target) from exc

    def set_value(self, target: Any, value: Any) -> None:
        member = self._member
        try:
            if member.is_static:
                setattr(member.declaring_type, member.name, value)
            elif member.is_readonly:
                object.__setattr__(target, member.name, value)
            else:
                setattr(target, member.name, value)
        except Exception as exc:
            raise _set_error(member, target) from exc


def _compile_getter(member: MemberDescriptor) -> Callable[[Any], Any]:
    if member.is_static:
        owner, name = member.declaring_type, member.name
        return lambda _target: getattr(owner, name)
    if member.kind is MemberKind.PROPERTY and member.fget is not None:
        return member.fget
    return operator.attrgetter(member.name)


def _compile_setter(member: MemberDescriptor) -> Callable[[Any, Any], None]:
    name = member.name
    if member.is_static:
        owner = member.declaring_type
        return lambda _target, value: setattr(owner, name, value)
    if member.kind is MemberKind.PROPERTY and member.fset is not None:
        return member.fset
    if member.is_readonly:
        return lambda target, value: object.__setattr__(target, name, value)
    return lambda target, value: setattr(target, name, value)


class CompiledValueProvider(ValueProvider):
    """Accessor with the getter and setter bound at construction."""

    __slots__ = ("_getter", "_member", "_setter")

    def __init__(self, member: MemberDescriptor) -> None:
        self._member = member
        self._getter = _compile_getter(member)
        self._setter = _compile_setter(member)

    def get_value(self, target: Any) -> Any:
        try:
            return self._getter(target)
        except Exception as exc:
            raise _get_error(self._member, target) from exc

    def set_value(self, target: Any, value: Any) -> None:
        try:
            self._setter(target, value)
        except Exception as exc:
            raise _set_error(self._member, target) from exc
