"""Resolved contracts: how the serializer constructs, reads and writes a type.

Contracts are frozen after construction. The cache hands the same instance to
every caller, and a later resolution of the same key publishes a new
instance instead of touching this one.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from jsoncontract.contracts.context import ErrorContext, SerializationContext
from jsoncontract.contracts.converters import JsonConverter
from jsoncontract.contracts.descriptors import ConstructorDescriptor
from jsoncontract.contracts.enums import ContractKind, HookKind, MemberSerialization, Required
from jsoncontract.contracts.property import PropertyCollection

Hook = Callable[..., None]


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class JsonContract:
    """Fields shared by every contract variant.

    Attributes:
        kind: Contract variant
        underlying_type: Type as requested (may be Optional or a generic alias)
        non_nullable_underlying_type: underlying_type with None stripped
        created_type: Class instantiated on deserialization
        converter: Explicit converter attached to the type
        internal_converter: First matching built-in converter
        default_creator: Zero-argument factory, or None
        default_creator_non_public: Factory bypasses the public __init__
        is_reference: Reference-preservation tri-state
    """

    kind: ContractKind
    underlying_type: Any
    non_nullable_underlying_type: Any
    created_type: type
    converter: JsonConverter | None = None
    internal_converter: JsonConverter | None = None
    default_creator: Callable[[], Any] | None = None
    default_creator_non_public: bool = False
    is_reference: bool | None = None
    on_serializing: Hook | None = None
    on_serialized: Hook | None = None
    on_deserializing: Hook | None = None
    on_deserialized: Hook | None = None
    on_error: Hook | None = None

    def hook(self, kind: HookKind) -> Hook | None:
        hook: Hook | None = getattr(self, kind.value)
        return hook

    def invoke_on_serializing(self, target: Any, context: SerializationContext) -> None:
        if self.on_serializing is not None:
            self.on_serializing(target, context)

    def invoke_on_serialized(self, target: Any, context: SerializationContext) -> None:
        if self.on_serialized is not None:
            self.on_serialized(target, context)

    def invoke_on_deserializing(self, target: Any, context: SerializationContext) -> None:
        if self.on_deserializing is not None:
            self.on_deserializing(target, context)

    def invoke_on_deserialized(self, target: Any, context: SerializationContext) -> None:
        if self.on_deserialized is not None:
            self.on_deserialized(target, context)

    def invoke_on_error(self, target: Any, context: SerializationContext, error_context: ErrorContext) -> None:
        if self.on_error is not None:
            self.on_error(target, context, error_context)


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class JsonObjectContract(JsonContract):
    """Members written as named properties.

    At most one of ``override_constructor`` (designated) and
    ``parametrized_constructor`` (fallback) is set.
    """

    member_serialization: MemberSerialization = MemberSerialization.OPT_OUT
    properties: PropertyCollection = field(default_factory=PropertyCollection)
    item_required: Required | None = None
    override_constructor: ConstructorDescriptor | None = None
    parametrized_constructor: ConstructorDescriptor | None = None
    constructor_parameters: PropertyCollection = field(default_factory=PropertyCollection)

    @property
    def creator(self) -> ConstructorDescriptor | None:
        return self.override_constructor or self.parametrized_constructor


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class JsonArrayContract(JsonContract):
    item_type: Any = None
    allow_nullable_items: bool = True


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class JsonDictionaryContract(JsonContract):
    key_type: Any = None
    value_type: Any = None
    property_name_resolver: Callable[[str], str] | None = None


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class JsonPrimitiveContract(JsonContract):
    pass


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class JsonStringContract(JsonContract):
    pass


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class JsonLinqContract(JsonContract):
    pass


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class JsonDynamicContract(JsonContract):
    properties: PropertyCollection = field(default_factory=PropertyCollection)
    property_name_resolver: Callable[[str], str] | None = None


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class JsonSerializableContract(JsonContract):
    """Type writes its own member data.

    ``serializable_creator`` rebuilds an instance from that data when the type
    defines ``from_object_data``.
    """

    serializable_creator: Callable[..., Any] | None = None
