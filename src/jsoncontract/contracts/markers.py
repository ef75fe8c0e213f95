"""Declarative markers that shape contract resolution.

Member markers go in ``typing.Annotated`` metadata on field annotations,
property return annotations or constructor parameters::

    @json_object(member_serialization=MemberSerialization.OPT_IN)
    class Order:
        order_id: Annotated[int, JsonField("id", required=Required.ALWAYS, order=0)]
        notes: Annotated[str, JsonIgnore()] = ""

        @json_constructor
        @classmethod
        def create(cls, id: int) -> "Order": ...

        @on_deserialized
        def _loaded(self, context: SerializationContext) -> None: ...

Class decorators store their marker on the class. Container and converter
markers are inherited. ``data_contract`` is searched up the hierarchy.
``serializable`` applies to the decorated class only. Method decorators tag
the function. A staticmethod or classmethod wrapper is unwrapped first, so
decorator order does not matter.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from jsoncontract.contracts.converters import JsonConverter, TypeConverter
from jsoncontract.contracts.enums import (
    DefaultValueHandling,
    HookKind,
    MemberSerialization,
    NullValueHandling,
    ObjectCreationHandling,
    ReferenceLoopHandling,
    Required,
    TypeNameHandling,
)

_T = TypeVar("_T")

# Attribute names written onto decorated classes/functions
CONTAINER_ATTR = "__jsoncontract_container__"
DATA_CONTRACT_ATTR = "__jsoncontract_data_contract__"
SERIALIZABLE_ATTR = "__jsoncontract_serializable__"
CONVERTER_ATTR = "__jsoncontract_converter__"
TYPE_CONVERTER_ATTR = "__jsoncontract_type_converter__"
HOOKS_ATTR = "__jsoncontract_hooks__"
CONSTRUCTOR_ATTR = "__jsoncontract_constructor__"


# =============================================================================
# Member markers (Annotated metadata)
# =============================================================================


@dataclass(frozen=True, slots=True)
class JsonField:
    """Explicitly includes a member and overrides its serialization settings.

    Every override defaults to None ("unset") so the serializer can tell an
    explicit library default apart from no setting at all.
    """

    name: str | None = None
    required: Required | None = None
    order: int | None = None
    null_value_handling: NullValueHandling | None = None
    default_value_handling: DefaultValueHandling | None = None
    reference_loop_handling: ReferenceLoopHandling | None = None
    object_creation_handling: ObjectCreationHandling | None = None
    type_name_handling: TypeNameHandling | None = None
    is_reference: bool | None = None
    item_is_reference: bool | None = None
    item_reference_loop_handling: ReferenceLoopHandling | None = None
    item_type_name_handling: TypeNameHandling | None = None
    item_converter: type[JsonConverter] | None = None
    item_converter_args: tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class JsonIgnore:
    """Excludes a member regardless of serialization mode."""


@dataclass(frozen=True, slots=True)
class NonSerialized:
    """Excludes a field; equivalent to JsonIgnore for resolution purposes."""


@dataclass(frozen=True, slots=True)
class DataMember:
    """Data-contract member marker; honoured only when a data contract applies.

    ``order == -1`` means unset.
    """

    name: str | None = None
    order: int = -1
    is_required: bool = False


@dataclass(frozen=True, slots=True)
class IgnoreDataMember:
    """Excludes a member outside opt-in mode."""


@dataclass(frozen=True, slots=True)
class WithConverter:
    """Attaches a converter to one member; takes precedence over the value type's."""

    converter_type: type[JsonConverter]
    args: tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class DefaultValue:
    """Fallback value consulted by the default-value handling policy."""

    value: Any


# =============================================================================
# Class markers
# =============================================================================


@dataclass(frozen=True, slots=True)
class ContainerOptions:
    """Settings shared by object, array and dictionary markers."""

    kind: str
    id: str | None = None
    title: str | None = None
    description: str | None = None
    is_reference: bool | None = None
    member_serialization: MemberSerialization = MemberSerialization.OPT_OUT
    item_required: Required | None = None
    allow_nullable_items: bool = True


@dataclass(frozen=True, slots=True)
class DataContractOptions:
    name: str | None = None
    namespace: str | None = None
    is_reference: bool = False


@dataclass(frozen=True, slots=True)
class ConverterOptions:
    converter_type: type[JsonConverter]
    args: tuple[Any, ...] = field(default=())


def _container(options: ContainerOptions) -> Callable[[type[_T]], type[_T]]:
    def decorate(cls: type[_T]) -> type[_T]:
        setattr(cls, CONTAINER_ATTR, options)
        return cls

    return decorate


def json_object(
    *,
    member_serialization: MemberSerialization = MemberSerialization.OPT_OUT,
    item_required: Required | None = None,
    is_reference: bool | None = None,
    id: str | None = None,  # noqa: A002
    title: str | None = None,
    description: str | None = None,
) -> Callable[[type[_T]], type[_T]]:
    """Forces an Object contract and sets its member serialization mode."""
    return _container(
        ContainerOptions(
            kind="object",
            id=id,
            title=title,
            description=description,
            is_reference=is_reference,
            member_serialization=member_serialization,
            item_required=item_required,
        )
    )


def json_array(
    *,
    allow_nullable_items: bool = True,
    is_reference: bool | None = None,
    id: str | None = None,  # noqa: A002
    title: str | None = None,
    description: str | None = None,
) -> Callable[[type[_T]], type[_T]]:
    """Forces an Array contract."""
    return _container(
        ContainerOptions(
            kind="array",
            id=id,
            title=title,
            description=description,
            is_reference=is_reference,
            allow_nullable_items=allow_nullable_items,
        )
    )


def json_dictionary(
    *,
    is_reference: bool | None = None,
    id: str | None = None,  # noqa: A002
    title: str | None = None,
    description: str | None = None,
) -> Callable[[type[_T]], type[_T]]:
    """Forces a Dictionary contract."""
    return _container(
        ContainerOptions(kind="dictionary", id=id, title=title, description=description, is_reference=is_reference)
    )


def data_contract(
    *, name: str | None = None, namespace: str | None = None, is_reference: bool = False
) -> Callable[[type[_T]], type[_T]]:
    """Marks a data contract: opt-in membership through DataMember."""

    def decorate(cls: type[_T]) -> type[_T]:
        setattr(cls, DATA_CONTRACT_ATTR, DataContractOptions(name=name, namespace=namespace, is_reference=is_reference))
        return cls

    return decorate


def serializable(cls: type[_T]) -> type[_T]:
    """Serialize every field of this class (ignored unless the resolver honours it)."""
    setattr(cls, SERIALIZABLE_ATTR, True)
    return cls


def json_converter(converter_type: type[JsonConverter], *args: Any) -> Callable[[type[_T]], type[_T]]:
    """Attaches a converter to every use of the decorated type."""

    def decorate(cls: type[_T]) -> type[_T]:
        setattr(cls, CONVERTER_ATTR, ConverterOptions(converter_type=converter_type, args=args))
        return cls

    return decorate


def type_converter(converter: TypeConverter) -> Callable[[type[_T]], type[_T]]:
    """Attaches a string type converter to the decorated type."""

    def decorate(cls: type[_T]) -> type[_T]:
        setattr(cls, TYPE_CONVERTER_ATTR, converter)
        return cls

    return decorate


# =============================================================================
# Method markers
# =============================================================================


def _unwrap(func: Any) -> Any:
    return func.__func__ if isinstance(func, (classmethod, staticmethod)) else func


def _hook(kind: HookKind) -> Callable[[_T], _T]:
    def decorate(func: _T) -> _T:
        target = _unwrap(func)
        existing: frozenset[HookKind] = getattr(target, HOOKS_ATTR, frozenset())
        setattr(target, HOOKS_ATTR, existing | {kind})
        return func

    decorate.__name__ = kind.value
    return decorate


on_serializing = _hook(HookKind.ON_SERIALIZING)
on_serialized = _hook(HookKind.ON_SERIALIZED)
on_deserializing = _hook(HookKind.ON_DESERIALIZING)
on_deserialized = _hook(HookKind.ON_DESERIALIZED)
on_error = _hook(HookKind.ON_ERROR)


def json_constructor(func: _T) -> _T:
    """Designates ``__init__`` or a factory classmethod for deserialization."""
    setattr(_unwrap(func), CONSTRUCTOR_ATTR, True)
    return func


# =============================================================================
# Lookup
# =============================================================================


def find_marker(metadata: tuple[Any, ...], marker_type: type[_T]) -> _T | None:
    """First instance of ``marker_type`` in Annotated metadata, or None."""
    for item in metadata:
        if isinstance(item, marker_type):
            return item
    return None


def has_marker(metadata: tuple[Any, ...], *marker_types: type) -> bool:
    return any(isinstance(item, marker_types) for item in metadata)
