"""Property metadata for Object, Dictionary and Dynamic contracts.

JsonProperty: immutable description of one serializable member
PropertyCollection: insertion-ordered, read-only mapping keyed by serialized name
ValueProvider: accessor contract implemented by the engine
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from jsoncontract.contracts.converters import JsonConverter
from jsoncontract.contracts.enums import (
    DefaultValueHandling,
    NullValueHandling,
    ObjectCreationHandling,
    ReferenceLoopHandling,
    Required,
    TypeNameHandling,
)
from jsoncontract.contracts.sentinels import MISSING

logger = structlog.get_logger(__name__)


class ValueProvider(ABC):
    """Gets and sets one member's value on an instance."""

    @abstractmethod
    def get_value(self, target: Any) -> Any: ...

    @abstractmethod
    def set_value(self, target: Any, value: Any) -> None: ...


@dataclass(frozen=True, slots=True, kw_only=True)
class JsonProperty:
    """One serializable member of a contract.

    Nullable fields are "unset" when None; the serializer substitutes its own
    defaults. ``order`` of None sorts as -1.

    Attributes:
        property_name: Name written to / read from the document
        underlying_name: Attribute or parameter name on the type
        property_type: Declared value type
        declaring_type: Class that declared the member
        readable: Serializer may read the value from an instance
        writable: Serializer may assign the value on an instance
        ignored: Member is excluded from reading and writing
        has_member_attribute: Member carried a JsonField or DataMember marker
    """

    property_name: str
    underlying_name: str
    property_type: Any = object
    declaring_type: Any = None
    order: int | None = None
    required: Required | None = None
    ignored: bool = False
    readable: bool = False
    writable: bool = False
    has_member_attribute: bool = False
    value_provider: ValueProvider | None = field(default=None, compare=False, repr=False)
    converter: JsonConverter | None = None
    member_converter: JsonConverter | None = None
    default_value: Any = MISSING
    null_value_handling: NullValueHandling | None = None
    default_value_handling: DefaultValueHandling | None = None
    reference_loop_handling: ReferenceLoopHandling | None = None
    object_creation_handling: ObjectCreationHandling | None = None
    type_name_handling: TypeNameHandling | None = None
    is_reference: bool | None = None
    item_is_reference: bool | None = None
    item_converter: JsonConverter | None = None
    item_reference_loop_handling: ReferenceLoopHandling | None = None
    item_type_name_handling: TypeNameHandling | None = None
    should_serialize: Callable[[Any], bool] | None = field(default=None, compare=False, repr=False)
    get_is_specified: Callable[[Any], bool] | None = field(default=None, compare=False, repr=False)
    set_is_specified: Callable[[Any, bool], None] | None = field(default=None, compare=False, repr=False)

    @property
    def required_or_default(self) -> Required:
        return self.required if self.required is not None else Required.DEFAULT

    @property
    def sort_key(self) -> int:
        return self.order if self.order is not None else -1


class PropertyCollection(Mapping[str, JsonProperty]):
    """Read-only, insertion-ordered properties keyed by serialized name.

    Built once through ``build()``. On a duplicate name the first entry is
    kept. The one exception: an ignored entry gives way to a later entry
    that is not ignored.
    """

    __slots__ = ("_by_name", "_declaring_type")

    def __init__(self, declaring_type: Any = None) -> None:
        self._declaring_type = declaring_type
        self._by_name: dict[str, JsonProperty] = {}

    @classmethod
    def build(cls, declaring_type: Any, properties: Iterable[JsonProperty]) -> PropertyCollection:
        collection = cls(declaring_type)
        for prop in properties:
            collection._add(prop)
        return collection

    def _add(self, prop: JsonProperty) -> None:
        existing = self._by_name.get(prop.property_name)
        if existing is None:
            self._by_name[prop.property_name] = prop
            return

        if existing.ignored and not prop.ignored:
            self._by_name[prop.property_name] = prop
            return

        logger.debug(
            "duplicate_property_dropped",
            declaring_type=getattr(self._declaring_type, "__qualname__", repr(self._declaring_type)),
            property_name=prop.property_name,
            kept=existing.underlying_name,
            dropped=prop.underlying_name,
        )

    @property
    def declaring_type(self) -> Any:
        return self._declaring_type

    def ordered(self) -> PropertyCollection:
        """Return a copy sorted by explicit order; ties keep insertion order."""
        return PropertyCollection.build(self._declaring_type, sorted(self._by_name.values(), key=lambda p: p.sort_key))

    def get_closest_match_property(self, name: str) -> JsonProperty | None:
        """Exact name match first, then case-insensitive."""
        prop = self._by_name.get(name)
        if prop is not None:
            return prop
        folded = name.casefold()
        for candidate in self._by_name.values():
            if candidate.property_name.casefold() == folded:
                return candidate
        return None

    def by_underlying_name(self, name: str) -> JsonProperty | None:
        for candidate in self._by_name.values():
            if candidate.underlying_name == name:
                return candidate
        return None

    def __getitem__(self, name: str) -> JsonProperty:
        return self._by_name[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_name)

    def __len__(self) -> int:
        return len(self._by_name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PropertyCollection):
            return NotImplemented
        return list(self._by_name.values()) == list(other._by_name.values())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PropertyCollection({list(self._by_name)!r})"
