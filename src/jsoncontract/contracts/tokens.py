"""Tree-node token types.

Any JsonToken subclass resolves to a LINQ contract ahead of the structural
mapping/iterable rules. The serializer writes these nodes verbatim.
"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping, MutableSequence
from typing import Any, overload


class JsonToken:
    """Base node. Tracks its parent container."""

    __slots__ = ("parent",)

    def __init__(self) -> None:
        self.parent: JsonContainer | None = None


class JsonValue(JsonToken):
    """Leaf node wrapping a scalar."""

    __slots__ = ("value",)

    def __init__(self, value: Any = None) -> None:
        super().__init__()
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonValue):
            return NotImplemented
        return bool(self.value == other.value)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"JsonValue({self.value!r})"


def _adopt(parent: JsonContainer, item: Any) -> JsonToken:
    token = item if isinstance(item, JsonToken) else JsonValue(item)
    token.parent = parent
    return token


class JsonContainer(JsonToken):
    """Node holding child tokens."""

    __slots__ = ()


class JsonObject(JsonContainer, MutableMapping[str, JsonToken]):
    """Keyed container; plain values are wrapped in JsonValue on insert."""

    __slots__ = ("_items",)

    def __init__(self, items: dict[str, Any] | None = None) -> None:
        super().__init__()
        self._items: dict[str, JsonToken] = {}
        for key, value in (items or {}).items():
            self[key] = value

    def __getitem__(self, key: str) -> JsonToken:
        return self._items[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._items[key] = _adopt(self, value)

    def __delitem__(self, key: str) -> None:
        self._items.pop(key).parent = None

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


class JsonArray(JsonContainer, MutableSequence[JsonToken]):
    """Ordered container; plain values are wrapped in JsonValue on insert."""

    __slots__ = ("_items",)

    def __init__(self, items: list[Any] | None = None) -> None:
        super().__init__()
        self._items: list[JsonToken] = [_adopt(self, item) for item in items or []]

    @overload
    def __getitem__(self, index: int) -> JsonToken: ...

    @overload
    def __getitem__(self, index: slice) -> list[JsonToken]: ...

    def __getitem__(self, index: int | slice) -> JsonToken | list[JsonToken]:
        return self._items[index]

    def __setitem__(self, index: Any, value: Any) -> None:
        if isinstance(index, slice):
            self._items[index] = [_adopt(self, item) for item in value]
        else:
            self._items[index] = _adopt(self, value)

    def __delitem__(self, index: int | slice) -> None:
        del self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def insert(self, index: int, value: Any) -> None:
        self._items.insert(index, _adopt(self, value))
