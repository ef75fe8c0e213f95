"""Converter base types referenced by contracts.

Contracts only *reference* converters. Reading and writing tokens is the
serializer's job, so the bases here only declare what a converter can
handle.

Two families exist:
- JsonConverter: replaces the serializer's handling of a type entirely
- TypeConverter: renders a type to/from a string (drives String contracts)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any


class JsonConverter(ABC):
    """Custom conversion for one or more types.

    Converters compare equal when they are the same class with the same
    state, so contracts built by racing threads compare equal too.
    """

    @abstractmethod
    def can_convert(self, object_type: type) -> bool:
        """Whether this converter handles ``object_type``."""

    @property
    def can_read(self) -> bool:
        return True

    @property
    def can_write(self) -> bool:
        return True

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def create_converter(converter_type: type[JsonConverter], args: tuple[Any, ...] = ()) -> JsonConverter:
    """Instantiate a converter named by a marker.

    Raises:
        TypeError: If converter_type is not a JsonConverter subclass
    """
    if not (isinstance(converter_type, type) and issubclass(converter_type, JsonConverter)):
        raise TypeError(f"{converter_type!r} is not a JsonConverter subclass")
    return converter_type(*args)


class TypeConverter:
    """Base string converter.

    The base class itself converts nothing. A type whose converter is exactly
    TypeConverter is not treated as string-convertible.
    """

    def can_convert_to(self, destination: type) -> bool:
        return False

    def can_convert_from(self, source: type) -> bool:
        return False

    def convert_to_string(self, value: Any) -> str:
        raise NotImplementedError(f"{type(self).__name__} cannot convert to str")

    def convert_from_string(self, text: str) -> Any:
        raise NotImplementedError(f"{type(self).__name__} cannot convert from str")


class ComponentConverter(TypeConverter):
    """Converter for component-like objects; never renders as a string value."""

    def can_convert_to(self, destination: type) -> bool:
        return destination is str


class ReferenceConverter(TypeConverter):
    """Converter that names an object by reference; never renders as a string value."""

    def can_convert_to(self, destination: type) -> bool:
        return destination is str


# Converter kinds that claim str support but do not produce a value string.
NON_STRING_CONVERTER_KINDS: tuple[type[TypeConverter], ...] = (ComponentConverter, ReferenceConverter)


class StringTypeConverter(TypeConverter):
    """Round-trips a type through ``format``/``parse`` callables.

    Args:
        parse: Builds an instance from its string form
        format: Renders an instance as a string (defaults to ``str``)
    """

    def __init__(self, parse: Callable[[str], Any], format: Callable[[Any], str] = str) -> None:  # noqa: A002
        self._parse = parse
        self._format = format

    def can_convert_to(self, destination: type) -> bool:
        return destination is str

    def can_convert_from(self, source: type) -> bool:
        return source is str

    def convert_to_string(self, value: Any) -> str:
        return self._format(value)

    def convert_from_string(self, text: str) -> Any:
        return self._parse(text)


def converts_to_string(converter: TypeConverter | None) -> bool:
    """Whether ``converter`` renders its type as a plain string value."""
    if converter is None:
        return False
    if type(converter) is TypeConverter or isinstance(converter, NON_STRING_CONVERTER_KINDS):
        return False
    return converter.can_convert_to(str)
