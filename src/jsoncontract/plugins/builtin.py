"""Built-in converters and string type converters.

Registered first by ConverterPluginManager, so the built-in converter order
is fixed. That order decides which converter becomes a contract's internal
converter when several could handle a type.
"""

from __future__ import annotations

import ipaddress
import operator
import re
import types
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath
from typing import Any, NamedTuple

from jsoncontract.contracts.converters import JsonConverter, StringTypeConverter, TypeConverter
from jsoncontract.plugins.hookspecs import hookimpl

# NOTE: pandas is imported LAZILY inside DataFrameConverter.can_convert() so
# resolving contracts never pulls in pandas for callers that don't use it.


class KeyValuePair(NamedTuple):
    """One entry of a mapping, serialized as {"Key": ..., "Value": ...}."""

    key: Any
    value: Any


class SimpleNamespaceConverter(JsonConverter):
    """Attribute bags whose members exist only at runtime."""

    def can_convert(self, object_type: type) -> bool:
        return issubclass(object_type, types.SimpleNamespace)


class BinaryConverter(JsonConverter):
    """Mutable and borrowed binary buffers, written as base64."""

    def can_convert(self, object_type: type) -> bool:
        return issubclass(object_type, (bytearray, memoryview))


class KeyValuePairConverter(JsonConverter):
    def can_convert(self, object_type: type) -> bool:
        return issubclass(object_type, KeyValuePair)


class DataFrameConverter(JsonConverter):
    """pandas DataFrames, written as a list of row objects."""

    def can_convert(self, object_type: type) -> bool:
        module = getattr(object_type, "__module__", "")
        if not module.startswith("pandas"):
            return False

        import pandas as pd

        return issubclass(object_type, pd.DataFrame)


DEFAULT_TYPE_CONVERTERS: dict[type, TypeConverter] = {
    PurePath: StringTypeConverter(PurePath),
    PurePosixPath: StringTypeConverter(PurePosixPath),
    PureWindowsPath: StringTypeConverter(PureWindowsPath),
    Path: StringTypeConverter(Path),
    ipaddress.IPv4Address: StringTypeConverter(ipaddress.IPv4Address),
    ipaddress.IPv6Address: StringTypeConverter(ipaddress.IPv6Address),
    ipaddress.IPv4Network: StringTypeConverter(ipaddress.IPv4Network),
    ipaddress.IPv6Network: StringTypeConverter(ipaddress.IPv6Network),
    ipaddress.IPv4Interface: StringTypeConverter(ipaddress.IPv4Interface),
    ipaddress.IPv6Interface: StringTypeConverter(ipaddress.IPv6Interface),
    re.Pattern: StringTypeConverter(re.compile, format=operator.attrgetter("pattern")),
}


class BuiltinConverterPlugin:
    """Hook implementations for the library's own converters."""

    @hookimpl(tryfirst=True)
    def jsoncontract_builtin_converters(self) -> list[JsonConverter]:
        return [
            SimpleNamespaceConverter(),
            BinaryConverter(),
            KeyValuePairConverter(),
            DataFrameConverter(),
        ]

    @hookimpl(tryfirst=True)
    def jsoncontract_type_converters(self) -> dict[type, TypeConverter]:
        return dict(DEFAULT_TYPE_CONVERTERS)
