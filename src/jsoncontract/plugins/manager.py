"""Converter plugin manager.

Uses pluggy for hook-based registration of built-in converters and string
type converters.
"""

from __future__ import annotations

from functools import cache
from typing import Any

import pluggy

from jsoncontract.contracts.converters import JsonConverter, TypeConverter
from jsoncontract.core.reflection import get_type_descriptor
from jsoncontract.core.type_normalization import runtime_class
from jsoncontract.plugins.builtin import BuiltinConverterPlugin
from jsoncontract.plugins.hookspecs import PROJECT_NAME, JsonContractConverterSpec


class ConverterPluginManager:
    """Collects converters from registered plugins.

    Usage:
        manager = ConverterPluginManager()
        manager.register(MoneyPlugin())

        resolver = DefaultContractResolver(plugin_manager=manager)
    """

    def __init__(self, *, register_builtins: bool = True) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(JsonContractConverterSpec)

        self._builtin_converters: tuple[JsonConverter, ...] = ()
        self._type_converters: dict[type, TypeConverter] = {}

        if register_builtins:
            self.register(BuiltinConverterPlugin(), name="jsoncontract.builtin")

    def register(self, plugin: Any, name: str | None = None) -> None:
        """Register a plugin.

        Args:
            plugin: Plugin instance implementing hook methods
            name: Optional registration name (pluggy derives one otherwise)

        Raises:
            TypeError: If a plugin returns something other than converter instances
        """
        self._pm.register(plugin, name=name)
        self._refresh_caches()

    def _refresh_caches(self) -> None:
        converters: list[JsonConverter] = []
        for contributed in self._pm.hook.jsoncontract_builtin_converters():
            for converter in contributed:
                if not isinstance(converter, JsonConverter):
                    raise TypeError(f"Plugin returned {converter!r}, expected a JsonConverter instance")
                converters.append(converter)

        # Built-in plugin runs first (tryfirst); entries from later hook calls override earlier ones.
        type_converters: dict[type, TypeConverter] = {}
        for contributed_map in self._pm.hook.jsoncontract_type_converters():
            for target, converter in contributed_map.items():
                if not isinstance(converter, TypeConverter):
                    raise TypeError(
                        f"Plugin returned {converter!r} for {target!r}, expected a TypeConverter instance"
                    )
                type_converters[target] = converter

        self._builtin_converters = tuple(converters)
        self._type_converters = type_converters

    # === Getters ===

    def builtin_converters(self) -> tuple[JsonConverter, ...]:
        """Converters consulted for internal_converter, in priority order."""
        return self._builtin_converters

    def get_matching_converter(self, object_type: Any) -> JsonConverter | None:
        """First built-in converter that can convert ``object_type``."""
        cls = runtime_class(object_type)
        for converter in self._builtin_converters:
            if converter.can_convert(cls):
                return converter
        return None

    def get_type_converter(self, object_type: Any) -> TypeConverter | None:
        """String type converter for ``object_type``.

        A ``type_converter`` marker on the class wins. Otherwise registered
        converters are looked up along the MRO.
        """
        descriptor = get_type_descriptor(object_type)
        if descriptor.type_converter_marker is not None:
            return descriptor.type_converter_marker
        for klass in descriptor.runtime_class.__mro__:
            converter = self._type_converters.get(klass)
            if converter is not None:
                return converter
        return None


@cache
def get_plugin_manager() -> ConverterPluginManager:
    """Process-wide manager with only the built-in plugin registered."""
    return ConverterPluginManager()
