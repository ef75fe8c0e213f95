"""pluggy hook specifications for converter plugins.

Plugins contribute built-in converters and string type converters to the
resolver. The plugin manager collects them once, when it is built or when a
plugin is registered.

Usage (implementing a plugin):
    from jsoncontract.plugins.hookspecs import hookimpl

    class MoneyPlugin:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def jsoncontract_type_converters(self):
            return {Money: StringTypeConverter(Money.parse)}

Note: @hookspec defines the hook interface (done here).
      @hookimpl marks plugin implementations of those hooks.
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from jsoncontract.contracts.converters import JsonConverter, TypeConverter

# Project name for pluggy
PROJECT_NAME = "jsoncontract"

# Hook specification marker
hookspec = pluggy.HookspecMarker(PROJECT_NAME)

# Hook implementation marker (for plugins to use)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class JsonContractConverterSpec:
    """Hook specifications for converter plugins."""

    @hookspec
    def jsoncontract_builtin_converters(self) -> list["JsonConverter"]:  # type: ignore[empty-body]
        """Return converter instances consulted for every contract.

        The first converter whose can_convert() accepts a type becomes that
        contract's internal converter. Results are concatenated in hook call
        order, and the built-in plugin always runs first.
        """

    @hookspec
    def jsoncontract_type_converters(self) -> dict[type, "TypeConverter"]:  # type: ignore[empty-body]
        """Return string type converters keyed by the type they render.

        Lookup walks the MRO, so a converter registered for a base class
        also applies to its subclasses.
        """
