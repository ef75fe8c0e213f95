"""Converter plugins via pluggy.

- Hookspecs: pluggy hook definitions for converter contributions
- Builtin: the library's own converters and string type converters
- Manager: registration and lookup
"""

from jsoncontract.plugins.builtin import KeyValuePair
from jsoncontract.plugins.hookspecs import hookimpl
from jsoncontract.plugins.manager import ConverterPluginManager, get_plugin_manager

__all__ = [
    "ConverterPluginManager",
    "KeyValuePair",
    "get_plugin_manager",
    "hookimpl",
]
