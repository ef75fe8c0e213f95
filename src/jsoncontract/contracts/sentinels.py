"""Shared sentinel values for contract metadata.

A property's default value may legitimately be ``None``, so "no default
declared" needs its own marker.

Example usage:
    from jsoncontract.contracts.sentinels import MISSING

    if prop.default_value is MISSING:
        # No DefaultValue marker on the member
        ...
"""

from typing import Final


class MissingSentinel:
    """Sentinel class to distinguish "not declared" from ``None``.

    This is a singleton - use the MISSING instance, not the class directly.
    Comparison should always use `is` identity, never equality.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"

    def __bool__(self) -> bool:
        return False


MISSING: Final[MissingSentinel] = MissingSentinel()
"""Singleton sentinel indicating a value was not declared.

Use identity comparison: `if value is MISSING:`
"""
