"""Type normalization for contract resolution.

Strips nullability and Annotated wrappers, extracts the runtime class from
generic aliases, and classifies primitive types (including numpy scalars).

Classification uses issubclass() checks, never string matching on __name__.
"""

from __future__ import annotations

import collections.abc as cabc
import datetime
import enum
import types
import typing
import uuid
from decimal import Decimal
from typing import Annotated, Any, TypeVar, Union

# NOTE: numpy is imported LAZILY inside is_primitive_type() so importing
# jsoncontract does not pull in numpy for callers that never touch it.

# Types the serializer writes directly as scalars.
PRIMITIVE_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    Decimal,
    datetime.datetime,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
    enum.Enum,
    type(None),
)

# Abstract collection types and the concrete class created for them.
# Order matters: the first base that matches wins.
ABSTRACT_COLLECTION_CREATED_TYPES: tuple[tuple[type, type], ...] = (
    (cabc.MutableMapping, dict),
    (cabc.Mapping, dict),
    (cabc.MutableSet, set),
    (cabc.Set, frozenset),
    (cabc.MutableSequence, list),
    (cabc.Sequence, tuple),
    (cabc.Collection, list),
    (cabc.Iterable, list),
)

_UNION_TYPES: tuple[Any, ...] = (Union, types.UnionType)


def strip_annotated(tp: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split ``Annotated[X, *meta]`` into ``(X, meta)``; other types pass through."""
    if typing.get_origin(tp) is Annotated:
        return tp.__origin__, tuple(tp.__metadata__)
    return tp, ()


def is_nullable_type(tp: Any) -> bool:
    """Whether ``tp`` is a union containing None (``X | None``, ``Optional[X]``)."""
    if typing.get_origin(tp) not in _UNION_TYPES:
        return False
    return type(None) in typing.get_args(tp)


def ensure_not_nullable(tp: Any) -> Any:
    """Strip None from a union.

    ``X | None`` becomes X. A union with several non-None members stays a
    union without None. Anything else is returned unchanged.
    """
    tp, _ = strip_annotated(tp)
    if not is_nullable_type(tp):
        return tp
    remaining = tuple(arg for arg in typing.get_args(tp) if arg is not type(None))
    if len(remaining) == 1:
        return remaining[0]
    return Union[remaining]  # noqa: UP007


def runtime_class(tp: Any) -> type:
    """Class used for isinstance/issubclass checks on ``tp``.

    Generic aliases yield their origin. Unions, TypeVars, Any and other
    typing special forms have no single class and yield ``object``.
    """
    tp, _ = strip_annotated(tp)
    if isinstance(tp, type):
        return tp
    origin = typing.get_origin(tp)
    # `int | str` has origin types.UnionType, which is itself a class
    if origin in _UNION_TYPES:
        return object
    if isinstance(origin, type):
        return origin
    if isinstance(tp, TypeVar) and isinstance(tp.__bound__, type):
        return tp.__bound__
    return object


def is_primitive_type(cls: type) -> bool:
    """Whether the serializer writes ``cls`` directly as a scalar.

    numpy scalar types (np.integer, np.floating, np.bool_, ...) are
    primitives too; numpy is imported lazily.
    """
    if issubclass(cls, PRIMITIVE_TYPES):
        return True
    if cls.__module__ != "numpy" and not cls.__module__.startswith("numpy."):
        return False

    import numpy as np

    return issubclass(cls, np.generic) and not issubclass(cls, (np.void, np.object_))


def created_type_for(cls: type) -> type:
    """Concrete class instantiated for ``cls``.

    Abstract collection ABCs map to builtin containers; everything else is
    created as itself.
    """
    for abstract, concrete in ABSTRACT_COLLECTION_CREATED_TYPES:
        if cls is abstract:
            return concrete
    return cls


def generic_arguments(tp: Any, base: type) -> tuple[Any, ...]:
    """Type arguments ``tp`` supplies to the generic ``base``.

    Checks ``tp`` itself (``dict[str, int]``) and then the parameterized
    ``__orig_bases__`` of its class hierarchy
    (``class Scores(dict[str, float])``). Returns () when nothing is declared.
    """
    tp, _ = strip_annotated(tp)
    origin = typing.get_origin(tp)
    if isinstance(origin, type) and issubclass(origin, base):
        return typing.get_args(tp)

    cls = runtime_class(tp)
    for klass in cls.__mro__:
        for orig in klass.__dict__.get("__orig_bases__", ()):
            orig_origin = typing.get_origin(orig)
            if isinstance(orig_origin, type) and issubclass(orig_origin, base):
                args = typing.get_args(orig)
                if args and not any(isinstance(arg, TypeVar) for arg in args):
                    return args
    return ()
