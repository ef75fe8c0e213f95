"""Lifecycle hook discovery and validation.

Hooks are found level by level from the root of the hierarchy to the leaf.
A hook declared on a deeper level replaces the one inherited from above, so
each kind ends up with at most one function.
"""

from __future__ import annotations

import collections
import weakref
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from jsoncontract.contracts.context import ErrorContext, SerializationContext
from jsoncontract.contracts.descriptors import MethodDescriptor, TypeDescriptor
from jsoncontract.contracts.enums import HookKind
from jsoncontract.contracts.errors import CallbackConfigurationError
from jsoncontract.contracts.sentinels import MISSING

Hook = Callable[..., None]

# Types deriving from these builtin containers never get on_deserialized or
# on_serializing hooks; they would fire against a half-built instance.
NO_DESERIALIZED_CALLBACK_TYPES: frozenset[type] = frozenset(
    {
        collections.ChainMap,
        weakref.WeakKeyDictionary,
        weakref.WeakValueDictionary,
        weakref.WeakSet,
    }
)

_EXCLUDED_ON_RESTRICTED_TYPES = frozenset({HookKind.ON_DESERIALIZED, HookKind.ON_SERIALIZING})


@dataclass(frozen=True, slots=True)
class CallbackSet:
    on_serializing: Hook | None = None
    on_serialized: Hook | None = None
    on_deserializing: Hook | None = None
    on_deserialized: Hook | None = None
    on_error: Hook | None = None

    def as_kwargs(self) -> dict[str, Hook | None]:
        return {kind.value: getattr(self, kind.value) for kind in HookKind}


def _accepts(annotation: Any, expected: type) -> bool:
    return annotation is MISSING or annotation is expected or annotation == expected.__name__


def _returns_none(method: MethodDescriptor) -> bool:
    if not method.has_return_annotation:
        return True
    annotation = method.return_annotation
    return annotation is None or annotation is type(None) or annotation == "None"


def _invalid(message: str, method: MethodDescriptor, descriptor: TypeDescriptor) -> CallbackConfigurationError:
    return CallbackConfigurationError(
        message,
        target_type=descriptor.target,
        method_name=f"{method.declaring_type.__qualname__}.{method.name}",
    )


def _validate(method: MethodDescriptor, kind: HookKind, descriptor: TypeDescriptor) -> None:
    qualname = f"{method.declaring_type.__qualname__}.{method.name}"
    if method.is_bound_kind:
        raise _invalid(f"Serialization callback '{qualname}' must be an instance method.", method, descriptor)
    if method.is_abstract:
        raise _invalid(f"Serialization callback '{qualname}' cannot be abstract.", method, descriptor)
    if not _returns_none(method):
        raise _invalid(f"Serialization callback '{qualname}' must return None.", method, descriptor)

    params = method.parameter_annotations
    if kind is HookKind.ON_ERROR:
        if len(params) != 2 or not (_accepts(params[0], SerializationContext) and _accepts(params[1], ErrorContext)):
            raise _invalid(
                f"Error callback '{qualname}' must take (context: SerializationContext, error_context: ErrorContext).",
                method,
                descriptor,
            )
    elif len(params) != 1 or not _accepts(params[0], SerializationContext):
        raise _invalid(
            f"Serialization callback '{qualname}' must take a single SerializationContext parameter.",
            method,
            descriptor,
        )


def resolve_callback_methods(
    descriptor: TypeDescriptor,
    excluded_types: frozenset[type] = NO_DESERIALIZED_CALLBACK_TYPES,
) -> CallbackSet:
    """Find and validate the lifecycle hooks of ``descriptor``.

    Args:
        descriptor: Type whose hierarchy is walked root to leaf
        excluded_types: Base classes whose subclasses get no on_deserialized or
            on_serializing hook

    Returns:
        The effective hook per kind

    Raises:
        CallbackConfigurationError: A hook is duplicated at one level, carries
            several hook markers, is abstract or has an invalid signature
    """
    resolved: dict[HookKind, Hook | None] = dict.fromkeys(HookKind)
    restricted = issubclass(descriptor.runtime_class, tuple(excluded_types))

    for level in descriptor.levels:
        found_at_level: dict[HookKind, MethodDescriptor] = {}
        for method in level.methods:
            if len(method.hooks) > 1:
                kinds = " and ".join(sorted(kind.value for kind in method.hooks))
                raise _invalid(
                    f"Invalid callback: method '{level.cls.__qualname__}.{method.name}' is marked as both {kinds}.",
                    method,
                    descriptor,
                )
            for kind in method.hooks:
                previous = found_at_level.get(kind)
                if previous is not None:
                    raise _invalid(
                        f"Invalid callback: both '{previous.name}' and '{method.name}' in type "
                        f"'{level.cls.__qualname__}' are marked {kind.value}.",
                        method,
                        descriptor,
                    )
                _validate(method, kind, descriptor)
                found_at_level[kind] = method

        for kind, method in found_at_level.items():
            if restricted and kind in _EXCLUDED_ON_RESTRICTED_TYPES:
                continue
            resolved[kind] = method.function

    return CallbackSet(**{kind.value: hook for kind, hook in resolved.items()})
