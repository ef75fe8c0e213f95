"""Type descriptor registry: the single point of runtime introspection.

describe_type() walks a class once and records everything the engine needs.
That covers the root-to-leaf hierarchy, the members and hook methods each
level declares, the constructors, the class markers and the capabilities.
The result is stored in a process-wide registry. Callers may also
register hand-built descriptors, for example for types whose annotations
cannot be evaluated at runtime.

The registry publishes copy-on-write: readers never lock, and a build that
loses a race is discarded in favour of the descriptor already present.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import inspect
import typing
from threading import Lock
from types import MappingProxyType
from typing import Annotated, Any, ClassVar, Final, TypeVar

import structlog

from jsoncontract.contracts.capabilities import (
    ConditionalSerialization,
    CustomSerializable,
    DynamicMemberProvider,
    SpecifiedTracking,
)
from jsoncontract.contracts.descriptors import (
    ConstructorDescriptor,
    MemberDescriptor,
    MethodDescriptor,
    ParameterDescriptor,
    TypeDescriptor,
    TypeLevel,
)
from jsoncontract.contracts.enums import Capability, MemberKind, Visibility
from jsoncontract.contracts.markers import (
    CONSTRUCTOR_ATTR,
    CONTAINER_ATTR,
    CONVERTER_ATTR,
    DATA_CONTRACT_ATTR,
    HOOKS_ATTR,
    SERIALIZABLE_ATTR,
    TYPE_CONVERTER_ATTR,
)
from jsoncontract.contracts.sentinels import MISSING
from jsoncontract.contracts.tokens import JsonToken
from jsoncontract.core.type_normalization import is_primitive_type, runtime_class, strip_annotated

logger = structlog.get_logger(__name__)

# Builtins whose signature cannot be introspected but which construct with no arguments.
_DEFAULT_CONSTRUCTIBLE_BUILTINS: tuple[type, ...] = (
    object,
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
    list,
    tuple,
    dict,
    set,
    frozenset,
)

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)

_CAPABILITY_BASES: tuple[tuple[Capability, type], ...] = (
    (Capability.TOKEN, JsonToken),
    (Capability.MAPPING, cabc.Mapping),
    (Capability.ITERABLE, cabc.Iterable),
    (Capability.TYPE_OBJECT, type),
    (Capability.CUSTOM_SERIALIZABLE, CustomSerializable),
    (Capability.DYNAMIC_MEMBERS, DynamicMemberProvider),
    (Capability.CONDITIONAL, ConditionalSerialization),
    (Capability.SPECIFIED_TRACKING, SpecifiedTracking),
)

Bindings = dict[Any, Any]


# =============================================================================
# Annotation helpers
# =============================================================================


def _annotations_of(obj: Any) -> dict[str, Any]:
    """Annotations declared directly on ``obj``, evaluated where possible.

    String annotations that cannot be evaluated (forward references to names
    that do not exist yet) are left as strings.
    """
    try:
        return dict(inspect.get_annotations(obj, eval_str=True))
    except ValueError:
        # Builtins such as `type` expose __annotations__ as a descriptor
        return {}
    except (NameError, AttributeError, SyntaxError, TypeError):
        pass
    try:
        return dict(inspect.get_annotations(obj))
    except TypeError:
        return {}


def _type_parameters(obj: Any) -> tuple[Any, ...]:
    # Some classes (types.UnionType) expose __parameters__ as a descriptor
    params = getattr(obj, "__parameters__", ())
    return params if isinstance(params, tuple) else ()


def _substitute(tp: Any, bindings: Bindings) -> Any:
    """Replace bound TypeVars in ``tp``, including inside generic aliases."""
    if isinstance(tp, TypeVar):
        return bindings.get(tp, tp)
    params = _type_parameters(tp)
    if params and typing.get_origin(tp) is not None:
        try:
            return tp[tuple(bindings.get(p, p) for p in params)]
        except TypeError:
            return tp
    return tp


def _typevar_bindings(target: Any, cls: type) -> Bindings:
    """Map each TypeVar in ``cls``'s hierarchy to the type it is bound to.

    Bindings come from the requested alias (``Box[int]``) and from the
    parameterized bases each class declares (``class IntBox(Box[int])``).
    """
    bindings: Bindings = {}
    args = typing.get_args(target) if typing.get_origin(target) is not None else ()
    if args:
        bindings.update(zip(_type_parameters(cls), args, strict=False))

    for klass in cls.__mro__:
        for orig in klass.__dict__.get("__orig_bases__", ()):
            origin = typing.get_origin(orig)
            params = _type_parameters(origin)
            for param, arg in zip(params, typing.get_args(orig), strict=False):
                bindings.setdefault(param, _substitute(arg, bindings))
    return bindings


def _unwrap_field_annotation(annotation: Any) -> tuple[Any, tuple[Any, ...], bool, bool]:
    """Peel Annotated/ClassVar/Final off a field annotation.

    Returns:
        (inner type, Annotated metadata, is_static, is_final)
    """
    metadata: list[Any] = []
    is_static = False
    is_final = False
    tp = annotation
    while True:
        tp, extra = strip_annotated(tp)
        metadata.extend(extra)
        origin = typing.get_origin(tp)
        if tp is ClassVar or tp is Final:
            is_static = is_static or tp is ClassVar
            is_final = is_final or tp is Final
            tp = object
        elif origin is ClassVar or origin is Final:
            is_static = is_static or origin is ClassVar
            is_final = is_final or origin is Final
            tp = typing.get_args(tp)[0]
            continue
        return tp, tuple(metadata), is_static, is_final


def _is_dataclass_pseudo_field(annotation: Any) -> bool:
    return annotation is dataclasses.KW_ONLY or annotation is dataclasses.InitVar or isinstance(annotation, dataclasses.InitVar)


def _visibility(name: str, owner: type) -> Visibility:
    if name.startswith("__") and name.endswith("__"):
        return Visibility.PUBLIC
    if name.startswith(f"_{owner.__name__.lstrip('_')}__"):
        return Visibility.PRIVATE
    if name.startswith("_"):
        return Visibility.PROTECTED
    return Visibility.PUBLIC


def _mangle(name: str, owner: type) -> str:
    if name.startswith("__") and not name.endswith("__"):
        return f"_{owner.__name__.lstrip('_')}{name}"
    return name


def _is_synthesized(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


# =============================================================================
# Level description
# =============================================================================


def _describe_property(name: str, prop: property, owner: type, bindings: Bindings) -> MemberDescriptor:
    value_type: Any = object
    metadata: tuple[Any, ...] = ()
    declared_generic = False
    is_indexed = False
    if prop.fget is not None:
        annotations = _annotations_of(prop.fget)
        if "return" in annotations:
            value_type, metadata = strip_annotated(annotations["return"])
            declared_generic = isinstance(value_type, TypeVar)
            value_type = _substitute(value_type, bindings)
        try:
            params = list(inspect.signature(prop.fget).parameters.values())[1:]
        except (TypeError, ValueError):
            params = []
        is_indexed = any(p.default is p.empty and p.kind not in _VARIADIC for p in params)

    return MemberDescriptor(
        name=name,
        kind=MemberKind.PROPERTY,
        declaring_type=owner,
        value_type=value_type,
        declared_generic=declared_generic,
        visibility=_visibility(name, owner),
        can_read=prop.fget is not None,
        can_write=prop.fset is not None,
        is_indexed=is_indexed,
        is_synthesized=_is_synthesized(name),
        metadata=metadata,
        fget=prop.fget,
        fset=prop.fset,
    )


def _describe_fields(owner: type, bindings: Bindings) -> list[MemberDescriptor]:
    namespace = owner.__dict__
    params = namespace.get("__dataclass_params__")
    frozen = bool(params is not None and params.frozen)
    members: list[MemberDescriptor] = []

    annotations = _annotations_of(owner)
    for name, annotation in annotations.items():
        if isinstance(namespace.get(name), property) or _is_dataclass_pseudo_field(annotation):
            continue
        tp, metadata, is_static, is_final = _unwrap_field_annotation(annotation)
        members.append(
            MemberDescriptor(
                name=name,
                kind=MemberKind.FIELD,
                declaring_type=owner,
                value_type=_substitute(tp, bindings),
                declared_generic=isinstance(tp, TypeVar),
                is_static=is_static,
                visibility=_visibility(name, owner),
                is_readonly=is_final or (frozen and not is_static),
                is_synthesized=_is_synthesized(name),
                metadata=metadata,
            )
        )

    slots = namespace.get("__slots__", ())
    for raw in (slots,) if isinstance(slots, str) else slots:
        name = _mangle(raw, owner)
        if name in annotations or raw in ("__dict__", "__weakref__"):
            continue
        members.append(
            MemberDescriptor(
                name=name,
                kind=MemberKind.FIELD,
                declaring_type=owner,
                visibility=_visibility(name, owner),
                is_synthesized=_is_synthesized(name),
            )
        )
    return members


def _describe_hook_method(name: str, raw: Any, owner: type) -> MethodDescriptor | None:
    is_bound_kind = isinstance(raw, (classmethod, staticmethod))
    func = raw.__func__ if is_bound_kind else raw
    hooks = getattr(func, HOOKS_ATTR, None)
    if not hooks or not callable(func):
        return None

    annotations = _annotations_of(func)
    try:
        params = list(inspect.signature(func).parameters.values())
    except (TypeError, ValueError):
        params = []
    if not isinstance(raw, staticmethod):
        params = params[1:]

    return MethodDescriptor(
        name=name,
        declaring_type=owner,
        function=func,
        hooks=frozenset(hooks),
        parameter_annotations=tuple(annotations.get(p.name, MISSING) for p in params),
        has_return_annotation="return" in annotations,
        return_annotation=annotations.get("return"),
        is_abstract=bool(getattr(func, "__isabstractmethod__", False)),
        is_bound_kind=is_bound_kind,
    )


def _describe_level(owner: type, bindings: Bindings) -> TypeLevel:
    members = _describe_fields(owner, bindings)
    methods: list[MethodDescriptor] = []
    for name, value in owner.__dict__.items():
        if isinstance(value, property):
            members.append(_describe_property(name, value, owner, bindings))
            continue
        method = _describe_hook_method(name, value, owner)
        if method is not None:
            methods.append(method)
    return TypeLevel(cls=owner, members=tuple(members), methods=tuple(methods))


# =============================================================================
# Constructors
# =============================================================================


def _parameters_of(func: Any, bindings: Bindings, *, skip_first: bool) -> tuple[ParameterDescriptor, ...] | None:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    annotations = _annotations_of(func) if inspect.isfunction(func) or inspect.ismethod(func) else {}
    params = list(signature.parameters.values())
    if skip_first:
        params = params[1:]

    described: list[ParameterDescriptor] = []
    for param in params:
        if param.kind in _VARIADIC:
            continue
        annotation, metadata = strip_annotated(annotations.get(param.name, MISSING))
        described.append(
            ParameterDescriptor(
                name=param.name,
                annotation=_substitute(annotation, bindings),
                metadata=metadata,
                has_default=param.default is not param.empty,
                default=None if param.default is param.empty else param.default,
            )
        )
    return tuple(described)


def _describe_constructors(cls: type, bindings: Bindings) -> tuple[ConstructorDescriptor, ...]:
    constructors: list[ConstructorDescriptor] = []

    init = cls.__init__
    init_owner = next((k for k in cls.__mro__ if "__init__" in k.__dict__), object)
    if init is object.__init__:
        parameters: tuple[ParameterDescriptor, ...] | None = ()
    elif inspect.isfunction(init):
        parameters = _parameters_of(init, bindings, skip_first=True)
    else:
        parameters = None
    if parameters is not None:
        constructors.append(
            ConstructorDescriptor(
                name="__init__",
                declaring_type=init_owner,
                factory=cls,
                parameters=parameters,
                is_designated=bool(getattr(init, CONSTRUCTOR_ATTR, False)),
            )
        )

    # Most-derived definition of a name wins, so an unmarked override hides a marked base factory.
    seen: set[str] = {"__init__"}
    for klass in cls.__mro__:
        for name, value in klass.__dict__.items():
            if name in seen:
                continue
            seen.add(name)
            if not isinstance(value, (classmethod, staticmethod)):
                continue
            if not getattr(value.__func__, CONSTRUCTOR_ATTR, False):
                continue
            factory = getattr(cls, name)
            factory_params = _parameters_of(factory, bindings, skip_first=False)
            constructors.append(
                ConstructorDescriptor(
                    name=name,
                    declaring_type=klass,
                    factory=factory,
                    parameters=factory_params or (),
                    is_designated=True,
                )
            )
    return tuple(constructors)


def _accepts_no_arguments(cls: type) -> bool:
    if inspect.isabstract(cls):
        return False
    if cls.__init__ is object.__init__ and cls.__new__ is object.__new__:
        return True
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return issubclass(cls, _DEFAULT_CONSTRUCTIBLE_BUILTINS)
    return all(p.kind in _VARIADIC or p.default is not p.empty for p in signature.parameters.values())


def _capabilities(cls: type) -> frozenset[Capability]:
    found = {capability for capability, base in _CAPABILITY_BASES if issubclass(cls, base)}
    if is_primitive_type(cls):
        found.add(Capability.PRIMITIVE)
    return frozenset(found)


# =============================================================================
# Public API
# =============================================================================


def describe_type(target: Any) -> TypeDescriptor:
    """Introspect ``target`` and build its descriptor (uncached).

    Args:
        target: A class or generic alias; Annotated wrappers are ignored

    Returns:
        TypeDescriptor for the runtime class with TypeVars bound from the alias
    """
    target, _ = strip_annotated(target)
    cls = runtime_class(target)
    bindings = _typevar_bindings(target, cls)
    hierarchy = tuple(reversed(cls.__mro__))

    return TypeDescriptor(
        target=target,
        runtime_class=cls,
        type_arguments=typing.get_args(target) if typing.get_origin(target) is not None else (),
        typevar_bindings=MappingProxyType(bindings),
        hierarchy=hierarchy,
        levels=tuple(_describe_level(klass, bindings) for klass in hierarchy),
        constructors=_describe_constructors(cls, bindings),
        has_default_constructor=_accepts_no_arguments(cls),
        is_abstract=inspect.isabstract(cls),
        is_builtin=cls.__module__ == "builtins",
        container=getattr(cls, CONTAINER_ATTR, None),
        data_contract=getattr(cls, DATA_CONTRACT_ATTR, None),
        serializable=bool(cls.__dict__.get(SERIALIZABLE_ATTR, False)),
        converter_marker=getattr(cls, CONVERTER_ATTR, None),
        type_converter_marker=getattr(cls, TYPE_CONVERTER_ATTR, None),
        capabilities=_capabilities(cls),
    )


class TypeDescriptorRegistry:
    """Copy-on-write map of target type -> TypeDescriptor.

    ``get`` never locks on a hit. Explicit registrations replace any existing
    entry, while automatic builds never overwrite one.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._snapshot: MappingProxyType[Any, TypeDescriptor] = MappingProxyType({})

    def get(self, target: Any) -> TypeDescriptor:
        descriptor = self._snapshot.get(target)
        if descriptor is not None:
            return descriptor

        descriptor = describe_type(target)
        with self._lock:
            current = self._snapshot.get(target)
            if current is not None:
                return current
            updated = dict(self._snapshot)
            updated[target] = descriptor
            self._snapshot = MappingProxyType(updated)
        logger.debug("type_described", type=descriptor.name, levels=len(descriptor.levels))
        return descriptor

    def register(self, descriptor: TypeDescriptor) -> None:
        with self._lock:
            updated = dict(self._snapshot)
            updated[descriptor.target] = descriptor
            self._snapshot = MappingProxyType(updated)

    def __contains__(self, target: object) -> bool:
        return target in self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)


_registry = TypeDescriptorRegistry()


def get_type_descriptor(target: Any) -> TypeDescriptor:
    """Cached descriptor for ``target`` from the process-wide registry."""
    target, _ = strip_annotated(target)
    return _registry.get(target)


def register_type_descriptor(descriptor: TypeDescriptor) -> None:
    """Install a hand-built descriptor, replacing any cached one."""
    _registry.register(descriptor)
