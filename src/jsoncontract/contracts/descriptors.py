"""Pre-built type descriptors consumed by the resolution engine.

A TypeDescriptor captures everything the engine needs to know about a type:
its hierarchy, declared members, constructors, hook methods and class
markers. It is built once by ``jsoncontract.core.reflection``, or registered
explicitly. The engine then works purely over these records and never
introspects live classes while building a contract.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from jsoncontract.contracts.converters import TypeConverter
from jsoncontract.contracts.enums import Capability, HookKind, MemberKind, Visibility
from jsoncontract.contracts.markers import ContainerOptions, ConverterOptions, DataContractOptions
from jsoncontract.contracts.sentinels import MISSING


@dataclass(frozen=True, slots=True)
class MemberDescriptor:
    """A field or property declared at one level of a hierarchy.

    Attributes:
        name: Attribute name as stored on instances (mangled for private names)
        kind: FIELD (annotated attribute or slot) or PROPERTY
        declaring_type: Class whose body declared the member
        value_type: Declared type with Annotated stripped and TypeVars bound
        declared_generic: The raw annotation was a TypeVar
        is_static: Declared as ClassVar
        visibility: Derived from the name
        is_readonly: Final field, or a field of a frozen dataclass
        can_read: A value can be read (properties need a getter)
        can_write: A value can be assigned (properties need a setter)
        is_indexed: Property getter takes parameters beyond self
        is_synthesized: Dunder name supplied by the language or a class factory
        metadata: Annotated extras in declaration order
        fget/fset: Property accessor functions (None for fields)
    """

    name: str
    kind: MemberKind
    declaring_type: type
    value_type: Any = object
    declared_generic: bool = False
    is_static: bool = False
    visibility: Visibility = Visibility.PUBLIC
    is_readonly: bool = False
    can_read: bool = True
    can_write: bool = True
    is_indexed: bool = False
    is_synthesized: bool = False
    metadata: tuple[Any, ...] = ()
    fget: Callable[[Any], Any] | None = field(default=None, compare=False, repr=False)
    fset: Callable[[Any, Any], None] | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class MethodDescriptor:
    """A function declared at one level that carries hook markers.

    Attributes:
        function: The plain function (unwrapped from classmethod/staticmethod)
        hooks: Hook kinds declared on the function
        parameter_annotations: Annotations of parameters after ``self``
        has_return_annotation: A return annotation was declared
        return_annotation: Declared return type (None means "returns None")
        is_abstract: Function is an abstractmethod
        is_bound_kind: Wrapped in classmethod or staticmethod
    """

    name: str
    declaring_type: type
    function: Callable[..., Any] = field(compare=False)
    hooks: frozenset[HookKind] = frozenset()
    parameter_annotations: tuple[Any, ...] = ()
    has_return_annotation: bool = False
    return_annotation: Any = None
    is_abstract: bool = False
    is_bound_kind: bool = False


@dataclass(frozen=True, slots=True)
class ParameterDescriptor:
    """One constructor parameter. ``annotation`` is MISSING when undeclared."""

    name: str
    annotation: Any = MISSING
    metadata: tuple[Any, ...] = ()
    has_default: bool = False
    default: Any = None


@dataclass(frozen=True, slots=True)
class ConstructorDescriptor:
    """A way to build instances: ``__init__`` or a factory classmethod.

    ``factory`` is called with arguments in parameter order.
    """

    name: str
    declaring_type: type
    factory: Callable[..., Any] = field(compare=False)
    parameters: tuple[ParameterDescriptor, ...] = ()
    is_designated: bool = False


@dataclass(frozen=True, slots=True)
class TypeLevel:
    """Members and hook methods declared directly by one class."""

    cls: type
    members: tuple[MemberDescriptor, ...] = ()
    methods: tuple[MethodDescriptor, ...] = ()


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    """Everything the engine reads about a type.

    Attributes:
        target: The type as requested (may be a generic alias)
        runtime_class: Class used for instantiation and isinstance checks
        type_arguments: Arguments of a generic alias, else empty
        typevar_bindings: TypeVar -> bound type across the hierarchy
        hierarchy: Classes root-to-leaf (reversed MRO)
        levels: Declared members/methods per class in hierarchy order
        constructors: Effective __init__ plus designated factories
        has_default_constructor: __init__ accepts no arguments
        is_abstract: Class has unimplemented abstract methods
        is_builtin: Class is defined by the interpreter
        container: json_object/json_array/json_dictionary marker
        data_contract: data_contract marker found up the hierarchy
        serializable: Class itself is marked serializable
        converter_marker: json_converter marker
        type_converter_marker: type_converter marker
        capabilities: Structural and explicit traits used for classification
    """

    target: Any
    runtime_class: type
    type_arguments: tuple[Any, ...] = ()
    typevar_bindings: Mapping[Any, Any] = field(default_factory=dict)
    hierarchy: tuple[type, ...] = ()
    levels: tuple[TypeLevel, ...] = ()
    constructors: tuple[ConstructorDescriptor, ...] = ()
    has_default_constructor: bool = False
    is_abstract: bool = False
    is_builtin: bool = False
    container: ContainerOptions | None = None
    data_contract: DataContractOptions | None = None
    serializable: bool = False
    converter_marker: ConverterOptions | None = None
    type_converter_marker: TypeConverter | None = None
    capabilities: frozenset[Capability] = frozenset()

    @property
    def name(self) -> str:
        return getattr(self.runtime_class, "__qualname__", repr(self.runtime_class))

    def has(self, capability: Capability) -> bool:
        return capability in self.capabilities

    @property
    def init_constructor(self) -> ConstructorDescriptor | None:
        for ctor in self.constructors:
            if ctor.name == "__init__":
                return ctor
        return None
