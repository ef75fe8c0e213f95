"""DefaultContractResolver: classifies types and assembles their contracts.

Resolution flow for a cache miss:

    resolve_contract(t)
      -> create_contract(t)            first matching entry of contract_rules()
         -> initialize_contract()      is_reference, converters, creator, hooks
         -> create_properties()        discovery -> interpreter -> property builder
         -> constructor selection      designated or fallback __init__
      -> cache publish                 copy-on-write, first publish wins

Every ``create_*``/``resolve_*`` method is an override point. Subclasses get
their own cache entries because the cache key includes the resolver class.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from functools import cache, partial
from typing import Any, ClassVar

import structlog

from jsoncontract.contracts.contract import (
    JsonArrayContract,
    JsonContract,
    JsonDictionaryContract,
    JsonDynamicContract,
    JsonLinqContract,
    JsonObjectContract,
    JsonPrimitiveContract,
    JsonSerializableContract,
    JsonStringContract,
)
from jsoncontract.contracts.converters import JsonConverter, converts_to_string, create_converter
from jsoncontract.contracts.descriptors import ConstructorDescriptor, MemberDescriptor, ParameterDescriptor, TypeDescriptor
from jsoncontract.contracts.enums import Capability, ContractKind, MemberSerialization
from jsoncontract.contracts.errors import ContractConfigurationError, MemberDiscoveryError
from jsoncontract.contracts.property import JsonProperty, PropertyCollection, ValueProvider
from jsoncontract.core.config import ResolverSettings
from jsoncontract.core.reflection import get_type_descriptor
from jsoncontract.core.type_normalization import created_type_for, ensure_not_nullable, generic_arguments
from jsoncontract.engine import callbacks
from jsoncontract.engine.cache import SHARED_CONTRACT_CACHE, ContractCache
from jsoncontract.engine.constructors import create_constructor_parameters, select_constructor
from jsoncontract.engine.discovery import get_object_member_serialization, get_serializable_members
from jsoncontract.engine.interpreter import interpret_member
from jsoncontract.engine.properties import build_parameter_property, build_property, order_properties, parameter_type
from jsoncontract.engine.value_providers import CompiledValueProvider, ReflectionValueProvider
from jsoncontract.plugins.manager import ConverterPluginManager, get_plugin_manager

logger = structlog.get_logger(__name__)

ContractRule = tuple[str, Callable[[TypeDescriptor], bool], Callable[[Any], JsonContract]]


def _type_name(object_type: Any) -> str:
    return getattr(object_type, "__qualname__", repr(object_type))


def _create_uninitialized(cls: type) -> Any:
    return cls.__new__(cls)


def _container_kind(descriptor: TypeDescriptor) -> str | None:
    return descriptor.container.kind if descriptor.container is not None else None


class DefaultContractResolver:
    """Resolves and caches a contract per type.

    Args:
        settings: Behaviour switches; defaults to ResolverSettings()
        plugin_manager: Source of built-in and string type converters
    """

    # Subclasses of these types get no on_deserialized/on_serializing hook
    no_deserialized_callback_types: ClassVar[frozenset[type]] = callbacks.NO_DESERIALIZED_CALLBACK_TYPES

    def __init__(
        self,
        settings: ResolverSettings | None = None,
        *,
        plugin_manager: ConverterPluginManager | None = None,
    ) -> None:
        self._settings = settings if settings is not None else ResolverSettings()
        self._plugins = plugin_manager if plugin_manager is not None else get_plugin_manager()
        self._cache = SHARED_CONTRACT_CACHE if self._settings.shared_cache else ContractCache()

    @property
    def settings(self) -> ResolverSettings:
        return self._settings

    @property
    def cache(self) -> ContractCache:
        return self._cache

    @property
    def plugin_manager(self) -> ConverterPluginManager:
        return self._plugins

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve_contract(self, object_type: Any) -> JsonContract:
        """Contract for ``object_type``, built on first use and cached.

        Raises:
            TypeError: If object_type is None
            ContractConfigurationError: If the type's markers are inconsistent
        """
        if object_type is None:
            raise TypeError("object_type must not be None")

        key = (type(self), object_type)
        contract = self._cache.get(key)
        if contract is not None:
            return contract

        try:
            contract = self.create_contract(object_type)
        except ContractConfigurationError as exc:
            logger.warning(
                "contract_configuration_error",
                type=_type_name(object_type),
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise

        logger.debug(
            "contract_resolved",
            type=_type_name(object_type),
            kind=contract.kind.value,
            property_count=len(getattr(contract, "properties", ())),
        )
        return self._cache.publish(key, contract)

    def get_descriptor(self, object_type: Any) -> TypeDescriptor:
        """Descriptor of ``object_type`` with None stripped."""
        return get_type_descriptor(ensure_not_nullable(object_type))

    def contract_rules(self) -> tuple[ContractRule, ...]:
        """Ordered classification rules; the first matching predicate wins."""
        return (
            ("primitive", lambda d: d.has(Capability.PRIMITIVE), self.create_primitive_contract),
            ("json_object", lambda d: _container_kind(d) == "object", self.create_object_contract),
            ("json_array", lambda d: _container_kind(d) == "array", self.create_array_contract),
            ("json_dictionary", lambda d: _container_kind(d) == "dictionary", self.create_dictionary_contract),
            ("token", lambda d: d.has(Capability.TOKEN), self.create_linq_contract),
            ("mapping", lambda d: d.has(Capability.MAPPING), self.create_dictionary_contract),
            ("iterable", lambda d: d.has(Capability.ITERABLE), self.create_array_contract),
            ("string", self.can_convert_to_string, self.create_string_contract),
            (
                "custom_serializable",
                lambda d: d.has(Capability.CUSTOM_SERIALIZABLE) and not self._settings.ignore_serializable_interface,
                self.create_serializable_contract,
            ),
            ("dynamic", lambda d: d.has(Capability.DYNAMIC_MEMBERS), self.create_dynamic_contract),
            ("object", lambda d: True, self.create_object_contract),
        )

    def create_contract(self, object_type: Any) -> JsonContract:
        descriptor = self.get_descriptor(object_type)
        for _name, predicate, factory in self.contract_rules():
            if predicate(descriptor):
                return factory(object_type)
        raise AssertionError(f"No contract rule matched {_type_name(object_type)}")

    def can_convert_to_string(self, descriptor: TypeDescriptor) -> bool:
        """Whether the type renders as a plain string (String contract)."""
        if descriptor.has(Capability.TYPE_OBJECT):
            return True
        return converts_to_string(self._plugins.get_type_converter(descriptor.target))

    # =========================================================================
    # Shared initialization
    # =========================================================================

    def initialize_contract(self, object_type: Any, descriptor: TypeDescriptor) -> dict[str, Any]:
        """Fields every contract variant shares, as constructor keyword arguments."""
        if descriptor.container is not None:
            is_reference = descriptor.container.is_reference
        elif descriptor.data_contract is not None and descriptor.data_contract.is_reference:
            is_reference = True
        else:
            is_reference = None

        created_type = created_type_for(descriptor.runtime_class)
        created = descriptor if created_type is descriptor.runtime_class else get_type_descriptor(created_type)
        default_creator, default_creator_non_public = self.get_default_creator(created)

        hooks = callbacks.resolve_callback_methods(descriptor, self.no_deserialized_callback_types)
        return {
            "underlying_type": object_type,
            "non_nullable_underlying_type": descriptor.target,
            "created_type": created_type,
            "converter": self.resolve_contract_converter(descriptor),
            "internal_converter": self._plugins.get_matching_converter(descriptor.runtime_class),
            "default_creator": default_creator,
            "default_creator_non_public": default_creator_non_public,
            "is_reference": is_reference,
            **hooks.as_kwargs(),
        }

    def resolve_contract_converter(self, descriptor: TypeDescriptor) -> JsonConverter | None:
        marker = descriptor.converter_marker
        if marker is None:
            return None
        return create_converter(marker.converter_type, marker.args)

    def get_default_creator(self, created: TypeDescriptor) -> tuple[Callable[[], Any] | None, bool]:
        """Zero-argument factory for the created type and whether it bypasses __init__."""
        if created.has_default_constructor:
            return created.runtime_class, False
        if self._settings.non_public_members and not created.is_abstract and not created.is_builtin:
            return partial(_create_uninitialized, created.runtime_class), True
        return None, False

    # =========================================================================
    # Contract variants
    # =========================================================================

    def create_primitive_contract(self, object_type: Any) -> JsonPrimitiveContract:
        descriptor = self.get_descriptor(object_type)
        return JsonPrimitiveContract(kind=ContractKind.PRIMITIVE, **self.initialize_contract(object_type, descriptor))

    def create_string_contract(self, object_type: Any) -> JsonStringContract:
        descriptor = self.get_descriptor(object_type)
        return JsonStringContract(kind=ContractKind.STRING, **self.initialize_contract(object_type, descriptor))

    def create_linq_contract(self, object_type: Any) -> JsonLinqContract:
        descriptor = self.get_descriptor(object_type)
        return JsonLinqContract(kind=ContractKind.LINQ, **self.initialize_contract(object_type, descriptor))

    def create_array_contract(self, object_type: Any) -> JsonArrayContract:
        descriptor = self.get_descriptor(object_type)
        args = generic_arguments(descriptor.target, Iterable)
        container = descriptor.container
        return JsonArrayContract(
            kind=ContractKind.ARRAY,
            **self.initialize_contract(object_type, descriptor),
            item_type=args[0] if args else None,
            allow_nullable_items=container.allow_nullable_items if container is not None else True,
        )

    def create_dictionary_contract(self, object_type: Any) -> JsonDictionaryContract:
        descriptor = self.get_descriptor(object_type)
        args = generic_arguments(descriptor.target, Mapping)
        key_type, value_type = args if len(args) == 2 else (None, None)
        return JsonDictionaryContract(
            kind=ContractKind.DICTIONARY,
            **self.initialize_contract(object_type, descriptor),
            key_type=key_type,
            value_type=value_type,
            property_name_resolver=self.resolve_dictionary_key,
        )

    def create_object_contract(self, object_type: Any) -> JsonObjectContract:
        descriptor = self.get_descriptor(object_type)
        common = self.initialize_contract(object_type, descriptor)
        member_serialization = get_object_member_serialization(
            descriptor, ignore_serializable_attribute=self._settings.ignore_serializable_attribute
        )
        properties = self.create_properties(descriptor, member_serialization)

        container = descriptor.container
        item_required = container.item_required if container is not None and container.kind == "object" else None

        plan = None
        if not descriptor.is_abstract:
            plan = select_constructor(
                descriptor,
                has_default_creator=common["default_creator"] is not None,
                default_creator_non_public=common["default_creator_non_public"],
            )
        constructor_parameters = (
            self.create_constructor_parameters(plan.constructor, properties, descriptor)
            if plan is not None
            else PropertyCollection(descriptor.target)
        )

        return JsonObjectContract(
            kind=ContractKind.OBJECT,
            **common,
            member_serialization=member_serialization,
            properties=properties,
            item_required=item_required,
            override_constructor=plan.override_constructor if plan is not None else None,
            parametrized_constructor=plan.parametrized_constructor if plan is not None else None,
            constructor_parameters=constructor_parameters,
        )

    def create_dynamic_contract(self, object_type: Any) -> JsonDynamicContract:
        descriptor = self.get_descriptor(object_type)
        return JsonDynamicContract(
            kind=ContractKind.DYNAMIC,
            **self.initialize_contract(object_type, descriptor),
            properties=self.create_properties(descriptor, MemberSerialization.OPT_OUT),
            property_name_resolver=self.resolve_property_name,
        )

    def create_serializable_contract(self, object_type: Any) -> JsonSerializableContract:
        descriptor = self.get_descriptor(object_type)
        return JsonSerializableContract(
            kind=ContractKind.SERIALIZABLE,
            **self.initialize_contract(object_type, descriptor),
            serializable_creator=getattr(descriptor.runtime_class, "from_object_data", None),
        )

    # =========================================================================
    # Properties
    # =========================================================================

    def get_serializable_members(
        self, descriptor: TypeDescriptor, member_serialization: MemberSerialization
    ) -> list[MemberDescriptor] | None:
        return get_serializable_members(
            descriptor,
            member_serialization,
            non_public_members=self._settings.non_public_members,
            serialize_compiler_generated_members=self._settings.serialize_compiler_generated_members,
        )

    def create_properties(
        self, descriptor: TypeDescriptor, member_serialization: MemberSerialization
    ) -> PropertyCollection:
        """Properties of an object or dynamic contract, sorted by order.

        Raises:
            MemberDiscoveryError: If get_serializable_members returns None
        """
        members = self.get_serializable_members(descriptor, member_serialization)
        if members is None:
            raise MemberDiscoveryError(f"Null collection of serializable members returned for '{descriptor.name}'.")
        properties = [self.create_property(member, member_serialization, descriptor) for member in members]
        return order_properties(descriptor.target, properties)

    def create_property(
        self, member: MemberDescriptor, member_serialization: MemberSerialization, descriptor: TypeDescriptor
    ) -> JsonProperty:
        settings = interpret_member(
            member.name,
            member.metadata,
            member.value_type,
            descriptor,
            member_serialization,
            non_public_members=self._settings.non_public_members,
            resolve_property_name=self.resolve_property_name,
        )
        return build_property(member, settings, self.create_member_value_provider(member), descriptor)

    def create_member_value_provider(self, member: MemberDescriptor) -> ValueProvider:
        if self._settings.dynamic_code_generation:
            return CompiledValueProvider(member)
        return ReflectionValueProvider(member)

    def create_constructor_parameters(
        self, constructor: ConstructorDescriptor, member_properties: PropertyCollection, descriptor: TypeDescriptor
    ) -> PropertyCollection:
        return create_constructor_parameters(
            constructor,
            member_properties,
            partial(self._parameter_property, descriptor=descriptor),
            descriptor.target,
        )

    def _parameter_property(
        self, parameter: ParameterDescriptor, matching: JsonProperty, *, descriptor: TypeDescriptor
    ) -> JsonProperty:
        return self.create_property_from_constructor_parameter(matching, parameter, descriptor)

    def create_property_from_constructor_parameter(
        self, matching: JsonProperty, parameter: ParameterDescriptor, descriptor: TypeDescriptor
    ) -> JsonProperty:
        settings = interpret_member(
            parameter.name,
            parameter.metadata,
            parameter_type(parameter, matching),
            descriptor,
            MemberSerialization.OPT_OUT,
            non_public_members=self._settings.non_public_members,
            resolve_property_name=self.resolve_property_name,
        )
        return build_parameter_property(parameter, settings, matching, descriptor.target)

    # =========================================================================
    # Naming
    # =========================================================================

    def resolve_property_name(self, property_name: str) -> str:
        """Serialized name for a member; override to apply a naming policy."""
        return property_name

    def resolve_dictionary_key(self, dictionary_key: str) -> str:
        return self.resolve_property_name(dictionary_key)

    def get_resolved_property_name(self, property_name: str) -> str:
        return self.resolve_property_name(property_name)


def to_camel_case(name: str) -> str:
    """``order_id`` -> ``orderId``; a leading capital run is lowered (``URLValue`` -> ``urlValue``).

    Leading underscores are kept.
    """
    stripped = name.lstrip("_")
    prefix = name[: len(name) - len(stripped)]
    head, *rest = stripped.split("_")

    chars = list(head)
    for i, char in enumerate(chars):
        if not char.isupper():
            break
        if i > 0 and i + 1 < len(chars) and not chars[i + 1].isupper():
            break
        chars[i] = char.lower()

    return prefix + "".join(chars) + "".join(part[:1].upper() + part[1:] for part in rest)


class CamelCaseContractResolver(DefaultContractResolver):
    """Writes member names and dictionary keys in camelCase."""

    def resolve_property_name(self, property_name: str) -> str:
        return to_camel_case(property_name)


@cache
def default_resolver() -> DefaultContractResolver:
    """Process-wide resolver sharing the module-level contract cache."""
    return DefaultContractResolver(ResolverSettings(shared_cache=True))
