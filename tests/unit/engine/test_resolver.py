# tests/unit/engine/test_resolver.py
"""Tests for DefaultContractResolver classification and contract assembly."""

from __future__ import annotations

import ipaddress
import re
from collections.abc import MutableMapping, Sequence
from pathlib import Path
from typing import Any

import numpy as np
import pytest
from structlog.testing import capture_logs

from jsoncontract.contracts.contract import (
    JsonArrayContract,
    JsonDictionaryContract,
    JsonDynamicContract,
    JsonObjectContract,
    JsonSerializableContract,
)
from jsoncontract.contracts.descriptors import MemberDescriptor, TypeDescriptor
from jsoncontract.contracts.enums import ContractKind, MemberSerialization, NullValueHandling, Required
from jsoncontract.contracts.errors import (
    CallbackConfigurationError,
    ConstructorSelectionError,
    MemberDiscoveryError,
)
from jsoncontract.contracts.markers import on_serialized
from jsoncontract.contracts.protocols import ContractResolver
from jsoncontract.contracts.sentinels import MISSING
from jsoncontract.contracts.tokens import JsonArray, JsonObject, JsonValue
from jsoncontract.core.config import ResolverSettings
from jsoncontract.engine.resolver import (
    CamelCaseContractResolver,
    DefaultContractResolver,
    default_resolver,
    to_camel_case,
)
from jsoncontract.engine.value_providers import CompiledValueProvider, ReflectionValueProvider
from jsoncontract.plugins.builtin import BinaryConverter
from tests.fixtures.types import (
    Account,
    AllHooks,
    Bag,
    Batch,
    Blob,
    Box,
    CaseInsensitive,
    Conditional,
    Contracted,
    Factory,
    FieldsThing,
    ForcedObject,
    FrozenPoint,
    HoldsShout,
    IntBox,
    Labelled,
    LegacySerializable,
    Lookup,
    Mismatched,
    Money,
    NeedsArgs,
    ObjectParameter,
    OptInThing,
    Ordered,
    Person,
    Point,
    PrefixConverter,
    Reading,
    Registry,
    RenamedParameter,
    Scores,
    Settings,
    Shout,
    Stamped,
    Synthesized,
    Tags,
    Tracked,
    TrackedChild,
    Tracking,
    TwoFactories,
    UpperConverter,
    UntypedParameter,
)


def _object(resolver: DefaultContractResolver, object_type: Any) -> JsonObjectContract:
    contract = resolver.resolve_contract(object_type)
    assert isinstance(contract, JsonObjectContract)
    return contract


class TestClassification:
    @pytest.mark.parametrize(
        ("object_type", "kind"),
        [
            (int, ContractKind.PRIMITIVE),
            (str, ContractKind.PRIMITIVE),
            (np.int32, ContractKind.PRIMITIVE),
            (int | None, ContractKind.PRIMITIVE),
            (ForcedObject, ContractKind.OBJECT),
            (Batch, ContractKind.ARRAY),
            (Lookup, ContractKind.DICTIONARY),
            (JsonObject, ContractKind.LINQ),
            (JsonArray, ContractKind.LINQ),
            (JsonValue, ContractKind.LINQ),
            (Registry, ContractKind.DICTIONARY),
            (dict[str, int], ContractKind.DICTIONARY),
            (Tags, ContractKind.ARRAY),
            (list[int], ContractKind.ARRAY),
            (Money, ContractKind.STRING),
            (Path, ContractKind.STRING),
            (ipaddress.IPv4Address, ContractKind.STRING),
            (re.Pattern, ContractKind.STRING),
            (type, ContractKind.STRING),
            (Blob, ContractKind.SERIALIZABLE),
            (Bag, ContractKind.DYNAMIC),
            (Person, ContractKind.OBJECT),
            (int | str, ContractKind.OBJECT),
        ],
    )
    def test_kind(self, resolver: DefaultContractResolver, object_type: Any, kind: ContractKind) -> None:
        assert resolver.resolve_contract(object_type).kind is kind

    def test_nullable_keeps_underlying_type(self, resolver: DefaultContractResolver) -> None:
        contract = resolver.resolve_contract(int | None)

        assert contract.underlying_type == int | None
        assert contract.non_nullable_underlying_type is int
        assert contract.created_type is int

    def test_ignore_serializable_interface(self) -> None:
        resolver = DefaultContractResolver(ResolverSettings(ignore_serializable_interface=True))

        assert resolver.resolve_contract(Blob).kind is ContractKind.OBJECT

    def test_none_rejected(self, resolver: DefaultContractResolver) -> None:
        with pytest.raises(TypeError, match="must not be None"):
            resolver.resolve_contract(None)


class TestCaching:
    def test_idempotent(self, resolver: DefaultContractResolver) -> None:
        assert resolver.resolve_contract(Person) is resolver.resolve_contract(Person)

    def test_private_caches_are_separate(self) -> None:
        first = DefaultContractResolver()
        second = DefaultContractResolver()

        assert first.resolve_contract(Person) is not second.resolve_contract(Person)

    def test_shared_cache_across_instances(self, isolated_resolver_class: type[DefaultContractResolver]) -> None:
        settings = ResolverSettings(shared_cache=True)

        first = isolated_resolver_class(settings).resolve_contract(Point)

        assert isolated_resolver_class(settings).resolve_contract(Point) is first

    def test_subclass_keys_are_isolated(self) -> None:
        settings = ResolverSettings(shared_cache=True)

        plain = DefaultContractResolver(settings).resolve_contract(Settings)
        camel = CamelCaseContractResolver(settings).resolve_contract(Settings)

        assert plain is not camel

    def test_default_resolver_is_shared(self) -> None:
        assert default_resolver() is default_resolver()
        assert default_resolver().settings.shared_cache


class TestInitializeContract:
    def test_default_creator(self, resolver: DefaultContractResolver) -> None:
        contract = resolver.resolve_contract(Person)

        assert contract.default_creator is Person
        assert not contract.default_creator_non_public

    def test_no_default_creator(self, resolver: DefaultContractResolver) -> None:
        assert resolver.resolve_contract(NeedsArgs).default_creator is None

    def test_non_public_creator_bypasses_init(self, non_public_resolver: DefaultContractResolver) -> None:
        contract = non_public_resolver.resolve_contract(NeedsArgs)

        assert contract.default_creator is not None
        assert contract.default_creator_non_public
        assert isinstance(contract.default_creator(), NeedsArgs)

    def test_abstract_collection_created_type(self, resolver: DefaultContractResolver) -> None:
        assert resolver.resolve_contract(MutableMapping).created_type is dict
        assert resolver.resolve_contract(Sequence).created_type is tuple
        assert resolver.resolve_contract(MutableMapping).default_creator is dict

    def test_converters(self, resolver: DefaultContractResolver) -> None:
        assert resolver.resolve_contract(Shout).converter == UpperConverter()
        assert resolver.resolve_contract(Person).converter is None
        assert resolver.resolve_contract(bytearray).internal_converter == BinaryConverter()

    def test_is_reference(self, resolver: DefaultContractResolver) -> None:
        assert resolver.resolve_contract(Batch).is_reference is True
        assert resolver.resolve_contract(OptInThing).is_reference is False
        assert resolver.resolve_contract(Contracted).is_reference is True
        assert resolver.resolve_contract(Person).is_reference is None

    def test_hooks(self, resolver: DefaultContractResolver) -> None:
        contract = resolver.resolve_contract(TrackedChild)

        assert contract.on_deserialized is TrackedChild._child_loaded
        assert contract.on_serializing is Tracked._base_saving
        assert contract.on_error is None

    def test_hook_invocation(self, resolver: DefaultContractResolver) -> None:
        from jsoncontract.contracts.context import ErrorContext, SerializationContext

        contract = resolver.resolve_contract(AllHooks)
        error_context = ErrorContext(error=RuntimeError("boom"))

        contract.invoke_on_error(AllHooks(), SerializationContext(), error_context)
        contract.invoke_on_serialized(AllHooks(), SerializationContext())

        assert error_context.handled


class TestObjectContract:
    def test_public_members(self, resolver: DefaultContractResolver) -> None:
        assert list(_object(resolver, Person).properties) == ["name", "age"]

    def test_non_public_members(self, non_public_resolver: DefaultContractResolver) -> None:
        properties = _object(non_public_resolver, Person).properties

        assert list(properties) == ["name", "age", "_nickname", "_Person__pin"]
        assert properties["_nickname"].readable
        assert properties["_nickname"].writable

    def test_ordering(self, resolver: DefaultContractResolver) -> None:
        assert list(_object(resolver, Ordered).properties) == ["b", "d", "c", "a"]

    def test_duplicate_names_first_wins(self, resolver: DefaultContractResolver) -> None:
        from tests.fixtures.types import DuplicateNames, IgnoredThenKept

        assert _object(resolver, DuplicateNames).properties["value"].underlying_name == "first"
        assert _object(resolver, IgnoredThenKept).properties["value"].underlying_name == "new"

    def test_json_field_overrides(self, resolver: DefaultContractResolver) -> None:
        properties = _object(resolver, Settings).properties
        api_key = properties["apiKey"]

        assert list(properties)[-1] == "apiKey"
        assert api_key.underlying_name == "api_key"
        assert api_key.required is Required.ALWAYS
        assert api_key.order == 1
        assert api_key.null_value_handling is NullValueHandling.IGNORE
        assert api_key.item_converter == UpperConverter()
        assert api_key.has_member_attribute

    def test_member_markers(self, resolver: DefaultContractResolver) -> None:
        properties = _object(resolver, Settings).properties

        assert properties["retries"].default_value == 3
        assert properties["shout"].member_converter == PrefixConverter("!")
        assert properties["hidden"].ignored
        assert properties["skipped"].ignored
        assert properties["hidden"].default_value is MISSING

    def test_final_field_read_only(self, resolver: DefaultContractResolver) -> None:
        final_value = _object(resolver, Settings).properties["final_value"]

        assert final_value.readable
        assert not final_value.writable

    def test_frozen_dataclass_writable_only_with_marker(self, resolver: DefaultContractResolver) -> None:
        properties = _object(resolver, FrozenPoint).properties

        assert not properties["x"].writable
        assert properties["y"].writable

    def test_type_converter_on_member(self, resolver: DefaultContractResolver) -> None:
        properties = _object(resolver, HoldsShout).properties

        assert properties["loud"].converter == UpperConverter()
        assert properties["loud"].member_converter is None
        assert properties["quiet"].converter == PrefixConverter("?")

    def test_generic_members(self, resolver: DefaultContractResolver) -> None:
        assert _object(resolver, IntBox).properties["item"].property_type is int

    def test_union_member(self, resolver: DefaultContractResolver) -> None:
        properties = _object(resolver, Reading).properties

        assert list(properties) == ["value", "unit"]
        assert properties["value"].property_type == int | str
        assert properties["value"].converter is None

    def test_union_member_with_type_parameter(self, resolver: DefaultContractResolver) -> None:
        assert "tag" in _object(resolver, Labelled[str]).properties
        assert _object(resolver, Box[str]).properties["item"].property_type is str

    def test_opt_in(self, resolver: DefaultContractResolver) -> None:
        contract = _object(resolver, OptInThing)

        assert contract.member_serialization is MemberSerialization.OPT_IN
        assert contract.item_required is Required.ALWAYS
        assert not contract.properties["included"].ignored
        assert contract.properties["excluded"].ignored
        assert contract.properties["ignored_anyway"].ignored

    def test_fields_mode(self, resolver: DefaultContractResolver) -> None:
        contract = _object(resolver, FieldsThing)

        assert list(contract.properties) == ["public", "_protected"]
        assert contract.properties["_protected"].readable

    def test_data_contract(self, resolver: DefaultContractResolver) -> None:
        contract = _object(resolver, Contracted)

        assert contract.member_serialization is MemberSerialization.OPT_IN
        assert list(contract.properties) == ["plain", "dropped", "k"]
        assert contract.properties["k"].required is Required.ALLOW_NULL
        assert contract.properties["k"].order == 1
        assert contract.properties["plain"].required is Required.DEFAULT
        assert contract.properties["dropped"].ignored

    def test_serializable_attribute(self) -> None:
        honoured = DefaultContractResolver(ResolverSettings(ignore_serializable_attribute=False))

        assert list(_object(DefaultContractResolver(), LegacySerializable).properties) == ["visible"]
        contract = _object(honoured, LegacySerializable)
        assert contract.member_serialization is MemberSerialization.FIELDS
        assert list(contract.properties) == ["visible", "_internal"]

    def test_synthesized_members(self) -> None:
        resolver = DefaultContractResolver(ResolverSettings(serialize_compiler_generated_members=True))

        assert list(_object(DefaultContractResolver(), Synthesized).properties) == ["payload"]
        assert list(_object(resolver, Synthesized).properties) == ["__version__", "payload"]

    def test_capability_predicates(self, resolver: DefaultContractResolver) -> None:
        value = _object(resolver, Conditional).properties["value"]
        target = Conditional()

        assert value.should_serialize is not None
        assert not value.should_serialize(target)
        target.value = 1
        assert value.should_serialize(target)

    def test_specified_tracking(self, resolver: DefaultContractResolver) -> None:
        value = _object(resolver, Tracking).properties["value"]
        target = Tracking()

        assert value.get_is_specified is not None and value.set_is_specified is not None
        assert not value.get_is_specified(target)
        value.set_is_specified(target, True)
        assert value.get_is_specified(target)
        assert _object(resolver, Person).properties["name"].should_serialize is None

    def test_value_provider_kind(self) -> None:
        compiled = _object(DefaultContractResolver(), Person).properties["name"]
        reflected = _object(
            DefaultContractResolver(ResolverSettings(dynamic_code_generation=False)), Person
        ).properties["name"]

        assert isinstance(compiled.value_provider, CompiledValueProvider)
        assert isinstance(reflected.value_provider, ReflectionValueProvider)


class TestConstructors:
    def test_default_creator_needs_no_constructor(self, resolver: DefaultContractResolver) -> None:
        contract = _object(resolver, Person)

        assert contract.creator is None
        assert len(contract.constructor_parameters) == 0

    def test_parametrized_fallback(self, resolver: DefaultContractResolver) -> None:
        contract = _object(resolver, Point)

        assert contract.parametrized_constructor is not None
        assert contract.override_constructor is None
        assert list(contract.constructor_parameters) == ["x", "y"]
        assert not contract.constructor_parameters["x"].readable
        assert contract.constructor_parameters["x"].writable

    def test_designated_init(self, resolver: DefaultContractResolver) -> None:
        contract = _object(resolver, Account)

        assert contract.override_constructor is not None
        assert contract.override_constructor.name == "__init__"
        assert list(contract.constructor_parameters) == ["account_id", "owner"]

    def test_designated_factory(self, resolver: DefaultContractResolver) -> None:
        contract = _object(resolver, Factory)

        assert contract.override_constructor is not None
        assert contract.override_constructor.factory("X1").code == "X1"
        assert list(contract.constructor_parameters) == ["code"]

    def test_multiple_designated(self, resolver: DefaultContractResolver) -> None:
        with capture_logs() as logs, pytest.raises(ConstructorSelectionError):
            resolver.resolve_contract(TwoFactories)

        warning = next(entry for entry in logs if entry["event"] == "contract_configuration_error")
        assert warning["log_level"] == "warning"
        assert warning["error_type"] == "ConstructorSelectionError"
        assert (type(resolver), TwoFactories) not in resolver.cache

    def test_mismatched_parameters_dropped(self, resolver: DefaultContractResolver) -> None:
        assert list(_object(resolver, Mismatched).constructor_parameters) == ["label"]

    def test_case_insensitive_match(self, resolver: DefaultContractResolver) -> None:
        parameters = _object(resolver, CaseInsensitive).constructor_parameters

        assert list(parameters) == ["Name"]
        assert parameters["Name"].underlying_name == "name"

    def test_parameter_markers_and_inheritance(self, resolver: DefaultContractResolver) -> None:
        parameters = _object(resolver, RenamedParameter).constructor_parameters

        assert list(parameters) == ["orderId", "total"]
        assert parameters["orderId"].required is Required.ALWAYS
        assert parameters["total"].default_value == 0.0

    def test_parameter_inherits_member_converter(self, resolver: DefaultContractResolver) -> None:
        contract = _object(resolver, Stamped)
        parameter = contract.constructor_parameters["code"]

        assert parameter.converter == PrefixConverter("#")
        assert parameter.member_converter == PrefixConverter("#")
        assert parameter.converter == contract.properties["code"].converter

    def test_explicit_object_parameter_does_not_match(self, resolver: DefaultContractResolver) -> None:
        contract = _object(resolver, ObjectParameter)

        assert contract.parametrized_constructor is not None
        assert len(contract.constructor_parameters) == 0

    def test_unannotated_parameter_takes_member_type(self, resolver: DefaultContractResolver) -> None:
        parameters = _object(resolver, UntypedParameter).constructor_parameters

        assert list(parameters) == ["count"]
        assert parameters["count"].property_type is int


class TestOtherContracts:
    def test_array_item_type(self, resolver: DefaultContractResolver) -> None:
        contract = resolver.resolve_contract(Tags)

        assert isinstance(contract, JsonArrayContract)
        assert contract.item_type is str
        assert contract.allow_nullable_items

    def test_array_marker(self, resolver: DefaultContractResolver) -> None:
        contract = resolver.resolve_contract(Batch)

        assert isinstance(contract, JsonArrayContract)
        assert not contract.allow_nullable_items
        assert contract.item_type is None

    def test_dictionary_types(self, resolver: DefaultContractResolver) -> None:
        contract = resolver.resolve_contract(Scores)

        assert isinstance(contract, JsonDictionaryContract)
        assert (contract.key_type, contract.value_type) == (str, float)
        assert contract.property_name_resolver is not None
        assert contract.property_name_resolver("some_key") == "some_key"

    def test_untyped_dictionary(self, resolver: DefaultContractResolver) -> None:
        contract = resolver.resolve_contract(Registry)

        assert isinstance(contract, JsonDictionaryContract)
        assert contract.key_type is None

    def test_dynamic(self, resolver: DefaultContractResolver) -> None:
        contract = resolver.resolve_contract(Bag)

        assert isinstance(contract, JsonDynamicContract)
        assert list(contract.properties) == ["fixed"]

    def test_serializable_creator(self, resolver: DefaultContractResolver) -> None:
        contract = resolver.resolve_contract(Blob)

        assert isinstance(contract, JsonSerializableContract)
        assert contract.serializable_creator == Blob.from_object_data


class TestCamelCase:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("order_id", "orderId"),
            ("URLValue", "urlValue"),
            ("ID", "id"),
            ("Name", "name"),
            ("name", "name"),
            ("_private_value", "_privateValue"),
            ("", ""),
        ],
    )
    def test_to_camel_case(self, name: str, expected: str) -> None:
        assert to_camel_case(name) == expected

    def test_property_names(self) -> None:
        properties = _object(CamelCaseContractResolver(), Settings).properties

        assert "finalValue" in properties
        assert "apiKey" in properties

    def test_dictionary_keys(self) -> None:
        contract = CamelCaseContractResolver().resolve_contract(Scores)

        assert isinstance(contract, JsonDictionaryContract)
        assert contract.property_name_resolver is not None
        assert contract.property_name_resolver("max_score") == "maxScore"


class TestOverridePoints:
    def test_none_members_raise(self) -> None:
        class Broken(DefaultContractResolver):
            def get_serializable_members(
                self, descriptor: TypeDescriptor, member_serialization: MemberSerialization
            ) -> list[MemberDescriptor] | None:
                return None

        with pytest.raises(MemberDiscoveryError, match="Null collection of serializable members"):
            Broken().resolve_contract(Person)

    def test_excluded_callback_types_class_attribute(self) -> None:
        class Restricted(DefaultContractResolver):
            no_deserialized_callback_types = frozenset({Tracked})

        contract = Restricted().resolve_contract(Tracked)

        assert contract.on_deserialized is None
        assert contract.on_serializing is None

    def test_invalid_hook_surfaces(self, resolver: DefaultContractResolver) -> None:
        class BadHook:
            @on_serialized
            def hook(self) -> None:
                pass

        with pytest.raises(CallbackConfigurationError):
            resolver.resolve_contract(BadHook)


class TestResolverProtocol:
    def test_resolvers_satisfy_protocol(self) -> None:
        assert isinstance(DefaultContractResolver(), ContractResolver)
        assert isinstance(CamelCaseContractResolver(), ContractResolver)

    def test_unrelated_object_does_not(self) -> None:
        assert not isinstance(object(), ContractResolver)
