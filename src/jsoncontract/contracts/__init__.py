"""Shared contracts for cross-boundary data types.

Everything the serializer consumes lives here: contract variants, property
metadata, descriptors, markers, converter bases and errors.

This package is a LEAF MODULE with no outbound dependencies to core/engine.
Settings classes are NOT re-exported here; import them from
jsoncontract.core.config.

Import patterns:
    # Markers and contract types (lightweight)
    from jsoncontract.contracts import JsonField, JsonObjectContract, json_object

    # Settings (from core)
    from jsoncontract.core.config import ResolverSettings
"""

from jsoncontract.contracts.capabilities import (
    ConditionalSerialization,
    CustomSerializable,
    DynamicMemberProvider,
    SpecifiedTracking,
)
from jsoncontract.contracts.context import ErrorContext, SerializationContext
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
from jsoncontract.contracts.converters import (
    ComponentConverter,
    JsonConverter,
    ReferenceConverter,
    StringTypeConverter,
    TypeConverter,
)
from jsoncontract.contracts.descriptors import (
    ConstructorDescriptor,
    MemberDescriptor,
    MethodDescriptor,
    ParameterDescriptor,
    TypeDescriptor,
    TypeLevel,
)
from jsoncontract.contracts.enums import (
    Capability,
    ContextStates,
    ContractKind,
    DefaultValueHandling,
    HookKind,
    MemberKind,
    MemberSearch,
    MemberSerialization,
    NullValueHandling,
    ObjectCreationHandling,
    ReferenceLoopHandling,
    Required,
    TypeNameHandling,
    Visibility,
)
from jsoncontract.contracts.errors import (
    CallbackConfigurationError,
    ConstructorSelectionError,
    ContractConfigurationError,
    JsonContractError,
    MemberDiscoveryError,
    ValueProviderError,
)
from jsoncontract.contracts.markers import (
    DataMember,
    DefaultValue,
    IgnoreDataMember,
    JsonField,
    JsonIgnore,
    NonSerialized,
    WithConverter,
    data_contract,
    json_array,
    json_constructor,
    json_converter,
    json_dictionary,
    json_object,
    on_deserialized,
    on_deserializing,
    on_error,
    on_serialized,
    on_serializing,
    serializable,
    type_converter,
)
from jsoncontract.contracts.property import JsonProperty, PropertyCollection, ValueProvider
from jsoncontract.contracts.protocols import ContractResolver
from jsoncontract.contracts.sentinels import MISSING
from jsoncontract.contracts.tokens import JsonArray, JsonContainer, JsonObject, JsonToken, JsonValue

__all__ = [
    "MISSING",
    "CallbackConfigurationError",
    "Capability",
    "ComponentConverter",
    "ConditionalSerialization",
    "ConstructorDescriptor",
    "ConstructorSelectionError",
    "ContextStates",
    "ContractConfigurationError",
    "ContractKind",
    "ContractResolver",
    "CustomSerializable",
    "DataMember",
    "DefaultValue",
    "DefaultValueHandling",
    "DynamicMemberProvider",
    "ErrorContext",
    "HookKind",
    "IgnoreDataMember",
    "JsonArray",
    "JsonArrayContract",
    "JsonContainer",
    "JsonContract",
    "JsonContractError",
    "JsonConverter",
    "JsonDictionaryContract",
    "JsonDynamicContract",
    "JsonField",
    "JsonIgnore",
    "JsonLinqContract",
    "JsonObject",
    "JsonObjectContract",
    "JsonPrimitiveContract",
    "JsonProperty",
    "JsonSerializableContract",
    "JsonStringContract",
    "JsonToken",
    "JsonValue",
    "MemberDescriptor",
    "MemberDiscoveryError",
    "MemberKind",
    "MemberSearch",
    "MemberSerialization",
    "MethodDescriptor",
    "NonSerialized",
    "NullValueHandling",
    "ObjectCreationHandling",
    "ParameterDescriptor",
    "PropertyCollection",
    "ReferenceConverter",
    "ReferenceLoopHandling",
    "Required",
    "SerializationContext",
    "SpecifiedTracking",
    "StringTypeConverter",
    "TypeConverter",
    "TypeDescriptor",
    "TypeLevel",
    "TypeNameHandling",
    "ValueProvider",
    "ValueProviderError",
    "Visibility",
    "WithConverter",
    "data_contract",
    "json_array",
    "json_constructor",
    "json_converter",
    "json_dictionary",
    "json_object",
    "on_deserialized",
    "on_deserializing",
    "on_error",
    "on_serialized",
    "on_serializing",
    "serializable",
    "type_converter",
]
