"""All kinds, modes and handling policies used across subsystem boundaries.

Handling policies are consumed by the serializer, not by the resolver. The
resolver only records them on properties. Every per-property override is
nullable so "unset" stays distinguishable from "explicitly set to the default".
"""

from enum import IntFlag, StrEnum


class ContractKind(StrEnum):
    """Variant of a resolved contract.

    Values:
        OBJECT: Members written as named properties
        ARRAY: Sequential enumeration
        DICTIONARY: Keyed enumeration
        PRIMITIVE: Scalar the serializer writes directly
        STRING: Type rendered through a string type converter
        DYNAMIC: Members supplied at runtime by the instance
        SERIALIZABLE: Type that writes its own member data
        LINQ: The library's own tree-node token types
    """

    OBJECT = "object"
    ARRAY = "array"
    DICTIONARY = "dictionary"
    PRIMITIVE = "primitive"
    STRING = "string"
    DYNAMIC = "dynamic"
    SERIALIZABLE = "serializable"
    LINQ = "linq"


class MemberSerialization(StrEnum):
    """Which members of an object type serialize.

    Values:
        OPT_OUT: Every discovered member unless explicitly ignored
        OPT_IN: Only members carrying an explicit member marker
        FIELDS: Every field, public or not; properties are skipped
    """

    OPT_OUT = "opt_out"
    OPT_IN = "opt_in"
    FIELDS = "fields"


class Required(StrEnum):
    """Required-ness tier of a property."""

    DEFAULT = "default"
    ALLOW_NULL = "allow_null"
    ALWAYS = "always"


class NullValueHandling(StrEnum):
    INCLUDE = "include"
    IGNORE = "ignore"


class DefaultValueHandling(StrEnum):
    INCLUDE = "include"
    IGNORE = "ignore"
    POPULATE = "populate"
    IGNORE_AND_POPULATE = "ignore_and_populate"


class ReferenceLoopHandling(StrEnum):
    ERROR = "error"
    IGNORE = "ignore"
    SERIALIZE = "serialize"


class ObjectCreationHandling(StrEnum):
    AUTO = "auto"
    REUSE = "reuse"
    REPLACE = "replace"


class TypeNameHandling(StrEnum):
    NONE = "none"
    OBJECTS = "objects"
    ARRAYS = "arrays"
    ALL = "all"
    AUTO = "auto"


class HookKind(StrEnum):
    """Lifecycle hook kinds, in the order the serializer fires them."""

    ON_SERIALIZING = "on_serializing"
    ON_SERIALIZED = "on_serialized"
    ON_DESERIALIZING = "on_deserializing"
    ON_DESERIALIZED = "on_deserialized"
    ON_ERROR = "on_error"


class Capability(StrEnum):
    """Traits recorded on a type descriptor for classification.

    Structural traits (MAPPING, ITERABLE) come from collections.abc; the rest
    require subclassing (or registering with) the matching ABC.
    """

    PRIMITIVE = "primitive"
    TOKEN = "token"
    MAPPING = "mapping"
    ITERABLE = "iterable"
    TYPE_OBJECT = "type_object"
    CUSTOM_SERIALIZABLE = "custom_serializable"
    DYNAMIC_MEMBERS = "dynamic_members"
    CONDITIONAL = "conditional"
    SPECIFIED_TRACKING = "specified_tracking"


class MemberKind(StrEnum):
    FIELD = "field"
    PROPERTY = "property"


class Visibility(StrEnum):
    """Access level derived from a member's name.

    Values:
        PUBLIC: No leading underscore
        PROTECTED: Single leading underscore, visible to subclasses
        PRIVATE: Name-mangled (``_Owner__name``), bound to one class
    """

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class MemberSearch(IntFlag):
    """Filter applied by member discovery.

    Combine a visibility flag with a scope flag; a search with no
    scope flag finds nothing.
    """

    PUBLIC = 1
    NON_PUBLIC = 2
    INSTANCE = 4
    STATIC = 8

    DEFAULT = PUBLIC | INSTANCE
    ALL = PUBLIC | NON_PUBLIC | INSTANCE | STATIC


class ContextStates(IntFlag):
    """Source or destination of a serialization pass."""

    NONE = 0
    PERSISTENCE = 1
    REMOTING = 2
    OTHER = 4
    ALL = PERSISTENCE | REMOTING | OTHER
