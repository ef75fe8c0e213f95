"""Annotation interpreter: member markers -> MemberSettings.

The same interpretation applies to fields, properties and constructor
parameters. Only the metadata tuple, the member name and the value type are
needed.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from jsoncontract.contracts.converters import JsonConverter, create_converter
from jsoncontract.contracts.descriptors import TypeDescriptor
from jsoncontract.contracts.enums import (
    DefaultValueHandling,
    MemberSerialization,
    NullValueHandling,
    ObjectCreationHandling,
    ReferenceLoopHandling,
    Required,
    TypeNameHandling,
)
from jsoncontract.contracts.markers import (
    DataMember,
    DefaultValue,
    IgnoreDataMember,
    JsonField,
    JsonIgnore,
    NonSerialized,
    WithConverter,
    find_marker,
    has_marker,
)
from jsoncontract.contracts.sentinels import MISSING
from jsoncontract.core.reflection import get_type_descriptor
from jsoncontract.core.type_normalization import ensure_not_nullable


@dataclass(frozen=True, slots=True)
class MemberSettings:
    """Everything the markers say about one member.

    Attributes:
        mapped_name: Serialized name after the resolver's naming hook
        has_explicit_attribute: JsonField or DataMember present
        allow_non_public_access: Non-public members may be read and written
        ignored: Member is excluded from the document
    """

    mapped_name: str
    has_explicit_attribute: bool = False
    allow_non_public_access: bool = False
    ignored: bool = False
    required: Required | None = None
    order: int | None = None
    converter: JsonConverter | None = None
    member_converter: JsonConverter | None = None
    default_value: Any = MISSING
    null_value_handling: NullValueHandling | None = None
    default_value_handling: DefaultValueHandling | None = None
    reference_loop_handling: ReferenceLoopHandling | None = None
    object_creation_handling: ObjectCreationHandling | None = None
    type_name_handling: TypeNameHandling | None = None
    is_reference: bool | None = None
    item_is_reference: bool | None = None
    item_converter: JsonConverter | None = None
    item_reference_loop_handling: ReferenceLoopHandling | None = None
    item_type_name_handling: TypeNameHandling | None = None


def type_converter_for(value_type: Any) -> JsonConverter | None:
    """Converter attached to ``value_type`` with ``json_converter``, if any."""
    marker = get_type_descriptor(ensure_not_nullable(value_type)).converter_marker
    if marker is None:
        return None
    return create_converter(marker.converter_type, marker.args)


def interpret_member(
    name: str,
    metadata: tuple[Any, ...],
    value_type: Any,
    declaring: TypeDescriptor,
    member_serialization: MemberSerialization,
    *,
    non_public_members: bool = False,
    resolve_property_name: Callable[[str], str] = str,
) -> MemberSettings:
    """Interpret a member's markers.

    Args:
        name: Attribute or parameter name
        metadata: Annotated extras attached to the member
        value_type: Declared value type (drives the type-level converter)
        declaring: Descriptor of the contract type; its data contract gates DataMember
        member_serialization: Mode of the owning contract
        non_public_members: Resolver allows non-public access globally
        resolve_property_name: Naming hook applied to the mapped name

    Returns:
        MemberSettings with every unset override left as None
    """
    json_field = find_marker(metadata, JsonField)
    data_member = find_marker(metadata, DataMember) if declaring.data_contract is not None else None

    if json_field is not None and json_field.name is not None:
        mapped_name = json_field.name
    elif data_member is not None and data_member.name is not None:
        mapped_name = data_member.name
    else:
        mapped_name = name

    has_member_attribute = json_field is not None or data_member is not None

    required: Required | None = None
    order: int | None = None
    if json_field is not None:
        required = json_field.required
        order = json_field.order
    elif data_member is not None:
        required = Required.ALLOW_NULL if data_member.is_required else Required.DEFAULT
        order = data_member.order if data_member.order != -1 else None

    has_ignore = has_marker(metadata, JsonIgnore, NonSerialized)
    if member_serialization is MemberSerialization.OPT_IN:
        ignored = has_ignore or not has_member_attribute
    else:
        ignored = has_ignore or has_marker(metadata, IgnoreDataMember)

    with_converter = find_marker(metadata, WithConverter)
    member_converter = (
        create_converter(with_converter.converter_type, with_converter.args) if with_converter is not None else None
    )
    converter = member_converter if member_converter is not None else type_converter_for(value_type)

    default = find_marker(metadata, DefaultValue)

    allow_non_public_access = (
        non_public_members or has_member_attribute or member_serialization is MemberSerialization.FIELDS
    )

    if json_field is None:
        return MemberSettings(
            mapped_name=resolve_property_name(mapped_name),
            has_explicit_attribute=has_member_attribute,
            allow_non_public_access=allow_non_public_access,
            ignored=ignored,
            required=required,
            order=order,
            converter=converter,
            member_converter=member_converter,
            default_value=default.value if default is not None else MISSING,
        )

    item_converter = (
        create_converter(json_field.item_converter, json_field.item_converter_args)
        if json_field.item_converter is not None
        else None
    )
    return MemberSettings(
        mapped_name=resolve_property_name(mapped_name),
        has_explicit_attribute=True,
        allow_non_public_access=allow_non_public_access,
        ignored=ignored,
        required=required,
        order=order,
        converter=converter,
        member_converter=member_converter,
        default_value=default.value if default is not None else MISSING,
        null_value_handling=json_field.null_value_handling,
        default_value_handling=json_field.default_value_handling,
        reference_loop_handling=json_field.reference_loop_handling,
        object_creation_handling=json_field.object_creation_handling,
        type_name_handling=json_field.type_name_handling,
        is_reference=json_field.is_reference,
        item_is_reference=json_field.item_is_reference,
        item_converter=item_converter,
        item_reference_loop_handling=json_field.item_reference_loop_handling,
        item_type_name_handling=json_field.item_type_name_handling,
    )
