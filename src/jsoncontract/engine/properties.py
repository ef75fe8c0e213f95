"""Property builder: MemberDescriptor + MemberSettings -> JsonProperty."""

from __future__ import annotations

from collections.abc import Iterable
from functools import partial
from typing import Any

from jsoncontract.contracts.descriptors import MemberDescriptor, ParameterDescriptor, TypeDescriptor
from jsoncontract.contracts.enums import Capability, Visibility
from jsoncontract.contracts.markers import DataMember, JsonField, find_marker
from jsoncontract.contracts.property import JsonProperty, PropertyCollection, ValueProvider
from jsoncontract.contracts.sentinels import MISSING
from jsoncontract.engine.interpreter import MemberSettings


def _should_serialize(member_name: str, target: Any) -> bool:
    return bool(target.should_serialize(member_name))


def _get_is_specified(member_name: str, target: Any) -> bool:
    return bool(target.is_specified(member_name))


def _set_is_specified(member_name: str, target: Any, value: bool) -> None:
    target.set_specified(member_name, value)


def build_property(
    member: MemberDescriptor,
    settings: MemberSettings,
    value_provider: ValueProvider | None,
    contract_type: TypeDescriptor,
) -> JsonProperty:
    """Build the property for one discovered member.

    Non-public members are readable and writable only when the settings
    allow non-public access. Read-only fields become writable only through
    an explicit member marker.
    """
    accessible = member.visibility is Visibility.PUBLIC or settings.allow_non_public_access
    writable = (
        member.can_write
        and (not member.is_readonly or settings.has_explicit_attribute)
        and accessible
    )

    should_serialize = None
    if contract_type.has(Capability.CONDITIONAL):
        should_serialize = partial(_should_serialize, member.name)

    get_is_specified = set_is_specified = None
    if contract_type.has(Capability.SPECIFIED_TRACKING):
        get_is_specified = partial(_get_is_specified, member.name)
        set_is_specified = partial(_set_is_specified, member.name)

    return JsonProperty(
        property_name=settings.mapped_name,
        underlying_name=member.name,
        property_type=member.value_type,
        declaring_type=member.declaring_type,
        order=settings.order,
        required=settings.required,
        ignored=settings.ignored,
        readable=member.can_read and accessible,
        writable=writable,
        has_member_attribute=settings.has_explicit_attribute,
        value_provider=value_provider,
        converter=settings.converter,
        member_converter=settings.member_converter,
        default_value=settings.default_value,
        null_value_handling=settings.null_value_handling,
        default_value_handling=settings.default_value_handling,
        reference_loop_handling=settings.reference_loop_handling,
        object_creation_handling=settings.object_creation_handling,
        type_name_handling=settings.type_name_handling,
        is_reference=settings.is_reference,
        item_is_reference=settings.item_is_reference,
        item_converter=settings.item_converter,
        item_reference_loop_handling=settings.item_reference_loop_handling,
        item_type_name_handling=settings.item_type_name_handling,
        should_serialize=should_serialize,
        get_is_specified=get_is_specified,
        set_is_specified=set_is_specified,
    )


def parameter_type(parameter: ParameterDescriptor, matching: JsonProperty) -> Any:
    """Declared parameter type, else the type of the member it populates."""
    return matching.property_type if parameter.annotation is MISSING else parameter.annotation


def build_parameter_property(
    parameter: ParameterDescriptor,
    settings: MemberSettings,
    matching: JsonProperty,
    declaring_type: Any,
) -> JsonProperty:
    """Build the property for one constructor parameter.

    The parameter's own markers win. Anything they leave unset is inherited
    from the matching member property. The serialized name is the
    parameter's explicit name, else the matching property's name.
    """
    named = find_marker(parameter.metadata, JsonField) or find_marker(parameter.metadata, DataMember)
    explicit_name = settings.mapped_name if named is not None and named.name is not None else None

    def inherit(own: Any, inherited: Any) -> Any:
        return own if own is not None else inherited

    default_value = settings.default_value if settings.default_value is not MISSING else matching.default_value
    return JsonProperty(
        property_name=explicit_name if explicit_name is not None else matching.property_name,
        underlying_name=parameter.name,
        property_type=parameter_type(parameter, matching),
        declaring_type=declaring_type,
        order=settings.order,
        required=inherit(settings.required, matching.required),
        ignored=settings.ignored,
        readable=False,
        writable=True,
        has_member_attribute=settings.has_explicit_attribute,
        converter=inherit(settings.converter, matching.converter),
        member_converter=inherit(settings.member_converter, matching.member_converter),
        default_value=default_value,
        null_value_handling=inherit(settings.null_value_handling, matching.null_value_handling),
        default_value_handling=inherit(settings.default_value_handling, matching.default_value_handling),
        reference_loop_handling=inherit(settings.reference_loop_handling, matching.reference_loop_handling),
        object_creation_handling=inherit(settings.object_creation_handling, matching.object_creation_handling),
        type_name_handling=inherit(settings.type_name_handling, matching.type_name_handling),
        is_reference=inherit(settings.is_reference, matching.is_reference),
    )


def order_properties(declaring_type: Any, properties: Iterable[JsonProperty]) -> PropertyCollection:
    """Collect properties first-wins by name, then sort stably by order (unset = -1)."""
    return PropertyCollection.build(declaring_type, properties).ordered()
