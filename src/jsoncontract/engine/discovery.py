"""Member discovery over type descriptors.

Discovery only reads TypeDescriptor records. It never touches live classes,
so a hand-registered descriptor is discovered exactly like an introspected
one.
"""

from __future__ import annotations

from jsoncontract.contracts.descriptors import MemberDescriptor, TypeDescriptor
from jsoncontract.contracts.enums import MemberKind, MemberSearch, MemberSerialization, Visibility
from jsoncontract.contracts.markers import DataMember, JsonField, has_marker


def _matches(member: MemberDescriptor, search: MemberSearch) -> bool:
    scope = MemberSearch.STATIC if member.is_static else MemberSearch.INSTANCE
    if not search & scope:
        return False
    if member.visibility is Visibility.PUBLIC:
        return bool(search & MemberSearch.PUBLIC)
    return bool(search & MemberSearch.NON_PUBLIC)


def _collapse(group: list[MemberDescriptor]) -> list[MemberDescriptor]:
    """Reduce same-named declarations to the ones that serialize.

    Indexed groups are kept whole. Otherwise members declared through a
    TypeVar are dropped when a concrete declaration exists, and the
    most-derived survivor wins.
    """
    if len(group) == 1 or any(member.is_indexed for member in group):
        return group
    concrete = [member for member in group if not member.declared_generic] or group
    return [concrete[-1]]


def get_fields_and_properties(descriptor: TypeDescriptor, search: MemberSearch) -> list[MemberDescriptor]:
    """Fields and properties of ``descriptor`` visible under ``search``.

    Levels are walked root to leaf, so the result is in discovery order.
    Private (name-mangled) members of every base level are included when
    NON_PUBLIC is set. A group of same-named members keeps the position of
    its first declaration.

    Args:
        descriptor: Type to search
        search: Visibility and scope filter

    Returns:
        Deduplicated members; empty when the type declares none
    """
    groups: dict[str, list[MemberDescriptor]] = {}
    for level in descriptor.levels:
        for member in level.members:
            if _matches(member, search):
                groups.setdefault(member.name, []).append(member)

    found: list[MemberDescriptor] = []
    for group in groups.values():
        found.extend(_collapse(group))
    return found


def get_object_member_serialization(
    descriptor: TypeDescriptor, *, ignore_serializable_attribute: bool = True
) -> MemberSerialization:
    """Member serialization mode implied by the class markers."""
    if descriptor.container is not None and descriptor.container.kind == "object":
        return descriptor.container.member_serialization
    if descriptor.data_contract is not None:
        return MemberSerialization.OPT_IN
    if descriptor.serializable and not ignore_serializable_attribute:
        return MemberSerialization.FIELDS
    return MemberSerialization.OPT_OUT


def get_serializable_members(
    descriptor: TypeDescriptor,
    member_serialization: MemberSerialization,
    *,
    non_public_members: bool = False,
    serialize_compiler_generated_members: bool = False,
) -> list[MemberDescriptor]:
    """Members that become properties of an object contract.

    Outside FIELDS mode a member serializes when the default search finds
    it, or when it carries an explicit member marker. Synthesized members
    are skipped unless requested. In FIELDS mode every instance field
    serializes and properties are skipped. Indexed properties never
    serialize.
    """
    all_members = [m for m in get_fields_and_properties(descriptor, MemberSearch.ALL) if not m.is_indexed]

    if member_serialization is MemberSerialization.FIELDS:
        return [m for m in all_members if m.kind is MemberKind.FIELD and not m.is_static]

    default_search = MemberSearch.DEFAULT
    if non_public_members:
        default_search |= MemberSearch.NON_PUBLIC
    default_members = get_fields_and_properties(descriptor, default_search)

    serializable: list[MemberDescriptor] = []
    for member in all_members:
        if member.is_synthesized and not serialize_compiler_generated_members:
            continue
        if member in default_members or has_marker(member.metadata, JsonField):
            serializable.append(member)
        elif descriptor.data_contract is not None and has_marker(member.metadata, DataMember):
            serializable.append(member)
    return serializable
