# tests/unit/engine/test_discovery.py
"""Tests for member discovery over type descriptors."""

from __future__ import annotations

from jsoncontract.contracts.enums import MemberSearch, MemberSerialization
from jsoncontract.core.reflection import get_type_descriptor
from jsoncontract.engine.discovery import (
    get_fields_and_properties,
    get_object_member_serialization,
    get_serializable_members,
)
from tests.fixtures.types import (
    Box,
    Contracted,
    ContractedChild,
    FieldsThing,
    IntBox,
    LegacySerializable,
    OptInThing,
    Person,
    Point,
    Synthesized,
    WithProperties,
)


def _names(members: list) -> list[str]:  # type: ignore[type-arg]
    return [member.name for member in members]


class TestGetFieldsAndProperties:
    def test_default_search_public_instance(self) -> None:
        found = get_fields_and_properties(get_type_descriptor(Person), MemberSearch.DEFAULT)

        assert _names(found) == ["name", "age"]

    def test_static_scope(self) -> None:
        found = get_fields_and_properties(get_type_descriptor(Person), MemberSearch.PUBLIC | MemberSearch.STATIC)

        assert _names(found) == ["species"]

    def test_non_public_includes_private(self) -> None:
        found = get_fields_and_properties(
            get_type_descriptor(Person), MemberSearch.NON_PUBLIC | MemberSearch.INSTANCE
        )

        assert _names(found) == ["_nickname", "_Person__pin"]

    def test_no_scope_flag_finds_nothing(self) -> None:
        assert get_fields_and_properties(get_type_descriptor(Person), MemberSearch.PUBLIC) == []

    def test_concrete_override_hides_generic_declaration(self) -> None:
        found = get_fields_and_properties(get_type_descriptor(IntBox), MemberSearch.DEFAULT)
        items = [m for m in found if m.name == "item"]

        assert len(items) == 1
        assert items[0].declaring_type is IntBox
        assert items[0].value_type is int

    def test_first_declaration_keeps_position(self) -> None:
        found = get_fields_and_properties(get_type_descriptor(IntBox), MemberSearch.DEFAULT)

        assert _names(found) == ["item", "label"]

    def test_generic_only_declaration_kept(self) -> None:
        found = get_fields_and_properties(get_type_descriptor(Box[str]), MemberSearch.DEFAULT)

        assert _names(found) == ["item", "label"]

    def test_indexed_property_discovered(self) -> None:
        found = get_fields_and_properties(get_type_descriptor(WithProperties), MemberSearch.DEFAULT)

        assert "indexed" in _names(found)


class TestGetObjectMemberSerialization:
    def test_plain_class_opts_out(self) -> None:
        assert get_object_member_serialization(get_type_descriptor(Point)) is MemberSerialization.OPT_OUT

    def test_json_object_mode(self) -> None:
        assert get_object_member_serialization(get_type_descriptor(OptInThing)) is MemberSerialization.OPT_IN
        assert get_object_member_serialization(get_type_descriptor(FieldsThing)) is MemberSerialization.FIELDS

    def test_data_contract_opts_in(self) -> None:
        assert get_object_member_serialization(get_type_descriptor(Contracted)) is MemberSerialization.OPT_IN

    def test_serializable_honoured_only_when_requested(self) -> None:
        descriptor = get_type_descriptor(LegacySerializable)

        assert get_object_member_serialization(descriptor) is MemberSerialization.OPT_OUT
        assert (
            get_object_member_serialization(descriptor, ignore_serializable_attribute=False)
            is MemberSerialization.FIELDS
        )


class TestGetSerializableMembers:
    def test_opt_out_public_only(self) -> None:
        members = get_serializable_members(get_type_descriptor(Person), MemberSerialization.OPT_OUT)

        assert _names(members) == ["name", "age"]

    def test_non_public_members(self) -> None:
        members = get_serializable_members(
            get_type_descriptor(Person), MemberSerialization.OPT_OUT, non_public_members=True
        )

        assert _names(members) == ["name", "age", "_nickname", "_Person__pin"]

    def test_fields_mode_skips_properties_and_statics(self) -> None:
        members = get_serializable_members(get_type_descriptor(FieldsThing), MemberSerialization.FIELDS)

        assert _names(members) == ["public", "_protected"]

    def test_indexed_properties_excluded(self) -> None:
        members = get_serializable_members(get_type_descriptor(WithProperties), MemberSerialization.OPT_OUT)

        assert _names(members) == ["value", "read_only"]

    def test_data_members_included_under_data_contract(self) -> None:
        members = get_serializable_members(get_type_descriptor(ContractedChild), MemberSerialization.OPT_IN)

        assert _names(members) == ["kept", "plain", "dropped", "extra"]

    def test_synthesized_members_opt_in(self) -> None:
        descriptor = get_type_descriptor(Synthesized)

        assert _names(get_serializable_members(descriptor, MemberSerialization.OPT_OUT)) == ["payload"]
        assert _names(
            get_serializable_members(
                descriptor, MemberSerialization.OPT_OUT, serialize_compiler_generated_members=True
            )
        ) == ["__version__", "payload"]
