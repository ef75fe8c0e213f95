# tests/unit/contracts/test_markers.py
"""Tests for declarative class, member and method markers."""

from __future__ import annotations

import pytest

from jsoncontract.contracts.enums import HookKind, MemberSerialization, Required
from jsoncontract.contracts.markers import (
    CONSTRUCTOR_ATTR,
    CONTAINER_ATTR,
    CONVERTER_ATTR,
    DATA_CONTRACT_ATTR,
    HOOKS_ATTR,
    SERIALIZABLE_ATTR,
    ContainerOptions,
    DataMember,
    JsonField,
    JsonIgnore,
    data_contract,
    find_marker,
    has_marker,
    json_array,
    json_constructor,
    json_converter,
    json_object,
    on_deserialized,
    on_error,
    serializable,
)
from tests.fixtures.types import UpperConverter


class TestClassMarkers:
    def test_json_object_stores_options(self) -> None:
        @json_object(member_serialization=MemberSerialization.OPT_IN, item_required=Required.ALWAYS, title="T")
        class Marked:
            pass

        options = getattr(Marked, CONTAINER_ATTR)
        assert options == ContainerOptions(
            kind="object",
            title="T",
            member_serialization=MemberSerialization.OPT_IN,
            item_required=Required.ALWAYS,
        )

    def test_json_array_defaults(self) -> None:
        @json_array()
        class Marked:
            pass

        options = getattr(Marked, CONTAINER_ATTR)
        assert options.kind == "array"
        assert options.allow_nullable_items is True
        assert options.is_reference is None

    def test_container_marker_is_inherited(self) -> None:
        @json_array()
        class Base:
            pass

        class Child(Base):
            pass

        assert getattr(Child, CONTAINER_ATTR).kind == "array"

    def test_serializable_marks_only_decorated_class(self) -> None:
        @serializable
        class Base:
            pass

        class Child(Base):
            pass

        assert Base.__dict__.get(SERIALIZABLE_ATTR) is True
        assert SERIALIZABLE_ATTR not in Child.__dict__

    def test_data_contract(self) -> None:
        @data_contract(name="order", is_reference=True)
        class Marked:
            pass

        options = getattr(Marked, DATA_CONTRACT_ATTR)
        assert options.name == "order"
        assert options.is_reference is True

    def test_json_converter_keeps_arguments(self) -> None:
        @json_converter(UpperConverter, 1, 2)
        class Marked:
            pass

        options = getattr(Marked, CONVERTER_ATTR)
        assert options.converter_type is UpperConverter
        assert options.args == (1, 2)


class TestMethodMarkers:
    def test_hook_tags_function(self) -> None:
        class Hooked:
            @on_deserialized
            def loaded(self, context: object) -> None:
                pass

        assert getattr(Hooked.loaded, HOOKS_ATTR) == frozenset({HookKind.ON_DESERIALIZED})

    def test_stacked_hooks_accumulate(self) -> None:
        class Hooked:
            @on_error
            @on_deserialized
            def both(self, context: object) -> None:
                pass

        assert getattr(Hooked.both, HOOKS_ATTR) == frozenset({HookKind.ON_DESERIALIZED, HookKind.ON_ERROR})

    @pytest.mark.parametrize("outer_first", [True, False])
    def test_json_constructor_unwraps_classmethod(self, outer_first: bool) -> None:
        """Decorator order relative to classmethod does not matter."""
        if outer_first:

            class Made:
                @json_constructor
                @classmethod
                def create(cls) -> Made:
                    return cls()

        else:

            class Made:  # type: ignore[no-redef]
                @classmethod
                @json_constructor
                def create(cls) -> Made:
                    return cls()

        assert getattr(Made.__dict__["create"].__func__, CONSTRUCTOR_ATTR) is True


class TestLookupHelpers:
    def test_find_marker_returns_first_instance(self) -> None:
        metadata = ("doc", JsonField("a"), JsonField("b"))

        assert find_marker(metadata, JsonField) == JsonField("a")
        assert find_marker(metadata, DataMember) is None

    def test_has_marker_accepts_several_types(self) -> None:
        assert has_marker((JsonIgnore(),), JsonField, JsonIgnore)
        assert not has_marker(("doc",), JsonField, JsonIgnore)
