"""Constructor selection and parameter-to-property matching."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

from jsoncontract.contracts.descriptors import ConstructorDescriptor, ParameterDescriptor, TypeDescriptor
from jsoncontract.contracts.errors import ConstructorSelectionError
from jsoncontract.contracts.property import JsonProperty, PropertyCollection
from jsoncontract.contracts.sentinels import MISSING

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ConstructorPlan:
    """How an object contract creates instances when it cannot use a default creator.

    Exactly one of ``override_constructor`` and ``parametrized_constructor`` is set.
    """

    override_constructor: ConstructorDescriptor | None = None
    parametrized_constructor: ConstructorDescriptor | None = None

    @property
    def constructor(self) -> ConstructorDescriptor:
        chosen = self.override_constructor or self.parametrized_constructor
        if chosen is None:
            raise ValueError("ConstructorPlan has no constructor")
        return chosen


def select_constructor(
    descriptor: TypeDescriptor,
    *,
    has_default_creator: bool,
    default_creator_non_public: bool,
) -> ConstructorPlan | None:
    """Choose the designated constructor, or fall back to a parametrized __init__.

    Raises:
        ConstructorSelectionError: More than one constructor is designated
    """
    designated = [ctor for ctor in descriptor.constructors if ctor.is_designated]
    if len(designated) > 1:
        names = ", ".join(ctor.name for ctor in designated)
        raise ConstructorSelectionError(
            f"Multiple constructors with the json_constructor marker on '{descriptor.name}': {names}.",
            target_type=descriptor.target,
        )
    if designated:
        return ConstructorPlan(override_constructor=designated[0])

    if has_default_creator and not default_creator_non_public:
        return None
    init = descriptor.init_constructor
    if init is None or not init.parameters:
        return None
    return ConstructorPlan(parametrized_constructor=init)


def _types_match(parameter: ParameterDescriptor, prop: JsonProperty) -> bool:
    # An unannotated parameter accepts any member type
    if parameter.annotation is MISSING:
        return True
    return bool(prop.property_type == parameter.annotation)


def match_parameter(parameter: ParameterDescriptor, properties: PropertyCollection) -> JsonProperty | None:
    """Member property a constructor parameter populates, or None.

    Looks up the serialized name (exact, then case-insensitive), then the
    attribute name. A match whose type differs from the parameter annotation is
    discarded, even when the annotation is ``object`` or ``Any``.
    """
    prop = properties.get_closest_match_property(parameter.name)
    if prop is None:
        prop = properties.by_underlying_name(parameter.name)
    if prop is None or not _types_match(parameter, prop):
        return None
    return prop


def create_constructor_parameters(
    constructor: ConstructorDescriptor,
    member_properties: PropertyCollection,
    build: Callable[[ParameterDescriptor, JsonProperty], JsonProperty],
    declaring_type: Any,
) -> PropertyCollection:
    """Properties for ``constructor``'s parameters, in parameter order.

    Parameters without a matching member property are dropped from the plan.
    The serializer supplies their defaults.
    """
    parameter_properties: list[JsonProperty] = []
    for parameter in constructor.parameters:
        matching = match_parameter(parameter, member_properties)
        if matching is None:
            logger.debug(
                "constructor_parameter_unmatched",
                constructor=constructor.name,
                parameter=parameter.name,
                declaring_type=getattr(declaring_type, "__qualname__", repr(declaring_type)),
            )
            continue
        parameter_properties.append(build(parameter, matching))
    return PropertyCollection.build(declaring_type, parameter_properties)
