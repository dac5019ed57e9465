"""Serializable reports describing a class."""

from dataclasses import dataclass

from dataclasses_json import DataClassJsonMixin

from reflectutil.reflection import (
    ConstructorDescriptor,
    FieldDescriptor,
    Modifier,
    all_fields,
    constructors,
    describe,
    is_array,
    is_enum,
    is_list,
    is_map,
    is_record,
    is_set,
)
from reflectutil.reflection.util import qualified_name, type_name

CATEGORY_CHECKS = {
    "enum": is_enum,
    "record": is_record,
    "set": is_set,
    "list": is_list,
    "map": is_map,
    "array": is_array,
}


@dataclass
class FieldReport(DataClassJsonMixin):
    """Represents one field of the described class or its ancestors."""

    name: str
    owner: str
    type: str
    modifiers: list[str]
    categories: list[str]


@dataclass
class ParameterReport(DataClassJsonMixin):
    """Represents a constructor parameter."""

    name: str
    type: str
    kind: str


@dataclass
class ConstructorReport(DataClassJsonMixin):
    """Represents a constructor."""

    arity: int
    parameters: list[ParameterReport]


@dataclass
class TypeReport(DataClassJsonMixin):
    """Represents a complete class description."""

    name: str
    modifiers: list[str]
    categories: list[str]
    ancestors: list[str]
    fields: list[FieldReport]
    constructors: list[ConstructorReport]


def modifier_names(modifiers: Modifier) -> list[str]:
    """Return the lower-case names of the set flags."""
    return [m.name.lower() for m in Modifier if m.value and m in modifiers]


def _categories(target: object) -> list[str]:
    return [name for name, check in CATEGORY_CHECKS.items() if check(target)]


def _field_report(field: FieldDescriptor) -> FieldReport:
    return FieldReport(
        name=field.name,
        owner=qualified_name(field.owner),
        type=type_name(field.type),
        modifiers=modifier_names(field.modifiers),
        categories=_categories(field),
    )


def _constructor_report(constructor: ConstructorDescriptor) -> ConstructorReport:
    return ConstructorReport(
        arity=constructor.arity,
        parameters=[
            ParameterReport(name=p.name, type=type_name(p.type), kind=p.kind.name.lower())
            for p in constructor.parameters
        ],
    )


def build_report(cls: type) -> TypeReport:
    """Describe ``cls`` with everything the reflection helpers know about it."""
    descriptor = describe(cls)

    ancestors = []
    current = descriptor.ancestor
    while current is not None:
        ancestors.append(current.name)
        current = current.ancestor

    return TypeReport(
        name=descriptor.name,
        modifiers=modifier_names(descriptor.modifiers),
        categories=_categories(descriptor),
        ancestors=ancestors,
        fields=[_field_report(f) for f in all_fields(descriptor)],
        constructors=[_constructor_report(c) for c in constructors(descriptor)],
    )
