"""Tests for the descriptor model"""

import inspect
from typing import Any, ClassVar, Final, Generic, Optional, Protocol, TypeVar

import pytest

from reflectutil.reflection import InvalidArgumentError, Modifier, describe, is_list
from reflectutil.reflection.types import ancestor_of, erase
from reflectutil.tests.samples import (
    Base,
    Color,
    Derived,
    Employee,
    Greeter,
    Money,
    Options,
    Outer,
    Person,
    Sealed,
    Shape,
    Slotted,
)

T = TypeVar("T")


def describe_describe():
    def returns_the_same_descriptor_every_time(expect):
        expect(describe(Employee) is describe(Employee)) == True

    def passes_descriptors_through(expect):
        descriptor = describe(Employee)
        expect(describe(descriptor) is descriptor) == True

    def rejects_none():
        with pytest.raises(InvalidArgumentError):
            describe(None)

    def rejects_instances(expect):
        with pytest.raises(InvalidArgumentError) as exinfo:
            describe(Employee())

        expect(str(exinfo.value)).includes("Expected a class")

    def is_not_collected_as_a_describe_block(expect, pytestconfig):
        expect(pytestconfig.getini("describe_prefixes")) == ["describe_"]


def describe_declared_fields():
    def lists_own_annotations_in_order(expect):
        names = [f.name for f in describe(Employee).declared_fields]
        expect(names) == ["name", "headcount", "MAX_SALARY"]

    def marks_class_vars_static(expect):
        field = describe(Person).declared_field("species")
        expect(field.modifiers) == Modifier.STATIC
        expect(field.type) == str

    def marks_final_constants_static_and_final(expect):
        field = describe(Employee).declared_field("MAX_SALARY")
        expect(field.modifiers) == Modifier.STATIC | Modifier.FINAL

    def erases_optional_annotations(expect):
        field = describe(Person).declared_field("nickname")
        expect(field.annotation) == Optional[str]
        expect(field.type) == str

    def marks_frozen_dataclass_fields_final(expect):
        fields = describe(Money).declared_fields
        expect([f.name for f in fields]) == ["amount", "currency"]
        expect(all(f.is_final and not f.is_static for f in fields)) == True

    def keeps_final_fields_without_values_on_instances(expect):
        class Limits:
            ceiling: Final[int]

            def __init__(self) -> None:
                self.ceiling = 10

        field = describe(Limits).declared_field("ceiling")
        expect(field.modifiers) == Modifier.FINAL
        expect(field.type) == int

    def includes_unannotated_slots(expect):
        fields = describe(Slotted).declared_fields
        expect([f.name for f in fields]) == ["first", "second"]
        expect(fields[0].type) == object

    def keeps_unresolvable_annotations_as_text(expect):
        class Forward:
            registry: "ClassVar[MissingType]"
            owner: "MissingType"

        registry = describe(Forward).declared_field("registry")
        owner = describe(Forward).declared_field("owner")
        expect(registry.is_static) == True
        expect(registry.annotation) == "MissingType"
        expect(owner.modifiers) == Modifier.NONE
        expect(owner.type) == "MissingType"

    def keeps_malformed_annotations_as_text(expect):
        class Malformed:
            items: "list[int"  # noqa: F722
            count: int

            def __init__(self, items: "list[int", count: int) -> None:  # noqa: F722
                self.items = items
                self.count = count

        descriptor = describe(Malformed)
        expect(descriptor.declared_field("items").type) == "list[int"
        expect(descriptor.declared_field("count").type) == int
        expect(descriptor.constructors[0].parameter_types) == ("list[int", int)
        expect(is_list(descriptor.declared_field("items"))) == False

    def gives_each_level_its_own_descriptor(expect):
        base_label = describe(Base).declared_field("label")
        derived_label = describe(Derived).declared_field("label")
        expect(base_label is derived_label) == False
        expect(base_label.type) == str
        expect(derived_label.type) == int

    def formats_fields_for_messages(expect):
        field = describe(Employee).declared_field("MAX_SALARY")
        expect(str(field)).includes("static final")
        expect(str(field)).includes("Employee.MAX_SALARY")


def describe_type_modifiers():
    def flags_abstract_classes(expect):
        expect(describe(Shape).modifiers) == Modifier.ABSTRACT

    def flags_protocols_as_abstract_interfaces(expect):
        expect(describe(Greeter).modifiers) == Modifier.INTERFACE | Modifier.ABSTRACT

    def flags_final_classes(expect):
        expect(Modifier.FINAL in describe(Sealed).modifiers) == True
        expect(Modifier.FINAL in describe(Color).modifiers) == True

    def flags_classes_nested_in_classes_as_static(expect):
        expect(describe(Outer.Inner).modifiers) == Modifier.STATIC
        expect(describe(Outer).modifiers) == Modifier.NONE

    def does_not_flag_classes_local_to_functions(expect):
        class Local:
            pass

        expect(describe(Local).modifiers) == Modifier.NONE


def describe_ancestor_of():
    def follows_the_first_base(expect):
        expect(ancestor_of(Employee)) == Person
        expect(ancestor_of(Person)) == object
        expect(ancestor_of(object)) == None

    def skips_protocols_and_generic(expect):
        class Box(Greeter, Generic[T]):
            greeting: str = "hi"

            def greet(self) -> str:
                return self.greeting

        expect(ancestor_of(Box)) == object

    def stops_at_protocols(expect):
        class Named(Protocol):
            name: str

        class Labelled(Named, Protocol):
            label: str

        expect(ancestor_of(Labelled)) == None

    def exposes_the_ancestor_descriptor(expect):
        expect(describe(Employee).ancestor is describe(Person)) == True
        expect(describe(object).ancestor) == None


def describe_constructor_descriptors():
    def derives_arity_from_parameters(expect):
        (constructor,) = describe(Employee).constructors
        expect(constructor.arity) == 2
        expect(len(constructor.parameters)) == constructor.arity
        expect(constructor.parameter_types) == (str, str)

    def invokes_keyword_only_parameters_by_name(expect):
        (constructor,) = describe(Options).constructors
        expect(constructor.parameters[0].kind) == inspect.Parameter.KEYWORD_ONLY

        options = constructor.invoke(True, 3)
        expect(options) == Options(verbose=True, depth=3)

    def ignores_variadic_parameters(expect):
        class Flexible:
            def __init__(self, first: int, *rest: int, **extra: Any) -> None:
                self.first = first

        (constructor,) = describe(Flexible).constructors
        expect(constructor.arity) == 1


def describe_erase():
    def reduces_generic_aliases_to_their_origin(expect):
        expect(erase(list[int])) == list
        expect(erase(dict[str, list[int]])) == dict

    def maps_missing_annotations_to_object(expect):
        expect(erase(inspect.Parameter.empty)) == object
        expect(erase(Any)) == object

    def unwraps_optional(expect):
        expect(erase(int | None)) == int
        expect(erase(Optional[set[int]])) == set

    def keeps_real_unions(expect):
        expect(erase(int | str)) == int | str
