"""Predicates classifying classes and fields.

Every predicate accepts a class, a ``TypeDescriptor`` or a
``FieldDescriptor``. Field arguments are classified by their declared type,
except for the modifier checks which read the field's own flags. Annotations
such as ``list[int]`` are reduced to their origin first; anything that is
still not a class afterwards is classified as ``False``.
"""

import array
import collections.abc
import dataclasses
import typing
from enum import Enum
from typing import Any

from .errors import check_not_none
from .types import (
    FieldDescriptor,
    Modifier,
    TypeDescriptor,
    describe,
    erase,
    is_named_tuple,
    unwrap_optional,
)

Target = type | TypeDescriptor | FieldDescriptor

ARRAY_TYPES: tuple[type, ...] = (array.array,)


def _as_class(target: Target) -> Any:
    check_not_none(target, "target")
    if isinstance(target, FieldDescriptor):
        return target.type
    if isinstance(target, TypeDescriptor):
        return target.cls
    return erase(target)


def _modifiers(target: Target) -> Modifier:
    check_not_none(target, "target")
    if isinstance(target, FieldDescriptor):
        return target.modifiers
    cls = _as_class(target)
    if not isinstance(cls, type):
        return Modifier.NONE
    return describe(cls).modifiers


def _conforms(target: Target, category: type | tuple[type, ...]) -> bool:
    cls = _as_class(target)
    return isinstance(cls, type) and issubclass(cls, category)


def is_final(target: Target) -> bool:
    return Modifier.FINAL in _modifiers(target)


def is_static(target: Target) -> bool:
    return Modifier.STATIC in _modifiers(target)


def is_abstract(target: Target) -> bool:
    """Check if a class has abstract methods or is a protocol."""
    return Modifier.ABSTRACT in _modifiers(target)


def is_interface(target: Target) -> bool:
    """Check if a class is a typing.Protocol definition."""
    return Modifier.INTERFACE in _modifiers(target)


def is_enum(target: Target) -> bool:
    return _conforms(target, Enum)


def is_record(target: Target) -> bool:
    """Check if a class is a dataclass or a named tuple."""
    cls = _as_class(target)
    if not isinstance(cls, type):
        return False
    return dataclasses.is_dataclass(cls) or is_named_tuple(cls)


def is_set(target: Target) -> bool:
    return _conforms(target, collections.abc.Set)


def is_list(target: Target) -> bool:
    """Check for a mutable sequence that is not an array type."""
    return _conforms(target, collections.abc.MutableSequence) and not _conforms(
        target, ARRAY_TYPES
    )


def is_map(target: Target) -> bool:
    return _conforms(target, collections.abc.Mapping)


def _is_variadic_tuple(annotation: Any) -> bool:
    if typing.get_origin(annotation) is not tuple:
        return False
    args = typing.get_args(annotation)
    return len(args) == 2 and args[1] is Ellipsis


def is_array(target: Target) -> bool:
    """Check for an array type, or a ``tuple[T, ...]`` annotation."""
    check_not_none(target, "target")
    annotation = target.annotation if isinstance(target, FieldDescriptor) else target
    if _is_variadic_tuple(unwrap_optional(annotation)):
        return True
    return _conforms(target, ARRAY_TYPES)
