"""Field lookup and privileged field access.

Fields are looked up along a class's ancestor chain (see ``ancestor_of``) and
read or written without going through the class's own ``__getattribute__``
and ``__setattr__``. Only the ``Modifier.FINAL`` flag of a field descriptor
protects it from ordinary writes.
"""

import logging
from typing import Any

from .errors import (
    FieldNotFoundError,
    FieldUnreadableError,
    FieldUnwritableError,
    check_not_none,
)
from .types import FieldDescriptor, Modifier, TypeDescriptor, describe

logger = logging.getLogger(__name__)


def resolve_field(cls: "type | TypeDescriptor", name: str) -> FieldDescriptor:
    """Return the field named ``name`` declared on ``cls`` or an ancestor.

    The walk starts at ``cls`` and moves to the ancestor one level at a time,
    so a field re-declared in a subclass shadows the ancestor's field.

    Args:
        cls: The class to start searching from.
        name: The field name.

    Returns:
        The descriptor of the nearest declaring class.

    Raises:
        InvalidArgumentError: If ``cls`` or ``name`` is None.
        FieldNotFoundError: If no class in the chain declares ``name``.
    """
    check_not_none(cls, "cls")
    check_not_none(name, "name")

    start = describe(cls)
    current: TypeDescriptor | None = start
    while current is not None:
        field = current.declared_field(name)
        if field is not None:
            return field
        current = current.ancestor
    raise FieldNotFoundError(start.cls, name)


def all_fields(cls: "type | TypeDescriptor") -> list[FieldDescriptor]:
    """Return every field declared on ``cls`` and all of its ancestors.

    Levels are ordered most-derived first, fields within a level in
    declaration order. Shadowed fields are kept.
    """
    check_not_none(cls, "cls")

    fields: list[FieldDescriptor] = []
    current: TypeDescriptor | None = describe(cls)
    while current is not None:
        fields.extend(current.declared_fields)
        current = current.ancestor
    return fields


def get_value(instance: Any, name: str) -> Any:
    """Read a field of ``instance``, static fields from their declaring class.

    Raises:
        FieldNotFoundError: If the runtime type of ``instance`` has no such field.
        FieldUnreadableError: If the field holds no value.
    """
    check_not_none(instance, "instance")
    field = resolve_field(type(instance), name)
    try:
        if field.is_static:
            return getattr(field.owner, field.name)
        return object.__getattribute__(instance, field.name)
    except AttributeError as e:
        raise FieldUnreadableError(field) from e


def _write(instance: Any, field: FieldDescriptor, value: Any, reason: str) -> None:
    try:
        if field.is_static:
            setattr(field.owner, field.name, value)
        else:
            object.__setattr__(instance, field.name, value)
    except (AttributeError, TypeError) as e:
        raise FieldUnwritableError(field, value, reason) from e


def set_value(instance: Any, name: str, value: Any) -> None:
    """Write a field of ``instance``, static fields on their declaring class.

    Raises:
        FieldNotFoundError: If the runtime type of ``instance`` has no such field.
        FieldUnwritableError: If the field is final or the write is refused.
    """
    check_not_none(instance, "instance")
    field = resolve_field(type(instance), name)
    if field.is_final:
        raise FieldUnwritableError(field, value, "the field is final")
    _write(instance, field, value, "the runtime refused the write")


def set_value_forced(instance: Any, name: str, value: Any) -> None:
    """Write a field of ``instance`` even if it is final.

    When the field carries ``Modifier.FINAL`` the flag is cleared on the
    field descriptor before writing.

    Warning:
        Field descriptors are shared by the whole process. Clearing the flag
        leaves the field unprotected for every later caller, on every
        instance, and nothing in this package restores it. Forced writes to
        the same field from several threads must be serialized by the caller.

    Raises:
        FieldNotFoundError: If the runtime type of ``instance`` has no such field.
        FieldUnwritableError: If the write is refused, even with the flag cleared.
    """
    check_not_none(instance, "instance")
    field = resolve_field(type(instance), name)
    if not field.is_final:
        _write(instance, field, value, "the runtime refused the write")
        return

    logger.warning(f"Clearing final flag of {field}, later writes to it are unprotected")
    field.modifiers &= ~Modifier.FINAL
    _write(instance, field, value, "the final flag was cleared but the write was still refused")
