"""Naming helpers shared by descriptors, errors and reports."""

import builtins
from typing import Any


def qualified_name(cls: type) -> str:
    """Return the importable dotted name of a class."""
    return f"{cls.__module__}.{cls.__qualname__}"


def type_name(annotation: Any) -> str:
    """Return a short display name for a class or annotation."""
    if isinstance(annotation, type):
        if annotation.__module__ == builtins.__name__:
            return annotation.__qualname__
        return qualified_name(annotation)
    return str(annotation)
