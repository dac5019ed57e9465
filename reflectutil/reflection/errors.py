"""Exceptions raised by the reflection helpers."""

from typing import TYPE_CHECKING, Any

from .util import qualified_name

if TYPE_CHECKING:
    from .types import FieldDescriptor


class ReflectionError(RuntimeError):
    """Base exception for reflection failures."""


class InvalidArgumentError(ReflectionError):
    """Raised when a required argument is missing or has the wrong kind."""


def check_not_none(value: Any, name: str) -> None:
    """Raise InvalidArgumentError if a required argument is None."""
    if value is None:
        raise InvalidArgumentError(f"{name} must not be None")


class FieldNotFoundError(ReflectionError):
    """Raised when no class in the ancestor chain declares the field."""

    def __init__(self, cls: type, field_name: str) -> None:
        super().__init__(f"{field_name} was not found in {qualified_name(cls)}")
        self.type = cls
        self.field_name = field_name


class FieldUnreadableError(ReflectionError):
    """Raised when the runtime refuses to read a resolved field."""

    def __init__(self, field: "FieldDescriptor") -> None:
        super().__init__(f"Cannot read {field} value.")
        self.field = field


class FieldUnwritableError(ReflectionError):
    """Raised when a resolved field cannot be written.

    ``reason`` tells which step failed: the field was protected, or the
    runtime refused the write itself.
    """

    def __init__(self, field: "FieldDescriptor", value: Any, reason: str) -> None:
        super().__init__(f"Cannot change {field} value to '{value}': {reason}.")
        self.field = field
        self.value = value
        self.reason = reason


class InitializationError(ReflectionError):
    """Raised when a new instance cannot be constructed."""


class NoConstructorsError(InitializationError):
    """Raised when a class reports no constructors at all."""

    def __init__(self, cls: type) -> None:
        super().__init__(
            f"Could not create instance of {qualified_name(cls)} because it has no constructors"
        )
        self.type = cls
