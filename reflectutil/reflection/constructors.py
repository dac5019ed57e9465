"""Constructor selection and instantiation."""

from collections.abc import Callable
from typing import Any, TypeVar

from .errors import InitializationError, NoConstructorsError, check_not_none
from .types import ConstructorDescriptor, TypeDescriptor, describe
from .util import qualified_name

T = TypeVar("T")

Comparator = Callable[[ConstructorDescriptor, ConstructorDescriptor], bool]


def constructors(cls: "type | TypeDescriptor") -> tuple[ConstructorDescriptor, ...]:
    """Return the constructors of ``cls`` in source-declaration order.

    Overloaded ``__init__`` signatures are listed in the order they were
    defined. Without overloads there is exactly one constructor, the
    signature of calling the class.
    """
    check_not_none(cls, "cls")
    return describe(cls).constructors


def constructor_with_extreme_arity(
    cls: "type | TypeDescriptor", comparator: Comparator
) -> ConstructorDescriptor:
    """Fold the constructors of ``cls`` with ``comparator``.

    The current best is replaced only when ``comparator(candidate, best)``
    is true, so among equally good constructors the first one wins.

    Raises:
        NoConstructorsError: If ``cls`` reports no constructors.
    """
    best: ConstructorDescriptor | None = None
    for candidate in constructors(cls):
        if best is None or comparator(candidate, best):
            best = candidate
    if best is None:
        raise NoConstructorsError(describe(cls).cls)
    return best


def constructor_with_most_parameters(cls: "type | TypeDescriptor") -> ConstructorDescriptor:
    """Return the first constructor with the most parameters."""
    return constructor_with_extreme_arity(cls, lambda a, b: a.arity > b.arity)


def default_constructor(cls: "type | TypeDescriptor") -> ConstructorDescriptor:
    """Return the first constructor with the fewest parameters."""
    return constructor_with_extreme_arity(cls, lambda a, b: a.arity < b.arity)


def _find_single_argument_constructor(
    cls: type, arg_types: tuple[type, ...]
) -> ConstructorDescriptor:
    for candidate in constructors(cls):
        # Only one-parameter constructors are considered, whatever len(arg_types) is
        if candidate.arity == 1 and candidate.parameter_types == arg_types:
            return candidate
    raise InitializationError(
        f"Could not create instance of {qualified_name(cls)} "
        "because no suitable constructor was found"
    )


def new_instance(cls: "type[T] | TypeDescriptor", *args: Any) -> T:
    """Create an instance of ``cls``.

    Without arguments the default constructor is called. With arguments the
    constructor is chosen by the exact runtime types of the arguments, and
    only single-parameter constructors qualify: passing two or more
    arguments always fails.

    Raises:
        InitializationError: If no constructor matches or construction fails.
    """
    check_not_none(cls, "cls")
    cls = describe(cls).cls

    if args:
        arg_types = tuple(type(arg) for arg in args)
        constructor = _find_single_argument_constructor(cls, arg_types)
    else:
        constructor = default_constructor(cls)

    try:
        return constructor.invoke(*args)
    except Exception as e:
        raise InitializationError(
            f"Could not create instance of {qualified_name(cls)} because {e}"
        ) from e
