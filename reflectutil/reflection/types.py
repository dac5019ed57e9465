"""Runtime descriptors for classes, fields and constructors.

Descriptors are built from Python's own introspection facilities the first
time a class is described and are kept in a process-wide table, so every
caller asking about the same class sees the same descriptor objects.
"""

import dataclasses
import inspect
import logging
import re
import sys
import types
import typing
from dataclasses import dataclass
from enum import Enum, Flag, auto
from typing import Any, ClassVar, Final

from .errors import InvalidArgumentError, check_not_none
from .util import qualified_name, type_name

logger = logging.getLogger(__name__)


class Modifier(Flag):
    """Attribute flags of a class or field."""

    NONE = 0
    FINAL = auto()
    STATIC = auto()
    ABSTRACT = auto()
    INTERFACE = auto()


# Matches string annotations that could not be evaluated, e.g. "ClassVar[Missing]"
_WRAPPER_PATTERN = re.compile(r"^\s*(?:typing\.)?(ClassVar|Final)\s*(?:\[(.*)\])?\s*$", re.DOTALL)
_INIT_VAR_PATTERN = re.compile(r"^\s*(?:dataclasses\.)?InitVar\b")

_SLOT_NAMES_SKIPPED = frozenset(["__dict__", "__weakref__"])


def unwrap_optional(annotation: Any) -> Any:
    """Strip ``Annotated`` metadata and a ``None`` arm: ``Optional[X]`` -> ``X``."""
    while True:
        origin = typing.get_origin(annotation)
        if origin is typing.Annotated:
            annotation = typing.get_args(annotation)[0]
            continue
        if origin is typing.Union or origin is types.UnionType:
            arms = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
            if len(arms) == 1:
                annotation = arms[0]
                continue
        return annotation


def erase(annotation: Any) -> Any:
    """Reduce an annotation to the class its values have at runtime.

    Generic aliases become their origin (``list[int]`` -> ``list``),
    ``Optional[X]`` becomes ``X`` and a missing annotation becomes ``object``.
    Anything else that is not a class is returned unchanged.
    """
    annotation = unwrap_optional(annotation)
    if annotation is Any or annotation is inspect.Parameter.empty:
        return object

    origin = typing.get_origin(annotation)
    if isinstance(origin, type):
        return origin
    return annotation


def _unwrap(annotation: Any) -> tuple[Any, bool, bool]:
    """Strip ClassVar, Final and Annotated wrappers.

    Returns:
        Tuple of (inner annotation, is_class_var, is_final).
    """
    class_var = False
    final = False
    while True:
        if isinstance(annotation, str):
            match = _WRAPPER_PATTERN.match(annotation)
            if not match:
                return annotation, class_var, final
            if match[1] == "ClassVar":
                class_var = True
            else:
                final = True
            annotation = Any if match[2] is None else match[2]
            continue

        if annotation is ClassVar:
            return Any, True, final
        if annotation is Final:
            return Any, class_var, True

        origin = typing.get_origin(annotation)
        if origin is ClassVar:
            class_var = True
        elif origin is Final:
            final = True
        elif origin is typing.Annotated:
            pass
        else:
            return annotation, class_var, final
        annotation = typing.get_args(annotation)[0]


def _is_init_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return _INIT_VAR_PATTERN.match(annotation) is not None
    return annotation is dataclasses.InitVar or isinstance(annotation, dataclasses.InitVar)


def is_protocol(cls: type) -> bool:
    """Check if a class is a typing.Protocol definition."""
    return bool(getattr(cls, "_is_protocol", False))


def is_named_tuple(cls: type) -> bool:
    """Check if a class was created by typing.NamedTuple or namedtuple()."""
    return issubclass(cls, tuple) and hasattr(cls, "_fields")


def _is_own_dataclass(cls: type) -> bool:
    return "__dataclass_fields__" in cls.__dict__


def _namespaces(cls: type) -> tuple[dict[str, Any], dict[str, Any]]:
    module = sys.modules.get(cls.__module__)
    return getattr(module, "__dict__", {}), dict(vars(cls))


def _evaluate(annotation: Any, globalns: dict[str, Any], localns: dict[str, Any]) -> Any:
    """Evaluate a string annotation, keeping its source text when that fails."""
    if not isinstance(annotation, str):
        return annotation
    try:
        return eval(annotation, globalns, localns)  # noqa: S307
    except Exception as e:
        logger.debug(f"Keeping annotation {annotation!r} unevaluated: {e}")
        return annotation


def _own_annotations(cls: type) -> dict[str, Any]:
    try:
        annotations = inspect.get_annotations(cls)
    except NameError:
        # Deferred annotations naming something undefined, Python 3.14+
        import annotationlib

        annotations = annotationlib.get_annotations(cls, format=annotationlib.Format.STRING)

    # One at a time: an annotation that fails to evaluate keeps its source text
    globalns, localns = _namespaces(cls)
    return {name: _evaluate(value, globalns, localns) for name, value in annotations.items()}


def _signature(obj: Any, cls: type) -> inspect.Signature:
    try:
        signature = inspect.signature(obj)
    except NameError:
        import annotationlib

        signature = inspect.signature(obj, annotation_format=annotationlib.Format.STRING)

    globalns, localns = _namespaces(cls)
    globalns = getattr(obj, "__globals__", globalns)
    parameters = [
        p.replace(annotation=_evaluate(p.annotation, globalns, localns))
        for p in signature.parameters.values()
    ]
    return signature.replace(parameters=parameters)


def ancestor_of(cls: type) -> type | None:
    """Return the class the field search continues with after ``cls``.

    This is the first base that is neither a protocol nor typing.Generic.
    Protocols and ``object`` have no ancestor.
    """
    if cls is object or is_protocol(cls):
        return None
    for base in cls.__bases__:
        if base is typing.Generic or is_protocol(base):
            continue
        return base
    return object


@dataclass(eq=False)
class FieldDescriptor:
    """A named field declared by exactly one class.

    ``modifiers`` is the only mutable part of the descriptor model: forced
    writes clear ``Modifier.FINAL`` on it for every later caller.
    """

    name: str
    owner: type
    annotation: Any
    type: Any
    modifiers: Modifier = Modifier.NONE

    @property
    def is_static(self) -> bool:
        return Modifier.STATIC in self.modifiers

    @property
    def is_final(self) -> bool:
        return Modifier.FINAL in self.modifiers

    def __str__(self) -> str:
        words = [m.name.lower() for m in (Modifier.STATIC, Modifier.FINAL) if m in self.modifiers]
        words.append(type_name(self.type))
        words.append(f"{qualified_name(self.owner)}.{self.name}")
        return " ".join(words)


@dataclass(frozen=True)
class ParameterDescriptor:
    """A single constructor parameter."""

    name: str
    annotation: Any
    type: Any
    kind: inspect._ParameterKind

    def __str__(self) -> str:
        return f"{self.name}: {type_name(self.type)}"


@dataclass(frozen=True)
class ConstructorDescriptor:
    """One way of constructing instances of a class."""

    owner: type
    parameters: tuple[ParameterDescriptor, ...]

    @property
    def arity(self) -> int:
        return len(self.parameters)

    @property
    def parameter_types(self) -> tuple[Any, ...]:
        return tuple(p.type for p in self.parameters)

    def invoke(self, *args: Any) -> Any:
        """Call the class, binding each argument the way its parameter expects."""
        positional: list[Any] = []
        keywords: dict[str, Any] = {}
        for parameter, arg in zip(self.parameters, args):
            if parameter.kind is inspect.Parameter.KEYWORD_ONLY:
                keywords[parameter.name] = arg
            else:
                positional.append(arg)
        positional.extend(args[len(self.parameters) :])
        return self.owner(*positional, **keywords)

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"{qualified_name(self.owner)}({params})"


@dataclass(frozen=True, eq=False)
class TypeDescriptor:
    """Describes a class: its declared fields, constructors and flags."""

    cls: type
    modifiers: Modifier
    declared_fields: tuple[FieldDescriptor, ...]
    constructors: tuple[ConstructorDescriptor, ...]

    @property
    def name(self) -> str:
        return qualified_name(self.cls)

    @property
    def ancestor(self) -> "TypeDescriptor | None":
        base = ancestor_of(self.cls)
        if base is None:
            return None
        return describe(base)

    def declared_field(self, name: str) -> FieldDescriptor | None:
        """Return the field declared directly on this class, if any."""
        for field in self.declared_fields:
            if field.name == name:
                return field
        return None


def _declared_fields(cls: type) -> tuple[FieldDescriptor, ...]:
    own_dataclass = _is_own_dataclass(cls)
    frozen = own_dataclass and cls.__dataclass_params__.frozen  # type: ignore[attr-defined]
    record = is_named_tuple(cls)

    fields: list[FieldDescriptor] = []
    for name, raw in _own_annotations(cls).items():
        if _is_init_var(raw):
            continue
        annotation, class_var, final = _unwrap(raw)

        # A Final name with a value in a plain class body is a class constant
        static = class_var or (final and not own_dataclass and name in cls.__dict__)

        modifiers = Modifier.NONE
        if static:
            modifiers |= Modifier.STATIC
        if final or (not static and (frozen or record)):
            modifiers |= Modifier.FINAL
        fields.append(FieldDescriptor(name, cls, annotation, erase(annotation), modifiers))

    slots = cls.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    declared = {f.name for f in fields}
    for name in slots:
        if name in declared or name in _SLOT_NAMES_SKIPPED:
            continue
        fields.append(FieldDescriptor(name, cls, Any, object))

    return tuple(fields)


def _parameters(signature: inspect.Signature, skip_self: bool) -> tuple[ParameterDescriptor, ...]:
    params = list(signature.parameters.values())
    if skip_self:
        params = params[1:]
    return tuple(
        ParameterDescriptor(p.name, p.annotation, erase(p.annotation), p.kind)
        for p in params
        if p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    )


def _constructors(cls: type) -> tuple[ConstructorDescriptor, ...]:
    init = cls.__init__
    if inspect.isfunction(init):
        # Overloads come back in the order they were defined
        overloads = typing.get_overloads(init)
        if overloads:
            return tuple(
                ConstructorDescriptor(cls, _parameters(_signature(fn, cls), skip_self=True))
                for fn in overloads
            )

    try:
        signature = _signature(cls, cls)
    except (ValueError, TypeError) as e:
        logger.debug(f"No signature available for {qualified_name(cls)}: {e}")
        return ()
    return (ConstructorDescriptor(cls, _parameters(signature, skip_self=False)),)


def _type_modifiers(cls: type) -> Modifier:
    modifiers = Modifier.NONE
    if is_protocol(cls):
        modifiers |= Modifier.INTERFACE | Modifier.ABSTRACT
    elif inspect.isabstract(cls):
        modifiers |= Modifier.ABSTRACT

    # Enums with members cannot be subclassed
    if cls.__dict__.get("__final__", False) or (issubclass(cls, Enum) and len(cls) > 0):
        modifiers |= Modifier.FINAL

    # Nested in a class body, as opposed to a module or a function
    scopes = cls.__qualname__.split(".")
    if len(scopes) > 1 and scopes[-2] != "<locals>":
        modifiers |= Modifier.STATIC
    return modifiers


_descriptors: dict[type, TypeDescriptor] = {}


def describe(cls: "type | TypeDescriptor") -> TypeDescriptor:
    """Return the shared descriptor for a class, building it on first use."""
    check_not_none(cls, "cls")
    if isinstance(cls, TypeDescriptor):
        return cls

    if not isinstance(cls, type):
        raise InvalidArgumentError(f"Expected a class, got {cls!r}")
    descriptor = _descriptors.get(cls)
    if descriptor is not None:
        return descriptor

    built = TypeDescriptor(
        cls=cls,
        modifiers=_type_modifiers(cls),
        declared_fields=_declared_fields(cls),
        constructors=_constructors(cls),
    )
    logger.debug(
        f"Described {built.name}: {len(built.declared_fields)} fields, "
        f"{len(built.constructors)} constructors"
    )
    # Concurrent first lookups all end up with the same descriptor
    return _descriptors.setdefault(cls, built)
