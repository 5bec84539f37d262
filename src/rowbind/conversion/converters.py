"""Default value conversion and annotation helpers.

The default converter provider maps a declared property annotation to a
``str -> value`` function. Text passes through unchanged, optional types
treat empty text as None, enums are looked up by member name and every other
type is parsed by a pydantic ``TypeAdapter`` in lax mode.
"""

import enum
import types
from collections.abc import Callable
from functools import lru_cache
from typing import Any, Literal, Union, get_args, get_origin

from pydantic import TypeAdapter

Converter = Callable[[str], Any]
ConverterProvider = Callable[[Any], Converter]

_NONE_TYPE = type(None)
_UNION_ORIGINS: tuple[Any, ...] = (Union, types.UnionType)
_NUMBER_TYPES: tuple[type, ...] = (int, float, complex)


def is_union(annotation: Any) -> bool:
    """Return True for ``X | Y`` and ``typing.Union[X, Y]`` annotations."""
    return get_origin(annotation) in _UNION_ORIGINS


def unwrap_optional(annotation: Any) -> Any | None:
    """Return ``U`` for an optional annotation ``U | None``, else None.

    A remainder with several members (``int | str | None``) is returned as a
    ``typing.Union`` of those members.
    """
    if not is_union(annotation):
        return None
    args = get_args(annotation)
    if _NONE_TYPE not in args:
        return None
    remaining = tuple(arg for arg in args if arg is not _NONE_TYPE)
    if len(remaining) == 1:
        return remaining[0]
    return Union[remaining]


def type_key(annotation: Any) -> Any:
    """Normalize an annotation for use as a registry key.

    ``int | None`` and ``Optional[int]`` compare equal but are distinct
    objects; both map to the same ``typing.Union`` key.
    """
    if is_union(annotation):
        return Union[get_args(annotation)]
    return annotation


def value_matches_type(value: Any, annotation: Any) -> bool:
    """Check a converted value against a declared annotation.

    Args:
        value: Converter output.
        annotation: Declared property annotation.

    Returns:
        False only when the value provably does not fit the annotation.
    """
    if annotation is Any or annotation is object:
        return True
    if annotation is None or annotation is _NONE_TYPE:
        return value is None

    origin = get_origin(annotation)
    if origin in _UNION_ORIGINS:
        return any(value_matches_type(value, arg) for arg in get_args(annotation))
    if origin is Literal:
        return value in get_args(annotation)
    if isinstance(origin, type):
        return isinstance(value, origin)

    if isinstance(annotation, type):
        # bool is never a number here, even though it subclasses int
        if isinstance(value, bool) and annotation in _NUMBER_TYPES:
            return False
        if isinstance(value, annotation):
            return True
        # int is acceptable where float is declared, int and float where complex is
        if annotation is float:
            return isinstance(value, int)
        if annotation is complex:
            return isinstance(value, (int, float))
        return False

    # type variables, callables, unresolved forward references
    return True


@lru_cache(maxsize=256)
def _cached_type_adapter(annotation: Any) -> TypeAdapter[Any]:
    return TypeAdapter(annotation)


def _type_adapter(annotation: Any) -> TypeAdapter[Any]:
    try:
        return _cached_type_adapter(annotation)
    except TypeError:
        # unhashable annotation
        return TypeAdapter(annotation)


def _identity(value: str) -> Any:
    return value


def get_default_converter(annotation: Any) -> Converter:
    """Return the default converter function for a declared annotation.

    This is the default converter provider used when no field, property or
    type converter applies.

    Args:
        annotation: Declared property annotation.

    Returns:
        A function converting raw text to a value of the annotated type.
        Conversion failures raise from the returned function, not from here.
    """
    if annotation is str or annotation is Any or annotation is object:
        return _identity

    inner = unwrap_optional(annotation)
    if inner is not None:
        return nullable(get_default_converter(inner))

    if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
        enum_type = annotation

        def convert_enum(value: str) -> Any:
            try:
                return enum_type[value]
            except KeyError:
                members = ", ".join(enum_type.__members__)
                raise ValueError(
                    f"'{value}' is not a member of {enum_type.__name__} "
                    f"(members: {members})"
                ) from None

        return convert_enum

    def convert_with_adapter(value: str) -> Any:
        return _type_adapter(annotation).validate_python(value)

    return convert_with_adapter


def nullable(converter: Converter) -> Converter:
    """Wrap a converter so empty or missing text yields None."""

    def convert_nullable(value: str) -> Any:
        if value is None or value == "":
            return None
        return converter(value)

    return convert_nullable
