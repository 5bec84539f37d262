"""Property selector resolution.

A selector names one property of the entity type. It is either the property
name itself or a callable such as ``lambda order: order.amount``; the
callable form lets type checkers verify the attribute against the entity
class. Callables are evaluated once against a probe object that records
attribute access.
"""

from collections.abc import Callable
from typing import Any

from rowbind.exceptions import SelectorError

PropertySelector = str | Callable[[Any], Any]


class _AttributeProbe:
    """Stand-in entity that records the attribute path accessed on it."""

    __slots__ = ("_path",)

    def __init__(self, path: tuple[str, ...] = ()) -> None:
        self._path = path

    def __getattr__(self, name: str) -> "_AttributeProbe":
        if name.startswith("__"):
            raise AttributeError(name)
        return _AttributeProbe(self._path + (name,))


def resolve_property_name(selector: PropertySelector) -> str:
    """Resolve a property selector to a property name.

    Args:
        selector: Property name, or callable returning one attribute of its argument.

    Returns:
        The selected property name.

    Raises:
        SelectorError: If the selector is empty, not callable, fails, or does
            not return exactly one attribute access.
    """
    if isinstance(selector, str):
        if not selector:
            raise SelectorError("Property name cannot be empty")
        return selector

    if not callable(selector):
        raise SelectorError(
            f"Property selector must be a string or callable, got {type(selector).__name__}"
        )

    try:
        result = selector(_AttributeProbe())
    except Exception as exc:
        raise SelectorError(
            "Property selector must only access an attribute of its argument",
            cause=exc,
        ) from exc

    if not isinstance(result, _AttributeProbe):
        raise SelectorError(
            "Property selector must return an attribute of its argument, "
            f"got {type(result).__name__}"
        )

    path = result._path
    if not path:
        raise SelectorError("Property selector does not select any property")
    if len(path) > 1:
        raise SelectorError(
            f"Nested property selectors are not supported: {'.'.join(path)}"
        )
    return path[0]
