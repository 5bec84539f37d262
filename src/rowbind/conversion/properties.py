"""Property discovery for entity types.

Builds, once per entity type, the table of settable properties and their
declared annotations. Supported entity shapes are pydantic models,
dataclasses, plain annotated classes and classes exposing ``property``
objects with a setter.
"""

import dataclasses
from collections.abc import Mapping
from functools import lru_cache
from types import MappingProxyType
from typing import Any, ClassVar, get_origin, get_type_hints

from pydantic import BaseModel

from rowbind.exceptions import ConfigError
from rowbind.logger import get_logger

logger = get_logger(__name__)


@dataclasses.dataclass(frozen=True)
class PropertyInfo:
    """A settable entity property.

    Attributes:
        name: Property name on the entity.
        annotation: Declared type annotation (``typing.Any`` when undeclared).
    """

    name: str
    annotation: Any

    def set(self, entity: Any, value: Any) -> None:
        """Assign a value to this property of an entity."""
        setattr(entity, self.name, value)


def _is_property_annotation(annotation: Any) -> bool:
    if annotation is ClassVar or get_origin(annotation) is ClassVar:
        return False
    return not isinstance(annotation, dataclasses.InitVar)


def _annotated_properties(entity_type: type[Any]) -> dict[str, Any]:
    if issubclass(entity_type, BaseModel):
        return {
            name: field.annotation for name, field in entity_type.model_fields.items()
        }

    try:
        hints = get_type_hints(entity_type)
    except (NameError, TypeError) as exc:
        logger.error(
            "Type hint resolution failed: entity=%s, reason=%s",
            entity_type.__name__,
            str(exc),
        )
        raise ConfigError(
            f"Cannot resolve type annotations of {entity_type.__name__}",
            cause=exc,
        ) from exc

    return {
        name: annotation
        for name, annotation in hints.items()
        if _is_property_annotation(annotation)
    }


def _settable_descriptors(entity_type: type[Any]) -> dict[str, Any]:
    descriptors: dict[str, Any] = {}
    for klass in reversed(entity_type.__mro__):
        for name, attr in vars(klass).items():
            if not isinstance(attr, property):
                continue
            if attr.fset is None:
                descriptors.pop(name, None)
                continue
            try:
                hints = get_type_hints(attr.fget) if attr.fget is not None else {}
            except (NameError, TypeError):
                hints = {}
            descriptors[name] = hints.get("return", Any)
    return descriptors


@lru_cache(maxsize=128)
def get_property_table(entity_type: type[Any]) -> Mapping[str, PropertyInfo]:
    """Return the settable properties of an entity type.

    Args:
        entity_type: Entity class to inspect.

    Returns:
        Read-only mapping of property name to PropertyInfo.

    Raises:
        ConfigError: If the type's annotations cannot be resolved.
    """
    annotations = _annotated_properties(entity_type)
    annotations.update(_settable_descriptors(entity_type))

    table = {
        name: PropertyInfo(name=name, annotation=annotation)
        for name, annotation in annotations.items()
    }
    logger.debug(
        "Property table built: entity=%s, properties=%d",
        entity_type.__name__,
        len(table),
    )
    return MappingProxyType(table)
