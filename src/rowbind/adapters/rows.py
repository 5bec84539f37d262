"""Adapter converting field mappings into entities."""

from collections.abc import Callable, Mapping
from typing import TypeVar

from rowbind.adapters.base import Adapter
from rowbind.config.profile import MappingProfile
from rowbind.conversion.import_object import ConfiguredImportObject, as_import_object
from rowbind.logger import get_logger

logger = get_logger(__name__)

TEntity = TypeVar("TEntity")

Configure = Callable[
    [ConfiguredImportObject[TEntity]], ConfiguredImportObject[TEntity] | None
]


class RowAdapter(Adapter[Mapping[str, str], TEntity]):
    """Convert field mappings to entities with a shared configuration recipe.

    A fresh import object is built for every row, so configuration state is
    never shared between conversions. The profile is applied first, then the
    configure callback.
    """

    def __init__(
        self,
        entity_type: type[TEntity],
        configure: Configure[TEntity] | None = None,
        profile: MappingProfile | None = None,
    ):
        """Initialize the row adapter.

        Args:
            entity_type: Class of the entities to create.
            configure: Optional callback applying ``with_*`` calls to each
                row's import object.
            profile: Optional declarative mapping profile.
        """
        self.entity_type = entity_type
        self.configure = configure
        self.profile = profile

    def validate(self, source: Mapping[str, str]) -> bool:
        """Check that the row is a mapping of strings to strings.

        Args:
            source: Row to validate.

        Returns:
            True if every key and value is a string.
        """
        if not isinstance(source, Mapping):
            return False
        return all(
            isinstance(key, str) and isinstance(value, str)
            for key, value in source.items()
        )

    def adapt(self, source: Mapping[str, str]) -> TEntity:
        """Convert one row to an entity.

        Args:
            source: Field mapping to convert.

        Returns:
            The created entity.

        Raises:
            ValueError: If the row is not a string-to-string mapping.
            RowBindError: If the conversion fails.
        """
        if not self.validate(source):
            logger.debug("Row validation failed: entity=%s", self.entity_type.__name__)
            raise ValueError("Row must map string field names to string values")

        import_object = as_import_object(source, self.entity_type).with_configuration()
        if self.profile is not None:
            import_object.with_profile(self.profile)
        if self.configure is not None:
            import_object = self.configure(import_object) or import_object
        return import_object.create_object()

    def adapt_many(self, sources: list[Mapping[str, str]]) -> list[TEntity]:
        """Convert rows to entities, stopping at the first failure."""
        entities = super().adapt_many(sources)
        logger.info(
            "Rows converted: entity=%s, rows=%d",
            self.entity_type.__name__,
            len(entities),
        )
        return entities
