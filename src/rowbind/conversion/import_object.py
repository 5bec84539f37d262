"""Configurable conversion of a field mapping into an entity instance.

``as_import_object`` wraps a string-to-string field mapping for a target
entity type. The returned object either builds the entity directly or, via
``with_configuration()``, exposes a fluent configuration surface::

    order = (
        as_import_object(row, Order)
        .with_configuration()
        .with_required_field("id")
        .with_property_alias(lambda o: o.amount, "total", "sum")
        .with_value_converter(Money, Money.parse)
        .with_default_constant(lambda o: o.currency, "EUR")
        .create_object()
    )

Converter precedence for each input field is: field converter, property
converter, type converter, default converter provider.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

from rowbind.config.profile import ConversionSettings, MappingProfile
from rowbind.conversion.converters import (
    Converter,
    ConverterProvider,
    get_default_converter,
    type_key,
    value_matches_type,
)
from rowbind.conversion.properties import PropertyInfo, get_property_table
from rowbind.conversion.selectors import PropertySelector, resolve_property_name
from rowbind.exceptions import (
    ConfigError,
    ConversionError,
    DuplicateAliasError,
    RequiredFieldMissingError,
    RowBindError,
    UnknownPropertyError,
    type_name,
)
from rowbind.logger import get_logger

logger = get_logger(__name__)

TEntity = TypeVar("TEntity")


class ImportObject(ABC, Generic[TEntity]):
    """A field mapping bound to an entity type, ready to be converted."""

    @abstractmethod
    def with_configuration(self) -> "ConfiguredImportObject[TEntity]":
        """Return the configurable view of this import object."""
        pass

    @abstractmethod
    def create_object(self) -> TEntity:
        """Create the entity from the field mapping.

        Raises:
            RowBindError: If the mapping cannot be converted.
        """
        pass


class ConfiguredImportObject(ImportObject[TEntity]):
    """Conversion configuration and engine for a single field mapping.

    Every ``with_*`` method mutates this object and returns it, so calls can
    be chained. Configuration is not shared: build one import object per
    conversion.
    """

    def __init__(self, data: Mapping[str, str], entity_type: type[TEntity]):
        """Initialize the import object.

        Args:
            data: Field mapping to convert; copied on construction.
            entity_type: Class of the entity to create.
        """
        self._data: dict[str, str] = dict(data)
        self._entity_type = entity_type
        self._settings = ConversionSettings()
        self._object_factory: Callable[[], TEntity] = entity_type
        self._required_fields: list[str] = []
        self._skipped_fields: list[str] = []
        self._property_aliases: dict[str, str] = {}
        self._field_value_converters: dict[str, Converter] = {}
        self._property_value_converters: dict[str, Converter] = {}
        self._value_converters: dict[Any, Converter] = {}
        self._default_converter_provider: ConverterProvider = get_default_converter
        self._default_value_providers: dict[str, Callable[[], Any]] = {}

    @property
    def entity_type(self) -> type[TEntity]:
        """Target entity class."""
        return self._entity_type

    @property
    def settings(self) -> ConversionSettings:
        """Current engine settings."""
        return self._settings

    def with_configuration(self) -> "ConfiguredImportObject[TEntity]":
        return self

    def with_settings(
        self, settings: ConversionSettings
    ) -> "ConfiguredImportObject[TEntity]":
        """Replace the engine settings.

        Settings apply to registrations made afterwards and to the build.
        """
        self._settings = settings
        return self

    def with_object_factory(
        self, factory: Callable[[], TEntity]
    ) -> "ConfiguredImportObject[TEntity]":
        """Define the factory used to create a new, empty entity."""
        _require_callable(factory, "Object factory")
        self._object_factory = factory
        return self

    def with_required_field(
        self, *fields: PropertySelector
    ) -> "ConfiguredImportObject[TEntity]":
        """Require the field mapping to contain the given fields.

        Args:
            *fields: Field names, or property selectors naming the field
                after its property.
        """
        for field in fields:
            self._required_fields.append(resolve_property_name(field))
        return self

    def with_skipped_field(self, *field_names: str) -> "ConfiguredImportObject[TEntity]":
        """Exclude the given fields from property assignment."""
        for name in field_names:
            self._skipped_fields.append(_require_name(name, "Skipped field"))
        return self

    def with_property_alias(
        self, selector: PropertySelector, *aliases: str
    ) -> "ConfiguredImportObject[TEntity]":
        """Specify field names aliasing a property of the entity.

        A property can have many aliases, but an alias belongs to a single
        property.

        Args:
            selector: Property receiving the aliased fields.
            *aliases: Field names in the mapping that feed the property.

        Raises:
            ConfigError: If no alias is given.
            DuplicateAliasError: If an alias is already bound to another
                property and alias override is disabled.
        """
        property_name = resolve_property_name(selector)
        if not aliases:
            raise ConfigError(
                f"At least one alias is required for property '{property_name}'"
            )

        for alias in aliases:
            _require_name(alias, "Alias")
            existing = self._property_aliases.get(alias)
            if existing is not None and existing != property_name:
                if not self._settings.allow_alias_override:
                    logger.error(
                        "Duplicate alias: alias=%s, existing=%s, new=%s",
                        alias,
                        existing,
                        property_name,
                    )
                    raise DuplicateAliasError(alias, existing, property_name)
                logger.warning(
                    "Alias rebound: alias=%s, old_property=%s, new_property=%s",
                    alias,
                    existing,
                    property_name,
                )
            self._property_aliases[alias] = property_name
        return self

    def with_field_value_converter(
        self, field_name: str, converter: Callable[[str], Any]
    ) -> "ConfiguredImportObject[TEntity]":
        """Specify the converter for one field of the mapping.

        Converter priority: field, property, target type, default.
        """
        _require_callable(converter, "Field value converter")
        _register(
            self._field_value_converters,
            _require_name(field_name, "Field name"),
            converter,
            "field converter",
        )
        return self

    def with_property_value_converter(
        self, selector: PropertySelector, converter: Callable[[str], Any]
    ) -> "ConfiguredImportObject[TEntity]":
        """Specify the converter for one property of the entity.

        Converter priority: field, property, target type, default.
        """
        _require_callable(converter, "Property value converter")
        _register(
            self._property_value_converters,
            resolve_property_name(selector),
            converter,
            "property converter",
        )
        return self

    def with_value_converter(
        self, target_type: Any, converter: Callable[[str], Any]
    ) -> "ConfiguredImportObject[TEntity]":
        """Specify the converter for every property declared with exactly this type.

        Union spellings are equivalent: ``Optional[U]`` also matches ``U | None``,
        but a converter registered for ``U`` does not serve ``U | None``.

        Converter priority: field, property, target type, default.
        """
        _require_callable(converter, "Value converter")
        _register(
            self._value_converters,
            type_key(target_type),
            converter,
            "type converter",
        )
        return self

    def with_default_converter(
        self, converter_provider: Callable[[Any], Callable[[str], Any]]
    ) -> "ConfiguredImportObject[TEntity]":
        """Replace the provider of fallback converters.

        The provider receives a property annotation and returns its converter.
        """
        _require_callable(converter_provider, "Default converter provider")
        self._default_converter_provider = converter_provider
        return self

    def with_default_value(
        self, selector: PropertySelector, value_provider: Callable[[], Any]
    ) -> "ConfiguredImportObject[TEntity]":
        """Specify a default for a property the mapping does not provide.

        The provider runs only when neither the property name nor any of its
        aliases is a field of the mapping.
        """
        _require_callable(value_provider, "Default value provider")
        _register(
            self._default_value_providers,
            resolve_property_name(selector),
            value_provider,
            "default value",
        )
        return self

    def with_default_constant(
        self, selector: PropertySelector, value: Any
    ) -> "ConfiguredImportObject[TEntity]":
        """Specify a constant default for a property the mapping does not provide."""
        return self.with_default_value(selector, lambda: value)

    def with_profile(self, profile: MappingProfile) -> "ConfiguredImportObject[TEntity]":
        """Apply a declarative mapping profile.

        Profile settings replace the current ones only when the profile
        declares them. Profile defaults are raw text converted through the
        property's converter chain when the default is used.
        """
        if "settings" in profile.model_fields_set:
            self.with_settings(profile.settings)
        self.with_required_field(*profile.required_fields)
        self.with_skipped_field(*profile.skipped_fields)
        for property_name, aliases in profile.aliases.items():
            self.with_property_alias(property_name, *aliases)
        for property_name, raw_value in profile.defaults.items():
            self.with_default_value(
                property_name, self._raw_default(property_name, raw_value)
            )
        return self

    def create_object(self) -> TEntity:
        self._check_required_fields()

        entity = self._object_factory()
        properties = get_property_table(self._entity_type)
        skipped = set(self._skipped_fields)

        assigned = 0
        for field_name, raw_value in self._data.items():
            if field_name in skipped:
                continue
            property_name = self._property_aliases.get(field_name, field_name)
            prop = self._get_property(properties, property_name, field_name)
            value = self._convert(field_name, prop, raw_value)
            self._assign(entity, prop, value, field_name, raw_value)
            assigned += 1

        present = set(self._data)
        if not self._settings.skipped_fields_suppress_defaults:
            present -= skipped

        defaulted = 0
        for property_name, value_provider in self._default_value_providers.items():
            if not present.isdisjoint(self._field_names_for(property_name)):
                continue
            prop = self._get_property(properties, property_name, None)
            try:
                value = value_provider()
            except RowBindError:
                raise
            except Exception as exc:
                logger.error(
                    "Default value provider failed: property=%s, error=%s",
                    property_name,
                    str(exc),
                )
                raise ConversionError(
                    "Default value provider failed",
                    field_name=property_name,
                    raw_value=None,
                    target_type=prop.annotation,
                    cause=exc,
                ) from exc
            self._assign(entity, prop, value, property_name, None)
            defaulted += 1

        logger.debug(
            "Object created: entity=%s, assigned=%d, defaulted=%d",
            self._entity_type.__name__,
            assigned,
            defaulted,
        )
        return entity

    def resolve_converter(self, field_name: str, prop: PropertyInfo) -> Converter:
        """Select the converter for a field feeding a property.

        Args:
            field_name: Field name in the mapping.
            prop: Target property.

        Returns:
            The first converter found among field, property, type and
            default provider.
        """
        converter = self._field_value_converters.get(field_name)
        if converter is None:
            converter = self._property_value_converters.get(prop.name)
        if converter is None:
            converter = self._type_converter(prop.annotation)
        if converter is None:
            converter = self._default_converter_provider(prop.annotation)
        return converter

    def _type_converter(self, annotation: Any) -> Converter | None:
        try:
            return self._value_converters.get(type_key(annotation))
        except TypeError:
            # unhashable annotation
            return None

    def _check_required_fields(self) -> None:
        missing = [name for name in self._required_fields if name not in self._data]
        if missing:
            logger.error(
                "Required fields missing: entity=%s, fields=%s",
                self._entity_type.__name__,
                ", ".join(missing),
            )
            raise RequiredFieldMissingError(missing[0], missing)

    def _field_names_for(self, property_name: str) -> set[str]:
        names = {
            alias
            for alias, target in self._property_aliases.items()
            if target == property_name
        }
        names.add(property_name)
        return names

    def _get_property(
        self,
        properties: Mapping[str, PropertyInfo],
        property_name: str,
        field_name: str | None,
    ) -> PropertyInfo:
        prop = properties.get(property_name)
        if prop is None:
            logger.error(
                "Unknown property: entity=%s, property=%s, field=%s",
                self._entity_type.__name__,
                property_name,
                field_name,
            )
            raise UnknownPropertyError(property_name, self._entity_type, field_name)
        return prop

    def _convert(self, field_name: str, prop: PropertyInfo, raw_value: str) -> Any:
        try:
            converter = self.resolve_converter(field_name, prop)
            return converter(raw_value)
        except RowBindError:
            raise
        except Exception as exc:
            logger.error(
                "Conversion failed: field=%s, property=%s, target=%s",
                field_name,
                prop.name,
                type_name(prop.annotation),
            )
            logger.debug("Conversion failure details: %s", exc, exc_info=True)
            raise ConversionError(
                f"Cannot convert field '{field_name}' to property '{prop.name}'",
                field_name=field_name,
                raw_value=raw_value,
                target_type=prop.annotation,
                cause=exc,
            ) from exc

    def _assign(
        self,
        entity: TEntity,
        prop: PropertyInfo,
        value: Any,
        field_name: str,
        raw_value: str | None,
    ) -> None:
        if self._settings.check_value_types and not value_matches_type(
            value, prop.annotation
        ):
            exc = TypeError(
                f"expected {type_name(prop.annotation)}, got {type(value).__name__}"
            )
            logger.error(
                "Converted value type mismatch: field=%s, property=%s, reason=%s",
                field_name,
                prop.name,
                str(exc),
            )
            raise ConversionError(
                f"Value for property '{prop.name}' has the wrong type",
                field_name=field_name,
                raw_value=raw_value,
                target_type=prop.annotation,
                cause=exc,
            )

        try:
            prop.set(entity, value)
        except Exception as exc:
            logger.error(
                "Property assignment failed: property=%s, error=%s",
                prop.name,
                str(exc),
            )
            raise ConversionError(
                f"Cannot assign property '{prop.name}'",
                field_name=field_name,
                raw_value=raw_value,
                target_type=prop.annotation,
                cause=exc,
            ) from exc

    def _raw_default(self, property_name: str, raw_value: str) -> Callable[[], Any]:
        def provide() -> Any:
            prop = self._get_property(
                get_property_table(self._entity_type), property_name, None
            )
            return self._convert(property_name, prop, raw_value)

        return provide


def as_import_object(
    data: Mapping[str, str], entity_type: type[TEntity]
) -> ImportObject[TEntity]:
    """Create a conversion object for the given field mapping.

    Args:
        data: Field name to raw text value.
        entity_type: Class of the entity to create.

    Returns:
        Import object; call ``with_configuration()`` to customize the
        conversion or ``create_object()`` to build the entity.
    """
    return ConfiguredImportObject(data, entity_type)


def _require_callable(value: Any, what: str) -> None:
    if not callable(value):
        raise ConfigError(f"{what} must be callable, got {type(value).__name__}")


def _require_name(name: str, what: str) -> str:
    if not isinstance(name, str) or not name:
        raise ConfigError(f"{what} must be a non-empty string")
    return name


def _register(
    registry: dict[Any, Any], key: Any, value: Any, kind: str
) -> None:
    if key in registry:
        logger.warning("Replacing %s: key=%s", kind, key)
    registry[key] = value
