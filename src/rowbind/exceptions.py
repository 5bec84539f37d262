"""Core exception hierarchy for rowbind.

This module defines all custom exceptions raised while configuring and
running a row-to-object conversion. All exceptions inherit from RowBindError
for unified error handling.
"""

from typing import Any


class RowBindError(Exception):
    """Base exception for all rowbind errors.

    All custom exceptions in the library inherit from this class,
    allowing callers to catch every conversion failure with a single
    except clause.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            cause: Optional underlying exception that triggered this error.
        """
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.cause:
            return f"{self.message} (caused by: {self.cause})"
        return self.message


class ConfigError(RowBindError):
    """Raised when a conversion configuration is invalid.

    This includes malformed registrations (non-callable converters, empty
    names), invalid mapping profile files, and settings validation failures.
    """

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        cause: Exception | None = None,
    ):
        """Initialize the configuration error.

        Args:
            message: Human-readable error description.
            field_path: Optional dotted path to the problematic setting
                (e.g., "settings.check_value_types").
            cause: Optional underlying exception.
        """
        super().__init__(message, cause)
        self.field_path = field_path

    def __str__(self) -> str:
        """Return string representation including field path."""
        base_msg = super().__str__()
        if self.field_path:
            return f"{base_msg} (field: {self.field_path})"
        return base_msg


class SelectorError(ConfigError):
    """Raised when a property selector cannot be resolved to a property name.

    Selectors must be a non-empty string or a callable returning exactly one
    attribute access on its argument, such as ``lambda x: x.amount``.
    """

    pass


class DuplicateAliasError(ConfigError):
    """Raised when one alias is registered for two different properties."""

    def __init__(self, alias: str, existing_property: str, new_property: str):
        """Initialize the duplicate alias error.

        Args:
            alias: The alias field name registered twice.
            existing_property: Property the alias is already bound to.
            new_property: Property the new registration tried to bind.
        """
        message = (
            f"Alias '{alias}' is already bound to property '{existing_property}', "
            f"cannot rebind it to '{new_property}'"
        )
        super().__init__(message, field_path=alias)
        self.alias = alias
        self.existing_property = existing_property
        self.new_property = new_property


class RequiredFieldMissingError(RowBindError):
    """Raised when a required field is absent from the field mapping.

    The check runs before the entity is instantiated, so no partially
    populated object is ever produced.
    """

    def __init__(self, field_name: str, missing_fields: list[str] | None = None):
        """Initialize the required field error.

        Args:
            field_name: The first missing required field.
            missing_fields: Every missing required field, in configuration order.
        """
        self.missing_fields = missing_fields or [field_name]
        message = f"The field '{field_name}' is required"
        if len(self.missing_fields) > 1:
            message += f" (missing: {', '.join(self.missing_fields)})"
        super().__init__(message)
        self.field_name = field_name


class UnknownPropertyError(RowBindError):
    """Raised when a resolved property name does not exist on the entity type."""

    def __init__(
        self,
        property_name: str,
        entity_type: type[Any],
        field_name: str | None = None,
    ):
        """Initialize the unknown property error.

        Args:
            property_name: Resolved (canonical) property name.
            entity_type: Target entity class.
            field_name: Input field that resolved to the property, if any.
        """
        message = (
            f"Invalid property name '{property_name}' "
            f"for entity type {entity_type.__name__}"
        )
        if field_name is not None and field_name != property_name:
            message += f" (from field '{field_name}')"
        super().__init__(message)
        self.property_name = property_name
        self.entity_type = entity_type
        self.field_name = field_name


class ConversionError(RowBindError):
    """Raised when a raw field value cannot be converted or assigned.

    This includes converter exceptions (unparsable numbers, unknown enum
    member names), converter results that do not match the declared property
    type, default value provider failures, and assignment failures.
    """

    def __init__(
        self,
        message: str,
        field_name: str,
        raw_value: str | None,
        target_type: Any,
        cause: Exception | None = None,
    ):
        """Initialize the conversion error.

        Args:
            message: Human-readable error description.
            field_name: Input field (or property, for default values) being converted.
            raw_value: Raw text being converted; None for default values.
            target_type: Declared annotation of the target property.
            cause: Optional underlying exception.
        """
        super().__init__(message, cause)
        self.field_name = field_name
        self.raw_value = raw_value
        self.target_type = target_type

    def __str__(self) -> str:
        """Return string representation including field and value."""
        base_msg = super().__str__()
        return (
            f"{base_msg} (field: {self.field_name}, value: {self.raw_value!r}, "
            f"target: {type_name(self.target_type)})"
        )


def type_name(annotation: Any) -> str:
    """Return a readable name for a type annotation."""
    if isinstance(annotation, type):
        return annotation.__name__
    return str(annotation).replace("typing.", "")
