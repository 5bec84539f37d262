"""rowbind - configurable conversion of table rows into typed objects.

This package turns flat string-keyed, string-valued field mappings (CSV
lines, parsed table rows, form payloads) into entity instances, with
aliasing, defaults, required fields and layered value converters.
"""

__version__ = "0.1.0"

from rowbind.config.profile import ConversionSettings, MappingProfile
from rowbind.conversion.converters import get_default_converter
from rowbind.conversion.import_object import (
    ConfiguredImportObject,
    ImportObject,
    as_import_object,
)
from rowbind.exceptions import (
    ConfigError,
    ConversionError,
    DuplicateAliasError,
    RequiredFieldMissingError,
    RowBindError,
    SelectorError,
    UnknownPropertyError,
)

__all__ = [
    "__version__",
    "as_import_object",
    "ImportObject",
    "ConfiguredImportObject",
    "get_default_converter",
    "ConversionSettings",
    "MappingProfile",
    "RowBindError",
    "ConfigError",
    "SelectorError",
    "DuplicateAliasError",
    "RequiredFieldMissingError",
    "UnknownPropertyError",
    "ConversionError",
]
