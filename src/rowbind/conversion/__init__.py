"""Field mapping to entity conversion.

This package provides the configurable import object, the default converter
provider and the property discovery used by the conversion engine.
"""

from rowbind.conversion.converters import (
    Converter,
    ConverterProvider,
    get_default_converter,
    value_matches_type,
)
from rowbind.conversion.import_object import (
    ConfiguredImportObject,
    ImportObject,
    as_import_object,
)
from rowbind.conversion.properties import PropertyInfo, get_property_table
from rowbind.conversion.selectors import PropertySelector, resolve_property_name

__all__ = [
    "Converter",
    "ConverterProvider",
    "ConfiguredImportObject",
    "ImportObject",
    "PropertyInfo",
    "PropertySelector",
    "as_import_object",
    "get_default_converter",
    "get_property_table",
    "resolve_property_name",
    "value_matches_type",
]
