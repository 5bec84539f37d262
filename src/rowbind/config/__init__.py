"""Configuration management for rowbind.

This package provides the engine settings model and the declarative
mapping profile with YAML serialization.
"""

from rowbind.config.profile import ConversionSettings, MappingProfile

__all__ = [
    "ConversionSettings",
    "MappingProfile",
]
