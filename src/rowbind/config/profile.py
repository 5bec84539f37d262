"""Conversion settings and declarative mapping profiles.

This module defines the configuration structures for rowbind conversions
using Pydantic V2 for validation. ``ConversionSettings`` tunes engine
behavior; ``MappingProfile`` captures the string-only part of a conversion
configuration (aliases, skipped and required fields, raw defaults) so it can
be kept in a YAML file next to the data it describes.
"""

from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from rowbind.exceptions import ConfigError


class ConversionSettings(BaseModel):
    """Engine behavior switches.

    Attributes:
        check_value_types: Validate converter output against the declared property type.
        allow_alias_override: Let a later alias registration rebind an alias to another property.
        skipped_fields_suppress_defaults: Count present-but-skipped fields as present
            when deciding whether to apply a default value.
    """

    model_config = ConfigDict(strict=True, extra="forbid", frozen=True)

    check_value_types: bool = Field(
        default=True,
        description="Reject converter results that do not match the property annotation",
    )
    allow_alias_override: bool = Field(
        default=False,
        description="Last alias registration wins instead of raising DuplicateAliasError",
    )
    skipped_fields_suppress_defaults: bool = Field(
        default=True,
        description="A skipped field still suppresses the default of its property",
    )


class MappingProfile(BaseModel):
    """Declarative conversion configuration.

    Attributes:
        required_fields: Field names the input must contain.
        skipped_fields: Field names ignored during property assignment.
        aliases: Property name to the list of input field names aliasing it.
        defaults: Property name to raw default text, converted at build time.
        settings: Engine behavior switches.
    """

    model_config = ConfigDict(strict=True, extra="forbid")

    required_fields: list[str] = Field(
        default_factory=list,
        description="Fields that must be present in every row",
    )
    skipped_fields: list[str] = Field(
        default_factory=list,
        description="Fields excluded from property assignment",
    )
    aliases: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Property name -> input field aliases",
    )
    defaults: dict[str, str] = Field(
        default_factory=dict,
        description="Property name -> raw default text used when the field is absent",
    )
    settings: ConversionSettings = Field(
        default_factory=ConversionSettings,
        description="Engine behavior switches",
    )

    @field_validator("defaults", mode="before")
    @classmethod
    def coerce_default_scalars(cls, v: Any) -> Any:
        """Coerce YAML scalars in defaults to their text form.

        Args:
            v: Raw defaults mapping.

        Returns:
            Mapping with bool, int and float values rendered as text.
        """
        if not isinstance(v, dict):
            return v
        coerced: dict[Any, Any] = {}
        for key, value in cast(dict[Any, Any], v).items():
            if isinstance(value, bool):
                coerced[key] = "true" if value else "false"
            elif isinstance(value, (int, float)):
                coerced[key] = str(value)
            else:
                coerced[key] = value
        return coerced

    @field_validator("aliases")
    @classmethod
    def aliases_not_empty(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        """Validate that every aliased property lists at least one alias.

        Raises:
            ValueError: If a property maps to an empty alias list.
        """
        for property_name, aliases in v.items():
            if not aliases:
                raise ValueError(f"Property '{property_name}' has no aliases")
        return v

    @classmethod
    def from_yaml(cls, path: Path) -> "MappingProfile":
        """Load a mapping profile from a YAML file.

        Args:
            path: Path to the YAML profile.

        Returns:
            Validated MappingProfile instance.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigError: If YAML is invalid or validation fails.
        """
        if not path.exists():
            raise FileNotFoundError(f"Mapping profile not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {e}", cause=e) from e

        try:
            return cls.model_validate(data or {})
        except Exception as e:
            raise ConfigError(f"Mapping profile validation failed: {e}", cause=e) from e

    def to_yaml(self, path: Path) -> None:
        """Export the profile to a YAML file.

        Args:
            path: Output file path.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                self.model_dump(mode="python"),
                f,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )
