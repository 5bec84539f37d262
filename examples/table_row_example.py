"""Example: convert table rows into typed objects.

This script demonstrates how to:
1. Convert a row with the default converters only
2. Configure aliases, skipped and required fields, converters and defaults
3. Load the string-only part of a configuration from a mapping profile

Usage:
    python examples/table_row_example.py
"""

import enum
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from tempfile import TemporaryDirectory

from rowbind import MappingProfile, as_import_object, get_default_converter


class Priority(enum.Enum):
    low = "low"
    high = "high"


@dataclass
class Note:
    text: str


@dataclass
class Ticket:
    priority: Priority | None = None
    escalated_priority: Priority | None = None
    estimate: Decimal | None = None
    points: int | None = None
    billable: bool | None = None
    note: Note | None = None
    summary: Note | None = None


def simple_conversion() -> Ticket:
    """Convert a row relying on the default converter provider."""
    row = {
        "priority": "high",
        "escalated_priority": "",
        "estimate": "12.5",
        "points": "5",
        "billable": "true",
    }
    return as_import_object(row, Ticket).create_object()


def configured_conversion() -> Ticket:
    """Convert a row whose field names and formats differ from the entity."""
    row = {
        "prio": "low",
        "est": "3.25",
        "legacy_points": "n/a",
        "comment": "needs review",
        "title": "foo fighters",
    }
    return (
        as_import_object(row, Ticket)
        .with_configuration()
        .with_required_field("prio", "est")
        .with_skipped_field("legacy_points")
        .with_property_alias(lambda t: t.priority, "prio")
        .with_property_alias(lambda t: t.estimate, "est")
        .with_property_alias(lambda t: t.note, "comment")
        .with_property_alias(lambda t: t.summary, "title")
        .with_value_converter(Note | None, lambda s: Note(text=s))
        .with_property_value_converter(
            lambda t: t.summary, lambda s: Note(text=s.replace("foo", "..."))
        )
        .with_default_constant(lambda t: t.points, 1)
        .with_default_value(lambda t: t.billable, lambda: False)
        .with_default_converter(get_default_converter)
        .create_object()
    )


def profile_conversion() -> Ticket:
    """Convert a row with a mapping profile loaded from YAML."""
    profile = MappingProfile(
        required_fields=["prio"],
        aliases={"priority": ["prio"], "points": ["pts"]},
        defaults={"points": "8", "billable": "false"},
    )
    with TemporaryDirectory() as tmp:
        path = Path(tmp) / "tickets.yaml"
        profile.to_yaml(path)
        loaded = MappingProfile.from_yaml(path)

    return (
        as_import_object({"prio": "high"}, Ticket)
        .with_configuration()
        .with_profile(loaded)
        .create_object()
    )


def main() -> None:
    """Run all conversions and print the resulting objects."""
    for ticket in (simple_conversion(), configured_conversion(), profile_conversion()):
        print(ticket)


if __name__ == "__main__":
    main()
