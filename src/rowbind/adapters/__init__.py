"""Adapters between tabular sources and entities.

Provides the generic adapter abstractions, the row-to-entity adapter and
file format adapters producing field mappings.
"""

from rowbind.adapters.base import Adapter, FormatAdapter
from rowbind.adapters.rows import RowAdapter

__all__ = [
    "Adapter",
    "FormatAdapter",
    "RowAdapter",
]
