"""File format adapters for field mapping I/O."""

from rowbind.adapters.formats.csv_adapter import CSVAdapter

__all__ = ["CSVAdapter"]
