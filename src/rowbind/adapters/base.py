"""Base abstractions for row adapters."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Generic, TypeVar

TSource = TypeVar("TSource")
TTarget = TypeVar("TTarget")


class Adapter(ABC, Generic[TSource, TTarget]):
    """Generic adapter for transforming objects from source to target type.

    Adapters encapsulate one transformation step and can validate the source
    before transforming it.
    """

    @abstractmethod
    def adapt(self, source: TSource) -> TTarget:
        """Transform a source object to a target object.

        Args:
            source: Source object to transform.

        Returns:
            Transformed object.

        Raises:
            ValueError: If source cannot be adapted.
        """
        pass

    def adapt_many(self, sources: list[TSource]) -> list[TTarget]:
        """Transform multiple source objects.

        Args:
            sources: List of source objects to transform.

        Returns:
            Target objects in source order.
        """
        return [self.adapt(source) for source in sources]

    def validate(self, source: TSource) -> bool:
        """Check if source can be adapted.

        Override to implement custom validation. Default implementation
        always returns True, allowing all sources to proceed.

        Args:
            source: Source object to validate.

        Returns:
            True if source is valid for adaptation, False otherwise.
        """
        return True


class FormatAdapter(ABC):
    """Abstract base for row file I/O.

    Handles reading and writing field mappings for a tabular file format.
    """

    @abstractmethod
    def read(self, path: Path) -> list[dict[str, str]]:
        """Read rows from file.

        Args:
            path: Input file path.

        Returns:
            List of field mappings, one per row.

        Raises:
            FileNotFoundError: If file doesn't exist.
            ValueError: If file format is invalid.
        """
        pass

    @abstractmethod
    def write(self, rows: list[dict[str, str]], path: Path) -> None:
        """Write rows to file.

        Args:
            rows: Field mappings to write.
            path: Output file path.

        Raises:
            OSError: If write operation fails.
        """
        pass
