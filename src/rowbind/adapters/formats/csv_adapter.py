"""CSV format adapter for reading and writing field mappings."""

import csv
from pathlib import Path

from rowbind.adapters.base import FormatAdapter
from rowbind.logger import get_logger

logger = get_logger(__name__)


class CSVAdapter(FormatAdapter):
    """Adapter for CSV file I/O.

    The first row is the header; every following row becomes one field
    mapping keyed by header name. Cells missing at the end of a short row
    read as empty text.
    """

    def __init__(self, delimiter: str = ",", encoding: str = "utf-8"):
        """Initialize the CSV adapter.

        Args:
            delimiter: Cell delimiter.
            encoding: File encoding.
        """
        self.delimiter = delimiter
        self.encoding = encoding

    def read(self, path: Path) -> list[dict[str, str]]:
        """Read field mappings from a CSV file.

        Args:
            path: Input CSV file path.

        Returns:
            One field mapping per data row.

        Raises:
            FileNotFoundError: If file doesn't exist.
            ValueError: If the file has no header or a row has more cells
                than the header.
        """
        logger.debug("Reading CSV file: path=%s", path)

        try:
            with open(path, encoding=self.encoding, newline="") as f:
                reader = csv.DictReader(f, delimiter=self.delimiter, restval="")
                if not reader.fieldnames:
                    raise ValueError(f"CSV file has no header row: {path}")

                rows: list[dict[str, str]] = []
                for line_number, row in enumerate(reader, start=2):
                    if None in row:
                        raise ValueError(
                            f"Row has more cells than the header: {path}:{line_number}"
                        )
                    rows.append(dict(row))

        except FileNotFoundError:
            logger.error("CSV file not found: path=%s", path)
            raise
        except csv.Error as exc:
            logger.error("Invalid CSV: path=%s, error=%s", path, str(exc))
            logger.debug("CSV parse error details: %s", exc, exc_info=True)
            raise ValueError(f"Invalid CSV file {path}: {exc}") from exc

        logger.debug("CSV read: rows=%d, path=%s", len(rows), path)
        return rows

    def write(self, rows: list[dict[str, str]], path: Path) -> None:
        """Write field mappings to a CSV file.

        The header is the union of all field names in first-seen order.

        Args:
            rows: Field mappings to write.
            path: Output CSV file path.

        Raises:
            OSError: If write operation fails.
        """
        logger.debug("Writing CSV file: path=%s, rows=%d", path, len(rows))

        fieldnames: list[str] = []
        for row in rows:
            for name in row:
                if name not in fieldnames:
                    fieldnames.append(name)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            with open(path, "w", encoding=self.encoding, newline="") as f:
                writer = csv.DictWriter(
                    f, fieldnames=fieldnames, delimiter=self.delimiter, restval=""
                )
                writer.writeheader()
                writer.writerows(rows)

            logger.info("CSV file written: path=%s, rows=%d", path, len(rows))

        except OSError as exc:
            logger.error("CSV write failed: path=%s, error=%s", path, str(exc))
            logger.debug("CSV write error details: %s", exc, exc_info=True)
            raise
