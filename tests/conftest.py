"""Pytest configuration and shared row fixtures for rowbind."""

from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture
def simple_row() -> dict[str, str]:
    """Row converted with default converters only."""
    return {
        "a": "x",
        "ax": "",
        "b": "12.5",
        "bx": "",
        "c": "5",
        "cx": "",
        "d": "true",
        "dx": "",
    }


@pytest.fixture
def configured_row() -> dict[str, str]:
    """Row exercising aliases, skipped fields and every converter level."""
    return {
        "a": "x",
        "au": "",
        "av": "s",
        "b": "12.5",
        "bu": "",
        "bv": "foo",
        "c": "5",
        "cu": "",
        "cv": "bar",
        "d": "true",
        "du": "",
        "dv": "maybe",
        "e": "bar",
        "eu": "n/a",
        "ev": "foo",
    }


@pytest.fixture
def csv_file_factory(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing CSV text to a temporary file.

    Returns:
        A callable taking the CSV text and an optional file name.
    """

    def _make_csv(content: str, name: str = "rows.csv") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _make_csv
