"""Unit tests for the convert_rows CLI entry point."""

from __future__ import annotations

import importlib.util
from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

# ---------------------------------------------------------------------------
# Import the Typer app from scripts/convert_rows.py via importlib
# (the scripts/ directory is not a package).
# ---------------------------------------------------------------------------
_SCRIPT_PATH = Path(__file__).resolve().parent.parent / "scripts" / "convert_rows.py"
_spec = importlib.util.spec_from_file_location("convert_rows", _SCRIPT_PATH)
assert _spec is not None and _spec.loader is not None
_convert_rows = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(_convert_rows)
app = _convert_rows.app

runner = CliRunner()

_ENTITY_MODULE = '''
from dataclasses import dataclass


@dataclass
class Parcel:
    code: str = ""
    weight: float | None = None
    fragile: bool = False
'''


@pytest.fixture
def entity_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Write an importable entity module and return its module:Class path."""
    module_dir = tmp_path / "entities"
    module_dir.mkdir()
    (module_dir / "cli_parcels.py").write_text(_ENTITY_MODULE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(module_dir))
    return "cli_parcels:Parcel"


@pytest.fixture
def parcels_csv(csv_file_factory: Callable[..., Path]) -> Path:
    return csv_file_factory("code,kg,fragile\nP1,1.5,true\nP2,,false\n", "parcels.csv")


@pytest.fixture
def profile_yaml(tmp_path: Path) -> Path:
    path = tmp_path / "parcels.yaml"
    path.write_text("aliases:\n  weight: [kg]\n", encoding="utf-8")
    return path


@pytest.mark.unit
class TestHelp:
    """Tests for the --help flag on the CLI."""

    def test_help_should_list_options(self) -> None:
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for option in ("--input", "--entity", "--profile", "--limit", "--log-level"):
            assert option in result.output


@pytest.mark.integration
class TestConvert:
    """Tests for end-to-end CSV conversion."""

    def test_convert_should_print_entities(
        self, parcels_csv: Path, entity_path: str, profile_yaml: Path
    ) -> None:
        """
        Given: A CSV with an aliased column and a profile declaring the alias.
        When: Running the CLI.
        Then: It exits 0 and prints a table titled with the entity and row count.
        """
        result = runner.invoke(
            app,
            [
                "--input", str(parcels_csv),
                "--entity", entity_path,
                "--profile", str(profile_yaml),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Parcel (2)" in result.output
        assert "P1" in result.output

    def test_limit_should_truncate_rows(
        self, parcels_csv: Path, entity_path: str, profile_yaml: Path
    ) -> None:
        result = runner.invoke(
            app,
            [
                "--input", str(parcels_csv),
                "--entity", entity_path,
                "--profile", str(profile_yaml),
                "--limit", "1",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Parcel (1)" in result.output

    def test_conversion_failure_should_report_row_and_exit_one(
        self, parcels_csv: Path, entity_path: str
    ) -> None:
        result = runner.invoke(
            app, ["--input", str(parcels_csv), "--entity", entity_path]
        )

        assert result.exit_code == 1
        assert "Row 1" in result.output

    def test_invalid_entity_path_should_exit_one(self, parcels_csv: Path) -> None:
        result = runner.invoke(
            app, ["--input", str(parcels_csv), "--entity", "no_colon_here"]
        )

        assert result.exit_code == 1
        assert "Invalid entity" in result.output

    def test_unknown_module_should_exit_one(self, parcels_csv: Path) -> None:
        result = runner.invoke(
            app, ["--input", str(parcels_csv), "--entity", "rowbind_missing_mod:X"]
        )

        assert result.exit_code == 1

    def test_invalid_profile_should_exit_one(
        self, parcels_csv: Path, entity_path: str, tmp_path: Path
    ) -> None:
        bad_profile = tmp_path / "bad.yaml"
        bad_profile.write_text("converters: {}\n", encoding="utf-8")

        result = runner.invoke(
            app,
            [
                "--input", str(parcels_csv),
                "--entity", entity_path,
                "--profile", str(bad_profile),
            ],
        )

        assert result.exit_code == 1
        assert "Invalid profile" in result.output

    def test_empty_csv_should_exit_two(
        self, csv_file_factory: Callable[..., Path], entity_path: str
    ) -> None:
        empty = csv_file_factory("code,kg\n", "empty.csv")

        result = runner.invoke(app, ["--input", str(empty), "--entity", entity_path])

        assert result.exit_code == 2
        assert "No rows" in result.output

    def test_invalid_log_level_should_exit_one(
        self, parcels_csv: Path, entity_path: str
    ) -> None:
        result = runner.invoke(
            app,
            [
                "--input", str(parcels_csv),
                "--entity", entity_path,
                "--log-level", "LOUD",
            ],
        )

        assert result.exit_code == 1
