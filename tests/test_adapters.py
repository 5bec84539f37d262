"""Unit tests for the row adapter and the CSV format adapter."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest

from rowbind.adapters import RowAdapter
from rowbind.adapters.formats import CSVAdapter
from rowbind.config.profile import MappingProfile
from rowbind.conversion.import_object import ConfiguredImportObject
from rowbind.exceptions import ConversionError, UnknownPropertyError


@dataclass
class Order:
    order_id: str = ""
    quantity: int = 0
    price: float | None = None
    note: str = ""


@pytest.mark.unit
class TestRowAdapter:
    """Tests for converting field mappings through RowAdapter."""

    def test_adapt_should_convert_row_with_defaults(self) -> None:
        order = RowAdapter(Order).adapt({"order_id": "A1", "quantity": "3"})

        assert order == Order(order_id="A1", quantity=3)

    def test_adapt_should_apply_configure_callback(self) -> None:
        """
        Given: A configure callback aliasing 'qty' to quantity.
        When: Adapting a row that uses the alias.
        Then: The alias is honored.
        """
        adapter = RowAdapter(
            Order, configure=lambda o: o.with_property_alias(lambda x: x.quantity, "qty")
        )

        assert adapter.adapt({"qty": "7"}).quantity == 7

    def test_configure_callback_returning_none_should_be_accepted(self) -> None:
        def configure(import_object: ConfiguredImportObject[Order]) -> None:
            import_object.with_default_constant(lambda x: x.note, "n/a")

        order = RowAdapter(Order, configure=configure).adapt({"order_id": "A1"})

        assert order.note == "n/a"

    def test_profile_should_be_applied_before_callback(self) -> None:
        profile = MappingProfile(aliases={"price": ["amount"]})
        adapter = RowAdapter(
            Order,
            profile=profile,
            configure=lambda o: o.with_property_value_converter(
                lambda x: x.price, lambda s: float(s) * 2
            ),
        )

        assert adapter.adapt({"amount": "1.5"}).price == 3.0

    def test_configuration_should_not_leak_between_rows(self) -> None:
        seen: list[int] = []

        def configure(
            import_object: ConfiguredImportObject[Order],
        ) -> ConfiguredImportObject[Order]:
            seen.append(id(import_object))
            return import_object.with_property_alias("quantity", "qty")

        adapter = RowAdapter(Order, configure=configure)
        orders = adapter.adapt_many([{"qty": "1"}, {"qty": "2"}])

        assert [o.quantity for o in orders] == [1, 2]
        assert len(seen) == 2

    def test_validate_should_reject_non_string_values(self) -> None:
        adapter = RowAdapter(Order)

        assert adapter.validate({"quantity": "1"}) is True
        assert adapter.validate({"quantity": 1}) is False  # type: ignore[dict-item]
        assert adapter.validate(["quantity"]) is False  # type: ignore[arg-type]

    def test_adapt_should_raise_value_error_for_invalid_row(self) -> None:
        with pytest.raises(ValueError, match="string field names to string values"):
            RowAdapter(Order).adapt({"quantity": None})  # type: ignore[dict-item]

    def test_adapt_many_should_stop_at_first_failure(self) -> None:
        adapter = RowAdapter(Order)

        with pytest.raises(ConversionError) as exc_info:
            adapter.adapt_many([{"quantity": "1"}, {"quantity": "lots"}])

        assert exc_info.value.raw_value == "lots"


@pytest.mark.unit
class TestCSVAdapter:
    """Tests for reading and writing CSV field mappings."""

    def test_read_should_return_one_mapping_per_row(
        self, csv_file_factory: Callable[..., Path]
    ) -> None:
        path = csv_file_factory("order_id,quantity\nA1,3\nA2,5\n")

        rows = CSVAdapter().read(path)

        assert rows == [
            {"order_id": "A1", "quantity": "3"},
            {"order_id": "A2", "quantity": "5"},
        ]

    def test_read_should_fill_short_rows_with_empty_text(
        self, csv_file_factory: Callable[..., Path]
    ) -> None:
        path = csv_file_factory("order_id,quantity,price\nA1,3\n")

        assert CSVAdapter().read(path) == [
            {"order_id": "A1", "quantity": "3", "price": ""}
        ]

    def test_read_should_reject_rows_longer_than_header(
        self, csv_file_factory: Callable[..., Path]
    ) -> None:
        path = csv_file_factory("order_id\nA1,extra\n")

        with pytest.raises(ValueError, match="more cells than the header"):
            CSVAdapter().read(path)

    def test_read_should_reject_file_without_header(
        self, csv_file_factory: Callable[..., Path]
    ) -> None:
        path = csv_file_factory("")

        with pytest.raises(ValueError, match="no header row"):
            CSVAdapter().read(path)

    def test_read_should_raise_for_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            CSVAdapter().read(tmp_path / "absent.csv")

    def test_read_should_honor_delimiter(
        self, csv_file_factory: Callable[..., Path]
    ) -> None:
        path = csv_file_factory("order_id;note\nA1;a,b\n")

        assert CSVAdapter(delimiter=";").read(path) == [
            {"order_id": "A1", "note": "a,b"}
        ]

    def test_write_should_round_trip_rows(self, tmp_path: Path) -> None:
        """
        Given: Rows with differing field sets.
        When: Writing them and reading them back.
        Then: The header is the union of fields and missing cells are empty.
        """
        rows = [{"order_id": "A1", "quantity": "3"}, {"order_id": "A2", "note": "rush"}]
        path = tmp_path / "out" / "orders.csv"

        CSVAdapter().write(rows, path)

        assert CSVAdapter().read(path) == [
            {"order_id": "A1", "quantity": "3", "note": ""},
            {"order_id": "A2", "quantity": "", "note": "rush"},
        ]


@pytest.mark.integration
def test_csv_rows_should_convert_to_entities(
    csv_file_factory: Callable[..., Path],
) -> None:
    """
    Given: A CSV file whose header uses an alias and an unknown column.
    When: Reading it and converting rows with a profile.
    Then: Entities are built, and an unskipped unknown column fails the conversion.
    """
    path = csv_file_factory("order_id,qty,price,comment\nA1,2,9.5,fragile\nA2,1,,\n")
    rows = CSVAdapter().read(path)

    profile = MappingProfile(aliases={"quantity": ["qty"]}, skipped_fields=["comment"])
    orders = RowAdapter(Order, profile=profile).adapt_many(rows)

    assert orders == [
        Order(order_id="A1", quantity=2, price=9.5),
        Order(order_id="A2", quantity=1, price=None),
    ]

    with pytest.raises(UnknownPropertyError, match="comment"):
        RowAdapter(Order, profile=MappingProfile(aliases={"quantity": ["qty"]})).adapt(
            rows[0]
        )
