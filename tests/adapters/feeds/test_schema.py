from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from agriprice.adapters.feeds.schema import extract_price_fields, translate_price_row
from agriprice.domain.errors import RowValidationError


def test_extract_price_fields_matches_headers_case_insensitively() -> None:
    row = {" CROP NAME ": "Maize", "County": "Nakuru", "Unit Price": "40", "DATE": "2024-01-10"}

    assert extract_price_fields(row) == {
        "crop": "Maize",
        "region": "Nakuru",
        "price": "40",
        "entry_date": "2024-01-10",
    }


def test_extract_price_fields_falls_through_blank_aliases() -> None:
    row = {"crop": "  ", "commodity": "Beans", "region": "Kisumu", "market": ""}

    fields = extract_price_fields(row)

    assert fields["crop"] == "Beans"
    assert "market" not in fields


def test_translate_price_row_builds_observation() -> None:
    observation = translate_price_row(
        {
            "Crop": " White Maize ",
            "Region": "Central Kenya",
            "Market": "Wakulima",
            "Wholesale": "1,234.50",
            "Date": "2024-01-10",
        }
    )

    assert observation.crop_name == "White Maize"
    assert observation.region_name == "Central Kenya"
    assert observation.market_name == "Wakulima"
    assert observation.price == Decimal("1234.50")
    assert observation.observed_at == datetime(2024, 1, 10, tzinfo=UTC)


def test_blank_market_becomes_none() -> None:
    observation = translate_price_row(
        {"crop": "Maize", "region": "Nakuru", "market": "   ", "price": "40", "date": "2024-01-10"}
    )

    assert observation.market_name is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2024-01-10", datetime(2024, 1, 10, tzinfo=UTC)),
        ("2024-01-10T08:30:00Z", datetime(2024, 1, 10, 8, 30, tzinfo=UTC)),
        ("2024/01/10", datetime(2024, 1, 10, tzinfo=UTC)),
        ("10/01/2024", datetime(2024, 1, 10, tzinfo=UTC)),
        ("10-01-2024", datetime(2024, 1, 10, tzinfo=UTC)),
        ("10-Jan-2024", datetime(2024, 1, 10, tzinfo=UTC)),
        ("10 Jan 2024", datetime(2024, 1, 10, tzinfo=UTC)),
        (date(2024, 1, 10), datetime(2024, 1, 10, tzinfo=UTC)),
        (datetime(2024, 1, 10, 6, 0), datetime(2024, 1, 10, 6, 0, tzinfo=UTC)),
        (
            datetime(2024, 1, 10, 2, 0, tzinfo=timezone(timedelta(hours=3))),
            datetime(2024, 1, 9, 23, 0, tzinfo=UTC),
        ),
    ],
)
def test_entry_date_formats(raw: object, expected: datetime) -> None:
    observation = translate_price_row({"crop": "Maize", "region": "Nakuru", "price": "40", "date": raw})

    assert observation.observed_at == expected


def test_numeric_spreadsheet_price_is_accepted() -> None:
    observation = translate_price_row(
        {"crop": "Maize", "region": "Nakuru", "price": 45.5, "date": datetime(2024, 1, 10)}
    )

    assert observation.price == Decimal("45.5")


def test_price_is_rounded_to_cents() -> None:
    observation = translate_price_row(
        {"crop": "Maize", "region": "Nakuru", "price": "33.335", "date": "2024-01-10"}
    )

    assert observation.price == Decimal("33.34")
    assert observation.price.as_tuple().exponent == -2


@pytest.mark.parametrize(
    ("row", "field"),
    [
        ({"region": "Nakuru", "price": "40", "date": "2024-01-10"}, "crop"),
        ({"crop": "Maize", "price": "40", "date": "2024-01-10"}, "region"),
        ({"crop": "Maize", "region": "Nakuru", "price": "abc", "date": "2024-01-10"}, "price"),
        ({"crop": "Maize", "region": "Nakuru", "price": "0", "date": "2024-01-10"}, "price"),
        ({"crop": "Maize", "region": "Nakuru", "price": "-5", "date": "2024-01-10"}, "price"),
        ({"crop": "Maize", "region": "Nakuru", "price": "NaN", "date": "2024-01-10"}, "price"),
        ({"crop": "Maize", "region": "Nakuru", "price": "0.001", "date": "2024-01-10"}, "price"),
        ({"crop": "Maize", "region": "Nakuru", "price": "100000000", "date": "2024-01-10"}, "price"),
        ({"crop": "Maize", "region": "Nakuru", "price": "99999999.999", "date": "2024-01-10"}, "price"),
        ({"crop": "Maize", "region": "Nakuru", "price": "40"}, "entry_date"),
        ({"crop": "Maize", "region": "Nakuru", "price": "40", "date": "yesterday"}, "entry_date"),
    ],
)
def test_invalid_rows_raise_row_validation_error(row: dict[str, object], field: str) -> None:
    with pytest.raises(RowValidationError) as excinfo:
        translate_price_row(row)

    assert field in excinfo.value.field_errors
