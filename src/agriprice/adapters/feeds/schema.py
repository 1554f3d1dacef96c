"""Pydantic model and alias map for price feed rows."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, date, datetime, time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from agriprice.domain.errors import RowValidationError
from agriprice.domain.model import PriceObservation

if TYPE_CHECKING:
    from agriprice.domain.ports import RawRow

# Per field, the first alias present with a non-blank value wins.
FIELD_ALIASES: Final[Mapping[str, tuple[str, ...]]] = {
    "crop": ("crop", "crop_name", "commodity", "crop name", "productname"),
    "region": ("region", "region_name", "county", "district"),
    "market": ("market", "market_name", "market name"),
    "price": ("price", "unit price", "wholesale", "retail"),
    "entry_date": ("entry_date", "date"),
}

# Prices are stored as NUMERIC(10, 2).
PRICE_QUANTUM: Final[Decimal] = Decimal("0.01")
PRICE_LIMIT: Final[Decimal] = Decimal("100000000")

DATE_FORMATS: Final[tuple[str, ...]] = (
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d-%b-%Y",
    "%d %b %Y",
    "%d-%B-%Y",
    "%d %B %Y",
)


def normalize_header(name: str) -> str:
    return name.strip().lower()


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def extract_price_fields(row: RawRow) -> dict[str, object]:
    """Pick the price fields out of a row whose headers follow no fixed schema."""

    normalized: dict[str, object] = {}
    for key, value in row.items():
        normalized.setdefault(normalize_header(str(key)), value)

    fields: dict[str, object] = {}
    for field_name, aliases in FIELD_ALIASES.items():
        for alias in aliases:
            value = normalized.get(alias)
            if not _is_blank(value):
                fields[field_name] = value
                break
    return fields


def _parse_date_text(text: str) -> datetime:
    candidate = text.strip()
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt)  # noqa: DTZ007
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date: {text!r}")


class PriceRowPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, frozen=True)

    crop: str = Field(min_length=1)
    region: str = Field(min_length=1)
    market: str | None = None
    price: Decimal = Field(gt=0)
    entry_date: datetime

    @field_validator("crop", "region", mode="before")
    @classmethod
    def _coerce_name(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("market", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if _is_blank(value):
            return None
        return str(value)

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, value: object) -> object:
        if isinstance(value, bool):
            raise ValueError("Price must be numeric")
        if isinstance(value, str):
            cleaned = value.replace(",", "").strip()
            try:
                return Decimal(cleaned)
            except InvalidOperation as exc:
                raise ValueError(f"Price is not numeric: {value!r}") from exc
        if isinstance(value, float):
            return Decimal(repr(value))
        return value

    @field_validator("price")
    @classmethod
    def _fit_stored_precision(cls, value: Decimal) -> Decimal:
        if not value.is_finite():
            raise ValueError("Price must be finite")
        if value >= PRICE_LIMIT:
            raise ValueError(f"Price must be below {PRICE_LIMIT}")
        stored = value.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)
        if stored <= 0:
            raise ValueError("Price rounds to zero at cent precision")
        if stored >= PRICE_LIMIT:
            raise ValueError(f"Price must be below {PRICE_LIMIT}")
        return stored

    @field_validator("entry_date", mode="before")
    @classmethod
    def _parse_entry_date(cls, value: object) -> object:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time.min)
        if isinstance(value, str):
            return _parse_date_text(value)
        raise ValueError(f"Unsupported date value: {value!r}")

    @field_validator("entry_date")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def to_observation(self) -> PriceObservation:
        return PriceObservation(
            crop_name=self.crop,
            region_name=self.region,
            market_name=self.market,
            price=self.price,
            observed_at=self.entry_date,
        )


def translate_price_row(row: RawRow) -> PriceObservation:
    """Validate one raw row; raises ``RowValidationError`` for unusable rows."""

    fields = extract_price_fields(row)
    try:
        payload = PriceRowPayload.model_validate(fields)
    except ValidationError as exc:
        field_errors = {
            ".".join(str(part) for part in error["loc"]) or "row": error["msg"]
            for error in exc.errors()
        }
        summary = "; ".join(f"{name}: {message}" for name, message in field_errors.items())
        raise RowValidationError(f"Invalid price row ({summary})", field_errors=field_errors) from exc
    return payload.to_observation()


__all__ = [
    "FIELD_ALIASES",
    "PriceRowPayload",
    "extract_price_fields",
    "normalize_header",
    "translate_price_row",
]
