"""Decode price feed files into raw row mappings."""

from __future__ import annotations

import csv
import io
import struct
import zipfile
from logging import getLogger
from pathlib import PurePath
from typing import TYPE_CHECKING, Final

import xlrd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from xlrd.biffh import XLRDError
from xlrd.compdoc import CompDocError
from xlrd.xldate import XLDateError, xldate_as_datetime

from agriprice.domain.errors import ParseError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from openpyxl.workbook.workbook import Workbook
    from xlrd.book import Book
    from xlrd.sheet import Cell

    from agriprice.domain.ports import RawRow

LEGACY_SPREADSHEET_EXTENSIONS: Final[frozenset[str]] = frozenset({".xls"})
SPREADSHEET_EXTENSIONS: Final[frozenset[str]] = (
    frozenset({".xlsx", ".xlsm"}) | LEGACY_SPREADSHEET_EXTENSIONS
)
CANDIDATE_DELIMITERS: Final[str] = ",;\t|"
SNIFF_SAMPLE_SIZE: Final[int] = 8192
UTF8_BOM: Final[str] = "\ufeff"


log = getLogger(__name__)


def is_spreadsheet(filename: str) -> bool:
    return PurePath(filename).suffix.lower() in SPREADSHEET_EXTENSIONS


def read_price_feed(content: bytes, filename: str) -> Iterator[RawRow]:
    """Return a single-pass iterator of ``header -> value`` rows in file order.

    The file is opened before this function returns, so undecodable input raises
    ``ParseError`` immediately instead of on first iteration. Only the first sheet
    of a workbook is read.
    """

    suffix = PurePath(filename).suffix.lower()
    if suffix in LEGACY_SPREADSHEET_EXTENSIONS:
        log.debug("Reading %s as a legacy workbook", filename)
        return _legacy_spreadsheet_rows(_open_legacy_workbook(content, filename))
    if suffix in SPREADSHEET_EXTENSIONS:
        log.debug("Reading %s as a spreadsheet", filename)
        return _spreadsheet_rows(_open_workbook(content, filename))
    log.debug("Reading %s as delimited text", filename)
    return _delimited_rows(_decode_text(content, filename))


def _sheet_records(values: Iterator[Sequence[object]]) -> Iterator[RawRow]:
    header = next(values, None)
    if header is None:
        return
    columns = [
        (index, str(name).strip())
        for index, name in enumerate(header)
        if name is not None and str(name).strip()
    ]
    for cells in values:
        if all(cell is None or (isinstance(cell, str) and not cell.strip()) for cell in cells):
            continue
        yield {name: cells[index] if index < len(cells) else None for index, name in columns}


def _open_workbook(content: bytes, filename: str) -> Workbook:
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as exc:
        raise ParseError(f"Failed to parse file {filename}: {exc}") from exc
    if not workbook.sheetnames:
        workbook.close()
        raise ParseError(f"No sheets found in workbook {filename}")
    return workbook


def _spreadsheet_rows(workbook: Workbook) -> Iterator[RawRow]:
    try:
        sheet = workbook.worksheets[0]
        yield from _sheet_records(sheet.iter_rows(values_only=True))
    except (zipfile.BadZipFile, KeyError, OSError, ValueError) as exc:
        raise ParseError(f"Failed to read worksheet rows: {exc}") from exc
    finally:
        workbook.close()


def _open_legacy_workbook(content: bytes, filename: str) -> Book:
    try:
        book = xlrd.open_workbook(file_contents=content, on_demand=True)
    except (XLRDError, CompDocError, struct.error, EOFError, IndexError, ValueError) as exc:
        raise ParseError(f"Failed to parse file {filename}: {exc}") from exc
    if book.nsheets == 0:
        book.release_resources()
        raise ParseError(f"No sheets found in workbook {filename}")
    return book


def _legacy_cell_value(cell: Cell, datemode: int) -> object:
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
        return None
    if cell.ctype == xlrd.XL_CELL_DATE:
        return xldate_as_datetime(cell.value, datemode)
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    return cell.value


def _legacy_sheet_values(book: Book) -> Iterator[Sequence[object]]:
    sheet = book.sheet_by_index(0)
    for row_index in range(sheet.nrows):
        yield [_legacy_cell_value(cell, book.datemode) for cell in sheet.row(row_index)]


def _legacy_spreadsheet_rows(book: Book) -> Iterator[RawRow]:
    try:
        yield from _sheet_records(_legacy_sheet_values(book))
    except (XLRDError, CompDocError, XLDateError, struct.error, IndexError, ValueError) as exc:
        raise ParseError(f"Failed to read worksheet rows: {exc}") from exc
    finally:
        book.release_resources()


def _decode_text(content: bytes, filename: str) -> str:
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"Failed to parse file {filename}: not valid UTF-8 text") from exc
    return text.removeprefix(UTF8_BOM)


def _sniff_dialect(text: str) -> type[csv.Dialect] | csv.Dialect:
    lines = [line for line in text[:SNIFF_SAMPLE_SIZE].splitlines() if line.strip()]
    sniffer = csv.Sniffer()
    for sample in ("\n".join(lines), lines[0] if lines else ""):
        try:
            return sniffer.sniff(sample, delimiters=CANDIDATE_DELIMITERS)
        except csv.Error:
            continue
    return csv.excel


def _delimited_rows(text: str) -> Iterator[RawRow]:
    dialect = _sniff_dialect(text)
    # Embedded quotes are doubled whether or not the sample contained any.
    reader = csv.DictReader(io.StringIO(text, newline=""), dialect=dialect, doublequote=True)
    try:
        for record in reader:
            row = {
                key.strip(): value.strip() if isinstance(value, str) else value
                for key, value in record.items()
                if isinstance(key, str) and key.strip()
            }
            if not any(isinstance(value, str) and value for value in row.values()):
                continue
            yield row
    except csv.Error as exc:
        raise ParseError(f"Failed to parse delimited text at line {reader.line_num}: {exc}") from exc


__all__ = ["is_spreadsheet", "read_price_feed"]
