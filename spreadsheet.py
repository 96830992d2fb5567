#!/usr/bin/env python3
"""
Spreadsheet decoding for bulk player import.

Turns an uploaded ``.xlsx`` / ``.xlsm`` workbook (first sheet) or a ``.csv``
file into a list of row dicts keyed by the header row, e.g.
``{'Player Name': 'Alice', 'Class': 'Ranger'}``.  Header names are kept
exactly as written; validation of the values is left to
``roster.services.ImportService``.
"""

import csv
import io
import logging
import os
from typing import Any, Dict, List

import openpyxl

logger = logging.getLogger('guild.spreadsheet')

EXCEL_EXTENSIONS = ('.xlsx', '.xlsm')
CSV_EXTENSIONS = ('.csv',)
SUPPORTED_EXTENSIONS = EXCEL_EXTENSIONS + CSV_EXTENSIONS


class SpreadsheetError(Exception):
    """The uploaded file could not be decoded into rows."""


def is_supported(filename: str) -> bool:
    """Return True if *filename* has an extension this module can decode."""
    return os.path.splitext(filename or '')[1].lower() in SUPPORTED_EXTENSIONS


def read_rows(content: bytes, filename: str) -> List[Dict[str, Any]]:
    """Decode *content* according to the extension of *filename*.

    Raises:
        SpreadsheetError: unsupported extension or unreadable content.
    """
    ext = os.path.splitext(filename or '')[1].lower()
    if ext in EXCEL_EXTENSIONS:
        return read_excel_rows(content)
    if ext in CSV_EXTENSIONS:
        return read_csv_rows(content)
    raise SpreadsheetError(
        f"Unsupported file type '{ext or filename}'. "
        f"Supported: {', '.join(SUPPORTED_EXTENSIONS)}")


def read_excel_rows(content: bytes) -> List[Dict[str, Any]]:
    """Read the first worksheet of an Excel workbook.

    Cell values keep their native type (numbers stay numbers).  Rows whose
    cells are all empty are skipped, matching how spreadsheet exports
    usually pad the end of a sheet.
    """
    try:
        wb = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as e:
        raise SpreadsheetError(f"Could not open workbook: {e}") from e
    try:
        ws = wb.worksheets[0] if wb.worksheets else None
        if ws is None:
            raise SpreadsheetError('Workbook has no worksheets')
        rows_iter = ws.iter_rows(values_only=True)
        raw_headers = next(rows_iter, None)
        if not raw_headers:
            return []
        headers = [str(h).strip() if h is not None else f'col_{i}'
                   for i, h in enumerate(raw_headers)]
        rows = []
        for values in rows_iter:
            if not any(v is not None and str(v).strip() for v in values):
                continue
            rows.append({headers[j]: v for j, v in enumerate(values) if j < len(headers)})
    finally:
        wb.close()
    logger.debug("Decoded %d rows from workbook", len(rows))
    return rows


def read_csv_rows(content: bytes) -> List[Dict[str, Any]]:
    """Read a CSV file whose first line is the header row."""
    try:
        text = content.decode('utf-8-sig')
    except UnicodeDecodeError:
        text = content.decode('latin-1')
    reader = csv.DictReader(io.StringIO(text))
    if reader.fieldnames:
        reader.fieldnames = [f.strip() for f in reader.fieldnames]
    rows = []
    for row in reader:
        if not any((v or '').strip() for v in row.values() if isinstance(v, str)):
            continue
        rows.append({k: v for k, v in row.items() if k is not None})
    logger.debug("Decoded %d rows from CSV", len(rows))
    return rows
