"""Read uploaded student sheets (CSV or the first sheet of an .xlsx workbook).

Rows come back as ``{header: cell_text}`` dicts with headers trimmed and empty
cells as ``""``; blank lines are dropped. With ``max_rows`` set, reading stops
at ``max_rows + 1`` data rows so callers can reject oversized files without
materializing them.
"""

from __future__ import annotations

import csv
import io
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from openpyxl import load_workbook

from ..core.constants import IMPORT_ALLOWED_EXTENSIONS
from ..core.exceptions import ValidationError

Row = Dict[str, str]


def file_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if filename and "." in filename else ""


def parse_tabular(filename: str, content: bytes, *, max_rows: Optional[int] = None) -> List[Row]:
    ext = file_extension(filename)
    if ext not in IMPORT_ALLOWED_EXTENSIONS:
        raise ValidationError("File must be CSV or XLSX")
    if not content:
        raise ValidationError("Uploaded file is empty")

    if ext == "csv":
        return parse_csv(content, max_rows=max_rows)
    return parse_xlsx(content, max_rows=max_rows)


def _is_blank(values) -> bool:
    return all(v is None or (isinstance(v, str) and not v.strip()) for v in values)


def _over_limit(rows: List[Row], max_rows: Optional[int]) -> bool:
    return max_rows is not None and len(rows) > max_rows


def parse_csv(content: bytes, *, max_rows: Optional[int] = None) -> List[Row]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ValidationError("Failed to parse CSV file: not UTF-8 encoded")

    try:
        reader = csv.reader(io.StringIO(text))
        header = next(reader, None)
        if not header:
            return []
        header = [h.strip() for h in header]

        rows: List[Row] = []
        for values in reader:
            if _is_blank(values):
                continue
            rows.append({h: (values[i] if i < len(values) else "") for i, h in enumerate(header) if h})
            if _over_limit(rows, max_rows):
                break
        return rows
    except csv.Error as e:
        raise ValidationError(f"Failed to parse CSV file: {e}") from e


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).upper()
    # Registration numbers typed into Excel come back as floats (2024001.0).
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.date().isoformat() if value.time() == datetime.min.time() else value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def parse_xlsx(content: bytes, *, max_rows: Optional[int] = None) -> List[Row]:
    try:
        wb = load_workbook(filename=io.BytesIO(content), read_only=True, data_only=True)
    except Exception as e:
        raise ValidationError(f"Failed to parse Excel file: {e}") from e

    try:
        if not wb.worksheets:
            return []
        ws = wb.worksheets[0]

        rows_iter = ws.iter_rows(values_only=True)
        header_row = next(rows_iter, None)
        if not header_row:
            return []
        header = [_cell_text(h).strip() for h in header_row]

        rows: List[Row] = []
        for values in rows_iter:
            if not values or _is_blank(values):
                continue
            rows.append({h: _cell_text(values[i]) if i < len(values) else "" for i, h in enumerate(header) if h})
            if _over_limit(rows, max_rows):
                break
        return rows
    finally:
        wb.close()
