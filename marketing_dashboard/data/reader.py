"""
Upload decoding: CSV/Excel bytes → cell matrix → header-keyed rows.
"""
from __future__ import annotations

import io
import logging
from typing import Any, Optional

import pandas as pd

from marketing_dashboard.config import CSV_EXTENSIONS, EXCEL_EXTENSIONS, MIN_RAW_ROWS
from marketing_dashboard.data.filters import is_summary_line
from marketing_dashboard.data.normalize import is_blank
from marketing_dashboard.data.schemas import HeaderOffset, SourceConfig
from marketing_dashboard.errors import InputValidationError

logger = logging.getLogger(__name__)

Matrix = list[list[Any]]


# ---------------------------------------------------------------------------
# File type
# ---------------------------------------------------------------------------

def file_kind(filename: str) -> str:
    """Return "csv" or "excel"; reject anything else."""
    lower = (filename or "").lower()
    if lower.endswith(CSV_EXTENSIONS):
        return "csv"
    if lower.endswith(EXCEL_EXTENSIONS):
        return "excel"
    accepted = ", ".join(CSV_EXTENSIONS + EXCEL_EXTENSIONS)
    raise InputValidationError(
        "Unsupported file type",
        f"Expected one of {accepted} (got '{filename}')",
    )


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------

def decode_text(content: bytes) -> str:
    """UTF-8 (BOM stripped), falling back to GB18030 for legacy exports."""
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.info("CSV is not UTF-8, decoding as GB18030")
        return content.decode("gb18030", errors="replace")


def _prepare_csv_text(
    text: str,
    skip_summary_lines: bool,
    header_offset: HeaderOffset,
) -> tuple[str, int, int]:
    """Drop blank and summary lines; also bound the widest record's field count.

    Lines are only inspected where a record starts, so a line break inside a
    quoted cell is never mistaken for a blank or summary line. Returns the
    kept text, the field-count bound and the number of summary lines dropped.
    """
    kept = []
    records = dropped = commas = 0
    widest = 1
    in_quotes = False
    for line in text.splitlines():
        if not in_quotes:
            if not line.strip():
                continue
            if skip_summary_lines and records > header_offset and is_summary_line(line):
                dropped += 1
                continue
            records += 1
        kept.append(line)
        commas += line.count(",")
        in_quotes ^= line.count('"') % 2 == 1
        if not in_quotes:
            widest = max(widest, commas + 1)
            commas = 0
    return "\n".join(kept), max(widest, commas + 1), dropped


def read_csv_matrix(
    content: bytes,
    skip_summary_lines: bool = False,
    header_offset: HeaderOffset = HeaderOffset.FIRST_ROW,
) -> Matrix:
    """Parse CSV text into rows of trimmed cells.

    Summary footer lines after the header are dropped on the raw text, before
    any cell splitting happens. Rows may differ in length; short rows are
    padded with "".
    """
    text, width, dropped = _prepare_csv_text(decode_text(content), skip_summary_lines, header_offset)
    if dropped:
        logger.info("Skipped %d summary line(s)", dropped)
    if not text:
        return []
    df = pd.read_csv(
        io.StringIO(text),
        header=None,
        names=list(range(width)),
        dtype=str,
        keep_default_na=False,
    )
    df = df.fillna("").apply(lambda col: col.str.strip())
    # the width is an upper bound; trailing columns that stayed empty go
    while df.shape[1] > 1 and (df.iloc[:, -1] == "").all():
        df = df.iloc[:, :-1]
    return df.values.tolist()


# ---------------------------------------------------------------------------
# Excel
# ---------------------------------------------------------------------------

def _frame_to_matrix(df: pd.DataFrame) -> Matrix:
    df = df.astype(object).where(df.notna(), None)
    return df.values.tolist()


def read_excel_sheets(content: bytes) -> dict[str, Matrix]:
    """All sheets of a workbook as raw matrices (no header interpretation)."""
    sheets = pd.read_excel(io.BytesIO(content), sheet_name=None, header=None, dtype=object)
    return {name: _frame_to_matrix(df) for name, df in sheets.items()}


def read_workbook(content: bytes, filename: str, skip_summary_lines: bool = False) -> dict[str, Matrix]:
    """Sheets by name; a CSV upload becomes a single ``Sheet1``."""
    if file_kind(filename) == "csv":
        return {"Sheet1": read_csv_matrix(content, skip_summary_lines)}
    return read_excel_sheets(content)


def read_matrix(
    content: bytes,
    filename: str,
    config: SourceConfig,
    sheet_name: Optional[str] = None,
) -> Matrix:
    """The matrix a single-source upload is parsed from.

    Excel uploads use ``sheet_name`` (or the source's preferred sheet) when
    present, otherwise the first sheet.
    """
    if file_kind(filename) == "csv":
        return read_csv_matrix(content, config.skip_summary_lines, config.header_offset)
    sheets = read_excel_sheets(content)
    if not sheets:
        return []
    wanted = sheet_name or config.sheet_name
    if wanted and wanted in sheets:
        return sheets[wanted]
    return next(iter(sheets.values()))


# ---------------------------------------------------------------------------
# Matrix → RawRow
# ---------------------------------------------------------------------------

def rows_from_matrix(matrix: Matrix, header_offset: HeaderOffset = HeaderOffset.FIRST_ROW) -> list[dict]:
    """Match each data row positionally to the header row.

    Missing trailing cells become "", blank header cells are ignored and
    fully blank data rows are skipped.
    """
    offset = int(header_offset)
    if len(matrix) <= offset:
        return []
    header = ["" if is_blank(h) else str(h).strip() for h in matrix[offset]]

    rows = []
    for values in matrix[offset + 1:]:
        if all(is_blank(v) for v in values):
            continue
        row = {}
        for i, name in enumerate(header):
            if not name:
                continue
            value = values[i] if i < len(values) else ""
            row[name] = "" if is_blank(value) else value
        rows.append(row)
    return rows


def load_rows(
    content: bytes,
    filename: str,
    config: SourceConfig,
    sheet_name: Optional[str] = None,
) -> list[dict]:
    """Decode an upload into RawRows, enforcing the minimum row count."""
    matrix = read_matrix(content, filename, config, sheet_name)
    if len(matrix) < MIN_RAW_ROWS:
        raise InputValidationError(
            f"File must have at least {MIN_RAW_ROWS} rows",
            f"Found {len(matrix)} non-empty row(s) in '{filename}'",
        )
    return rows_from_matrix(matrix, config.header_offset)
