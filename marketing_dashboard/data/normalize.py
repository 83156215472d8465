"""
Lenient cell coercion and alias-based field extraction.

Every coercion function here returns a documented default instead of raising:
counts and currency fall back to 0, percents to 0, text to "", and dates to the
original input.
"""
from __future__ import annotations

import datetime as dt
import logging
import math
import re
from typing import Any, Optional

import numpy as np
import pandas as pd

from marketing_dashboard.config import CURRENCY_FIELDS, FIELD_KINDS, RMB_TO_AUD_RATE
from marketing_dashboard.data.schemas import RECORD_FIELDS, SourceConfig

logger = logging.getLogger(__name__)

_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DMY_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_YMD_DATE_RE = re.compile(r"^(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})(?:[ T].*)?$")
_EXCEL_EPOCH = dt.datetime(1899, 12, 30)


# ---------------------------------------------------------------------------
# Blank detection
# ---------------------------------------------------------------------------

def is_blank(value: Any) -> bool:
    """True for None, NaN/NaT and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


# ---------------------------------------------------------------------------
# Numeric coercion
# ---------------------------------------------------------------------------

def parse_number(value: Any) -> Optional[float]:
    """Parse the leading number of a cell; None when nothing usable is there.

    Thousands separators are ignored. Negative and non-finite values are
    rejected so normalized metrics stay non-negative.
    """
    if is_blank(value) or isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "")
        m = _LEADING_NUMBER_RE.match(text)
        if not m:
            return None
        try:
            number = float(m.group(0))
        except (ValueError, OverflowError):
            return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def to_int(value: Any) -> int:
    """Count fields: truncate to int, 0 on failure."""
    number = parse_number(value)
    return int(number) if number is not None else 0


def to_float(value: Any) -> float:
    """Currency fields: float, 0.0 on failure."""
    number = parse_number(value)
    return number if number is not None else 0.0


def to_percent(value: Any) -> float:
    """Percent fields: ``"45.2%"`` → 45.2, 0 on failure."""
    if isinstance(value, str):
        value = value.strip()
        if value.endswith("%"):
            value = value[:-1]
    return to_float(value)


def convert_currency(amount: float, enabled: bool, rate: float = RMB_TO_AUD_RATE) -> float:
    """RMB → AUD when the source has conversion enabled."""
    return amount / rate if enabled else amount


def to_text(value: Any) -> str:
    if is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


# ---------------------------------------------------------------------------
# Date coercion
# ---------------------------------------------------------------------------

def normalize_date(value: Any) -> Any:
    """Best-effort ``YYYY-MM-DD``.

    ``YYYY-MM-DD`` passes through. ``D/M/YYYY`` and year-first text such as
    ``2024-1-5``, ``2024/1/5`` or ``2024-10-31 09:15`` are rewritten with zero
    padding (time part dropped). Datetime cells and Excel serial numbers are
    formatted. Anything else goes through the generic pandas parser (day
    first); when that fails too the input is returned unchanged.
    """
    if is_blank(value):
        return ""
    if isinstance(value, (dt.datetime, dt.date)):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool):
        try:
            return (_EXCEL_EPOCH + dt.timedelta(days=float(value))).strftime("%Y-%m-%d")
        except (OverflowError, ValueError):
            return value

    text = str(value).strip()
    if _ISO_DATE_RE.match(text):
        return text
    m = _DMY_DATE_RE.match(text)
    if m:
        day, month, year = m.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    m = _YMD_DATE_RE.match(text)
    if m:
        year, month, day = m.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    try:
        parsed = pd.to_datetime(text, dayfirst=True, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        parsed = pd.NaT
    if pd.isna(parsed):
        logger.debug("Unparseable date %r left unchanged", value)
        return value
    return parsed.strftime("%Y-%m-%d")


# ---------------------------------------------------------------------------
# Alias lookup
# ---------------------------------------------------------------------------

def pick(row: dict, aliases: tuple[str, ...]) -> Any:
    """First non-blank value among the alias headers, or None."""
    for name in aliases:
        value = row.get(name)
        if not is_blank(value):
            return value
    return None


# ---------------------------------------------------------------------------
# Record normalisation
# ---------------------------------------------------------------------------

def _coerce(kind: str, raw: Any) -> Any:
    if kind == "date":
        return normalize_date(raw)
    if kind == "count":
        return to_int(raw)
    if kind == "percent":
        return to_percent(raw)
    return to_float(raw)


def normalize_record(row: dict, config: SourceConfig, record_id: int = 0) -> dict:
    """Extract and coerce every ad field of one raw row."""
    record: dict[str, Any] = {"id": record_id}
    for field, kind in FIELD_KINDS.items():
        raw = pick(row, config.field_aliases.get(field, ()))
        value = _coerce(kind, raw)
        if kind != "date" and raw is not None and value == 0 and to_text(raw).rstrip("%") not in ("0", "0.0"):
            logger.debug("Row %d: %s=%r defaulted to 0", record_id, field, raw)
        if field in CURRENCY_FIELDS:
            value = convert_currency(value, config.currency_conversion)
        record[field] = value
    return record


def normalize_frame(rows: list[dict], config: SourceConfig) -> pd.DataFrame:
    """Normalize all rows into a DataFrame with the fixed record columns."""
    records = [normalize_record(row, config, i) for i, row in enumerate(rows, 1)]
    df = pd.DataFrame(records, columns=RECORD_FIELDS)
    if df.empty:
        dtypes = {f: ("int64" if k == "count" else "float64") for f, k in FIELD_KINDS.items() if k != "date"}
        dtypes["id"] = "int64"
        return df.astype(dtypes)
    # dates may mix str and unparsed originals; group keys must be strings
    df["date"] = df["date"].map(lambda v: v if isinstance(v, str) else str(v))
    return df
