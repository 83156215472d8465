"""
Summary totals, per-date buckets, and chronological ordering of buckets.
"""
from __future__ import annotations

import datetime as dt
import re
from typing import Optional

import pandas as pd

from marketing_dashboard.analytics.common import safe_divide, sanitize_for_json
from marketing_dashboard.config import SUMMABLE_FIELDS

_ISO_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_DMY_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

def summarize(df: pd.DataFrame) -> dict:
    """Sum every summable field, then derive the two averages.

    avg_click_rate = clicks / impressions × 100, avg_conversion_cost =
    cost / conversions; both are 0 when their denominator is 0.
    """
    totals = {f"total_{f}": (df[f].sum() if not df.empty else 0) for f in SUMMABLE_FIELDS}
    totals["total_cost"] = float(totals["total_cost"])
    totals["avg_click_rate"] = safe_divide(totals["total_clicks"], totals["total_impressions"]) * 100
    totals["avg_conversion_cost"] = safe_divide(totals["total_cost"], totals["total_conversions"])
    return sanitize_for_json(totals)


# ---------------------------------------------------------------------------
# Daily buckets
# ---------------------------------------------------------------------------

def bucket_by_date(df: pd.DataFrame) -> list[dict]:
    """One bucket per distinct date string, in first-seen order.

    Grouping is plain string equality: "2024-1-5" and "2024-01-05" stay apart.
    """
    if df.empty:
        return []
    grouped = df.groupby("date", sort=False)[SUMMABLE_FIELDS].sum().reset_index()
    return sanitize_for_json(grouped.to_dict(orient="records"))


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------

def parse_bucket_date(text: str) -> Optional[dt.date]:
    """Explicit date rule for ordering: ISO year-month-day, else day/month/year.

    Nothing locale-dependent is consulted; anything else returns None.
    """
    text = (text or "").strip()
    m = _ISO_RE.match(text)
    if m:
        year, month, day = (int(g) for g in m.groups())
    else:
        m = _DMY_RE.match(text)
        if not m:
            return None
        day, month, year = (int(g) for g in m.groups())
    try:
        return dt.date(year, month, day)
    except ValueError:
        return None


def sort_daily(buckets: list[dict]) -> list[dict]:
    """Ascending by parsed date; unparseable dates go last in input order."""
    def _key(bucket: dict):
        parsed = parse_bucket_date(str(bucket.get("date", "")))
        return (parsed is None, parsed or dt.date.min)

    return sorted(buckets, key=_key)
