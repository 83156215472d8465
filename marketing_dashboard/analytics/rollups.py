"""
Weekly / monthly rollups and rolling averages over the sorted daily series.
"""
from __future__ import annotations

import datetime as dt
from typing import Optional

import pandas as pd

from marketing_dashboard.analytics.aggregate import parse_bucket_date
from marketing_dashboard.analytics.common import frame_to_records, safe_series_divide
from marketing_dashboard.config import ROLLING_WINDOW

ROLLUP_FIELDS = ["cost", "clicks", "likes", "followers", "conversions"]
ROLLING_FIELDS = ["cost", "clicks", "likes", "followers"]

# cost-per-metric name → denominator column ("views" are ad clicks)
COST_PER = {
    "cost_per_view": "clicks",
    "cost_per_like": "likes",
    "cost_per_follower": "followers",
    "cost_per_conversion": "conversions",
}


def _dated_frame(daily: list[dict]) -> pd.DataFrame:
    """Daily buckets with a parsed ``day`` column; undated buckets dropped."""
    if not daily:
        return pd.DataFrame(columns=["date", "day"] + ROLLUP_FIELDS)
    df = pd.DataFrame(daily)
    for col in ROLLUP_FIELDS:
        if col not in df.columns:
            df[col] = 0
    df["day"] = df["date"].map(lambda s: parse_bucket_date(str(s)))
    return df[df["day"].notna()].sort_values("day", kind="stable").reset_index(drop=True)


def _add_cost_per(df: pd.DataFrame) -> pd.DataFrame:
    for name, denom in COST_PER.items():
        df[name] = safe_series_divide(df["cost"].astype(float), df[denom].astype(float))
    return df


def week_start(day: dt.date) -> dt.date:
    """Monday of the week containing ``day``."""
    return day - dt.timedelta(days=day.weekday())


def weekly_rollup(daily: list[dict]) -> list[dict]:
    """Monday-start weeks with summed metrics and cost-per ratios."""
    df = _dated_frame(daily)
    if df.empty:
        return []
    df["week_start"] = df["day"].map(week_start)
    weekly = df.groupby("week_start")[ROLLUP_FIELDS].sum().reset_index().sort_values("week_start")
    weekly["week_end"] = weekly["week_start"].map(lambda d: d + dt.timedelta(days=6))
    weekly["week"] = weekly.apply(
        lambda r: f"{r['week_start']:%b} {r['week_start'].day} - {r['week_end']:%b} {r['week_end'].day}", axis=1
    )
    weekly["week_start"] = weekly["week_start"].map(dt.date.isoformat)
    weekly["week_end"] = weekly["week_end"].map(dt.date.isoformat)
    weekly = _add_cost_per(weekly)
    return frame_to_records(weekly[["week", "week_start", "week_end"] + ROLLUP_FIELDS + list(COST_PER)])


def monthly_rollup(daily: list[dict]) -> list[dict]:
    """Calendar months (``YYYY-MM``) with summed metrics and cost-per ratios."""
    df = _dated_frame(daily)
    if df.empty:
        return []
    df["month"] = df["day"].map(lambda d: f"{d.year}-{d.month:02d}")
    monthly = df.groupby("month")[ROLLUP_FIELDS].sum().reset_index().sort_values("month")
    monthly = _add_cost_per(monthly)
    return frame_to_records(monthly[["month"] + ROLLUP_FIELDS + list(COST_PER)])


def rolling_average(daily: list[dict], window: Optional[int] = None) -> list[dict]:
    """Mean of each bucket and up to ``window - 1`` preceding buckets."""
    window = window or ROLLING_WINDOW
    df = _dated_frame(daily)
    if df.empty:
        return []
    out = pd.DataFrame({"date": df["date"]})
    for col in ROLLING_FIELDS:
        values = df[col].astype(float)
        out[col] = values
        out[f"{col}_avg"] = values.rolling(window, min_periods=1).mean()
    return frame_to_records(out)
