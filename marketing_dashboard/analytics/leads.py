"""
Consultation leads (the broker "Clients_info" sheet): projection and counts.
"""
from __future__ import annotations

import datetime as dt
import logging
from collections import Counter
from typing import Any, Optional

from marketing_dashboard.analytics.aggregate import parse_bucket_date
from marketing_dashboard.analytics.rollups import week_start
from marketing_dashboard.config import LEAD_FIELD_ALIASES
from marketing_dashboard.data.normalize import is_blank, normalize_date, pick, to_text
from marketing_dashboard.data.schemas import LEAD_FIELDS

logger = logging.getLogger(__name__)


def project_leads(rows: list[dict], aliases: Optional[dict] = None) -> list[dict]:
    """Keep only the lead columns; the date cell is passed through as-is."""
    aliases = aliases or LEAD_FIELD_ALIASES
    leads = []
    for row in rows:
        lead = {}
        for field in LEAD_FIELDS:
            value = pick(row, aliases.get(field, ()))
            lead[field] = "" if is_blank(value) else value
        leads.append(lead)
    return leads


def lead_date(value: Any) -> Optional[dt.date]:
    """Calendar date of a lead cell (datetime, Excel serial, or text)."""
    if is_blank(value):
        return None
    normalized = normalize_date(value)
    if not isinstance(normalized, str):
        return None
    # drop a trailing time component, e.g. "2024-10-31 09:15"
    return parse_bucket_date(normalized.split(" ")[0])


def week_label(day: dt.date) -> str:
    """``YYYY/wkNN``; week 1 is the Monday-start week containing 1 January."""
    first_monday = week_start(dt.date(day.year, 1, 1))
    week_num = (week_start(day) - first_monday).days // 7 + 1
    return f"{day.year}/wk{week_num:02d}"


def lead_counts(leads: list[dict]) -> dict:
    """Daily, weekly and monthly lead counts, each sorted ascending."""
    days = []
    invalid = 0
    for lead in leads:
        day = lead_date(lead.get("date"))
        if day is None:
            invalid += 1
            continue
        days.append(day)
    if invalid:
        logger.info("Lead counts: %d valid dates, %d invalid", len(days), invalid)

    daily = Counter(d.isoformat() for d in days)
    weekly = Counter(week_label(d) for d in days)
    monthly = Counter(f"{d.year}/{d.month:02d}" for d in days)
    return {
        "daily_data": [{"date": k, "leads": v} for k, v in sorted(daily.items())],
        "weekly_data": [{"week": k, "leads": v} for k, v in sorted(weekly.items())],
        "monthly_data": [{"month": k, "leads": v} for k, v in sorted(monthly.items())],
        "invalid_dates": invalid,
    }


def process_leads(rows: list[dict]) -> dict:
    leads = project_leads(rows)
    broker_data = [
        {k: (to_text(normalize_date(v)) if k == "date" else to_text(v)) for k, v in lead.items()}
        for lead in leads
    ]
    result = {"broker_data": broker_data}
    result.update(lead_counts(leads))
    result["total_rows"] = len(leads)
    return result
