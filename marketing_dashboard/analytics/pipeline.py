"""
Source-parameterized pipelines: ads (normalize → aggregate → sort → rollups)
and notes (filter → project).
"""
from __future__ import annotations

import logging

from marketing_dashboard.analytics.aggregate import bucket_by_date, sort_daily, summarize
from marketing_dashboard.analytics.common import frame_to_records
from marketing_dashboard.analytics.leads import process_leads
from marketing_dashboard.analytics.rollups import monthly_rollup, rolling_average, weekly_rollup
from marketing_dashboard.config import NOTE_FIELD_ALIASES
from marketing_dashboard.data.filters import keep_note_row
from marketing_dashboard.data.normalize import normalize_frame, pick, to_text
from marketing_dashboard.data.schemas import NOTE_FIELDS, SourceConfig

logger = logging.getLogger(__name__)


def process_ads(rows: list[dict], config: SourceConfig) -> dict:
    """Full advertising result for one upload."""
    df = normalize_frame(rows, config)
    daily = sort_daily(bucket_by_date(df))
    result = {
        "summary": summarize(df),
        "daily_data": daily,
        "weekly_data": weekly_rollup(daily),
        "monthly_data": monthly_rollup(daily),
        "rolling_average": rolling_average(daily),
        "records": frame_to_records(df),
        "total_rows": len(df),
        "currency": "AUD" if config.currency_conversion else "RMB",
    }
    logger.info(
        "%s: %d rows → %d days (conversion %s)",
        config.name, len(df), len(daily), "on" if config.currency_conversion else "off",
    )
    return result


def extract_notes(rows: list[dict], config: SourceConfig) -> list[dict]:
    """Filtered notes projected to publish_time / type / name / link."""
    aliases = config.field_aliases or NOTE_FIELD_ALIASES
    kept = [row for row in rows if keep_note_row(row, config)]
    if len(kept) != len(rows):
        logger.info("%s: filtered out %d of %d notes", config.name, len(rows) - len(kept), len(rows))
    return [{field: to_text(pick(row, aliases.get(field, ()))) for field in NOTE_FIELDS} for row in kept]


def run_pipeline(rows: list[dict], config: SourceConfig):
    """Dispatch on the source kind."""
    if config.kind == "ads":
        return process_ads(rows, config)
    if config.kind == "notes":
        return extract_notes(rows, config)
    if config.kind == "leads":
        return process_leads(rows)
    raise ValueError(f"Unknown source kind: {config.kind}")
