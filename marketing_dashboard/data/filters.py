"""
Row exclusion rules: note status/prefix filter and CSV summary-line skipping.
"""
from __future__ import annotations

from marketing_dashboard.config import (
    NOTE_FIELD_ALIASES,
    NOTE_STATUS_COLUMN,
    SUMMARY_LINE_MARKERS,
    SUMMARY_LINE_PREFIXES,
)
from marketing_dashboard.data.normalize import pick, to_text
from marketing_dashboard.data.schemas import SourceConfig


def is_summary_line(line: str) -> bool:
    """True for export footer lines such as ``合计104条记录``."""
    text = line.strip()
    return text.startswith(SUMMARY_LINE_PREFIXES) or any(m in text for m in SUMMARY_LINE_MARKERS)


def keep_note_row(row: dict, config: SourceConfig) -> bool:
    """Drop excluded statuses first, then excluded publish-time prefixes."""
    status = to_text(row.get(NOTE_STATUS_COLUMN))
    if status in config.excluded_statuses:
        return False
    aliases = config.field_aliases.get("publish_time", NOTE_FIELD_ALIASES["publish_time"])
    publish_time = to_text(pick(row, aliases))
    if config.excluded_publish_prefixes and publish_time.startswith(config.excluded_publish_prefixes):
        return False
    return True
