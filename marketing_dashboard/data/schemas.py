"""
Source configuration and record schemas shared by the pipeline stages.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class HeaderOffset(int, Enum):
    """Which raw row holds the column headers."""
    FIRST_ROW = 0
    SECOND_ROW = 1        # first row is a banner and is discarded


@dataclass(frozen=True)
class SourceConfig:
    """One upload variant: how its rows are parsed, filtered and coerced."""
    name: str
    label: str
    kind: str                                   # "ads" | "notes" | "leads"
    header_offset: HeaderOffset = HeaderOffset.FIRST_ROW
    field_aliases: dict[str, tuple[str, ...]] = field(default_factory=dict)
    currency_conversion: bool = False
    skip_summary_lines: bool = False
    excluded_statuses: frozenset[str] = frozenset()
    excluded_publish_prefixes: tuple[str, ...] = ()
    snapshot_file: Optional[str] = None          # JSON written under PUBLIC_FOLDER
    default_file: Optional[str] = None           # looked up under DEFAULTS_FOLDER
    sheet_name: Optional[str] = None             # preferred workbook sheet


RECORD_FIELDS = [
    "id",
    "date",
    "cost",
    "impressions",
    "clicks",
    "click_rate",
    "avg_click_cost",
    "cpm",
    "interactions",
    "avg_interaction_cost",
    "followers",
    "saves",
    "likes",
    "comments",
    "shares",
    "conversions",
    "conversion_cost",
    "action_clicks",
    "action_click_rate",
]

NOTE_FIELDS = ["publish_time", "type", "name", "link"]

LEAD_FIELDS = ["no", "broker", "date", "wechat", "source"]
