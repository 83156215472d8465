"""
Marketing Dashboard — Configuration: paths, constants, column aliases, sources.
"""
import os
from pathlib import Path

from marketing_dashboard.data.schemas import HeaderOffset, SourceConfig

# ---------------------------------------------------------------------------
# Paths — override with DASHBOARD_DATA_DIR / DASHBOARD_PUBLIC_DIR env vars
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("DASHBOARD_DATA_DIR", str(Path.cwd() / "data")))
BASE_FOLDER = _data_dir
DEFAULTS_FOLDER = _data_dir / "defaults"
PUBLIC_FOLDER = Path(os.environ.get("DASHBOARD_PUBLIC_DIR", str(_data_dir / "public")))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------------------------------
# Upload rules
# ---------------------------------------------------------------------------
CSV_EXTENSIONS = (".csv",)
EXCEL_EXTENSIONS = (".xlsx", ".xlsm")
MIN_RAW_ROWS = 2

# ---------------------------------------------------------------------------
# Currency: ad platforms bill in RMB, the dashboard reports AUD
# ---------------------------------------------------------------------------
RMB_TO_AUD_RATE = 4.7

CURRENCY_FIELDS = [
    "cost",
    "avg_click_cost",
    "avg_interaction_cost",
    "conversion_cost",
    "cpm",
]

# ---------------------------------------------------------------------------
# Field kinds for the normalized ad record
# ---------------------------------------------------------------------------
FIELD_KINDS = {
    "date": "date",
    "cost": "currency",
    "impressions": "count",
    "clicks": "count",
    "click_rate": "percent",
    "avg_click_cost": "currency",
    "cpm": "currency",
    "interactions": "count",
    "avg_interaction_cost": "currency",
    "followers": "count",
    "saves": "count",
    "likes": "count",
    "comments": "count",
    "shares": "count",
    "conversions": "count",
    "conversion_cost": "currency",
    "action_clicks": "count",
    "action_click_rate": "percent",
}

# Fields that are summed into Summary and DailyBucket
SUMMABLE_FIELDS = [
    "cost",
    "impressions",
    "clicks",
    "interactions",
    "followers",
    "saves",
    "likes",
    "comments",
    "shares",
    "conversions",
    "action_clicks",
]

# ---------------------------------------------------------------------------
# Column aliases: raw export header → internal field (first non-blank wins)
# ---------------------------------------------------------------------------
AD_FIELD_ALIASES = {
    "date": ("时间", "date", "Date", "日期"),
    "cost": ("消费", "cost", "Spend", "花费"),
    "impressions": ("展现量", "impressions", "Impressions", "曝光"),
    "clicks": ("点击量", "clicks", "Clicks", "点击"),
    "click_rate": ("点击率", "clickRate", "Click Rate", "CTR"),
    "avg_click_cost": ("平均点击成本", "avgClickCost", "CPC", "单次点击成本"),
    "cpm": ("平均千次展现费用", "cpm", "CPM", "千次曝光成本"),
    "interactions": ("互动量", "interactions", "Interactions"),
    "avg_interaction_cost": ("平均互动成本", "avgInteractionCost", "Avg Interaction Cost"),
    "followers": ("关注", "followers", "Followers", "关注者"),
    "saves": ("收藏", "saves", "Saves", "保存"),
    "likes": ("点赞", "likes", "Likes"),
    "comments": ("评论", "comments", "Comments"),
    "shares": ("分享", "shares", "Shares"),
    "conversions": ("多转化人数（添加企微+私信咨询）", "conversions", "Multi Conversion 1"),
    "conversion_cost": ("多转化成本（添加企微+私信咨询）", "conversionCost", "Multi Conversion Cost 1"),
    "action_clicks": ("行动按钮点击量", "actionClicks", "Action Button Clicks"),
    "action_click_rate": ("行动按钮点击率", "actionClickRate", "Action Button Click Rate"),
}

# Platform export headers only (no English fallbacks)
AD_PRIMARY_ALIASES = {field: names[:1] for field, names in AD_FIELD_ALIASES.items()}

NOTE_FIELD_ALIASES = {
    "publish_time": ("笔记发布时间", "发布时间", "Post Time"),
    "type": ("笔记类型", "类型", "Type"),
    "name": ("笔记名称", "名称", "Name"),
    "link": ("笔记链接", "链接", "Link"),
}
NOTE_STATUS_COLUMN = "笔记状态"

LEAD_FIELD_ALIASES = {
    "no": ("No.", "no"),
    "broker": ("Broker", "broker"),
    "date": ("日期", "date", "Date"),
    "wechat": ("微信", "wechat"),
    "source": ("来源", "source"),
}

# ---------------------------------------------------------------------------
# Row exclusion rules
# ---------------------------------------------------------------------------
EXCLUDED_NOTE_STATUSES = frozenset({"笔记违规", "仅自己可见"})
EXCLUDED_PUBLISH_PREFIXES = ("专业号行业",)

# CSV exports end with a line like "合计104条记录"
SUMMARY_LINE_PREFIXES = ("合计",)
SUMMARY_LINE_MARKERS = ("条记录",)

# ---------------------------------------------------------------------------
# Source registry: each upload variant is a configuration value
# ---------------------------------------------------------------------------
SOURCES = {
    "xiaowang": SourceConfig(
        name="xiaowang",
        label="XiaoWang advertising",
        kind="ads",
        header_offset=HeaderOffset.FIRST_ROW,
        field_aliases=AD_FIELD_ALIASES,
        currency_conversion=True,
        skip_summary_lines=True,
    ),
    "xiaowang-test": SourceConfig(
        name="xiaowang-test",
        label="XiaoWang test account",
        kind="ads",
        header_offset=HeaderOffset.FIRST_ROW,
        field_aliases=AD_PRIMARY_ALIASES,
        currency_conversion=False,
        skip_summary_lines=True,
        default_file="账户-小王投放数据（~9.9）.csv",
    ),
    "lifecar": SourceConfig(
        name="lifecar",
        label="LifeCar advertising",
        kind="ads",
        header_offset=HeaderOffset.FIRST_ROW,
        field_aliases=AD_FIELD_ALIASES,
        currency_conversion=True,
        skip_summary_lines=True,
        default_file="lifecar-data.csv",
    ),
    "xiaowang-notes": SourceConfig(
        name="xiaowang-notes",
        label="XiaoWang notes",
        kind="notes",
        header_offset=HeaderOffset.SECOND_ROW,
        field_aliases=NOTE_FIELD_ALIASES,
        excluded_statuses=EXCLUDED_NOTE_STATUSES,
        excluded_publish_prefixes=EXCLUDED_PUBLISH_PREFIXES,
    ),
    "lifecar-notes": SourceConfig(
        name="lifecar-notes",
        label="LifeCar notes",
        kind="notes",
        header_offset=HeaderOffset.SECOND_ROW,
        field_aliases=NOTE_FIELD_ALIASES,
        excluded_statuses=EXCLUDED_NOTE_STATUSES,
        excluded_publish_prefixes=EXCLUDED_PUBLISH_PREFIXES,
        snapshot_file="lifecar-notes-data.json",
        default_file="LifeCar笔记.xlsx",
    ),
    "leads": SourceConfig(
        name="leads",
        label="XiaoWang consultation leads",
        kind="leads",
        header_offset=HeaderOffset.FIRST_ROW,
        field_aliases=LEAD_FIELD_ALIASES,
        sheet_name="Clients_info（new）",
    ),
}

# Note accounts exposed under /api/notes/{account}
NOTE_ACCOUNTS = {
    "xiaowang": "xiaowang-notes",
    "lifecar": "lifecar-notes",
}

# ---------------------------------------------------------------------------
# All-in-one workbook: sheet name → source (matched case-insensitively,
# whitespace ignored; a sheet matches when every token is contained)
# ---------------------------------------------------------------------------
ALL_IN_ONE_SHEETS = [
    ("leads", ("client",)),
    ("xiaowang", ("小王投放",)),
    ("xiaowang-notes", ("小王笔记",)),
    ("lifecar", ("lifecar", "投放")),
    ("lifecar-notes", ("lifecar", "笔记")),
]

# ---------------------------------------------------------------------------
# Rollups
# ---------------------------------------------------------------------------
ROLLING_WINDOW = 7
