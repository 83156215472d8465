import datetime as dt

import pytest

from marketing_dashboard.analytics.leads import lead_counts, lead_date, process_leads, project_leads, week_label


@pytest.mark.parametrize("day, label", [
    (dt.date(2024, 1, 1), "2024/wk01"),
    (dt.date(2024, 1, 7), "2024/wk01"),
    (dt.date(2024, 1, 8), "2024/wk02"),
    (dt.date(2025, 1, 1), "2025/wk01"),
    (dt.date(2025, 1, 6), "2025/wk02"),
    (dt.date(2024, 12, 30), "2024/wk53"),
])
def test_week_label(day, label):
    assert week_label(day) == label


@pytest.mark.parametrize("value, expected", [
    ("2024-10-31", dt.date(2024, 10, 31)),
    ("31/10/2024", dt.date(2024, 10, 31)),
    ("2024-10-31 09:15", dt.date(2024, 10, 31)),
    (dt.datetime(2024, 10, 31, 9, 15), dt.date(2024, 10, 31)),
    (45596, dt.date(2024, 10, 31)),
    ("", None),
    ("ask broker", None),
])
def test_lead_date(value, expected):
    assert lead_date(value) == expected


def test_project_leads_keeps_lead_columns_only():
    rows = [{"No.": 1, "Broker": "Amy", "日期": "2024-10-31", "微信": "wx1", "来源": "小红书", "备注": "x"}]
    assert project_leads(rows) == [
        {"no": 1, "broker": "Amy", "date": "2024-10-31", "wechat": "wx1", "source": "小红书"},
    ]


def test_lead_counts():
    leads = [
        {"date": "2024-10-31"},
        {"date": "31/10/2024"},
        {"date": "2024-11-04"},
        {"date": ""},
        {"date": "tbc"},
    ]
    counts = lead_counts(leads)
    assert counts["daily_data"] == [
        {"date": "2024-10-31", "leads": 2},
        {"date": "2024-11-04", "leads": 1},
    ]
    assert [w["leads"] for w in counts["weekly_data"]] == [2, 1]
    assert counts["monthly_data"] == [
        {"month": "2024/10", "leads": 2},
        {"month": "2024/11", "leads": 1},
    ]
    assert counts["invalid_dates"] == 2


def test_process_leads_renders_text():
    rows = [
        {"No.": 1.0, "Broker": "Amy", "日期": dt.datetime(2024, 10, 31), "微信": "", "来源": "小红书"},
        {"No.": 2.0, "Broker": "Ben", "日期": "1/11/2024", "微信": "wx2", "来源": "朋友"},
    ]
    result = process_leads(rows)
    assert result["total_rows"] == 2
    assert result["broker_data"][0] == {
        "no": "1", "broker": "Amy", "date": "2024-10-31", "wechat": "", "source": "小红书",
    }
    assert result["broker_data"][1]["date"] == "2024-11-01"
    assert [m["month"] for m in result["monthly_data"]] == ["2024/10", "2024/11"]
