from __future__ import annotations

import io

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from marketing_dashboard import config
from marketing_dashboard.main import create_app


def make_xlsx(sheets: dict[str, list[list]]) -> bytes:
    """Workbook bytes with one sheet per entry, rows written as given."""
    wb = Workbook()
    first = True
    for title, rows in sheets.items():
        if first:
            ws = wb.active
            ws.title = title
            first = False
        else:
            ws = wb.create_sheet(title=title)
        for row in rows:
            ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


AD_CSV = (
    "﻿时间,消费,展现量,点击量,点击率,点赞,收藏,关注,多转化人数（添加企微+私信咨询）\n"
    "31/10/2024,94.00,1200,34,2.83%,10,4,2,1\n"
    "2024-09-05,47.00,800,16,2%,5,1,0,0\n"
    "31/10/2024,47.00,300,6,2%,1,0,1,1\n"
    "合计3条记录,188.00,2300,56,,,,,\n"
)

NOTES_ROWS = [
    ["笔记数据导出 2024-10"],
    ["笔记发布时间", "笔记类型", "笔记名称", "笔记链接", "笔记状态"],
    ["2024-10-01 10:00", "图文", "Car finance tips", "https://example.com/a", "正常"],
    ["2024-10-02 11:00", "视频", "Violating note", "https://example.com/b", "笔记违规"],
    ["2024-10-03 12:00", "图文", "Private note", "https://example.com/c", "仅自己可见"],
    ["专业号行业数据", "", "", "", ""],
    ["2024-10-04 09:30", "视频", "Lease or buy", "https://example.com/d", "审核中"],
]


@pytest.fixture
def data_dirs(tmp_path, monkeypatch):
    """Point every configured folder at a temp directory."""
    monkeypatch.setattr(config, "BASE_FOLDER", tmp_path)
    monkeypatch.setattr(config, "DEFAULTS_FOLDER", tmp_path / "defaults")
    monkeypatch.setattr(config, "PUBLIC_FOLDER", tmp_path / "public")
    return tmp_path


@pytest.fixture
def client(data_dirs):
    with TestClient(create_app()) as c:
        yield c


@pytest.fixture
def notes_xlsx() -> bytes:
    return make_xlsx({"Sheet1": NOTES_ROWS})
