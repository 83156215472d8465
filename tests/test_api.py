import json

import pytest

from conftest import AD_CSV, NOTES_ROWS, make_xlsx

SIMPLE_CSV = "时间,消费,展现量,点击量\n2024-10-31,94.00,1200,34\n".encode("utf-8")


def _upload(client, url, content, filename="ads.csv"):
    return client.post(url, files={"file": (filename, content, "application/octet-stream")})


# ---------------------------------------------------------------------------
# Meta
# ---------------------------------------------------------------------------

def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_sources(client):
    sources = {s["name"]: s for s in client.get("/api/sources").json()["sources"]}
    assert set(sources) == {"xiaowang", "xiaowang-test", "lifecar", "xiaowang-notes", "lifecar-notes", "leads"}
    assert sources["xiaowang"]["currency_conversion"] is True
    assert sources["xiaowang-test"]["currency_conversion"] is False
    assert sources["lifecar-notes"]["header_offset"] == 1
    assert sources["lifecar"]["has_default_file"] is False


# ---------------------------------------------------------------------------
# Ads
# ---------------------------------------------------------------------------

def test_ads_needs_upload_before_first_upload(client):
    body = client.get("/api/ads/xiaowang").json()
    assert body["needs_upload"] is True
    assert body["data"] is None


def test_ads_upload_then_fetch(client):
    r = _upload(client, "/api/ads/xiaowang-test/upload", SIMPLE_CSV)
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["row_count"] == 1
    assert body["version"] == 1
    assert body["data"]["summary"]["total_cost"] == 94.0

    latest = client.get("/api/ads/xiaowang-test").json()
    assert latest["needs_upload"] is False
    assert latest["filename"] == "ads.csv"
    assert latest["data"] == body["data"]


def test_ads_upload_replaces_previous(client):
    _upload(client, "/api/ads/xiaowang/upload", SIMPLE_CSV)
    _upload(client, "/api/ads/xiaowang/upload", AD_CSV.encode("utf-8"), "export.csv")
    latest = client.get("/api/ads/xiaowang").json()
    assert latest["version"] == 2
    assert latest["filename"] == "export.csv"
    assert latest["row_count"] == 3
    assert latest["data"]["currency"] == "AUD"


def test_sources_do_not_share_slots(client):
    _upload(client, "/api/ads/lifecar/upload", SIMPLE_CSV)
    assert client.get("/api/ads/xiaowang").json()["needs_upload"] is True


def test_ads_excel_upload(client):
    content = make_xlsx({"Sheet1": [["时间", "消费", "点击量"], ["31/10/2024", 47, 5]]})
    body = _upload(client, "/api/ads/lifecar/upload", content, "lifecar.xlsx").json()
    assert body["data"]["daily_data"][0]["date"] == "2024-10-31"
    assert body["data"]["summary"]["total_cost"] == pytest.approx(10.0)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

def test_missing_file_is_rejected(client):
    r = client.post("/api/ads/xiaowang/upload", data={"x": "y"})
    assert r.status_code == 400
    assert r.json()["error"] == "No file provided"


def test_unsupported_extension_is_rejected(client):
    r = _upload(client, "/api/ads/xiaowang/upload", b"%PDF", "report.pdf")
    assert r.status_code == 400
    assert r.json()["error"] == "Unsupported file type"


def test_too_few_rows_is_rejected(client):
    r = _upload(client, "/api/ads/xiaowang/upload", "时间,消费\n".encode("utf-8"))
    assert r.status_code == 400
    assert set(r.json()) == {"error", "details"}


def test_unreadable_workbook_is_a_server_error(client):
    r = _upload(client, "/api/ads/xiaowang/upload", b"not a workbook", "ads.xlsx")
    assert r.status_code == 500
    assert r.json()["error"] == "Failed to process file"


def test_unknown_source(client):
    assert client.get("/api/ads/tiktok").status_code == 404
    r = _upload(client, "/api/ads/tiktok/upload", SIMPLE_CSV)
    assert r.status_code == 404
    assert "tiktok" in r.json()["error"]
    assert client.get("/api/notes/nobody").status_code == 404


def test_failed_upload_keeps_previous_data(client):
    _upload(client, "/api/ads/xiaowang/upload", SIMPLE_CSV)
    _upload(client, "/api/ads/xiaowang/upload", "时间\n".encode("utf-8"))
    latest = client.get("/api/ads/xiaowang").json()
    assert latest["version"] == 1
    assert latest["row_count"] == 1


# ---------------------------------------------------------------------------
# Default files
# ---------------------------------------------------------------------------

def test_default_file_missing(client):
    assert client.get("/api/ads/lifecar/default").status_code == 404
    assert client.get("/api/ads/xiaowang/default").status_code == 404


def test_default_file_present(client, data_dirs):
    (data_dirs / "defaults" / "lifecar-data.csv").write_bytes(AD_CSV.encode("utf-8"))
    body = client.get("/api/ads/lifecar/default").json()
    assert body["filename"] == "lifecar-data.csv"
    assert body["row_count"] == 3
    assert client.get("/api/ads/lifecar").json()["needs_upload"] is True


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------

def test_notes_upload_fetch_and_clear(client, notes_xlsx, data_dirs):
    r = _upload(client, "/api/notes/lifecar/upload", notes_xlsx, "LifeCar笔记.xlsx")
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 2
    assert body["message"] == "成功上传 2 条记录"

    snapshot = data_dirs / "public" / "lifecar-notes-data.json"
    assert json.loads(snapshot.read_text(encoding="utf-8")) == body["data"]

    current = client.get("/api/notes/lifecar").json()
    assert [n["name"] for n in current["data"]] == ["Car finance tips", "Lease or buy"]

    cleared = client.delete("/api/notes/lifecar").json()
    assert cleared["success"] is True
    assert not snapshot.exists()
    after = client.get("/api/notes/lifecar").json()
    assert after["data"] == []
    assert after["needs_upload"] is True


def test_xiaowang_notes_have_no_snapshot(client, notes_xlsx, data_dirs):
    _upload(client, "/api/notes/xiaowang/upload", notes_xlsx, "notes.xlsx")
    assert client.get("/api/notes/xiaowang").json()["total"] == 2
    assert not (data_dirs / "public" / "lifecar-notes-data.json").exists()
    assert client.get("/api/notes/lifecar").json()["needs_upload"] is True


def test_notes_served_from_snapshot_after_restart(client, data_dirs):
    saved = [{"publish_time": "2024-10-01", "type": "图文", "name": "kept", "link": ""}]
    (data_dirs / "public" / "lifecar-notes-data.json").write_text(json.dumps(saved), encoding="utf-8")
    body = client.get("/api/notes/lifecar").json()
    assert body["data"] == saved
    assert body["source"] == "snapshot"


def test_notes_default_file(client, notes_xlsx, data_dirs):
    assert client.get("/api/notes/lifecar/default").status_code == 404
    assert client.get("/api/notes/xiaowang/default").status_code == 404

    (data_dirs / "defaults" / "LifeCar笔记.xlsx").write_bytes(notes_xlsx)
    body = client.get("/api/notes/lifecar/default").json()
    assert body["total"] == 2
    assert body["source"] == "default"
    assert [n["name"] for n in body["data"]] == ["Car finance tips", "Lease or buy"]
    assert client.get("/api/notes/lifecar").json()["needs_upload"] is True
    sources = {s["name"]: s for s in client.get("/api/sources").json()["sources"]}
    assert sources["lifecar-notes"]["has_default_file"] is True


# ---------------------------------------------------------------------------
# All-in-one and leads
# ---------------------------------------------------------------------------

def _all_in_one() -> bytes:
    return make_xlsx({
        "Clients_info（new）": [
            ["No.", "Broker", "日期", "微信", "来源"],
            [1, "Amy", "2024-10-31", "wx1", "小红书"],
            [2, "Ben", "4/11/2024", "wx2", "小红书"],
        ],
        "小王投放": [["时间", "消费", "展现量", "点击量"], ["2024-10-31", 94, 1200, 34]],
        "LifeCar 笔记": NOTES_ROWS[1:],
        "Notes": [["unrelated"], [1]],
    })


def test_all_in_one_upload(client, data_dirs):
    r = _upload(client, "/api/all-in-one-upload", _all_in_one(), "dashboard.xlsx")
    assert r.status_code == 200
    body = r.json()
    assert body["processed"] == {
        "leads": True,
        "xiaowang": True,
        "xiaowang-notes": False,
        "lifecar": False,
        "lifecar-notes": True,
    }
    assert body["data"]["lifecar"] is None
    assert body["data"]["xiaowang"]["summary"]["total_cost"] == pytest.approx(20.0)
    assert len(body["data"]["lifecar-notes"]) == 2

    assert client.get("/api/ads/xiaowang").json()["row_count"] == 1
    assert client.get("/api/notes/lifecar").json()["total"] == 2
    assert (data_dirs / "public" / "lifecar-notes-data.json").exists()
    leads = client.get("/api/leads").json()
    assert leads["total"] == 2
    assert [w["week"] for w in leads["data"]["weekly_data"]] == ["2024/wk44", "2024/wk45"]


def test_all_in_one_csv_matches_nothing(client):
    body = _upload(client, "/api/all-in-one-upload", SIMPLE_CSV, "dashboard.csv").json()
    assert not any(body["processed"].values())


def test_leads_upload(client):
    content = make_xlsx({
        "Summary": [["ignored"], [0]],
        "Clients_info（new）": [["No.", "Broker", "日期"], [1, "Amy", "2024-10-31"], [2, "Ben", ""]],
    })
    body = _upload(client, "/api/leads/upload", content, "leads.xlsx").json()
    assert body["total"] == 2
    assert body["data"]["daily_data"] == [{"date": "2024-10-31", "leads": 1}]
    assert body["data"]["invalid_dates"] == 1


def test_leads_needs_upload(client):
    assert client.get("/api/leads").json()["needs_upload"] is True
