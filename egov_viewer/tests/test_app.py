import pytest
from fastapi.testclient import TestClient

from egov_viewer.app import app

NOTICE_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<DOC><BODY><TITLE>Notice title</TITLE><MAINTXT><P>one</P><P>two</P></MAINTXT></BODY></DOC>
"""


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("EGOV_VIEWER_HISTORY_PATH", str(tmp_path / "history.json"))
    return TestClient(app)


def _upload(*items):
    return [("files", (name, content, "application/octet-stream")) for name, content in items]


def test_health_endpoint_ok(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_api_prefix_alias(client):
    response = client.get("/api/health")

    assert response.status_code == 200


def test_convert_returns_html_and_records_history(client):
    response = client.post(
        "/convert",
        files=_upload(("notice1.xml", NOTICE_XML), ("data.csv", b"a,b\n1\n2,3,4\n")),
        data={"folder_name": "2024-04"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "<h1>Notice title</h1>" in response.text
    assert 'id="csv-table-0"' in response.text

    history = client.get("/history").json()["entries"]
    assert [entry["folder_name"] for entry in history] == ["2024-04"]
    assert history[0]["documents"] == 1
    assert history[0]["csvs"] == 1


def test_convert_without_usable_files_reports_empty(client):
    response = client.post("/convert", files=_upload(("memo.txt", b"hello")))

    assert response.status_code == 422
    payload = response.json()
    assert payload["status"] == "empty"
    assert client.get("/history").json() == {"entries": []}


def test_convert_data_returns_aggregate(client):
    response = client.post("/convert/data", files=_upload(("data.csv", b"a,b\n1\n2,3,4\n"), ("bad.xml", b"<DOC>")))

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "success"
    assert payload["data"]["csvs"][0]["rows"] == [["1", ""], ["2", "3"]]
    assert payload["data"]["documents"] == []
    assert len(payload["warnings"]) == 1


def test_history_render_and_delete(client):
    client.post("/convert", files=_upload(("notice1.xml", NOTICE_XML)), data={"folder_name": "folder-a"})

    entry = client.get("/history/folder-a")
    assert entry.status_code == 200
    assert entry.json()["data"]["documents"][0]["title"] == "Notice title"

    rendered = client.get("/history/folder-a/html")
    assert rendered.status_code == 200
    assert "<h1>Notice title</h1>" in rendered.text

    deleted = client.delete("/history/folder-a")
    assert deleted.status_code == 200
    assert client.get("/history/folder-a/html").status_code == 404
    assert client.delete("/history/folder-a").status_code == 404
