from pathlib import Path

from egov_viewer.config import DEFAULT_HISTORY_LIMIT, load_settings


def test_settings_defaults(monkeypatch):
    for name in (
        "EGOV_VIEWER_HISTORY_PATH",
        "EGOV_VIEWER_HISTORY_LIMIT",
        "EGOV_VIEWER_OUTPUT_PATH",
        "EGOV_VIEWER_CORS_ALLOWED_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.history_path == Path("data/history.json")
    assert settings.history_limit == DEFAULT_HISTORY_LIMIT == 10
    assert settings.output_path == Path("output.html")
    assert settings.cors_allowed_origins == ["http://localhost:3000", "http://127.0.0.1:3000"]


def test_settings_read_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("EGOV_VIEWER_HISTORY_PATH", str(tmp_path / "h.json"))
    monkeypatch.setenv("EGOV_VIEWER_HISTORY_LIMIT", " 3 ")
    monkeypatch.setenv("EGOV_VIEWER_CORS_ALLOWED_ORIGINS", "https://a.example, ,https://b.example")

    settings = load_settings()

    assert settings.history_path == tmp_path / "h.json"
    assert settings.history_limit == 3
    assert settings.cors_allowed_origins == ["https://a.example", "https://b.example"]


def test_invalid_history_limit_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("EGOV_VIEWER_HISTORY_LIMIT", "many")
    assert load_settings().history_limit == DEFAULT_HISTORY_LIMIT

    monkeypatch.setenv("EGOV_VIEWER_HISTORY_LIMIT", "-1")
    assert load_settings().history_limit == DEFAULT_HISTORY_LIMIT
