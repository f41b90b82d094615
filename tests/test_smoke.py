# tests/test_smoke.py
import pytest
from atsresume import create_app

def test_app_boots(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "running" in r.get_json()["status"]

def test_health_reports_ai_configured(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.get_json()["aiConfigured"] is True

def test_healthz(client):
    assert client.get("/healthz").get_json()["ok"] is True

def test_resume_routes_alive(client):
    assert client.get("/resume/test").get_json() == {"message": "Resume routes working!"}
    body = client.get("/resume/health").get_json()
    assert body["status"] == "Resume service healthy"
    assert body["uptime"] >= 0

def test_unknown_route_is_json_404(client):
    r = client.get("/nope")
    assert r.status_code == 404
    data = r.get_json()
    assert data["error"] == "not_found"
    assert "POST /resume/upload" in data["availableRoutes"]
    assert "POST /resume/optimize" in data["availableRoutes"]

def test_missing_api_key_halts_startup():
    with pytest.raises(RuntimeError, match="OPENAI_API_KEY"):
        create_app("production", OPENAI_API_KEY="")

def test_real_client_is_built_from_config():
    app = create_app("test")
    assert app.config["OPENAI_CLIENT"] is not None

def test_single_page_ui(client):
    r = client.get("/app")
    assert r.status_code == 200
    html = r.get_data(as_text=True)
    assert "ATS Resume Builder" in html
    assert 'value="ivy-league"' in html
    assert "/resume/optimize/rerun" in html

def test_config_reads_environment_when_app_is_built(monkeypatch):
    monkeypatch.setenv("MAX_UPLOAD_MB", "3")
    monkeypatch.setenv("PARSER_STRATEGY", "combined")
    app = create_app("test", OPENAI_CLIENT=None)
    assert app.config["MAX_UPLOAD_BYTES"] == 3 * 1024 * 1024
    assert app.config["PARSER_STRATEGY"] == "combined"
