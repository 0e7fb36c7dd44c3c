"""
Flask接口测试。

运行测试：
    python -m pytest tests/test_flask_interface.py -v
"""

import pytest
from flask import Flask

import TemplateEngine.flask_interface as flask_interface
from TemplateEngine.flask_interface import initialize_template_engine, template_bp

NAME = "jp_investment_4part"


@pytest.fixture
def client(orchestrator, monkeypatch):
    monkeypatch.setattr(flask_interface, "configure_logging", lambda: 0)
    initialize_template_engine(orchestrator, start_sweeper=False)
    app = Flask(__name__)
    app.register_blueprint(template_bp, url_prefix="/api")
    yield app.test_client()
    flask_interface.orchestrator = None


class TestTemplateRoutes:
    """测试模板相关HTTP接口"""

    def test_apply(self, client):
        resp = client.post(f"/api/templates/{NAME}/apply", json={"inputText": "x"})
        data = resp.get_json()
        assert resp.status_code == 200
        assert data["success"] is True
        assert data["validation"]["templateStructure"]["isComplete"] is True

    def test_apply_missing_template(self, client):
        data = client.post("/api/templates/jp_tax_unknown/apply", json={}).get_json()
        assert data["success"] is False
        assert data["fallbackTemplate"]

    def test_validate(self, client):
        report = "## Executive Summary\n## Benefits\n## Risks"
        data = client.post(f"/api/templates/{NAME}/validate", json={"content": report}).get_json()
        assert data["success"] is True
        assert data["qualityScore"] == 0.75
        assert data["issues"] == ["Missing required section: Evidence"]

    def test_apply_rejects_non_object_body(self, client):
        resp = client.post("/api/templates/custom/apply", json=["name"])
        assert resp.status_code == 400
        assert resp.get_json()["success"] is False

    def test_apply_without_body(self, client):
        resp = client.post(f"/api/templates/{NAME}/apply")
        assert resp.status_code == 200
        assert resp.get_json()["success"] is True

    def test_validate_rejects_non_string(self, client):
        resp = client.post(f"/api/templates/{NAME}/validate", json={"content": 12})
        assert resp.status_code == 400

    def test_freshness(self, client):
        client.post(f"/api/templates/{NAME}/apply", json={})
        single = client.get(f"/api/templates/{NAME}/freshness").get_json()
        everything = client.get("/api/templates/freshness").get_json()
        assert single["freshness"]["isCached"] is True
        assert everything["freshness"]["jp_tax_strategy"]["isCached"] is False

    def test_check_updates_and_status(self, client):
        data = client.post("/api/templates/check-updates").get_json()
        assert data["updates"][NAME]["reloaded"] is True
        status = client.get("/api/templates/status").get_json()
        assert NAME in status["status"]["cachedTemplates"]

    def test_clear_cache(self, client):
        client.post("/api/templates/check-updates")
        one = client.delete(f"/api/templates/{NAME}/cache").get_json()
        rest = client.delete("/api/templates/cache").get_json()
        assert one["removed"] == [NAME]
        assert rest["removed"] == ["jp_tax_strategy"]


class TestUninitialized:
    def test_returns_500(self, monkeypatch):
        monkeypatch.setattr(flask_interface, "orchestrator", None)
        app = Flask(__name__)
        app.register_blueprint(template_bp, url_prefix="/api")
        resp = app.test_client().get("/api/templates/status")
        assert resp.status_code == 500
        assert resp.get_json()["success"] is False
