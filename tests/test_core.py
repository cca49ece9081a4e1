from __future__ import annotations
import json
import logging

import pytest

from app import create_app
from blueprints.core.routes import JSONFormatter
from blueprints.schedule.engine import ScheduleConfigError


def test_health_ok():
    app = create_app("dev")
    with app.test_client() as c:
        rv = c.get("/health")
        assert rv.status_code == 200
        data = rv.get_json()
        assert data["status"] == "ok"
        assert data["ts"].endswith("Z")


def test_csrf_endpoint_sets_token():
    app = create_app("dev")
    with app.test_client() as c:
        rv = c.get("/api/v1/csrf")
        assert rv.status_code == 200
        token = rv.get_json()["csrf"]
        assert token
        assert any(h.startswith("csrf_token=") for h in rv.headers.getlist("Set-Cookie"))


def test_json_formatter_keeps_request_fields():
    record = logging.LogRecord("app", logging.INFO, __file__, 1, "request handled", None, None)
    record.event = "http_request"
    record.status = 200
    out = json.loads(JSONFormatter().format(record))
    assert out["msg"] == "request handled"
    assert out["event"] == "http_request"
    assert out["status"] == 200
    assert "path" not in out


def test_bad_default_week_start_fails_at_startup(monkeypatch):
    from config import DevConfig
    monkeypatch.setattr(DevConfig, "DEFAULT_WEEK_START_DAY", 0)
    with pytest.raises(ScheduleConfigError):
        create_app("dev")
