"""Request-id stamping on log records and uvicorn startup options."""
import logging

import run
from medicare_api.core.config import settings
from medicare_api.core.logging import RequestIDFilter, request_id_var


def make_record(**extra):
    record = logging.LogRecord("medicare", logging.INFO, __file__, 1, "hello", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_filter_uses_current_request_id():
    token = request_id_var.set("req-42")
    try:
        record = make_record()
        RequestIDFilter().filter(record)
    finally:
        request_id_var.reset(token)
    assert record.request_id == "req-42"


def test_filter_defaults_outside_a_request():
    record = make_record()
    RequestIDFilter().filter(record)
    assert record.request_id == "N/A"


def test_filter_keeps_explicit_request_id():
    record = make_record(request_id="given")
    RequestIDFilter().filter(record)
    assert record.request_id == "given"


def test_responses_carry_request_id_header(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.headers["X-Request-ID"]


def test_uvicorn_options_debug_reloads_single_process(monkeypatch):
    monkeypatch.setattr(settings, "DEBUG", True)
    options = run.uvicorn_options()
    assert options["app"] == "medicare_api.main:app"
    assert options["reload"] is True
    assert "workers" not in options


def test_uvicorn_options_production_uses_workers(monkeypatch):
    monkeypatch.setattr(settings, "DEBUG", False)
    monkeypatch.setattr(settings, "WORKERS", 3)
    options = run.uvicorn_options()
    assert options["workers"] == 3
    assert "reload" not in options
