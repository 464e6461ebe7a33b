"""
Where: services/remix/tests/test_middleware.py
What: Tests for request id propagation and access logging.
Why: Pipeline logs are correlated through the request id.
"""

import logging
import uuid

from fastapi import FastAPI
from fastapi.testclient import TestClient

from services.common.core import request_context
from services.remix.core.stages import respond
from services.remix.middleware import request_id_middleware
from services.remix.pipeline import Pipeline


def _client(seen: list) -> TestClient:
    app = FastAPI()
    app.middleware("http")(request_id_middleware)

    def capture(data):
        seen.append(request_context.get_request_id())
        return {"body": "ok"}

    app.router.routes.append(Pipeline(respond(capture)).as_route("/ping", ["GET"]))
    return TestClient(app)


def test_generates_request_id():
    seen = []

    response = _client(seen).get("/ping")

    req_id = response.headers["X-Request-Id"]
    uuid.UUID(req_id)
    assert seen == [req_id]


def test_reuses_incoming_request_id():
    seen = []

    response = _client(seen).get("/ping", headers={"X-Request-Id": "abc-123"})

    assert response.headers["X-Request-Id"] == "abc-123"
    assert seen == ["abc-123"]


def test_blank_incoming_request_id_is_replaced():
    seen = []

    response = _client(seen).get("/ping", headers={"X-Request-Id": "   "})

    uuid.UUID(response.headers["X-Request-Id"])


def test_access_log_line(caplog):
    seen = []

    with caplog.at_level(logging.INFO, logger="remix.middleware"):
        _client(seen).get("/ping?x=1")

    records = [r for r in caplog.records if r.name == "remix.middleware"]
    assert records[-1].getMessage() == "GET /ping 200"
    assert records[-1].status == 200
    assert records[-1].path == "/ping"
    assert records[-1].request_id == seen[0]
