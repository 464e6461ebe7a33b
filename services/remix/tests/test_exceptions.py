"""
Where: services/remix/tests/test_exceptions.py
What: Tests for the stage error taxonomy and its HTTP rendering.
Why: Errors must carry stage, URL, method and a mappable status.
"""

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from services.remix.core import exceptions as core_exceptions
from services.remix.core.exceptions import (
    DependencyUnmetError,
    DependsOnUnmetError,
    StageError,
    ValidationFailedError,
    describe_dependency,
    error_status,
)
from services.remix.exceptions import register_exception_handlers


def load_user(data):
    return {}


class TestTaxonomy:
    def test_dependency_unmet(self):
        error = DependencyUnmetError("user", "user_id", "/users?x=1", "GET")

        assert isinstance(error, StageError)
        assert error.status == 400
        assert error.stage == "user"
        assert error.dependency == "user_id"
        assert error.url == "/users?x=1"
        assert error.method == "GET"
        assert str(error) == "Stage 'user' dependency 'user_id' not met on 'GET /users?x=1'"

    def test_depends_on_unmet(self):
        error = DependsOnUnmetError("orders", load_user, "/orders", "POST")

        assert error.status == 500
        assert error.dependency is load_user
        assert str(error) == (
            "Stage 'orders' expects 'load_user' to be executed "
            "before it can be executed for 'POST /orders'"
        )

    def test_validation_failed_without_message(self):
        error = ValidationFailedError("adult", "/people", "PUT")

        assert error.status == 400
        assert error.message == ""
        assert str(error) == "Validation error: 'adult' on 'PUT /people'. "


class TestErrorStatus:
    def test_uses_status_attribute(self):
        assert error_status(DependencyUnmetError("s", "f", "/", "GET")) == 400

    def test_uses_status_code_attribute(self):
        assert error_status(HTTPException(status_code=404)) == 404

    def test_defaults_to_server_error(self):
        assert error_status(RuntimeError("boom")) == 500

    def test_ignores_non_error_status(self):
        class Odd(Exception):
            status = "teapot"
            status_code = 200

        assert error_status(Odd()) == 500


def test_describe_dependency():
    assert describe_dependency("user_id") == "user_id"
    assert describe_dependency(load_user) == "load_user"
    assert describe_dependency(42) == "42"


def _client() -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)

    class Conflict(Exception):
        status = 409

    @app.get("/stage")
    async def stage_failure():
        raise ValidationFailedError("adult", "/stage", "GET", "too young")

    @app.get("/conflict")
    async def conflict():
        raise Conflict("already exists")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("boom")

    @app.get("/teapot")
    async def teapot():
        raise HTTPException(status_code=418, detail="short and stout")

    return TestClient(app, raise_server_exceptions=False)


def test_stage_error_rendering():
    response = _client().get("/stage")

    assert response.status_code == 400
    assert response.json() == {
        "message": "ValidationFailedError",
        "stage": "adult",
        "detail": "Validation error: 'adult' on 'GET /stage'. too young",
    }


def test_stage_error_rendering_hides_detail(monkeypatch):
    monkeypatch.setattr(core_exceptions.config, "EXPOSE_ERROR_DETAIL", False)

    response = _client().get("/stage")

    assert response.json() == {"message": "ValidationFailedError", "stage": "adult"}


def test_user_error_keeps_its_status():
    response = _client().get("/conflict")

    assert response.status_code == 409
    assert response.json()["message"] == "Conflict"


def test_unknown_error_is_internal_server_error():
    response = _client().get("/boom")

    assert response.status_code == 500
    assert response.json() == {"message": "Internal Server Error", "detail": "boom"}


def test_http_exception_rendering():
    response = _client().get("/teapot")

    assert response.status_code == 418
    assert response.json() == {"message": "short and stout"}
