"""
Custom exception classes.

Represent unmet stage dependencies and failed stage validations, plus the
FastAPI handlers that render them.
"""

import logging
from typing import Any, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import config

logger = logging.getLogger("remix.exceptions")


def describe_dependency(dependency: Any) -> str:
    """Readable name for a field name or a computation reference."""
    if isinstance(dependency, str):
        return dependency
    return getattr(dependency, "__qualname__", None) or getattr(
        dependency, "__name__", None
    ) or repr(dependency)


class StageError(Exception):
    """Base exception class for stage failures."""

    status: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, stage: str, url: Optional[str], method: Optional[str]):
        self.stage = stage
        self.url = url
        self.method = method
        super().__init__(message)


class DependencyUnmetError(StageError):
    """Raised when a required field is absent from the merged view."""

    status = status.HTTP_400_BAD_REQUEST

    def __init__(self, stage: str, dependency: str, url: Optional[str], method: Optional[str]):
        self.dependency = dependency
        super().__init__(
            f"Stage '{stage}' dependency '{dependency}' not met on '{method} {url}'",
            stage,
            url,
            method,
        )


class DependsOnUnmetError(StageError):
    """Raised when a computation a stage depends on has not run for the request."""

    status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, stage: str, dependency: Any, url: Optional[str], method: Optional[str]):
        self.dependency = dependency
        super().__init__(
            f"Stage '{stage}' expects '{describe_dependency(dependency)}' to be executed "
            f"before it can be executed for '{method} {url}'",
            stage,
            url,
            method,
        )


class ValidationFailedError(StageError):
    """Raised when a validation stage predicate returns a falsy value."""

    status = status.HTTP_400_BAD_REQUEST

    def __init__(
        self, stage: str, url: Optional[str], method: Optional[str], message: Optional[str] = ""
    ):
        self.message = message or ""
        super().__init__(
            f"Validation error: '{stage}' on '{method} {url}'. {self.message}",
            stage,
            url,
            method,
        )


def error_status(exc: BaseException) -> int:
    """Severity of any exception: its status, else its status_code, else 500."""
    for attr in ("status", "status_code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool) and value >= 400:
            return value
    return status.HTTP_500_INTERNAL_SERVER_ERROR


# ===========================================
# Exception Handlers
# ===========================================


async def stage_exception_handler(request: Request, exc: StageError):
    """
    Handler for the stage error taxonomy.
    """
    content = {"message": type(exc).__name__, "stage": exc.stage}
    dependency = getattr(exc, "dependency", None)
    if dependency is not None:
        content["dependency"] = describe_dependency(dependency)
    if config.EXPOSE_ERROR_DETAIL:
        content["detail"] = str(exc)

    return JSONResponse(status_code=exc.status, content=content)


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unhandled exceptions.
    """
    status_code = error_status(exc)
    logger.error(
        f"Global exception handler caught: {exc}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
            "status": status_code,
        },
    )

    content = {"message": "Internal Server Error" if status_code >= 500 else type(exc).__name__}
    if config.EXPOSE_ERROR_DETAIL:
        content["detail"] = str(exc)
    return JSONResponse(status_code=status_code, content=content)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for HTTPException.
    """
    return JSONResponse(
        status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers
    )
