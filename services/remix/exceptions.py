"""
Where: services/remix/exceptions.py
What: Exception handler registration for stage pipeline hosts.
Why: Keep error rendering setup isolated from stage and route concerns.
"""

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import (
    StageError,
    global_exception_handler,
    http_exception_handler,
    stage_exception_handler,
)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Exception, global_exception_handler)  # ty: ignore[invalid-argument-type]  # Starlette type stubs incomplete
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # ty: ignore[invalid-argument-type]  # Starlette type stubs incomplete
    app.add_exception_handler(StageError, stage_exception_handler)  # ty: ignore[invalid-argument-type]  # Starlette type stubs incomplete
