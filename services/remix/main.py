"""
Remix host application assembly.

Builds a FastAPI app serving stage pipelines with the shared exception
handlers, request id middleware and logging setup.
"""

import logging
from typing import Iterable, Optional

from fastapi import FastAPI
from starlette.routing import Route

from .core.logging_config import setup_logging
from .exceptions import register_exception_handlers
from .middleware import request_id_middleware

logger = logging.getLogger("remix.main")


def create_app(routes: Iterable[Route] = (), title: Optional[str] = None) -> FastAPI:
    """
    Create an app serving the given pipeline routes.

    Example:
        app = create_app([Pipeline(compute(...), respond(...)).as_route("/x", ["POST"])])
    """
    setup_logging()

    app = FastAPI(title=title or "Remix Pipeline Host")
    register_exception_handlers(app)
    app.middleware("http")(request_id_middleware)

    for route in routes:
        app.router.routes.append(route)
        logger.info(f"Mounted pipeline route {route.path}", extra={"methods": sorted(route.methods or [])})

    return app
