"""
Stage Pipeline - Host Adapter

Runs an ordered chain of stages for one request and bridges it to
Starlette/FastAPI: Request -> StageRequest -> stages -> StageResponse -> Response.
"""

import json
import logging
from typing import Optional, Sequence
from urllib.parse import parse_qsl

from fastapi import HTTPException, Request, status
from fastapi.responses import Response
from starlette.routing import Route

from .config import config
from .core.exceptions import error_status
from .core.stages import Stage
from .models.context import StageRequest, StageResponse

logger = logging.getLogger("remix.pipeline")


class Continuation:
    """
    The `next` handed to a stage.

    next() advances the chain; next(error) hands the error to the host.
    Only the first call is honoured.
    """

    def __init__(self, stage_name: str):
        self.stage_name = stage_name
        self.called = False
        self.error: Optional[BaseException] = None

    def __call__(self, error: Optional[BaseException] = None) -> None:
        if self.called:
            logger.warning(
                f"Stage '{self.stage_name}' called next more than once; ignoring",
                extra={"stage": self.stage_name},
            )
            return
        self.called = True
        self.error = error


async def parse_body(request: Request) -> dict:
    """
    Parse a JSON object or url-encoded form body into a dict.

    Other content types, empty bodies and non-object JSON yield {}.
    """
    raw = await request.body()
    if not raw:
        return {}

    content_type = request.headers.get("content-type", "")
    if "json" in content_type:
        try:
            parsed = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed JSON body")
        return parsed if isinstance(parsed, dict) else {}

    if content_type.startswith("application/x-www-form-urlencoded"):
        return dict(parse_qsl(raw.decode("utf-8"), keep_blank_values=True))

    return {}


async def build_stage_request(request: Request) -> StageRequest:
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"

    return StageRequest(
        method=request.method,
        url=url,
        path=request.url.path,
        path_params=dict(request.path_params),
        query_params=dict(request.query_params),
        body=await parse_body(request),
        headers=dict(request.headers),
        state=request.scope.get("state") or {},
    )


def to_response(stage_response: StageResponse) -> Response:
    return Response(
        content=stage_response.body,
        status_code=stage_response.status_code,
        headers=stage_response.headers,
    )


class Pipeline:
    """
    Immutable ordered chain of stages.

    One instance is shared by every request on its route; all per-request
    state lives in the StageRequest/StageResponse pair.
    """

    def __init__(self, *stages: Stage, name: Optional[str] = None):
        if not stages:
            raise ValueError("Pipeline requires at least one stage")
        self._stages = tuple(stages)
        self.name = name or "pipeline"

    @property
    def stages(self) -> Sequence[Stage]:
        return self._stages

    async def execute(self, request: StageRequest) -> StageResponse:
        """
        Run the stages in order until one responds, fails, or stops advancing.

        Raises:
            The error forwarded by the failing stage, unchanged.
        """
        response = StageResponse()

        for stage in self._stages:
            stage_name = getattr(stage, "stage_name", getattr(stage, "__name__", repr(stage)))
            continuation = Continuation(stage_name)

            await stage(request, response, continuation)

            if continuation.error is not None:
                self._log_failure(stage_name, request, continuation.error)
                raise continuation.error

            if response.finished:
                return response

            if not continuation.called:
                logger.warning(
                    f"Stage '{stage_name}' neither responded nor advanced",
                    extra={"pipeline": self.name, "stage": stage_name, "path": request.path},
                )
                break

        response.set_status(status.HTTP_404_NOT_FOUND)
        response.set_header("content-type", "application/json")
        response.end(json.dumps({"message": config.NOT_FOUND_MESSAGE}))
        return response

    def _log_failure(self, stage_name: str, request: StageRequest, error: BaseException) -> None:
        status_code = error_status(error)
        extra = {
            "pipeline": self.name,
            "stage": stage_name,
            "method": request.method,
            "path": request.path,
            "status": status_code,
        }
        if status_code >= 500:
            logger.error(f"Stage '{stage_name}' failed: {error}", exc_info=error, extra=extra)
        else:
            logger.warning(f"Stage '{stage_name}' rejected request: {error}", extra=extra)

    async def handle(self, request: Request) -> Response:
        """Starlette endpoint running the pipeline for one request."""
        stage_request = await build_stage_request(request)
        stage_response = await self.execute(stage_request)
        return to_response(stage_response)

    def as_route(self, path: str, methods: Optional[Sequence[str]] = None) -> Route:
        return Route(path, self.handle, methods=list(methods) if methods else None, name=self.name)
