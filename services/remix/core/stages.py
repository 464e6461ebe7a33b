"""
Stage wrappers.

Each factory returns an async stage `stage(request, response, next)` that
builds the merged view, checks the declared dependencies, runs the user
computation with the merged view and then either stores the result, writes
the response, or advances. Failures are forwarded through `next(error)` and
never raised past the stage.
"""

import inspect
import json
import logging
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Optional, Union

from ..models.context import UNNAMED_STAGE, StageRequest, StageResponse
from ..models.response import ResponseDescriptor
from .aggregator import ensure_context, get_data
from .dependencies import freeze_dependencies, validate_dependencies
from .exceptions import ValidationFailedError

logger = logging.getLogger("remix.stages")

RESPOND_STAGE = "respond"

Next = Callable[..., None]
Stage = Callable[[StageRequest, StageResponse, Next], Awaitable[None]]
Computation = Callable[[dict], Any]


async def invoke(fn: Computation, data: dict) -> Any:
    """Call a plain or async computation and return its settled result."""
    result = fn(data)
    if inspect.isawaitable(result):
        result = await result
    return result


def serialize_body(body: Any) -> Union[str, bytes]:
    if isinstance(body, (str, bytes)):
        return body
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False)


def write_response(response: StageResponse, descriptor: Any) -> None:
    """Write status (default 200), headers and serialized body, ending the response."""
    if not isinstance(descriptor, ResponseDescriptor):
        descriptor = ResponseDescriptor.model_validate(descriptor)

    response.set_status(descriptor.status or 200)
    for header, value in (descriptor.headers or {}).items():
        response.set_header(header, value)

    # An omitted body sends nothing; an explicit None is serialized as null.
    if "body" not in descriptor.model_fields_set:
        response.end()
        return
    response.end(serialize_body(descriptor.body))


def label(stage: Stage, name: str) -> Stage:
    """Attach the stage name used in pipeline logs."""
    stage.stage_name = name
    return stage


def named_compute(name: str, fn: Computation, dependencies: Any = None) -> Stage:
    """
    Stage storing fn's result under `name`.

    Repeated runs of the same name within one request merge mapping results
    into the stored one instead of replacing it.
    """
    dependencies = freeze_dependencies(dependencies)

    async def stage(request: StageRequest, response: StageResponse, next: Next) -> None:
        ensure_context(request)

        try:
            data = get_data(request)
            validate_dependencies(name, data, dependencies)
            result = await invoke(fn, data)

            request.executed[fn] = True

            previous = request.results.get(name)
            if isinstance(previous, dict) and isinstance(result, Mapping):
                previous.update(result)
            elif previous is None or result is not None:
                request.results[name] = result
        except Exception as e:
            next(e)
            return

        logger.debug(f"Stage '{name}' stored result", extra={"stage": name, "path": request.path})
        next()

    return label(stage, name)


def compute(
    name: Union[str, Computation],
    fn: Any = None,
    dependencies: Any = None,
) -> Stage:
    """
    Register a computing stage.

    compute("user", load_user, ["user_id"]) stores under "user";
    compute(load_flags, ["user"]) stores under the unnamed key, so its fields
    are merged straight into the view of later stages.
    """
    if isinstance(name, str):
        return named_compute(name, fn, dependencies)

    # Unnamed form: compute(fn, dependencies) or compute(fn, dependencies=...).
    if fn is not None and dependencies is not None:
        raise TypeError("compute(fn, ...) takes dependencies either positionally or by keyword, not both")
    return named_compute(UNNAMED_STAGE, name, fn if fn is not None else dependencies)


def respond(fn: Computation, dependencies: Any = None) -> Stage:
    """Terminal stage writing the response descriptor returned by fn."""
    dependencies = freeze_dependencies(dependencies)

    async def stage(request: StageRequest, response: StageResponse, next: Next) -> None:
        ensure_context(request)

        try:
            data = get_data(request)
            validate_dependencies(RESPOND_STAGE, data, dependencies)
            descriptor = await invoke(fn, data)
            write_response(response, descriptor)
        except Exception as e:
            next(e)

    return label(stage, RESPOND_STAGE)


def conditional_respond(fn: Computation) -> Stage:
    """
    Respond only when fn returns a truthy descriptor; otherwise fall through.

    No dependency validation is performed.
    """

    async def stage(request: StageRequest, response: StageResponse, next: Next) -> None:
        ensure_context(request)

        try:
            data = get_data(request)
            descriptor = await invoke(fn, data)
            if not descriptor:
                next()
                return
            write_response(response, descriptor)
        except Exception as e:
            next(e)

    return label(stage, "conditional_respond")


def validation(name: str, fn: Computation, message: Optional[str] = None) -> Stage:
    """Stage failing with ValidationFailedError when the predicate is falsy."""

    async def stage(request: StageRequest, response: StageResponse, next: Next) -> None:
        ensure_context(request)

        try:
            data = get_data(request)
            if not await invoke(fn, data):
                raise ValidationFailedError(name, request.url, request.method, message)
        except Exception as e:
            next(e)
            return

        next()

    return label(stage, name)
