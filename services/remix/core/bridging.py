"""
Context bridging utilities.

Move data between stage results and the parts of the request that code
outside the stage protocol reads or writes.
"""

from typing import Iterable

from ..models.context import StageRequest, StageResponse
from .aggregator import ensure_context
from .stages import Next, Stage, label


def promote_fields(name: str, fields: Iterable[str]) -> Stage:
    """
    Copy fields of stage `name`'s result into the request body.

    The stage is assumed to have run; missing results or fields copy None.
    """
    fields = tuple(fields)

    async def stage(request: StageRequest, response: StageResponse, next: Next) -> None:
        ensure_context(request)
        if request.body is None:
            request.body = {}

        target = request.results.get(name) or {}
        try:
            for field in fields:
                request.body[field] = target.get(field)
        except Exception as e:
            next(e)
            return

        next()

    return label(stage, f"promote:{name}")


def import_context(name: str) -> Stage:
    """Copy the externally populated request state entry `name` into results[name]."""

    async def stage(request: StageRequest, response: StageResponse, next: Next) -> None:
        ensure_context(request)
        request.results[name] = request.state.get(name)
        next()

    return label(stage, f"import:{name}")
