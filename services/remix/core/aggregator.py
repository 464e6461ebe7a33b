"""
Merged view aggregation.

Builds the per-invocation lookup table every stage computes against.
"""

from typing import Any, Dict

from ..models.context import UNNAMED_STAGE, StageRequest


def ensure_context(request: StageRequest) -> None:
    """Allocate result storage and the execution registry if absent."""
    if request.results is None:
        request.results = {}
    if request.executed is None:
        request.executed = {}


def get_request_fields(request: StageRequest) -> Dict[str, Any]:
    return {"url": request.url, "method": request.method, "path": request.path}


def get_data(request: StageRequest) -> Dict[str, Any]:
    """
    Overlay everything known about the request into a fresh dict.

    Later sources override earlier ones: path params, query params, body,
    named stage results, unnamed stage results, request fields, headers,
    execution registry.
    """
    ensure_context(request)

    data: Dict[str, Any] = {}
    data.update(request.path_params)
    data.update(request.query_params)
    data.update(request.body or {})
    data.update(
        (name, result) for name, result in request.results.items() if name != UNNAMED_STAGE
    )
    data.update(request.results.get(UNNAMED_STAGE) or {})
    data.update(get_request_fields(request))
    data.update(request.headers)
    data.update(request.executed)
    return data
