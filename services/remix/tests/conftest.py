import pytest

from services.remix.models.context import StageRequest, StageResponse
from services.remix.pipeline import Continuation


@pytest.fixture
def make_request():
    """Factory for StageRequest with sensible defaults."""

    def _make(**overrides) -> StageRequest:
        fields = {"method": "POST", "url": "/orders?debug=1", "path": "/orders"}
        fields.update(overrides)
        return StageRequest(**fields)

    return _make


@pytest.fixture
def run_stage():
    """Run a single stage and return (response, continuation)."""

    async def _run(stage, request, response=None):
        response = response or StageResponse()
        continuation = Continuation(getattr(stage, "stage_name", "stage"))
        await stage(request, response, continuation)
        return response, continuation

    return _run
