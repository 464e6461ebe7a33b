"""
Stage context models.

Encapsulates the per-request data a stage pipeline reads and writes.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field

# Reserved results key for stages registered without a name.
UNNAMED_STAGE = "nameless"


class StageRequest(BaseModel):
    """
    Mutable context representing one inbound request.

    This model decouples the stages from Starlette's Request object.
    `results` and `executed` stay None until the first stage allocates them.
    """

    method: str
    url: str
    path: str
    path_params: Dict[str, Any] = Field(default_factory=dict)
    query_params: Dict[str, Any] = Field(default_factory=dict)
    body: Optional[Dict[str, Any]] = Field(default_factory=dict)
    headers: Dict[str, str] = Field(default_factory=dict)
    state: Dict[str, Any] = Field(default_factory=dict)
    results: Optional[Dict[str, Any]] = None
    # Keyed by the computation object itself.
    executed: Optional[Dict[Any, bool]] = None


class StageResponse(BaseModel):
    """
    Response under construction by the pipeline.

    Stages write through set_status/set_header/end; the host converts the
    finished response into a transport response.
    """

    status_code: int = 200
    headers: Dict[str, str] = Field(default_factory=dict)
    body: bytes = b""
    finished: bool = False

    def set_status(self, status_code: int) -> "StageResponse":
        self.status_code = status_code
        return self

    def set_header(self, name: str, value: Any) -> "StageResponse":
        self.headers[name] = str(value)
        return self

    def end(self, body: Union[str, bytes, None] = None) -> None:
        if self.finished:
            raise RuntimeError("Response has already been written")
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.body = body or b""
        self.finished = True

    @property
    def headers_sent(self) -> bool:
        """True once a stage has written the final body."""
        return self.finished
