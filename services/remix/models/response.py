"""
Response descriptor models.

Standardizes what responding stages return.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class ResponseDescriptor(BaseModel):
    """
    Status, headers and body produced by a responding stage.

    Structured bodies are serialized as JSON; strings and bytes are sent verbatim.
    An omitted body sends nothing, while an explicit None is sent as null.
    """

    model_config = ConfigDict(extra="ignore")

    status: Optional[int] = None
    headers: Optional[Dict[str, Any]] = None
    body: Any = None
