"""
Data model definitions package.

Aggregates Pydantic models for use in other modules.
"""

from .context import UNNAMED_STAGE, StageRequest, StageResponse
from .response import ResponseDescriptor

__all__ = [
    "UNNAMED_STAGE",
    "StageRequest",
    "StageResponse",
    "ResponseDescriptor",
]
