"""
Core logic package.

Provides the merged view, dependency validation, stage wrappers and the
context bridging stages.
"""

from .aggregator import ensure_context, get_data, get_request_fields
from .bridging import import_context, promote_fields
from .dependencies import (
    expand_dependencies,
    filter_missing_dependencies,
    filter_missing_requires,
    freeze_dependencies,
    validate_dependencies,
)
from .exceptions import (
    DependencyUnmetError,
    DependsOnUnmetError,
    StageError,
    ValidationFailedError,
    error_status,
)
from .stages import compute, conditional_respond, named_compute, respond, validation

__all__ = [
    "ensure_context",
    "get_data",
    "get_request_fields",
    "import_context",
    "promote_fields",
    "expand_dependencies",
    "filter_missing_dependencies",
    "filter_missing_requires",
    "freeze_dependencies",
    "validate_dependencies",
    "DependencyUnmetError",
    "DependsOnUnmetError",
    "StageError",
    "ValidationFailedError",
    "error_status",
    "compute",
    "conditional_respond",
    "named_compute",
    "respond",
    "validation",
]
