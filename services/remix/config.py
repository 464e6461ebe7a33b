"""
Remix pipeline configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from pydantic import Field
from services.common.core.config import BaseAppConfig


class RemixConfig(BaseAppConfig):
    """
    Configuration management for the stage pipeline host adapter.
    """

    LOG_CONFIG_PATH: str = Field(
        default="/app/config/remix_log.yaml", description="Logging dictConfig YAML path"
    )

    # Error rendering
    EXPOSE_ERROR_DETAIL: bool = Field(
        default=True, description="Include the full error message in error responses"
    )

    # Request handling
    REQUEST_ID_HEADER: str = Field(
        default="X-Request-Id", description="Header used to propagate the request id"
    )
    NOT_FOUND_MESSAGE: str = Field(
        default="Not Found", description="Body message when no stage wrote a response"
    )


# Load config as a singleton.
# pydantic-settings reads environment variables during instantiation.
try:
    config = RemixConfig()
except Exception as e:
    sys.stderr.write(f"Failed to load configuration: {e}\n")
    raise
