"""Per-model request options.

Options are passed explicitly; nothing here reads the environment.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gemini_chat.constants import (
    DEFAULT_API_VERSION,
    DEFAULT_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
)


class RequestOptions(BaseModel):
    """Options applied to every request a model sends."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    timeout: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT,
        description="Request timeout in seconds; expiry surfaces as a transport failure",
        gt=0,
    )

    api_version: str = Field(
        default=DEFAULT_API_VERSION,
        description="API version path segment, e.g. 'v1beta'",
        min_length=1,
    )

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Scheme and host of the API endpoint",
        min_length=1,
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so endpoint paths join cleanly."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {v!r}")
        return v.rstrip("/")

    @field_validator("api_version")
    @classmethod
    def strip_slashes(cls, v: str) -> str:
        return v.strip("/")
