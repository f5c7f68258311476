"""Exceptions raised by the Gemini chat client.

Three layers live here:

- Input errors raised before anything is sent (`ValidationError`,
  `ImageConversionError`).
- Low-level failures produced by the HTTP service (`TransportError`,
  `RPCError`, `ResponseDecodingError`). These never reach callers of the
  public operations directly; the error handler classifies them first.
- The public taxonomy: `GenerateContentError` and its subclasses, and
  `CountTokensError`.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from gemini_chat.core.types import FinishReason, GenerateContentResponse

_API_KEY_PATTERN = re.compile(r"api[\s_-]?key", re.IGNORECASE)
_LOCATION_PATTERN = re.compile(r"\blocation\b", re.IGNORECASE)
_API_KEY_REASONS = frozenset({"API_KEY_INVALID", "API_KEY_EXPIRED"})


class GenerativeAIError(Exception):
    """Base exception for every error raised by gemini_chat"""


# --- Input errors ---


class ValidationError(GenerativeAIError, ValueError):
    """Raised when caller input cannot form a valid request"""


class ImageConversionError(GenerativeAIError):
    """Raised when binary input cannot be interpreted as the declared image"""

    INVALID_UNDERLYING_IMAGE = "invalid_underlying_image"
    MIME_TYPE_MISMATCH = "mime_type_mismatch"
    COULD_NOT_CONVERT_TO_JPEG = "could_not_convert_to_jpeg"

    def __init__(self, message: str, *, reason: str = INVALID_UNDERLYING_IMAGE):
        super().__init__(message)
        self.reason = reason


# --- Transport and protocol failures ---


class TransportError(GenerativeAIError):
    """Raised when the request never produced a usable HTTP response"""

    def __init__(self, description: str):
        super().__init__(description)
        self.description = description


class ResponseDecodingError(GenerativeAIError):
    """Raised when a response payload cannot be decoded"""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: bytes | str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RPCError(GenerativeAIError):
    """An error payload returned by the backend.

    Mirrors the `{"error": {"code", "message", "status", "details"}}` envelope.
    Recognition helpers match patterns rather than exact wording since the
    backend phrasing changes between versions and locales.
    """

    def __init__(
        self,
        *,
        code: int,
        message: str,
        status: str | None = None,
        details: tuple[dict[str, Any], ...] = (),
        http_status: int | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status = status
        self.details = details
        self.http_status = http_status

    def __repr__(self) -> str:
        return (
            f"RPCError(code={self.code!r}, status={self.status!r}, "
            f"message={self.message!r})"
        )

    def _detail_reasons(self) -> set[str]:
        return {
            str(detail["reason"])
            for detail in self.details
            if isinstance(detail, dict) and detail.get("reason")
        }

    def is_invalid_api_key_error(self) -> bool:
        """True when the backend rejected the request's API key."""
        if self._detail_reasons() & _API_KEY_REASONS:
            return True
        return any(
            _API_KEY_PATTERN.search(field)
            for field in (self.status or "", self.message or "")
        )

    def is_unsupported_user_location_error(self) -> bool:
        """True when the backend refused service for the caller's location."""
        return any(
            _LOCATION_PATTERN.search(field)
            for field in (self.status or "", self.message or "")
        )


# --- Public taxonomy ---


class GenerateContentError(GenerativeAIError):
    """Base for errors raised by content generation and chat sends"""


class InvalidAPIKeyError(GenerateContentError):
    """The backend rejected the API key"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedUserLocationError(GenerateContentError):
    """The API is not available in the caller's location"""

    def __init__(self, message: str = "User location is not supported for API use."):
        super().__init__(message)


class PromptBlockedError(GenerateContentError):
    """The prompt was blocked; `response.prompt_feedback` says why"""

    def __init__(self, response: GenerateContentResponse):
        reason = response.prompt_feedback.block_reason if response.prompt_feedback else None
        super().__init__(f"Prompt was blocked: {reason}")
        self.response = response


class ResponseStoppedEarlyError(GenerateContentError):
    """Generation ended for a reason other than a natural stop"""

    def __init__(self, reason: FinishReason, response: GenerateContentResponse):
        super().__init__(f"Response stopped early: {reason}")
        self.reason = reason
        self.response = response


class PromptImageContentError(GenerateContentError):
    """Caller-supplied image content could not be converted"""

    def __init__(self, underlying: ImageConversionError):
        super().__init__(f"Prompt image content could not be converted: {underlying}")
        self.underlying = underlying


class InternalError(GenerateContentError):
    """Any failure that does not fit a more specific category"""

    def __init__(self, underlying: BaseException):
        super().__init__(f"Internal error: {underlying}")
        self.underlying = underlying


class CountTokensError(GenerativeAIError):
    """Raised by `GenerativeModel.count_tokens` for every failure"""

    def __init__(self, underlying: BaseException):
        super().__init__(f"Token counting failed: {underlying}")
        self.underlying = underlying
