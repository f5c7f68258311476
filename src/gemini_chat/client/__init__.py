"""
Supporting components for the Gemini chat client

The main entry point is `gemini_chat.GenerativeModel`. This package holds the
pieces it is built from: request construction, the HTTP service, SSE parsing
and error classification.
"""

from .error_handler import FailureSignal, classify, classify_failure
from .request_builder import (
    CountTokensRequest,
    GenerateContentRequest,
    build_count_tokens_request,
    build_generate_content_request,
)
from .service import GenerativeAIService

__all__ = [
    # Requests
    "GenerateContentRequest",
    "CountTokensRequest",
    "build_generate_content_request",
    "build_count_tokens_request",
    # Transport
    "GenerativeAIService",
    # Errors
    "FailureSignal",
    "classify",
    "classify_failure",
]
