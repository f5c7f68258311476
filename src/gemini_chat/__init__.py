"""Async client for Gemini multimodal generation and chat."""

import logging

from gemini_chat._version import __version__
from gemini_chat.chat import ChatSession
from gemini_chat.config import RequestOptions
from gemini_chat.core.conversion import image_part, jpeg_part
from gemini_chat.core.generation import (
    BlockThreshold,
    CodeExecution,
    FunctionCallingConfig,
    FunctionDeclaration,
    GenerationConfig,
    HarmCategory,
    SafetySetting,
    Tool,
    ToolConfig,
)
from gemini_chat.core.types import (
    BlockReason,
    Candidate,
    CitationMetadata,
    CitationSource,
    CodeExecutionResultPart,
    CountTokensResponse,
    DataPart,
    ExecutableCodePart,
    FileDataPart,
    FinishReason,
    FunctionCallPart,
    FunctionResponsePart,
    GenerateContentResponse,
    ModelContent,
    Part,
    PromptFeedback,
    SafetyRating,
    TextPart,
    UsageMetadata,
    with_default_role,
)
from gemini_chat.exceptions import (
    CountTokensError,
    GenerateContentError,
    GenerativeAIError,
    ImageConversionError,
    InternalError,
    InvalidAPIKeyError,
    PromptBlockedError,
    PromptImageContentError,
    ResponseStoppedEarlyError,
    UnsupportedUserLocationError,
    ValidationError,
)
from gemini_chat.model import GenerativeModel
from gemini_chat.streaming import ResponseStream, StreamAggregator, aggregate_responses
from gemini_chat.telemetry import TelemetryContext, TelemetryReporter

# Set up a null handler for the library's root logger.
# This prevents 'No handler found' errors if the consuming app has no logging configured.
logging.getLogger(__name__).addHandler(logging.NullHandler())


def configure_logging(level: int | str = "INFO", httpx_level: int | str = "WARNING") -> None:
    """Set the level of the package logger and of httpx's logger.

    Handlers are left to the application.
    """
    logging.getLogger(__name__).setLevel(level)
    logging.getLogger("httpx").setLevel(httpx_level)


# Public API
__all__ = [  # noqa: RUF022
    # Entry points
    "GenerativeModel",
    "ChatSession",
    "ResponseStream",
    "RequestOptions",
    # Content
    "ModelContent",
    "Part",
    "TextPart",
    "DataPart",
    "FileDataPart",
    "FunctionCallPart",
    "FunctionResponsePart",
    "ExecutableCodePart",
    "CodeExecutionResultPart",
    "with_default_role",
    "image_part",
    "jpeg_part",
    # Responses
    "GenerateContentResponse",
    "Candidate",
    "FinishReason",
    "BlockReason",
    "PromptFeedback",
    "SafetyRating",
    "CitationMetadata",
    "CitationSource",
    "UsageMetadata",
    "CountTokensResponse",
    # Streaming
    "StreamAggregator",
    "aggregate_responses",
    # Generation settings
    "GenerationConfig",
    "SafetySetting",
    "HarmCategory",
    "BlockThreshold",
    "Tool",
    "FunctionDeclaration",
    "CodeExecution",
    "ToolConfig",
    "FunctionCallingConfig",
    # Telemetry (extension points)
    "TelemetryContext",
    "TelemetryReporter",
    # Logging
    "configure_logging",
    # Exceptions
    "GenerativeAIError",
    "ValidationError",
    "ImageConversionError",
    "GenerateContentError",
    "InvalidAPIKeyError",
    "UnsupportedUserLocationError",
    "PromptBlockedError",
    "ResponseStoppedEarlyError",
    "PromptImageContentError",
    "InternalError",
    "CountTokensError",
    "__version__",
]
