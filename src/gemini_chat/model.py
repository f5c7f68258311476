"""
Generative model client

`GenerativeModel` is the main entry point. It builds requests, sends them
through the HTTP service and applies the response checks shared by unary and
streamed generation:

- a prompt with a block reason raises `PromptBlockedError`;
- a first candidate that finished for any reason other than STOP raises
  `ResponseStoppedEarlyError`.

Every other failure is classified by the error handler before it reaches the
caller, so callers only ever see `GenerateContentError` subclasses (or
`CountTokensError` from `count_tokens`).
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Sequence
from contextlib import aclosing
import logging
from types import TracebackType
from typing import TYPE_CHECKING, Any, Self

from gemini_chat.client.error_handler import classify
from gemini_chat.client.request_builder import (
    GenerateContentRequest,
    build_count_tokens_request,
    build_generate_content_request,
)
from gemini_chat.client.service import GenerativeAIService
from gemini_chat.config import RequestOptions
from gemini_chat.constants import (
    T_COUNT_TOKENS,
    T_GENERATE_CONTENT,
    T_GENERATE_CONTENT_STREAM,
    T_STREAM_CHUNKS,
)
from gemini_chat.core.conversion import to_contents
from gemini_chat.core.types import FinishReason, GenerateContentResponse, ModelContent
from gemini_chat.exceptions import (
    CountTokensError,
    GenerateContentError,
    PromptBlockedError,
    ResponseStoppedEarlyError,
)
from gemini_chat.streaming import ResponseStream
from gemini_chat.telemetry import TelemetryContext

if TYPE_CHECKING:
    import httpx

    from gemini_chat.chat import ChatSession
    from gemini_chat.core.generation import GenerationConfig, SafetySetting, Tool, ToolConfig
    from gemini_chat.core.types import CountTokensResponse
    from gemini_chat.telemetry import TelemetryContextProtocol

log = logging.getLogger(__name__)


def check_response(response: GenerateContentResponse) -> GenerateContentResponse:
    """Raise if a decoded response represents a blocked or truncated turn."""
    feedback = response.prompt_feedback
    if feedback is not None and feedback.block_reason is not None:
        log.warning("Prompt was blocked: %s", feedback.block_reason)
        raise PromptBlockedError(response)
    if response.candidates:
        reason = response.candidates[0].finish_reason
        if reason is not None and reason is not FinishReason.STOP:
            log.warning("Response stopped early: %s", reason)
            raise ResponseStoppedEarlyError(reason, response)
    return response


class GenerativeModel:
    """A remote generative model addressed by name.

    Args:
        name: Model name, e.g. "gemini-1.5-flash". A "models/" prefix is
            added unless the name already contains a slash.
        api_key: API key sent with every request.
        generation_config: Sampling and output settings.
        safety_settings: Per-category blocking thresholds.
        tools: Function declarations or code execution the model may use.
        tool_config: How the model should use `tools`.
        system_instruction: Text (or content) steering the model's behavior.
        request_options: Timeout, API version and base URL.
        http_client: Optional `httpx.AsyncClient` to send requests with. A
            client passed here is not closed by `aclose()`.
        telemetry: Optional telemetry context; defaults to the no-op one.

    Raises:
        ValidationError: If `api_key` is empty.
    """

    def __init__(
        self,
        name: str,
        api_key: str,
        *,
        generation_config: GenerationConfig | None = None,
        safety_settings: Sequence[SafetySetting] | None = None,
        tools: Sequence[Tool] | None = None,
        tool_config: ToolConfig | None = None,
        system_instruction: str | Sequence[str] | ModelContent | None = None,
        request_options: RequestOptions | None = None,
        http_client: httpx.AsyncClient | None = None,
        telemetry: TelemetryContextProtocol | None = None,
    ):
        self.model_name = name
        self.generation_config = generation_config
        self.safety_settings = tuple(safety_settings) if safety_settings is not None else None
        self.tools = tuple(tools) if tools is not None else None
        self.tool_config = tool_config
        self.system_instruction = system_instruction
        self.request_options = request_options or RequestOptions()
        self._service = GenerativeAIService(api_key, http_client=http_client)
        self._tele = telemetry if telemetry is not None else TelemetryContext()

    def __repr__(self) -> str:
        return f"GenerativeModel(name={self.model_name!r})"

    def _request_kwargs(self) -> dict[str, Any]:
        return {
            "options": self.request_options,
            "generation_config": self.generation_config,
            "safety_settings": self.safety_settings,
            "tools": self.tools,
            "tool_config": self.tool_config,
            "system_instruction": self.system_instruction,
        }

    def _build(self, contents: Any, *, is_streaming: bool) -> GenerateContentRequest:
        return build_generate_content_request(
            self.model_name,
            to_contents(contents),
            is_streaming=is_streaming,
            **self._request_kwargs(),
        )

    async def generate_content(self, contents: Any) -> GenerateContentResponse:
        """Generate a response in one round trip.

        `contents` may be a string, a part, an image, raw image bytes, a
        `ModelContent`, or a list of either parts or contents.

        Raises:
            GenerateContentError: For every failure, classified.
        """
        with self._tele(T_GENERATE_CONTENT, model=self.model_name):
            try:
                request = self._build(contents, is_streaming=False)
                response = await self._service.load_request(request)
            except GenerateContentError:
                raise
            except Exception as e:
                raise classify(e) from e
            log.debug("Response: %r", response)
            return check_response(response)

    def generate_content_stream(self, contents: Any) -> ResponseStream:
        """Start a streamed generation.

        Nothing is sent until the returned stream is first iterated. Chunks are
        checked as they arrive, and the first failure ends the stream.
        """
        return ResponseStream(self._stream(contents))

    async def _stream(self, contents: Any) -> AsyncGenerator[GenerateContentResponse, None]:
        try:
            request = self._build(contents, is_streaming=True)
            async with aclosing(self._service.load_request_stream(request)) as chunks:
                while True:
                    with self._tele(T_GENERATE_CONTENT_STREAM, model=self.model_name):
                        try:
                            response = await anext(chunks)
                        except StopAsyncIteration:
                            break
                    self._tele.count(T_STREAM_CHUNKS)
                    yield check_response(response)
        except GenerateContentError:
            raise
        except Exception as e:
            raise classify(e) from e

    async def count_tokens(self, contents: Any) -> CountTokensResponse:
        """Count the tokens `contents` would use as a prompt.

        Raises:
            CountTokensError: For every failure.
        """
        with self._tele(T_COUNT_TOKENS, model=self.model_name):
            try:
                request = build_count_tokens_request(
                    self.model_name, to_contents(contents), **self._request_kwargs()
                )
                return await self._service.load_request(request)
            except Exception as e:
                log.error("Token counting failed: %s", e)
                raise CountTokensError(e) from e

    def start_chat(self, history: Sequence[ModelContent] | None = None) -> ChatSession:
        """Start a multi-turn conversation, optionally seeded with `history`."""
        from gemini_chat.chat import ChatSession

        return ChatSession(self, history)

    async def aclose(self) -> None:
        await self._service.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
