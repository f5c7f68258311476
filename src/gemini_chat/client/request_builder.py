"""
Request construction for generate and count-tokens calls

Builders are pure: they validate input, normalize the model name and produce
immutable request objects that the HTTP service knows how to send.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from ..config import RequestOptions
from ..constants import (
    COUNT_TOKENS_METHOD,
    GENERATE_CONTENT_METHOD,
    MODEL_RESOURCE_PREFIX,
    SSE_QUERY_PARAMS,
    STREAM_GENERATE_CONTENT_METHOD,
    SYSTEM_ROLE,
)
from ..core.codec import content_to_wire, decode_count_tokens_response, decode_generate_content_response
from ..core.generation import GenerationConfig, SafetySetting, Tool, ToolConfig
from ..core.types import CountTokensResponse, GenerateContentResponse, ModelContent, TextPart
from ..exceptions import ValidationError


def model_resource_name(name: str) -> str:
    """Return "models/<name>" unless `name` already contains a slash."""
    if not name or not name.strip():
        raise ValidationError("Model name must be a non-empty string")
    if "/" in name:
        return name
    return MODEL_RESOURCE_PREFIX + name


def system_instruction_content(
    instruction: str | Sequence[str] | ModelContent | None,
) -> ModelContent | None:
    """Normalize a system instruction into content with the "system" role."""
    if instruction is None or isinstance(instruction, ModelContent):
        return instruction
    if isinstance(instruction, str):
        texts = [instruction]
    else:
        texts = list(instruction)
    if not texts:
        return None
    return ModelContent(role=SYSTEM_ROLE, parts=tuple(TextPart(t) for t in texts))


@dataclass(frozen=True, slots=True)
class GenerateContentRequest:
    """A generateContent call; `is_streaming` picks the endpoint, not the body."""

    model: str
    contents: tuple[ModelContent, ...]
    is_streaming: bool
    options: RequestOptions = field(default_factory=RequestOptions)
    generation_config: GenerationConfig | None = None
    safety_settings: tuple[SafetySetting, ...] | None = None
    tools: tuple[Tool, ...] | None = None
    tool_config: ToolConfig | None = None
    system_instruction: ModelContent | None = None

    @property
    def method(self) -> str:
        return STREAM_GENERATE_CONTENT_METHOD if self.is_streaming else GENERATE_CONTENT_METHOD

    @property
    def url(self) -> str:
        o = self.options
        return f"{o.base_url}/{o.api_version}/{self.model}:{self.method}"

    @property
    def params(self) -> dict[str, str]:
        return dict(SSE_QUERY_PARAMS) if self.is_streaming else {}

    def body(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self.model,
            "contents": [content_to_wire(c) for c in self.contents],
        }
        if self.generation_config is not None:
            body["generationConfig"] = self.generation_config.to_wire()
        if self.safety_settings is not None:
            body["safetySettings"] = [s.to_wire() for s in self.safety_settings]
        if self.tools is not None:
            body["tools"] = [t.to_wire() for t in self.tools]
        if self.tool_config is not None:
            body["toolConfig"] = self.tool_config.to_wire()
        if self.system_instruction is not None:
            body["systemInstruction"] = content_to_wire(self.system_instruction)
        return body

    @staticmethod
    def decode(data: bytes) -> GenerateContentResponse:
        return decode_generate_content_response(data)


@dataclass(frozen=True, slots=True)
class CountTokensRequest:
    """A countTokens call wrapping the body of a generate request."""

    generate_content_request: GenerateContentRequest

    @property
    def model(self) -> str:
        return self.generate_content_request.model

    @property
    def options(self) -> RequestOptions:
        return self.generate_content_request.options

    @property
    def url(self) -> str:
        o = self.options
        return f"{o.base_url}/{o.api_version}/{self.model}:{COUNT_TOKENS_METHOD}"

    @property
    def params(self) -> dict[str, str]:
        return {}

    def body(self) -> dict[str, Any]:
        return {"generateContentRequest": self.generate_content_request.body()}

    @staticmethod
    def decode(data: bytes) -> CountTokensResponse:
        return decode_count_tokens_response(data)


def build_generate_content_request(
    model: str,
    contents: Sequence[ModelContent],
    *,
    is_streaming: bool,
    options: RequestOptions | None = None,
    generation_config: GenerationConfig | None = None,
    safety_settings: Sequence[SafetySetting] | None = None,
    tools: Sequence[Tool] | None = None,
    tool_config: ToolConfig | None = None,
    system_instruction: str | Sequence[str] | ModelContent | None = None,
) -> GenerateContentRequest:
    """Assemble a generate request.

    Raises:
        ValidationError: If `contents` is empty or a content has no parts.
    """
    contents = tuple(contents)
    if not contents:
        raise ValidationError("contents must not be empty")
    for index, content in enumerate(contents):
        if not isinstance(content, ModelContent):
            raise ValidationError(
                f"contents[{index}]: expected ModelContent, got {type(content).__name__}"
            )
        if not content.parts:
            raise ValidationError(f"contents[{index}]: parts must not be empty")

    return GenerateContentRequest(
        model=model_resource_name(model),
        contents=contents,
        is_streaming=is_streaming,
        options=options or RequestOptions(),
        generation_config=generation_config,
        safety_settings=tuple(safety_settings) if safety_settings is not None else None,
        tools=tuple(tools) if tools is not None else None,
        tool_config=tool_config,
        system_instruction=system_instruction_content(system_instruction),
    )


def build_count_tokens_request(
    model: str,
    contents: Sequence[ModelContent],
    **kwargs: Any,
) -> CountTokensRequest:
    """Assemble a count-tokens request around a generate body.

    The wrapped body is built as for a streaming call; only the countTokens
    endpoint is ever used to send it.
    """
    kwargs.pop("is_streaming", None)
    return CountTokensRequest(
        build_generate_content_request(model, contents, is_streaming=True, **kwargs)
    )
