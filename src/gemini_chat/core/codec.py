"""JSON wire format for request bodies, responses and error payloads.

Wire shapes are described by camelCase-aliased pydantic models and validated
through `TypeAdapter`s. Decoded models are converted into the frozen value
types of `core.types`; nothing outside this module sees the wire models.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

import pydantic
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_serializer, field_validator
from pydantic.alias_generators import to_camel

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
)
from gemini_chat.exceptions import ResponseDecodingError, RPCError

log = logging.getLogger(__name__)

# --- Wire models ---


class _Wire(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump only the fields that were set, with wire names."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class _InlineData(_Wire):
    mime_type: str
    data: bytes = b""

    @field_validator("data", mode="before")
    @classmethod
    def _decode_base64(cls, v: Any) -> Any:
        if isinstance(v, str):
            return base64.b64decode(v, validate=True)
        return v

    @field_serializer("data")
    def _encode_base64(self, data: bytes) -> str:
        return base64.b64encode(data).decode("ascii")


class _FileData(_Wire):
    mime_type: str = ""
    file_uri: str


class _FunctionCall(_Wire):
    name: str
    args: dict[str, Any] | None = None


class _FunctionResponse(_Wire):
    name: str
    response: dict[str, Any] | None = None


class _ExecutableCode(_Wire):
    language: str = ""
    code: str = ""


class _CodeExecutionResult(_Wire):
    outcome: str = ""
    output: str = ""


class _WirePart(_Wire):
    # Unknown part kinds land in `model_extra`
    model_config = ConfigDict(extra="allow")

    text: str | None = None
    inline_data: _InlineData | None = None
    file_data: _FileData | None = None
    function_call: _FunctionCall | None = None
    function_response: _FunctionResponse | None = None
    executable_code: _ExecutableCode | None = None
    code_execution_result: _CodeExecutionResult | None = None

    @classmethod
    def from_part(cls, part: Part) -> _WirePart:
        match part:
            case TextPart(text=text):
                return cls(text=text)
            case DataPart(mime_type=mime_type, data=data):
                return cls(inline_data=_InlineData(mime_type=mime_type, data=data))
            case FileDataPart(mime_type=mime_type, uri=uri):
                return cls(file_data=_FileData(mime_type=mime_type, file_uri=uri))
            case FunctionCallPart(name=name, args=args):
                return cls(function_call=_FunctionCall(name=name, args=dict(args)))
            case FunctionResponsePart(name=name, response=response):
                return cls(
                    function_response=_FunctionResponse(name=name, response=dict(response))
                )
            case ExecutableCodePart(language=language, code=code):
                return cls(executable_code=_ExecutableCode(language=language, code=code))
            case CodeExecutionResultPart(outcome=outcome, output=output):
                return cls(
                    code_execution_result=_CodeExecutionResult(outcome=outcome, output=output)
                )
        raise TypeError(f"Unsupported part type: {type(part).__name__}")

    def to_part(self) -> Part | None:
        """Return the part, or None for part kinds this client does not know."""
        if self.text is not None:
            return TextPart(self.text)
        if self.inline_data is not None:
            return DataPart(mime_type=self.inline_data.mime_type, data=self.inline_data.data)
        if self.file_data is not None:
            return FileDataPart(mime_type=self.file_data.mime_type, uri=self.file_data.file_uri)
        if self.function_call is not None:
            return FunctionCallPart(name=self.function_call.name, args=self.function_call.args or {})
        if self.function_response is not None:
            return FunctionResponsePart(
                name=self.function_response.name, response=self.function_response.response or {}
            )
        if self.executable_code is not None:
            return ExecutableCodePart(
                language=self.executable_code.language, code=self.executable_code.code
            )
        if self.code_execution_result is not None:
            return CodeExecutionResultPart(
                outcome=self.code_execution_result.outcome,
                output=self.code_execution_result.output,
            )
        log.warning("Skipping unrecognized part with keys %s", sorted(self.model_extra or {}))
        return None


class _WireContent(_Wire):
    role: str | None = None
    parts: list[_WirePart] | None = None

    @classmethod
    def from_content(cls, content: ModelContent) -> _WireContent:
        fields: dict[str, Any] = {"parts": [_WirePart.from_part(p) for p in content.parts]}
        if content.role is not None:
            fields["role"] = content.role
        return cls(**fields)

    def to_content(self) -> ModelContent:
        parts = (p.to_part() for p in self.parts or ())
        return ModelContent(role=self.role, parts=tuple(p for p in parts if p is not None))


class _SafetyRating(_Wire):
    category: str = ""
    probability: str = ""
    blocked: bool = False


def _ratings(wire: list[_SafetyRating] | None) -> tuple[SafetyRating, ...]:
    return tuple(
        SafetyRating(category=r.category, probability=r.probability, blocked=r.blocked)
        for r in wire or ()
    )


class _CitationSource(_Wire):
    start_index: int | None = None
    end_index: int | None = None
    uri: str | None = None
    license: str | None = None


class _CitationMetadata(_Wire):
    citation_sources: list[_CitationSource] | None = Field(
        default=None,
        validation_alias=AliasChoices("citationSources", "citations", "citation_sources"),
    )


class _Candidate(_Wire):
    content: _WireContent | None = None
    finish_reason: str | None = None
    safety_ratings: list[_SafetyRating] | None = None
    citation_metadata: _CitationMetadata | None = None
    index: int | None = None

    def to_candidate(self) -> Candidate:
        citations = None
        if self.citation_metadata is not None:
            citations = CitationMetadata(
                citation_sources=tuple(
                    CitationSource(
                        start_index=s.start_index,
                        end_index=s.end_index,
                        uri=s.uri,
                        license=s.license,
                    )
                    for s in self.citation_metadata.citation_sources or ()
                )
            )
        return Candidate(
            content=self.content.to_content() if self.content is not None else ModelContent(),
            finish_reason=FinishReason.from_wire(self.finish_reason),
            safety_ratings=_ratings(self.safety_ratings),
            citation_metadata=citations,
            index=self.index,
        )


class _PromptFeedback(_Wire):
    block_reason: str | None = None
    safety_ratings: list[_SafetyRating] | None = None


class _UsageMetadata(_Wire):
    prompt_token_count: int = 0
    candidates_token_count: int = 0
    total_token_count: int = 0


class _GenerateContentResponse(_Wire):
    candidates: list[_Candidate] | None = None
    prompt_feedback: _PromptFeedback | None = None
    usage_metadata: _UsageMetadata | None = None

    def to_response(self) -> GenerateContentResponse:
        feedback = self.prompt_feedback
        usage = self.usage_metadata
        return GenerateContentResponse(
            candidates=tuple(c.to_candidate() for c in self.candidates or ()),
            prompt_feedback=PromptFeedback(
                block_reason=BlockReason.from_wire(feedback.block_reason),
                safety_ratings=_ratings(feedback.safety_ratings),
            )
            if feedback is not None
            else None,
            usage_metadata=UsageMetadata(
                prompt_token_count=usage.prompt_token_count,
                candidates_token_count=usage.candidates_token_count,
                total_token_count=usage.total_token_count,
            )
            if usage is not None
            else None,
        )


class _CountTokensResponse(_Wire):
    total_tokens: int


class _Status(_Wire):
    code: int | None = None
    message: str
    status: str | None = None
    details: list[Any] | None = None

    @field_validator("code", mode="before")
    @classmethod
    def _lenient_code(cls, v: Any) -> Any:
        try:
            return int(v)
        except (TypeError, ValueError):
            return None


class _ErrorEnvelope(_Wire):
    error: _Status


_JSON = TypeAdapter(Any)
_RESPONSE = TypeAdapter(_GenerateContentResponse)
_COUNT_TOKENS = TypeAdapter(_CountTokensResponse)
_ERROR_ENVELOPE = TypeAdapter(_ErrorEnvelope)

# --- Encoding ---


def part_to_wire(part: Part) -> dict[str, Any]:
    return _WirePart.from_part(part).to_wire()


def content_to_wire(content: ModelContent) -> dict[str, Any]:
    return _WireContent.from_content(content).to_wire()


def encode_body(body: dict[str, Any]) -> bytes:
    """Encode a request body as compact UTF-8 JSON."""
    return _JSON.dump_json(body)


# --- Decoding ---


def decode_json(data: bytes | str, *, status_code: int | None = None) -> Any:
    try:
        return _JSON.validate_json(data)
    except pydantic.ValidationError as e:
        raise ResponseDecodingError(
            f"Response is not valid JSON: {e}", status_code=status_code, body=data
        ) from e


def part_from_wire(wire: Any) -> Part | None:
    """Decode one part; returns None for part kinds this client does not know."""
    try:
        return _WirePart.model_validate(wire).to_part()
    except pydantic.ValidationError as e:
        raise ResponseDecodingError(f"Malformed part: {e}") from e


def content_from_wire(wire: Any) -> ModelContent:
    if not wire:
        return ModelContent()
    try:
        return _WireContent.model_validate(wire).to_content()
    except pydantic.ValidationError as e:
        raise ResponseDecodingError(f"Malformed content: {e}") from e


def response_from_wire(wire: Any) -> GenerateContentResponse:
    """Build a response from an already-parsed JSON value."""
    try:
        return _RESPONSE.validate_python(wire).to_response()
    except pydantic.ValidationError as e:
        raise ResponseDecodingError(f"Malformed GenerateContentResponse: {e}") from e


def decode_generate_content_response(data: bytes | str) -> GenerateContentResponse:
    try:
        return _RESPONSE.validate_json(data).to_response()
    except pydantic.ValidationError as e:
        raise ResponseDecodingError(
            f"Malformed GenerateContentResponse: {e}", body=data
        ) from e


def decode_count_tokens_response(data: bytes | str) -> CountTokensResponse:
    try:
        wire = _COUNT_TOKENS.validate_json(data)
    except pydantic.ValidationError as e:
        raise ResponseDecodingError(f"Malformed CountTokensResponse: {e}", body=data) from e
    return CountTokensResponse(total_tokens=wire.total_tokens)


def rpc_error_from_wire(
    wire: Any, *, http_status: int | None = None
) -> RPCError | None:
    """Return the RPC error in an `{"error": {...}}` envelope, or None."""
    try:
        error = _ERROR_ENVELOPE.validate_python(wire).error
    except pydantic.ValidationError:
        return None
    return RPCError(
        code=error.code if error.code is not None else (http_status or 0),
        message=error.message,
        status=error.status,
        details=tuple(d for d in error.details or () if isinstance(d, dict)),
        http_status=http_status,
    )


def decode_rpc_error(data: bytes | str, *, http_status: int | None = None) -> RPCError:
    """Decode an error payload.

    Raises:
        ResponseDecodingError: If `data` is not an RPC error envelope.
    """
    wire = decode_json(data, status_code=http_status)
    error = rpc_error_from_wire(wire, http_status=http_status)
    if error is None:
        raise ResponseDecodingError(
            "Response is not an RPC error payload", status_code=http_status, body=data
        )
    return error
