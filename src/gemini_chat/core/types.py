"""Core data types for requests and responses.

Parts, contents and responses are immutable values. Nothing in this module
performs I/O; conversion from caller input lives in `core.conversion` and the
wire format lives in `core.codec`.
"""

from __future__ import annotations

import dataclasses
import enum
from types import MappingProxyType
import typing

from gemini_chat.constants import USER_ROLE

# --- Minimal guard helpers ---


def _freeze_mapping(m: typing.Mapping[str, typing.Any] | None) -> typing.Mapping[str, typing.Any]:
    """Return an immutable mapping view; None becomes an empty mapping."""
    if isinstance(m, MappingProxyType):
        return m
    return MappingProxyType(dict(m or {}))


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


def _require_str(value: typing.Any, field_name: str) -> None:
    _require(
        condition=isinstance(value, str),
        message=f"must be str, got {type(value).__name__}",
        field_name=field_name,
        exc=TypeError,
    )


# --- Parts ---


@dataclasses.dataclass(frozen=True, slots=True)
class TextPart:
    """Plain text."""

    text: str

    def __post_init__(self) -> None:
        _require_str(self.text, "text")


@dataclasses.dataclass(frozen=True, slots=True)
class DataPart:
    """Inline binary data such as an image, sent base64-encoded."""

    mime_type: str
    data: bytes

    def __post_init__(self) -> None:
        _require_str(self.mime_type, "mime_type")
        _require(
            condition=isinstance(self.data, bytes | bytearray),
            message="must be bytes",
            field_name="data",
            exc=TypeError,
        )
        if isinstance(self.data, bytearray):
            object.__setattr__(self, "data", bytes(self.data))


@dataclasses.dataclass(frozen=True, slots=True)
class FileDataPart:
    """A reference to data stored elsewhere, e.g. a Files API URI."""

    mime_type: str
    uri: str

    def __post_init__(self) -> None:
        _require_str(self.mime_type, "mime_type")
        _require_str(self.uri, "uri")


@dataclasses.dataclass(frozen=True, slots=True)
class FunctionCallPart:
    """A function call predicted by the model."""

    name: str
    args: typing.Mapping[str, typing.Any] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        _require_str(self.name, "name")
        object.__setattr__(self, "args", _freeze_mapping(self.args))


@dataclasses.dataclass(frozen=True, slots=True)
class FunctionResponsePart:
    """The result of a function call, sent back to the model."""

    name: str
    response: typing.Mapping[str, typing.Any] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        _require_str(self.name, "name")
        object.__setattr__(self, "response", _freeze_mapping(self.response))


@dataclasses.dataclass(frozen=True, slots=True)
class ExecutableCodePart:
    """Code generated by the model for the code execution tool."""

    language: str
    code: str


@dataclasses.dataclass(frozen=True, slots=True)
class CodeExecutionResultPart:
    """The outcome of running an `ExecutableCodePart`."""

    outcome: str
    output: str = ""


Part = (
    TextPart
    | DataPart
    | FileDataPart
    | FunctionCallPart
    | FunctionResponsePart
    | ExecutableCodePart
    | CodeExecutionResultPart
)

PART_TYPES: tuple[type, ...] = typing.get_args(Part)


def is_part(value: object) -> bool:
    return isinstance(value, PART_TYPES)


# --- Content ---


@dataclasses.dataclass(frozen=True, slots=True)
class ModelContent:
    """One conversational turn: an optional role and an ordered list of parts."""

    role: str | None = None
    parts: tuple[Part, ...] = ()

    def __post_init__(self) -> None:
        _require(
            condition=self.role is None or isinstance(self.role, str),
            message="must be str or None",
            field_name="role",
            exc=TypeError,
        )
        parts = tuple(self.parts)
        for index, part in enumerate(parts):
            _require(
                condition=is_part(part),
                message=f"unsupported part type {type(part).__name__}",
                field_name=f"parts[{index}]",
                exc=TypeError,
            )
        object.__setattr__(self, "parts", parts)

    @classmethod
    def from_parts(cls, values: typing.Any, role: str | None = None) -> ModelContent:
        """Build content from strings, parts, images or a list of them.

        Raises:
            ImageConversionError: If an image input cannot be converted.
        """
        from gemini_chat.core.conversion import to_parts

        return cls(role=role, parts=to_parts(values))

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(part.text for part in self.parts if isinstance(part, TextPart))


def with_default_role(content: ModelContent, default: str = USER_ROLE) -> ModelContent:
    """Return `content` with `role` set to `default` if it has none."""
    if content.role is not None:
        return content
    return dataclasses.replace(content, role=default)


# --- Responses ---


class _WireEnum(str, enum.Enum):
    """Enum decoded from wire strings; unknown values map to UNKNOWN."""

    @classmethod
    def from_wire(cls, value: str | None) -> typing.Self | None:
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return cls["UNKNOWN"]


class FinishReason(_WireEnum):
    UNSPECIFIED = "FINISH_REASON_UNSPECIFIED"
    STOP = "STOP"
    MAX_TOKENS = "MAX_TOKENS"
    SAFETY = "SAFETY"
    RECITATION = "RECITATION"
    OTHER = "OTHER"
    UNKNOWN = "UNKNOWN"


class BlockReason(_WireEnum):
    UNSPECIFIED = "BLOCK_REASON_UNSPECIFIED"
    SAFETY = "SAFETY"
    OTHER = "OTHER"
    UNKNOWN = "UNKNOWN"


@dataclasses.dataclass(frozen=True, slots=True)
class SafetyRating:
    category: str
    probability: str
    blocked: bool = False


@dataclasses.dataclass(frozen=True, slots=True)
class CitationSource:
    start_index: int | None = None
    end_index: int | None = None
    uri: str | None = None
    license: str | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class CitationMetadata:
    citation_sources: tuple[CitationSource, ...] = ()


@dataclasses.dataclass(frozen=True, slots=True)
class Candidate:
    """One proposed response alternative."""

    content: ModelContent = dataclasses.field(default_factory=ModelContent)
    finish_reason: FinishReason | None = None
    safety_ratings: tuple[SafetyRating, ...] = ()
    citation_metadata: CitationMetadata | None = None
    index: int | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class PromptFeedback:
    block_reason: BlockReason | None = None
    safety_ratings: tuple[SafetyRating, ...] = ()


@dataclasses.dataclass(frozen=True, slots=True)
class UsageMetadata:
    prompt_token_count: int = 0
    candidates_token_count: int = 0
    total_token_count: int = 0


@dataclasses.dataclass(frozen=True, slots=True)
class GenerateContentResponse:
    """A full response, or one chunk of a streamed response."""

    candidates: tuple[Candidate, ...] = ()
    prompt_feedback: PromptFeedback | None = None
    usage_metadata: UsageMetadata | None = None

    @property
    def text(self) -> str | None:
        """Text of the first candidate, or None if it has no text parts."""
        if not self.candidates:
            return None
        texts = [
            part.text
            for part in self.candidates[0].content.parts
            if isinstance(part, TextPart)
        ]
        if not texts:
            return None
        return "".join(texts)

    @property
    def function_calls(self) -> tuple[FunctionCallPart, ...]:
        if not self.candidates:
            return ()
        return tuple(
            part
            for part in self.candidates[0].content.parts
            if isinstance(part, FunctionCallPart)
        )


@dataclasses.dataclass(frozen=True, slots=True)
class CountTokensResponse:
    total_tokens: int
