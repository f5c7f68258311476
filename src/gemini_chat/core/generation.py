"""Generation, safety and tool settings forwarded in request bodies.

These are validated with Pydantic and serialized with camelCase aliases. The
client does not interpret them; unknown fields are kept and forwarded so new
backend options can be used before this package knows about them.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the JSON shape expected by the backend."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class GenerationConfig(_WireModel):
    """Sampling and output parameters for generation."""

    temperature: float | None = Field(default=None, ge=0.0)
    top_p: float | None = Field(default=None, ge=0.0, le=1.0)
    top_k: int | None = Field(default=None, ge=1)
    candidate_count: int | None = Field(default=None, ge=1)
    max_output_tokens: int | None = Field(default=None, ge=1)
    stop_sequences: list[str] | None = None
    response_mime_type: str | None = None
    response_schema: dict[str, Any] | None = None


class HarmCategory(str, Enum):
    HARASSMENT = "HARM_CATEGORY_HARASSMENT"
    HATE_SPEECH = "HARM_CATEGORY_HATE_SPEECH"
    SEXUALLY_EXPLICIT = "HARM_CATEGORY_SEXUALLY_EXPLICIT"
    DANGEROUS_CONTENT = "HARM_CATEGORY_DANGEROUS_CONTENT"
    CIVIC_INTEGRITY = "HARM_CATEGORY_CIVIC_INTEGRITY"


class BlockThreshold(str, Enum):
    BLOCK_LOW_AND_ABOVE = "BLOCK_LOW_AND_ABOVE"
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"
    BLOCK_ONLY_HIGH = "BLOCK_ONLY_HIGH"
    BLOCK_NONE = "BLOCK_NONE"
    OFF = "OFF"


class SafetySetting(_WireModel):
    category: HarmCategory
    threshold: BlockThreshold


class FunctionDeclaration(_WireModel):
    """A function the model may ask the caller to invoke."""

    name: str = Field(min_length=1)
    description: str | None = None
    parameters: dict[str, Any] | None = None


class CodeExecution(_WireModel):
    """Enables the backend code execution tool."""


class Tool(_WireModel):
    function_declarations: list[FunctionDeclaration] | None = None
    code_execution: CodeExecution | None = None


class FunctionCallingConfig(_WireModel):
    mode: Literal["AUTO", "ANY", "NONE"] = "AUTO"
    allowed_function_names: list[str] | None = None


class ToolConfig(_WireModel):
    function_calling_config: FunctionCallingConfig | None = None
