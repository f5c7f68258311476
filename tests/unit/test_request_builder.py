"""
Unit tests for request construction.
"""

import pytest

from gemini_chat.client.request_builder import (
    build_count_tokens_request,
    build_generate_content_request,
    model_resource_name,
    system_instruction_content,
)
from gemini_chat.config import RequestOptions
from gemini_chat.core.generation import (
    BlockThreshold,
    FunctionCallingConfig,
    FunctionDeclaration,
    GenerationConfig,
    HarmCategory,
    SafetySetting,
    Tool,
    ToolConfig,
)
from gemini_chat.core.types import ModelContent, TextPart
from gemini_chat.exceptions import ValidationError

HELLO = [ModelContent(role="user", parts=(TextPart("Hello"),))]


class TestModelNames:
    def test_adds_models_prefix(self):
        assert model_resource_name("gemini-1.5-flash") == "models/gemini-1.5-flash"

    def test_keeps_qualified_names(self):
        assert model_resource_name("tunedModels/my-model") == "tunedModels/my-model"

    def test_rejects_blank_names(self):
        with pytest.raises(ValidationError):
            model_resource_name("  ")


class TestGenerateContentRequest:
    """Endpoint selection and body shape"""

    def test_unary_endpoint(self):
        request = build_generate_content_request("gemini-1.5-flash", HELLO, is_streaming=False)

        assert request.url == (
            "https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-flash:generateContent"
        )
        assert request.params == {}

    def test_streaming_endpoint_uses_sse(self):
        request = build_generate_content_request("gemini-1.5-flash", HELLO, is_streaming=True)

        assert request.url.endswith("models/gemini-1.5-flash:streamGenerateContent")
        assert request.params == {"alt": "sse"}

    def test_streaming_flag_does_not_change_body(self):
        """Should send the same body regardless of the wire path"""
        unary = build_generate_content_request("m", HELLO, is_streaming=False)
        streaming = build_generate_content_request("m", HELLO, is_streaming=True)
        assert unary.body() == streaming.body()

    def test_minimal_body(self):
        request = build_generate_content_request("m", HELLO, is_streaming=False)
        assert request.body() == {
            "model": "models/m",
            "contents": [{"role": "user", "parts": [{"text": "Hello"}]}],
        }

    def test_full_body(self):
        request = build_generate_content_request(
            "m",
            HELLO,
            is_streaming=False,
            generation_config=GenerationConfig(temperature=0.2, max_output_tokens=64),
            safety_settings=[
                SafetySetting(
                    category=HarmCategory.HARASSMENT,
                    threshold=BlockThreshold.BLOCK_ONLY_HIGH,
                )
            ],
            tools=[Tool(function_declarations=[FunctionDeclaration(name="lookup")])],
            tool_config=ToolConfig(
                function_calling_config=FunctionCallingConfig(mode="ANY")
            ),
            system_instruction="Be brief.",
        )
        body = request.body()

        assert body["generationConfig"] == {"temperature": 0.2, "maxOutputTokens": 64}
        assert body["safetySettings"] == [
            {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_ONLY_HIGH"}
        ]
        assert body["tools"] == [{"functionDeclarations": [{"name": "lookup"}]}]
        assert body["toolConfig"] == {"functionCallingConfig": {"mode": "ANY"}}
        assert body["systemInstruction"] == {"role": "system", "parts": [{"text": "Be brief."}]}

    def test_custom_options_change_the_url(self):
        options = RequestOptions(base_url="http://localhost:8080/", api_version="/v1/", timeout=5)
        request = build_generate_content_request("m", HELLO, is_streaming=False, options=options)
        assert request.url == "http://localhost:8080/v1/models/m:generateContent"
        assert request.options.timeout == 5

    def test_empty_contents_rejected(self):
        with pytest.raises(ValidationError, match="empty"):
            build_generate_content_request("m", [], is_streaming=False)

    def test_content_without_parts_rejected(self):
        with pytest.raises(ValidationError, match="parts"):
            build_generate_content_request("m", [ModelContent(role="user")], is_streaming=False)


class TestCountTokensRequest:
    def test_wraps_generate_body(self):
        request = build_count_tokens_request("m", HELLO, system_instruction=["a", "b"])

        assert request.url.endswith("models/m:countTokens")
        assert request.params == {}
        inner = request.body()["generateContentRequest"]
        assert inner["contents"] == [{"role": "user", "parts": [{"text": "Hello"}]}]
        assert inner["systemInstruction"]["parts"] == [{"text": "a"}, {"text": "b"}]


class TestSystemInstruction:
    def test_none_and_empty_are_omitted(self):
        assert system_instruction_content(None) is None
        assert system_instruction_content([]) is None

    def test_content_is_used_as_is(self):
        content = ModelContent(role="system", parts=(TextPart("x"),))
        assert system_instruction_content(content) is content


class TestRequestOptions:
    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValueError):
            RequestOptions(timeout=0)

    def test_rejects_non_http_base_url(self):
        with pytest.raises(ValueError):
            RequestOptions(base_url="ftp://example.com")

    def test_unknown_fields_are_rejected(self):
        with pytest.raises(ValueError):
            RequestOptions(retries=3)
