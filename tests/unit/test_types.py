"""
Unit tests for the content model value types.
"""

import dataclasses

import pytest

from gemini_chat.core.types import (
    Candidate,
    DataPart,
    FinishReason,
    FunctionCallPart,
    GenerateContentResponse,
    ModelContent,
    TextPart,
    with_default_role,
)


class TestParts:
    """Part construction and immutability"""

    def test_text_part_requires_str(self):
        """Should reject non-string text"""
        with pytest.raises(TypeError, match="text"):
            TextPart(42)

    def test_data_part_normalizes_bytearray(self):
        """Should store bytearray data as immutable bytes"""
        part = DataPart("image/png", bytearray(b"\x89PNG"))
        assert part.data == b"\x89PNG"
        assert isinstance(part.data, bytes)

    def test_function_call_args_are_read_only(self):
        """Should freeze function call arguments"""
        args = {"city": "Paris"}
        part = FunctionCallPart("get_weather", args)
        args["city"] = "Rome"

        assert part.args["city"] == "Paris"
        with pytest.raises(TypeError):
            part.args["city"] = "Oslo"  # type: ignore[index]

    def test_parts_are_frozen(self):
        part = TextPart("hi")
        with pytest.raises(dataclasses.FrozenInstanceError):
            part.text = "bye"  # type: ignore[misc]


class TestModelContent:
    """ModelContent normalization"""

    def test_parts_become_a_tuple(self):
        content = ModelContent(role="user", parts=[TextPart("a"), TextPart("b")])
        assert content.parts == (TextPart("a"), TextPart("b"))

    def test_rejects_non_part_values(self):
        """Should refuse raw strings where parts are expected"""
        with pytest.raises(TypeError, match=r"parts\[0\]"):
            ModelContent(parts=["not a part"])

    def test_from_parts_converts_heterogeneous_input(self):
        content = ModelContent.from_parts(["Hello", TextPart("world")], role="user")
        assert content.role == "user"
        assert content.parts == (TextPart("Hello"), TextPart("world"))

    def test_text_concatenates_text_parts(self):
        content = ModelContent(parts=(TextPart("a"), DataPart("image/png", b"x"), TextPart("b")))
        assert content.text == "ab"


class TestWithDefaultRole:
    """Role defaulting"""

    def test_sets_role_when_missing(self):
        content = ModelContent(parts=(TextPart("Hello"),))
        assert with_default_role(content, "user").role == "user"

    def test_keeps_existing_role(self):
        content = ModelContent(role="model", parts=(TextPart("Hi"),))
        assert with_default_role(content, "user") is content

    def test_does_not_mutate_input(self):
        content = ModelContent(parts=(TextPart("Hello"),))
        with_default_role(content)
        assert content.role is None


class TestFinishReason:
    def test_unknown_wire_values_map_to_unknown(self):
        """Should tolerate finish reasons added by newer backends"""
        assert FinishReason.from_wire("BLOCKLIST") is FinishReason.UNKNOWN

    def test_missing_value_is_none(self):
        assert FinishReason.from_wire(None) is None


class TestGenerateContentResponse:
    def test_text_joins_first_candidate_text(self):
        response = GenerateContentResponse(
            candidates=(
                Candidate(content=ModelContent(parts=(TextPart("Hel"), TextPart("lo")))),
                Candidate(content=ModelContent(parts=(TextPart("ignored"),))),
            )
        )
        assert response.text == "Hello"

    def test_text_is_none_without_text_parts(self):
        assert GenerateContentResponse().text is None
        response = GenerateContentResponse(
            candidates=(Candidate(content=ModelContent(parts=(FunctionCallPart("f"),))),)
        )
        assert response.text is None
        assert response.function_calls == (FunctionCallPart("f"),)
