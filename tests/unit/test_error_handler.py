"""
Unit tests for failure classification.
"""

import pytest

from gemini_chat.client.error_handler import FailureSignal, classify, classify_failure
from gemini_chat.core.codec import rpc_error_from_wire
from gemini_chat.core.types import FinishReason, GenerateContentResponse
from gemini_chat.exceptions import (
    ImageConversionError,
    InternalError,
    InvalidAPIKeyError,
    PromptImageContentError,
    ResponseDecodingError,
    ResponseStoppedEarlyError,
    RPCError,
    TransportError,
    UnsupportedUserLocationError,
    ValidationError,
)
from tests.fixtures.api_responses import (
    INVALID_API_KEY_ERROR,
    RESOURCE_EXHAUSTED_ERROR,
    UNAUTHENTICATED_API_KEY_ERROR,
    UNSUPPORTED_LOCATION_ERROR,
    error_body,
)


def _rpc(body, http_status):
    return rpc_error_from_wire(body, http_status=http_status)


class TestRPCClassification:
    """Pattern-based recognition of RPC errors"""

    def test_api_key_marker_in_status_with_401(self):
        error = classify(_rpc(UNAUTHENTICATED_API_KEY_ERROR, 401))
        assert isinstance(error, InvalidAPIKeyError)
        assert error.message == "Request had invalid authentication credentials."

    def test_api_key_reason_in_details(self):
        assert isinstance(classify(_rpc(INVALID_API_KEY_ERROR, 400)), InvalidAPIKeyError)

    @pytest.mark.parametrize(
        "message",
        [
            "API key expired. Please renew the API key.",
            "Invalid api_key supplied",
            "The provided APIKEY is not valid",
        ],
    )
    def test_api_key_wording_variants(self, message):
        """Should not depend on exact upstream wording"""
        error = classify(_rpc(error_body(400, message, "INVALID_ARGUMENT"), 400))
        assert isinstance(error, InvalidAPIKeyError)

    def test_location_marker_with_400(self):
        error = classify(_rpc(UNSUPPORTED_LOCATION_ERROR, 400))
        assert isinstance(error, UnsupportedUserLocationError)

    def test_other_rpc_errors_are_internal(self):
        rpc = _rpc(RESOURCE_EXHAUSTED_ERROR, 429)
        error = classify(rpc)
        assert isinstance(error, InternalError)
        assert error.underlying is rpc

    def test_allocation_is_not_a_location(self):
        rpc = _rpc(error_body(500, "Memory allocation failed", "INTERNAL"), 500)
        assert isinstance(classify(rpc), InternalError)


class TestOtherFailures:
    def test_undecodable_error_body_is_internal(self):
        decoding = ResponseDecodingError("Response is not valid JSON", status_code=503, body=b"<html>")
        error = classify(decoding)
        assert isinstance(error, InternalError)
        assert error.underlying is decoding

    def test_image_conversion_failure(self):
        underlying = ImageConversionError("bad image")
        error = classify(underlying)
        assert isinstance(error, PromptImageContentError)
        assert error.underlying is underlying

    def test_validation_error_is_internal(self):
        assert isinstance(classify(ValidationError("contents must not be empty")), InternalError)

    def test_classified_errors_pass_through(self):
        stopped = ResponseStoppedEarlyError(FinishReason.SAFETY, GenerateContentResponse())
        assert classify(stopped) is stopped

    def test_plain_transport_failure_is_internal(self):
        assert isinstance(classify(TransportError("Request failed: connection refused")), InternalError)


class TestEmbeddedPayloads:
    """Best-effort decode of error JSON embedded in transport descriptions"""

    def test_embedded_api_key_error_is_recognized(self):
        description = (
            'Stream broke: HTTP 400 {"error": {"code": 400, '
            '"message": "API key not valid.", "status": "INVALID_ARGUMENT"}}'
        )
        error = classify(TransportError(description))
        assert isinstance(error, InvalidAPIKeyError)

    def test_unparseable_embedded_text_falls_back(self):
        error = classify(TransportError("failed: {not json}"))
        assert isinstance(error, InternalError)

    def test_classify_failure_accepts_a_signal(self):
        rpc = RPCError(code=400, message="User location is not supported", http_status=400)
        signal = FailureSignal(underlying=rpc, status_code=400, rpc_error=rpc)
        assert isinstance(classify_failure(signal), UnsupportedUserLocationError)
