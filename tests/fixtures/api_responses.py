"""
Canned API payloads for tests.

Bodies follow the backend's JSON shape. Helpers return fresh dicts so tests can
tweak them without affecting each other.
"""

import io
import json
from typing import Any

import httpx
import PIL.Image


def image_bytes(fmt: str = "PNG", size: tuple[int, int] = (4, 4), mode: str = "RGB") -> bytes:
    """Encode a small solid image in `fmt`."""
    output = io.BytesIO()
    PIL.Image.new(mode, size, color=0).save(output, format=fmt)
    return output.getvalue()


def text_response(
    *texts: str,
    finish_reason: str | None = "STOP",
    role: str = "model",
) -> dict[str, Any]:
    """A generateContent body whose first candidate holds `texts`."""
    candidate: dict[str, Any] = {
        "content": {"role": role, "parts": [{"text": t} for t in texts]},
        "index": 0,
        "safetyRatings": [
            {"category": "HARM_CATEGORY_HARASSMENT", "probability": "NEGLIGIBLE"}
        ],
    }
    if finish_reason is not None:
        candidate["finishReason"] = finish_reason
    return {
        "candidates": [candidate],
        "usageMetadata": {
            "promptTokenCount": 4,
            "candidatesTokenCount": 2,
            "totalTokenCount": 6,
        },
    }


def parts_response(parts: list[dict[str, Any]], finish_reason: str | None = None) -> dict[str, Any]:
    """A chunk whose first candidate holds raw wire `parts`."""
    candidate: dict[str, Any] = {"content": {"role": "model", "parts": parts}}
    if finish_reason is not None:
        candidate["finishReason"] = finish_reason
    return {"candidates": [candidate]}


def blocked_response(reason: str = "SAFETY") -> dict[str, Any]:
    return {
        "promptFeedback": {
            "blockReason": reason,
            "safetyRatings": [
                {
                    "category": "HARM_CATEGORY_DANGEROUS_CONTENT",
                    "probability": "HIGH",
                    "blocked": True,
                }
            ],
        }
    }


def error_body(
    code: int, message: str, status: str, reason: str | None = None
) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message, "status": status}
    if reason is not None:
        error["details"] = [
            {
                "@type": "type.googleapis.com/google.rpc.ErrorInfo",
                "reason": reason,
                "domain": "googleapis.com",
            }
        ]
    return {"error": error}


INVALID_API_KEY_ERROR = error_body(
    400,
    "API key not valid. Please pass a valid API key.",
    "INVALID_ARGUMENT",
    reason="API_KEY_INVALID",
)

UNAUTHENTICATED_API_KEY_ERROR = error_body(
    401, "Request had invalid authentication credentials.", "UNAUTHENTICATED_API_KEY"
)

UNSUPPORTED_LOCATION_ERROR = error_body(
    400, "User location is not supported for the API use.", "FAILED_PRECONDITION"
)

RESOURCE_EXHAUSTED_ERROR = error_body(
    429, "Resource has been exhausted (e.g. check quota).", "RESOURCE_EXHAUSTED"
)

COUNT_TOKENS_RESPONSE = {"totalTokens": 7}


def sse_body(*events: dict[str, Any]) -> bytes:
    """Encode events as a server-sent event stream."""
    return b"".join(f"data: {json.dumps(e)}\r\n\r\n".encode() for e in events)


def sse_response(*events: dict[str, Any]) -> httpx.Response:
    return httpx.Response(
        200,
        content=sse_body(*events),
        headers={"content-type": "text/event-stream"},
    )


class FailingEventStream(httpx.AsyncByteStream):
    """Yields the given events, then breaks the connection."""

    def __init__(self, *events: dict[str, Any]):
        self.events = events
        self.closed = False

    async def __aiter__(self):
        for event in self.events:
            yield sse_body(event)
        raise httpx.ReadError("Connection reset by peer")

    async def aclose(self) -> None:
        self.closed = True


class RecordingEventStream(httpx.AsyncByteStream):
    """Yields the given events and records whether it was closed."""

    def __init__(self, *events: dict[str, Any]):
        self.events = events
        self.closed = False
        self.sent = 0

    async def __aiter__(self):
        for event in self.events:
            self.sent += 1
            yield sse_body(event)

    async def aclose(self) -> None:
        self.closed = True
