"""
Error classification for generate-content failures

Every failure that reaches a caller of `generate_content`,
`generate_content_stream` or a chat send passes through `classify`, which maps
it onto the closed `GenerateContentError` taxonomy.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from ..core.codec import decode_json, rpc_error_from_wire
from ..exceptions import (
    GenerateContentError,
    ImageConversionError,
    InternalError,
    InvalidAPIKeyError,
    PromptImageContentError,
    ResponseDecodingError,
    RPCError,
    TransportError,
    UnsupportedUserLocationError,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FailureSignal:
    """Everything the classifier looks at, independent of exception types."""

    underlying: BaseException
    status_code: int | None = None
    rpc_error: RPCError | None = None
    description: str | None = None


def _rpc_error_from_description(description: str) -> RPCError | None:
    """Best-effort decode of an error payload embedded in free text."""
    start = description.find("{")
    end = description.rfind("}")
    if start < 0 or end <= start:
        return None
    try:
        wire = decode_json(description[start : end + 1])
    except ResponseDecodingError:
        return None
    return rpc_error_from_wire(wire)


def _classify_rpc(error: RPCError) -> GenerateContentError | None:
    if error.is_invalid_api_key_error():
        return InvalidAPIKeyError(error.message)
    if error.is_unsupported_user_location_error():
        return UnsupportedUserLocationError(error.message)
    return None


def classify_failure(signal: FailureSignal) -> GenerateContentError:
    """Map a failure signal onto the public taxonomy."""
    if isinstance(signal.underlying, GenerateContentError):
        return signal.underlying
    if isinstance(signal.underlying, ImageConversionError):
        return PromptImageContentError(signal.underlying)

    if signal.rpc_error is not None:
        classified = _classify_rpc(signal.rpc_error)
        if classified is not None:
            return classified

    if signal.rpc_error is None and signal.description:
        embedded = _rpc_error_from_description(signal.description)
        if embedded is not None:
            log.debug("Decoded RPC error embedded in transport error: %r", embedded)
            classified = _classify_rpc(embedded)
            if classified is not None:
                return classified

    return InternalError(signal.underlying)


def failure_signal(error: BaseException) -> FailureSignal:
    """Describe an exception as a `FailureSignal`."""
    if isinstance(error, RPCError):
        return FailureSignal(
            underlying=error, status_code=error.http_status, rpc_error=error
        )
    if isinstance(error, TransportError):
        return FailureSignal(underlying=error, description=error.description)
    return FailureSignal(underlying=error, status_code=getattr(error, "status_code", None))


def classify(error: BaseException) -> GenerateContentError:
    """Return the public error for any exception raised while generating."""
    return classify_failure(failure_signal(error))
