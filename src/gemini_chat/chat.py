"""
Multi-turn chat on top of a `GenerativeModel`

A session owns its history. Each send reads the history, calls the model and,
only if the call succeeds, appends the user turn together with the model's
reply. A failed send leaves the history exactly as it was, so it never holds
an unpaired user turn.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Sequence
import asyncio
import dataclasses
import logging
from typing import TYPE_CHECKING, Any

from gemini_chat.client.error_handler import classify
from gemini_chat.constants import MODEL_ROLE, USER_ROLE
from gemini_chat.core.conversion import to_contents
from gemini_chat.core.types import GenerateContentResponse, ModelContent, with_default_role
from gemini_chat.exceptions import GenerativeAIError, InternalError, ValidationError
from gemini_chat.streaming import ResponseStream, StreamAggregator

if TYPE_CHECKING:
    from gemini_chat.model import GenerativeModel

log = logging.getLogger(__name__)


class ChatSession:
    """A conversation with a model.

    A unary send holds the session lock from the moment it reads the history
    until its turn pair is appended (or the call fails), so unary sends on one
    session never interleave. A streamed send takes the lock only to read the
    history and, after a clean finish, to append its pair; it never holds it
    while the caller consumes chunks.
    """

    def __init__(self, model: GenerativeModel, history: Sequence[ModelContent] | None = None):
        self.model = model
        self._history: list[ModelContent] = [with_default_role(c) for c in history or ()]
        self._lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"ChatSession(model={self.model.model_name!r}, turns={len(self._history)})"

    @property
    def history(self) -> list[ModelContent]:
        """A snapshot of the conversation so far."""
        return list(self._history)

    def _user_content(self, content: Any) -> ModelContent:
        contents = to_contents(content)
        if len(contents) != 1:
            raise ValidationError(
                f"A chat message must be a single content, got {len(contents)}"
            )
        return with_default_role(contents[0], USER_ROLE)

    def _prepare(self, content: Any) -> ModelContent:
        try:
            return self._user_content(content)
        except Exception as e:
            raise classify(e) from e

    def _commit(self, user: ModelContent, reply: ModelContent) -> None:
        self._history = [*self._history, user, reply]
        log.debug("Chat history now has %d turns", len(self._history))

    async def send_message(self, content: Any) -> GenerateContentResponse:
        """Send one user turn and return the model's full response.

        Raises:
            GenerateContentError: If the call fails; the history is unchanged.
        """
        user = self._prepare(content)
        async with self._lock:
            response = await self.model.generate_content([*self._history, user])
            if not response.candidates or not response.candidates[0].content.parts:
                raise InternalError(GenerativeAIError("Model response contained no content"))
            reply = dataclasses.replace(response.candidates[0].content, role=MODEL_ROLE)
            self._commit(user, reply)
        return response

    def send_message_stream(self, content: Any) -> ResponseStream:
        """Send one user turn and stream the model's response.

        Chunks are delivered as they arrive. The turn pair is appended only
        after the stream completes without error; closing the stream early
        or any failure leaves the history unchanged.
        """
        return ResponseStream(self._stream(content))

    async def _stream(self, content: Any) -> AsyncGenerator[GenerateContentResponse, None]:
        user = self._prepare(content)
        async with self._lock:
            base = self._history
        aggregator = StreamAggregator()
        async with self.model.generate_content_stream([*base, user]) as stream:
            async for chunk in stream:
                aggregator.add(chunk)
                yield chunk
        reply = aggregator.result()
        if not reply.parts:
            raise InternalError(GenerativeAIError("Stream completed without any content"))
        async with self._lock:
            if self._history is not base:
                log.warning(
                    "Chat history changed while a reply was streaming; "
                    "appending the streamed turn pair after the newer turns"
                )
            self._commit(user, reply)
