"""
Streamed responses: the consumer-facing stream type and chunk aggregation
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Iterable
from types import TracebackType
from typing import Self

from gemini_chat.constants import MODEL_ROLE
from gemini_chat.core.types import GenerateContentResponse, ModelContent, Part, TextPart


class ResponseStream:
    """A single-pass, cancellable stream of response chunks.

    Iteration ends for good the first time the underlying source finishes,
    raises, or is closed; every later `__anext__` raises `StopAsyncIteration`.
    Closing the stream (directly or by leaving `async with`) releases the
    HTTP response behind it.

    Example:
        async with model.generate_content_stream("Tell me a story") as stream:
            async for chunk in stream:
                print(chunk.text or "", end="")
    """

    def __init__(self, source: AsyncGenerator[GenerateContentResponse, None]):
        self._source = source
        self._done = False

    @property
    def closed(self) -> bool:
        return self._done

    def __aiter__(self) -> Self:
        return self

    async def __anext__(self) -> GenerateContentResponse:
        if self._done:
            raise StopAsyncIteration
        try:
            return await self._source.__anext__()
        except BaseException:
            self._done = True
            raise

    async def aclose(self) -> None:
        self._done = True
        await self._source.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()


class StreamAggregator:
    """Folds the chunks of one streamed turn into a single model content.

    Runs of text are merged into one text part; any other part flushes the
    pending text and is kept as-is, so arrival order is preserved. The result
    does not depend on where the server split text between chunks.
    """

    def __init__(self) -> None:
        self._parts: list[Part] = []
        self._text: list[str] = []

    def _flush(self) -> None:
        text = "".join(self._text)
        self._text = []
        if text:
            self._parts.append(TextPart(text))

    def add(self, response: GenerateContentResponse) -> None:
        """Take the first candidate's parts from one chunk."""
        if not response.candidates:
            return
        for part in response.candidates[0].content.parts:
            if isinstance(part, TextPart):
                self._text.append(part.text)
            else:
                self._flush()
                self._parts.append(part)

    def result(self) -> ModelContent:
        """Return the aggregate so far with the "model" role."""
        parts = list(self._parts)
        text = "".join(self._text)
        if text:
            parts.append(TextPart(text))
        return ModelContent(role=MODEL_ROLE, parts=tuple(parts))


def aggregate_responses(responses: Iterable[GenerateContentResponse]) -> ModelContent:
    """Aggregate a finished sequence of chunks."""
    aggregator = StreamAggregator()
    for response in responses:
        aggregator.add(response)
    return aggregator.result()
