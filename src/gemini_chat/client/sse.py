"""
Server-sent event parsing for streamed responses
"""

from collections.abc import AsyncIterable, AsyncIterator

from ..constants import SSE_DATA_FIELD


def _field(line: str) -> tuple[str, str]:
    name, sep, value = line.partition(":")
    if not sep:
        return name, ""
    if value.startswith(" "):
        value = value[1:]
    return name, value


async def iter_sse_data(lines: AsyncIterable[str]) -> AsyncIterator[str]:
    """Yield the data payload of each event in a line stream.

    Data lines of one event are joined with newlines; a blank line ends the
    event. Comments and non-data fields are ignored. An event left open when
    the stream closes is still delivered.
    """
    buffer: list[str] = []
    async for raw in lines:
        line = raw.rstrip("\r\n")
        if not line:
            if buffer:
                yield "\n".join(buffer)
                buffer = []
            continue
        if line.startswith(":"):
            continue
        name, value = _field(line)
        if name == SSE_DATA_FIELD:
            buffer.append(value)
    if buffer:
        yield "\n".join(buffer)
