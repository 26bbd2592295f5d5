import asyncio
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import TextIO

from parley.core.helpers.utils import strip_line_terminator


class ConsoleInput:
    """
    Line-oriented user input read from a text stream (stdin by default).

    Reading a terminal blocks, so every `readline()` runs on a dedicated
    single-worker executor and the event loop keeps delivering inbound
    messages meanwhile. One worker keeps lines in the order they were
    typed. Binary streams are decoded with replacement characters, so
    a line that is not valid text still reaches the session as text.
    """
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="parley-input"
        )

    async def readline(self) -> str | None:
        loop = asyncio.get_running_loop()
        line = await loop.run_in_executor(self._executor, self._read)
        if not line:
            return None
        return strip_line_terminator(line)

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _read(self) -> str:
        stream = self._stream or sys.stdin

        # bytes that do not decode become U+FFFD instead of failing the read
        buffer = getattr(stream, "buffer", None)
        if buffer is None:
            return stream.readline()

        encoding = getattr(stream, "encoding", None) or "utf-8"
        return buffer.readline().decode(encoding, errors="replace")


class ConsoleSink:
    """Writes each rendered text on its own line and flushes right away."""
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def render(self, text: str) -> None:
        stream = self._stream or sys.stdout
        print(text, file=stream, flush=True)
