import asyncio


class FakeInput:
    """
    User input fed by the test. `readline()` blocks until a line (or end
    of input, pushed as None) is available, like a terminal would.
    """

    def __init__(self, *lines: str | None) -> None:
        self._lines: asyncio.Queue[str | None] = asyncio.Queue()
        for line in lines:
            self.push(line)
        self.reads = 0

    def push(self, line: str | None) -> None:
        self._lines.put_nowait(line)

    def push_eof(self) -> None:
        self.push(None)

    async def readline(self) -> str | None:
        line = await self._lines.get()
        self.reads += 1
        return line


class RecordingSink:
    def __init__(self) -> None:
        self.rendered: list[str] = []
        self._changed = asyncio.Event()

    def render(self, text: str) -> None:
        self.rendered.append(text)
        self._changed.set()

    async def wait_for(self, count: int) -> None:
        while len(self.rendered) < count:
            self._changed.clear()
            await self._changed.wait()
