from typing import Protocol


class InputSource(Protocol):
    """Line-oriented user input, consumed by the outbound pump only."""

    async def readline(self) -> str | None:
        """
        Suspend until the user provides a line and return it without its
        line terminator. Return None at end of input.
        """


class OutputSink(Protocol):
    """User-visible output, consumed by the inbound pump only."""

    def render(self, text: str) -> None:
        ...
