import logging

from parley.core.ports.connection import Connection
from parley.core.ports.console import InputSource

EXIT_COMMAND = "exit"

REASON_EXIT = "exit"
REASON_END_OF_INPUT = "end-of-input"


class OutboundPump:
    """
    Reads user-entered lines and transmits them, one text unit per line.

    The pump runs until one of its own terminal conditions:
    - the user enters exactly `exit` (case-sensitive, no trimming)
    - the input source reaches end of input, handled like `exit`
    - `send_text` fails, in which case the SendError propagates

    Every other line, the empty one included, is sent as-is. The pump is
    never cancelled from outside and never closes the connection.
    """
    def __init__(self, connection: Connection, source: InputSource) -> None:
        self._connection = connection
        self._source = source

        self.sent = 0

        self._logger = logging.getLogger("core.pumps.outbound")

    async def run(self) -> str:
        """Pump until a terminal condition, return why it stopped."""
        while True:
            line = await self._source.readline()
            if line is None:
                self._logger.info("End of input reached")
                return REASON_END_OF_INPUT

            if line == EXIT_COMMAND:
                self._logger.info("Exit requested")
                return REASON_EXIT

            await self._connection.send_text(line)
            self.sent += 1
