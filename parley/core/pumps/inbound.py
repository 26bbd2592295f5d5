import asyncio
import logging

from parley.core.errors import EndOfStream, ReceiveError
from parley.core.ports.connection import Connection
from parley.core.ports.console import OutputSink


class InboundPump:
    """
    Drains a Connection and surfaces its text payloads to the user.

    The pump loops on `receive()`: text units are rendered through the
    output sink in the order they were received, non-text units are
    counted and dropped. Inbound closure, orderly (EndOfStream) or not
    (ReceiveError), is a normal way for this pump to end: it stops
    quietly and never propagates the error.

    The pump is cancellable while suspended on `receive()`. Cancellation
    is recorded and re-raised so the awaiting coordinator observes it.
    The connection is borrowed, never closed here.
    """
    def __init__(self, connection: Connection, sink: OutputSink) -> None:
        self._connection = connection
        self._sink = sink

        self.received = 0
        self.discarded = 0
        self.cancelled = False

        self._logger = logging.getLogger("core.pumps.inbound")

    async def run(self) -> None:
        try:
            while True:
                try:
                    unit = await self._connection.receive()
                except EndOfStream:
                    self._logger.info("Peer closed the connection")
                    return
                except ReceiveError as ex:
                    self._logger.warning(f"Receive failed, stop receiving: {ex}")
                    return

                if not unit.is_text:
                    self.discarded += 1
                    self._logger.debug(f"Discarded non-text unit ({len(unit.payload)} bytes)")
                    continue

                self._sink.render(unit.payload)
                self.received += 1
        except asyncio.CancelledError:
            self.cancelled = True
            self._logger.debug("Inbound pump cancelled")
            raise
