import asyncio
import logging

from parley.core.errors import ConnectError
from parley.core.helpers.spawn import TaskSpawner
from parley.core.models.endpoint import Endpoint
from parley.core.models.state import SessionOutcome, SessionState
from parley.core.ports.connection import Connection, Connector
from parley.core.ports.console import InputSource, OutputSink
from parley.core.pumps.inbound import InboundPump
from parley.core.pumps.outbound import OutboundPump


class SessionCoordinator:
    """
    Drives one interactive session over a single duplex connection.

    The coordinator opens the Connection, then runs an InboundPump and an
    OutboundPump as two independently scheduled tasks sharing it, so that
    waiting for user input never delays inbound delivery and a blocked
    receive never delays sending.

    The outbound task is the only termination trigger. The inbound task
    may finish on its own when the peer disconnects, but the session goes
    on until the user exits or a send fails. Once the outbound task is
    done, the inbound task is cancelled, awaited, and only then is the
    connection closed, exactly once, whatever the outcome.

        IDLE -> CONNECTING -> ACTIVE -> DRAINING -> CLOSED
                     \\___________________________/
                            (connect failure)

    A coordinator runs a single session; it cannot be restarted.
    """
    def __init__(
        self,
        connector: Connector,
        endpoint: Endpoint,
        source: InputSource,
        sink: OutputSink,
        spawner: TaskSpawner | None = None,
    ) -> None:
        self._connector = connector
        self._endpoint = endpoint
        self._source = source
        self._sink = sink
        self._spawner = spawner or TaskSpawner()

        self._state = SessionState.IDLE
        self._logger = logging.getLogger("core.session")

    @property
    def state(self) -> SessionState:
        return self._state

    async def run(self) -> SessionOutcome:
        """
        Run the session to completion.

        Returns a SessionOutcome when the user ended the session (`exit`
        or end of input). Raises ConnectError when the channel cannot be
        opened and SendError when an outbound send fails.
        """
        if self._state is not SessionState.IDLE:
            raise RuntimeError(f"Session already {self._state}")

        self._state = SessionState.CONNECTING
        self._logger.info(f"Connecting to {self._endpoint}")
        try:
            connection = await self._connector.open(self._endpoint)
        except ConnectError:
            self._state = SessionState.CLOSED
            raise

        self._state = SessionState.ACTIVE
        self._logger.info(f"Connected to {self._endpoint}")

        inbound = InboundPump(connection, self._sink)
        outbound = OutboundPump(connection, self._source)

        inbound_task = self._spawner.spawn(inbound.run(), name="inbound-pump")
        outbound_task = self._spawner.spawn(outbound.run(), name="outbound-pump")

        try:
            await asyncio.wait({outbound_task})
        finally:
            self._state = SessionState.DRAINING
            await self._drain(inbound_task, connection)
            self._state = SessionState.CLOSED

        reason = outbound_task.result()
        self._logger.info(f"Session closed ({reason})")

        return SessionOutcome(
            reason=reason,
            sent=outbound.sent,
            received=inbound.received,
            discarded=inbound.discarded,
        )

    async def _drain(self, inbound_task: asyncio.Task, connection: Connection) -> None:
        inbound_task.cancel()
        try:
            # wait for the pump to acknowledge before touching the channel
            await asyncio.gather(inbound_task, return_exceptions=True)
        finally:
            await connection.close()
