from typing import Protocol

from parley.core.models.endpoint import Endpoint
from parley.core.models.message import Unit


class Connection(Protocol):
    """
    One open duplex channel to a remote endpoint.

    A Connection is safe for exactly one concurrent reader and one
    concurrent writer without additional locking. It is owned by whoever
    opened it; pumps only hold a reference and must never close it.
    """

    @property
    def closed(self) -> bool:
        """True once `close()` has been called or the transport is gone."""

    async def receive(self) -> Unit:
        """
        Suspend until one whole unit arrives and return it.

        Raises EndOfStream when the peer closes the channel and
        ReceiveError on a transport fault. Cancelling the awaiting task
        must unblock it without corrupting the channel.
        """

    async def send_text(self, payload: str) -> None:
        """
        Hand `payload` to the transport as one text unit.

        Raises SendError if the connection is closed or faulted.
        """

    async def close(self) -> None:
        """
        Release transport resources. Idempotent, and safe to call after
        either direction has already failed.
        """


class Connector(Protocol):
    """
    Opens Connections. Handshakes, protocol upgrades and transport
    security are entirely the connector's business.
    """

    async def open(self, endpoint: Endpoint) -> Connection:
        """
        Establish the duplex channel to `endpoint`.

        Raises ConnectError on unreachable host, refused connection or
        protocol negotiation failure.
        """
