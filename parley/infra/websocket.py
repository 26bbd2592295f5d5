import logging

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import (
    ConnectionClosed,
    ConnectionClosedOK,
    InvalidHandshake,
    InvalidURI,
)

from parley.core.errors import ConnectError, EndOfStream, ReceiveError, SendError
from parley.core.models.config import ConnectionConfig
from parley.core.models.endpoint import Endpoint
from parley.core.models.message import Unit


class WebSocketConnection:
    """
    Connection backed by a websocket client.

    Text frames are surfaced as text units and binary frames as non-text
    units; ping/pong and close frames are handled by the websockets
    library and never reach the session. The underlying client supports
    one concurrent `recv()` and concurrent `send()` calls, and cancelling
    a pending `recv()` leaves the connection usable, which is exactly
    what the inbound pump relies on.
    """
    def __init__(self, websocket: ClientConnection, endpoint: Endpoint) -> None:
        self._websocket = websocket
        self._endpoint = endpoint
        self._closed = False
        self._logger = logging.getLogger("infra.websocket")

    @property
    def closed(self) -> bool:
        return self._closed

    async def receive(self) -> Unit:
        try:
            payload = await self._websocket.recv()
        except ConnectionClosedOK as ex:
            raise EndOfStream(f"{self._endpoint} closed the connection") from ex
        except ConnectionClosed as ex:
            raise ReceiveError(f"Connection to {self._endpoint} lost: {ex}") from ex

        return Unit(payload)

    async def send_text(self, payload: str) -> None:
        if self._closed:
            raise SendError("Connection already closed")

        try:
            await self._websocket.send(payload)
        except ConnectionClosed as ex:
            raise SendError(f"Connection to {self._endpoint} closed: {ex}") from ex

    async def close(self) -> None:
        if self._closed:
            return

        self._closed = True
        await self._websocket.close()
        self._logger.debug(f"Connection to {self._endpoint} closed")


class WebSocketConnector:
    """Opens websocket channels for `ws://` and `wss://` endpoints."""
    def __init__(self, config: ConnectionConfig | None = None) -> None:
        self._config = config or ConnectionConfig()
        self._logger = logging.getLogger("infra.websocket")

    async def open(self, endpoint: Endpoint) -> WebSocketConnection:
        config = self._config
        # websockets refuses an ssl argument for ws:// and picks the
        # default context for wss:// when given None
        ssl_ctx = config.ssl_ctx if endpoint.secure else None

        try:
            websocket = await connect(
                endpoint.url,
                ssl=ssl_ctx,
                open_timeout=config.open_timeout,
                ping_interval=config.ping_interval,
                max_size=config.max_message_size,
            )
        except (OSError, TimeoutError, InvalidURI, InvalidHandshake) as ex:
            self._logger.debug(f"Connect to {endpoint} failed", exc_info=ex)
            raise ConnectError(f"Unable to connect to {endpoint}: {ex}") from ex

        return WebSocketConnection(websocket, endpoint)
