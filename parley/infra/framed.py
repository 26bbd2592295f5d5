import asyncio
import logging
import ssl
import struct

from parley.core.errors import ConnectError, EndOfStream, ReceiveError, SendError
from parley.core.models.config import ConnectionConfig
from parley.core.models.endpoint import Endpoint
from parley.core.models.message import Message, Unit
from parley.core.ports.serializer import Serializer

HEADER = struct.Struct("!I")


class FramedConnection:
    """
    Connection over a plain (or TLS) TCP stream carrying length-prefixed
    frames:

        [4-byte big-endian length][serialized Message]

    A frame holding a `text` Message becomes a text unit; any other
    message, or a payload the serializer cannot decode, becomes a
    non-text unit holding the raw frame so the session can discard it.

    EOF on a frame boundary is an orderly close (EndOfStream). EOF in the
    middle of a frame, or a frame announcing more than `max_message_size`
    bytes, is a transport fault (ReceiveError): a partial unit is never
    returned. Reads and writes use the two independent halves of the
    stream, so one receiver and one sender may run concurrently.
    """
    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        endpoint: Endpoint,
        serializer: Serializer,
        max_message_size: int,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._endpoint = endpoint
        self._serializer = serializer
        self._max_message_size = max_message_size
        self._closed = False
        self._logger = logging.getLogger("infra.framed")

    @property
    def closed(self) -> bool:
        return self._closed

    async def receive(self) -> Unit:
        try:
            header = await self._reader.readexactly(HEADER.size)
        except asyncio.IncompleteReadError as ex:
            if not ex.partial:
                raise EndOfStream(f"{self._endpoint} closed the connection") from ex
            raise ReceiveError(f"Truncated frame header from {self._endpoint}") from ex
        except (ConnectionError, OSError) as ex:
            raise ReceiveError(f"Connection to {self._endpoint} lost: {ex}") from ex

        # "!I" = uint32 big-endian (network order)
        length = HEADER.unpack(header)[0]
        if length > self._max_message_size:
            raise ReceiveError(
                f"Frame of {length} bytes exceeds limit of {self._max_message_size}"
            )

        try:
            payload = await self._reader.readexactly(length)
        except asyncio.IncompleteReadError as ex:
            raise ReceiveError(f"Truncated frame from {self._endpoint}") from ex
        except (ConnectionError, OSError) as ex:
            raise ReceiveError(f"Connection to {self._endpoint} lost: {ex}") from ex

        return self._decode_unit(payload)

    async def send_text(self, payload: str) -> None:
        if self._closed:
            raise SendError("Connection already closed")

        try:
            data = self._serializer.serialize(Message.text(payload).to_dict())
        except UnicodeEncodeError as ex:
            raise SendError(f"Payload is not valid text: {ex}") from ex

        frame = HEADER.pack(len(data)) + data

        try:
            self._writer.write(frame)
            await self._writer.drain()
        except (ConnectionError, OSError, RuntimeError) as ex:
            raise SendError(f"Connection to {self._endpoint} closed: {ex}") from ex

    async def close(self) -> None:
        if self._closed:
            return

        self._closed = True
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except (ConnectionError, OSError) as ex:
            self._logger.debug(f"Error while closing {self._endpoint}: {ex}")

    def _decode_unit(self, frame: bytes) -> Unit:
        try:
            raw = self._serializer.deserialize(frame)
            message = Message(**raw)
        except Exception as exc:
            self._logger.warning(f"Invalid frame format: {exc}")
            return Unit(bytes(frame))

        return message.to_unit(frame)


class FramedConnector:
    """Opens framed TCP channels for `tcp://` and `tcps://` endpoints."""
    def __init__(
        self,
        serializer: Serializer,
        config: ConnectionConfig | None = None,
    ) -> None:
        self._serializer = serializer
        self._config = config or ConnectionConfig()
        self._logger = logging.getLogger("infra.framed")

    async def open(self, endpoint: Endpoint) -> FramedConnection:
        config = self._config
        ssl_ctx: ssl.SSLContext | None = None
        if endpoint.secure:
            ssl_ctx = config.ssl_ctx or ssl.create_default_context(ssl.Purpose.SERVER_AUTH)

        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(
                    host=endpoint.host,
                    port=endpoint.port,
                    ssl=ssl_ctx,
                    server_hostname=endpoint.host if ssl_ctx else None,
                ),
                timeout=config.open_timeout,
            )
        except (OSError, TimeoutError) as ex:
            self._logger.debug(f"Connect to {endpoint} failed", exc_info=ex)
            raise ConnectError(f"Unable to connect to {endpoint}: {ex}") from ex

        return FramedConnection(
            reader=reader,
            writer=writer,
            endpoint=endpoint,
            serializer=self._serializer,
            max_message_size=config.max_message_size,
        )
