import ssl
from dataclasses import dataclass


@dataclass
class ConnectionConfig:
    """
    Transport-level options shared by every Connector.

    Timeouts and limits live here rather than in the session core: the
    pumps never time out on their own.
    """
    ssl_ctx: ssl.SSLContext | None = None
    """
    TLS context used for secure schemes (wss, tcps). When None, the
    system default context is used for those schemes.
    """

    open_timeout: float | None = 10.0
    """
    Maximum time (in seconds) allowed to establish the channel,
    including any handshake. None waits forever.
    """

    max_message_size: int = 1 * 1024 * 1024  # 1MB
    """
    Maximum size of a single inbound unit.
    """

    ping_interval: float | None = 20.0
    """
    Keepalive ping interval for websocket channels. None disables it.
    """
