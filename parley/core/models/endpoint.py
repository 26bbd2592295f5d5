from dataclasses import dataclass
from urllib.parse import urlsplit

from parley.core.errors import ConnectError

DEFAULT_PORTS: dict[str, int | None] = {
    "ws": 80,
    "wss": 443,
    "tcp": None,
    "tcps": None,
}

SECURE_SCHEMES = frozenset({"wss", "tcps"})


@dataclass(frozen=True)
class Endpoint:
    """
    Address of the remote duplex channel: a host, a port and a path
    selecting the channel on that host. The scheme selects the transport.
    """
    scheme: str
    host: str
    port: int
    path: str = "/"

    @classmethod
    def parse(cls, url: str) -> "Endpoint":
        parts = urlsplit(url)
        scheme = parts.scheme.lower()
        if scheme not in DEFAULT_PORTS:
            raise ConnectError(f"Unsupported endpoint scheme: {url!r}")

        if not parts.hostname:
            raise ConnectError(f"Missing host in endpoint: {url!r}")

        try:
            port = parts.port if parts.port is not None else DEFAULT_PORTS[scheme]
        except ValueError as ex:
            raise ConnectError(f"Invalid port in endpoint: {url!r}") from ex

        if port is None:
            raise ConnectError(f"Missing port in endpoint: {url!r}")

        path = parts.path or "/"
        if parts.query:
            path = f"{path}?{parts.query}"

        return cls(scheme=scheme, host=parts.hostname, port=port, path=path)

    @property
    def secure(self) -> bool:
        return self.scheme in SECURE_SCHEMES

    @property
    def url(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.scheme}://{host}:{self.port}{self.path}"

    def __str__(self) -> str:
        return self.url
