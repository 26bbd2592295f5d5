import ssl
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from typing import Annotated
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from parley.bootstrap.config.loader import get_configfile
from parley.core.errors import ConnectError
from parley.core.models.config import ConnectionConfig
from parley.core.models.endpoint import Endpoint


class EndpointSettings(BaseModel):
    url: Annotated[
        str,
        Field(
            description=(
                "Address of the duplex channel: scheme, host, port and path.\n"
                "ws:// and wss:// open a websocket, tcp:// and tcps:// open a\n"
                "length-prefixed msgpack stream. The path selects the channel\n"
                "on the remote host (websocket only)."
            ),
            default="ws://127.0.0.1:8765/"
        )
    ]

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        try:
            Endpoint.parse(v)
        except ConnectError as ex:
            raise ValueError(str(ex)) from ex
        return v


class TransportSettings(BaseModel):
    open_timeout: Annotated[
        float | None,
        Field(
            description="Maximum time (seconds) to establish the channel. null waits forever.",
            default=10.0
        )
    ]

    max_message_size: Annotated[
        int,
        Field(
            description="Maximum allowed size for a single inbound message.",
            default=1 * 1024 * 1024,
            gt=0
        )
    ]

    ping_interval: Annotated[
        float | None,
        Field(
            description="Websocket keepalive ping interval (seconds). null disables pings.",
            default=20.0
        )
    ]


class TLSSettings(BaseModel):
    cafile: Annotated[
        Path | None,
        Field(
            description=(
                "Path to the CA certificate (PEM) used to verify the server.\n"
                "When omitted, the system trust store is used."
            ),
            default=None
        )
    ]

    certfile: Annotated[
        Path | None,
        Field(
            description="Path to a client certificate (PEM), for servers requiring mutual TLS.",
            default=None
        )
    ]

    keyfile: Annotated[
        Path | None,
        Field(
            description="Path to the private key (PEM) matching certfile.",
            default=None
        )
    ]

    @field_validator("certfile", "keyfile", "cafile")
    @classmethod
    def validate_path(cls, v: Path | None) -> Path | None:
        if v is not None and not v.exists():
            raise ValueError(f"Path {v} does not exist.")
        return v


class ParleyConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PARLEY_",
        env_nested_delimiter="__",
        extra="ignore"
    )

    endpoint: Annotated[
        EndpointSettings,
        Field(
            description="Remote duplex channel the session connects to.",
            default_factory=EndpointSettings
        )
    ]

    transport: Annotated[
        TransportSettings,
        Field(
            description=(
                "Transport-level limits and timeouts.\n"
                "The session itself never times out: these only bound connection\n"
                "establishment and the size of what the peer may send."
            ),
            default_factory=TransportSettings
        )
    ]

    tls: Annotated[
        TLSSettings | None,
        Field(
            description="TLS options for wss:// and tcps:// endpoints.",
            default=None
        )
    ]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: tuple[PydanticBaseSettingsSource, ...] = (init_settings, env_settings)
        configfile = get_configfile()
        if configfile is not None:
            sources += (YamlConfigSettingsSource(settings_cls, yaml_file=configfile),)
        return sources

    def get_endpoint(self) -> Endpoint:
        return Endpoint.parse(self.endpoint.url)

    def get_client_ssl_ctx(self) -> ssl.SSLContext | None:
        if self.tls is None:
            return None

        ctx = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)
        if self.tls.cafile:
            ctx.load_verify_locations(cafile=self.tls.cafile)
        if self.tls.certfile:
            ctx.load_cert_chain(
                certfile=self.tls.certfile,
                keyfile=self.tls.keyfile
            )

        return ctx

    def get_connection_config(self) -> ConnectionConfig:
        return ConnectionConfig(
            ssl_ctx=self.get_client_ssl_ctx(),
            open_timeout=self.transport.open_timeout,
            max_message_size=self.transport.max_message_size,
            ping_interval=self.transport.ping_interval,
        )
